"""User management workflows."""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import ProtectedError  # type: ignore

from apps.bookings.application.command_handlers import PurgeUserBookingsCommand
from apps.bookings.bootstrap import get_services
from shared.domain.exceptions import BadRequestError, ConflictError, NotFoundError

logger = logging.getLogger(__name__)

User = get_user_model()


def delete_user(user, *, acting_user=None) -> int:
    """
    Delete a user together with every booking they own.

    The bookings go first through the scheduler so each removal emits
    ``bookingCancelled``; both steps share one transaction. Returns the
    number of bookings removed.
    """

    if acting_user is not None and acting_user.pk == user.pk:
        raise BadRequestError("You cannot delete your own account", code="bad_request")

    user_id = user.pk
    with transaction.atomic():
        # New bookings for this user wait on the row lock (their foreign key
        # check) until the delete commits.
        try:
            user = User.objects.select_for_update().get(pk=user_id)
        except User.DoesNotExist:
            raise NotFoundError("User not found", code="user_not_found", details={"userId": user_id})

        removed = get_services().bus.handle_command(PurgeUserBookingsCommand(user_id=user_id))
        try:
            user.delete()
        except ProtectedError:
            logger.warning(f"User {user_id} gained bookings while being deleted")
            raise ConflictError(
                "User has bookings that were created during deletion, try again",
                code="user_has_bookings",
                details={"userId": user_id},
            )

    logger.info(f"User {user_id} deleted with {len(removed)} bookings")
    return len(removed)
