"""Read-side queries for bookings."""

from __future__ import annotations

from django.core.exceptions import ValidationError  # type: ignore
from django.db.models import QuerySet  # type: ignore

from shared.domain.exceptions import NotFoundError
from shared.domain.principal import Principal

from .models import Booking


def visible_bookings(principal: Principal) -> QuerySet:
    """All bookings for an Admin, otherwise only the principal's own."""

    queryset = Booking.objects.select_related("room", "user")
    if not principal.is_admin:
        queryset = queryset.filter(user_id=principal.user_id)
    return queryset.order_by("start_time", "id")


def get_visible_booking(principal: Principal, booking_id) -> Booking:
    """
    Fetch one booking under the same visibility rule as the list.

    Another user's booking is reported as missing so its existence is not leaked.
    """

    try:
        return visible_bookings(principal).get(pk=booking_id)
    except (Booking.DoesNotExist, ValidationError, ValueError):
        raise NotFoundError(
            "Booking not found",
            code="booking_not_found",
            details={"bookingId": str(booking_id)},
        )


def room_schedule(room_id) -> QuerySet:
    """Booked intervals on a room in chronological order."""

    return Booking.objects.filter(room_id=room_id).order_by("start_time", "id")
