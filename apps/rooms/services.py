"""Room directory: existence lookups used by other domains."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from django.db.models import ProtectedError  # type: ignore

from shared.domain.exceptions import ConflictError, NotFoundError

from .models import Room

logger = logging.getLogger(__name__)


class RoomDirectory:
    """Resolves room ids for the booking scheduler."""

    def exists(self, room_id) -> bool:
        try:
            return Room.objects.filter(pk=room_id).exists()
        except (ValueError, TypeError):
            return False

    def get(self, room_id, *, lock: bool = False) -> Room:
        """
        Return the room or raise NotFoundError.

        With ``lock=True`` the row is locked with SELECT ... FOR UPDATE for
        the rest of the surrounding transaction, which serializes every
        booking write on the room across processes.
        """
        queryset = Room.objects.all()
        if lock and transaction.get_connection().in_atomic_block:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(pk=room_id)
        except (Room.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(
                "Room not found",
                code="room_not_found",
                details={"roomId": room_id},
            )


def delete_room(room: Room) -> None:
    """Delete a room that no booking references."""
    room_id = room.pk
    try:
        room.delete()
    except ProtectedError:
        raise ConflictError(
            "Room has bookings and cannot be deleted",
            code="room_has_bookings",
            details={"roomId": room_id},
        )
    logger.info(f"Room {room_id} deleted")
