"""
Ports used by the booking command handlers.

The handlers only talk to these interfaces, so the scheduler can run
against the Django ORM in production and in-memory fakes in tests.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Protocol
from uuid import UUID

from shared.application.uow import AbstractUnitOfWork
from shared.domain.value_objects import TimeRange
from apps.bookings.domain.entities import Booking


class BookingRepository(Protocol):
    """Persistence for Booking aggregates."""

    def get(self, booking_id: UUID, *, lock: bool = False) -> Optional[Booking]: ...
    def find_overlapping(
        self,
        room_id: int,
        period: TimeRange,
        exclude_booking_id: Optional[UUID] = None,
    ) -> List[Booking]: ...
    def list_by_user(self, user_id: int) -> List[Booking]: ...
    def add(self, booking: Booking) -> None: ...
    def save(self, booking: Booking) -> None: ...
    def delete(self, booking: Booking) -> None: ...


class RoomLookup(Protocol):
    """Room existence checks, see ``apps.rooms.services.RoomDirectory``."""

    def exists(self, room_id: Any) -> bool: ...
    def get(self, room_id: Any, *, lock: bool = False) -> Any: ...


UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]
