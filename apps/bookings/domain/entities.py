"""
Booking Domain Entities

Core business entity for the booking domain:
- Booking: Aggregate representing a reservation of a room for a
  half-open time interval
"""

from dataclasses import dataclass
from typing import Any, Dict
from uuid import uuid4

from shared.domain.base import Aggregate, isoformat_utc, utcnow
from shared.domain.principal import Principal
from shared.domain.value_objects import TimeRange
from apps.bookings.domain.events import BookingCancelled, BookingCreated, BookingUpdated


@dataclass(eq=False, kw_only=True)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Represents a principal's reservation of a room for a time interval.

    Key invariants:
    - The period is a valid half-open range (start < end)
    - The owner (user_id) never changes after creation
    - Only the owner or an Admin may reschedule or cancel

    The no-overlap rule spans many bookings, so it is enforced by the
    command handlers under a per-room lock, not by a single aggregate.
    """

    room_id: int
    user_id: int
    period: TimeRange

    @classmethod
    def create(cls, room_id: int, user_id: int, period: TimeRange) -> 'Booking':
        now = utcnow()
        booking = cls(
            id=uuid4(),
            room_id=room_id,
            user_id=user_id,
            period=period,
            created_at=now,
            updated_at=now,
        )
        booking.add_event(BookingCreated(
            aggregate_id=booking.id,
            booking_id=booking.id,
            room_id=room_id,
            user_id=user_id,
            start_time=period.start,
            end_time=period.end,
        ))
        return booking

    def can_be_modified_by(self, principal: Principal) -> bool:
        return principal.is_admin or principal.user_id == self.user_id

    def conflicts_with(self, room_id: int, period: TimeRange) -> bool:
        """Same room and overlapping interval (never true for itself)."""
        return self.room_id == room_id and self.period.overlaps_with(period)

    def reschedule(self, room_id: int, period: TimeRange):
        """
        Move the booking to a room and interval

        Callers must have checked the target for conflicts while holding
        the room lock.
        Events: BookingUpdated
        """
        self.room_id = room_id
        self.period = period
        self.updated_at = utcnow()

        self.add_event(BookingUpdated(
            aggregate_id=self.id,
            booking_id=self.id,
            room_id=room_id,
            user_id=self.user_id,
            start_time=period.start,
            end_time=period.end,
        ))

    def cancel(self):
        """
        Cancel the booking

        Cancellation is a hard delete, the repository removes the record.
        Events: BookingCancelled
        """
        self.add_event(BookingCancelled(
            aggregate_id=self.id,
            booking_id=self.id,
            room_id=self.room_id,
            user_id=self.user_id,
        ))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': str(self.id),
            'roomId': self.room_id,
            'userId': self.user_id,
            'startTime': isoformat_utc(self.period.start),
            'endTime': isoformat_utc(self.period.end),
            'createdAt': isoformat_utc(self.created_at),
            'updatedAt': isoformat_utc(self.updated_at),
        }

    def __str__(self):
        return f"Booking {self.id} (room {self.room_id}, {self.period})"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, room_id={self.room_id}, "
            f"user_id={self.user_id}, period={self.period!r})"
        )
