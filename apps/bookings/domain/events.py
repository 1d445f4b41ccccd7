"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits and broadcast
to connected clients as flat records of identifiers and the interval.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict
from uuid import UUID

from shared.domain.base import DomainEvent, isoformat_utc


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Event: A new booking was created

    Triggers:
    - Broadcast to connected clients so calendars refresh
    """
    booking_id: UUID
    room_id: int
    user_id: int
    start_time: datetime
    end_time: datetime

    name = 'bookingCreated'

    def payload(self) -> Dict[str, Any]:
        return {
            'bookingId': str(self.booking_id),
            'roomId': self.room_id,
            'userId': self.user_id,
            'startTime': isoformat_utc(self.start_time),
            'endTime': isoformat_utc(self.end_time),
        }


@dataclass(kw_only=True)
class BookingUpdated(BookingCreated):
    """
    Event: A booking moved to another room and/or interval

    Carries the booking state after the update.
    """

    name = 'bookingUpdated'


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """
    Event: A booking was cancelled (hard-deleted)

    Triggers:
    - Broadcast so clients can offer the freed slot
    """
    booking_id: UUID
    room_id: int
    user_id: int

    name = 'bookingCancelled'

    def payload(self) -> Dict[str, Any]:
        return {
            'bookingId': str(self.booking_id),
            'roomId': self.room_id,
            'userId': self.user_id,
        }
