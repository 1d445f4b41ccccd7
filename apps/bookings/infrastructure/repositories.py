"""
Django ORM implementation of the booking repository.

Maps ``apps.bookings.models.Booking`` rows to ``Booking`` aggregates and back.
"""

from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from django.core.exceptions import ValidationError  # type: ignore
from django.db import transaction  # type: ignore

from shared.domain.value_objects import TimeRange
from apps.bookings.domain.entities import Booking
from apps.bookings.models import Booking as BookingModel

logger = logging.getLogger(__name__)


def to_entity(row: BookingModel) -> Booking:
    return Booking(
        id=row.pk,
        room_id=row.room_id,
        user_id=row.user_id,
        period=TimeRange(row.start_time, row.end_time),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class DjangoBookingRepository:
    """Booking persistence backed by the default database."""

    def get(self, booking_id: UUID, *, lock: bool = False) -> Optional[Booking]:
        queryset = BookingModel.objects.all()
        if lock and transaction.get_connection().in_atomic_block:
            queryset = queryset.select_for_update()
        try:
            return to_entity(queryset.get(pk=booking_id))
        except (BookingModel.DoesNotExist, ValidationError, ValueError):
            return None

    def find_overlapping(
        self,
        room_id: int,
        period: TimeRange,
        exclude_booking_id: Optional[UUID] = None,
    ) -> List[Booking]:
        """Bookings on the room with start < period.end and end > period.start."""
        queryset = BookingModel.objects.filter(
            room_id=room_id,
            start_time__lt=period.end,
            end_time__gt=period.start,
        )
        if exclude_booking_id is not None:
            queryset = queryset.exclude(pk=exclude_booking_id)
        return [to_entity(row) for row in queryset.order_by("start_time", "id")]

    def list_by_user(self, user_id: int) -> List[Booking]:
        queryset = BookingModel.objects.filter(user_id=user_id).order_by("start_time", "id")
        return [to_entity(row) for row in queryset]

    def add(self, booking: Booking) -> None:
        row = BookingModel.objects.create(
            id=booking.id,
            room_id=booking.room_id,
            user_id=booking.user_id,
            start_time=booking.period.start,
            end_time=booking.period.end,
        )
        booking.created_at = row.created_at
        booking.updated_at = row.updated_at

    def save(self, booking: Booking) -> None:
        # QuerySet.update() skips auto_now, so updated_at comes from the aggregate.
        BookingModel.objects.filter(pk=booking.id).update(
            room_id=booking.room_id,
            start_time=booking.period.start,
            end_time=booking.period.end,
            updated_at=booking.updated_at,
        )

    def delete(self, booking: Booking) -> None:
        BookingModel.objects.filter(pk=booking.id).delete()
