"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- CreateBookingCommand: Reserve a room for a time interval
- UpdateBookingCommand: Move a booking to another room and/or interval
- CancelBookingCommand: Delete a booking
- PurgeUserBookingsCommand: Delete every booking of a user being removed
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from uuid import UUID
import logging

from shared.domain.exceptions import ConflictError, ForbiddenError, InternalError, NotFoundError
from shared.domain.principal import Principal
from shared.domain.value_objects import TimeRange
from apps.bookings.application.locks import RoomLockRegistry
from apps.bookings.application.ports import BookingRepository, RoomLookup, UnitOfWorkFactory
from apps.bookings.domain.entities import Booking

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """Command to reserve a room for [start_time, end_time)"""
    room_id: int
    start_time: datetime
    end_time: datetime
    principal: Principal


@dataclass
class UpdateBookingCommand:
    """
    Command to change a booking

    Fields left as None keep the booking's current value.
    """
    booking_id: UUID
    principal: Principal
    room_id: Optional[int] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


@dataclass
class CancelBookingCommand:
    """Command to cancel (hard delete) a booking"""
    booking_id: UUID
    principal: Principal


@dataclass
class PurgeUserBookingsCommand:
    """Command to remove all bookings owned by a user"""
    user_id: int


# ===== Shared rules =====

def booking_not_found(booking_id) -> NotFoundError:
    return NotFoundError(
        "Booking not found",
        code="booking_not_found",
        details={"bookingId": str(booking_id)},
    )


def room_not_found(room_id) -> NotFoundError:
    return NotFoundError(
        "Room not found",
        code="room_not_found",
        details={"roomId": room_id},
    )


def ensure_room_is_free(
    bookings: BookingRepository,
    room_id: int,
    period: TimeRange,
    exclude_booking_id: Optional[UUID] = None,
):
    """
    Raise ConflictError if any other booking on the room overlaps the period

    Must run while the room lock is held, together with the write that
    follows it.
    """
    overlapping = bookings.find_overlapping(room_id, period, exclude_booking_id=exclude_booking_id)
    if overlapping:
        existing = overlapping[0]
        logger.info(
            f"Booking conflict on room {room_id}: {period} overlaps booking {existing.id}"
        )
        raise ConflictError(
            "Room is not available for the selected time period",
            code="booking_conflict",
            extra={"conflictingBooking": existing.to_dict()},
        )


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Strategy:
    1. Validate the interval and that the room exists (fail fast, no locks)
    2. Take the process-local room lock
    3. Open the unit of work and lock the room row (SELECT FOR UPDATE)
    4. Scan for overlapping bookings on the room
    5. Create and persist the Booking aggregate
    6. Commit, then publish BookingCreated
    """

    def __init__(
        self,
        bookings: BookingRepository,
        rooms: RoomLookup,
        locks: RoomLockRegistry,
        uow_factory: UnitOfWorkFactory,
    ):
        self.bookings = bookings
        self.rooms = rooms
        self.locks = locks
        self.uow_factory = uow_factory

    def handle(self, command: CreateBookingCommand) -> Booking:
        period = TimeRange(command.start_time, command.end_time)

        if not self.rooms.exists(command.room_id):
            raise room_not_found(command.room_id)

        with self.locks.hold(command.room_id):
            with self.uow_factory() as uow:
                self.rooms.get(command.room_id, lock=True)
                ensure_room_is_free(self.bookings, command.room_id, period)

                booking = Booking.create(
                    room_id=command.room_id,
                    user_id=command.principal.user_id,
                    period=period,
                )
                self.bookings.add(booking)
                uow.collect_events(booking)

        logger.info(
            f"Booking {booking.id} created for room {booking.room_id} "
            f"by user {booking.user_id}: {booking.period}"
        )
        return booking


class UpdateBookingHandler:
    """
    Handler for UpdateBooking command

    The rooms to lock depend on the booking's current room, which is only
    known after reading it. The booking is therefore read once to pick the
    locks, then re-read under them and every rule is checked again on the
    fresh copy. If a concurrent update moved the booking to another room in
    between and the command does not name a room, the attempt is retried.
    """

    max_attempts = 3

    def __init__(
        self,
        bookings: BookingRepository,
        rooms: RoomLookup,
        locks: RoomLockRegistry,
        uow_factory: UnitOfWorkFactory,
    ):
        self.bookings = bookings
        self.rooms = rooms
        self.locks = locks
        self.uow_factory = uow_factory

    def handle(self, command: UpdateBookingCommand) -> Booking:
        for _attempt in range(self.max_attempts):
            snapshot = self._load_and_check(command, self.bookings.get(command.booking_id))
            target_room_id = self._target_room(command, snapshot)

            if target_room_id != snapshot.room_id and not self.rooms.exists(target_room_id):
                raise room_not_found(target_room_id)

            with self.locks.hold(snapshot.room_id, target_room_id):
                with self.uow_factory() as uow:
                    booking = self._load_and_check(
                        command, self.bookings.get(command.booking_id, lock=True)
                    )
                    if booking.room_id != snapshot.room_id and command.room_id is None:
                        logger.info(f"Booking {booking.id} moved rooms during update, retrying")
                        continue

                    period = self._effective_period(command, booking)
                    self.rooms.get(target_room_id, lock=True)
                    ensure_room_is_free(
                        self.bookings, target_room_id, period, exclude_booking_id=booking.id
                    )

                    booking.reschedule(target_room_id, period)
                    self.bookings.save(booking)
                    uow.collect_events(booking)

            logger.info(f"Booking {booking.id} updated: room {booking.room_id}, {booking.period}")
            return booking

        raise InternalError(
            "Booking changed concurrently, please retry",
            details={"bookingId": str(command.booking_id)},
        )

    def _load_and_check(self, command: UpdateBookingCommand, booking: Optional[Booking]) -> Booking:
        """NotFound, then Forbidden, then the effective interval."""
        if booking is None:
            raise booking_not_found(command.booking_id)
        if not booking.can_be_modified_by(command.principal):
            logger.info(
                f"User {command.principal.user_id} denied update of booking {booking.id}"
            )
            raise ForbiddenError(
                "You can only update your own bookings",
                code="not_booking_owner",
            )
        self._effective_period(command, booking)
        return booking

    @staticmethod
    def _target_room(command: UpdateBookingCommand, booking: Booking) -> int:
        return command.room_id if command.room_id is not None else booking.room_id

    @staticmethod
    def _effective_period(command: UpdateBookingCommand, booking: Booking) -> TimeRange:
        start = command.start_time if command.start_time is not None else booking.period.start
        end = command.end_time if command.end_time is not None else booking.period.end
        return TimeRange(start, end)


class CancelBookingHandler:
    """
    Handler for CancelBooking command

    Removing a booking cannot create an overlap, so only the booking row
    is locked.
    """

    def __init__(self, bookings: BookingRepository, uow_factory: UnitOfWorkFactory):
        self.bookings = bookings
        self.uow_factory = uow_factory

    def handle(self, command: CancelBookingCommand) -> Booking:
        with self.uow_factory() as uow:
            booking = self.bookings.get(command.booking_id, lock=True)
            if booking is None:
                raise booking_not_found(command.booking_id)
            if not booking.can_be_modified_by(command.principal):
                logger.info(
                    f"User {command.principal.user_id} denied cancel of booking {booking.id}"
                )
                raise ForbiddenError(
                    "You can only cancel your own bookings",
                    code="not_booking_owner",
                )

            booking.cancel()
            self.bookings.delete(booking)
            uow.collect_events(booking)

        logger.info(f"Booking {booking.id} cancelled by user {command.principal.user_id}")
        return booking


class PurgeUserBookingsHandler:
    """
    Handler for PurgeUserBookings command

    Runs inside the caller's transaction when one is open, so the user
    and their bookings disappear together.
    """

    def __init__(self, bookings: BookingRepository, uow_factory: UnitOfWorkFactory):
        self.bookings = bookings
        self.uow_factory = uow_factory

    def handle(self, command: PurgeUserBookingsCommand) -> List[Booking]:
        with self.uow_factory() as uow:
            removed = self.bookings.list_by_user(command.user_id)
            for booking in removed:
                booking.cancel()
                self.bookings.delete(booking)
                uow.collect_events(booking)

        logger.info(f"Removed {len(removed)} bookings of user {command.user_id}")
        return removed
