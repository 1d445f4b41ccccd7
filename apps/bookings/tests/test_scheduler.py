"""Scheduler tests against in-memory collaborators, including concurrent writers."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone

import pytest

from shared.domain.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
)
from shared.domain.principal import Principal, Role
from shared.domain.value_objects import TimeRange
from apps.bookings.application.command_handlers import (
    CancelBookingCommand,
    CreateBookingCommand,
    PurgeUserBookingsCommand,
    UpdateBookingCommand,
)
from apps.bookings.application.locks import RoomLockRegistry
from apps.bookings.bootstrap import bootstrap
from apps.bookings.domain.events import BookingCancelled, BookingCreated, BookingUpdated
from apps.bookings.realtime import EventHub

from .fakes import InMemoryBookingRepository, InMemoryRoomDirectory, InMemoryUnitOfWork

BASE = datetime(2030, 1, 1, 9, tzinfo=timezone.utc)
ALICE = Principal(user_id=1)
BOB = Principal(user_id=2)
ADMIN = Principal(user_id=3, role=Role.ADMIN)


def at(hours: float) -> datetime:
    return BASE + timedelta(hours=hours)


class Scheduler:
    def __init__(self, scan_delay: float = 0.0, lock_timeout: float = 5.0):
        self.bookings = InMemoryBookingRepository(scan_delay=scan_delay)
        self.rooms = InMemoryRoomDirectory(1, 2)
        self.published: list = []
        self.services = bootstrap(
            bookings=self.bookings,
            rooms=self.rooms,
            locks=RoomLockRegistry(timeout=lock_timeout),
            hub=EventHub(),
            uow_factory=lambda: InMemoryUnitOfWork(self.published),
        )

    def create(self, room_id, start, end, principal=ALICE):
        return self.services.bus.handle_command(
            CreateBookingCommand(room_id=room_id, start_time=at(start), end_time=at(end), principal=principal)
        )

    def update(self, booking, principal=ALICE, room_id=None, start=None, end=None):
        return self.services.bus.handle_command(UpdateBookingCommand(
            booking_id=booking.id,
            principal=principal,
            room_id=room_id,
            start_time=at(start) if start is not None else None,
            end_time=at(end) if end is not None else None,
        ))

    def cancel(self, booking, principal=ALICE):
        return self.services.bus.handle_command(CancelBookingCommand(booking_id=booking.id, principal=principal))


def assert_no_overlaps(bookings):
    for i, first in enumerate(bookings):
        for second in bookings[i + 1:]:
            assert not first.period.overlaps_with(second.period), (first, second)


@pytest.fixture
def scheduler() -> Scheduler:
    return Scheduler()


def test_create_emits_booking_created(scheduler):
    booking = scheduler.create(1, 0, 1)

    assert booking.user_id == ALICE.user_id
    assert [type(e) for e in scheduler.published] == [BookingCreated]
    assert scheduler.published[0].payload()["bookingId"] == str(booking.id)


def test_adjacent_bookings_are_allowed(scheduler):
    scheduler.create(1, 0, 1)
    scheduler.create(1, 1, 2)
    scheduler.create(1, -1, 0)

    assert len(scheduler.bookings.bookings_in(1)) == 3
    assert_no_overlaps(scheduler.bookings.bookings_in(1))


@pytest.mark.parametrize("start,end", [(0.5, 1.5), (-1, 3), (0.25, 0.75), (0, 2)])
def test_overlaps_are_rejected_without_mutation(scheduler, start, end):
    existing = scheduler.create(1, 0, 2)
    scheduler.published.clear()

    with pytest.raises(ConflictError) as excinfo:
        scheduler.create(1, start, end, principal=BOB)

    assert excinfo.value.extra["conflictingBooking"]["id"] == str(existing.id)
    assert len(scheduler.bookings.rows) == 1
    assert scheduler.published == []


def test_invalid_interval_is_rejected_before_room_lookup(scheduler):
    with pytest.raises(BadRequestError) as excinfo:
        scheduler.create(999, 2, 1)

    assert excinfo.value.code == "invalid_interval"


def test_unknown_room(scheduler):
    with pytest.raises(NotFoundError) as excinfo:
        scheduler.create(999, 0, 1)

    assert excinfo.value.code == "room_not_found"


def test_update_excludes_itself(scheduler):
    booking = scheduler.create(1, 0, 2)

    updated = scheduler.update(booking, start=1, end=3)

    assert updated.period == TimeRange(at(1), at(3))
    assert isinstance(scheduler.published[-1], BookingUpdated)


def test_update_keeps_omitted_fields(scheduler):
    booking = scheduler.create(1, 0, 2)

    updated = scheduler.update(booking, room_id=2)

    assert updated.room_id == 2
    assert updated.period == booking.period


def test_update_error_order(scheduler):
    booking = scheduler.create(1, 0, 1)
    scheduler.create(1, 1, 2)

    # Forbidden wins over an invalid interval and an unknown room.
    with pytest.raises(ForbiddenError):
        scheduler.update(booking, principal=BOB, room_id=999, start=5, end=4)
    # Invalid interval wins over an unknown room.
    with pytest.raises(BadRequestError):
        scheduler.update(booking, room_id=999, start=5, end=4)
    with pytest.raises(NotFoundError):
        scheduler.update(booking, room_id=999)
    with pytest.raises(ConflictError):
        scheduler.update(booking, end=1.5)


def test_admin_may_update_and_cancel_any_booking(scheduler):
    booking = scheduler.create(1, 0, 1)

    scheduler.update(booking, principal=ADMIN, end=2)
    cancelled = scheduler.cancel(booking, principal=ADMIN)

    assert cancelled.user_id == ALICE.user_id
    assert scheduler.bookings.rows == {}


def test_cancel_checks_ownership(scheduler):
    booking = scheduler.create(1, 0, 1)

    with pytest.raises(ForbiddenError):
        scheduler.cancel(booking, principal=BOB)

    assert booking.id in scheduler.bookings.rows


def test_purge_removes_only_the_users_bookings(scheduler):
    scheduler.create(1, 0, 1)
    scheduler.create(2, 0, 1)
    kept = scheduler.create(1, 1, 2, principal=BOB)
    scheduler.published.clear()

    removed = scheduler.services.bus.handle_command(PurgeUserBookingsCommand(user_id=ALICE.user_id))

    assert len(removed) == 2
    assert list(scheduler.bookings.rows) == [kept.id]
    assert [type(e) for e in scheduler.published] == [BookingCancelled, BookingCancelled]


def test_concurrent_overlapping_creates_admit_exactly_one():
    scheduler = Scheduler(scan_delay=0.01)
    workers = 10
    barrier = threading.Barrier(workers)
    outcomes: list = []

    def attempt(i):
        barrier.wait()
        try:
            scheduler.create(1, 0, 1 + i / 10, principal=Principal(user_id=100 + i))
            outcomes.append("ok")
        except ConflictError:
            outcomes.append("conflict")

    threads = [threading.Thread(target=attempt, args=(i,)) for i in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(10)

    assert outcomes.count("ok") == 1
    assert outcomes.count("conflict") == workers - 1
    assert len(scheduler.bookings.bookings_in(1)) == 1


def test_concurrent_creates_on_different_rooms_do_not_block_each_other():
    scheduler = Scheduler(scan_delay=0.01)
    outcomes: list = []

    def attempt(room_id):
        scheduler.create(room_id, 0, 1)
        outcomes.append(room_id)

    threads = [threading.Thread(target=attempt, args=(room_id,)) for room_id in (1, 2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(10)

    assert sorted(outcomes) == [1, 2]


def test_crossing_room_moves_do_not_deadlock():
    scheduler = Scheduler(scan_delay=0.01, lock_timeout=2)
    first = scheduler.create(1, 0, 1)
    second = scheduler.create(2, 0, 1)
    errors: list = []

    def move(booking, room_id, start):
        try:
            scheduler.update(booking, room_id=room_id, start=start, end=start + 1)
        except Exception as e:
            errors.append(e)

    threads = [
        threading.Thread(target=move, args=(first, 2, 5)),
        threading.Thread(target=move, args=(second, 1, 5)),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(10)

    assert errors == []
    assert [b.id for b in scheduler.bookings.bookings_in(1)] == [second.id]
    assert [b.id for b in scheduler.bookings.bookings_in(2)] == [first.id]


def test_lock_timeout_is_an_internal_error():
    locks = RoomLockRegistry(timeout=0.05)

    with locks.hold(1):
        with pytest.raises(InternalError) as excinfo:
            with locks.hold(2, 1):
                pass

    assert excinfo.value.code == "lock_timeout"
    # Room 2 was released when room 1 timed out.
    with locks.hold(2):
        pass
