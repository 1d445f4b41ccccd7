"""
Composition root for the booking scheduler.

Builds the message bus and wires command and event handlers to their
collaborators. ``BookingsConfig.ready()`` calls ``bootstrap()`` once per
process; tests may call it with in-memory collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from django.apps import apps as django_apps  # type: ignore
from django.conf import settings  # type: ignore

from shared.application.message_bus import MessageBus
from shared.application.uow import DjangoUnitOfWork

from .application.command_handlers import (
    CancelBookingCommand,
    CancelBookingHandler,
    CreateBookingCommand,
    CreateBookingHandler,
    PurgeUserBookingsCommand,
    PurgeUserBookingsHandler,
    UpdateBookingCommand,
    UpdateBookingHandler,
)
from .application.event_handlers import BroadcastBookingEvent, log_booking_event
from .application.locks import RoomLockRegistry
from .application.ports import BookingRepository, RoomLookup, UnitOfWorkFactory
from .domain.events import BookingCancelled, BookingCreated, BookingUpdated
from .realtime import EventHub


@dataclass
class BookingServices:
    bus: MessageBus
    hub: EventHub
    locks: RoomLockRegistry


def bootstrap(
    *,
    bookings: Optional[BookingRepository] = None,
    rooms: Optional[RoomLookup] = None,
    locks: Optional[RoomLockRegistry] = None,
    hub: Optional[EventHub] = None,
    uow_factory: Optional[UnitOfWorkFactory] = None,
) -> BookingServices:
    bus = MessageBus()

    if bookings is None:
        from .infrastructure.repositories import DjangoBookingRepository

        bookings = DjangoBookingRepository()
    if rooms is None:
        from apps.rooms.services import RoomDirectory

        rooms = RoomDirectory()
    if locks is None:
        locks = RoomLockRegistry(timeout=getattr(settings, "BOOKING_LOCK_TIMEOUT", 10))
    if hub is None:
        hub = EventHub(
            maxsize=getattr(settings, "BOOKING_EVENTS_QUEUE_SIZE", 1000),
            subscriber_maxsize=getattr(settings, "BOOKING_EVENTS_SUBSCRIBER_QUEUE_SIZE", 100),
        )
    if uow_factory is None:
        def uow_factory():
            return DjangoUnitOfWork(bus)

    bus.register_command_handler(
        CreateBookingCommand, CreateBookingHandler(bookings, rooms, locks, uow_factory).handle
    )
    bus.register_command_handler(
        UpdateBookingCommand, UpdateBookingHandler(bookings, rooms, locks, uow_factory).handle
    )
    bus.register_command_handler(
        CancelBookingCommand, CancelBookingHandler(bookings, uow_factory).handle
    )
    bus.register_command_handler(
        PurgeUserBookingsCommand, PurgeUserBookingsHandler(bookings, uow_factory).handle
    )

    broadcast = BroadcastBookingEvent(hub)
    for event_type in (BookingCreated, BookingUpdated, BookingCancelled):
        bus.register_event_handler(event_type, log_booking_event)
        bus.register_event_handler(event_type, broadcast)

    return BookingServices(bus=bus, hub=hub, locks=locks)


def get_services() -> BookingServices:
    """The process-wide services built when the bookings app became ready."""
    return django_apps.get_app_config("bookings").services
