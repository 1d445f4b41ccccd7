"""
Unit of Work

A unit of work is one database transaction plus the domain events its
aggregates produced. Events leave the unit only when the transaction
commits, so subscribers never hear about writes that were rolled back.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from django.db import transaction

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Commits when the block exits cleanly, rolls back otherwise"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        raise NotImplementedError

    @abstractmethod
    def rollback(self):
        raise NotImplementedError

    @abstractmethod
    def collect_events(self, aggregate):
        """Take over the aggregate's pending events"""
        raise NotImplementedError


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Unit of work over ``transaction.atomic()``

    Nested inside an outer atomic block it becomes a savepoint, and its
    events wait for the outermost commit.

    Usage:
        with DjangoUnitOfWork(bus) as uow:
            rooms.get(room_id, lock=True)
            booking = Booking.create(...)
            bookings.add(booking)
            uow.collect_events(booking)
        # bookingCreated is published once the transaction has committed
    """

    def __init__(self, bus: MessageBus):
        self._bus = bus
        self._events: List[DomainEvent] = []
        self._atomic = None

    def __enter__(self):
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            super().__exit__(exc_type, exc_val, exc_tb)
        finally:
            self._atomic.__exit__(exc_type, exc_val, exc_tb)

    def commit(self):
        events, self._events = self._events, []
        if events:
            logger.debug(f"Deferring {len(events)} events until commit")
            transaction.on_commit(lambda: self._publish(events))

    def rollback(self):
        if self._events:
            logger.info(f"Rolled back, discarding {len(self._events)} events")
        self._events = []

    def collect_events(self, aggregate):
        pending = aggregate.events
        aggregate.clear_events()
        self._events.extend(pending)

    def _publish(self, events: List[DomainEvent]):
        # The data is already committed; a failed broadcast must not surface.
        try:
            self._bus.publish_events(events)
        except Exception as e:
            logger.error(f"Publishing {len(events)} events failed: {e}", exc_info=True)
