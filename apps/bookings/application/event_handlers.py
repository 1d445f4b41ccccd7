"""
Booking Event Handlers

Run after the transaction that produced the event has committed.
"""

import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


def log_booking_event(event: DomainEvent):
    logger.info(f"{event.name}: {event.payload()}")


class BroadcastBookingEvent:
    """Forward the event to connected real-time clients"""

    def __init__(self, hub):
        self.hub = hub

    def __call__(self, event: DomainEvent):
        self.hub.publish(event)
