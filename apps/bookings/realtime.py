"""
Real-time fan-out of booking events.

Committed booking events are pushed onto a bounded hub queue without
blocking the request thread. A daemon publisher thread drains it and
copies every message into each subscriber's own bounded queue. Whichever
queue is full drops the message with a warning, so a slow client never
stalls bookings or other clients. Delivery is at-most-once and there is
no replay for late subscribers.
"""

from __future__ import annotations

import json
import logging
import queue
import threading
from typing import Any, Dict, Optional, Set

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

_STOP = object()


def format_sse(message: Dict[str, Any]) -> str:
    """Render one message in the text/event-stream wire format."""
    lines = []
    if message.get("id"):
        lines.append(f"id: {message['id']}")
    lines.append(f"event: {message['event']}")
    lines.append(f"data: {json.dumps(message['data'], separators=(',', ':'))}")
    return "\n".join(lines) + "\n\n"


class Subscription:
    """One connected client's mailbox."""

    def __init__(self, hub: "EventHub", maxsize: int):
        self._hub = hub
        self._queue: "queue.Queue[Dict[str, Any]]" = queue.Queue(maxsize=maxsize)
        self.dropped = 0

    def offer(self, message: Dict[str, Any]) -> bool:
        try:
            self._queue.put_nowait(message)
        except queue.Full:
            self.dropped += 1
            return False
        return True

    def get(self, timeout: Optional[float] = None) -> Optional[Dict[str, Any]]:
        """Next message, or None if nothing arrived within ``timeout`` seconds."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self) -> None:
        self._hub.unsubscribe(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class EventHub:
    """Bounded, non-blocking broadcaster of booking events."""

    def __init__(self, maxsize: int = 1000, subscriber_maxsize: int = 100):
        self._queue: "queue.Queue[Any]" = queue.Queue(maxsize=maxsize)
        self._subscriber_maxsize = subscriber_maxsize
        self._subscribers: Set[Subscription] = set()
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._halt = threading.Event()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            self._halt.clear()
            self._thread = threading.Thread(
                target=self._run,
                name="booking-event-hub",
                daemon=True,
            )
            self._thread.start()
        logger.debug("Booking event hub started")

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        thread = self._thread
        if thread is None:
            return
        try:
            self._queue.put(_STOP, timeout=timeout)
        except queue.Full:
            # No room for the sentinel; the thread exits at its next message.
            logger.warning("Event hub queue full on stop, undelivered events are dropped")
            self._halt.set()
        thread.join(timeout)
        self._thread = None

    def subscribe(self) -> Subscription:
        subscription = Subscription(self, self._subscriber_maxsize)
        with self._lock:
            self._subscribers.add(subscription)
            count = len(self._subscribers)
        logger.info(f"Event stream subscriber connected ({count} active)")
        self.start()
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            self._subscribers.discard(subscription)
            count = len(self._subscribers)
        logger.info(f"Event stream subscriber disconnected ({count} active)")

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, event: DomainEvent) -> bool:
        """
        Queue an event for broadcast without blocking

        Returns False when the hub queue is full and the event was dropped.
        """
        message = {"id": str(event.event_id), "event": event.name, "data": event.payload()}
        try:
            self._queue.put_nowait(message)
        except queue.Full:
            logger.warning(f"Event hub queue full, dropping {event.name} {event.event_id}")
            return False
        self.start()
        return True

    def _run(self) -> None:
        while True:
            message = self._queue.get()
            if message is _STOP or self._halt.is_set():
                break
            self._dispatch(message)

    def _dispatch(self, message: Dict[str, Any]) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for subscription in subscribers:
            try:
                if not subscription.offer(message):
                    logger.warning(
                        f"Subscriber queue full, dropping {message['event']} {message['id']}"
                    )
            except Exception as e:
                logger.error(f"Error delivering {message['event']} to subscriber: {e}", exc_info=True)
