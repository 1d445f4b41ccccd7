"""
Per-room locks

Serializes the (conflict scan, write) pair for a room inside one
server process. The database row lock taken by
``RoomDirectory.get(lock=True)`` covers other processes.
"""

from contextlib import contextmanager
from typing import Dict, Hashable, Iterator, List
import logging
import threading

from shared.domain.exceptions import InternalError

logger = logging.getLogger(__name__)


class RoomLockRegistry:
    """
    Lazily created mutex per room id

    Locks for several rooms are always taken in sorted order, so two
    room-changing updates moving in opposite directions cannot deadlock.
    """

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, room_id: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(room_id)
            if lock is None:
                lock = self._locks[room_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, *room_ids: Hashable) -> Iterator[None]:
        """
        Hold the locks of all given rooms for the duration of the block

        Raises InternalError(code='lock_timeout') if any lock cannot be
        acquired within ``timeout`` seconds; locks already taken are released.
        """
        acquired: List[threading.Lock] = []
        try:
            for room_id in sorted(set(room_ids)):
                lock = self._lock_for(room_id)
                if not lock.acquire(timeout=self.timeout):
                    logger.error(f"Timed out after {self.timeout}s waiting for lock on room {room_id}")
                    raise InternalError(
                        "Timed out waiting for the room lock",
                        code="lock_timeout",
                        details={"roomId": room_id},
                    )
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
