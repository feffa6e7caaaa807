"""
Per-car locks for the booking write path.

Submissions for different cars never contend; submissions for the same car
queue on that car's lock for at most ``timeout`` seconds and then fail with
BookingBusy so the caller retries the whole request.
"""

from contextlib import contextmanager
from threading import Lock
from typing import Dict
import logging

from apps.bookings.domain.errors import BookingBusy

logger = logging.getLogger(__name__)


class ResourceLockRegistry:
    """Lazily creates one Lock per resource id."""

    def __init__(self, timeout: float = 5.0):
        self.timeout = timeout
        self._locks: Dict[str, Lock] = {}
        self._registry_lock = Lock()

    def _lock_for(self, resource_id: str) -> Lock:
        with self._registry_lock:
            lock = self._locks.get(resource_id)
            if lock is None:
                lock = self._locks[resource_id] = Lock()
            return lock

    @contextmanager
    def hold(self, resource_id: str, timeout: float = None):
        lock = self._lock_for(str(resource_id))
        wait = self.timeout if timeout is None else timeout
        if not lock.acquire(timeout=wait):
            logger.warning("Timed out after %.1fs waiting for car %s calendar lock", wait, resource_id)
            raise BookingBusy()
        try:
            yield
        finally:
            lock.release()
