"""Per-provider mutual exclusion for the assignment guard's check-then-write."""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from shootbook.config import settings
from shootbook.errors import RepositoryTimeout

logger = logging.getLogger(__name__)


class ProviderLockRegistry:
    """
    One lock per provider id, created on first use.

    Confirmations for different providers never wait on each other;
    confirmations for the same provider run one at a time. A provider's
    lock is dropped once no caller holds or waits on it, so the registry
    only keeps locks for providers with a confirmation in flight.
    """

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._users: dict[str, int] = {}
        self._registry_lock = threading.Lock()

    def _checkout(self, provider_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(provider_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[provider_id] = lock
            self._users[provider_id] = self._users.get(provider_id, 0) + 1
            return lock

    def _checkin(self, provider_id: str) -> None:
        with self._registry_lock:
            remaining = self._users[provider_id] - 1
            if remaining:
                self._users[provider_id] = remaining
            else:
                del self._users[provider_id]
                del self._locks[provider_id]

    @contextmanager
    def hold(self, provider_id: str, timeout: Optional[float] = None) -> Iterator[None]:
        """Hold the provider's lock, or raise RepositoryTimeout after ``timeout`` seconds."""
        wait = settings.repository.lock_timeout_sec if timeout is None else timeout
        lock = self._checkout(provider_id)
        try:
            started = time.monotonic()
            if not lock.acquire(timeout=wait):
                logger.warning("provider_lock_timeout provider=%s wait=%.2fs", provider_id, wait)
                raise RepositoryTimeout(
                    f"Timed out after {wait}s waiting for the scheduling lock of provider {provider_id}.",
                    details={"provider_id": provider_id},
                )
            logger.debug(
                "provider_lock_acquired provider=%s waited=%.3fs",
                provider_id, time.monotonic() - started,
            )
            try:
                yield
            finally:
                lock.release()
        finally:
            self._checkin(provider_id)

    def is_locked(self, provider_id: str) -> bool:
        with self._registry_lock:
            lock = self._locks.get(provider_id)
        return lock is not None and lock.locked()

    def active_providers(self) -> int:
        """Number of providers with a lock currently held or awaited."""
        with self._registry_lock:
            return len(self._locks)
