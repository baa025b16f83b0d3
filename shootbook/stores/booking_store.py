"""
In-memory booking store.

In production this would be a database table with a conditional
``UPDATE ... WHERE status = :expected AND version = :version``. Here a
single lock plays the database: every write is all-or-nothing and the
``expected_status`` / ``expected_version`` preconditions are checked and
applied under that lock.

Every call takes a timeout. ``latency_sec``, ``unavailable`` and
``timeouts_after_write`` let tests simulate a slow, down, or flaky store.
"""

import logging
import threading
import time
import uuid
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from shootbook.config import settings
from shootbook.errors import (
    BookingNotFound,
    RepositoryTimeout,
    RepositoryUnavailable,
    StaleBookingError,
)
from shootbook.schemas.booking_schema import Booking, BookingStatus, Cancellation, TeamAssignment

logger = logging.getLogger(__name__)


def new_booking_id() -> str:
    return f"BK-{uuid.uuid4().hex[:8].upper()}"


class InMemoryBookingStore:
    """Booking records keyed by id, with atomic conditional updates."""

    def __init__(self, latency_sec: float = 0.0) -> None:
        self._bookings: dict[str, Booking] = {}
        self._lock = threading.Lock()
        self.latency_sec = latency_sec
        self.unavailable = False
        self.timeouts_after_write = 0

    def _resolve_timeout(self, timeout: Optional[float]) -> float:
        return settings.repository.timeout_sec if timeout is None else timeout

    def _enter(self, op: str, timeout: Optional[float]) -> None:
        """Simulate I/O latency, then take the store lock within the timeout."""
        budget = self._resolve_timeout(timeout)
        if self.unavailable:
            raise RepositoryUnavailable(f"Booking store unavailable during {op}.")
        if self.latency_sec:
            if self.latency_sec >= budget:
                time.sleep(budget)
                raise RepositoryTimeout(f"Booking store {op} timed out after {budget}s.")
            time.sleep(self.latency_sec)
            budget -= self.latency_sec
        if not self._lock.acquire(timeout=max(budget, 0.0)):
            raise RepositoryTimeout(f"Booking store {op} timed out after {budget}s.")

    def _get_locked(self, booking_id: str) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise BookingNotFound(booking_id)
        return booking

    def _check_preconditions(
        self,
        booking: Booking,
        expected_status: Optional[BookingStatus],
        expected_version: Optional[int],
    ) -> None:
        if expected_status is not None and booking.status != expected_status:
            raise StaleBookingError(
                f"Booking {booking.id} is {booking.status.value}, "
                f"expected {expected_status.value}.",
                details={"booking_id": booking.id, "status": booking.status.value},
            )
        if expected_version is not None and booking.version != expected_version:
            raise StaleBookingError(
                f"Booking {booking.id} changed (version {booking.version}, "
                f"expected {expected_version}).",
                details={"booking_id": booking.id, "version": booking.version},
            )

    def _commit_locked(self, booking: Booking, op: str) -> Booking:
        self._bookings[booking.id] = booking
        if self.timeouts_after_write > 0:
            self.timeouts_after_write -= 1
            logger.warning("Simulated timeout after %s on %s", op, booking.id)
            raise RepositoryTimeout(f"Booking store {op} timed out after the write.")
        return booking.model_copy(deep=True)

    def create_booking(self, booking: Booking, timeout: Optional[float] = None) -> Booking:
        self._enter("create_booking", timeout)
        try:
            if booking.id in self._bookings:
                raise StaleBookingError(f"Booking {booking.id} already exists.")
            stored = self._commit_locked(booking.model_copy(deep=True), "create_booking")
        finally:
            self._lock.release()
        logger.info(
            "Booking created: %s for provider %s on %s %s-%s",
            booking.id,
            booking.provider_id,
            booking.event_details.date,
            booking.event_details.start_time,
            booking.event_details.end_time,
        )
        return stored

    def get_booking(self, booking_id: str, timeout: Optional[float] = None) -> Booking:
        self._enter("get_booking", timeout)
        try:
            return self._get_locked(booking_id).model_copy(deep=True)
        finally:
            self._lock.release()

    def find_bookings_for_provider_on_date(
        self,
        provider_id: str,
        day: date,
        statuses_in: Iterable[BookingStatus],
        timeout: Optional[float] = None,
    ) -> list[Booking]:
        statuses = set(statuses_in)
        self._enter("find_bookings_for_provider_on_date", timeout)
        try:
            matches = [
                b.model_copy(deep=True)
                for b in self._bookings.values()
                if b.provider_id == provider_id
                and b.event_details.date == day
                and b.status in statuses
            ]
        finally:
            self._lock.release()
        return sorted(matches, key=lambda b: (b.event_details.start_time, b.id))

    def update_booking_assignment(
        self,
        booking_id: str,
        status: BookingStatus,
        assignment: TeamAssignment,
        expected_status: Optional[BookingStatus] = None,
        expected_version: Optional[int] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Booking:
        """Set status, assignment and (optionally) window in one conditional write."""
        self._enter("update_booking_assignment", timeout)
        try:
            current = self._get_locked(booking_id)
            self._check_preconditions(current, expected_status, expected_version)
            details = current.event_details
            if start_time is not None or end_time is not None:
                details = details.model_copy(update={
                    "start_time": start_time or details.start_time,
                    "end_time": end_time or details.end_time,
                })
            updated = current.model_copy(deep=True, update={
                "status": status,
                "team_assignment": assignment.model_copy(deep=True),
                "event_details": details,
                "version": current.version + 1,
                "updated_at": datetime.now(timezone.utc),
            })
            stored = self._commit_locked(updated, "update_booking_assignment")
        finally:
            self._lock.release()
        logger.debug("Booking %s assignment written (v%d)", booking_id, stored.version)
        return stored

    def update_booking_status(
        self,
        booking_id: str,
        status: BookingStatus,
        expected_status: Optional[BookingStatus] = None,
        expected_version: Optional[int] = None,
        cancellation: Optional[Cancellation] = None,
        timeout: Optional[float] = None,
    ) -> Booking:
        self._enter("update_booking_status", timeout)
        try:
            current = self._get_locked(booking_id)
            self._check_preconditions(current, expected_status, expected_version)
            changes = {
                "status": status,
                "version": current.version + 1,
                "updated_at": datetime.now(timezone.utc),
            }
            if cancellation is not None:
                changes["cancellation"] = cancellation
            stored = self._commit_locked(
                current.model_copy(deep=True, update=changes), "update_booking_status"
            )
        finally:
            self._lock.release()
        logger.info("Booking %s status -> %s", booking_id, status.value)
        return stored

    def reset(self) -> None:
        """Clear all bookings. Used by test fixtures for isolation."""
        with self._lock:
            self._bookings.clear()
        self.unavailable = False
        self.latency_sec = 0.0
        self.timeouts_after_write = 0
