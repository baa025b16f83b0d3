"""
Booking flow: create a pending hold, confirm it with a team, run it to
completion, or cancel/dispute it.

Creation only checks day-level availability and takes no units; units are
committed at confirmation through the assignment guard. Status-only
changes are conditional writes on the booking's current status and
version, so a status change can never silently overwrite a concurrent one.
"""

from typing import Optional, Union

from shootbook.config import settings
from shootbook.errors import ProviderUnavailable
from shootbook.logging_context import get_request_logger
from shootbook.schemas.booking_schema import (
    Booking,
    BookingStatus,
    Cancellation,
    EventDetails,
    TeamAssignment,
)
from shootbook.scheduling.assignment_guard import AssignmentGuard
from shootbook.scheduling.availability import AvailabilityService
from shootbook.scheduling.state_machine import BookingStateMachine, BookingTrigger
from shootbook.scheduling.temporal import TimeInterval
from shootbook.stores.base import BookingStore
from shootbook.stores.booking_store import new_booking_id
from shootbook.stores.retry import with_read_retry

logger = get_request_logger(__name__)


class BookingService:
    """Use-case layer over the availability façade, the guard and the store."""

    def __init__(
        self,
        availability: AvailabilityService,
        guard: AssignmentGuard,
        bookings: BookingStore,
        timeout: Optional[float] = None,
    ) -> None:
        self.availability = availability
        self.guard = guard
        self.bookings = bookings
        self.timeout = settings.repository.timeout_sec if timeout is None else timeout

    def create_booking(
        self,
        provider_id: str,
        client_id: str,
        event_details: Union[EventDetails, dict],
        units_required: int = settings.scheduling.default_units_required,
    ) -> Booking:
        """
        Create a ``pending`` booking after a day-level availability check.

        Raises:
            InvalidInterval: If the event window is inverted or empty.
            pydantic.ValidationError: If ``event_details`` is a malformed dict.
            ProviderNotFound: If the provider id does not resolve.
            ProviderUnavailable: If the day is ineligible or capacity is short.
        """
        details = (
            event_details
            if isinstance(event_details, EventDetails)
            else EventDetails.model_validate(event_details)
        )
        interval = TimeInterval.for_event(details)

        verdict = self.availability.check_availability(
            provider_id,
            details.date,
            duration_hours=interval.duration_minutes / 60,
            units_required=units_required,
        )
        if not verdict.available:
            raise ProviderUnavailable(provider_id, verdict.reason.value)

        snapshot = self.availability.load_provider(provider_id)
        booking = Booking(
            id=new_booking_id(),
            provider_id=provider_id,
            provider_kind=snapshot.provider.kind,
            client_id=client_id,
            event_details=details,
            team_assignment=TeamAssignment(main_provider_id=provider_id),
        )
        return self.bookings.create_booking(booking, timeout=self.timeout)

    def confirm_booking(
        self,
        booking_id: str,
        assignment: TeamAssignment,
        target_interval: Optional[TimeInterval] = None,
    ) -> Booking:
        """pending -> confirmed, committing ``assignment`` through the guard."""
        return self.guard.guard_and_assign(
            booking_id, assignment, target_interval, trigger=BookingTrigger.CONFIRM
        )

    def reassign_booking(
        self,
        booking_id: str,
        assignment: TeamAssignment,
        target_interval: Optional[TimeInterval] = None,
    ) -> Booking:
        """Replace the team of a confirmed or in-progress booking."""
        return self.guard.guard_and_assign(
            booking_id, assignment, target_interval, trigger=BookingTrigger.REASSIGN
        )

    def start_booking(self, booking_id: str) -> Booking:
        return self._apply(booking_id, BookingTrigger.START)

    def complete_booking(self, booking_id: str) -> Booking:
        """in_progress -> completed. The booking's units are free from now on."""
        return self._apply(booking_id, BookingTrigger.COMPLETE)

    def dispute_booking(self, booking_id: str) -> Booking:
        return self._apply(booking_id, BookingTrigger.DISPUTE)

    def cancel_booking(
        self,
        booking_id: str,
        cancelled_by: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Booking:
        """
        Cancel a booking that is not yet completed or cancelled.

        Raises:
            InvalidTransitionError: If the booking is already terminal.
        """
        return self._apply(
            booking_id,
            BookingTrigger.CANCEL,
            cancellation=Cancellation(cancelled_by=cancelled_by, reason=reason),
        )

    def _apply(
        self,
        booking_id: str,
        trigger: BookingTrigger,
        cancellation: Optional[Cancellation] = None,
    ) -> Booking:
        current = with_read_retry(
            "get_booking", lambda: self.bookings.get_booking(booking_id, timeout=self.timeout)
        )
        new_status: BookingStatus = BookingStateMachine.resolve(current.status, trigger)
        updated = self.bookings.update_booking_status(
            booking_id,
            new_status,
            expected_status=current.status,
            expected_version=current.version,
            cancellation=cancellation,
            timeout=self.timeout,
        )
        logger.info(
            "Booking %s %s -> %s (%s)",
            booking_id, current.status.value, updated.status.value, trigger.value,
        )
        return updated
