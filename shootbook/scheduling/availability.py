"""
Availability façade: one verdict per provider and day, plus slot finding.

Combines the working-hours policy, the capacity resolver and the slot
generator. Nothing here writes to a store, so every call is safe to repeat
or abandon. Transient store failures on the reads are retried with backoff.
"""

import logging
from typing import Optional

from shootbook.config import settings
from shootbook.schemas.availability_schema import (
    AvailabilityResult,
    BookedSlot,
    UnavailabilityReason,
)
from shootbook.schemas.booking_schema import COMMITTING_STATUSES, Booking, UnitKind
from shootbook.schemas.provider_schema import TeamMember
from shootbook.scheduling.capacity import (
    assignable_equipment,
    assignable_team_members,
    free_unit_ids,
    resolve_capacity,
)
from shootbook.scheduling.policy import is_day_eligible
from shootbook.scheduling.slots import SlotGenerator
from shootbook.scheduling.temporal import TimeInterval, hours_to_minutes
from shootbook.stores.base import BookingStore, ProviderDirectory, ProviderSnapshot
from shootbook.stores.retry import with_read_retry
from shootbook.utils import DateLike, normalize_date

logger = logging.getLogger(__name__)


def _check_units_required(units_required: int) -> None:
    if units_required < 1:
        raise ValueError(f"units_required must be >= 1, got {units_required}")


class AvailabilityService:
    """Read-only availability queries against the directory and booking store."""

    def __init__(
        self,
        providers: ProviderDirectory,
        bookings: BookingStore,
        timeout: Optional[float] = None,
    ) -> None:
        self.providers = providers
        self.bookings = bookings
        self.timeout = settings.repository.timeout_sec if timeout is None else timeout

    def load_provider(self, provider_id: str) -> ProviderSnapshot:
        return with_read_retry(
            "get_provider",
            lambda: self.providers.get_provider(provider_id, timeout=self.timeout),
        )

    def _load_committed_bookings(self, provider_id: str, day) -> list[Booking]:
        return with_read_retry(
            "find_bookings_for_provider_on_date",
            lambda: self.bookings.find_bookings_for_provider_on_date(
                provider_id, day, COMMITTING_STATUSES, timeout=self.timeout
            ),
        )

    def check_availability(
        self,
        provider_id: str,
        date: DateLike,
        duration_hours: Optional[float] = None,
        units_required: int = settings.scheduling.default_units_required,
    ) -> AvailabilityResult:
        """
        Decide whether a provider can take a new booking on a day.

        Capacity is checked at day level: a team member booked at any time
        that day counts as taken. Ineligible days short-circuit before the
        booking store is queried.

        Raises:
            InvalidInterval: For a non-positive duration or malformed date.
            ProviderNotFound: If the provider id does not resolve.
        """
        if duration_hours is None:
            duration_hours = settings.scheduling.default_duration_hours
        hours_to_minutes(duration_hours)
        _check_units_required(units_required)
        day = normalize_date(date)

        snapshot = self.load_provider(provider_id)
        eligibility = is_day_eligible(snapshot.provider.availability, day)
        if not eligibility.eligible:
            logger.info(
                "Provider %s unavailable on %s: %s",
                provider_id, day, eligibility.reason.value,
            )
            return AvailabilityResult(
                available=False,
                date=day,
                reason=eligibility.reason,
                duration_hours=duration_hours,
                units_required=units_required,
            )

        committed = self._load_committed_bookings(provider_id, day)
        team = resolve_capacity(
            [m.id for m in assignable_team_members(snapshot.team_members)],
            UnitKind.TEAM_MEMBER,
            committed,
        )
        equipment = resolve_capacity(
            [e.id for e in assignable_equipment(snapshot.equipment)],
            UnitKind.EQUIPMENT,
            committed,
        )
        booked_slots = tuple(
            BookedSlot(interval.start, interval.end, b.id)
            for b in committed
            for interval in [TimeInterval.for_event(b.event_details)]
        )

        available = team.can_accept(units_required)
        reason = None if available else UnavailabilityReason.INSUFFICIENT_CAPACITY
        logger.info(
            "Availability for %s on %s: %s (%d/%d team members free, %d required)",
            provider_id, day, "available" if available else "unavailable",
            team.free_units, team.total_units, units_required,
        )
        return AvailabilityResult(
            available=available,
            date=day,
            reason=reason,
            working_hours=eligibility.hours,
            booked_slots=booked_slots,
            team_capacity=team,
            equipment_capacity=equipment,
            duration_hours=duration_hours,
            units_required=units_required,
        )

    def find_available_slots(
        self,
        provider_id: str,
        date: DateLike,
        duration_hours: Optional[float] = None,
        units_required: int = settings.scheduling.default_units_required,
    ) -> SlotGenerator:
        """
        Return the free windows of ``duration_hours`` on a day.

        All reads happen here; the returned generator is pure computation
        and can be iterated lazily, partially, or more than once.
        """
        if duration_hours is None:
            duration_hours = settings.scheduling.default_duration_hours
        duration_minutes = hours_to_minutes(duration_hours)
        _check_units_required(units_required)
        day = normalize_date(date)

        snapshot = self.load_provider(provider_id)
        eligibility = is_day_eligible(snapshot.provider.availability, day)
        if not eligibility.eligible:
            logger.info(
                "No slots for %s on %s: %s", provider_id, day, eligibility.reason.value
            )
            return SlotGenerator.empty(duration_minutes)

        committed = self._load_committed_bookings(provider_id, day)
        roster = [m.id for m in assignable_team_members(snapshot.team_members)]

        def has_capacity(candidate: TimeInterval) -> bool:
            summary = resolve_capacity(roster, UnitKind.TEAM_MEMBER, committed, interval=candidate)
            return summary.can_accept(units_required)

        hours = eligibility.hours
        return SlotGenerator(
            working_hours=TimeInterval(hours.start, hours.end),
            duration_minutes=duration_minutes,
            booked=[TimeInterval.for_event(b.event_details) for b in committed],
            capacity_check=has_capacity,
        )

    def available_team_members(
        self,
        provider_id: str,
        date: DateLike,
        interval: Optional[TimeInterval] = None,
    ) -> list[TeamMember]:
        """Active team members not committed that day, or in ``interval`` if given."""
        day = normalize_date(date)
        snapshot = self.load_provider(provider_id)
        committed = self._load_committed_bookings(provider_id, day)
        active = assignable_team_members(snapshot.team_members)
        free = set(free_unit_ids([m.id for m in active], UnitKind.TEAM_MEMBER, committed, interval))
        return [m for m in active if m.id in free]
