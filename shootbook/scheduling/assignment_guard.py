"""
Assignment guard: the check-and-commit step that keeps a team member or
equipment unit out of two overlapping confirmed/in-progress bookings.

The capacity read and the assignment write happen under the provider's
lock, and the write itself is conditional on the booking's status and
version not having moved since it was read. Two confirmations racing for
the same unit therefore serialise: the first commits, the second sees the
commitment and fails with ``AssignmentConflict``.

A commit that times out is never blindly retried. The guard re-reads the
booking and reports success only if the write actually landed.
"""

from typing import Optional

from shootbook.config import settings
from shootbook.errors import (
    AssignmentConflict,
    InvalidTransitionError,
    RepositoryTimeout,
    UnitConflict,
    UnitNotAssignable,
)
from shootbook.logging_context import get_request_logger
from shootbook.schemas.booking_schema import (
    COMMITTING_STATUSES,
    Booking,
    BookingStatus,
    TeamAssignment,
    UnitKind,
)
from shootbook.scheduling.capacity import (
    assignable_equipment,
    assignable_team_members,
    commitments,
)
from shootbook.scheduling.locks import ProviderLockRegistry
from shootbook.scheduling.state_machine import ASSIGNING_TRIGGERS, BookingStateMachine, BookingTrigger
from shootbook.scheduling.temporal import TimeInterval
from shootbook.stores.base import BookingStore, ProviderDirectory, ProviderSnapshot
from shootbook.stores.retry import with_read_retry

logger = get_request_logger(__name__)


def _same_assignment(a: TeamAssignment, b: TeamAssignment) -> bool:
    return a.member_ids() == b.member_ids() and a.equipment_ids() == b.equipment_ids()


def find_conflicts(
    proposed: TeamAssignment,
    bookings: list[Booking],
    interval: TimeInterval,
    exclude_booking_id: str,
) -> list[UnitConflict]:
    """Proposed units already committed to another booking overlapping ``interval``."""
    conflicts: list[UnitConflict] = []
    for kind in (UnitKind.TEAM_MEMBER, UnitKind.EQUIPMENT):
        held = commitments(bookings, kind, interval, exclude_booking_id)
        for unit_id in sorted(proposed.unit_ids(kind)):
            for booking_id in held.get(unit_id, []):
                conflicts.append(UnitConflict(kind.value, unit_id, booking_id))
    return conflicts


def check_assignable(snapshot: ProviderSnapshot, proposed: TeamAssignment) -> None:
    """Every proposed unit must belong to the provider and be usable."""
    members = {m.id for m in assignable_team_members(snapshot.team_members)}
    items = {e.id for e in assignable_equipment(snapshot.equipment)}
    bad_members = sorted(proposed.member_ids() - members)
    bad_items = sorted(proposed.equipment_ids() - items)
    if bad_members or bad_items:
        raise UnitNotAssignable(
            f"Units not assignable for provider {snapshot.provider_id}: "
            f"team members {bad_members}, equipment {bad_items}. "
            "They are unknown, owned by another provider, inactive or withdrawn.",
            details={"team_members": bad_members, "equipment": bad_items},
        )


class AssignmentGuard:
    """Validates and commits team/equipment assignments, one provider at a time."""

    def __init__(
        self,
        providers: ProviderDirectory,
        bookings: BookingStore,
        locks: Optional[ProviderLockRegistry] = None,
        timeout: Optional[float] = None,
        lock_timeout: Optional[float] = None,
    ) -> None:
        self.providers = providers
        self.bookings = bookings
        self.locks = locks if locks is not None else ProviderLockRegistry()
        self.timeout = settings.repository.timeout_sec if timeout is None else timeout
        self.lock_timeout = (
            settings.repository.lock_timeout_sec if lock_timeout is None else lock_timeout
        )

    def guard_and_assign(
        self,
        booking_id: str,
        proposed: TeamAssignment,
        target_interval: Optional[TimeInterval] = None,
        trigger: BookingTrigger = BookingTrigger.CONFIRM,
    ) -> Booking:
        """
        Commit ``proposed`` to a booking if none of its units is taken.

        Args:
            booking_id: Booking being confirmed or reassigned.
            proposed: Team members and equipment to commit.
            target_interval: Window to hold; defaults to the booking's window as
                read under the provider lock.
            trigger: ``CONFIRM`` for pending bookings, ``REASSIGN`` for live ones.

        Returns:
            The booking as stored after the commit.

        Raises:
            AssignmentConflict: A proposed unit is committed to an overlapping booking.
            UnitNotAssignable: ``proposed`` is empty, or a unit is foreign, inactive or withdrawn.
            InvalidTransitionError: The booking's status does not allow ``trigger``.
            StaleBookingError: The booking changed between read and write.
            RepositoryTimeout: A store call or the provider lock timed out.
        """
        if trigger not in ASSIGNING_TRIGGERS:
            raise InvalidTransitionError(
                f"Trigger '{trigger.value}' does not assign units.",
                details={"trigger": trigger.value},
            )
        if proposed.is_empty():
            raise UnitNotAssignable(
                f"Booking {booking_id} needs at least one team member or equipment "
                f"unit to {trigger.value}.",
                details={"booking_id": booking_id, "trigger": trigger.value},
            )

        booking = with_read_retry(
            "get_booking", lambda: self.bookings.get_booking(booking_id, timeout=self.timeout)
        )
        BookingStateMachine.resolve(booking.status, trigger)

        snapshot = with_read_retry(
            "get_provider",
            lambda: self.providers.get_provider(booking.provider_id, timeout=self.timeout),
        )
        check_assignable(snapshot, proposed)
        if not proposed.main_provider_id:
            proposed = proposed.model_copy(update={"main_provider_id": booking.provider_id})

        with self.locks.hold(booking.provider_id, timeout=self.lock_timeout):
            # Re-read under the lock: another request may have moved the booking.
            current = self.bookings.get_booking(booking_id, timeout=self.timeout)
            new_status = BookingStateMachine.resolve(current.status, trigger)
            interval = target_interval or TimeInterval.for_event(current.event_details)

            others = self.bookings.find_bookings_for_provider_on_date(
                current.provider_id,
                current.event_details.date,
                COMMITTING_STATUSES,
                timeout=self.timeout,
            )
            conflicts = find_conflicts(proposed, others, interval, exclude_booking_id=booking_id)
            if conflicts:
                error = AssignmentConflict(booking_id, conflicts)
                logger.info("Assignment rejected: %s", error.message)
                raise error

            return self._commit(current, new_status, proposed, interval)

    def _commit(
        self,
        current: Booking,
        new_status: BookingStatus,
        proposed: TeamAssignment,
        interval: TimeInterval,
    ) -> Booking:
        try:
            stored = self.bookings.update_booking_assignment(
                current.id,
                new_status,
                proposed,
                expected_status=current.status,
                expected_version=current.version,
                start_time=interval.start_time,
                end_time=interval.end_time,
                timeout=self.timeout,
            )
        except RepositoryTimeout:
            landed = self._reconcile(current, new_status, proposed, interval)
            if landed is None:
                logger.warning(
                    "Assignment commit for %s timed out and did not land", current.id
                )
                raise
            logger.warning(
                "Assignment commit for %s timed out but landed (v%d)",
                current.id, landed.version,
            )
            return landed

        logger.info(
            "Booking %s %s -> %s with %d team member(s), %d equipment unit(s) at %s",
            stored.id,
            current.status.value,
            stored.status.value,
            len(proposed.team_members),
            len(proposed.equipment),
            interval,
        )
        return stored

    def _reconcile(
        self,
        current: Booking,
        new_status: BookingStatus,
        proposed: TeamAssignment,
        interval: TimeInterval,
    ) -> Optional[Booking]:
        """After a timed-out write, return the booking if our write is the one stored."""
        after = with_read_retry(
            "get_booking", lambda: self.bookings.get_booking(current.id, timeout=self.timeout)
        )
        if (
            after.version == current.version + 1
            and after.status == new_status
            and _same_assignment(after.team_assignment, proposed)
            and TimeInterval.for_event(after.event_details) == interval
        ):
            return after
        return None
