"""
Capacity resolver: how many team members or equipment units are free.

One resolver, two granularities:
- day level (no interval): a unit is committed if any confirmed or
  in-progress booking that day assigns it. Used when a booking is first
  requested and no time window has been chosen yet.
- interval level: a unit is committed only if the booking assigning it
  overlaps the requested window. Used by the slot generator and the
  assignment guard.

Usage:
    summary = resolve_capacity(
        [m.id for m in assignable_team_members(snapshot.team_members)],
        UnitKind.TEAM_MEMBER,
        bookings,
        interval=TimeInterval.from_strings("10:00", "12:00"),
    )
    summary.can_accept(units_required=1)
"""

import logging
from collections import defaultdict
from typing import Iterable, Optional, Sequence

from shootbook.schemas.availability_schema import CapacitySummary
from shootbook.schemas.booking_schema import Booking, UnitKind
from shootbook.schemas.provider_schema import Equipment, TeamMember
from shootbook.scheduling.temporal import TimeInterval

logger = logging.getLogger(__name__)


def assignable_team_members(members: Iterable[TeamMember]) -> list[TeamMember]:
    """Inactive members are never assignable."""
    return [m for m in members if m.is_active]


def assignable_equipment(items: Iterable[Equipment]) -> list[Equipment]:
    """Withdrawn equipment (``is_available=False``) is never assignable."""
    return [e for e in items if e.is_available]


def _booking_interval(booking: Booking) -> TimeInterval:
    return TimeInterval.for_event(booking.event_details)


def commitments(
    bookings: Iterable[Booking],
    unit_kind: UnitKind,
    interval: Optional[TimeInterval] = None,
    exclude_booking_id: Optional[str] = None,
) -> dict[str, list[str]]:
    """
    Map each committed unit id to the ids of the bookings holding it.

    Bookings outside the committing statuses are skipped even if the caller
    passed them in.
    """
    held: dict[str, list[str]] = defaultdict(list)
    for booking in bookings:
        if booking.id == exclude_booking_id or not booking.holds_units:
            continue
        if interval is not None and not _booking_interval(booking).overlaps(interval):
            continue
        for unit_id in sorted(booking.team_assignment.unit_ids(unit_kind)):
            held[unit_id].append(booking.id)
    return dict(held)


def resolve_capacity(
    unit_ids: Sequence[str],
    unit_kind: UnitKind,
    bookings: Iterable[Booking],
    interval: Optional[TimeInterval] = None,
    exclude_booking_id: Optional[str] = None,
) -> CapacitySummary:
    """
    Count free units among ``unit_ids`` given the day's bookings.

    ``unit_ids`` should already be filtered to assignable units. Commitments
    of units outside that list (e.g. a member deactivated after being
    assigned) do not reduce capacity.
    """
    held = commitments(bookings, unit_kind, interval, exclude_booking_id)
    roster = list(dict.fromkeys(unit_ids))
    committed_by = {uid: tuple(held[uid]) for uid in roster if uid in held}

    total = len(roster)
    committed = len(committed_by)
    summary = CapacitySummary(
        total_units=total,
        committed_units=committed,
        free_units=total - committed,
        committed_by=committed_by,
    )
    logger.debug(
        "Capacity (%s, %s): %d/%d free",
        unit_kind.value,
        interval if interval is not None else "whole day",
        summary.free_units,
        total,
    )
    return summary


def free_unit_ids(
    unit_ids: Sequence[str],
    unit_kind: UnitKind,
    bookings: Iterable[Booking],
    interval: Optional[TimeInterval] = None,
    exclude_booking_id: Optional[str] = None,
) -> list[str]:
    """Return the uncommitted ids in roster order."""
    held = commitments(bookings, unit_kind, interval, exclude_booking_id)
    return [uid for uid in dict.fromkeys(unit_ids) if uid not in held]
