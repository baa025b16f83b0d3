"""
Finite state machine for booking status.

    pending -> confirmed -> in_progress -> completed
    pending | confirmed | in_progress -> cancelled | disputed

Every status change must match an explicit (from, trigger) entry. The
``REASSIGN`` trigger keeps the status and exists so that changing the team
assignment of a live booking goes through the same gate (and the
assignment guard) as the first confirmation.

Usage:
    new_status = BookingStateMachine.resolve(BookingStatus.PENDING, BookingTrigger.CONFIRM)
    assert new_status == BookingStatus.CONFIRMED
"""

import logging
from dataclasses import dataclass
from enum import Enum

from shootbook.errors import InvalidTransitionError
from shootbook.schemas.booking_schema import BookingStatus

logger = logging.getLogger(__name__)


class BookingTrigger(str, Enum):
    """Events that cause status transitions."""
    CONFIRM = "confirm"
    REASSIGN = "reassign"
    START = "start"
    COMPLETE = "complete"
    CANCEL = "cancel"
    DISPUTE = "dispute"


# Triggers whose transition writes a team assignment and must pass the guard.
ASSIGNING_TRIGGERS: frozenset[BookingTrigger] = frozenset(
    {BookingTrigger.CONFIRM, BookingTrigger.REASSIGN}
)


@dataclass(frozen=True)
class Transition:
    """A single valid status transition."""
    from_status: BookingStatus
    to_status: BookingStatus
    trigger: BookingTrigger


class BookingStateMachine:
    """Explicit (from, trigger) -> to table for booking status changes."""

    TRANSITIONS: list[Transition] = [
        # --- Confirmation ---
        Transition(BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingTrigger.CONFIRM),

        # --- Reassignment of a live booking ---
        Transition(BookingStatus.CONFIRMED, BookingStatus.CONFIRMED, BookingTrigger.REASSIGN),
        Transition(BookingStatus.IN_PROGRESS, BookingStatus.IN_PROGRESS, BookingTrigger.REASSIGN),

        # --- Progress ---
        Transition(BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS, BookingTrigger.START),
        Transition(BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED, BookingTrigger.COMPLETE),

        # --- Cancellation ---
        Transition(BookingStatus.PENDING, BookingStatus.CANCELLED, BookingTrigger.CANCEL),
        Transition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingTrigger.CANCEL),
        Transition(BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED, BookingTrigger.CANCEL),

        # --- Disputes ---
        Transition(BookingStatus.PENDING, BookingStatus.DISPUTED, BookingTrigger.DISPUTE),
        Transition(BookingStatus.CONFIRMED, BookingStatus.DISPUTED, BookingTrigger.DISPUTE),
        Transition(BookingStatus.IN_PROGRESS, BookingStatus.DISPUTED, BookingTrigger.DISPUTE),
    ]

    @classmethod
    def valid_triggers(cls, status: BookingStatus) -> list[BookingTrigger]:
        """Return all triggers valid from a status."""
        return [t.trigger for t in cls.TRANSITIONS if t.from_status == status]

    @classmethod
    def resolve(cls, status: BookingStatus, trigger: BookingTrigger) -> BookingStatus:
        """
        Look up the status a trigger leads to, without changing anything.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in cls.TRANSITIONS:
            if t.from_status == status and t.trigger == trigger:
                return t.to_status

        valid = [t.value for t in cls.valid_triggers(status)]
        logger.debug(
            "Rejected transition from %s with trigger %s", status.value, trigger.value
        )
        raise InvalidTransitionError(
            f"No valid transition from '{status.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}",
            details={"status": status.value, "trigger": trigger.value, "valid": valid},
        )
