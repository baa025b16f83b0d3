"""
Domain-specific exceptions for the scheduling core.

Availability queries never raise for "just not available"; those outcomes
are reason codes on the result. Only illegal input, illegal transitions,
assignment conflicts and infrastructure failures are raised.
"""

from dataclasses import dataclass
from typing import Any, Optional


class SchedulingError(Exception):
    """Base exception for all scheduling errors."""

    retryable: bool = False

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ProviderNotFound(SchedulingError):
    """Raised when a provider id does not resolve in the directory."""

    def __init__(self, provider_id: str) -> None:
        super().__init__(
            f"Provider {provider_id} not found.",
            details={"provider_id": provider_id},
        )
        self.provider_id = provider_id


class BookingNotFound(SchedulingError):
    """Raised when a booking id does not resolve in the store."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            f"Booking {booking_id} not found.",
            details={"booking_id": booking_id},
        )
        self.booking_id = booking_id


class InvalidInterval(SchedulingError, ValueError):
    """Raised for a malformed time value or an inverted/empty window."""


class InvalidTransitionError(SchedulingError):
    """Raised when a booking status change is not allowed from its current status."""


class UnitNotAssignable(SchedulingError):
    """Raised when a proposed unit is foreign to the provider, inactive or withdrawn."""


class ProviderUnavailable(SchedulingError):
    """Raised by the booking flow when a provider cannot take a new booking."""

    def __init__(self, provider_id: str, reason: str) -> None:
        super().__init__(
            f"Provider {provider_id} not available on selected date: {reason}.",
            details={"provider_id": provider_id, "reason": reason},
        )
        self.reason = reason


@dataclass(frozen=True)
class UnitConflict:
    """A proposed unit already committed to another overlapping booking."""

    unit_kind: str
    unit_id: str
    booking_id: str


class AssignmentConflict(SchedulingError):
    """Raised when a proposed unit is already committed in an overlapping interval."""

    def __init__(self, booking_id: str, conflicts: list[UnitConflict]) -> None:
        names = ", ".join(
            f"{c.unit_kind} {c.unit_id} (booking {c.booking_id})" for c in conflicts
        )
        super().__init__(
            f"Cannot assign booking {booking_id}: already committed: {names}.",
            details={
                "booking_id": booking_id,
                "conflicts": [
                    {"unit_kind": c.unit_kind, "unit_id": c.unit_id, "booking_id": c.booking_id}
                    for c in conflicts
                ],
            },
        )
        self.booking_id = booking_id
        self.conflicts = conflicts

    @property
    def unit_ids(self) -> list[str]:
        return sorted({c.unit_id for c in self.conflicts})

    @property
    def conflicting_booking_ids(self) -> list[str]:
        return sorted({c.booking_id for c in self.conflicts})


class StaleBookingError(SchedulingError):
    """Raised when a conditional write finds the booking changed underneath it."""


class RepositoryError(SchedulingError):
    """Base class for collaborator failures."""


class RepositoryTimeout(RepositoryError):
    """A store or lock operation exceeded its caller-supplied timeout."""

    retryable = True


class RepositoryUnavailable(RepositoryError):
    """The store could not be reached at all."""

    retryable = True
