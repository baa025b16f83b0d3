"""Result types returned by the availability and slot computations."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from shootbook.utils import format_time_of_day


class UnavailabilityReason(str, Enum):
    """Why a provider cannot take a booking. Reported, never raised."""
    BLACKOUT_DATE = "blackout_date"
    DAY_UNAVAILABLE = "day_unavailable"
    INSUFFICIENT_CAPACITY = "insufficient_capacity"


@dataclass(frozen=True)
class TimeSlot:
    """Candidate ``[start, end)`` window, in minutes since midnight."""
    start: int
    end: int

    @property
    def start_time(self) -> str:
        return format_time_of_day(self.start)

    @property
    def end_time(self) -> str:
        return format_time_of_day(self.end)

    def to_dict(self) -> dict[str, str]:
        return {"start": self.start_time, "end": self.end_time}


@dataclass(frozen=True)
class BookedSlot:
    """Interval held by an existing confirmed or in-progress booking."""
    start: int
    end: int
    booking_id: str

    def to_dict(self) -> dict[str, str]:
        return {
            "start": format_time_of_day(self.start),
            "end": format_time_of_day(self.end),
            "booking_id": self.booking_id,
        }


@dataclass(frozen=True)
class EligibilityResult:
    eligible: bool
    reason: Optional[UnavailabilityReason] = None
    hours: Optional[TimeSlot] = None


@dataclass(frozen=True)
class CapacitySummary:
    """How many units of one kind are free on a day or in an interval."""
    total_units: int
    committed_units: int
    free_units: int
    committed_by: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def can_accept(self, units_required: int = 1) -> bool:
        return self.free_units >= units_required


@dataclass(frozen=True)
class AvailabilityResult:
    """Verdict of the availability façade for one provider and day."""
    available: bool
    date: date
    reason: Optional[UnavailabilityReason] = None
    working_hours: Optional[TimeSlot] = None
    booked_slots: tuple[BookedSlot, ...] = ()
    team_capacity: Optional[CapacitySummary] = None
    equipment_capacity: Optional[CapacitySummary] = None
    duration_hours: Optional[float] = None
    units_required: int = 1
