"""Booking data models."""

import datetime as dt
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from shootbook.schemas.provider_schema import ProviderKind
from shootbook.utils import format_time_of_day, normalize_date, parse_time_of_day


class BookingStatus(str, Enum):
    """Lifecycle status of a booking."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DISPUTED = "disputed"


# Only bookings in these statuses hold their assigned units.
COMMITTING_STATUSES: frozenset[BookingStatus] = frozenset(
    {BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS}
)


class UnitKind(str, Enum):
    TEAM_MEMBER = "team_member"
    EQUIPMENT = "equipment"


class EventType(str, Enum):
    WEDDING = "wedding"
    PORTRAIT = "portrait"
    EVENT = "event"
    CORPORATE = "corporate"
    COMMERCIAL = "commercial"
    OTHER = "other"


class EventDetails(BaseModel):
    """When the shoot takes place. Times are naive local HH:MM."""
    date: dt.date
    start_time: str
    end_time: str
    event_type: EventType = EventType.OTHER
    title: str = ""
    location: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_day(cls, value):
        return normalize_date(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def _normalize_time(cls, value: str) -> str:
        return format_time_of_day(parse_time_of_day(value))


class AssignedMember(BaseModel):
    member_id: str
    role: Optional[str] = None
    confirmed: bool = False


class AssignedEquipment(BaseModel):
    item_id: str
    quantity: int = 1
    reserved: bool = False


class TeamAssignment(BaseModel):
    """Team members and equipment committed to one booking."""
    main_provider_id: Optional[str] = None
    team_members: list[AssignedMember] = Field(default_factory=list)
    equipment: list[AssignedEquipment] = Field(default_factory=list)

    @classmethod
    def of(
        cls,
        member_ids: Optional[list[str]] = None,
        equipment_ids: Optional[list[str]] = None,
        main_provider_id: Optional[str] = None,
    ) -> "TeamAssignment":
        """Build an assignment from bare unit ids."""
        return cls(
            main_provider_id=main_provider_id,
            team_members=[AssignedMember(member_id=m) for m in member_ids or []],
            equipment=[AssignedEquipment(item_id=e) for e in equipment_ids or []],
        )

    def member_ids(self) -> set[str]:
        return {m.member_id for m in self.team_members}

    def equipment_ids(self) -> set[str]:
        return {e.item_id for e in self.equipment}

    def unit_ids(self, kind: UnitKind) -> set[str]:
        if kind == UnitKind.TEAM_MEMBER:
            return self.member_ids()
        return self.equipment_ids()

    def is_empty(self) -> bool:
        return not self.team_members and not self.equipment


class Cancellation(BaseModel):
    cancelled_by: Optional[str] = None
    reason: Optional[str] = None
    cancelled_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Booking(BaseModel):
    """Booking record as held by the booking store."""
    id: str
    provider_id: str
    provider_kind: ProviderKind
    client_id: str
    event_details: EventDetails
    status: BookingStatus = BookingStatus.PENDING
    team_assignment: TeamAssignment = Field(default_factory=TeamAssignment)
    cancellation: Optional[Cancellation] = None
    version: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def holds_units(self) -> bool:
        return self.status in COMMITTING_STATUSES
