"""Provider, team member and equipment data models."""

from datetime import date
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from shootbook.utils import normalize_date, parse_time_of_day


class ProviderKind(str, Enum):
    """Tag distinguishing the two provider variants."""
    PHOTOGRAPHER = "photographer"
    VIDEOGRAPHER = "videographer"


class Weekday(str, Enum):
    """Calendar weekday, in ``date.weekday()`` order."""
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class TeamRole(str, Enum):
    PHOTOGRAPHER = "photographer"
    ASSISTANT = "assistant"
    EDITOR = "editor"
    EQUIPMENT_MANAGER = "equipment_manager"
    DRONE_OPERATOR = "drone_operator"
    LIGHTING_SPECIALIST = "lighting_specialist"


class EquipmentCategory(str, Enum):
    CAMERA = "camera"
    LENS = "lens"
    LIGHTING = "lighting"
    AUDIO = "audio"
    DRONE = "drone"
    TRIPOD = "tripod"
    STABILIZER = "stabilizer"
    OTHER = "other"


class DayHours(BaseModel):
    """Open/closed window for one weekday."""
    available: bool = False
    start: Optional[str] = None
    end: Optional[str] = None

    @model_validator(mode="after")
    def _check_window(self) -> "DayHours":
        if not self.available:
            return self
        if self.start is None or self.end is None:
            raise ValueError("start and end are required when the day is available")
        if parse_time_of_day(self.start) >= parse_time_of_day(self.end):
            raise ValueError(f"start {self.start} must be before end {self.end}")
        return self


class AvailabilityPolicy(BaseModel):
    """Weekly working hours plus blackout dates."""
    working_hours: dict[Weekday, DayHours] = Field(default_factory=dict)
    blackout_dates: set[date] = Field(default_factory=set)

    @field_validator("blackout_dates", mode="before")
    @classmethod
    def _normalize_blackouts(cls, value):
        return {normalize_date(v) for v in (value or [])}


class TeamMember(BaseModel):
    """Assignable person owned by exactly one provider."""
    id: str
    owner_id: str
    name: str
    role: TeamRole = TeamRole.ASSISTANT
    specializations: list[str] = Field(default_factory=list)
    is_active: bool = True


class Equipment(BaseModel):
    """Assignable equipment unit owned by exactly one provider."""
    id: str
    owner_id: str
    name: str
    category: EquipmentCategory = EquipmentCategory.OTHER
    condition: str = "excellent"
    is_available: bool = True


class ProviderBase(BaseModel):
    """Capabilities shared by every provider variant.

    Team members and equipment are referenced by id only; the directory
    resolves them at query time.
    """
    id: str
    user_id: Optional[str] = None
    business_name: str
    specializations: list[str] = Field(default_factory=list)
    availability: AvailabilityPolicy = Field(default_factory=AvailabilityPolicy)
    team_member_ids: list[str] = Field(default_factory=list)
    equipment_ids: list[str] = Field(default_factory=list)


class PhotographerProfile(ProviderBase):
    kind: Literal["photographer"] = "photographer"


class VideographerProfile(ProviderBase):
    kind: Literal["videographer"] = "videographer"


Provider = Annotated[
    Union[PhotographerProfile, VideographerProfile],
    Field(discriminator="kind"),
]
