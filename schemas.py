from __future__ import annotations

import math
import random
import string
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from exceptions import WeekNotFoundError

ID_ALPHABET = string.ascii_lowercase + string.digits


def new_id(length: int = 9) -> str:
    """Short random identifier for studios, cycles and workouts."""
    return "".join(random.choices(ID_ALPHABET, k=length))


class CamelModel(BaseModel):
    """Accepts camelCase keys (service JSON, seed data) and snake_case alike."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class EquipmentCategory(str, Enum):
    CARDIO = "cardio"
    WEIGHT = "weight"
    GYMNASTIC = "gymnastic"
    OTHER = "other"


class SessionType(str, Enum):
    ENDURANCE = "endurance"
    STRENGTH = "strength"
    CLASS = "class"


class WeeklyTheme(str, Enum):
    INTERVALS = "intervals"
    ZONE2 = "zone2"
    THRESHOLD = "threshold"
    RACE_PREP = "race_prep"
    RECOVERY = "recovery"
    MAX_STRENGTH = "max_strength"
    POWER_ENDURANCE = "power_endurance"
    TRANSITIONS = "transitions"


class CycleFocus(str, Enum):
    HYROX = "hyrox"
    CROSSFIT = "crossfit"
    GENERAL_STRENGTH = "general_strength"
    ENDURANCE = "endurance"


class Equipment(CamelModel):
    name: str
    quantity: int = Field(default=1, ge=0)
    category: EquipmentCategory = EquipmentCategory.OTHER

    @field_validator("quantity", mode="before")
    @classmethod
    def _round_quantity(cls, value):
        if value is None:
            return 1
        try:
            return max(0, int(round(float(value))))
        except (TypeError, ValueError, OverflowError):
            return 1

    @field_validator("category", mode="before")
    @classmethod
    def _unknown_category_is_other(cls, value):
        if isinstance(value, EquipmentCategory):
            return value
        if isinstance(value, str) and value.strip().lower() in {c.value for c in EquipmentCategory}:
            return value.strip().lower()
        return EquipmentCategory.OTHER


class Studio(CamelModel):
    id: str = Field(default_factory=new_id)
    name: str
    location: str = ""
    size_sqm: float = Field(default=0.0, ge=0, alias="sizeSqM")
    max_capacity: int = Field(default=0, ge=0)
    equipment: List[Equipment] = Field(default_factory=list)
    photo_url: Optional[str] = None

    def equipment_names(self) -> List[str]:
        return [item.name for item in self.equipment]


class SessionConfig(CamelModel):
    type: SessionType
    name: str
    description: str
    color: str


def _finite(value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _clamp_percent(value) -> float:
    number = _finite(value)
    return min(100.0, max(0.0, number))


class CycleWeekDraft(CamelModel):
    """A week as returned by the content service, before range checks."""

    week_number: int
    focus: str = Field(
        default="",
        description="Main theme of the week (e.g. Accumulation, Deload)",
    )
    theme: WeeklyTheme = Field(
        default=WeeklyTheme.INTERVALS,
        description="Evidence-based weekly training theme",
    )
    volume: float = Field(default=0.0, description="Estimated volume load 0-100")
    intensity: float = Field(default=0.0, description="Estimated average intensity 0-100")

    @field_validator("volume", "intensity", mode="before")
    @classmethod
    def _clamp(cls, value):
        return _clamp_percent(value)

    @field_validator("theme", mode="before")
    @classmethod
    def _unknown_theme(cls, value):
        if isinstance(value, WeeklyTheme):
            return value
        if isinstance(value, str) and value.strip().lower() in {t.value for t in WeeklyTheme}:
            return value.strip().lower()
        return WeeklyTheme.INTERVALS


class CycleWeek(CycleWeekDraft):
    week_number: int = Field(ge=1)


class Cycle(CamelModel):
    id: str = Field(default_factory=new_id)
    name: str
    focus: CycleFocus
    duration_weeks: int = Field(ge=1)
    start_date: str
    weeks: List[CycleWeek] = Field(default_factory=list)
    # None means every studio's full inventory is usable.
    available_equipment: Optional[List[str]] = None

    def get_week(self, week_number: int) -> CycleWeek:
        for week in self.weeks:
            if week.week_number == week_number:
                return week
        raise WeekNotFoundError(week_number)


class WorkoutDraft(CamelModel):
    """A single studio's workout as returned by the content service."""

    studio_id: str
    title: str = ""
    warmup: str = ""
    skill_strength: str = ""
    wod: str = Field(default="", description="Main workout block")
    cooldown: str = ""
    scaling_notes: str = Field(
        default="", description="Scaling options for this studio's equipment and space."
    )
    coach_notes: str = Field(
        default="", description="Logistics for managing the class in this specific space."
    )
    scientific_references: List[str] = Field(default_factory=list)


class Workout(WorkoutDraft):
    id: str = Field(default_factory=new_id)
    cycle_id: str
    week_number: int
    session_type: SessionType
    excluded_equipment: List[str] = Field(default_factory=list)

    @property
    def key(self) -> Tuple[int, SessionType]:
        return self.week_number, self.session_type


class StudioAnalysis(CamelModel):
    size_estimate: float = Field(default=0.0, ge=0)
    equipment: List[Equipment] = Field(default_factory=list)

    @field_validator("size_estimate", mode="before")
    @classmethod
    def _non_negative(cls, value):
        return max(0.0, _finite(value))


class MacrocyclePayload(CamelModel):
    weeks: List[CycleWeekDraft]


class SessionPayload(CamelModel):
    workouts: List[WorkoutDraft]
