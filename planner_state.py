from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

import config
import generation_core
from catalog import CYCLE_DURATION_OPTIONS, HYROX_EQUIPMENT, SQM_PER_ATHLETE, default_studios
from exceptions import (
    InvalidCycleError,
    NoActiveCycleError,
    NoStudiosError,
    StudioNotFoundError,
)
from image_utils import to_data_url
from schemas import (
    Cycle,
    CycleFocus,
    Equipment,
    SessionType,
    Studio,
    Workout,
    new_id,
)

logger = logging.getLogger(__name__)

DEFAULT_STUDIO_NAME = "New Studio"
AUTO_LOCATION = "Auto-detected"


@dataclass
class PlannerState:
    """Studios, the active cycle, and the workouts generated for it."""

    studios: List[Studio] = field(default_factory=default_studios)
    active_cycle: Optional[Cycle] = None
    workouts: List[Workout] = field(default_factory=list)

    # ---------- Studios ----------

    def get_studio(self, studio_id: str) -> Studio:
        for studio in self.studios:
            if studio.id == studio_id:
                return studio
        raise StudioNotFoundError(studio_id)

    def add_studio(self, studio: Studio) -> Studio:
        self.studios.append(studio)
        logger.info("Added studio %s (%s)", studio.name, studio.id)
        return studio

    def remove_studio(self, studio_id: str) -> Studio:
        studio = self.get_studio(studio_id)
        self.studios = [s for s in self.studios if s.id != studio_id]
        self.workouts = [w for w in self.workouts if w.studio_id != studio_id]
        logger.info("Removed studio %s", studio_id)
        return studio

    def update_studio_equipment(
        self, studio_id: str, equipment: Iterable[Equipment | Dict[str, Any]]
    ) -> Studio:
        studio = self.get_studio(studio_id)
        studio.equipment = [Equipment.model_validate(item) for item in equipment]
        return studio

    def add_studio_from_photo(
        self,
        name: str,
        image_b64: str,
        api_key: str,
        mime_type: str = "image/jpeg",
        location: str = AUTO_LOCATION,
    ) -> Studio:
        """Analyze a studio photo and add the resulting studio."""
        analysis = generation_core.analyze_studio_photo(image_b64, api_key, mime_type=mime_type)
        studio = Studio(
            id=new_id(),
            name=(name or "").strip() or DEFAULT_STUDIO_NAME,
            location=location,
            size_sqm=analysis.size_estimate,
            max_capacity=math.floor(analysis.size_estimate / SQM_PER_ATHLETE),
            equipment=analysis.equipment,
            photo_url=to_data_url(image_b64, mime_type),
        )
        return self.add_studio(studio)

    def equipment_pool(self) -> List[str]:
        """Every equipment name a cycle constraint could reference."""
        names = {item.name for studio in self.studios for item in studio.equipment}
        names.update(HYROX_EQUIPMENT)
        return sorted(names, key=str.lower)

    # ---------- Cycle ----------

    def require_cycle(self) -> Cycle:
        if self.active_cycle is None:
            raise NoActiveCycleError()
        return self.active_cycle

    def create_cycle(
        self,
        name: str,
        focus: CycleFocus | str,
        duration_weeks: int,
        api_key: str,
        available_equipment: Optional[List[str]] = None,
    ) -> Cycle:
        if duration_weeks not in CYCLE_DURATION_OPTIONS:
            raise InvalidCycleError(
                f"Duration must be one of {CYCLE_DURATION_OPTIONS} weeks",
                details={"duration_weeks": duration_weeks},
            )
        weeks = generation_core.generate_macrocycle(name, focus, duration_weeks, api_key)
        if not weeks:
            raise InvalidCycleError("The generated cycle has no weeks")

        cycle = Cycle(
            id=new_id(),
            name=name,
            focus=CycleFocus(focus),
            duration_weeks=duration_weeks,
            start_date=datetime.now(timezone.utc).isoformat(),
            weeks=weeks,
            available_equipment=_clean_names(available_equipment),
        )
        self.active_cycle = cycle
        self.workouts = []
        logger.info("Created cycle %s with %d weeks", cycle.id, len(cycle.weeks))
        return cycle

    def set_cycle_equipment(self, names: Optional[Iterable[str]]) -> Cycle:
        cycle = self.require_cycle()
        cycle.available_equipment = _clean_names(names)
        return cycle

    # ---------- Sessions ----------

    def generate_session(
        self, week_number: int, session_type: SessionType | str, api_key: str
    ) -> List[Workout]:
        """Generate a week's session for every studio, replacing earlier results."""
        cycle = self.require_cycle()
        if not self.studios:
            raise NoStudiosError()
        week = cycle.get_week(week_number)
        session = SessionType(session_type)

        workouts = generation_core.generate_session_workouts(
            cycle, week, session, self.studios, api_key
        )

        self.workouts = [w for w in self.workouts if w.key != (week.week_number, session)]
        self.workouts.extend(workouts)
        logger.info(
            "Generated %d %s workouts for week %d", len(workouts), session.value, week_number
        )
        return workouts

    def workouts_for(self, week_number: int, session_type: SessionType | str) -> List[Workout]:
        key = (week_number, SessionType(session_type))
        return [w for w in self.workouts if w.key == key]

    def has_generated(self, week_number: int, session_type: SessionType | str) -> bool:
        return bool(self.workouts_for(week_number, session_type))

    # ---------- Serialisation ----------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": 1,
            "studios": [s.model_dump(mode="json") for s in self.studios],
            "active_cycle": (
                self.active_cycle.model_dump(mode="json") if self.active_cycle else None
            ),
            "workouts": [w.model_dump(mode="json") for w in self.workouts],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlannerState":
        studios_raw = data.get("studios")
        studios = (
            [Studio.model_validate(s) for s in studios_raw]
            if isinstance(studios_raw, list)
            else default_studios()
        )
        cycle_raw = data.get("active_cycle")
        cycle = Cycle.model_validate(cycle_raw) if cycle_raw else None
        workouts = [Workout.model_validate(w) for w in data.get("workouts") or []]
        return cls(studios=studios, active_cycle=cycle, workouts=workouts)


def _clean_names(names: Optional[Iterable[str]]) -> Optional[List[str]]:
    if not names:
        return None
    cleaned = []
    for name in names:
        name = (name or "").strip()
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned or None


def load_state(path: Optional[Path] = None) -> PlannerState:
    """Load saved planner state; a missing or broken file yields the seed studios."""
    path = Path(path or config.STATE_FILE)
    if not path.exists():
        return PlannerState()
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            return PlannerState()
        return PlannerState.from_dict(data)
    except (OSError, ValueError, ValidationError) as exc:
        logger.warning("Ignoring unreadable planner state %s: %s", path, exc)
        return PlannerState()


def save_state(state: PlannerState, path: Optional[Path] = None) -> Path:
    path = Path(path or config.STATE_FILE)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(state.to_dict(), f, indent=2, ensure_ascii=False)
    return path
