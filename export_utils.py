from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence

import pandas as pd

from catalog import session_config, theme_info
from schemas import Cycle, Studio, Workout

WEEK_COLUMNS = ["week", "focus", "theme", "volume", "intensity"]
WORKOUT_COLUMNS = [
    "studio",
    "week",
    "session",
    "title",
    "warmup",
    "skill_strength",
    "wod",
    "cooldown",
    "scaling_notes",
    "coach_notes",
    "scientific_references",
    "excluded_equipment",
]


def weeks_frame(cycle: Optional[Cycle]) -> pd.DataFrame:
    """Volume/intensity projection for the dashboard chart, indexed W1..Wn."""
    if cycle is None or not cycle.weeks:
        return pd.DataFrame(columns=WEEK_COLUMNS)

    rows = [
        {
            "week": week.week_number,
            "focus": week.focus,
            "theme": theme_info(week.theme)["name"],
            "volume": week.volume,
            "intensity": week.intensity,
        }
        for week in cycle.weeks
    ]
    df = pd.DataFrame(rows, columns=WEEK_COLUMNS)
    df.index = [f"W{n}" for n in df["week"]]
    return df


def _studio_names(studios: Sequence[Studio]) -> Dict[str, str]:
    return {studio.id: studio.name for studio in studios}


def workouts_frame(workouts: Sequence[Workout], studios: Sequence[Studio]) -> pd.DataFrame:
    names = _studio_names(studios)
    rows = []
    for workout in workouts:
        rows.append(
            {
                "studio": names.get(workout.studio_id, workout.studio_id),
                "week": workout.week_number,
                "session": session_config(workout.session_type).name,
                "title": workout.title,
                "warmup": workout.warmup,
                "skill_strength": workout.skill_strength,
                "wod": workout.wod,
                "cooldown": workout.cooldown,
                "scaling_notes": workout.scaling_notes,
                "coach_notes": workout.coach_notes,
                "scientific_references": "; ".join(workout.scientific_references),
                "excluded_equipment": ", ".join(workout.excluded_equipment),
            }
        )
    if not rows:
        return pd.DataFrame(columns=WORKOUT_COLUMNS)
    return pd.DataFrame(rows, columns=WORKOUT_COLUMNS).sort_values(["week", "session", "studio"])


def workouts_to_csv(workouts: Sequence[Workout], studios: Sequence[Studio]) -> str:
    return workouts_frame(workouts, studios).to_csv(index=False)


def export_filename(studio: Optional[Studio], workout: Workout) -> str:
    """File stem for a workout card, e.g. Downtown_Box_W3_strength."""
    studio_name = studio.name if studio else workout.studio_id
    stem = f"{studio_name}_W{workout.week_number}_{workout.session_type.value}"
    return re.sub(r"[^A-Za-z0-9.-]+", "_", stem).strip("_")


def workout_to_markdown(workout: Workout, studio: Optional[Studio] = None) -> str:
    session = session_config(workout.session_type)
    lines: List[str] = [
        f"# {workout.title or session.name}",
        "",
        f"**{studio.name if studio else workout.studio_id}** · {session.name} · Week {workout.week_number}",
        "",
    ]
    sections = [
        ("Warm-up", workout.warmup),
        ("Skill / Strength", workout.skill_strength),
        ("WOD", workout.wod),
        ("Cooldown", workout.cooldown),
        ("Scaling", workout.scaling_notes),
        ("Coach notes", workout.coach_notes),
    ]
    for heading, body in sections:
        if body:
            lines += [f"## {heading}", "", body.strip(), ""]
    if workout.excluded_equipment:
        lines += ["## Excluded equipment", "", ", ".join(workout.excluded_equipment), ""]
    if workout.scientific_references:
        lines += ["## References", ""]
        lines += [f"- {ref}" for ref in workout.scientific_references]
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"
