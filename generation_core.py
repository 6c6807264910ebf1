from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type

from openai import OpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

import config
from catalog import DEFAULT_CLASS_SIZE, SCIENTIFIC_SOURCES, session_config, theme_info
from exceptions import GenerationError, InvalidResponseError, MissingApiKeyError
from schemas import (
    Cycle,
    CycleFocus,
    CycleWeek,
    MacrocyclePayload,
    SessionPayload,
    SessionType,
    Studio,
    StudioAnalysis,
    WeeklyTheme,
    Workout,
    new_id,
)

logger = logging.getLogger(__name__)

RAW_CONTENT_PREVIEW = 500


def _get_client(api_key: str) -> OpenAI:
    """Build a client for the key the coach supplied."""
    if not api_key or not api_key.strip():
        raise MissingApiKeyError()
    return OpenAI(api_key=api_key.strip())


def response_format_for(name: str, model: Type[BaseModel]) -> Dict[str, Any]:
    """Wrap a payload model's JSON Schema as a structured-output response format."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": name,
            "schema": model.model_json_schema(),
            "strict": False,
        },
    }


def _request_structured(
    api_key: str,
    model_name: str,
    messages: List[Dict[str, Any]],
    payload_model: Type[BaseModel],
    schema_name: str,
    failure_message: str,
) -> BaseModel:
    """Send one generation request and validate the reply against payload_model."""
    client = _get_client(api_key)
    logger.info("Requesting %s from %s", schema_name, model_name)

    try:
        completion = client.chat.completions.create(
            model=model_name,
            messages=messages,
            response_format=response_format_for(schema_name, payload_model),
        )
    except OpenAIError as exc:
        logger.error("%s request failed: %s", schema_name, exc)
        raise GenerationError(f"{failure_message}: {exc}") from exc

    raw = completion.choices[0].message.content if completion.choices else None
    if not raw:
        logger.error("%s request returned no content", schema_name)
        raise GenerationError(failure_message)

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidResponseError(
            "The model did not return valid JSON.",
            details={"raw_content": raw[:RAW_CONTENT_PREVIEW]},
        ) from exc

    try:
        return payload_model.model_validate(data)
    except ValidationError as exc:
        raise InvalidResponseError(
            f"The model response did not match the {schema_name} schema.",
            details={"raw_content": raw[:RAW_CONTENT_PREVIEW], "errors": exc.errors()},
        ) from exc


# ---------- Prompts ----------

STUDIO_PHOTO_PROMPT = """
Analyze this fitness studio image.
1. Estimate the open floor area roughly in square meters (assume standard ceiling height).
2. List visible functional fitness equipment (e.g., Rowers, Barbells, Rigs, Kettlebells)
   with a quantity and one category of: cardio, weight, gymnastic, other.
3. Return ONLY valid JSON.
"""


def build_macrocycle_prompt(name: str, focus: CycleFocus | str, duration_weeks: int) -> str:
    focus_value = CycleFocus(focus).value
    themes = ", ".join(theme.value for theme in WeeklyTheme)
    return f"""
Create a {duration_weeks}-week periodization plan for a Functional Fitness cycle named "{name}",
focused on "{focus_value}".
The target audience is a general gym population (intermediate).
Apply progressive overload principles and schedule deload/recovery weeks where appropriate.
For every week give a short focus label, one theme from: {themes},
and volume and intensity estimates on a 0-100 scale.
Number the weeks 1 to {duration_weeks}.
Return a JSON object with a "weeks" array.
"""


def usable_equipment(studio: Studio, available_equipment: Optional[Sequence[str]]) -> List[str]:
    """Inventory lines of a studio that the cycle's equipment constraint allows."""
    allowed = _normalised(available_equipment) if available_equipment else None
    lines = []
    for item in studio.equipment:
        if allowed is not None and item.name.strip().lower() not in allowed:
            continue
        lines.append(f"{item.quantity}x {item.name}")
    return lines


def excluded_equipment(studio: Studio, available_equipment: Optional[Sequence[str]]) -> List[str]:
    if not available_equipment:
        return []
    allowed = _normalised(available_equipment)
    return [name for name in studio.equipment_names() if name.strip().lower() not in allowed]


def _normalised(names: Iterable[str]) -> set:
    return {name.strip().lower() for name in names if name and name.strip()}


def build_studios_context(
    studios: Sequence[Studio],
    available_equipment: Optional[Sequence[str]] = None,
) -> str:
    blocks = []
    for studio in studios:
        equipment = usable_equipment(studio, available_equipment)
        blocks.append(
            "\n".join(
                [
                    f"Studio ID: {studio.id}",
                    f"Name: {studio.name}",
                    f"Size: {studio.size_sqm:g}sqm",
                    f"Max capacity: {studio.max_capacity}",
                    "Equipment: " + (", ".join(equipment) if equipment else "bodyweight only"),
                ]
            )
        )
    return "\n---\n".join(blocks)


def build_session_prompt(
    cycle: Cycle,
    week: CycleWeek,
    session_type: SessionType | str,
    studios: Sequence[Studio],
) -> str:
    session = session_config(session_type)
    theme = theme_info(week.theme)
    constraint = (
        "Only use this equipment across all studios: " + ", ".join(cycle.available_equipment)
        if cycle.available_equipment
        else "No global equipment restriction for this cycle."
    )
    sources = "\n".join(f"- {source}" for source in SCIENTIFIC_SOURCES)
    return f"""
Design a single {session.name} session for Week {week.week_number} of the cycle "{cycle.name}".
Session purpose: {session.description}.
Week focus: {week.focus}.
Week theme: {theme['name']} ({theme['description']}; basis: {theme['scientific_basis']}).
Target volume: {week.volume:g}/100, target intensity: {week.intensity:g}/100.
Cycle Goal: {CycleFocus(cycle.focus).value}.
Class Size: Up to {DEFAULT_CLASS_SIZE} people.
{constraint}

CRITICAL: Create the *same intended stimulus* for the following studios, but adapt the exercises
based on their specific equipment and space constraints.

Studios Data:
{build_studios_context(studios, cycle.available_equipment)}

Ground the programming in evidence and cite the relevant entries in scientificReferences:
{sources}

Return a JSON object with a "workouts" array (exactly one per studio, using the Studio ID above).
"""


# ---------- Generation requests ----------


def analyze_studio_photo(
    image_b64: str,
    api_key: str,
    mime_type: str = "image/jpeg",
) -> StudioAnalysis:
    """Estimate floor area and equipment from a base64 studio photo."""
    messages = [
        {
            "role": "user",
            "content": [
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{mime_type};base64,{image_b64}"},
                },
                {"type": "text", "text": STUDIO_PHOTO_PROMPT},
            ],
        }
    ]
    return _request_structured(
        api_key,
        config.PLANNER_VISION_MODEL,
        messages,
        StudioAnalysis,
        "studio_analysis",
        "Failed to analyze image",
    )


def generate_macrocycle(
    name: str,
    focus: CycleFocus | str,
    duration_weeks: int,
    api_key: str,
) -> List[CycleWeek]:
    """Ask the service for the week-by-week periodization of a new cycle."""
    messages = [
        {
            "role": "system",
            "content": "You are a sport scientist programming functional fitness cycles. Reply in JSON.",
        },
        {"role": "user", "content": build_macrocycle_prompt(name, focus, duration_weeks)},
    ]
    payload = _request_structured(
        api_key,
        config.PLANNER_MODEL,
        messages,
        MacrocyclePayload,
        "macrocycle",
        "Failed to generate macrocycle",
    )
    in_range = [draft for draft in payload.weeks if 1 <= draft.week_number <= duration_weeks]
    dropped = len(payload.weeks) - len(in_range)
    if dropped:
        logger.warning("Dropped %d weeks outside 1..%d", dropped, duration_weeks)

    weeks: Dict[int, CycleWeek] = {}
    for draft in in_range:
        if draft.week_number in weeks:
            logger.warning("Dropped duplicate week %d", draft.week_number)
            continue
        weeks[draft.week_number] = CycleWeek(**draft.model_dump())
    return [weeks[number] for number in sorted(weeks)]


def reconcile_workouts(
    drafts,
    cycle: Cycle,
    week: CycleWeek,
    session_type: SessionType | str,
    studios: Sequence[Studio],
) -> List[Workout]:
    """
    Turn the service's drafts into workouts for this cycle/week/session.

    Each accepted draft gets a fresh id and the cycle, week and session stamps.
    Drafts for unknown studios are dropped and only the first draft per studio is
    kept. excluded_equipment lists the studio's inventory outside the cycle
    constraint.
    """
    studios_by_id = {studio.id: studio for studio in studios}
    session = SessionType(session_type)
    workouts: List[Workout] = []
    seen = set()
    for draft in drafts:
        studio = studios_by_id.get(draft.studio_id)
        if studio is None:
            logger.warning("Ignoring workout for unknown studio %r", draft.studio_id)
            continue
        if studio.id in seen:
            continue
        seen.add(studio.id)
        workouts.append(
            Workout(
                **draft.model_dump(),
                id=new_id(),
                cycle_id=cycle.id,
                week_number=week.week_number,
                session_type=session,
                excluded_equipment=excluded_equipment(studio, cycle.available_equipment),
            )
        )
    for studio in studios:
        if studio.id not in seen:
            logger.warning("No workout returned for studio %s", studio.id)
    return workouts


def generate_session_workouts(
    cycle: Cycle,
    week: CycleWeek,
    session_type: SessionType | str,
    studios: Sequence[Studio],
    api_key: str,
) -> List[Workout]:
    """Generate one workout per studio for a week's session in a single request."""
    messages = [
        {
            "role": "system",
            "content": (
                "You are a HYROX head coach writing sessions for several studios. Reply in JSON."
            ),
        },
        {"role": "user", "content": build_session_prompt(cycle, week, session_type, studios)},
    ]
    payload = _request_structured(
        api_key,
        config.PLANNER_MODEL,
        messages,
        SessionPayload,
        "session_workouts",
        "Failed to generate workouts",
    )
    workouts = reconcile_workouts(payload.workouts, cycle, week, session_type, studios)
    if not workouts:
        raise GenerationError(
            "The response contained no workouts for the requested studios",
            details={"week_number": week.week_number, "session_type": SessionType(session_type).value},
        )
    return workouts
