"""Pytest configuration and fixtures."""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from catalog import default_studios
from planner_state import PlannerState
from schemas import Cycle, CycleFocus, CycleWeek


def make_completion(content):
    """Chat completion stand-in whose first choice carries `content`."""
    completion = MagicMock()
    message = MagicMock()
    message.content = content if content is None or isinstance(content, str) else json.dumps(content)
    choice = MagicMock()
    choice.message = message
    completion.choices = [choice]
    return completion


@pytest.fixture
def fake_openai():
    """Patch the OpenAI client class used by generation_core.

    Tests set `fake_openai.reply` to the JSON payload (dict or raw string) the
    service should answer with, and inspect `fake_openai.create` afterwards.
    """
    with patch("generation_core.OpenAI") as openai_cls:
        create = openai_cls.return_value.chat.completions.create
        state = SimpleNamespace(openai_cls=openai_cls, create=create, reply=None)

        def _answer(*args, **kwargs):
            return make_completion(state.reply)

        create.side_effect = _answer
        yield state


@pytest.fixture
def studios():
    return default_studios()


@pytest.fixture
def cycle():
    return Cycle(
        id="c1",
        name="Winter Hyrox Prep",
        focus=CycleFocus.HYROX,
        duration_weeks=4,
        start_date="2026-01-05T00:00:00+00:00",
        weeks=[
            CycleWeek(week_number=1, focus="Accumulation", theme="zone2", volume=60, intensity=40),
            CycleWeek(week_number=2, focus="Build", theme="threshold", volume=70, intensity=55),
            CycleWeek(week_number=3, focus="Peak", theme="race_prep", volume=75, intensity=80),
            CycleWeek(week_number=4, focus="Deload", theme="recovery", volume=35, intensity=30),
        ],
    )


@pytest.fixture
def planner(cycle):
    return PlannerState(active_cycle=cycle)


@pytest.fixture
def session_reply():
    return {
        "workouts": [
            {
                "studioId": "s1",
                "title": "Row Engine Builder",
                "warmup": "500m easy row",
                "skillStrength": "Pull-up technique",
                "wod": "5 x 1000m row @ threshold",
                "cooldown": "Mobility",
                "scalingNotes": "Reduce to 750m",
                "coachNotes": "8 rowers for 15 athletes: run in two heats",
                "scientificReferences": ["Seiler & Tønnessen (2009)"],
            },
            {
                "studioId": "s2",
                "title": "Bike Engine Builder",
                "warmup": "Easy bike",
                "skillStrength": "Box step-ups",
                "wod": "5 x 3min bike @ threshold",
                "cooldown": "Stretch",
                "scalingNotes": "Lower cadence",
                "coachNotes": "4 bikes: rotate through stations",
            },
        ]
    }
