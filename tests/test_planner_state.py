"""Tests for planner state: studios, cycles, sessions and persistence."""

import json

import pytest

from catalog import HYROX_EQUIPMENT
from exceptions import (
    GenerationError,
    InvalidCycleError,
    NoActiveCycleError,
    NoStudiosError,
    StudioNotFoundError,
    WeekNotFoundError,
)
from planner_state import PlannerState, load_state, save_state
from schemas import CycleFocus, EquipmentCategory, SessionType


class TestStudios:
    def test_seeded_with_default_studios(self):
        state = PlannerState()
        assert [s.id for s in state.studios] == ["s1", "s2"]

    def test_get_unknown_studio_raises(self, planner):
        with pytest.raises(StudioNotFoundError):
            planner.get_studio("nope")

    def test_add_studio_from_photo(self, planner, fake_openai):
        fake_openai.reply = {
            "sizeEstimate": 100,
            "equipment": [{"name": "Kettlebell", "quantity": 12, "category": "weight"}],
        }

        studio = planner.add_studio_from_photo("  ", "QUJD", "sk-test", mime_type="image/png")

        assert studio.name == "New Studio"
        assert studio.location == "Auto-detected"
        assert studio.size_sqm == 100
        assert studio.max_capacity == 16
        assert studio.equipment[0].category == EquipmentCategory.WEIGHT
        assert studio.photo_url == "data:image/png;base64,QUJD"
        assert planner.studios[-1] is studio

    def test_add_studio_from_photo_with_non_finite_size(self, planner, fake_openai):
        fake_openai.reply = '{"sizeEstimate": Infinity, "equipment": []}'

        studio = planner.add_studio_from_photo("Annex", "QUJD", "sk-test")

        assert studio.size_sqm == 0
        assert studio.max_capacity == 0

    def test_remove_studio_drops_its_workouts(self, planner, fake_openai, session_reply):
        fake_openai.reply = session_reply
        planner.generate_session(1, "endurance", "sk-test")

        planner.remove_studio("s1")

        assert [s.id for s in planner.studios] == ["s2"]
        assert {w.studio_id for w in planner.workouts} == {"s2"}

    def test_update_studio_equipment(self, planner):
        studio = planner.update_studio_equipment(
            "s2", [{"name": "Sled", "quantity": 1, "category": "other"}]
        )
        assert studio.equipment_names() == ["Sled"]

    def test_equipment_pool(self, planner):
        pool = planner.equipment_pool()
        assert "Barbell" in pool
        assert set(HYROX_EQUIPMENT) <= set(pool)
        assert pool == sorted(pool, key=str.lower)
        assert pool.count("Concept2 Rower") == 1


class TestCreateCycle:
    def test_rejects_unsupported_duration(self, fake_openai):
        state = PlannerState()
        with pytest.raises(InvalidCycleError):
            state.create_cycle("Prep", "hyrox", 5, "sk-test")
        fake_openai.create.assert_not_called()

    def test_creates_cycle_and_clears_workouts(self, planner, fake_openai, session_reply):
        fake_openai.reply = session_reply
        planner.generate_session(1, "endurance", "sk-test")
        fake_openai.reply = {
            "weeks": [{"weekNumber": n, "focus": f"Week {n}", "theme": "intervals"} for n in range(1, 5)]
        }

        cycle = planner.create_cycle(
            "Spring Block", "endurance", 4, "sk-test", available_equipment=[" Sled ", "", "Sled"]
        )

        assert planner.active_cycle is cycle
        assert cycle.focus == CycleFocus.ENDURANCE
        assert cycle.duration_weeks == 4
        assert len(cycle.weeks) == 4
        assert cycle.start_date
        assert cycle.available_equipment == ["Sled"]
        assert planner.workouts == []

    def test_empty_generated_cycle_is_rejected(self, fake_openai):
        state = PlannerState()
        fake_openai.reply = {"weeks": []}
        with pytest.raises(InvalidCycleError):
            state.create_cycle("Prep", "hyrox", 4, "sk-test")
        assert state.active_cycle is None

    def test_set_cycle_equipment(self, planner):
        planner.set_cycle_equipment(["Box"])
        assert planner.active_cycle.available_equipment == ["Box"]
        planner.set_cycle_equipment([])
        assert planner.active_cycle.available_equipment is None

    def test_set_cycle_equipment_without_cycle(self):
        with pytest.raises(NoActiveCycleError):
            PlannerState().set_cycle_equipment(["Box"])


class TestGenerateSession:
    def test_requires_active_cycle(self, fake_openai):
        with pytest.raises(NoActiveCycleError):
            PlannerState().generate_session(1, "endurance", "sk-test")

    def test_requires_studios(self, cycle, fake_openai):
        state = PlannerState(studios=[], active_cycle=cycle)
        with pytest.raises(NoStudiosError):
            state.generate_session(1, "endurance", "sk-test")

    def test_unknown_week(self, planner, fake_openai):
        with pytest.raises(WeekNotFoundError):
            planner.generate_session(7, "endurance", "sk-test")
        fake_openai.create.assert_not_called()

    def test_regenerating_replaces_same_key_only(self, planner, fake_openai, session_reply):
        fake_openai.reply = session_reply
        planner.generate_session(1, "endurance", "sk-test")
        planner.generate_session(1, "strength", "sk-test")
        first_ids = {w.id for w in planner.workouts_for(1, "endurance")}

        planner.generate_session(1, SessionType.ENDURANCE, "sk-test")

        endurance = planner.workouts_for(1, "endurance")
        assert len(endurance) == 2
        assert not first_ids & {w.id for w in endurance}
        assert len(planner.workouts_for(1, "strength")) == 2
        assert len(planner.workouts) == 4

    def test_failed_regeneration_keeps_existing_session(self, planner, fake_openai, session_reply):
        fake_openai.reply = session_reply
        planner.generate_session(1, "endurance", "sk-test")
        fake_openai.reply = {"workouts": [{"studioId": "ghost"}]}

        with pytest.raises(GenerationError):
            planner.generate_session(1, "endurance", "sk-test")

        assert len(planner.workouts_for(1, "endurance")) == 2

    def test_has_generated(self, planner, fake_openai, session_reply):
        fake_openai.reply = session_reply
        assert not planner.has_generated(2, "class")
        planner.generate_session(2, "class", "sk-test")
        assert planner.has_generated(2, "class")
        assert not planner.has_generated(3, "class")


class TestPersistence:
    def test_missing_file_yields_seed_state(self, tmp_path):
        state = load_state(tmp_path / "missing.json")
        assert [s.id for s in state.studios] == ["s1", "s2"]
        assert state.active_cycle is None

    def test_unreadable_file_yields_seed_state(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{broken", encoding="utf-8")
        assert [s.id for s in load_state(path).studios] == ["s1", "s2"]

    def test_save_and_load(self, tmp_path, planner, fake_openai, session_reply):
        fake_openai.reply = session_reply
        planner.generate_session(3, "class", "sk-test")
        path = save_state(planner, tmp_path / "nested" / "state.json")

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["active_cycle"]["duration_weeks"] == 4
        assert data["studios"][0]["size_sqm"] == 120

        loaded = load_state(path)
        assert loaded.active_cycle.name == planner.active_cycle.name
        assert loaded.workouts_for(3, "class")[0].title == "Row Engine Builder"
