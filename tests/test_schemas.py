"""Tests for domain models and their normalisation of service output."""

import pytest

from catalog import DEFAULT_STUDIOS, SESSION_CONFIGS, default_studios, session_config, theme_info
from exceptions import WeekNotFoundError
from schemas import (
    CycleWeek,
    CycleWeekDraft,
    Equipment,
    EquipmentCategory,
    SessionType,
    Studio,
    StudioAnalysis,
    WeeklyTheme,
    Workout,
    new_id,
)


class TestEquipment:
    def test_unknown_category_becomes_other(self):
        assert Equipment(name="Sled", category="machines").category == EquipmentCategory.OTHER

    def test_category_is_case_insensitive(self):
        assert Equipment(name="Rower", category=" Cardio ").category == EquipmentCategory.CARDIO

    def test_quantity_is_rounded_and_non_negative(self):
        assert Equipment(name="Box", quantity=2.6).quantity == 3
        assert Equipment(name="Box", quantity=-4).quantity == 0
        assert Equipment(name="Box", quantity=None).quantity == 1
        assert Equipment(name="Box", quantity=float("inf")).quantity == 1


class TestStudio:
    def test_accepts_camel_case_keys(self):
        studio = Studio.model_validate(DEFAULT_STUDIOS[0])
        assert studio.size_sqm == 120
        assert studio.max_capacity == 15
        assert studio.equipment_names() == ["Concept2 Rower", "Barbell", "Pullup Rig"]

    def test_dumps_snake_case(self):
        data = Studio(name="Box", size_sqm=50).model_dump()
        assert "size_sqm" in data
        assert "photo_url" in data

    def test_new_studio_gets_an_id(self):
        assert len(Studio(name="Box").id) == 9

    def test_default_studios_are_independent_copies(self):
        first = default_studios()
        first[0].equipment.clear()
        assert len(default_studios()[0].equipment) == 3


class TestCycleWeek:
    def test_volume_and_intensity_are_clamped(self):
        week = CycleWeek(week_number=1, volume=140, intensity=-5)
        assert week.volume == 100
        assert week.intensity == 0

    def test_unknown_theme_falls_back_to_intervals(self):
        assert CycleWeek(week_number=1, theme="hypertrophy").theme == WeeklyTheme.INTERVALS

    def test_week_number_must_be_positive(self):
        with pytest.raises(ValueError):
            CycleWeek(week_number=0)

    def test_draft_accepts_any_week_number(self):
        assert CycleWeekDraft(week_number=0).week_number == 0

    def test_non_finite_percentages_become_zero(self):
        week = CycleWeek(week_number=1, volume=float("nan"), intensity=float("inf"))
        assert week.volume == 0
        assert week.intensity == 0


class TestStudioAnalysis:
    def test_non_finite_size_becomes_zero(self):
        assert StudioAnalysis(size_estimate=float("inf")).size_estimate == 0
        assert StudioAnalysis(size_estimate=float("nan")).size_estimate == 0

    def test_negative_size_becomes_zero(self):
        assert StudioAnalysis(size_estimate=-12).size_estimate == 0


class TestCycle:
    def test_get_week(self, cycle):
        assert cycle.get_week(3).focus == "Peak"

    def test_get_missing_week_raises(self, cycle):
        with pytest.raises(WeekNotFoundError) as exc_info:
            cycle.get_week(12)
        assert exc_info.value.details == {"week_number": 12}


class TestWorkout:
    def test_key_is_week_and_session(self):
        workout = Workout(studio_id="s1", cycle_id="c1", week_number=2, session_type="strength")
        assert workout.key == (2, SessionType.STRENGTH)


class TestCatalog:
    def test_every_session_type_has_a_config(self):
        assert set(SESSION_CONFIGS) == set(SessionType)
        assert session_config("class").name == "HYROX Class"

    def test_every_theme_has_info(self):
        for theme in WeeklyTheme:
            assert theme_info(theme)["scientific_basis"]


def test_new_id_alphabet():
    value = new_id()
    assert len(value) == 9
    assert value.isalnum()
    assert value == value.lower()
