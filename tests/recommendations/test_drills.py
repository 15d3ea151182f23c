"""Tests for the drill catalog."""

import pytest

from catcher_coach.models.workouts import EquipmentTier
from catcher_coach.recommendations.drills import (
    CATALOG_DRILLS,
    SampleDrillCatalog,
    StaticDrillCatalog,
    pack_drills,
)


@pytest.fixture
def catalog() -> StaticDrillCatalog:
    return StaticDrillCatalog()


class TestSampleCatalog:
    """Test the fixed sample drill set."""

    def test_receiving_split(self):
        drills = SampleDrillCatalog().get_drills_for_category("receiving", 15)
        assert [(d.code, d.duration) for d in drills] == [("basic_receiving", 9), ("framing_practice", 6)]

    def test_education_takes_full_duration(self):
        drills = SampleDrillCatalog().get_drills_for_category("education", 7)
        assert [(d.code, d.duration) for d in drills] == [("game_situations", 7)]

    def test_unknown_category(self):
        assert SampleDrillCatalog().get_drills_for_category("baserunning", 10) == []


class TestFindDrills:
    """Test catalog filtering."""

    def test_catalog_size(self, catalog):
        assert len(catalog) == len(CATALOG_DRILLS) == 14

    def test_get_drill(self, catalog):
        assert catalog.get_drill("blocking_004").name == "Bare Hand Blocking"
        assert catalog.get_drill("missing") is None

    def test_equipment_filter(self, catalog):
        drills = catalog.find_drills(category="receiving", equipment_level=EquipmentTier.BASIC)
        assert [d.code for d in drills] == ["receiving_001", "receiving_003", "receiving_011"]

    def test_difficulty_filter(self, catalog):
        drills = catalog.find_drills(category="throwing", max_difficulty=2)
        assert all(d.difficulty <= 2 for d in drills)
        assert "throwing_005" not in [d.code for d in drills]

    def test_subcategory_filter(self, catalog):
        drills = catalog.find_drills(subcategory="glove_load")
        assert {d.code for d in drills} == {"receiving_003", "receiving_011"}

    def test_age_filter(self, catalog):
        drills = catalog.find_drills(category="throwing", age=14)
        assert "throwing_005" not in [d.code for d in drills]

    def test_sorted_easiest_first(self, catalog):
        drills = catalog.find_drills(category="receiving")
        keys = [(d.difficulty, d.duration) for d in drills]
        assert keys == sorted(keys)


class TestGetDrillsForCategory:
    """Test selecting and packing drills into a phase."""

    def test_packs_to_exact_duration(self, catalog):
        drills = catalog.get_drills_for_category("receiving", 10, EquipmentTier.BASIC, "beginner")
        assert [(d.code, d.duration) for d in drills] == [
            ("receiving_001", 3),
            ("receiving_003", 3),
            ("receiving_011", 4),
        ]

    def test_catalog_records_are_not_modified(self, catalog):
        catalog.get_drills_for_category("receiving", 10, EquipmentTier.BASIC, "beginner")
        assert catalog.get_drill("receiving_011").duration == 3

    def test_short_phase_shortens_first_drill(self, catalog):
        drills = catalog.get_drills_for_category("receiving", 2, EquipmentTier.BASIC, "beginner")
        assert [(d.code, d.duration) for d in drills] == [("receiving_001", 2)]

    def test_zero_minutes(self, catalog):
        assert catalog.get_drills_for_category("receiving", 0, EquipmentTier.BASIC, "beginner") == []

    def test_experience_caps_difficulty(self, catalog):
        drills = catalog.get_drills_for_category("throwing", 20, EquipmentTier.PREMIUM, "expert")
        assert [d.code for d in drills] == ["throwing_001", "throwing_002", "throwing_005"]
        assert sum(d.duration for d in drills) == 20

        beginner = catalog.get_drills_for_category("throwing", 20, EquipmentTier.PREMIUM, "beginner")
        assert "throwing_005" not in [d.code for d in beginner]

    def test_falls_back_to_sample_drills(self, catalog):
        """Minimal equipment matches no catalog drill."""
        drills = catalog.get_drills_for_category("receiving", 10, EquipmentTier.MINIMAL, "beginner")
        assert [(d.code, d.duration) for d in drills] == [("basic_receiving", 6), ("framing_practice", 4)]

    def test_young_athlete_falls_back(self):
        catalog = StaticDrillCatalog(athlete_age=10)
        drills = catalog.get_drills_for_category("receiving", 10, EquipmentTier.BASIC, "beginner")
        assert drills[0].code == "basic_receiving"

    @pytest.mark.parametrize("category", ["receiving", "throwing", "blocking", "education"])
    @pytest.mark.parametrize("duration", [1, 3, 4, 7, 12, 20, 25])
    def test_phase_total_matches_duration(self, catalog, category, duration):
        drills = catalog.get_drills_for_category(
            category, duration, EquipmentTier.INTERMEDIATE, "intermediate"
        )
        assert sum(d.duration for d in drills) == duration


class TestPackDrills:
    def test_skips_drills_that_do_not_fit(self):
        by_code = {d.code: d for d in CATALOG_DRILLS}
        candidates = [by_code["education_001"], by_code["education_003"]]
        packed = pack_drills(candidates, 4)
        assert [(d.code, d.duration) for d in packed] == [("education_003", 4)]
