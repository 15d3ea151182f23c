"""Tests for the workout generation engine."""

import pytest

from catcher_coach.models.profile import UserProfile
from catcher_coach.models.skills import SKILL_CODES
from catcher_coach.models.workouts import EquipmentTier, ExperienceLevel, PhaseName, WorkoutPlan
from catcher_coach.recommendations.drills import StaticDrillCatalog
from catcher_coach.recommendations.workout import (
    CATEGORY_TIPS,
    FALLBACK_MESSAGE,
    MOTIVATIONAL_MESSAGES,
    TIME_TEMPLATES,
    WorkoutGenerator,
)


class BrokenCatalog:
    """Catalog whose backing store is unavailable."""

    def get_drills_for_category(self, category, duration, equipment_level, experience_level):
        raise RuntimeError("catalog offline")


@pytest.fixture
def generator(settings, clock) -> WorkoutGenerator:
    return WorkoutGenerator(settings=settings, clock=clock)


def phase_minutes(phase) -> int:
    return sum(drill.duration for drill in phase.drills)


class TestTimeAllocation:
    """Test duration snapping and scaling."""

    def test_45_minute_template(self, generator):
        allocation = generator.calculate_time_allocation(45)
        assert allocation.to_dict() == {
            "warmup": 5,
            "weakest_category": 20,
            "other_categories": 12,
            "education": 6,
            "video_review": 2,
        }

    @pytest.mark.parametrize("size", sorted(TIME_TEMPLATES))
    def test_templates_sum_to_their_size(self, size):
        assert TIME_TEMPLATES[size].total == size

    def test_snaps_to_nearest_template(self, generator):
        assert generator.calculate_time_allocation(22).total == 15
        assert generator.calculate_time_allocation(37).total == 30
        assert generator.calculate_time_allocation(40).total == 45
        assert generator.calculate_time_allocation(5).total == 15

    def test_scales_above_largest_template(self, generator):
        assert abs(generator.calculate_time_allocation(90).total - 90) <= 6
        assert generator.calculate_time_allocation(120).total == 120

    def test_scaled_allocation_keeps_every_bucket(self, generator):
        allocation = generator.calculate_time_allocation(90)
        assert allocation.cooldown == 3
        assert allocation.video_review == 8


class TestEquipmentLevel:
    """Test equipment tier classification."""

    def test_tiers(self, generator):
        assert generator.assess_equipment_level([]) == EquipmentTier.MINIMAL
        assert generator.assess_equipment_level(None) == EquipmentTier.MINIMAL
        assert generator.assess_equipment_level(["tennis_balls"]) == EquipmentTier.BASIC
        assert generator.assess_equipment_level(["tennis_balls", "catchers_gear"]) == EquipmentTier.INTERMEDIATE
        assert generator.assess_equipment_level(
            ["tennis_balls", "catchers_gear", "home_plate"]
        ) == EquipmentTier.ADVANCED
        assert generator.assess_equipment_level(
            ["tennis_balls", "catchers_gear", "home_plate", "l_screen", "cones"]
        ) == EquipmentTier.PREMIUM

    def test_missing_base_item_drops_tier(self, generator):
        """Gear without tennis balls does not satisfy any tier above minimal."""
        assert generator.assess_equipment_level(["catchers_gear", "home_plate"]) == EquipmentTier.MINIMAL

    def test_adding_equipment_never_lowers_tier(self, generator):
        items = ["cones", "home_plate", "catchers_gear", "l_screen", "tennis_balls", "bucket"]
        owned = []
        previous_rank = generator.assess_equipment_level(owned).rank
        for item in items:
            owned.append(item)
            rank = generator.assess_equipment_level(owned).rank
            assert rank >= previous_rank
            previous_rank = rank
        assert previous_rank == EquipmentTier.PREMIUM.rank


class TestUserAnalysis:
    """Test category averages and weakest/strongest selection."""

    def test_unweighted_category_averages(self, generator, sample_assessment):
        averages = generator.calculate_category_averages(sample_assessment)
        assert averages == {"receiving": 6.0, "throwing": 4.0, "blocking": 5.0, "education": 6.0}

    def test_single_strong_category(self, generator):
        scores = {code: 3 for code in SKILL_CODES}
        scores["blocking_overall"] = 8
        averages = generator.calculate_category_averages(scores)
        assert generator.find_strongest_category(averages).category == "blocking"
        # Three-way tie at 3.0; the earliest category wins
        assert generator.find_weakest_category(averages).category == "receiving"

    def test_focus_areas(self, generator, sample_assessment):
        averages = generator.calculate_category_averages(sample_assessment)
        areas = generator.identify_focus_areas(averages)
        assert [(a.category, a.priority) for a in areas] == [("throwing", "medium"), ("blocking", "medium")]

    def test_focus_area_below_proficient(self, generator):
        areas = generator.identify_focus_areas({"receiving": 3.5, "throwing": 7.0})
        assert areas[0].to_dict() == {"category": "receiving", "priority": "high", "reason": "below_proficient"}

    @pytest.mark.parametrize("average,years,expected", [
        (8.5, 6, ExperienceLevel.EXPERT),
        (8.5, 3, ExperienceLevel.ADVANCED),
        (5.0, 2, ExperienceLevel.INTERMEDIATE),
        (5.0, 0, ExperienceLevel.BEGINNER),
        (3.0, 10, ExperienceLevel.BEGINNER),
    ])
    def test_experience_level(self, average, years, expected):
        profile = UserProfile(years_experience=years)
        averages = {"receiving": average, "throwing": average, "blocking": average, "education": average}
        assert WorkoutGenerator.determine_experience_level(profile, averages) == expected

    def test_years_catching_alias(self):
        assert UserProfile.model_validate({"years_catching": 4}).years_experience == 4


class TestGenerateWorkout:
    """Test end-to-end plan generation."""

    def test_45_minute_plan(self, generator, sample_assessment):
        result = generator.generate_workout(
            user_profile={"user_id": "user-1"},
            skills_assessment=sample_assessment,
            available_equipment=["tennis_balls"],
            planned_duration=45,
        )
        assert result.success
        plan = result.workout
        assert plan.phase_names == [
            PhaseName.WARMUP,
            PhaseName.MAIN_WORK,
            PhaseName.SECONDARY_WORK,
            PhaseName.EDUCATION,
            PhaseName.VIDEO_REVIEW,
        ]
        assert plan.planned_duration == 45

    def test_main_work_targets_weakest(self, generator, sample_assessment):
        plan = generator.generate_workout(skills_assessment=sample_assessment, planned_duration=45).workout
        main = plan.get_phase(PhaseName.MAIN_WORK)
        assert main.target_category == "throwing"
        assert main.target_score == 4.0
        assert main.improvement_focus == "Improve throwing from 4/10"
        assert [d.code for d in main.drills] == ["exchange_drill", "footwork_drill"]
        assert phase_minutes(main) == 20

    def test_secondary_work_covers_other_categories(self, generator, sample_assessment):
        plan = generator.generate_workout(skills_assessment=sample_assessment, planned_duration=45).workout
        secondary = plan.get_phase(PhaseName.SECONDARY_WORK)
        categories = [d.category for d in secondary.drills]
        assert "throwing" not in categories
        # Worst first: blocking (5.0) before receiving and education (6.0)
        assert categories[0] == "blocking"
        assert phase_minutes(secondary) == 12

    def test_education_content_matches_level(self, generator, sample_assessment):
        plan = generator.generate_workout(skills_assessment=sample_assessment, planned_duration=45).workout
        education = plan.get_phase(PhaseName.EDUCATION)
        assert education.drills[0].name == "Advanced Game Management"
        assert phase_minutes(education) == 6

    def test_video_review_can_be_disabled(self, generator, sample_assessment):
        plan = generator.generate_workout(
            skills_assessment=sample_assessment,
            planned_duration=45,
            preferences={"include_video_review": False},
        ).workout
        assert PhaseName.VIDEO_REVIEW not in plan
        assert plan.planned_duration == 43

    def test_cooldown_included_at_60_minutes(self, generator, sample_assessment):
        plan = generator.generate_workout(skills_assessment=sample_assessment, planned_duration=60).workout
        assert plan.phase_names[-1] == PhaseName.COOLDOWN
        assert plan.planned_duration == 60

    def test_missing_assessment_uses_neutral_scores(self, generator):
        result = generator.generate_workout(planned_duration=30)
        assert result.success
        assert result.user_analysis.weakest_category.category == "receiving"
        assert result.user_analysis.weakest_category.score == 5.0
        assert result.user_analysis.overall_skill_level == 5.0

    def test_default_duration(self, generator, sample_assessment):
        result = generator.generate_workout(skills_assessment=sample_assessment)
        assert result.metadata["total_planned_duration"] == 30

    def test_whole_number_float_duration(self, generator, sample_assessment):
        result = generator.generate_workout(skills_assessment=sample_assessment, planned_duration=45.0)
        assert result.success
        assert result.metadata["total_planned_duration"] == 45

    def test_overall_skill_level_rounds_half_up(self, generator, sample_assessment):
        # (6 + 4 + 5 + 6) / 4 = 5.25
        result = generator.generate_workout(skills_assessment=sample_assessment, planned_duration=30)
        assert result.user_analysis.overall_skill_level == 5.3

    def test_equipment_defaults_to_profile(self, generator, sample_assessment):
        result = generator.generate_workout(
            user_profile={"equipment": ["tennis_balls", "catchers_gear"]},
            skills_assessment=sample_assessment,
        )
        assert result.metadata["equipment_level"] == "intermediate"

    def test_metadata(self, generator, sample_assessment, clock):
        result = generator.generate_workout(
            skills_assessment=sample_assessment,
            available_equipment=["tennis_balls"],
            planned_duration=45,
        )
        metadata = result.metadata
        assert metadata["equipment_level"] == "basic"
        assert metadata["total_planned_duration"] == 45
        assert metadata["workout_complexity"] == 7
        assert metadata["generation_timestamp"] == clock.now.isoformat()
        assert metadata["assessment_date"] == "2024-03-01T00:00:00+00:00"
        assert result.generated_at == clock.now

    def test_coaching_guidance(self, generator, sample_assessment):
        plan = generator.generate_workout(skills_assessment=sample_assessment, planned_duration=30).workout
        guidance = plan.coaching_guidance
        assert guidance.focus_reminders == list(CATEGORY_TIPS["throwing"])
        assert "Show improvement in throwing technique" in guidance.success_criteria
        candidates = [m.format(weakest="throwing", overall="5.3") for m in MOTIVATIONAL_MESSAGES]
        assert guidance.motivational_message in candidates

    def test_motivational_message_is_deterministic(self, generator, sample_assessment):
        analysis = generator.analyze_user_state(None, sample_assessment)
        first = generator.generate_motivational_message(analysis, seed="plan-1")
        second = generator.generate_motivational_message(analysis, seed="plan-1")
        assert first == second

    def test_to_dict_round_trips_plan(self, generator, sample_assessment):
        data = generator.generate_workout(skills_assessment=sample_assessment, planned_duration=45).to_dict()
        assert data["success"] is True
        rebuilt = WorkoutPlan.from_dict(data["workout"])
        assert rebuilt.planned_duration == 45
        assert rebuilt.get_phase(PhaseName.MAIN_WORK).target_category == "throwing"

    def test_with_static_catalog(self, settings, clock, sample_assessment):
        generator = WorkoutGenerator(catalog=StaticDrillCatalog(), settings=settings, clock=clock)
        plan = generator.generate_workout(
            skills_assessment=sample_assessment,
            available_equipment=["tennis_balls", "catchers_gear"],
            planned_duration=45,
        ).workout
        main = plan.get_phase(PhaseName.MAIN_WORK)
        assert [d.code for d in main.drills] == ["throwing_001"]
        assert phase_minutes(main) == 20
        assert phase_minutes(plan.get_phase(PhaseName.SECONDARY_WORK)) == 12


class TestFallback:
    """Test that generation never dead-ends."""

    def test_broken_catalog_returns_fallback(self, settings, clock, sample_assessment):
        generator = WorkoutGenerator(catalog=BrokenCatalog(), settings=settings, clock=clock)
        result = generator.generate_workout(skills_assessment=sample_assessment, planned_duration=30)
        assert not result.success
        assert result.error == "catalog offline"
        plan = result.plan
        assert plan is result.fallback_workout
        assert plan.fallback
        assert plan.message == FALLBACK_MESSAGE
        assert plan.phase_names == [PhaseName.WARMUP, PhaseName.MAIN_WORK, PhaseName.COOLDOWN]
        assert [p.total_duration for p in plan] == [4, 21, 4]

    def test_invalid_duration(self, generator, sample_assessment):
        result = generator.generate_workout(skills_assessment=sample_assessment, planned_duration=0)
        assert not result.success
        assert "positive number of minutes" in result.error
        assert [p.total_duration for p in result.fallback_workout] == [2, 0, 1]

    def test_non_integer_duration(self, generator, sample_assessment):
        result = generator.generate_workout(skills_assessment=sample_assessment, planned_duration="thirty")
        assert not result.success
        assert result.fallback_workout.fallback

    def test_failed_result_to_dict(self, settings, clock):
        generator = WorkoutGenerator(catalog=BrokenCatalog(), settings=settings, clock=clock)
        data = generator.generate_workout(planned_duration=30).to_dict()
        assert data["success"] is False
        assert data["fallback_workout"]["fallback"] is True
        assert data["fallback_workout"]["message"] == FALLBACK_MESSAGE
