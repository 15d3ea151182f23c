"""Tests for the skills assessment analyzer."""

import pytest

from catcher_coach.analysis.assessment import (
    AssessmentAnalyzer,
    AssessmentAnalysisResult,
    calculate_time_between,
    categorize_priority,
    classify_trend,
    describe_duration,
    describe_skill_change,
)
from catcher_coach.exceptions import AssessmentValidationError
from catcher_coach.models.skills import SKILL_CODES, Assessment, SkillsConfig, round_tenth


@pytest.fixture
def analyzer(settings, clock) -> AssessmentAnalyzer:
    return AssessmentAnalyzer(settings=settings, clock=clock)


def uniform(score: int) -> dict:
    return {code: score for code in SKILL_CODES}


class TestValidation:
    """Test completeness, range and plausibility checks."""

    def test_valid_assessment(self, analyzer, sample_assessment):
        result = analyzer.validate_assessment(sample_assessment)
        assert result.is_valid
        assert result.errors == []

    def test_missing_fields_are_all_reported(self, analyzer, sample_assessment):
        """Every missing skill is listed, not just the first."""
        del sample_assessment["blocking_overall"]
        del sample_assessment["education_pitch_calling"]
        result = analyzer.validate_assessment(sample_assessment)
        assert not result.is_valid
        assert "Missing required field: blocking_overall" in result.errors
        assert "Missing required field: education_pitch_calling" in result.errors

    def test_out_of_range_score(self, analyzer, sample_assessment):
        sample_assessment["blocking_overall"] = 11
        result = analyzer.validate_assessment(sample_assessment)
        assert result.errors == ["blocking_overall score 11 is outside valid range (1-10)"]

    def test_non_integer_score(self, analyzer, sample_assessment):
        sample_assessment["throwing_accuracy"] = "fast"
        result = analyzer.validate_assessment(sample_assessment)
        assert not result.is_valid
        assert "throwing_accuracy score 'fast' is not a whole number" in result.errors

    def test_numeric_strings_accepted(self, analyzer, sample_assessment):
        sample_assessment["throwing_accuracy"] = "4"
        assert analyzer.validate_assessment(sample_assessment).is_valid

    def test_uniform_scores_rejected(self, analyzer):
        result = analyzer.validate_assessment(uniform(5))
        assert not result.is_valid
        assert result.errors == ["Suspiciously uniform scores detected - assessment may not be genuine"]

    def test_nine_identical_scores_rejected(self, analyzer, sample_assessment):
        """Nine or more identical scores out of thirteen is suspicious."""
        for code in SKILL_CODES[:9]:
            sample_assessment[code] = 6
        result = analyzer.validate_assessment(sample_assessment)
        assert "Suspiciously uniform scores detected - assessment may not be genuine" in result.errors

    def test_eight_identical_scores_allowed(self, analyzer, sample_assessment):
        scores = dict(sample_assessment)
        for code in SKILL_CODES[:8]:
            scores[code] = 6
        for code in SKILL_CODES[8:]:
            scores[code] = 7 if code != "education_pitcher_relations" else 4
        assert analyzer.validate_assessment(scores).is_valid

    def test_extreme_pattern_rejected(self, analyzer):
        result = analyzer.validate_assessment(uniform(10))
        assert "Extreme score pattern detected - please provide more realistic assessments" in result.errors
        assert len(result.errors) == 2

    def test_high_confidence_flag(self, analyzer):
        flags = analyzer.detect_warning_flags([9] * 10 + [5, 6, 7])
        assert flags == ["high_confidence_pattern"]

    def test_low_confidence_flag(self, analyzer):
        flags = analyzer.detect_warning_flags([2] * 10 + [5, 6, 7])
        assert flags == ["low_confidence_pattern"]

    def test_no_flags_for_mixed_scores(self, analyzer, sample_assessment):
        assert analyzer.validate_assessment(sample_assessment).warning_flags == []


class TestCategoryAnalysis:
    """Test weighted category averages and overall score."""

    def test_weighted_category_averages(self, analyzer, sample_assessment):
        analysis = analyzer.calculate_category_analysis(sample_assessment)
        categories = analysis.categories
        assert list(categories) == ["receiving", "throwing", "blocking", "education"]
        assert categories["receiving"].average_score == 6.0
        # (4*1.1 + 3*1.2 + 5*0.9 + 4*1.1) / 4.3
        assert categories["throwing"].average_score == 3.9
        assert categories["blocking"].average_score == 5.0
        assert categories["education"].average_score == 6.0

    def test_overall_uses_importance_weights(self, analyzer, sample_assessment):
        analysis = analyzer.calculate_category_analysis(sample_assessment)
        assert analysis.overall_average == 5.2
        assert analysis.overall_proficiency.level == "Average"

    def test_all_fives(self, analyzer):
        analysis = analyzer.calculate_category_analysis(uniform(5))
        for result in analysis.categories.values():
            assert result.average_score == 5.0
            assert result.proficiency.level == "Average"
        assert analysis.overall_average == 5.0

    def test_missing_scores_default_to_neutral(self, analyzer):
        analysis = analyzer.calculate_category_analysis({"blocking_overall": 9})
        assert analysis.categories["blocking"].average_score == 9.0
        assert analysis.categories["receiving"].average_score == 5.0

    def test_proficiency_rounds_half_up(self):
        config = SkillsConfig()
        assert config.proficiency_for(6.5).score == 7
        assert config.proficiency_for(6.49).score == 6
        assert config.proficiency_for(0.2).score == 1

    def test_assessment_date_defaults_to_clock(self, analyzer, clock):
        analysis = analyzer.calculate_category_analysis(uniform(5))
        assert analysis.assessment_date == clock.now

    def test_category_average_rounds_half_up(self, analyzer, sample_assessment):
        # Equal receiving weights: (4 + 4 + 5 + 4) / 4 = 4.25
        sample_assessment.update({
            "receiving_glove_move": 4,
            "receiving_glove_load": 4,
            "receiving_setups": 5,
            "receiving_presentation": 4,
        })
        result = analyzer.analyze(sample_assessment)
        assert result.success
        assert result.category_analysis.categories["receiving"].average_score == 4.3

    def test_round_tenth(self):
        assert round_tenth(4.25) == 4.3
        assert round_tenth(6.75) == 6.8
        assert round_tenth(3.24) == 3.2
        assert round_tenth(5.0) == 5.0

    @pytest.mark.parametrize("code", SKILL_CODES)
    def test_raising_a_score_never_lowers_its_category(self, analyzer, sample_assessment, code):
        category = next(c.code for c in analyzer.config.categories if code in c.skill_codes)
        previous = None
        for score in range(1, 11):
            scores = dict(sample_assessment, **{code: score})
            result = analyzer.calculate_category_analysis(scores).categories[category]
            if previous is not None:
                assert result.raw_average > previous.raw_average
                assert result.average_score >= previous.average_score
            previous = result

    @pytest.mark.parametrize("values", [
        [6, 5, 7, 6, 4, 3, 5, 4, 5, 6, 5, 7, 6],
        [2, 3, 2, 4, 8, 7, 9, 8, 5, 3, 4, 2, 6],
        [9, 8, 9, 10, 7, 8, 6, 7, 9, 8, 7, 9, 8],
        [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 1, 2, 3],
        [4, 4, 5, 4, 6, 6, 7, 5, 3, 8, 2, 6, 5],
    ])
    def test_overall_matches_importance_weighted_categories(self, analyzer, values):
        result = analyzer.analyze(dict(zip(SKILL_CODES, values)))
        assert result.success
        categories = result.category_analysis.categories.values()
        weighted = sum(c.average_score * c.importance_weight for c in categories)
        total = sum(c.importance_weight for c in categories)
        assert abs(weighted / total - result.category_analysis.overall_average) <= 0.1


class TestStrengthsAndWeaknesses:
    """Test strongest/weakest selection and notable skills."""

    def test_weakest_and_strongest(self, analyzer, sample_assessment):
        analysis = analyzer.calculate_category_analysis(sample_assessment)
        sw = analyzer.identify_strengths_and_weaknesses(analysis)
        assert sw.weakest_category["code"] == "throwing"
        # receiving and education tie at 6.0; the earlier category wins
        assert sw.strongest_category["code"] == "receiving"

    def test_single_strong_category(self, analyzer):
        scores = uniform(3)
        scores["blocking_overall"] = 8
        sw = analyzer.identify_strengths_and_weaknesses(analyzer.calculate_category_analysis(scores))
        assert sw.strongest_category["code"] == "blocking"
        assert sw.strongest_category["score"] == 8.0
        assert sw.weakest_category["code"] == "education"

    def test_critical_areas(self, analyzer, sample_assessment):
        sw = analyzer.identify_strengths_and_weaknesses(
            analyzer.calculate_category_analysis(sample_assessment)
        )
        assert [area["code"] for area in sw.critical_areas] == ["throwing_exchange"]

    def test_top_and_bottom_skills(self, analyzer, sample_assessment):
        sw = analyzer.identify_strengths_and_weaknesses(
            analyzer.calculate_category_analysis(sample_assessment)
        )
        assert len(sw.top_individual_strengths) == 3
        assert sw.top_individual_strengths[0]["score"] == 7
        assert sw.bottom_individual_weaknesses[0]["code"] == "throwing_exchange"
        assert sw.bottom_individual_weaknesses[0]["improvement_potential"] == 7


class TestProgress:
    """Test progress between two assessments."""

    def test_category_improvement(self, analyzer, sample_assessment, previous_assessment):
        progress = analyzer.calculate_progress_analysis(
            Assessment.from_mapping(sample_assessment), Assessment.from_mapping(previous_assessment)
        )
        throwing = progress.category_improvements["throwing"]
        assert throwing["previous_score"] == 3.0
        assert throwing["current_score"] == 4.0
        assert throwing["improvement"] == 1.0
        assert throwing["improvement_percentage"] == 33
        assert throwing["trend"] == "improving"
        assert progress.category_improvements["receiving"]["trend"] == "stable"
        assert progress.most_improved == "throwing"

    def test_time_between(self, analyzer, sample_assessment, previous_assessment):
        progress = analyzer.calculate_progress_analysis(
            Assessment.from_mapping(sample_assessment), Assessment.from_mapping(previous_assessment)
        )
        assert progress.time_between_assessments.days == 60
        assert progress.time_between_assessments.description == "2 months"
        assert progress.improvement_rate == round(progress.overall_improvement / 60, 2)

    def test_overall_improvement_is_antisymmetric(self, analyzer, sample_assessment, previous_assessment):
        current = Assessment.from_mapping(sample_assessment)
        previous = Assessment.from_mapping(previous_assessment)
        forward = analyzer.calculate_progress_analysis(current, previous)
        backward = analyzer.calculate_progress_analysis(previous, current)
        assert forward.overall_improvement == 0.3
        assert backward.overall_improvement == -forward.overall_improvement

    def test_skill_changes(self, analyzer, sample_assessment, previous_assessment):
        progress = analyzer.calculate_progress_analysis(
            Assessment.from_mapping(sample_assessment), Assessment.from_mapping(previous_assessment)
        )
        change = progress.individual_skill_changes["throwing_exchange"]
        assert change == {
            "previous_score": 2,
            "current_score": 3,
            "change": 1,
            "change_description": "Improved",
        }

    def test_unknown_dates_give_zero_days(self):
        assert calculate_time_between(None, None).days == 0
        assert calculate_time_between(None, None).description == "0 days"


class TestRecommendations:
    """Test training recommendations and improvement priorities."""

    def test_primary_focus_is_weakest(self, analyzer, sample_assessment):
        analysis = analyzer.calculate_category_analysis(sample_assessment)
        sw = analyzer.identify_strengths_and_weaknesses(analysis)
        recommendations = analyzer.generate_training_recommendations(analysis, sw)
        assert recommendations.primary_focus["category"] == "throwing"
        assert recommendations.primary_focus["reason"] == "Lowest scoring category with 3.9/10 average"
        assert [s["category"] for s in recommendations.secondary_focuses] == ["blocking"]
        assert recommendations.training_frequency == "3-4 times per week"

    def test_priorities_are_ranked(self, analyzer, sample_assessment):
        priorities = analyzer.calculate_improvement_priorities(
            analyzer.calculate_category_analysis(sample_assessment)
        )
        assert [p.category for p in priorities] == ["throwing", "blocking", "receiving", "education"]
        assert priorities[0].priority_level == "High"
        assert priorities[0].timeline == "6-12 weeks for noticeable improvement"
        scores = [p.priority_score for p in priorities]
        assert scores == sorted(scores, reverse=True)

    def test_strong_categories_excluded_from_priorities(self, analyzer):
        scores = uniform(9)
        scores.update({"blocking_overall": 5, "receiving_setups": 8, "throwing_accuracy": 8})
        priorities = analyzer.calculate_improvement_priorities(analyzer.calculate_category_analysis(scores))
        assert [p.category for p in priorities] == ["blocking"]

    def test_categorize_priority(self):
        assert categorize_priority(0.7) == "High"
        assert categorize_priority(0.4) == "Medium"
        assert categorize_priority(0.39) == "Low"

    def test_radar_chart(self, analyzer, sample_assessment):
        chart = analyzer.generate_radar_chart_data(analyzer.calculate_category_analysis(sample_assessment))
        assert chart["labels"] == ["Receiving", "Throwing", "Blocking", "Education & Mental Game"]
        assert chart["datasets"][0]["data"] == [6.0, 3.9, 5.0, 6.0]
        assert chart["maxValue"] == 10


class TestAnalyze:
    """Test the full analysis entry point."""

    def test_successful_analysis(self, analyzer, sample_assessment, clock):
        result = analyzer.analyze(sample_assessment)
        assert result.success
        assert result.assessment_id == "a-200"
        assert result.analyzed_at == clock.now
        assert result.progress_analysis is None
        assert result.strengths_weaknesses.weakest_category["code"] == "throwing"
        assert result.metadata["user_id"] == "user-1"

    def test_analysis_with_history(self, analyzer, sample_assessment, previous_assessment):
        result = analyzer.analyze(sample_assessment, previous_assessment)
        assert result.progress_analysis is not None
        assert result.user_insights.progress_summary.startswith("Steady progress!")

    def test_insights_mention_critical_areas(self, analyzer, sample_assessment):
        insights = analyzer.analyze(sample_assessment).user_insights
        assert insights.action_items[0] == "Priority: Address critical areas (Glove-to-Hand Exchange)"
        assert "1 skill(s) need immediate attention (scored below 4)" in insights.key_insights

    def test_rejected_assessment(self, analyzer):
        result = analyzer.analyze(uniform(5))
        assert not result.success
        assert result.category_analysis is None
        assert result.errors == ["Suspiciously uniform scores detected - assessment may not be genuine"]
        assert result.to_dict()["success"] is False

    def test_non_mapping_input_is_rejected(self, analyzer):
        result = analyzer.analyze([("receiving_glove_move", 5)])
        assert not result.success
        assert result.assessment_id is None
        assert result.errors == ["Assessment must be a mapping of skill scores, got list"]

    def test_accepts_assessment_object(self, analyzer, sample_assessment):
        result = analyzer.analyze(Assessment.from_mapping(sample_assessment))
        assert result.success
        assert result.category_analysis.overall_average == 5.2

    def test_to_dict(self, analyzer, sample_assessment):
        data = analyzer.analyze(sample_assessment).to_dict()
        assert data["success"] is True
        assert data["category_analysis"]["categories"]["throwing"]["average_score"] == 3.9
        assert data["improvement_priorities"][0]["category"] == "throwing"

    def test_export(self, analyzer, sample_assessment):
        export = analyzer.export_assessment_data(analyzer.analyze(sample_assessment))
        assert export["assessment_summary"]["overall_score"] == 5.2
        assert export["individual_skills"]["throwing_exchange"]["score"] == 3
        assert export["category_scores"]["throwing"]["proficiency"] == "Needs Improvement"

    def test_export_of_failed_analysis_raises(self, analyzer):
        with pytest.raises(AssessmentValidationError):
            analyzer.export_assessment_data(AssessmentAnalysisResult.failure("bad input"))


class TestInsightsAndComparison:
    """Test single-skill insights and comparison reports."""

    def test_skill_insight_with_progress(self, analyzer):
        insight = analyzer.get_skill_insight("throwing_exchange", 3, 2)
        assert insight["focus_level"] == "critical"
        assert insight["progress"]["description"] == "Improved"
        assert insight["progress"]["trend"] == "improving"
        assert len(insight["recommendations"]) == 2

    def test_skill_insight_maintenance(self, analyzer):
        insight = analyzer.get_skill_insight("blocking_overall", 9)
        assert insight["focus_level"] == "maintenance"
        assert "progress" not in insight

    def test_comparison_report(self, analyzer, sample_assessment, previous_assessment):
        report = analyzer.generate_comparison_report(sample_assessment, previous_assessment)
        assert report["overall_change"] == 0.3
        assert report["category_changes"]["throwing"]["significance"] == "significant"
        assert "Throwing has improved significantly (+1.0)." in report["insights"]
        assert "Your most improved skill: throwing_footwork (+1 points)." in report["insights"]
        assert report["time_between"]["days"] == 60

    def test_describe_skill_change(self):
        assert describe_skill_change(3) == "Significant improvement"
        assert describe_skill_change(1) == "Improved"
        assert describe_skill_change(0) == "No change"
        assert describe_skill_change(-1) == "Slight decline"
        assert describe_skill_change(-2) == "Significant decline"

    def test_describe_duration(self):
        assert describe_duration(3) == "3 days"
        assert describe_duration(14) == "2 weeks"
        assert describe_duration(400) == "1 years"

    def test_classify_trend(self):
        assert classify_trend(0.5) == "improving"
        assert classify_trend(-0.5) == "declining"
        assert classify_trend(0.2) == "stable"
