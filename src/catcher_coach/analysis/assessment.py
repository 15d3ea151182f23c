"""
Skills Assessment Analyzer

Turns the 13 raw 1-10 skill ratings into:
- Weighted category averages and proficiency labels
- Strengths, weaknesses and critical areas
- Progress against a previous assessment
- Training recommendations and improvement priorities
- User-facing insights

Validation always runs first. A rejected assessment produces a failed
result object listing every problem; no partial analysis is ever returned.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Union
import math

from ..config import Settings
from ..exceptions import AssessmentValidationError, CatcherCoachError
from ..models.profile import UserProfile
from ..models.skills import (
    Assessment,
    ProficiencyLevel,
    SkillCategory,
    SkillsConfig,
    coerce_score,
    normalize_scores,
    round_tenth,
)
from ..services.base import BaseService


AssessmentInput = Union[Assessment, Mapping[str, Any]]


# =============================================================================
# Result Types
# =============================================================================

@dataclass
class ValidationResult:
    """Outcome of assessment validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warning_flags: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warning_flags": list(self.warning_flags),
        }


@dataclass
class SkillScoreDetail:
    """One skill's score inside a category breakdown."""
    code: str
    name: str
    score: int
    weight: float
    proficiency: ProficiencyLevel

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "name": self.name,
            "score": self.score,
            "weight": self.weight,
            "proficiency": self.proficiency.to_dict(),
        }


@dataclass
class CategoryResult:
    """Derived scores for one category."""
    code: str
    name: str
    description: str
    average_score: float            # Rounded to 1 decimal
    raw_average: float              # Unrounded weighted mean
    proficiency: ProficiencyLevel
    subcategories: List[SkillScoreDetail]
    importance_weight: float
    max_score: int = 10

    @property
    def improvement_potential(self) -> float:
        return self.max_score - self.raw_average

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "average_score": self.average_score,
            "proficiency": self.proficiency.to_dict(),
            "subcategories": [skill.to_dict() for skill in self.subcategories],
            "importance_weight": self.importance_weight,
            "improvement_potential": round(self.improvement_potential, 2),
        }


@dataclass
class CategoryAnalysis:
    """Per-category results plus the importance-weighted overall score."""
    categories: Dict[str, CategoryResult]
    overall_average: float
    overall_proficiency: ProficiencyLevel
    assessment_date: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "categories": {code: result.to_dict() for code, result in self.categories.items()},
            "overall_average": self.overall_average,
            "overall_proficiency": self.overall_proficiency.to_dict(),
            "assessment_date": self.assessment_date.isoformat() if self.assessment_date else None,
        }


@dataclass
class StrengthsWeaknesses:
    strongest_category: Dict[str, Any]
    weakest_category: Dict[str, Any]
    top_individual_strengths: List[Dict[str, Any]]
    bottom_individual_weaknesses: List[Dict[str, Any]]
    critical_areas: List[Dict[str, Any]]
    balanced_areas: List[Dict[str, Any]]

    def to_dict(self) -> dict:
        return {
            "strongest_category": dict(self.strongest_category),
            "weakest_category": dict(self.weakest_category),
            "top_individual_strengths": list(self.top_individual_strengths),
            "bottom_individual_weaknesses": list(self.bottom_individual_weaknesses),
            "critical_areas": list(self.critical_areas),
            "balanced_areas": list(self.balanced_areas),
        }


@dataclass
class TimeBetween:
    days: int
    weeks: int
    months: int
    description: str

    def to_dict(self) -> dict:
        return {
            "days": self.days,
            "weeks": self.weeks,
            "months": self.months,
            "description": self.description,
        }


@dataclass
class ProgressAnalysis:
    """Changes between a previous and the current assessment."""
    time_between_assessments: TimeBetween
    category_improvements: Dict[str, Dict[str, Any]]
    individual_skill_changes: Dict[str, Dict[str, Any]]
    overall_improvement: float
    improvement_rate: float
    most_improved: Optional[str] = None
    least_improved: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "time_between_assessments": self.time_between_assessments.to_dict(),
            "category_improvements": {k: dict(v) for k, v in self.category_improvements.items()},
            "individual_skill_changes": {k: dict(v) for k, v in self.individual_skill_changes.items()},
            "overall_improvement": self.overall_improvement,
            "improvement_rate": self.improvement_rate,
            "most_improved": self.most_improved,
            "least_improved": self.least_improved,
        }


@dataclass
class TrainingRecommendations:
    primary_focus: Dict[str, Any]
    secondary_focuses: List[Dict[str, Any]]
    training_frequency: str
    session_duration: str

    def to_dict(self) -> dict:
        return {
            "primary_focus": dict(self.primary_focus),
            "secondary_focuses": list(self.secondary_focuses),
            "training_frequency": self.training_frequency,
            "session_duration": self.session_duration,
        }


@dataclass
class ImprovementPriority:
    category: str
    name: str
    current_score: float
    priority_score: float
    priority_level: str
    improvement_potential: float
    recommended_actions: List[str]
    timeline: str

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "name": self.name,
            "current_score": self.current_score,
            "priority_score": self.priority_score,
            "priority_level": self.priority_level,
            "improvement_potential": round(self.improvement_potential, 2),
            "recommended_actions": list(self.recommended_actions),
            "timeline": self.timeline,
        }


@dataclass
class UserInsights:
    overall_summary: str
    key_insights: List[str]
    action_items: List[str]
    motivation_message: str
    progress_summary: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "overall_summary": self.overall_summary,
            "key_insights": list(self.key_insights),
            "action_items": list(self.action_items),
            "motivation_message": self.motivation_message,
            "progress_summary": self.progress_summary,
        }


@dataclass
class AssessmentAnalysisResult:
    """Complete analysis, or a typed failure when validation rejected the input."""
    success: bool
    assessment_id: Optional[str] = None
    analyzed_at: Optional[datetime] = None
    category_analysis: Optional[CategoryAnalysis] = None
    strengths_weaknesses: Optional[StrengthsWeaknesses] = None
    progress_analysis: Optional[ProgressAnalysis] = None
    training_recommendations: Optional[TrainingRecommendations] = None
    improvement_priorities: List[ImprovementPriority] = field(default_factory=list)
    radar_chart_data: Optional[Dict[str, Any]] = None
    user_insights: Optional[UserInsights] = None
    warning_flags: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    @classmethod
    def failure(
        cls,
        error: str,
        assessment_id: Optional[str] = None,
        errors: Optional[List[str]] = None,
    ) -> "AssessmentAnalysisResult":
        return cls(success=False, assessment_id=assessment_id, error=error, errors=list(errors or []))

    def to_dict(self) -> dict:
        if not self.success:
            return {
                "success": False,
                "error": self.error,
                "errors": list(self.errors),
                "assessment_id": self.assessment_id,
            }
        return {
            "success": True,
            "assessment_id": self.assessment_id,
            "analyzed_at": self.analyzed_at.isoformat() if self.analyzed_at else None,
            "category_analysis": self.category_analysis.to_dict() if self.category_analysis else None,
            "strengths_weaknesses": (
                self.strengths_weaknesses.to_dict() if self.strengths_weaknesses else None
            ),
            "progress_analysis": self.progress_analysis.to_dict() if self.progress_analysis else None,
            "training_recommendations": (
                self.training_recommendations.to_dict() if self.training_recommendations else None
            ),
            "improvement_priorities": [p.to_dict() for p in self.improvement_priorities],
            "radar_chart_data": self.radar_chart_data,
            "user_insights": self.user_insights.to_dict() if self.user_insights else None,
            "warning_flags": list(self.warning_flags),
            "metadata": dict(self.metadata),
        }


# =============================================================================
# Static Text Tables
# =============================================================================

CATEGORY_ACTIONS: Dict[str, List[str]] = {
    "receiving": [
        "Practice glove positioning and movement drills daily",
        "Work on framing techniques with a partner",
        "Focus on quiet, confident pitch presentation",
        "Video record receiving sessions for self-analysis",
    ],
    "throwing": [
        "Practice quick exchange drills daily",
        "Work on footwork mechanics",
        "Focus on accuracy over arm strength",
        "Time your pop time to second base regularly",
    ],
    "blocking": [
        "Practice blocking stance and positioning",
        "Work on keeping balls in front of you",
        "Practice blocking from different angles",
        "Focus on quick recovery after blocks",
    ],
    "education": [
        "Study game situations and pitch calling",
        "Practice communication with pitchers",
        "Learn to read hitters and use scouting reports",
        "Develop positive relationships with umpires",
    ],
}

OVERALL_SUMMARIES: Dict[str, str] = {
    "Needs Major Work": (
        "You're at the beginning of your catching journey with an overall score of {score}/10. "
        "Focus on building fundamental skills across all areas."
    ),
    "Needs Improvement": (
        "You have basic catching skills ({score}/10) but significant room for growth. "
        "Consistent practice will lead to rapid improvement."
    ),
    "Average": (
        "You demonstrate solid fundamental catching skills ({score}/10). "
        "Focus on refining techniques and building consistency."
    ),
    "Good": (
        "You're a skilled catcher ({score}/10) with strong fundamentals. "
        "Work on fine-tuning your weakest areas to reach the next level."
    ),
    "Excellent": (
        "You demonstrate excellent catching abilities ({score}/10). "
        "Focus on maintaining your skills and perfecting advanced techniques."
    ),
}

# (upper bound on overall average, frequency, session length)
TRAINING_FREQUENCY_TIERS = (
    (4.0, "4-5 times per week", "30-45 minutes"),
    (6.0, "3-4 times per week", "30-60 minutes"),
    (math.inf, "2-3 times per week", "45-60 minutes"),
)

RADAR_COLOR = "rgba(59, 130, 246, {alpha})"


# =============================================================================
# Pure Helpers
# =============================================================================

def describe_skill_change(change: int) -> str:
    """Describe an integer skill change in plain words."""
    if change >= 2:
        return "Significant improvement"
    if change == 1:
        return "Improved"
    if change == 0:
        return "No change"
    if change == -1:
        return "Slight decline"
    return "Significant decline"


def describe_duration(days: int) -> str:
    if days < 7:
        return f"{days} days"
    if days < 30:
        return f"{days // 7} weeks"
    if days < 365:
        return f"{days // 30} months"
    return f"{days // 365} years"


def calculate_time_between(start: Optional[datetime], end: Optional[datetime]) -> TimeBetween:
    """Whole days between two timestamps (0 when either is unknown)."""
    if start is None or end is None:
        days = 0
    else:
        if (start.tzinfo is None) != (end.tzinfo is None):
            start = start.replace(tzinfo=None)
            end = end.replace(tzinfo=None)
        days = math.floor((end - start).total_seconds() / 86400)
    return TimeBetween(
        days=days,
        weeks=days // 7,
        months=days // 30,
        description=describe_duration(days),
    )


def categorize_priority(score: float) -> str:
    if score >= 0.7:
        return "High"
    if score >= 0.4:
        return "Medium"
    return "Low"


def classify_trend(change: float, threshold: float = 0.2) -> str:
    if change > threshold:
        return "improving"
    if change < -threshold:
        return "declining"
    return "stable"


def estimate_improvement_timeline(current_score: float) -> str:
    if current_score < 4:
        return "6-12 weeks for noticeable improvement"
    if current_score < 6:
        return "4-8 weeks for solid progress"
    return "2-6 weeks for refinement"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Analyzer
# =============================================================================

class AssessmentAnalyzer(BaseService):
    """
    Processes skills assessments into insights and recommendations.

    The category tables and thresholds are injected through ``SkillsConfig``
    so alternate tables can be used without touching module globals.
    """

    ANALYSIS_VERSION = "1.0.0"

    def __init__(
        self,
        config: Optional[SkillsConfig] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        super().__init__(settings=settings)
        self.config = config or SkillsConfig.from_settings(self.settings)
        self._clock = clock or _utcnow

    # -------------------------------------------------------------------------
    # Main entry point
    # -------------------------------------------------------------------------

    def analyze(
        self,
        raw_assessment: AssessmentInput,
        previous_assessment: Optional[AssessmentInput] = None,
        user_profile: Optional[Union[UserProfile, Mapping[str, Any]]] = None,
    ) -> AssessmentAnalysisResult:
        """
        Process and analyze a complete skills assessment.

        Args:
            raw_assessment: Raw record (13 skill codes + metadata) or an Assessment
            previous_assessment: Earlier assessment for progress comparison
            user_profile: Athlete profile for context

        Returns:
            AssessmentAnalysisResult; ``success`` is False when validation fails
        """
        assessment_id = None

        try:
            raw = self._as_mapping(raw_assessment)
            assessment_id = raw.get("assessment_id")
            assessment_id = None if assessment_id is None else str(assessment_id)

            self.logger.info(f"Analyzing assessment {assessment_id or '<new>'}")

            validation = self.validate_assessment(raw)
            if not validation.is_valid:
                raise AssessmentValidationError(validation.errors)

            assessment = Assessment.from_mapping(
                raw, self.config.skill_codes, self.config.neutral_score
            )
            category_analysis = self.calculate_category_analysis(
                assessment.scores, assessment.created_at
            )
            strengths_weaknesses = self.identify_strengths_and_weaknesses(category_analysis)

            progress_analysis = None
            if previous_assessment is not None:
                previous = self._as_assessment(previous_assessment)
                progress_analysis = self.calculate_progress_analysis(assessment, previous)

            profile = self._as_profile(user_profile)
            recommendations = self.generate_training_recommendations(
                category_analysis, strengths_weaknesses
            )
            priorities = self.calculate_improvement_priorities(category_analysis)
            insights = self.generate_user_insights(
                category_analysis, strengths_weaknesses, progress_analysis
            )

            self.logger.info(
                f"Assessment {assessment_id or '<new>'} analyzed: "
                f"overall {category_analysis.overall_average}, "
                f"weakest {strengths_weaknesses.weakest_category['code']}"
            )

            return AssessmentAnalysisResult(
                success=True,
                assessment_id=assessment_id,
                analyzed_at=self._clock(),
                category_analysis=category_analysis,
                strengths_weaknesses=strengths_weaknesses,
                progress_analysis=progress_analysis,
                training_recommendations=recommendations,
                improvement_priorities=priorities,
                radar_chart_data=self.generate_radar_chart_data(category_analysis),
                user_insights=insights,
                warning_flags=validation.warning_flags,
                metadata={
                    "assessment_type": assessment.assessment_type.value,
                    "coach_input": assessment.coach_input,
                    "analysis_version": self.settings.analysis_version,
                    "user_id": profile.user_id if profile else assessment.user_id,
                },
            )

        except AssessmentValidationError as e:
            self.logger.warning(f"Assessment {assessment_id or '<new>'} rejected: {e.message}")
            return AssessmentAnalysisResult.failure(e.message, assessment_id, e.errors)
        except CatcherCoachError as e:
            self.logger.error(f"Assessment analysis failed: {e.message}")
            return AssessmentAnalysisResult.failure(e.message, assessment_id)
        except Exception as e:
            self.logger.exception(f"Assessment analysis failed unexpectedly: {e}")
            return AssessmentAnalysisResult.failure(str(e), assessment_id)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate_assessment(self, raw: Mapping[str, Any]) -> ValidationResult:
        """
        Validate completeness, ranges and plausibility.

        Every problem is reported, not just the first.
        """
        cfg = self.config
        errors: List[str] = []
        scores: List[int] = []

        for code in cfg.skill_codes:
            value = raw.get(code)
            if value is None or (isinstance(value, str) and not value.strip()):
                errors.append(f"Missing required field: {code}")
                continue
            score = coerce_score(value)
            if score is None:
                errors.append(f"{code} score {value!r} is not a whole number")
                continue
            scores.append(score)
            if score < cfg.min_score or score > cfg.max_score:
                errors.append(
                    f"{code} score {score} is outside valid range ({cfg.min_score}-{cfg.max_score})"
                )

        if scores:
            most_common = Counter(scores).most_common(1)[0][1]
            if most_common >= cfg.uniform_score_threshold:
                errors.append("Suspiciously uniform scores detected - assessment may not be genuine")
            if all(s == cfg.max_score for s in scores) or all(s == cfg.min_score for s in scores):
                errors.append("Extreme score pattern detected - please provide more realistic assessments")

        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            warning_flags=self.detect_warning_flags(scores),
        )

    def detect_warning_flags(self, scores: List[int]) -> List[str]:
        """Non-fatal over/under-confidence flags."""
        cfg = self.config
        total = len(cfg.skill_codes)
        if total == 0:
            return []

        flags = []
        high = sum(1 for s in scores if s >= cfg.high_score_cutoff)
        low = sum(1 for s in scores if s <= cfg.low_score_cutoff)
        if high / total > cfg.confidence_pattern_ratio:
            flags.append("high_confidence_pattern")
        if low / total > cfg.confidence_pattern_ratio:
            flags.append("low_confidence_pattern")
        return flags

    # -------------------------------------------------------------------------
    # Category analysis
    # -------------------------------------------------------------------------

    def calculate_category_analysis(
        self,
        scores: Mapping[str, Any],
        assessment_date: Optional[datetime] = None,
    ) -> CategoryAnalysis:
        """Weighted category averages and the importance-weighted overall score."""
        cfg = self.config
        normalized = normalize_scores(scores, cfg.skill_codes, cfg.neutral_score)
        results: Dict[str, CategoryResult] = {}

        for category in cfg.categories:
            details = [
                SkillScoreDetail(
                    code=skill.code,
                    name=skill.name,
                    score=normalized[skill.code],
                    weight=skill.weight,
                    proficiency=cfg.proficiency_for(normalized[skill.code]),
                )
                for skill in category.skills
            ]
            total_weight = sum(d.weight for d in details)
            average = sum(d.score * d.weight for d in details) / total_weight

            results[category.code] = CategoryResult(
                code=category.code,
                name=category.name,
                description=category.description,
                average_score=round_tenth(average),
                raw_average=average,
                proficiency=cfg.proficiency_for(average),
                subcategories=details,
                importance_weight=category.importance_weight,
                max_score=cfg.max_score,
            )

        weighted = sum(r.average_score * r.importance_weight for r in results.values())
        total_importance = sum(r.importance_weight for r in results.values())
        overall = weighted / total_importance

        return CategoryAnalysis(
            categories=results,
            overall_average=round_tenth(overall),
            overall_proficiency=cfg.proficiency_for(overall),
            assessment_date=assessment_date or self._clock(),
        )

    def identify_strengths_and_weaknesses(self, analysis: CategoryAnalysis) -> StrengthsWeaknesses:
        """
        Strongest/weakest categories and notable individual skills.

        Categories are stably sorted by descending average over the canonical
        order, so among tied leaders the earlier category is the strongest and
        among tied trailers the later category is the weakest.
        """
        by_score = sorted(analysis.categories.values(), key=lambda c: c.average_score, reverse=True)
        strongest, weakest = by_score[0], by_score[-1]

        all_skills = [skill for category in analysis.categories.values() for skill in category.subcategories]
        skills_by_score = sorted(all_skills, key=lambda s: s.score, reverse=True)
        top = skills_by_score[:3]
        bottom = list(reversed(skills_by_score[-3:]))

        return StrengthsWeaknesses(
            strongest_category={
                "name": strongest.name,
                "code": strongest.code,
                "score": strongest.average_score,
                "note": "Your strongest area - maintain and build on this foundation",
            },
            weakest_category={
                "name": weakest.name,
                "code": weakest.code,
                "score": weakest.average_score,
                "improvement_potential": weakest.improvement_potential,
                "note": "Your biggest opportunity for improvement",
            },
            top_individual_strengths=[
                {"name": s.name, "code": s.code, "score": s.score,
                 "note": "Keep up the excellent work in this area"}
                for s in top
            ],
            bottom_individual_weaknesses=[
                {"name": s.name, "code": s.code, "score": s.score,
                 "improvement_potential": self.config.max_score - s.score,
                 "note": "Focus area for significant improvement"}
                for s in bottom
            ],
            critical_areas=[
                {"name": s.name, "code": s.code, "score": s.score,
                 "urgency": "high", "note": "Needs immediate attention"}
                for s in all_skills if s.score < 4
            ],
            balanced_areas=[
                {"name": s.name, "code": s.code, "score": s.score,
                 "note": "Well-developed skill to maintain"}
                for s in all_skills if 6 <= s.score <= 8
            ],
        )

    # -------------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------------

    def simple_category_average(self, scores: Mapping[str, int], category: SkillCategory) -> float:
        """Unweighted mean of a category's skills, as used for progress deltas."""
        values = [scores[code] for code in category.skill_codes]
        return sum(values) / len(values)

    def simple_overall_average(self, scores: Mapping[str, int]) -> float:
        values = [scores[code] for code in self.config.skill_codes]
        return sum(values) / len(values)

    def calculate_progress_analysis(self, current: Assessment, previous: Assessment) -> ProgressAnalysis:
        """Category and skill deltas between two snapshots."""
        cfg = self.config
        time_between = calculate_time_between(previous.created_at, current.created_at)

        category_improvements: Dict[str, Dict[str, Any]] = {}
        for category in cfg.categories:
            now = self.simple_category_average(current.scores, category)
            before = self.simple_category_average(previous.scores, category)
            improvement = now - before
            category_improvements[category.code] = {
                "previous_score": round_tenth(before),
                "current_score": round_tenth(now),
                "improvement": round(improvement, 1),
                "improvement_percentage": round(improvement / before * 100) if before > 0 else 0,
                "trend": classify_trend(improvement),
            }

        skill_changes: Dict[str, Dict[str, Any]] = {}
        for code in cfg.skill_codes:
            change = current.scores[code] - previous.scores[code]
            skill_changes[code] = {
                "previous_score": previous.scores[code],
                "current_score": current.scores[code],
                "change": change,
                "change_description": describe_skill_change(change),
            }

        overall_improvement = round(
            self.simple_overall_average(current.scores) - self.simple_overall_average(previous.scores), 1
        )
        improvement_rate = 0.0
        if time_between.days > 0:
            improvement_rate = round(overall_improvement / time_between.days, 2)

        ranked = sorted(
            category_improvements.items(), key=lambda item: item[1]["improvement"], reverse=True
        )

        return ProgressAnalysis(
            time_between_assessments=time_between,
            category_improvements=category_improvements,
            individual_skill_changes=skill_changes,
            overall_improvement=overall_improvement,
            improvement_rate=improvement_rate,
            most_improved=ranked[0][0] if ranked else None,
            least_improved=ranked[-1][0] if ranked else None,
        )

    # -------------------------------------------------------------------------
    # Recommendations
    # -------------------------------------------------------------------------

    def generate_training_recommendations(
        self,
        analysis: CategoryAnalysis,
        strengths_weaknesses: StrengthsWeaknesses,
    ) -> TrainingRecommendations:
        weakest = strengths_weaknesses.weakest_category
        primary = {
            "category": weakest["code"],
            "reason": f"Lowest scoring category with {weakest['score']}/10 average",
            "time_allocation": "60% of training time",
            "expected_improvement": "1-2 points in 4-6 weeks with consistent practice",
        }

        others = [
            result for code, result in analysis.categories.items()
            if code != weakest["code"] and result.average_score < 6
        ]
        others.sort(key=lambda r: r.average_score)
        secondary = [
            {
                "category": result.code,
                "score": result.average_score,
                "time_allocation": "20% of training time",
                "reason": "Secondary improvement area",
            }
            for result in others[:2]
        ]

        frequency, session_length = self._training_frequency(analysis.overall_average)
        return TrainingRecommendations(
            primary_focus=primary,
            secondary_focuses=secondary,
            training_frequency=frequency,
            session_duration=session_length,
        )

    @staticmethod
    def _training_frequency(overall_average: float):
        for upper, frequency, session_length in TRAINING_FREQUENCY_TIERS:
            if overall_average < upper:
                return frequency, session_length
        return TRAINING_FREQUENCY_TIERS[-1][1:]

    def calculate_improvement_priorities(self, analysis: CategoryAnalysis) -> List[ImprovementPriority]:
        """
        Rank categories that still need work.

        priority = 0.4 * score factor + 0.4 * potential factor + 0.2 * importance.
        Categories averaging 8 or more are left out.
        """
        priorities = []
        for code, category in analysis.categories.items():
            if category.average_score >= 8:
                continue
            score_factor = (10 - category.average_score) / 10
            potential_factor = category.improvement_potential / 10
            priority = score_factor * 0.4 + potential_factor * 0.4 + category.importance_weight * 0.2
            priorities.append(ImprovementPriority(
                category=code,
                name=category.name,
                current_score=category.average_score,
                priority_score=round(priority, 2),
                priority_level=categorize_priority(priority),
                improvement_potential=category.improvement_potential,
                recommended_actions=list(
                    CATEGORY_ACTIONS.get(code, ["Focus on fundamental skill development"])
                ),
                timeline=estimate_improvement_timeline(category.average_score),
            ))

        return sorted(priorities, key=lambda p: p.priority_score, reverse=True)

    def generate_radar_chart_data(self, analysis: CategoryAnalysis) -> Dict[str, Any]:
        categories = list(analysis.categories.values())
        return {
            "labels": [c.name for c in categories],
            "datasets": [{
                "label": "Current Skills",
                "data": [c.average_score for c in categories],
                "backgroundColor": RADAR_COLOR.format(alpha=0.2),
                "borderColor": RADAR_COLOR.format(alpha=1),
                "borderWidth": 2,
                "pointBackgroundColor": RADAR_COLOR.format(alpha=1),
                "pointRadius": 4,
            }],
            "maxValue": self.config.max_score,
            "centerPoint": self.config.neutral_score,
        }

    # -------------------------------------------------------------------------
    # Insights
    # -------------------------------------------------------------------------

    def generate_user_insights(
        self,
        analysis: CategoryAnalysis,
        strengths_weaknesses: StrengthsWeaknesses,
        progress: Optional[ProgressAnalysis] = None,
    ) -> UserInsights:
        strongest = strengths_weaknesses.strongest_category
        weakest = strengths_weaknesses.weakest_category
        critical = strengths_weaknesses.critical_areas

        key_insights = [
            f"Your strongest area is {strongest['name']} ({strongest['score']}/10)",
            f"Your biggest opportunity is {weakest['name']} ({weakest['score']}/10)",
            f"Overall skill level: {analysis.overall_average}/10 ({analysis.overall_proficiency.level})",
        ]
        if critical:
            key_insights.append(
                f"{len(critical)} skill(s) need immediate attention (scored below 4)"
            )

        action_items = [
            f"Focus 60% of practice time on {weakest['name']}",
            "Practice at least 3 times per week for optimal improvement",
            "Record progress videos monthly to track visual improvement",
        ]
        if critical:
            names = ", ".join(area["name"] for area in critical)
            action_items.insert(0, f"Priority: Address critical areas ({names})")

        return UserInsights(
            overall_summary=self.generate_overall_summary(analysis),
            key_insights=key_insights,
            action_items=action_items,
            motivation_message=self.generate_motivation_message(weakest["improvement_potential"]),
            progress_summary=self.generate_progress_summary(progress) if progress else None,
        )

    @staticmethod
    def generate_overall_summary(analysis: CategoryAnalysis) -> str:
        score = analysis.overall_average
        template = OVERALL_SUMMARIES.get(analysis.overall_proficiency.level)
        if template is None:
            return f"Your overall catching skill level is {score}/10."
        return template.format(score=score)

    @staticmethod
    def generate_motivation_message(improvement_potential: float) -> str:
        if improvement_potential >= 6:
            return "You have tremendous room for growth! Every practice session will lead to noticeable improvement."
        if improvement_potential >= 4:
            return "With focused practice, you can make significant strides in your catching abilities."
        return "You're already skilled! Fine-tuning your technique will take you to the next level."

    @staticmethod
    def generate_progress_summary(progress: ProgressAnalysis) -> str:
        improvement = progress.overall_improvement
        if improvement >= 1:
            return f"Excellent progress! You've improved {improvement} points overall since your last assessment."
        if improvement >= 0.5:
            return f"Good progress! You've improved {improvement} points overall - keep up the consistent work."
        if improvement > 0:
            return f"Steady progress! You've improved {improvement} points overall. Small gains add up over time."
        if improvement == 0:
            return "Your skills have remained stable since your last assessment. Consider focusing on your weakest areas."
        return f"Your scores have declined slightly ({improvement} points). This is normal - refocus on fundamentals."

    def get_skill_insight(
        self,
        skill_code: str,
        current_score: int,
        previous_score: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Focus level and advice for a single skill."""
        if current_score < 4:
            focus_level = "critical"
            recommendations = ["Needs immediate attention - focus heavily on this skill"]
        elif current_score < 6:
            focus_level = "improvement"
            recommendations = ["Good opportunity for improvement with focused practice"]
        elif current_score < 8:
            focus_level = "refinement"
            recommendations = ["Solid foundation - work on refining technique"]
        else:
            focus_level = "maintenance"
            recommendations = ["Strong skill - maintain with regular practice"]

        insight: Dict[str, Any] = {
            "skill_code": skill_code,
            "current_score": current_score,
            "proficiency": self.config.proficiency_for(current_score).to_dict(),
            "recommendations": recommendations,
            "focus_level": focus_level,
        }

        if previous_score is not None:
            change = current_score - previous_score
            insight["progress"] = {
                "change": change,
                "description": describe_skill_change(change),
                "trend": "improving" if change > 0 else "declining" if change < 0 else "stable",
            }
            if change > 0:
                recommendations.append(f"Great progress! You've improved {change} point(s) in this area")
            elif change < 0:
                recommendations.append(
                    f"This area has declined {abs(change)} point(s) - consider refocusing here"
                )

        return insight

    # -------------------------------------------------------------------------
    # Comparison and export
    # -------------------------------------------------------------------------

    def generate_comparison_report(
        self,
        current: AssessmentInput,
        previous: AssessmentInput,
    ) -> Dict[str, Any]:
        """Side-by-side comparison of two assessments with insights."""
        current = self._as_assessment(current)
        previous = self._as_assessment(previous)

        overall_change = round(
            self.simple_overall_average(current.scores) - self.simple_overall_average(previous.scores), 1
        )

        category_changes: Dict[str, Dict[str, Any]] = {}
        for category in self.config.categories:
            now = self.simple_category_average(current.scores, category)
            before = self.simple_category_average(previous.scores, category)
            change = now - before
            magnitude = abs(change)
            category_changes[category.code] = {
                "previous": round_tenth(before),
                "current": round_tenth(now),
                "change": round(change, 1),
                "trend": classify_trend(change),
                "significance": (
                    "significant" if magnitude >= 1 else "moderate" if magnitude >= 0.5 else "minor"
                ),
            }

        skill_changes = {
            code: {
                "previous": previous.scores[code],
                "current": current.scores[code],
                "change": current.scores[code] - previous.scores[code],
                "description": describe_skill_change(current.scores[code] - previous.scores[code]),
            }
            for code in self.config.skill_codes
        }

        insights: List[str] = []
        recommendations: List[str] = []

        if overall_change >= 1:
            insights.append("Excellent overall improvement! Your training is clearly working.")
            recommendations.append("Continue your current training approach - it's very effective.")
        elif overall_change >= 0.5:
            insights.append("Good steady progress across your skills.")
            recommendations.append("Keep up the consistent work - you're on the right track.")
        elif overall_change <= -0.5:
            insights.append("Some decline in overall scores - this may indicate overtraining or lack of focus.")
            recommendations.append("Consider adjusting your training approach or taking a brief rest.")

        for code, data in category_changes.items():
            if data["significance"] != "significant":
                continue
            name = self.config.category(code).name
            if data["change"] > 0:
                insights.append(f"{name} has improved significantly (+{data['change']}).")
            else:
                insights.append(f"{name} has declined significantly ({data['change']}).")
                recommendations.append(f"Focus more attention on {name} training.")

        ranked = sorted(skill_changes.items(), key=lambda item: item[1]["change"], reverse=True)
        most_improved, most_declined = ranked[0], ranked[-1]
        if most_improved[1]["change"] > 0:
            insights.append(
                f"Your most improved skill: {most_improved[0]} (+{most_improved[1]['change']} points)."
            )
        if most_declined[1]["change"] < 0:
            insights.append(
                f"Area needing attention: {most_declined[0]} ({most_declined[1]['change']} points)."
            )
            recommendations.append(f"Consider dedicating extra practice time to {most_declined[0]}.")

        return {
            "time_between": calculate_time_between(previous.created_at, current.created_at).to_dict(),
            "overall_change": overall_change,
            "category_changes": category_changes,
            "skill_changes": skill_changes,
            "insights": insights,
            "recommendations": recommendations,
        }

    def export_assessment_data(self, result: AssessmentAnalysisResult) -> Dict[str, Any]:
        """Flatten a successful analysis for external consumers."""
        if not result.success or result.category_analysis is None:
            raise AssessmentValidationError(["Cannot export a failed analysis"])

        analysis = result.category_analysis
        category_scores = {
            code: {
                "name": category.name,
                "score": category.average_score,
                "proficiency": category.proficiency.level,
            }
            for code, category in analysis.categories.items()
        }
        individual_skills = {
            skill.code: {
                "name": skill.name,
                "score": skill.score,
                "proficiency": skill.proficiency.level,
            }
            for category in analysis.categories.values()
            for skill in category.subcategories
        }

        return {
            "export_date": self._clock().isoformat(),
            "format": "json",
            "assessment_summary": {
                "assessment_id": result.assessment_id,
                "overall_score": analysis.overall_average,
                "overall_level": analysis.overall_proficiency.level,
                "analyzed_at": result.analyzed_at.isoformat() if result.analyzed_at else None,
            },
            "category_scores": category_scores,
            "individual_skills": individual_skills,
            "recommendations": (
                result.training_recommendations.to_dict() if result.training_recommendations else None
            ),
            "radar_chart_data": result.radar_chart_data,
        }

    # -------------------------------------------------------------------------
    # Input coercion
    # -------------------------------------------------------------------------

    @staticmethod
    def _as_mapping(value: AssessmentInput) -> Mapping[str, Any]:
        if isinstance(value, Assessment):
            return value.to_dict()
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise AssessmentValidationError(
                [f"Assessment must be a mapping of skill scores, got {type(value).__name__}"]
            )
        return value

    def _as_assessment(self, value: AssessmentInput) -> Assessment:
        if isinstance(value, Assessment):
            return value
        return Assessment.from_mapping(value, self.config.skill_codes, self.config.neutral_score)

    @staticmethod
    def _as_profile(value: Optional[Union[UserProfile, Mapping[str, Any]]]) -> Optional[UserProfile]:
        if value is None or isinstance(value, UserProfile):
            return value
        return UserProfile.model_validate(dict(value))
