"""
Workout Generation Engine

Builds a time-boxed practice plan from a skills assessment:
- Category averages pick the weakest area, which gets the most time
- The requested duration snaps to a time allocation template
- Available equipment decides which drills are possible
- Each phase is filled with drills from the drill catalog

Generation never dead-ends: any failure returns a labelled fallback plan.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union
import math
import zlib

from ..config import Settings
from ..exceptions import GenerationError
from ..models.profile import UserProfile, WorkoutPreferences
from ..models.skills import (
    SKILL_CATEGORIES,
    Assessment,
    SkillCategory,
    normalize_scores,
    round_half_up,
    round_tenth,
)
from ..models.workouts import (
    ActivityType,
    CoachingGuidance,
    EquipmentTier,
    ExperienceLevel,
    PhaseName,
    PlanDrill,
    TimeAllocation,
    WorkoutPhase,
    WorkoutPlan,
)
from ..services.base import BaseService
from .drills import EQUIPMENT_REQUIREMENTS, DrillCatalog, SampleDrillCatalog


# =============================================================================
# Configuration
# =============================================================================

TIME_TEMPLATES: Dict[int, TimeAllocation] = {
    15: TimeAllocation(warmup=2, weakest_category=9, other_categories=2, education=2),
    30: TimeAllocation(warmup=3, weakest_category=15, other_categories=8, education=4),
    45: TimeAllocation(warmup=5, weakest_category=20, other_categories=12, education=6, video_review=2),
    60: TimeAllocation(
        warmup=5, weakest_category=25, other_categories=15, education=8, cooldown=2, video_review=5
    ),
}

CATEGORY_DRILL_MAPPINGS: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "receiving": {
        "primary_skills": ("glove_move", "glove_load", "setups", "presentation"),
        "drill_types": ("receiving_basics", "framing", "stance_work", "glove_work"),
    },
    "throwing": {
        "primary_skills": ("footwork", "exchange", "arm_strength", "accuracy"),
        "drill_types": ("throwing_mechanics", "footwork_drills", "exchange_drills", "accuracy_work"),
    },
    "blocking": {
        "primary_skills": ("blocking_overall",),
        "drill_types": ("blocking_fundamentals", "blocking_angles", "recovery_drills"),
    },
    "education": {
        "primary_skills": ("pitch_calling", "scouting_reports", "umpire_relations", "pitcher_relations"),
        "drill_types": ("game_management", "communication", "strategy_work", "video_study"),
    },
}

CATEGORY_TIPS: Dict[str, Tuple[str, ...]] = {
    "receiving": (
        "Focus on keeping your eyes level throughout the catch",
        "Let the ball come to you - don't reach for it",
        "Keep your glove relaxed and ready to give with the ball",
    ),
    "throwing": (
        "Quick, clean exchanges are more important than arm strength",
        "Keep your throws low and on line",
        "Footwork sets up everything - get your feet right first",
    ),
    "blocking": (
        "Your chest and body block balls, not your glove",
        "Stay low and keep everything in front of you",
        "Think 'big body' to take up space",
    ),
    "education": (
        "Communication is key - talk to your pitcher constantly",
        "Know the count and situation before every pitch",
        "Study hitters and help your pitcher attack weaknesses",
    ),
}

MOTIVATIONAL_MESSAGES: Tuple[str, ...] = (
    "Great choice focusing on {weakest}! This is where you'll see the biggest improvement.",
    "Your overall skill level of {overall}/10 shows real potential - let's build on it!",
    "Every rep counts. Stay focused and trust the process.",
    "You're investing in your future behind the plate. Make it count!",
)

# (upper bound on education average, title, content)
EDUCATION_VIDEOS = (
    (5.0, "Catching Fundamentals", "Review basic catching principles and game management"),
    (7.0, "Advanced Game Management", "Pitch calling strategies and working with pitchers"),
    (math.inf, "Elite Catching Concepts", "Advanced scouting and game situation management"),
)

PERSONALIZATION_FACTORS = (
    "skills_assessment_based",
    "equipment_adapted",
    "time_optimized",
    "experience_appropriate",
)

FALLBACK_MESSAGE = "Generated basic workout due to technical issue"


@dataclass(frozen=True)
class GeneratorConfig:
    """Static tables used by the workout generator."""
    time_templates: Mapping[int, TimeAllocation] = field(default_factory=lambda: dict(TIME_TEMPLATES))
    equipment_requirements: Mapping[EquipmentTier, FrozenSet[str]] = field(
        default_factory=lambda: dict(EQUIPMENT_REQUIREMENTS)
    )
    categories: Tuple[SkillCategory, ...] = SKILL_CATEGORIES
    category_drill_mappings: Mapping[str, Mapping[str, Tuple[str, ...]]] = field(
        default_factory=lambda: dict(CATEGORY_DRILL_MAPPINGS)
    )
    category_tips: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: dict(CATEGORY_TIPS))
    motivational_messages: Tuple[str, ...] = MOTIVATIONAL_MESSAGES

    @property
    def category_order(self) -> Tuple[str, ...]:
        return tuple(category.code for category in self.categories)

    @property
    def skill_codes(self) -> Tuple[str, ...]:
        return tuple(code for category in self.categories for code in category.skill_codes)


# =============================================================================
# Result Types
# =============================================================================

@dataclass
class CategoryFocus:
    category: str
    score: float

    @property
    def improvement_potential(self) -> float:
        return 10 - self.score

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "score": self.score,
            "improvement_potential": self.improvement_potential,
        }


@dataclass
class FocusArea:
    category: str
    priority: str       # "high" or "medium"
    reason: str         # "below_proficient" or "needs_improvement"

    def to_dict(self) -> dict:
        return {"category": self.category, "priority": self.priority, "reason": self.reason}


@dataclass
class UserAnalysis:
    """What the generator knows about the athlete before picking drills."""
    category_averages: Dict[str, float]
    weakest_category: CategoryFocus
    strongest_category: CategoryFocus
    experience_level: ExperienceLevel
    overall_skill_level: float
    focus_areas: List[FocusArea] = field(default_factory=list)
    user_motivation: str = "medium"

    def to_dict(self) -> dict:
        return {
            "category_averages": dict(self.category_averages),
            "weakest_category": self.weakest_category.to_dict(),
            "strongest_category": {
                "category": self.strongest_category.category,
                "score": self.strongest_category.score,
            },
            "experience_level": self.experience_level.value,
            "overall_skill_level": self.overall_skill_level,
            "focus_areas": [area.to_dict() for area in self.focus_areas],
            "user_motivation": self.user_motivation,
        }


@dataclass
class WorkoutGenerationResult:
    """Generated plan, or the error paired with a fallback plan."""
    success: bool
    workout: Optional[WorkoutPlan] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    user_analysis: Optional[UserAnalysis] = None
    generated_at: Optional[datetime] = None
    error: Optional[str] = None
    fallback_workout: Optional[WorkoutPlan] = None

    @property
    def plan(self) -> Optional[WorkoutPlan]:
        """The plan to execute: the generated one, else the fallback."""
        return self.workout if self.success else self.fallback_workout

    def to_dict(self) -> dict:
        if not self.success:
            return {
                "success": False,
                "error": self.error,
                "fallback_workout": self.fallback_workout.to_dict() if self.fallback_workout else None,
            }
        return {
            "success": True,
            "workout": self.workout.to_dict() if self.workout else None,
            "metadata": dict(self.metadata),
            "user_analysis": self.user_analysis.to_dict() if self.user_analysis else None,
            "generated_at": self.generated_at.isoformat() if self.generated_at else None,
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _format_score(score: float) -> str:
    """3.0 -> '3', 3.25 -> '3.25'."""
    return f"{score:g}"


# =============================================================================
# Generator
# =============================================================================

class WorkoutGenerator(BaseService):
    """
    Creates personalized catching workouts.

    Args:
        config: Time templates, equipment tiers and coaching text
        catalog: Drill source; defaults to the fixed sample drills
        settings: Application settings
        clock: Returns "now"; injectable for tests
    """

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        catalog: Optional[DrillCatalog] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        super().__init__(settings=settings)
        self.config = config or GeneratorConfig()
        self.catalog = catalog or SampleDrillCatalog()
        self._clock = clock or _utcnow

    # -------------------------------------------------------------------------
    # Main entry point
    # -------------------------------------------------------------------------

    def generate_workout(
        self,
        user_profile: Optional[Union[UserProfile, Mapping[str, Any]]] = None,
        skills_assessment: Optional[Union[Assessment, Mapping[str, Any]]] = None,
        available_equipment: Optional[Iterable[str]] = None,
        planned_duration: Optional[int] = None,
        preferences: Optional[Union[WorkoutPreferences, Mapping[str, Any]]] = None,
    ) -> WorkoutGenerationResult:
        """
        Generate a complete personalized workout.

        A missing assessment is treated as all-neutral scores. Failures are
        logged and returned with ``success=False`` and a fallback plan.
        """
        duration = planned_duration if planned_duration is not None else self.settings.default_duration_minutes
        if isinstance(duration, float) and duration.is_integer():
            duration = int(duration)

        try:
            profile = self._as_profile(user_profile)
            prefs = self._as_preferences(preferences)
            assessment = self._as_assessment(skills_assessment, profile)
            equipment = list(available_equipment) if available_equipment is not None else list(profile.equipment)

            if not isinstance(duration, int) or isinstance(duration, bool) or duration <= 0:
                raise GenerationError(f"Planned duration must be a positive number of minutes, got {duration!r}")

            self.logger.info(f"Generating {duration}-minute workout for user {profile.user_id or '<anonymous>'}")

            analysis = self.analyze_user_state(profile, assessment.scores, prefs)
            allocation = self.calculate_time_allocation(duration)
            equipment_level = self.assess_equipment_level(equipment)

            plan = self.build_workout_structure(analysis, allocation, equipment_level, prefs)
            plan.coaching_guidance = self.build_coaching_guidance(analysis, seed=plan.plan_id)

            metadata = self.generate_workout_metadata(profile, assessment, allocation, equipment_level)

            self.logger.info(
                f"Workout {plan.plan_id} generated: focus {analysis.weakest_category.category}, "
                f"{allocation.total} min, equipment {equipment_level.value}"
            )

            return WorkoutGenerationResult(
                success=True,
                workout=plan,
                metadata=metadata,
                user_analysis=analysis,
                generated_at=self._clock(),
            )

        except Exception as e:
            error = e if isinstance(e, GenerationError) else GenerationError(str(e) or type(e).__name__)
            self.logger.error(f"Workout generation failed: {error.message}", exc_info=True)
            fallback_duration = duration if isinstance(duration, int) and not isinstance(duration, bool) else 0
            return WorkoutGenerationResult(
                success=False,
                error=error.message,
                fallback_workout=self.generate_fallback_workout(fallback_duration),
            )

    # -------------------------------------------------------------------------
    # User analysis
    # -------------------------------------------------------------------------

    def analyze_user_state(
        self,
        profile: Optional[UserProfile],
        scores: Mapping[str, Any],
        preferences: Optional[WorkoutPreferences] = None,
    ) -> UserAnalysis:
        averages = self.calculate_category_averages(scores)
        overall = sum(averages.values()) / len(averages)
        prefs = preferences or WorkoutPreferences()

        return UserAnalysis(
            category_averages=averages,
            weakest_category=self.find_weakest_category(averages),
            strongest_category=self.find_strongest_category(averages),
            experience_level=self.determine_experience_level(profile, averages),
            overall_skill_level=round_tenth(overall),
            focus_areas=self.identify_focus_areas(averages),
            user_motivation=prefs.motivation_level,
        )

    def calculate_category_averages(self, scores: Mapping[str, Any]) -> Dict[str, float]:
        """Unweighted mean per category over coerce-or-default scores."""
        normalized = normalize_scores(scores, self.config.skill_codes, self.settings.neutral_score)
        averages: Dict[str, float] = {}
        for category in self.config.categories:
            values = [normalized[code] for code in category.skill_codes]
            averages[category.code] = sum(values) / len(values)
        return averages

    def find_weakest_category(self, averages: Mapping[str, float]) -> CategoryFocus:
        """Lowest average; the earliest category in canonical order wins ties."""
        order = [code for code in self.config.category_order if code in averages]
        weakest = order[0]
        for code in order:
            if averages[code] < averages[weakest]:
                weakest = code
        return CategoryFocus(category=weakest, score=averages[weakest])

    def find_strongest_category(self, averages: Mapping[str, float]) -> CategoryFocus:
        """Highest average; the earliest category in canonical order wins ties."""
        order = [code for code in self.config.category_order if code in averages]
        strongest = order[0]
        for code in order:
            if averages[code] > averages[strongest]:
                strongest = code
        return CategoryFocus(category=strongest, score=averages[strongest])

    @staticmethod
    def determine_experience_level(
        profile: Optional[UserProfile],
        averages: Mapping[str, float],
    ) -> ExperienceLevel:
        average = sum(averages.values()) / len(averages)
        years = profile.years_experience if profile else 0

        if average >= 8 and years >= 5:
            return ExperienceLevel.EXPERT
        if average >= 6.5 and years >= 3:
            return ExperienceLevel.ADVANCED
        if average >= 4.5 and years >= 1:
            return ExperienceLevel.INTERMEDIATE
        return ExperienceLevel.BEGINNER

    def identify_focus_areas(self, averages: Mapping[str, float]) -> List[FocusArea]:
        areas = []
        for code in self.config.category_order:
            score = averages.get(code)
            if score is None:
                continue
            if score < 4:
                areas.append(FocusArea(code, "high", "below_proficient"))
            elif score < 6:
                areas.append(FocusArea(code, "medium", "needs_improvement"))
        return areas

    # -------------------------------------------------------------------------
    # Time and equipment
    # -------------------------------------------------------------------------

    def calculate_time_allocation(self, planned_duration: int) -> TimeAllocation:
        """
        Snap to the nearest template, or scale the largest one.

        Templates are compared in ascending order with a strict ``<`` so a
        duration equidistant from two templates gets the shorter one.
        """
        sizes = sorted(self.config.time_templates)
        closest = sizes[0]
        for size in sizes:
            if abs(size - planned_duration) < abs(closest - planned_duration):
                closest = size

        largest = sizes[-1]
        if planned_duration > largest:
            factor = planned_duration / largest
            base = self.config.time_templates[largest].to_full_dict()
            return TimeAllocation(**{
                bucket: round_half_up(minutes * factor) for bucket, minutes in base.items()
            })

        return self.config.time_templates[closest]

    def assess_equipment_level(self, available_equipment: Optional[Iterable[str]]) -> EquipmentTier:
        """Highest tier whose required equipment is all available."""
        owned = set(available_equipment or ())
        for tier in (
            EquipmentTier.PREMIUM,
            EquipmentTier.ADVANCED,
            EquipmentTier.INTERMEDIATE,
            EquipmentTier.BASIC,
        ):
            required = self.config.equipment_requirements.get(tier)
            if required is not None and required <= owned:
                return tier
        return EquipmentTier.MINIMAL

    # -------------------------------------------------------------------------
    # Phase assembly
    # -------------------------------------------------------------------------

    def build_workout_structure(
        self,
        analysis: UserAnalysis,
        allocation: TimeAllocation,
        equipment_level: EquipmentTier,
        preferences: Optional[WorkoutPreferences] = None,
    ) -> WorkoutPlan:
        """Assemble every phase with minutes allotted; 0-minute phases are left out."""
        prefs = preferences or WorkoutPreferences()
        phases: List[Optional[WorkoutPhase]] = [
            self.select_warmup_drills(allocation.warmup) if allocation.warmup > 0 else None,
            self.select_main_work_drills(
                analysis.weakest_category,
                allocation.weakest_category,
                equipment_level,
                analysis.experience_level,
            ) if allocation.weakest_category > 0 else None,
            self.select_secondary_drills(
                analysis, allocation.other_categories, equipment_level
            ) if allocation.other_categories > 0 else None,
            self.select_education_content(allocation.education, analysis.category_averages.get("education", 5)),
            self.select_cooldown_drills(allocation.cooldown)
            if prefs.include_cooldown is not False else None,
            self.create_video_review_section(allocation.video_review)
            if prefs.include_video_review is not False else None,
        ]
        return WorkoutPlan(phases={phase.name: phase for phase in phases if phase is not None})

    @staticmethod
    def select_warmup_drills(duration: int) -> WorkoutPhase:
        return WorkoutPhase(
            name=PhaseName.WARMUP,
            total_duration=duration,
            drills=[
                PlanDrill(
                    code="dynamic_stretching",
                    name="Dynamic Stretching",
                    duration=max(2, math.floor(duration * 0.6)),
                    instructions="Perform arm circles, leg swings, and torso rotations to prepare your body",
                    coaching_points=[
                        "Start slow and gradually increase range of motion",
                        "Focus on catching-specific movements",
                    ],
                ),
                PlanDrill(
                    code="light_throwing",
                    name="Light Throwing Warmup",
                    duration=max(1, math.ceil(duration * 0.4)),
                    instructions="Light throwing to warm up your arm and practice basic mechanics",
                    coaching_points=[
                        "Start close and gradually increase distance",
                        "Focus on proper form over velocity",
                    ],
                ),
            ],
            phase_goals=["Prepare body for training", "Activate catching muscles", "Review basic mechanics"],
        )

    def select_main_work_drills(
        self,
        weakest: CategoryFocus,
        duration: int,
        equipment_level: EquipmentTier,
        experience_level: ExperienceLevel,
    ) -> WorkoutPhase:
        category = weakest.category
        drills = self.catalog.get_drills_for_category(
            category, duration, equipment_level, ExperienceLevel(experience_level).value
        )
        return WorkoutPhase(
            name=PhaseName.MAIN_WORK,
            total_duration=duration,
            drills=list(drills),
            phase_goals=[
                f"Target weakest area: {category}",
                "Build fundamental skills",
                "Increase confidence through repetition",
            ],
            target_category=category,
            target_score=weakest.score,
            improvement_focus=f"Improve {category} from {_format_score(weakest.score)}/10",
        )

    def select_secondary_drills(
        self,
        analysis: UserAnalysis,
        duration: int,
        equipment_level: EquipmentTier,
    ) -> WorkoutPhase:
        """Up to three non-focus categories, worst first, with equal minutes each."""
        averages = analysis.category_averages
        others = [
            code for code in self.config.category_order
            if code != analysis.weakest_category.category and code in averages
        ]
        others.sort(key=lambda code: averages[code])

        drills: List[PlanDrill] = []
        if others:
            per_category = duration // min(3, len(others))
            for code in others[:3]:
                drills.extend(
                    self.catalog.get_drills_for_category(code, per_category, equipment_level, "maintenance")
                )

        return WorkoutPhase(
            name=PhaseName.SECONDARY_WORK,
            total_duration=duration,
            drills=drills,
            phase_goals=["Maintain other skill areas", "Provide variety", "Prevent skill imbalances"],
        )

    @staticmethod
    def select_education_content(duration: int, education_score: float) -> Optional[WorkoutPhase]:
        if duration <= 0:
            return None

        for upper, title, content in EDUCATION_VIDEOS:
            if education_score < upper:
                break

        video = PlanDrill(
            code="education_video",
            name=title,
            duration=math.ceil(duration * 0.7),
            activity_type=ActivityType.VIDEO,
            category="education",
            content=content,
        )
        items = [video]
        if duration > 3:
            items.append(PlanDrill(
                code="training_reflection",
                name="Training Reflection",
                duration=duration - video.duration,
                activity_type=ActivityType.REFLECTION,
                category="education",
                content="Think about what you learned and how to apply it",
            ))

        return WorkoutPhase(
            name=PhaseName.EDUCATION,
            total_duration=duration,
            drills=items,
            phase_goals=["Develop mental game", "Learn strategy", "Build game awareness"],
        )

    @staticmethod
    def select_cooldown_drills(duration: int) -> Optional[WorkoutPhase]:
        if duration <= 0:
            return None
        return WorkoutPhase(
            name=PhaseName.COOLDOWN,
            total_duration=duration,
            drills=[
                PlanDrill(
                    code="static_stretching",
                    name="Static Stretching",
                    duration=duration,
                    instructions="Gentle stretching to help recovery and prevent injury",
                    coaching_points=["Hold stretches for 20-30 seconds", "Focus on areas worked during training"],
                ),
            ],
            phase_goals=["Promote recovery", "Prevent injury", "Reflect on training"],
        )

    @staticmethod
    def create_video_review_section(duration: int) -> Optional[WorkoutPhase]:
        if duration <= 0:
            return None
        return WorkoutPhase(
            name=PhaseName.VIDEO_REVIEW,
            total_duration=duration,
            drills=[
                PlanDrill(
                    code="compare_previous_videos",
                    name="Compare Previous Videos",
                    duration=math.ceil(duration * 0.6),
                    instructions="Review videos from previous sessions to see improvement",
                    activity_type=ActivityType.VIDEO_COMPARISON,
                ),
                PlanDrill(
                    code="record_progress_video",
                    name="Record New Progress Video",
                    duration=math.floor(duration * 0.4),
                    instructions="Record a new video of your best drill from today",
                    activity_type=ActivityType.RECORD_NEW_VIDEO,
                ),
            ],
            phase_goals=["Track visual progress", "Identify improvements", "Motivate continued training"],
        )

    # -------------------------------------------------------------------------
    # Coaching guidance and metadata
    # -------------------------------------------------------------------------

    def build_coaching_guidance(self, analysis: UserAnalysis, seed: str = "") -> CoachingGuidance:
        weakest = analysis.weakest_category.category
        return CoachingGuidance(
            pre_workout_tips=[
                "Take your time with setup - good habits start from the beginning",
                f"Today we're focusing on {weakest} - this is your biggest opportunity for improvement",
            ],
            focus_reminders=list(self.config.category_tips.get(weakest, ())),
            motivational_message=self.generate_motivational_message(analysis, seed),
            success_criteria=self.define_success_criteria(analysis),
        )

    def generate_motivational_message(self, analysis: UserAnalysis, seed: str = "") -> str:
        """Pick a message deterministically from the seed (the plan id)."""
        messages = self.config.motivational_messages
        index = zlib.crc32(seed.encode("utf-8")) % len(messages)
        return messages[index].format(
            weakest=analysis.weakest_category.category,
            overall=_format_score(analysis.overall_skill_level),
        )

    @staticmethod
    def define_success_criteria(analysis: UserAnalysis) -> List[str]:
        return [
            "Complete at least 80% of planned drills",
            f"Show improvement in {analysis.weakest_category.category} technique",
            "Maintain good form throughout the session",
            "Record at least one progress video if applicable",
        ]

    def generate_workout_metadata(
        self,
        profile: Optional[UserProfile],
        assessment: Assessment,
        allocation: TimeAllocation,
        equipment_level: EquipmentTier,
    ) -> Dict[str, Any]:
        return {
            "algorithm_version": self.settings.algorithm_version,
            "generation_timestamp": self._clock().isoformat(),
            "user_experience_level": profile.experience_level if profile else None,
            "assessment_date": assessment.created_at.isoformat() if assessment.created_at else None,
            "equipment_level": equipment_level.value,
            "time_allocation": allocation.to_dict(),
            "total_planned_duration": allocation.total,
            "workout_complexity": self.calculate_workout_complexity(allocation, equipment_level),
            "personalization_factors": list(PERSONALIZATION_FACTORS),
        }

    @staticmethod
    def calculate_workout_complexity(allocation: TimeAllocation, equipment_level: EquipmentTier) -> int:
        return min(10, round_half_up(allocation.total / 10 + EquipmentTier(equipment_level).rank))

    # -------------------------------------------------------------------------
    # Fallback
    # -------------------------------------------------------------------------

    @staticmethod
    def generate_fallback_workout(duration: int) -> WorkoutPlan:
        """Minimal three-phase plan used when generation fails."""
        return WorkoutPlan(
            phases={
                PhaseName.WARMUP: WorkoutPhase(
                    name=PhaseName.WARMUP,
                    total_duration=max(2, math.floor(duration * 0.15)),
                    drills=[PlanDrill(
                        code="basic_warmup",
                        name="Basic Warmup",
                        duration=max(2, math.floor(duration * 0.15)),
                        instructions="Light stretching and movement to prepare for training",
                    )],
                ),
                PhaseName.MAIN_WORK: WorkoutPhase(
                    name=PhaseName.MAIN_WORK,
                    total_duration=max(0, math.floor(duration * 0.7)),
                    drills=[PlanDrill(
                        code="general_catching_practice",
                        name="General Catching Practice",
                        duration=max(0, math.floor(duration * 0.7)),
                        instructions="Work on basic catching fundamentals with available equipment",
                    )],
                ),
                PhaseName.COOLDOWN: WorkoutPhase(
                    name=PhaseName.COOLDOWN,
                    total_duration=max(1, math.floor(duration * 0.15)),
                    drills=[PlanDrill(
                        code="light_stretching",
                        name="Light Stretching",
                        duration=max(1, math.floor(duration * 0.15)),
                        instructions="Gentle stretching to cool down",
                    )],
                ),
            },
            fallback=True,
            message=FALLBACK_MESSAGE,
        )

    # -------------------------------------------------------------------------
    # Input coercion
    # -------------------------------------------------------------------------

    @staticmethod
    def _as_profile(value: Optional[Union[UserProfile, Mapping[str, Any]]]) -> UserProfile:
        if isinstance(value, UserProfile):
            return value
        return UserProfile.model_validate(dict(value or {}))

    @staticmethod
    def _as_preferences(value: Optional[Union[WorkoutPreferences, Mapping[str, Any]]]) -> WorkoutPreferences:
        if isinstance(value, WorkoutPreferences):
            return value
        return WorkoutPreferences.model_validate(dict(value or {}))

    def _as_assessment(
        self,
        value: Optional[Union[Assessment, Mapping[str, Any]]],
        profile: UserProfile,
    ) -> Assessment:
        if isinstance(value, Assessment):
            return value
        if not value:
            self.logger.debug("No assessment supplied; using neutral scores")
            return Assessment.default(user_id=profile.user_id, score=self.settings.neutral_score)
        return Assessment.from_mapping(value, self.config.skill_codes, self.settings.neutral_score)
