"""Data models for assessments, workout plans and sessions."""

from .skills import (
    Assessment,
    AssessmentType,
    NEUTRAL_SCORE,
    PROFICIENCY_LEVELS,
    ProficiencyLevel,
    SKILL_CATEGORIES,
    SKILL_CODES,
    SkillCategory,
    SkillCategoryCode,
    SkillDefinition,
    SkillsConfig,
    coerce_score,
    normalize_scores,
)
from .profile import (
    DrillCompletionData,
    SessionCompletionData,
    SessionFeedback,
    SessionSettings,
    UserProfile,
    VideoData,
    WorkoutPreferences,
)
from .workouts import (
    ActivityType,
    CoachingGuidance,
    Drill,
    EquipmentTier,
    ExperienceLevel,
    PHASE_SEQUENCE,
    PhaseName,
    PlanDrill,
    TimeAllocation,
    WorkoutPhase,
    WorkoutPlan,
)
from .session import (
    ImprovementArea,
    PauseEvent,
    PerformanceSummary,
    SessionAchievement,
    SessionReport,
    SessionStatus,
    WorkoutSession,
)

__all__ = [
    # Skills
    "Assessment",
    "AssessmentType",
    "NEUTRAL_SCORE",
    "PROFICIENCY_LEVELS",
    "ProficiencyLevel",
    "SKILL_CATEGORIES",
    "SKILL_CODES",
    "SkillCategory",
    "SkillCategoryCode",
    "SkillDefinition",
    "SkillsConfig",
    "coerce_score",
    "normalize_scores",
    # Profile and feedback
    "DrillCompletionData",
    "SessionCompletionData",
    "SessionFeedback",
    "SessionSettings",
    "UserProfile",
    "VideoData",
    "WorkoutPreferences",
    # Workouts
    "ActivityType",
    "CoachingGuidance",
    "Drill",
    "EquipmentTier",
    "ExperienceLevel",
    "PHASE_SEQUENCE",
    "PhaseName",
    "PlanDrill",
    "TimeAllocation",
    "WorkoutPhase",
    "WorkoutPlan",
    # Sessions
    "ImprovementArea",
    "PauseEvent",
    "PerformanceSummary",
    "SessionAchievement",
    "SessionReport",
    "SessionStatus",
    "WorkoutSession",
]
