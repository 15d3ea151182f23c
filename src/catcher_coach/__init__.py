"""
Catcher Coach - skills assessment analysis, personalized workout
generation and guided session execution for baseball catchers.
"""

__version__ = "0.1.0"

from .analysis import AssessmentAnalyzer, AssessmentAnalysisResult
from .config import Settings, get_settings
from .exceptions import (
    AssessmentValidationError,
    CatcherCoachError,
    ErrorCode,
    GenerationError,
    ListenerError,
    NoActiveDrillError,
    NoActiveSessionError,
    PlanValidationError,
    StateError,
    ValidationError,
)
from .models import Assessment, SkillsConfig, UserProfile, WorkoutPlan, WorkoutSession
from .recommendations import StaticDrillCatalog, WorkoutGenerationResult, WorkoutGenerator
from .services import EventBus, SessionEvent, SessionExecutor
from .utils import configure_logging

__all__ = [
    "__version__",
    "AssessmentAnalyzer",
    "AssessmentAnalysisResult",
    "Settings",
    "get_settings",
    "AssessmentValidationError",
    "CatcherCoachError",
    "ErrorCode",
    "GenerationError",
    "ListenerError",
    "NoActiveDrillError",
    "NoActiveSessionError",
    "PlanValidationError",
    "StateError",
    "ValidationError",
    "Assessment",
    "SkillsConfig",
    "UserProfile",
    "WorkoutPlan",
    "WorkoutSession",
    "StaticDrillCatalog",
    "WorkoutGenerationResult",
    "WorkoutGenerator",
    "EventBus",
    "SessionEvent",
    "SessionExecutor",
    "configure_logging",
]
