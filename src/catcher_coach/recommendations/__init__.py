"""Workout generation and the drill catalog."""

from .drills import (
    CATALOG_DRILLS,
    DIFFICULTY_CAPS,
    EQUIPMENT_REQUIREMENTS,
    DrillCatalog,
    SampleDrillCatalog,
    StaticDrillCatalog,
)
from .workout import (
    TIME_TEMPLATES,
    CategoryFocus,
    FocusArea,
    GeneratorConfig,
    UserAnalysis,
    WorkoutGenerationResult,
    WorkoutGenerator,
)

__all__ = [
    # Drill catalog
    "CATALOG_DRILLS",
    "DIFFICULTY_CAPS",
    "EQUIPMENT_REQUIREMENTS",
    "DrillCatalog",
    "SampleDrillCatalog",
    "StaticDrillCatalog",
    # Generator
    "TIME_TEMPLATES",
    "CategoryFocus",
    "FocusArea",
    "GeneratorConfig",
    "UserAnalysis",
    "WorkoutGenerationResult",
    "WorkoutGenerator",
]
