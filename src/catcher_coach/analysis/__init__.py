"""Assessment analysis."""

from .assessment import (
    AssessmentAnalysisResult,
    AssessmentAnalyzer,
    CategoryAnalysis,
    CategoryResult,
    ImprovementPriority,
    ProgressAnalysis,
    StrengthsWeaknesses,
    TrainingRecommendations,
    UserInsights,
    ValidationResult,
    describe_skill_change,
)

__all__ = [
    "AssessmentAnalysisResult",
    "AssessmentAnalyzer",
    "CategoryAnalysis",
    "CategoryResult",
    "ImprovementPriority",
    "ProgressAnalysis",
    "StrengthsWeaknesses",
    "TrainingRecommendations",
    "UserInsights",
    "ValidationResult",
    "describe_skill_change",
]
