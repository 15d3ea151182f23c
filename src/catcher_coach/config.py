"""Configuration settings for the Catcher Coach library."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CATCHER_COACH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    sanitize_logs: bool = True

    # Versions stamped on analysis results and generated plans
    analysis_version: str = "1.0.0"
    algorithm_version: str = "1.0.0"

    # Scoring
    neutral_score: int = Field(default=5, ge=1, le=10)  # Used when a raw score is missing
    min_score: int = 1
    max_score: int = 10

    # Assessment plausibility checks
    uniform_score_threshold: int = 9  # Identical scores that make an assessment suspicious
    high_score_cutoff: int = 8
    low_score_cutoff: int = 4
    confidence_pattern_ratio: float = 0.7

    # Workout generation
    default_duration_minutes: int = 30


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
