"""Athlete profile and host-supplied feedback models."""

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class UserProfile(BaseModel):
    """Athlete profile supplied by the persistence layer."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: Optional[str] = None
    name: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=5, le=99)
    experience_level: Optional[str] = None
    years_experience: float = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("years_experience", "years_catching"),
    )
    equipment: List[str] = Field(default_factory=list)
    preferences: Dict[str, Any] = Field(default_factory=dict)


class WorkoutPreferences(BaseModel):
    """Optional overrides for a single generation request."""

    model_config = ConfigDict(extra="allow")

    motivation_level: str = Field(
        default="medium",
        validation_alias=AliasChoices("motivation_level", "motivationLevel"),
    )
    include_video_review: Optional[bool] = None
    include_cooldown: Optional[bool] = None


class SessionSettings(BaseModel):
    """Per-session settings chosen when starting a session."""

    model_config = ConfigDict(extra="allow")

    pre_workout_energy: Optional[int] = Field(default=None, ge=1, le=10)


class DrillCompletionData(BaseModel):
    """Feedback collected when a drill is marked complete."""

    model_config = ConfigDict(extra="allow")

    completion_percentage: int = Field(default=100, ge=0, le=100)
    difficulty_rating: Optional[int] = Field(default=None, ge=1, le=10)
    effectiveness_rating: Optional[int] = Field(default=None, ge=1, le=10)
    notes: str = ""
    videos_recorded: List[str] = Field(default_factory=list)


class SessionCompletionData(BaseModel):
    """Final ratings collected when a session ends."""

    overall_satisfaction: Optional[int] = Field(default=None, ge=1, le=10)
    perceived_difficulty: Optional[int] = Field(default=None, ge=1, le=10)
    effectiveness_rating: Optional[int] = Field(default=None, ge=1, le=10)
    post_workout_energy: Optional[int] = Field(default=None, ge=1, le=10)
    session_notes: str = ""


class SessionFeedback(BaseModel):
    """Mid-session feedback for the current drill and/or the session."""

    drill_feedback: Optional[Dict[str, Any]] = None
    session_feedback: Optional[Dict[str, Any]] = None


class VideoData(BaseModel):
    """Metadata for a progress video recorded by the host."""

    video_url: str
    duration: Optional[float] = Field(default=None, ge=0)
    file_size: Optional[int] = Field(default=None, ge=0)
    resolution: Optional[str] = None
    notes: str = ""
