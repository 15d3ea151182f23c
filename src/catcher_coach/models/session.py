"""
Session execution records.

A ``WorkoutSession`` is the mutable record layered over a ``WorkoutPlan``
while the athlete trains. The plan itself is never modified; every
annotation (timings, completions, skips, pauses, videos) lives here.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid

from pydantic import BaseModel, Field

from .skills import round_half_up
from .workouts import PhaseName, PlanDrill, WorkoutPhase, WorkoutPlan


class SessionStatus(str, Enum):
    """Lifecycle states of a session."""
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    PAUSED = "paused"
    COMPLETED = "completed"


class ItemStatus(str, Enum):
    """Status of a phase or drill inside a session."""
    ACTIVE = "active"
    COMPLETED = "completed"


def minutes_between(start: Optional[datetime], end: datetime) -> int:
    """Whole minutes between two timestamps, rounded."""
    if start is None:
        return 0
    return round_half_up((end - start).total_seconds() / 60)


@dataclass
class ActiveDrill:
    """The drill currently being performed."""
    drill: PlanDrill
    drill_index: int
    started_at: datetime
    completed_at: Optional[datetime] = None
    status: ItemStatus = ItemStatus.ACTIVE
    is_alternative: bool = False
    modifications: List[dict] = field(default_factory=list)
    feedback: Dict[str, Any] = field(default_factory=dict)
    videos_recorded: List["VideoRecord"] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.drill.name

    def duration_minutes(self, now: datetime) -> int:
        return minutes_between(self.started_at, self.completed_at or now)

    def to_dict(self) -> dict:
        return {
            **self.drill.to_dict(),
            "drill_index": self.drill_index,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "status": self.status.value,
            "is_alternative": self.is_alternative,
            "modifications": list(self.modifications),
            "feedback": dict(self.feedback),
        }


@dataclass
class ActivePhase:
    """Cursor state for the phase currently being executed."""
    phase: WorkoutPhase
    started_at: datetime
    drill_index: int = 0
    drills_completed: int = 0
    completed_at: Optional[datetime] = None
    status: ItemStatus = ItemStatus.ACTIVE

    @property
    def name(self) -> PhaseName:
        return self.phase.name

    @property
    def total_drills(self) -> int:
        return len(self.phase.drills)

    @property
    def fractional_progress(self) -> float:
        return self.drills_completed / max(1, self.total_drills)

    def duration_minutes(self, now: datetime) -> int:
        return minutes_between(self.started_at, self.completed_at or now)


@dataclass
class PhaseTiming:
    started_at: datetime
    planned_duration: int
    completed_at: Optional[datetime] = None
    actual_duration: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "started_at": self.started_at.isoformat(),
            "planned_duration": self.planned_duration,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "actual_duration": self.actual_duration,
        }


@dataclass
class CompletedDrillRecord:
    drill_code: str
    drill_name: str
    phase: PhaseName
    completed_at: datetime
    duration: int
    performance_data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "drill_code": self.drill_code,
            "drill_name": self.drill_name,
            "phase": self.phase.value,
            "completed_at": self.completed_at.isoformat(),
            "duration": self.duration,
            "performance_data": dict(self.performance_data),
        }


@dataclass
class SkippedDrillRecord:
    drill_code: str
    drill_name: str
    phase: PhaseName
    skipped_at: datetime
    reason: str
    alternative_performed: Optional[PlanDrill] = None

    def to_dict(self) -> dict:
        return {
            "drill_code": self.drill_code,
            "drill_name": self.drill_name,
            "phase": self.phase.value,
            "skipped_at": self.skipped_at.isoformat(),
            "reason": self.reason,
            "alternative_performed": (
                self.alternative_performed.to_dict() if self.alternative_performed else None
            ),
        }


@dataclass
class PauseEvent:
    paused_at: datetime
    reason: str
    phase: Optional[PhaseName] = None
    drill: Optional[str] = None
    resumed_at: Optional[datetime] = None
    pause_duration: Optional[int] = None  # minutes

    def to_dict(self) -> dict:
        return {
            "paused_at": self.paused_at.isoformat(),
            "reason": self.reason,
            "phase": self.phase.value if self.phase else None,
            "drill": self.drill,
            "resumed_at": self.resumed_at.isoformat() if self.resumed_at else None,
            "pause_duration": self.pause_duration,
        }


@dataclass
class VideoRecord:
    video_id: str
    recorded_at: datetime
    video_url: str
    phase: Optional[PhaseName] = None
    drill: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    user_notes: str = ""

    def to_dict(self) -> dict:
        return {
            "video_id": self.video_id,
            "recorded_at": self.recorded_at.isoformat(),
            "video_url": self.video_url,
            "phase": self.phase.value if self.phase else None,
            "drill": self.drill,
            "video_metadata": dict(self.metadata),
            "user_notes": self.user_notes,
        }


@dataclass
class FeedbackEntry:
    timestamp: datetime
    feedback: Dict[str, Any]
    phase: Optional[PhaseName] = None
    drill: Optional[str] = None


@dataclass
class PerformanceSummary:
    drills_completed: int
    drills_skipped: int
    phases_completed: int
    videos_recorded: int
    total_duration: int
    completion_rate: int

    def to_dict(self) -> dict:
        return {
            "drills_completed": self.drills_completed,
            "drills_skipped": self.drills_skipped,
            "phases_completed": self.phases_completed,
            "videos_recorded": self.videos_recorded,
            "total_duration": self.total_duration,
            "completion_rate": self.completion_rate,
        }


class SessionAchievement(BaseModel):
    """Badge earned during a single session."""

    type: str = Field(..., description="Achievement family")
    title: str = Field(..., description="Display name of the badge")
    description: str = Field(..., description="Why it was earned")


class ImprovementArea(BaseModel):
    """Rule-based suggestion for the next session."""

    area: str
    suggestion: str
    priority: str


class SessionReport(BaseModel):
    """Completion report produced when a session is finalized."""

    session_id: str
    completed_at: datetime
    total_duration: int
    planned_duration: int
    efficiency: Optional[int] = None
    performance_metrics: Dict[str, Any]
    achievements: List[SessionAchievement] = Field(default_factory=list)
    areas_for_improvement: List[ImprovementArea] = Field(default_factory=list)
    next_session_recommendations: List[str] = Field(default_factory=list)

    @property
    def achievement_titles(self) -> List[str]:
        return [achievement.title for achievement in self.achievements]


@dataclass
class WorkoutSession:
    """
    Mutable execution record for one run through a plan.

    The executor threads this object through every transition. After
    completion it is treated as immutable.
    """
    plan: WorkoutPlan
    started_at: datetime
    session_id: str = field(default_factory=lambda: f"session_{uuid.uuid4().hex[:12]}")
    user_id: Optional[str] = None
    status: SessionStatus = SessionStatus.IDLE
    settings: Dict[str, Any] = field(default_factory=dict)
    completed_at: Optional[datetime] = None
    paused_at: Optional[datetime] = None
    resumed_at: Optional[datetime] = None

    # Cursor
    phase_index: int = 0
    current_phase: Optional[ActivePhase] = None
    current_drill: Optional[ActiveDrill] = None

    # Progress tracking
    completed_phases: List[PhaseName] = field(default_factory=list)
    completed_drills: List[CompletedDrillRecord] = field(default_factory=list)
    skipped_drills: List[SkippedDrillRecord] = field(default_factory=list)
    phase_timings: Dict[PhaseName, PhaseTiming] = field(default_factory=dict)
    pause_events: List[PauseEvent] = field(default_factory=list)
    feedback_log: List[FeedbackEntry] = field(default_factory=list)
    videos_recorded: List[VideoRecord] = field(default_factory=list)
    modifications_made: List[dict] = field(default_factory=list)

    # Feedback
    ratings: Dict[str, Any] = field(default_factory=dict)
    notes: str = ""
    energy_levels: Dict[str, Optional[int]] = field(
        default_factory=lambda: {"pre_workout": None, "post_workout": None}
    )

    # Finalization
    actual_duration: int = 0
    performance_summary: Optional[PerformanceSummary] = None
    report: Optional[SessionReport] = None

    @property
    def planned_duration(self) -> int:
        return self.plan.planned_duration

    @property
    def phases(self) -> List[WorkoutPhase]:
        """Phases to execute, in canonical order."""
        return list(self.plan)

    @property
    def is_active(self) -> bool:
        return self.status in (SessionStatus.IN_PROGRESS, SessionStatus.PAUSED)

    @property
    def is_completed(self) -> bool:
        return self.status == SessionStatus.COMPLETED

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "user_id": self.user_id,
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "planned_duration": self.planned_duration,
            "actual_duration": self.actual_duration,
            "current_phase_index": self.phase_index,
            "completed_phases": [name.value for name in self.completed_phases],
            "completed_drills": [record.to_dict() for record in self.completed_drills],
            "skipped_drills": [record.to_dict() for record in self.skipped_drills],
            "phase_timings": {name.value: timing.to_dict() for name, timing in self.phase_timings.items()},
            "pause_events": [event.to_dict() for event in self.pause_events],
            "videos_recorded": [video.to_dict() for video in self.videos_recorded],
            "modifications_made": list(self.modifications_made),
            "ratings": dict(self.ratings),
            "notes": self.notes,
            "energy_levels": dict(self.energy_levels),
            "performance_summary": (
                self.performance_summary.to_dict() if self.performance_summary else None
            ),
        }
