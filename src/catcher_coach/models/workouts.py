"""Workout plan data models: phases, plan drills, catalog drills and time buckets."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple
import uuid


class PhaseName(str, Enum):
    """Workout phases, declared in canonical execution order."""
    WARMUP = "warmup"
    MAIN_WORK = "main_work"
    SECONDARY_WORK = "secondary_work"
    EDUCATION = "education"
    VIDEO_REVIEW = "video_review"
    COOLDOWN = "cooldown"


PHASE_SEQUENCE: Tuple[PhaseName, ...] = tuple(PhaseName)


class ActivityType(str, Enum):
    """Kinds of items a phase can hold."""
    DRILL = "drill"
    VIDEO = "video"
    REFLECTION = "reflection"
    VIDEO_COMPARISON = "video_comparison"
    RECORD_NEW_VIDEO = "record_new_video"


class EquipmentTier(str, Enum):
    """Equipment classification, lowest to highest."""
    MINIMAL = "minimal"
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    PREMIUM = "premium"

    @property
    def rank(self) -> int:
        """Return the ordinal position of the tier (minimal=1 ... premium=5)."""
        return list(EquipmentTier).index(self) + 1


class ExperienceLevel(str, Enum):
    """Inferred experience level of the athlete."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


@dataclass
class PlanDrill:
    """
    One item inside a workout phase.

    Drills, education content blocks and video-review activities all share
    this shape so the session executor can walk every phase the same way.
    """
    code: str
    name: str
    duration: int
    instructions: str = ""
    coaching_points: List[str] = field(default_factory=list)
    activity_type: ActivityType = ActivityType.DRILL
    category: Optional[str] = None
    content: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.activity_type, str):
            self.activity_type = ActivityType(self.activity_type)

    def to_dict(self) -> dict:
        data = {
            "drill_code": self.code,
            "name": self.name,
            "duration": self.duration,
            "instructions": self.instructions,
            "coaching_points": list(self.coaching_points),
            "activity_type": self.activity_type.value,
        }
        if self.category is not None:
            data["category"] = self.category
        if self.content is not None:
            data["content"] = self.content
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlanDrill":
        name = data.get("name") or data.get("title") or "Drill"
        return cls(
            code=data.get("drill_code") or data.get("code") or name,
            name=name,
            duration=int(data.get("duration") or 0),
            instructions=data.get("instructions") or "",
            coaching_points=list(data.get("coaching_points") or []),
            activity_type=data.get("activity_type") or data.get("type") or ActivityType.DRILL,
            category=data.get("category"),
            content=data.get("content"),
        )


@dataclass
class WorkoutPhase:
    """A named segment of a workout plan."""
    name: PhaseName
    total_duration: int
    drills: List[PlanDrill] = field(default_factory=list)
    phase_goals: List[str] = field(default_factory=list)
    target_category: Optional[str] = None
    target_score: Optional[float] = None
    improvement_focus: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.name, str):
            self.name = PhaseName(self.name)

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {
            "total_duration": self.total_duration,
            "drills": [drill.to_dict() for drill in self.drills],
            "phase_goals": list(self.phase_goals),
        }
        if self.target_category is not None:
            data["target_category"] = self.target_category
            data["target_score"] = self.target_score
            data["improvement_focus"] = self.improvement_focus
        return data

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "WorkoutPhase":
        # Older stored plans keep education items under "content" and
        # video-review items under "activities".
        items = data.get("drills")
        if items is None:
            items = data.get("content")
        if items is None:
            items = data.get("activities")
        return cls(
            name=PhaseName(name),
            total_duration=int(data.get("total_duration") or 0),
            drills=[PlanDrill.from_dict(item) for item in (items or [])],
            phase_goals=list(data.get("phase_goals") or []),
            target_category=data.get("target_category"),
            target_score=data.get("target_score"),
            improvement_focus=data.get("improvement_focus"),
        )


@dataclass
class CoachingGuidance:
    """Tips and motivation attached to a generated plan."""
    pre_workout_tips: List[str] = field(default_factory=list)
    focus_reminders: List[str] = field(default_factory=list)
    motivational_message: str = ""
    success_criteria: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "pre_workout_tips": list(self.pre_workout_tips),
            "focus_reminders": list(self.focus_reminders),
            "motivational_message": self.motivational_message,
            "success_criteria": list(self.success_criteria),
        }


@dataclass
class WorkoutPlan:
    """
    A generated practice plan.

    Phases are stored keyed by name; iteration always follows the canonical
    phase sequence and skips phases the plan does not contain.
    """
    phases: Dict[PhaseName, WorkoutPhase] = field(default_factory=dict)
    coaching_guidance: Optional[CoachingGuidance] = None
    plan_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    fallback: bool = False
    message: Optional[str] = None

    def __iter__(self) -> Iterator[WorkoutPhase]:
        for name in PHASE_SEQUENCE:
            phase = self.phases.get(name)
            if phase is not None:
                yield phase

    def __contains__(self, name: object) -> bool:
        return name in self.phases

    def get_phase(self, name: PhaseName) -> Optional[WorkoutPhase]:
        return self.phases.get(PhaseName(name))

    @property
    def phase_names(self) -> List[PhaseName]:
        return [phase.name for phase in self]

    @property
    def planned_duration(self) -> int:
        """Sum of phase durations in minutes."""
        return sum(phase.total_duration for phase in self)

    @property
    def total_activities(self) -> int:
        return sum(len(phase.drills) for phase in self)

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {
            "plan_id": self.plan_id,
            "workout": {phase.name.value: phase.to_dict() for phase in self},
        }
        if self.coaching_guidance is not None:
            data["coaching_guidance"] = self.coaching_guidance.to_dict()
        if self.fallback:
            data["fallback"] = True
            data["message"] = self.message
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WorkoutPlan":
        """Rebuild a plan from its stored dict (as produced by ``to_dict``)."""
        workout = data.get("workout", data)
        phases: Dict[PhaseName, WorkoutPhase] = {}
        for name in PHASE_SEQUENCE:
            phase_data = workout.get(name.value)
            if phase_data:
                phases[name] = WorkoutPhase.from_dict(name.value, phase_data)
        guidance = data.get("coaching_guidance")
        return cls(
            phases=phases,
            coaching_guidance=CoachingGuidance(**guidance) if guidance else None,
            plan_id=data.get("plan_id") or str(uuid.uuid4()),
            fallback=bool(data.get("fallback", False)),
            message=data.get("message"),
        )


@dataclass(frozen=True)
class Drill:
    """Read-only drill catalog record."""
    code: str
    name: str
    category: str
    subcategory: str
    difficulty: int
    duration: int
    equipment_required: Tuple[str, ...] = ()
    equipment_tier: EquipmentTier = EquipmentTier.BASIC
    age_range: Tuple[int, int] = (8, 99)
    instructions: Tuple[str, ...] = ()
    coaching_points: Tuple[str, ...] = ()
    common_mistakes: Tuple[str, ...] = ()
    video_url: Optional[str] = None

    def suits_age(self, age: Optional[int]) -> bool:
        if age is None:
            return True
        low, high = self.age_range
        return low <= age <= high

    def to_plan_drill(self, duration: Optional[int] = None) -> PlanDrill:
        """Copy the fields a plan needs; the catalog record is never mutated."""
        return PlanDrill(
            code=self.code,
            name=self.name,
            duration=self.duration if duration is None else duration,
            instructions=" ".join(self.instructions),
            coaching_points=list(self.coaching_points),
            category=self.category,
        )


TIME_BUCKETS: Tuple[str, ...] = (
    "warmup",
    "weakest_category",
    "other_categories",
    "education",
    "cooldown",
    "video_review",
)


@dataclass(frozen=True)
class TimeAllocation:
    """Minutes apportioned to each part of a workout."""
    warmup: int
    weakest_category: int
    other_categories: int
    education: int
    cooldown: int = 0
    video_review: int = 0

    @property
    def total(self) -> int:
        return sum(getattr(self, bucket) for bucket in TIME_BUCKETS)

    def to_dict(self) -> Dict[str, int]:
        """Non-zero buckets only; 0-minute buckets produce no phase."""
        return {bucket: getattr(self, bucket) for bucket in TIME_BUCKETS if getattr(self, bucket) > 0}

    def to_full_dict(self) -> Dict[str, int]:
        return {bucket: getattr(self, bucket) for bucket in TIME_BUCKETS}
