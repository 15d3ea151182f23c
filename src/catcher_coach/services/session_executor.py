"""
Session Executor

Walks an athlete through a generated workout plan phase by phase:
- Starts phases and drills in canonical order
- Records completions, skips, pauses, videos and feedback
- Produces a completion report with badges and next-session advice

The executor holds no session state of its own. Every method takes the
``WorkoutSession`` it operates on, so one executor can drive any number of
sessions. State-machine misuse on destructive operations (completing or
skipping with nothing active) raises ``StateError``; expected wrong-state
calls such as pausing twice return a failed ``ServiceResult``.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union
import uuid

from ..config import Settings
from ..exceptions import (
    ErrorCode,
    NoActiveDrillError,
    NoActiveSessionError,
    PlanValidationError,
)
from ..models.profile import (
    DrillCompletionData,
    SessionCompletionData,
    SessionFeedback,
    SessionSettings,
    VideoData,
)
from ..models.session import (
    ActiveDrill,
    ActivePhase,
    CompletedDrillRecord,
    FeedbackEntry,
    ImprovementArea,
    ItemStatus,
    PauseEvent,
    PerformanceSummary,
    PhaseTiming,
    SessionAchievement,
    SessionReport,
    SessionStatus,
    SkippedDrillRecord,
    VideoRecord,
    WorkoutSession,
    minutes_between,
)
from ..models.skills import round_half_up
from ..models.workouts import PhaseName, PlanDrill, WorkoutPhase, WorkoutPlan
from .base import BaseService, ServiceResult
from .events import EventBus, EventPayload, SessionEvent


# =============================================================================
# Configuration
# =============================================================================

PHASE_INSTRUCTIONS: Dict[str, Dict[str, Any]] = {
    "warmup": {
        "title": "Warmup Phase",
        "description": "Prepare your body for training",
        "tips": ("Start slowly and gradually increase intensity", "Focus on injury prevention", "Listen to your body"),
    },
    "main_work": {
        "title": "Main Training Phase",
        "description": "Focus on {target_category}",
        "tips": ("Concentrate on proper form", "Quality over quantity", "Take breaks if needed"),
    },
    "secondary_work": {
        "title": "Secondary Skills Phase",
        "description": "Work on supporting skills and maintain balance",
        "tips": (
            "Maintain focus even though this isn't your weakest area",
            "Good opportunity to build confidence",
        ),
    },
    "education": {
        "title": "Education & Mental Game",
        "description": "Learn strategy and develop your mental approach",
        "tips": (
            "Take notes on key concepts",
            "Think about how to apply this in games",
            "Ask questions if you have a coach",
        ),
    },
    "video_review": {
        "title": "Video Review & Progress Tracking",
        "description": "Compare your progress and record new videos",
        "tips": (
            "Look for specific improvements in technique",
            "Be objective about your progress",
            "Record your best attempts",
        ),
    },
    "cooldown": {
        "title": "Cooldown & Recovery",
        "description": "Help your body recover from training",
        "tips": (
            "Don't rush this phase",
            "Focus on areas that feel tight",
            "Reflect on what you learned today",
        ),
    },
}

DEFAULT_PHASE_INSTRUCTIONS: Dict[str, Any] = {
    "title": "Training Phase",
    "description": "Continue with your training",
    "tips": ("Stay focused and work hard",),
}

EQUIPMENT_ALTERNATIVES: Dict[str, str] = {
    "no_catcher_gear": "Practice receiving mechanics without gear, focus on glove work",
    "no_tennis_balls": "Use imaginary balls and focus on movement patterns",
    "limited_space": "Adapt drill for smaller area, reduce movement distance",
    "no_partner": "Use wall work or self-toss variations",
    "no_home_plate": "Use any flat marker or imaginary home plate",
}
DEFAULT_EQUIPMENT_ALTERNATIVE = "Adapt drill as needed for available resources"


@dataclass(frozen=True)
class ExecutorConfig:
    """Thresholds and text tables used when running and reporting sessions."""
    phase_instructions: Mapping[str, Mapping[str, Any]] = field(
        default_factory=lambda: dict(PHASE_INSTRUCTIONS)
    )
    equipment_alternatives: Mapping[str, str] = field(default_factory=lambda: dict(EQUIPMENT_ALTERNATIVES))
    session_master_rate: int = 90       # Completion % for the "Session Master" badge
    low_completion_rate: int = 70       # Below this, completion is an improvement area
    max_skips: int = 2                  # More skips than this flags drill engagement
    min_efficiency: int = 80            # Planned/actual % below this flags time management
    low_effectiveness_rating: int = 6


# =============================================================================
# Result Types
# =============================================================================

@dataclass
class SessionStartResult:
    success: bool
    session: Optional[WorkoutSession] = None
    first_phase: Optional[PhaseName] = None
    estimated_duration: int = 0
    message: str = ""
    error: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    @property
    def session_id(self) -> Optional[str]:
        return self.session.session_id if self.session else None

    def to_dict(self) -> dict:
        if not self.success:
            return {"success": False, "error": self.error, "errors": list(self.errors)}
        return {
            "success": True,
            "session_id": self.session_id,
            "status": self.session.status.value if self.session else None,
            "first_phase": self.first_phase.value if self.first_phase else None,
            "estimated_duration": self.estimated_duration,
            "message": self.message,
        }


@dataclass
class SessionStep:
    """Where a session stands after a drill was completed or skipped."""
    session: WorkoutSession
    current_phase: Optional[PhaseName] = None
    current_drill: Optional[ActiveDrill] = None
    session_completed: bool = False
    report: Optional[SessionReport] = None

    def to_dict(self) -> dict:
        return {
            "session_id": self.session.session_id,
            "status": self.session.status.value,
            "current_phase": self.current_phase.value if self.current_phase else None,
            "current_drill": self.current_drill.to_dict() if self.current_drill else None,
            "session_completed": self.session_completed,
            "report": self.report.model_dump(mode="json") if self.report else None,
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _validate(model, value):
    """Accept a pydantic model instance, a mapping or None."""
    if isinstance(value, model):
        return value
    return model.model_validate(dict(value or {}))


# =============================================================================
# Executor
# =============================================================================

class SessionExecutor(BaseService):
    """
    Drives workout sessions through their lifecycle.

    States: idle -> in_progress <-> paused -> completed.
    """

    def __init__(
        self,
        config: Optional[ExecutorConfig] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        super().__init__(settings=settings)
        self.config = config or ExecutorConfig()
        self._clock = clock or _utcnow
        self.events = event_bus or EventBus()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start_session(
        self,
        plan: Union[WorkoutPlan, Mapping[str, Any], None],
        user_id: Optional[str] = None,
        settings: Optional[Union[SessionSettings, Mapping[str, Any]]] = None,
    ) -> SessionStartResult:
        """
        Create a session for ``plan`` and enter its first phase.

        Phases without drills complete immediately, so a plan whose phases
        are all empty returns a session that is already completed.
        """
        try:
            workout = self.validate_workout_plan(plan)
            session_settings = _validate(SessionSettings, settings)
        except PlanValidationError as e:
            self.logger.warning(f"Cannot start session: {e.message}")
            return SessionStartResult(success=False, error=e.message, errors=e.errors)

        session = WorkoutSession(
            plan=workout,
            started_at=self._clock(),
            user_id=user_id,
            status=SessionStatus.IN_PROGRESS,
            settings=session_settings.model_dump(),
        )
        session.energy_levels["pre_workout"] = session_settings.pre_workout_energy

        self.logger.info(
            f"Session {session.session_id} started: {len(session.phases)} phases, "
            f"{session.planned_duration} min planned"
        )
        self._publish(SessionEvent.SESSION_START, session)

        first_phase = session.phases[0].name
        self._start_next_phase(session)

        return SessionStartResult(
            success=True,
            session=session,
            first_phase=first_phase,
            estimated_duration=session.planned_duration,
            message="Workout session started - ready for first phase!",
        )

    def validate_workout_plan(self, plan: Union[WorkoutPlan, Mapping[str, Any], None]) -> WorkoutPlan:
        """Return an executable plan or raise ``PlanValidationError``."""
        if plan is None:
            raise PlanValidationError(["Missing workout data", "Empty workout plan"])
        if not isinstance(plan, WorkoutPlan):
            if not isinstance(plan, Mapping):
                raise PlanValidationError([f"Malformed workout data: expected a mapping, got {type(plan).__name__}"])
            if "workout" not in plan:
                raise PlanValidationError(["Missing workout data"])
            workout = plan["workout"]
            if not isinstance(workout, Mapping):
                raise PlanValidationError(["Malformed workout data: workout must be a mapping of phases"])
            problems = [
                f"Malformed workout data: phase {name!r} must be a mapping"
                for name, phase in workout.items()
                if phase and not isinstance(phase, Mapping)
            ]
            if problems:
                raise PlanValidationError(problems)
            try:
                plan = WorkoutPlan.from_dict(plan)
            except (AttributeError, TypeError, ValueError) as e:
                raise PlanValidationError([f"Malformed workout data: {e}"]) from e
        if not plan.phase_names:
            raise PlanValidationError(["Empty workout plan"])
        return plan

    def complete_drill(
        self,
        session: WorkoutSession,
        completion: Optional[Union[DrillCompletionData, Mapping[str, Any]]] = None,
    ) -> SessionStep:
        """Mark the current drill complete and move to the next one."""
        drill, phase = session.current_drill, session.current_phase
        if drill is None or phase is None:
            raise NoActiveDrillError("complete")

        data = _validate(DrillCompletionData, completion)
        now = self._clock()

        drill.completed_at = now
        drill.status = ItemStatus.COMPLETED
        drill.feedback.update(data.model_dump(exclude_none=True))

        session.completed_drills.append(CompletedDrillRecord(
            drill_code=drill.drill.code,
            drill_name=drill.name,
            phase=phase.name,
            completed_at=now,
            duration=drill.duration_minutes(now),
            performance_data=data.model_dump(),
        ))
        phase.drills_completed += 1
        phase.drill_index += 1

        self.logger.debug(f"Session {session.session_id}: completed drill {drill.name}")
        self._publish(SessionEvent.DRILL_COMPLETE, session, phase=phase, drill=drill)

        self._advance(session)
        return self._step(session)

    def skip_drill(
        self,
        session: WorkoutSession,
        reason: str = "user_choice",
        alternative: Optional[Union[PlanDrill, Mapping[str, Any]]] = None,
    ) -> SessionStep:
        """
        Skip the current drill.

        With an ``alternative`` the replacement runs in the skipped drill's
        slot; completing it then moves on as usual.
        """
        drill, phase = session.current_drill, session.current_phase
        if drill is None or phase is None:
            raise NoActiveDrillError("skip")

        replacement = None
        if alternative is not None:
            replacement = alternative if isinstance(alternative, PlanDrill) else PlanDrill.from_dict(alternative)

        session.skipped_drills.append(SkippedDrillRecord(
            drill_code=drill.drill.code,
            drill_name=drill.name,
            phase=phase.name,
            skipped_at=self._clock(),
            reason=reason,
            alternative_performed=replacement,
        ))

        self.logger.debug(f"Session {session.session_id}: skipped drill {drill.name} ({reason})")
        self._publish(SessionEvent.DRILL_SKIP, session, phase=phase, drill=drill, reason=reason)

        if replacement is not None:
            self._start_drill(session, replacement, is_alternative=True)
        else:
            phase.drill_index += 1
            self._advance(session)
        return self._step(session)

    def pause_session(self, session: WorkoutSession, reason: str = "user_request") -> ServiceResult:
        if session.status != SessionStatus.IN_PROGRESS:
            return ServiceResult.fail(
                "Session not active or already paused", ErrorCode.INVALID_SESSION_STATE.value
            )

        now = self._clock()
        session.status = SessionStatus.PAUSED
        session.paused_at = now
        session.pause_events.append(PauseEvent(
            paused_at=now,
            reason=reason,
            phase=session.current_phase.name if session.current_phase else None,
            drill=session.current_drill.name if session.current_drill else None,
        ))

        self.logger.info(f"Session {session.session_id} paused: {reason}")
        self._publish(SessionEvent.SESSION_PAUSE, session, reason=reason)

        return ServiceResult.ok("Session paused successfully", data={"paused_at": now.isoformat()})

    def resume_session(self, session: WorkoutSession) -> ServiceResult:
        if session.status != SessionStatus.PAUSED:
            return ServiceResult.fail("No paused session to resume", ErrorCode.INVALID_SESSION_STATE.value)

        now = self._clock()
        session.status = SessionStatus.IN_PROGRESS
        session.resumed_at = now
        pause = self._close_pause(session, now)

        self.logger.info(f"Session {session.session_id} resumed")
        self._publish(SessionEvent.SESSION_RESUME, session, resumed_at=now.isoformat())

        return ServiceResult.ok(
            "Session resumed successfully",
            data={
                "current_phase": session.current_phase.name.value if session.current_phase else None,
                "current_drill": session.current_drill.name if session.current_drill else None,
                "pause_duration": pause.pause_duration if pause else None,
            },
        )

    def complete_session(
        self,
        session: WorkoutSession,
        completion: Optional[Union[SessionCompletionData, Mapping[str, Any]]] = None,
    ) -> SessionReport:
        """Finalize an active or paused session and return its report."""
        if not session.is_active:
            raise NoActiveSessionError("No active session to complete")
        return self._finish(session, _validate(SessionCompletionData, completion))

    # -------------------------------------------------------------------------
    # Status and in-session updates
    # -------------------------------------------------------------------------

    def get_session_status(self, session: Optional[WorkoutSession]) -> Dict[str, Any]:
        if session is None:
            return {"active": False, "message": "No active session"}

        now = self._clock()
        elapsed = minutes_between(session.started_at, session.completed_at or now)
        phase, drill = session.current_phase, session.current_drill

        return {
            "active": session.is_active,
            "session_id": session.session_id,
            "status": session.status.value,
            "progress_percentage": self.calculate_session_progress(session),
            "elapsed_time_minutes": elapsed,
            "estimated_remaining_minutes": max(0, session.planned_duration - elapsed),
            "current_phase": {
                "name": phase.name.value,
                "progress": f"{phase.drills_completed}/{phase.total_drills} drills",
            } if phase else None,
            "current_drill": {
                "name": drill.name,
                "duration": drill.drill.duration,
                "started_at": drill.started_at.isoformat(),
                "is_alternative": drill.is_alternative,
            } if drill else None,
            "completed_phases": [name.value for name in session.completed_phases],
            "completed_drills": len(session.completed_drills),
            "skipped_drills": len(session.skipped_drills),
        }

    def update_session_feedback(
        self,
        session: WorkoutSession,
        feedback: Union[SessionFeedback, Mapping[str, Any]],
    ) -> ServiceResult:
        if not session.is_active:
            return ServiceResult.fail("No active session", ErrorCode.NO_ACTIVE_SESSION.value)

        data = _validate(SessionFeedback, feedback)
        if session.current_drill is not None and data.drill_feedback:
            session.current_drill.feedback.update(data.drill_feedback)
        if data.session_feedback:
            session.ratings.update(data.session_feedback)

        session.feedback_log.append(FeedbackEntry(
            timestamp=self._clock(),
            feedback=data.model_dump(exclude_none=True),
            phase=session.current_phase.name if session.current_phase else None,
            drill=session.current_drill.name if session.current_drill else None,
        ))

        self._publish(
            SessionEvent.PROGRESS_UPDATE,
            session,
            feedback=data.model_dump(exclude_none=True),
            progress_percentage=self.calculate_session_progress(session),
        )
        return ServiceResult.ok("Feedback updated successfully")

    def record_progress_video(
        self,
        session: WorkoutSession,
        video: Union[VideoData, Mapping[str, Any]],
    ) -> ServiceResult:
        if not session.is_active:
            return ServiceResult.fail("No active session", ErrorCode.NO_ACTIVE_SESSION.value)

        data = _validate(VideoData, video)
        drill = session.current_drill
        record = VideoRecord(
            video_id=f"video_{uuid.uuid4().hex[:12]}",
            recorded_at=self._clock(),
            video_url=data.video_url,
            phase=session.current_phase.name if session.current_phase else None,
            drill=drill.name if drill else None,
            metadata={
                "duration": data.duration,
                "file_size": data.file_size,
                "resolution": data.resolution,
            },
            user_notes=data.notes,
        )
        session.videos_recorded.append(record)
        if drill is not None:
            drill.videos_recorded.append(record)

        self.logger.info(f"Session {session.session_id}: recorded video {record.video_id}")
        return ServiceResult.ok(
            "Video recorded successfully",
            data={
                "video_record": record.to_dict(),
                "total_videos_this_session": len(session.videos_recorded),
            },
        )

    def suggest_drill_modifications(
        self,
        session: WorkoutSession,
        difficulty_feedback: Optional[str] = None,
        equipment_issue: Optional[str] = None,
    ) -> ServiceResult:
        """Adjust the current drill for 'too_easy'/'too_hard' feedback or missing equipment."""
        drill = session.current_drill
        if drill is None:
            return ServiceResult.fail("No active drill to modify", ErrorCode.NO_ACTIVE_DRILL.value)

        modifications: List[Dict[str, str]] = []
        if difficulty_feedback == "too_easy":
            modifications.append({
                "type": "increase_difficulty",
                "description": "Add more repetitions or increase complexity",
                "implementation": "Extend drill duration by 2-3 minutes",
            })
        elif difficulty_feedback == "too_hard":
            modifications.append({
                "type": "decrease_difficulty",
                "description": "Reduce complexity or repetitions",
                "implementation": "Focus on form over speed/intensity",
            })

        if equipment_issue:
            modifications.append({
                "type": "equipment_adaptation",
                "description": "Adapt drill for available equipment",
                "implementation": self.suggest_equipment_alternative(equipment_issue),
            })

        if modifications:
            drill.modifications.extend(modifications)
            session.modifications_made.append({
                "drill": drill.name,
                "timestamp": self._clock().isoformat(),
                "modifications": modifications,
            })

        return ServiceResult.ok(
            "Drill modified successfully" if modifications else "No modifications needed",
            data={"modifications": modifications},
        )

    def suggest_equipment_alternative(self, equipment_issue: str) -> str:
        return self.config.equipment_alternatives.get(equipment_issue, DEFAULT_EQUIPMENT_ALTERNATIVE)

    def generate_phase_instructions(
        self,
        phase_name: Union[PhaseName, str],
        phase: Optional[WorkoutPhase] = None,
    ) -> Dict[str, Any]:
        name = phase_name.value if isinstance(phase_name, PhaseName) else str(phase_name)
        template = self.config.phase_instructions.get(name, DEFAULT_PHASE_INSTRUCTIONS)
        target = (phase.target_category if phase else None) or "skill development"
        return {
            "title": template["title"],
            "description": template["description"].format(target_category=target),
            "tips": list(template["tips"]),
        }

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    @staticmethod
    def calculate_session_progress(session: WorkoutSession) -> int:
        """Percent of phases done, counting the current phase fractionally."""
        total_phases = len(session.phases)
        if total_phases == 0:
            return 0
        current = session.current_phase.fractional_progress if session.current_phase else 0
        progress = (len(session.completed_phases) + current) / total_phases * 100
        return round_half_up(max(0.0, min(100.0, progress)))

    @staticmethod
    def calculate_completion_rate(session: WorkoutSession) -> int:
        planned = session.plan.total_activities
        if planned <= 0:
            return 0
        return round_half_up(len(session.completed_drills) / planned * 100)

    @staticmethod
    def calculate_efficiency(planned: int, actual: int) -> Optional[int]:
        """planned/actual as a percentage; None when no time has elapsed."""
        if actual <= 0:
            return None
        return round_half_up(planned / actual * 100)

    def generate_performance_summary(self, session: WorkoutSession) -> PerformanceSummary:
        return PerformanceSummary(
            drills_completed=len(session.completed_drills),
            drills_skipped=len(session.skipped_drills),
            phases_completed=len(session.completed_phases),
            videos_recorded=len(session.videos_recorded),
            total_duration=session.actual_duration,
            completion_rate=self.calculate_completion_rate(session),
        )

    def identify_session_achievements(self, session: WorkoutSession) -> List[SessionAchievement]:
        summary = session.performance_summary or self.generate_performance_summary(session)
        achievements = []

        if summary.completion_rate >= self.config.session_master_rate:
            achievements.append(SessionAchievement(
                type="completion",
                title="Session Master",
                description=f"Completed {self.config.session_master_rate}%+ of planned activities",
            ))
        if not session.skipped_drills:
            achievements.append(SessionAchievement(
                type="consistency",
                title="No Quit Attitude",
                description="Completed every planned drill",
            ))
        if session.videos_recorded:
            achievements.append(SessionAchievement(
                type="progress_tracking",
                title="Progress Tracker",
                description="Recorded videos for progress comparison",
            ))
        if session.actual_duration >= session.planned_duration:
            achievements.append(SessionAchievement(
                type="dedication",
                title="Time Committed",
                description="Spent full planned duration training",
            ))
        return achievements

    def identify_improvement_areas(self, session: WorkoutSession) -> List[ImprovementArea]:
        summary = session.performance_summary or self.generate_performance_summary(session)
        areas = []

        if summary.completion_rate < self.config.low_completion_rate:
            areas.append(ImprovementArea(
                area="completion_rate",
                suggestion="Try to complete more drills in your next session",
                priority="medium",
            ))
        if len(session.skipped_drills) > self.config.max_skips:
            areas.append(ImprovementArea(
                area="drill_engagement",
                suggestion="Consider adjusting drill difficulty or seeking alternatives",
                priority="high",
            ))
        efficiency = self.calculate_efficiency(session.planned_duration, session.actual_duration)
        if efficiency is not None and efficiency < self.config.min_efficiency:
            areas.append(ImprovementArea(
                area="time_management",
                suggestion="Work on staying focused and managing time between drills",
                priority="low",
            ))
        return areas

    def generate_next_session_recommendations(self, session: WorkoutSession) -> List[str]:
        summary = session.performance_summary or self.generate_performance_summary(session)
        recommendations = []

        if summary.completion_rate >= self.config.session_master_rate:
            recommendations.append("Consider increasing drill difficulty or duration for next session")
        elif summary.completion_rate < self.config.low_completion_rate:
            recommendations.append("Consider shorter or simpler drills for next session")

        if session.skipped_drills:
            reason, _ = Counter(skip.reason for skip in session.skipped_drills).most_common(1)[0]
            if reason == "too_difficult":
                recommendations.append("Focus on fundamental drills before advancing to complex ones")
            elif reason == "equipment_missing":
                recommendations.append("Ensure all needed equipment is available before starting")

        effectiveness = session.ratings.get("effectiveness_rating")
        if effectiveness is not None and effectiveness < self.config.low_effectiveness_rating:
            recommendations.append("Consider adjusting workout structure or drill selection")

        return recommendations

    def generate_session_report(self, session: WorkoutSession) -> SessionReport:
        summary = session.performance_summary or self.generate_performance_summary(session)
        return SessionReport(
            session_id=session.session_id,
            completed_at=session.completed_at or self._clock(),
            total_duration=session.actual_duration,
            planned_duration=session.planned_duration,
            efficiency=self.calculate_efficiency(session.planned_duration, session.actual_duration),
            performance_metrics=summary.to_dict(),
            achievements=self.identify_session_achievements(session),
            areas_for_improvement=self.identify_improvement_areas(session),
            next_session_recommendations=self.generate_next_session_recommendations(session),
        )

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def _start_next_phase(self, session: WorkoutSession) -> None:
        """Enter the phase at the cursor; empty phases complete at once."""
        phases = session.phases
        while session.phase_index < len(phases):
            phase = phases[session.phase_index]
            now = self._clock()
            session.current_phase = ActivePhase(phase=phase, started_at=now)
            session.phase_timings[phase.name] = PhaseTiming(
                started_at=now, planned_duration=phase.total_duration
            )
            self.logger.debug(f"Session {session.session_id}: started phase {phase.name.value}")
            self._publish(
                SessionEvent.PHASE_START,
                session,
                phase=session.current_phase,
                instructions=self.generate_phase_instructions(phase.name, phase),
            )

            if phase.drills:
                self._start_drill(session, phase.drills[0])
                return
            self._close_current_phase(session)

        self._finish(session, SessionCompletionData())

    def _start_drill(self, session: WorkoutSession, drill: PlanDrill, is_alternative: bool = False) -> None:
        phase = session.current_phase
        session.current_drill = ActiveDrill(
            drill=drill,
            drill_index=phase.drill_index,
            started_at=self._clock(),
            is_alternative=is_alternative,
        )
        self._publish(SessionEvent.DRILL_START, session, phase=phase, drill=session.current_drill)

    def _advance(self, session: WorkoutSession) -> None:
        """Start the next drill, or close the phase when it has none left."""
        phase = session.current_phase
        if phase.drill_index < phase.total_drills:
            self._start_drill(session, phase.phase.drills[phase.drill_index])
            return
        self._close_current_phase(session)
        self._start_next_phase(session)

    def _close_current_phase(self, session: WorkoutSession) -> None:
        phase = session.current_phase
        now = self._clock()
        phase.completed_at = now
        phase.status = ItemStatus.COMPLETED

        timing = session.phase_timings[phase.name]
        timing.completed_at = now
        timing.actual_duration = phase.duration_minutes(now)
        session.completed_phases.append(phase.name)

        self.logger.debug(f"Session {session.session_id}: completed phase {phase.name.value}")
        self._publish(SessionEvent.PHASE_COMPLETE, session, phase=phase)

        session.phase_index += 1
        session.current_phase = None
        session.current_drill = None

    def _finish(self, session: WorkoutSession, completion: SessionCompletionData) -> SessionReport:
        now = self._clock()
        if session.status == SessionStatus.PAUSED:
            self._close_pause(session, now)

        session.status = SessionStatus.COMPLETED
        session.completed_at = now
        session.actual_duration = minutes_between(session.started_at, now)

        ratings = completion.model_dump(
            include={"overall_satisfaction", "perceived_difficulty", "effectiveness_rating"},
            exclude_none=True,
        )
        session.ratings.update(ratings)
        if completion.post_workout_energy is not None:
            session.energy_levels["post_workout"] = completion.post_workout_energy
        if completion.session_notes:
            session.notes = completion.session_notes

        session.performance_summary = self.generate_performance_summary(session)
        session.report = self.generate_session_report(session)
        session.current_phase = None
        session.current_drill = None

        self.logger.info(
            f"Session {session.session_id} completed: {session.actual_duration} min, "
            f"{session.performance_summary.completion_rate}% of activities"
        )
        self._publish(SessionEvent.SESSION_COMPLETE, session, report=session.report)
        return session.report

    @staticmethod
    def _close_pause(session: WorkoutSession, now: datetime) -> Optional[PauseEvent]:
        if not session.pause_events:
            return None
        pause = session.pause_events[-1]
        if pause.resumed_at is None:
            pause.resumed_at = now
            pause.pause_duration = minutes_between(pause.paused_at, now)
        return pause

    @staticmethod
    def _step(session: WorkoutSession) -> SessionStep:
        return SessionStep(
            session=session,
            current_phase=session.current_phase.name if session.current_phase else None,
            current_drill=session.current_drill,
            session_completed=session.is_completed,
            report=session.report,
        )

    def _publish(
        self,
        topic: SessionEvent,
        session: WorkoutSession,
        phase: Optional[ActivePhase] = None,
        drill: Optional[ActiveDrill] = None,
        **data: Any,
    ) -> None:
        self.events.publish(EventPayload(topic=topic, session=session, phase=phase, drill=drill, data=data))
