"""Tests for the exception hierarchy."""

from catcher_coach.exceptions import (
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


class TestExceptions:
    def test_base_to_dict(self):
        error = CatcherCoachError("boom", details={"where": "test"})
        assert error.to_dict() == {
            "error": {"code": "INTERNAL_ERROR", "message": "boom", "details": {"where": "test"}}
        }

    def test_assessment_validation_error_keeps_every_problem(self):
        errors = ["Missing required field: blocking_overall", "Missing required field: throwing_accuracy"]
        error = AssessmentValidationError(errors)
        assert isinstance(error, ValidationError)
        assert error.errors == errors
        assert error.code == ErrorCode.ASSESSMENT_VALIDATION_ERROR
        assert error.message.startswith("Assessment validation failed: ")
        assert error.to_dict()["error"]["details"]["errors"] == errors

    def test_plan_validation_error(self):
        error = PlanValidationError(["Empty workout plan"])
        assert error.code == ErrorCode.PLAN_VALIDATION_ERROR
        assert error.message == "Invalid workout plan: Empty workout plan"

    def test_state_errors(self):
        drill_error = NoActiveDrillError("skip")
        assert isinstance(drill_error, StateError)
        assert drill_error.message == "No active drill to skip"
        assert drill_error.code == ErrorCode.NO_ACTIVE_DRILL

        session_error = NoActiveSessionError()
        assert session_error.message == "No active session"
        assert session_error.code == ErrorCode.NO_ACTIVE_SESSION

    def test_generation_error(self):
        assert GenerationError("no drills").code == ErrorCode.GENERATION_FAILED

    def test_listener_error_wraps_original(self):
        original = ValueError("bad payload")
        error = ListenerError("phase_start", original)
        assert error.topic == "phase_start"
        assert error.original is original
        assert error.details == {"topic": "phase_start", "exception_type": "ValueError"}
        assert str(error) == "Error in event listener for phase_start: bad payload"
