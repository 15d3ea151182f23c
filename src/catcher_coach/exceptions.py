"""
Custom exceptions for the Catcher Coach library.

This module defines a hierarchy of exceptions used across the analyzer,
the workout generator and the session executor. Each exception includes:
- A descriptive message
- An error code for result objects
- Optional details for debugging
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for consistent error results."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Assessment errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ASSESSMENT_VALIDATION_ERROR = "ASSESSMENT_VALIDATION_ERROR"
    PLAN_VALIDATION_ERROR = "PLAN_VALIDATION_ERROR"

    # Workout generation errors
    GENERATION_FAILED = "GENERATION_FAILED"

    # Session errors
    NO_ACTIVE_SESSION = "NO_ACTIVE_SESSION"
    NO_ACTIVE_DRILL = "NO_ACTIVE_DRILL"
    INVALID_SESSION_STATE = "INVALID_SESSION_STATE"

    # Event listener errors
    LISTENER_FAILED = "LISTENER_FAILED"


class CatcherCoachError(Exception):
    """
    Base exception for all Catcher Coach errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for result objects."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# ============================================================================
# Validation Errors
# ============================================================================

class ValidationError(CatcherCoachError):
    """Raised when input validation fails.

    Carries every individual problem in ``errors`` so callers can show the
    full list instead of only the first failure.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if field:
            error_details["field"] = field
        self.errors = list(errors or [])
        if self.errors:
            error_details["errors"] = self.errors
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            details=error_details,
        )


class AssessmentValidationError(ValidationError):
    """Raised when a skills assessment is incomplete or implausible."""

    def __init__(
        self,
        errors: List[str],
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=f"Assessment validation failed: {', '.join(errors)}",
            errors=errors,
            details=details,
        )
        self.code = ErrorCode.ASSESSMENT_VALIDATION_ERROR


class PlanValidationError(ValidationError):
    """Raised when a workout plan cannot be executed."""

    def __init__(
        self,
        errors: List[str],
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=f"Invalid workout plan: {', '.join(errors)}",
            errors=errors,
            details=details,
        )
        self.code = ErrorCode.PLAN_VALIDATION_ERROR


# ============================================================================
# Session State Errors
# ============================================================================

class StateError(CatcherCoachError):
    """Raised when a session operation is attempted in the wrong state."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_SESSION_STATE,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, code=code, details=details)


class NoActiveSessionError(StateError):
    """Raised when there is no active session to operate on."""

    def __init__(self, message: str = "No active session", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message=message, code=ErrorCode.NO_ACTIVE_SESSION, details=details)


class NoActiveDrillError(StateError):
    """Raised when a drill operation is attempted with no drill running."""

    def __init__(self, action: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message=f"No active drill to {action}",
            code=ErrorCode.NO_ACTIVE_DRILL,
            details=details,
        )


# ============================================================================
# Generation Errors
# ============================================================================

class GenerationError(CatcherCoachError):
    """Raised when a workout plan cannot be assembled."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.GENERATION_FAILED,
            details=details,
        )


# ============================================================================
# Listener Errors
# ============================================================================

class ListenerError(CatcherCoachError):
    """Wraps an exception raised by a host-registered event listener."""

    def __init__(
        self,
        topic: str,
        original: BaseException,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        error_details["topic"] = topic
        error_details["exception_type"] = type(original).__name__
        self.topic = topic
        self.original = original
        super().__init__(
            message=f"Error in event listener for {topic}: {original}",
            code=ErrorCode.LISTENER_FAILED,
            details=error_details,
        )
