"""Service layer: the session executor and its event bus."""

from .base import BaseService, ServiceResult
from .events import EventBus, EventPayload, SessionEvent
from .session_executor import (
    ExecutorConfig,
    SessionExecutor,
    SessionStartResult,
    SessionStep,
)

__all__ = [
    "BaseService",
    "ServiceResult",
    "EventBus",
    "EventPayload",
    "SessionEvent",
    "ExecutorConfig",
    "SessionExecutor",
    "SessionStartResult",
    "SessionStep",
]
