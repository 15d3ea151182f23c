"""
Session lifecycle events.

Listeners run synchronously, in registration order, after the state change
that triggered them. A listener that raises never affects the session: the
error is wrapped in ``ListenerError``, logged and kept in ``failures``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING
import logging

from ..exceptions import ListenerError

if TYPE_CHECKING:
    from ..models.session import ActiveDrill, ActivePhase, WorkoutSession


class SessionEvent(str, Enum):
    """Topics published by the session executor."""
    SESSION_START = "session_start"
    PHASE_START = "phase_start"
    PHASE_COMPLETE = "phase_complete"
    DRILL_START = "drill_start"
    DRILL_COMPLETE = "drill_complete"
    DRILL_SKIP = "drill_skip"
    SESSION_PAUSE = "session_pause"
    SESSION_RESUME = "session_resume"
    PROGRESS_UPDATE = "progress_update"
    SESSION_COMPLETE = "session_complete"


@dataclass
class EventPayload:
    """What a listener receives."""
    topic: SessionEvent
    session: "WorkoutSession"
    phase: Optional["ActivePhase"] = None
    drill: Optional["ActiveDrill"] = None
    data: Dict[str, Any] = field(default_factory=dict)


Listener = Callable[[EventPayload], Any]


class EventBus:
    """Synchronous publish/subscribe over ``SessionEvent`` topics."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._subs: Dict[SessionEvent, List[Listener]] = {topic: [] for topic in SessionEvent}
        self._logger = logger or logging.getLogger(__name__)
        self.failures: List[ListenerError] = []

    def subscribe(self, topic: SessionEvent, listener: Listener) -> Listener:
        """Register ``listener`` for ``topic``; returns the listener."""
        self._subs[SessionEvent(topic)].append(listener)
        return listener

    def unsubscribe(self, topic: SessionEvent, listener: Listener) -> bool:
        """Remove a listener. Returns False if it was not registered."""
        listeners = self._subs[SessionEvent(topic)]
        if listener in listeners:
            listeners.remove(listener)
            return True
        return False

    def listeners(self, topic: SessionEvent) -> List[Listener]:
        return list(self._subs[SessionEvent(topic)])

    def publish(self, payload: EventPayload) -> List[ListenerError]:
        """
        Deliver ``payload`` to every listener of its topic.

        Returns the errors raised by listeners during this delivery.
        """
        errors: List[ListenerError] = []
        # Copy so listeners may unsubscribe themselves while being called
        for listener in list(self._subs[payload.topic]):
            try:
                listener(payload)
            except Exception as e:
                error = ListenerError(payload.topic.value, e)
                self._logger.error(error.message, exc_info=e)
                errors.append(error)

        self.failures.extend(errors)
        return errors

    def clear(self) -> None:
        for listeners in self._subs.values():
            listeners.clear()
        self.failures.clear()
