"""
Ready-made event and parameter sinks.

`Logging*` sinks report every call through the `logging` module and suit
hosts without an audio engine binding. `Recording*` sinks keep every call in
memory; the replay tool and the test-suite use them to inspect decisions.
"""
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple
import logging
import time

from .interfaces import EventRef, ParameterRef

logger = logging.getLogger(__name__)


class LoggingEventSink:
    """Event sink that only logs posts and stops."""

    def __init__(self, level: int = logging.INFO):
        self.level = level

    def post(self, event: EventRef, subject: Any) -> None:
        logger.log(self.level, f"post event={event!r} subject={subject!r}")

    def stop(self, event: EventRef, subject: Any) -> None:
        logger.log(self.level, f"stop event={event!r} subject={subject!r}")


class LoggingParameterSink:
    """Parameter sink for both per-subject and global parameters that only logs."""

    def __init__(self, level: int = logging.DEBUG):
        self.level = level

    def set_value(self, parameter: ParameterRef, subject: Any, value: float) -> None:
        logger.log(self.level, f"set {parameter!r}={value:.6f} subject={subject!r}")

    def set_global_value(self, name: str, value: float) -> None:
        logger.log(self.level, f"set global {name!r}={value:.6f}")


@dataclass
class RecordedCall:
    """One call received by a recording sink."""
    timestamp: float
    action: str  # "post", "stop", "set" or "set_global"
    target: Any
    subject: Any = None
    value: Optional[float] = None


class RecordingEventSink:
    """Event sink that stores every post/stop in `calls`."""

    def __init__(self):
        self.calls: List[RecordedCall] = []

    def post(self, event: EventRef, subject: Any) -> None:
        self.calls.append(RecordedCall(time.monotonic(), "post", event, subject))

    def stop(self, event: EventRef, subject: Any) -> None:
        self.calls.append(RecordedCall(time.monotonic(), "stop", event, subject))

    def actions(self) -> List[Tuple[str, Any]]:
        """Returns `(action, event)` pairs in call order."""
        return [(call.action, call.target) for call in self.calls]

    def clear(self) -> None:
        self.calls.clear()


class RecordingParameterSink:
    """Parameter sink that stores per-subject and global values in `calls`."""

    def __init__(self):
        self.calls: List[RecordedCall] = []

    def set_value(self, parameter: ParameterRef, subject: Any, value: float) -> None:
        self.calls.append(RecordedCall(time.monotonic(), "set", parameter, subject, value))

    def set_global_value(self, name: str, value: float) -> None:
        self.calls.append(RecordedCall(time.monotonic(), "set_global", name, None, value))

    def values_for(self, parameter: ParameterRef) -> List[float]:
        """All values sent to `parameter`, oldest first."""
        return [call.value for call in self.calls if call.target == parameter]

    def last_value(self, parameter: ParameterRef) -> Optional[float]:
        values = self.values_for(parameter)
        return values[-1] if values else None

    def clear(self) -> None:
        self.calls.clear()
