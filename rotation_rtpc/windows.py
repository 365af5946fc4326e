"""
Trigger windows in (rotation delta, rotation speed) space.

A `TriggerWindow` matches a poll when both the delta and the speed of its
axis lie inside its inclusive bounds. Windows carry no state: a matching
window fires on every poll for as long as the condition holds.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional
import math

from .exceptions import ConfigurationError
from .interfaces import EventRef
from .orientation import parse_number


@dataclass(frozen=True)
class TriggerWindow:
    """
    Rectangular window gating a trigger event.

    `tabular_source` optionally names tabular randomization data that is
    loaded every time the window fires.
    """
    event: EventRef
    min_rotation: float = 0.0
    max_rotation: float = math.inf
    min_speed: float = 0.0
    max_speed: float = math.inf
    tabular_source: Optional[str] = None

    def __post_init__(self):
        if self.event is None:
            raise ConfigurationError("Trigger window has no event.")
        for name in ("min_rotation", "max_rotation", "min_speed", "max_speed"):
            value = parse_number(
                getattr(self, name), f"Trigger window for {self.event!r}: {name}", allow_infinite=True
            )
            object.__setattr__(self, name, value)
        if self.min_rotation > self.max_rotation:
            raise ConfigurationError(
                f"Trigger window for {self.event!r}: min_rotation {self.min_rotation} "
                f"exceeds max_rotation {self.max_rotation}."
            )
        if self.min_speed > self.max_speed:
            raise ConfigurationError(
                f"Trigger window for {self.event!r}: min_speed {self.min_speed} "
                f"exceeds max_speed {self.max_speed}."
            )
        if self.tabular_source is not None and not str(self.tabular_source).strip():
            object.__setattr__(self, "tabular_source", None)

    def matches(self, delta: float, speed: float) -> bool:
        return window_matches(delta, speed, self)


def window_matches(delta: float, speed: float, window: TriggerWindow) -> bool:
    """Inclusive bounds check of `delta` and `speed` against `window`."""
    return (
        window.min_rotation <= delta <= window.max_rotation
        and window.min_speed <= speed <= window.max_speed
    )


def matching_windows(
    windows: Iterable[TriggerWindow], delta: float, speed: float
) -> List[TriggerWindow]:
    """Every window matching `delta` and `speed`, each evaluated on its own."""
    return [window for window in windows if window_matches(delta, speed, window)]
