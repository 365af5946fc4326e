"""
Fixed-cadence poll gate driven by an explicit `tick(elapsed)`.

The host calls `PollAccumulator.advance()` with the wall-clock time elapsed
since its previous call (one frame, typically). A poll is due once the
accumulated time reaches the update interval.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging

from . import constants as const
from .exceptions import ConfigurationError
from .orientation import Axis, OrientationSample, parse_number

logger = logging.getLogger(__name__)


class PollAccumulator:
    """
    Accumulates host time and reports when a poll is due.

    By default the accumulator is reset to zero after every poll, dropping
    the part of the last tick that overshot the interval. With
    `carry_remainder=True` the interval is subtracted instead so that the
    average cadence matches `update_interval` under variable tick rates.
    """

    def __init__(
        self,
        update_interval: float = const.DEFAULT_UPDATE_INTERVAL,
        carry_remainder: bool = False,
    ):
        """
        Args:
            update_interval: Seconds of accumulated time between polls. Must be positive.
            carry_remainder: Keep the overshoot for the next poll instead of dropping it.

        Raises:
            ConfigurationError: If `update_interval` is not positive.
        """
        update_interval = parse_number(update_interval, "update_interval")
        if not update_interval > 0:
            raise ConfigurationError(
                f"Invalid update_interval: {update_interval}. Must be positive."
            )
        self.update_interval = update_interval
        self.carry_remainder = carry_remainder
        self._accumulated = 0.0

    @property
    def accumulated(self) -> float:
        """Time accumulated since the last poll."""
        return self._accumulated

    def advance(self, elapsed: float) -> Optional[float]:
        """
        Adds `elapsed` seconds and checks whether a poll is due.

        Returns:
            The time span covered by this poll (the accumulated time before
            the reset) when a poll is due, otherwise None.
        """
        if elapsed < 0:
            logger.warning(f"Ignoring negative elapsed time {elapsed:.6f}s.")
            return None
        self._accumulated += elapsed
        if self._accumulated < self.update_interval:
            return None

        span = self._accumulated
        if self.carry_remainder:
            # a very long tick still yields only one poll
            self._accumulated = (self._accumulated - self.update_interval) % self.update_interval
        else:
            self._accumulated = 0.0
        return span

    def reset(self) -> None:
        self._accumulated = 0.0


@dataclass(frozen=True)
class TriggerEmission:
    """A trigger decision taken during a poll."""
    kind: str  # const.TRIGGER_START, TRIGGER_STOP or TRIGGER_WINDOW
    axis: Axis
    event: Any


@dataclass
class PollResult:
    """Everything a sampler decided during one poll."""
    sample: OrientationSample
    elapsed: float
    deltas: Dict[Axis, float]
    speeds: Dict[Axis, float] = field(default_factory=dict)
    emissions: List[TriggerEmission] = field(default_factory=list)

    def emitted(self, kind: Optional[str] = None) -> List[TriggerEmission]:
        """Emissions of this poll, optionally filtered by kind."""
        if kind is None:
            return list(self.emissions)
        return [emission for emission in self.emissions if emission.kind == kind]
