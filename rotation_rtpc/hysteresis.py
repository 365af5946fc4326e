"""
Hysteresis trigger sampler.

This module defines `HysteresisTriggerSampler`, which turns rotation of a
tracked object into one "start" and one "stop" trigger per rotation episode
and axis. Each axis owns an `AxisLatch`: a boolean that records whether the
axis is currently rotating. A start is posted when the per-poll delta
reaches the threshold while the latch is open, a stop when the delta falls
back below it while the latch is set.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional
import logging

from . import constants as const
from .base_sampler import RotationSampler
from .exceptions import ConfigurationError
from .interfaces import EventRef, EventSink, OrientationSource
from .orientation import Axis, parse_number
from .polling import PollResult, TriggerEmission

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AxisTrigger:
    """Threshold and event of one axis tracked by the hysteresis sampler."""
    axis: Axis
    event: EventRef
    threshold: float = const.DEFAULT_ROTATION_THRESHOLD

    def __post_init__(self):
        object.__setattr__(self, "axis", Axis.parse(self.axis))
        if self.event is None:
            raise ConfigurationError(f"Axis trigger for '{self.axis.value}' has no event.")
        object.__setattr__(
            self, "threshold", parse_number(self.threshold, f"Threshold for axis '{self.axis.value}'")
        )
        if self.threshold < 0:
            raise ConfigurationError(
                f"Invalid threshold {self.threshold} for axis '{self.axis.value}'. Must be >= 0."
            )


class AxisLatch:
    """
    Debounce state of one axis.

    Entering uses `delta >= threshold`, leaving uses `delta < threshold`, so
    the two conditions never overlap and a start is always followed by a
    stop before the next start.
    """

    def __init__(self, threshold: float):
        self.threshold = threshold
        self.active = False

    def update(self, delta: float) -> Optional[str]:
        """
        Feeds one poll's delta into the latch.

        Returns:
            `const.TRIGGER_START`, `const.TRIGGER_STOP` or None.
        """
        if delta >= self.threshold and not self.active:
            self.active = True
            return const.TRIGGER_START
        if delta < self.threshold and self.active:
            self.active = False
            return const.TRIGGER_STOP
        return None

    def reset(self) -> None:
        self.active = False

    def __repr__(self) -> str:
        return f"AxisLatch(threshold={self.threshold}, active={self.active})"


class HysteresisTriggerSampler(RotationSampler):
    """
    Posts start/stop events for independent rotation episodes per axis.

    Events go to the `EventSink`: `post(event, subject)` on start and
    `stop(event, subject)` on stop. A sink call that raises is logged and
    the latch is put back, so the transition is retried on the next poll.
    """

    def __init__(
        self,
        source: OrientationSource,
        event_sink: EventSink,
        subject: Any,
        triggers: Iterable[AxisTrigger],
        update_interval: float = const.DEFAULT_UPDATE_INTERVAL,
        carry_remainder: bool = False,
        shortest_path_deltas: bool = False,
        name: Optional[str] = None,
    ):
        """
        Args:
            source: Orientation of the tracked object.
            event_sink: Receives start (post) and stop calls.
            subject: Engine-side object the events are attached to.
            triggers: One `AxisTrigger` per tracked axis.
            update_interval: Seconds of host time between polls.
            carry_remainder: See `PollAccumulator`.
            shortest_path_deltas: Correct deltas across the 359/0 degree wrap.
            name: Label used in logs.

        Raises:
            ConfigurationError: If no trigger is given, an axis is listed twice
                                or `event_sink` is missing.
        """
        triggers = list(triggers)
        if not triggers:
            raise ConfigurationError("At least one axis trigger is required.", sampler=name)
        axes = [trigger.axis for trigger in triggers]
        if len(set(axes)) != len(axes):
            raise ConfigurationError("Each axis may only have one trigger.", sampler=name)
        if event_sink is None:
            raise ConfigurationError("An event sink is required.", sampler=name)

        super().__init__(
            source,
            subject,
            axes,
            update_interval=update_interval,
            carry_remainder=carry_remainder,
            shortest_path_deltas=shortest_path_deltas,
            name=name,
        )
        self.event_sink = event_sink
        self.triggers: List[AxisTrigger] = triggers
        self.latches: Dict[Axis, AxisLatch] = {
            trigger.axis: AxisLatch(trigger.threshold) for trigger in triggers
        }

    @classmethod
    def from_config(
        cls,
        config,
        source: OrientationSource,
        event_sink: EventSink,
        subject: Any,
        name: Optional[str] = None,
    ) -> "HysteresisTriggerSampler":
        """Builds a sampler from a `RotationConfig` with a hysteresis section."""
        if config.hysteresis is None:
            raise ConfigurationError("Configuration has no hysteresis section.", sampler=name)
        return cls(
            source,
            event_sink,
            subject,
            config.hysteresis.triggers,
            update_interval=config.update_interval,
            carry_remainder=config.carry_remainder,
            shortest_path_deltas=config.shortest_path_deltas,
            name=name,
        )

    def is_rotating(self, axis: Axis) -> bool:
        """Whether `axis` is currently inside a rotation episode."""
        latch = self.latches.get(Axis.parse(axis))
        return bool(latch and latch.active)

    def _process_poll(self, result: PollResult) -> None:
        for trigger in self.triggers:
            latch = self.latches[trigger.axis]
            transition = latch.update(result.deltas[trigger.axis])
            if transition is None:
                continue

            logger.debug(
                f"Sampler '{self.name}': {trigger.axis.value} {transition} "
                f"(delta {result.deltas[trigger.axis]:.3f} deg, threshold {trigger.threshold})"
            )
            if transition == const.TRIGGER_START:
                delivered = self._deliver(
                    f"post of {trigger.event!r}", self.event_sink.post, trigger.event, self.subject
                )
            else:
                delivered = self._deliver(
                    f"stop of {trigger.event!r}", self.event_sink.stop, trigger.event, self.subject
                )
            if not delivered:
                # the latch mirrors what the engine was told; retry on the next poll
                latch.active = not latch.active
                continue
            result.emissions.append(TriggerEmission(transition, trigger.axis, trigger.event))
