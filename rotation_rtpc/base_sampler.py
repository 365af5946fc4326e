# rotation_rtpc/rotation_rtpc/base_sampler.py
"""
Base class for orientation samplers.
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, Optional
import logging

from . import constants as const
from .exceptions import ConfigurationError
from .interfaces import OrientationSource
from .orientation import Axis, OrientationSample, compute_deltas, rotation_speed
from .polling import PollAccumulator, PollResult

logger = logging.getLogger(__name__)


class RotationSampler(ABC):
    """
    Abstract base class for samplers polling an `OrientationSource`.

    It owns the poll cadence and the baseline orientation. On every due poll
    it captures a new sample, computes deltas and speeds for the tracked axes,
    hands them to `_process_poll` and stores the sample as the new baseline.
    """

    def __init__(
        self,
        source: OrientationSource,
        subject: Any,
        tracked_axes: Iterable[Axis],
        update_interval: float = const.DEFAULT_UPDATE_INTERVAL,
        carry_remainder: bool = False,
        shortest_path_deltas: bool = False,
        name: Optional[str] = None,
    ):
        """
        Initialize base sampler state.

        Args:
            source: Provides the orientation of the tracked object.
            subject: Engine-side object events and parameters are attached to.
            tracked_axes: Axes whose deltas and speeds are computed each poll.
            update_interval: Seconds of host time between two polls.
            carry_remainder: See `PollAccumulator`.
            shortest_path_deltas: Correct deltas across the 359/0 degree wrap.
            name: Label used in logs and errors.

        Raises:
            ConfigurationError: If `source` or `subject` is missing or the
                                interval is not positive.
        """
        self.name = name or self.__class__.__name__
        if source is None:
            raise ConfigurationError("An orientation source is required.", sampler=self.name)
        if subject is None:
            raise ConfigurationError("A subject is required.", sampler=self.name)

        self.source = source
        self.subject = subject
        self.tracked_axes = tuple(tracked_axes)
        self.shortest_path_deltas = shortest_path_deltas
        self._poll = PollAccumulator(update_interval, carry_remainder)
        self._last_sample: Optional[OrientationSample] = None
        self.enabled = True

    @property
    def update_interval(self) -> float:
        return self._poll.update_interval

    @property
    def last_sample(self) -> Optional[OrientationSample]:
        """Baseline orientation the next poll is compared against."""
        return self._last_sample

    def _read_source(self) -> Optional[OrientationSample]:
        sample = self.source.orientation()
        if sample is None:
            logger.error(f"Sampler '{self.name}': orientation source returned no sample, disabling.")
            self.enabled = False
        return sample

    def start(self) -> bool:
        """
        Captures the baseline orientation and resets the poll cadence.

        Returns:
            True if a baseline was captured, False if the sampler got disabled.
        """
        sample = self._read_source()
        if sample is None:
            return False
        self._last_sample = sample
        self._poll.reset()
        logger.info(f"Sampler '{self.name}' started at {sample.as_dict()}.")
        return True

    def tick(self, elapsed: float) -> Optional[PollResult]:
        """
        Advances the sampler by `elapsed` seconds of host time.

        Returns:
            The `PollResult` when a poll ran, otherwise None (not due yet,
            or disabled). A first tick without `start()` captures the baseline
            and then polls as usual.
        """
        if not self.enabled:
            return None
        if self._last_sample is None:
            if not self.start():
                return None

        span = self._poll.advance(elapsed)
        if span is None:
            return None

        current = self._read_source()
        if current is None:
            return None

        deltas = compute_deltas(
            self._last_sample, current, self.tracked_axes, self.shortest_path_deltas
        )
        speeds: Dict[Axis, float] = {
            axis: rotation_speed(delta, span) for axis, delta in deltas.items()
        }
        result = PollResult(sample=current, elapsed=span, deltas=deltas, speeds=speeds)
        try:
            self._process_poll(result)
        finally:
            self._last_sample = current
        return result

    def _deliver(self, what: str, send: Callable[..., Any], *args: Any) -> bool:
        """
        Calls a host sink, logging instead of raising when it fails.

        Returns:
            True if the call went through, False if the sink raised.
        """
        try:
            send(*args)
        except Exception as e:  # pylint: disable=broad-except
            logger.error(f"Sampler '{self.name}': {what} failed: {e!r}")
            return False
        return True

    @abstractmethod
    def _process_poll(self, result: PollResult) -> None:
        """
        Runs the sampler's decision logic for one poll.

        Implementations append their emissions to `result.emissions`.
        """
        pass

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(name={self.name!r}, "
            f"update_interval={self.update_interval}, enabled={self.enabled})"
        )
