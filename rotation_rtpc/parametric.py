"""
Parametric mapping sampler.

`ParametricMappingSampler` evaluates each poll against lists of trigger
windows per axis, drives continuous RTPC and panorama channels from the
absolute orientation, and starts tabular randomization loads for windows
that reference a tabular source.
"""
from typing import Any, Dict, Iterable, List, Mapping, Optional
import asyncio
import logging

from . import constants as const
from .base_sampler import RotationSampler
from .channels import PanoramaChannel, RtpcChannel
from .exceptions import ConfigurationError
from .interfaces import EventSink, OrientationSource, ParameterSink
from .orientation import Axis, OrientationSample
from .polling import PollResult, TriggerEmission
from .tabular import TabularRandomizer
from .windows import TriggerWindow, matching_windows

logger = logging.getLogger(__name__)


class ParametricMappingSampler(RotationSampler):
    """
    Window-gated triggers plus continuous parameter mapping.

    Per poll, in order:
    1. every window of every axis is checked on its own; each match posts the
       window's event and, if it names a tabular source, schedules a load;
    2. every `RtpcChannel` receives the mapped absolute angle of its axis;
    3. every `PanoramaChannel` receives its configured components.

    Windows keep no state and fire on every poll while they match.
    """

    def __init__(
        self,
        source: OrientationSource,
        event_sink: EventSink,
        parameter_sink: ParameterSink,
        subject: Any,
        windows: Optional[Mapping[Axis, Iterable[TriggerWindow]]] = None,
        rtpc_channels: Optional[Iterable[RtpcChannel]] = None,
        panorama_channels: Optional[Iterable[PanoramaChannel]] = None,
        randomizer: Optional[TabularRandomizer] = None,
        update_interval: float = const.DEFAULT_UPDATE_INTERVAL,
        carry_remainder: bool = False,
        shortest_path_deltas: bool = False,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        name: Optional[str] = None,
    ):
        """
        Args:
            source: Orientation of the tracked object.
            event_sink: Receives `post(event, subject)` for matching windows.
            parameter_sink: Receives RTPC and panorama values.
            subject: Engine-side object events and parameters are attached to.
            windows: Trigger windows keyed by the axis they watch.
            rtpc_channels: Channels following an axis's absolute angle.
            panorama_channels: Panning channel groups.
            randomizer: Runs tabular loads requested by windows. Required
                        when any window names a tabular source.
            update_interval: Seconds of host time between polls.
            carry_remainder: See `PollAccumulator`.
            shortest_path_deltas: Correct deltas across the 359/0 degree wrap.
            loop: Loop to schedule tabular loads on. Defaults to the running loop.
            name: Label used in logs.

        Raises:
            ConfigurationError: On missing sinks, or windows naming a tabular
                                source without a randomizer.
        """
        if event_sink is None:
            raise ConfigurationError("An event sink is required.", sampler=name)
        if parameter_sink is None:
            raise ConfigurationError("A parameter sink is required.", sampler=name)

        self.windows: Dict[Axis, List[TriggerWindow]] = {
            Axis.parse(axis): list(axis_windows)
            for axis, axis_windows in (windows or {}).items()
        }
        self.rtpc_channels: List[RtpcChannel] = list(rtpc_channels or [])
        self.panorama_channels: List[PanoramaChannel] = list(panorama_channels or [])

        needs_tabular = [
            window.tabular_source
            for axis_windows in self.windows.values()
            for window in axis_windows
            if window.tabular_source
        ]
        if needs_tabular and randomizer is None:
            raise ConfigurationError(
                f"Windows reference tabular sources {needs_tabular} but no randomizer was given.",
                sampler=name,
            )

        super().__init__(
            source,
            subject,
            tuple(Axis),
            update_interval=update_interval,
            carry_remainder=carry_remainder,
            shortest_path_deltas=shortest_path_deltas,
            name=name,
        )
        self.event_sink = event_sink
        self.parameter_sink = parameter_sink
        self.randomizer = randomizer
        self._loop = loop

        # inspection state, refreshed every poll
        self.current_rotation: Optional[OrientationSample] = None
        self.rotation_speed: Dict[Axis, float] = {axis: 0.0 for axis in Axis}

    @classmethod
    def from_config(
        cls,
        config,
        source: OrientationSource,
        event_sink: EventSink,
        parameter_sink: ParameterSink,
        subject: Any,
        randomizer: Optional[TabularRandomizer] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        name: Optional[str] = None,
    ) -> "ParametricMappingSampler":
        """Builds a sampler from a `RotationConfig` with a parametric section."""
        if config.parametric is None:
            raise ConfigurationError("Configuration has no parametric section.", sampler=name)
        section = config.parametric
        return cls(
            source,
            event_sink,
            parameter_sink,
            subject,
            windows=section.windows,
            # channels carry a mutable last_value, each sampler gets its own
            rtpc_channels=[channel.copy() for channel in section.rtpc_channels],
            panorama_channels=section.panorama_channels,
            randomizer=randomizer,
            update_interval=config.update_interval,
            carry_remainder=config.carry_remainder,
            shortest_path_deltas=config.shortest_path_deltas,
            loop=loop,
            name=name,
        )

    def _process_poll(self, result: PollResult) -> None:
        self.current_rotation = result.sample
        self.rotation_speed.update(result.speeds)

        for axis, axis_windows in self.windows.items():
            delta = result.deltas[axis]
            speed = result.speeds[axis]
            for window in matching_windows(axis_windows, delta, speed):
                logger.debug(
                    f"Sampler '{self.name}': window {window.event!r} matched on {axis.value} "
                    f"(delta {delta:.3f} deg, speed {speed:.3f} deg/s)"
                )
                if self._deliver(
                    f"post of {window.event!r}", self.event_sink.post, window.event, self.subject
                ):
                    result.emissions.append(TriggerEmission(const.TRIGGER_WINDOW, axis, window.event))
                if window.tabular_source:
                    self._deliver(
                        f"load of {window.tabular_source!r}",
                        self.randomizer.request_load, window.tabular_source, self._loop,
                    )

        for channel in self.rtpc_channels:
            self._deliver(
                f"RTPC {channel.parameter!r}",
                channel.apply, result.sample, self.parameter_sink, self.subject,
            )

        for panorama in self.panorama_channels:
            self._deliver(
                "panorama update",
                panorama.apply, result.sample, self.parameter_sink, self.subject,
            )

    async def wait_for_loads(self) -> None:
        """Waits for every tabular load scheduled so far."""
        if self.randomizer is not None:
            await self.randomizer.wait_for_loads()

    async def close(self) -> None:
        """Disables the sampler and cancels pending tabular loads."""
        self.enabled = False
        if self.randomizer is not None:
            await self.randomizer.close()
        logger.info(f"Sampler '{self.name}' closed.")
