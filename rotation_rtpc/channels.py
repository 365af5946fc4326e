"""
Continuous output channels driven by absolute orientation.

`RtpcChannel` maps the wrapped angle of one axis from [0, 360) into its own
output range. `PanoramaChannel` maps yaw, roll and pitch into up to three
panning parameters sharing one output range.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from . import constants as const
from .exceptions import ConfigurationError
from .interfaces import ParameterRef, ParameterSink
from .mapping import map_panorama, map_rotation
from .orientation import Axis, OrientationSample, parse_flag, parse_number


@dataclass
class RtpcChannel:
    """
    One continuous parameter following the absolute angle of an axis.

    `last_value` is the only mutable field; it holds the value sent on the
    most recent poll for inspection.
    """
    parameter: ParameterRef
    axis: Axis = Axis.YAW
    min_value: float = 0.0
    max_value: float = 1.0
    clamp: bool = False
    last_value: Optional[float] = field(default=None, compare=False)

    def __post_init__(self):
        if self.parameter is None:
            raise ConfigurationError("RTPC channel has no parameter.")
        self.axis = Axis.parse(self.axis)
        self.min_value = parse_number(self.min_value, f"RTPC channel {self.parameter!r}: min_value")
        self.max_value = parse_number(self.max_value, f"RTPC channel {self.parameter!r}: max_value")
        self.clamp = parse_flag(self.clamp, f"RTPC channel {self.parameter!r}: clamp")

    def copy(self) -> "RtpcChannel":
        """Same configuration with a fresh `last_value`."""
        return replace(self, last_value=None)

    def value_for(self, sample: OrientationSample) -> float:
        return map_rotation(sample.angle(self.axis), self.min_value, self.max_value, clamp=self.clamp)

    def apply(self, sample: OrientationSample, sink: ParameterSink, subject: Any) -> float:
        """Computes the channel value, sends it to `sink` and records it."""
        value = self.value_for(sample)
        sink.set_value(self.parameter, subject, value)
        self.last_value = value
        return value


@dataclass(frozen=True)
class PanoramaChannel:
    """Left-right, front-back and up-down panning parameters."""
    left_right: Optional[ParameterRef] = None
    front_back: Optional[ParameterRef] = None
    up_down: Optional[ParameterRef] = None
    min_pan: float = const.DEFAULT_MIN_PAN_VALUE
    max_pan: float = const.DEFAULT_MAX_PAN_VALUE
    clamp: bool = False

    def __post_init__(self):
        if self.left_right is None and self.front_back is None and self.up_down is None:
            raise ConfigurationError("Panorama channel needs at least one parameter.")
        for name in ("min_pan", "max_pan"):
            object.__setattr__(self, name, parse_number(getattr(self, name), f"Panorama channel: {name}"))
        parse_flag(self.clamp, "Panorama channel: clamp")

    def parameters(self) -> Dict[Axis, ParameterRef]:
        """Configured parameters keyed by the axis driving them."""
        mapping = {
            Axis.YAW: self.left_right,
            Axis.ROLL: self.front_back,
            Axis.PITCH: self.up_down,
        }
        return {axis: parameter for axis, parameter in mapping.items() if parameter is not None}

    def apply(self, sample: OrientationSample, sink: ParameterSink, subject: Any) -> Dict[Axis, float]:
        """Sends every configured panorama component to `sink`."""
        values = map_panorama(sample, self.min_pan, self.max_pan, clamp=self.clamp)
        sent = {}
        for axis, parameter in self.parameters().items():
            sink.set_value(parameter, subject, values[axis])
            sent[axis] = values[axis]
        return sent
