"""
Orientation samples and per-axis rotation deltas.

An `OrientationSample` is one reading of a tracked object's orientation as
three wrapped Euler angles. The samplers compare two consecutive samples
to obtain an unsigned rotation delta per axis and, divided by the elapsed
poll time, a rotation speed in degrees per second.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional
import math

from . import constants as const
from .exceptions import ConfigurationError


class Axis(Enum):
    """Rotation axes of a tracked object."""
    YAW = const.AXIS_YAW
    ROLL = const.AXIS_ROLL
    PITCH = const.AXIS_PITCH

    @classmethod
    def parse(cls, name) -> "Axis":
        """
        Resolves an axis from its configuration name (case-insensitive).

        Raises:
            ConfigurationError: If the name is not a known axis.
        """
        if isinstance(name, Axis):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown axis '{name}'. Expected one of {', '.join(const.AXIS_NAMES)}."
            ) from None


def parse_number(value, what: str, allow_infinite: bool = False) -> float:
    """
    Returns a numeric configuration value as a float.

    Raises:
        ConfigurationError: If `value` is not an int or float (booleans are
                            rejected), is NaN, or is infinite while
                            `allow_infinite` is False.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{what} must be a number, got {value!r}.")
    number = float(value)
    if math.isnan(number) or (math.isinf(number) and not allow_infinite):
        raise ConfigurationError(f"{what} must be a finite number, got {value!r}.")
    return number


def parse_flag(value, what: str) -> bool:
    """Returns a boolean configuration value, rejecting anything that is not a bool."""
    if not isinstance(value, bool):
        raise ConfigurationError(f"{what} must be true or false, got {value!r}.")
    return value


def wrap_angle(angle: float) -> float:
    """Wraps an angle in degrees into [0, 360)."""
    wrapped = math.fmod(angle, const.FULL_TURN_DEGREES)
    if wrapped < 0.0:
        wrapped += const.FULL_TURN_DEGREES
    # fmod of a tiny negative number can round up to exactly 360
    if wrapped >= const.FULL_TURN_DEGREES:
        wrapped = 0.0
    return wrapped


@dataclass(frozen=True)
class OrientationSample:
    """Orientation of a tracked object, each angle wrapped into [0, 360)."""
    yaw: float = 0.0
    roll: float = 0.0
    pitch: float = 0.0

    def __post_init__(self):
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "yaw", wrap_angle(float(self.yaw)))
        object.__setattr__(self, "roll", wrap_angle(float(self.roll)))
        object.__setattr__(self, "pitch", wrap_angle(float(self.pitch)))

    def angle(self, axis: Axis) -> float:
        """Returns the wrapped angle of `axis`."""
        return getattr(self, axis.value)

    def as_dict(self) -> Dict[str, float]:
        return {"yaw": self.yaw, "roll": self.roll, "pitch": self.pitch}


def absolute_delta(previous: float, current: float) -> float:
    """
    Unsigned difference of two wrapped angles.

    No wraparound correction: going from 359 to 1 degree yields 358.
    """
    return abs(current - previous)


def shortest_angle_delta(previous: float, current: float) -> float:
    """Unsigned shortest angular distance between two angles, in [0, 180]."""
    diff = math.fmod(abs(current - previous), const.FULL_TURN_DEGREES)
    return const.FULL_TURN_DEGREES - diff if diff > 180.0 else diff


def rotation_delta(
    previous: OrientationSample,
    current: OrientationSample,
    axis: Axis,
    shortest_path: bool = False,
) -> float:
    """Rotation delta of a single axis between two samples."""
    delta_fn = shortest_angle_delta if shortest_path else absolute_delta
    return delta_fn(previous.angle(axis), current.angle(axis))


def compute_deltas(
    previous: OrientationSample,
    current: OrientationSample,
    axes: Optional[Iterable[Axis]] = None,
    shortest_path: bool = False,
) -> Dict[Axis, float]:
    """
    Computes rotation deltas for several axes at once.

    Args:
        previous: Baseline sample from the last poll.
        current: Sample captured at this poll.
        axes: Axes to compute. Defaults to all three.
        shortest_path: Use `shortest_angle_delta` instead of the raw
                       absolute difference.

    Returns:
        Mapping of axis to unsigned delta in degrees.
    """
    if axes is None:
        axes = tuple(Axis)
    return {
        axis: rotation_delta(previous, current, axis, shortest_path)
        for axis in axes
    }


def rotation_speed(delta: float, elapsed: float) -> float:
    """Rotation speed in degrees/second. Zero elapsed time yields 0.0."""
    if elapsed <= 0.0:
        return 0.0
    return delta / elapsed
