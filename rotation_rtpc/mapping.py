"""
Linear range mapping for angles.

`map_range` normalizes a value against an input range with `inverse_lerp`
and interpolates the result into an output range with `lerp`. Both are
unclamped unless asked otherwise, so values outside the input range
extrapolate linearly.
"""
from typing import Dict, Tuple

from . import constants as const
from .exceptions import MappingError
from .orientation import Axis, OrientationSample


def lerp(start: float, end: float, t: float, clamp: bool = False) -> float:
    """Linear interpolation between `start` and `end` at `t`."""
    if clamp:
        t = min(max(t, 0.0), 1.0)
    return start + (end - start) * t


def inverse_lerp(start: float, end: float, value: float, clamp: bool = False) -> float:
    """
    Position of `value` within [start, end] as a fraction.

    A degenerate range (start == end) yields 0.0.
    """
    if start == end:
        return 0.0
    t = (value - start) / (end - start)
    if clamp:
        t = min(max(t, 0.0), 1.0)
    return t


def map_range(
    value: float,
    in_min: float,
    in_max: float,
    out_min: float,
    out_max: float,
    clamp: bool = False,
) -> float:
    """
    Maps `value` from [in_min, in_max] into [out_min, out_max].

    Args:
        value: Input value.
        in_min: Input value that maps to `out_min`.
        in_max: Input value that maps to `out_max`.
        out_min: Output at the start of the input range.
        out_max: Output at the end of the input range.
        clamp: Clamp the normalized position to [0, 1] before interpolating.

    Returns:
        The mapped value. With `clamp=False` values outside the input range
        extrapolate along the same line.
    """
    t = inverse_lerp(in_min, in_max, value, clamp=clamp)
    return lerp(out_min, out_max, t)


def strict_map_range(
    value: float,
    in_min: float,
    in_max: float,
    out_min: float,
    out_max: float,
    clamp: bool = False,
) -> float:
    """
    Same as `map_range` but rejects a degenerate input range.

    Raises:
        MappingError: If `in_min == in_max`.
    """
    if in_min == in_max:
        raise MappingError(f"Input range [{in_min}, {in_max}] is empty.")
    return map_range(value, in_min, in_max, out_min, out_max, clamp=clamp)


def map_rotation(angle: float, out_min: float, out_max: float, clamp: bool = False) -> float:
    """Maps a wrapped angle in [0, 360) into [out_min, out_max]."""
    in_min, in_max = const.ROTATION_DOMAIN
    return map_range(angle, in_min, in_max, out_min, out_max, clamp=clamp)


PANORAMA_DOMAINS: Dict[Axis, Tuple[float, float]] = {
    Axis.YAW: const.PANORAMA_HORIZONTAL_DOMAIN,
    Axis.ROLL: const.PANORAMA_HORIZONTAL_DOMAIN,
    Axis.PITCH: const.PANORAMA_VERTICAL_DOMAIN,
}


def map_panorama(
    sample: OrientationSample,
    min_pan: float,
    max_pan: float,
    clamp: bool = False,
) -> Dict[Axis, float]:
    """
    Maps an orientation to the three panorama components.

    Yaw drives left-right and roll drives front-back, both over [-180, 180];
    pitch drives up-down over [-90, 90]. All three share the output range.

    Returns:
        Mapping of axis to panorama value.
    """
    return {
        axis: map_range(sample.angle(axis), in_min, in_max, min_pan, max_pan, clamp=clamp)
        for axis, (in_min, in_max) in PANORAMA_DOMAINS.items()
    }
