"""Unit tests for the range mappers.

These tests verify `lerp`, `inverse_lerp` and `map_range`, including the
unclamped extrapolation outside the input range and the RTPC and panorama
helpers built on top of them.
"""
import pytest

from rotation_rtpc.exceptions import MappingError
from rotation_rtpc.mapping import (
    inverse_lerp,
    lerp,
    map_panorama,
    map_range,
    map_rotation,
    strict_map_range,
)
from rotation_rtpc.orientation import Axis, OrientationSample


class TestPrimitives:

    def test_lerp(self):
        assert lerp(-10.0, 10.0, 0.25) == -5.0
        assert lerp(-10.0, 10.0, 1.5) == 20.0
        assert lerp(-10.0, 10.0, 1.5, clamp=True) == 10.0

    def test_inverse_lerp(self):
        assert inverse_lerp(0.0, 360.0, 90.0) == 0.25
        assert inverse_lerp(0.0, 360.0, 720.0) == 2.0
        assert inverse_lerp(0.0, 360.0, 720.0, clamp=True) == 1.0
        assert inverse_lerp(0.0, 360.0, -90.0, clamp=True) == 0.0

    def test_inverse_lerp_degenerate_range(self):
        assert inverse_lerp(5.0, 5.0, 7.0) == 0.0


class TestMapRange:

    def test_midpoint_maps_to_midpoint(self):
        assert map_range(180, 0, 360, -3600, 3600) == 0

    def test_endpoints(self):
        assert map_range(0, 0, 360, -3600, 3600) == -3600
        assert map_range(360, 0, 360, -3600, 3600) == 3600

    def test_values_outside_input_extrapolate(self):
        assert map_range(450, 0, 360, 0, 100) == pytest.approx(125.0)
        assert map_range(-36, 0, 360, 0, 100) == pytest.approx(-10.0)

    def test_clamped_mapping(self):
        assert map_range(450, 0, 360, 0, 100, clamp=True) == 100.0

    def test_inverted_output_range(self):
        assert map_range(90, 0, 360, 1, 0) == pytest.approx(0.75)

    @pytest.mark.parametrize("y", [-3600.0, -1234.5, 0.0, 42.0, 3600.0])
    def test_inverse_mapping_round_trip(self, y):
        # Mapping back with swapped ranges and forward again returns y.
        x = map_range(y, -3600.0, 3600.0, 0.0, 360.0)
        assert map_range(x, 0.0, 360.0, -3600.0, 3600.0) == pytest.approx(y)

    def test_strict_map_range_rejects_empty_input(self):
        with pytest.raises(MappingError):
            strict_map_range(1.0, 2.0, 2.0, 0.0, 1.0)
        assert strict_map_range(1.0, 0.0, 2.0, 0.0, 10.0) == 5.0


class TestRotationHelpers:

    def test_map_rotation(self):
        assert map_rotation(90.0, 0.0, 1.0) == 0.25

    def test_panorama_components(self):
        sample = OrientationSample(yaw=90.0, roll=0.0, pitch=45.0)
        values = map_panorama(sample, -3600.0, 3600.0)
        assert values[Axis.YAW] == pytest.approx(1800.0)
        assert values[Axis.ROLL] == pytest.approx(0.0)
        assert values[Axis.PITCH] == pytest.approx(1800.0)

    def test_panorama_extrapolates_wrapped_angles(self):
        # Wrapped yaw of 270 lies beyond the [-180, 180] domain.
        values = map_panorama(OrientationSample(yaw=270.0), -1.0, 1.0)
        assert values[Axis.YAW] == pytest.approx(1.5)

    def test_panorama_clamped(self):
        values = map_panorama(OrientationSample(yaw=270.0), -1.0, 1.0, clamp=True)
        assert values[Axis.YAW] == 1.0
