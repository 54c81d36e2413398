# -*- coding: utf-8 -*-
"""
Tests for the immutable geometry tables and the derived target geometry.

Author
------
Duane Smalley, PhD
duane.d.smalley@gmail.com

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-19

Modified
--------
2026-10-19
"""

# Standard library
import dataclasses

# Third-party
import numpy as np
import pytest

# TOPSMerge
from topsmerge.exceptions import ValidationError
from topsmerge.geometry.tables import (
    NoiseVector,
    TargetGeometry,
    TiePointTable,
    java_round,
    validate_subswath_order,
)


def _grid(**overrides):
    fields = dict(
        azimuth_time=[[0.0, 0.0], [1.0, 1.0]],
        slant_range_time=[[1.0, 2.0], [1.0, 2.0]],
        latitude=[[10.0, 10.0], [11.0, 11.0]],
        longitude=[[20.0, 21.0], [20.0, 21.0]],
        incidence_angle=[[30.0, 31.0], [30.0, 31.0]],
    )
    fields.update(overrides)
    return TiePointTable(**fields)


class TestJavaRound:
    """Half-up rounding."""

    def test_half_rounds_up(self):
        assert java_round(2.5) == 3
        assert java_round(3.5) == 4
        assert java_round(-0.5) == 0
        assert java_round(-1.5) == -1

    def test_returns_python_int(self):
        assert isinstance(java_round(1.2), int)

    def test_array(self):
        out = java_round(np.array([0.5, 1.49, -2.5]))
        np.testing.assert_array_equal(out, [1, 1, -2])
        assert out.dtype == np.int64


class TestTiePointTable:
    """Validation and immutability of tie-point grids."""

    def test_shape_properties(self):
        grid = _grid()
        assert grid.num_geo_lines == 2
        assert grid.num_geo_points_per_line == 2

    def test_arrays_are_read_only(self):
        grid = _grid()
        with pytest.raises(ValueError):
            grid.latitude[0, 0] = 0.0

    def test_input_is_copied(self):
        lat = np.array([[10.0, 10.0], [11.0, 11.0]])
        grid = _grid(latitude=lat)
        lat[0, 0] = -99.0
        assert grid.latitude[0, 0] == 10.0

    def test_too_small(self):
        with pytest.raises(ValidationError, match="2x2"):
            _grid(azimuth_time=[[0.0, 0.0]], slant_range_time=[[1.0, 2.0]],
                  latitude=[[0.0, 0.0]], longitude=[[0.0, 0.0]],
                  incidence_angle=[[0.0, 0.0]])

    def test_shape_mismatch(self):
        with pytest.raises(ValidationError, match="latitude"):
            _grid(latitude=[[10.0, 10.0, 10.0], [11.0, 11.0, 11.0]])

    def test_azimuth_not_increasing(self):
        with pytest.raises(ValidationError, match="azimuth"):
            _grid(azimuth_time=[[1.0, 1.0], [1.0, 1.0]])

    def test_slant_range_not_increasing(self):
        with pytest.raises(ValidationError, match="slant-range"):
            _grid(slant_range_time=[[2.0, 1.0], [2.0, 1.0]])

    def test_frozen(self):
        grid = _grid()
        with pytest.raises(dataclasses.FrozenInstanceError):
            grid.latitude = None


class TestNoiseVector:

    def test_valid(self):
        vec = NoiseVector(time=0.0, line=10, pixels=[0, 10], values=[1, 2])
        assert vec.pixels.dtype == np.float64
        assert not vec.values.flags.writeable

    def test_mismatched_lengths(self):
        with pytest.raises(ValidationError):
            NoiseVector(time=0.0, line=0, pixels=[0, 10], values=[1.0])

    def test_empty(self):
        with pytest.raises(ValidationError, match="empty"):
            NoiseVector(time=0.0, line=0, pixels=[], values=[])


class TestSubSwathGeometry:
    """Derived burst table, immutability and validation."""

    def test_burst_last_line_time(self, subswaths):
        sw = subswaths[1]
        np.testing.assert_array_equal(sw.burst_first_line_time, [3.0, 93.0])
        np.testing.assert_array_equal(sw.burst_last_line_time, [102.0, 192.0])
        assert sw.num_bursts == 2

    def test_burst_tables_read_only(self, subswaths):
        with pytest.raises(ValueError):
            subswaths[0].burst_first_line_time[0] = 5.0

    def test_noise_mapping_is_immutable(self, scenario):
        sw = scenario.build_subswath(
            0, noise={'VV': scenario.build_noise(1.0, 0.0)})
        assert isinstance(sw.noise['VV'], tuple)
        with pytest.raises(TypeError):
            sw.noise['VH'] = ()

    def test_valid_sample_arrays_frozen(self, scenario):
        sw = scenario.build_subswath(0)
        sw2 = dataclasses.replace(
            sw, first_valid_sample=[np.zeros(100), np.zeros(100)])
        assert len(sw2.first_valid_sample) == 2
        assert sw2.first_valid_sample[0].dtype == np.int32
        assert not sw2.first_valid_sample[0].flags.writeable

    def test_delta_slant_range_time(self, subswaths, scenario):
        assert subswaths[0].delta_slant_range_time == pytest.approx(
            scenario.delta)

    def test_coverage_predicates(self, subswaths, scenario):
        sw = subswaths[1]
        assert sw.covers_time(3.0)
        assert sw.covers_time(192.0)
        assert not sw.covers_time(192.5)
        assert sw.covers_slant_range(scenario.slr_first(1))
        assert not sw.covers_slant_range(scenario.slr_first(0))

    @pytest.mark.parametrize('field,value', [
        ('num_lines', 0),
        ('lines_per_burst', 0),
        ('azimuth_time_interval', 0.0),
        ('last_line_time', -1.0),
        ('burst_first_line_time', []),
        ('burst_first_line_time', [5.0, 5.0]),
    ])
    def test_invalid(self, subswaths, field, value):
        with pytest.raises(ValidationError):
            dataclasses.replace(subswaths[0], **{field: value})

    def test_empty_slant_range_coverage(self, subswaths):
        sw = subswaths[0]
        with pytest.raises(ValidationError, match="slant-range"):
            dataclasses.replace(
                sw,
                slant_range_time_to_last_pixel=(
                    sw.slant_range_time_to_first_pixel),
            )


class TestTargetGeometry:
    """Target extent derived from the three-subswath scenario."""

    def test_extent(self, target, scenario):
        assert target.height == scenario.height
        assert target.width == scenario.width
        assert target.first_line_time == 0.0
        assert target.last_line_time == 195.0
        assert target.line_time_interval == 1.0
        assert target.slant_range_time_to_first_pixel == scenario.slr_t0
        assert target.delta_slant_range_time == scenario.delta

    def test_line_and_slant_range_time(self, target, scenario):
        assert target.line_time(10) == 10.0
        assert target.slant_range_time(44) == scenario.slr_first(1)
        np.testing.assert_allclose(
            target.slant_range_time(np.array([0, 88])),
            [scenario.slr_first(0), scenario.slr_first(2)],
        )

    def test_extent_tuple(self, target):
        extent = target.extent()
        assert extent.width == target.width
        assert extent.height == target.height
        assert extent.line_time_interval == target.line_time_interval

    def test_height_rounds_half_up(self, subswaths):
        # last line time 195.5 -> (195.5 - 0) / 1 rounds to 196
        sw = dataclasses.replace(subswaths[2], last_line_time=195.5)
        target = TargetGeometry.from_subswaths(
            (subswaths[0], subswaths[1], sw))
        assert target.height == 196


class TestValidateSubswathOrder:

    def test_empty(self):
        with pytest.raises(ValidationError):
            validate_subswath_order([])

    def test_wrong_index(self, subswaths):
        with pytest.raises(ValidationError, match="index"):
            validate_subswath_order([subswaths[1], subswaths[2]])

    def test_not_range_ordered(self, subswaths):
        swapped = (
            subswaths[0],
            dataclasses.replace(
                subswaths[2], index=1),
            dataclasses.replace(subswaths[1], index=2),
        )
        with pytest.raises(ValidationError, match="increasing"):
            validate_subswath_order(swapped)
