# -*- coding: utf-8 -*-
"""
Tests for target/source coordinate mapping and tie-point cell lookup.

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

# Third-party
import numpy as np
import pytest

# TOPSMerge
from topsmerge.exceptions import GeometryError
from topsmerge.geometry.mapper import (
    bilinear_index,
    interpolate,
    interpolate_geolocation,
    owning_subswath,
    sample_index_in_source,
    subswath_index_for_slant_range,
    subswath_range_bounds,
    target_x_for_source_sample,
)


class TestSampleIndex:
    """Target column to source sample."""

    def test_offset_by_first_sample(self, subswaths, target):
        assert sample_index_in_source(60, subswaths[1], target) == 16
        assert sample_index_in_source(44, subswaths[1], target) == 0

    def test_scalar_clamped(self, subswaths, target):
        assert sample_index_in_source(40, subswaths[1], target) == 0
        assert sample_index_in_source(120, subswaths[1], target) == 49

    def test_array_clamped(self, subswaths, target):
        out = sample_index_in_source(
            np.array([0, 45, 93, 136]), subswaths[1], target)
        np.testing.assert_array_equal(out, [0, 1, 49, 49])

    def test_inverse_mapping(self, subswaths, target):
        assert target_x_for_source_sample(3, subswaths[1], target) == 47
        np.testing.assert_array_equal(
            target_x_for_source_sample(np.array([0, 49]), subswaths[2],
                                       target),
            [88, 137],
        )


class TestSubswathOwnership:
    """Midpoint split of slant range between adjacent subswaths."""

    def test_bounds(self, subswaths, scenario):
        starts, ends = subswath_range_bounds(subswaths)
        assert starts[0] == scenario.slr_first(0)
        assert ends[-1] == scenario.slr_last(2)
        np.testing.assert_allclose(ends[:-1], starts[1:])
        np.testing.assert_allclose(
            ends[0], scenario.slr_t0 + 46.5 * scenario.delta)

    def test_interior_queries(self, subswaths, target):
        assert subswath_index_for_slant_range(
            target.slant_range_time(46), subswaths) == 0
        assert subswath_index_for_slant_range(
            target.slant_range_time(47), subswaths) == 1
        assert subswath_index_for_slant_range(
            target.slant_range_time(91), subswaths) == 2

    def test_midpoint_goes_to_later_subswath(self, subswaths):
        _, ends = subswath_range_bounds(subswaths)
        assert subswath_index_for_slant_range(ends[0], subswaths) == 1
        assert subswath_index_for_slant_range(ends[1], subswaths) == 2

    def test_outside(self, subswaths, scenario):
        before = scenario.slr_first(0) - scenario.delta
        after = scenario.slr_last(2) + scenario.delta
        assert subswath_index_for_slant_range(before, subswaths) is None
        assert subswath_index_for_slant_range(after, subswaths) is None

    def test_owning_raises(self, subswaths, scenario):
        with pytest.raises(GeometryError) as exc_info:
            owning_subswath(scenario.slr_first(0) / 2.0, subswaths)
        assert exc_info.value.coordinate == scenario.slr_first(0) / 2.0

    def test_owning_hit(self, subswaths, scenario):
        # IW3 starts at column 88, below the 90.5 split with IW2
        assert owning_subswath(scenario.slr_first(2), subswaths) == 1
        beyond_split = scenario.slr_first(2) + 3 * scenario.delta
        assert owning_subswath(beyond_split, subswaths) == 2
        assert owning_subswath(
            scenario.slr_last(2) - scenario.delta, subswaths) == 2

    def test_centre_of_middle_subswath_round_trip(self, subswaths, target):
        # IW2 sample 25 sits at target column 69
        column = target_x_for_source_sample(25, subswaths[1], target)
        assert column == 69
        assert sample_index_in_source(column, subswaths[1], target) == 25
        assert subswath_index_for_slant_range(
            target.slant_range_time(column), subswaths) == 1


class TestBilinearIndex:
    """Tie-point cell search on subswath 0's 3x3 grid."""

    def test_at_origin_node(self, subswaths, scenario):
        idx = bilinear_index(0.0, scenario.slr_first(0), subswaths[0])
        assert (idx.i0, idx.i1, idx.j0, idx.j1) == (0, 1, 0, 1)
        assert idx.mu_x == 0.0
        assert idx.mu_y == 0.0

    def test_interior(self, subswaths, scenario):
        slr = scenario.slr_first(0) + 30 * scenario.delta
        idx = bilinear_index(150.0, slr, subswaths[0])
        assert (idx.i0, idx.j0) == (1, 1)
        assert idx.mu_x == pytest.approx(0.2)
        assert idx.mu_y == pytest.approx(0.5)

    def test_rows_extrapolate_before_first(self, subswaths, scenario):
        idx = bilinear_index(-10.0, scenario.slr_first(0), subswaths[0])
        assert idx.i0 == 0
        assert idx.mu_y == pytest.approx(-0.1)

    def test_rows_extrapolate_after_last(self, subswaths, scenario):
        idx = bilinear_index(250.0, scenario.slr_first(0), subswaths[0])
        assert (idx.i0, idx.i1) == (1, 2)
        assert idx.mu_y == pytest.approx(1.5)

    def test_slant_range_outside_grid(self, subswaths, scenario):
        slr = scenario.slr_first(0) + 60 * scenario.delta
        with pytest.raises(GeometryError) as exc_info:
            bilinear_index(10.0, slr, subswaths[0])
        assert exc_info.value.subswath == 'IW1'

    def test_interpolate_blends_corners(self, subswaths, scenario):
        slr = scenario.slr_first(0) + 30 * scenario.delta
        idx = bilinear_index(150.0, slr, subswaths[0])
        field = np.array([[0.0, 0.0, 0.0],
                          [0.0, 10.0, 20.0],
                          [0.0, 30.0, 40.0]])
        # 0.5 * (0.8*10 + 0.2*20) + 0.5 * (0.8*30 + 0.2*40)
        assert interpolate(field, idx) == pytest.approx(22.0)


class TestInterpolateGeolocation:

    def test_linear_field_reproduced(self, subswaths, target, scenario):
        sample = interpolate_geolocation(
            50.0, target.slant_range_time(60), subswaths[1])
        assert sample.latitude == pytest.approx(scenario.expected_lat(50.0))
        assert sample.longitude == pytest.approx(scenario.expected_lon(60))
        assert sample.incidence_angle == pytest.approx(
            scenario.expected_inc(60))
        assert sample.slant_range_time == pytest.approx(
            target.slant_range_time(60), rel=1e-12)
