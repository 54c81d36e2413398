# -*- coding: utf-8 -*-
"""
Shared synthetic TOPSAR scenario for the test suite.

Three subswaths of 200 lines x 50 samples, two bursts each, with
exactly representable timing so every burst and subswath boundary can
be checked by hand.  Times are expressed in line units (one line per
time unit) and the target raster starts at time 0.

Subswath ``k`` (0, 1, 2):

- first line time ``3k``; bursts start at ``3k`` and ``3k + 90`` and
  last 100 lines, so burst 0 ends at ``3k + 99`` and the burst overlap
  midpoint is ``3k + 94.5``;
- first sample sits at target column ``44k``; 50 samples, so adjacent
  subswaths overlap on six target columns and split at 46.5 and 90.5.

The merged raster is 195 lines x 137 columns.

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
from types import SimpleNamespace

# Third-party
import numpy as np
import pytest

# TOPSMerge
from topsmerge.constants import SPEED_OF_LIGHT
from topsmerge.geometry.bursts import source_line_for_target_line
from topsmerge.geometry.mapper import sample_index_in_source
from topsmerge.geometry.tables import (
    NoiseVector,
    SubSwathGeometry,
    TargetGeometry,
    TiePointTable,
)
from topsmerge.IO.bands import source_band_names
from topsmerge.vocabulary import BandKind


# ===================================================================
# Scenario constants
# ===================================================================

RANGE_SPACING = 2.329562
DELTA = RANGE_SPACING / SPEED_OF_LIGHT
SLR_T0 = 2.66e-3
NUM_SUBSWATHS = 3
NUM_LINES = 200
NUM_SAMPLES = 50
LINES_PER_BURST = 100
BURST_STEP = 90.0
SWATH_COLUMN_STEP = 44
SWATH_TIME_STEP = 3.0
# target columns shared by adjacent subswaths
SWATH_OVERLAP = NUM_SAMPLES - SWATH_COLUMN_STEP
TARGET_HEIGHT = 195
TARGET_WIDTH = 137


def slr_first(k):
    """One-way slant-range time of subswath ``k``'s first sample."""
    return SLR_T0 + (SWATH_COLUMN_STEP * k) * DELTA


def slr_last(k):
    """One-way slant-range time of subswath ``k``'s last sample."""
    return SLR_T0 + (SWATH_COLUMN_STEP * k + NUM_SAMPLES - 1) * DELTA


def expected_lat(line_time):
    return 30.0 + 0.001 * line_time


def expected_lon(target_x):
    return 50.0 + 0.0002 * target_x


def expected_inc(target_x):
    return 30.0 + 0.01 * target_x


# ===================================================================
# Builders
# ===================================================================

def build_tie_points(k, lat_offset=0.0):
    """3x3 tie-point grid of subswath ``k`` over a linear geolocation field."""
    times = SWATH_TIME_STEP * k + np.array([0.0, 100.0, 200.0])
    pixels = np.array([0.0, 25.0, 50.0])
    global_x = SWATH_COLUMN_STEP * k + pixels

    az = np.repeat(times[:, None], 3, axis=1)
    slr = np.tile(slr_first(k) + pixels * DELTA, (3, 1))
    gx = np.tile(global_x, (3, 1))
    return TiePointTable(
        azimuth_time=az,
        slant_range_time=slr,
        latitude=expected_lat(az) + lat_offset,
        longitude=expected_lon(gx),
        incidence_angle=expected_inc(gx),
    )


def build_noise(level, first_time):
    """Two constant-level noise vectors spanning the subswath."""
    return (
        NoiseVector(time=first_time, line=0,
                    pixels=[0.0, 49.0], values=[level, level]),
        NoiseVector(time=first_time + 150.0, line=150,
                    pixels=[0.0, 49.0], values=[level, level]),
    )


def build_subswath(k, noise=None, lat_offset=0.0):
    first = SWATH_TIME_STEP * k
    return SubSwathGeometry(
        name=f"IW{k + 1}",
        index=k,
        num_lines=NUM_LINES,
        num_samples=NUM_SAMPLES,
        first_line_time=first,
        last_line_time=first + BURST_STEP + LINES_PER_BURST - 1,
        azimuth_time_interval=1.0,
        slant_range_time_to_first_pixel=slr_first(k),
        slant_range_time_to_last_pixel=slr_last(k),
        range_pixel_spacing=RANGE_SPACING,
        lines_per_burst=LINES_PER_BURST,
        samples_per_burst=NUM_SAMPLES,
        burst_first_line_time=[first, first + BURST_STEP],
        tie_points=build_tie_points(k, lat_offset),
        noise=noise or {},
    )


def build_subswaths(noise_levels=None):
    """The three scenario subswaths, optionally with VV noise vectors."""
    subswaths = []
    for k in range(NUM_SUBSWATHS):
        noise = None
        if noise_levels is not None:
            noise = {'VV': build_noise(noise_levels[k], SWATH_TIME_STEP * k)}
        subswaths.append(build_subswath(k, noise=noise))
    return tuple(subswaths)


def build_slc_arrays(pol='VV'):
    """i = 1000 * (k + 1) + sample, q = line + 1."""
    lines = np.arange(NUM_LINES)[:, None]
    samples = np.arange(NUM_SAMPLES)[None, :]
    arrays = {}
    for k in range(NUM_SUBSWATHS):
        i = np.broadcast_to(1000 * (k + 1) + samples, (NUM_LINES, NUM_SAMPLES))
        q = np.broadcast_to(lines + 1, (NUM_LINES, NUM_SAMPLES))
        arrays[f"i_IW{k + 1}_{pol}"] = i.astype(np.int16)
        arrays[f"q_IW{k + 1}_{pol}"] = q.astype(np.int16)
    return arrays


def build_calibrated_arrays(kind='Sigma0', pol='VV'):
    """value = 100000 * (k + 1) + 100 * line + sample, exact in float32."""
    lines = np.arange(NUM_LINES)[:, None]
    samples = np.arange(NUM_SAMPLES)[None, :]
    return {
        f"{kind}_IW{k + 1}_{pol}": (
            100000.0 * (k + 1) + 100.0 * lines + samples
        ).astype(np.float32)
        for k in range(NUM_SUBSWATHS)
    }


# ===================================================================
# Per-pixel reference
# ===================================================================

def reference_merge(subswaths, arrays, band, threshold=300.0, no_data=0.0):
    """Merge the whole raster one pixel at a time.

    A literal scalar rendition of the selection rules: covering
    subswaths, midpoint split in range, midpoint split between bursts,
    and seam repair of degenerate samples.
    """
    target = TargetGeometry.from_subswaths(subswaths)
    slc = band.kind is BandKind.SLC
    shape = ((2, target.height, target.width) if slc
             else (target.height, target.width))
    out = np.zeros(shape, dtype=np.int16 if slc else np.float32)

    lines = {}

    def sample(sw, y, x):
        key = (sw.index, y)
        if key not in lines:
            lines[key] = source_line_for_target_line(y, sw, target)
        line = lines[key]
        if line is None:
            return None
        sx = sample_index_in_source(x, sw, target)
        return tuple(arrays[name][line, sx]
                     for name in source_band_names(band, sw.name))

    def missing(value):
        if np.isnan(no_data):
            return bool(np.isnan(value[0]))
        return value[0] == no_data

    def degenerate(value):
        if slc:
            return int(value[0]) ** 2 + int(value[1]) ** 2 < threshold
        return missing(value)

    def usable(value):
        if slc:
            return not (value[0] == 0 and value[1] == 0)
        return not missing(value)

    for y in range(target.height):
        t = target.line_time(y)
        for x in range(target.width):
            s = target.slant_range_time(x)
            covering = [sw for sw in subswaths
                        if sw.covers_time(t) and sw.covers_slant_range(s)]
            if not covering:
                continue
            primary, other = covering[0], None
            if len(covering) > 1:
                other = covering[1]
                middle = 0.5 * (covering[0].slant_range_time_to_last_pixel
                                + covering[1].slant_range_time_to_first_pixel)
                if s >= middle:
                    primary, other = covering[1], covering[0]
            value = sample(primary, y, x)
            if value is None:
                continue
            if other is not None and degenerate(value):
                alt = sample(other, y, x)
                if alt is not None and usable(alt):
                    value = alt
            if slc:
                out[:, y, x] = value
            else:
                out[y, x] = value[0]
    return out


# ===================================================================
# Fixtures
# ===================================================================

@pytest.fixture
def subswaths():
    return build_subswaths()


@pytest.fixture
def target(subswaths):
    return TargetGeometry.from_subswaths(subswaths)


@pytest.fixture
def slc_arrays():
    return build_slc_arrays()


@pytest.fixture
def calibrated_arrays():
    return build_calibrated_arrays()


@pytest.fixture
def scenario():
    """Scenario constants, builders and the per-pixel reference."""
    return SimpleNamespace(
        delta=DELTA,
        slr_t0=SLR_T0,
        num_lines=NUM_LINES,
        num_samples=NUM_SAMPLES,
        num_subswaths=NUM_SUBSWATHS,
        overlap=SWATH_OVERLAP,
        lines_per_burst=LINES_PER_BURST,
        burst_step=BURST_STEP,
        swath_time_step=SWATH_TIME_STEP,
        height=TARGET_HEIGHT,
        width=TARGET_WIDTH,
        slr_first=slr_first,
        slr_last=slr_last,
        expected_lat=expected_lat,
        expected_lon=expected_lon,
        expected_inc=expected_inc,
        build_noise=build_noise,
        build_subswath=build_subswath,
        build_subswaths=build_subswaths,
        build_slc_arrays=build_slc_arrays,
        build_calibrated_arrays=build_calibrated_arrays,
        reference_merge=reference_merge,
    )
