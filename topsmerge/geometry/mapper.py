# -*- coding: utf-8 -*-
"""
Coordinate Mapper - Target/source coordinate and tie-point cell lookups.

Pure functions that map a target raster column to a sample of a given
subswath, a slant-range time to the subswath that owns it, and an
(azimuth time, slant-range time) pair to the enclosing cell of a
subswath's geolocation tie-point grid.  All functions are stateless and
safe to call concurrently.

Subswath ownership in range is split at the midpoint between adjacent
subswath edges.  Each subswath owns the half-open interval
``[start, end)``; a query exactly on a midpoint therefore belongs to the
later subswath.

Dependencies
------------
numpy

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
from typing import NamedTuple, Optional, Sequence, Tuple, Union

# Third-party
import numpy as np

# TOPSMerge internal
from topsmerge.exceptions import GeometryError
from topsmerge.geometry.tables import (
    SubSwathGeometry,
    TargetGeometry,
    java_round,
)


class BilinearIndex(NamedTuple):
    """Enclosing tie-point cell and fractional offsets inside it.

    Attributes
    ----------
    i0, i1 : int
        Tie-point rows bracketing the query.
    j0, j1 : int
        Tie-point columns bracketing the query.
    mu_x : float
        Fractional offset across columns.
    mu_y : float
        Fractional offset down rows.  Outside ``[0, 1)`` only when the
        query is beyond the first or last tie-point row.
    """

    i0: int
    i1: int
    j0: int
    j1: int
    mu_x: float
    mu_y: float


class GeolocationSample(NamedTuple):
    """Interpolated geolocation at one point of one subswath."""

    latitude: float
    longitude: float
    slant_range_time: float
    incidence_angle: float


# ===================================================================
# Range sample mapping
# ===================================================================

def sample_index_in_source(
    target_x: Union[int, np.ndarray],
    subswath: SubSwathGeometry,
    target: TargetGeometry,
) -> Union[int, np.ndarray]:
    """Map target column(s) to the nearest sample of ``subswath``.

    Parameters
    ----------
    target_x : int or np.ndarray
        Target column index or array of indices.
    subswath : SubSwathGeometry
        Source subswath.
    target : TargetGeometry
        Merged raster sampling.

    Returns
    -------
    int or np.ndarray
        Source sample index, clamped to ``[0, num_samples - 1]``.
    """
    offset = ((target.slant_range_time(target_x)
               - subswath.slant_range_time_to_first_pixel)
              / target.delta_slant_range_time)
    sx = java_round(offset)
    if np.ndim(sx) == 0:
        return min(max(sx, 0), subswath.num_samples - 1)
    return np.clip(sx, 0, subswath.num_samples - 1)


def target_x_for_source_sample(
    source_x: Union[int, np.ndarray],
    subswath: SubSwathGeometry,
    target: TargetGeometry,
) -> Union[int, np.ndarray]:
    """Map subswath sample(s) to the nearest target column (unclamped)."""
    slr = (subswath.slant_range_time_to_first_pixel
           + source_x * target.delta_slant_range_time)
    return java_round(
        (slr - target.slant_range_time_to_first_pixel)
        / target.delta_slant_range_time
    )


# ===================================================================
# Subswath ownership in range
# ===================================================================

def subswath_range_bounds(
    subswaths: Sequence[SubSwathGeometry],
) -> Tuple[np.ndarray, np.ndarray]:
    """Half-open ``[start, end)`` slant-range interval owned by each subswath.

    Interior boundaries are the midpoints between a subswath's last-pixel
    time and its neighbor's first-pixel time.  The first subswath starts
    at its own first pixel, the last ends at its own last pixel.

    Returns
    -------
    starts, ends : np.ndarray
        Arrays of length ``len(subswaths)``.
    """
    n = len(subswaths)
    starts = np.empty(n, dtype=np.float64)
    ends = np.empty(n, dtype=np.float64)
    for i, sw in enumerate(subswaths):
        if i == 0:
            starts[i] = sw.slant_range_time_to_first_pixel
        else:
            starts[i] = 0.5 * (sw.slant_range_time_to_first_pixel
                               + subswaths[i - 1].slant_range_time_to_last_pixel)
        if i == n - 1:
            ends[i] = sw.slant_range_time_to_last_pixel
        else:
            ends[i] = 0.5 * (sw.slant_range_time_to_last_pixel
                             + subswaths[i + 1].slant_range_time_to_first_pixel)
    return starts, ends


def subswath_index_for_slant_range(
    slr_time: float,
    subswaths: Sequence[SubSwathGeometry],
) -> Optional[int]:
    """Index of the subswath owning ``slr_time``, or None.

    Parameters
    ----------
    slr_time : float
        One-way slant-range time (seconds).
    subswaths : Sequence[SubSwathGeometry]
        Subswaths in increasing slant-range order.

    Returns
    -------
    int or None
        Zero-based index of the first subswath whose ``[start, end)``
        contains the query, or None if none does.
    """
    starts, ends = subswath_range_bounds(subswaths)
    for i in range(len(subswaths)):
        if starts[i] <= slr_time < ends[i]:
            return i
    return None


def owning_subswath(
    slr_time: float,
    subswaths: Sequence[SubSwathGeometry],
) -> int:
    """Like :func:`subswath_index_for_slant_range`, but a miss is fatal.

    Raises
    ------
    GeometryError
        If no subswath owns ``slr_time``.
    """
    index = subswath_index_for_slant_range(slr_time, subswaths)
    if index is None:
        raise GeometryError(
            f"Slant-range time {slr_time!r} s is outside every subswath "
            f"({subswaths[0].slant_range_time_to_first_pixel!r} to "
            f"{subswaths[-1].slant_range_time_to_last_pixel!r} s)",
            coordinate=slr_time,
        )
    return index


# ===================================================================
# Tie-point cell lookup and interpolation
# ===================================================================

def bilinear_index(
    azimuth_time: float,
    slr_time: float,
    subswath: SubSwathGeometry,
) -> BilinearIndex:
    """Locate the tie-point cell enclosing ``(azimuth_time, slr_time)``.

    Columns are found on row 0 (columns share slant-range time across
    rows).  Rows are found against azimuth times interpolated across the
    column pair; the first row accepts any earlier time and the last
    interior row any later time, so ``mu_y`` extrapolates there.

    Parameters
    ----------
    azimuth_time : float
        Azimuth time (fractional days).
    slr_time : float
        One-way slant-range time (seconds).
    subswath : SubSwathGeometry
        Subswath whose tie-point grid is searched.

    Returns
    -------
    BilinearIndex

    Raises
    ------
    GeometryError
        If ``slr_time`` is outside the grid's slant-range span.
    """
    grid = subswath.tie_points
    row0 = grid.slant_range_time[0]

    # searchsorted(side='right') - 1 gives j with row0[j] <= slr < row0[j+1]
    j0 = int(np.searchsorted(row0, slr_time, side='right')) - 1
    if j0 < 0 or j0 >= row0.size - 1:
        raise GeometryError(
            f"Slant-range time {slr_time!r} s is outside the tie-point "
            f"grid of {subswath.name} ({row0[0]!r} to {row0[-1]!r} s)",
            subswath=subswath.name,
            coordinate=(azimuth_time, slr_time),
        )
    j1 = j0 + 1
    mu_x = (slr_time - row0[j0]) / (row0[j1] - row0[j0])

    az = (1.0 - mu_x) * grid.azimuth_time[:, j0] + mu_x * grid.azimuth_time[:, j1]
    last = grid.num_geo_lines - 2
    if azimuth_time < az[0]:
        i0 = 0
    elif azimuth_time >= az[last + 1]:
        i0 = last
    else:
        i0 = min(int(np.searchsorted(az, azimuth_time, side='right')) - 1,
                 last)
    i1 = i0 + 1
    mu_y = (azimuth_time - az[i0]) / (az[i1] - az[i0])

    return BilinearIndex(i0, i1, j0, j1, float(mu_x), float(mu_y))


def interpolate(field: np.ndarray, index: BilinearIndex) -> float:
    """Bilinearly blend the four corners of ``index``'s cell in ``field``.

    Parameters
    ----------
    field : np.ndarray
        2D tie-point field (latitude, longitude, ...).
    index : BilinearIndex
        Cell from :func:`bilinear_index`.

    Returns
    -------
    float
    """
    f00 = field[index.i0, index.j0]
    f01 = field[index.i0, index.j1]
    f10 = field[index.i1, index.j0]
    f11 = field[index.i1, index.j1]
    mu_x, mu_y = index.mu_x, index.mu_y
    return float((1.0 - mu_y) * ((1.0 - mu_x) * f00 + mu_x * f01)
                 + mu_y * ((1.0 - mu_x) * f10 + mu_x * f11))


def interpolate_geolocation(
    azimuth_time: float,
    slr_time: float,
    subswath: SubSwathGeometry,
) -> GeolocationSample:
    """Latitude, longitude, slant-range time and incidence angle at a point.

    Interpolation uses ``subswath``'s own tie-point grid only.

    Raises
    ------
    GeometryError
        If the point is outside the grid's slant-range span.
    """
    index = bilinear_index(azimuth_time, slr_time, subswath)
    grid = subswath.tie_points
    return GeolocationSample(
        latitude=interpolate(grid.latitude, index),
        longitude=interpolate(grid.longitude, index),
        slant_range_time=interpolate(grid.slant_range_time, index),
        incidence_angle=interpolate(grid.incidence_angle, index),
    )
