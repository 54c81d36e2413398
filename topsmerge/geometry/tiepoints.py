# -*- coding: utf-8 -*-
"""
Tie-Point Grid Synthesizer - Sparse geolocation grid of the merged raster.

Samples the merged raster at a fixed subsampling and, for every control
point, interpolates latitude, longitude, slant-range time and incidence
angle from the tie-point grid of the single subswath that owns the
point in range.  Geometry is never blended across subswath boundaries.

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
from dataclasses import dataclass
from typing import Sequence, Tuple

# Third-party
import numpy as np

# TOPSMerge internal
from topsmerge.constants import (
    DEFAULT_TIE_POINT_GRID_HEIGHT,
    DEFAULT_TIE_POINT_GRID_WIDTH,
    ONE_BILLION,
)
from topsmerge.exceptions import ValidationError
from topsmerge.geometry.mapper import interpolate_geolocation, owning_subswath
from topsmerge.geometry.tables import SubSwathGeometry, TargetGeometry


@dataclass(frozen=True, eq=False)
class GeolocationGrid:
    """Sparse geolocation grid attached to the merged raster.

    Control point ``(i, j)`` sits at output pixel
    ``(row=i * sub_sampling_y, col=j * sub_sampling_x)``.

    Parameters
    ----------
    latitude : np.ndarray
        Latitude in degrees, shape ``(grid_height, grid_width)``, float32.
    longitude : np.ndarray
        Longitude in degrees, float32.
    slant_range_time_ns : np.ndarray
        Two-way slant-range time in nanoseconds, float32.
    incidence_angle : np.ndarray
        Incidence angle in degrees, float32.
    sub_sampling_x : int
        Output columns between control points.
    sub_sampling_y : int
        Output rows between control points.
    """

    latitude: np.ndarray
    longitude: np.ndarray
    slant_range_time_ns: np.ndarray
    incidence_angle: np.ndarray
    sub_sampling_x: int
    sub_sampling_y: int

    @property
    def shape(self) -> Tuple[int, int]:
        """``(grid_height, grid_width)``."""
        return self.latitude.shape

    def control_rows(self) -> np.ndarray:
        """Output row of each grid row."""
        return np.arange(self.shape[0], dtype=np.float64) * self.sub_sampling_y

    def control_cols(self) -> np.ndarray:
        """Output column of each grid column."""
        return np.arange(self.shape[1], dtype=np.float64) * self.sub_sampling_x


def synthesize_geolocation_grid(
    subswaths: Sequence[SubSwathGeometry],
    target: TargetGeometry,
    grid_width: int = DEFAULT_TIE_POINT_GRID_WIDTH,
    grid_height: int = DEFAULT_TIE_POINT_GRID_HEIGHT,
) -> GeolocationGrid:
    """Build the merged raster's sparse geolocation grid.

    Parameters
    ----------
    subswaths : Sequence[SubSwathGeometry]
        Subswaths in increasing slant-range order.
    target : TargetGeometry
        Merged raster sampling.
    grid_width : int
        Control points per grid row.
    grid_height : int
        Grid rows.

    Returns
    -------
    GeolocationGrid

    Raises
    ------
    ValidationError
        If the grid is denser than the raster.
    GeometryError
        If a control point falls outside every subswath or outside the
        owning subswath's tie-point grid.
    """
    if grid_width < 1 or grid_height < 1:
        raise ValidationError(
            f"Grid dimensions must be positive, got "
            f"{grid_width}x{grid_height}"
        )
    sub_x = target.width // grid_width
    sub_y = target.height // grid_height
    if sub_x < 1 or sub_y < 1:
        raise ValidationError(
            f"A {grid_width}x{grid_height} grid is denser than the "
            f"{target.width}x{target.height} target raster"
        )

    shape = (grid_height, grid_width)
    lat = np.empty(shape, dtype=np.float32)
    lon = np.empty(shape, dtype=np.float32)
    slrt = np.empty(shape, dtype=np.float32)
    inc = np.empty(shape, dtype=np.float32)

    for i in range(grid_height):
        az_time = target.line_time(i * sub_y)
        for j in range(grid_width):
            slr_time = target.slant_range_time(j * sub_x)
            sw = subswaths[owning_subswath(slr_time, subswaths)]
            sample = interpolate_geolocation(az_time, slr_time, sw)
            lat[i, j] = sample.latitude
            lon[i, j] = sample.longitude
            # one-way seconds -> two-way nanoseconds
            slrt[i, j] = sample.slant_range_time * 2.0 * ONE_BILLION
            inc[i, j] = sample.incidence_angle

    return GeolocationGrid(
        latitude=lat,
        longitude=lon,
        slant_range_time_ns=slrt,
        incidence_angle=inc,
        sub_sampling_x=sub_x,
        sub_sampling_y=sub_y,
    )
