# -*- coding: utf-8 -*-
"""
Merged-Raster Geolocation - Pixel/geographic transforms over the merged grid.

Interpolates the sparse ``GeolocationGrid`` synthesized for the merged
raster to arbitrary pixel positions.  The forward transform is bilinear
inside the grid and extrapolates linearly from the edge cells beyond the
last control row/column, which is how the raster's far and last corners
(at column ``width`` and row ``height``) are evaluated.  The inverse
transform triangulates the control points.

Dependencies
------------
scipy

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
from typing import Dict, Tuple, Union

# Third-party
import numpy as np

try:
    from scipy.interpolate import (
        LinearNDInterpolator,
        RegularGridInterpolator,
    )
    _HAS_SCIPY = True
except ImportError:
    _HAS_SCIPY = False

# TOPSMerge internal
from topsmerge.exceptions import DependencyError, ValidationError
from topsmerge.geolocation.base import Geolocation
from topsmerge.geometry.tiepoints import GeolocationGrid


class MergedGeolocation(Geolocation):
    """Geolocation of the merged raster from its sparse tie-point grid.

    Parameters
    ----------
    grid : GeolocationGrid
        Sparse grid from ``synthesize_geolocation_grid``.
    shape : Tuple[int, int]
        Merged raster shape (rows, cols).

    Raises
    ------
    DependencyError
        If scipy is not installed.
    ValidationError
        If the grid has fewer than two control points along either axis.

    Examples
    --------
    >>> grid = engine.synthesize_geolocation_grid()
    >>> extent = engine.target_extent()
    >>> geo = MergedGeolocation(grid, (extent.height, extent.width))
    >>> lat, lon, h = geo.image_to_latlon(100, 2000)
    """

    def __init__(
        self,
        grid: GeolocationGrid,
        shape: Tuple[int, int],
    ) -> None:
        if not _HAS_SCIPY:
            raise DependencyError(
                "Merged-raster geolocation requires scipy. "
                "Install with: pip install scipy"
            )
        if grid.shape[0] < 2 or grid.shape[1] < 2:
            raise ValidationError(
                f"Geolocation grid must be at least 2x2 for "
                f"interpolation, got {grid.shape}"
            )
        self._grid = grid
        rows = grid.control_rows()
        cols = grid.control_cols()

        # Forward: (row, col) -> field, linear extrapolation outside
        def forward(values: np.ndarray) -> RegularGridInterpolator:
            return RegularGridInterpolator(
                (rows, cols), values.astype(np.float64),
                method='linear', bounds_error=False, fill_value=None,
            )

        self._lat_interp = forward(grid.latitude)
        self._lon_interp = forward(grid.longitude)
        self._slrt_interp = forward(grid.slant_range_time_ns)
        self._inc_interp = forward(grid.incidence_angle)

        # Inverse: (lat, lon) -> (row, col)
        flat_rows = np.repeat(rows, grid.shape[1])
        flat_cols = np.tile(cols, grid.shape[0])
        geo_points = np.column_stack([
            grid.latitude.ravel().astype(np.float64),
            grid.longitude.ravel().astype(np.float64),
        ])
        self._row_interp = LinearNDInterpolator(
            geo_points, flat_rows, fill_value=np.nan,
        )
        self._col_interp = LinearNDInterpolator(
            geo_points, flat_cols, fill_value=np.nan,
        )

        super().__init__(shape, crs='WGS84')

    @property
    def grid(self) -> GeolocationGrid:
        """The sparse grid being interpolated."""
        return self._grid

    def _image_to_latlon_array(
        self,
        rows: np.ndarray,
        cols: np.ndarray,
        height: float = 0.0,
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        query = np.column_stack([rows, cols])
        lats = self._lat_interp(query)
        lons = self._lon_interp(query)
        return lats, lons, np.full_like(lats, height)

    def _latlon_to_image_array(
        self,
        lats: np.ndarray,
        lons: np.ndarray,
        height: Union[float, np.ndarray] = 0.0,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Pixel coordinates; NaN outside the grid's convex hull."""
        query = np.column_stack([lats, lons])
        return self._row_interp(query), self._col_interp(query)

    def slant_range_time_ns(self, rows, cols) -> np.ndarray:
        """Two-way slant-range time (ns) at pixel position(s)."""
        query = np.column_stack([np.ravel(rows), np.ravel(cols)])
        return self._slrt_interp(query)

    def incidence_angle(self, rows, cols) -> np.ndarray:
        """Incidence angle (degrees) at pixel position(s)."""
        query = np.column_stack([np.ravel(rows), np.ravel(cols)])
        return self._inc_interp(query)


def corner_coordinates(
    grid: GeolocationGrid,
    width: int,
    height: int,
) -> Dict[str, float]:
    """Latitude and longitude at the four corners of the merged raster.

    Corners are evaluated at columns ``0`` / ``width`` and rows ``0`` /
    ``height``.

    Parameters
    ----------
    grid : GeolocationGrid
        Sparse grid of the merged raster.
    width : int
        Merged raster width.
    height : int
        Merged raster height.

    Returns
    -------
    Dict[str, float]
        ``first_near_lat``, ``first_near_long``, ``first_far_lat``,
        ``first_far_long``, ``last_near_lat``, ``last_near_long``,
        ``last_far_lat``, ``last_far_long``.
    """
    geo = MergedGeolocation(grid, (height, width))
    rows = np.array([0.0, 0.0, height, height])
    cols = np.array([0.0, width, 0.0, width])
    lats, lons, _ = geo.image_to_latlon(rows, cols)

    corners = {}
    for k, name in enumerate(('first_near', 'first_far',
                              'last_near', 'last_far')):
        corners[f"{name}_lat"] = float(lats[k])
        corners[f"{name}_long"] = float(lons[k])
    return corners
