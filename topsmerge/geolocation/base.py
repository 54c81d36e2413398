# -*- coding: utf-8 -*-
"""
Geolocation Base Classes - Abstract interface for coordinate transformations.

Defines the abstract base class for transforming between merged-raster
pixel coordinates and geographic coordinates (latitude/longitude).
Subclasses implement two vectorized array methods; the public methods
handle scalar, list and stacked-array dispatch.

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
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple, Union

# Third-party
import numpy as np

# TOPSMerge internal
from topsmerge.exceptions import ValidationError


def _is_scalar(val: Any) -> bool:
    """Check if a value is a scalar (not array-like)."""
    if isinstance(val, np.ndarray):
        return val.ndim == 0
    return isinstance(val, (int, float, np.integer, np.floating))


def _to_array(val: Any) -> np.ndarray:
    """Convert scalar, list, or array to 1D numpy array of float64."""
    arr = np.asarray(val, dtype=np.float64)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    return arr


def sample_image_perimeter(
    shape: Tuple[int, int],
    samples_per_edge: int = 10,
) -> Tuple[np.ndarray, np.ndarray]:
    """Sample points clockwise along the image perimeter.

    Parameters
    ----------
    shape : Tuple[int, int]
        Image shape (rows, cols).
    samples_per_edge : int, default=10
        Number of sample points per edge.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        (rows, cols) arrays of sample coordinates.
    """
    rows, cols = shape
    edge = np.linspace(0.0, 1.0, samples_per_edge)
    all_rows = np.concatenate([
        np.zeros(samples_per_edge),
        edge * (rows - 1),
        np.full(samples_per_edge, rows - 1.0),
        (1.0 - edge) * (rows - 1),
    ])
    all_cols = np.concatenate([
        edge * (cols - 1),
        np.full(samples_per_edge, cols - 1.0),
        (1.0 - edge) * (cols - 1),
        np.zeros(samples_per_edge),
    ])
    return all_rows, all_cols


class Geolocation(ABC):
    """Abstract base class for geolocation transformations.

    ``image_to_latlon`` and ``latlon_to_image`` accept three input forms:

    - **Scalar:** ``geo.image_to_latlon(50, 100)``
    - **Separate arrays:** ``geo.image_to_latlon(rows_array, cols_array)``
    - **Stacked (2, N) array:** ``geo.image_to_latlon(points_2xN)``

    Coordinate Conventions
    ----------------------
    - **Image coordinates:** (row, col) with (0, 0) at top-left corner
    - **Geographic coordinates:** (lat, lon, height) in WGS84

    Parameters
    ----------
    shape : Tuple[int, int]
        Image shape (rows, cols).
    crs : str, default='WGS84'
        Coordinate reference system.
    """

    def __init__(self, shape: Tuple[int, int], crs: str = 'WGS84') -> None:
        self.shape = shape
        self.crs = crs

    @abstractmethod
    def _image_to_latlon_array(
        self,
        rows: np.ndarray,
        cols: np.ndarray,
        height: float = 0.0
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Transform 1D pixel arrays to (lats, lons, heights) arrays."""
        pass

    @abstractmethod
    def _latlon_to_image_array(
        self,
        lats: np.ndarray,
        lons: np.ndarray,
        height: Union[float, np.ndarray] = 0.0
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Transform 1D geographic arrays to (rows, cols) arrays."""
        pass

    def image_to_latlon(
        self,
        row_or_points: Union[float, list, np.ndarray],
        col: Optional[Union[float, list, np.ndarray]] = None,
        height: float = 0.0
    ) -> Union[Tuple[float, float, float],
               Tuple[np.ndarray, np.ndarray, np.ndarray],
               np.ndarray]:
        """Transform image coordinates to geographic coordinates.

        Parameters
        ----------
        row_or_points : float, list, np.ndarray
            Row coordinate(s) when ``col`` is provided, or a ``(2, N)``
            ndarray of stacked ``[rows; cols]`` when ``col`` is None.
        col : float, list, or np.ndarray, optional
            Column coordinate(s).
        height : float, default=0.0
            Height above WGS84 ellipsoid (meters).

        Returns
        -------
        Tuple[float, float, float]
            ``(lat, lon, height)`` when scalar inputs are given.
        Tuple[np.ndarray, np.ndarray, np.ndarray]
            ``(lats, lons, heights)`` when separate inputs are given.
        np.ndarray
            Shape ``(3, N)`` when a ``(2, N)`` stacked array is given.

        Raises
        ------
        ValidationError
            If a stacked input does not have shape ``(2, N)``.
        """
        if col is None:
            pts = np.asarray(row_or_points, dtype=np.float64)
            if pts.ndim != 2 or pts.shape[0] != 2:
                raise ValidationError(
                    f"Expected (2, N) array, got shape {pts.shape}"
                )
            lats, lons, heights = self._image_to_latlon_array(
                pts[0], pts[1], height
            )
            return np.vstack([lats, lons, heights])
        elif _is_scalar(row_or_points) and _is_scalar(col):
            lats, lons, heights = self._image_to_latlon_array(
                _to_array(row_or_points), _to_array(col), height
            )
            return (float(lats[0]), float(lons[0]), float(heights[0]))
        else:
            return self._image_to_latlon_array(
                _to_array(row_or_points), _to_array(col), height
            )

    def latlon_to_image(
        self,
        lat_or_points: Union[float, list, np.ndarray],
        lon: Optional[Union[float, list, np.ndarray]] = None,
        height: Union[float, np.ndarray] = 0.0
    ) -> Union[Tuple[float, float], Tuple[np.ndarray, np.ndarray], np.ndarray]:
        """Transform geographic coordinates to image coordinates.

        Accepts the same three input forms as :meth:`image_to_latlon`;
        a stacked input is ``[lats; lons]`` and returns ``(2, N)``.

        Raises
        ------
        ValidationError
            If a stacked input does not have shape ``(2, N)``.
        """
        if lon is None:
            pts = np.asarray(lat_or_points, dtype=np.float64)
            if pts.ndim != 2 or pts.shape[0] != 2:
                raise ValidationError(
                    f"Expected (2, N) array, got shape {pts.shape}"
                )
            rows, cols = self._latlon_to_image_array(pts[0], pts[1], height)
            return np.vstack([rows, cols])
        elif _is_scalar(lat_or_points) and _is_scalar(lon):
            rows, cols = self._latlon_to_image_array(
                _to_array(lat_or_points), _to_array(lon), height
            )
            return (float(rows[0]), float(cols[0]))
        else:
            return self._latlon_to_image_array(
                _to_array(lat_or_points), _to_array(lon), height
            )

    def get_footprint(self) -> Dict[str, Any]:
        """Image footprint as a geographic polygon and bounding box.

        Returns
        -------
        Dict[str, Any]
            Dictionary with keys:
            - 'type': 'Polygon' or 'None'
            - 'coordinates': List of (lon, lat) tuples along the perimeter
            - 'bounds': (min_lon, min_lat, max_lon, max_lat)
        """
        sample_rows, sample_cols = sample_image_perimeter(
            self.shape, samples_per_edge=10
        )
        lats, lons, _ = self.image_to_latlon(sample_rows, sample_cols)

        valid = ~(np.isnan(lats) | np.isnan(lons))
        if not np.any(valid):
            return {'type': 'None', 'coordinates': None, 'bounds': None}

        valid_lats = lats[valid]
        valid_lons = lons[valid]
        return {
            'type': 'Polygon',
            'coordinates': list(zip(valid_lons.tolist(),
                                    valid_lats.tolist())),
            'bounds': (float(np.min(valid_lons)), float(np.min(valid_lats)),
                       float(np.max(valid_lons)), float(np.max(valid_lats))),
        }
