# -*- coding: utf-8 -*-
"""
IO Base Classes - Tile-source interface and in-memory implementation.

The merge engine never opens files itself.  It asks a ``TileSource`` for
rectangular windows of one subswath band at a time, so any storage
backend (measurement GeoTIFFs, an in-memory cache, a remote store) can
feed it.  ``ArrayTileSource`` serves windows from numpy arrays already in
memory and is what the test suite uses.

Tile layout
-----------
- SLC bands: ``(2, rows, cols)`` int16, in-phase first, quadrature second.
- Calibrated bands: ``(rows, cols)`` float32.

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
from typing import Dict, List, Mapping, NamedTuple, Optional, Tuple

# Third-party
import numpy as np

# TOPSMerge internal
from topsmerge.exceptions import MissingBandError, ValidationError
from topsmerge.IO.bands import (
    BandIdentity,
    polarizations_present,
    source_band_names,
)
from topsmerge.vocabulary import BandKind


class ChipRegion(NamedTuple):
    """Rectangular region of a raster, in pixel bounds.

    Use directly for numpy slicing::

        chip = image[region.row_start:region.row_end,
                     region.col_start:region.col_end]

    Attributes
    ----------
    row_start : int
        First row (inclusive).
    col_start : int
        First column (inclusive).
    row_end : int
        Last row (exclusive).
    col_end : int
        Last column (exclusive).
    """

    row_start: int
    col_start: int
    row_end: int
    col_end: int

    @property
    def height(self) -> int:
        """Rows in the region."""
        return self.row_end - self.row_start

    @property
    def width(self) -> int:
        """Columns in the region."""
        return self.col_end - self.col_start

    @property
    def shape(self) -> Tuple[int, int]:
        """``(height, width)``."""
        return (self.height, self.width)


def tile_shape(band: BandIdentity, rows: int, cols: int) -> Tuple[int, ...]:
    """Array shape of a tile of ``band`` with the given extent."""
    if band.kind is BandKind.SLC:
        return (2, rows, cols)
    return (rows, cols)


def tile_dtype(band: BandIdentity) -> np.dtype:
    """Array dtype of a tile of ``band``."""
    return np.dtype(np.int16 if band.kind is BandKind.SLC else np.float32)


class TileSource(ABC):
    """Abstract random-access provider of subswath band windows.

    Implementations must be safe to call from several threads at once;
    the merge engine fetches the tiles of different output regions
    concurrently.
    """

    @abstractmethod
    def band_names(self) -> List[str]:
        """All source band names, e.g. ``['i_IW1_VV', 'q_IW1_VV', ...]``.

        Returns
        -------
        List[str]
        """
        pass

    @abstractmethod
    def fetch_tile(
        self,
        subswath: str,
        band: BandIdentity,
        region: ChipRegion,
    ) -> np.ndarray:
        """Read a window of one band of one subswath.

        Parameters
        ----------
        subswath : str
            Subswath name (``'IW1'``).
        band : BandIdentity
            Band to read.
        region : ChipRegion
            Window in subswath raster coordinates.

        Returns
        -------
        np.ndarray
            ``(2, rows, cols)`` int16 for SLC, ``(rows, cols)`` float32
            otherwise.

        Raises
        ------
        MissingBandError
            If the subswath does not carry ``band``.
        ValidationError
            If the window exceeds the raster.
        """
        pass

    def has_band(self, subswath: str, band: BandIdentity) -> bool:
        """Whether every storage band of ``band`` exists for ``subswath``."""
        names = set(self.band_names())
        return all(name in names
                   for name in source_band_names(band, subswath))

    def no_data_value(self, band: BandIdentity) -> float:
        """No-data value of ``band``.  Defaults to ``0.0``."""
        return 0.0

    def polarizations(self) -> List[str]:
        """Polarizations present in the source, sorted."""
        return polarizations_present(self.band_names())

    def close(self) -> None:
        """Release resources.  Default implementation does nothing."""
        pass

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False


def _check_window(name: str, shape: Tuple[int, int],
                  region: ChipRegion) -> None:
    if region.row_start < 0 or region.col_start < 0:
        raise ValidationError(
            f"{name}: start indices must be non-negative, got {region}"
        )
    if region.row_end > shape[0] or region.col_end > shape[1]:
        raise ValidationError(
            f"{name}: end indices ({region.row_end}, {region.col_end}) "
            f"exceed raster dimensions {shape}"
        )
    if region.height <= 0 or region.width <= 0:
        raise ValidationError(f"{name}: empty window {region}")


class ArrayTileSource(TileSource):
    """Tile source over in-memory 2D arrays keyed by source band name.

    Parameters
    ----------
    arrays : Mapping[str, np.ndarray]
        Source band name (``'i_IW1_VV'``, ``'Sigma0_IW2_VH'``) to 2D
        raster.  The arrays are not copied.
    no_data : Mapping[BandKind, float], optional
        No-data value per band kind.  Unlisted kinds use ``0.0``.

    Raises
    ------
    ValidationError
        If any array is not 2D.

    Examples
    --------
    >>> src = ArrayTileSource({'i_IW1_VV': i1, 'q_IW1_VV': q1})
    >>> src.fetch_tile('IW1', BandIdentity(BandKind.SLC, 'VV'),
    ...                ChipRegion(0, 0, 10, 20)).shape
    (2, 10, 20)
    """

    def __init__(
        self,
        arrays: Mapping[str, np.ndarray],
        no_data: Optional[Mapping[BandKind, float]] = None,
    ) -> None:
        self._arrays: Dict[str, np.ndarray] = {}
        for name, arr in arrays.items():
            arr = np.asarray(arr)
            if arr.ndim != 2:
                raise ValidationError(
                    f"Band {name!r} must be 2D, got shape {arr.shape}"
                )
            self._arrays[name] = arr
        self._no_data = dict(no_data or {})

    def band_names(self) -> List[str]:
        return list(self._arrays)

    def no_data_value(self, band: BandIdentity) -> float:
        return float(self._no_data.get(band.kind, 0.0))

    def fetch_tile(
        self,
        subswath: str,
        band: BandIdentity,
        region: ChipRegion,
    ) -> np.ndarray:
        names = source_band_names(band, subswath)
        missing = [n for n in names if n not in self._arrays]
        if missing:
            raise MissingBandError(
                f"Subswath {subswath} has no band(s) {missing}"
            )

        rows = slice(region.row_start, region.row_end)
        cols = slice(region.col_start, region.col_end)
        planes = []
        for name in names:
            arr = self._arrays[name]
            _check_window(name, arr.shape, region)
            planes.append(arr[rows, cols])

        if band.kind is BandKind.SLC:
            return np.stack(planes).astype(np.int16)
        return planes[0].astype(np.float32)
