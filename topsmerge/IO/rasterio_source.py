# -*- coding: utf-8 -*-
"""
Rasterio Tile Source - Windowed reads from subswath measurement rasters.

Serves merge-engine tiles from GeoTIFF (or any GDAL-readable) rasters
through rasterio windows.  Sentinel-1 SLC measurement files hold one
complex CInt16 band per subswath and polarization; register the same
file under both the ``i_<swath>_<pol>`` and ``q_<swath>_<pol>`` names
and the complex samples are split into the in-phase/quadrature pair.
Separate single-band i and q files work as well.

A dataset is opened for the duration of each read, so one source can
be shared by concurrent tile workers.

Dependencies
------------
rasterio

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
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple, Union

# Third-party
import numpy as np

try:
    import rasterio
    from rasterio.windows import Window
    _HAS_RASTERIO = True
except ImportError:
    _HAS_RASTERIO = False

# TOPSMerge internal
from topsmerge.exceptions import (
    DependencyError,
    MissingBandError,
    ValidationError,
)
from topsmerge.IO.bands import BandIdentity, source_band_names
from topsmerge.IO.base import ChipRegion, TileSource
from topsmerge.vocabulary import BandKind

logger = logging.getLogger(__name__)


def _to_iq_pair(data: np.ndarray) -> np.ndarray:
    """Convert raw complex raster data to an int16 ``(2, rows, cols)`` pair.

    Handles the rasterio representations of CInt16 data:

    1. Complex dtype (CInt16 read natively, CFloat32/64) -> split.
    2. Structured dtype with ``'real'``/``'imag'`` fields -> split.
    3. Two-band integer data (I in band 0, Q in band 1) -> cast.

    Parameters
    ----------
    data : np.ndarray
        Raw pixel data from rasterio.

    Returns
    -------
    np.ndarray
        ``(2, rows, cols)`` int16 array.

    Raises
    ------
    ValidationError
        If the data is a single real-valued band.
    """
    if np.iscomplexobj(data):
        if data.ndim == 3 and data.shape[0] == 1:
            data = data[0]
        return np.stack([data.real, data.imag]).astype(np.int16)
    if data.dtype.names and 'real' in data.dtype.names:
        if data.ndim == 3 and data.shape[0] == 1:
            data = data[0]
        return np.stack([data['real'], data['imag']]).astype(np.int16)
    if data.ndim == 3 and data.shape[0] == 2:
        return data.astype(np.int16)
    raise ValidationError(
        f"Cannot split real-valued data of shape {data.shape} into an "
        f"in-phase/quadrature pair"
    )


class RasterioTileSource(TileSource):
    """Tile source over measurement rasters read with rasterio.

    Parameters
    ----------
    rasters : Mapping[str, str or Path]
        Source band name (``'i_IW1_VV'``, ``'Sigma0_IW2_VH'``) to raster
        path.  Both names of an SLC pair may point to the same complex
        file.
    no_data : Mapping[BandKind, float], optional
        No-data value per band kind.  Kinds not listed use the raster's
        own ``nodata`` tag, or ``0.0`` if it has none.

    Raises
    ------
    DependencyError
        If rasterio is not installed.
    FileNotFoundError
        If a raster path does not exist.
    """

    def __init__(
        self,
        rasters: Mapping[str, Union[str, Path]],
        no_data: Optional[Mapping[BandKind, float]] = None,
    ) -> None:
        if not _HAS_RASTERIO:
            raise DependencyError(
                "Reading measurement rasters requires rasterio. "
                "Install with: pip install topsmerge[rasterio]"
            )

        self._paths: Dict[str, Path] = {}
        self._shapes: Dict[str, Tuple[int, int]] = {}
        self._nodata: Dict[str, Optional[float]] = {}
        for name, path in rasters.items():
            path = Path(path)
            if not path.exists():
                raise FileNotFoundError(f"File not found: {path}")
            with rasterio.open(str(path)) as ds:
                self._shapes[name] = (ds.height, ds.width)
                self._nodata[name] = ds.nodata
            self._paths[name] = path
        self._no_data = dict(no_data or {})
        logger.debug("Registered %d source rasters", len(self._paths))

    def band_names(self) -> List[str]:
        return list(self._paths)

    def no_data_value(self, band: BandIdentity) -> float:
        if band.kind in self._no_data:
            return float(self._no_data[band.kind])
        for name in self._paths:
            if name.startswith(f"{band.kind.value}_") and \
                    name.endswith(f"_{band.polarization}"):
                tag = self._nodata[name]
                if tag is not None:
                    return float(tag)
        return 0.0

    def _read(self, name: str, region: ChipRegion) -> np.ndarray:
        shape = self._shapes[name]
        if region.row_start < 0 or region.col_start < 0:
            raise ValidationError(
                f"{name}: start indices must be non-negative, got {region}"
            )
        if region.row_end > shape[0] or region.col_end > shape[1]:
            raise ValidationError(
                f"{name}: end indices ({region.row_end}, "
                f"{region.col_end}) exceed raster dimensions {shape}"
            )
        window = Window(region.col_start, region.row_start,
                        region.width, region.height)
        with rasterio.open(str(self._paths[name])) as ds:
            return ds.read(window=window)

    def fetch_tile(
        self,
        subswath: str,
        band: BandIdentity,
        region: ChipRegion,
    ) -> np.ndarray:
        names = source_band_names(band, subswath)
        missing = [n for n in names if n not in self._paths]
        if missing:
            raise MissingBandError(
                f"Subswath {subswath} has no raster for band(s) {missing}"
            )

        if band.kind is not BandKind.SLC:
            return self._read(names[0], region)[0].astype(np.float32)

        i_name, q_name = names
        if self._paths[i_name] == self._paths[q_name]:
            return _to_iq_pair(self._read(i_name, region))
        i_plane = self._read(i_name, region)[0]
        q_plane = self._read(q_name, region)[0]
        return np.stack([i_plane, q_plane]).astype(np.int16)
