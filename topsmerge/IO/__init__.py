# -*- coding: utf-8 -*-
"""
IO Module - Band naming, tile sources and typed product metadata.

Provides the ``TileSource`` interface the merge engine reads through,
an in-memory implementation, a rasterio-backed implementation for
measurement rasters, and the band naming rules used at the storage
boundary.

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

from topsmerge.IO.bands import (
    BandIdentity,
    calibration_kinds_present,
    parse_source_band_name,
    polarizations_present,
    select_output_bands,
    source_band_names,
    target_band_names,
)
from topsmerge.IO.base import (
    ArrayTileSource,
    ChipRegion,
    TileSource,
    tile_dtype,
    tile_shape,
)
from topsmerge.IO.rasterio_source import RasterioTileSource

__all__ = [
    'ArrayTileSource',
    'BandIdentity',
    'ChipRegion',
    'RasterioTileSource',
    'TileSource',
    'calibration_kinds_present',
    'parse_source_band_name',
    'polarizations_present',
    'select_output_bands',
    'source_band_names',
    'target_band_names',
    'tile_dtype',
    'tile_shape',
]
