# -*- coding: utf-8 -*-
"""
TOPSMerge - Deburst and subswath merge of TOPSAR SLC products.

Computes the debursted, subswath-merged raster of a Sentinel-1 IW/EW
TOPSAR product tile by tile from per-subswath geometry tables and
windowed access to the source bands, together with the merged raster's
geolocation grid.

Dependencies
------------
numpy
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

__version__ = "0.1.0"
__author__ = "Duane Smalley"

from topsmerge.exceptions import (
    DependencyError,
    GeometryError,
    MissingBandError,
    TileComputationError,
    TopsMergeError,
    UnsupportedAcquisitionError,
    ValidationError,
)
from topsmerge.vocabulary import AcquisitionMode, BandKind
from topsmerge.IO import ArrayTileSource, BandIdentity, ChipRegion, TileSource
from topsmerge.geometry import (
    SubSwathGeometry,
    TargetGeometry,
    build_geometry_table,
)
from topsmerge.geolocation import MergedGeolocation
from topsmerge.merge import MergeConfig, TopsMergeEngine, merge_band

__all__ = [
    'AcquisitionMode',
    'ArrayTileSource',
    'BandIdentity',
    'BandKind',
    'ChipRegion',
    'DependencyError',
    'GeometryError',
    'MergeConfig',
    'MergedGeolocation',
    'MissingBandError',
    'SubSwathGeometry',
    'TargetGeometry',
    'TileComputationError',
    'TileSource',
    'TopsMergeEngine',
    'TopsMergeError',
    'UnsupportedAcquisitionError',
    'ValidationError',
    'build_geometry_table',
    'merge_band',
]
