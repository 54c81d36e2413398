# -*- coding: utf-8 -*-
"""
Merge Module - Deburst and merge TOPSAR subswaths into one raster.

Key Classes
-----------
- MergeConfig: Engine parameters
- TopsMergeEngine: Computes any tile of the merged raster

Usage
-----
    >>> from topsmerge.merge import TopsMergeEngine, merge_band
    >>> engine = TopsMergeEngine(subswaths, tile_source)
    >>> merged = merge_band(engine, engine.output_bands()[0])

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

from topsmerge.merge.config import MergeConfig
from topsmerge.merge.engine import TopsMergeEngine
from topsmerge.merge.tiling import merge_band, tile_regions

__all__ = [
    'MergeConfig',
    'TopsMergeEngine',
    'merge_band',
    'tile_regions',
]
