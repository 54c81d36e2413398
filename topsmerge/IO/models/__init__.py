# -*- coding: utf-8 -*-
"""
IO Models - Typed metadata containers consumed by the geometry builder.

Re-exports the Sentinel-1 subswath metadata classes:

    from topsmerge.IO.models import Sentinel1SLCMetadata, S1SLCBurst

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

from topsmerge.IO.models.sentinel1_slc import (
    Sentinel1SLCMetadata,
    S1SLCProductInfo,
    S1SLCSwathInfo,
    S1SLCBurst,
    S1SLCGeoGridPoint,
    S1SLCNoiseRangeVector,
)

__all__ = [
    'Sentinel1SLCMetadata',
    'S1SLCProductInfo',
    'S1SLCSwathInfo',
    'S1SLCBurst',
    'S1SLCGeoGridPoint',
    'S1SLCNoiseRangeVector',
]
