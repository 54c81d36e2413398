# -*- coding: utf-8 -*-
"""
Geolocation Module - Coordinate transformations for the merged raster.

Key Classes
-----------
- Geolocation: Abstract base class for coordinate transformations
- MergedGeolocation: Interpolation over the merged raster's sparse grid

Usage
-----
    >>> grid = engine.synthesize_geolocation_grid()
    >>> extent = engine.target_extent()
    >>> geo = MergedGeolocation(grid, (extent.height, extent.width))
    >>> lat, lon, height = geo.image_to_latlon(100, 2000)

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

from topsmerge.geolocation.base import Geolocation, sample_image_perimeter
from topsmerge.geolocation.merged import MergedGeolocation, corner_coordinates

__all__ = [
    'Geolocation',
    'MergedGeolocation',
    'corner_coordinates',
    'sample_image_perimeter',
]
