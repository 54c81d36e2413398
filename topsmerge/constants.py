# -*- coding: utf-8 -*-
"""
Constants - Physical and timing constants used by the merge engine.

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

#: Speed of light in vacuum (m/s).
SPEED_OF_LIGHT = 299792458.0

#: Seconds per day; azimuth times are carried in fractional days.
SECONDS_IN_DAY = 86400.0

#: Seconds to nanoseconds.
ONE_BILLION = 1.0e9

#: Reference epoch of the fractional-day (MJD2000) time scale.
MJD2000_EPOCH = '2000-01-01T00:00:00'

#: Squared-amplitude threshold below which an SLC sample in a subswath
#: overlap is treated as a degenerate edge artifact.
DEFAULT_SLC_INTENSITY_THRESHOLD = 300.0

#: Default control-point counts of the merged geolocation grid.
DEFAULT_TIE_POINT_GRID_WIDTH = 20
DEFAULT_TIE_POINT_GRID_HEIGHT = 5

#: Default output tile size as (rows, cols).
DEFAULT_TILE_SIZE = (50, 500)
