# -*- coding: utf-8 -*-
"""
Geometry Module - Timing, burst and tie-point geometry of TOPSAR products.

Key Modules
-----------
- tables: Immutable per-subswath geometry and derived target geometry
- builder: Typed annotation metadata to geometry tables
- mapper: Target/source coordinate mapping and tie-point cell lookup
- bursts: Output line to burst line resolution
- noise: Range noise interpolation
- tiepoints: Sparse geolocation grid of the merged raster

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

from topsmerge.geometry.tables import (
    NoiseVector,
    SubSwathGeometry,
    TargetExtent,
    TargetGeometry,
    TiePointTable,
    java_round,
    validate_subswath_order,
)
from topsmerge.geometry.mapper import (
    BilinearIndex,
    GeolocationSample,
    bilinear_index,
    interpolate,
    interpolate_geolocation,
    owning_subswath,
    sample_index_in_source,
    subswath_index_for_slant_range,
    subswath_range_bounds,
    target_x_for_source_sample,
)
from topsmerge.geometry.bursts import (
    BurstResolution,
    azimuth_line_range,
    locate_burst_lines,
    resolve_target_line,
    source_line_for_target_line,
)
from topsmerge.geometry.noise import interpolate_noise, subswath_noise
from topsmerge.geometry.tiepoints import (
    GeolocationGrid,
    synthesize_geolocation_grid,
)
from topsmerge.geometry.builder import (
    build_geometry_table,
    build_subswath_geometry,
    iso_to_mjd,
    source_is_calibrated,
    validate_acquisition,
)

__all__ = [
    'BilinearIndex',
    'BurstResolution',
    'GeolocationGrid',
    'GeolocationSample',
    'NoiseVector',
    'SubSwathGeometry',
    'TargetExtent',
    'TargetGeometry',
    'TiePointTable',
    'azimuth_line_range',
    'bilinear_index',
    'build_geometry_table',
    'build_subswath_geometry',
    'interpolate',
    'interpolate_geolocation',
    'interpolate_noise',
    'iso_to_mjd',
    'java_round',
    'locate_burst_lines',
    'owning_subswath',
    'resolve_target_line',
    'sample_index_in_source',
    'source_is_calibrated',
    'source_line_for_target_line',
    'subswath_index_for_slant_range',
    'subswath_noise',
    'subswath_range_bounds',
    'synthesize_geolocation_grid',
    'target_x_for_source_sample',
    'validate_acquisition',
    'validate_subswath_order',
]
