# -*- coding: utf-8 -*-
"""
Sentinel-1 SLC Metadata - Typed annotation metadata of one TOPSAR subswath.

Nested dataclasses holding the subset of the Sentinel-1 SLC annotation
that the deburst/merge engine consumes: product identity, swath timing
and range sampling, the burst list, the geolocation grid and the range
noise vectors.  One ``Sentinel1SLCMetadata`` instance describes one
subswath+polarization; a metadata-parsing collaborator fills them in,
and :mod:`topsmerge.geometry.builder` turns them into geometry tables.

Times are kept as the ISO 8601 UTC strings found in the annotation and
slant-range times as the annotated two-way values.

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
from dataclasses import dataclass
from typing import List, Optional

# Third-party
import numpy as np


# ===================================================================
# Product-level info (from adsHeader)
# ===================================================================

@dataclass
class S1SLCProductInfo:
    """Sentinel-1 SLC product-level metadata.

    Parameters
    ----------
    mission : str, optional
        Mission identifier (``'S1A'``, ``'S1B'``, ``'S1C'``).
    mode : str, optional
        Acquisition mode (``'IW'``, ``'EW'``, ``'SM'``).
    product_type : str, optional
        Product type (``'SLC'``).
    calibrated : bool
        True when the bands have already been radiometrically
        calibrated to Sigma0/Beta0/Gamma0/DN intensities.
    """

    mission: Optional[str] = None
    mode: Optional[str] = None
    product_type: Optional[str] = None
    calibrated: bool = False


# ===================================================================
# Swath-level info (from imageAnnotation/imageInformation)
# ===================================================================

@dataclass
class S1SLCSwathInfo:
    """Per-swath / per-polarization image parameters.

    Parameters
    ----------
    swath : str, optional
        Swath identifier (``'IW1'``, ``'IW2'``, ``'IW3'``).
    polarization : str, optional
        Polarization channel (``'VV'``, ``'VH'``, ``'HH'``, ``'HV'``).
    lines : int
        Total lines in the measurement raster.
    samples : int
        Samples per line.
    first_line_time : str, optional
        ``productFirstLineUtcTime`` (ISO 8601 UTC).
    last_line_time : str, optional
        ``productLastLineUtcTime`` (ISO 8601 UTC).
    range_pixel_spacing : float, optional
        Slant-range pixel spacing in meters.
    azimuth_time_interval : float, optional
        Line-to-line time interval in seconds.
    slant_range_time : float, optional
        Two-way slant-range time to first pixel in seconds.
    """

    swath: Optional[str] = None
    polarization: Optional[str] = None
    lines: int = 0
    samples: int = 0
    first_line_time: Optional[str] = None
    last_line_time: Optional[str] = None
    range_pixel_spacing: Optional[float] = None
    azimuth_time_interval: Optional[float] = None
    slant_range_time: Optional[float] = None


# ===================================================================
# Burst descriptor (from swathTiming/burstList)
# ===================================================================

@dataclass
class S1SLCBurst:
    """Metadata for a single TOPS burst.

    Parameters
    ----------
    index : int
        Zero-based burst index.
    azimuth_time : str, optional
        Burst first-line azimuth time (ISO 8601 UTC).
    first_valid_sample : np.ndarray, optional
        Per-line first valid sample index. Shape ``(lines_per_burst,)``.
        Value of ``-1`` means the entire line is invalid.
    last_valid_sample : np.ndarray, optional
        Per-line last valid sample index. Shape ``(lines_per_burst,)``.
    """

    index: int = 0
    azimuth_time: Optional[str] = None
    first_valid_sample: Optional[np.ndarray] = None
    last_valid_sample: Optional[np.ndarray] = None


# ===================================================================
# Geolocation grid (from geolocationGrid)
# ===================================================================

@dataclass
class S1SLCGeoGridPoint:
    """Single point from the annotation geolocation grid.

    Parameters
    ----------
    azimuth_time : str, optional
        Azimuth time of the point (ISO 8601 UTC).
    slant_range_time : float
        Two-way slant-range time of the point in seconds.
    line : float
        Azimuth line coordinate.
    latitude : float
        WGS-84 latitude in degrees.
    longitude : float
        WGS-84 longitude in degrees.
    incidence_angle : float, optional
        Incidence angle in degrees.
    """

    azimuth_time: Optional[str] = None
    slant_range_time: float = 0.0
    line: float = 0.0
    latitude: float = 0.0
    longitude: float = 0.0
    incidence_angle: Optional[float] = None


# ===================================================================
# Noise vectors (from noise XML)
# ===================================================================

@dataclass
class S1SLCNoiseRangeVector:
    """Thermal noise estimate in the range direction.

    Parameters
    ----------
    azimuth_time : str, optional
        Reference azimuth time (ISO 8601 UTC).
    line : int
        Image line corresponding to this vector.
    pixel : np.ndarray, optional
        Range pixel indices.
    noise_range_lut : np.ndarray, optional
        Noise power LUT values (linear scale).
    """

    azimuth_time: Optional[str] = None
    line: int = 0
    pixel: Optional[np.ndarray] = None
    noise_range_lut: Optional[np.ndarray] = None


# ===================================================================
# Top-level metadata
# ===================================================================

@dataclass
class Sentinel1SLCMetadata:
    """Annotation metadata of one Sentinel-1 subswath+polarization.

    Parameters
    ----------
    rows : int
        Lines in the measurement raster.
    cols : int
        Samples per line.
    product_info : S1SLCProductInfo, optional
        Product-level metadata (mission, mode, product type).
    swath_info : S1SLCSwathInfo, optional
        Swath timing and range sampling.
    bursts : List[S1SLCBurst], optional
        Per-burst timing and valid-sample descriptors.
    geolocation_grid : List[S1SLCGeoGridPoint], optional
        Geolocation tie points in annotation order (row-major by line).
    noise_range_vectors : List[S1SLCNoiseRangeVector], optional
        Range thermal noise vectors.
    lines_per_burst : int
        Lines per burst (constant within a swath).
    samples_per_burst : int
        Samples per burst (constant within a swath).

    Examples
    --------
    >>> meta = Sentinel1SLCMetadata(rows=13500, cols=21000, ...)
    >>> meta.num_bursts
    9
    """

    rows: int = 0
    cols: int = 0
    product_info: Optional[S1SLCProductInfo] = None
    swath_info: Optional[S1SLCSwathInfo] = None
    bursts: Optional[List[S1SLCBurst]] = None
    geolocation_grid: Optional[List[S1SLCGeoGridPoint]] = None
    noise_range_vectors: Optional[List[S1SLCNoiseRangeVector]] = None
    lines_per_burst: int = 0
    samples_per_burst: int = 0

    @property
    def num_bursts(self) -> int:
        """Number of bursts in this swath."""
        return len(self.bursts) if self.bursts else 0
