# -*- coding: utf-8 -*-
"""
Geometry Builder - Turn typed subswath metadata into geometry tables.

Converts per-subswath ``Sentinel1SLCMetadata`` (as filled in by an
annotation parser) into the immutable ``SubSwathGeometry`` tables the
merge engine consumes, after checking that the acquisition is a
Sentinel-1 TOPSAR SLC product with the right number of subswaths.

Conversions
-----------
- ISO 8601 UTC times -> fractional days since 2000-01-01 (MJD2000).
- Azimuth time interval in seconds -> fractional days.
- Two-way slant-range times -> one-way.
- Row-major geolocation grid points -> ``TiePointTable``.
- Range noise vectors -> ``NoiseVector`` tuples keyed by polarization.

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
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence, Tuple

# Third-party
import numpy as np

# TOPSMerge internal
from topsmerge.constants import MJD2000_EPOCH, SECONDS_IN_DAY, SPEED_OF_LIGHT
from topsmerge.exceptions import UnsupportedAcquisitionError, ValidationError
from topsmerge.geometry.tables import (
    NoiseVector,
    SubSwathGeometry,
    TiePointTable,
)
from topsmerge.IO.models import (
    S1SLCGeoGridPoint,
    S1SLCProductInfo,
    Sentinel1SLCMetadata,
)
from topsmerge.vocabulary import AcquisitionMode

logger = logging.getLogger(__name__)

_MISSIONS = ('S1A', 'S1B', 'S1C', 'S1D')
_EPOCH = np.datetime64(MJD2000_EPOCH, 'us')


def iso_to_mjd(timestamp: str) -> float:
    """Convert an ISO 8601 UTC timestamp to fractional days since 2000.

    Parameters
    ----------
    timestamp : str
        e.g. ``'2021-03-14T05:12:45.123456'``.  A trailing ``'Z'`` is
        accepted.

    Returns
    -------
    float
        Days since 2000-01-01T00:00:00 UTC.

    Raises
    ------
    ValidationError
        If the string cannot be parsed.
    """
    if timestamp is None:
        raise ValidationError("Missing timestamp")
    text = timestamp.strip()
    if text.endswith('Z'):
        text = text[:-1]
    try:
        when = np.datetime64(text, 'us')
    except ValueError as e:
        raise ValidationError(f"Cannot parse time {timestamp!r}") from e
    return float((when - _EPOCH) / np.timedelta64(1, 'D'))


def validate_acquisition(
    product_info: Optional[S1SLCProductInfo],
    num_subswaths: int,
) -> AcquisitionMode:
    """Check that the product is a Sentinel-1 TOPSAR SLC acquisition.

    Parameters
    ----------
    product_info : S1SLCProductInfo
        Product-level metadata.
    num_subswaths : int
        Number of subswaths supplied for merging.

    Returns
    -------
    AcquisitionMode

    Raises
    ------
    UnsupportedAcquisitionError
        If the mission is not Sentinel-1, the product is not an SLC, the
        mode is not IW or EW, or the subswath count does not match the
        mode.
    """
    if product_info is None:
        raise UnsupportedAcquisitionError("Product information is missing")

    mission = (product_info.mission or '').upper()
    if not (mission in _MISSIONS or mission.startswith('SENTINEL-1')):
        raise UnsupportedAcquisitionError(
            f"Source product must be Sentinel-1, got mission {mission!r}"
        )

    product_type = (product_info.product_type or '').upper()
    if product_type != 'SLC':
        raise UnsupportedAcquisitionError(
            f"Source product must be SLC, got {product_type!r}"
        )

    try:
        mode = AcquisitionMode((product_info.mode or '').upper())
    except ValueError:
        raise UnsupportedAcquisitionError(
            f"Source product must be an IW or EW product, got mode "
            f"{product_info.mode!r}"
        ) from None

    if num_subswaths != mode.num_subswaths:
        raise UnsupportedAcquisitionError(
            f"{mode.value} products have {mode.num_subswaths} subswaths, "
            f"got {num_subswaths}"
        )
    return mode


def source_is_calibrated(
    metadata_list: Sequence[Sentinel1SLCMetadata],
) -> bool:
    """Calibrated flag shared by every entry's product information.

    Raises
    ------
    ValidationError
        If the entries disagree.
    """
    flags = {bool(meta.product_info.calibrated)
             for meta in metadata_list if meta.product_info is not None}
    if len(flags) > 1:
        raise ValidationError(
            "Subswath metadata disagree on whether the product is calibrated"
        )
    return flags.pop() if flags else False


def _tie_point_table(points: Sequence[S1SLCGeoGridPoint]) -> TiePointTable:
    """Reshape row-major grid points; a row is the points sharing a line."""
    if not points:
        raise ValidationError("Geolocation grid is empty")
    first_line = points[0].line
    per_line = sum(1 for p in points if p.line == first_line)
    if len(points) % per_line:
        raise ValidationError(
            f"Geolocation grid of {len(points)} points is not a whole "
            f"number of {per_line}-point rows"
        )
    shape = (len(points) // per_line, per_line)

    def field(getter):
        return np.array([getter(p) for p in points],
                        dtype=np.float64).reshape(shape)

    return TiePointTable(
        azimuth_time=field(lambda p: iso_to_mjd(p.azimuth_time)),
        slant_range_time=field(lambda p: p.slant_range_time / 2.0),
        latitude=field(lambda p: p.latitude),
        longitude=field(lambda p: p.longitude),
        incidence_angle=field(
            lambda p: np.nan if p.incidence_angle is None
            else p.incidence_angle
        ),
    )


def _noise_vectors(metadata: Sentinel1SLCMetadata) -> Tuple[NoiseVector, ...]:
    vectors = []
    for vec in metadata.noise_range_vectors or []:
        if vec.pixel is None or vec.noise_range_lut is None:
            continue
        vectors.append(NoiseVector(
            time=iso_to_mjd(vec.azimuth_time),
            line=int(vec.line),
            pixels=vec.pixel,
            values=vec.noise_range_lut,
        ))
    vectors.sort(key=lambda v: v.line)
    return tuple(vectors)


def build_subswath_geometry(
    metadata: Sentinel1SLCMetadata,
    index: int,
    extra_noise: Optional[Dict[str, Tuple[NoiseVector, ...]]] = None,
) -> SubSwathGeometry:
    """Build the geometry table of one subswath.

    Parameters
    ----------
    metadata : Sentinel1SLCMetadata
        Annotation metadata of the subswath.
    index : int
        Zero-based position in increasing slant-range order.
    extra_noise : Dict[str, tuple of NoiseVector], optional
        Noise vectors of further polarizations of the same subswath.

    Returns
    -------
    SubSwathGeometry

    Raises
    ------
    ValidationError
        If required metadata is missing or inconsistent.
    """
    swath = metadata.swath_info
    if swath is None:
        raise ValidationError("Swath information is missing")
    for name in ('first_line_time', 'last_line_time', 'range_pixel_spacing',
                 'azimuth_time_interval', 'slant_range_time'):
        if getattr(swath, name) is None:
            raise ValidationError(f"{swath.swath}: {name} is missing")
    if not metadata.bursts:
        raise ValidationError(f"{swath.swath}: burst list is empty")

    num_lines = swath.lines or metadata.rows
    num_samples = swath.samples or metadata.cols
    slr_first = swath.slant_range_time / 2.0
    slr_last = (slr_first
                + (num_samples - 1) * swath.range_pixel_spacing
                / SPEED_OF_LIGHT)

    bursts = sorted(metadata.bursts, key=lambda b: b.index)
    first_valid = None
    last_valid = None
    if all(b.first_valid_sample is not None for b in bursts):
        first_valid = tuple(b.first_valid_sample for b in bursts)
    if all(b.last_valid_sample is not None for b in bursts):
        last_valid = tuple(b.last_valid_sample for b in bursts)

    noise = {}
    own = _noise_vectors(metadata)
    if own and swath.polarization:
        noise[swath.polarization.upper()] = own
    noise.update(extra_noise or {})

    return SubSwathGeometry(
        name=swath.swath,
        index=index,
        num_lines=num_lines,
        num_samples=num_samples,
        first_line_time=iso_to_mjd(swath.first_line_time),
        last_line_time=iso_to_mjd(swath.last_line_time),
        azimuth_time_interval=swath.azimuth_time_interval / SECONDS_IN_DAY,
        slant_range_time_to_first_pixel=slr_first,
        slant_range_time_to_last_pixel=slr_last,
        range_pixel_spacing=swath.range_pixel_spacing,
        lines_per_burst=metadata.lines_per_burst,
        samples_per_burst=metadata.samples_per_burst,
        burst_first_line_time=[iso_to_mjd(b.azimuth_time) for b in bursts],
        tie_points=_tie_point_table(metadata.geolocation_grid or []),
        first_valid_sample=first_valid,
        last_valid_sample=last_valid,
        noise=noise,
    )


def build_geometry_table(
    metadata_list: Sequence[Sentinel1SLCMetadata],
) -> Tuple[SubSwathGeometry, ...]:
    """Build the ordered geometry tables of a whole TOPSAR product.

    Metadata may contain one entry per subswath, or one per subswath
    and polarization; geometry is taken from the first entry of each
    subswath and the noise vectors of all its polarizations are kept.

    Parameters
    ----------
    metadata_list : Sequence[Sentinel1SLCMetadata]
        Annotation metadata, in any order.

    Returns
    -------
    tuple of SubSwathGeometry
        Ordered by subswath name, which is increasing slant range.

    Raises
    ------
    UnsupportedAcquisitionError
        If the acquisition is not a Sentinel-1 IW/EW SLC product.
    ValidationError
        If any subswath's metadata is incomplete.
    """
    if not metadata_list:
        raise ValidationError("No subswath metadata supplied")

    grouped: Dict[str, List[Sentinel1SLCMetadata]] = OrderedDict()
    for meta in metadata_list:
        if meta.swath_info is None or not meta.swath_info.swath:
            raise ValidationError("Subswath metadata lacks a swath name")
        grouped.setdefault(meta.swath_info.swath.upper(), []).append(meta)

    mode = validate_acquisition(metadata_list[0].product_info, len(grouped))

    subswaths = []
    for index, name in enumerate(sorted(grouped)):
        entries = grouped[name]
        extra = {}
        for meta in entries[1:]:
            vectors = _noise_vectors(meta)
            if vectors and meta.swath_info.polarization:
                extra[meta.swath_info.polarization.upper()] = vectors
        subswaths.append(build_subswath_geometry(entries[0], index, extra))

    logger.info(
        "Built %s geometry for %d subswaths (%s)",
        mode.value, len(subswaths), ', '.join(sw.name for sw in subswaths),
    )
    return tuple(subswaths)
