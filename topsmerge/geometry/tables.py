# -*- coding: utf-8 -*-
"""
Geometry Tables - Immutable per-subswath timing, burst and tie-point data.

Holds everything the merge engine needs to know about a TOPSAR product:
one ``SubSwathGeometry`` per subswath (raster extent, azimuth timing,
slant-range coverage, burst table, geolocation tie points and optional
noise vectors) and the derived ``TargetGeometry`` of the merged raster.

All containers are frozen dataclasses whose numpy arrays are marked
read-only at construction, so a table can be shared between concurrent
tile workers without copying.

Time conventions
----------------
- Azimuth times are fractional days (MJD2000).
- Slant-range times are one-way, in seconds.

Dependencies
------------
numpy

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
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional, Sequence, Tuple, Union

# Third-party
import numpy as np

# TOPSMerge internal
from topsmerge.constants import SPEED_OF_LIGHT
from topsmerge.exceptions import ValidationError


def _frozen_array(values, dtype=np.float64) -> np.ndarray:
    """Copy ``values`` into a read-only ndarray."""
    arr = np.array(values, dtype=dtype)
    arr.setflags(write=False)
    return arr


def java_round(value: Union[float, np.ndarray]) -> Union[int, np.ndarray]:
    """Round half up, i.e. ``floor(value + 0.5)``.

    Python's ``round`` rounds half to even, which would move pixel
    boundaries that sit exactly on a half sample.
    """
    if np.ndim(value) == 0:
        return int(np.floor(value + 0.5))
    return np.floor(np.asarray(value) + 0.5).astype(np.int64)


# ===================================================================
# Tie-point grid
# ===================================================================

@dataclass(frozen=True, eq=False)
class TiePointTable:
    """Geolocation tie-point grid of one subswath.

    All arrays have shape ``(num_geo_lines, num_geo_points_per_line)``.
    Grid columns share slant-range time across rows, so column lookup is
    done against row 0 only.

    Parameters
    ----------
    azimuth_time : np.ndarray
        Azimuth time of each tie point (fractional days).
    slant_range_time : np.ndarray
        One-way slant-range time of each tie point (seconds).
    latitude : np.ndarray
        WGS-84 latitude in degrees.
    longitude : np.ndarray
        WGS-84 longitude in degrees.
    incidence_angle : np.ndarray
        Incidence angle in degrees.

    Raises
    ------
    ValidationError
        If shapes disagree, the grid is smaller than 2x2, or times are
        not strictly increasing down rows / across columns.
    """

    azimuth_time: np.ndarray
    slant_range_time: np.ndarray
    latitude: np.ndarray
    longitude: np.ndarray
    incidence_angle: np.ndarray

    def __post_init__(self) -> None:
        names = ('azimuth_time', 'slant_range_time', 'latitude',
                 'longitude', 'incidence_angle')
        for name in names:
            object.__setattr__(self, name,
                               _frozen_array(getattr(self, name)))

        shape = self.azimuth_time.shape
        if len(shape) != 2 or shape[0] < 2 or shape[1] < 2:
            raise ValidationError(
                f"Tie-point grid must be at least 2x2, got shape {shape}"
            )
        for name in names[1:]:
            if getattr(self, name).shape != shape:
                raise ValidationError(
                    f"Tie-point field '{name}' has shape "
                    f"{getattr(self, name).shape}, expected {shape}"
                )
        if np.any(np.diff(self.azimuth_time, axis=0) <= 0):
            raise ValidationError(
                "Tie-point azimuth times must increase strictly down rows"
            )
        if np.any(np.diff(self.slant_range_time, axis=1) <= 0):
            raise ValidationError(
                "Tie-point slant-range times must increase strictly "
                "across columns"
            )

    @property
    def num_geo_lines(self) -> int:
        """Number of tie-point rows."""
        return self.azimuth_time.shape[0]

    @property
    def num_geo_points_per_line(self) -> int:
        """Number of tie points per row."""
        return self.azimuth_time.shape[1]


# ===================================================================
# Noise vectors
# ===================================================================

@dataclass(frozen=True, eq=False)
class NoiseVector:
    """Range noise look-up table at one azimuth line.

    Parameters
    ----------
    time : float
        Azimuth time of the vector (fractional days).
    line : int
        Source line the vector applies to.
    pixels : np.ndarray
        Increasing range pixel breakpoints.
    values : np.ndarray
        Noise power at each breakpoint (linear scale).
    """

    time: float
    line: int
    pixels: np.ndarray
    values: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, 'pixels', _frozen_array(self.pixels))
        object.__setattr__(self, 'values', _frozen_array(self.values))
        if self.pixels.ndim != 1 or self.pixels.shape != self.values.shape:
            raise ValidationError(
                f"Noise vector at line {self.line}: pixels "
                f"{self.pixels.shape} and values {self.values.shape} "
                f"must be matching 1D arrays"
            )
        if self.pixels.size == 0:
            raise ValidationError(
                f"Noise vector at line {self.line} is empty"
            )


# ===================================================================
# Subswath geometry
# ===================================================================

@dataclass(frozen=True, eq=False)
class SubSwathGeometry:
    """Timing, burst and geolocation parameters of one subswath.

    Parameters
    ----------
    name : str
        Subswath name (``'IW1'``, ``'EW3'``, ...).
    index : int
        Zero-based position in increasing slant-range order.
    num_lines : int
        Lines in the subswath raster (all bursts stacked).
    num_samples : int
        Samples per line.
    first_line_time : float
        Azimuth time of the first line (fractional days).
    last_line_time : float
        Azimuth time of the last line (fractional days).
    azimuth_time_interval : float
        Time between lines (fractional days).
    slant_range_time_to_first_pixel : float
        One-way slant-range time of sample 0 (seconds).
    slant_range_time_to_last_pixel : float
        One-way slant-range time of the last sample (seconds).
    range_pixel_spacing : float
        Slant-range sample spacing in meters.
    lines_per_burst : int
        Lines in every burst of this subswath.
    samples_per_burst : int
        Samples in every burst of this subswath.
    burst_first_line_time : Sequence[float]
        Azimuth time of the first line of each burst.
    tie_points : TiePointTable
        Geolocation tie-point grid.
    first_valid_sample : tuple of np.ndarray, optional
        Per burst, first valid sample of each line (``-1`` = invalid line).
    last_valid_sample : tuple of np.ndarray, optional
        Per burst, last valid sample of each line.
    noise : Mapping[str, tuple of NoiseVector], optional
        Noise vectors keyed by polarization.

    Raises
    ------
    ValidationError
        If extents are non-positive, the burst table is empty, or
        times are inconsistent.
    """

    name: str
    index: int
    num_lines: int
    num_samples: int
    first_line_time: float
    last_line_time: float
    azimuth_time_interval: float
    slant_range_time_to_first_pixel: float
    slant_range_time_to_last_pixel: float
    range_pixel_spacing: float
    lines_per_burst: int
    samples_per_burst: int
    burst_first_line_time: np.ndarray
    tie_points: TiePointTable
    first_valid_sample: Optional[Tuple[np.ndarray, ...]] = None
    last_valid_sample: Optional[Tuple[np.ndarray, ...]] = None
    noise: Mapping[str, Tuple[NoiseVector, ...]] = field(
        default_factory=dict,
    )
    burst_last_line_time: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        if self.num_lines <= 0 or self.num_samples <= 0:
            raise ValidationError(
                f"{self.name}: raster extent must be positive, got "
                f"{self.num_lines}x{self.num_samples}"
            )
        if self.lines_per_burst <= 0:
            raise ValidationError(
                f"{self.name}: lines_per_burst must be positive, got "
                f"{self.lines_per_burst}"
            )
        if self.azimuth_time_interval <= 0:
            raise ValidationError(
                f"{self.name}: azimuth_time_interval must be positive"
            )
        if self.last_line_time < self.first_line_time:
            raise ValidationError(
                f"{self.name}: last_line_time precedes first_line_time"
            )
        if (self.slant_range_time_to_last_pixel
                <= self.slant_range_time_to_first_pixel):
            raise ValidationError(
                f"{self.name}: slant-range coverage is empty"
            )

        first = _frozen_array(self.burst_first_line_time)
        if first.ndim != 1 or first.size == 0:
            raise ValidationError(f"{self.name}: burst table is empty")
        if np.any(np.diff(first) <= 0):
            raise ValidationError(
                f"{self.name}: burst start times must increase strictly"
            )
        object.__setattr__(self, 'burst_first_line_time', first)
        object.__setattr__(
            self, 'burst_last_line_time',
            _frozen_array(
                first + (self.lines_per_burst - 1)
                * self.azimuth_time_interval
            ),
        )

        for name in ('first_valid_sample', 'last_valid_sample'):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, tuple(
                    _frozen_array(v, dtype=np.int32) for v in value
                ))

        object.__setattr__(self, 'noise', MappingProxyType({
            pol: tuple(vectors) for pol, vectors in dict(self.noise).items()
        }))

    @property
    def num_bursts(self) -> int:
        """Number of bursts in the subswath."""
        return self.burst_first_line_time.size

    @property
    def delta_slant_range_time(self) -> float:
        """One-way slant-range time between adjacent samples (seconds)."""
        return self.range_pixel_spacing / SPEED_OF_LIGHT

    def covers_time(self, azimuth_time) -> Union[bool, np.ndarray]:
        """Whether ``azimuth_time`` lies in ``[first, last]`` line time."""
        return ((azimuth_time >= self.first_line_time)
                & (azimuth_time <= self.last_line_time))

    def covers_slant_range(self, slr_time) -> Union[bool, np.ndarray]:
        """Whether ``slr_time`` lies in the closed slant-range coverage."""
        return ((slr_time >= self.slant_range_time_to_first_pixel)
                & (slr_time <= self.slant_range_time_to_last_pixel))


# ===================================================================
# Target geometry
# ===================================================================

class TargetExtent(NamedTuple):
    """Extent and sampling of the merged raster.

    Attributes
    ----------
    width : int
        Output samples per line.
    height : int
        Output lines.
    first_line_time : float
        Azimuth time of output line 0 (fractional days).
    last_line_time : float
        Latest subswath last-line time (fractional days).
    line_time_interval : float
        Time between output lines (fractional days).
    slant_range_time_to_first_pixel : float
        One-way slant-range time of output column 0 (seconds).
    delta_slant_range_time : float
        One-way slant-range time between output columns (seconds).
    """

    width: int
    height: int
    first_line_time: float
    last_line_time: float
    line_time_interval: float
    slant_range_time_to_first_pixel: float
    delta_slant_range_time: float


@dataclass(frozen=True)
class TargetGeometry:
    """Derived sampling of the merged output raster.

    Build with :meth:`from_subswaths`; the fields follow directly from
    the subswath tables and are never modified afterwards.
    """

    first_line_time: float
    last_line_time: float
    line_time_interval: float
    slant_range_time_to_first_pixel: float
    slant_range_time_to_last_pixel: float
    delta_slant_range_time: float
    width: int
    height: int

    @classmethod
    def from_subswaths(
        cls,
        subswaths: Sequence[SubSwathGeometry],
    ) -> 'TargetGeometry':
        """Derive the target geometry from ordered subswaths.

        Parameters
        ----------
        subswaths : Sequence[SubSwathGeometry]
            Subswaths in increasing slant-range order.

        Returns
        -------
        TargetGeometry

        Raises
        ------
        ValidationError
            If no subswaths are given or they are not ordered.
        """
        validate_subswath_order(subswaths)
        first_sw = subswaths[0]
        last_sw = subswaths[-1]

        first_line_time = min(sw.first_line_time for sw in subswaths)
        last_line_time = max(sw.last_line_time for sw in subswaths)
        line_time_interval = first_sw.azimuth_time_interval

        slr_first = first_sw.slant_range_time_to_first_pixel
        slr_last = last_sw.slant_range_time_to_last_pixel
        delta_slr = first_sw.range_pixel_spacing / SPEED_OF_LIGHT

        height = java_round(
            (last_line_time - first_line_time) / line_time_interval
        )
        width = java_round((slr_last - slr_first) / delta_slr)

        return cls(
            first_line_time=first_line_time,
            last_line_time=last_line_time,
            line_time_interval=line_time_interval,
            slant_range_time_to_first_pixel=slr_first,
            slant_range_time_to_last_pixel=slr_last,
            delta_slant_range_time=delta_slr,
            width=width,
            height=height,
        )

    def line_time(self, y):
        """Azimuth time of output line(s) ``y``."""
        return self.first_line_time + y * self.line_time_interval

    def slant_range_time(self, x):
        """One-way slant-range time of output column(s) ``x``."""
        return (self.slant_range_time_to_first_pixel
                + x * self.delta_slant_range_time)

    def extent(self) -> TargetExtent:
        """Extent tuple for the collaborator that allocates the output."""
        return TargetExtent(
            width=self.width,
            height=self.height,
            first_line_time=self.first_line_time,
            last_line_time=self.last_line_time,
            line_time_interval=self.line_time_interval,
            slant_range_time_to_first_pixel=(
                self.slant_range_time_to_first_pixel
            ),
            delta_slant_range_time=self.delta_slant_range_time,
        )


def validate_subswath_order(subswaths: Sequence[SubSwathGeometry]) -> None:
    """Check subswaths are non-empty, indexed 0..n-1, and range-ordered.

    Raises
    ------
    ValidationError
        On any violation.
    """
    if not subswaths:
        raise ValidationError("At least one subswath is required")
    for position, sw in enumerate(subswaths):
        if sw.index != position:
            raise ValidationError(
                f"Subswath {sw.name} has index {sw.index}, "
                f"expected {position}"
            )
    for prev, nxt in zip(subswaths[:-1], subswaths[1:]):
        if (nxt.slant_range_time_to_first_pixel
                <= prev.slant_range_time_to_first_pixel):
            raise ValidationError(
                f"Subswaths must be in increasing slant-range order: "
                f"{nxt.name} starts before {prev.name}"
            )
