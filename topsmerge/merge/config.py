# -*- coding: utf-8 -*-
"""
Merge Configuration - Tunable parameters of the deburst/merge engine.

Author
------
Steven Siebert

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
from typing import Optional, Tuple

# TOPSMerge internal
from topsmerge.constants import (
    DEFAULT_SLC_INTENSITY_THRESHOLD,
    DEFAULT_TIE_POINT_GRID_HEIGHT,
    DEFAULT_TIE_POINT_GRID_WIDTH,
    DEFAULT_TILE_SIZE,
)
from topsmerge.exceptions import ValidationError


@dataclass(frozen=True)
class MergeConfig:
    """Parameters of a merge run.

    Parameters
    ----------
    slc_intensity_threshold : float
        SLC samples with ``i**2 + q**2`` below this value are treated as
        degenerate inside a subswath overlap and replaced from the
        neighbouring subswath.
    tie_point_grid_width : int
        Control points per row of the merged geolocation grid.
    tie_point_grid_height : int
        Rows of the merged geolocation grid.
    tile_size : Tuple[int, int]
        ``(rows, cols)`` of the tiles used by whole-band merges.
    noise_tie_break : bool
        Pick the overlapping subswath with the lower annotated noise
        instead of splitting at the range midpoint.
    max_workers : int, optional
        Thread count for whole-band merges.  None lets
        ``ThreadPoolExecutor`` decide.

    Raises
    ------
    ValidationError
        If any value is out of range.
    """

    slc_intensity_threshold: float = DEFAULT_SLC_INTENSITY_THRESHOLD
    tie_point_grid_width: int = DEFAULT_TIE_POINT_GRID_WIDTH
    tie_point_grid_height: int = DEFAULT_TIE_POINT_GRID_HEIGHT
    tile_size: Tuple[int, int] = DEFAULT_TILE_SIZE
    noise_tie_break: bool = False
    max_workers: Optional[int] = None

    def __post_init__(self) -> None:
        if self.slc_intensity_threshold < 0:
            raise ValidationError(
                f"slc_intensity_threshold must be non-negative, got "
                f"{self.slc_intensity_threshold}"
            )
        for name in ('tie_point_grid_width', 'tie_point_grid_height'):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ValidationError(
                    f"{name} must be a positive int, got {value!r}"
                )
        size = self.tile_size
        if isinstance(size, int):
            size = (size, size)
        if (not isinstance(size, tuple) or len(size) != 2
                or not all(isinstance(v, int) and v > 0 for v in size)):
            raise ValidationError(
                f"tile_size must be a positive int or (rows, cols) pair, "
                f"got {self.tile_size!r}"
            )
        object.__setattr__(self, 'tile_size', size)
        if self.max_workers is not None and self.max_workers < 1:
            raise ValidationError(
                f"max_workers must be positive, got {self.max_workers}"
            )
