# -*- coding: utf-8 -*-
"""
Tiling - Tile grid of the merged raster and concurrent whole-band merges.

``tile_regions`` partitions the merged raster into a row-major grid of
non-overlapping tiles with clipped edge tiles.  ``merge_band`` computes
every tile of one band on a thread pool and assembles the result.  Each
worker owns its tile buffer and writes only its own disjoint slice of
the output array, so no locking is needed.

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
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple, Union

# Third-party
import numpy as np

# TOPSMerge internal
from topsmerge.exceptions import ValidationError
from topsmerge.IO.bands import BandIdentity
from topsmerge.IO.base import ChipRegion, tile_dtype, tile_shape
from topsmerge.merge.engine import TopsMergeEngine

logger = logging.getLogger(__name__)


def _normalize_pair(
    value: Union[int, Tuple[int, int]], name: str
) -> Tuple[int, int]:
    """Convert an int or (int, int) tuple to a validated (int, int) pair.

    Raises
    ------
    ValidationError
        If the value is not a positive int or pair of positive ints.
    """
    if isinstance(value, int):
        value = (value, value)
    if (not isinstance(value, tuple) or len(value) != 2
            or not all(isinstance(v, int) for v in value)):
        raise ValidationError(
            f"{name} must be int or Tuple[int, int], got {value!r}"
        )
    if value[0] <= 0 or value[1] <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def tile_regions(
    height: int,
    width: int,
    tile_size: Union[int, Tuple[int, int]],
) -> List[ChipRegion]:
    """Row-major grid of tiles covering a ``height`` x ``width`` raster.

    Parameters
    ----------
    height : int
        Raster rows.
    width : int
        Raster columns.
    tile_size : int or Tuple[int, int]
        ``(rows, cols)`` per tile.  Edge tiles are clipped to the raster.

    Returns
    -------
    List[ChipRegion]
        Non-overlapping regions whose union is the whole raster.

    Raises
    ------
    ValidationError
        If the raster or tile size is not positive.

    Examples
    --------
    >>> tile_regions(5, 7, (2, 4))[:2]
    [ChipRegion(row_start=0, col_start=0, row_end=2, col_end=4),
     ChipRegion(row_start=0, col_start=4, row_end=2, col_end=7)]
    """
    if height <= 0 or width <= 0:
        raise ValidationError(
            f"Raster dimensions must be positive, got {height}x{width}"
        )
    tile_rows, tile_cols = _normalize_pair(tile_size, 'tile_size')
    return [
        ChipRegion(r, c, min(r + tile_rows, height), min(c + tile_cols, width))
        for r in range(0, height, tile_rows)
        for c in range(0, width, tile_cols)
    ]


def merge_band(
    engine: TopsMergeEngine,
    band: BandIdentity,
    max_workers: Optional[int] = None,
    tile_size: Optional[Union[int, Tuple[int, int]]] = None,
) -> np.ndarray:
    """Merge one whole band concurrently.

    Parameters
    ----------
    engine : TopsMergeEngine
        Engine to compute tiles with.
    band : BandIdentity
        Band to merge.
    max_workers : int, optional
        Thread count.  Defaults to ``engine.config.max_workers``.
    tile_size : int or Tuple[int, int], optional
        Tile size.  Defaults to ``engine.config.tile_size``.

    Returns
    -------
    np.ndarray
        ``(2, height, width)`` int16 for SLC, ``(height, width)``
        float32 otherwise.  Uncovered pixels are zero.

    Raises
    ------
    TileComputationError
        The first failing tile, in row-major order.
    """
    extent = engine.target_extent()
    if max_workers is None:
        max_workers = engine.config.max_workers
    if tile_size is None:
        tile_size = engine.config.tile_size

    regions = tile_regions(extent.height, extent.width, tile_size)
    output = np.zeros(tile_shape(band, extent.height, extent.width),
                      dtype=tile_dtype(band))
    logger.debug("Merging %s in %d tiles", band, len(regions))

    def work(region: ChipRegion) -> None:
        tile = engine.compute_output_tile(band, region)
        output[..., region.row_start:region.row_end,
               region.col_start:region.col_end] = tile

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(work, region) for region in regions]
        for future in futures:
            future.result()

    return output
