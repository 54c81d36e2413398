# -*- coding: utf-8 -*-
"""
Tile Merge Engine - Deburst and merge TOPSAR subswaths tile by tile.

``TopsMergeEngine`` computes any rectangular region of the merged
(debursted, subswath-merged) raster on demand.  For each output pixel
it decides which subswath and which burst line supply the value, reads
that sample from a window fetched through a ``TileSource``, and repairs
degenerate samples at subswath seams from the neighbouring subswath.

Two code paths produce identical geometry:

- a tile whose columns fall inside a single subswath is filled row by
  row with one contiguous slice copy per row;
- a tile spanning a subswath overlap is filled row by row with
  per-pixel subswath selection, vectorized across the row.

Tiles are independent.  The engine holds only immutable geometry and a
reference to the tile source, so ``compute_output_tile`` can run on
several threads at once.

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
import logging
import warnings
from typing import Dict, List, Optional, Sequence, Tuple

# Third-party
import numpy as np

# TOPSMerge internal
from topsmerge.exceptions import (
    GeometryError,
    MissingBandError,
    TileComputationError,
    ValidationError,
)
from topsmerge.geolocation.merged import corner_coordinates
from topsmerge.geometry.builder import (
    build_geometry_table,
    source_is_calibrated,
)
from topsmerge.geometry.bursts import (
    azimuth_line_range,
    resolve_target_line,
    source_line_for_target_line,
)
from topsmerge.geometry.mapper import sample_index_in_source
from topsmerge.geometry.noise import subswath_noise
from topsmerge.geometry.tables import (
    SubSwathGeometry,
    TargetExtent,
    TargetGeometry,
)
from topsmerge.geometry.tiepoints import (
    GeolocationGrid,
    synthesize_geolocation_grid,
)
from topsmerge.IO.bands import (
    BandIdentity,
    calibration_kinds_present,
    select_output_bands,
)
from topsmerge.IO.base import ChipRegion, TileSource, tile_dtype, tile_shape
from topsmerge.IO.models import Sentinel1SLCMetadata
from topsmerge.merge.config import MergeConfig
from topsmerge.vocabulary import BandKind

logger = logging.getLogger(__name__)

# (fetched region, data) or None when the subswath contributes no lines
_Window = Optional[Tuple[ChipRegion, np.ndarray]]


class TopsMergeEngine:
    """Compute tiles of the merged TOPSAR raster.

    Parameters
    ----------
    subswaths : Sequence[SubSwathGeometry]
        Subswath geometry tables in increasing slant-range order.
    tile_source : TileSource
        Provider of source band windows.
    polarizations : Sequence[str], optional
        Polarizations to merge.  Defaults to all polarizations found in
        the tile source.
    band_kinds : Sequence[BandKind], optional
        Band kinds to merge.  Defaults to ``SLC`` for uncalibrated
        sources and to every calibration kind present otherwise.
    config : MergeConfig, optional
        Engine parameters.  Defaults to ``MergeConfig()``.
    calibrated : bool, optional
        Whether the source bands are calibrated intensities.  Ignored
        when ``band_kinds`` is given.  When None, a source carrying any
        Sigma0/Beta0/Gamma0/DN band is treated as calibrated.

    Raises
    ------
    ValidationError
        If the subswaths are empty or not ordered.
    MissingBandError
        If a subswath lacks a band for a selected polarization.

    Examples
    --------
    >>> engine = TopsMergeEngine(subswaths, ArrayTileSource(arrays))
    >>> band = engine.output_bands()[0]
    >>> region = ChipRegion(0, 0, 50, 500)
    >>> tile = engine.compute_output_tile(band, region)
    """

    def __init__(
        self,
        subswaths: Sequence[SubSwathGeometry],
        tile_source: TileSource,
        polarizations: Optional[Sequence[str]] = None,
        band_kinds: Optional[Sequence[BandKind]] = None,
        config: Optional[MergeConfig] = None,
        calibrated: Optional[bool] = None,
    ) -> None:
        self._subswaths = tuple(subswaths)
        self._target = TargetGeometry.from_subswaths(self._subswaths)
        self._source = tile_source
        self._config = config if config is not None else MergeConfig()
        self._bands = self._resolve_bands(polarizations, band_kinds,
                                          calibrated)
        self._check_bands()
        self._use_noise = self._resolve_noise_tie_break()

        logger.info(
            "Merging %d subswaths into %dx%d raster, bands: %s",
            len(self._subswaths), self._target.height, self._target.width,
            ', '.join(str(b) for b in self._bands),
        )

    @classmethod
    def from_metadata(
        cls,
        metadata_list: Sequence[Sentinel1SLCMetadata],
        tile_source: TileSource,
        polarizations: Optional[Sequence[str]] = None,
        band_kinds: Optional[Sequence[BandKind]] = None,
        config: Optional[MergeConfig] = None,
    ) -> 'TopsMergeEngine':
        """Build an engine from annotation metadata of a whole product.

        Geometry comes from :func:`build_geometry_table` and the
        calibrated flag from the metadata's product information.

        Parameters
        ----------
        metadata_list : Sequence[Sentinel1SLCMetadata]
            Annotation metadata, one entry per subswath or per
            subswath and polarization.
        tile_source : TileSource
            Provider of source band windows.
        polarizations, band_kinds, config
            As for the constructor.

        Returns
        -------
        TopsMergeEngine
        """
        return cls(
            build_geometry_table(metadata_list),
            tile_source,
            polarizations=polarizations,
            band_kinds=band_kinds,
            config=config,
            calibrated=source_is_calibrated(metadata_list),
        )

    # ---------------------------------------------------------------
    # Construction helpers
    # ---------------------------------------------------------------

    def _resolve_bands(
        self,
        polarizations: Optional[Sequence[str]],
        band_kinds: Optional[Sequence[BandKind]],
        calibrated: Optional[bool],
    ) -> List[BandIdentity]:
        names = self._source.band_names()
        if band_kinds is None:
            if calibrated is None:
                calibrated = bool(calibration_kinds_present(names))
            return select_output_bands(calibrated, names, polarizations)

        pols = ([p.upper() for p in polarizations] if polarizations
                else self._source.polarizations())
        if not pols:
            raise MissingBandError(
                "No polarization selected and none found in source bands"
            )
        kinds = [BandKind(k) for k in band_kinds]
        if not kinds:
            raise ValidationError("band_kinds must not be empty")
        return [BandIdentity(kind, pol) for pol in pols for kind in kinds]

    def _check_bands(self) -> None:
        for band in self._bands:
            for sw in self._subswaths:
                if not self._source.has_band(sw.name, band):
                    raise MissingBandError(
                        f"Subswath {sw.name} has no {band} band"
                    )

    def _resolve_noise_tie_break(self) -> bool:
        if not self._config.noise_tie_break:
            return False
        pols = {band.polarization for band in self._bands}
        missing = sorted(
            f"{sw.name}/{pol}" for sw in self._subswaths for pol in pols
            if not sw.noise.get(pol)
        )
        if missing:
            warnings.warn(
                f"Noise tie-break requested but no noise vectors for "
                f"{', '.join(missing)}; splitting overlaps at the range "
                f"midpoint instead.",
                UserWarning,
                stacklevel=3,
            )
            return False
        return True

    # ---------------------------------------------------------------
    # Public interface
    # ---------------------------------------------------------------

    @property
    def subswaths(self) -> Tuple[SubSwathGeometry, ...]:
        """Subswath geometry tables, in slant-range order."""
        return self._subswaths

    @property
    def target(self) -> TargetGeometry:
        """Sampling of the merged raster."""
        return self._target

    @property
    def config(self) -> MergeConfig:
        """Engine parameters."""
        return self._config

    def target_extent(self) -> TargetExtent:
        """Width, height and time/range sampling of the merged raster."""
        return self._target.extent()

    def output_bands(self) -> List[BandIdentity]:
        """Bands this engine produces, grouped by polarization."""
        return list(self._bands)

    def synthesize_geolocation_grid(self) -> GeolocationGrid:
        """Sparse geolocation grid of the merged raster.

        Uses the grid dimensions from the engine configuration.
        """
        return synthesize_geolocation_grid(
            self._subswaths,
            self._target,
            grid_width=self._config.tie_point_grid_width,
            grid_height=self._config.tie_point_grid_height,
        )

    def corner_coordinates(self) -> Dict[str, float]:
        """First/last near/far latitude and longitude of the merged raster.

        Returns
        -------
        Dict[str, float]
            Keys ``first_near_lat``, ``first_near_long``,
            ``first_far_lat``, ``first_far_long``, ``last_near_lat``,
            ``last_near_long``, ``last_far_lat``, ``last_far_long``.
        """
        return corner_coordinates(
            self.synthesize_geolocation_grid(),
            self._target.width,
            self._target.height,
        )

    def allocate_tile(
        self,
        band: BandIdentity,
        region: ChipRegion,
    ) -> np.ndarray:
        """Zero-filled output buffer for ``region`` of ``band``."""
        return np.zeros(tile_shape(band, region.height, region.width),
                        dtype=tile_dtype(band))

    def compute_output_tile(
        self,
        band: BandIdentity,
        region: ChipRegion,
        out: Optional[np.ndarray] = None,
    ) -> np.ndarray:
        """Compute one region of the merged raster.

        Pixels that no subswath or burst covers keep the value they had
        in ``out``.

        Parameters
        ----------
        band : BandIdentity
            Output band.
        region : ChipRegion
            Region in merged-raster coordinates.
        out : np.ndarray, optional
            Destination buffer from :meth:`allocate_tile` or equivalent.
            Allocated when omitted.  Written only if the whole tile
            succeeds.

        Returns
        -------
        np.ndarray
            ``out``, filled.

        Raises
        ------
        ValidationError
            If the region lies outside the raster or ``out`` has the
            wrong shape or dtype.
        TileComputationError
            If the tile's geometry is inconsistent.  ``out`` is left
            unmodified.
        """
        self._check_region(region)
        if out is None:
            out = self.allocate_tile(band, region)
        else:
            expected = tile_shape(band, region.height, region.width)
            if out.shape != expected or out.dtype != tile_dtype(band):
                raise ValidationError(
                    f"Output buffer must have shape {expected} and dtype "
                    f"{tile_dtype(band)}, got {out.shape} {out.dtype}"
                )

        scratch = out.copy()
        try:
            candidates = self._candidate_subswaths(region)
            windows: Dict[int, _Window] = {}
            if len(candidates) == 1:
                self._fill_single(band, region, candidates[0],
                                  windows, scratch)
            else:
                self._fill_overlap(band, region, candidates,
                                   windows, scratch)
        except GeometryError as e:
            logger.debug("Tile %s of %s failed: %s", tuple(region), band, e)
            raise TileComputationError(
                f"Failed to compute tile {tuple(region)} of {band}: {e}",
                region=region,
                subswath=e.subswath,
                coordinate=e.coordinate,
            ) from e

        out[...] = scratch
        logger.debug("Computed tile %s of %s from %s", tuple(region), band,
                     ', '.join(sw.name for sw in candidates))
        return out

    # ---------------------------------------------------------------
    # Tile geometry
    # ---------------------------------------------------------------

    def _check_region(self, region: ChipRegion) -> None:
        if (region.row_start < 0 or region.col_start < 0
                or region.row_end > self._target.height
                or region.col_end > self._target.width
                or region.height <= 0 or region.width <= 0):
            raise ValidationError(
                f"Region {tuple(region)} is empty or outside the "
                f"{self._target.height}x{self._target.width} target raster"
            )

    def _candidate_subswaths(
        self,
        region: ChipRegion,
    ) -> List[SubSwathGeometry]:
        """Subswaths whose slant-range coverage meets the tile's columns."""
        tile_first = self._target.slant_range_time(region.col_start)
        tile_last = self._target.slant_range_time(region.col_end - 1)
        candidates = [
            sw for sw in self._subswaths
            if (tile_last >= sw.slant_range_time_to_first_pixel
                and tile_first <= sw.slant_range_time_to_last_pixel)
        ]
        if not candidates:
            raise GeometryError(
                f"Tile columns {region.col_start}..{region.col_end - 1} "
                f"are outside every subswath",
                coordinate=(tile_first, tile_last),
            )
        return candidates

    def _source_region(
        self,
        region: ChipRegion,
        sw: SubSwathGeometry,
    ) -> Optional[ChipRegion]:
        """Window of ``sw`` needed to fill ``region``, or None if empty."""
        target = self._target
        sx0 = sample_index_in_source(region.col_start, sw, target)
        sx1 = sample_index_in_source(region.col_end - 1, sw, target)

        first = resolve_target_line(region.row_start, sw, target)
        last = resolve_target_line(region.row_end - 1, sw, target)
        sy0 = first.line0 if first is not None else 0
        sy1 = last.max_line if last is not None else sw.num_lines - 1
        sy0 = max(sy0, 0)
        sy1 = min(sy1, sw.num_lines - 1)

        if sy1 < sy0 or sx1 < sx0:
            return None
        return ChipRegion(sy0, sx0, sy1 + 1, sx1 + 1)

    def _window(
        self,
        band: BandIdentity,
        region: ChipRegion,
        sw: SubSwathGeometry,
        windows: Dict[int, _Window],
    ) -> _Window:
        """Fetch ``sw``'s window for this tile on first use."""
        if sw.index not in windows:
            src = self._source_region(region, sw)
            if src is None:
                windows[sw.index] = None
            else:
                data = self._source.fetch_tile(sw.name, band, src)
                windows[sw.index] = (src, data)
        return windows[sw.index]

    # ---------------------------------------------------------------
    # Sample access
    # ---------------------------------------------------------------

    def _fill_value(self, band: BandIdentity) -> float:
        if band.kind is BandKind.SLC:
            return 0
        return self._source.no_data_value(band)

    def _gather(
        self,
        band: BandIdentity,
        window: _Window,
        source_line: int,
        source_x: np.ndarray,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Samples on one source line; fill value where outside the window.

        Returns
        -------
        values : np.ndarray
            ``(2, n)`` int16 for SLC, ``(n,)`` float32 otherwise.
        inside : np.ndarray
            Boolean mask of samples read from the window.
        """
        n = source_x.size
        shape = (2, n) if band.kind is BandKind.SLC else (n,)
        values = np.full(shape, self._fill_value(band),
                         dtype=tile_dtype(band))
        inside = np.zeros(n, dtype=bool)
        if window is None:
            return values, inside
        src, data = window
        if not src.row_start <= source_line < src.row_end:
            return values, inside
        inside = (source_x >= src.col_start) & (source_x < src.col_end)
        values[..., inside] = data[..., source_line - src.row_start,
                                   source_x[inside] - src.col_start]
        return values, inside

    def _is_no_data(self, band: BandIdentity,
                    values: np.ndarray) -> np.ndarray:
        no_data = self._source.no_data_value(band)
        if np.isnan(no_data):
            return np.isnan(values)
        return values == no_data

    def _is_degenerate(self, band: BandIdentity,
                       values: np.ndarray) -> np.ndarray:
        if band.kind is BandKind.SLC:
            iq = values.astype(np.int64)
            intensity = iq[0] * iq[0] + iq[1] * iq[1]
            return intensity < self._config.slc_intensity_threshold
        return self._is_no_data(band, values)

    def _is_usable(self, band: BandIdentity,
                   values: np.ndarray) -> np.ndarray:
        if band.kind is BandKind.SLC:
            return ~((values[0] == 0) & (values[1] == 0))
        return ~self._is_no_data(band, values)

    # ---------------------------------------------------------------
    # Single-subswath tiles
    # ---------------------------------------------------------------

    def _fill_single(
        self,
        band: BandIdentity,
        region: ChipRegion,
        sw: SubSwathGeometry,
        windows: Dict[int, _Window],
        scratch: np.ndarray,
    ) -> None:
        target = self._target
        y_min, y_max = azimuth_line_range(sw, target)
        first_y = max(region.row_start, y_min)
        last_y = min(region.row_end, y_max + 1)
        if first_y >= last_y:
            return

        window = self._window(band, region, sw, windows)
        if window is None:
            return
        src, data = window

        xs = np.arange(region.col_start, region.col_end)
        sx = sample_index_in_source(xs, sw, target)
        col_ok = (sx >= src.col_start) & (sx < src.col_end)
        cols = np.nonzero(col_ok)[0]
        src_cols = sx[col_ok] - src.col_start

        for y in range(first_y, last_y):
            sy = source_line_for_target_line(y, sw, target)
            if sy is None or not src.row_start <= sy < src.row_end:
                continue
            scratch[..., y - region.row_start, cols] = (
                data[..., sy - src.row_start, src_cols]
            )

    # ---------------------------------------------------------------
    # Tiles spanning a subswath overlap
    # ---------------------------------------------------------------

    def _prefer_later(
        self,
        band: BandIdentity,
        candidates: Sequence[SubSwathGeometry],
        xs: np.ndarray,
        slr: np.ndarray,
        line_time: float,
        first: np.ndarray,
        second: np.ndarray,
    ) -> np.ndarray:
        """Per column, whether the later of the two covering subswaths wins."""
        if not self._use_noise:
            slr_first = np.array([sw.slant_range_time_to_first_pixel
                                  for sw in candidates])
            slr_last = np.array([sw.slant_range_time_to_last_pixel
                                 for sw in candidates])
            middle = 0.5 * (slr_last[first] + slr_first[second])
            return slr >= middle

        noise = np.stack([
            subswath_noise(xs, line_time, sw, band.polarization,
                           self._target)
            for sw in candidates
        ])
        cols = np.arange(xs.size)
        return noise[first, cols] > noise[second, cols]

    def _fill_overlap(
        self,
        band: BandIdentity,
        region: ChipRegion,
        candidates: Sequence[SubSwathGeometry],
        windows: Dict[int, _Window],
        scratch: np.ndarray,
    ) -> None:
        target = self._target
        xs = np.arange(region.col_start, region.col_end)
        slr = target.slant_range_time(xs)
        sx = np.stack([sample_index_in_source(xs, sw, target)
                       for sw in candidates])
        in_range = np.stack([sw.covers_slant_range(slr)
                             for sw in candidates])

        for y in range(region.row_start, region.row_end):
            t = target.line_time(y)
            in_time = np.array([sw.covers_time(t) for sw in candidates])
            cover = in_range & in_time[:, None]
            rank = np.cumsum(cover, axis=0)
            has0 = rank[-1] >= 1
            if not has0.any():
                continue
            has1 = rank[-1] >= 2

            # positions of the first and second covering candidates
            first = np.argmax(cover, axis=0)
            second = np.argmax(cover & (rank == 2), axis=0)
            primary = first
            if has1.any():
                later = self._prefer_later(band, candidates, xs, slr, t,
                                           first, second)
                primary = np.where(has1 & later, second, first)
            other = np.where(primary == first, second, first)

            lines = [source_line_for_target_line(y, sw, target)
                     for sw in candidates]
            row = y - region.row_start

            for k in np.unique(primary[has0]):
                if lines[k] is None:
                    continue
                cols = np.nonzero(has0 & (primary == k))[0]
                window = self._window(band, region, candidates[k], windows)
                values, _ = self._gather(band, window, lines[k], sx[k, cols])

                pos = np.nonzero(has1[cols]
                                 & self._is_degenerate(band, values))[0]
                for o in np.unique(other[cols[pos]]):
                    if lines[o] is None:
                        continue
                    sel = pos[other[cols[pos]] == o]
                    alt_window = self._window(band, region, candidates[o],
                                              windows)
                    alt, inside = self._gather(band, alt_window, lines[o],
                                               sx[o, cols[sel]])
                    ok = inside & self._is_usable(band, alt)
                    values[..., sel[ok]] = alt[..., ok]

                scratch[..., row, cols] = values
