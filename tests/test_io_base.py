# -*- coding: utf-8 -*-
"""
Tests for ChipRegion, tile layout helpers and ArrayTileSource.

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

# Third-party
import numpy as np
import pytest

# TOPSMerge
from topsmerge.exceptions import MissingBandError, ValidationError
from topsmerge.IO.bands import BandIdentity
from topsmerge.IO.base import (
    ArrayTileSource,
    ChipRegion,
    TileSource,
    tile_dtype,
    tile_shape,
)
from topsmerge.vocabulary import BandKind

SLC_VV = BandIdentity(BandKind.SLC, 'VV')
SIGMA0_VV = BandIdentity(BandKind.SIGMA0, 'VV')


class TestChipRegion:

    def test_dimensions(self):
        region = ChipRegion(2, 3, 10, 8)
        assert region.height == 8
        assert region.width == 5
        assert region.shape == (8, 5)

    def test_slicing(self):
        image = np.arange(100).reshape(10, 10)
        region = ChipRegion(1, 2, 3, 5)
        chip = image[region.row_start:region.row_end,
                     region.col_start:region.col_end]
        np.testing.assert_array_equal(chip, [[12, 13, 14], [22, 23, 24]])


class TestTileLayout:

    def test_slc(self):
        assert tile_shape(SLC_VV, 4, 5) == (2, 4, 5)
        assert tile_dtype(SLC_VV) == np.int16

    def test_calibrated(self):
        assert tile_shape(SIGMA0_VV, 4, 5) == (4, 5)
        assert tile_dtype(SIGMA0_VV) == np.float32


class TestArrayTileSource:

    def test_abstract_base(self):
        with pytest.raises(TypeError):
            TileSource()

    def test_band_queries(self, slc_arrays):
        src = ArrayTileSource(slc_arrays)
        assert len(src.band_names()) == 6
        assert src.polarizations() == ['VV']
        assert src.has_band('IW2', SLC_VV)
        assert not src.has_band('IW2', BandIdentity(BandKind.SLC, 'VH'))

    def test_slc_tile(self, slc_arrays):
        src = ArrayTileSource(slc_arrays)
        tile = src.fetch_tile('IW2', SLC_VV, ChipRegion(5, 10, 7, 13))
        assert tile.shape == (2, 2, 3)
        assert tile.dtype == np.int16
        np.testing.assert_array_equal(tile[0, 0], [2010, 2011, 2012])
        np.testing.assert_array_equal(tile[1, :, 0], [6, 7])

    def test_calibrated_tile(self, calibrated_arrays):
        src = ArrayTileSource(calibrated_arrays)
        tile = src.fetch_tile('IW1', SIGMA0_VV, ChipRegion(1, 1, 2, 3))
        assert tile.dtype == np.float32
        np.testing.assert_array_equal(tile, [[100101.0, 100102.0]])

    def test_tile_is_a_copy(self, calibrated_arrays):
        src = ArrayTileSource(calibrated_arrays)
        tile = src.fetch_tile('IW1', SIGMA0_VV, ChipRegion(0, 0, 1, 1))
        tile[0, 0] = -1.0
        assert calibrated_arrays['Sigma0_IW1_VV'][0, 0] == 100000.0

    def test_missing_band(self, slc_arrays):
        src = ArrayTileSource(slc_arrays)
        with pytest.raises(MissingBandError, match="IW4"):
            src.fetch_tile('IW4', SLC_VV, ChipRegion(0, 0, 1, 1))

    @pytest.mark.parametrize('region', [
        ChipRegion(-1, 0, 2, 2),
        ChipRegion(0, 0, 201, 2),
        ChipRegion(0, 0, 2, 51),
        ChipRegion(3, 3, 3, 5),
    ])
    def test_bad_window(self, slc_arrays, region):
        src = ArrayTileSource(slc_arrays)
        with pytest.raises(ValidationError):
            src.fetch_tile('IW1', SLC_VV, region)

    def test_rejects_non_2d(self):
        with pytest.raises(ValidationError, match="2D"):
            ArrayTileSource({'Sigma0_IW1_VV': np.zeros(5)})

    def test_no_data(self, calibrated_arrays):
        src = ArrayTileSource(calibrated_arrays,
                              no_data={BandKind.SIGMA0: -9999.0})
        assert src.no_data_value(SIGMA0_VV) == -9999.0
        assert src.no_data_value(BandIdentity(BandKind.BETA0, 'VV')) == 0.0

    def test_context_manager(self, slc_arrays):
        with ArrayTileSource(slc_arrays) as src:
            assert src.polarizations() == ['VV']
