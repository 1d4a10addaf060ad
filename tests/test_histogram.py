import numpy as np
import pytest

from hogcache.features import CellHistogramBuilder


class TestCellHistogramBuilder:

    def test_bin_width(self):
        assert CellHistogramBuilder(9, 180).bin_width == pytest.approx(20.0)
        assert CellHistogramBuilder(9, 360).bin_width == pytest.approx(40.0)
        assert CellHistogramBuilder(7, 180).bin_width == pytest.approx(180.0 / 7)

    def test_magnitude_weighted_hard_binning(self):
        builder = CellHistogramBuilder(9, 180)
        ori = np.array([[0.0, 25.0], [45.0, 179.0]], dtype=np.float32)
        mag = np.array([[1.0, 2.0], [3.0, 4.0]], dtype=np.float32)
        hist = builder.build(mag, ori)
        np.testing.assert_allclose(hist, [1, 2, 3, 0, 0, 0, 0, 0, 4])
        assert hist.dtype == np.float32

    def test_votes_accumulate(self):
        builder = CellHistogramBuilder(4, 360)
        ori = np.full((4, 4), 100.0, dtype=np.float32)
        mag = np.ones((4, 4), dtype=np.float32)
        np.testing.assert_allclose(builder.build(mag, ori), [0, 16, 0, 0])

    def test_unsigned_mode_folds_before_binning(self):
        builder = CellHistogramBuilder(9, 180)
        indices = builder.bin_indices(np.array([190.0, 350.0, 180.0, 359.9]))
        np.testing.assert_array_equal(indices, [0, 8, 0, 8])

    def test_signed_mode_keeps_full_range(self):
        builder = CellHistogramBuilder(9, 360)
        indices = builder.bin_indices(np.array([190.0, 350.0, 180.0, 359.9]))
        np.testing.assert_array_equal(indices, [4, 8, 4, 8])

    def test_bin_edges(self):
        builder = CellHistogramBuilder(9, 180)
        indices = builder.bin_indices(np.array([0.0, 19.999, 20.0, 160.0, 179.999]))
        np.testing.assert_array_equal(indices, [0, 0, 1, 8, 8])

    def test_zero_magnitude_cell(self):
        builder = CellHistogramBuilder(9, 180)
        hist = builder.build(np.zeros((8, 8)), np.full((8, 8), 45.0))
        assert np.all(hist == 0)

    def test_out_of_range_orientation_is_not_clamped(self):
        builder = CellHistogramBuilder(9, 360)
        with pytest.raises(IndexError):
            builder.build(np.ones((1, 1)), np.array([[400.0]]))
