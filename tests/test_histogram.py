"""Tests for Histogram and the binned histogram analyser."""

import numpy as np
import pytest

from featurekit.errors import NotAnalysedError
from featurekit.geometry import Rectangle
from featurekit.histogram import BinnedHistogramAnalyser, Histogram


class TestHistogram:

    def test_combine_concatenates(self):
        hist = Histogram([1, 2])
        result = hist.combine(Histogram([3, 4]))

        assert result is hist
        np.testing.assert_array_equal(hist.values, [1, 2, 3, 4])

    def test_empty_histogram(self):
        assert len(Histogram(0)) == 0
        assert len(Histogram(5)) == 5

    def test_normalise(self):
        hist = Histogram([3, 4]).normalise()
        np.testing.assert_allclose(hist.values, [0.6, 0.8])

    def test_normalise_zero_histogram(self):
        np.testing.assert_array_equal(Histogram(3).normalise().values, [0, 0, 0])

    def test_blocks(self):
        blocks = Histogram([1, 2, 3, 4, 5, 6]).blocks(2)
        assert [b.tolist() for b in blocks] == [[1, 2], [3, 4], [5, 6]]

    def test_blocks_must_divide(self):
        with pytest.raises(ValueError):
            Histogram([1, 2, 3]).blocks(2)


class TestBinnedHistogramAnalyser:

    @pytest.fixture
    def analyser(self):
        analyser = BinnedHistogramAnalyser(4)
        orientations = np.array([
            [0.1, np.pi / 2 + 0.1],
            [np.pi + 0.1, 1.5 * np.pi + 0.1],
        ])
        analyser.analyse_image(orientations)
        return analyser

    def test_bin_assignment(self, analyser):
        np.testing.assert_array_equal(analyser.bin_map, [[0, 1], [2, 3]])

    def test_bin_masks(self, analyser):
        for b in range(4):
            assert analyser.bin_mask(b).sum() == 1
            assert analyser.bin_mask(b)[analyser.bin_map == b].all()

    def test_analysis_keeps_only_the_bin_map(self, analyser):
        assert not hasattr(analyser, "bin_masks")
        assert analyser.bin_mask(2).dtype == np.bool_
        with pytest.raises(ValueError):
            analyser.bin_mask(4)

    def test_range_edges_are_clamped(self):
        analyser = BinnedHistogramAnalyser(4)
        analyser.analyse_image(np.array([[2 * np.pi, -0.5, 100.0]]))

        np.testing.assert_array_equal(analyser.bin_map, [[3, 0, 3]])

    def test_weighted_histogram(self, analyser):
        weights = np.array([[1.0, 2.0], [3.0, 4.0]])
        hist = analyser.compute_histogram(Rectangle(0, 0, 2, 2), weights)

        np.testing.assert_array_equal(hist.values, [1, 2, 3, 4])

    def test_sub_rectangle(self, analyser):
        weights = np.array([[1.0, 2.0], [3.0, 4.0]])
        hist = analyser.compute_histogram(Rectangle(1, 0, 1, 2), weights)

        np.testing.assert_array_equal(hist.values, [0, 2, 0, 4])

    def test_rectangle_is_clipped(self, analyser):
        weights = np.ones((2, 2))
        hist = analyser.compute_histogram(Rectangle(-10, -10, 11, 11), weights)

        np.testing.assert_array_equal(hist.values, [1, 0, 0, 0])

    def test_rectangle_outside_image(self, analyser):
        hist = analyser.compute_histogram(Rectangle(5, 5, 3, 3), np.ones((2, 2)))

        assert len(hist) == 4
        assert hist.values.sum() == 0

    def test_shared_bins_accumulate(self):
        analyser = BinnedHistogramAnalyser(2, 0.0, 1.0)
        analyser.analyse_image(np.array([[0.1, 0.2, 0.9]]))
        hist = analyser.compute_histogram(Rectangle(0, 0, 3, 1), np.array([[1.0, 1.5, 2.0]]))

        np.testing.assert_array_equal(hist.values, [2.5, 2.0])

    def test_query_before_analysis(self):
        with pytest.raises(NotAnalysedError):
            BinnedHistogramAnalyser(4).compute_histogram(Rectangle(0, 0, 1, 1), np.ones((1, 1)))

    def test_weight_shape_mismatch(self, analyser):
        with pytest.raises(ValueError):
            analyser.compute_histogram(Rectangle(0, 0, 1, 1), np.ones((3, 3)))

    def test_invalid_construction(self):
        with pytest.raises(ValueError):
            BinnedHistogramAnalyser(0)
        with pytest.raises(ValueError):
            BinnedHistogramAnalyser(4, 1.0, 1.0)
