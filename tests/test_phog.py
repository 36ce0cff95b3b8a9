"""
Tests for the pyramid histogram of oriented gradients.

Descriptor layout: nbins values per cell, cells in breadth-first quadtree
order over levels 0..nlevels.
"""

import numpy as np
import pytest

from featurekit.errors import NotAnalysedError
from featurekit.geometry import Rectangle
from featurekit.phog import PyramidHistogramOfGradients


def analysed(image, nlevels=2, nbins=8):
    extractor = PyramidHistogramOfGradients(nlevels=nlevels, nbins=nbins)
    extractor.analyse_image(image)
    return extractor


class TestPyramidHistogramOfGradients:

    @pytest.mark.parametrize("nlevels,nbins", [(1, 8), (2, 8), (3, 4), (1, 12)])
    def test_descriptor_length(self, square_image, nlevels, nbins):
        extractor = analysed(square_image, nlevels, nbins)
        hist = extractor.extract_feature(Rectangle(0, 0, 64, 64))

        cells = sum(4 ** level for level in range(nlevels + 1))
        assert len(hist) == nbins * cells
        assert extractor.feature_length == len(hist)

    def test_cells_are_concatenated_not_summed(self, square_image):
        nbins = 8
        hist = analysed(square_image, nlevels=1, nbins=nbins).extract_feature(Rectangle(0, 0, 64, 64))
        whole, *quadrants = hist.blocks(nbins)

        assert len(quadrants) == 4
        assert len(hist) - nbins == 4 * nbins
        # The quadrants tile the rectangle, so their blocks add up to level 0
        np.testing.assert_allclose(whole, np.sum(quadrants, axis=0))
        assert whole.sum() > 0

    def test_level_blocks_sum_to_whole(self, square_image):
        nbins = 8
        hist = analysed(square_image, nlevels=2, nbins=nbins).extract_feature(Rectangle(4, 8, 50, 40))
        blocks = hist.blocks(nbins)

        np.testing.assert_allclose(np.sum(blocks[1:5], axis=0), blocks[0])
        np.testing.assert_allclose(np.sum(blocks[5:21], axis=0), blocks[0])

    def test_vertical_edge_falls_in_first_bin(self, vertical_edge_image):
        hist = analysed(vertical_edge_image, nlevels=1, nbins=8).extract_feature(Rectangle(0, 0, 64, 32))
        whole = hist.blocks(8)[0]

        assert whole[0] > 0
        np.testing.assert_array_equal(whole[1:], 0)

    def test_off_edge_pixels_contribute_nothing(self):
        # A gentle ramp has gradients everywhere but no Canny edges
        ramp = np.tile((np.arange(64) * 2).astype(np.uint8), (64, 1))
        extractor = analysed(ramp)
        vector = extractor.extract_feature_vector()

        assert extractor.magnitudes.sum() == 0
        np.testing.assert_array_equal(vector, 0)

    def test_constant_image(self):
        vector = analysed(np.full((32, 32), 128, dtype=np.uint8)).extract_feature_vector()
        np.testing.assert_array_equal(vector, 0)

    def test_color_image_is_accepted(self, square_image):
        color = np.dstack([square_image] * 3)
        gray_vec = analysed(square_image).extract_feature_vector()
        color_vec = analysed(color).extract_feature_vector()

        np.testing.assert_allclose(gray_vec, color_vec)

    def test_float_image_in_unit_range(self, square_image):
        vec = analysed(square_image.astype(np.float32) / 255.0).extract_feature_vector()
        assert vec.sum() > 0

    def test_deterministic(self, square_image):
        extractor = analysed(square_image)
        rect = Rectangle(10, 10, 40, 30)

        np.testing.assert_array_equal(
            extractor.extract_feature(rect).values,
            extractor.extract_feature(rect).values,
        )

    def test_rectangle_partly_outside_image(self, square_image):
        extractor = analysed(square_image)
        hist = extractor.extract_feature(Rectangle(32, 32, 64, 64))

        assert len(hist) == extractor.feature_length
        assert hist.values.sum() > 0

    def test_normalised_vector(self, square_image):
        vec = analysed(square_image).extract_feature_vector(normalise=True)
        assert np.linalg.norm(vec) == pytest.approx(1.0)

    def test_reanalysis_replaces_state(self, square_image):
        extractor = analysed(square_image)
        extractor.analyse_image(np.zeros((64, 64), dtype=np.uint8))

        np.testing.assert_array_equal(extractor.extract_feature_vector(), 0)

    def test_extract_before_analyse(self):
        with pytest.raises(NotAnalysedError):
            PyramidHistogramOfGradients().extract_feature(Rectangle(0, 0, 8, 8))

    def test_zero_area_rectangle(self, square_image):
        with pytest.raises(ValueError):
            analysed(square_image).extract_feature(Rectangle(0, 0, 0, 10))

    def test_missing_image(self):
        with pytest.raises(ValueError):
            PyramidHistogramOfGradients().analyse_image(None)

    @pytest.mark.parametrize("nlevels,nbins", [(0, 8), (-1, 8), (2, 0)])
    def test_invalid_parameters(self, nlevels, nbins):
        with pytest.raises(ValueError):
            PyramidHistogramOfGradients(nlevels=nlevels, nbins=nbins)
