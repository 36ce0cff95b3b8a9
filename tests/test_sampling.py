"""Tests for the quadtree sampler."""

import itertools

import pytest

from featurekit.geometry import Rectangle
from featurekit.sampling import QuadtreeSampler


class TestQuadtreeSampler:

    @pytest.mark.parametrize("nlevels,expected", [(0, 1), (1, 5), (2, 21), (3, 85)])
    def test_cell_count(self, nlevels, expected):
        sampler = QuadtreeSampler(Rectangle(0, 0, 64, 64), nlevels)

        assert len(list(sampler)) == expected
        assert len(sampler) == expected

    def test_breadth_first_order(self):
        rect = Rectangle(0, 0, 16, 16)
        cells = list(QuadtreeSampler(rect, 2))

        assert cells[0] == rect
        assert cells[1:5] == rect.quadrants()
        assert cells[5:] == QuadtreeSampler(rect, 2).level(2)

    def test_level_in_raster_order(self):
        cells = QuadtreeSampler(Rectangle(0, 0, 8, 8), 2).level(2)

        assert [(c.x, c.y) for c in cells] == [(x, y) for y in (0, 2, 4, 6) for x in (0, 2, 4, 6)]
        assert all(c.width == 2 and c.height == 2 for c in cells)

    @pytest.mark.parametrize("rect", [Rectangle(0, 0, 64, 48), Rectangle(5, 7, 13, 11)])
    def test_each_level_tiles_rectangle(self, rect):
        sampler = QuadtreeSampler(rect, 3)

        for depth in range(4):
            cells = sampler.level(depth)
            assert len(cells) == 4 ** depth
            assert sum(c.area for c in cells) == rect.area
            for a, b in itertools.combinations(cells, 2):
                assert a.intersection(b) is None

    def test_restartable(self):
        sampler = QuadtreeSampler(Rectangle(0, 0, 32, 32), 2)
        assert list(sampler) == list(sampler)

    def test_negative_levels_rejected(self):
        with pytest.raises(ValueError):
            QuadtreeSampler(Rectangle(0, 0, 8, 8), -1)

    def test_level_out_of_range(self):
        with pytest.raises(ValueError):
            QuadtreeSampler(Rectangle(0, 0, 8, 8), 2).level(3)
