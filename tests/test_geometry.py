"""Tests for the Rectangle region primitive."""

import itertools

import pytest

from featurekit.geometry import Rectangle


class TestRectangle:

    def test_negative_size_rejected(self):
        with pytest.raises(ValueError):
            Rectangle(0, 0, -1, 5)

    def test_from_shape_uses_rows_as_height(self):
        assert Rectangle.from_shape((20, 30)) == Rectangle(0, 0, 30, 20)

    def test_clip_to_image(self):
        assert Rectangle(-5, -5, 10, 10).clip((20, 30)) == Rectangle(0, 0, 5, 5)
        assert Rectangle(25, 15, 10, 10).clip((20, 30)) == Rectangle(25, 15, 5, 5)

    def test_clip_outside_image_is_none(self):
        assert Rectangle(100, 100, 5, 5).clip((20, 30)) is None

    def test_touching_rectangles_do_not_intersect(self):
        assert Rectangle(0, 0, 5, 5).intersection(Rectangle(5, 0, 5, 5)) is None

    @pytest.mark.parametrize("rect", [
        Rectangle(0, 0, 8, 8),
        Rectangle(3, 5, 7, 9),
        Rectangle(0, 0, 1, 1),
    ])
    def test_quadrants_tile_parent(self, rect):
        quads = rect.quadrants()

        assert len(quads) == 4
        assert sum(q.area for q in quads) == rect.area
        for a, b in itertools.combinations(quads, 2):
            assert a.intersection(b) is None
        for q in quads:
            if not q.is_empty():
                assert q.intersection(rect) == q

    def test_quadrants_raster_order(self):
        quads = Rectangle(10, 20, 4, 6).quadrants()

        assert [q.as_tuple() for q in quads] == [
            (10, 20, 2, 3), (12, 20, 2, 3),
            (10, 23, 2, 3), (12, 23, 2, 3),
        ]

    def test_slices_select_region(self):
        rows, cols = Rectangle(2, 3, 4, 5).slices()
        assert (rows.start, rows.stop, cols.start, cols.stop) == (3, 8, 2, 6)
