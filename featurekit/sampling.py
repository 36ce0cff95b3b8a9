"""
Quadtree region sampling for spatial pyramids.
"""

from typing import Iterator, List

from .geometry import Rectangle


class QuadtreeSampler:
    """
    Iterates over the cells of a quadtree built on a rectangle.

    Level 0 is the rectangle itself and level k holds 4**k cells. Levels run
    from 0 to nlevels inclusive and are emitted breadth-first; within a level
    the cells come in raster order over the 2**k x 2**k grid.

    Each call to iter() starts a new traversal, so one sampler can be
    iterated any number of times.
    """

    def __init__(self, rect: Rectangle, nlevels: int) -> None:
        if nlevels < 0:
            raise ValueError(f"Number of levels must be non-negative, got {nlevels}")

        self.rect = rect
        self.nlevels = int(nlevels)

    def __iter__(self) -> Iterator[Rectangle]:
        level = [self.rect]
        for depth in range(self.nlevels + 1):
            yield from level
            if depth < self.nlevels:
                level = self._subdivide(level)

    def __len__(self) -> int:
        return (4 ** (self.nlevels + 1) - 1) // 3

    def level(self, depth: int) -> List[Rectangle]:
        """All cells of a single level in raster order."""
        if depth < 0 or depth > self.nlevels:
            raise ValueError(f"Level {depth} outside 0..{self.nlevels}")

        cells = [self.rect]
        for _ in range(depth):
            cells = self._subdivide(cells)
        return cells

    @staticmethod
    def _subdivide(cells: List[Rectangle]) -> List[Rectangle]:
        # Raster order over the finer grid: walk the parent rows, and for each
        # one emit the top halves of all its cells, then the bottom halves.
        side = int(round(len(cells) ** 0.5))
        children = []
        for row in range(side):
            quads = [cell.quadrants() for cell in cells[row * side:(row + 1) * side]]
            children.extend(q for quad in quads for q in quad[:2])
            children.extend(q for quad in quads for q in quad[2:])
        return children
