"""
Region primitives.
Integer pixel rectangles with clipping and quadrant subdivision.
"""

from typing import List, Optional, Tuple


class Rectangle:
    """Axis-aligned pixel rectangle given by its top-left corner and size."""

    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        """
        Create a new Rectangle.

        Args:
            x: column of the top-left corner
            y: row of the top-left corner
            width: number of columns (must be >= 0)
            height: number of rows (must be >= 0)
        """
        if width < 0 or height < 0:
            raise ValueError(f"Rectangle size must be non-negative, got {width}x{height}")

        self.x = int(x)
        self.y = int(y)
        self.width = int(width)
        self.height = int(height)

    @classmethod
    def from_shape(cls, shape: Tuple[int, ...]) -> "Rectangle":
        """Rectangle covering a whole image of the given numpy shape."""
        return cls(0, 0, shape[1], shape[0])

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def intersection(self, other: "Rectangle") -> Optional["Rectangle"]:
        """
        Overlap of two rectangles.

        Returns:
            The shared region, or None if the rectangles do not overlap
        """
        x0 = max(self.x, other.x)
        y0 = max(self.y, other.y)
        x1 = min(self.right, other.right)
        y1 = min(self.bottom, other.bottom)

        if x1 <= x0 or y1 <= y0:
            return None

        return Rectangle(x0, y0, x1 - x0, y1 - y0)

    def clip(self, shape: Tuple[int, ...]) -> Optional["Rectangle"]:
        """Clip to the bounds of an image with the given numpy shape."""
        return self.intersection(Rectangle.from_shape(shape))

    def quadrants(self) -> List["Rectangle"]:
        """
        Split into four quadrants in raster order.

        Odd sizes put the extra row/column in the bottom/right quadrants, so
        the children always tile the parent exactly.
        """
        half_w = self.width // 2
        half_h = self.height // 2
        xs = [(self.x, half_w), (self.x + half_w, self.width - half_w)]
        ys = [(self.y, half_h), (self.y + half_h, self.height - half_h)]

        return [Rectangle(x, y, w, h) for y, h in ys for x, w in xs]

    def slices(self) -> Tuple[slice, slice]:
        """Numpy (row, column) slices selecting this rectangle."""
        return slice(self.y, self.bottom), slice(self.x, self.right)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height

    def __eq__(self, other):
        if not isinstance(other, Rectangle):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self):
        return hash(self.as_tuple())

    def __repr__(self):
        return f"Rectangle(x={self.x}, y={self.y}, width={self.width}, height={self.height})"
