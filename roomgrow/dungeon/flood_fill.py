"""Iterative 4-directional flood fill with an optional one-cell safety margin.

A "roomy" fill only accepts a cell when its whole 3x3 neighborhood is already
fillable (test color) or filled (fill color). That keeps the fill from
squeezing through 1-pixel walls or between two wall segments touching only at
a corner, and leaves a one-cell wall ring around every filled region.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .cells import NEIGHBORS_8, Point, Rect
from .colors import Color
from .surface import RasterSurface

_FILL_DIRS = ((1, 0), (-1, 0), (0, 1), (0, -1))


class FloodFill:
    def __init__(
        self,
        surface: RasterSurface,
        fill_color: Color,
        test_color: Optional[Color] = None,
        roomy: bool = False,
    ):
        if test_color is not None and test_color == fill_color:
            raise ValueError("fill_color must differ from test_color or the fill never terminates")
        if test_color is None and fill_color.alpha == 0:
            raise ValueError("fill_color must be opaque when filling clear space")
        self.surface = surface
        self.fill_color = fill_color
        self.test_color = test_color
        self.roomy = roomy
        self._passing = (test_color, fill_color) if test_color is not None else None
        self._stack: List[Tuple[int, int]] = []

    def test_point(self, x: int, y: int) -> bool:
        surface = self.surface
        if self.test_color is not None:
            if not surface.check_color(x, y, self.test_color):
                return False
            if self.roomy:
                passing = self._passing
                return all(surface.check_color(x + dx, y + dy, passing) for dx, dy in NEIGHBORS_8)
            return True

        if not surface.is_clear(x, y):
            return False
        if self.roomy:
            return all(surface.is_clear(x + dx, y + dy) for dx, dy in NEIGHBORS_8)
        return True

    def find_suitable_fill_start_point(self, rect: Rect) -> Optional[Point]:
        """Scan ``rect`` row-major and return the first point passing :meth:`test_point`."""
        x0, y0, w, h = rect
        for y in range(y0, y0 + h):
            for x in range(x0, x0 + w):
                if self.test_point(x, y):
                    return Point(x, y)
        return None

    def fill(self, x: int, y: int) -> int:
        """Run the fill to completion; returns the number of points popped."""
        self.start_fill(x, y)
        steps = 0
        while self.step_fill():
            steps += 1
        return steps

    def start_fill(self, x: int, y: int) -> None:
        self._stack = [(x, y)]

    def step_fill(self) -> bool:
        if not self._stack:
            return False
        x, y = self._stack.pop()
        surface = self.surface
        surface.set_pixel(x, y, self.fill_color)
        width, height = surface.width, surface.height
        for dx, dy in _FILL_DIRS:
            cx, cy = x + dx, y + dy
            if 0 <= cx < width and 0 <= cy < height and self.test_point(cx, cy):
                self._stack.append((cx, cy))
        return True


__all__ = ["FloodFill"]
