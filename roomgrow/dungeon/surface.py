"""Bounded RGBA pixel grid consumed by the room growers, flood fill and door carver.

The grid is stored column-major (``pixels[x][y]``), consistent with the rest of
the dungeon package. Out of bounds reads return ``None`` rather than raising;
out of bounds cells are treated as occupied by every occupancy test.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence, Union

from .colors import CLEAR_COLOR, VOID_COLOR, Color

ColorOrColors = Union[Color, Sequence[Color]]


class RasterSurface:
    __slots__ = ("width", "height", "pixels")

    def __init__(self, width: int, height: int, fill: Color = CLEAR_COLOR):
        width = int(width)
        height = int(height)
        if width <= 0 or height <= 0:
            raise ValueError(f"surface dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels: List[List[Color]] = [[fill for _ in range(height)] for _ in range(width)]

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_mask(cls, rows: Sequence[str], blocked: str = "#") -> "RasterSurface":
        """Build a surface from text rows; ``blocked`` characters become void, the rest clear.

        Short rows are padded with clear cells to the width of the longest row.
        """
        if not rows:
            raise ValueError("mask must contain at least one row")
        width = max(len(r) for r in rows)
        surface = cls(width, len(rows))
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                if ch in blocked:
                    surface.pixels[x][y] = VOID_COLOR
        return surface

    def copy(self) -> "RasterSurface":
        dup = RasterSurface.__new__(RasterSurface)
        dup.width = self.width
        dup.height = self.height
        dup.pixels = [list(col) for col in self.pixels]
        return dup

    # ------------------------------------------------------------------
    # Pixel access
    # ------------------------------------------------------------------
    def get_pixel(self, x: int, y: int) -> Optional[Color]:
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return None
        return self.pixels[x][y]

    def set_pixel(self, x: int, y: int, color: Color) -> bool:
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return False
        self.pixels[x][y] = color
        return True

    def fill_rect(self, x: int, y: int, width: int, height: int, color: Color) -> bool:
        left = min(max(x, 0), self.width)
        right = min(max(x + width, 0), self.width)
        top = min(max(y, 0), self.height)
        bottom = min(max(y + height, 0), self.height)
        if left >= right or top >= bottom:
            return False
        for ix in range(left, right):
            column = self.pixels[ix]
            for iy in range(top, bottom):
                column[iy] = color
        return True

    def clear_rect(self, x: int, y: int, width: int, height: int) -> bool:
        return self.fill_rect(x, y, width, height, CLEAR_COLOR)

    # ------------------------------------------------------------------
    # Occupancy / color tests
    # ------------------------------------------------------------------
    def is_clear(self, x: int, y: int) -> bool:
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return False
        return self.pixels[x][y].alpha == 0

    def check_color(self, x: int, y: int, colors: ColorOrColors) -> bool:
        """Return True iff the pixel at x,y equals ``colors`` (or any color in it)."""
        px = self.get_pixel(x, y)
        if px is None:
            return False
        if isinstance(colors, Color):
            return px == colors
        return px in colors

    def check_rect_color(self, x: int, y: int, width: int, height: int, colors: ColorOrColors) -> bool:
        for iy in range(y, y + height):
            for ix in range(x, x + width):
                if not self.check_color(ix, iy, colors):
                    return False
        return True

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    def iter_cells(self) -> Iterable[tuple]:
        """Yield ``(x, y, color)`` in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield x, y, self.pixels[x][y]

    def color_counts(self) -> Dict[Color, int]:
        counts: Counter = Counter()
        for column in self.pixels:
            counts.update(column)
        return dict(counts)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RasterSurface):
            return NotImplemented
        return self.width == other.width and self.height == other.height and self.pixels == other.pixels

    def __repr__(self) -> str:
        return f"RasterSurface({self.width}x{self.height})"


__all__ = ["RasterSurface", "ColorOrColors"]
