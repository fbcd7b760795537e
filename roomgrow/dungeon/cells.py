import math
from typing import NamedTuple, Tuple


class Rect(NamedTuple):
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def to_dict(self):
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


class Point(NamedTuple):
    x: int
    y: int


# Cardinal directions, indexes into CARDINAL_DIRECTIONS
NORTH = 0
EAST = 1
SOUTH = 2
WEST = 3
CARDINAL_DIRECTIONS: Tuple[Tuple[int, int], ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))
DIRECTION_NAMES = ("north", "east", "south", "west")

# 3x3 neighborhood minus the center
NEIGHBORS_8 = ((-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward +infinity (not banker's rounding)."""
    return int(math.floor(value + 0.5))


__all__ = [
    "Rect",
    "Point",
    "NORTH",
    "EAST",
    "SOUTH",
    "WEST",
    "CARDINAL_DIRECTIONS",
    "DIRECTION_NAMES",
    "NEIGHBORS_8",
    "round_half_up",
]
