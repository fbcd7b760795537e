"""RGBA colors used to mark raster occupancy.

A cell is "clear" when its alpha is zero, regardless of RGB. Rooms are told
apart purely by wall color, so colors double as identifiers on the raster and
need a cheap, hashable key.
"""

from __future__ import annotations

from typing import NamedTuple


def _clamp_channel(value) -> int:
    return int(min(max(value, 0), 255))


class Color(NamedTuple):
    red: int
    green: int
    blue: int
    alpha: int = 255

    @classmethod
    def clamped(cls, red, green, blue, alpha=255) -> "Color":
        return cls(_clamp_channel(red), _clamp_channel(green), _clamp_channel(blue), _clamp_channel(alpha))

    @classmethod
    def from_key(cls, key: int) -> "Color":
        return cls((key >> 24) & 0xFF, (key >> 16) & 0xFF, (key >> 8) & 0xFF, key & 0xFF)

    @property
    def key(self) -> int:
        """Packed 0xRRGGBBAA integer, stable across runs."""
        return (self.red << 24) | (self.green << 16) | (self.blue << 8) | self.alpha

    @property
    def hash(self) -> str:
        return f"{self.red}-{self.green}-{self.blue}-{self.alpha}"

    @property
    def is_clear(self) -> bool:
        return self.alpha == 0

    def to_dict(self):
        return {
            "red": self.red,
            "green": self.green,
            "blue": self.blue,
            "alpha": self.alpha,
            "hash": self.hash,
        }


CLEAR_COLOR = Color(0, 0, 0, 0)
VOID_COLOR = Color(0, 0, 0, 255)
FLOOR_COLOR = Color(255, 255, 255, 255)
RESERVED_KEYS = frozenset({VOID_COLOR.key, FLOOR_COLOR.key})

__all__ = ["Color", "CLEAR_COLOR", "VOID_COLOR", "FLOOR_COLOR", "RESERVED_KEYS"]
