"""Public dungeon package interface."""

from .colors import CLEAR_COLOR, FLOOR_COLOR, VOID_COLOR, Color  # noqa: F401
from .config import DungeonConfig  # noqa: F401
from .connectivity import RoomConnectivityTable  # noqa: F401
from .dungeon import Dungeon, RoomInfo, RoomSummary, build, prepare_build, room_info  # noqa: F401
from .flood_fill import FloodFill  # noqa: F401
from .pipeline import DungeonBuilder  # noqa: F401
from .rooms import Box, RoomGrower  # noqa: F401
from .surface import RasterSurface  # noqa: F401
from .tiles import CLEAR, DOOR, FLOOR, VOID, WALL  # noqa: F401

__all__ = [
    "Box",
    "CLEAR",
    "CLEAR_COLOR",
    "Color",
    "DOOR",
    "Dungeon",
    "DungeonBuilder",
    "DungeonConfig",
    "FLOOR",
    "FLOOR_COLOR",
    "FloodFill",
    "RasterSurface",
    "RoomConnectivityTable",
    "RoomGrower",
    "RoomInfo",
    "RoomSummary",
    "VOID",
    "VOID_COLOR",
    "WALL",
    "build",
    "prepare_build",
    "room_info",
]
