"""Door discovery and carving between floor-filled rooms.

After floors are painted each room is a floor region wrapped in its own wall
color. A door candidate is a floor cell on that boundary from which a short
cardinal ray crosses our wall, then a foreign room's wall, and lands on floor
again. Candidates are grouped by the foreign wall color so exactly one can be
picked per neighbor.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from .cells import CARDINAL_DIRECTIONS, DIRECTION_NAMES, EAST, NORTH, SOUTH, WEST
from .colors import Color
from .rooms import RoomGrower
from .surface import RasterSurface

# Longest ray (in cells, including the starting floor cell) a door may span.
DOOR_RAY_LENGTH = 6

# Order matters: candidates are listed in this order at each perimeter cell.
_PERIMETER_DIRECTIONS = (WEST, NORTH, EAST, SOUTH)


@dataclass
class DoorCandidate:
    x: int
    y: int
    direction: int


@dataclass
class Door:
    room_id: int
    neighbor_id: int
    x: int
    y: int
    direction: int
    cells: List[Tuple[int, int]] = field(default_factory=list)

    def to_dict(self):
        return {
            "rooms": [self.room_id, self.neighbor_id],
            "x": self.x,
            "y": self.y,
            "direction": DIRECTION_NAMES[self.direction],
            "cells": [list(c) for c in self.cells],
        }


def walk_room_perimeter(surface: RasterSurface, room: RoomGrower, floor_color: Color) -> Iterator[DoorCandidate]:
    """Yield (x, y, direction) for each floor cell with a wall-colored cardinal neighbor.

    Cells are visited row-major within the room's bounding box; at each cell the
    directions are tried West, North, East, South.
    """
    bounds = room.bounding_box()
    if bounds is None:
        return
    wall = room.color
    check = surface.check_color
    for y in range(bounds.y, bounds.bottom):
        for x in range(bounds.x, bounds.right):
            if not check(x, y, floor_color):
                continue
            for direction in _PERIMETER_DIRECTIONS:
                dx, dy = CARDINAL_DIRECTIONS[direction]
                if check(x + dx, y + dy, wall):
                    yield DoorCandidate(x, y, direction)


def cast_door_ray(
    surface: RasterSurface,
    candidate: DoorCandidate,
    wall_color: Color,
    floor_color: Color,
    void_color: Color,
):
    """Return the neighbor color key reached by this ray, or None.

    The first cell that is neither floor, our wall, nor void names the neighbor;
    the ray only counts if floor follows it before the ray runs out.
    """
    dx, dy = CARDINAL_DIRECTIONS[candidate.direction]
    neighbor = None
    for i in range(DOOR_RAY_LENGTH):
        px = surface.get_pixel(candidate.x + i * dx, candidate.y + i * dy)
        if px is None:
            continue
        if neighbor is None:
            if px != floor_color and px != wall_color and px != void_color:
                neighbor = px.key
        elif px == floor_color:
            return neighbor
    return None


def find_door_candidates(
    surface: RasterSurface,
    room: RoomGrower,
    floor_color: Color,
    void_color: Color,
) -> Dict[int, List[DoorCandidate]]:
    """Group door candidates around ``room`` by neighbor color key, in discovery order."""
    by_neighbor: Dict[int, List[DoorCandidate]] = {}
    for candidate in walk_room_perimeter(surface, room, floor_color):
        key = cast_door_ray(surface, candidate, room.color, floor_color, void_color)
        if key is not None:
            by_neighbor.setdefault(key, []).append(candidate)
    return by_neighbor


def pick_door_candidate(candidates: List[DoorCandidate]) -> DoorCandidate:
    """Median by list order, favoring the middle of a shared wall over its ends."""
    return candidates[len(candidates) // 2]


def carve_door(surface: RasterSurface, candidate: DoorCandidate, floor_color: Color) -> List[Tuple[int, int]]:
    """Paint floor along the candidate's ray until the far floor is reached.

    Returns the cells that changed color.
    """
    dx, dy = CARDINAL_DIRECTIONS[candidate.direction]
    carved = []
    for i in range(DOOR_RAY_LENGTH):
        tx, ty = candidate.x + i * dx, candidate.y + i * dy
        if i > 0 and surface.check_color(tx, ty, floor_color):
            break
        px = surface.get_pixel(tx, ty)
        if px is not None and px != floor_color:
            carved.append((tx, ty))
        surface.set_pixel(tx, ty, floor_color)
    return carved


__all__ = [
    "DOOR_RAY_LENGTH",
    "Door",
    "DoorCandidate",
    "walk_room_perimeter",
    "cast_door_ray",
    "find_door_candidates",
    "pick_door_candidate",
    "carve_door",
]
