"""Structural checks over a finished build.

Used by ``scripts/diagnose_seeds.py`` and the test-suite to spot regressions in
growth (unclaimed gaps next to rooms) and door carving (duplicate pairs, doors
that did not open onto floor, marked pairs missing from the connectivity table).
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from .cells import CARDINAL_DIRECTIONS
from .pipeline import DungeonBuilder


def unclaimed_cells(builder: DungeonBuilder) -> List[Tuple[int, int]]:
    """Clear cells with a room-colored 4-neighbor; growth should have claimed them."""
    surface = builder.surface
    room_keys = set(builder.room_ids_by_color)
    found = []
    for x, y, px in surface.iter_cells():
        if not px.is_clear:
            continue
        for dx, dy in CARDINAL_DIRECTIONS:
            other = surface.get_pixel(x + dx, y + dy)
            if other is not None and other.key in room_keys:
                found.append((x, y))
                break
    return found


def analyze(builder: DungeonBuilder) -> Dict[str, Any]:
    if not builder.done():
        raise ValueError("analyze() needs a finished build")
    seen_pairs = set()
    duplicate_pairs = []
    non_adjacent = []
    unopened = []
    for door in builder.doors:
        pair = tuple(sorted((door.room_id, door.neighbor_id)))
        room = builder.rooms_by_id.get(door.room_id)
        other = builder.rooms_by_id.get(door.neighbor_id)
        if room is None or other is None or not builder.are_rooms_neighbors(room, other):
            # carved but never marked, e.g. a ray that crossed void
            non_adjacent.append(pair)
        else:
            if pair in seen_pairs:
                duplicate_pairs.append(pair)
            seen_pairs.add(pair)
        if any(not builder.surface.check_color(x, y, builder.floor_color) for x, y in door.cells):
            unopened.append(pair)

    neighbor_pairs = set()
    for room in builder.rooms:
        for other in builder.rooms_touching_room(room):
            if builder.are_rooms_neighbors(room, other):
                neighbor_pairs.add(tuple(sorted((room.id, other.id))))

    return {
        "unclaimed_cells": unclaimed_cells(builder),
        "duplicate_door_pairs": duplicate_pairs,
        # informational: doors between rooms that are not mutual neighbors
        "non_adjacent_door_pairs": non_adjacent,
        "unopened_doors": unopened,
        # informational: neighbors whose shared wall offered no door ray
        "neighbors_without_door": sorted(neighbor_pairs - seen_pairs),
        "connected_pairs": len(builder.connectivity),
        "marked_door_pairs": len(seen_pairs),
        "doors": len(builder.doors),
    }


def is_healthy(report: Dict[str, Any]) -> bool:
    return not (
        report["unclaimed_cells"]
        or report["duplicate_door_pairs"]
        or report["unopened_doors"]
        or report["marked_door_pairs"] != report["connected_pairs"]
    )


__all__ = ["analyze", "is_healthy", "unclaimed_cells"]
