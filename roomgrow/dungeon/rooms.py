"""Room growth: a room is a set of boxes sharing one wall color.

Each box starts as a single seeded cell and expands one cell per step in every
cardinal direction whose full adjoining edge is still clear. Once a box can no
longer grow it plants child boxes on the clear cells around its perimeter,
which lets a room flow around obstacles and into leftover gaps. Collision
with other rooms falls out of the clear test: painted cells are never clear.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import List, Optional, Set

from .cells import Point, Rect, round_half_up
from .colors import Color
from .surface import RasterSurface

UNBOUNDED_SEEDS = sys.maxsize


@dataclass
class Box:
    x: int
    y: int
    width: int = 1
    height: int = 1
    done: bool = False
    seed_count: int = UNBOUNDED_SEEDS
    depth: int = 0

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


class RoomGrower:
    def __init__(
        self,
        surface: RasterSurface,
        room_id: int,
        color: Color,
        x: Optional[float] = None,
        y: Optional[float] = None,
        seed_count: Optional[int] = None,
        *,
        decrement_seed_count_for_children: bool = False,
        decrement_seed_count_for_parent: bool = True,
    ):
        self.id = room_id
        self.surface = surface
        self.color = color
        self.boxes: List[Box] = []
        self.initial_seed: Optional[Point] = None
        # colors touching this room (void, clear, or other rooms); filled by compute_adjacent_color_keys
        self.adjacent_color_keys: Optional[Set[int]] = None
        # Children inherit one fewer seed: sparser fill of leftover space.
        self.decrement_seed_count_for_children = decrement_seed_count_for_children
        # Parent spends a seed per child: tends toward diagonal wall junctions between rooms.
        self.decrement_seed_count_for_parent = decrement_seed_count_for_parent
        if x is not None and y is not None:
            self.seed(x, y, seed_count if seed_count else UNBOUNDED_SEEDS, 0)

    # ------------------------------------------------------------------
    @property
    def root_box(self) -> Optional[Box]:
        return self.boxes[0] if self.boxes else None

    @property
    def active(self) -> bool:
        return any(not b.done for b in self.boxes)

    def seed(self, x: float, y: float, seed_count: int, depth: int = 0) -> bool:
        x = round_half_up(x)
        y = round_half_up(y)
        if not self.surface.is_clear(x, y):
            return False
        box = Box(x, y, 1, 1, False, seed_count, depth)
        self.surface.set_pixel(x, y, self.color)
        self.boxes.append(box)
        if self.initial_seed is None:
            self.initial_seed = Point(x, y)
        return True

    def step(self) -> bool:
        """Advance growth one tick. Returns True while any box can still grow."""
        for box in self.boxes:
            if box.done:
                continue
            north = self.grow_north(box)
            south = self.grow_south(box)
            east = self.grow_east(box)
            west = self.grow_west(box)
            if not (north or south or east or west):
                box.done = True

        # Boxes planted here are appended mid-iteration; they start undone and are skipped.
        for box in self.boxes:
            if box.done:
                self.plant_seeds_around_perimeter(box)

        return self.active

    # ------------------------------------------------------------------
    # Growth
    # ------------------------------------------------------------------
    def grow_north(self, box: Box) -> bool:
        is_clear = self.surface.is_clear
        y = box.y - 1
        for x in range(box.x, box.right):
            if not is_clear(x, y):
                return False
        box.y -= 1
        box.height += 1
        self.surface.fill_rect(box.x, box.y, box.width, 1, self.color)
        return True

    def grow_south(self, box: Box) -> bool:
        is_clear = self.surface.is_clear
        y = box.bottom
        for x in range(box.x, box.right):
            if not is_clear(x, y):
                return False
        box.height += 1
        self.surface.fill_rect(box.x, y, box.width, 1, self.color)
        return True

    def grow_east(self, box: Box) -> bool:
        is_clear = self.surface.is_clear
        x = box.right
        for y in range(box.y, box.bottom):
            if not is_clear(x, y):
                return False
        box.width += 1
        self.surface.fill_rect(x, box.y, 1, box.height, self.color)
        return True

    def grow_west(self, box: Box) -> bool:
        is_clear = self.surface.is_clear
        x = box.x - 1
        for y in range(box.y, box.bottom):
            if not is_clear(x, y):
                return False
        box.x -= 1
        box.width += 1
        self.surface.fill_rect(box.x, box.y, 1, box.height, self.color)
        return True

    # ------------------------------------------------------------------
    # Reseeding
    # ------------------------------------------------------------------
    def plant_seeds_around_perimeter(self, box: Box) -> None:
        if box.seed_count <= 0:
            return
        child_seed_count = box.seed_count
        if self.decrement_seed_count_for_children:
            child_seed_count -= 1
        depth = box.depth + 1

        # Walk top/bottom rows, then left/right columns; corners are not visited.
        candidates = []
        for x in range(box.x, box.right):
            candidates.append((x, box.y - 1))
            candidates.append((x, box.bottom))
        for y in range(box.y, box.bottom):
            candidates.append((box.x - 1, y))
            candidates.append((box.right, y))

        for cx, cy in candidates:
            if not self.surface.is_clear(cx, cy):
                continue
            if self.seed(cx, cy, child_seed_count, depth) and self.decrement_seed_count_for_parent:
                box.seed_count -= 1
                if box.seed_count <= 0:
                    return

    # ------------------------------------------------------------------
    # Geometry / adjacency
    # ------------------------------------------------------------------
    def bounding_box(self) -> Optional[Rect]:
        if not self.boxes:
            return None
        left = min(b.x for b in self.boxes)
        top = min(b.y for b in self.boxes)
        right = max(b.right for b in self.boxes)
        bottom = max(b.bottom for b in self.boxes)
        return Rect(left, top, right - left, bottom - top)

    def compute_adjacent_color_keys(self) -> Set[int]:
        """Record every color key within one cell of the bounding box other than our own.

        Must run after growth converges and before floors repaint room interiors.
        """
        keys: Set[int] = set()
        bounds = self.bounding_box()
        if bounds is not None:
            own = self.color
            get_pixel = self.surface.get_pixel
            for y in range(bounds.y - 1, bounds.bottom + 1):
                for x in range(bounds.x - 1, bounds.right + 1):
                    px = get_pixel(x, y)
                    if px is not None and px != own:
                        keys.add(px.key)
        self.adjacent_color_keys = keys
        return keys

    def __repr__(self) -> str:
        return f"RoomGrower(id={self.id}, color={self.color.hash}, boxes={len(self.boxes)})"


__all__ = ["Box", "RoomGrower", "UNBOUNDED_SEEDS"]
