"""Pipeline orchestration for dungeon generation.

``DungeonBuilder`` owns the raster for the duration of a build and runs the
phases in order:

    * seed: plant one RoomGrower per accepted grid point
    * grow: step every grower, in registration order, until none is active
    * prune: drop growers that never planted a root box
    * adjacency: record which colors touch each room (before floors repaint)
    * floors: roomy flood fill of each room's wall color with floor color
    * doors: carve one door per adjacent room pair

Growth can run to completion with :meth:`generate_rooms`, or one tick at a
time with :meth:`advance` for callers that want to render intermediate
frames. Each tick only reads raster state committed by earlier ticks, so both
paths end in the same raster.
"""

from __future__ import annotations

import math
import random
import time
from typing import Callable, Dict, List, Optional

from ..logging_utils import get_logger
from .cells import round_half_up
from .colors import FLOOR_COLOR, RESERVED_KEYS, VOID_COLOR, Color
from .config import DungeonConfig
from .connectivity import RoomConnectivityTable
from .doors import Door, carve_door, find_door_candidates, pick_door_candidate
from .flood_fill import FloodFill
from .metrics import init_metrics
from .rooms import UNBOUNDED_SEEDS, RoomGrower
from .surface import RasterSurface

Rng = Callable[[], float]

log = get_logger("roomgrow.dungeon")

# Build phases
SEEDING = "seeding"
GROWING = "growing"
DONE = "done"


class DungeonBuilder:
    def __init__(
        self,
        surface: RasterSurface,
        config: Optional[DungeonConfig] = None,
        *,
        void_color: Color = VOID_COLOR,
        floor_color: Color = FLOOR_COLOR,
    ):
        self.surface = surface
        self.config = config or DungeonConfig(width=surface.width, height=surface.height)
        self.void_color = void_color
        self.floor_color = floor_color
        # Arena of live rooms in registration order, plus auxiliary indexes into it.
        self.rooms: List[RoomGrower] = []
        self.rooms_by_id: Dict[int, RoomGrower] = {}
        self.room_ids_by_color: Dict[int, int] = {}
        self.connectivity = RoomConnectivityTable()
        self.doors: List[Door] = []
        self.metrics = init_metrics()
        self.phase = SEEDING
        self.tick_count = 0
        self._next_room_id = 0
        self._started: Optional[float] = None
        self.log = log.bind(seed=self.config.seed)

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------
    def seed(
        self,
        step: float,
        wiggle: float,
        frequency: float,
        rng: Optional[Rng] = None,
        x: int = 0,
        y: int = 0,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> int:
        """Plant room growers on a jittered grid; returns how many took root.

        Every accepted, clear grid point draws two jitter values even when
        ``wiggle`` is zero, so the rng sequence depends only on acceptance.
        """
        if rng is None:
            rng = random.Random(self.config.seed).random
        surface = self.surface
        width = min(width or surface.width, surface.width)
        height = min(height or surface.height, surface.height)
        frequency = min(max(frequency, 0.0), 1.0)
        step = max(int(math.floor(step)), 1)
        wiggle = max(wiggle, 0.0)
        if self._started is None:
            self._started = time.perf_counter()

        planted = 0
        for sy in range(y, y + height, step):
            for sx in range(x, x + width, step):
                accept = (rng() < frequency) if frequency < 1 else True
                if not accept or not surface.is_clear(sx, sy):
                    continue
                self.metrics["seed_attempts"] += 1
                color = self._unique_room_color(sx, sy, width, height)
                box_x = round_half_up(sx + (rng() * 2 - 1) * wiggle)
                box_y = round_half_up(sy + (rng() * 2 - 1) * wiggle)
                room = RoomGrower(
                    surface,
                    self._next_room_id,
                    color,
                    box_x,
                    box_y,
                    UNBOUNDED_SEEDS,
                    decrement_seed_count_for_children=self.config.decrement_seed_count_for_children,
                    decrement_seed_count_for_parent=self.config.decrement_seed_count_for_parent,
                )
                if room.root_box is not None:
                    self._register(room)
                    planted += 1

        self.metrics["rooms_seeded"] += planted
        if self.rooms:
            self.phase = GROWING
        self.log.debug(event="dungeon_seeded", step=step, wiggle=wiggle, frequency=frequency, planted=planted)
        return planted

    def _register(self, room: RoomGrower) -> None:
        self._next_room_id += 1
        self.rooms.append(room)
        self.rooms_by_id[room.id] = room
        self.room_ids_by_color[room.color.key] = room.id

    def _unique_room_color(self, sx: int, sy: int, width: int, height: int) -> Color:
        """Color derived from the normalized seed position, nudged along blue on collision."""
        red = round_half_up(256 * sx / width)
        green = round_half_up(256 * sy / height)
        color = Color.clamped(red, green, 128)
        if color.key not in self.room_ids_by_color:
            return color
        self.metrics["color_collisions"] += 1
        for offset in range(1, 256):
            candidate = Color(color.red, color.green, (128 + offset) % 256, 255)
            key = candidate.key
            if key not in self.room_ids_by_color and key not in RESERVED_KEYS:
                return candidate
        # All 256 blues taken at this red/green; walk green instead.
        for g in range(256):
            for b in range(256):
                candidate = Color(color.red, g, b, 255)
                if candidate.key not in self.room_ids_by_color and candidate.key not in RESERVED_KEYS:
                    return candidate
        raise RuntimeError("exhausted wall colors")  # pragma: no cover - needs 65k rooms in one column

    # ------------------------------------------------------------------
    # Growth
    # ------------------------------------------------------------------
    def advance(self) -> bool:
        """Run one growth tick. Returns True while more ticks are needed.

        The tick that finds every grower at its fixed point also runs pruning,
        adjacency, floors and doors, after which :meth:`done` is True.
        """
        if self.phase == DONE:
            return False
        if self._started is None:
            self._started = time.perf_counter()
        running = False
        for room in self.rooms:
            if room.step():
                running = True
        self.tick_count += 1
        if running:
            return True
        self.finalize()
        return False

    def done(self) -> bool:
        return self.phase == DONE

    def active_room_count(self) -> int:
        return sum(1 for r in self.rooms if r.active)

    def generate_rooms(self) -> None:
        """Grow every room to its fixed point, then finalize."""
        while self.advance():
            pass

    def finalize(self) -> None:
        if self.phase == DONE:
            return
        self.prune_rooms()
        self.compute_adjacency()
        self.fill_floors()
        self.create_doors()
        self.phase = DONE
        self.metrics["ticks"] = self.tick_count
        self.metrics["rooms"] = len(self.rooms)
        if self._started is not None:
            self.metrics["runtime_ms"] = round((time.perf_counter() - self._started) * 1000.0, 3)
        self.log.info(
            event="dungeon_built",
            width=self.surface.width,
            height=self.surface.height,
            rooms=len(self.rooms),
            doors=len(self.doors),
            ticks=self.tick_count,
            runtime_ms=self.metrics["runtime_ms"],
        )

    def prune_rooms(self) -> None:
        kept = [r for r in self.rooms if r.bounding_box() is not None and r.initial_seed is not None]
        pruned = len(self.rooms) - len(kept)
        if pruned:
            for room in self.rooms:
                if room not in kept:
                    self.rooms_by_id.pop(room.id, None)
                    self.room_ids_by_color.pop(room.color.key, None)
            self.rooms = kept
        self.metrics["rooms_pruned"] += pruned

    def compute_adjacency(self) -> None:
        for room in self.rooms:
            room.compute_adjacent_color_keys()

    def fill_floors(self) -> None:
        for room in self.rooms:
            ff = FloodFill(self.surface, self.floor_color, room.color, roomy=True)
            start = ff.find_suitable_fill_start_point(room.root_box.rect())
            if start is None:
                self.metrics["rooms_without_floor"] += 1
                continue
            ff.fill(start.x, start.y)

    # ------------------------------------------------------------------
    # Adjacency / doors
    # ------------------------------------------------------------------
    def room_for_color(self, color_key: int) -> Optional[RoomGrower]:
        room_id = self.room_ids_by_color.get(color_key)
        if room_id is None:
            return None
        return self.rooms_by_id.get(room_id)

    def rooms_touching_room(self, room: RoomGrower) -> List[RoomGrower]:
        touching = []
        for key in sorted(room.adjacent_color_keys or ()):
            other = self.room_for_color(key)
            if other is not None:
                touching.append(other)
        return touching

    def are_rooms_neighbors(self, room_a: RoomGrower, room_b: RoomGrower) -> bool:
        """Both rooms list each other's color among their adjacent colors."""
        a_keys = room_a.adjacent_color_keys or ()
        b_keys = room_b.adjacent_color_keys or ()
        return room_b.color.key in a_keys and room_a.color.key in b_keys

    def are_rooms_connected(self, room_a: RoomGrower, room_b: RoomGrower) -> bool:
        return self.connectivity.are_connected(room_a.id, room_b.id)

    def mark_door_connecting_rooms(self, room_a: RoomGrower, room_b: RoomGrower) -> bool:
        if not self.are_rooms_neighbors(room_a, room_b):
            self.metrics["doors_rejected"] += 1
            self.log.warn(
                event="door_rejected",
                reason="rooms_not_mutual_neighbors",
                room_a=room_a.id,
                room_b=room_b.id,
                color_a=room_a.color.hash,
                color_b=room_b.color.hash,
            )
            return False
        return self.connectivity.mark(room_a.id, room_b.id)

    def create_doors(self) -> None:
        for room in self.rooms:
            self.create_doors_for_room(room)

    def create_doors_for_room(self, room: RoomGrower) -> List[Door]:
        created = []
        candidates_by_color = find_door_candidates(self.surface, room, self.floor_color, self.void_color)
        for color_key, candidates in candidates_by_color.items():
            other = self.room_for_color(color_key)
            # rays can end on clear cells or unregistered colors
            if other is None or other is room:
                continue
            if self.are_rooms_connected(room, other):
                continue
            candidate = pick_door_candidate(candidates)
            cells = carve_door(self.surface, candidate, self.floor_color)
            door = Door(room.id, other.id, candidate.x, candidate.y, candidate.direction, cells)
            self.doors.append(door)
            created.append(door)
            self.metrics["doors_created"] += 1
            # A rejected pair keeps its door; only the connectivity entry is skipped.
            self.mark_door_connecting_rooms(room, other)
        return created


__all__ = ["DungeonBuilder", "SEEDING", "GROWING", "DONE"]
