"""Dungeon build entry point.

High-level generation phases (see ``pipeline.DungeonBuilder``):
    * Plant one room seed per grid point (optionally jittered / thinned).
    * Grow every room as a set of rectangles until they fill the open space.
    * Flood each room's interior with floor, keeping a one-cell wall ring.
    * Carve a single door through the shared wall of each pair of touching rooms.

Public contract consumed elsewhere:
    build(map_spec, **options) -> (surface, RoomInfo)
    prepare_build(map_spec, **options) -> seeded DungeonBuilder (call advance() until False)
    Dungeon(config | seed=..., size=(W, H)) for a built object with surface, info, metrics, rows()

``map_spec`` is a RasterSurface (void pixels block growth, clear pixels are
open), a ``(width, height)`` pair, or anything with ``width``/``height``.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .cells import Rect
from .colors import Color
from .config import DungeonConfig, clamp_room_grid_size, coerce_frequency, grid_step
from .doors import Door
from .pipeline import DungeonBuilder
from .surface import RasterSurface
from .tiles import surface_to_rows


@dataclass
class RoomSummary:
    id: int
    color: Color
    bounds: Rect

    def to_dict(self):
        return {"id": self.id, "color": self.color.to_dict(), "bounds": self.bounds.to_dict()}


@dataclass
class RoomInfo:
    floor_color: Color
    void_color: Color
    rooms: List[RoomSummary] = field(default_factory=list)
    doors: List[Door] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self):
        return {
            "floorColor": self.floor_color.to_dict(),
            "voidColor": self.void_color.to_dict(),
            "rooms": [r.to_dict() for r in self.rooms],
            "doors": [d.to_dict() for d in self.doors],
            "metrics": dict(self.metrics),
        }


def resolve_surface(map_spec) -> RasterSurface:
    if isinstance(map_spec, RasterSurface):
        return map_spec
    if isinstance(map_spec, Mapping):
        return RasterSurface(map_spec["width"], map_spec["height"])
    if isinstance(map_spec, (tuple, list)) and len(map_spec) >= 2:
        return RasterSurface(map_spec[0], map_spec[1])
    if hasattr(map_spec, "width") and hasattr(map_spec, "height"):
        return RasterSurface(map_spec.width, map_spec.height)
    raise ValueError(f"unsupported map spec: {map_spec!r}")


def _resolve_config(map_spec, config, room_grid_size, wiggle, frequency, seed) -> Tuple[DungeonConfig, RasterSurface]:
    if config is None:
        config = DungeonConfig()
    if map_spec is None:
        map_spec = (config.width, config.height)
    surface = resolve_surface(map_spec)
    cfg = DungeonConfig(
        width=surface.width,
        height=surface.height,
        room_grid_size=config.room_grid_size if room_grid_size is None else room_grid_size,
        wiggle=config.wiggle if wiggle is None else wiggle,
        frequency=config.frequency if frequency is None else frequency,
        seed=config.seed if seed is None else seed,
        decrement_seed_count_for_children=config.decrement_seed_count_for_children,
        decrement_seed_count_for_parent=config.decrement_seed_count_for_parent,
    ).normalized()
    if cfg.seed is None:
        cfg.seed = random.randint(0, 2**31 - 1)
    return cfg, surface


def prepare_build(
    map_spec=None,
    *,
    room_grid_size: Optional[int] = None,
    wiggle: Optional[float] = None,
    frequency: Optional[float] = None,
    rng: Optional[Callable[[], float]] = None,
    seed: Optional[int] = None,
    config: Optional[DungeonConfig] = None,
) -> DungeonBuilder:
    """Return a seeded builder; drive it with ``advance()`` or ``generate_rooms()``."""
    cfg, surface = _resolve_config(map_spec, config, room_grid_size, wiggle, frequency, seed)
    if rng is None:
        # Local RNG so unrelated use of the random module cannot perturb the build
        rng = random.Random(cfg.seed).random
    step = grid_step(surface.width, surface.height, clamp_room_grid_size(cfg.room_grid_size))
    builder = DungeonBuilder(surface, cfg)
    builder.seed(step, step * cfg.wiggle, coerce_frequency(cfg.frequency), rng)
    return builder


def room_info(builder: DungeonBuilder) -> RoomInfo:
    rooms = [RoomSummary(r.id, r.color, r.bounding_box()) for r in builder.rooms]
    return RoomInfo(
        floor_color=builder.floor_color,
        void_color=builder.void_color,
        rooms=rooms,
        doors=list(builder.doors),
        metrics=dict(builder.metrics),
    )


def build(map_spec=None, **options) -> Tuple[RasterSurface, RoomInfo]:
    """Build a dungeon into ``map_spec``'s surface and describe the resulting rooms."""
    builder = prepare_build(map_spec, **options)
    builder.generate_rooms()
    return builder.surface, room_info(builder)


class Dungeon:
    def __init__(
        self,
        config: DungeonConfig | None = None,
        *,
        seed: int | None = None,
        size: Tuple[int, int] | None = None,
        surface: RasterSurface | None = None,
    ):
        # Accept either config object or (seed, size) call style
        if config is None:
            config = DungeonConfig.from_env()
        if size is not None and len(size) >= 2:
            config = replace(config, width=size[0], height=size[1])
        map_spec = surface if surface is not None else (config.width, config.height)
        self.builder = prepare_build(map_spec, config=config, seed=seed)
        self.builder.generate_rooms()
        self.config = self.builder.config
        self.seed = self.config.seed
        self.surface = self.builder.surface
        self.info = room_info(self.builder)
        self.metrics = self.info.metrics

    @property
    def rooms(self) -> List[RoomSummary]:
        return self.info.rooms

    def rows(self) -> List[str]:
        return surface_to_rows(self.surface, self.info.floor_color, self.info.void_color, self.info.doors)


__all__ = ["Dungeon", "RoomInfo", "RoomSummary", "build", "prepare_build", "room_info", "resolve_surface"]
