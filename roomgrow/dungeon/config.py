import hashlib
import os
import random
from dataclasses import dataclass
from typing import Optional

MIN_ROOM_GRID_SIZE = 8
MIN_STEP = 10
MIN_FREQUENCY = 0.1
SEED_MAX_INT = 9223372036854775807


@dataclass
class DungeonConfig:
    width: int = 128
    height: int = 128
    # Grid divisions along the shorter side; more divisions means smaller rooms.
    room_grid_size: int = 20
    # Seed jitter as a fraction of the grid step.
    wiggle: float = 0.0
    # Chance a grid point gets a room seed at all.
    frequency: float = 1.0
    seed: Optional[int] = None
    decrement_seed_count_for_children: bool = False
    decrement_seed_count_for_parent: bool = True

    @classmethod
    def from_env(cls, **overrides) -> "DungeonConfig":
        """Defaults overridden by DUNGEON_* environment variables, then by keyword overrides."""
        cfg = cls()
        env_map = {
            'DUNGEON_ROOM_GRID_SIZE': ('room_grid_size', int),
            'DUNGEON_WIGGLE': ('wiggle', float),
            'DUNGEON_FREQUENCY': ('frequency', float),
            'DUNGEON_DECREMENT_CHILD_SEEDS': ('decrement_seed_count_for_children', _env_bool),
            'DUNGEON_DECREMENT_PARENT_SEEDS': ('decrement_seed_count_for_parent', _env_bool),
        }
        for env_key, (attr, conv) in env_map.items():
            raw = os.environ.get(env_key)
            if raw is None or raw.strip() == '':
                continue
            try:
                setattr(cfg, attr, conv(raw.strip()))
            except ValueError:
                continue
        for k, v in overrides.items():
            if v is not None:
                setattr(cfg, k, v)
        return cfg

    def normalized(self) -> "DungeonConfig":
        """Copy with room_grid_size/wiggle/frequency coerced into their valid ranges."""
        return DungeonConfig(
            width=self.width,
            height=self.height,
            room_grid_size=clamp_room_grid_size(self.room_grid_size),
            wiggle=max(float(self.wiggle), 0.0),
            frequency=coerce_frequency(self.frequency),
            seed=self.seed,
            decrement_seed_count_for_children=self.decrement_seed_count_for_children,
            decrement_seed_count_for_parent=self.decrement_seed_count_for_parent,
        )

    def to_dict(self):
        return {
            'width': self.width,
            'height': self.height,
            'room_grid_size': self.room_grid_size,
            'wiggle': self.wiggle,
            'frequency': self.frequency,
            'seed': self.seed,
            'decrement_seed_count_for_children': self.decrement_seed_count_for_children,
            'decrement_seed_count_for_parent': self.decrement_seed_count_for_parent,
        }


def _env_bool(raw: str) -> bool:
    val = raw.lower()
    if val in ('1', 'true', 'yes', 'on'):
        return True
    if val in ('0', 'false', 'no', 'off'):
        return False
    raise ValueError(raw)


def clamp_room_grid_size(room_grid_size) -> int:
    if room_grid_size is None:
        return 20
    return max(int(room_grid_size), MIN_ROOM_GRID_SIZE)


def coerce_frequency(frequency) -> float:
    """Non-positive frequencies become 0.1 so a build never silently plants nothing."""
    if frequency is None:
        return 1.0
    frequency = float(frequency)
    if frequency <= 0:
        return MIN_FREQUENCY
    return min(frequency, 1.0)


def grid_step(width: int, height: int, room_grid_size: int) -> float:
    """Pixel distance between seed grid points, clamped to [10, min_dim / 2]."""
    min_dim = min(width, height)
    step = min_dim / room_grid_size
    return min(max(step, MIN_STEP), min_dim / 2)


def coerce_seed(payload_seed) -> int:
    """Convert a provided seed (int or str) into a bounded 64-bit signed int."""
    if payload_seed is None or isinstance(payload_seed, bool):
        return random.randint(1, 1_000_000)
    if isinstance(payload_seed, int):
        return payload_seed % SEED_MAX_INT
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return random.randint(1, 1_000_000)
        if s.isdigit():
            return int(s) % SEED_MAX_INT
        h = hashlib.sha256(s.encode('utf-8')).digest()
        return int.from_bytes(h[:8], 'big') % SEED_MAX_INT
    return random.randint(1, 1_000_000)


__all__ = [
    "DungeonConfig",
    "clamp_room_grid_size",
    "coerce_frequency",
    "coerce_seed",
    "grid_step",
    "MIN_ROOM_GRID_SIZE",
    "MIN_FREQUENCY",
]
