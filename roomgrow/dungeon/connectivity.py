"""Room-to-room connectivity bookkeeping.

Pairs are keyed by room id (lower id first), never by color, so two rooms that
happened to share a derived color could never alias each other here.
"""

from __future__ import annotations

from typing import Dict, Iterator, Tuple

PairKey = Tuple[int, int]


def pair_key(room_a_id: int, room_b_id: int) -> PairKey:
    """Canonical unordered key for a pair of room ids."""
    if room_a_id < room_b_id:
        return (room_a_id, room_b_id)
    return (room_b_id, room_a_id)


class RoomConnectivityTable:
    def __init__(self):
        self._connected: Dict[PairKey, bool] = {}

    def mark(self, room_a_id: int, room_b_id: int) -> bool:
        """Record a door between two rooms. Returns False if the pair was already marked."""
        key = pair_key(room_a_id, room_b_id)
        if self._connected.get(key):
            return False
        self._connected[key] = True
        return True

    def are_connected(self, room_a_id: int, room_b_id: int) -> bool:
        return self._connected.get(pair_key(room_a_id, room_b_id)) is True

    def neighbors_of(self, room_id: int) -> Iterator[int]:
        for a, b in self._connected:
            if a == room_id:
                yield b
            elif b == room_id:
                yield a

    def pairs(self) -> Iterator[PairKey]:
        return iter(sorted(self._connected))

    def __len__(self) -> int:
        return len(self._connected)

    def __contains__(self, key) -> bool:
        a, b = key
        return self.are_connected(a, b)


__all__ = ["RoomConnectivityTable", "pair_key", "PairKey"]
