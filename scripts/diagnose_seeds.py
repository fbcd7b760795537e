#!/usr/bin/env python3
"""Dungeon structural diagnostics for specific seeds.

Usage:
  python scripts/diagnose_seeds.py 292372 730727
  python scripts/diagnose_seeds.py --size 160x96 dragon

If no seeds are provided as CLI args, a default list is used.
Exits with non-zero status if structural issues are detected.
"""

from __future__ import annotations

import json
import os
import sys
from typing import List

# Ensure project root on path if executed directly
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from roomgrow.dungeon import prepare_build  # noqa: E402 import after path fix
from roomgrow.dungeon.config import coerce_seed  # noqa: E402 import after path fix
from roomgrow.dungeon.diagnostics import analyze, is_healthy  # noqa: E402 import after path fix

DEFAULT_SEEDS = ["292372", "730727"]
DEFAULT_SIZE = (128, 128)


def run_for_seed(seed, size=DEFAULT_SIZE) -> dict:
    builder = prepare_build(size, seed=coerce_seed(seed))
    builder.generate_rooms()
    res = analyze(builder)
    issues = {
        "unclaimed_cells": len(res["unclaimed_cells"]),
        "duplicate_door_pairs": len(res["duplicate_door_pairs"]),
        "unopened_doors": len(res["unopened_doors"]),
        "doors_rejected": builder.metrics["doors_rejected"],
    }
    return {
        "seed": builder.config.seed,
        "rooms": len(builder.rooms),
        "doors": res["doors"],
        "neighbors_without_door": len(res["neighbors_without_door"]),
        "non_adjacent_door_pairs": len(res["non_adjacent_door_pairs"]),
        "issues": issues,
        "ok": is_healthy(res),
    }


def main(argv: List[str]) -> int:
    size = DEFAULT_SIZE
    if len(argv) >= 2 and argv[0] == "--size":
        w, h = argv[1].lower().split("x", 1)
        size = (int(w), int(h))
        argv = argv[2:]
    seeds = argv or DEFAULT_SEEDS
    results = [run_for_seed(s, size) for s in seeds]
    print(json.dumps({"results": results}, indent=2))
    # Non-zero exit if any failure
    if not all(r["ok"] for r in results):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
