from typing import Dict


def init_metrics() -> Dict[str, int | float]:
    return {
        'seed_attempts': 0,
        'rooms_seeded': 0,
        'color_collisions': 0,
        'rooms_pruned': 0,
        'rooms': 0,
        'rooms_without_floor': 0,
        'ticks': 0,
        'doors_created': 0,
        'doors_rejected': 0,
        'runtime_ms': 0.0,
    }
