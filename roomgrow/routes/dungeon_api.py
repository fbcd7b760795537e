"""
project: roomgrow
module: dungeon_api.py
License: MIT

Dungeon build API routes.

Provides an endpoint that builds a dungeon from JSON parameters and returns
the room info plus a text rendering of the raster, and an endpoint exposing
the active generation defaults. The request parsing helpers are shared with
the Socket.IO build handler.
"""

import threading

from flask import Blueprint, current_app, jsonify, request

from roomgrow.dungeon import RasterSurface, prepare_build, room_info
from roomgrow.dungeon.config import coerce_seed
from roomgrow.dungeon.tiles import surface_to_rows
from roomgrow.logging_utils import log
from roomgrow.websockets.validation import build_schema, validate

bp_dungeon = Blueprint("dungeon", __name__)

# Simple in-process cache params->(seed, info, tiles). Thread-safe with a lock because
# Flask-SocketIO/eventlet may interleave greenlets.
_build_cache = {}
_build_cache_lock = threading.Lock()
_BUILD_CACHE_MAX = 8  # small LRU-ish manual cap


class BuildRequestError(ValueError):
    def __init__(self, field: str, message: str, code: str):
        super().__init__(message)
        self.field = field
        self.message = message
        self.code = code

    def to_dict(self):
        return {"error": self.message, "field": self.field, "code": self.code}


def parse_build_request(payload, config):
    """Validate a build payload and resolve defaults.

    Returns a dict with ``seed``, ``map_spec`` (surface or (w, h)), ``room_grid_size``,
    ``wiggle``, ``frequency``, ``ticks_per_frame`` and a hashable ``cache_key``.
    Raises BuildRequestError on invalid input.
    """
    max_dim = config["DUNGEON_MAX_DIMENSION"]
    ok, result = validate(payload if payload is not None else {}, build_schema(max_dim))
    if not ok:
        raise BuildRequestError(result["field"], result["error"], result["code"])
    defaults = config["DUNGEON_DEFAULTS"]
    seed = coerce_seed(result.get("seed"))
    mask = result.get("mask")
    if mask:
        if any(len(row) > max_dim for row in mask):
            raise BuildRequestError("mask", "row too long", "max_len")
        if not any(mask):
            raise BuildRequestError("mask", "must not be empty", "empty")
        map_spec = RasterSurface.from_mask(mask)
        size_key = tuple(mask)
    else:
        width = result.get("width", config["DUNGEON_DEFAULT_WIDTH"])
        height = result.get("height", config["DUNGEON_DEFAULT_HEIGHT"])
        map_spec = (width, height)
        size_key = map_spec
    parsed = {
        "seed": seed,
        "map_spec": map_spec,
        "room_grid_size": result.get("room_grid_size", defaults.room_grid_size),
        "wiggle": result.get("wiggle", defaults.wiggle),
        "frequency": result.get("frequency", defaults.frequency),
        "ticks_per_frame": result.get("ticks_per_frame", 1),
    }
    parsed["cache_key"] = (seed, size_key, parsed["room_grid_size"], parsed["wiggle"], parsed["frequency"])
    return parsed


def start_build(parsed, config):
    """Return a seeded DungeonBuilder for a parsed request."""
    defaults = config["DUNGEON_DEFAULTS"]
    return prepare_build(
        parsed["map_spec"],
        room_grid_size=parsed["room_grid_size"],
        wiggle=parsed["wiggle"],
        frequency=parsed["frequency"],
        seed=parsed["seed"],
        config=defaults,
    )


def build_payload(builder):
    info = room_info(builder)
    return {
        "seed": builder.config.seed,
        "info": info.to_dict(),
        "tiles": surface_to_rows(builder.surface, info.floor_color, info.void_color, info.doors),
    }


def get_cached_build(parsed, config):
    if config.get("DUNGEON_DISABLE_CACHE"):
        builder = start_build(parsed, config)
        builder.generate_rooms()
        return build_payload(builder)
    key = parsed["cache_key"]
    with _build_cache_lock:
        cached = _build_cache.get(key)
        if cached is not None:
            return cached
    builder = start_build(parsed, config)
    builder.generate_rooms()
    payload = build_payload(builder)
    with _build_cache_lock:
        _build_cache[key] = payload
        if len(_build_cache) > _BUILD_CACHE_MAX:
            first_key = next(iter(_build_cache.keys()))
            if first_key != key:
                _build_cache.pop(first_key, None)
    return payload


@bp_dungeon.route("/api/dungeon/build", methods=["POST"])
def build_dungeon():
    """Build a dungeon.

    Body JSON (all optional):
      { "width": int, "height": int, "mask": [str], "room_grid_size": int,
        "wiggle": 0..1, "frequency": number, "seed": int|str }
    - ``mask`` rows use '#' for blocked cells; when given, width/height are ignored.
    - String seeds hash deterministically; a missing seed picks a random one.

    Response: { "seed": int, "info": {...room info...}, "tiles": [str, ...] }
    """
    data = request.get_json(silent=True)
    try:
        parsed = parse_build_request(data, current_app.config)
    except BuildRequestError as e:
        return jsonify(e.to_dict()), 400
    payload = get_cached_build(parsed, current_app.config)
    log.info(event="http_build", seed=payload["seed"], rooms=len(payload["info"]["rooms"]))
    return jsonify(payload)


@bp_dungeon.route("/api/dungeon/config")
def dungeon_config():
    """Return the generation defaults and limits applied to build requests."""
    defaults = current_app.config["DUNGEON_DEFAULTS"]
    return jsonify(
        {
            "defaults": defaults.to_dict(),
            "default_width": current_app.config["DUNGEON_DEFAULT_WIDTH"],
            "default_height": current_app.config["DUNGEON_DEFAULT_HEIGHT"],
            "max_dimension": current_app.config["DUNGEON_MAX_DIMENSION"],
        }
    )
