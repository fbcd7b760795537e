"""
project: roomgrow
module: __init__.py
License: MIT

Flask application factory and core extensions setup.

This module wires together the Flask app and Flask-SocketIO, and registers
the dungeon build blueprint and websocket handlers. Configuration is sourced
from environment variables (optionally via a .env file) with reasonable
defaults for development. A local `instance/` directory holds the log file.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_socketio import SocketIO

from roomgrow.dungeon.config import DungeonConfig

# Load .env if present so DUNGEON_* and ROOMGROW_* variables can be supplied
# without exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # read-only installs still serve builds; only file logging needs the folder
    pass

_defaults = DungeonConfig.from_env()

app.config.update(
    # Dungeon generation defaults / limits
    DUNGEON_DEFAULT_WIDTH=int(os.getenv("DUNGEON_DEFAULT_WIDTH", str(_defaults.width))),
    DUNGEON_DEFAULT_HEIGHT=int(os.getenv("DUNGEON_DEFAULT_HEIGHT", str(_defaults.height))),
    DUNGEON_MAX_DIMENSION=int(os.getenv("DUNGEON_MAX_DIMENSION", "512")),
    DUNGEON_DISABLE_CACHE=bool(os.getenv("DUNGEON_DISABLE_CACHE", "0") == "1"),
    DUNGEON_DEFAULTS=_defaults,
)

# Let Flask-SocketIO select best async_mode based on installed deps (eventlet/gevent/threading)
socketio = SocketIO(
    app,
    async_mode=os.getenv("SOCKETIO_ASYNC_MODE") or None,
    cors_allowed_origins=os.getenv("CORS_ALLOWED_ORIGINS", "*"),
    engineio_logger=bool(os.getenv("ENGINEIO_LOGGER", "0") == "1"),
    ping_interval=20,
    ping_timeout=10,
)

# Register HTTP blueprints (import after app created)
from roomgrow.routes.dungeon_api import bp_dungeon  # noqa: E402

app.register_blueprint(bp_dungeon)

# Import websocket handlers so their event decorators register with Socket.IO (side-effect)
from roomgrow.websockets import build as _ws_build  # noqa: F401,E402


def create_app():
    """Return the Flask app instance."""
    return app


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal server error", "error_id": error_id}), 500
