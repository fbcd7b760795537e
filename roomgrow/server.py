"""
project: roomgrow
module: server.py
License: MIT

Server bootstrap.

Configures application logging and starts the Socket.IO server that serves
the dungeon build HTTP routes and websocket events.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from roomgrow import app, socketio


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (integration / runtime only)
    """Start the Socket.IO server.

    When debug=True, Flask's debugger and reloader provide verbose tracebacks.
    Also configures application logging to a rotating file and console.
    """
    _configure_logging()
    try:
        print(f"[INFO] Starting Socket.IO server on {host}:{port} (async_mode={socketio.async_mode})")
        # Let Flask-SocketIO choose appropriate server (eventlet/gevent/werkzeug)
        socketio.run(app, host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


# ROOMGROW_LOG_LEVEL names mapped onto stdlib levels
_STD_LEVELS = {"debug": logging.DEBUG, "info": logging.INFO, "warn": logging.WARNING, "error": logging.ERROR}


def _configure_logging(log_dir=None):
    """Configure logging to both console and a rotating file.

    The file path defaults to instance/app.log and the level follows
    ROOMGROW_LOG_LEVEL. Returns the log file path.
    """
    log_dir = log_dir or app.instance_path
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        pass
    log_path = os.path.join(log_dir, "app.log")
    level = _STD_LEVELS.get(os.getenv("ROOMGROW_LOG_LEVEL", "info").lower(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    # 1MB files, three backups
    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    console = logging.StreamHandler()
    for handler in (file_handler, console):
        handler.setLevel(level)
        handler.setFormatter(formatter)

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path
