"""Minimal structured logging helper.

Emits key=value pairs (or one JSON object per line) with a timestamp and
level, so generation diagnostics stay greppable without configuring the
stdlib logging tree for library use.

Usage:
    from roomgrow.logging_utils import log
    log.info(event="build_complete", rooms=12)

All non-str key/value values are str()'d. Reserved keys: level, ts.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}


def _current_level() -> int:
    return LEVELS.get(os.getenv("ROOMGROW_LOG_LEVEL", "info").lower(), 20)


def _json_mode() -> bool:
    return os.getenv("ROOMGROW_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")


def _format(level: str, **fields):
    if _json_mode():
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            s = str(v).replace(" ", "_")
            parts.append(f"{k}={s}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str | None = None, context: dict | None = None):
        self.name = name or "roomgrow"
        # fields stamped on every record from this logger, ahead of call-site fields
        self.context = dict(context or {})

    def bind(self, **fields) -> "_Logger":
        """Return a child logger that adds ``fields`` to every record."""
        merged = dict(self.context)
        merged.update(fields)
        return _Logger(self.name, merged)

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < _current_level():
            return
        record = {"logger": self.name}
        record.update(self.context)
        record.update(fields)
        stream = sys.stderr if lvl == "error" else sys.stdout
        print(_format(lvl, **record), file=stream)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE = {}


def get_logger(name: str):
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("roomgrow")
