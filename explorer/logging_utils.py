"""Structured event logging for the explorer.

Events are printed as one key=value line (or one JSON object) per call, so a
headless bot run can be followed in a terminal and replayed from a log file.
Generation, pathfinding, bot and session events all go through here.

Usage:
    from explorer.logging_utils import get_logger
    log = get_logger("pathfinding")
    log.warn(event="explore_segment_unreachable", target=(3, 4))

    # per-level context rides along on every event
    level_log = get_logger("session").bind(seed=42, level=1)
    level_log.info(event="exit_reached")

Settings come from EXPLORER_LOG_LEVEL and EXPLORER_LOG_JSON. They are read
at import and again whenever configure() is called, e.g. after the CLI loads
an --env-file. Reserved keys: level, ts, logger.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
_TRUTHY = ("1", "true", "yes", "on")

CURRENT_LEVEL = LEVELS["info"]
JSON_MODE = False


def configure(level: str | None = None, json_mode: bool | None = None) -> None:
    """(Re)read log settings; explicit arguments win over the environment."""
    global CURRENT_LEVEL, JSON_MODE
    if level is None:
        level = os.getenv("EXPLORER_LOG_LEVEL", "info")
    if json_mode is None:
        json_mode = os.getenv("EXPLORER_LOG_JSON", "0").strip().lower() in _TRUTHY
    CURRENT_LEVEL = LEVELS.get(level.strip().lower(), LEVELS["info"])
    JSON_MODE = bool(json_mode)


def _compact(v) -> str:
    # tuples of coordinates print as (x,y) so one field never splits on spaces
    return str(v).replace(" ", "")


def _format(level: str, **fields):
    if JSON_MODE:
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        parts.append(f"{k}={v}" if isinstance(v, (int, float)) else f"{k}={_compact(v)}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str | None = None, context: dict | None = None):
        self.name = name or "explorer"
        self.context = dict(context or {})

    def bind(self, **context) -> "_Logger":
        """Child logger whose events carry ``context`` unless overridden per call."""
        return _Logger(self.name, {**self.context, **context})

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < CURRENT_LEVEL:
            return
        record = {**self.context, **fields}
        record.setdefault("logger", self.name)
        print(_format(lvl, **record), file=sys.stdout if lvl != "error" else sys.stderr)

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


configure()

log = get_logger("explorer")
