"""
project: Maze Explorer
module: level_api.py
License: MIT

Level and path API routes.

Levels are deterministic for a (seed, config) pair, so recently generated
ones are kept in a small in-process cache instead of being rebuilt for every
map or path request.
"""

import os
import threading

from flask import Blueprint, current_app, jsonify, request

from explorer import __version__
from explorer.dungeon import GridGraph, LevelConfig, coerce_seed, generate_level
from explorer.logging_utils import get_logger
from explorer.routes.validation import PATH_REQUEST, ValidationError, require
from explorer.services.pathfinding import find_path

log = get_logger("api")

bp_level = Blueprint("level", __name__)

# (seed, config tuple) -> Level. Lock because the dev server may run threaded.
_level_cache = {}
_level_cache_lock = threading.Lock()

_CONFIG_PARAMS = ("width", "height", "max_rooms", "room_min_size", "room_max_size")


def _cache_limit() -> int:
    try:
        return int(current_app.config.get("EXPLORER_LEVEL_CACHE_SIZE", 8))
    except RuntimeError:
        return 8


def get_cached_level(config: LevelConfig):
    key = (config.seed, config.width, config.height, config.max_rooms, config.room_min_size, config.room_max_size)
    if os.environ.get("EXPLORER_DISABLE_CACHE") == "1":
        return generate_level(config)
    with _level_cache_lock:
        level = _level_cache.get(key)
        if level is not None:
            return level
    level = generate_level(config)
    with _level_cache_lock:
        _level_cache[key] = level
        while len(_level_cache) > _cache_limit():
            _level_cache.pop(next(iter(_level_cache)), None)
    return level


def clear_level_cache():
    with _level_cache_lock:
        _level_cache.clear()


def _config_from_args(args) -> LevelConfig:
    overrides = {}
    for name in _CONFIG_PARAMS:
        raw = args.get(name)
        if raw is None or raw == "":
            continue
        try:
            overrides[name] = int(raw)
        except ValueError:
            raise ValidationError(name, "expected int", "type") from None
    try:
        seed = coerce_seed(args.get("seed"))
        config = LevelConfig.from_env(seed=seed, **overrides)
        config.validate()
    except ValueError as e:
        raise ValidationError("__config__", str(e), "config") from None
    return config


@bp_level.route("/api/level")
def level_map():
    """
    Generate (or fetch from cache) a level.
    Query: seed, width, height, max_rooms, room_min_size, room_max_size (all optional)
    Response: { seed, width, height, rows, rooms, exit, usable, metrics }
    """
    config = _config_from_args(request.args)
    level = get_cached_level(config)
    return jsonify(level.to_dict())


@bp_level.route("/api/path", methods=["POST"])
def level_path():
    """
    Compute a path on the level for the given seed.
    Body: { seed, algorithm?, start: [x, y], goal?: [x, y] } (goal defaults to the exit)
    Response: { path, length, algorithm }
    """
    data = require(request.get_json(silent=True), PATH_REQUEST)
    config = _config_from_args({"seed": data["seed"]})
    level = get_cached_level(config)
    graph = GridGraph(level.grid)
    start = tuple(data["start"])
    if not graph.in_bounds(start):
        raise ValidationError("start", "outside the level", "bounds")
    if "goal" in data:
        goal = tuple(data["goal"])
        if not graph.in_bounds(goal):
            raise ValidationError("goal", "outside the level", "bounds")
    else:
        goal = graph.find_exit()
        if goal is None:
            return jsonify({"path": [], "length": 0, "algorithm": data.get("algorithm", "bfs"), "usable": False})
    algorithm = data.get("algorithm", "bfs").lower()
    path = find_path(algorithm, start, goal, graph, level.rooms)
    return jsonify({"path": [list(c) for c in path], "length": len(path), "algorithm": algorithm})


@bp_level.route("/api/health")
def health():
    return jsonify({"status": "ok", "version": __version__})
