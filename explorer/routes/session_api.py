"""
project: Maze Explorer
module: session_api.py
License: MIT

Session API routes.

A session is one running explorer (level, agent, bot, timers) held in this
process. Clients drive it by posting inputs and ticks and render whatever the
returned state says. Sessions are not persisted.
"""

import threading
import uuid

from flask import Blueprint, abort, current_app, jsonify, request

from explorer.dungeon import LevelConfig
from explorer.logging_utils import get_logger
from explorer.routes.validation import SESSION_CREATE, SESSION_TICK, ValidationError, require, require_action
from explorer.services.config import BotTiming
from explorer.services.session import GameSession, LevelGenerationError
from explorer.services.time_service import ManualClock, MonotonicClock

log = get_logger("api")

bp_session = Blueprint("session", __name__)

# session_id -> GameSession; one lock serialises every session mutation
_sessions = {}
_sessions_lock = threading.Lock()

DEFAULT_STEP_MS = 16.0


def _get_session(session_id: str) -> GameSession:
    sess = _sessions.get(session_id)
    if sess is None:
        abort(404)
    return sess


def clear_sessions():
    with _sessions_lock:
        _sessions.clear()


@bp_session.route("/api/sessions", methods=["POST"])
def create_session():
    """
    Start a session on a fresh level.
    Body (optional): { seed, algorithm, clock: "monotonic"|"manual" }
    Response: { session_id, state }
    """
    data = require(request.get_json(silent=True) or {}, SESSION_CREATE)
    clock = ManualClock() if data.get("clock") == "manual" else MonotonicClock()
    try:
        sess = GameSession(
            config=LevelConfig.from_env(),
            timing=BotTiming.from_env(),
            clock=clock,
            seed=data.get("seed"),
            algorithm=data.get("algorithm", "explore"),
        )
    except ValueError as e:
        raise ValidationError("__config__", str(e), "config") from None
    except LevelGenerationError as e:
        log.error(event="session_create_failed", error=str(e))
        return jsonify({"error": str(e)}), 503
    session_id = uuid.uuid4().hex
    with _sessions_lock:
        _sessions[session_id] = sess
        limit = current_app.config.get("EXPLORER_MAX_SESSIONS", 64)
        while len(_sessions) > limit:
            evicted = next(iter(_sessions))
            _sessions.pop(evicted, None)
            log.info(event="session_evicted", session_id=evicted)
    log.info(event="session_created", session_id=session_id, seed=sess.level.seed)
    return jsonify({"session_id": session_id, "state": sess.snapshot()}), 201


@bp_session.route("/api/sessions/<session_id>")
def session_state(session_id):
    with _sessions_lock:
        sess = _get_session(session_id)
        return jsonify(sess.snapshot())


@bp_session.route("/api/sessions/<session_id>/map")
def session_map(session_id):
    """Level rows plus discovery rows and the bot's remaining path, for map drawing."""
    with _sessions_lock:
        sess = _get_session(session_id)
        return jsonify(
            {
                "rows": sess.level.rows(),
                "discovered": sess.discovery.rows(),
                "path": [list(c) for c in sess.bot.remaining_path()],
                "pose": sess.pose.to_dict(),
            }
        )


@bp_session.route("/api/sessions/<session_id>/input", methods=["POST"])
def session_input(session_id):
    """
    Apply one input action.
    Body: { action, pressed?: bool (default true) }
    """
    data = require_action(request.get_json(silent=True))
    with _sessions_lock:
        sess = _get_session(session_id)
        return jsonify(sess.handle_input(data["action"], data.get("pressed", True)))


@bp_session.route("/api/sessions/<session_id>/tick", methods=["POST"])
def session_tick(session_id):
    """
    Advance the session.
    Body (optional): { now?, steps?, step_ms? }
    `now` and `steps` need a session created with clock "manual".
    """
    data = require(request.get_json(silent=True) or {}, SESSION_TICK)
    with _sessions_lock:
        sess = _get_session(session_id)
        manual = isinstance(sess.clock, ManualClock)
        if ("now" in data or "steps" in data) and not manual:
            raise ValidationError("now", "requires a session with a manual clock", "clock")
        if "now" in data:
            if data["now"] < sess.clock.now():
                raise ValidationError("now", "clock cannot move backwards", "min")
            sess.clock.set(data["now"])
        if "steps" not in data:
            state = sess.tick()
            state["levels_changed"] = int(state["level_changed"])
            return jsonify(state)
        step_ms = data.get("step_ms", DEFAULT_STEP_MS)
        levels_changed = 0
        state = None
        for _ in range(data["steps"]):
            sess.clock.advance(step_ms)
            state = sess.tick()
            levels_changed += int(state["level_changed"])
        state["levels_changed"] = levels_changed
        return jsonify(state)
