"""
project: Maze Explorer
module: __init__.py
License: MIT

Flask application setup.

This module wires together the Flask app and the JSON API blueprints.
Configuration is sourced from environment variables with reasonable defaults
for development. A local `instance/` directory is used for the server log.
"""

import logging
import os
import uuid
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify

# Load .env if present so EXPLORER_* settings can be supplied without
# exporting shell variables during development.
load_dotenv()


def _load_version() -> str:
    try:
        return (Path(__file__).resolve().parent.parent / "VERSION").read_text(encoding="utf-8").strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # read-only installs can still serve the API; only the file log is lost
    pass

app.config.update(
    EXPLORER_LEVEL_CACHE_SIZE=int(os.getenv("EXPLORER_LEVEL_CACHE_SIZE", "8")),
    EXPLORER_MAX_SESSIONS=int(os.getenv("EXPLORER_MAX_SESSIONS", "64")),
)
# keep payload keys in the order the services build them
app.json.sort_keys = False

# Register HTTP blueprints
from explorer.routes.level_api import bp_level  # noqa: E402
from explorer.routes.seed_api import bp_seed  # noqa: E402
from explorer.routes.session_api import bp_session  # noqa: E402
from explorer.routes.validation import ValidationError  # noqa: E402

app.register_blueprint(bp_level)
app.register_blueprint(bp_seed)
app.register_blueprint(bp_session)


@app.errorhandler(ValidationError)
def validation_error(e: ValidationError):
    return jsonify(e.to_dict()), 400


@app.errorhandler(404)
def not_found(e):
    return jsonify({"error": "not found"}), 404


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal error", "error_id": error_id}), 500


def create_app():
    """Return the Flask app instance."""
    return app


__all__ = ["app", "create_app", "__version__"]
