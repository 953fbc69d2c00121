"""Seed API route.

Normalises a user supplied seed (int, digit string or free text) into the
integer seed that levels are generated from.
"""
from flask import Blueprint, jsonify, request

from explorer.dungeon import coerce_seed
from explorer.routes.validation import SEED_REQUEST, require

bp_seed = Blueprint('seed_api', __name__)


@bp_seed.route('/api/seed', methods=['POST'])
def make_seed():
    """Create (or normalise) a level seed.

    Body JSON (optional):
      { "seed": <int|str|null> }
    - Seed omitted or null => time based seed.
    - Digit strings are parsed; other strings are hashed deterministically.

    Response: { "seed": <int> }
    """
    data = require(request.get_json(silent=True) or {}, SEED_REQUEST)
    return jsonify({"seed": coerce_seed(data.get('seed'))})
