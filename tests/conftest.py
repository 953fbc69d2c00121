import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from explorer import create_app  # noqa: E402
from explorer.routes.level_api import clear_level_cache  # noqa: E402
from explorer.routes.session_api import clear_sessions  # noqa: E402
from explorer.services.time_service import ManualClock  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        ctx.pop()


@pytest.fixture()
def client(test_app):
    clear_level_cache()
    clear_sessions()
    return test_app.test_client()


@pytest.fixture()
def clock():
    return ManualClock()


@pytest.fixture()
def small_config():
    """Compact level settings so session tests stay fast."""
    from explorer.dungeon import LevelConfig

    return LevelConfig(width=40, height=40, max_rooms=8, room_min_size=4, room_max_size=6)
