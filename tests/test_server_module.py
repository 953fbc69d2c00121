import logging
from logging.handlers import RotatingFileHandler

import pytest

from explorer import app
from explorer.server import _configure_logging


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    level = root.level
    yield
    # drop only the handlers _configure_logging installs; pytest manages its own
    for h in list(root.handlers):
        if type(h) in (logging.StreamHandler, RotatingFileHandler):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def test_configure_logging_writes_rotating_file(tmp_path, restore_root_logging):
    path = _configure_logging(str(tmp_path))
    # running twice replaces handlers instead of stacking them
    path = _configure_logging(str(tmp_path))
    root = logging.getLogger()
    assert len(root.handlers) == 2
    assert any(isinstance(h, RotatingFileHandler) for h in root.handlers)
    logging.getLogger("explorer.test").info("hello from test")
    for h in root.handlers:
        h.flush()
    assert path == str(tmp_path / "explorer.log")
    assert "hello from test" in (tmp_path / "explorer.log").read_text()


def test_configure_logging_defaults_to_instance_path(tmp_path, monkeypatch, restore_root_logging):
    monkeypatch.setattr(app, "instance_path", str(tmp_path))
    assert _configure_logging() == str(tmp_path / "explorer.log")
