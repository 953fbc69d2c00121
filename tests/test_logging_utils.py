import json

from explorer import logging_utils
from explorer.logging_utils import get_logger


def test_key_value_format(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    get_logger("t").info(event="path_computed", length=12, start=(1, 2), skipped=None)
    line = capsys.readouterr().out.strip()
    assert line.startswith("level=info ts=")
    assert "event=path_computed" in line
    assert "length=12" in line
    assert "start=(1,2)" in line
    assert "skipped" not in line
    assert "logger=t" in line


def test_json_mode(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "JSON_MODE", True)
    get_logger("t").warn(event="exit_forced", x=3, y=4)
    rec = json.loads(capsys.readouterr().out)
    assert rec["level"] == "warn"
    assert rec["event"] == "exit_forced"
    assert (rec["x"], rec["y"]) == (3, 4)


def test_errors_go_to_stderr(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    get_logger("t").error(event="boom")
    captured = capsys.readouterr()
    assert "event=boom" in captured.err
    assert captured.out == ""


def test_level_threshold(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.LEVELS["warn"])
    log = get_logger("t")
    log.info(event="quiet")
    log.debug(event="quieter")
    assert capsys.readouterr().out == ""
    log.warn(event="loud")
    assert "loud" in capsys.readouterr().out


def test_loggers_are_cached():
    assert get_logger("bot") is get_logger("bot")


def test_bound_context_rides_along(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "JSON_MODE", True)
    level_log = get_logger("session").bind(seed=42, level_no=3)
    level_log.info(event="exit_reached")
    level_log.info(event="level_started", level_no=4)
    first, second = (json.loads(line) for line in capsys.readouterr().out.splitlines())
    assert (first["seed"], first["level_no"], first["level"]) == (42, 3, "info")
    assert second["level_no"] == 4
    # the cached parent stays context free
    assert get_logger("session").context == {}


def test_configure_rereads_environment(monkeypatch):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.LEVELS["info"])
    monkeypatch.setenv("EXPLORER_LOG_LEVEL", "WARN")
    monkeypatch.setenv("EXPLORER_LOG_JSON", "yes")
    logging_utils.configure()
    assert logging_utils.CURRENT_LEVEL == logging_utils.LEVELS["warn"]
    assert logging_utils.JSON_MODE is True
    logging_utils.configure(level="nonsense", json_mode=False)
    assert logging_utils.CURRENT_LEVEL == logging_utils.LEVELS["info"]
    assert logging_utils.JSON_MODE is False
