import pytest

from explorer.dungeon import LevelConfig
from explorer.services.config import BotTiming
from explorer.services.session import GameSession, LevelGenerationError


@pytest.fixture()
def session(small_config, clock):
    return GameSession(config=small_config, clock=clock, seed=42)


def _run_until_level_changes(session, clock, step_ms=16, max_ticks=20000):
    for _ in range(max_ticks):
        clock.advance(step_ms)
        snap = session.tick()
        if snap["level_changed"]:
            return snap
    raise AssertionError("bot never reached the exit")


def test_new_session_starts_manual(session):
    snap = session.snapshot()
    assert snap["level"] == 1
    assert snap["seed"] == 42
    assert snap["bot"]["state"] == "off"
    assert snap["bot"]["algorithm"] == "explore"
    assert snap["autostart_in"] == 7
    assert snap["status"] == "Auto-Bot Starting in: 7s"
    assert snap["discovered"] > 0
    cx, cy = session.level.rooms[0].center
    assert snap["pose"]["cell"] == [cx, cy]


def test_same_seed_same_level(small_config, clock):
    a = GameSession(config=small_config, clock=clock, seed="crypt")
    b = GameSession(config=small_config, clock=clock, seed="crypt")
    assert a.level.rows() == b.level.rows()


def test_idle_autostart_enables_explore_bot(session, clock):
    session.handle_input("select_algorithm:1")
    assert session.bot.algorithm.value == "bfs"
    clock.set(6999)
    assert session.tick()["bot"]["state"] == "off"
    clock.set(7000)
    snap = session.tick()
    assert snap["bot"]["state"] != "off"
    assert snap["bot"]["algorithm"] == "explore"
    assert snap["automap_state"] == "initial_wait"
    assert snap["autostart_in"] is None
    assert snap["status"] == "Bot Active (EXPLORE). Press B to toggle."


def test_input_resets_idle_countdown(session, clock):
    clock.set(5000)
    session.handle_input("turn_left")
    session.handle_input("turn_left", pressed=False)
    clock.set(7000)
    snap = session.tick()
    assert snap["bot"]["state"] == "off"
    assert snap["autostart_in"] == 5


def test_algorithm_choice_counts_as_input_only_when_bot_off(session, clock):
    clock.set(3000)
    session.handle_input("select_algorithm:astar")
    assert session.autostart.last_input == 3000
    session.handle_input("toggle_bot")
    clock.set(4000)
    session.handle_input("select_algorithm:2")
    assert session.bot.algorithm.value == "dfs"
    assert session.autostart.last_input == 3000


def test_toggle_bot_starts_and_stops_automap(session, clock):
    session.handle_input("toggle_bot")
    assert session.bot.active
    assert session.automap.running
    session.handle_input("toggle_bot")
    assert not session.bot.active
    assert not session.automap.running
    assert session.map_visible is False


def test_automap_cycles_while_bot_drives(small_config, clock):
    timing = BotTiming(automap_initial_wait_ms=100, automap_open_ms=100, automap_closed_wait_ms=100)
    session = GameSession(config=small_config, timing=timing, clock=clock, seed=42)
    session.handle_input("toggle_bot")
    clock.set(100)
    snap = session.tick()
    assert snap["map_visible"] is True
    assert snap["automap_state"] == "map_open"
    clock.set(200)
    assert session.tick()["map_visible"] is False


def test_manual_map_toggle_overrides_cycle(session):
    session.handle_input("toggle_bot")
    snap = session.handle_input("toggle_map")
    assert snap["map_visible"] is True
    assert snap["automap_state"] == "idle"
    assert session.bot.active


def test_style_toggles(session):
    assert session.handle_input("toggle_manual_style")["manual_policy"] == "discrete"
    assert session.handle_input("toggle_bot_style")["bot"]["move_policy"] == "instant"
    assert session.handle_input("toggle_manual_style")["manual_policy"] == "continuous"


def test_discrete_forward_starts_animation(session):
    session.handle_input("toggle_manual_style")
    # rooms are at least 4 cells deep, so the cell ahead of the center is open
    snap = session.handle_input("forward")
    assert snap["animating"] is True
    cx, cy = session.level.rooms[0].center
    assert session.motion.translation.target_value == (cx + 0.5, cy + 1.5)


def test_continuous_forward_glides(session, clock):
    start_z = session.pose.z
    session.handle_input("forward")
    clock.advance(50)
    session.tick()
    assert session.pose.z == pytest.approx(start_z + 0.225)


def test_unknown_action_rejected(session):
    with pytest.raises(ValueError):
        session.handle_input("jump")


def test_release_of_toggle_is_ignored(session):
    snap = session.handle_input("toggle_bot", pressed=False)
    assert snap["bot"]["state"] == "off"


def test_bot_reaches_exit_and_next_level_starts(session, clock):
    session.handle_input("toggle_bot_style")
    session.handle_input("toggle_bot")
    first_seed = session.level.seed
    snap = _run_until_level_changes(session, clock)
    assert snap["level"] == 2
    assert snap["bot"]["state"] == "off"
    assert snap["map_visible"] is False
    assert session.level.seed != first_seed
    assert snap["autostart_in"] == 7


def test_interpolated_bot_also_finishes(session, clock):
    session.handle_input("toggle_bot")
    snap = _run_until_level_changes(session, clock)
    assert snap["level"] == 2


def test_explicit_new_level(session):
    session.new_level(seed=123)
    assert session.level.seed == 123
    assert session.level_count == 2
    assert session.discovery.count() > 0


def test_unusable_config_raises(clock):
    with pytest.raises(LevelGenerationError):
        GameSession(config=LevelConfig(width=40, height=40, max_rooms=0), clock=clock, seed=1)
