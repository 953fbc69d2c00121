from explorer.services.automap import AutoMapCycle, AutoMapState


def test_idle_cycle_keeps_visibility():
    cycle = AutoMapCycle()
    assert not cycle.running
    assert cycle.update(5000) is False


def test_schedule_anchored_on_transitions():
    cycle = AutoMapCycle()
    cycle.start(1000)
    assert cycle.update(3999) is False
    assert cycle.state is AutoMapState.INITIAL_WAIT
    assert cycle.update(4000) is True
    assert cycle.state is AutoMapState.MAP_OPEN
    assert cycle.update(8999) is True
    assert cycle.update(9000) is False
    assert cycle.state is AutoMapState.MAP_CLOSED_WAIT
    assert cycle.update(15000) is True


def test_large_jump_catches_up():
    cycle = AutoMapCycle()
    cycle.start(0)
    # open 3000-8000, closed until 14000, open until 19000
    assert cycle.update(20000) is False
    assert cycle.anchor == 19000


def test_visible_at_does_not_mutate():
    cycle = AutoMapCycle()
    cycle.start(0)
    assert cycle.visible_at(3500) is True
    assert cycle.visible_at(10000) is False
    assert cycle.state is AutoMapState.INITIAL_WAIT
    assert cycle.anchor == 0


def test_frozen_while_bot_inactive():
    cycle = AutoMapCycle()
    cycle.start(0)
    assert cycle.update(10000, bot_active=False) is False
    assert cycle.state is AutoMapState.INITIAL_WAIT


def test_override_and_stop():
    cycle = AutoMapCycle()
    cycle.start(0)
    cycle.update(3000)
    cycle.override()
    assert not cycle.running
    assert cycle.visible is True
    assert cycle.update(9000) is True

    cycle.start(0)
    cycle.update(3000)
    cycle.stop()
    assert cycle.visible is False
