from explorer.services.discovery import UNDISCOVERED, DiscoveryTracker
from explorer.services.motion import Pose
from level_test_utils import level_from_rows, open_room_level

SPLIT_ROWS = [
    "############",
    "#  #       #",
    "############",
]


def test_reveals_cells_around_pose():
    level = open_room_level(30, 30)
    tracker = DiscoveryTracker.for_level(level)
    newly = tracker.update(Pose(10.5, 10.5))
    assert newly == tracker.count() > 0
    assert tracker.is_discovered(10, 10)
    assert tracker.is_discovered(15, 10)
    assert tracker.is_discovered(14, 14)
    assert not tracker.is_discovered(20, 20)
    assert tracker.cell_category(20, 20) == UNDISCOVERED


def test_update_is_idempotent_for_same_pose():
    tracker = DiscoveryTracker.for_level(open_room_level(12, 12))
    tracker.update(Pose(5.5, 5.5))
    assert tracker.update(Pose(5.5, 5.5)) == 0


def test_discovered_set_only_grows():
    tracker = DiscoveryTracker.for_level(open_room_level(30, 30))
    tracker.update(Pose(5.5, 5.5))
    before = tracker.count()
    tracker.update(Pose(20.5, 20.5))
    assert tracker.count() > before
    assert tracker.is_discovered(5, 5)


def test_wall_at_midpoint_hides_cells_behind_it():
    level = level_from_rows(SPLIT_ROWS)
    tracker = DiscoveryTracker.for_level(level)
    tracker.update(Pose(1.5, 1.5))
    assert tracker.is_discovered(2, 1)
    assert tracker.is_discovered(3, 1)
    assert tracker.cell_category(3, 1) == "wall"
    assert not tracker.is_discovered(5, 1)


def test_border_walls_are_seen_from_inside():
    level = open_room_level(10, 10, exit_at=(5, 4))
    tracker = DiscoveryTracker.for_level(level)
    tracker.update(Pose(4.5, 4.5))
    assert tracker.cell_category(0, 4) == "wall"
    assert tracker.cell_category(5, 4) == "exit"
    assert tracker.cell_category(4, 4) == "floor"


def test_rows_and_reset():
    level = open_room_level(8, 6)
    tracker = DiscoveryTracker.for_level(level, view_distance=1)
    tracker.update(Pose(1.5, 1.5))
    rows = tracker.rows()
    assert len(rows) == 6 and len(rows[0]) == 8
    assert rows[1][1] == "1"
    assert rows[5][7] == "0"

    bigger = open_room_level(12, 12)
    tracker.reset(bigger)
    assert tracker.count() == 0
    assert (tracker.width, tracker.height) == (12, 12)
