import pytest

from explorer.services.motion import (
    Animation,
    BotMovePolicy,
    MotionState,
    Pose,
    angle_difference,
    ease_out_cubic,
    is_walkable,
    lerp_angle,
    manual_continuous_step,
    manual_discrete_step,
    move_bot_to,
    normalize_angle,
    turn,
)
from level_test_utils import open_room_level


@pytest.fixture()
def grid():
    return open_room_level(10, 10).grid


def test_easing_and_angle_helpers():
    assert ease_out_cubic(0.0) == 0.0
    assert ease_out_cubic(0.5) == 0.875
    assert ease_out_cubic(1.0) == 1.0
    assert normalize_angle(lerp_angle(350, 10, 0.5)) == 0.0
    assert angle_difference(10, 350) == 20
    assert angle_difference(190, 0) == -170
    assert angle_difference(0, 180) == 180
    assert normalize_angle(-90) == 270


def test_pose_cell_and_heading():
    pose = Pose(3.7, 4.2, 90)
    assert pose.cell() == (3, 4)
    hx, hz = pose.heading()
    assert hx == pytest.approx(1.0)
    assert hz == pytest.approx(0.0, abs=1e-9)
    assert pose.to_dict()["cell"] == [3, 4]


def test_zero_duration_animation_is_done():
    assert Animation(100, 0, 0.0, 1.0).done(100)


def test_translation_eases_then_snaps():
    motion = MotionState(translation_ms=150, rotation_ms=120)
    pose = Pose(1.5, 1.5, 90)
    assert motion.start_translation(pose, (2.5, 1.5), now=0)
    assert not motion.start_translation(pose, (3.5, 1.5), now=0)
    assert motion.update(pose, 75) is False
    assert pose.x == pytest.approx(2.375)
    assert motion.update(pose, 150) is True
    assert (pose.x, pose.z) == (2.5, 1.5)
    assert not motion.animating


def test_rotation_takes_short_way_round():
    motion = MotionState()
    pose = Pose(1.5, 1.5, 350)
    motion.start_rotation(pose, 10, now=0)
    motion.update(pose, 60)
    assert pose.angle > 350 or pose.angle < 10
    assert motion.update(pose, 120) is True
    assert pose.angle == 10


def test_collision_buffer(grid):
    assert is_walkable(grid, 1.5, 1.5)
    assert is_walkable(grid, 1.15, 1.5)
    assert not is_walkable(grid, 1.05, 1.5)
    assert not is_walkable(grid, 0.5, 0.5)
    assert not is_walkable(grid, -3, 2)


def test_instant_and_interpolated_bot_moves():
    motion = MotionState()
    pose = Pose(1.5, 1.5)
    assert move_bot_to(motion, pose, (2.5, 1.5), BotMovePolicy.INSTANT, now=0) is True
    assert pose.x == 2.5 and not motion.animating
    assert move_bot_to(motion, pose, (3.5, 1.5), BotMovePolicy.INTERPOLATED, now=0) is False
    assert motion.translation.target_value == (3.5, 1.5)
    assert pose.x == 2.5


def test_continuous_step_moves_along_heading(grid):
    pose = Pose(2.5, 2.5, 90)
    assert manual_continuous_step(grid, pose, 1, 0.1)
    assert pose.x == pytest.approx(2.95)
    assert pose.z == pytest.approx(2.5)
    assert manual_continuous_step(grid, pose, -1, 0.1)
    assert pose.x == pytest.approx(2.5)
    assert not manual_continuous_step(grid, pose, 0, 0.1)


def test_continuous_step_stops_at_wall(grid):
    pose = Pose(8.5, 2.5, 90)
    assert not manual_continuous_step(grid, pose, 1, 0.1)
    assert (pose.x, pose.z) == (8.5, 2.5)


def test_discrete_step_targets_neighbour_cell(grid):
    motion = MotionState()
    pose = Pose(2.5, 2.5, 90)
    assert manual_discrete_step(grid, pose, motion, 1, now=0)
    assert motion.translation.target_value == (3.5, 2.5)
    # ignored while the previous step is still animating
    assert not manual_discrete_step(grid, pose, motion, 1, now=10)

    motion = MotionState()
    pose = Pose(2.5, 2.5, 0)
    assert manual_discrete_step(grid, pose, motion, -1, now=0)
    assert motion.translation.target_value == (2.5, 1.5)


def test_discrete_step_into_wall_is_refused(grid):
    motion = MotionState()
    pose = Pose(8.5, 2.5, 90)
    assert not manual_discrete_step(grid, pose, motion, 1, now=0)
    assert not motion.animating


def test_turn_quarter_steps():
    motion = MotionState()
    pose = Pose(1.5, 1.5, 0)
    assert turn(motion, pose, 1, now=0)
    assert motion.rotation.target_value == 90
    assert not turn(motion, pose, -1, now=10)
    motion.update(pose, 200)
    assert turn(motion, pose, -1, now=200)
    assert motion.rotation.target_value == 0
    motion.update(pose, 400)
    assert turn(motion, pose, -1, now=400)
    assert motion.rotation.target_value == 270
