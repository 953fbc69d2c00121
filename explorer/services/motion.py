"""Agent pose, eased animations and movement rules.

Poses live in continuous grid units: cell (x, y) spans [x, x+1) x [y, y+1)
on the (x, z) plane. Heading 0 faces +Z and 90 faces +X, so the unit heading
vector is (sin a, cos a).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from explorer.dungeon.tiles import PASSABLE

from .config import COLLISION_BUFFER, MANUAL_MOVE_SPEED, TURN_STEP_DEG


class ManualMovePolicy(str, Enum):
    CONTINUOUS = "continuous"  # hold to glide, collision checked every tick
    DISCRETE = "discrete"  # one animated cell per key press


class BotMovePolicy(str, Enum):
    INTERPOLATED = "interpolated"
    INSTANT = "instant"


@dataclass
class Pose:
    x: float
    z: float
    angle: float = 0.0

    def cell(self) -> Tuple[int, int]:
        return (math.floor(self.x), math.floor(self.z))

    def heading(self) -> Tuple[float, float]:
        rad = math.radians(self.angle)
        return (math.sin(rad), math.cos(rad))

    def to_dict(self):
        return {"x": round(self.x, 4), "z": round(self.z, 4), "angle": round(self.angle, 3), "cell": list(self.cell())}


def normalize_angle(angle: float) -> float:
    return angle % 360.0


def angle_difference(target: float, current: float) -> float:
    """Signed shortest rotation from current to target, in (-180, 180]."""
    diff = target - current
    if diff > 180:
        diff -= 360
    if diff <= -180:
        diff += 360
    return diff


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def lerp_angle(a: float, b: float, t: float) -> float:
    delta = b - a
    if delta > 180:
        b -= 360
    elif delta < -180:
        b += 360
    return a + (b - a) * t


def ease_out_cubic(t: float) -> float:
    return 1 - (1 - t) ** 3


@dataclass
class Animation:
    start_ms: float
    duration_ms: float
    start_value: object
    target_value: object

    def progress(self, now: float) -> float:
        if self.duration_ms <= 0:
            return 1.0
        return max(0.0, min(1.0, (now - self.start_ms) / self.duration_ms))

    def done(self, now: float) -> bool:
        return self.progress(now) >= 1.0


class MotionState:
    """At most one translation and one rotation in flight."""

    def __init__(self, translation_ms: float = 150.0, rotation_ms: float = 120.0):
        self.translation_ms = translation_ms
        self.rotation_ms = rotation_ms
        self.translation: Optional[Animation] = None
        self.rotation: Optional[Animation] = None

    @property
    def animating(self) -> bool:
        return self.translation is not None or self.rotation is not None

    def clear(self) -> None:
        self.translation = None
        self.rotation = None

    def start_translation(self, pose: Pose, target: Tuple[float, float], now: float) -> bool:
        if self.translation is not None:
            return False
        self.translation = Animation(now, self.translation_ms, (pose.x, pose.z), tuple(target))
        return True

    def start_rotation(self, pose: Pose, target_angle: float, now: float) -> bool:
        if self.rotation is not None:
            return False
        self.rotation = Animation(now, self.rotation_ms, pose.angle, normalize_angle(target_angle))
        return True

    def update(self, pose: Pose, now: float) -> bool:
        """Sample animations into pose; True when one of them finished this tick."""
        settled = False
        if self.translation is not None:
            anim = self.translation
            t = anim.progress(now)
            eased = ease_out_cubic(t)
            (sx, sz), (tx, tz) = anim.start_value, anim.target_value
            pose.x = lerp(sx, tx, eased)
            pose.z = lerp(sz, tz, eased)
            if t >= 1.0:
                pose.x, pose.z = tx, tz
                self.translation = None
                settled = True
        if self.rotation is not None:
            anim = self.rotation
            t = anim.progress(now)
            eased = ease_out_cubic(t)
            pose.angle = normalize_angle(lerp_angle(anim.start_value, anim.target_value, eased))
            if t >= 1.0:
                pose.angle = anim.target_value
                self.rotation = None
                settled = True
        return settled


def is_walkable(grid, x: float, z: float, buffer: float = COLLISION_BUFFER) -> bool:
    """True when the buffer square around (x, z) and its center sit on passable cells."""
    width = len(grid)
    height = len(grid[0]) if width else 0
    points = (
        (x - buffer, z - buffer),
        (x + buffer, z - buffer),
        (x - buffer, z + buffer),
        (x + buffer, z + buffer),
        (x, z),
    )
    for px, pz in points:
        gx, gz = math.floor(px), math.floor(pz)
        if not (0 <= gx < width and 0 <= gz < height):
            return False
        if grid[gx][gz] not in PASSABLE:
            return False
    return True


def move_bot_to(motion: MotionState, pose: Pose, target: Tuple[float, float], policy: BotMovePolicy, now: float) -> bool:
    """Send the bot toward target; True when the pose changed immediately."""
    if policy is BotMovePolicy.INSTANT:
        pose.x, pose.z = target
        return True
    motion.start_translation(pose, target, now)
    return False


def manual_continuous_step(grid, pose: Pose, direction: int, dt_s: float, speed: float = MANUAL_MOVE_SPEED) -> bool:
    """Glide along the heading; direction is +1 forward, -1 backward."""
    if direction == 0 or dt_s <= 0:
        return False
    hx, hz = pose.heading()
    nx = pose.x + hx * speed * dt_s * direction
    nz = pose.z + hz * speed * dt_s * direction
    if not is_walkable(grid, nx, nz):
        return False
    pose.x, pose.z = nx, nz
    return True


def _sign(v: float) -> int:
    return (v > 0) - (v < 0)


def manual_discrete_step(grid, pose: Pose, motion: MotionState, direction: int, now: float) -> bool:
    """Animate one whole cell along the dominant heading axis, if that cell is open."""
    if motion.animating:
        return False
    hx, hz = pose.heading()
    dx, dz = hx * direction, hz * direction
    tx, tz = math.floor(pose.x), math.floor(pose.z)
    if abs(dx) > abs(dz):
        tx += _sign(dx)
    else:
        tz += _sign(dz)
    width = len(grid)
    height = len(grid[0]) if width else 0
    if not (0 <= tx < width and 0 <= tz < height) or grid[tx][tz] not in PASSABLE:
        return False
    return motion.start_translation(pose, (tx + 0.5, tz + 0.5), now)


def turn(motion: MotionState, pose: Pose, direction: int, now: float, step: float = TURN_STEP_DEG) -> bool:
    """Quarter turn; direction +1 is left (angle increases), -1 is right."""
    if motion.rotation is not None:
        return False
    return motion.start_rotation(pose, normalize_angle(pose.angle + step * direction), now)


__all__ = [
    "Animation",
    "BotMovePolicy",
    "ManualMovePolicy",
    "MotionState",
    "Pose",
    "angle_difference",
    "ease_out_cubic",
    "is_walkable",
    "lerp_angle",
    "manual_continuous_step",
    "manual_discrete_step",
    "move_bot_to",
    "normalize_angle",
    "turn",
]
