"""Bot navigation controller.

The controller owns the current path and its cursor and turns them into one
decision per tick: rotate toward the next cell, step onto it, or recompute
the path when it has gone stale. It never starts a move while an animation
is in flight, and switching the bot off leaves running animations alone.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import List, Optional, Tuple

from explorer.dungeon.connectivity import GridGraph
from explorer.dungeon.tiles import EXIT
from explorer.logging_utils import get_logger

from .config import DEFAULT_ALGORITHM
from .motion import BotMovePolicy, MotionState, Pose, angle_difference, is_walkable, move_bot_to, normalize_angle
from .pathfinding import Algorithm, find_path, resolve_algorithm

log = get_logger("bot")

ARRIVE_EPSILON_SQ = 0.01
ANGLE_TOLERANCE_DEG = 1.0

# tick outcomes
IDLE = "idle"
WAITING = "waiting"
ROTATE = "rotate"
ADVANCE = "advance"
STEPPED = "stepped"
CURSOR_ADVANCED = "cursor_advanced"
RECOMPUTED = "recomputed"
AT_EXIT = "at_exit"


class BotState(str, Enum):
    OFF = "off"
    ROTATING = "rotating"
    ADVANCING = "advancing"


class BotController:
    def __init__(self, algorithm=DEFAULT_ALGORITHM, move_policy: BotMovePolicy = BotMovePolicy.INTERPOLATED):
        self.algorithm: Algorithm = resolve_algorithm(algorithm)
        self.move_policy = move_policy
        self.state = BotState.OFF
        self.path: List[Tuple[int, int]] = []
        self.index = 0
        self.recomputations = 0

    @property
    def active(self) -> bool:
        return self.state is not BotState.OFF

    @property
    def exhausted(self) -> bool:
        return self.index >= len(self.path)

    def remaining_path(self) -> List[Tuple[int, int]]:
        return self.path[self.index:]

    def reset(self) -> None:
        self.state = BotState.OFF
        self.path = []
        self.index = 0

    def enable(self, level, pose: Pose) -> bool:
        self.state = BotState.ADVANCING
        log.info(event="bot_enabled", algorithm=self.algorithm.value)
        return self.compute_path(level, pose)

    def disable(self) -> None:
        if self.state is not BotState.OFF:
            log.info(event="bot_disabled", algorithm=self.algorithm.value)
        self.state = BotState.OFF

    def select_algorithm(self, name, level=None, pose: Optional[Pose] = None) -> Algorithm:
        self.algorithm = resolve_algorithm(name)
        if self.active and level is not None and pose is not None:
            self.compute_path(level, pose)
        return self.algorithm

    def compute_path(self, level, pose: Pose) -> bool:
        """Plan from the pose cell to the exit; disables the bot when that fails."""
        graph = GridGraph(level.grid)
        exit_cell = graph.find_exit()
        if exit_cell is None:
            log.warn(event="bot_no_exit", seed=level.seed)
            self.path, self.index = [], 0
            self.disable()
            return False
        start = pose.cell()
        if not graph.is_passable(start):
            substitute = graph.first_passable_neighbor(start)
            if substitute is None:
                log.warn(event="bot_path_not_found", reason="start_enclosed", start=start)
                self.path, self.index = [], 0
                self.disable()
                return False
            log.warn(event="bot_start_adjusted", start=start, adjusted=substitute)
            start = substitute
        self.recomputations += 1
        self.path = find_path(self.algorithm, start, exit_cell, graph, level.rooms)
        if not self.path:
            log.warn(event="bot_path_not_found", algorithm=self.algorithm.value, start=start, goal=exit_cell)
            self.index = 0
            self.disable()
            return False
        self.index = 1 if len(self.path) > 1 else 0
        return True

    def tick(self, level, pose: Pose, motion: MotionState, now: float) -> str:
        """Make one navigation decision; returns the tick outcome name."""
        if not self.active:
            return IDLE
        if motion.animating:
            return WAITING
        if self.exhausted:
            cx, cy = pose.cell()
            on_exit = 0 <= cx < level.width and 0 <= cy < level.height and level.grid[cx][cy] == EXIT
            if on_exit:
                return AT_EXIT
            log.info(event="bot_path_exhausted", cell=(cx, cy))
            self.compute_path(level, pose)
            return RECOMPUTED

        tx, tz = self._target_center()
        dx, dz = tx - pose.x, tz - pose.z
        if dx * dx + dz * dz < ARRIVE_EPSILON_SQ:
            self.index += 1
            if self.exhausted:
                log.debug(event="bot_path_complete", length=len(self.path))
                return CURSOR_ADVANCED
            tx, tz = self._target_center()
            dx, dz = tx - pose.x, tz - pose.z

        desired = normalize_angle(math.degrees(math.atan2(dx, dz)))
        if abs(angle_difference(desired, pose.angle)) > ANGLE_TOLERANCE_DEG:
            self.state = BotState.ROTATING
            motion.start_rotation(pose, desired, now)
            return ROTATE

        self.state = BotState.ADVANCING
        cell = self.path[self.index]
        graph = GridGraph(level.grid)
        if not (graph.is_passable(cell) and is_walkable(level.grid, tx, tz)):
            log.warn(event="bot_path_blocked", cell=cell, index=self.index)
            self.compute_path(level, pose)
            return RECOMPUTED
        if move_bot_to(motion, pose, (tx, tz), self.move_policy, now):
            return STEPPED
        return ADVANCE

    def _target_center(self) -> Tuple[float, float]:
        x, y = self.path[self.index]
        return x + 0.5, y + 0.5

    def to_dict(self):
        return {
            "state": self.state.value,
            "algorithm": self.algorithm.value,
            "move_policy": self.move_policy.value,
            "path": [list(c) for c in self.remaining_path()],
            "path_length": len(self.path),
            "cursor": self.index,
        }


__all__ = ["BotController", "BotState"]
