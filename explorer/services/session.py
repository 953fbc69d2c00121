"""Game session: the single owner of all mutable explorer state.

A session holds one level at a time together with the agent pose, the
discovery set, in-flight animations, the bot, the auto-map cycle and the
idle auto-start countdown. Everything advances through ``tick()`` and
``handle_input()``; callers never mutate the pieces directly. Reaching the
exit with no animation running rolls straight into a freshly generated level.
"""

from __future__ import annotations

from typing import Optional, Set

from explorer.dungeon.config import LevelConfig
from explorer.dungeon.generator import Level, generate_level
from explorer.dungeon.seeds import coerce_seed, time_seed
from explorer.dungeon.tiles import EXIT
from explorer.logging_utils import get_logger

from .automap import AutoMapCycle
from .autostart import IdleAutoStart
from .bot import STEPPED, BotController
from .config import DEFAULT_ALGORITHM, MAX_GENERATION_ATTEMPTS, BotTiming
from .discovery import DiscoveryTracker
from .motion import (
    BotMovePolicy,
    ManualMovePolicy,
    MotionState,
    Pose,
    manual_continuous_step,
    manual_discrete_step,
    turn,
)
from .pathfinding import ALGORITHM_KEYS, Algorithm
from .time_service import MonotonicClock

log = get_logger("session")

MOVEMENT_ACTIONS = ("forward", "backward", "turn_left", "turn_right")
TOGGLE_ACTIONS = ("toggle_bot", "toggle_map", "toggle_manual_style", "toggle_bot_style")
ALGORITHM_PREFIX = "select_algorithm:"


class LevelGenerationError(RuntimeError):
    pass


class GameSession:
    def __init__(
        self,
        config: Optional[LevelConfig] = None,
        timing: Optional[BotTiming] = None,
        clock=None,
        seed=None,
        algorithm=DEFAULT_ALGORITHM,
    ):
        self.config = config or LevelConfig()
        self.timing = timing or BotTiming()
        self.clock = clock or MonotonicClock()
        self.motion = MotionState(self.timing.translation_ms, self.timing.rotation_ms)
        self.bot = BotController(algorithm)
        self.automap = AutoMapCycle(
            self.timing.automap_initial_wait_ms,
            self.timing.automap_open_ms,
            self.timing.automap_closed_wait_ms,
        )
        now = self.clock.now()
        self.autostart = IdleAutoStart(self.timing.autostart_ms, now)
        self.manual_policy = ManualMovePolicy.CONTINUOUS
        self.held: Set[str] = set()
        self.map_visible = False
        self.level_count = 0
        self.last_tick = now
        self.level: Optional[Level] = None
        self.pose = Pose(1.5, 1.5, 0.0)
        self.discovery: Optional[DiscoveryTracker] = None
        self.log = log
        self.new_level(seed)

    # ------------------------------------------------------------------ level
    def _generate(self, seed) -> Level:
        requested = coerce_seed(seed)
        for attempt in range(MAX_GENERATION_ATTEMPTS):
            candidate = requested if attempt == 0 else time_seed() + attempt
            level = generate_level(
                LevelConfig(
                    width=self.config.width,
                    height=self.config.height,
                    max_rooms=self.config.max_rooms,
                    room_min_size=self.config.room_min_size,
                    room_max_size=self.config.room_max_size,
                    seed=candidate,
                )
            )
            if level.usable:
                return level
            log.warn(event="level_retry", seed=candidate, attempt=attempt + 1)
        raise LevelGenerationError(f"no usable level after {MAX_GENERATION_ATTEMPTS} attempts")

    def new_level(self, seed=None) -> Level:
        now = self.clock.now()
        self.level = self._generate(seed)
        if self.discovery is None:
            self.discovery = DiscoveryTracker.for_level(self.level)
        else:
            self.discovery.reset(self.level)
        sx, sz = self.level.spawn_point()
        self.pose = Pose(sx, sz, 0.0)
        self.motion.clear()
        self.bot.reset()
        self.automap.stop()
        self.map_visible = False
        self.autostart.reset(now)
        self.held.clear()
        self.level_count += 1
        self.discovery.update(self.pose)
        self.log = log.bind(seed=self.level.seed, level_no=self.level_count)
        self.log.info(event="level_started", rooms=len(self.level.rooms))
        return self.level

    def on_exit(self) -> bool:
        cx, cy = self.pose.cell()
        lvl = self.level
        return 0 <= cx < lvl.width and 0 <= cy < lvl.height and lvl.grid[cx][cy] == EXIT

    # ------------------------------------------------------------------- tick
    def tick(self, now: Optional[float] = None) -> dict:
        now = self.clock.now() if now is None else float(now)
        dt_s = max(0.0, (now - self.last_tick) / 1000.0)
        self.last_tick = now

        if self.motion.update(self.pose, now):
            self.discovery.update(self.pose)

        if not self.bot.active:
            self._manual_tick(now, dt_s)

        if self.bot.tick(self.level, self.pose, self.motion, now) == STEPPED:
            self.discovery.update(self.pose)

        if self.automap.running:
            self.map_visible = self.automap.update(now, self.bot.active)

        if self.autostart.should_start(now, self.bot.active):
            self._auto_start(now)

        level_changed = False
        if not self.motion.animating and self.on_exit():
            self.log.info(event="exit_reached")
            self.new_level()
            level_changed = True

        snap = self.snapshot(now)
        snap["level_changed"] = level_changed
        return snap

    def _manual_tick(self, now: float, dt_s: float) -> None:
        if self.manual_policy is ManualMovePolicy.CONTINUOUS:
            direction = ("forward" in self.held) - ("backward" in self.held)
            if manual_continuous_step(self.level.grid, self.pose, direction, dt_s):
                self.discovery.update(self.pose)
        if self.motion.rotation is None:
            if "turn_left" in self.held:
                turn(self.motion, self.pose, +1, now)
            elif "turn_right" in self.held:
                turn(self.motion, self.pose, -1, now)

    def _auto_start(self, now: float) -> None:
        self.log.info(event="bot_autostarted", idle_ms=round(self.autostart.elapsed_ms(now)))
        self.autostart.mark_started()
        self.bot.select_algorithm(Algorithm.EXPLORE)
        if self.bot.enable(self.level, self.pose):
            self.automap.start(now)

    # ------------------------------------------------------------------ input
    def handle_input(self, action: str, pressed: bool = True, now: Optional[float] = None) -> dict:
        now = self.clock.now() if now is None else float(now)
        action = (action or "").strip().lower()
        qualifying = False

        if action in MOVEMENT_ACTIONS:
            if not pressed:
                self.held.discard(action)
                return self.snapshot(now)
            self.held.add(action)
            qualifying = True
            if (
                action in ("forward", "backward")
                and self.manual_policy is ManualMovePolicy.DISCRETE
                and not self.bot.active
            ):
                direction = 1 if action == "forward" else -1
                manual_discrete_step(self.level.grid, self.pose, self.motion, direction, now)
        elif not pressed:
            return self.snapshot(now)
        elif action == "toggle_bot":
            self._toggle_bot(now)
            qualifying = True
        elif action.startswith(ALGORITHM_PREFIX):
            name = action[len(ALGORITHM_PREFIX):]
            name = ALGORITHM_KEYS.get(name, name)
            self.bot.select_algorithm(name, self.level, self.pose)
            self.log.info(event="algorithm_selected", algorithm=self.bot.algorithm.value)
            qualifying = not self.bot.active
        elif action == "toggle_map":
            self.map_visible = not self.map_visible
            if self.bot.active and self.automap.running:
                self.log.info(event="automap_overridden")
                self.automap.override()
        elif action == "toggle_manual_style":
            self.manual_policy = (
                ManualMovePolicy.DISCRETE
                if self.manual_policy is ManualMovePolicy.CONTINUOUS
                else ManualMovePolicy.CONTINUOUS
            )
        elif action == "toggle_bot_style":
            self.bot.move_policy = (
                BotMovePolicy.INSTANT
                if self.bot.move_policy is BotMovePolicy.INTERPOLATED
                else BotMovePolicy.INTERPOLATED
            )
        else:
            raise ValueError(f"unknown action: {action!r}")

        if qualifying:
            self.autostart.record_input(now)
        return self.snapshot(now)

    def _toggle_bot(self, now: float) -> None:
        if self.bot.active:
            self.bot.disable()
            self.automap.stop()
            self.map_visible = False
        elif self.bot.enable(self.level, self.pose):
            self.automap.start(now)

    # --------------------------------------------------------------- snapshot
    def snapshot(self, now: Optional[float] = None) -> dict:
        now = self.clock.now() if now is None else now
        bot = self.bot.to_dict()
        return {
            "seed": self.level.seed,
            "level": self.level_count,
            "width": self.level.width,
            "height": self.level.height,
            "exit": list(self.level.exit_pos) if self.level.exit_pos else None,
            "pose": self.pose.to_dict(),
            "bot": bot,
            "animating": self.motion.animating,
            "map_visible": self.map_visible,
            "automap_state": self.automap.state.value,
            "manual_policy": self.manual_policy.value,
            "discovered": self.discovery.count(),
            "autostart_in": None if self.bot.active or self.autostart.auto_started else self.autostart.remaining_seconds(now),
            "status": self.status_text(now),
        }

    def status_text(self, now: float) -> Optional[str]:
        if self.bot.active:
            return f"Bot Active ({self.bot.algorithm.value.upper()}). Press B to toggle."
        return self.autostart.status_text(now, self.bot.active)


__all__ = ["GameSession", "LevelGenerationError", "MOVEMENT_ACTIONS", "TOGGLE_ACTIONS"]
