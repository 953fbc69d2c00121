"""Timed full-map display while the bot drives.

IDLE -> INITIAL_WAIT -(3s)-> MAP_OPEN -(5s)-> MAP_CLOSED_WAIT -(6s)-> MAP_OPEN ...

Each transition is anchored on the time it fired, so the schedule is
visibility false in [T, T+3000), true in [T+3000, T+8000), false in
[T+8000, T+14000) and true again from T+14000, repeating.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class AutoMapState(str, Enum):
    IDLE = "idle"
    INITIAL_WAIT = "initial_wait"
    MAP_OPEN = "map_open"
    MAP_CLOSED_WAIT = "map_closed_wait"


class AutoMapCycle:
    def __init__(self, initial_wait_ms: float = 3000.0, open_ms: float = 5000.0, closed_wait_ms: float = 6000.0):
        self.initial_wait_ms = initial_wait_ms
        self.open_ms = open_ms
        self.closed_wait_ms = closed_wait_ms
        self.state = AutoMapState.IDLE
        self.anchor: Optional[float] = None
        self.visible = False

    @property
    def running(self) -> bool:
        return self.state is not AutoMapState.IDLE

    def start(self, now: float) -> None:
        self.state = AutoMapState.INITIAL_WAIT
        self.anchor = now
        self.visible = False

    def stop(self) -> None:
        self.state = AutoMapState.IDLE
        self.anchor = None
        self.visible = False

    def override(self) -> None:
        """A manual map toggle hands visibility back to the user."""
        self.state = AutoMapState.IDLE
        self.anchor = None

    def _duration(self, state: AutoMapState) -> float:
        if state is AutoMapState.INITIAL_WAIT:
            return self.initial_wait_ms
        if state is AutoMapState.MAP_OPEN:
            return self.open_ms
        return self.closed_wait_ms

    def update(self, now: float, bot_active: bool = True) -> bool:
        """Advance through every transition due by now; returns map visibility.

        While the bot is off the cycle is frozen and visibility is left as is.
        """
        if not bot_active or self.state is AutoMapState.IDLE:
            return self.visible
        while now - self.anchor >= self._duration(self.state):
            self.anchor += self._duration(self.state)
            if self.state is AutoMapState.MAP_OPEN:
                self.state = AutoMapState.MAP_CLOSED_WAIT
                self.visible = False
            else:
                self.state = AutoMapState.MAP_OPEN
                self.visible = True
            if self._duration(self.state) <= 0:
                break
        return self.visible

    def visible_at(self, now: float) -> bool:
        """Visibility the schedule gives for now, without mutating state."""
        if self.state is AutoMapState.IDLE or self.anchor is None:
            return self.visible
        state, anchor = self.state, self.anchor
        visible = self.visible
        while now - anchor >= self._duration(state):
            anchor += self._duration(state)
            state = AutoMapState.MAP_CLOSED_WAIT if state is AutoMapState.MAP_OPEN else AutoMapState.MAP_OPEN
            visible = state is AutoMapState.MAP_OPEN
            if self._duration(state) <= 0:
                break
        return visible


__all__ = ["AutoMapCycle", "AutoMapState"]
