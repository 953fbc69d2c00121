"""Clock service.

Every timer in a session (animations, the auto-map cycle, the idle
auto-start countdown) reads milliseconds from one clock object. Live
sessions use the monotonic clock; tests and the headless simulator drive a
manual clock so timing is deterministic.
"""

from __future__ import annotations

import time


class MonotonicClock:
    def now(self) -> float:
        return time.monotonic() * 1000.0


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start_ms: float = 0.0):
        self._now = float(start_ms)

    def now(self) -> float:
        return self._now

    def advance(self, delta_ms: float) -> float:
        if delta_ms < 0:
            raise ValueError("clock cannot move backwards")
        self._now += delta_ms
        return self._now

    def set(self, now_ms: float) -> float:
        if now_ms < self._now:
            raise ValueError("clock cannot move backwards")
        self._now = float(now_ms)
        return self._now


__all__ = ["MonotonicClock", "ManualClock"]
