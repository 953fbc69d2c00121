"""Fog-of-war bookkeeping.

Cells within a rough circle around the agent are marked discovered unless
the cell halfway between the agent and the target is a wall. The set only
grows; it is replaced wholesale when a new level is generated.
"""

from __future__ import annotations

import math
from typing import List

from explorer.dungeon.tiles import EXIT, INTERIOR_WALL, WALL, WALLS

from .config import VIEW_DISTANCE

UNDISCOVERED = "undiscovered"


class DiscoveryTracker:
    def __init__(self, width: int, height: int, view_distance: int = VIEW_DISTANCE):
        self.width = width
        self.height = height
        self.view_distance = view_distance
        self.grid: List[List[str]] = []
        self.flags: List[List[bool]] = [[False] * height for _ in range(width)]

    @classmethod
    def for_level(cls, level, view_distance: int = VIEW_DISTANCE) -> "DiscoveryTracker":
        tracker = cls(level.width, level.height, view_distance)
        tracker.grid = level.grid
        return tracker

    def reset(self, level) -> None:
        self.width = level.width
        self.height = level.height
        self.grid = level.grid
        self.flags = [[False] * self.height for _ in range(self.width)]

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def update(self, pose) -> int:
        """Reveal cells around pose; returns how many cells were newly discovered."""
        px, pz = math.floor(pose.x), math.floor(pose.z)
        vd = self.view_distance
        newly = 0
        for i in range(-vd, vd + 1):
            for j in range(-vd, vd + 1):
                if math.sqrt(i * i + j * j) > vd + 1:
                    continue
                cx, cz = px + j, pz + i
                if not self._in_bounds(cx, cz):
                    continue
                if abs(i) > 1 or abs(j) > 1:
                    mx, mz = math.floor(px + j * 0.5), math.floor(pz + i * 0.5)
                    if self._in_bounds(mx, mz) and self.grid[mx][mz] in WALLS:
                        continue
                if not self.flags[cx][cz]:
                    self.flags[cx][cz] = True
                    newly += 1
        if self._in_bounds(px, pz) and not self.flags[px][pz]:
            self.flags[px][pz] = True
            newly += 1
        return newly

    def is_discovered(self, x: int, y: int) -> bool:
        return self._in_bounds(x, y) and self.flags[x][y]

    def count(self) -> int:
        return sum(sum(1 for f in column if f) for column in self.flags)

    def cell_category(self, x: int, y: int) -> str:
        if not self.is_discovered(x, y):
            return UNDISCOVERED
        ch = self.grid[x][y]
        if ch == WALL:
            return "wall"
        if ch == INTERIOR_WALL:
            return "interior_wall"
        if ch == EXIT:
            return "exit"
        return "floor"

    def rows(self) -> List[str]:
        # '1' discovered, '0' not; row-major like Level.rows()
        return ["".join("1" if self.flags[x][y] else "0" for x in range(self.width)) for y in range(self.height)]


__all__ = ["DiscoveryTracker", "UNDISCOVERED"]
