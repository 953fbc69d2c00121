"""Exit placement for a freshly carved level.

The exit goes into the last accepted room. Corner and edge-midpoint spots
one cell in from the room border are preferred; a spot only qualifies when
it is floor and has an open orthogonal neighbour so the exit is never sealed
in a pocket. Otherwise the room center is used, searching outward in square
rings for floor when the center itself is not floor.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from explorer.logging_utils import get_logger

from .rooms import Room
from .tiles import EXIT, FLOOR, PASSABLE

log = get_logger("generator")

Coord = Tuple[int, int]


def exit_candidates(room: Room) -> List[Coord]:
    cx, cy = room.center
    return [
        (room.x1 + 1, room.y1 + 1),
        (room.x2 - 2, room.y1 + 1),
        (room.x1 + 1, room.y2 - 2),
        (room.x2 - 2, room.y2 - 2),
        (cx, room.y1 + 1),
        (cx, room.y2 - 2),
        (room.x1 + 1, cy),
        (room.x2 - 2, cy),
    ]


def _has_open_neighbor(grid, x: int, y: int) -> bool:
    width, height = len(grid), len(grid[0])
    for dx, dy in ((-1, 0), (1, 0), (0, -1), (0, 1)):
        nx, ny = x + dx, y + dy
        if 0 <= nx < width and 0 <= ny < height and grid[nx][ny] in PASSABLE:
            return True
    return False


def _ring_search(grid, room: Room, cx: int, cy: int) -> Optional[Coord]:
    for r in range(1, max(room.w, room.h)):
        for dy in range(-r, r + 1):
            for dx in range(-r, r + 1):
                if abs(dx) != r and abs(dy) != r:
                    continue
                x, y = cx + dx, cy + dy
                if room.contains(x, y) and grid[x][y] == FLOOR:
                    return x, y
    return None


def choose_exit(grid, room: Room) -> Tuple[Coord, str]:
    """Pick the exit cell for room; returns ((x, y), strategy)."""
    width, height = len(grid), len(grid[0])
    for px, py in exit_candidates(room):
        inside = room.x1 < px < room.x2 - 1 and room.y1 < py < room.y2 - 1
        if inside and grid[px][py] == FLOOR and _has_open_neighbor(grid, px, py):
            return (px, py), "candidate"
    cx = max(1, min(width - 2, room.center[0]))
    cy = max(1, min(height - 2, room.center[1]))
    if grid[cx][cy] == FLOOR:
        return (cx, cy), "center"
    found = _ring_search(grid, room, cx, cy)
    if found is not None:
        return found, "ring"
    return (cx, cy), "forced"


def place_exit(grid, room: Room) -> Tuple[Coord, str]:
    (x, y), strategy = choose_exit(grid, room)
    if strategy == "forced":
        log.warn(event="exit_forced", x=x, y=y, room=room.to_dict())
    grid[x][y] = EXIT
    return (x, y), strategy


__all__ = ["exit_candidates", "choose_exit", "place_exit"]
