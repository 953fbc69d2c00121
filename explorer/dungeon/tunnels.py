"""L-shaped corridor carving between consecutive rooms.

Each corridor cell is carved to FLOOR together with the two cells beside it
(perpendicular to the run direction), giving a 3-wide passage.
"""

from typing import Tuple

from .tiles import FLOOR, WALL

Coord = Tuple[int, int]


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def carve_horizontal(grid, x_a: int, x_b: int, y: int) -> int:
    width, height = len(grid), len(grid[0])
    carved = 0
    if not (0 <= y < height):
        return carved
    for x in range(min(x_a, x_b), max(x_a, x_b) + 1):
        if not (0 <= x < width):
            continue
        grid[x][y] = FLOOR
        carved += 1
        if y > 0 and grid[x][y - 1] == WALL:
            grid[x][y - 1] = FLOOR
        if y < height - 1 and grid[x][y + 1] == WALL:
            grid[x][y + 1] = FLOOR
    return carved


def carve_vertical(grid, y_a: int, y_b: int, x: int) -> int:
    width, height = len(grid), len(grid[0])
    carved = 0
    if not (0 <= x < width):
        return carved
    for y in range(min(y_a, y_b), max(y_a, y_b) + 1):
        if not (0 <= y < height):
            continue
        grid[x][y] = FLOOR
        carved += 1
        if x > 0 and grid[x - 1][y] == WALL:
            grid[x - 1][y] = FLOOR
        if x < width - 1 and grid[x + 1][y] == WALL:
            grid[x + 1][y] = FLOOR
    return carved


def carve_corridor(grid, a: Coord, b: Coord, horizontal_first: bool) -> int:
    """Carve an L corridor from center a (previous room) to center b (new room).

    Returns the number of centerline cells carved.
    """
    width, height = len(grid), len(grid[0])
    ax, ay = _clamp(a[0], 0, width - 1), _clamp(a[1], 0, height - 1)
    bx, by = _clamp(b[0], 0, width - 1), _clamp(b[1], 0, height - 1)
    if horizontal_first:
        carved = carve_horizontal(grid, ax, bx, ay)
        carved += carve_vertical(grid, ay, by, bx)
    else:
        carved = carve_vertical(grid, ay, by, ax)
        carved += carve_horizontal(grid, ax, bx, by)
    return carved


__all__ = ["carve_corridor", "carve_horizontal", "carve_vertical"]
