from collections import deque

from explorer.dungeon.generator import Level
from explorer.dungeon.rooms import Room

# Tile characters duplicated lightly for test independence.
WALL = "#"
INTERIOR_WALL = "B"
FLOOR = " "
EXIT = "E"
WALKABLE = {FLOOR, EXIT}


def grid_from_rows(rows):
    """Column-major grid (grid[x][y]) from row strings as they are drawn."""
    height = len(rows)
    width = len(rows[0])
    assert all(len(r) == width for r in rows), "rows must have equal length"
    return [[rows[y][x] for y in range(height)] for x in range(width)]


def level_from_rows(rows, rooms=(), seed=None):
    grid = grid_from_rows(rows)
    exit_pos = None
    for y, row in enumerate(rows):
        x = row.find(EXIT)
        if x >= 0:
            exit_pos = (x, y)
            break
    return Level(
        grid=grid,
        rooms=list(rooms),
        seed=seed,
        width=len(rows[0]),
        height=len(rows),
        exit_pos=exit_pos,
    )


def open_room_rows(width, height, exit_at=None):
    """Single room filling the interior with a 1-cell wall border."""
    rows = []
    for y in range(height):
        if y in (0, height - 1):
            rows.append(WALL * width)
        else:
            rows.append(WALL + FLOOR * (width - 2) + WALL)
    if exit_at is not None:
        ex, ey = exit_at
        rows[ey] = rows[ey][:ex] + EXIT + rows[ey][ex + 1:]
    return rows


def open_room_level(width=10, height=10, exit_at=None):
    rows = open_room_rows(width, height, exit_at)
    return level_from_rows(rows, rooms=[Room(1, 1, width - 1, height - 1)])


# Three 3x5 rooms in a row joined by a corridor along y=3.
THREE_ROOMS_ROWS = [
    "###############",
    "#   ##   ##   #",
    "#   ##   ##   #",
    "#             #",
    "#   ##   ##   #",
    "#   ##   ##   #",
    "###############",
]
THREE_ROOMS = [Room(1, 1, 4, 6), Room(6, 1, 9, 6), Room(11, 1, 14, 6)]


def find_tiles(grid, ch):
    return [(x, y) for x in range(len(grid)) for y in range(len(grid[0])) if grid[x][y] == ch]


def bfs_reachable(grid, start):
    """Return set of (x,y) walkable reachable tiles from start over WALKABLE."""
    if start is None:
        return set()
    w = len(grid)
    h = len(grid[0])
    sx, sy = start
    if not (0 <= sx < w and 0 <= sy < h):
        return set()
    if grid[sx][sy] not in WALKABLE:
        return set()
    q = deque([start])
    vis = {start}
    while q:
        x, y = q.popleft()
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx, ny = x + dx, y + dy
            if 0 <= nx < w and 0 <= ny < h and (nx, ny) not in vis:
                if grid[nx][ny] in WALKABLE:
                    vis.add((nx, ny))
                    q.append((nx, ny))
    return vis


def assert_valid_path(grid, path, start, goal):
    assert path, "expected a path"
    assert path[0] == start
    assert path[-1] == goal
    for (ax, ay), (bx, by) in zip(path, path[1:]):
        assert abs(ax - bx) + abs(ay - by) == 1, f"non-adjacent step {(ax, ay)} -> {(bx, by)}"
        assert grid[bx][by] in WALKABLE
