from .tiles import INTERIOR_WALL, WALL, WALLS

_EIGHT = ((-1, 0), (1, 0), (0, -1), (0, 1), (-1, -1), (-1, 1), (1, -1), (1, 1))


def classify_interior_walls(grid) -> int:
    """Retag walls with no open cell among their 8 neighbours as INTERIOR_WALL.

    Decisions are taken against the grid as it was before the pass, so a
    freshly retagged cell never makes its neighbour look open. Returns the
    number of cells retagged.
    """
    width, height = len(grid), len(grid[0])
    enclosed = []
    for x in range(width):
        for y in range(height):
            if grid[x][y] != WALL:
                continue
            open_nearby = False
            for dx, dy in _EIGHT:
                nx, ny = x + dx, y + dy
                if 0 <= nx < width and 0 <= ny < height and grid[nx][ny] not in WALLS:
                    open_nearby = True
                    break
            if not open_nearby:
                enclosed.append((x, y))
    for x, y in enclosed:
        grid[x][y] = INTERIOR_WALL
    return len(enclosed)
