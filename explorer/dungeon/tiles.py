# Tile constants centralized for modular imports
WALL = "#"
INTERIOR_WALL = "B"  # wall with no open cell around it (render-only distinction)
FLOOR = " "
EXIT = "E"

PASSABLE = frozenset({FLOOR, EXIT})
WALLS = frozenset({WALL, INTERIOR_WALL})


def is_passable(tile: str) -> bool:
    return tile in PASSABLE


def tile_name(ch: str) -> str:
    if ch == FLOOR:
        return "floor"
    if ch == EXIT:
        return "exit"
    if ch == INTERIOR_WALL:
        return "interior_wall"
    return "wall"


__all__ = ["WALL", "INTERIOR_WALL", "FLOOR", "EXIT", "PASSABLE", "WALLS", "is_passable", "tile_name"]
