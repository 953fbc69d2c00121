"""Read-only graph view over a level grid.

Cells are nodes; edges join orthogonally adjacent passable cells. Neighbour
order is fixed at (+1,0), (-1,0), (0,+1), (0,-1) because the search strategies
(depth-first in particular) depend on it for deterministic output.
"""

from __future__ import annotations

from collections import deque
from typing import Iterator, List, Optional, Set, Tuple

from .tiles import EXIT, PASSABLE

Coord2D = Tuple[int, int]

NEIGHBOR_OFFSETS: Tuple[Coord2D, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


class GridGraph:
    def __init__(self, grid):
        self.grid = grid
        self.width = len(grid)
        self.height = len(grid[0]) if self.width else 0

    @classmethod
    def from_level(cls, level) -> "GridGraph":
        return cls(level.grid)

    def in_bounds(self, cell: Coord2D) -> bool:
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height

    def is_passable(self, cell: Coord2D) -> bool:
        return self.in_bounds(cell) and self.grid[cell[0]][cell[1]] in PASSABLE

    def neighbors(self, cell: Coord2D) -> List[Coord2D]:
        x, y = cell
        out = []
        for dx, dy in NEIGHBOR_OFFSETS:
            n = (x + dx, y + dy)
            if self.is_passable(n):
                out.append(n)
        return out

    def first_passable_neighbor(self, cell: Coord2D) -> Optional[Coord2D]:
        found = self.neighbors(cell)
        return found[0] if found else None

    def find_exit(self) -> Optional[Coord2D]:
        """First EXIT cell scanning rows top to bottom, left to right."""
        for y in range(self.height):
            for x in range(self.width):
                if self.grid[x][y] == EXIT:
                    return (x, y)
        return None

    def passable_cells(self) -> Iterator[Coord2D]:
        for x in range(self.width):
            for y in range(self.height):
                if self.grid[x][y] in PASSABLE:
                    yield (x, y)

    def reachable_from(self, cell: Coord2D) -> Set[Coord2D]:
        if not self.is_passable(cell):
            return set()
        visited = {cell}
        q = deque([cell])
        while q:
            cur = q.popleft()
            for n in self.neighbors(cur):
                if n not in visited:
                    visited.add(n)
                    q.append(n)
        return visited


__all__ = ["GridGraph", "NEIGHBOR_OFFSETS", "Coord2D"]
