"""Grid pathfinding strategies used by the bot.

All strategies share one signature, ``(start, goal, graph[, rooms])``, and
return the list of cells from start to goal inclusive, or ``[]`` when the goal
cannot be reached. ``start == goal`` always yields ``[start]``.

- bfs: shortest by edge count
- dfs: first path found; neighbours pushed in reverse so the preferred
  direction is explored first
- astar: unit cost, Manhattan heuristic, ties broken by insertion order
- explore: visits every room center (nearest first) and then the goal
"""

from __future__ import annotations

import heapq
import time
from collections import deque
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from explorer.dungeon.connectivity import GridGraph
from explorer.logging_utils import get_logger

log = get_logger("pathfinding")

Cell = Tuple[int, int]
Path = List[Cell]


class Algorithm(str, Enum):
    BFS = "bfs"
    DFS = "dfs"
    ASTAR = "astar"
    EXPLORE = "explore"


STRATEGIES = frozenset(a.value for a in Algorithm)

# number-key shortcuts for algorithm selection
ALGORITHM_KEYS = {"1": Algorithm.BFS, "2": Algorithm.DFS, "3": Algorithm.ASTAR, "4": Algorithm.EXPLORE}


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _walk_back(came_from: Dict[Cell, Optional[Cell]], goal: Cell) -> Path:
    path = []
    cur: Optional[Cell] = goal
    while cur is not None:
        path.append(cur)
        cur = came_from[cur]
    path.reverse()
    return path


def bfs_path(start: Cell, goal: Cell, graph: GridGraph) -> Path:
    # cells are marked on enqueue; the first parent recorded is the one kept
    came_from: Dict[Cell, Optional[Cell]] = {start: None}
    q = deque([start])
    while q:
        cur = q.popleft()
        if cur == goal:
            return _walk_back(came_from, goal)
        for n in graph.neighbors(cur):
            if n not in came_from:
                came_from[n] = cur
                q.append(n)
    return []


def dfs_path(start: Cell, goal: Cell, graph: GridGraph) -> Path:
    came_from: Dict[Cell, Optional[Cell]] = {start: None}
    stack = [start]
    while stack:
        cur = stack.pop()
        if cur == goal:
            return _walk_back(came_from, goal)
        for n in reversed(graph.neighbors(cur)):
            if n not in came_from:
                came_from[n] = cur
                stack.append(n)
    return []


def astar_path(start: Cell, goal: Cell, graph: GridGraph) -> Path:
    counter = 0
    frontier: List[Tuple[int, int, Cell]] = [(0, counter, start)]
    came_from: Dict[Cell, Optional[Cell]] = {start: None}
    cost_so_far: Dict[Cell, int] = {start: 0}
    while frontier:
        _priority, _order, cur = heapq.heappop(frontier)
        if cur == goal:
            return _walk_back(came_from, goal)
        new_cost = cost_so_far[cur] + 1
        for n in graph.neighbors(cur):
            if n not in cost_so_far or new_cost < cost_so_far[n]:
                cost_so_far[n] = new_cost
                came_from[n] = cur
                counter += 1
                heapq.heappush(frontier, (new_cost + manhattan(n, goal), counter, n))
    return []


def _append_segment(path: Path, segment: Sequence[Cell]) -> None:
    if path and segment and path[-1] == segment[0]:
        path.extend(segment[1:])
    else:
        path.extend(segment)


def explore_path(start: Cell, goal: Cell, graph: GridGraph, rooms: Iterable = ()) -> Path:
    """Route through every room center, nearest first, finishing on goal.

    Centers that cannot be reached are skipped. If the route cannot end on
    the goal the whole route is discarded and ``[]`` is returned.
    """
    if start == goal:
        return [start]
    targets: List[Cell] = []
    seen = set()
    for room in rooms:
        c = tuple(room.center)
        if c not in seen:
            seen.add(c)
            targets.append(c)
    if goal not in seen:
        if graph.is_passable(goal):
            seen.add(goal)
            targets.append(goal)
        else:
            log.warn(event="explore_goal_blocked", goal=goal)

    route: Path = []
    current = start
    while targets:
        # stable sort keeps room order among equally distant centers
        targets.sort(key=lambda c: manhattan(current, c))
        target = targets.pop(0)
        segment = bfs_path(current, target, graph)
        if not segment:
            log.warn(event="explore_segment_unreachable", source=current, target=target)
            continue
        _append_segment(route, segment)
        current = target

    if current != goal:
        final = bfs_path(current, goal, graph)
        if not final:
            log.warn(event="explore_goal_unreachable", source=current, goal=goal)
            return []
        _append_segment(route, final)
    if not route or route[-1] != goal:
        return []
    return route


_STRATEGY_FUNCS: Dict[Algorithm, Callable[..., Path]] = {
    Algorithm.BFS: bfs_path,
    Algorithm.DFS: dfs_path,
    Algorithm.ASTAR: astar_path,
}


def resolve_algorithm(name) -> Algorithm:
    """Map a name (or Algorithm) onto a known strategy, falling back to BFS."""
    if isinstance(name, Algorithm):
        return name
    try:
        return Algorithm(str(name).strip().lower())
    except ValueError:
        log.warn(event="unknown_algorithm", algorithm=name, fallback=Algorithm.BFS.value)
        return Algorithm.BFS


def find_path(algorithm, start: Cell, goal: Cell, graph: GridGraph, rooms: Iterable = ()) -> Path:
    algo = resolve_algorithm(algorithm)
    t0 = time.perf_counter()
    if algo is Algorithm.EXPLORE:
        path = explore_path(start, goal, graph, rooms)
    else:
        path = _STRATEGY_FUNCS[algo](start, goal, graph)
    elapsed_ms = round((time.perf_counter() - t0) * 1000, 2)
    log.info(event="path_computed", algorithm=algo.value, start=start, goal=goal, length=len(path), ms=elapsed_ms)
    return path


__all__ = [
    "Algorithm",
    "ALGORITHM_KEYS",
    "STRATEGIES",
    "bfs_path",
    "dfs_path",
    "astar_path",
    "explore_path",
    "find_path",
    "manhattan",
    "resolve_algorithm",
]
