"""Level generation pipeline.

Rooms are scattered on odd coordinates, each new room is linked to the
previously accepted one with a 3-wide L corridor, the exit is dropped into
the last room and finally walls that touch no open cell are retagged as
interior walls. Every random draw comes from one seeded stream in a fixed
order (w, h, x, y and, for linked rooms, the corridor direction), so a seed
always produces the same level.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from explorer.logging_utils import get_logger

from .config import LevelConfig
from .features import place_exit
from .metrics import init_metrics
from .rng import make_rng
from .rooms import Room, carve_room, overlaps_any, sample_room
from .tiles import EXIT, FLOOR, INTERIOR_WALL, WALL
from .tunnels import carve_corridor
from .walls import classify_interior_walls

log = get_logger("generator")

Grid = List[List[str]]


@dataclass
class Level:
    grid: Grid
    rooms: List[Room]
    seed: Optional[int]
    width: int
    height: int
    exit_pos: Optional[Tuple[int, int]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def usable(self) -> bool:
        return bool(self.rooms) and self.exit_pos is not None

    def tile(self, x: int, y: int) -> str:
        return self.grid[x][y]

    def spawn_point(self) -> Tuple[float, float]:
        """Continuous (x, z) spawn position: first room center, else first floor cell."""
        if self.rooms:
            cx, cy = self.rooms[0].center
            return cx + 0.5, cy + 0.5
        for y in range(1, self.height - 1):
            for x in range(1, self.width - 1):
                if self.grid[x][y] == FLOOR:
                    return x + 0.5, y + 0.5
        return 1.5, 1.5

    def rows(self) -> List[str]:
        # row-major so rows()[y][x] reads the way the map is drawn
        return ["".join(self.grid[x][y] for x in range(self.width)) for y in range(self.height)]

    def ascii(self) -> str:
        return "\n".join(self.rows())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "width": self.width,
            "height": self.height,
            "rows": self.rows(),
            "rooms": [r.to_dict() for r in self.rooms],
            "exit": list(self.exit_pos) if self.exit_pos else None,
            "usable": self.usable,
            "metrics": self.metrics,
        }


def _place_rooms(grid: Grid, config: LevelConfig, rng, metrics) -> Tuple[List[Room], int]:
    rooms: List[Room] = []
    corridor_cells = 0
    for _ in range(config.max_rooms):
        metrics["rooms_attempted"] += 1
        room = sample_room(config, rng)
        if overlaps_any(room, rooms):
            metrics["rooms_rejected"] += 1
            continue
        carve_room(grid, room)
        if rooms:
            horizontal_first = rng.random() < 0.5
            corridor_cells += carve_corridor(grid, rooms[-1].center, room.center, horizontal_first)
            metrics["corridors_carved"] += 1
        rooms.append(room)
    metrics["rooms_placed"] = len(rooms)
    return rooms, corridor_cells


def _count_tiles(grid: Grid, metrics) -> None:
    counts = {FLOOR: 0, EXIT: 0, WALL: 0, INTERIOR_WALL: 0}
    for column in grid:
        for ch in column:
            counts[ch] = counts.get(ch, 0) + 1
    metrics["tiles_floor"] = counts[FLOOR] + counts[EXIT]
    metrics["tiles_wall"] = counts[WALL]
    metrics["tiles_interior_wall"] = counts[INTERIOR_WALL]


def generate_level(config: LevelConfig) -> Level:
    """Run the generation pipeline for config and return the resulting Level."""
    config.validate()
    start = time.perf_counter()
    phase_times: Dict[str, int] = {}

    def _phase(label, fn, *a, **k):
        ps = time.perf_counter()
        r = fn(*a, **k)
        phase_times[label] = int((time.perf_counter() - ps) * 1000)
        return r

    metrics = init_metrics()
    rng = make_rng(config.seed)
    grid: Grid = [[WALL for _ in range(config.height)] for _ in range(config.width)]

    rooms, corridor_cells = _phase("rooms_and_corridors", _place_rooms, grid, config, rng, metrics)
    metrics["corridor_cells"] = corridor_cells

    exit_pos = None
    if rooms:
        exit_pos, strategy = _phase("exit", place_exit, grid, rooms[-1])
        metrics["exit_strategy"] = strategy
    _phase("interior_walls", classify_interior_walls, grid)
    _count_tiles(grid, metrics)

    metrics["runtime_ms"] = int((time.perf_counter() - start) * 1000)
    metrics["phase_ms"] = phase_times

    level = Level(
        grid=grid,
        rooms=rooms,
        seed=config.seed,
        width=config.width,
        height=config.height,
        exit_pos=exit_pos,
        metrics=metrics,
    )
    if not level.usable:
        log.warn(
            event="generation_failed",
            seed=config.seed,
            width=config.width,
            height=config.height,
            rooms_attempted=metrics["rooms_attempted"],
        )
    else:
        log.debug(event="level_generated", seed=config.seed, rooms=len(rooms), exit=exit_pos, ms=metrics["runtime_ms"])
    return level


def generate(
    width: int = 100,
    height: int = 100,
    max_rooms: int = 40,
    room_min_size: int = 5,
    room_max_size: int = 9,
    seed: Optional[int] = None,
) -> Level:
    return generate_level(
        LevelConfig(
            width=width,
            height=height,
            max_rooms=max_rooms,
            room_min_size=room_min_size,
            room_max_size=room_max_size,
            seed=seed,
        )
    )


__all__ = ["Level", "generate", "generate_level"]
