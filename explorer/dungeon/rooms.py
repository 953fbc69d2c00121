import math
from dataclasses import dataclass
from typing import List, Tuple

from .config import LevelConfig
from .rng import RandomSource
from .tiles import FLOOR


@dataclass(frozen=True)
class Room:
    """Axis-aligned room; (x1, y1) inclusive, (x2, y2) exclusive."""

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_size(cls, x: int, y: int, w: int, h: int) -> "Room":
        return cls(x, y, x + w, y + h)

    @property
    def w(self) -> int:
        return self.x2 - self.x1

    @property
    def h(self) -> int:
        return self.y2 - self.y1

    @property
    def center(self) -> Tuple[int, int]:
        return ((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def cells(self):
        for ix in range(self.x1, self.x2):
            for iy in range(self.y1, self.y2):
                yield ix, iy

    def contains(self, x: int, y: int) -> bool:
        return self.x1 <= x < self.x2 and self.y1 <= y < self.y2

    def intersects(self, other: "Room") -> bool:
        # 1-cell buffer keeps rooms from touching exactly
        return (
            self.x1 < other.x2 + 1
            and self.x2 > other.x1 - 1
            and self.y1 < other.y2 + 1
            and self.y2 > other.y1 - 1
        )

    def to_dict(self):
        return {"x1": self.x1, "y1": self.y1, "x2": self.x2, "y2": self.y2, "center": list(self.center)}


def sample_room(config: LevelConfig, rng: RandomSource) -> Room:
    """Draw one candidate room; corners land on odd coordinates."""
    span = config.room_max_size - config.room_min_size + 1
    w = math.floor(rng.random() * span) + config.room_min_size
    h = math.floor(rng.random() * span) + config.room_min_size
    x = math.floor(rng.random() * ((config.width - w - 1) / 2)) * 2 + 1
    y = math.floor(rng.random() * ((config.height - h - 1) / 2)) * 2 + 1
    return Room.from_size(x, y, w, h)


def overlaps_any(room: Room, existing: List[Room]) -> bool:
    return any(room.intersects(other) for other in existing)


def carve_room(grid, room: Room) -> None:
    width = len(grid)
    height = len(grid[0]) if width else 0
    for ix, iy in room.cells():
        if 0 <= ix < width and 0 <= iy < height:
            grid[ix][iy] = FLOOR


__all__ = ["Room", "sample_room", "overlaps_any", "carve_room"]
