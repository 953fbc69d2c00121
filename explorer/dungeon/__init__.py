"""Public dungeon package interface."""

from .config import LevelConfig
from .connectivity import GridGraph
from .generator import Level, generate, generate_level
from .rng import MultiplyWithCarry, make_rng
from .rooms import Room
from .seeds import coerce_seed
from .tiles import EXIT, FLOOR, INTERIOR_WALL, WALL, is_passable  # noqa: F401

__all__ = [
    "LevelConfig",
    "GridGraph",
    "Level",
    "generate",
    "generate_level",
    "MultiplyWithCarry",
    "make_rng",
    "Room",
    "coerce_seed",
    "WALL",
    "INTERIOR_WALL",
    "FLOOR",
    "EXIT",
    "is_passable",
]
