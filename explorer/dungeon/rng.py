"""Seeded random stream used by level generation.

Two 16-bit-lane multiply-with-carry generators are combined per draw. The
arithmetic is done with signed 32-bit wrap-around and arithmetic right shifts,
so a given seed always yields the same float sequence and levels can be
replayed from their seed alone.
"""

from __future__ import annotations

import random
from typing import Optional, Protocol

_INITIAL_B = 987654321


class RandomSource(Protocol):
    def random(self) -> float: ...


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


class MultiplyWithCarry:
    """Deterministic float stream in [0, 1) from a 32-bit seed."""

    def __init__(self, seed: int):
        self.seed = seed
        self.state_a = _int32(seed)
        self.state_b = _INITIAL_B

    def random(self) -> float:
        self.state_b = _int32(36969 * (self.state_b & 0xFFFF) + (self.state_b >> 16))
        self.state_a = _int32(18000 * (self.state_a & 0xFFFF) + (self.state_a >> 16))
        result = _int32((self.state_b << 16) + self.state_a)
        return result / 4294967296 + 0.5


def make_rng(seed: Optional[int]) -> RandomSource:
    """Return a seeded stream, or the platform generator when no seed is given."""
    if seed is None:
        return random.Random()
    return MultiplyWithCarry(seed)


__all__ = ["MultiplyWithCarry", "RandomSource", "make_rng"]
