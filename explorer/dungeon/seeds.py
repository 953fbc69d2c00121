import hashlib
import time

SEED_MASK = 0x7FFFFFFF


def time_seed() -> int:
    """Millisecond wall-clock seed, the value a new level gets when none is given."""
    return time.time_ns() // 1_000_000


def coerce_seed(raw_seed):
    """Convert a provided seed (None, int or str) into an int seed."""
    if raw_seed is None:
        return time_seed()
    if isinstance(raw_seed, bool):
        raise ValueError("seed must be an integer or string")
    if isinstance(raw_seed, int):
        return raw_seed
    if isinstance(raw_seed, str):
        s = raw_seed.strip()
        if not s:
            return time_seed()
        if s.isdigit():
            return int(s)
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") & SEED_MASK
    raise ValueError(f"unsupported seed type: {type(raw_seed).__name__}")


__all__ = ["coerce_seed", "time_seed"]
