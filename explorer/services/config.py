"""Session timing constants with environment overrides.

Values are milliseconds unless the name says otherwise. Overrides use the
EXPLORER_ prefix, e.g. EXPLORER_AUTOSTART_MS=3000.
"""

import os
from dataclasses import dataclass, fields

DEFAULT_ALGORITHM = "explore"
VIEW_DISTANCE = 5
MANUAL_MOVE_SPEED = 4.5  # cells per second
TURN_STEP_DEG = 90.0
COLLISION_BUFFER = 0.1
MAX_GENERATION_ATTEMPTS = 5


@dataclass
class BotTiming:
    translation_ms: float = 150.0
    rotation_ms: float = 120.0
    automap_initial_wait_ms: float = 3000.0
    automap_open_ms: float = 5000.0
    automap_closed_wait_ms: float = 6000.0
    autostart_ms: float = 7000.0

    @classmethod
    def from_env(cls) -> "BotTiming":
        values = {}
        for f in fields(cls):
            env_key = "EXPLORER_" + f.name.upper()
            raw = os.environ.get(env_key)
            if raw is None or raw.strip() == "":
                continue
            try:
                value = float(raw)
            except ValueError:
                raise ValueError(f"{env_key} must be a number, got {raw!r}") from None
            if value < 0:
                raise ValueError(f"{env_key} must not be negative")
            values[f.name] = value
        return cls(**values)


__all__ = [
    "BotTiming",
    "DEFAULT_ALGORITHM",
    "VIEW_DISTANCE",
    "MANUAL_MOVE_SPEED",
    "TURN_STEP_DEG",
    "COLLISION_BUFFER",
    "MAX_GENERATION_ATTEMPTS",
]
