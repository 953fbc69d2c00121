import os
from dataclasses import dataclass
from typing import Optional

# generation runs synchronously inside a request or tick
MAX_LEVEL_SIDE = 500
MAX_ROOMS_LIMIT = 500


@dataclass
class LevelConfig:
    width: int = 100
    height: int = 100
    max_rooms: int = 40
    room_min_size: int = 5
    room_max_size: int = 9
    seed: Optional[int] = None

    def validate(self) -> None:
        if self.width < 3 or self.height < 3:
            raise ValueError(f"level must be at least 3x3, got {self.width}x{self.height}")
        if self.width > MAX_LEVEL_SIDE or self.height > MAX_LEVEL_SIDE:
            raise ValueError(f"level sides are limited to {MAX_LEVEL_SIDE}, got {self.width}x{self.height}")
        if self.max_rooms < 0:
            raise ValueError("max_rooms must not be negative")
        if self.max_rooms > MAX_ROOMS_LIMIT:
            raise ValueError(f"max_rooms is limited to {MAX_ROOMS_LIMIT}, got {self.max_rooms}")
        if self.room_min_size < 1:
            raise ValueError("room_min_size must be positive")
        if self.room_min_size > self.room_max_size:
            raise ValueError(f"room_min_size ({self.room_min_size}) exceeds room_max_size ({self.room_max_size})")
        if self.room_max_size > min(self.width, self.height) - 2:
            raise ValueError("room_max_size does not fit inside the level with a wall border")

    @classmethod
    def from_env(cls, **overrides) -> "LevelConfig":
        """Build a config from EXPLORER_* environment variables; keyword overrides win."""
        env_map = {
            "EXPLORER_LEVEL_WIDTH": "width",
            "EXPLORER_LEVEL_HEIGHT": "height",
            "EXPLORER_MAX_ROOMS": "max_rooms",
            "EXPLORER_ROOM_MIN_SIZE": "room_min_size",
            "EXPLORER_ROOM_MAX_SIZE": "room_max_size",
        }
        values = {}
        for env_key, attr in env_map.items():
            raw = os.environ.get(env_key)
            if raw is None or raw.strip() == "":
                continue
            try:
                values[attr] = int(raw)
            except ValueError:
                raise ValueError(f"{env_key} must be an integer, got {raw!r}") from None
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


__all__ = ["LevelConfig", "MAX_LEVEL_SIDE", "MAX_ROOMS_LIMIT"]
