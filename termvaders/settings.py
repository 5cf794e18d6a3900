"""
Game settings.

All tunables live in one dataclass. Values come from the defaults below,
then from ``TERMVADERS_*`` environment variables, then from explicit
overrides (the command line).
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Optional

from .errors import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "TERMVADERS_"
INPUT_BACKENDS = ("curses", "pynput")


@dataclass(frozen=True)
class Settings:
    """Tunable constants for the playfield, entities and runtime"""
    # Playfield (fixed character grid)
    width: int = 40
    height: int = 20

    # Simulation loop
    tick_sleep: float = 0.001  # Seconds slept at the end of every tick

    # Player shots
    shot_step: float = 0.05  # Seconds between one-row moves
    shot_explode: float = 0.25  # Seconds an explosion stays visible
    max_shots: int = 2
    shot_cooldown: float = 0.1  # Seconds between two accepted shots

    # Invader swarm
    invader_move_interval: float = 2.0
    invader_speedup: float = 0.25  # Interval shrinks by this much per descent
    invader_min_interval: float = 0.25
    bottom_row: Optional[int] = None  # None means the player's row (height - 1)

    # Runtime
    channel_capacity: Optional[int] = None  # None = unbounded
    audio: bool = True
    input_backend: str = "curses"
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    @property
    def bottom_boundary(self) -> int:
        return self.height - 1 if self.bottom_row is None else self.bottom_row

    def validate(self) -> "Settings":
        """Raise ConfigError for values the game cannot run with"""
        if self.width < 5 or self.height < 10:
            raise ConfigError(f"playfield {self.width}x{self.height} is too small (minimum 5x10)")
        if self.max_shots < 1:
            raise ConfigError("max_shots must be at least 1")
        if self.invader_min_interval <= 0 or self.invader_move_interval < self.invader_min_interval:
            raise ConfigError("invader move interval must be positive and not below the minimum")
        if self.bottom_row is not None and not 0 <= self.bottom_row < self.height:
            raise ConfigError(f"bottom_row must be within 0..{self.height - 1}")
        if self.channel_capacity is not None and self.channel_capacity < 1:
            raise ConfigError("channel_capacity must be at least 1")
        if self.input_backend not in INPUT_BACKENDS:
            raise ConfigError(
                f"unknown input backend {self.input_backend!r} (expected one of {', '.join(INPUT_BACKENDS)})"
            )
        for name in ("tick_sleep", "shot_step", "shot_explode", "shot_cooldown"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative")
        return self


def _parse(raw: str, default: Any, name: str) -> Any:
    """Convert an environment string to the type of the default value"""
    try:
        if isinstance(default, bool):
            lowered = raw.strip().lower()
            if lowered in ("1", "true", "yes", "on"):
                return True
            if lowered in ("0", "false", "no", "off"):
                return False
            raise ValueError(raw)
        if isinstance(default, int):
            return int(raw)
        if isinstance(default, float):
            return float(raw)
    except ValueError:
        logger.warning("ignoring malformed %s%s=%r", ENV_PREFIX, name.upper(), raw)
        return default
    # Optional fields (default None) and strings
    if name in ("bottom_row", "channel_capacity"):
        try:
            return int(raw)
        except ValueError:
            logger.warning("ignoring malformed %s%s=%r", ENV_PREFIX, name.upper(), raw)
            return default
    return raw


def from_env(base: Optional[Settings] = None, environ=None) -> Settings:
    """Apply TERMVADERS_* environment variables on top of ``base``"""
    base = base or Settings()
    environ = os.environ if environ is None else environ
    changes = {}
    for f in fields(Settings):
        raw = environ.get(ENV_PREFIX + f.name.upper())
        if raw is None:
            continue
        changes[f.name] = _parse(raw, getattr(base, f.name), f.name)
    return replace(base, **changes)


def load_settings(environ=None, **overrides) -> Settings:
    """Defaults, then environment, then explicit overrides (None values are skipped)"""
    settings = from_env(environ=environ)
    known = {f.name for f in fields(Settings)}
    unknown = set(overrides) - known
    if unknown:
        raise ConfigError(f"unknown settings: {', '.join(sorted(unknown))}")
    changes = {k: v for k, v in overrides.items() if v is not None}
    return replace(settings, **changes).validate()
