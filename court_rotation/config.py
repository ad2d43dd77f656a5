"""
Runtime settings, read from the environment (and a local .env file).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .logging_config import LogLevel, get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class Settings:
    court_count: int = 4
    k_factor: int = 32
    tick_interval: float = 60.0
    database_path: str = "./court_rotation.sqlite"
    log_level: LogLevel = "INFO"


def _int(name: str, default: int, minimum: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        log.warning("Invalid %s value %r, using default %s", name, raw, default)
        return default
    if value < minimum:
        log.warning("%s must be >= %s, using default %s", name, minimum, default)
        return default
    return value


def _positive_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        log.warning("Invalid %s value %r, using default %s", name, raw, default)
        return default
    if value <= 0:
        log.warning("%s must be positive, using default %s", name, default)
        return default
    return value


def _log_level(default: LogLevel) -> LogLevel:
    raw = os.getenv("LOG_LEVEL", default).upper()
    if raw not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        log.warning("Invalid LOG_LEVEL value %r, using default %s", raw, default)
        return default
    return raw


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Load settings from the environment, falling back to defaults on bad values.

    Values already in the environment win over the .env file.
    """
    load_dotenv(env_file)

    return Settings(
        court_count=_int("COURT_COUNT", Settings.court_count, minimum=1),
        k_factor=_int("K_FACTOR", Settings.k_factor, minimum=0),
        tick_interval=_positive_float("TICK_INTERVAL", Settings.tick_interval),
        database_path=os.getenv("DATABASE_PATH", Settings.database_path),
        log_level=_log_level(Settings.log_level),
    )
