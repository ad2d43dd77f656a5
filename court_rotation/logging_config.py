"""
Centralized logging configuration for court rotation.

Usage:
- Production (default): concise INFO-level logs.
- Testing: set LOG_LEVEL=DEBUG (or call setup_logging(level="DEBUG")) to see
  allocation details; add LOG_TRACE=1 for every waiting-time tick.

Environment variables:
- LOG_LEVEL: DEBUG|INFO|WARNING|ERROR|CRITICAL
- LOG_TRACE: 1 to keep per-tick and per-move DEBUG lines (hidden by default
  even at DEBUG, since the ticker fires every interval)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Literal, Optional

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Waiting-time ticks and zone moves; at DEBUG they bury match results
TRACE_LOGGERS = ("court_rotation.ticker", "court_rotation.zones")


def _level_from_env(default: str = "INFO") -> int:
    level_str = os.getenv("LOG_LEVEL", default).upper()
    return _LEVELS.get(level_str, logging.INFO)


def setup_logging(
    level: Optional[LogLevel] = None,
    mode: Optional[Literal["test", "prod"]] = None,
    trace: Optional[bool] = None,
) -> None:
    """Configure the root logger.

    Args:
        level: Optional level name. If omitted, uses LOG_LEVEL env var or INFO.
        mode: "test" forces the verbose format; default picks it from the level.
        trace: Show ticker and zone DEBUG lines. If omitted, uses LOG_TRACE.
    """
    numeric_level = _level_from_env() if level is None else _LEVELS.get(level.upper(), logging.INFO)

    # Re-configuring replaces handlers instead of stacking them
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)

    is_debug = numeric_level <= logging.DEBUG
    fmt_verbose = (
        "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(funcName)s | %(message)s"
    )
    fmt_concise = "%(asctime)s %(levelname).1s %(message)s"
    fmt = fmt_verbose if (mode == "test" or is_debug) else fmt_concise

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt="%H:%M:%S"))

    root.setLevel(numeric_level)
    root.addHandler(handler)

    logging.getLogger("aiosqlite").setLevel(logging.INFO if is_debug else logging.WARNING)

    if trace is None:
        trace = os.getenv("LOG_TRACE", "0").lower() in ("1", "true", "yes")
    for name in TRACE_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO if is_debug and not trace else logging.NOTSET)


def get_logger(name: str) -> logging.Logger:
    """Convenience wrapper to get a module logger."""
    return logging.getLogger(name)
