"""Court rotation core package.

Exports commonly used modules for convenience.
"""

from . import allocator as allocator
from . import db as db
from . import mmr as mmr
from . import logging_config as logging_config
from .models import ContractViolation, Court, Player, Team, Zone
from .rotation import MatchOutcome, RotationController, Snapshot

__all__ = [
    "allocator",
    "db",
    "mmr",
    "logging_config",
    "ContractViolation",
    "Court",
    "Player",
    "Team",
    "Zone",
    "MatchOutcome",
    "RotationController",
    "Snapshot",
]
