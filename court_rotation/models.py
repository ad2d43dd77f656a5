"""
Data models for court rotation: players, teams and courts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

INITIAL_RATING = 1500


class ContractViolation(ValueError):
    """Raised when a caller breaks an operation's contract (bad court index,
    bad team number, wrong team size). State is left unchanged."""


class Zone(str, Enum):
    ACTIVE = "active"
    WAITING = "waiting"
    RESTING = "resting"


@dataclass
class Player:
    id: int
    name: str
    ranking: int
    rating: float = INITIAL_RATING
    waiting_time: int = 0
    games_played: int = 0
    partners: list[int] = field(default_factory=list)

    def to_record(self) -> dict[str, Any]:
        """Persisted field set, camelCase keys."""
        return {
            "id": self.id,
            "name": self.name,
            "ranking": self.ranking,
            "rating": self.rating,
            "waitingTime": self.waiting_time,
            "gamesPlayed": self.games_played,
            "partners": list(self.partners),
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Player":
        return cls(
            id=int(record["id"]),
            name=str(record["name"]),
            ranking=int(record["ranking"]),
            rating=record.get("rating", INITIAL_RATING),
            waiting_time=int(record.get("waitingTime", 0)),
            games_played=int(record.get("gamesPlayed", 0)),
            partners=[int(p) for p in record.get("partners", [])],
        )


@dataclass
class Team:
    number: int
    players: tuple[Player, Player]

    @property
    def ratings(self) -> list[float]:
        return [p.rating for p in self.players]


@dataclass
class Court:
    team1: Team
    team2: Team

    def team(self, number: int) -> Team:
        if number == 1:
            return self.team1
        if number == 2:
            return self.team2
        raise ContractViolation(f"Team number must be 1 or 2, got {number!r}")

    @property
    def teams(self) -> tuple[Team, Team]:
        return (self.team1, self.team2)

    @property
    def players(self) -> list[Player]:
        return [*self.team1.players, *self.team2.players]

    @property
    def player_ids(self) -> list[int]:
        return [p.id for p in self.players]
