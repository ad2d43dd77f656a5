"""
Zone bookkeeping: every player sits in exactly one of Active, Waiting or
Resting. Order inside a zone is insertion order.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .logging_config import get_logger
from .models import Player, Zone

log = get_logger(__name__)


class ZoneManager:
    def __init__(self) -> None:
        self._zones: dict[Zone, list[Player]] = {z: [] for z in Zone}

    @property
    def active(self) -> list[Player]:
        return list(self._zones[Zone.ACTIVE])

    @property
    def waiting(self) -> list[Player]:
        return list(self._zones[Zone.WAITING])

    @property
    def resting(self) -> list[Player]:
        return list(self._zones[Zone.RESTING])

    def reset(self, players: Iterable[Player]) -> None:
        """Put every given player in Waiting and clear the other zones."""
        self._zones = {z: [] for z in Zone}
        self._zones[Zone.WAITING] = list(players)

    def zone_of(self, player_id: int) -> Optional[Zone]:
        for zone, members in self._zones.items():
            if any(p.id == player_id for p in members):
                return zone
        return None

    def find(self, player_id: int) -> Optional[Player]:
        for members in self._zones.values():
            for p in members:
                if p.id == player_id:
                    return p
        return None

    def _take(self, player_id: int) -> Optional[Player]:
        for members in self._zones.values():
            for i, p in enumerate(members):
                if p.id == player_id:
                    return members.pop(i)
        return None

    def move_to(self, player_id: int, target: Zone) -> bool:
        """
        Move a player into ``target`` and reset its waiting time.

        Returns False (and logs a warning) when no zone holds the id; nothing
        changes in that case.
        """
        player = self._take(player_id)
        if player is None:
            log.warning("move_to: unknown player id=%s (target=%s)", player_id, target.value)
            return False
        player.waiting_time = 0
        self._zones[target].append(player)
        log.debug("Player id=%s moved to %s", player_id, target.value)
        return True

    def activate(self, players: Iterable[Player]) -> None:
        """Move players that just got a court into Active.

        Waiting keeps its relative order, which is exactly the allocator's
        leftover pool.
        """
        for p in players:
            self.move_to(p.id, Zone.ACTIVE)

    def tick_waiting(self) -> int:
        """Add one unit of waiting time to each Waiting player; return how many."""
        members = self._zones[Zone.WAITING]
        for p in members:
            p.waiting_time += 1
        return len(members)
