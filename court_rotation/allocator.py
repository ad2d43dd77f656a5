"""
Court allocation: pick the four highest-priority waiting players and split
them into two balanced doubles teams.

Priority is fewest games played first, then longest waiting time. Among the
chosen four the strongest player partners the weakest (1+4 vs 2+3). This is a
fixed rule, not a search over the three possible pairings.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .logging_config import get_logger
from .models import Court, Player, Team

log = get_logger(__name__)

PLAYERS_PER_COURT = 4


def priority_order(players: Sequence[Player]) -> list[Player]:
    """Stable sort: ascending games played, then descending waiting time."""
    return sorted(players, key=lambda p: (p.games_played, -p.waiting_time))


def form_court(candidates: Sequence[Player]) -> Court:
    """Build a court from exactly four players and record the new partnerships."""
    ranked = sorted(candidates, key=lambda p: p.rating, reverse=True)
    team1 = Team(1, (ranked[0], ranked[3]))
    team2 = Team(2, (ranked[1], ranked[2]))
    for team in (team1, team2):
        a, b = team.players
        a.partners.append(b.id)
        b.partners.append(a.id)
    return Court(team1, team2)


def allocate_one(available: Sequence[Player]) -> tuple[Optional[Court], list[Player]]:
    """
    Try to fill one court from ``available``.

    Returns:
        (court, remaining). ``court`` is None when fewer than four players are
        available, in which case ``remaining`` holds everyone. Otherwise
        ``remaining`` is the input minus the four chosen players, in the
        input's order.
    """
    if len(available) < PLAYERS_PER_COURT:
        return None, list(available)

    chosen = priority_order(available)[:PLAYERS_PER_COURT]
    chosen_ids = {p.id for p in chosen}
    remaining = [p for p in available if p.id not in chosen_ids]

    court = form_court(chosen)
    log.debug(
        "Allocated court: team1=%s team2=%s (%d left waiting)",
        [p.id for p in court.team1.players], [p.id for p in court.team2.players], len(remaining),
    )
    return court, remaining


def allocate_all(waiting: Sequence[Player], court_count: int) -> tuple[list[Court], list[Player]]:
    """
    Fill up to ``court_count`` courts, stopping at the first one that cannot
    be filled.
    """
    courts: list[Court] = []
    remaining = list(waiting)
    for _ in range(max(1, court_count)):
        court, remaining = allocate_one(remaining)
        if court is None:
            break
        courts.append(court)
    return courts, remaining
