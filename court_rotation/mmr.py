"""
MMR (Matchmaking Rating) calculations using the ELO system.
Pure functions for expected scores plus the in-place doubles update used
when a court's match ends.
"""

from __future__ import annotations

import math
from typing import Sequence

from .logging_config import get_logger
from .models import ContractViolation, Player

log = get_logger(__name__)

K_FACTOR = 32


def expected(ra: float, rb: float) -> float:
    """
    Calculate the expected score for side A against side B.

    Args:
        ra: Rating of side A
        rb: Rating of side B

    Returns:
        Expected score (probability) for A to win (0.0 to 1.0)
    """
    return 1 / (1 + math.pow(10, (rb - ra) / 400))


def team_rating(ratings: Sequence[float]) -> float:
    """Average rating of a doubles team."""
    if len(ratings) != 2:
        raise ContractViolation(f"A team has exactly 2 players, got {len(ratings)}")
    return sum(ratings) / 2


def round_half_away(x: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def rating_deltas(win_avg: float, lose_avg: float, k: int = K_FACTOR) -> tuple[int, int]:
    """
    Per-player rating change for each side of a finished match.

    Returns:
        (winner_delta, loser_delta); the winner delta is never negative and the
        loser delta never positive.
    """
    e_win = expected(win_avg, lose_avg)
    e_lose = 1 - e_win
    return round_half_away(k * (1 - e_win)), round_half_away(k * (0 - e_lose))


def update_ratings(
    winners: Sequence[Player],
    losers: Sequence[Player],
    k: int = K_FACTOR,
) -> tuple[int, int]:
    """
    Apply a match result to both teams in place.

    Every player on a team receives the full team delta; it is not split
    between teammates. Only ``rating`` is touched.

    Returns:
        The (winner_delta, loser_delta) that was applied.
    """
    win_avg = team_rating([p.rating for p in winners])
    lose_avg = team_rating([p.rating for p in losers])
    win_delta, lose_delta = rating_deltas(win_avg, lose_avg, k)

    for p in winners:
        p.rating += win_delta
    for p in losers:
        p.rating += lose_delta

    log.debug(
        "Ratings updated: winners=%s (%+d) losers=%s (%+d) avg %.1f vs %.1f",
        [p.id for p in winners], win_delta, [p.id for p in losers], lose_delta, win_avg, lose_avg,
    )
    return win_delta, lose_delta
