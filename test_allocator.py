"""
Tests for court allocation: priority order, balanced pairing, leftovers.
"""

import sys

import pytest

from court_rotation.allocator import allocate_all, allocate_one, priority_order
from court_rotation.models import Player


def make(pid, rating=1500, games=0, waited=0):
    return Player(id=pid, name=f"P{pid}", ranking=pid, rating=rating, waiting_time=waited, games_played=games)


def ids(players):
    return [p.id for p in players]


def test_too_few_players():
    pool = [make(1), make(2), make(3)]
    court, remaining = allocate_one(pool)
    assert court is None
    assert ids(remaining) == [1, 2, 3]

    court, remaining = allocate_one([])
    assert court is None
    assert remaining == []


def test_extreme_pairing():
    """Ratings 2000/1800/1600/1400: 2000+1400 vs 1800+1600"""
    print("🧪 Testing extreme pairing...")
    pool = [make(1, 1600), make(2, 2000), make(3, 1400), make(4, 1800)]
    court, remaining = allocate_one(pool)
    assert remaining == []
    assert court.team1.number == 1 and court.team2.number == 2
    assert [p.rating for p in court.team1.players] == [2000, 1400]
    assert [p.rating for p in court.team2.players] == [1800, 1600]
    print("    ✅ Extreme pairing works")


def test_priority_order():
    """Fewest games first, then longest wait, stable for exact ties"""
    pool = [
        make(1, games=1),
        make(2, games=0, waited=3),
        make(3, games=0, waited=5),
        make(4, games=2),
        make(5, games=0, waited=3),
        make(6, games=0, waited=1),
    ]
    assert ids(priority_order(pool)) == [3, 2, 5, 6, 1, 4]
    # Same input, same order
    assert ids(priority_order(pool)) == ids(priority_order(list(pool)))

    court, remaining = allocate_one(pool)
    assert sorted(court.player_ids) == [2, 3, 5, 6]
    assert ids(remaining) == [1, 4]


def test_remaining_keeps_input_order():
    pool = [make(1, games=1), make(2), make(3, games=1), make(4), make(5), make(6), make(7, games=1)]
    court, remaining = allocate_one(pool)
    assert sorted(court.player_ids) == [2, 4, 5, 6]
    assert ids(remaining) == [1, 3, 7]


def test_exact_ties_take_first_four():
    pool = [make(i) for i in range(1, 8)]
    court, remaining = allocate_one(pool)
    assert sorted(court.player_ids) == [1, 2, 3, 4]
    assert ids(remaining) == [5, 6, 7]


def test_input_not_reordered():
    pool = [make(1, games=3), make(2), make(3), make(4), make(5)]
    allocate_one(pool)
    assert ids(pool) == [1, 2, 3, 4, 5]


def test_court_shape():
    pool = [make(i, rating=1300 + 37 * i, games=i % 3, waited=i % 4) for i in range(1, 12)]
    court, remaining = allocate_one(pool)
    assert len(court.teams) == 2
    assert all(len(t.players) == 2 for t in court.teams)
    assert len(set(court.player_ids)) == 4
    assert len(remaining) == len(pool) - 4
    assert set(ids(remaining)) | set(court.player_ids) == set(ids(pool))


def test_partner_history():
    """Teammates record each other, duplicates kept on repeat pairings"""
    pool = [make(1, 2000), make(2, 1800), make(3, 1600), make(4, 1400)]
    allocate_one(pool)
    assert pool[0].partners == [4]
    assert pool[3].partners == [1]
    assert pool[1].partners == [3]
    assert pool[2].partners == [2]

    allocate_one(pool)
    assert pool[0].partners == [4, 4]
    assert pool[2].partners == [2, 2]


def test_allocate_all_nine_players_three_courts():
    print("🧪 Testing multi-court allocation...")
    pool = [make(i) for i in range(1, 10)]
    courts, remaining = allocate_all(pool, 3)
    assert len(courts) == 2
    assert ids(remaining) == [9]
    used = [pid for c in courts for pid in c.player_ids]
    assert sorted(used) == list(range(1, 9))
    print("    ✅ Multi-court allocation works")


def test_allocate_all_court_count_coerced():
    pool = [make(i) for i in range(1, 9)]
    courts, remaining = allocate_all(pool, 0)
    assert len(courts) == 1
    assert len(remaining) == 4

    courts, remaining = allocate_all(pool[:4], 5)
    assert len(courts) == 1
    assert remaining == []

    courts, remaining = allocate_all(pool[:3], 2)
    assert courts == []
    assert ids(remaining) == [1, 2, 3]


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
