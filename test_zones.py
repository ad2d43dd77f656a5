"""
Tests for the Active / Waiting / Resting zone bookkeeping.
"""

import sys

import pytest

from court_rotation.models import Player, Zone
from court_rotation.zones import ZoneManager


def roster(n):
    return [Player(id=i, name=f"P{i}", ranking=i) for i in range(1, n + 1)]


def ids(players):
    return [p.id for p in players]


def test_reset_puts_everyone_waiting():
    zones = ZoneManager()
    zones.reset(roster(5))
    assert ids(zones.waiting) == [1, 2, 3, 4, 5]
    assert zones.active == []
    assert zones.resting == []


def test_move_to_resets_waiting_time_and_appends():
    print("🧪 Testing zone moves...")
    players = roster(4)
    zones = ZoneManager()
    zones.reset(players)
    players[0].waiting_time = 9
    players[2].waiting_time = 4

    assert zones.move_to(1, Zone.RESTING) is True
    assert zones.move_to(3, Zone.RESTING) is True
    assert ids(zones.resting) == [1, 3]
    assert ids(zones.waiting) == [2, 4]
    assert players[0].waiting_time == 0
    assert players[2].waiting_time == 0
    assert zones.zone_of(1) is Zone.RESTING

    assert zones.move_to(1, Zone.WAITING) is True
    assert ids(zones.waiting) == [2, 4, 1]
    assert ids(zones.resting) == [3]
    print("    ✅ Zone moves work")


def test_unknown_id_reports_not_found():
    zones = ZoneManager()
    zones.reset(roster(3))
    assert zones.move_to(42, Zone.RESTING) is False
    assert ids(zones.waiting) == [1, 2, 3]
    assert zones.resting == []
    assert zones.zone_of(42) is None
    assert zones.find(42) is None


def test_player_in_exactly_one_zone():
    zones = ZoneManager()
    zones.reset(roster(6))
    zones.activate(zones.waiting[:4])
    zones.move_to(5, Zone.RESTING)
    zones.move_to(5, Zone.RESTING)
    all_ids = ids(zones.active) + ids(zones.waiting) + ids(zones.resting)
    assert sorted(all_ids) == [1, 2, 3, 4, 5, 6]
    assert ids(zones.active) == [1, 2, 3, 4]
    assert ids(zones.waiting) == [6]


def test_tick_only_ages_waiting():
    players = roster(6)
    zones = ZoneManager()
    zones.reset(players)
    zones.activate(players[:2])
    zones.move_to(3, Zone.RESTING)

    assert zones.tick_waiting() == 3
    assert zones.tick_waiting() == 3
    assert [p.waiting_time for p in players] == [0, 0, 0, 2, 2, 2]


def test_tick_with_nobody_waiting():
    players = roster(2)
    zones = ZoneManager()
    zones.reset(players)
    zones.move_to(1, Zone.RESTING)
    zones.move_to(2, Zone.RESTING)
    assert zones.tick_waiting() == 0
    assert [p.waiting_time for p in players] == [0, 0]


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
