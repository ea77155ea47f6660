"""
Tests for the identifiability check.
"""

from nypc_perf.core import BattleResult, aggregate_battles, find_unanchored


def test_connected_to_anchor():
    """Test that players reachable from a fixed player are anchored."""
    table = aggregate_battles([
        BattleResult(i=0, j=1, wij=1.0, wji=0.0),
        BattleResult(i=1, j=2, wij=1.0, wji=1.0),
    ])
    assert find_unanchored([True, False, False], table) == []


def test_disconnected_component():
    """Test that a component without a fixed player is reported."""
    table = aggregate_battles([
        BattleResult(i=0, j=1, wij=1.0, wji=0.0),
        BattleResult(i=2, j=3, wij=1.0, wji=2.0),
    ])
    assert find_unanchored([True, False, False, False], table) == [2, 3]


def test_players_without_games_are_ignored():
    """Test that free players with no games are not reported."""
    table = aggregate_battles([BattleResult(i=0, j=1, wij=1.0, wji=0.0)])
    assert find_unanchored([True, False, False], table) == []


def test_zero_count_battles_do_not_connect():
    """Test that empty battle records are not edges."""
    table = aggregate_battles([
        BattleResult(i=0, j=1, wij=0.0, wji=0.0),
        BattleResult(i=1, j=2, wij=1.0, wji=0.0),
    ])
    assert find_unanchored([True, False, False], table) == [1, 2]


def test_no_fixed_players():
    """Test that every player with games is unanchored without any fixed player."""
    table = aggregate_battles([BattleResult(i=0, j=1, wij=1.0, wji=1.0)])
    assert find_unanchored([False, False], table) == [0, 1]
