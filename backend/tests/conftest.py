"""
Shared fixtures for forecaster tests.
"""

import pytest
from forecaster.core.config import SimulationConfig
from forecaster.simulator import TeamRecord, RemainingGame, build_league


def _make_team(franchise_id, wins=0, losses=0, ties=0, points_for=None, **kwargs):
    games = wins + losses + ties
    if points_for is None:
        points_for = 100.0 * games
    return TeamRecord(
        franchise_id=franchise_id,
        name=f"Team {franchise_id.upper()}",
        wins=wins,
        losses=losses,
        ties=ties,
        points_for=points_for,
        **kwargs
    )


@pytest.fixture
def make_team():
    """Factory for TeamRecords with 100 points per game played by default."""
    return _make_team


@pytest.fixture
def four_team_league():
    """
    Two divisions, two weeks left.

    Division 1: a (8-2), c (5-5). Division 2: b (7-3), d (2-8).
    Week 11: a hosts b, c hosts d. Week 12: c hosts a, b hosts d.
    """
    teams = [
        _make_team("a", 8, 2, points_for=1100.0),
        _make_team("b", 7, 3, points_for=1000.0),
        _make_team("c", 5, 5, points_for=1000.0),
        _make_team("d", 2, 8, points_for=800.0),
    ]
    schedules = {
        "a": [RemainingGame(11, "b", True), RemainingGame(12, "c", False)],
        "b": [RemainingGame(11, "a", False), RemainingGame(12, "d", True)],
        "c": [RemainingGame(11, "d", True), RemainingGame(12, "a", True)],
        "d": [RemainingGame(11, "c", False), RemainingGame(12, "b", False)],
    }
    division_map = {"a": "1", "c": "1", "b": "2", "d": "2"}
    return build_league(teams, schedules, division_map, {"1": "East", "2": "West"})


@pytest.fixture
def complete_league():
    """Eight teams in one division with the regular season finished."""
    teams = [_make_team(fid, wins, 10 - wins) for fid, wins in zip("abcdefgh", [10, 8, 7, 6, 5, 4, 1, 0])]
    schedules = {t.franchise_id: [] for t in teams}
    return build_league(teams, schedules, {t.franchise_id: "1" for t in teams})


@pytest.fixture
def three_spot_config():
    return SimulationConfig(n_simulations=500, playoff_spots=3)


@pytest.fixture
def league_payload():
    """JSON body equivalent of four_team_league."""
    return {
        "teams": [
            {"franchise_id": "a", "name": "Team A", "wins": 8, "losses": 2, "points_for": 1100.0},
            {"franchise_id": "b", "name": "Team B", "wins": 7, "losses": 3, "points_for": 1000.0},
            {"franchise_id": "c", "name": "Team C", "wins": 5, "losses": 5, "points_for": 1000.0},
            {"franchise_id": "d", "name": "Team D", "wins": 2, "losses": 8, "points_for": 800.0},
        ],
        "schedules": {
            "a": [{"week": 11, "opponent_id": "b", "is_home": True}, {"week": 12, "opponent_id": "c"}],
            "b": [{"week": 11, "opponent_id": "a"}, {"week": 12, "opponent_id": "d", "is_home": True}],
            "c": [{"week": 11, "opponent_id": "d", "is_home": True}, {"week": 12, "opponent_id": "a", "is_home": True}],
            "d": [{"week": 11, "opponent_id": "c"}, {"week": 12, "opponent_id": "b"}],
        },
        "division_map": {"a": "1", "c": "1", "b": "2", "d": "2"},
        "division_names": {"1": "East", "2": "West"},
    }
