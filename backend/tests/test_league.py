"""
Tests for league snapshot construction.
"""

from forecaster.simulator import RemainingGame, build_league
from forecaster.simulator.league import SYNTHETIC_DIVISION_PREFIX


class TestBuildLeague:
    """Tests for build_league."""

    def test_shared_games_simulated_once(self, four_team_league):
        """Test each game listed by both teams becomes one matchup."""
        assert len(four_team_league.matchups) == 4
        keys = {m.key for m in four_team_league.matchups}
        assert len(keys) == 4

    def test_first_listing_decides_home_team(self, four_team_league):
        """Test home/away comes from the first schedule that lists the game."""
        week12 = [m for m in four_team_league.matchups if m.involves("a") and m.week == 12][0]
        assert week12.home_team_id == "c"
        assert week12.away_team_id == "a"

    def test_division_games_flagged(self, four_team_league):
        """Test games within a division are marked."""
        flags = {(m.week, m.home_team_id): m.is_division_game for m in four_team_league.matchups}
        assert flags[(12, "c")] is True
        assert flags[(12, "b")] is True
        assert flags[(11, "a")] is False

    def test_remaining_games_in_week_order(self, four_team_league):
        """Test remaining_games is sorted by week."""
        assert [m.week for m in four_team_league.remaining_games("a")] == [11, 12]
        assert four_team_league.remaining_count("d") == 2

    def test_division_names(self, four_team_league):
        """Test divisions are named from division_names."""
        assert four_team_league.division_of("a").name == "East"
        assert sorted(four_team_league.division_of("b").member_ids) == ["b", "d"]
        assert four_team_league.num_divisions == 2
        assert four_team_league.warnings == []

    def test_unknown_division_gets_synthetic_division(self, make_team):
        """Test a franchise with no division gets its own."""
        league = build_league(
            [make_team("a", 5, 5), make_team("b", 5, 5)],
            {"a": [], "b": []},
            {"a": "1"}
        )
        division = league.division_of("b")
        assert division.synthetic is True
        assert division.member_ids == ["b"]
        assert division.name == "Team B (Independent)"
        assert league.division_map["b"] == f"{SYNTHETIC_DIVISION_PREFIX}b"
        assert any("no known division" in w for w in league.warnings)

    def test_division_missing_from_names_is_unknown(self, make_team):
        """Test a division id not in division_names is treated as unknown."""
        league = build_league(
            [make_team("a", 5, 5)],
            {"a": []},
            {"a": "99"},
            division_names={"1": "East"}
        )
        assert league.division_of("a").synthetic is True

    def test_unknown_opponent_skipped(self, make_team):
        """Test a game against a franchise missing from the standings is skipped."""
        league = build_league(
            [make_team("a", 5, 5), make_team("b", 5, 5)],
            {"a": [RemainingGame(11, "ghost"), RemainingGame(12, "b", True)], "b": [RemainingGame(12, "a")]},
            {"a": "1", "b": "1"}
        )
        assert len(league.matchups) == 1
        assert any("ghost" in w for w in league.warnings)

    def test_self_play_skipped(self, make_team):
        """Test a franchise scheduled against itself is skipped."""
        league = build_league([make_team("a", 5, 5)], {"a": [RemainingGame(11, "a")]}, {"a": "1"})
        assert league.matchups == []
        assert any("against itself" in w for w in league.warnings)

    def test_missing_schedule_keeps_opponent_listings(self, make_team):
        """Test a franchise without a schedule still plays games its opponents list."""
        league = build_league(
            [make_team("a", 5, 5), make_team("b", 5, 5)],
            {"a": [RemainingGame(11, "b", True)]},
            {"a": "1", "b": "1"}
        )
        assert league.remaining_count("b") == 1
        assert "b" not in league.scheduled_ids
        assert any("No schedule found for franchise b" in w for w in league.warnings)

    def test_unknown_schedule_owner_skipped(self, make_team):
        """Test schedules for franchises not in the standings are ignored."""
        league = build_league(
            [make_team("a", 5, 5)],
            {"a": [], "zzz": [RemainingGame(11, "a")]},
            {"a": "1"}
        )
        assert league.matchups == []
        assert any("zzz" in w for w in league.warnings)

    def test_season_length_warning(self, make_team):
        """Test records longer than the season are flagged."""
        league = build_league(
            [make_team("a", 10, 4), make_team("b", 7, 7)],
            {"a": [RemainingGame(15, "b", True)], "b": [RemainingGame(15, "a")]},
            {"a": "1", "b": "1"},
            season_length=14
        )
        assert len(league.matchups) == 1
        assert sum("14-game season" in w for w in league.warnings) == 2

    def test_division_count_mismatch_warning(self, make_team):
        """Test a configured division count that differs from the league is flagged."""
        teams = [make_team("a", 5, 5), make_team("b", 5, 5)]
        schedules = {"a": [], "b": []}
        mismatched = build_league(teams, schedules, {"a": "1", "b": "2"}, num_divisions=3)
        matched = build_league(teams, schedules, {"a": "1", "b": "2"}, num_divisions=2)

        assert mismatched.num_divisions == 2
        assert any("2 divisions but 3 were configured" in w for w in mismatched.warnings)
        assert matched.warnings == []

    def test_accepts_mapping(self, make_team):
        """Test standings may be keyed by franchise id."""
        league = build_league({"a": make_team("a", 1, 0)}, {"a": []}, {"a": "1"})
        assert list(league.teams) == ["a"]
