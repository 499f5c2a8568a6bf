"""
Tests for tiebreakers and playoff seeding.
"""

from forecaster.simulator.tiebreakers import (
    get_h2h_record,
    combine_h2h,
    resolve_tiebreaker,
    rank_teams,
    decide_tiebreak,
    get_tiebreaker_explanation,
    determine_playoff_seeding
)


def _ids(teams):
    return [t.franchise_id for t in teams]


class TestHeadToHead:
    """Tests for head-to-head helpers."""

    def test_get_h2h_record_orientation(self):
        """Test the record is returned from the first team's side."""
        h2h = {("a", "b"): (3, 1, 0)}
        assert get_h2h_record(h2h, "a", "b") == (3, 1, 0)
        assert get_h2h_record(h2h, "b", "a") == (1, 3, 0)
        assert get_h2h_record(h2h, "a", "z") == (0, 0, 0)

    def test_combine_h2h(self):
        """Test simulated results add onto completed ones."""
        combined = combine_h2h({("a", "b"): (1, 0, 0)}, {("a", "b"): (0, 1, 0), ("b", "c"): (1, 0, 0)})
        assert combined == {("a", "b"): (1, 1, 0), ("b", "c"): (1, 0, 0)}


class TestResolveTiebreaker:
    """Tests for resolve_tiebreaker."""

    def test_head_to_head_first(self, make_team):
        """Test the head-to-head winner ranks first."""
        x = make_team("x", 6, 4, points_for=1200.0)
        y = make_team("y", 6, 4, points_for=900.0)
        assert _ids(resolve_tiebreaker([x, y], {("x", "y"): (0, 2, 0)})) == ["y", "x"]

    def test_simulated_head_to_head_counts(self, make_team):
        """Test head-to-head results from the current trial are included."""
        x = make_team("x", 6, 4)
        y = make_team("y", 6, 4)
        assert _ids(resolve_tiebreaker([x, y], {("x", "y"): (1, 1, 0)}, {("x", "y"): (1, 0, 0)})) == ["x", "y"]

    def test_unequal_games_skip_head_to_head(self, make_team):
        """Test head-to-head is skipped when tied teams played unequal games."""
        x = make_team("x", 6, 4, division_wins=1, division_losses=2)
        y = make_team("y", 6, 4, division_wins=2, division_losses=1)
        z = make_team("z", 6, 4, division_wins=3, division_losses=0)
        h2h = {("x", "y"): (2, 0, 0), ("x", "z"): (1, 0, 0)}
        assert _ids(resolve_tiebreaker([x, y, z], h2h)) == ["z", "y", "x"]

    def test_division_record(self, make_team):
        """Test division win% breaks a tie with no head-to-head games."""
        x = make_team("x", 6, 4, division_wins=1, division_losses=3)
        y = make_team("y", 6, 4, division_wins=3, division_losses=1)
        assert _ids(resolve_tiebreaker([x, y])) == ["y", "x"]

    def test_points_for(self, make_team):
        """Test points for breaks a tie after division record."""
        x = make_team("x", 6, 4, points_for=900.0)
        y = make_team("y", 6, 4, points_for=1000.0)
        assert _ids(resolve_tiebreaker([x, y])) == ["y", "x"]

    def test_franchise_id_fallback(self, make_team):
        """Test identical teams fall back to franchise id."""
        teams = [make_team("m", 6, 4), make_team("k", 6, 4), make_team("z", 6, 4)]
        assert _ids(resolve_tiebreaker(teams)) == ["k", "m", "z"]

    def test_split_restarts_at_head_to_head(self, make_team):
        """Test a subgroup left by a split is re-resolved from head-to-head."""
        # z wins on points; x and y then compare head-to-head again
        x = make_team("x", 6, 4, points_for=1000.0)
        y = make_team("y", 6, 4, points_for=1000.0)
        z = make_team("z", 6, 4, points_for=1100.0)
        h2h = {("x", "y"): (0, 1, 0), ("x", "z"): (1, 0, 0)}
        # pair totals 1, 1, 0 are unequal, so points decide first
        assert _ids(resolve_tiebreaker([x, y, z], h2h)) == ["z", "y", "x"]


class TestRankTeams:
    """Tests for rank_teams."""

    def test_win_pct_then_tiebreakers(self, make_team):
        """Test teams are ranked by win% with ties broken."""
        teams = [make_team("a", 4, 6), make_team("b", 7, 3), make_team("c", 7, 3, points_for=1200.0)]
        assert _ids(rank_teams(teams)) == ["c", "b", "a"]

    def test_ties_count_half(self, make_team):
        """Test a tie is worth half a win."""
        teams = [make_team("a", 5, 5), make_team("b", 5, 4, 1)]
        assert _ids(rank_teams(teams)) == ["b", "a"]


class TestDeterminePlayoffSeeding:
    """Tests for determine_playoff_seeding."""

    def test_division_winners_precede_wildcards(self, make_team):
        """Test a division winner outranks a wildcard with a better record."""
        teams = {
            "a": make_team("a", 5, 5),
            "b": make_team("b", 9, 1),
            "c": make_team("c", 8, 2),
        }
        seeds = determine_playoff_seeding(teams, {"a": "1", "b": "2", "c": "2"}, playoff_spots=3)
        assert [(s.franchise_id, s.seed, s.is_division_winner) for s in seeds] == [
            ("b", 1, True),
            ("a", 2, True),
            ("c", 3, False),
        ]

    def test_idempotent_and_side_effect_free(self, four_team_league):
        """Test repeated seeding of the same records is identical and leaves them unchanged."""
        before = {fid: t.to_dict() for fid, t in four_team_league.teams.items()}
        first = determine_playoff_seeding(four_team_league.teams, four_team_league.division_map, playoff_spots=3)
        second = determine_playoff_seeding(four_team_league.teams, four_team_league.division_map, playoff_spots=3)
        assert first == second
        assert {fid: t.to_dict() for fid, t in four_team_league.teams.items()} == before

    def test_seeds_are_contiguous(self, four_team_league):
        """Test seeds run 1..K."""
        seeds = determine_playoff_seeding(four_team_league.teams, four_team_league.division_map, playoff_spots=3)
        assert [s.seed for s in seeds] == [1, 2, 3]
        assert [s.franchise_id for s in seeds] == ["a", "b", "c"]

    def test_fewer_teams_than_spots(self, make_team):
        """Test only existing teams are seeded."""
        teams = {fid: make_team(fid, 5, 5) for fid in "abc"}
        seeds = determine_playoff_seeding(teams, {fid: "1" for fid in teams}, playoff_spots=6)
        assert [s.seed for s in seeds] == [1, 2, 3]
        assert sum(s.is_division_winner for s in seeds) == 1

    def test_missing_division_is_own_division(self, make_team):
        """Test a franchise missing from the division map wins its own division."""
        teams = {"a": make_team("a", 9, 1), "b": make_team("b", 8, 2), "c": make_team("c", 1, 9)}
        seeds = determine_playoff_seeding(teams, {"a": "1", "b": "1"}, playoff_spots=2)
        assert [(s.franchise_id, s.is_division_winner) for s in seeds] == [("a", True), ("c", True)]

    def test_more_divisions_than_spots(self, make_team):
        """Test only the best K division winners are seeded."""
        teams = {"a": make_team("a", 3, 7), "b": make_team("b", 9, 1), "c": make_team("c", 6, 4)}
        seeds = determine_playoff_seeding(teams, {"a": "1", "b": "2", "c": "3"}, playoff_spots=2)
        assert [s.franchise_id for s in seeds] == ["b", "c"]
        assert all(s.is_division_winner for s in seeds)

    def test_division_tie_uses_head_to_head(self, make_team):
        """Test the division winner is chosen with tiebreakers."""
        teams = {"a": make_team("a", 7, 3, points_for=1500.0), "b": make_team("b", 7, 3)}
        seeds = determine_playoff_seeding(teams, {"a": "1", "b": "1"}, h2h={("a", "b"): (0, 2, 0)}, playoff_spots=1)
        assert seeds[0].franchise_id == "b"


class TestTiebreakExplanation:
    """Tests for decide_tiebreak and get_tiebreaker_explanation."""

    def test_win_pct_step(self, make_team):
        """Test different records are decided by win percentage."""
        decision = decide_tiebreak(make_team("a", 5, 5), make_team("b", 6, 4))
        assert (decision.winner_id, decision.loser_id, decision.step) == ("b", "a", 1)
        assert decision.reason == "Better winning percentage (60.0% vs 50.0%)"

    def test_head_to_head_step(self, make_team):
        """Test the head-to-head record is reported from the winner's side."""
        a, b = make_team("a", 5, 5), make_team("b", 5, 5)
        decision = decide_tiebreak(a, b, {("a", "b"): (0, 2, 0)})
        assert (decision.winner_id, decision.step) == ("b", 2)
        assert decision.reason == "Won head-to-head (2-0)"

    def test_division_step(self, make_team):
        """Test division record separates teams level on head-to-head."""
        a = make_team("a", 5, 5, division_wins=3, division_losses=1)
        b = make_team("b", 5, 5, division_wins=2, division_losses=2)
        decision = decide_tiebreak(a, b, {("a", "b"): (1, 1, 0)})
        assert (decision.winner_id, decision.step) == ("a", 3)
        assert decision.reason == "Better division record (75.0% vs 50.0%)"

    def test_points_step(self, make_team):
        """Test total points for."""
        decision = decide_tiebreak(make_team("a", 5, 5, points_for=990.0), make_team("b", 5, 5, points_for=1010.5))
        assert (decision.winner_id, decision.step) == ("b", 4)
        assert decision.reason == "More total points (1010.50 vs 990.00)"

    def test_franchise_id_fallback(self, make_team):
        """Test identical teams fall back to franchise id."""
        decision = decide_tiebreak(make_team("z", 5, 5), make_team("m", 5, 5))
        assert (decision.winner_id, decision.loser_id, decision.step) == ("m", "z", 5)

    def test_agrees_with_ranking(self, make_team):
        """Test the pairwise decision matches rank_teams for every pair."""
        teams = [
            make_team("a", 5, 5, points_for=1000.0),
            make_team("b", 5, 5, points_for=1000.0, division_wins=2, division_losses=1),
            make_team("c", 5, 5, points_for=1100.0),
            make_team("d", 6, 4),
        ]
        h2h = {("a", "c"): (2, 0, 0)}
        for i, first in enumerate(teams):
            for second in teams[i + 1:]:
                decision = decide_tiebreak(first, second, h2h)
                assert _ids(rank_teams([first, second], h2h))[0] == decision.winner_id

    def test_explanation_uses_names(self, make_team):
        """Test the explanation line names both teams."""
        a, b = make_team("a", 5, 5), make_team("b", 5, 5)
        explanation = get_tiebreaker_explanation(a, b, sim_h2h={("a", "b"): (1, 0, 0)})
        assert explanation == "Team A beats Team B: Won head-to-head (1-0)"
