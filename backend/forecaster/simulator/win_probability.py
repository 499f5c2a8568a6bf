"""
Single-game win probability model and outcome draws.
"""

import random
from typing import Dict, List, Optional

from .models import GameResult, TeamRecord, safe_ratio


MIN_WIN_PROBABILITY = 0.05
MAX_WIN_PROBABILITY = 0.95


def clamp_probability(p: float) -> float:
    """No game is ever treated as a certainty."""
    return max(MIN_WIN_PROBABILITY, min(MAX_WIN_PROBABILITY, p))


def recent_form_multiplier(team: Optional[TeamRecord], window: int = 3) -> float:
    """
    Scale a team's form into [0.8, 1.2].

    Uses the last `window` entries of ``recent_results`` when the data layer
    supplied them, otherwise the season win percentage.
    """
    if team is None:
        return 1.0

    if team.recent_results:
        recent = team.recent_results[-window:]
        wins = sum(1 for r in recent if r == GameResult.WIN.value)
        ties = sum(1 for r in recent if r == GameResult.TIE.value)
        form_pct = safe_ratio(wins + 0.5 * ties, len(recent))
    else:
        form_pct = team.win_pct

    return 0.8 + form_pct * 0.4


def matchup_win_probability(
    team_id: str,
    opponent_id: str,
    teams: Dict[str, TeamRecord],
    recent_form: float = 1.0
) -> float:
    """
    Probability that `team_id` beats `opponent_id`.

    Based on each team's share of the two teams' combined average points,
    scaled by the form multiplier and clamped to [0.05, 0.95].
    """
    team = teams.get(team_id)
    opponent = teams.get(opponent_id)
    if team is None or opponent is None:
        return 0.5

    team_avg = team.avg_points_for
    opp_avg = opponent.avg_points_for
    if team_avg + opp_avg == 0:
        return 0.5

    base = team_avg / (team_avg + opp_avg)
    return clamp_probability(base * recent_form)


def game_win_probability(
    home_id: str,
    away_id: str,
    teams: Dict[str, TeamRecord],
    home_form: float = 1.0,
    away_form: float = 1.0
) -> float:
    """
    Probability that the home team wins a game played once.

    Averages the home team's view (with its form) and the complement of the
    away team's view (with its form), so both teams' form counts and swapping
    home and away gives the complementary probability.
    """
    home_view = matchup_win_probability(home_id, away_id, teams, home_form)
    away_view = matchup_win_probability(away_id, home_id, teams, away_form)
    return clamp_probability((home_view + 1 - away_view) / 2)


def simulate_game(
    win_probability: float,
    rng: random.Random,
    jitter: float = 0.1
) -> GameResult:
    """
    Draw one game result for the team whose win probability is given.

    A symmetric jitter of +/- `jitter` models game-to-game variance beyond
    the base model.
    """
    variance = (rng.random() - 0.5) * 2 * jitter
    adjusted = clamp_probability(win_probability + variance)
    return GameResult.WIN if rng.random() < adjusted else GameResult.LOSS


def expected_wins(franchise_id: str, opponent_ids: List[str], teams: Dict[str, TeamRecord]) -> float:
    """Sum of single-game win probabilities over a list of opponents."""
    return sum(
        matchup_win_probability(franchise_id, opp_id, teams)
        for opp_id in opponent_ids
    )


def classify_schedule_difficulty(strength: float) -> str:
    if strength < 0.45:
        return "easy"
    if strength > 0.55:
        return "hard"
    return "medium"


def strength_of_remaining_schedule(opponent_ids: List[str], teams: Dict[str, TeamRecord]) -> dict:
    """
    Average opponent win percentage over the remaining games.

    Returns:
        Dict with ``strength``, ``difficulty`` and the hardest / easiest
        remaining opponent ids (None when no games remain)
    """
    opponents = [teams[o] for o in opponent_ids if o in teams]
    if not opponents:
        return {"strength": 0.0, "difficulty": "easy", "hardest": None, "easiest": None}

    strength = sum(o.win_pct for o in opponents) / len(opponents)
    ranked = sorted(opponents, key=lambda o: o.win_pct, reverse=True)
    return {
        "strength": strength,
        "difficulty": classify_schedule_difficulty(strength),
        "hardest": ranked[0].franchise_id,
        "easiest": ranked[-1].franchise_id,
    }
