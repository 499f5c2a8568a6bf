"""
Rooting interests: which other results help a team's playoff chances.

For every remaining game the target is not playing in, each outcome is fixed
in turn and a reduced Monte Carlo run measures the target's playoff
probability. The difference between the two is the game's swing.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..core.config import SimulationConfig
from .engine import apply_results, run_monte_carlo
from .league import League
from .magic_numbers import is_mathematically_eliminated
from .models import Matchup


logger = logging.getLogger(__name__)

ROOTING_SIMULATIONS = 500


@dataclass
class RootingInterest:
    """One matchup and the result the target should root for."""

    week: int
    team_a_id: str
    team_b_id: str
    root_for: str
    importance: str
    if_root_for_wins: float
    if_root_for_loses: float
    swing: float
    explanation: str
    context: str

    def to_dict(self) -> dict:
        return {
            "week": self.week,
            "team_a_id": self.team_a_id,
            "team_b_id": self.team_b_id,
            "root_for": self.root_for,
            "importance": self.importance,
            "if_root_for_wins": self.if_root_for_wins,
            "if_root_for_loses": self.if_root_for_loses,
            "swing": self.swing,
            "explanation": self.explanation,
            "context": self.context
        }


@dataclass
class RootingInterestAnalysis:
    top_matchups: List[RootingInterest] = field(default_factory=list)
    all_matchups: List[RootingInterest] = field(default_factory=list)
    certainty_level: str = "low"
    weekly_breakdown: Dict[int, List[RootingInterest]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "top_matchups": [r.to_dict() for r in self.top_matchups],
            "all_matchups": [r.to_dict() for r in self.all_matchups],
            "certainty_level": self.certainty_level,
            "weekly_breakdown": {
                week: [r.to_dict() for r in interests]
                for week, interests in self.weekly_breakdown.items()
            }
        }


def has_relevant_rooting_interests(playoff_probability: float, is_eliminated: bool) -> bool:
    """Rooting interests only matter while a team is neither clinched nor out."""
    return not is_eliminated and playoff_probability < 99.0


def _certainty_level(remaining_games: int) -> str:
    if remaining_games <= 3:
        return "high"
    if remaining_games <= 5:
        return "medium"
    return "low"


def classify_importance(swing: float) -> str:
    if swing >= 10:
        return "critical"
    if swing >= 5:
        return "important"
    if swing >= 2:
        return "moderate"
    return "minor"


def _explain(target_id: str, root_against_id: str, league: League, swing: float) -> str:
    target = league.teams[target_id]
    rival = league.teams[root_against_id]

    if league.division_map.get(target_id) == league.division_map.get(root_against_id):
        return f"{rival.display_name} is your division rival - need them to lose"

    if rival.wins > target.wins:
        diff = rival.wins - target.wins
        if diff == 1:
            return f"{rival.display_name} is 1 game ahead - loss helps you catch them"
        return f"{rival.display_name} is {diff} games ahead - need them to drop games"

    if rival.wins == target.wins:
        return f"{rival.display_name} is tied with you in standings - loss benefits tiebreaker"

    if swing >= 5:
        return "Significantly impacts wildcard race"
    return "Indirectly affects playoff positioning"


def _context(target_id: str, root_for: str, root_against: str, league: League, swing: float) -> str:
    target_division = league.division_map.get(target_id)
    if target_division in (league.division_map.get(root_for), league.division_map.get(root_against)):
        return "division-race"
    if swing >= 3:
        return "wildcard-race"
    if swing >= 1:
        return "tiebreaker"
    return "indirect"


def _probability_if(
    target_id: str,
    league: League,
    matchup: Matchup,
    winner_id: str,
    n_simulations: int,
    config: SimulationConfig,
    engine_options: dict
) -> float:
    fixed = apply_results(league, {matchup.key: winner_id})
    result = run_monte_carlo(fixed, n_simulations, config, **engine_options)
    return result.percent(result.accumulators[target_id].playoff_count)


def calculate_rooting_interests(
    target_id: str,
    league: League,
    config: Optional[SimulationConfig] = None,
    n_simulations: int = ROOTING_SIMULATIONS,
    playoff_probability: Optional[float] = None,
    **engine_options
) -> RootingInterestAnalysis:
    """
    Rank every remaining matchup by how much its result moves the target's odds.

    Args:
        target_id: Franchise to analyse for
        league: League snapshot
        config: Simulation settings
        n_simulations: Trials per fixed outcome
        playoff_probability: The target's current forecast, when known. A
            clinched target (or one mathematically eliminated) has nothing
            to root for and no matchups are simulated.
        **engine_options: Passed to run_monte_carlo (seed, rng_factory, ...)

    Returns:
        RootingInterestAnalysis; empty when the target is unknown
    """
    config = config or SimulationConfig()
    if target_id not in league.teams:
        return RootingInterestAnalysis()

    remaining = league.remaining_count(target_id)
    certainty = _certainty_level(remaining)

    eliminated = is_mathematically_eliminated(target_id, league, config.playoff_spots).is_eliminated
    known_probability = 0.0 if playoff_probability is None else playoff_probability
    if not has_relevant_rooting_interests(known_probability, eliminated):
        logger.info("Franchise %s has clinched or been eliminated; no rooting interests", target_id)
        return RootingInterestAnalysis(certainty_level=certainty)

    others = [m for m in league.matchups if not m.involves(target_id)]
    logger.info("Analyzing %d remaining matchups for franchise %s", len(others), target_id)

    interests = []
    weekly: Dict[int, List[RootingInterest]] = defaultdict(list)
    for matchup in others:
        team_a, team_b = matchup.home_team_id, matchup.away_team_id
        prob_a = _probability_if(target_id, league, matchup, team_a, n_simulations, config, engine_options)
        prob_b = _probability_if(target_id, league, matchup, team_b, n_simulations, config, engine_options)

        swing = abs(prob_a - prob_b)
        root_for = team_a if prob_a > prob_b else team_b
        root_against = team_b if root_for == team_a else team_a

        interest = RootingInterest(
            week=matchup.week,
            team_a_id=team_a,
            team_b_id=team_b,
            root_for=root_for,
            importance=classify_importance(swing),
            if_root_for_wins=prob_a if root_for == team_a else prob_b,
            if_root_for_loses=prob_b if root_for == team_a else prob_a,
            swing=swing,
            explanation=_explain(target_id, root_against, league, swing),
            context=_context(target_id, root_for, root_against, league, swing)
        )
        interests.append(interest)
        weekly[matchup.week].append(interest)

    interests.sort(key=lambda r: r.swing, reverse=True)
    for week_interests in weekly.values():
        week_interests.sort(key=lambda r: r.swing, reverse=True)

    top = [r for r in interests if r.importance in ("critical", "important")][:10]
    logger.info(
        "Rooting analysis complete: %d critical/important matchups out of %d",
        len(top), len(interests)
    )

    return RootingInterestAnalysis(
        top_matchups=top,
        all_matchups=interests,
        certainty_level=certainty,
        weekly_breakdown=dict(sorted(weekly.items()))
    )
