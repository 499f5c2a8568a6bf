"""
Best-case, worst-case, most-likely and custom "what-if" projections.

Each projection fixes some of the subject's remaining games, applies them to
both participants, and seeds the resulting standings once. A Monte Carlo run
over the undecided games is only made when residual simulations are requested.
"""

import math
from typing import Dict, List, Mapping, Optional, Tuple, Union

from ..core.config import SimulationConfig
from .engine import apply_results, run_monte_carlo
from .league import League
from .models import (
    CustomScenarioResult,
    GameResult,
    Matchup,
    MatchupKey,
    ScenarioResult,
    format_record
)
from .tiebreakers import determine_playoff_seeding
from .win_probability import expected_wins, matchup_win_probability


# Most-likely projections are not assigned an exact probability
MOST_LIKELY_PROBABILITY = 40.0

SEASON_COMPLETE = "Season complete"
UNAVAILABLE = "Unable to calculate scenario"


def _unavailable() -> ScenarioResult:
    return ScenarioResult(
        record="0-0",
        seed=0,
        probability=0.0,
        description=UNAVAILABLE,
        playoff_probability=0.0
    )


def _win_probabilities(franchise_id: str, games: List[Matchup], league: League) -> List[float]:
    return [
        matchup_win_probability(franchise_id, g.opponent_of(franchise_id), league.teams, 1.0)
        for g in games
    ]


def project_outcome(
    franchise_id: str,
    league: League,
    results: Mapping[MatchupKey, str],
    config: SimulationConfig,
    residual_simulations: int = 0,
    **engine_options
) -> Tuple[League, int, float]:
    """
    Apply fixed results and seed the league once.

    Returns:
        Tuple of (projected league, subject's seed or 0, playoff probability).
        Without residual simulations the probability is 100 when the subject is
        seeded and 0 otherwise.
    """
    projected = apply_results(league, results)
    seeds = determine_playoff_seeding(
        projected.teams, projected.division_map, projected.h2h,
        playoff_spots=config.playoff_spots
    )
    seed = next((s.seed for s in seeds if s.franchise_id == franchise_id), 0)

    if residual_simulations > 0:
        mc = run_monte_carlo(projected, residual_simulations, config, **engine_options)
        playoff_probability = mc.percent(mc.accumulators[franchise_id].playoff_count)
    else:
        playoff_probability = 100.0 if seed else 0.0

    return projected, seed, playoff_probability


def _residual(config: SimulationConfig, residual_simulations: Optional[int]) -> int:
    return config.residual_simulations if residual_simulations is None else residual_simulations


def best_case_scenario(
    franchise_id: str,
    league: League,
    config: Optional[SimulationConfig] = None,
    residual_simulations: Optional[int] = None,
    **engine_options
) -> ScenarioResult:
    """The subject wins every remaining game."""
    config = config or SimulationConfig()
    team = league.teams.get(franchise_id)
    if team is None:
        return _unavailable()

    games = league.remaining_games(franchise_id)
    results = {g.key: franchise_id for g in games}
    _, seed, playoff_probability = project_outcome(
        franchise_id, league, results, config, _residual(config, residual_simulations), **engine_options
    )

    record = format_record(team.wins + len(games), team.losses, team.ties)
    probability = math.prod(_win_probabilities(franchise_id, games, league)) * 100

    return ScenarioResult(
        record=record,
        seed=seed,
        probability=probability,
        description=f"Win out ({len(games)}-0) to finish {record}" if games else SEASON_COMPLETE,
        playoff_probability=playoff_probability
    )


def worst_case_scenario(
    franchise_id: str,
    league: League,
    config: Optional[SimulationConfig] = None,
    residual_simulations: Optional[int] = None,
    **engine_options
) -> ScenarioResult:
    """The subject loses every remaining game."""
    config = config or SimulationConfig()
    team = league.teams.get(franchise_id)
    if team is None:
        return _unavailable()

    games = league.remaining_games(franchise_id)
    results = {g.key: g.opponent_of(franchise_id) for g in games}
    _, seed, playoff_probability = project_outcome(
        franchise_id, league, results, config, _residual(config, residual_simulations), **engine_options
    )

    record = format_record(team.wins, team.losses + len(games), team.ties)
    probability = math.prod(1 - p for p in _win_probabilities(franchise_id, games, league)) * 100

    return ScenarioResult(
        record=record,
        seed=seed,
        probability=probability,
        description=f"Lose out (0-{len(games)}) to finish {record}" if games else SEASON_COMPLETE,
        playoff_probability=playoff_probability
    )


def most_likely_scenario(
    franchise_id: str,
    league: League,
    config: Optional[SimulationConfig] = None,
    residual_simulations: Optional[int] = None,
    **engine_options
) -> ScenarioResult:
    """
    The subject wins its expected number of games.

    Expected wins are the rounded sum of single-game win probabilities; the
    games it is most likely to win are the ones marked as wins.
    """
    config = config or SimulationConfig()
    team = league.teams.get(franchise_id)
    if team is None:
        return _unavailable()

    games = league.remaining_games(franchise_id)
    probabilities = _win_probabilities(franchise_id, games, league)
    opponents = [g.opponent_of(franchise_id) for g in games]
    # Round half up
    projected_wins = int(math.floor(expected_wins(franchise_id, opponents, league.teams) + 0.5))

    by_likelihood = sorted(range(len(games)), key=lambda i: probabilities[i], reverse=True)
    winning = set(by_likelihood[:projected_wins])
    results = {
        g.key: franchise_id if i in winning else g.opponent_of(franchise_id)
        for i, g in enumerate(games)
    }
    _, seed, playoff_probability = project_outcome(
        franchise_id, league, results, config, _residual(config, residual_simulations), **engine_options
    )

    projected_losses = len(games) - projected_wins
    record = format_record(team.wins + projected_wins, team.losses + projected_losses, team.ties)

    return ScenarioResult(
        record=record,
        seed=seed,
        probability=MOST_LIKELY_PROBABILITY,
        description=f"Go {projected_wins}-{projected_losses} to finish {record}" if games else SEASON_COMPLETE,
        playoff_probability=playoff_probability
    )


def _parse_result(value: Union[str, GameResult, None]) -> Optional[GameResult]:
    if value is None:
        return None
    try:
        result = GameResult(value)
    except ValueError:
        raise ValueError(f"Invalid game result {value!r}; expected 'W', 'L' or None")
    if result == GameResult.TIE:
        raise ValueError("Custom scenarios support only 'W' or 'L' results")
    return result


def custom_scenario(
    franchise_id: str,
    game_results: Mapping[int, Union[str, GameResult, None]],
    league: League,
    config: Optional[SimulationConfig] = None,
    residual_simulations: Optional[int] = None,
    **engine_options
) -> CustomScenarioResult:
    """
    Project a user-specified set of results for the subject.

    Args:
        franchise_id: Subject franchise
        game_results: Week -> "W", "L" or None (undecided)
        league: League snapshot
        config: Simulation settings
        residual_simulations: Monte Carlo trials over the undecided games

    Raises:
        ValueError: If a result is not "W", "L" or None
    """
    config = config or SimulationConfig()
    team = league.teams.get(franchise_id)
    if team is None:
        return CustomScenarioResult(playoff_probability=0.0, projected_record="0-0", projected_seed=0)

    wins, losses = team.wins, team.losses
    results: Dict[MatchupKey, str] = {}
    for game in league.remaining_games(franchise_id):
        result = _parse_result(game_results.get(game.week))
        if result == GameResult.WIN:
            results[game.key] = franchise_id
            wins += 1
        elif result == GameResult.LOSS:
            results[game.key] = game.opponent_of(franchise_id)
            losses += 1

    _, seed, playoff_probability = project_outcome(
        franchise_id, league, results, config, _residual(config, residual_simulations), **engine_options
    )

    return CustomScenarioResult(
        playoff_probability=playoff_probability,
        projected_record=format_record(wins, losses, team.ties),
        projected_seed=seed
    )
