"""
Monte Carlo simulation engine for playoff probability calculations.
"""

import logging
import random
import threading
import time
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from ..core.config import SimulationConfig, InvalidConfigurationError
from .league import League
from .magic_numbers import (
    calculate_magic_number,
    calculate_elimination_number,
    calculate_division_magic_number,
    generate_clinch_scenarios,
    has_clinched_division,
    is_eliminated_from_division,
    is_mathematically_eliminated
)
from .models import (
    GameResult,
    H2HDict,
    Matchup,
    MatchupKey,
    PlayoffProbabilities,
    ProbabilityAccumulator,
    TeamRecord,
    safe_ratio
)
from .tiebreakers import determine_playoff_seeding
from .win_probability import game_win_probability, recent_form_multiplier, simulate_game


logger = logging.getLogger(__name__)

GameSimulator = Callable[[float, random.Random, float], GameResult]
RngFactory = Callable[[int], random.Random]


def _record_game(
    teams: Dict[str, TeamRecord],
    h2h: Dict[Tuple[str, str], List[int]],
    matchup: Matchup,
    winner_id: str
) -> None:
    loser_id = matchup.opponent_of(winner_id)

    teams[winner_id].wins += 1
    teams[loser_id].losses += 1

    if matchup.is_division_game:
        teams[winner_id].division_wins += 1
        teams[loser_id].division_losses += 1

    key = (min(winner_id, loser_id), max(winner_id, loser_id))
    if winner_id < loser_id:
        h2h[key][0] += 1
    else:
        h2h[key][1] += 1


def _record_points(teams: Dict[str, TeamRecord], matchup: Matchup, home_points: float, away_points: float) -> None:
    home = teams[matchup.home_team_id]
    away = teams[matchup.away_team_id]
    home.points_for += home_points
    home.points_against += away_points
    away.points_for += away_points
    away.points_against += home_points


def apply_results(league: League, results: Mapping[MatchupKey, str]) -> League:
    """
    Fix the outcome of specific remaining games.

    Both participants' records are updated, each team is credited with its
    season-average points, and the decided games are removed from the
    schedule.

    Args:
        league: Current league snapshot (not modified)
        results: Matchup key -> winning franchise id

    Returns:
        New League with the decided games applied

    Raises:
        ValueError: If a winner does not play in the matchup it is given for
    """
    sim_teams = {fid: t.copy() for fid, t in league.teams.items()}
    fixed_h2h: Dict[Tuple[str, str], List[int]] = defaultdict(lambda: [0, 0, 0])
    remaining = []

    for matchup in league.matchups:
        winner_id = results.get(matchup.key)
        if winner_id is None:
            remaining.append(matchup)
            continue
        if not matchup.involves(winner_id):
            raise ValueError(
                f"Franchise {winner_id} does not play in week {matchup.week} "
                f"({matchup.home_team_id} vs {matchup.away_team_id})"
            )
        _record_game(sim_teams, fixed_h2h, matchup, winner_id)
        _record_points(
            sim_teams, matchup,
            league.teams[matchup.home_team_id].avg_points_for,
            league.teams[matchup.away_team_id].avg_points_for
        )

    h2h = dict(league.h2h)
    for key, (w1, w2, t) in fixed_h2h.items():
        hist = h2h.get(key, (0, 0, 0))
        h2h[key] = (hist[0] + w1, hist[1] + w2, hist[2] + t)

    return league.replace_state(sim_teams, remaining, h2h)


def matchup_probabilities(league: League, config: SimulationConfig) -> List[float]:
    """Home-team win probability for every remaining matchup, in schedule order."""
    probabilities = []
    for matchup in league.matchups:
        home_form = recent_form_multiplier(league.teams[matchup.home_team_id], config.recent_form_weeks)
        away_form = recent_form_multiplier(league.teams[matchup.away_team_id], config.recent_form_weeks)
        probabilities.append(game_win_probability(
            matchup.home_team_id, matchup.away_team_id, league.teams, home_form, away_form
        ))
    return probabilities


def simulate_trial(
    league: League,
    rng: random.Random,
    config: Optional[SimulationConfig] = None,
    game_simulator: GameSimulator = simulate_game,
    probabilities: Optional[List[float]] = None
) -> Tuple[Dict[str, TeamRecord], H2HDict]:
    """
    Play out every remaining game once.

    Args:
        league: League snapshot (never modified)
        rng: Random source for this trial
        config: Jitter and form settings
        game_simulator: Draws a result for the home team from its win probability
        probabilities: Precomputed home win probabilities (see matchup_probabilities)

    Returns:
        Tuple of (end-of-season team copies, simulated H2H for this trial)
    """
    config = config or SimulationConfig()
    if probabilities is None:
        probabilities = matchup_probabilities(league, config)

    sim_teams = {fid: t.copy() for fid, t in league.teams.items()}
    sim_h2h: Dict[Tuple[str, str], List[int]] = defaultdict(lambda: [0, 0, 0])
    low, high = 1 - config.point_jitter, 1 + config.point_jitter

    for matchup, win_probability in zip(league.matchups, probabilities):
        result = game_simulator(win_probability, rng, config.win_probability_jitter)
        winner_id = matchup.home_team_id if result == GameResult.WIN else matchup.away_team_id
        _record_game(sim_teams, sim_h2h, matchup, winner_id)

        # Points come from the season averages of the input snapshot
        home_points = league.teams[matchup.home_team_id].avg_points_for * rng.uniform(low, high)
        away_points = league.teams[matchup.away_team_id].avg_points_for * rng.uniform(low, high)
        _record_points(sim_teams, matchup, home_points, away_points)

    return sim_teams, {k: tuple(v) for k, v in sim_h2h.items()}


@dataclass
class MonteCarloResult:
    """Merged tallies of a (possibly partial) Monte Carlo run."""

    accumulators: Dict[str, ProbabilityAccumulator]
    trials_completed: int
    requested: int
    cancelled: bool = False

    def percent(self, count: int) -> float:
        return safe_ratio(count, self.trials_completed) * 100


class _ProgressTracker:
    """Thread-safe trial counter shared by the worker chunks."""

    def __init__(self, total: int, callback: Optional[Callable[[float], None]]):
        self.total = total
        self.callback = callback
        self.completed = 0
        self._lock = threading.Lock()

    def advance(self) -> None:
        with self._lock:
            self.completed += 1
            completed = self.completed
        if completed % 1000 == 0:
            logger.debug("Completed %d/%d simulations", completed, self.total)
        if self.callback and completed % 100 == 0:
            self.callback(completed / self.total * 100)


def default_rng_factory(seed: Optional[int] = None) -> RngFactory:
    """Independent random.Random per chunk; reproducible when `seed` is given."""
    if seed is None:
        return lambda chunk_index: random.Random()
    return lambda chunk_index: random.Random(seed * 1_000_003 + chunk_index)


def _chunk_sizes(n_simulations: int, workers: int) -> List[int]:
    base, extra = divmod(n_simulations, workers)
    return [base + (1 if i < extra else 0) for i in range(workers) if base or i < extra]


def _run_chunk(
    league: League,
    n_trials: int,
    rng: random.Random,
    config: SimulationConfig,
    probabilities: List[float],
    game_simulator: GameSimulator,
    should_stop: Callable[[], bool],
    progress: _ProgressTracker
) -> Tuple[Dict[str, ProbabilityAccumulator], int, bool]:
    accumulators = {
        fid: ProbabilityAccumulator(franchise_id=fid, playoff_spots=config.playoff_spots)
        for fid in league.teams
    }

    for trial in range(n_trials):
        # Cancellation is only honoured between trials
        if should_stop():
            return accumulators, trial, True

        sim_teams, sim_h2h = simulate_trial(league, rng, config, game_simulator, probabilities)
        seeds = determine_playoff_seeding(
            sim_teams, league.division_map, league.h2h, sim_h2h, config.playoff_spots
        )
        for seed in seeds:
            accumulators[seed.franchise_id].record(seed)
        progress.advance()

    return accumulators, n_trials, False


def run_monte_carlo(
    league: League,
    n_simulations: Optional[int] = None,
    config: Optional[SimulationConfig] = None,
    rng_factory: Optional[RngFactory] = None,
    seed: Optional[int] = None,
    workers: Optional[int] = None,
    game_simulator: GameSimulator = simulate_game,
    progress_callback: Optional[Callable[[float], None]] = None,
    cancel_event: Optional[threading.Event] = None,
    time_budget: Optional[float] = None,
    clock: Callable[[], float] = time.monotonic
) -> MonteCarloResult:
    """
    Run Monte Carlo simulation of the remaining season.

    Trials are split into one chunk per worker. Each chunk owns its random
    source and its accumulators; chunks are merged once all have finished.

    Args:
        league: League snapshot
        n_simulations: Number of trials (defaults to config.n_simulations)
        config: Simulation settings
        rng_factory: chunk index -> random.Random (overrides `seed`)
        seed: Seed for the default random sources
        workers: Number of worker threads (defaults to config.workers)
        game_simulator: Single-game outcome draw, injectable for tests
        progress_callback: Receives percent complete every 100 trials
        cancel_event: Set it to stop after the trial in progress
        time_budget: Seconds after which no new trial is started
        clock: Time source used with `time_budget`

    Returns:
        MonteCarloResult with merged tallies and the number of completed trials

    Raises:
        InvalidConfigurationError: If the trial or worker count is below 1
    """
    config = (config or SimulationConfig()).validate()
    n_simulations = config.n_simulations if n_simulations is None else n_simulations
    workers = config.workers if workers is None else workers
    if n_simulations < 1:
        raise InvalidConfigurationError("n_simulations must be at least 1")
    if workers < 1:
        raise InvalidConfigurationError("workers must be at least 1")

    factory = rng_factory or default_rng_factory(seed)
    probabilities = matchup_probabilities(league, config)
    deadline = clock() + time_budget if time_budget is not None else None
    progress = _ProgressTracker(n_simulations, progress_callback)

    def should_stop() -> bool:
        if cancel_event is not None and cancel_event.is_set():
            return True
        return deadline is not None and clock() >= deadline

    logger.info(
        "Starting Monte Carlo simulation with %d iterations (%d matchups, %d workers)",
        n_simulations, len(league.matchups), workers
    )

    sizes = _chunk_sizes(n_simulations, workers)
    args = [
        (league, size, factory(idx), config, probabilities, game_simulator, should_stop, progress)
        for idx, size in enumerate(sizes)
    ]
    if len(args) == 1:
        chunks = [_run_chunk(*args[0])]
    else:
        with ThreadPoolExecutor(max_workers=len(args)) as pool:
            futures = [pool.submit(_run_chunk, *a) for a in args]
            chunks = [f.result() for f in futures]

    merged = {
        fid: ProbabilityAccumulator(franchise_id=fid, playoff_spots=config.playoff_spots)
        for fid in league.teams
    }
    completed = 0
    cancelled = False
    for accumulators, done, stopped in chunks:
        for fid, acc in accumulators.items():
            merged[fid].merge(acc)
        completed += done
        cancelled = cancelled or stopped

    if cancelled:
        logger.info("Monte Carlo simulation stopped after %d/%d trials", completed, n_simulations)
    else:
        logger.info("Monte Carlo simulation complete")

    if progress_callback:
        progress_callback(100)

    return MonteCarloResult(
        accumulators=merged,
        trials_completed=completed,
        requested=n_simulations,
        cancelled=cancelled
    )


def summarize_probabilities(
    league: League,
    result: MonteCarloResult,
    config: Optional[SimulationConfig] = None
) -> List[PlayoffProbabilities]:
    """
    Convert Monte Carlo tallies into per-franchise forecasts.

    Percentages are taken over the trials actually completed. Derived metrics
    (magic / elimination numbers, clinch text, elimination check) are attached.

    Returns:
        Forecasts sorted by playoff probability, highest first
    """
    config = config or SimulationConfig()
    forecasts = []

    for fid in league.teams:
        data = result.accumulators[fid]
        playoff_probability = result.percent(data.playoff_count)
        division_win_probability = result.percent(data.division_win_count)
        remaining = league.remaining_count(fid)

        magic_number = calculate_magic_number(fid, league, playoff_probability, config.playoff_spots)
        elimination_number = calculate_elimination_number(
            fid, league, playoff_probability, config.playoff_spots
        )
        check = is_mathematically_eliminated(fid, league, config.playoff_spots)

        forecasts.append(PlayoffProbabilities(
            franchise_id=fid,
            playoff_probability=playoff_probability,
            division_win_probability=division_win_probability,
            wildcard_probability=result.percent(data.wildcard_count),
            seed_probabilities=[result.percent(c) for c in data.seed_counts],
            average_seed=safe_ratio(data.seed_sum, data.playoff_count),
            magic_number=magic_number,
            elimination_number=elimination_number,
            clinch_scenarios=generate_clinch_scenarios(
                playoff_probability,
                division_win_probability,
                magic_number,
                elimination_number,
                remaining
            ),
            is_eliminated=check.is_eliminated,
            elimination_reason=check.reason,
            elimination_details=check.details,
            clinched_division=has_clinched_division(fid, league),
            eliminated_from_division=is_eliminated_from_division(fid, league),
            division_magic_number=calculate_division_magic_number(fid, league)
        ))

    forecasts.sort(key=lambda f: f.playoff_probability, reverse=True)
    return forecasts


def calculate_playoff_probabilities(
    league: League,
    n_simulations: Optional[int] = None,
    config: Optional[SimulationConfig] = None,
    **engine_options
) -> List[PlayoffProbabilities]:
    """Run the Monte Carlo engine and summarize it; see run_monte_carlo for options."""
    config = (config or SimulationConfig()).validate()
    result = run_monte_carlo(league, n_simulations, config, **engine_options)
    return summarize_probabilities(league, result, config)
