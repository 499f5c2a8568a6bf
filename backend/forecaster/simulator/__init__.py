"""
Fantasy Playoff Forecaster

Monte Carlo simulation to calculate playoff probabilities, plus deterministic
scenario projections.
"""

from .models import (
    TeamRecord,
    RemainingGame,
    Matchup,
    MatchupKey,
    Division,
    GameResult,
    PlayoffSeed,
    PlayoffProbabilities,
    ScenarioResult,
    CustomScenarioResult,
    H2HDict
)
from .league import League, build_league
from .win_probability import (
    matchup_win_probability,
    game_win_probability,
    recent_form_multiplier,
    simulate_game,
    expected_wins,
    strength_of_remaining_schedule
)
from .tiebreakers import (
    TiebreakDecision,
    resolve_tiebreaker,
    get_h2h_record,
    rank_teams,
    decide_tiebreak,
    get_tiebreaker_explanation,
    determine_playoff_seeding
)
from .engine import (
    MonteCarloResult,
    apply_results,
    simulate_trial,
    run_monte_carlo,
    summarize_probabilities,
    calculate_playoff_probabilities
)
from .magic_numbers import (
    calculate_magic_number,
    calculate_elimination_number,
    calculate_games_back,
    calculate_division_magic_number,
    has_clinched_division,
    is_eliminated_from_division,
    generate_clinch_scenarios,
    is_mathematically_eliminated
)
from .scenarios import best_case_scenario, worst_case_scenario, most_likely_scenario, custom_scenario
from .standings import PlayoffPicture, get_playoff_picture
from .rooting import RootingInterestAnalysis, calculate_rooting_interests

__all__ = [
    # Models
    "TeamRecord",
    "RemainingGame",
    "Matchup",
    "MatchupKey",
    "Division",
    "GameResult",
    "PlayoffSeed",
    "PlayoffProbabilities",
    "ScenarioResult",
    "CustomScenarioResult",
    "H2HDict",
    # League
    "League",
    "build_league",
    # Win probability
    "matchup_win_probability",
    "game_win_probability",
    "recent_form_multiplier",
    "simulate_game",
    "expected_wins",
    "strength_of_remaining_schedule",
    # Tiebreakers
    "TiebreakDecision",
    "resolve_tiebreaker",
    "get_h2h_record",
    "rank_teams",
    "decide_tiebreak",
    "get_tiebreaker_explanation",
    "determine_playoff_seeding",
    # Engine
    "MonteCarloResult",
    "apply_results",
    "simulate_trial",
    "run_monte_carlo",
    "summarize_probabilities",
    "calculate_playoff_probabilities",
    # Magic numbers
    "calculate_magic_number",
    "calculate_elimination_number",
    "calculate_games_back",
    "calculate_division_magic_number",
    "has_clinched_division",
    "is_eliminated_from_division",
    "generate_clinch_scenarios",
    "is_mathematically_eliminated",
    # Scenarios
    "best_case_scenario",
    "worst_case_scenario",
    "most_likely_scenario",
    "custom_scenario",
    # Standings and rooting interests
    "PlayoffPicture",
    "get_playoff_picture",
    "RootingInterestAnalysis",
    "calculate_rooting_interests",
]
