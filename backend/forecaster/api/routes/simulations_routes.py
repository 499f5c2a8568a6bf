"""
Simulation API routes.
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool

from ..dependencies import get_simulation_config, resolve_config
from ..schemas import (
    SimulationRunRequest,
    SimulationResultsResponse,
    TeamForecast,
    PlayoffPictureResponse,
    ErrorResponse
)
from ...core.config import SimulationConfig
from ...simulator import (
    League,
    PlayoffProbabilities,
    run_monte_carlo,
    summarize_probabilities,
    get_playoff_picture,
    strength_of_remaining_schedule
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/simulations", tags=["simulations"])


def build_team_forecasts(league: League, forecasts: List[PlayoffProbabilities]) -> List[TeamForecast]:
    """Join each forecast with the franchise's standings and schedule strength."""
    team_forecasts = []
    for forecast in forecasts:
        team = league.teams[forecast.franchise_id]
        division = league.division_of(team.franchise_id)
        opponents = [m.opponent_of(team.franchise_id) for m in league.remaining_games(team.franchise_id)]
        schedule = strength_of_remaining_schedule(opponents, league.teams)

        team_forecasts.append(TeamForecast(
            name=team.display_name,
            division_id=division.id if division else "",
            division_name=division.name if division else "",
            record=team.record_str,
            division_record=team.division_record_str,
            win_pct=team.win_pct,
            remaining_games=len(opponents),
            schedule_strength=schedule["strength"],
            schedule_difficulty=schedule["difficulty"],
            **forecast.to_dict()
        ))
    return team_forecasts


@router.post(
    "/run",
    response_model=SimulationResultsResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}
)
async def run_simulation(
    request: SimulationRunRequest,
    base_config: SimulationConfig = Depends(get_simulation_config)
) -> SimulationResultsResponse:
    """
    Forecast playoff odds for every franchise in the league.

    The simulation runs in the threadpool so the event loop stays free.
    A time budget may stop it early; percentages then cover the completed trials.
    """
    config = resolve_config(base_config, request.options)
    league = request.league.to_league(config.season_length, config.num_divisions)

    result = await run_in_threadpool(
        run_monte_carlo,
        league,
        config.n_simulations,
        config,
        seed=request.options.seed,
        time_budget=request.options.time_budget
    )
    forecasts = summarize_probabilities(league, result, config)
    picture = get_playoff_picture(league, forecasts, config.playoff_spots)

    if result.cancelled:
        logger.warning(
            f"Simulation stopped early: {result.trials_completed}/{result.requested} trials"
        )

    return SimulationResultsResponse(
        n_simulations=result.requested,
        trials_completed=result.trials_completed,
        cancelled=result.cancelled,
        playoff_spots=config.playoff_spots,
        teams=build_team_forecasts(league, forecasts),
        playoff_picture=PlayoffPictureResponse.model_validate(picture.to_dict()),
        warnings=league.warnings
    )
