"""
Scenario API routes: best / worst / most likely, custom what-ifs and rooting interests.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from ..dependencies import get_simulation_config, resolve_config
from ..schemas import (
    ScenarioRequest,
    ScenarioResponse,
    ScenariosResponse,
    CustomScenarioRequest,
    CustomScenarioResponse,
    RootingRequest,
    RootingResponse,
    ErrorResponse
)
from ...core.config import SimulationConfig
from ...simulator import (
    League,
    best_case_scenario,
    worst_case_scenario,
    most_likely_scenario,
    custom_scenario,
    calculate_rooting_interests
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scenarios", tags=["scenarios"])

NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}


def _require_franchise(league: League, franchise_id: str) -> None:
    if franchise_id not in league.teams:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Franchise {franchise_id} not found"
        )


def _all_scenarios(franchise_id: str, league: League, config: SimulationConfig, seed):
    return (
        best_case_scenario(franchise_id, league, config, seed=seed),
        worst_case_scenario(franchise_id, league, config, seed=seed),
        most_likely_scenario(franchise_id, league, config, seed=seed)
    )


@router.post("/{franchise_id}", response_model=ScenariosResponse, responses=NOT_FOUND)
async def get_scenarios(
    franchise_id: str,
    request: ScenarioRequest,
    base_config: SimulationConfig = Depends(get_simulation_config)
) -> ScenariosResponse:
    """
    Best-case, worst-case and most-likely projections for a franchise.
    """
    config = resolve_config(base_config, request.options)
    league = request.league.to_league(config.season_length, config.num_divisions)
    _require_franchise(league, franchise_id)

    best, worst, likely = await run_in_threadpool(
        _all_scenarios, franchise_id, league, config, request.options.seed
    )

    return ScenariosResponse(
        franchise_id=franchise_id,
        best_case=ScenarioResponse(**best.to_dict()),
        worst_case=ScenarioResponse(**worst.to_dict()),
        most_likely=ScenarioResponse(**likely.to_dict()),
        warnings=league.warnings
    )


@router.post("/{franchise_id}/custom", response_model=CustomScenarioResponse, responses=NOT_FOUND)
async def run_custom_scenario(
    franchise_id: str,
    request: CustomScenarioRequest,
    base_config: SimulationConfig = Depends(get_simulation_config)
) -> CustomScenarioResponse:
    """
    Project a franchise's finish for user-chosen results by week.

    Weeks left out (or set to null) stay undecided.
    """
    config = resolve_config(base_config, request.options)
    league = request.league.to_league(config.season_length, config.num_divisions)
    _require_franchise(league, franchise_id)

    try:
        result = await run_in_threadpool(
            custom_scenario,
            franchise_id,
            request.game_results,
            league,
            config,
            seed=request.options.seed
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return CustomScenarioResponse(
        franchise_id=franchise_id,
        warnings=league.warnings,
        **result.to_dict()
    )


@router.post("/{franchise_id}/rooting", response_model=RootingResponse, responses=NOT_FOUND)
async def get_rooting_interests(
    franchise_id: str,
    request: RootingRequest,
    base_config: SimulationConfig = Depends(get_simulation_config)
) -> RootingResponse:
    """
    Which other results help this franchise, ordered by how much they matter.
    """
    config = resolve_config(base_config, request.options)
    league = request.league.to_league(config.season_length, config.num_divisions)
    _require_franchise(league, franchise_id)

    analysis = await run_in_threadpool(
        calculate_rooting_interests,
        franchise_id,
        league,
        config,
        request.n_simulations,
        seed=request.options.seed
    )
    logger.info(f"Rooting interests for {franchise_id}: {len(analysis.top_matchups)} key matchups")

    return RootingResponse(
        franchise_id=franchise_id,
        warnings=league.warnings,
        **analysis.to_dict()
    )
