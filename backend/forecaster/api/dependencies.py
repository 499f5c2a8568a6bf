"""
Shared route dependencies.
"""

import logging
from fastapi import HTTPException, status

from ..core.config import SimulationConfig, InvalidConfigurationError
from .schemas import SimulationOptions


logger = logging.getLogger(__name__)


def get_simulation_config() -> SimulationConfig:
    """Server-wide simulation settings from FORECAST_* environment variables."""
    try:
        return SimulationConfig.from_env()
    except InvalidConfigurationError as e:
        logger.error(f"Invalid simulation settings in environment: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Server simulation settings are invalid: {str(e)}"
        )


def resolve_config(base: SimulationConfig, options: SimulationOptions) -> SimulationConfig:
    """Apply request overrides, turning bad combinations into a 400."""
    try:
        return options.apply(base)
    except InvalidConfigurationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
