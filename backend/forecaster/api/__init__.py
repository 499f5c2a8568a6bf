"""
API module.
"""

from .routes import simulations_router, scenarios_router
from .dependencies import get_simulation_config

__all__ = [
    "simulations_router",
    "scenarios_router",
    "get_simulation_config",
]
