"""
API route modules.
"""

from .simulations_routes import router as simulations_router
from .scenarios_routes import router as scenarios_router

__all__ = ["simulations_router", "scenarios_router"]
