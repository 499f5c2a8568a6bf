"""
Core utilities and configuration.
"""

from .config import SimulationConfig, InvalidConfigurationError

__all__ = [
    "SimulationConfig",
    "InvalidConfigurationError",
]
