"""
Simulation configuration.

All knobs are supplied by the caller; `from_env` reads FORECAST_* environment
variables for the HTTP service.
"""

import os
from dataclasses import dataclass, replace
from typing import Optional


DEFAULT_SIMULATIONS = 10000
DEFAULT_RECENT_FORM_WEEKS = 3
DEFAULT_WIN_PROBABILITY_JITTER = 0.1
DEFAULT_POINT_JITTER = 0.1
DEFAULT_PLAYOFF_SPOTS = 6


class InvalidConfigurationError(ValueError):
    """Raised when a simulation setting is out of range."""
    pass


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise InvalidConfigurationError(f"{name} must be a number, got {value!r}")


@dataclass(frozen=True)
class SimulationConfig:
    """Settings shared by the Monte Carlo engine and the scenario engine."""

    n_simulations: int = DEFAULT_SIMULATIONS
    recent_form_weeks: int = DEFAULT_RECENT_FORM_WEEKS
    win_probability_jitter: float = DEFAULT_WIN_PROBABILITY_JITTER
    point_jitter: float = DEFAULT_POINT_JITTER
    playoff_spots: int = DEFAULT_PLAYOFF_SPOTS
    num_divisions: Optional[int] = None  # checked against the league; seeding uses the league's divisions
    season_length: Optional[int] = None
    workers: int = 1
    residual_simulations: int = 0

    def validate(self) -> "SimulationConfig":
        """
        Check every setting and return self.

        Raises:
            InvalidConfigurationError: If any setting is out of range
        """
        if self.n_simulations < 1:
            raise InvalidConfigurationError("n_simulations must be at least 1")
        if self.recent_form_weeks < 1:
            raise InvalidConfigurationError("recent_form_weeks must be at least 1")
        if not 0 <= self.win_probability_jitter < 1:
            raise InvalidConfigurationError("win_probability_jitter must be in [0, 1)")
        if not 0 <= self.point_jitter < 1:
            raise InvalidConfigurationError("point_jitter must be in [0, 1)")
        if self.playoff_spots < 1:
            raise InvalidConfigurationError("playoff_spots must be at least 1")
        if self.num_divisions is not None and self.num_divisions < 1:
            raise InvalidConfigurationError("num_divisions must be at least 1")
        if self.season_length is not None and self.season_length < 1:
            raise InvalidConfigurationError("season_length must be at least 1")
        if self.workers < 1:
            raise InvalidConfigurationError("workers must be at least 1")
        if self.residual_simulations < 0:
            raise InvalidConfigurationError("residual_simulations cannot be negative")
        return self

    def with_overrides(self, **changes) -> "SimulationConfig":
        """Return a validated copy with the non-None overrides applied."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes).validate()

    @classmethod
    def from_env(cls) -> "SimulationConfig":
        """Build a config from FORECAST_* environment variables."""
        return cls(
            n_simulations=_env_int("FORECAST_SIMULATIONS", DEFAULT_SIMULATIONS),
            recent_form_weeks=_env_int("FORECAST_RECENT_FORM_WEEKS", DEFAULT_RECENT_FORM_WEEKS),
            win_probability_jitter=_env_float("FORECAST_WIN_JITTER", DEFAULT_WIN_PROBABILITY_JITTER),
            point_jitter=_env_float("FORECAST_POINT_JITTER", DEFAULT_POINT_JITTER),
            playoff_spots=_env_int("FORECAST_PLAYOFF_SPOTS", DEFAULT_PLAYOFF_SPOTS),
            num_divisions=_env_int("FORECAST_NUM_DIVISIONS", None),
            season_length=_env_int("FORECAST_SEASON_LENGTH", None),
            workers=_env_int("FORECAST_WORKERS", 1),
            residual_simulations=_env_int("FORECAST_RESIDUAL_SIMULATIONS", 0),
        ).validate()
