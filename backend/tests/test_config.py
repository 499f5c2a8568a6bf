"""
Tests for simulation configuration.
"""

import pytest
from forecaster.core.config import SimulationConfig, InvalidConfigurationError


class TestSimulationConfig:
    """Tests for SimulationConfig."""

    def test_defaults(self):
        """Test the default knobs."""
        config = SimulationConfig()
        assert config.n_simulations == 10000
        assert config.recent_form_weeks == 3
        assert config.win_probability_jitter == 0.1
        assert config.point_jitter == 0.1
        assert config.playoff_spots == 6
        assert config.workers == 1
        assert config.residual_simulations == 0

    @pytest.mark.parametrize("field, value", [
        ("n_simulations", 0),
        ("recent_form_weeks", 0),
        ("win_probability_jitter", -0.1),
        ("point_jitter", 1.5),
        ("playoff_spots", 0),
        ("workers", 0),
        ("residual_simulations", -1),
    ])
    def test_validate_rejects_out_of_range(self, field, value):
        """Test that validate raises for bad settings."""
        with pytest.raises(InvalidConfigurationError):
            SimulationConfig(**{field: value}).validate()

    def test_invalid_configuration_is_value_error(self):
        """Test callers can catch configuration errors as ValueError."""
        with pytest.raises(ValueError):
            SimulationConfig(playoff_spots=-1).validate()

    def test_with_overrides_skips_none(self):
        """Test that None overrides keep the base value."""
        config = SimulationConfig(n_simulations=500).with_overrides(n_simulations=None, playoff_spots=4)
        assert config.n_simulations == 500
        assert config.playoff_spots == 4

    def test_with_overrides_validates(self):
        """Test that overrides are validated."""
        with pytest.raises(InvalidConfigurationError):
            SimulationConfig().with_overrides(workers=0)

    def test_from_env(self, monkeypatch):
        """Test reading FORECAST_* variables."""
        monkeypatch.setenv("FORECAST_SIMULATIONS", "2500")
        monkeypatch.setenv("FORECAST_PLAYOFF_SPOTS", "4")
        monkeypatch.setenv("FORECAST_WIN_JITTER", "0.05")
        monkeypatch.delenv("FORECAST_WORKERS", raising=False)

        config = SimulationConfig.from_env()
        assert config.n_simulations == 2500
        assert config.playoff_spots == 4
        assert config.win_probability_jitter == 0.05
        assert config.workers == 1

    def test_from_env_not_a_number(self, monkeypatch):
        """Test that unparseable values raise InvalidConfigurationError."""
        monkeypatch.setenv("FORECAST_SIMULATIONS", "lots")
        with pytest.raises(InvalidConfigurationError, match="FORECAST_SIMULATIONS"):
            SimulationConfig.from_env()
