"""Tests for settings and logging configuration.

Covers: defaults, environment overrides, field constraints, log level
wiring.
"""

import logging

import pytest
import structlog
from pydantic import ValidationError

from dotdensity.config.logging_setup import configure_logging
from dotdensity.config.settings import Environment, LogLevel, Settings
from dotdensity.models.common import PlacementMethod


class TestSettings:
    """Environment-driven configuration."""

    def test_defaults(self, settings: Settings) -> None:
        assert settings.UNITS_PER_DOT == 100.0
        assert settings.DEFAULT_METHOD == PlacementMethod.REGULAR
        assert settings.RANDOM_SEED is None
        assert settings.MAX_WORKERS == 1
        assert settings.GRID_MAX_REFINEMENTS == 64
        assert settings.LOG_LEVEL == LogLevel.INFO
        assert settings.ENVIRONMENT == Environment.DEV

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEFAULT_METHOD", "random")
        monkeypatch.setenv("RANDOM_SEED", "42")
        monkeypatch.setenv("MAX_WORKERS", "4")
        monkeypatch.setenv("ENVIRONMENT", "prod")
        settings = Settings(_env_file=None)
        assert settings.DEFAULT_METHOD == PlacementMethod.RANDOM
        assert settings.RANDOM_SEED == 42
        assert settings.MAX_WORKERS == 4
        assert settings.ENVIRONMENT == Environment.PROD

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("UNITS_PER_DOT", 0),
            ("MAX_WORKERS", 0),
            ("GRID_MAX_REFINEMENTS", 0),
            ("SAMPLING_MAX_DRAW_FACTOR", 0.5),
            ("DEFAULT_METHOD", "hexagonal"),
        ],
    )
    def test_invalid_values(self, field: str, value: object) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})


class TestConfigureLogging:
    """Root log level follows LOG_LEVEL."""

    @pytest.mark.usefixtures("restore_logging")
    def test_sets_root_level(self) -> None:
        configure_logging(Settings(_env_file=None, LOG_LEVEL="WARNING"))
        assert logging.getLogger().level == logging.WARNING

    @pytest.mark.usefixtures("restore_logging")
    def test_production_uses_json(self) -> None:
        configure_logging(Settings(_env_file=None, ENVIRONMENT="prod"))
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
