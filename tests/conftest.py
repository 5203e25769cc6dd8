"""Shared pytest fixtures for the DotDensity test suite.

Provides:
- settings: Settings isolated from any local .env file
- generator: DotGenerator built on those settings
- restore_logging: undoes configure_logging() after a test
"""

import logging

import pytest
import structlog

from dotdensity.config.settings import Settings
from dotdensity.engine.generator import DotGenerator


@pytest.fixture
def settings() -> Settings:
    """Default settings, ignoring .env."""
    return Settings(_env_file=None)


@pytest.fixture
def generator(settings: Settings) -> DotGenerator:
    """Dot generator with default tuning."""
    return DotGenerator(settings)


@pytest.fixture
def restore_logging():
    """Put root handlers, root level and structlog config back after a test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()
