"""DotDensity settings loaded from environment variables."""

from enum import StrEnum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dotdensity.models.common import PlacementMethod


class Environment(StrEnum):
    """Deployment environment."""

    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"


class LogLevel(StrEnum):
    """Supported log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Generator-wide settings loaded from environment variables / .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Data preparation ---
    UNITS_PER_DOT: float = Field(
        default=100.0,
        gt=0,
        description="Raw units represented by one dot (e.g. 100 jobs).",
    )

    # --- Placement ---
    DEFAULT_METHOD: PlacementMethod = Field(
        default=PlacementMethod.REGULAR,
        description="Placement strategy used when the caller does not pick one.",
    )
    RANDOM_SEED: int | None = Field(
        default=None,
        description="Base seed for random placement. None = not reproducible.",
    )
    GRID_MAX_REFINEMENTS: int = Field(
        default=64,
        ge=1,
        description="Maximum grid-step shrink passes for regular placement.",
    )
    GRID_MAX_POINTS: int = Field(
        default=10_000_000,
        ge=1,
        description="Most grid candidates regular placement may test in one pass.",
    )
    SAMPLING_MAX_DRAW_FACTOR: float = Field(
        default=100.0,
        ge=1.0,
        description="Draw budget for random placement, as a multiple of expected draws.",
    )
    SAMPLING_BATCH_LIMIT: int = Field(
        default=100_000,
        ge=1,
        description="Largest candidate batch drawn at once by random placement.",
    )

    # --- Batch execution ---
    MAX_WORKERS: int = Field(
        default=1,
        ge=1,
        description="Worker threads for batch runs (1 = sequential).",
    )

    # --- Logging ---
    LOG_LEVEL: LogLevel = Field(
        default=LogLevel.INFO,
        description="Application log level.",
    )

    # --- Environment ---
    ENVIRONMENT: Environment = Field(
        default=Environment.DEV,
        description="Deployment environment (dev/staging/prod).",
    )


def get_settings() -> Settings:
    """Factory function so callers and tests can swap settings."""
    return Settings()
