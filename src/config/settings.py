"""Production-core settings loaded from environment variables."""

import logging
from enum import StrEnum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.models.common import DivisionPolicy


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
    """Process-wide defaults loaded from environment variables / .env file.

    Per-run values (dimensions, baseline mask) are not settings; they live
    on ProductionConfig and are passed explicitly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Numerics ---
    DIVISION_POLICY: DivisionPolicy = Field(
        default=DivisionPolicy.PROPAGATE,
        description="Zero-divisor handling for efficiency and baseline divisions.",
    )
    BASELINE_OVERRIDE_SCALE: float = Field(
        default=1.25,
        gt=0,
        description="Multiplier applied to the baseline row for masked stock cells.",
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

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.ENVIRONMENT == Environment.PROD


def get_settings() -> Settings:
    """Factory function so callers and tests can swap settings in one place."""
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Apply LOG_LEVEL to the root logger."""
    logging.basicConfig(
        level=settings.LOG_LEVEL.value,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(settings.LOG_LEVEL.value)
