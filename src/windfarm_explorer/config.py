"""
Application settings.

Values come from environment variables prefixed ``WINDFARM_`` (or a local
``.env`` file), e.g. ``WINDFARM_LOG_LEVEL=DEBUG``.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from windfarm_explorer.reference import OCCURRENCE_KEY_FIELD

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Runtime configuration for fetching and exploring datasets."""

    model_config = SettingsConfigDict(env_prefix="WINDFARM_", env_file=".env", extra="ignore")

    app_name: str = "windfarm-explorer"
    app_env: str = "development"
    debug: bool = False
    log_level: LogLevel = "INFO"

    obis_api_url: str = "https://api.obis.org/v3"
    obis_timeout: float = Field(default=60, gt=0)
    contact: str | None = Field(default=None, description="Sent in the User-Agent")
    page_size: int = Field(default=5000, gt=0, le=10000)
    max_pages: int = Field(default=20, gt=0)

    extension: str = "MeasurementOrFact"
    join_key: str = OCCURRENCE_KEY_FIELD
    regions_path: Path | None = None

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once for CLI use."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
