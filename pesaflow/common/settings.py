"""
Application settings loaded from environment variables.
It centralizes cross-cutting concerns like settings and logging used by the view engine and scripts.
Engine tuning (page sizes, currency) lives in `view_engine.engine_config`; this module only holds
process-level values every entrypoint needs.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Final

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

REQUIRED_ENV_VARS: Final[tuple[str, ...]] = (
    "PROJECT_NAME",
    "ENV",
    "LOG_LEVEL",
)

LOG_LEVELS: Final[frozenset[str]] = frozenset(logging.getLevelNamesMapping())


class Settings(BaseModel):
    """Typed runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    PROJECT_NAME: str
    ENV: str
    LOG_LEVEL: str
    EXPORT_DIR: str = "exports"

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in LOG_LEVELS:
            supported = ", ".join(sorted(LOG_LEVELS))
            raise ValueError(f"LOG_LEVEL must be one of: {supported}")
        return normalized

    @field_validator("EXPORT_DIR")
    @classmethod
    def _non_empty_export_dir(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("EXPORT_DIR cannot be empty")
        return value.strip()

    @property
    def export_path(self) -> Path:
        return Path(self.EXPORT_DIR).expanduser()


def load_settings(*, load_env: bool = True) -> Settings:
    """Load and validate environment settings from `.env` and process environment."""

    if load_env:
        load_dotenv()

    missing = [key for key in REQUIRED_ENV_VARS if not os.getenv(key)]
    if missing:
        missing_values = ", ".join(sorted(missing))
        raise RuntimeError(
            f"Missing required environment variables: {missing_values}. "
            "Populate these values in `.env` before running an export."
        )

    try:
        return Settings.model_validate(dict(os.environ))
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached accessor for application settings."""

    return load_settings()
