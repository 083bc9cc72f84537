"""Library settings loaded from the environment."""

import os
from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env"), env_file_encoding="utf-8", extra="ignore"
    )

    # App
    APP_NAME: str = "graphstream"
    ENVIRONMENT: str = "development"  # development | production | test

    # Logging
    # When unset the level follows ENVIRONMENT (DEBUG in development, else INFO)
    LOG_LEVEL: str | None = None
    LOG_STREAM_EVENTS: bool = False

    # Stream decoding
    DECODE_STRATEGY: Literal["pattern", "scan"] = "pattern"

    # Progress state
    FINISHED_STATUS_TEXT: str = "Finished"
    NODE_REGISTRY_PATH: str | None = None

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> str | None:
        """Accept any case for level names and treat blanks as unset."""
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError("LOG_LEVEL must be a string level name")
        s = v.strip().upper()
        if not s:
            return None
        if s not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL: {v!r}")
        return s


@lru_cache
def get_settings() -> Settings:
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env not in {"development", "production", "test"}:
        raise ValueError("ENVIRONMENT must be 'development', 'production', or 'test'")

    if env == "production":
        env_file = ".env.prod"
    elif env == "development":
        env_file = ".env.dev"
    else:
        # test environment - no env file needed, use defaults
        env_file = ""
    # pydantic-settings accepts `_env_file` at runtime; mypy's stub does not.
    return Settings(_env_file=env_file or None)  # type: ignore[call-arg]
