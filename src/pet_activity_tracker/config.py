"""
Pet Activity Tracker settings.

Loaded from environment variables prefixed with ``PET_TRACKER_``.
"""

import logging
from functools import lru_cache
from typing import List, Union

import structlog
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="PET_TRACKER_", env_file=".env", extra="ignore", validate_default=True
    )

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # CORS - comma-separated string or list
    CORS_ORIGINS: Union[str, List[str]] = "http://localhost:3000,https://petfit.vercel.app"

    CHAT_HISTORY_LIMIT: int = 50
    REMINDER_HOUR: int = 18
    LOG_LEVEL: str = "INFO"

    @field_validator("LOG_LEVEL")
    @classmethod
    def check_log_level(cls, v):
        """Accept standard logging level names in any case."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through a level filter."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
    )
