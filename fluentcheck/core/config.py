"""Runtime configuration using Pydantic Settings.

Configuration is loaded from environment variables prefixed with
``FLUENTCHECK_``. Optionally, point ``ENV_FILE`` at a local env file.
"""

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    fluentcheck settings with type validation.

    The active environment picks the entry of an environment-keyed base url
    mapping (see ``Suite.base``).
    """

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE") or None, env_prefix="FLUENTCHECK_", extra="ignore"
    )

    # Environment used to resolve environment-keyed base urls
    environment: str = "dev"

    # Logging
    log_level: str = "INFO"
    structured_logs: bool = True

    # Fetching
    http_timeout: float = Field(default=30.0, gt=0)
    verify_ssl: bool = True
    user_agent: str = "fluentcheck"

    # Scenarios created by a suite wait for an explicit execute() by default
    defer_execution: bool = False

    @field_validator("environment", mode="before")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        """Normalize the environment name to lowercase without padding."""
        if not isinstance(v, str) or not v.strip():
            raise ValueError("environment must be a non-empty string")
        return v.strip().lower()

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log_level is a standard logging level name."""
        level = str(v).strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {list(_LOG_LEVELS)}, got '{v}'")
        return level


settings = Settings()
