"""
Instance settings loaded from environment variables.
These values seed the administrator account, the instance information row and the
database connection. HTTP runtime knobs live in `cleo.api.api_config`.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Final

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

REQUIRED_ENV_VARS: Final[tuple[str, ...]] = (
    "CLEO_DATABASE_URL",
    "CLEO_HOSTNAME",
    "CLEO_INSTANCE_NAME",
    "CLEO_SMTP_SERVER",
    "CLEO_SMTP_USERNAME",
    "CLEO_SMTP_PASS",
    "CLEO_ADMIN_USERNAME",
    "CLEO_ADMIN_EMAIL",
    "CLEO_ADMIN_PASSWORD",
    "CLEO_FILE_DIR",
)


class Settings(BaseModel):
    """Typed instance configuration."""

    model_config = ConfigDict(extra="ignore")

    ENV: str = "local"
    LOG_LEVEL: str = "INFO"
    CLEO_DATABASE_URL: str
    CLEO_HOSTNAME: str
    CLEO_INSTANCE_NAME: str
    CLEO_SMTP_SERVER: str
    CLEO_SMTP_PORT: int = 587
    CLEO_SMTP_USERNAME: str
    CLEO_SMTP_PASS: str
    CLEO_SMTP_USE_TLS: bool = True
    CLEO_SMTP_TIMEOUT_SECONDS: float = 30.0
    CLEO_ADMIN_USERNAME: str
    CLEO_ADMIN_EMAIL: str
    CLEO_ADMIN_PASSWORD: str
    CLEO_ADMIN_DISPLAY_NAME: str = ""
    CLEO_FILE_DIR: str

    @model_validator(mode="after")
    def default_display_name(self) -> Settings:
        if not self.CLEO_ADMIN_DISPLAY_NAME:
            self.CLEO_ADMIN_DISPLAY_NAME = self.CLEO_ADMIN_USERNAME
        return self


def load_settings(*, load_env: bool = True) -> Settings:
    """Load and validate instance settings from `.env` and process environment."""

    if load_env:
        load_dotenv()

    missing = [key for key in REQUIRED_ENV_VARS if not os.getenv(key)]
    if missing:
        missing_values = ", ".join(sorted(missing))
        raise RuntimeError(
            f"Missing required environment variables: {missing_values}. "
            "Populate these values in `.env` before starting the application."
        )

    try:
        return Settings.model_validate(dict(os.environ))
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached accessor for instance settings."""

    return load_settings()
