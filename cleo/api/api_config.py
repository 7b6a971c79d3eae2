# This file defines runtime settings for the HTTP layer in one place.
# The loader reads environment variables and applies defaults suitable for local development.
# Instance data (admin account, SMTP relay, file directory) lives in `cleo.common.settings`.

from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Cleo Content API"
    host: str = "0.0.0.0"
    port: int = 8000
    environment: str = "local"
    app_version: str = "0.1.0"
    allowed_origins: list[str] = Field(default_factory=lambda: ["*"])
    max_upload_bytes: int = 50 * 1024 * 1024
    enable_metrics: bool = True
    bootstrap_on_startup: bool = True

    @field_validator("port", "max_upload_bytes")
    @classmethod
    def validate_positive_ints(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Value must be greater than 0.")
        return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "y", "on"}:
        return True
    if value in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"{name} must be boolean-like, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_list(name: str, default: list[str] | None = None) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default or [])
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Load API configuration from `.env` and process environment."""

    if load_env:
        load_dotenv()

    config_values: dict[str, object] = {
        "api_name": os.getenv("CLEO_API_NAME", "Cleo Content API"),
        "host": os.getenv("CLEO_HOST", "0.0.0.0"),
        "port": _env_int("CLEO_PORT", 8000),
        "environment": os.getenv("ENV", "local"),
        "app_version": os.getenv("APP_VERSION", "0.1.0"),
        "allowed_origins": _env_list("CLEO_ALLOWED_ORIGINS", ["*"]),
        "max_upload_bytes": _env_int("CLEO_MAX_UPLOAD_BYTES", 50 * 1024 * 1024),
        "enable_metrics": _env_bool("CLEO_ENABLE_METRICS", True),
        "bootstrap_on_startup": _env_bool("CLEO_BOOTSTRAP_ON_STARTUP", True),
    }
    return ApiConfig.model_validate(config_values)


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()
