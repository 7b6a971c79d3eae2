# This file defines schema pieces reused by several route categories.
# Most mutation routes answer with `StatusResponse`, and most requests carry an `api_token`.
# The error model documents the body every failure returns.

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error_code: str
    message: str
    details: Any | None = None
    request_id: str
    timestamp: datetime


class StatusResponse(BaseModel):
    is_ok: bool


class TokenPayload(BaseModel):
    api_token: str = Field(min_length=1)


class ClearableValuePayload(TokenPayload):
    """Value edit where an empty string clears the setting (profile picture, SMTP password)."""

    new_value: str


class NewValuePayload(ClearableValuePayload):
    new_value: str = Field(min_length=1)


class CredentialsPayload(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status: {"model": ErrorResponse} for status in (400, 401, 403, 404, 409, 413, 422, 502, 503)
}
