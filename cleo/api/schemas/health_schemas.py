# This file defines response models for liveness, readiness and version endpoints.
# Monitoring relies on these fields staying stable.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    request_id: str
    status: str
    environment: str
    service_name: str
    timestamp: datetime


class ReadinessResponse(BaseModel):
    request_id: str
    db_connected: bool
    schema_ready: bool
    missing_tables: list[str]
    ready: bool
    database: str
    timestamp: datetime


class VersionResponse(BaseModel):
    request_id: str
    project: str
    version: str
    app_version: str
    git_commit: str | None = None
    timestamp: datetime
