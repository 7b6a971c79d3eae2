# This file defines liveness, readiness, and version endpoints for API operations.
# Readiness confirms database connectivity and that every Cleo table exists.

from __future__ import annotations

import subprocess
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from cleo.api.api_config import ApiConfig
from cleo.api.dependencies import DBDep, get_config
from cleo.api.schemas.health_schemas import HealthResponse, ReadinessResponse, VersionResponse
from cleo.common.ddl import SCHEMA_TABLES

router = APIRouter(tags=["health"])
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def _git_commit() -> str | None:
    try:
        completed = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            check=True,
            capture_output=True,
            text=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return completed.stdout.strip() or None


@router.get("/health", response_model=HealthResponse)
def health(request: Request, config: ConfigDep) -> dict[str, object]:
    return {
        "request_id": request.state.request_id,
        "status": "ok",
        "environment": config.environment,
        "service_name": config.api_name,
        "timestamp": _utc_now(),
    }


@router.get("/ready", response_model=ReadinessResponse)
def ready(request: Request, db: DBDep) -> dict[str, object]:
    db_connected = db.can_connect()
    missing_tables = [table for table in SCHEMA_TABLES if not db_connected or not db.table_exists(table)]
    schema_ready = db_connected and not missing_tables
    return {
        "request_id": request.state.request_id,
        "db_connected": db_connected,
        "schema_ready": schema_ready,
        "missing_tables": missing_tables,
        "ready": schema_ready,
        "database": "reachable" if db_connected else "unreachable",
        "timestamp": _utc_now(),
    }


@router.get("/version", response_model=VersionResponse)
def version(request: Request, config: ConfigDep) -> dict[str, object]:
    return {
        "request_id": request.state.request_id,
        "project": config.api_name,
        "version": config.app_version,
        "app_version": config.app_version,
        "git_commit": _git_commit(),
        "timestamp": _utc_now(),
    }
