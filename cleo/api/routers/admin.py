# This file defines the administrator routes under `/instance`.
# Listings return users without password hashes; edits answer `{is_ok}`.
# `GET /instance/info` is public so clients can show the instance name before login.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from cleo.api.dependencies import get_admin_service
from cleo.api.schemas.admin_schemas import InstanceInfoResponseV1
from cleo.api.schemas.common import ClearableValuePayload, NewValuePayload, StatusResponse, TokenPayload
from cleo.api.schemas.user_schemas import UserListResponseV1
from cleo.api.services.admin_service import AdminService
from cleo.api.status_response import status_of

router = APIRouter(prefix="/instance", tags=["admin"])
AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]


@router.post("/admins", response_model=UserListResponseV1)
def list_admins(payload: TokenPayload, service: AdminServiceDep) -> dict[str, object]:
    return {"users": service.list_admins(api_token=payload.api_token)}


@router.post("/users", response_model=UserListResponseV1)
def list_users(payload: TokenPayload, service: AdminServiceDep) -> dict[str, object]:
    return {"users": service.list_users(api_token=payload.api_token)}


def _edit(service: AdminService, field: str, payload: ClearableValuePayload) -> dict[str, bool]:
    return status_of(
        f"Edit instance {field}",
        service.edit_instance_field,
        api_token=payload.api_token,
        field=field,
        new_value=payload.new_value,
    )


@router.post("/edit/name", response_model=StatusResponse)
def edit_name(payload: NewValuePayload, service: AdminServiceDep) -> dict[str, bool]:
    return _edit(service, "name", payload)


@router.post("/edit/hostname", response_model=StatusResponse)
def edit_hostname(payload: NewValuePayload, service: AdminServiceDep) -> dict[str, bool]:
    return _edit(service, "hostname", payload)


@router.post("/edit/smtp/server", response_model=StatusResponse)
def edit_smtp_server(payload: NewValuePayload, service: AdminServiceDep) -> dict[str, bool]:
    return _edit(service, "smtp_server", payload)


@router.post("/edit/smtp/username", response_model=StatusResponse)
def edit_smtp_username(payload: NewValuePayload, service: AdminServiceDep) -> dict[str, bool]:
    return _edit(service, "smtp_username", payload)


@router.post("/edit/smtp/pass", response_model=StatusResponse)
def edit_smtp_pass(payload: ClearableValuePayload, service: AdminServiceDep) -> dict[str, bool]:
    return _edit(service, "smtp_pass", payload)


@router.get("/info", response_model=InstanceInfoResponseV1)
def instance_info(service: AdminServiceDep) -> dict[str, str]:
    return service.get_public_info()
