# This file defines the sign-up key routes under `/keys`; all of them are administrator-only.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from cleo.api.dependencies import get_key_service
from cleo.api.schemas.common import StatusResponse, TokenPayload
from cleo.api.schemas.key_schemas import (
    KeyCreatePayload,
    KeyDeletePayload,
    KeyListResponseV1,
    UserKeyV1,
)
from cleo.api.services.key_service import KeyService
from cleo.api.status_response import status_of

router = APIRouter(prefix="/keys", tags=["keys"])
KeyServiceDep = Annotated[KeyService, Depends(get_key_service)]


@router.post("/create", response_model=UserKeyV1)
def create_key(payload: KeyCreatePayload, service: KeyServiceDep) -> dict[str, object]:
    return service.create_key(
        api_token=payload.api_token,
        key_type=payload.key_type,
        username=payload.username,
    )


@router.post("/delete", response_model=StatusResponse)
def delete_key(payload: KeyDeletePayload, service: KeyServiceDep) -> dict[str, bool]:
    return status_of("Delete key", service.delete_key, api_token=payload.api_token, key_id=payload.key_id)


@router.post("/all", response_model=KeyListResponseV1)
def list_keys(payload: TokenPayload, service: KeyServiceDep) -> dict[str, object]:
    return {"keys": service.list_keys(api_token=payload.api_token)}
