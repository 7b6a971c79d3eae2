# This file defines API token issue and revoke routes under `/token`.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from cleo.api.dependencies import get_token_service
from cleo.api.schemas.common import StatusResponse
from cleo.api.schemas.key_schemas import ApiTokenResponseV1, TokenCreatePayload, TokenDeletePayload
from cleo.api.services.token_service import TokenService
from cleo.api.status_response import status_of

router = APIRouter(prefix="/token", tags=["tokens"])
TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]


@router.post("/create", response_model=ApiTokenResponseV1)
def create_token(payload: TokenCreatePayload, service: TokenServiceDep) -> dict[str, object]:
    return service.create_token(username=payload.username, password=payload.password)


@router.post("/delete", response_model=StatusResponse)
def delete_token(payload: TokenDeletePayload, service: TokenServiceDep) -> dict[str, bool]:
    return status_of(
        "Revoke API token",
        service.delete_token,
        token=payload.token,
        username=payload.username,
        password=payload.password,
    )
