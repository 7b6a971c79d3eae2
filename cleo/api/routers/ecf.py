# This file defines the extra content field routes under `/ecf`.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from cleo.api.dependencies import get_ecf_service
from cleo.api.schemas.common import StatusResponse
from cleo.api.schemas.post_schemas import (
    ExtraFieldV1,
    FieldCreatePayload,
    FieldDeletePayload,
    FieldEditPayload,
)
from cleo.api.services.ecf_service import ExtraContentFieldService
from cleo.api.status_response import status_of

router = APIRouter(prefix="/ecf", tags=["ecf"])
EcfServiceDep = Annotated[ExtraContentFieldService, Depends(get_ecf_service)]


@router.post("/create", response_model=ExtraFieldV1)
def create_field(payload: FieldCreatePayload, service: EcfServiceDep) -> dict[str, object]:
    return service.create_field(
        api_token=payload.api_token,
        content_id=payload.content_id,
        field_key=payload.field_key,
        field_value=payload.field_value,
    )


@router.post("/delete", response_model=StatusResponse)
def delete_field(payload: FieldDeletePayload, service: EcfServiceDep) -> dict[str, bool]:
    return status_of(
        "Delete extra field",
        service.delete_field,
        api_token=payload.api_token,
        content_id=payload.content_id,
        field_id=payload.field_id,
    )


@router.post("/edit/key", response_model=StatusResponse)
def edit_field_key(payload: FieldEditPayload, service: EcfServiceDep) -> dict[str, bool]:
    return status_of(
        "Edit extra field key",
        service.edit_field_key,
        api_token=payload.api_token,
        content_id=payload.content_id,
        field_id=payload.field_id,
        new_value=payload.new_value,
    )


@router.post("/edit/value", response_model=StatusResponse)
def edit_field_value(payload: FieldEditPayload, service: EcfServiceDep) -> dict[str, bool]:
    return status_of(
        "Edit extra field value",
        service.edit_field_value,
        api_token=payload.api_token,
        content_id=payload.content_id,
        field_id=payload.field_id,
        new_value=payload.new_value,
    )
