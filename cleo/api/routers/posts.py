# This file defines the post and page routes under `/posts`.
# The listing route lives in `general` because both categories expose it.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from cleo.api.dependencies import get_post_service
from cleo.api.schemas.common import StatusResponse
from cleo.api.schemas.post_schemas import (
    PostCreatePayload,
    PostDeletePayload,
    PostUpdatePayload,
    PostV1,
)
from cleo.api.services.post_service import PostService
from cleo.api.status_response import status_of

router = APIRouter(prefix="/posts", tags=["posts"])
PostServiceDep = Annotated[PostService, Depends(get_post_service)]


@router.post("/create", response_model=PostV1)
def create_post(payload: PostCreatePayload, service: PostServiceDep) -> dict[str, object]:
    return service.create_post(
        api_token=payload.api_token,
        content_type=payload.content_type,
        content_text=payload.content_text,
    )


@router.post("/update", response_model=StatusResponse)
def update_post(payload: PostUpdatePayload, service: PostServiceDep) -> dict[str, bool]:
    return status_of(
        "Update post",
        service.update_post_text,
        api_token=payload.api_token,
        content_id=payload.content_id,
        text=payload.text,
    )


@router.post("/delete", response_model=StatusResponse)
def delete_post(payload: PostDeletePayload, service: PostServiceDep) -> dict[str, bool]:
    return status_of(
        "Delete post",
        service.delete_post,
        api_token=payload.api_token,
        content_id=payload.content_id,
    )
