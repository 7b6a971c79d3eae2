# This file defines the listing routes shared by the posts and files categories.
# Both return only what belongs to the user behind the API token.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from cleo.api.dependencies import get_file_service, get_post_service
from cleo.api.schemas.common import TokenPayload
from cleo.api.schemas.file_schemas import FileListResponseV1
from cleo.api.schemas.post_schemas import PostListResponseV1
from cleo.api.services.file_service import FileService
from cleo.api.services.post_service import PostService

router = APIRouter(tags=["general"])
PostServiceDep = Annotated[PostService, Depends(get_post_service)]
FileServiceDep = Annotated[FileService, Depends(get_file_service)]


@router.post("/posts/all", response_model=PostListResponseV1)
def list_posts(payload: TokenPayload, service: PostServiceDep) -> dict[str, object]:
    return {"posts": service.list_posts(api_token=payload.api_token)}


@router.post("/files/all", response_model=FileListResponseV1)
def list_files(payload: TokenPayload, service: FileServiceDep) -> dict[str, object]:
    return {"files": service.list_files(api_token=payload.api_token)}
