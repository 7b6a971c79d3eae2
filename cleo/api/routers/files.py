# This file defines the upload, delete and serve routes under `/files`.
# Uploads are multipart forms (`file`, `name`, `api_token`) read up to the configured cap.
# Serving is public: anyone holding a file URL can fetch the bytes.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse

from cleo.api.api_config import ApiConfig
from cleo.api.dependencies import get_config, get_file_service
from cleo.api.error_handlers import APIError
from cleo.api.schemas.common import StatusResponse
from cleo.api.schemas.file_schemas import FileDeletePayload, UploadedFileV1
from cleo.api.services.file_service import FileService
from cleo.api.status_response import status_of

router = APIRouter(prefix="/files", tags=["files"])
FileServiceDep = Annotated[FileService, Depends(get_file_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


@router.post("/create", response_model=UploadedFileV1)
async def create_file(
    service: FileServiceDep,
    config: ConfigDep,
    file: UploadFile = File(...),
    name: str = Form(...),
    api_token: str = Form(...),
) -> dict[str, object]:
    content = await file.read(config.max_upload_bytes + 1)
    await file.close()
    if len(content) > config.max_upload_bytes:
        raise APIError(
            status_code=413,
            error_code="FILE_TOO_LARGE",
            message=f"Uploads are limited to {config.max_upload_bytes} bytes.",
        )
    return await run_in_threadpool(
        service.create_file,
        api_token=api_token,
        name=name,
        content=content,
    )


@router.post("/delete", response_model=StatusResponse)
def delete_file(payload: FileDeletePayload, service: FileServiceDep) -> dict[str, bool]:
    return status_of(
        "Delete file",
        service.delete_file,
        api_token=payload.api_token,
        file_id=payload.file_id,
    )


@router.get("/serve/{filename}")
def serve_file(filename: str, service: FileServiceDep) -> FileResponse:
    path = service.resolve_for_serving(file_name=filename)
    return FileResponse(path)
