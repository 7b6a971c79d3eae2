# This file defines models for the `/files` routes.
# Uploads arrive as multipart forms, so only deletion has a JSON request body.

from __future__ import annotations

from pydantic import BaseModel

from cleo.api.schemas.common import TokenPayload


class UploadedFileV1(BaseModel):
    file_id: str
    user_id: str
    file_name: str
    file_url: str


class FileListResponseV1(BaseModel):
    files: list[UploadedFileV1]


class FileDeletePayload(TokenPayload):
    file_id: str
