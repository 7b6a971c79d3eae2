# This file defines request and response models for posts, pages and their extra fields.
# `content_type` accepts `page` or `post` in any letter case and is stored lower-case.

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from cleo.api.schemas.common import TokenPayload

CONTENT_TYPES = ("page", "post")


class ExtraFieldV1(BaseModel):
    field_id: str
    content_id: str
    field_key: str
    field_value: str


class PostV1(BaseModel):
    content_id: str
    user_id: str
    content_type: Literal["page", "post"]
    content_text: str


class PostWithFieldsV1(PostV1):
    extra_fields: list[ExtraFieldV1] = Field(default_factory=list)


class PostListResponseV1(BaseModel):
    posts: list[PostWithFieldsV1]


class PostCreatePayload(TokenPayload):
    content_type: str
    content_text: str

    @field_validator("content_type")
    @classmethod
    def normalize_content_type(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in CONTENT_TYPES:
            raise ValueError(f"content_type must be one of {', '.join(CONTENT_TYPES)}")
        return normalized


class PostUpdatePayload(TokenPayload):
    content_id: str
    text: str


class PostDeletePayload(TokenPayload):
    content_id: str


class FieldCreatePayload(TokenPayload):
    content_id: str
    field_key: str
    field_value: str


class FieldEditPayload(TokenPayload):
    content_id: str
    field_id: str
    new_value: str


class FieldDeletePayload(TokenPayload):
    content_id: str
    field_id: str
