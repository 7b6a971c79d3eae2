# This file defines models for sign-up keys and API tokens.

from __future__ import annotations

from pydantic import BaseModel, Field

from cleo.api.schemas.common import CredentialsPayload, TokenPayload


class UserKeyV1(BaseModel):
    key_id: str
    key_type: str
    user_key: str
    key_used: bool
    username: str


class KeyListResponseV1(BaseModel):
    keys: list[UserKeyV1]


class KeyCreatePayload(TokenPayload):
    key_type: str
    username: str = Field(min_length=1)


class KeyDeletePayload(TokenPayload):
    key_id: str


class ApiTokenResponseV1(BaseModel):
    token_id: str
    token: str


class TokenCreatePayload(CredentialsPayload):
    pass


class TokenDeletePayload(CredentialsPayload):
    token: str = Field(min_length=1)
