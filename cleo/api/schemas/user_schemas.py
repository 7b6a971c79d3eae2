# This file defines request and response models for the `/user` routes.
# `UserV1` is also the user shape returned by the administrator listings.

from __future__ import annotations

from pydantic import BaseModel, Field

from cleo.api.schemas.common import CredentialsPayload


class UserV1(BaseModel):
    user_id: str
    display_name: str
    is_verified: bool
    username: str
    email_addr: str
    pfp_url: str
    is_admin: bool


class UserListResponseV1(BaseModel):
    users: list[UserV1]


class CreatedUserResponseV1(UserV1):
    key_status_updated: bool


class UserCreatePayload(BaseModel):
    username: str = Field(min_length=1)
    display_name: str
    password: str = Field(min_length=1)
    email_addr: str = Field(min_length=3)
    pfp_url: str = ""
    user_key: str = Field(min_length=1)


class UserDeletePayload(CredentialsPayload):
    pass
