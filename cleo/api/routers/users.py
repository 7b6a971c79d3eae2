# This file defines account routes under `/user`.
# Sign-up and email changes send a verification mail, so those two handlers are async and
# push their database work to the thread pool. A sign-up whose mail cannot be delivered is
# rolled back and its key released.

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from cleo.api.dependencies import get_email_service, get_user_service
from cleo.api.error_handlers import APIError
from cleo.api.schemas.common import ClearableValuePayload, NewValuePayload, StatusResponse
from cleo.api.schemas.user_schemas import CreatedUserResponseV1, UserCreatePayload, UserDeletePayload
from cleo.api.services.email_service import EmailService
from cleo.api.services.user_service import UserService
from cleo.api.status_response import status_of

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["users"])
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
EmailServiceDep = Annotated[EmailService, Depends(get_email_service)]


def _delivery_failed(address: str) -> APIError:
    return APIError(
        status_code=502,
        error_code="EMAIL_DELIVERY_FAILED",
        message=f"Could not deliver the verification mail to {address}.",
    )


@router.post("/create", response_model=CreatedUserResponseV1)
async def create_user(
    payload: UserCreatePayload,
    users: UserServiceDep,
    email: EmailServiceDep,
) -> dict[str, object]:
    user = await run_in_threadpool(
        users.create_user,
        username=payload.username,
        display_name=payload.display_name,
        password=payload.password,
        email_addr=payload.email_addr,
        pfp_url=payload.pfp_url,
        user_key=payload.user_key,
    )
    try:
        token_row = await email.send_verification(user_id=user["user_id"], email_addr=payload.email_addr)
    except Exception:
        await run_in_threadpool(users.undo_signup, user_id=user["user_id"], user_key=payload.user_key)
        raise
    if token_row is None:
        await run_in_threadpool(users.undo_signup, user_id=user["user_id"], user_key=payload.user_key)
        raise _delivery_failed(payload.email_addr)
    return {**user, "key_status_updated": True}


@router.post("/delete", response_model=StatusResponse)
def delete_user(payload: UserDeletePayload, users: UserServiceDep) -> dict[str, bool]:
    return status_of("Delete account", users.delete_user, username=payload.username, password=payload.password)


@router.post("/update/password", response_model=StatusResponse)
def update_password(payload: NewValuePayload, users: UserServiceDep) -> dict[str, bool]:
    return status_of(
        "Update password",
        users.update_password,
        api_token=payload.api_token,
        new_password=payload.new_value,
    )


@router.post("/update/picture", response_model=StatusResponse)
def update_picture(payload: ClearableValuePayload, users: UserServiceDep) -> dict[str, bool]:
    return status_of(
        "Update picture",
        users.update_profile_field,
        api_token=payload.api_token,
        field="picture",
        new_value=payload.new_value,
    )


@router.post("/update/email", response_model=StatusResponse)
async def update_email(
    payload: NewValuePayload,
    users: UserServiceDep,
    email: EmailServiceDep,
) -> dict[str, bool]:
    user = await run_in_threadpool(users.get_user_for_token, api_token=payload.api_token)
    token_row = await email.send_verification(user_id=user["user_id"], email_addr=payload.new_value)
    if token_row is None:
        raise _delivery_failed(payload.new_value)
    await run_in_threadpool(
        users.update_email,
        api_token=payload.api_token,
        new_email=payload.new_value,
        keep_etoken_id=token_row["etoken_id"],
    )
    logger.info("User %s changed email address", user["username"])
    return {"is_ok": True}


@router.post("/update/name", response_model=StatusResponse)
def update_name(payload: NewValuePayload, users: UserServiceDep) -> dict[str, bool]:
    return status_of(
        "Update display name",
        users.update_profile_field,
        api_token=payload.api_token,
        field="name",
        new_value=payload.new_value,
    )


@router.post("/update/username", response_model=StatusResponse)
def update_username(payload: NewValuePayload, users: UserServiceDep) -> dict[str, bool]:
    return status_of(
        "Update username",
        users.update_username,
        api_token=payload.api_token,
        new_username=payload.new_value,
    )
