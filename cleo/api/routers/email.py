# This file defines the email verification link target `GET /email/{token}`.
# The link is opened from a mail client, so the token travels in the path.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from cleo.api.dependencies import get_email_service
from cleo.api.schemas.common import StatusResponse
from cleo.api.services.email_service import EmailService

router = APIRouter(prefix="/email", tags=["email"])
EmailServiceDep = Annotated[EmailService, Depends(get_email_service)]


@router.get("/{token}", response_model=StatusResponse)
def verify_email(token: str, service: EmailServiceDep) -> dict[str, bool]:
    service.verify_email_token(email_token=token)
    return {"is_ok": True}
