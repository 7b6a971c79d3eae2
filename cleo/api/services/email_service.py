# This file handles email verification: issuing one-time tokens, mailing the link,
# and consuming a token from `/email/{token}` to mark its user verified.
# Database work is synchronous; `send_verification` hops to the thread pool around it.

from __future__ import annotations

import logging
from typing import Any

from fastapi.concurrency import run_in_threadpool

from cleo.api.db_access import DatabaseClient
from cleo.api.error_handlers import not_found
from cleo.api.services.lookups import get_instance_info
from cleo.common.mailer import Mailer
from cleo.common.security import hash_string, new_identifier, time_stamp

logger = logging.getLogger(__name__)


def verification_message(*, hostname: str, instance_name: str, email_token: str) -> tuple[str, str]:
    """Return the `(subject, body)` of an account verification mail."""

    subject = f"Account verification for {instance_name}"
    body = (
        "Please copy and paste this link into your browser: "
        f"{hostname.rstrip('/')}/email/{email_token}"
    )
    return subject, body


class EmailService:
    def __init__(self, *, db: DatabaseClient, mailer: Mailer) -> None:
        self.db = db
        self.mailer = mailer

    def create_email_token(self, *, user_id: str) -> dict[str, Any]:
        token_row = {
            "etoken_id": new_identifier(user_id),
            "email_token": hash_string(f"{user_id}:{time_stamp()}:{new_identifier()}"),
            "user_id": user_id,
        }
        self.db.execute(
            """
            INSERT INTO email_tokens (etoken_id, email_token, user_id)
            VALUES (:etoken_id, :email_token, :user_id)
            """,
            token_row,
        )
        return token_row

    def verify_email_token(self, *, email_token: str) -> None:
        token_row = self.db.fetch_one(
            "SELECT etoken_id, email_token, user_id FROM email_tokens WHERE email_token = :email_token",
            {"email_token": email_token},
        )
        if token_row is None:
            raise not_found("email token", email_token)
        self.db.execute_batch(
            [
                (
                    "DELETE FROM email_tokens WHERE etoken_id = :etoken_id",
                    {"etoken_id": token_row["etoken_id"]},
                ),
                (
                    "UPDATE cleo_users SET is_verified = :verified WHERE user_id = :user_id",
                    {"verified": True, "user_id": token_row["user_id"]},
                ),
            ]
        )
        logger.info("Verified email for user %s", token_row["user_id"])

    async def send_verification(self, *, user_id: str, email_addr: str) -> dict[str, Any] | None:
        """Issue a token for `user_id` and mail its link to `email_addr`.

        Returns the token row once the mail is delivered, or `None` when the relay refused it.
        The token is removed again whenever the mail does not go out.
        """

        info = await run_in_threadpool(get_instance_info, self.db)
        token_row = await run_in_threadpool(self.create_email_token, user_id=user_id)
        subject, body = verification_message(
            hostname=info["hostname"],
            instance_name=info["instance_name"],
            email_token=token_row["email_token"],
        )
        try:
            delivered = await self.mailer.send(
                server=info["smtp_server"],
                username=info["smtp_username"],
                password=info["smtp_pass"],
                receiver=email_addr,
                subject=subject,
                body=body,
            )
        except Exception:
            await run_in_threadpool(self._discard_token, token_row["etoken_id"])
            raise
        if not delivered:
            await run_in_threadpool(self._discard_token, token_row["etoken_id"])
            return None
        return token_row

    def _discard_token(self, etoken_id: str) -> None:
        self.db.execute("DELETE FROM email_tokens WHERE etoken_id = :etoken_id", {"etoken_id": etoken_id})
