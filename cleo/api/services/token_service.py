# This file issues and revokes API tokens for the `/token` routes.
# Both operations authenticate with username and password; a token can only be revoked by its owner.

from __future__ import annotations

import logging
from typing import Any

from cleo.api.db_access import DatabaseClient
from cleo.api.error_handlers import invalid_token, not_owner
from cleo.api.services.lookups import authenticate, get_token_row
from cleo.common.security import new_identifier

logger = logging.getLogger(__name__)


class TokenService:
    def __init__(self, *, db: DatabaseClient) -> None:
        self.db = db

    def create_token(self, *, username: str, password: str) -> dict[str, Any]:
        user = authenticate(self.db, username, password)
        token_id = new_identifier(user["username"])
        token = new_identifier(user["user_id"])
        self.db.execute(
            """
            INSERT INTO user_api_tokens (token_id, user_id, token)
            VALUES (:token_id, :user_id, :token)
            """,
            {"token_id": token_id, "user_id": user["user_id"], "token": token},
        )
        logger.info("Issued API token %s for %s", token_id, user["username"])
        return {"token_id": token_id, "token": token}

    def delete_token(self, *, token: str, username: str, password: str) -> None:
        user = authenticate(self.db, username, password)
        token_row = get_token_row(self.db, token)
        if token_row is None:
            raise invalid_token()
        if token_row["user_id"] != user["user_id"]:
            raise not_owner("API token")
        self.db.execute(
            "DELETE FROM user_api_tokens WHERE token_id = :token_id",
            {"token_id": token_row["token_id"]},
        )
        logger.info("Revoked API token %s for %s", token_row["token_id"], user["username"])
