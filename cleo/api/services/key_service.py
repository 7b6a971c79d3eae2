# This file manages sign-up keys for the `/keys` routes.
# An administrator issues a key for a named username; the key length decides whether the
# account created with it is an administrator (16 characters) or a normal user (10 characters).

from __future__ import annotations

import logging
from typing import Any

from cleo.api.db_access import DatabaseClient
from cleo.api.error_handlers import APIError, not_found
from cleo.api.services.lookups import admin_from_token
from cleo.common.security import generate_key, key_length_for_type, new_identifier

logger = logging.getLogger(__name__)

KEY_COLUMNS = "key_id, user_id, user_key, key_type, key_used, username"


def _shape_key(row: dict[str, Any]) -> dict[str, Any]:
    return {**row, "key_used": bool(row["key_used"])}


def get_key_by_value(db: DatabaseClient, user_key: str) -> dict[str, Any] | None:
    row = db.fetch_one(
        f"SELECT {KEY_COLUMNS} FROM user_keys WHERE user_key = :user_key",
        {"user_key": user_key},
    )
    return _shape_key(row) if row is not None else None


class KeyService:
    """Issue, revoke and list sign-up keys."""

    def __init__(self, *, db: DatabaseClient) -> None:
        self.db = db

    def create_key(self, *, api_token: str, key_type: str, username: str) -> dict[str, Any]:
        admin = admin_from_token(self.db, api_token)
        try:
            key_length = key_length_for_type(key_type)
        except ValueError as exc:
            raise APIError(status_code=400, error_code="INVALID_KEY_TYPE", message=str(exc)) from exc

        user_key = generate_key(key_length)
        key_id = new_identifier(user_key)
        self.db.execute(
            f"""
            INSERT INTO user_keys ({KEY_COLUMNS})
            VALUES (:key_id, :user_id, :user_key, :key_type, :key_used, :username)
            """,
            {
                "key_id": key_id,
                "user_id": admin["user_id"],
                "user_key": user_key,
                "key_type": key_type,
                "key_used": False,
                "username": username,
            },
        )
        logger.info("Administrator %s issued a %s key for %s", admin["username"], key_type, username)
        created = self.db.fetch_one(
            f"SELECT {KEY_COLUMNS} FROM user_keys WHERE key_id = :key_id",
            {"key_id": key_id},
        )
        if created is None:
            raise not_found("user key", key_id)
        return _shape_key(created)

    def delete_key(self, *, api_token: str, key_id: str) -> None:
        admin_from_token(self.db, api_token)
        deleted = self.db.execute("DELETE FROM user_keys WHERE key_id = :key_id", {"key_id": key_id})
        if deleted == 0:
            raise not_found("user key", key_id)

    def list_keys(self, *, api_token: str) -> list[dict[str, Any]]:
        admin = admin_from_token(self.db, api_token)
        rows = self.db.fetch_all(
            f"SELECT {KEY_COLUMNS} FROM user_keys WHERE user_id = :user_id ORDER BY username ASC, key_id ASC",
            {"user_id": admin["user_id"]},
        )
        return [_shape_key(row) for row in rows]
