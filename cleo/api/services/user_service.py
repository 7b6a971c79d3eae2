# This file implements account management for the `/user` routes.
# Sign-up consumes an administrator-issued key bound to the requested username.
# Deleting an account removes everything the user owns, stored file bytes included.

from __future__ import annotations

import logging
from typing import Any

from cleo.api.db_access import DatabaseClient, Statement
from cleo.api.error_handlers import APIError
from cleo.api.file_store import FileStore
from cleo.api.services.key_service import get_key_by_value
from cleo.api.services.lookups import (
    authenticate,
    get_user_by_id,
    get_user_by_username,
    public_user,
    user_from_token,
)
from cleo.common.security import (
    ADMIN_KEY_LENGTH,
    NORMAL_KEY_LENGTH,
    hash_password,
    hash_string,
    time_stamp,
)

logger = logging.getLogger(__name__)

# Profile fields a user may change directly with `{api_token, new_value}`.
PROFILE_COLUMNS: dict[str, str] = {
    "name": "display_name",
    "picture": "pfp_url",
}


def _invalid_signup() -> APIError:
    return APIError(
        status_code=400,
        error_code="INVALID_KEY",
        message="Could not create account with the provided information.",
    )


def _username_taken(username: str) -> APIError:
    return APIError(
        status_code=409,
        error_code="USERNAME_TAKEN",
        message=f'The username "{username}" is already taken.',
    )


class UserService:
    """Sign-up, profile edits and account deletion."""

    def __init__(self, *, db: DatabaseClient, file_store: FileStore) -> None:
        self.db = db
        self.file_store = file_store

    def create_user(
        self,
        *,
        username: str,
        display_name: str,
        password: str,
        email_addr: str,
        pfp_url: str,
        user_key: str,
    ) -> dict[str, Any]:
        key_row = get_key_by_value(self.db, user_key)
        if key_row is None or key_row["key_used"] or key_row["username"] != username:
            raise _invalid_signup()
        if len(user_key) == ADMIN_KEY_LENGTH:
            is_admin = True
        elif len(user_key) == NORMAL_KEY_LENGTH:
            is_admin = False
        else:
            raise _invalid_signup()
        if get_user_by_username(self.db, username) is not None:
            raise _username_taken(username)

        user_id = hash_string(f"{time_stamp()}{username}")
        self.db.execute_batch(
            [
                (
                    """
                    INSERT INTO cleo_users
                        (user_id, display_name, is_verified, username, pwd, email_addr, pfp_url, is_admin)
                    VALUES
                        (:user_id, :display_name, :is_verified, :username, :pwd, :email_addr, :pfp_url, :is_admin)
                    """,
                    {
                        "user_id": user_id,
                        "display_name": display_name,
                        "is_verified": False,
                        "username": username,
                        "pwd": hash_password(password),
                        "email_addr": email_addr,
                        "pfp_url": pfp_url,
                        "is_admin": is_admin,
                    },
                ),
                (
                    "UPDATE user_keys SET key_used = :key_used WHERE key_id = :key_id",
                    {"key_used": True, "key_id": key_row["key_id"]},
                ),
            ]
        )
        logger.info("Created %s account %s", "admin" if is_admin else "normal", username)
        return self._public_user_by_id(user_id)

    def undo_signup(self, *, user_id: str, user_key: str) -> None:
        """Remove a just-created account and hand its key back, e.g. when verification mail bounced."""

        statements = self._purge_statements(user_id)
        statements.append(
            (
                "UPDATE user_keys SET key_used = :key_used WHERE user_key = :user_key",
                {"key_used": False, "user_key": user_key},
            )
        )
        self.db.execute_batch(statements)
        logger.warning("Rolled back sign-up of user %s", user_id)

    def get_user_for_token(self, *, api_token: str) -> dict[str, Any]:
        return public_user(user_from_token(self.db, api_token))

    def update_username(self, *, api_token: str, new_username: str) -> None:
        user = user_from_token(self.db, api_token)
        existing = get_user_by_username(self.db, new_username)
        if existing is not None and existing["user_id"] != user["user_id"]:
            raise _username_taken(new_username)
        self._set_column(user["user_id"], "username", new_username)

    def update_profile_field(self, *, api_token: str, field: str, new_value: str) -> None:
        column = PROFILE_COLUMNS.get(field)
        if column is None:
            raise ValueError(f"Unsupported profile field: {field!r}")
        user = user_from_token(self.db, api_token)
        self._set_column(user["user_id"], column, new_value)

    def update_password(self, *, api_token: str, new_password: str) -> None:
        user = user_from_token(self.db, api_token)
        self._set_column(user["user_id"], "pwd", hash_password(new_password))

    def update_email(self, *, api_token: str, new_email: str, keep_etoken_id: str) -> None:
        """Store a new address, mark it unverified and drop every link except `keep_etoken_id`."""

        user = user_from_token(self.db, api_token)
        self.db.execute_batch(
            [
                (
                    "UPDATE cleo_users SET email_addr = :email_addr, is_verified = :verified WHERE user_id = :user_id",
                    {"email_addr": new_email, "verified": False, "user_id": user["user_id"]},
                ),
                (
                    "DELETE FROM email_tokens WHERE user_id = :user_id AND etoken_id <> :keep_etoken_id",
                    {"user_id": user["user_id"], "keep_etoken_id": keep_etoken_id},
                ),
            ]
        )

    def delete_user(self, *, username: str, password: str) -> None:
        user = authenticate(self.db, username, password)
        file_paths = [
            row["file_path"]
            for row in self.db.fetch_all(
                "SELECT file_path FROM user_files WHERE user_id = :user_id",
                {"user_id": user["user_id"]},
            )
        ]
        self.db.execute_batch(self._purge_statements(user["user_id"]))
        for file_path in file_paths:
            self.file_store.remove(file_path)
        logger.info("Deleted account %s and %d stored file(s)", username, len(file_paths))

    def _purge_statements(self, user_id: str) -> list[Statement]:
        params = {"user_id": user_id}
        return [
            (
                """
                DELETE FROM extra_content_fields
                WHERE content_id IN (SELECT content_id FROM user_posts WHERE user_id = :user_id)
                """,
                params,
            ),
            ("DELETE FROM user_posts WHERE user_id = :user_id", params),
            ("DELETE FROM user_api_tokens WHERE user_id = :user_id", params),
            ("DELETE FROM email_tokens WHERE user_id = :user_id", params),
            ("DELETE FROM user_files WHERE user_id = :user_id", params),
            ("DELETE FROM user_keys WHERE user_id = :user_id", params),
            ("DELETE FROM cleo_users WHERE user_id = :user_id", params),
        ]

    def _set_column(self, user_id: str, column: str, value: str) -> None:
        # `column` always comes from this module, never from a request.
        self.db.execute(
            f"UPDATE cleo_users SET {column} = :value WHERE user_id = :user_id",
            {"value": value, "user_id": user_id},
        )

    def _public_user_by_id(self, user_id: str) -> dict[str, Any]:
        user = get_user_by_id(self.db, user_id)
        if user is None:
            raise APIError(
                status_code=500,
                error_code="USER_NOT_PERSISTED",
                message="The account could not be read back after creation.",
            )
        return public_user(user)
