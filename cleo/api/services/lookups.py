# This file holds the lookups every service shares: users, tokens and instance information.
# Token and credential checks raise `APIError` so routers never handle raw rows that failed auth.

from __future__ import annotations

from typing import Any

from cleo.api.db_access import DatabaseClient
from cleo.api.error_handlers import APIError, invalid_token, not_admin
from cleo.common.security import verify_password

USER_COLUMNS = "user_id, display_name, is_verified, username, pwd, email_addr, pfp_url, is_admin"
PUBLIC_USER_FIELDS = ("user_id", "display_name", "is_verified", "username", "email_addr", "pfp_url", "is_admin")


def get_user_by_id(db: DatabaseClient, user_id: str) -> dict[str, Any] | None:
    return db.fetch_one(
        f"SELECT {USER_COLUMNS} FROM cleo_users WHERE user_id = :user_id",
        {"user_id": user_id},
    )


def get_user_by_username(db: DatabaseClient, username: str) -> dict[str, Any] | None:
    return db.fetch_one(
        f"SELECT {USER_COLUMNS} FROM cleo_users WHERE username = :username",
        {"username": username},
    )


def get_token_row(db: DatabaseClient, token: str) -> dict[str, Any] | None:
    return db.fetch_one(
        "SELECT token_id, user_id, token FROM user_api_tokens WHERE token = :token",
        {"token": token},
    )


def user_from_token(db: DatabaseClient, api_token: str) -> dict[str, Any]:
    token_row = get_token_row(db, api_token)
    if token_row is None:
        raise invalid_token()
    user = get_user_by_id(db, token_row["user_id"])
    if user is None:
        raise invalid_token()
    return user


def admin_from_token(db: DatabaseClient, api_token: str) -> dict[str, Any]:
    user = user_from_token(db, api_token)
    if not user["is_admin"]:
        raise not_admin()
    return user


def authenticate(db: DatabaseClient, username: str, password: str) -> dict[str, Any]:
    user = get_user_by_username(db, username)
    if user is None or not verify_password(user["pwd"], password):
        raise APIError(
            status_code=401,
            error_code="INVALID_CREDENTIALS",
            message=f'Could not verify password for user with the username "{username}".',
        )
    return user


def public_user(user: dict[str, Any]) -> dict[str, Any]:
    """Strip the password hash and normalise driver-specific booleans."""

    shaped = {field: user[field] for field in PUBLIC_USER_FIELDS}
    shaped["is_verified"] = bool(shaped["is_verified"])
    shaped["is_admin"] = bool(shaped["is_admin"])
    return shaped


def get_instance_info(db: DatabaseClient) -> dict[str, Any]:
    info = db.fetch_one(
        """
        SELECT instance_id, hostname, instance_name, smtp_server, smtp_username, smtp_pass, file_dir
        FROM instance_info
        """
    )
    if info is None:
        raise APIError(
            status_code=503,
            error_code="INSTANCE_NOT_CONFIGURED",
            message="Instance information has not been written yet.",
        )
    return info
