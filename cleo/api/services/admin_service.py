# This file implements the administrator services behind the `/instance` routes.
# Every operation resolves the caller from the API token and requires `is_admin`.
# Editable instance fields go through an allowlist so column names never come from requests.

from __future__ import annotations

import logging
from typing import Any

from cleo.api.db_access import DatabaseClient
from cleo.api.services.lookups import (
    USER_COLUMNS,
    admin_from_token,
    get_instance_info,
    public_user,
)

logger = logging.getLogger(__name__)

EDITABLE_INSTANCE_FIELDS: dict[str, str] = {
    "name": "instance_name",
    "hostname": "hostname",
    "smtp_server": "smtp_server",
    "smtp_username": "smtp_username",
    "smtp_pass": "smtp_pass",
}


class AdminService:
    """Instance-level reads and edits for administrators."""

    def __init__(self, *, db: DatabaseClient) -> None:
        self.db = db

    def list_admins(self, *, api_token: str) -> list[dict[str, Any]]:
        admin_from_token(self.db, api_token)
        return self._users_with_admin_flag(True)

    def list_users(self, *, api_token: str) -> list[dict[str, Any]]:
        admin_from_token(self.db, api_token)
        return self._users_with_admin_flag(False)

    def edit_instance_field(self, *, api_token: str, field: str, new_value: str) -> None:
        column = EDITABLE_INSTANCE_FIELDS.get(field)
        if column is None:
            raise ValueError(f"Unsupported instance field: {field!r}")

        admin = admin_from_token(self.db, api_token)
        info = get_instance_info(self.db)
        self.db.execute(
            f"UPDATE instance_info SET {column} = :new_value WHERE instance_id = :instance_id",
            {"new_value": new_value, "instance_id": info["instance_id"]},
        )
        logger.info("Administrator %s updated instance field %s", admin["username"], column)

    def get_public_info(self) -> dict[str, str]:
        info = get_instance_info(self.db)
        return {"name": info["instance_name"], "hostname": info["hostname"]}

    def _users_with_admin_flag(self, is_admin: bool) -> list[dict[str, Any]]:
        rows = self.db.fetch_all(
            f"SELECT {USER_COLUMNS} FROM cleo_users WHERE is_admin = :is_admin ORDER BY username ASC",
            {"is_admin": is_admin},
        )
        return [public_user(row) for row in rows]
