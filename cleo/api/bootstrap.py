"""
Instance bootstrap: schema, administrator account and instance information.

Runs at application startup and from tests. Every step checks before it writes,
so running it against an initialised database changes nothing.
"""

from __future__ import annotations

import logging
from typing import Any

from cleo.api.db_access import DatabaseClient
from cleo.api.services.lookups import get_user_by_username
from cleo.common.ddl import apply_schema_ddl
from cleo.common.security import hash_password, hash_string, time_stamp
from cleo.common.settings import Settings

logger = logging.getLogger(__name__)


def ensure_admin(db: DatabaseClient, settings: Settings) -> bool:
    """Create the configured administrator unless that username exists. Returns True on insert."""

    if get_user_by_username(db, settings.CLEO_ADMIN_USERNAME) is not None:
        return False
    db.execute(
        """
        INSERT INTO cleo_users
            (user_id, display_name, is_verified, username, pwd, email_addr, pfp_url, is_admin)
        VALUES
            (:user_id, :display_name, :is_verified, :username, :pwd, :email_addr, :pfp_url, :is_admin)
        """,
        {
            "user_id": hash_string(f"{time_stamp()}{settings.CLEO_ADMIN_USERNAME}"),
            "display_name": settings.CLEO_ADMIN_DISPLAY_NAME,
            "is_verified": True,
            "username": settings.CLEO_ADMIN_USERNAME,
            "pwd": hash_password(settings.CLEO_ADMIN_PASSWORD),
            "email_addr": settings.CLEO_ADMIN_EMAIL,
            "pfp_url": "",
            "is_admin": True,
        },
    )
    logger.info("Created administrator account %s", settings.CLEO_ADMIN_USERNAME)
    return True


def ensure_instance_info(db: DatabaseClient, settings: Settings) -> bool:
    """Write the single instance information row if none exists. Returns True on insert."""

    row_count = db.fetch_scalar("SELECT COUNT(*) FROM instance_info")
    if int(row_count) > 0:
        return False
    db.execute(
        """
        INSERT INTO instance_info
            (instance_id, hostname, instance_name, smtp_server, smtp_username, smtp_pass, file_dir)
        VALUES
            (:instance_id, :hostname, :instance_name, :smtp_server, :smtp_username, :smtp_pass, :file_dir)
        """,
        {
            "instance_id": hash_string(f"{settings.CLEO_HOSTNAME}{settings.CLEO_INSTANCE_NAME}"),
            "hostname": settings.CLEO_HOSTNAME,
            "instance_name": settings.CLEO_INSTANCE_NAME,
            "smtp_server": settings.CLEO_SMTP_SERVER,
            "smtp_username": settings.CLEO_SMTP_USERNAME,
            "smtp_pass": settings.CLEO_SMTP_PASS,
            "file_dir": settings.CLEO_FILE_DIR,
        },
    )
    logger.info("Wrote instance information for %s", settings.CLEO_INSTANCE_NAME)
    return True


def bootstrap_instance(db: DatabaseClient, settings: Settings) -> dict[str, Any]:
    apply_schema_ddl(db.engine)
    return {
        "admin_created": ensure_admin(db, settings),
        "instance_created": ensure_instance_info(db, settings),
    }
