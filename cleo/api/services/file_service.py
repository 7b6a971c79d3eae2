# This file implements user file uploads, listing, deletion and serving for the `/files` routes.
# Bytes live in the instance file directory; the database row keeps the path and public URL.
# File names are unique per instance because `/files/serve/{filename}` addresses files by name.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from urllib.parse import quote

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from cleo.api.db_access import DatabaseClient
from cleo.api.error_handlers import APIError, not_found, not_owner
from cleo.api.file_store import FileStore
from cleo.api.services.lookups import get_instance_info, user_from_token
from cleo.common.security import new_identifier

logger = logging.getLogger(__name__)

FILE_COLUMNS = "file_id, user_id, file_name, file_path, file_url"


def _file_exists(file_name: str) -> APIError:
    return APIError(
        status_code=409,
        error_code="FILE_EXISTS",
        message=f"A file named {file_name!r} already exists.",
    )


def build_file_url(hostname: str, file_name: str) -> str:
    return f"{hostname.rstrip('/')}/files/serve/{quote(file_name, safe='')}"


class FileService:
    """Upload, list, delete and resolve stored files."""

    def __init__(self, *, db: DatabaseClient, file_store: FileStore) -> None:
        self.db = db
        self.file_store = file_store

    def create_file(self, *, api_token: str, name: str, content: bytes) -> dict[str, Any]:
        user = user_from_token(self.db, api_token)
        file_name = self.file_store.validate_name(name)
        if self._file_by_name(file_name) is not None:
            raise _file_exists(file_name)

        info = get_instance_info(self.db)
        target = self.file_store.path_for(info["file_dir"], file_name)
        file_id = new_identifier(user["user_id"], file_name)
        file_url = build_file_url(info["hostname"], file_name)

        # The row claims the name; bytes only replace `target` after the claim succeeded.
        staged = self.file_store.stage(target, content)
        try:
            self.db.execute(
                f"""
                INSERT INTO user_files ({FILE_COLUMNS})
                VALUES (:file_id, :user_id, :file_name, :file_path, :file_url)
                """,
                {
                    "file_id": file_id,
                    "user_id": user["user_id"],
                    "file_name": file_name,
                    "file_path": str(target),
                    "file_url": file_url,
                },
            )
        except IntegrityError as exc:
            self.file_store.discard(staged)
            raise _file_exists(file_name) from exc
        except SQLAlchemyError:
            self.file_store.discard(staged)
            raise

        try:
            self.file_store.publish(staged, target)
        except OSError:
            self.db.execute("DELETE FROM user_files WHERE file_id = :file_id", {"file_id": file_id})
            self.file_store.discard(staged)
            raise
        logger.info("User %s uploaded %s (%d bytes)", user["username"], file_name, len(content))
        return {
            "file_id": file_id,
            "user_id": user["user_id"],
            "file_name": file_name,
            "file_url": file_url,
        }

    def delete_file(self, *, api_token: str, file_id: str) -> None:
        user = user_from_token(self.db, api_token)
        file_row = self.db.fetch_one(
            f"SELECT {FILE_COLUMNS} FROM user_files WHERE file_id = :file_id",
            {"file_id": file_id},
        )
        if file_row is None:
            raise not_found("file", file_id)
        if file_row["user_id"] != user["user_id"]:
            raise not_owner("file")
        self.db.execute("DELETE FROM user_files WHERE file_id = :file_id", {"file_id": file_id})
        self.file_store.remove(file_row["file_path"])

    def list_files(self, *, api_token: str) -> list[dict[str, Any]]:
        user = user_from_token(self.db, api_token)
        return self.db.fetch_all(
            f"SELECT {FILE_COLUMNS} FROM user_files WHERE user_id = :user_id ORDER BY file_name ASC",
            {"user_id": user["user_id"]},
        )

    def resolve_for_serving(self, *, file_name: str) -> Path:
        file_row = self._file_by_name(file_name)
        if file_row is None:
            raise not_found("file", file_name)
        path = Path(file_row["file_path"])
        if not path.is_file():
            logger.error("File %s is recorded at %s but missing on disk", file_name, path)
            raise not_found("file", file_name)
        return path

    def _file_by_name(self, file_name: str) -> dict[str, Any] | None:
        return self.db.fetch_one(
            f"SELECT {FILE_COLUMNS} FROM user_files WHERE file_name = :file_name",
            {"file_name": file_name},
        )
