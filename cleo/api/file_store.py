# This file stores uploaded user files on the local filesystem.
# Names are validated as single path components so uploads cannot escape the storage directory.
# Uploads are written under a hidden staging name first and only take their public name
# once their database row exists.

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from cleo.api.error_handlers import APIError

logger = logging.getLogger(__name__)

_FORBIDDEN_NAMES = {"", ".", ".."}


class FileStore:
    """Reads and writes file bytes below a storage directory."""

    @staticmethod
    def validate_name(name: str) -> str:
        cleaned = name.strip()
        if (
            cleaned in _FORBIDDEN_NAMES
            or "/" in cleaned
            or "\\" in cleaned
            or "\x00" in cleaned
        ):
            raise APIError(
                status_code=400,
                error_code="INVALID_FILE_NAME",
                message=f"{name!r} is not a valid file name.",
            )
        return cleaned

    def path_for(self, directory: str, name: str) -> Path:
        return Path(directory) / self.validate_name(name)

    def stage(self, target: Path, content: bytes) -> Path:
        """Write `content` next to `target` under a unique staging name and return that path."""

        target.parent.mkdir(parents=True, exist_ok=True)
        staged = target.with_name(f".{target.name}.{uuid.uuid4().hex}.part")
        staged.write_bytes(content)
        return staged

    def publish(self, staged: Path, target: Path) -> Path:
        staged.replace(target)
        logger.info("Stored %d bytes at %s", target.stat().st_size, target)
        return target

    def discard(self, staged: Path) -> None:
        staged.unlink(missing_ok=True)

    def remove(self, file_path: str) -> bool:
        path = Path(file_path)
        if not path.is_file():
            logger.warning("Stored file %s was already missing", path)
            return False
        path.unlink()
        return True
