# This file implements extra content fields (ECF): free-form key/value pairs attached to a post.
# Ownership follows the post; a field id must also belong to the post named in the request.

from __future__ import annotations

from typing import Any

from cleo.api.db_access import DatabaseClient
from cleo.api.error_handlers import not_found
from cleo.api.services.lookups import user_from_token
from cleo.api.services.post_service import owned_post
from cleo.common.security import new_identifier

FIELD_COLUMNS = "field_id, content_id, field_key, field_value"


class ExtraContentFieldService:
    """Create, edit and delete extra fields on a user's posts."""

    def __init__(self, *, db: DatabaseClient) -> None:
        self.db = db

    def create_field(
        self,
        *,
        api_token: str,
        content_id: str,
        field_key: str,
        field_value: str,
    ) -> dict[str, Any]:
        user = user_from_token(self.db, api_token)
        owned_post(self.db, user=user, content_id=content_id)
        field_id = new_identifier(content_id, field_key)
        self.db.execute(
            """
            INSERT INTO extra_content_fields (field_id, content_id, field_key, field_value)
            VALUES (:field_id, :content_id, :field_key, :field_value)
            """,
            {
                "field_id": field_id,
                "content_id": content_id,
                "field_key": field_key,
                "field_value": field_value,
            },
        )
        return self._field_in_post(field_id=field_id, content_id=content_id)

    def edit_field_key(self, *, api_token: str, content_id: str, field_id: str, new_value: str) -> None:
        self._owned_field(api_token=api_token, content_id=content_id, field_id=field_id)
        self.db.execute(
            "UPDATE extra_content_fields SET field_key = :new_value WHERE field_id = :field_id",
            {"new_value": new_value, "field_id": field_id},
        )

    def edit_field_value(self, *, api_token: str, content_id: str, field_id: str, new_value: str) -> None:
        self._owned_field(api_token=api_token, content_id=content_id, field_id=field_id)
        self.db.execute(
            "UPDATE extra_content_fields SET field_value = :new_value WHERE field_id = :field_id",
            {"new_value": new_value, "field_id": field_id},
        )

    def delete_field(self, *, api_token: str, content_id: str, field_id: str) -> None:
        self._owned_field(api_token=api_token, content_id=content_id, field_id=field_id)
        self.db.execute(
            "DELETE FROM extra_content_fields WHERE field_id = :field_id",
            {"field_id": field_id},
        )

    def _owned_field(self, *, api_token: str, content_id: str, field_id: str) -> dict[str, Any]:
        user = user_from_token(self.db, api_token)
        owned_post(self.db, user=user, content_id=content_id)
        return self._field_in_post(field_id=field_id, content_id=content_id)

    def _field_in_post(self, *, field_id: str, content_id: str) -> dict[str, Any]:
        field = self.db.fetch_one(
            f"""
            SELECT {FIELD_COLUMNS}
            FROM extra_content_fields
            WHERE field_id = :field_id AND content_id = :content_id
            """,
            {"field_id": field_id, "content_id": content_id},
        )
        if field is None:
            raise not_found("extra content field", field_id)
        return field
