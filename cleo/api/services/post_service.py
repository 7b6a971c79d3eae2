# This file implements post and page storage for the `/posts` routes.
# Only the author of a post may change or delete it; deleting a post also drops its extra fields.

from __future__ import annotations

import logging
from typing import Any

from cleo.api.db_access import DatabaseClient
from cleo.api.error_handlers import not_found, not_owner
from cleo.api.services.lookups import user_from_token
from cleo.common.security import new_identifier

logger = logging.getLogger(__name__)

POST_COLUMNS = "content_id, user_id, content_type, content_text"
CONTENT_SNIPPET_LENGTH = 16


def get_post_by_id(db: DatabaseClient, content_id: str) -> dict[str, Any] | None:
    return db.fetch_one(
        f"SELECT {POST_COLUMNS} FROM user_posts WHERE content_id = :content_id",
        {"content_id": content_id},
    )


def owned_post(db: DatabaseClient, *, user: dict[str, Any], content_id: str) -> dict[str, Any]:
    post = get_post_by_id(db, content_id)
    if post is None:
        raise not_found("post", content_id)
    if post["user_id"] != user["user_id"]:
        raise not_owner("post")
    return post


class PostService:
    """Create, edit, delete and list a user's posts and pages."""

    def __init__(self, *, db: DatabaseClient) -> None:
        self.db = db

    def create_post(self, *, api_token: str, content_type: str, content_text: str) -> dict[str, Any]:
        user = user_from_token(self.db, api_token)
        snippet = content_text[:CONTENT_SNIPPET_LENGTH]
        content_id = new_identifier(snippet, user["user_id"])
        self.db.execute(
            """
            INSERT INTO user_posts (content_id, user_id, content_type, content_text)
            VALUES (:content_id, :user_id, :content_type, :content_text)
            """,
            {
                "content_id": content_id,
                "user_id": user["user_id"],
                "content_type": content_type,
                "content_text": content_text,
            },
        )
        logger.info("User %s created %s %s", user["username"], content_type, content_id)
        created = get_post_by_id(self.db, content_id)
        if created is None:
            raise not_found("post", content_id)
        return created

    def update_post_text(self, *, api_token: str, content_id: str, text: str) -> None:
        user = user_from_token(self.db, api_token)
        owned_post(self.db, user=user, content_id=content_id)
        self.db.execute(
            "UPDATE user_posts SET content_text = :text WHERE content_id = :content_id",
            {"text": text, "content_id": content_id},
        )

    def delete_post(self, *, api_token: str, content_id: str) -> None:
        user = user_from_token(self.db, api_token)
        owned_post(self.db, user=user, content_id=content_id)
        params = {"content_id": content_id}
        self.db.execute_batch(
            [
                ("DELETE FROM extra_content_fields WHERE content_id = :content_id", params),
                ("DELETE FROM user_posts WHERE content_id = :content_id", params),
            ]
        )
        logger.info("User %s deleted post %s", user["username"], content_id)

    def list_posts(self, *, api_token: str) -> list[dict[str, Any]]:
        user = user_from_token(self.db, api_token)
        posts = self.db.fetch_all(
            f"SELECT {POST_COLUMNS} FROM user_posts WHERE user_id = :user_id ORDER BY content_id ASC",
            {"user_id": user["user_id"]},
        )
        fields = self.db.fetch_all(
            """
            SELECT f.field_id, f.content_id, f.field_key, f.field_value
            FROM extra_content_fields f
            JOIN user_posts p ON p.content_id = f.content_id
            WHERE p.user_id = :user_id
            ORDER BY f.field_key ASC, f.field_id ASC
            """,
            {"user_id": user["user_id"]},
        )
        fields_by_post: dict[str, list[dict[str, Any]]] = {}
        for field in fields:
            fields_by_post.setdefault(field["content_id"], []).append(field)
        return [{**post, "extra_fields": fields_by_post.get(post["content_id"], [])} for post in posts]
