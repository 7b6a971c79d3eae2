# This file provides shared helpers for API endpoint tests.
# Each test gets its own bootstrapped in-memory SQLite database and a recording mailer,
# wired into the app through dependency overrides.
# The context object wraps the multi-step flows (login, key issue, sign-up) tests repeat.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fastapi.testclient import TestClient

from cleo.api.api_config import ApiConfig
from cleo.api.app import app
from cleo.api.bootstrap import bootstrap_instance
from cleo.api.db_access import DatabaseClient
from cleo.api.dependencies import get_config, get_database_client, get_mailer
from cleo.common.settings import Settings

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin-password"
HOSTNAME = "https://cms.test"


def build_test_config(*, max_upload_bytes: int = 1024) -> ApiConfig:
    """Create deterministic API config for tests."""

    return ApiConfig(
        api_name="Test Cleo API",
        host="0.0.0.0",
        port=8000,
        environment="test",
        app_version="0.1.0",
        allowed_origins=[],
        max_upload_bytes=max_upload_bytes,
        enable_metrics=True,
        bootstrap_on_startup=False,
    )


def build_test_settings(*, file_dir: Path) -> Settings:
    return Settings(
        ENV="test",
        CLEO_DATABASE_URL="sqlite:///:memory:",
        CLEO_HOSTNAME=HOSTNAME,
        CLEO_INSTANCE_NAME="Test Cleo",
        CLEO_SMTP_SERVER="smtp.cms.test",
        CLEO_SMTP_USERNAME="noreply@cms.test",
        CLEO_SMTP_PASS="smtp-secret",
        CLEO_ADMIN_USERNAME=ADMIN_USERNAME,
        CLEO_ADMIN_EMAIL="admin@cms.test",
        CLEO_ADMIN_PASSWORD=ADMIN_PASSWORD,
        CLEO_FILE_DIR=str(file_dir),
    )


def build_test_database(settings: Settings) -> DatabaseClient:
    db = DatabaseClient(database_url=settings.CLEO_DATABASE_URL)
    bootstrap_instance(db, settings)
    return db


class FakeMailer:
    """Records outgoing mail instead of talking to an SMTP relay."""

    def __init__(self, *, deliver: bool = True) -> None:
        self.deliver = deliver
        self.sent: list[dict[str, Any]] = []

    async def send(self, **message: Any) -> bool:
        self.sent.append(message)
        return self.deliver

    def last_link_token(self) -> str:
        return self.sent[-1]["body"].rsplit("/", 1)[-1]


class FakeDBClient:
    """Simple fake DB dependency for readiness endpoint tests."""

    def __init__(self, *, connected: bool = True, existing_tables: set[str] | None = None) -> None:
        self._connected = connected
        self._tables = existing_tables or set()

    def can_connect(self) -> bool:
        return self._connected

    def table_exists(self, table_name: str) -> bool:
        return self._connected and table_name in self._tables


@dataclass
class CleoTestContext:
    client: TestClient
    db: Any
    mailer: FakeMailer
    settings: Settings | None

    def login(self, username: str = ADMIN_USERNAME, password: str = ADMIN_PASSWORD) -> str:
        response = self.client.post("/token/create", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return response.json()["token"]

    def issue_key(self, admin_token: str, *, username: str, key_type: str = "normal") -> dict[str, Any]:
        response = self.client.post(
            "/keys/create",
            json={"api_token": admin_token, "key_type": key_type, "username": username},
        )
        assert response.status_code == 200, response.text
        return response.json()

    def sign_up(
        self,
        username: str,
        *,
        password: str = "user-password",
        key_type: str = "normal",
        email_addr: str | None = None,
    ) -> dict[str, Any]:
        key = self.issue_key(self.login(), username=username, key_type=key_type)
        response = self.client.post(
            "/user/create",
            json={
                "username": username,
                "display_name": username.title(),
                "password": password,
                "email_addr": email_addr or f"{username}@mail.test",
                "pfp_url": "",
                "user_key": key["user_key"],
            },
        )
        assert response.status_code == 200, response.text
        return response.json()

    def sign_up_and_login(self, username: str, *, password: str = "user-password") -> str:
        self.sign_up(username, password=password)
        return self.login(username, password)

    def create_post(self, api_token: str, *, text: str = "Hello from Cleo", content_type: str = "post") -> dict[str, Any]:
        response = self.client.post(
            "/posts/create",
            json={"api_token": api_token, "content_type": content_type, "content_text": text},
        )
        assert response.status_code == 200, response.text
        return response.json()


@contextmanager
def api_test_client(
    *,
    tmp_path: Path,
    config: ApiConfig | None = None,
    mailer: FakeMailer | None = None,
    db_client: Any | None = None,
) -> Iterator[CleoTestContext]:
    """Yield a TestClient bound to a fresh database with scoped dependency overrides."""

    resolved_config = config or build_test_config()
    resolved_mailer = mailer or FakeMailer()
    settings: Settings | None = None
    if db_client is None:
        settings = build_test_settings(file_dir=tmp_path / "files")
        db_client = build_test_database(settings)

    app.dependency_overrides[get_config] = lambda: resolved_config
    app.dependency_overrides[get_database_client] = lambda: db_client
    app.dependency_overrides[get_mailer] = lambda: resolved_mailer

    try:
        with TestClient(app) as client:
            yield CleoTestContext(client=client, db=db_client, mailer=resolved_mailer, settings=settings)
    finally:
        app.dependency_overrides.clear()
