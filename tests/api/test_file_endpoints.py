# This file tests file upload, listing, serving and deletion.
# Uploaded bytes land in the instance file directory and are served back by file name.

from __future__ import annotations

from pathlib import Path

import pytest

from cleo.api.services.file_service import FileService
from tests.api.support import CleoTestContext, api_test_client, build_test_config


def _upload(ctx: CleoTestContext, token: str, name: str, content: bytes = b"hello cleo"):
    return ctx.client.post(
        "/files/create",
        data={"name": name, "api_token": token},
        files={"file": (name, content, "application/octet-stream")},
    )


def test_upload_stores_bytes_and_returns_public_url(tmp_path: Path) -> None:
    with api_test_client(tmp_path=tmp_path) as ctx:
        response = _upload(ctx, ctx.login(), "notes.txt")
        stored = Path(ctx.settings.CLEO_FILE_DIR) / "notes.txt"

    assert response.status_code == 200
    payload = response.json()
    assert payload["file_name"] == "notes.txt"
    assert payload["file_url"] == "https://cms.test/files/serve/notes.txt"
    assert set(payload) == {"file_id", "user_id", "file_name", "file_url"}
    assert stored.read_bytes() == b"hello cleo"


def test_uploaded_file_is_served_by_name(tmp_path: Path) -> None:
    with api_test_client(tmp_path=tmp_path) as ctx:
        _upload(ctx, ctx.login(), "photo.bin", b"\x00\x01binary")
        served = ctx.client.get("/files/serve/photo.bin")
        missing = ctx.client.get("/files/serve/absent.bin")

    assert served.status_code == 200
    assert served.content == b"\x00\x01binary"
    assert missing.status_code == 404


def test_upload_rejects_duplicate_and_unsafe_names(tmp_path: Path) -> None:
    with api_test_client(tmp_path=tmp_path) as ctx:
        token = ctx.login()
        _upload(ctx, token, "dup.txt")
        duplicate = _upload(ctx, token, "dup.txt")
        dotdot = _upload(ctx, token, "..")
        nested = ctx.client.post(
            "/files/create",
            data={"name": "a\\b.txt", "api_token": token},
            files={"file": ("b.txt", b"x", "text/plain")},
        )

    assert duplicate.status_code == 409
    assert duplicate.json()["error_code"] == "FILE_EXISTS"
    assert dotdot.status_code == 400
    assert nested.json()["error_code"] == "INVALID_FILE_NAME"


def test_upload_over_cap_is_refused(tmp_path: Path) -> None:
    config = build_test_config(max_upload_bytes=8)
    with api_test_client(tmp_path=tmp_path, config=config) as ctx:
        response = _upload(ctx, ctx.login(), "big.bin", b"0123456789")
        count = ctx.db.fetch_scalar("SELECT COUNT(*) FROM user_files")

    assert response.status_code == 413
    assert response.json()["error_code"] == "FILE_TOO_LARGE"
    assert count == 0


def test_upload_requires_valid_token(tmp_path: Path) -> None:
    with api_test_client(tmp_path=tmp_path) as ctx:
        response = _upload(ctx, "not-a-token", "x.txt")

    assert response.status_code == 401


def test_file_listing_is_scoped_to_caller(tmp_path: Path) -> None:
    with api_test_client(tmp_path=tmp_path) as ctx:
        admin_token = ctx.login()
        _upload(ctx, admin_token, "b.txt")
        _upload(ctx, admin_token, "a.txt")
        other_token = ctx.sign_up_and_login("uploader")
        _upload(ctx, other_token, "theirs.txt")
        files = ctx.client.post("/files/all", json={"api_token": admin_token}).json()["files"]

    assert [item["file_name"] for item in files] == ["a.txt", "b.txt"]
    assert files[0]["file_url"] == "https://cms.test/files/serve/a.txt"


def test_file_delete_only_by_owner(tmp_path: Path) -> None:
    with api_test_client(tmp_path=tmp_path) as ctx:
        owner_token = ctx.login()
        uploaded = _upload(ctx, owner_token, "keep.txt").json()
        other_token = ctx.sign_up_and_login("thief")
        refused = ctx.client.post("/files/delete", json={"api_token": other_token, "file_id": uploaded["file_id"]})
        still_served = ctx.client.get("/files/serve/keep.txt")
        deleted = ctx.client.post("/files/delete", json={"api_token": owner_token, "file_id": uploaded["file_id"]})
        gone = ctx.client.get("/files/serve/keep.txt")
        stored = Path(ctx.settings.CLEO_FILE_DIR) / "keep.txt"

    assert refused.json() == {"is_ok": False}
    assert still_served.status_code == 200
    assert deleted.json() == {"is_ok": True}
    assert gone.status_code == 404
    assert not stored.exists()


def test_upload_losing_name_race_answers_conflict_and_keeps_first_bytes(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    with api_test_client(tmp_path=tmp_path) as ctx:
        first = _upload(ctx, ctx.login(), "race.txt", b"first upload")
        other_token = ctx.sign_up_and_login("racer")
        # Both uploads pass the name lookup, so only the database constraint can decide.
        monkeypatch.setattr(FileService, "_file_by_name", lambda self, file_name: None)
        second = _upload(ctx, other_token, "race.txt", b"second upload")
        monkeypatch.undo()
        served = ctx.client.get("/files/serve/race.txt")
        rows = ctx.db.fetch_all("SELECT user_id FROM user_files WHERE file_name = 'race.txt'")
        stored_names = sorted(path.name for path in Path(ctx.settings.CLEO_FILE_DIR).iterdir())

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json()["error_code"] == "FILE_EXISTS"
    assert served.content == b"first upload"
    assert [row["user_id"] for row in rows] == [first.json()["user_id"]]
    assert stored_names == ["race.txt"]
