# This file tests email verification through `GET /email/{token}`.

from __future__ import annotations

from pathlib import Path

from tests.api.support import FakeMailer, api_test_client


def test_verification_link_marks_user_verified_and_is_single_use(tmp_path: Path) -> None:
    mailer = FakeMailer()
    with api_test_client(tmp_path=tmp_path, mailer=mailer) as ctx:
        ctx.sign_up("vera")
        link_token = mailer.last_link_token()
        first = ctx.client.get(f"/email/{link_token}")
        second = ctx.client.get(f"/email/{link_token}")
        users = ctx.client.post("/instance/users", json={"api_token": ctx.login()}).json()["users"]

    assert first.status_code == 200
    assert first.json() == {"is_ok": True}
    assert second.status_code == 404
    assert users[0]["is_verified"] is True


def test_unknown_verification_token_is_not_found(tmp_path: Path) -> None:
    with api_test_client(tmp_path=tmp_path) as ctx:
        response = ctx.client.get("/email/UNKNOWN")

    assert response.status_code == 404
    payload = response.json()
    assert payload["error_code"] == "NOT_FOUND"
    assert payload["request_id"]


def test_verification_link_uses_edited_hostname(tmp_path: Path) -> None:
    mailer = FakeMailer()
    with api_test_client(tmp_path=tmp_path, mailer=mailer) as ctx:
        ctx.client.post(
            "/instance/edit/hostname",
            json={"api_token": ctx.login(), "new_value": "https://new.cms.test/"},
        )
        ctx.sign_up("walt")

    assert "https://new.cms.test/email/" in mailer.sent[-1]["body"]
