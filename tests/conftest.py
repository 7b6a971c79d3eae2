"""
Shared test configuration.
Environment defaults are set at import time because `cleo.api.app` builds its app on import.
These tests are executed by `pytest` locally and in CI and should remain deterministic.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

TEST_ENV_DEFAULTS = {
    "ENV": "test",
    "LOG_LEVEL": "INFO",
    "CLEO_DATABASE_URL": "sqlite:///:memory:",
    "CLEO_HOSTNAME": "https://cms.test",
    "CLEO_INSTANCE_NAME": "Test Cleo",
    "CLEO_SMTP_SERVER": "smtp.cms.test",
    "CLEO_SMTP_USERNAME": "noreply@cms.test",
    "CLEO_SMTP_PASS": "smtp-secret",
    "CLEO_ADMIN_USERNAME": "admin",
    "CLEO_ADMIN_EMAIL": "admin@cms.test",
    "CLEO_ADMIN_PASSWORD": "admin-password",
    "CLEO_FILE_DIR": str(ROOT_DIR / ".pytest-files"),
    "CLEO_BOOTSTRAP_ON_STARTUP": "false",
}

for _key, _value in TEST_ENV_DEFAULTS.items():
    os.environ.setdefault(_key, _value)


@pytest.fixture(autouse=True)
def base_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Restore required environment variables a previous test may have removed."""

    for key, value in TEST_ENV_DEFAULTS.items():
        if os.getenv(key) is None:
            monkeypatch.setenv(key, value)
