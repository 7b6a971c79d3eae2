# This file turns service calls into the `{is_ok}` answers used by update and delete routes.
# Domain failures become `is_ok: false` with HTTP 200 and a warning in the log.
# Anything that is not an `APIError` still reaches the global 500 handler.

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from cleo.api.error_handlers import APIError

logger = logging.getLogger(__name__)


def status_of(action: str, operation: Callable[..., Any], /, **kwargs: Any) -> dict[str, bool]:
    """Run `operation(**kwargs)` and report whether it succeeded."""

    try:
        operation(**kwargs)
    except APIError as exc:
        logger.warning("%s refused: %s (%s)", action, exc.message, exc.error_code)
        return {"is_ok": False}
    return {"is_ok": True}
