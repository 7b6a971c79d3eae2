"""Uvicorn entrypoint: `python -m cleo.api.main`."""

from __future__ import annotations

import uvicorn

from cleo.api.api_config import get_api_config
from cleo.common.logging import configure_logging


def main() -> None:
    configure_logging()
    config = get_api_config()
    uvicorn.run("cleo.api.app:app", host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
