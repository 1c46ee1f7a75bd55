"""Helper for running the TastyPath ASGI application."""

from __future__ import annotations

import os
from typing import Optional

import uvicorn

from tastypath.config import get_settings


def run_server(host: Optional[str] = None, port: Optional[int] = None) -> None:
    settings = get_settings()
    reload_enabled = os.environ.get("RELOAD") == "1"
    uvicorn.run(
        "tastypath.server.app:app",
        host=host or settings.server_host,
        port=port or settings.server_port,
        reload=reload_enabled,
    )


def main() -> None:
    """Entry point for `python -m tastypath.server.run`."""

    run_server()


if __name__ == "__main__":
    main()
