"""
profrate.api.__main__

Entrypoint for `python -m profrate.api`.

A missing PROFRATE_JWT_SECRET fails here, before the server binds.
"""

from __future__ import annotations

import uvicorn

from profrate.api.app import create_app
from profrate.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
