"""
Run the converter API with uvicorn

    python -m converter_api

The server listens on 127.0.0.1 only. uvicorn's access log is off because
RequestResponseLoggerMiddleware writes one JSON line per request.
"""

from __future__ import annotations

import logging
import sys

import uvicorn

from .settings import Settings

logger = logging.getLogger(__name__)


def server_config(settings: Settings) -> uvicorn.Config:
    return uvicorn.Config(
        "converter_api.app:create_app",
        factory=True,
        host="127.0.0.1",
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=False,
        use_colors=False,
    )


def main() -> int:
    server = uvicorn.Server(server_config(Settings()))
    try:
        server.run()
    except KeyboardInterrupt:
        return 130
    except OSError as exc:
        logger.error("Cannot start server: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
