from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pseudocode_converter import __version__

from .errors import register_exception_handlers
from .logging_config import RequestResponseLoggerMiddleware, setup_logging
from .middleware import RequestIDMiddleware
from .routes import convert_router, system_router
from .settings import Settings

log = logging.getLogger("converter_api.app")


def _get_docs_urls(settings: Settings) -> tuple[str | None, str | None, str | None]:
    """
    Return the URL paths for the OpenAPI schema, Swagger UI and Redoc.

    Documentation is only served in dev with OpenAPI exposure enabled.
    """
    if settings.is_dev and settings.expose_openapi_in_dev:
        return "/openapi.json", "/docs", "/redoc"
    return None, None, None


def _configure_cors(fastapi_app: FastAPI, settings: Settings) -> None:
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID", "X-Trace-Id"],
        expose_headers=["X-Trace-Id"],
        allow_credentials=False,
        max_age=600,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application with:
    - Strict CORS
    - Request IDs and structured request logging
    - Unified error handlers
    - Conditional OpenAPI/docs exposure in dev
    """
    settings = settings or Settings()

    setup_logging(settings)
    log.info("Starting converter API", extra={"env": settings.environment, "port": settings.port})

    openapi_url, docs_url, redoc_url = _get_docs_urls(settings)

    fastapi_app = FastAPI(
        title="Pseudocode Converter API",
        version=__version__,
        openapi_url=openapi_url,
        docs_url=docs_url,
        redoc_url=redoc_url,
    )
    fastapi_app.state.settings = settings

    register_exception_handlers(fastapi_app)
    _configure_cors(fastapi_app, settings)

    # RequestID is added last so it is outermost and stamps trace_id first
    fastapi_app.add_middleware(RequestResponseLoggerMiddleware)
    fastapi_app.add_middleware(RequestIDMiddleware)

    fastapi_app.include_router(system_router)
    fastapi_app.include_router(convert_router)

    return fastapi_app


# ASGI application instance for servers (e.g., `uvicorn converter_api.app:app`)
app: FastAPI = create_app()
