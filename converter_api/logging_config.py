from __future__ import annotations

import contextlib
import logging
import os
import sys
import time
from collections.abc import Awaitable, Callable
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, Any

from pythonjsonlogger.json import JsonFormatter
from starlette.types import Message, Receive, Scope, Send

from .metrics_state import inc_counter

if TYPE_CHECKING:
    from .settings import Settings

# Local alias to avoid linter/editor false positives on starlette.types.ASGIApp
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

STRUCTURED_LOG_FIELDS: tuple[str, ...] = (
    "status",
    "route",
    "path",
    "method",
    "trace_id",
    "duration_ms",
    "source",
    "target",
)


class ISOFormatter(JsonFormatter):
    """JSON formatter that outputs ISO8601 timestamp and selected fields."""

    def __init__(self, fields: tuple[str, ...] = STRUCTURED_LOG_FIELDS) -> None:
        super().__init__(fmt="%(message)s")
        self.fields = fields

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        if "ts" not in log_record:
            log_record["ts"] = time.strftime("%Y-%m-%dT%H:%M:%S%z")
        log_record["level"] = str(record.levelname or "INFO").lower()
        log_record["logger"] = record.name

        for field_name in self.fields:
            value = message_dict.get(field_name) or log_record.get(field_name) or getattr(
                record, field_name, None
            )
            if value is not None:
                log_record[field_name] = value

        # Mirror path to route for stability
        if "route" not in log_record and "path" in log_record:
            log_record["route"] = log_record.get("path")


def _clear_existing_handlers(logger: logging.Logger) -> None:
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        with contextlib.suppress(Exception):
            handler.close()


def setup_logging(settings: Settings) -> None:
    """Configure structured JSON logging.

    Sets up:
    - StreamHandler (stderr)
    - RotatingFileHandler (<log_dir>/api.log) when a log directory is set

    Args:
        settings: Application settings
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    formatter = ISOFormatter()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers to avoid duplication
    _clear_existing_handlers(root_logger)

    stream_handler = logging.StreamHandler(stream=sys.stderr)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if settings.log_dir:
        os.makedirs(settings.log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(settings.log_dir, "api.log"),
            maxBytes=1_000_000,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


class RequestResponseLoggerMiddleware:
    """ASGI middleware that logs request/response information."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app
        self.log = logging.getLogger("converter_api.requests")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        start_ns = time.perf_counter_ns()
        status_holder: dict[str, int | None] = {"status": None}

        async def send_wrapper(message: Message) -> None:
            if message.get("type") == "http.response.start":
                status_holder["status"] = int(message.get("status", 0))
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000.0
            status = status_holder["status"] or 0
            inc_counter("requests_total")
            if 400 <= status < 500:
                inc_counter("status_4xx")
            elif status >= 500:
                inc_counter("status_5xx")
            trace_obj = scope.get("trace_id", "")
            self.log.info(
                "request",
                extra={
                    "trace_id": trace_obj if isinstance(trace_obj, str) else "",
                    "path": scope.get("path", ""),
                    "method": scope.get("method", ""),
                    "status": status,
                    "duration_ms": round(duration_ms, 3),
                },
            )
