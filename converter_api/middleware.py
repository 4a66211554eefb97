from __future__ import annotations

import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

MAX_REQUEST_ID_LENGTH = 128


def _request_id(scope: Scope) -> str | None:
    value = Headers(scope=scope).get("x-request-id", "").strip()
    if value and len(value) <= MAX_REQUEST_ID_LENGTH and value.isprintable():
        return value
    return None


class RequestIDMiddleware:
    """
    Tag every HTTP request with a trace id.

    The id is the caller's X-Request-ID when it is usable, a fresh uuid4
    otherwise. Handlers read it from scope["trace_id"]; clients get it back
    in the X-Trace-Id response header.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        trace_id = _request_id(scope) or str(uuid.uuid4())
        scope["trace_id"] = trace_id

        async def send_with_trace_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append("X-Trace-Id", trace_id)
            await send(message)

        await self.app(scope, receive, send_with_trace_id)
