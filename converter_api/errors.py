from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from pseudocode_converter.exceptions import (
    ConfigurationError,
    ConverterError,
    UnsupportedLanguageError,
)

if TYPE_CHECKING:
    from fastapi import FastAPI, Request


log = logging.getLogger("converter_api.errors")

HTTP_422 = 422

# status -> (error, code) for HTTPExceptions raised by routing
_HTTP_ERRORS: dict[int, tuple[str, str]] = {
    status.HTTP_404_NOT_FOUND: ("Not Found", "ERR_NOT_FOUND"),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("Method Not Allowed", "ERR_METHOD_NOT_ALLOWED"),
    HTTP_422: ("Validation Error", "ERR_VALIDATION"),
}


def error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    error: str,
    details: Any | None,
    endpoint: str,
    request_id: str | None,
) -> JSONResponse:
    """Canonical error body shared by every handler."""
    body: dict[str, Any] = {
        "status": status_code,
        "code": code,
        "message": message,
        "error": error,
        "details": details,
        "endpoint": endpoint,
        "requestId": request_id,
    }
    return JSONResponse(status_code=status_code, content=body)


def _trace_id_from_request(request: Request) -> str:
    # Prefer the middleware-assigned trace_id in scope
    trace_id = request.scope.get("trace_id")
    if isinstance(trace_id, str) and trace_id:
        return trace_id
    return request.headers.get("X-Request-ID") or ""


def _respond(
    request: Request,
    *,
    status_code: int,
    code: str,
    error: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    trace_id = _trace_id_from_request(request)
    log.warning(
        "%s on %s %s",
        code,
        request.method,
        request.url.path,
        extra={
            "trace_id": trace_id,
            "path": request.url.path,
            "method": request.method,
            "status": status_code,
        },
    )
    return error_response(
        status_code=status_code,
        code=code,
        message=message,
        error=error,
        details=details,
        endpoint=f"{request.method} {request.url.path}",
        request_id=trace_id or None,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register API exception handlers.

    Converter errors are request problems (unknown language tag, invalid
    options) and map to 422 with the error's suggestions in the details.
    """
    app.add_exception_handler(ConverterError, converter_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def converter_exception_handler(request: Request, exc: Exception):
    exc_obj = cast("ConverterError", exc)
    if isinstance(exc_obj, UnsupportedLanguageError):
        status_code, code = HTTP_422, "ERR_UNSUPPORTED_LANGUAGE"
    elif isinstance(exc_obj, ConfigurationError):
        status_code, code = HTTP_422, "ERR_CONFIGURATION"
    else:
        status_code, code = status.HTTP_400_BAD_REQUEST, "ERR_CONVERSION"

    data = exc_obj.to_dict()
    return _respond(
        request,
        status_code=status_code,
        code=code,
        error=data["error"],
        message=exc_obj.message,
        details={"suggestions": data["suggestions"], **data["metadata"]},
    )


def http_exception_handler(request: Request, exc: Exception):
    exc_obj = cast("StarletteHTTPException", exc)
    status_code = exc_obj.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
    if status_code in _HTTP_ERRORS:
        error, code = _HTTP_ERRORS[status_code]
    elif status_code < 500:
        error, code = "HTTP Error", "ERR_HTTP"
    else:
        error, code = "Internal Error", "ERR_INTERNAL"

    return _respond(request, status_code=status_code, code=code, error=error, message=str(exc_obj.detail))


def request_validation_exception_handler(request: Request, exc: Exception):
    details = [
        {
            "loc": [str(part) for part in e.get("loc", ())],
            "msg": str(e.get("msg", "")),
            "type": str(e.get("type", "")),
        }
        for e in cast("RequestValidationError", exc).errors()
    ]
    return _respond(
        request,
        status_code=HTTP_422,
        code="ERR_VALIDATION",
        error="Validation Error",
        message="One or more validation errors occurred.",
        details=details,
    )


def unhandled_exception_handler(request: Request, exc: Exception):
    log.error(
        "Unhandled exception on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
        extra={"trace_id": _trace_id_from_request(request), "path": request.url.path},
    )
    return error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="ERR_INTERNAL",
        message="An unexpected error occurred.",
        error="Internal Error",
        details=None,
        endpoint=f"{request.method} {request.url.path}",
        request_id=_trace_id_from_request(request) or None,
    )
