"""
Terminal error responder: renders every failure as `{"error": {"message": ...}}`.

Behavior:
    - `ApiError` → its own status and message (str or list of str)
    - 404/405 from routing → 404 "Route doesn't exist"
    - other Starlette HTTP errors → their status and detail
    - request validation errors → 400 with one message per problem
    - anything else → 500 "an error has occurred", rendered by the access-log
      middleware through `unhandled_error_response`
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.teaching.errors import ApiError, AuthenticationError, Message

from . import config

logger = logging.getLogger("coursebook.web")

DEFAULT_ERROR_MESSAGE = "an error has occurred"
ROUTE_NOT_FOUND = "Route doesn't exist"


def error_response(message: Message, status_code: int, headers: Mapping[str, str] | None = None) -> JSONResponse:
    return JSONResponse({"error": {"message": message}}, status_code=status_code, headers=dict(headers or {}))


def validation_messages(errors: Iterable[Mapping[str, Any]]) -> List[str]:
    """Flatten pydantic error dicts into "field: message" strings."""
    out: List[str] = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        msg = str(err.get("msg", "invalid value"))
        out.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return out


async def _api_error(request: Request, exc: ApiError) -> JSONResponse:
    if isinstance(exc, AuthenticationError):
        return error_response(exc.message, exc.status_code, {"WWW-Authenticate": "Basic"})
    return error_response(exc.message, exc.status_code)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code in (404, 405):
        return error_response(ROUTE_NOT_FOUND, 404)
    detail = exc.detail if isinstance(exc.detail, str) and exc.detail else DEFAULT_ERROR_MESSAGE
    return error_response(detail, exc.status_code, getattr(exc, "headers", None))


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(validation_messages(exc.errors()), 400)


def unhandled_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected error and render the generic 500 envelope."""
    if config.global_error_logging_enabled():
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    else:
        logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc.__class__.__name__)
    return error_response(DEFAULT_ERROR_MESSAGE, 500)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)


__all__ = [
    "DEFAULT_ERROR_MESSAGE",
    "ROUTE_NOT_FOUND",
    "error_response",
    "install_error_handlers",
    "unhandled_error_response",
    "validation_messages",
]
