"""
Error kinds raised by the request pipeline (validation, auth, ownership).

Why:
    Every stage either returns a value or raises one of these. The web layer
    renders them with a single exception handler into the JSON envelope
    `{"error": {"message": ...}}`, so handlers never build error responses.
"""
from __future__ import annotations

from typing import List, Union

Message = Union[str, List[str]]

ACCESS_DENIED = "Access Denied"


class ApiError(Exception):
    """Base error carrying an HTTP status and a public message (str or list)."""

    status_code: int = 500

    def __init__(self, message: Message, *, status_code: int | None = None) -> None:
        super().__init__(message if isinstance(message, str) else "; ".join(message))
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    status_code = 400

    def __init__(self, messages: Message) -> None:
        super().__init__(messages if isinstance(messages, str) else list(messages))


class ConflictError(ApiError):
    status_code = 400


class NotFoundError(ApiError):
    # 400 rather than 404: existing clients depend on it.
    status_code = 400


class AuthorizationError(ApiError):
    status_code = 403


class AuthenticationError(ApiError):
    """401 with a fixed public message; `reason` is for logs only."""

    status_code = 401

    def __init__(self, reason: str) -> None:
        super().__init__(ACCESS_DENIED)
        self.reason = reason


__all__ = [
    "ACCESS_DENIED",
    "ApiError",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "Message",
    "NotFoundError",
    "ValidationError",
]
