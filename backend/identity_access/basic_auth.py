"""
HTTP basic-auth authentication against the user table.

Why:
    Clients send `Authorization: Basic base64(email:password)` on every call.
    This module resolves those credentials to an `AuthenticatedUser` or raises
    `AuthenticationError`.

Security:
    All failure branches surface the same 401 "Access Denied" to clients so
    callers cannot tell an unknown email from a wrong password. The concrete
    reason is logged for diagnostics only. The unknown-email branch still runs
    a dummy hash verification to keep timing comparable.
"""
from __future__ import annotations

import base64
import logging
from typing import NoReturn, Optional, Protocol

from fastapi import Request
from fastapi.security import HTTPBasicCredentials
from fastapi.security.utils import get_authorization_scheme_param

from backend.teaching.domain import User
from backend.teaching.errors import AuthenticationError

from .domain import AuthenticatedUser
from .passwords import dummy_verify, verify_password

logger = logging.getLogger("coursebook.identity_access")

REASON_MISSING_HEADER = "authentication header is missing"
REASON_UNKNOWN_EMAIL = "no user with this email exists"
REASON_BAD_PASSWORD = "authentication failed"


class UserLookup(Protocol):
    def find_user_by_email(self, email_address: str) -> Optional[User]:
        ...


def parse_basic_header(authorization: Optional[str]) -> Optional[HTTPBasicCredentials]:
    """Decode `Basic base64(user:password)` with UTF-8 credentials.

    Returns None when the header is absent, uses another scheme, is not valid
    base64/UTF-8, or lacks the ':' separator. Passwords may contain ':'.
    """
    scheme, param = get_authorization_scheme_param(authorization)
    if not authorization or scheme.lower() != "basic":
        return None
    try:
        decoded = base64.b64decode(param, validate=True).decode("utf-8")
    except ValueError:
        # binascii.Error and UnicodeDecodeError are both ValueErrors.
        return None
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return HTTPBasicCredentials(username=username, password=password)


def read_credentials(request: Request) -> Optional[HTTPBasicCredentials]:
    """Return decoded basic-auth credentials, or None when absent/malformed."""
    return parse_basic_header(request.headers.get("Authorization"))


def authenticate(repo: UserLookup, credentials: Optional[HTTPBasicCredentials]) -> AuthenticatedUser:
    """Resolve credentials to a user or raise `AuthenticationError`.

    Behavior:
        - No credentials → reason "authentication header is missing"
        - Unknown email (exact, case-sensitive) → "no user with this email exists"
        - Hash mismatch → "authentication failed"
    """
    if credentials is None:
        _deny(REASON_MISSING_HEADER)
    user = repo.find_user_by_email(credentials.username)
    if user is None:
        dummy_verify()
        _deny(REASON_UNKNOWN_EMAIL)
    if not verify_password(credentials.password, user.password):
        _deny(REASON_BAD_PASSWORD)
    return AuthenticatedUser(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email_address=user.email_address,
    )


def _deny(reason: str) -> NoReturn:
    logger.info("Basic auth rejected: %s", reason)
    raise AuthenticationError(reason)


__all__ = [
    "REASON_BAD_PASSWORD",
    "REASON_MISSING_HEADER",
    "REASON_UNKNOWN_EMAIL",
    "UserLookup",
    "authenticate",
    "parse_basic_header",
    "read_credentials",
]
