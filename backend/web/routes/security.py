"""
Shared request helpers for the users and courses routers.

Contains the basic-auth dependency and JSON body decoding used by both
adapters. Keeping a single implementation avoids security drift.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Optional

from fastapi import Request

from backend.identity_access.basic_auth import authenticate, read_credentials
from backend.identity_access.domain import AuthenticatedUser
from backend.web.repo_wiring import get_repo


async def current_user(request: Request) -> AuthenticatedUser:
    """FastAPI dependency: resolve basic-auth credentials or raise 401.

    Behavior:
        Raises `AuthenticationError` (rendered as 401 "Access Denied") when the
        header is missing/malformed, the email is unknown or the password is wrong.
    """
    credentials = read_credentials(request)
    return authenticate(get_repo(), credentials)


async def read_json_object(request: Request) -> Optional[Dict[str, Any]]:
    """Decode the request body as a JSON object.

    Returns:
        - `{}` for an empty body
        - the decoded dict for a JSON object
        - None for malformed JSON or any non-object JSON value
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


__all__ = ["current_user", "read_json_object"]
