"""
Identity domain types.

Why:
- The authenticated caller travels through handlers as an explicit, immutable
  value instead of a loosely-typed bag on the request.
- The password hash never leaves the repository layer; this type has no field
  for it.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthenticatedUser:
    id: int
    first_name: str
    last_name: str
    email_address: str


__all__ = ["AuthenticatedUser"]
