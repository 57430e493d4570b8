"""
One-way salted password hashing.

New hashes use argon2. Legacy bcrypt hashes (users seeded by the previous
Node service) still verify, so existing accounts keep working.
"""
from __future__ import annotations

from passlib.context import CryptContext

_CONTEXT = CryptContext(schemes=["argon2", "bcrypt"], default="argon2", deprecated="auto")


def hash_password(plaintext: str) -> str:
    return _CONTEXT.hash(plaintext)


def verify_password(plaintext: str, stored_hash: str) -> bool:
    """Compare a plaintext password with a stored hash.

    Unknown or malformed hashes count as a mismatch.
    """
    if not stored_hash:
        return False
    try:
        return _CONTEXT.verify(plaintext, stored_hash)
    except ValueError:
        return False


def dummy_verify() -> None:
    """Spend roughly the time of a real verification (unknown-user branch)."""
    _CONTEXT.dummy_verify()


__all__ = ["dummy_verify", "hash_password", "verify_password"]
