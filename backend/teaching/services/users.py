"""Users service layer: signup with email uniqueness.

Why:
    Keeps the signup rules (hash the password, reject duplicate emails) out of
    the FastAPI adapter so they can be unit-tested against any repository.
"""

from __future__ import annotations

import logging

from backend.identity_access.passwords import hash_password
from backend.teaching.domain import User
from backend.teaching.errors import ConflictError
from backend.teaching.ports import CourseRepoProtocol, EmailTaken

logger = logging.getLogger("coursebook.teaching.users")

EMAIL_TAKEN = "email already taken"


class UsersService:
    def __init__(self, repo: CourseRepoProtocol) -> None:
        self._repo = repo

    def ensure_email_available(self, email_address: str) -> None:
        """Raise `ConflictError` when any stored user already uses this email.

        The store's unique constraint backs this check up for concurrent signups.
        """
        if any(u.email_address == email_address for u in self._repo.list_users()):
            raise ConflictError(EMAIL_TAKEN)

    def register(self, *, first_name: str, last_name: str, email_address: str, password: str) -> User:
        self.ensure_email_available(email_address)
        try:
            user = self._repo.create_user(
                first_name=first_name,
                last_name=last_name,
                email_address=email_address,
                password_hash=hash_password(password),
            )
        except EmailTaken:
            logger.info("Signup lost a race on an existing email")
            raise ConflictError(EMAIL_TAKEN)
        logger.info("User %s registered", user.id)
        return user


__all__ = ["EMAIL_TAKEN", "UsersService"]
