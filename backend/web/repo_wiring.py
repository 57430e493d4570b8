"""
Repository wiring shared by the users and courses routers.

Why:
    Routes need one repository instance. Prefer the Postgres repository when a
    DSN is configured and fall back to the in-memory one for local offline
    work. Tests call `set_repo` to swap the implementation for isolation.
"""
from __future__ import annotations

import logging

from backend.teaching.ports import CourseRepoProtocol
from backend.teaching.repo_memory import InMemoryCourseRepo

from . import config

logger = logging.getLogger("coursebook.web")

_REPO: CourseRepoProtocol | None = None


def build_default_repo() -> CourseRepoProtocol:
    """Return the configured repository; never raises for a missing DSN."""
    if config.store_backend() == "memory":
        if not config.database_url():
            logger.warning("No database DSN configured; using in-memory store")
        return InMemoryCourseRepo()
    from backend.teaching.repo_db import DBCourseRepo

    return DBCourseRepo(config.database_url())


def get_repo() -> CourseRepoProtocol:
    global _REPO
    if _REPO is None:
        _REPO = build_default_repo()
    return _REPO


def set_repo(repo: CourseRepoProtocol | None) -> None:
    """Allow tests to swap the repository; None rebuilds on next access."""
    global _REPO
    _REPO = repo


__all__ = ["build_default_repo", "get_repo", "set_repo"]
