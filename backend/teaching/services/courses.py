"""Courses service layer (Clean Architecture boundary).

Why:
    Encapsulates course use cases (list/get/create/update/delete) and the
    ownership check so that web adapters stay framework-free and the rules can
    be unit-tested independently of FastAPI.

Errors:
    - Unknown course on read → NotFoundError "No such course exists"
    - Unknown course on owner-only routes → NotFoundError "no such course exists"
    - Caller is not the owner → AuthorizationError (403)
    Both NotFound cases answer 400 for compatibility with existing clients.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from backend.identity_access.domain import AuthenticatedUser
from backend.teaching.domain import Course
from backend.teaching.errors import AuthorizationError, NotFoundError, ValidationError
from backend.teaching.ports import CourseRepoProtocol

logger = logging.getLogger("coursebook.teaching.courses")

COURSE_NOT_FOUND = "No such course exists"
OWNED_COURSE_NOT_FOUND = "no such course exists"
NOT_OWNER = "this user doesn't have permission to access this route"
UPDATE_DATA_MISSING = "update data is missing"


def parse_course_id(raw: object) -> Optional[int]:
    """Return a positive integer id, or None for anything else."""
    try:
        value = int(str(raw))
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


class CoursesService:
    def __init__(self, repo: CourseRepoProtocol) -> None:
        self._repo = repo

    def list_courses(self) -> List[Course]:
        return self._repo.list_courses()

    def get_course(self, raw_id: object) -> Course:
        course_id = parse_course_id(raw_id)
        course = self._repo.get_course(course_id) if course_id else None
        if course is None:
            raise NotFoundError(COURSE_NOT_FOUND)
        return course

    def require_owner(self, user: AuthenticatedUser, raw_id: object) -> Course:
        """Ownership check: the course must exist and belong to `user`."""
        course_id = parse_course_id(raw_id)
        course = self._repo.get_course(course_id) if course_id else None
        if course is None:
            raise NotFoundError(OWNED_COURSE_NOT_FOUND)
        if course.user_id != user.id:
            logger.info("User %s denied access to course %s", user.id, course.id)
            raise AuthorizationError(NOT_OWNER)
        return course

    def create_course(
        self,
        user: AuthenticatedUser,
        *,
        title: str,
        description: str,
        estimated_time: Optional[str] = None,
        materials_needed: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> Course:
        """Create a course; owner defaults to the caller when `user_id` is omitted.

        An explicit `user_id` is stored as given (existing client behavior).
        """
        owner_id = user.id if user_id is None else user_id
        if owner_id != user.id:
            logger.warning("User %s created a course on behalf of user %s", user.id, owner_id)
        return self._repo.create_course(
            user_id=owner_id,
            title=title,
            description=description,
            estimated_time=estimated_time,
            materials_needed=materials_needed,
        )

    def apply_update(self, user: AuthenticatedUser, course: Course, changes: Mapping[str, Any]) -> Course:
        """Write `changes` (Course attribute names) to a course that passed `require_owner`."""
        if not changes:
            raise ValidationError(UPDATE_DATA_MISSING)
        updated = self._repo.update_course_owned(course.id, user.id, changes)
        if updated is None:
            # Deleted or re-owned between the ownership check and the write.
            raise NotFoundError(COURSE_NOT_FOUND)
        return updated

    def delete_course(self, user: AuthenticatedUser, raw_id: object) -> None:
        course = self.require_owner(user, raw_id)
        if not self._repo.delete_course_owned(course.id, user.id):
            raise NotFoundError(COURSE_NOT_FOUND)
        logger.info("Course %s deleted by user %s", course.id, user.id)


__all__ = [
    "COURSE_NOT_FOUND",
    "CoursesService",
    "NOT_OWNER",
    "OWNED_COURSE_NOT_FOUND",
    "UPDATE_DATA_MISSING",
    "parse_course_id",
]
