"""
Repository port for users and courses.

Keep this small and framework-agnostic so tests can supply simple fakes. Both
`DBCourseRepo` (Postgres) and `InMemoryCourseRepo` implement it.
"""
from __future__ import annotations

from typing import Any, List, Mapping, Optional, Protocol

from .domain import Course, User


class EmailTaken(Exception):
    """Raised by `create_user` when the store rejects a duplicate email."""


class CourseRepoProtocol(Protocol):
    # --- Users -------------------------------------------------------------
    def list_users(self) -> List[User]: ...

    def find_user_by_email(self, email_address: str) -> Optional[User]: ...

    def create_user(self, *, first_name: str, last_name: str, email_address: str, password_hash: str) -> User: ...

    # --- Courses -----------------------------------------------------------
    def list_courses(self) -> List[Course]: ...

    def get_course(self, course_id: int) -> Optional[Course]: ...

    def create_course(
        self,
        *,
        user_id: int,
        title: str,
        description: str,
        estimated_time: Optional[str],
        materials_needed: Optional[str],
    ) -> Course: ...

    def update_course_owned(self, course_id: int, owner_id: int, changes: Mapping[str, Any]) -> Optional[Course]:
        """Apply `changes` (Course attribute names) only if `owner_id` owns the course.

        Returns the updated course, or None when no row matched.
        """
        ...

    def delete_course_owned(self, course_id: int, owner_id: int) -> bool: ...


__all__ = ["CourseRepoProtocol", "EmailTaken"]
