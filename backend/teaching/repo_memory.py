"""
In-memory repository for tests and offline development.

Mirrors the Postgres repository semantics: integer ids from a counter, a
unique email index, and owner-scoped update/delete.
"""
from __future__ import annotations

from dataclasses import replace
from itertools import count
from typing import Any, Dict, List, Mapping, Optional

from .domain import Course, User
from .ports import EmailTaken


class InMemoryCourseRepo:
    def __init__(self) -> None:
        self.users: Dict[int, User] = {}
        self.courses: Dict[int, Course] = {}
        self._user_ids = count(1)
        self._course_ids = count(1)

    # --- Users ------------------------------------------------------------------
    def list_users(self) -> List[User]:
        return list(self.users.values())

    def find_user_by_email(self, email_address: str) -> Optional[User]:
        for user in self.users.values():
            if user.email_address == email_address:
                return user
        return None

    def create_user(self, *, first_name: str, last_name: str, email_address: str, password_hash: str) -> User:
        if self.find_user_by_email(email_address) is not None:
            raise EmailTaken(email_address)
        uid = next(self._user_ids)
        user = User(
            id=uid,
            first_name=first_name,
            last_name=last_name,
            email_address=email_address,
            password=password_hash,
        )
        self.users[uid] = user
        return user

    # --- Courses ----------------------------------------------------------------
    def list_courses(self) -> List[Course]:
        return [replace(c) for c in sorted(self.courses.values(), key=lambda c: c.id)]

    def get_course(self, course_id: int) -> Optional[Course]:
        course = self.courses.get(course_id)
        return replace(course) if course else None

    def create_course(
        self,
        *,
        user_id: int,
        title: str,
        description: str,
        estimated_time: Optional[str],
        materials_needed: Optional[str],
    ) -> Course:
        cid = next(self._course_ids)
        course = Course(
            id=cid,
            user_id=user_id,
            title=title,
            description=description,
            estimated_time=estimated_time,
            materials_needed=materials_needed,
        )
        self.courses[cid] = course
        return replace(course)

    def update_course_owned(self, course_id: int, owner_id: int, changes: Mapping[str, Any]) -> Optional[Course]:
        course = self.courses.get(course_id)
        if not course or course.user_id != owner_id:
            return None
        updated = replace(course, **dict(changes))
        self.courses[course_id] = updated
        return replace(updated)

    def delete_course_owned(self, course_id: int, owner_id: int) -> bool:
        course = self.courses.get(course_id)
        if not course or course.user_id != owner_id:
            return False
        del self.courses[course_id]
        return True


__all__ = ["InMemoryCourseRepo"]
