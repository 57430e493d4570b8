"""
Records stored by the repositories.

Why:
    Both repository implementations (Postgres and in-memory) hand these plain
    dataclasses to the services so the web layer never sees driver rows.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class User:
    id: int
    first_name: str
    last_name: str
    email_address: str
    password: str  # hash, never serialized


@dataclass
class Course:
    id: int
    user_id: int
    title: str
    description: str
    estimated_time: Optional[str] = None
    materials_needed: Optional[str] = None


def serialize_course(course: Course) -> Dict[str, Any]:
    return {
        "id": course.id,
        "userId": course.user_id,
        "title": course.title,
        "description": course.description,
        "estimatedTime": course.estimated_time,
        "materialsNeeded": course.materials_needed,
    }


__all__ = ["Course", "User", "serialize_course"]
