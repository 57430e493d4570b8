"""
Courses API routes.

Why:
    Anyone may browse courses; authenticated users create courses, and only a
    course's owner may update or delete it. Persistence is delegated to the
    repository from `repo_wiring`; rules live in `CoursesService`.

Notes:
    - Authentication runs before body validation (dependency order).
    - Owner-only routes check ownership before looking at the body.
    - Unknown courses answer 400, not 404, for compatibility with existing clients.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from backend.identity_access.domain import AuthenticatedUser
from backend.teaching.domain import serialize_course
from backend.teaching.errors import ValidationError
from backend.teaching.services.courses import UPDATE_DATA_MISSING, CoursesService
from backend.teaching.validation import COURSE_RULES, required, validate
from backend.web.errors import validation_messages
from backend.web.repo_wiring import get_repo

from .security import current_user, read_json_object

courses_router = APIRouter(tags=["Courses"])  # explicit paths below
logger = logging.getLogger("coursebook.web.courses")

COURSE_DATA_REQUIRED = "course data required"


# --- Request models ----------------------------------------------------------------

class CourseCreatePayload(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    title: str
    description: str
    estimated_time: Optional[str] = Field(default=None, alias="estimatedTime")
    materials_needed: Optional[str] = Field(default=None, alias="materialsNeeded")
    user_id: Optional[int] = Field(default=None, alias="userId")


class CourseUpdatePayload(BaseModel):
    # Accept raw values (including empty) and check required ones in the handler.
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    title: Optional[str] = None
    description: Optional[str] = None
    estimated_time: Optional[str] = Field(default=None, alias="estimatedTime")
    materials_needed: Optional[str] = Field(default=None, alias="materialsNeeded")
    user_id: Optional[int] = Field(default=None, alias="userId")


# Present-but-empty values for these would violate NOT NULL columns.
_UPDATE_RULES = (required("title"), required("description"), required("userId"))


def _get_courses_service() -> CoursesService:
    return CoursesService(get_repo())


def _parse(model: type[BaseModel], payload: Dict[str, Any]) -> BaseModel:
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(validation_messages(exc.errors()))


def _update_changes(payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Translate an update body into Course attribute changes.

    Raises:
        ValidationError "update data is missing" for a missing/empty body or a
        body without updatable fields; a message list for present-but-empty
        required fields.
    """
    if not payload:
        raise ValidationError(UPDATE_DATA_MISSING)
    problems = [r.message for r in _UPDATE_RULES if r.field in payload and not r.check(payload, r.field)]
    if problems:
        raise ValidationError(problems)
    data = _parse(CourseUpdatePayload, payload)
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError(UPDATE_DATA_MISSING)
    return changes


# --- Routes ------------------------------------------------------------------------

@courses_router.get("/api/courses")
async def list_courses():
    """List all courses with their owner reference (`userId`)."""
    return JSONResponse([serialize_course(c) for c in _get_courses_service().list_courses()])


@courses_router.post("/api/courses")
async def create_course(request: Request, user: AuthenticatedUser = Depends(current_user)):
    """Create a course.

    Behavior:
        - 201 with `Location: /api/courses/{id}` and an empty body
        - 400 with one message per missing field (title, description)
        - 401 without valid credentials

    Ownership:
        Without `userId` the caller becomes the owner; an explicit `userId`
        is stored as given.
    """
    payload = await read_json_object(request)
    if payload is None:
        raise ValidationError(COURSE_DATA_REQUIRED)
    problems = validate(payload, COURSE_RULES)
    if problems:
        raise ValidationError(problems)
    data = _parse(CourseCreatePayload, payload)
    course = _get_courses_service().create_course(
        user,
        title=data.title,
        description=data.description,
        estimated_time=data.estimated_time,
        materials_needed=data.materials_needed,
        user_id=data.user_id,
    )
    return Response(status_code=201, headers={"Location": f"/api/courses/{course.id}"})


@courses_router.get("/api/courses/{course_id}")
async def get_course(course_id: str):
    """Return one course, or 400 "No such course exists"."""
    return JSONResponse(serialize_course(_get_courses_service().get_course(course_id)))


@courses_router.put("/api/courses/{course_id}")
async def update_course(request: Request, course_id: str, user: AuthenticatedUser = Depends(current_user)):
    """Update course fields (owner-only).

    Behavior:
        - 204 with an empty body
        - 400 for an unknown course or missing update data
        - 401 without valid credentials; 403 for non-owners
    """
    service = _get_courses_service()
    course = service.require_owner(user, course_id)
    changes = _update_changes(await read_json_object(request))
    service.apply_update(user, course, changes)
    logger.info("Course %s updated by user %s (%s)", course.id, user.id, ", ".join(sorted(changes)))
    return Response(status_code=204)


@courses_router.delete("/api/courses/{course_id}")
async def delete_course(course_id: str, user: AuthenticatedUser = Depends(current_user)):
    """Delete a course (owner-only). 204 on success; 400/401/403 otherwise."""
    _get_courses_service().delete_course(user, course_id)
    return Response(status_code=204)


__all__ = ["CourseCreatePayload", "CourseUpdatePayload", "courses_router"]
