"""
Users API routes: current-user lookup and signup.

Why:
    Clients authenticate with basic auth on every call; `GET /api/users` lets
    them confirm the credentials and fetch their own id. Signup is public.

Security:
    The password hash is never serialized. Authentication failures always
    answer 401 "Access Denied" regardless of the internal reason.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from backend.identity_access.domain import AuthenticatedUser
from backend.teaching.errors import ValidationError
from backend.teaching.services.users import UsersService
from backend.teaching.validation import USER_RULES, validate
from backend.web.errors import validation_messages
from backend.web.repo_wiring import get_repo

from .security import current_user, read_json_object

users_router = APIRouter(tags=["Users"])  # explicit paths below

USER_DATA_REQUIRED = "user data required"


class SignupPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email_address: str = Field(alias="emailAddress")
    password: str


def _get_users_service() -> UsersService:
    return UsersService(get_repo())


@users_router.get("/api/users")
async def get_current_user(user: AuthenticatedUser = Depends(current_user)):
    """Return the authenticated caller.

    Behavior:
        - 200 with `{id, firstName, emailAddress}`
        - 401 "Access Denied" without valid basic-auth credentials
    """
    return JSONResponse({"id": user.id, "firstName": user.first_name, "emailAddress": user.email_address})


@users_router.post("/api/users")
async def create_user(request: Request):
    """Create a user account.

    Behavior:
        - 201 with `Location: /` and an empty body
        - 400 with one message per missing field, in field order
        - 400 "email already taken" when the email is in use
    """
    payload = await read_json_object(request)
    if payload is None:
        raise ValidationError(USER_DATA_REQUIRED)
    problems = validate(payload, USER_RULES)
    if problems:
        raise ValidationError(problems)
    try:
        data = SignupPayload.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(validation_messages(exc.errors()))
    _get_users_service().register(
        first_name=data.first_name,
        last_name=data.last_name,
        email_address=data.email_address,
        password=data.password,
    )
    return Response(status_code=201, headers={"Location": "/"})


__all__ = ["SignupPayload", "users_router"]
