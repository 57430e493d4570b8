"""
Courses API: listing, creation, owner-only update/delete.

The 400 (not 404) for unknown courses is part of the existing contract.
"""
from __future__ import annotations

import base64

import httpx
import pytest
from httpx import ASGITransport

from backend.identity_access.passwords import hash_password
from backend.web import main  # noqa: E402


pytestmark = pytest.mark.anyio("asyncio")

COURSE = {
    "title": "Build a Basic Bookcase",
    "description": "High-end furniture projects are great to dream about.",
    "estimatedTime": "12 hours",
    "materialsNeeded": "* 1/2 x 3/4 inch parting strip",
}


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=ASGITransport(app=main.app), base_url="http://test")


def _basic(email: str, password: str) -> dict:
    token = base64.b64encode(f"{email}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def owner(repo):
    repo.create_user(first_name="Joe", last_name="Smith", email_address="joe@smith.com", password_hash=hash_password("joepw"))
    return _basic("joe@smith.com", "joepw")


@pytest.fixture
def stranger(repo):
    repo.create_user(first_name="Sally", last_name="Jones", email_address="sally@jones.com", password_hash=hash_password("sallypw"))
    return _basic("sally@jones.com", "sallypw")


async def _create(c: httpx.AsyncClient, headers: dict, payload: dict | None = None) -> str:
    r = await c.post("/api/courses", json=payload or COURSE, headers=headers)
    assert r.status_code == 201
    return r.headers["location"]


@pytest.mark.anyio
async def test_create_course_sets_location_and_binds_caller(repo, owner):
    async with _client() as c:
        r = await c.post("/api/courses", json=COURSE, headers=owner)
        assert r.status_code == 201
        assert r.content == b""
        location = r.headers["location"]
        got = await c.get(location)
    assert location.startswith("/api/courses/")
    assert got.status_code == 200
    joe = repo.find_user_by_email("joe@smith.com")
    assert got.json() == {"id": int(location.rsplit("/", 1)[1]), "userId": joe.id, **COURSE}


@pytest.mark.anyio
async def test_create_course_keeps_explicit_user_id(repo, owner, stranger):
    sally = repo.find_user_by_email("sally@jones.com")
    async with _client() as c:
        location = await _create(c, owner, {**COURSE, "userId": sally.id})
        got = await c.get(location)
    assert got.json()["userId"] == sally.id


@pytest.mark.anyio
async def test_create_course_requires_auth_before_validation():
    async with _client() as c:
        r = await c.post("/api/courses", json={})
    assert r.status_code == 401
    assert r.json() == {"error": {"message": "Access Denied"}}


@pytest.mark.anyio
async def test_create_course_missing_title_and_description(owner):
    async with _client() as c:
        r = await c.post("/api/courses", json={"title": "", "estimatedTime": "1h"}, headers=owner)
    assert r.status_code == 400
    assert r.json() == {"error": {"message": ["title is missing", "description is missing"]}}


@pytest.mark.anyio
async def test_list_courses_returns_whitelisted_fields(owner):
    async with _client() as c:
        await _create(c, owner)
        await _create(c, owner, {"title": "Learn How to Program", "description": "In this course, you'll learn."})
        r = await c.get("/api/courses")
    assert r.status_code == 200
    items = r.json()
    assert [i["title"] for i in items] == ["Build a Basic Bookcase", "Learn How to Program"]
    assert set(items[0]) == {"id", "userId", "title", "description", "estimatedTime", "materialsNeeded"}
    assert items[1]["estimatedTime"] is None


@pytest.mark.anyio
@pytest.mark.parametrize("course_id", ["999", "abc", "0"])
async def test_get_unknown_course_is_400(course_id):
    async with _client() as c:
        r = await c.get(f"/api/courses/{course_id}")
    assert r.status_code == 400
    assert r.json() == {"error": {"message": "No such course exists"}}


@pytest.mark.anyio
async def test_owner_update_persists(owner):
    async with _client() as c:
        location = await _create(c, owner)
        r = await c.put(location, json={"title": "New Title", "estimatedTime": None}, headers=owner)
        assert r.status_code == 204
        assert r.content == b""
        got = (await c.get(location)).json()
    assert got["title"] == "New Title"
    assert got["estimatedTime"] is None
    assert got["description"] == COURSE["description"]


@pytest.mark.anyio
async def test_non_owner_update_is_403_and_leaves_course(owner, stranger):
    async with _client() as c:
        location = await _create(c, owner)
        r = await c.put(location, json={"title": "Hijacked"}, headers=stranger)
        got = (await c.get(location)).json()
    assert r.status_code == 403
    assert r.json() == {"error": {"message": "this user doesn't have permission to access this route"}}
    assert got["title"] == COURSE["title"]


@pytest.mark.anyio
async def test_update_unknown_course_is_400(owner):
    async with _client() as c:
        r = await c.put("/api/courses/42", json={"title": "x"}, headers=owner)
    assert r.status_code == 400
    assert r.json() == {"error": {"message": "no such course exists"}}


@pytest.mark.anyio
@pytest.mark.parametrize("body", [{}, {"unknown": "field"}, None])
async def test_update_without_data_is_400(owner, body):
    async with _client() as c:
        location = await _create(c, owner)
        if body is None:
            r = await c.put(location, headers=owner)
        else:
            r = await c.put(location, json=body, headers=owner)
    assert r.status_code == 400
    assert r.json() == {"error": {"message": "update data is missing"}}


@pytest.mark.anyio
async def test_update_rejects_emptied_required_field(owner):
    async with _client() as c:
        location = await _create(c, owner)
        r = await c.put(location, json={"title": "", "description": None}, headers=owner)
    assert r.status_code == 400
    assert r.json()["error"]["message"] == ["title is missing", "description is missing"]


@pytest.mark.anyio
async def test_update_requires_auth():
    async with _client() as c:
        r = await c.put("/api/courses/1", json={"title": "x"})
    assert r.status_code == 401


@pytest.mark.anyio
async def test_delete_requires_auth(owner):
    async with _client() as c:
        location = await _create(c, owner)
        r = await c.delete(location)
        still_there = await c.get(location)
    assert r.status_code == 401
    assert r.json() == {"error": {"message": "Access Denied"}}
    assert still_there.status_code == 200


@pytest.mark.anyio
async def test_owner_delete_then_course_is_gone(owner):
    async with _client() as c:
        location = await _create(c, owner)
        r = await c.delete(location, headers=owner)
        assert r.status_code == 204
        assert r.content == b""
        assert (await c.get(location)).status_code == 400
        again = await c.delete(location, headers=owner)
    assert again.status_code == 400


@pytest.mark.anyio
async def test_non_owner_delete_is_403(owner, stranger):
    async with _client() as c:
        location = await _create(c, owner)
        r = await c.delete(location, headers=stranger)
        still_there = await c.get(location)
    assert r.status_code == 403
    assert still_there.status_code == 200
