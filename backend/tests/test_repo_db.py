"""
Unit-style tests for DBCourseRepo using a fake psycopg driver.

Rationale: Keep CI/self-contained runs green without a real Postgres.
We validate SQL flow (owner-scoped writes, unique-violation mapping) and row
mapping. No network or external DB required.
"""
from __future__ import annotations

import pytest

from backend.teaching import repo_db as mod
from backend.teaching.domain import Course, User
from backend.teaching.ports import EmailTaken
from backend.tests.utils.fake_psycopg import install_fake_psycopg

USER_ROW = (1, "Joe", "Smith", "joe@smith.com", "$argon2id$hash")
COURSE_ROW = (7, 1, "Bookcase", "Build one", "12 hours", None)


def test_dsn_resolution_prefers_coursebook_variable(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://generic/db")
    monkeypatch.setenv("COURSEBOOK_DATABASE_URL", "postgresql://specific/db")
    assert mod.DBCourseRepo()._dsn == "postgresql://specific/db"


def test_missing_dsn_raises():
    with pytest.raises(RuntimeError):
        mod.DBCourseRepo()


def test_find_user_by_email_maps_row(monkeypatch: pytest.MonkeyPatch):
    db = install_fake_psycopg(monkeypatch, mod, lambda sql, params: [USER_ROW])
    repo = mod.DBCourseRepo("fake://dsn")

    user = repo.find_user_by_email("joe@smith.com")

    assert user == User(id=1, first_name="Joe", last_name="Smith", email_address="joe@smith.com", password="$argon2id$hash")
    sql, params = db.executed[0]
    assert "where email_address = %s" in sql
    assert params == ("joe@smith.com",)


def test_create_user_maps_unique_violation(monkeypatch: pytest.MonkeyPatch):
    install_fake_psycopg(monkeypatch, mod, lambda sql, params: mod.UniqueViolation("duplicate key"))
    repo = mod.DBCourseRepo("fake://dsn")

    with pytest.raises(EmailTaken):
        repo.create_user(first_name="Joe", last_name="Smith", email_address="joe@smith.com", password_hash="h")


def test_create_course_returns_row_and_commits(monkeypatch: pytest.MonkeyPatch):
    db = install_fake_psycopg(monkeypatch, mod, lambda sql, params: [COURSE_ROW])
    repo = mod.DBCourseRepo("fake://dsn")

    course = repo.create_course(user_id=1, title="Bookcase", description="Build one", estimated_time="12 hours", materials_needed=None)

    assert course == Course(id=7, user_id=1, title="Bookcase", description="Build one", estimated_time="12 hours")
    assert db.executed[0][1] == (1, "Bookcase", "Build one", "12 hours", None)
    assert db.commits == 1


def test_update_is_scoped_to_owner(monkeypatch: pytest.MonkeyPatch):
    db = install_fake_psycopg(monkeypatch, mod, lambda sql, params: [COURSE_ROW])
    repo = mod.DBCourseRepo("fake://dsn")

    updated = repo.update_course_owned(7, 1, {"title": "Bookcase", "estimated_time": "12 hours"})

    assert updated is not None and updated.id == 7
    sql, params = db.executed[0]
    assert "where id = %s and user_id = %s" in sql
    assert params == ("Bookcase", "12 hours", 7, 1)


def test_update_without_match_returns_none(monkeypatch: pytest.MonkeyPatch):
    install_fake_psycopg(monkeypatch, mod, lambda sql, params: [])
    repo = mod.DBCourseRepo("fake://dsn")

    assert repo.update_course_owned(7, 2, {"title": "x"}) is None


@pytest.mark.parametrize("changes", [{"id": 8}, {}])
def test_update_rejects_unusable_changes_before_sql(monkeypatch: pytest.MonkeyPatch, changes):
    db = install_fake_psycopg(monkeypatch, mod, lambda sql, params: [])
    repo = mod.DBCourseRepo("fake://dsn")

    with pytest.raises(ValueError):
        repo.update_course_owned(7, 1, changes)
    assert db.executed == []


def test_delete_reports_whether_a_row_matched(monkeypatch: pytest.MonkeyPatch):
    results = {"rows": [()]}
    db = install_fake_psycopg(monkeypatch, mod, lambda sql, params: results["rows"])
    repo = mod.DBCourseRepo("fake://dsn")

    assert repo.delete_course_owned(7, 1) is True
    results["rows"] = []
    assert repo.delete_course_owned(7, 2) is False
    assert db.executed[0] == ("delete from public.courses where id = %s and user_id = %s", (7, 1))


def test_ensure_schema_declares_unique_email(monkeypatch: pytest.MonkeyPatch):
    db = install_fake_psycopg(monkeypatch, mod, lambda sql, params: [])
    mod.DBCourseRepo("fake://dsn").ensure_schema()
    assert "unique (email_address)" in db.executed[0][0]
