"""
Postgres-backed repository for users and courses.

Design:
- Minimal psycopg3 usage; each call opens a short-lived connection.
- Returns the dataclasses from `teaching.domain` to keep the web adapter
  independent of driver rows.

Consistency:
- `users.email_address` carries a unique constraint; a violation on insert is
  reported as `EmailTaken`, so concurrent signups cannot create duplicates.
- Update/delete are single conditional statements (`where id = %s and
  user_id = %s`) so a course that vanished or changed owner after the ownership
  check is never touched.
"""
from __future__ import annotations

import logging
import os
from typing import Any, List, Mapping, Optional, Tuple

import psycopg
from psycopg import sql
from psycopg.errors import UniqueViolation

from .domain import Course, User
from .ports import EmailTaken

logger = logging.getLogger("coursebook.teaching.repo")

SCHEMA_SQL = """
create table if not exists public.users (
    id serial primary key,
    first_name text not null,
    last_name text not null,
    email_address text not null,
    password text not null,
    constraint users_email_address_key unique (email_address)
);

create table if not exists public.courses (
    id serial primary key,
    user_id integer not null references public.users(id) on delete cascade,
    title text not null,
    description text not null,
    estimated_time text,
    materials_needed text
);
"""

_USER_COLUMNS = "id, first_name, last_name, email_address, password"
_COURSE_COLUMNS = "id, user_id, title, description, estimated_time, materials_needed"

# Course attributes that may appear in an update; guards the SET clause.
_UPDATABLE_COURSE_COLUMNS = frozenset({"title", "description", "estimated_time", "materials_needed", "user_id"})


def _dsn() -> str:
    """Resolve the DSN from the environment."""
    for key in ("COURSEBOOK_DATABASE_URL", "DATABASE_URL"):
        dsn = os.getenv(key)
        if dsn:
            return dsn
    raise RuntimeError("Database DSN unavailable for DBCourseRepo")


def _user_row(row: Tuple) -> User:
    return User(
        id=int(row[0]),
        first_name=row[1],
        last_name=row[2],
        email_address=row[3],
        password=row[4],
    )


def _course_row(row: Tuple) -> Course:
    return Course(
        id=int(row[0]),
        user_id=int(row[1]),
        title=row[2],
        description=row[3],
        estimated_time=row[4],
        materials_needed=row[5],
    )


class DBCourseRepo:
    def __init__(self, dsn: Optional[str] = None) -> None:
        """Bind the repository to a DSN; no connection is opened eagerly."""
        self._dsn = dsn or _dsn()

    def ensure_schema(self) -> None:
        with psycopg.connect(self._dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
            conn.commit()
        logger.info("Database schema ensured")

    # --- Users ------------------------------------------------------------------
    def list_users(self) -> List[User]:
        with psycopg.connect(self._dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(f"select {_USER_COLUMNS} from public.users order by id")
                return [_user_row(r) for r in cur.fetchall()]

    def find_user_by_email(self, email_address: str) -> Optional[User]:
        with psycopg.connect(self._dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"select {_USER_COLUMNS} from public.users where email_address = %s",
                    (email_address,),
                )
                row = cur.fetchone()
        return _user_row(row) if row else None

    def create_user(self, *, first_name: str, last_name: str, email_address: str, password_hash: str) -> User:
        try:
            with psycopg.connect(self._dsn) as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        f"""
                        insert into public.users (first_name, last_name, email_address, password)
                        values (%s, %s, %s, %s)
                        returning {_USER_COLUMNS}
                        """,
                        (first_name, last_name, email_address, password_hash),
                    )
                    row = cur.fetchone()
                conn.commit()
        except UniqueViolation as exc:
            raise EmailTaken(email_address) from exc
        return _user_row(row)

    # --- Courses ----------------------------------------------------------------
    def list_courses(self) -> List[Course]:
        with psycopg.connect(self._dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(f"select {_COURSE_COLUMNS} from public.courses order by id")
                return [_course_row(r) for r in cur.fetchall()]

    def get_course(self, course_id: int) -> Optional[Course]:
        with psycopg.connect(self._dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"select {_COURSE_COLUMNS} from public.courses where id = %s",
                    (course_id,),
                )
                row = cur.fetchone()
        return _course_row(row) if row else None

    def create_course(
        self,
        *,
        user_id: int,
        title: str,
        description: str,
        estimated_time: Optional[str],
        materials_needed: Optional[str],
    ) -> Course:
        with psycopg.connect(self._dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    insert into public.courses (user_id, title, description, estimated_time, materials_needed)
                    values (%s, %s, %s, %s, %s)
                    returning {_COURSE_COLUMNS}
                    """,
                    (user_id, title, description, estimated_time, materials_needed),
                )
                row = cur.fetchone()
            conn.commit()
        return _course_row(row)

    def update_course_owned(self, course_id: int, owner_id: int, changes: Mapping[str, Any]) -> Optional[Course]:
        """Update fields of a course owned by `owner_id`.

        Parameters:
            changes: Course attribute names to new values; an empty mapping or
                unknown names raise ValueError before any SQL is issued.

        Returns:
            The updated course, or None when no row matched id+owner.
        """
        if not changes:
            raise ValueError("no_changes")
        unknown = set(changes) - _UPDATABLE_COURSE_COLUMNS
        if unknown:
            raise ValueError(f"invalid_fields: {sorted(unknown)}")
        assignments = [sql.SQL("{} = %s").format(sql.Identifier(col)) for col in changes]
        params: list = [*changes.values(), course_id, owner_id]
        stmt = sql.SQL(
            "update public.courses set {assign} where id = %s and user_id = %s returning " + _COURSE_COLUMNS
        ).format(assign=sql.SQL(", ").join(assignments))
        with psycopg.connect(self._dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(stmt, params)
                row = cur.fetchone()
            conn.commit()
        return _course_row(row) if row else None

    def delete_course_owned(self, course_id: int, owner_id: int) -> bool:
        with psycopg.connect(self._dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "delete from public.courses where id = %s and user_id = %s",
                    (course_id, owner_id),
                )
                deleted = cur.rowcount
            conn.commit()
        return bool(deleted)


__all__ = ["DBCourseRepo", "SCHEMA_SQL"]
