"""
Declarative field checks for request payloads.

Rules are evaluated in declaration order and yield one human-readable message
per failed rule. The checks are pure; callers decide how to react (usually by
raising `ValidationError`).
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence, Tuple

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class Rule:
    field: str
    check: Callable[[Mapping[str, Any], str], bool]
    message: str


def _present(payload: Mapping[str, Any], field: str) -> bool:
    # Missing, None, "" and other falsy values all count as missing.
    return bool(payload.get(field))


def _email_if_present(payload: Mapping[str, Any], field: str) -> bool:
    value = payload.get(field)
    if not value:
        return True
    return isinstance(value, str) and bool(_EMAIL_RE.match(value))


def required(field: str) -> Rule:
    return Rule(field=field, check=_present, message=f"{field} is missing")


def email_format(field: str, message: str = "not a valid email") -> Rule:
    return Rule(field=field, check=_email_if_present, message=message)


USER_RULES: Tuple[Rule, ...] = (
    required("firstName"),
    required("lastName"),
    required("emailAddress"),
    required("password"),
    email_format("emailAddress"),
)

COURSE_RULES: Tuple[Rule, ...] = (
    required("title"),
    required("description"),
)


def validate(payload: Mapping[str, Any], rules: Sequence[Rule]) -> list[str]:
    """Return the messages of all failed rules, in rule order (empty when valid)."""
    return [rule.message for rule in rules if not rule.check(payload, rule.field)]


__all__ = ["COURSE_RULES", "USER_RULES", "Rule", "email_format", "required", "validate"]
