"""
Configuration, logging setup and startup security checks for Coursebook.

Why: Prevent accidental insecure deployments (e.g. production silently running
on the in-memory store) without burdening local development.

Permissions: The caller needs no special privileges. The functions read
environment variables; `ensure_secure_config_on_startup` raises `SystemExit`
on fatal misconfiguration.
"""
from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_TRUE = {"1", "true", "yes"}


def _flag(name: str, default: str = "false") -> bool:
    return (os.getenv(name, default) or "").strip().lower() in _TRUE


def _is_prod_like(env: str) -> bool:
    env_l = (env or "").lower()
    return env_l in {"prod", "production", "stage", "staging"}


def environment() -> str:
    return (os.getenv("COURSEBOOK_ENV", "dev") or "dev").strip().lower()


def database_url() -> str:
    """Return the configured Postgres DSN or an empty string."""
    for key in ("COURSEBOOK_DATABASE_URL", "DATABASE_URL"):
        val = (os.getenv(key) or "").strip()
        if val:
            return val
    return ""


def store_backend() -> str:
    """`memory` when forced or when no DSN is configured, else `db`."""
    forced = (os.getenv("COURSEBOOK_STORE") or "").strip().lower()
    if forced in {"memory", "db"}:
        return forced
    return "db" if database_url() else "memory"


def auto_create_schema() -> bool:
    return _flag("AUTO_CREATE_SCHEMA")


def global_error_logging_enabled() -> bool:
    """Log tracebacks for unhandled errors (ENABLE_GLOBAL_ERROR_LOGGING=true)."""
    return _flag("ENABLE_GLOBAL_ERROR_LOGGING")


def should_load_dotenv() -> bool:
    """Decide if we should load a local .env file.

    - Never load under pytest to avoid contaminating test env.
    - Allow explicit opt-out via COURSEBOOK_ENABLE_DOTENV (default true).
    """
    if "pytest" in sys.modules or os.getenv("PYTEST_CURRENT_TEST"):
        return False
    return _flag("COURSEBOOK_ENABLE_DOTENV", "true")


def configure_logging() -> None:
    """Attach one stream handler to the `coursebook` logger tree (idempotent)."""
    root = logging.getLogger("coursebook")
    level = (os.getenv("LOG_LEVEL", "INFO") or "INFO").strip().upper()
    root.setLevel(getattr(logging, level, logging.INFO))
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)


def ensure_secure_config_on_startup() -> None:
    """Fail fast on insecure production configuration.

    Checks (prod/staging only):
    - A database DSN must be configured.
    - The in-memory store must not be forced.
    - The DSN must not explicitly disable TLS.
    """
    if not _is_prod_like(environment()):
        return  # dev/test remain permissive

    dsn = database_url()
    if not dsn:
        raise SystemExit(
            "Refusing to start: COURSEBOOK_DATABASE_URL/DATABASE_URL is unset in production."
        )
    if store_backend() == "memory":
        raise SystemExit(
            "Refusing to start: COURSEBOOK_STORE=memory is not allowed in production/staging."
        )
    if "sslmode=disable" in dsn:
        raise SystemExit(
            "Refusing to start: database DSN contains sslmode=disable in production. Use sslmode=require."
        )


__all__ = [
    "LOG_FORMAT",
    "auto_create_schema",
    "configure_logging",
    "database_url",
    "ensure_secure_config_on_startup",
    "environment",
    "global_error_logging_enabled",
    "should_load_dotenv",
    "store_backend",
]
