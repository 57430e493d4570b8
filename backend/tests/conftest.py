"""
Pytest configuration for backend tests.

Why: Force AnyIO to use the asyncio backend, keep the repository isolated per
test and make sure no developer environment leaks into the suite.
"""
import sys
from pathlib import Path

import pytest

# Ensure the repository root is importable as the `backend` namespace package.
REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _clear_env_toggles(monkeypatch: pytest.MonkeyPatch):
    """Clear env-driven toggles so every test starts from dev defaults."""
    for var in (
        "COURSEBOOK_ENV",
        "COURSEBOOK_STORE",
        "COURSEBOOK_DATABASE_URL",
        "DATABASE_URL",
        "AUTO_CREATE_SCHEMA",
        "ENABLE_GLOBAL_ERROR_LOGGING",
    ):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture(autouse=True)
def repo():
    """Give each test a fresh in-memory repository."""
    from backend.teaching.repo_memory import InMemoryCourseRepo
    from backend.web import repo_wiring

    fresh = InMemoryCourseRepo()
    repo_wiring.set_repo(fresh)
    yield fresh
    repo_wiring.set_repo(None)
