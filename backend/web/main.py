"Coursebook API"
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.web import config
from backend.web.errors import install_error_handlers, unhandled_error_response
from backend.web.repo_wiring import get_repo
from backend.web.routes.courses import courses_router
from backend.web.routes.users import users_router

if config.should_load_dotenv():
    load_dotenv()

config.configure_logging()
# Minimal production safety checks (fail-fast on insecure config)
config.ensure_secure_config_on_startup()

logger = logging.getLogger("coursebook.web")
access_logger = logging.getLogger("coursebook.web.access")


@asynccontextmanager
async def lifespan(app: FastAPI):
    repo = get_repo()
    logger.info("Coursebook starting (env=%s, store=%s)", config.environment(), type(repo).__name__)
    if config.auto_create_schema() and hasattr(repo, "ensure_schema"):
        repo.ensure_schema()
    yield


app = FastAPI(title="Coursebook API", description="Users and courses REST API", version="0.1.0", lifespan=lifespan)
install_error_handlers(app)

# --- Access Log Middleware ------------------------------------------------------

@app.middleware("http")
async def access_log(request: Request, call_next):
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as exc:
        # Unhandled errors end here; nothing propagates past this middleware.
        response = unhandled_error_response(request, exc)
    elapsed_ms = (time.perf_counter() - started) * 1000
    access_logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response

# --- Routers --------------------------------------------------------------------

app.include_router(users_router)
app.include_router(courses_router)


@app.get("/health")
async def health_check():
    # Minimal health endpoint used by orchestrators and tests.
    return JSONResponse({"status": "healthy"}, headers={"Cache-Control": "private, no-store"})
