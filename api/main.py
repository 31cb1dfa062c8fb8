"""
api/main.py -- FastAPI application entry point for noticeboard.

Run with:  python main.py
           uvicorn api.main:app --reload

Middleware:
  EnvelopeTrustedHostMiddleware -- rejects unexpected Host headers (400 envelope)
  CORSMiddleware                -- adds CORS headers for allowed browser origins
  log_requests                  -- one log line per request with latency

Lifespan creates the process-owned state (IdentityStore, SessionRegistry,
PostStore) and attaches it to app.state. Handlers receive it through the
request, never through module globals.

Every response body -- routes, framework errors and crashes alike -- is the
{"resultCode", "resultMessage", "data"} envelope built by core.envelope.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.middleware import EnvelopeTrustedHostMiddleware
from api.models import HealthData, StatusData
from api.responses import render
from api.routes.auth import router as auth_router
from api.routes.posts import router as posts_router
from auth.sessions import SessionRegistry
from auth.store import IdentityStore
from board.store import PostStore
from core.config import get_settings
from core.envelope import failure, success
from core.errors import ApiError
from core.logging_setup import configure_logging

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

configure_logging(_settings)
logger = logging.getLogger("noticeboard.api")

# ---------------------------------------------------------------------------
# Lifespan -- startup / shutdown
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the in-memory stores for the lifetime of the server.

    Nothing survives a restart: principals are re-seeded from settings and
    every previously issued token is gone.
    """
    logger.info("noticeboard API starting up (version %s)", _settings.app_version)
    identities = IdentityStore()
    if _settings.seed_username:
        identities.seed(_settings.seed_username, _settings.seed_password)
    app.state.identities = identities
    app.state.sessions = SessionRegistry(identities)
    app.state.posts = PostStore()
    logger.info("Auth initialized (%d principals)", identities.count())

    yield

    logger.info(
        "noticeboard API shutdown complete (%d sessions dropped)",
        app.state.sessions.active_count(),
    )


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="noticeboard API",
    description="Username/password sessions and a shared bulletin board.",
    version=_settings.app_version,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware stack
# ---------------------------------------------------------------------------

app.add_middleware(
    EnvelopeTrustedHostMiddleware,
    allowed_hosts=_settings.allowed_hosts,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    # A route that raises never hands back a response; the outer error
    # handler will answer 500.
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
    finally:
        ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %d %.1fms %s",
            request.method,
            request.url.path,
            status_code,
            ms,
            request.client.host if request.client else "unknown",
        )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, prefix="/api", tags=["Auth"])
app.include_router(posts_router, prefix="/api", tags=["Posts"])

# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same envelope so clients branch on resultCode
# without inspecting the HTTP status to choose a schema.
# ---------------------------------------------------------------------------

_HTTP_STATUS_KEYS = {
    401: "NOT_AUTHENTICATED",
    403: "FORBIDDEN_ACCESS",
    404: "RESOURCE_NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render an envelope raised by a dependency or route handler."""
    return render(exc.envelope)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return INVALID_INPUT with the field errors as data when the body or params fail validation."""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return render(failure("INVALID_INPUT", detail=errors))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Map framework HTTP errors (unknown route, wrong method, ...) onto taxonomy keys."""
    if exc.status_code >= 500:
        key = "SERVER_ERROR"
    else:
        key = _HTTP_STATUS_KEYS.get(exc.status_code, "INVALID_INPUT")
    response = render(failure(key, status_code=exc.status_code))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is logged with its traceback and never written to the
    response body. The client receives only the generic SERVER_ERROR message.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return render(failure("SERVER_ERROR"))


# ---------------------------------------------------------------------------
# Status and health endpoints
#
# Defined directly in main.py (not in a router) so they are reachable
# regardless of router registration state. Both are public.
# ---------------------------------------------------------------------------


@app.get("/", tags=["Health"])
def status(request: Request) -> JSONResponse:
    """Return liveness plus the sizes of the in-memory stores."""
    payload = StatusData(
        message="noticeboard API is running.",
        version=_settings.app_version,
        principals=request.app.state.identities.count(),
        posts=request.app.state.posts.count(),
        active_sessions=request.app.state.sessions.active_count(),
    )
    return render(success(payload.model_dump()))


@app.get("/api/health", tags=["Health"])
async def health() -> JSONResponse:
    """Return API liveness and current version."""
    return render(success(HealthData(version=_settings.app_version).model_dump()))
