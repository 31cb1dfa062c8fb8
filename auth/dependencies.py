"""
auth/dependencies.py -- Request authorization gate and FastAPI Depends() helpers.

authorize() is the single collaborator-facing entry point: it takes raw
request headers and returns either the resolved Principal or a ready-to-send
rejection Envelope. It never raises.

  no / malformed Authorization header -> NOT_AUTHENTICATED
  unknown or revoked token            -> NOT_AUTHENTICATED (same envelope)
  registry fault                      -> SERVER_ERROR (logged with traceback)

The gate answers only "is this a known active session". Resource-level
permission checks belong to the routes that own the resource.

get_current_principal() wraps authorize() for FastAPI and raises ApiError
with the rejection envelope. require_bearer_token() is the softer variant
used by logout, which must see the token even when it is no longer active.

Layer rule: no imports from api/ or board/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from fastapi import Request

from auth.models import Principal
from auth.sessions import SessionRegistry
from auth.tokens import extract_bearer_token
from core.envelope import Envelope, failure
from core.errors import ApiError

logger = logging.getLogger("noticeboard.auth")


def authorize(headers: Mapping[str, str], registry: SessionRegistry) -> Principal | Envelope:
    """Resolve the bearer token in headers to a Principal, or return a rejection envelope."""
    try:
        token = extract_bearer_token(headers)
        if token is None:
            return failure("NOT_AUTHENTICATED")
        principal = registry.resolve(token)
        if principal is None:
            return failure("NOT_AUTHENTICATED")
        return principal
    except Exception:
        logger.exception("Authorization gate failed")
        return failure("SERVER_ERROR")


def _client(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def get_current_principal(request: Request) -> Principal:
    """Require an active session. Raises ApiError(NOT_AUTHENTICATED) otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(principal: Principal = Depends(get_current_principal)): ...

    The resolved principal is also stored on request.state.principal.
    """
    registry: SessionRegistry = request.app.state.sessions
    outcome = authorize(request.headers, registry)
    if isinstance(outcome, Envelope):
        if outcome.status_code == 401:
            logger.warning("Unauthorized access attempt from %s to %s", _client(request), request.url.path)
        raise ApiError(outcome)
    request.state.principal = outcome
    return outcome


def require_bearer_token(request: Request) -> str:
    """Require a well-formed Authorization: Bearer header and return its token.

    Does not check that the session is active -- logout needs to report
    ALREADY_LOGGED_OUT for a token that was valid once.
    """
    token = extract_bearer_token(request.headers)
    if token is None:
        logger.warning("Missing bearer token from %s to %s", _client(request), request.url.path)
        raise ApiError(failure("NOT_AUTHENTICATED"))
    return token
