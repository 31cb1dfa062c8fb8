"""
api/routes/auth.py -- Login, logout and identity endpoints.

Routes:
  POST /api/auth/login   -- credentials (JSON or form) -> session token (public)
  POST /api/auth/logout  -- revoke the presented bearer token
  GET  /api/auth/me      -- current principal (requires an active session)

Login never uses the gate: it validates credentials against the IdentityStore
and issues a token in the SessionRegistry. Logout needs a well-formed bearer
header but not an active session, so that repeating it reports
ALREADY_LOGGED_OUT (40004) instead of NOT_AUTHENTICATED.

Responses carrying a token are sent with Cache-Control: no-store.
"""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from api.models import LoginRequest, PrincipalOut
from api.responses import render
from auth import flows
from auth.dependencies import get_current_principal, require_bearer_token
from auth.models import Principal
from auth.sessions import SessionRegistry
from auth.store import IdentityStore
from core.envelope import success

router = APIRouter()

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _client(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def read_login_body(request: Request) -> LoginRequest:
    """Parse login credentials from a JSON body or an HTML form post.

    An empty body (or JSON null) gives empty credentials, which the flow
    reports as MISSING_REQUIRED_FIELD. Malformed JSON or a body of the wrong
    shape raises RequestValidationError, rendered as INVALID_INPUT.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        payload = {field: form.get(field) for field in ("username", "password")}
    else:
        raw = await request.body()
        if not raw.strip():
            return LoginRequest()
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}}]
            ) from exc
    if payload is None:
        return LoginRequest()
    try:
        return LoginRequest.model_validate(payload)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


@router.post("/auth/login")
def login(request: Request, body: LoginRequest = Depends(read_login_body)) -> JSONResponse:
    """Authenticate with username and password; return the principal and a bearer token.

    The same LOGIN_FAILED envelope is returned for a wrong username and a
    wrong password so the response does not reveal which one was incorrect.
    """
    identities: IdentityStore = request.app.state.identities
    sessions: SessionRegistry = request.app.state.sessions
    envelope = flows.login(identities, sessions, body.username, body.password, client=_client(request))
    return render(envelope, no_store=True)


@router.post("/auth/logout")
def logout(request: Request, token: str = Depends(require_bearer_token)) -> JSONResponse:
    """Revoke the presented token."""
    sessions: SessionRegistry = request.app.state.sessions
    return render(flows.logout(sessions, token, client=_client(request)))


@router.get("/auth/me")
def me(principal: Principal = Depends(get_current_principal)) -> JSONResponse:
    """Return the principal bound to the presented token."""
    return render(success({"principal": PrincipalOut.from_principal(principal).model_dump()}))
