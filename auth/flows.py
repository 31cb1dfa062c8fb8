"""
auth/flows.py -- Login and logout, expressed as envelope-returning functions.

Both flows return an Envelope for every outcome -- success, expected
rejection, or internal fault -- so route handlers never rely on exceptions
for control flow and no exception crosses into the transport layer.

Login:
  blank username or password        -> MISSING_REQUIRED_FIELD
  no matching principal             -> LOGIN_FAILED (identical for a wrong
                                       username and a wrong password)
  match                             -> SUCCESS {"principal": ..., "token": ...}

Logout:
  token revoked now                 -> SUCCESS
  token already gone                -> ALREADY_LOGGED_OUT

Registry mutations are single atomic dict operations, so a fault part-way
through a flow leaves no half-updated session state behind.

Layer rule: no imports from api/ or board/.
"""

from __future__ import annotations

import logging

from auth.sessions import SessionRegistry
from auth.store import IdentityStore
from core.envelope import Envelope, failure, success

logger = logging.getLogger("noticeboard.auth")


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def login(
    identities: IdentityStore,
    registry: SessionRegistry,
    username: str | None,
    password: str | None,
    client: str = "unknown",
) -> Envelope:
    """Validate credentials and issue a session token."""
    try:
        if _is_blank(username) or _is_blank(password):
            logger.warning("Login attempt with missing username or password from %s", client)
            return failure(
                "MISSING_REQUIRED_FIELD",
                message="Both username and password are required.",
            )

        principal = identities.find_by_credentials(username, password)
        if principal is None:
            logger.warning("Login failed for user %r from %s", username, client)
            return failure("LOGIN_FAILED")

        token = registry.issue(principal)
        logger.info("User %r logged in from %s", principal.username, client)
        return success({"principal": principal.public(), "token": token})
    except Exception:
        logger.exception("Login error for user %r", username)
        return failure("SERVER_ERROR")


def logout(registry: SessionRegistry, token: str, client: str = "unknown") -> Envelope:
    """Revoke token. A second logout with the same token reports ALREADY_LOGGED_OUT."""
    try:
        # Resolved only for the log line; revoke() alone decides the outcome.
        principal = registry.resolve(token)
        if not registry.revoke(token):
            logger.warning("Logout attempt with an inactive token from %s", client)
            return failure("ALREADY_LOGGED_OUT")
        username = principal.username if principal is not None else "unknown"
        logger.info("User %r logged out from %s", username, client)
        return success({"message": "Logged out."})
    except Exception:
        logger.exception("Logout error")
        return failure("SERVER_ERROR")
