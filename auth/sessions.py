"""
auth/sessions.py -- In-memory registry of active bearer sessions.

SessionRegistry is the only owner of Session lifecycle. One instance is
created per process in the API lifespan and injected through app.state --
never reached as a module global.

Per-token state machine:

    ISSUED --revoke()--> REVOKED (terminal)

A revoked token is removed from the map and never comes back: issue() only
hands out freshly generated tokens (see auth/tokens.py), so uniqueness holds
across the registry's whole history without keeping a used-token ledger.

Concurrency:
  issue(), resolve() and revoke() each perform a single dict operation under
  one threading.Lock. A session becomes visible together with its principal
  binding (the Session is built before insertion), and a revoke racing a
  resolve on the same token yields exactly one of "found" / "not found".
  Nothing blocks while holding the lock.

Layer rule: no imports from api/ or board/.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone

from auth.models import Principal, Session
from auth.store import IdentityStore
from auth.tokens import generate_session_token

logger = logging.getLogger("noticeboard.auth")


class SessionRegistry:
    """Maps opaque session tokens to principals.

    Usage:
        registry = SessionRegistry(identity_store)
        token = registry.issue(principal)
        registry.resolve(token)   # -> principal
        registry.revoke(token)    # -> True
        registry.revoke(token)    # -> False
    """

    def __init__(self, identity_store: IdentityStore) -> None:
        self._identities = identity_store
        self._lock = threading.Lock()
        self._sessions: dict[str, Session] = {}

    def issue(self, principal: Principal) -> str:
        """Create a session for principal and return its token.

        Multiple concurrent sessions per principal are allowed.
        """
        issued_at = datetime.now(timezone.utc)
        with self._lock:
            token = generate_session_token(principal.id, issued_at)
            while token in self._sessions:
                token = generate_session_token(principal.id, issued_at)
            self._sessions[token] = Session(token=token, principal_id=principal.id, issued_at=issued_at)
        logger.debug("Issued session for principal id=%d", principal.id)
        return token

    def resolve(self, token: str) -> Principal | None:
        """Return the principal bound to an active token, or None.

        None covers unknown, malformed and revoked tokens alike. No side effects.
        """
        if not isinstance(token, str) or not token:
            return None
        with self._lock:
            session = self._sessions.get(token)
        if session is None:
            return None
        return self._identities.get_by_id(session.principal_id)

    def revoke(self, token: str) -> bool:
        """Remove the session for token. Returns whether it existed.

        Revoking an absent token is not an error; the caller decides how to
        surface it (logout reports ALREADY_LOGGED_OUT).
        """
        with self._lock:
            session = self._sessions.pop(token, None)
        if session is None:
            return False
        logger.debug("Revoked session for principal id=%d", session.principal_id)
        return True

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_session(self, token: str) -> Session | None:
        with self._lock:
            return self._sessions.get(token)

    def active_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def sessions_for(self, principal_id: int) -> list[Session]:
        """Return the active sessions of one principal, oldest first."""
        with self._lock:
            sessions = [s for s in self._sessions.values() if s.principal_id == principal_id]
        return sorted(sessions, key=lambda s: s.issued_at)
