"""
auth/store.py -- In-memory repository for registered principals.

Pattern: Repository. IdentityStore owns the principal records; login flows
and the session registry read through it and never touch the dicts directly.

Ids are assigned monotonically starting at 1 and never reused. Principals
are immutable once added. Lookups are exact-match with no normalization:
usernames are case-sensitive and nothing is trimmed -- callers validate
input before calling.

Concurrency: FastAPI runs sync handlers in a worker thread pool, so every
method takes the store lock. Critical sections are dict operations only.

Layer rule: no imports from api/ or board/.
"""

from __future__ import annotations

import hmac
import logging
import threading

from auth.models import Principal

logger = logging.getLogger("noticeboard.auth")


class IdentityStore:
    """Repository for Principal entities.

    Usage:
        store = IdentityStore()
        store.add("testuser", "password")
        principal = store.find_by_credentials("testuser", "password")
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_id: dict[int, Principal] = {}
        self._by_username: dict[str, Principal] = {}
        self._next_id = 1

    # ------------------------------------------------------------------
    # Writes (bootstrap / registration)
    # ------------------------------------------------------------------

    def add(self, username: str, credential: str) -> Principal:
        """Create a principal and return it.

        Raises ValueError if the username is already taken.
        """
        with self._lock:
            if username in self._by_username:
                raise ValueError(f"Username {username!r} is already registered.")
            principal = Principal(id=self._next_id, username=username, credential=credential)
            self._next_id += 1
            self._by_id[principal.id] = principal
            self._by_username[username] = principal
        return principal

    def seed(self, username: str, credential: str) -> Principal:
        """Idempotent bootstrap: return the existing principal or create it."""
        existing = self.get_by_username(username)
        if existing is not None:
            return existing
        principal = self.add(username, credential)
        logger.info("Seeded principal %r (id=%d)", principal.username, principal.id)
        return principal

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_credentials(self, username: str, secret: str) -> Principal | None:
        """Return the principal whose username and credential both match exactly.

        Absence is the "no match" result, not an error. The credential is
        compared with hmac.compare_digest so the comparison time does not
        depend on how many leading characters match.
        """
        with self._lock:
            principal = self._by_username.get(username)
        if principal is None:
            return None
        if not hmac.compare_digest(principal.credential.encode("utf-8"), secret.encode("utf-8")):
            return None
        return principal

    def get_by_id(self, principal_id: int) -> Principal | None:
        with self._lock:
            return self._by_id.get(principal_id)

    def get_by_username(self, username: str) -> Principal | None:
        """Look up a principal by exact username (case-sensitive)."""
        with self._lock:
            return self._by_username.get(username)

    def count(self) -> int:
        with self._lock:
            return len(self._by_id)
