"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores own the
lifecycle; routes and flows do the work.

Both dataclasses are frozen: a Principal is immutable after bootstrap and a
Session is bound to one principal for its whole lifetime.

Layer rule: no imports from api/ or board/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Principal:
    """A registered identity.

    credential is an opaque string compared by exact match -- it is never
    returned to clients (see public()).
    """

    id: int
    username: str  # unique, case-sensitive
    credential: str = ""

    def public(self) -> dict:
        """Return the client-safe view of this principal."""
        return {"id": self.id, "username": self.username}


@dataclass(frozen=True)
class Session:
    """An issued bearer token bound to one principal.

    State machine: ISSUED -> REVOKED (terminal). A revoked session is simply
    absent from the registry; tokens are never reissued.
    """

    token: str
    principal_id: int
    issued_at: datetime
