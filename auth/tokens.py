"""
auth/tokens.py -- Session token generation and bearer header parsing.

Token design:
  Tokens are opaque to clients. Internally a token combines the principal id,
  the issuance time in milliseconds and secrets.token_hex(16) (128 bits from
  the OS CSPRNG):

      nb_<principal_id>_<issued_ms>_<32 hex chars>

  The random part alone makes a repeat across the process lifetime
  computationally infeasible; the id and timestamp keep two principals
  logging in during the same clock tick from ever sharing a prefix. No ledger
  of used tokens is kept.

Bearer parsing:
  Authorization: Bearer <token>. The header name and the scheme are matched
  case-insensitively; the credential must be a single non-empty word.
  Anything else is "no token" -- callers cannot distinguish malformed from
  missing, which is intentional.

Layer rule: no imports from api/ or board/.
"""

from __future__ import annotations

import secrets
from collections.abc import Mapping
from datetime import datetime

TOKEN_PREFIX = "nb"
_TOKEN_RANDOM_BYTES = 16


def generate_session_token(principal_id: int, issued_at: datetime) -> str:
    """Return a new opaque session token for principal_id issued at issued_at."""
    issued_ms = int(issued_at.timestamp() * 1000)
    return f"{TOKEN_PREFIX}_{principal_id}_{issued_ms}_{secrets.token_hex(_TOKEN_RANDOM_BYTES)}"


def _authorization_header(headers: Mapping[str, str]) -> str | None:
    # Starlette Headers are already case-insensitive; plain dicts are not.
    value = headers.get("authorization")
    if value is not None:
        return value
    for name, candidate in headers.items():
        if name.lower() == "authorization":
            return candidate
    return None


def extract_bearer_token(headers: Mapping[str, str]) -> str | None:
    """Return the bearer credential from request headers, or None if absent or malformed."""
    header = _authorization_header(headers)
    if not header:
        return None
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]
