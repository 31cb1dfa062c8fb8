"""
core/errors.py -- Closed catalog of result codes shared by every API operation.

Clients branch on the numeric resultCode, so the catalog is append-only:
  - a key's code never changes,
  - a code is never reused for a different key,
  - codes are grouped by their leading three digits into families:

      0      success
      400xx  bad request / validation
      401xx  authentication
      403xx  authorization
      404xx  not found
      500xx  server

The transport (HTTP) status of an entry is derived from its family unless the
entry pins one explicitly. Unknown families map to 500.

ApiError is the exception FastAPI dependencies raise to short-circuit a
request with a ready-made envelope; api/main.py renders it.

Layer rule: core/ is the kernel. No imports from api/, auth/, or board/.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.envelope import Envelope

logger = logging.getLogger("noticeboard.errors")

SUCCESS = "SUCCESS"
SERVER_ERROR = "SERVER_ERROR"

_FAMILY_STATUS = {
    "400": 400,
    "401": 401,
    "403": 403,
    "404": 404,
    "500": 500,
}


def status_for_code(code: int) -> int:
    """Return the HTTP status implied by a result code's family prefix."""
    return _FAMILY_STATUS.get(str(code)[:3], 500)


@dataclass(frozen=True)
class ErrorEntry:
    """One catalog row: symbolic key, stable code, default message, optional pinned status."""

    key: str
    code: int
    message: str
    http_status: int | None = None

    @property
    def status_code(self) -> int:
        if self.http_status is not None:
            return self.http_status
        return status_for_code(self.code)

    @property
    def is_success(self) -> bool:
        return self.code == 0


class ErrorTaxonomy:
    """Append-only registry of ErrorEntry rows keyed by symbolic name.

    Usage:
        taxonomy = ErrorTaxonomy([ErrorEntry("SUCCESS", 0, "OK", 200)])
        taxonomy.add(ErrorEntry("TEAPOT", 41801, "I'm a teapot", 418))
        taxonomy.resolve("TEAPOT").status_code  # 418
    """

    def __init__(self, entries: Iterable[ErrorEntry] = ()) -> None:
        self._by_key: dict[str, ErrorEntry] = {}
        self._by_code: dict[int, ErrorEntry] = {}
        for entry in entries:
            self.add(entry)

    def add(self, entry: ErrorEntry) -> ErrorEntry:
        """Register a new entry. Raises ValueError on a duplicate key or code."""
        if entry.key in self._by_key:
            raise ValueError(f"Result key {entry.key!r} is already registered.")
        existing = self._by_code.get(entry.code)
        if existing is not None:
            raise ValueError(f"Result code {entry.code} is already used by {existing.key!r}.")
        self._by_key[entry.key] = entry
        self._by_code[entry.code] = entry
        return entry

    def get(self, key: str) -> ErrorEntry | None:
        return self._by_key.get(key)

    def by_code(self, code: int) -> ErrorEntry | None:
        return self._by_code.get(code)

    def resolve(self, key: str) -> ErrorEntry:
        """Return the entry for key, falling back to SERVER_ERROR for unknown keys.

        An unknown key is a programming defect in the caller, not a client
        error. It is logged here and the client sees the generic server error.
        """
        entry = self._by_key.get(key)
        if entry is not None:
            return entry
        logger.error("Unknown result key %r -- falling back to %s", key, SERVER_ERROR)
        return self._by_key[SERVER_ERROR]

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __iter__(self) -> Iterator[ErrorEntry]:
        return iter(self._by_key.values())

    def __len__(self) -> int:
        return len(self._by_key)


TAXONOMY = ErrorTaxonomy(
    [
        ErrorEntry(SUCCESS, 0, "Request processed successfully.", 200),
        # 400 Bad Request family
        ErrorEntry("INVALID_INPUT", 40001, "The request contains invalid input. Please check and try again."),
        ErrorEntry("MISSING_REQUIRED_FIELD", 40002, "A required field is missing."),
        ErrorEntry("INVALID_POST_ID_FORMAT", 40003, "The post ID format is invalid."),
        ErrorEntry("ALREADY_LOGGED_OUT", 40004, "Already logged out or the session is no longer valid."),
        ErrorEntry("METHOD_NOT_ALLOWED", 40005, "This method is not allowed for the requested resource.", 405),
        # 401 Unauthorized family
        ErrorEntry("NOT_AUTHENTICATED", 40101, "Authentication is required. Please log in and try again."),
        ErrorEntry("LOGIN_FAILED", 40102, "Login failed. Please check your username or password."),
        ErrorEntry("INVALID_TOKEN", 40103, "The token is invalid. Please log in again."),
        # 403 Forbidden family
        ErrorEntry("FORBIDDEN_ACCESS", 40301, "You do not have permission to access this resource."),
        # 404 Not Found family
        ErrorEntry("RESOURCE_NOT_FOUND", 40401, "The requested resource could not be found."),
        ErrorEntry("POST_NOT_FOUND", 40402, "No post exists with the given ID."),
        ErrorEntry("USER_NOT_FOUND", 40403, "The requested user could not be found."),
        # 500 Internal Server Error family
        ErrorEntry(SERVER_ERROR, 50001, "An error occurred while processing the request. Please try again later."),
        ErrorEntry("DATABASE_ERROR", 50002, "An error occurred while accessing stored data."),
        ErrorEntry("TOKEN_GENERATION_ERROR", 50003, "An error occurred while generating the token."),
    ]
)


class ApiError(Exception):
    """Short-circuit a request with a failure envelope.

    Raised from FastAPI dependencies and route handlers; the handler in
    api/main.py renders the envelope with its transport status:

        raise ApiError(failure("POST_NOT_FOUND"))
    """

    def __init__(self, envelope: Envelope) -> None:
        self.envelope = envelope
        super().__init__(envelope.result_message)
