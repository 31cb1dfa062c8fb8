"""
core/envelope.py -- Uniform result envelope for every API response.

Wire format:
    {"resultCode": <int>, "resultMessage": <str>, "data": <any|null>}

resultCode == 0 if and only if the envelope was built by success(). Failure
envelopes carry data only when structured validation detail was supplied --
never the requested resource.

The transport status travels alongside the payload in an excluded field so
callers can render the envelope without consulting the taxonomy again.
Building an envelope has no side effects; delivery is the caller's job.

Layer rule: core/ is the kernel. No imports from api/, auth/, or board/.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.errors import SERVER_ERROR, SUCCESS, TAXONOMY, ErrorTaxonomy

logger = logging.getLogger("noticeboard.errors")


class Envelope(BaseModel):
    """Closed response shape. Extra keys cannot be injected."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    result_code: int
    result_message: str
    data: Any = None
    status_code: int = Field(default=200, exclude=True)

    @property
    def ok(self) -> bool:
        return self.result_code == 0

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready wire dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


def success(
    data: Any = None,
    key: str = SUCCESS,
    status_code: int = 200,
    taxonomy: ErrorTaxonomy = TAXONOMY,
) -> Envelope:
    """Build a success envelope around data (attached verbatim).

    An unknown key is a consistency defect: it is logged and the SUCCESS
    entry is used. A known key whose code is not 0 would break the
    resultCode == 0 iff success invariant and raises ValueError.
    """
    entry = taxonomy.get(key)
    if entry is None:
        logger.error("success() called with unknown key %r -- falling back to %s", key, SUCCESS)
        entry = taxonomy.resolve(SUCCESS)
    if not entry.is_success:
        raise ValueError(f"success() requires a zero-code key, got {key!r} ({entry.code}).")
    return Envelope(
        result_code=entry.code,
        result_message=entry.message,
        data=data,
        status_code=status_code,
    )


def failure(
    key: str,
    message: str | None = None,
    status_code: int | None = None,
    detail: Any = None,
    taxonomy: ErrorTaxonomy = TAXONOMY,
) -> Envelope:
    """Build a failure envelope for key.

    Args:
        key:         Taxonomy key. Unknown keys fall back to SERVER_ERROR
                     (logged by the taxonomy as a consistency defect).
        message:     Overrides the entry's default message. The code and its
                     meaning stay the same.
        status_code: Overrides the family-derived transport status.
        detail:      Structured validation detail; becomes data when given.
    """
    entry = taxonomy.resolve(key)
    if entry.is_success:
        logger.error("failure() called with zero-code key %r -- falling back to %s", key, SERVER_ERROR)
        entry = taxonomy.resolve(SERVER_ERROR)
    return Envelope(
        result_code=entry.code,
        result_message=message or entry.message,
        data=detail,
        status_code=status_code if status_code is not None else entry.status_code,
    )
