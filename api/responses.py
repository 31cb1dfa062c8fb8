"""
api/responses.py -- Render core envelopes as HTTP responses.

Every route and exception handler goes through render() so the wire body is
always {"resultCode", "resultMessage", "data"} and the HTTP status always
comes from the envelope.
"""

from __future__ import annotations

from fastapi.responses import JSONResponse

from core.envelope import Envelope


def render(envelope: Envelope, no_store: bool = False) -> JSONResponse:
    """Return a JSONResponse for envelope.

    no_store adds Cache-Control: no-store (used on responses carrying tokens).
    """
    response = JSONResponse(status_code=envelope.status_code, content=envelope.to_wire())
    if no_store:
        response.headers["Cache-Control"] = "no-store"
    return response
