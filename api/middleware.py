"""
api/middleware.py -- Host header validation that answers with the envelope.

Starlette's TrustedHostMiddleware rejects unknown hosts with a plain-text
body. EnvelopeTrustedHostMiddleware keeps its matching rules (exact names,
"*." wildcards, www redirects) and only replaces the rejection response.
"""

from __future__ import annotations

import logging

from starlette.datastructures import Headers
from starlette.middleware.trustedhost import TrustedHostMiddleware
from starlette.types import Receive, Scope, Send

from api.responses import render
from core.envelope import failure

logger = logging.getLogger("noticeboard.api")


class EnvelopeTrustedHostMiddleware(TrustedHostMiddleware):
    def _accepts(self, host: str) -> bool:
        """True when the parent middleware would serve or redirect this host."""
        for pattern in self.allowed_hosts:
            if host == pattern or (pattern.startswith("*") and host.endswith(pattern[1:])):
                return True
            if self.www_redirect and "www." + host == pattern:
                return True
        return False

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if self.allow_any or scope["type"] != "http":
            await super().__call__(scope, receive, send)
            return

        host = Headers(scope=scope).get("host", "").split(":")[0]
        if self._accepts(host):
            await super().__call__(scope, receive, send)
            return

        logger.warning("Rejected request for untrusted host %r", host)
        response = render(failure("INVALID_INPUT", message="Invalid host header."))
        await response(scope, receive, send)
