"""
API request and response models for noticeboard REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the payloads
that travel inside the envelope's data field. They are intentionally separate
from the dataclasses in auth/models.py and board/models.py, which own the
internal domain representation. Route handlers map between the two.

Request fields are optional at the schema level on purpose: a missing or
blank required field must surface as MISSING_REQUIRED_FIELD (40002), not as
a generic schema validation failure.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import Principal
from board.models import Post

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login.

    No whitespace stripping and no length limit: identity lookup is
    exact-match, so the flow checks for blank values and passes the
    originals through. Accepted as JSON or as an HTML form.
    """

    username: Optional[str] = None
    password: Optional[str] = None


class PostCreate(BaseModel):
    """Request body for POST /api/posts."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, max_length=200)
    content: Optional[str] = Field(default=None, max_length=10000)


# ---------------------------------------------------------------------------
# Response payloads (envelope data)
# ---------------------------------------------------------------------------


class PrincipalOut(BaseModel):
    """Client-safe view of a principal -- the credential is never included."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str

    @classmethod
    def from_principal(cls, principal: Principal) -> "PrincipalOut":
        return cls(id=principal.id, username=principal.username)


class PostOut(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    content: str
    author_id: int
    author_username: str
    created_at: str

    @classmethod
    def from_post(cls, post: Post) -> "PostOut":
        """Factory Method -- the mapping lives beside the output model."""
        return cls(**post.to_dict())


class StatusData(BaseModel):
    """Payload for GET / -- liveness plus in-memory store sizes."""

    model_config = ConfigDict(frozen=True)

    message: str
    version: str
    principals: int
    posts: int
    active_sessions: int


class HealthData(BaseModel):
    """Payload for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
