"""
board/models.py -- Domain dataclass for bulletin board posts.

Pattern: Data class (pure data container, zero logic), same as auth/models.py.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Post:
    id: int
    title: str
    content: str
    author_id: int
    author_username: str
    created_at: str  # ISO 8601, UTC

    def to_dict(self) -> dict:
        return asdict(self)
