"""
board/store.py -- In-memory repository for bulletin board posts.

Pattern: Repository. Routes never touch the underlying list directly.
Post ids are assigned monotonically starting at 1. Posts are immutable once
created; there is no edit or delete path.

Thread-safe: FastAPI runs sync handlers in a worker pool.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone

from board.models import Post

logger = logging.getLogger("noticeboard.board")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class PostStore:
    """Repository for Post entities.

    Usage:
        store = PostStore()
        post = store.create("Hello", "First post", author_id=1, author_username="testuser")
        store.get(post.id)
        store.list_recent()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._posts: dict[int, Post] = {}
        self._next_id = 1

    def create(self, title: str, content: str, author_id: int, author_username: str) -> Post:
        with self._lock:
            post = Post(
                id=self._next_id,
                title=title,
                content=content,
                author_id=author_id,
                author_username=author_username,
                created_at=_now_iso(),
            )
            self._next_id += 1
            self._posts[post.id] = post
        logger.info("Post %d created by %r", post.id, author_username)
        return post

    def get(self, post_id: int) -> Post | None:
        with self._lock:
            return self._posts.get(post_id)

    def list_recent(self) -> list[Post]:
        """Return all posts, newest first (id breaks ties within one clock tick)."""
        with self._lock:
            posts = list(self._posts.values())
        return sorted(posts, key=lambda p: (p.created_at, p.id), reverse=True)

    def count(self) -> int:
        with self._lock:
            return len(self._posts)
