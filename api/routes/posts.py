"""
api/routes/posts.py -- Bulletin board endpoints.

Routes:
  GET  /api/posts            -- all posts, newest first
  POST /api/posts            -- create a post (201)
  GET  /api/posts/{post_id}  -- one post

Every route requires an active session. The router-level dependency runs the
gate; handlers that need the author read it from request.state.principal.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import PostCreate, PostOut
from api.responses import render
from auth.dependencies import get_current_principal
from auth.models import Principal
from board.store import PostStore
from core.envelope import failure, success
from core.errors import ApiError

logger = logging.getLogger("noticeboard.board")

router = APIRouter(dependencies=[Depends(get_current_principal)])


@router.get("/posts")
def list_posts(request: Request) -> JSONResponse:
    posts: PostStore = request.app.state.posts
    return render(success([PostOut.from_post(p).model_dump() for p in posts.list_recent()]))


@router.post("/posts")
def create_post(request: Request, body: Optional[PostCreate] = None) -> JSONResponse:
    """Create a post authored by the current principal. Title and content are required."""
    posts: PostStore = request.app.state.posts
    principal: Principal = request.state.principal
    body = body or PostCreate()
    if not body.title or not body.content:
        logger.warning("Post creation with missing title or content by %r", principal.username)
        raise ApiError(failure("MISSING_REQUIRED_FIELD", message="Both title and content are required."))

    post = posts.create(body.title, body.content, author_id=principal.id, author_username=principal.username)
    return render(success(PostOut.from_post(post).model_dump(), status_code=201))


@router.get("/posts/{post_id}")
def get_post(request: Request, post_id: str) -> JSONResponse:
    """Return one post. The id is validated here so a bad format gets its own result code."""
    posts: PostStore = request.app.state.posts
    try:
        numeric_id = int(post_id)
    except ValueError:
        raise ApiError(failure("INVALID_POST_ID_FORMAT")) from None

    post = posts.get(numeric_id)
    if post is None:
        raise ApiError(failure("POST_NOT_FOUND"))
    return render(success(PostOut.from_post(post).model_dump()))
