"""
tests/conftest.py -- Shared test fixtures for noticeboard tests.

This module provides:
  - identities / sessions: fresh in-memory stores seeded with testuser/password
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: (client, stores) -- TestClient over the real ASGI stack
  - login_token(): helper that logs in through the API and returns the token

The DEBUG env var must be set before any core import so get_settings() falls
back to the development seed password rather than raising ValueError.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager
from types import SimpleNamespace

# CRITICAL: Set DEBUG before any core/api import so get_settings() accepts a
# missing SEED_PASSWORD in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.sessions import SessionRegistry
from auth.store import IdentityStore
from board.store import PostStore

SEED_USERNAME = "testuser"
SEED_PASSWORD = "password"  # noqa: S105 # nosec B105 -- test fixture credential


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def identities() -> IdentityStore:
    store = IdentityStore()
    store.add(SEED_USERNAME, SEED_PASSWORD)
    return store


@pytest.fixture
def sessions(identities: IdentityStore) -> SessionRegistry:
    return SessionRegistry(identities)


@pytest.fixture
def principal(identities: IdentityStore):
    return identities.get_by_username(SEED_USERNAME)


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------


def _patch_lifespan(stores: SimpleNamespace):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test stores into app.state so routes see isolated
    stores and the test can inspect them directly.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.identities = stores.identities
        app.state.sessions = stores.sessions
        app.state.posts = stores.posts
        yield

    return test_lifespan


def _make_stores() -> SimpleNamespace:
    identities = IdentityStore()
    identities.add(SEED_USERNAME, SEED_PASSWORD)
    identities.add("otheruser", "otherpass")
    return SimpleNamespace(
        identities=identities,
        sessions=SessionRegistry(identities),
        posts=PostStore(),
    )


@pytest.fixture
def api_client() -> Generator[tuple[TestClient, SimpleNamespace], None, None]:
    """Yield (client, stores) with fresh stores per test.

    Function-scoped because login/logout tests mutate the session registry
    and post tests depend on an empty board.
    """
    stores = _make_stores()
    app.router.lifespan_context = _patch_lifespan(stores)
    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, stores


@pytest.fixture
def crash_client() -> Generator[tuple[TestClient, SimpleNamespace], None, None]:
    """Like api_client but returns 500 responses instead of re-raising crashes."""
    stores = _make_stores()
    app.router.lifespan_context = _patch_lifespan(stores)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client, stores


def login_token(client: TestClient, username: str = SEED_USERNAME, password: str = SEED_PASSWORD) -> str:
    resp = client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]["token"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
