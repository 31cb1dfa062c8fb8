"""
tests/test_health.py -- Integration tests for the public status endpoints.

Covers:
  - GET /api/health returns a success envelope with status and version
  - GET / reports store sizes, including active sessions
  - Neither requires authentication
"""

from __future__ import annotations

from conftest import bearer, login_token


def test_health_returns_success_envelope(api_client):
    client, _ = api_client
    resp = client.get("/api/health", headers={})
    assert resp.status_code == 200
    body = resp.json()
    assert body["resultCode"] == 0
    assert body["data"]["status"] == "ok"
    assert "version" in body["data"]


def test_status_counts(api_client):
    client, _ = api_client
    data = client.get("/").json()["data"]
    assert data["principals"] == 2
    assert data["posts"] == 0
    assert data["active_sessions"] == 0

    token = login_token(client)
    client.post("/api/posts", json={"title": "t", "content": "c"}, headers=bearer(token))
    data = client.get("/").json()["data"]
    assert data["active_sessions"] == 1
    assert data["posts"] == 1
