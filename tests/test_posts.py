"""
tests/test_posts.py -- Integration tests for the bulletin board routes.

Coverage:
  - Every /api/posts route rejects unauthenticated requests with 40101
  - Create: 201 with author taken from the session, missing fields -> 40002
  - List: newest first
  - Detail: found, unknown id -> 40402, non-numeric id -> 40003
"""

from __future__ import annotations

import pytest

from board.store import PostStore
from conftest import bearer, login_token


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/api/posts"),
        ("post", "/api/posts"),
        ("get", "/api/posts/1"),
    ],
)
def test_posts_require_auth(api_client, method, path) -> None:
    client, _ = api_client
    resp = getattr(client, method)(path)
    assert resp.status_code == 401
    assert resp.json()["resultCode"] == 40101


class TestCreatePost:
    def test_create_post(self, api_client) -> None:
        client, stores = api_client
        headers = bearer(login_token(client))
        resp = client.post("/api/posts", json={"title": "Hello", "content": "First post"}, headers=headers)
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert body["resultCode"] == 0
        assert body["data"]["id"] == 1
        assert body["data"]["author_username"] == "testuser"
        assert body["data"]["author_id"] == 1
        assert stores.posts.count() == 1

    @pytest.mark.parametrize(
        "payload",
        [
            {"title": "Only a title"},
            {"content": "Only content"},
            {"title": "   ", "content": "blank title"},
            {},
        ],
    )
    def test_missing_fields(self, api_client, payload) -> None:
        client, stores = api_client
        headers = bearer(login_token(client))
        resp = client.post("/api/posts", json=payload, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["resultCode"] == 40002
        assert stores.posts.count() == 0


class TestReadPosts:
    def test_list_newest_first(self, api_client) -> None:
        client, _ = api_client
        headers = bearer(login_token(client))
        for n in range(3):
            client.post("/api/posts", json={"title": f"t{n}", "content": f"c{n}"}, headers=headers)

        resp = client.get("/api/posts", headers=headers)
        assert resp.status_code == 200
        assert [p["title"] for p in resp.json()["data"]] == ["t2", "t1", "t0"]

    def test_list_empty(self, api_client) -> None:
        client, _ = api_client
        resp = client.get("/api/posts", headers=bearer(login_token(client)))
        assert resp.json() == {"resultCode": 0, "resultMessage": resp.json()["resultMessage"], "data": []}

    def test_get_post(self, api_client) -> None:
        client, _ = api_client
        headers = bearer(login_token(client))
        created = client.post("/api/posts", json={"title": "Hi", "content": "there"}, headers=headers).json()
        resp = client.get(f"/api/posts/{created['data']['id']}", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["data"] == created["data"]

    def test_get_unknown_post(self, api_client) -> None:
        client, _ = api_client
        resp = client.get("/api/posts/999", headers=bearer(login_token(client)))
        assert resp.status_code == 404
        assert resp.json()["resultCode"] == 40402

    def test_get_non_numeric_id(self, api_client) -> None:
        client, _ = api_client
        resp = client.get("/api/posts/abc", headers=bearer(login_token(client)))
        assert resp.status_code == 400
        assert resp.json()["resultCode"] == 40003


def test_store_orders_same_tick_posts_by_id() -> None:
    store = PostStore()
    first = store.create("a", "a", author_id=1, author_username="u")
    second = store.create("b", "b", author_id=1, author_username="u")
    assert [p.id for p in store.list_recent()][:2] == [second.id, first.id]
    assert store.get(first.id) == first
    assert store.get(42) is None
