"""HTTP gateway — POST /rpc/{subject} relays raw bytes to the router.

Invariants:
    - Reply bytes are returned untouched, sentinels included, with HTTP 200
    - Unknown subjects are the only HTTP-level error (404)
"""

import pytest
from fastapi.testclient import TestClient

from core.errors import DELETED, NOT_FOUND
from main import create_app


@pytest.fixture
def client(router):
    with TestClient(create_app(router)) as c:
        yield c


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_set_then_get(client):
    res = client.post("/rpc/user.set", content=b'{"username":"fred","password":"supu"}')
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("application/json")
    created = res.json()
    assert created["username"] == "fred"
    assert created["password"] != "supu"

    res = client.post("/rpc/user.get", content=f'{{"id":{created["id"]}}}')
    assert res.json()["id"] == created["id"]


def test_not_found_sentinel_passes_through(client):
    res = client.post("/rpc/user.get", content=b'{"id":32}')
    assert res.status_code == 200
    assert res.content == NOT_FOUND


def test_delete_then_find(client):
    created = client.post("/rpc/user.set", content=b'{"username":"fred"}').json()

    res = client.post("/rpc/user.del", content=f'{{"id":{created["id"]}}}')
    assert res.content == DELETED

    assert client.post("/rpc/user.find", content=b"{}").json() == []


def test_empty_body_find_lists_all(client):
    client.post("/rpc/user.set", content=b'{"username":"fred"}')
    res = client.post("/rpc/user.find")
    assert [u["username"] for u in res.json()] == ["fred"]


def test_unknown_subject_is_404(client):
    res = client.post("/rpc/user.nope", content=b"{}")
    assert res.status_code == 404
