"""
Pytest tests for GET /me (user bootstrap).
"""

from __future__ import annotations

from shortstay_api.auth.identity import AuthedUser
from shortstay_api.database import repositories
from shortstay_api.database.models import User

from conftest import auth_headers

ZERO_STATS = {"hostScore": 0, "avgRating": 0, "recsCount": 0}


def test_me_creates_user_on_first_call(client, store):
    r = client.get("/me", headers=auth_headers("alice"))
    assert r.status_code == 200
    user = r.json()["user"]
    assert user["id"] == "alice"
    assert user["email"] == "alice@example.com"
    assert user["name"] == "Alice"
    assert user["avatarUrl"] == "https://img.example.com/alice.png"
    assert user["hostStats"] == ZERO_STATS
    assert user["createdAt"]
    with store.session_scope() as session:
        assert session.query(User).count() == 1


def test_me_refreshes_profile_but_keeps_created_at(client, store, verifier):
    """Later calls overwrite email/name/avatar from the token; createdAt is insert-only."""
    first = client.get("/me", headers=auth_headers("alice")).json()["user"]
    verifier.users["token-alice"] = AuthedUser(uid="alice", email="a@new.example.com", name="Alice B", picture=None)

    second = client.get("/me", headers=auth_headers("alice")).json()["user"]
    assert second["name"] == "Alice B"
    assert second["email"] == "a@new.example.com"
    assert second["avatarUrl"] is None
    assert second["createdAt"] == first["createdAt"]
    with store.session_scope() as session:
        assert session.query(User).count() == 1


def test_me_shows_stats_after_recommendation(client):
    client.get("/me", headers=auth_headers("alice"))
    client.post(
        "/hosts/alice/recommendations",
        json={"ratings": {"overall": 4, "trust": 4, "accuracy": 4, "experience": 4}},
        headers=auth_headers("bob"),
    )
    stats = client.get("/me", headers=auth_headers("alice")).json()["user"]["hostStats"]
    assert stats["avgRating"] == 4.0
    assert stats["recsCount"] == 1
    assert stats["updatedAt"]


def test_me_after_stats_keeps_stats_and_fills_profile(client, store):
    """A host row created by the aggregator gets its createdAt and profile on first /me."""
    stats = client.post(
        "/hosts/carol/recommendations",
        json={"ratings": {"overall": 3, "trust": 3, "accuracy": 3, "experience": 3}},
        headers=auth_headers("bob"),
    ).json()["hostStats"]
    assert stats["recsCount"] == 1

    user = client.get("/me", headers=auth_headers("carol")).json()["user"]
    assert user["name"] == "Carol"
    assert user["hostStats"]["recsCount"] == 1
    # createdAt is insert-only and the aggregator inserted the row without one
    assert user["createdAt"] is None


def test_me_requires_auth(client):
    r = client.get("/me")
    assert r.status_code == 401
    assert r.json() == {"error": "Missing Bearer token"}


def test_bootstrap_user_retries_after_concurrent_insert(store, monkeypatch):
    """An IntegrityError from a racing first insert is retried once as an update."""
    from sqlalchemy.exc import IntegrityError

    real_once = repositories._bootstrap_user_once
    calls = []

    def flaky(*args, **kwargs):
        calls.append(args)
        if len(calls) == 1:
            real_once(*args, **kwargs)
            raise IntegrityError("INSERT INTO users", {}, Exception("duplicate key"))
        return real_once(*args, **kwargs)

    monkeypatch.setattr(repositories, "_bootstrap_user_once", flaky)
    profile = repositories.bootstrap_user(store, "dave", email=None, name="Dave", avatar_url=None)
    assert profile["name"] == "Dave"
    assert len(calls) == 2
