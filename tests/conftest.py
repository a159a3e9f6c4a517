"""
Pytest fixtures for ShortStay API tests. Uses a temporary SQLite store and a
fake identity verifier, so no database server or Firebase project is needed.
"""

from __future__ import annotations

import pytest

from shortstay_api.auth.identity import AuthedUser
from shortstay_api.core.exceptions import AuthError

# token -> identity accepted by FakeVerifier
TEST_USERS = {
    "token-alice": AuthedUser(uid="alice", email="alice@example.com", name="Alice", picture="https://img.example.com/alice.png"),
    "token-bob": AuthedUser(uid="bob", email="bob@example.com", name="Bob", picture=None),
    "token-carol": AuthedUser(uid="carol", email="carol@example.com", name="Carol", picture=None),
}


class FakeVerifier:
    """Identity verifier backed by TEST_USERS; any other token is rejected."""

    def __init__(self, users: dict[str, AuthedUser] | None = None) -> None:
        self.users = dict(TEST_USERS if users is None else users)
        self.calls: list[str] = []

    def verify(self, token: str) -> AuthedUser:
        self.calls.append(token)
        try:
            return self.users[token]
        except KeyError:
            raise AuthError("Invalid/expired token") from None


def auth_headers(uid: str) -> dict[str, str]:
    """Authorization header for one of the TEST_USERS by uid."""
    return {"Authorization": f"Bearer token-{uid}"}


@pytest.fixture
def store(tmp_path):
    """Fresh Store on a temporary SQLite file with tables created."""
    from shortstay_api.database.store import Store

    s = Store(f"sqlite:///{tmp_path / 'shortstay.db'}")
    s.init_db()
    yield s
    s.close()


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
def app(store, verifier):
    from shortstay_api.api_server.server import create_app
    from shortstay_api.config.settings import Settings

    return create_app(Settings(database_url=store.url), store=store, verifier=verifier)


@pytest.fixture
def client(app):
    """FastAPI TestClient over the temporary store."""
    from fastapi.testclient import TestClient

    return TestClient(app)
