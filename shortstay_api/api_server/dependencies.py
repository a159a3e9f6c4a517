"""
FastAPI dependencies: the shared Store, the identity verifier, and the
authenticated caller.
"""

from __future__ import annotations

import structlog
from fastapi import Depends, Header, Request

from shortstay_api.auth.identity import AuthedUser, IdentityVerifier, parse_bearer_token
from shortstay_api.database.store import Store


def get_store(request: Request) -> Store:
    """Dependency: the app-scoped Store built in create_app()."""
    return request.app.state.store


def get_verifier(request: Request) -> IdentityVerifier:
    return request.app.state.verifier


def require_auth(
    authorization: str | None = Header(None),
    verifier: IdentityVerifier = Depends(get_verifier),
) -> AuthedUser:
    """
    Dependency: verified caller from "Authorization: Bearer <token>".

    Raises AuthError (401) when the header is missing/malformed or the token
    is invalid or expired; the handler never runs in that case.
    """
    token = parse_bearer_token(authorization)
    user = verifier.verify(token)
    structlog.contextvars.bind_contextvars(user_id=user.uid)
    return user
