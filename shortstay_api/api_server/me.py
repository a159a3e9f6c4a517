"""
FastAPI router: GET /me: bootstrap and read the caller's own profile.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from shortstay_api.api_server.dependencies import get_store, require_auth
from shortstay_api.auth.identity import AuthedUser
from shortstay_api.database import repositories
from shortstay_api.database.store import Store

router = APIRouter(tags=["me"])


@router.get("/me")
def get_me(
    user: AuthedUser = Depends(require_auth),
    store: Store = Depends(get_store),
) -> dict[str, Any]:
    """
    Create the caller's user record on first call, refresh email/name/avatar
    from the verified token, and return the merged profile. hostStats is
    zeros until the caller receives a recommendation.
    """
    profile = repositories.bootstrap_user(
        store,
        user.uid,
        email=user.email,
        name=user.name,
        avatar_url=user.picture,
    )
    return {"user": profile}
