"""
Identity verification: Firebase ID tokens -> AuthedUser.

The verifier is constructed once and injected into the app; handlers receive
the resulting AuthedUser as an explicit argument. Firebase Admin is
initialised lazily on the first verification so the app can boot (and be
tested) without Google credentials.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Protocol

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from firebase_admin.exceptions import FirebaseError

from shortstay_api.core.exceptions import AuthError
from shortstay_api.shortstay_logging import get_logger

logger = get_logger(__name__)

_BEARER_RE = re.compile(r"^Bearer (.+)$")
TOKEN_PREVIEW_LEN = 10


@dataclass(frozen=True)
class AuthedUser:
    """Verified caller identity: provider subject id plus profile claims."""

    uid: str
    email: str | None = None
    name: str | None = None
    picture: str | None = None


class IdentityVerifier(Protocol):
    def verify(self, token: str) -> AuthedUser:
        """Return the caller for a valid token; raise AuthError otherwise."""
        ...


def parse_bearer_token(header: str | None) -> str:
    """
    Extract the token from an Authorization header.

    Raises:
        AuthError: header missing or not of the form "Bearer <token>".
    """
    match = _BEARER_RE.match(header or "")
    if not match:
        logger.warning("auth_header_missing_or_malformed", header_present=bool(header))
        raise AuthError("Missing Bearer token")
    return match.group(1)


def _token_preview(token: str) -> str:
    return token[:TOKEN_PREVIEW_LEN] + "..."


class FirebaseIdentityVerifier:
    """
    Verify Firebase ID tokens with firebase-admin.

    Args:
        project_id: Firebase project that issues the tokens. Admin must verify
            against this project or aud/iss checks fail.
        check_revoked: also reject revoked tokens (one extra round trip).
    """

    def __init__(self, project_id: str | None = None, check_revoked: bool = False) -> None:
        self.project_id = project_id
        self.check_revoked = check_revoked
        self._app: firebase_admin.App | None = None

    def _get_app(self) -> firebase_admin.App:
        if self._app is None:
            if firebase_admin._apps:
                self._app = firebase_admin.get_app()
            else:
                options: dict[str, Any] = {}
                if self.project_id:
                    options["projectId"] = self.project_id
                self._app = firebase_admin.initialize_app(
                    credentials.ApplicationDefault(), options or None
                )
            logger.info("firebase_admin_initialized", project_id=self._app.project_id)
        return self._app

    def verify(self, token: str) -> AuthedUser:
        logger.debug("auth_verifying_token", token_preview=_token_preview(token))
        try:
            decoded = firebase_auth.verify_id_token(
                token, app=self._get_app(), check_revoked=self.check_revoked
            )
        except (ValueError, FirebaseError) as e:
            logger.error(
                "auth_verify_failed",
                error=str(e),
                code=getattr(e, "code", None),
                error_class=type(e).__name__,
            )
            raise AuthError("Invalid/expired token") from e
        return AuthedUser(
            uid=decoded["uid"],
            email=decoded.get("email"),
            name=decoded.get("name"),
            picture=decoded.get("picture"),
        )
