"""
Authentication: bearer-token verification against the identity provider.
"""

from shortstay_api.auth.identity import (
    AuthedUser,
    FirebaseIdentityVerifier,
    IdentityVerifier,
    parse_bearer_token,
)

__all__ = [
    "AuthedUser",
    "FirebaseIdentityVerifier",
    "IdentityVerifier",
    "parse_bearer_token",
]
