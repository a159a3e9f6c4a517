"""
Core utilities: application exceptions shared by the store, aggregator and API layers.
"""

from shortstay_api.core.exceptions import (
    AuthError,
    ConfigError,
    ConflictError,
    NotFoundError,
    ShortStayError,
    ValidationError,
)

__all__ = [
    "AuthError",
    "ConfigError",
    "ConflictError",
    "NotFoundError",
    "ShortStayError",
    "ValidationError",
]
