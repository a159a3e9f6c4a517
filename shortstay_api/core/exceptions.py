"""
Application-level exceptions.

Each error carries the HTTP status the API boundary answers with and a
message that is safe to show to clients. Store failures are not wrapped:
SQLAlchemy errors reach the boundary as-is and become a generic 500.
"""

from __future__ import annotations


class ShortStayError(Exception):
    """Base class for errors translated by the API error boundary."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ShortStayError):
    """Malformed or out-of-range client input."""

    status_code = 400


class AuthError(ShortStayError):
    """Missing, invalid or expired bearer credential."""

    status_code = 401


class ConflictError(ShortStayError):
    """Business-rule conflict, e.g. a duplicate recommendation."""

    status_code = 409


class NotFoundError(ShortStayError):
    """Missing resource."""

    status_code = 404


class ConfigError(RuntimeError):
    """Fatal configuration problem detected at boot."""
