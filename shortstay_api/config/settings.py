"""
Application settings and environment configuration.

- DATABASE_URL: SQLAlchemy URL (required; missing is fatal at boot)
- DATABASE_NAME: optional override of the database part of DATABASE_URL
- DB_POOL_SIZE: connection pool size for server databases (default: 10)
- CORS_ORIGIN: allowed cross-origin value (default: *)
- PORT: listen port (default: 3000)
- FIREBASE_PROJECT_ID: project issuing ID tokens (fallback GOOGLE_CLOUD_PROJECT, GCLOUD_PROJECT)
- FIREBASE_CHECK_REVOKED: "true" to also check token revocation
- ERROR_ALERT_WEBHOOK: optional URL alerted when the store connection fails
Loads .env from project root when available.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from shortstay_api.core.exceptions import ConfigError

# Project root: config is shortstay_api/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_ROOT = _CONFIG_DIR.parent.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_PORT = 3000
DEFAULT_POOL_SIZE = 10
SERVICE_NAME = "shortstay-api"


def load_shortstay_env() -> None:
    """Load .env from project root. Safe to call multiple times; real env vars win."""
    load_dotenv(_ENV_PATH)


def _env(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def _normalize_database_url(url: str) -> str:
    """SQLAlchemy 2.x does not accept 'postgres://'; route it to psycopg 3."""
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


@dataclass(frozen=True)
class Settings:
    """Typed service settings, built once at startup."""

    database_url: str
    database_name: str | None = None
    db_pool_size: int = DEFAULT_POOL_SIZE
    cors_origin: str = "*"
    port: int = DEFAULT_PORT
    firebase_project_id: str | None = None
    firebase_check_revoked: bool = False
    error_alert_webhook: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the process environment.

        Raises:
            ConfigError: DATABASE_URL is missing, or a numeric variable is not an integer.
        """
        load_shortstay_env()
        database_url = _env("DATABASE_URL")
        if not database_url:
            raise ConfigError("Missing DATABASE_URL env var")
        try:
            port = int(_env("PORT", str(DEFAULT_PORT)))
            pool_size = int(_env("DB_POOL_SIZE", str(DEFAULT_POOL_SIZE)))
        except ValueError as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e
        project_id = (
            _env("FIREBASE_PROJECT_ID")
            or _env("GOOGLE_CLOUD_PROJECT")
            or _env("GCLOUD_PROJECT")
        )
        return cls(
            database_url=_normalize_database_url(database_url),
            database_name=_env("DATABASE_NAME") or None,
            db_pool_size=pool_size,
            cors_origin=_env("CORS_ORIGIN", "*"),
            port=port,
            firebase_project_id=project_id or None,
            firebase_check_revoked=_env("FIREBASE_CHECK_REVOKED").lower() == "true",
            error_alert_webhook=_env("ERROR_ALERT_WEBHOOK") or None,
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them from the environment on first call."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings_for_test() -> None:
    """Clear cached settings. For tests only."""
    global _settings
    _settings = None
