"""
Store: SQLAlchemy engine, session scope and connectivity checks.

One Store is constructed at startup and handed to handlers through FastAPI
dependencies (app.state.store). The engine holds a bounded, thread-safe
connection pool; every operation runs in its own session scope.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from shortstay_api.alerts import send_alert
from shortstay_api.database.models import Base
from shortstay_api.shortstay_logging import get_logger

logger = get_logger(__name__)


def _redact(url: str) -> str:
    """Host/database part of a URL, without credentials, for logs."""
    return url.split("?")[0].split("@")[-1].split("//")[-1]


class Store:
    """
    Typed accessor for the marketplace tables.

    Args:
        url: SQLAlchemy database URL.
        database_name: optional override of the URL's database component.
        pool_size: pool size for server databases (ignored for SQLite).
        alert_webhook: optional URL alerted when the initial connection fails.
    """

    def __init__(
        self,
        url: str,
        *,
        database_name: str | None = None,
        pool_size: int = 10,
        alert_webhook: str | None = None,
    ) -> None:
        sa_url = make_url(url)
        if database_name:
            sa_url = sa_url.set(database=database_name)
        self.url = sa_url.render_as_string(hide_password=False)
        self.pool_size = pool_size
        self.alert_webhook = alert_webhook
        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @classmethod
    def from_settings(cls, settings: Any) -> "Store":
        return cls(
            settings.database_url,
            database_name=settings.database_name,
            pool_size=settings.db_pool_size,
            alert_webhook=settings.error_alert_webhook,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def engine(self) -> Engine:
        """Create or return cached engine."""
        if self._engine is None:
            kwargs: dict[str, Any] = {"pool_pre_ping": True}
            if self.is_sqlite:
                kwargs["connect_args"] = {"check_same_thread": False}
            else:
                kwargs["pool_size"] = self.pool_size
            self._engine = create_engine(self.url, **kwargs)
            logger.info("store_engine_created", url=_redact(self.url))
        return self._engine

    def _get_session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
                bind=self.engine,
            )
        return self._session_factory

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Context manager for a single session. Commits on success, rolls back on error."""
        session = self._get_session_factory()()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_db(self) -> None:
        """
        Create tables if they do not exist. Safe to call on every startup.

        A connection failure is logged with a searchable event name, alerted
        to ERROR_ALERT_WEBHOOK when configured, and re-raised.
        """
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            logger.error("store_connection_failed", url=_redact(self.url), error=str(e))
            send_alert(
                self.alert_webhook,
                "store_connection_failed",
                str(e),
            )
            raise
        logger.info("store_init_db", url=_redact(self.url))

    def ping(self) -> bool:
        """True if the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error("store_ping_failed", error=str(e))
            return False

    def close(self) -> None:
        """Dispose the pool. The Store can be reused; the engine is recreated lazily."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("store_closed")
        self._engine = None
        self._session_factory = None
