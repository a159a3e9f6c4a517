"""
FastAPI server: app factory, error boundary, health check.

create_app() wires settings, the Store and the identity verifier into
app.state, installs body-size, CORS and request-context middleware, mounts
the resource routers, and registers the global exception handlers that turn
every error into a JSON {"error": message} body. Internal details of 5xx
errors are logged, never returned.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortstay_api import __version__
from shortstay_api.api_server.dependencies import get_store
from shortstay_api.api_server.hosts import router as hosts_router
from shortstay_api.api_server.listings import router as listings_router
from shortstay_api.api_server.me import router as me_router
from shortstay_api.api_server.middleware import BodySizeLimitMiddleware, RequestContextMiddleware
from shortstay_api.api_server.rental_requests import router as requests_router
from shortstay_api.auth.identity import FirebaseIdentityVerifier, IdentityVerifier
from shortstay_api.config.settings import SERVICE_NAME, Settings, get_settings
from shortstay_api.core.exceptions import ShortStayError
from shortstay_api.database.store import Store
from shortstay_api.shortstay_logging import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR = "Internal server error"


# -----------------------------------------------------------------------------
# Error boundary
# -----------------------------------------------------------------------------


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _format_validation_errors(errors: list[dict[str, Any]]) -> str:
    """Flatten pydantic errors: "body.ratings.overall: Input should be ...; ..."."""
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else str(err.get("msg", "invalid")))
    return "; ".join(parts) or "Invalid request"


async def shortstay_error_handler(request: Request, exc: ShortStayError) -> JSONResponse:
    return _error(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _format_validation_errors(list(exc.errors()))
    logger.info("request_validation_failed", error=message)
    return _error(400, message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Consistent JSON error response for HTTPException (404 routes, 405 methods)."""
    return _error(exc.status_code, str(exc.detail))


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("request_store_error", error=str(exc), exc_info=exc)
    return _error(500, INTERNAL_ERROR)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("request_unhandled_error", error=str(exc), exc_info=exc)
    return _error(500, INTERNAL_ERROR)


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------


def create_app(
    settings: Settings | None = None,
    *,
    store: Store | None = None,
    verifier: IdentityVerifier | None = None,
) -> FastAPI:
    """
    Build the ASGI app.

    Settings come from the environment unless given (missing DATABASE_URL
    raises ConfigError). Tests pass their own Store and verifier.
    """
    settings = settings or get_settings()
    store = store or Store.from_settings(settings)
    verifier = verifier or FirebaseIdentityVerifier(
        project_id=settings.firebase_project_id,
        check_revoked=settings.firebase_check_revoked,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create tables on startup (non-fatal: /health reports the store as down); dispose pool on shutdown."""
        try:
            store.init_db()
        except SQLAlchemyError as e:
            logger.warning("store_init_skip", error=str(e))
        yield
        store.close()

    app = FastAPI(
        title="ShortStay API",
        description="Listings, rental requests and host recommendations for short-stay rentals.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.verifier = verifier

    app.add_middleware(BodySizeLimitMiddleware)
    allow_origins = ["*"] if settings.cors_origin == "*" else [settings.cors_origin]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(ShortStayError, shortstay_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/health")
    def health(store: Store = Depends(get_store)) -> JSONResponse:
        """Readiness probe: 200 when the store answers, 503 otherwise."""
        timestamp = datetime.now(timezone.utc).isoformat()
        if not store.ping():
            return JSONResponse(
                status_code=503,
                content={"ok": False, "service": SERVICE_NAME, "db": "unreachable", "timestamp": timestamp},
            )
        return JSONResponse(
            status_code=200,
            content={"ok": True, "service": SERVICE_NAME, "db": "ok", "timestamp": timestamp},
        )

    app.include_router(me_router)
    app.include_router(listings_router)
    app.include_router(hosts_router)
    app.include_router(requests_router)

    logger.info("app_created", cors_origin=settings.cors_origin, version=__version__)
    return app
