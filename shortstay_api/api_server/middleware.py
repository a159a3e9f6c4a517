"""
HTTP middleware: request ids, access logging, body size limit.

RequestContextMiddleware binds request_id (from X-Request-ID or generated)
into structlog contextvars so every log line of the request carries it,
echoes it back in the response, and logs method, path, status and duration
once per request.

BodySizeLimitMiddleware rejects bodies over 2 MB with 413. A declared
Content-Length is checked up front; chunked bodies are counted as they are
received, and the handler's body read fails once the limit is crossed.
"""

from __future__ import annotations

import time
import uuid

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from shortstay_api.shortstay_logging import bind_request, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_BODY_BYTES = 2 * 1024 * 1024
BODY_TOO_LARGE = "Request body too large"


class RequestBodyTooLarge(HTTPException):
    def __init__(self) -> None:
        super().__init__(status_code=413, detail=BODY_TOO_LARGE)


class BodySizeLimitMiddleware:
    def __init__(self, app: ASGIApp, max_body_bytes: int = MAX_BODY_BYTES) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Request(scope).headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_body_bytes:
            logger.warning("http_request_too_large", content_length=int(content_length))
            await JSONResponse(status_code=413, content={"error": BODY_TOO_LARGE})(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    logger.warning("http_request_too_large", received_bytes=received)
                    raise RequestBodyTooLarge()
            return message

        await self.app(scope, limited_receive, send)


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        bind_request(request_id, method=request.method, path=request.url.path)
        t0 = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "http_request_failed",
                duration_ms=round((time.perf_counter() - t0) * 1000, 2),
            )
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "http_request",
            status=response.status_code,
            duration_ms=round((time.perf_counter() - t0) * 1000, 2),
        )
        return response
