"""API middleware for the feed service.

Request ID correlation as a plain ASGI middleware: it wraps ``send``
instead of buffering the response, so streamed feeds pass through
untouched and the request ID stays bound to log events emitted while the
body is produced.
"""

import time
from uuid import uuid4

import structlog
from fastapi import FastAPI
from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = structlog.get_logger()


class RequestIdMiddleware:
    """Middleware to add request ID for correlation.

    Generates or extracts a request ID and adds it to:
    - Request state for access in handlers
    - Response headers for client correlation
    - Log context for tracing
    """

    HEADER_NAME = "X-Request-ID"

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Process one request with a correlation ID.

        The logged duration covers the whole response body, so for a feed
        it is the duration of the run.
        """
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(self.HEADER_NAME) or str(uuid4())
        scope.setdefault("state", {})["request_id"] = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        status_code = 500

        async def send_with_request_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                MutableHeaders(scope=message)[self.HEADER_NAME] = request_id
            await send(message)

        start_time = time.perf_counter()
        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            logger.info(
                "Request completed",
                method=scope["method"],
                path=scope["path"],
                status_code=status_code,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(RequestIdMiddleware)
