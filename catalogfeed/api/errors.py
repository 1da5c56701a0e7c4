"""Error responses.

Every error leaves the service as the same ``ErrorResponse`` payload the
feed uses for rejected requests: ``{"error", "message", "hint"}`` plus the
request ID.
"""

from http import HTTPStatus

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalogfeed.api.middleware import RequestIdMiddleware
from catalogfeed.api.schemas import ErrorResponse

logger = structlog.get_logger()


def error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    hint: str = "",
) -> JSONResponse:
    """Build an error response for a request.

    Args:
        request: Request being answered.
        status_code: HTTP status.
        error: Error code, e.g. ERR_CURRENCY.
        message: Human-readable message.
        hint: Accepted values or how to fix the request.

    Returns:
        JSON response carrying the request ID.
    """
    request_id = getattr(request.state, "request_id", None)
    payload = ErrorResponse(error=error, message=message, hint=hint, request_id=request_id)
    headers = {RequestIdMiddleware.HEADER_NAME: request_id} if request_id else None
    return JSONResponse(status_code=status_code, content=payload.model_dump(), headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Answer HTTP errors (unknown routes, wrong methods) in the error format."""
    try:
        phrase = HTTPStatus(exc.status_code).phrase
    except ValueError:
        phrase = "Error"
    return error_response(
        request,
        exc.status_code,
        error="ERR_" + phrase.upper().replace(" ", "_").replace("-", "_"),
        message=exc.detail if isinstance(exc.detail, str) else phrase,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected failure and answer with a generic 500."""
    logger.exception(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        error="ERR_INTERNAL",
        message="An internal error occurred",
    )


def setup_error_handlers(app: FastAPI) -> None:
    """Register the error handlers.

    Args:
        app: FastAPI application instance.
    """
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
