"""Feed API endpoints.

Serves the catalog feed as a streamed delimited text document and the
discovery document describing the accepted options.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import AsyncExitStack

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response, StreamingResponse
from starlette.types import Receive, Scope, Send

from catalogfeed.api.deps import CatalogProvider, get_catalog_provider, parse_bool, parse_int
from catalogfeed.api.errors import error_response
from catalogfeed.api.schemas import DiscoveryResponse, ErrorResponse
from catalogfeed.domain.exceptions import FeedValidationError, InvalidFeedConfigError
from catalogfeed.domain.value_objects import Charset
from catalogfeed.feed.config import FeedConfig
from catalogfeed.feed.discovery import build_discovery
from catalogfeed.feed.exporter import FeedExporter
from catalogfeed.feed.links import LinkBuilder
from catalogfeed.infrastructure.config import settings

logger = structlog.get_logger()

router = APIRouter(prefix="/feed", tags=["Feed"])


class FeedStreamingResponse(StreamingResponse):
    """Streaming response that releases the run once sending ends.

    Release happens whether the body was sent completely, the client went
    away or sending failed.
    """

    def __init__(
        self,
        content: AsyncIterator[bytes],
        release: Callable[[], Awaitable[None]],
        **kwargs,
    ) -> None:
        super().__init__(content, **kwargs)
        self.release = release

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            await asyncio.shield(self.release())


async def _discovery(request: Request, provider: CatalogProvider) -> DiscoveryResponse:
    async with provider() as source:
        document = await build_discovery(
            source,
            platform_name=settings.platform_name,
            platform_version=settings.platform_version,
            module_version=settings.api_version,
            feed_url=str(request.url_for("get_feed")),
            show_prices=settings.feed_show_prices,
            show_final_prices=settings.feed_show_final_prices,
        )
    return DiscoveryResponse.model_validate(document)


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    summary="Get catalog feed",
    description="Stream the catalog as delimited text, optionally a window of it.",
    responses={
        200: {"content": {"text/plain": {}}, "description": "Feed body"},
        400: {"model": ErrorResponse, "description": "Invalid feed request"},
    },
)
async def get_feed(
    request: Request,
    language: str | None = None,
    currency: str | None = None,
    chunk_size: str | None = None,
    limit: str | None = None,
    offset: str | None = None,
    prices: str | None = None,
    taxes: str | None = None,
    latin1: str | None = None,
    config: str | None = None,
    provider: CatalogProvider = Depends(get_catalog_provider),
) -> Response:
    """Stream the catalog feed.

    Parameters are read leniently: booleans accept true/yes/on and
    false/no/off, and unreadable numbers fall back to defaults. A limit
    above zero restricts the feed to [offset, offset + limit); the header
    line is only sent when that window starts at zero.

    Returns:
        Streaming text response, discovery JSON when config is set, or an
        error payload when the request is invalid.
    """
    if parse_bool(config, False):
        return JSONResponse(content=(await _discovery(request, provider)).model_dump())

    window_limit = parse_int(limit, 0) or 0
    try:
        feed_config = FeedConfig.from_settings(
            settings,
            language=language,
            currency=currency,
            chunk_size=parse_int(chunk_size, None),
            show_prices=parse_bool(prices, settings.feed_show_prices),
            show_final_prices=parse_bool(taxes, settings.feed_show_final_prices),
            charset=Charset.LATIN1 if parse_bool(latin1, False) else Charset.UTF8,
            limit=window_limit if window_limit > 0 else None,
            offset=parse_int(offset, 0) if window_limit > 0 else None,
        )
    except InvalidFeedConfigError as exc:
        logger.warning("Invalid feed parameters", error=exc.message)
        return error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            error="ERR_CONFIG",
            message=exc.message,
            hint=str(exc.details.get("reason", "")),
        )

    links = LinkBuilder(settings.store_url, settings.product_page, settings.images_dir)

    stack = AsyncExitStack()
    try:
        source = await stack.enter_async_context(provider())
        run = await FeedExporter(source, feed_config, links).prepare()
    except FeedValidationError as exc:
        await stack.aclose()
        return error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            error=exc.code,
            message=exc.message,
            hint=exc.hint,
        )
    except BaseException:
        await stack.aclose()
        raise

    body = run.stream()

    async def release() -> None:
        try:
            await body.aclose()
        finally:
            await stack.aclose()

    return FeedStreamingResponse(
        body,
        release=release,
        media_type=f"text/plain; charset={feed_config.charset.value.lower()}",
    )


@router.get(
    "/config",
    response_model=DiscoveryResponse,
    status_code=status.HTTP_200_OK,
    summary="Get feed options",
    description="List languages and currencies a feed can be requested in.",
)
async def get_feed_config(
    request: Request,
    provider: CatalogProvider = Depends(get_catalog_provider),
) -> DiscoveryResponse:
    """Get the discovery document.

    Returns:
        Platform, module version, feed URL and accepted options.
    """
    return await _discovery(request, provider)
