"""Catalog feed service main application module.

This module initializes the FastAPI application and configures
logging, middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI

from catalogfeed.api.errors import setup_error_handlers
from catalogfeed.api.feed import router as feed_router
from catalogfeed.api.health import router as health_router
from catalogfeed.api.middleware import setup_middleware
from catalogfeed.infrastructure.config import settings
from catalogfeed.infrastructure.database import engine
from catalogfeed.infrastructure.logging import setup_logging

setup_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    logger.info(
        "Starting catalog feed service",
        version=settings.api_version,
        debug=settings.debug,
        store_url=settings.store_url,
    )

    yield

    logger.info("Shutting down catalog feed service")
    await engine.dispose()


app = FastAPI(
    title="Catalog Feed",
    description="Product catalog feed export for search indexing",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

setup_middleware(app)
setup_error_handlers(app)

app.include_router(health_router, tags=["Health"])
app.include_router(feed_router)

