"""FastAPI dependencies and request parameter parsing.

The feed outlives the request handler (the body is streamed after the
handler returns), so handlers receive a provider that opens the catalog
for the duration of a run instead of a request-scoped session.
"""

import re
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from catalogfeed.catalog.repository import ProductRepository
from catalogfeed.feed.source import CatalogSource
from catalogfeed.infrastructure.database import session_scope

CatalogProvider = Callable[[], AbstractAsyncContextManager[CatalogSource]]

_TRUE_WORDS = {"TRUE", "YES", "ON"}
_FALSE_WORDS = {"FALSE", "NO", "OFF"}
_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")


@asynccontextmanager
async def open_catalog() -> AsyncIterator[CatalogSource]:
    """Open the store catalog for one feed run.

    Yields:
        Repository bound to a session released when the run ends.
    """
    async with session_scope() as session:
        yield ProductRepository(session)


def get_catalog_provider() -> CatalogProvider:
    """Get the catalog provider used by feed endpoints."""
    return open_catalog


def parse_bool(value: str | None, default: bool) -> bool:
    """Read a boolean query parameter.

    Accepts true/yes/on and false/no/off in any case; other values count
    as true when they are a non-zero number.

    Args:
        value: Raw parameter value.
        default: Value used when the parameter is missing or empty.

    Returns:
        Parsed boolean.
    """
    if value is None or value == "":
        return default
    word = value.strip().upper()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    match = _INT_PREFIX.match(word)
    if match:
        return int(match.group(0)) != 0
    return word not in ("", "0")


def parse_int(value: str | None, default: int | None) -> int | None:
    """Read an integer query parameter.

    Args:
        value: Raw parameter value.
        default: Value used when the parameter is missing or not a number.

    Returns:
        Parsed integer (leading digits only) or the default.
    """
    if value is None or value == "":
        return default
    match = _INT_PREFIX.match(value)
    if not match:
        return default
    return int(match.group(0))
