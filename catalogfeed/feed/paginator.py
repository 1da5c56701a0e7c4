"""Chunked retrieval of feed products."""

from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass

import structlog

from catalogfeed.domain.value_objects import ProductSnapshot
from catalogfeed.feed.config import FeedConfig
from catalogfeed.feed.source import CatalogSource

logger = structlog.get_logger()


@dataclass(frozen=True)
class Batch:
    """Rows returned by one repository query.

    Attributes:
        offset: Position the query started at.
        products: Rows in ascending ID order, inactive ones included.
    """

    offset: int
    products: Sequence[ProductSnapshot]

    @property
    def active(self) -> list[ProductSnapshot]:
        """Rows that belong in the feed."""
        return [p for p in self.products if p.is_active]


class FeedPaginator:
    """Walks the catalog, or a window of it, in bounded batches.

    Without a window the total row count is read first and batches cover
    positions 0 to that count. With a window they cover
    [offset, offset + limit). Inactive rows still take up their position.

    Example usage:
        paginator = FeedPaginator(repository, config, language_id=1)
        async for batch in paginator.batches():
            for product in batch.active:
                ...
    """

    def __init__(self, source: CatalogSource, config: FeedConfig, language_id: int) -> None:
        """Initialize paginator.

        Args:
            source: Catalog queries.
            config: Feed configuration (window and chunk size).
            language_id: Language of the product texts.
        """
        self.source = source
        self.config = config
        self.language_id = language_id
        self.queried_offsets: list[int] = []

    async def bounds(self) -> tuple[int, int]:
        """Get the [start, end) positions to read.

        Returns:
            Tuple of (start, end).
        """
        if self.config.windowed:
            return self.config.offset, self.config.offset + self.config.limit
        total = await self.source.count_products(self.language_id)
        return 0, total

    async def batches(self) -> AsyncIterator[Batch]:
        """Query the catalog one chunk at a time.

        Yields:
            Batch per query; iteration stops early on an empty batch.
        """
        start, end = await self.bounds()
        chunk_size = self.config.effective_chunk_size
        position = start

        while position < end:
            size = min(chunk_size, end - position)
            products = await self.source.find_products(
                self.language_id,
                limit=size,
                offset=position,
            )
            self.queried_offsets.append(position)

            if not products:
                logger.debug("Catalog exhausted before end of range", offset=position, end=end)
                return

            yield Batch(offset=position, products=products)
            position += size
