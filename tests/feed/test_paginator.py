"""Tests for chunked product retrieval."""

import pytest

from catalogfeed.domain.value_objects import ProductStatus
from catalogfeed.feed.config import FeedConfig
from catalogfeed.feed.paginator import FeedPaginator


async def collect(paginator: FeedPaginator) -> list:
    """Read all batches of a paginator."""
    return [batch async for batch in paginator.batches()]


class TestFeedPaginator:
    """Tests for FeedPaginator."""

    @pytest.mark.asyncio
    async def test_full_catalog_in_chunks(self, catalog) -> None:
        """Chunk 2 over five products queries offsets 0, 2 and 4."""
        config = FeedConfig(language="en", currency="USD", chunk_size=2)
        paginator = FeedPaginator(catalog, config, language_id=1)

        batches = await collect(paginator)

        assert paginator.queried_offsets == [0, 2, 4]
        ids = [p.id for batch in batches for p in batch.products]
        assert ids == [1, 2, 3, 4, 5]
        assert catalog.count_calls == 1

    @pytest.mark.asyncio
    async def test_last_chunk_is_bounded_by_total(self, catalog) -> None:
        """The final query asks only for the remaining rows."""
        config = FeedConfig(language="en", currency="USD", chunk_size=2)
        await collect(FeedPaginator(catalog, config, language_id=1))
        assert catalog.queries == [(0, 2), (2, 2), (4, 1)]

    @pytest.mark.asyncio
    async def test_window(self, catalog) -> None:
        """A window covers [offset, offset + limit)."""
        config = FeedConfig(language="en", currency="USD", limit=2, offset=1)
        paginator = FeedPaginator(catalog, config, language_id=1)

        batches = await collect(paginator)

        assert [p.id for b in batches for p in b.products] == [2, 3]
        assert catalog.count_calls == 0

    @pytest.mark.asyncio
    async def test_window_with_chunk_size(self, catalog) -> None:
        """A window is itself read in chunks."""
        config = FeedConfig(language="en", currency="USD", limit=3, offset=1, chunk_size=2)
        paginator = FeedPaginator(catalog, config, language_id=1)

        await collect(paginator)

        assert catalog.queries == [(1, 2), (3, 1)]

    @pytest.mark.asyncio
    async def test_window_past_end_stops_on_empty_batch(self, catalog) -> None:
        """Querying stops at the first empty batch."""
        config = FeedConfig(language="en", currency="USD", limit=10, offset=4, chunk_size=2)
        paginator = FeedPaginator(catalog, config, language_id=1)

        batches = await collect(paginator)

        assert [p.id for b in batches for p in b.products] == [5]
        assert paginator.queried_offsets == [4, 6]

    @pytest.mark.asyncio
    async def test_inactive_rows_keep_their_position(self, catalog, product_factory) -> None:
        """Inactive rows are returned but excluded from the active list."""
        catalog.products[1] = product_factory(2, status=ProductStatus.INACTIVE)
        config = FeedConfig(language="en", currency="USD", chunk_size=5)

        batches = await collect(FeedPaginator(catalog, config, language_id=1))

        assert len(batches[0].products) == 5
        assert [p.id for p in batches[0].active] == [1, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_empty_catalog(self, catalog) -> None:
        """An empty catalog issues no product queries."""
        catalog.products = []
        config = FeedConfig(language="en", currency="USD")

        assert await collect(FeedPaginator(catalog, config, language_id=1)) == []
        assert catalog.queries == []
