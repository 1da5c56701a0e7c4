"""Read interface the feed needs from the catalog store."""

from collections.abc import Sequence
from typing import Protocol

from catalogfeed.domain.value_objects import (
    CategoryNode,
    CurrencyInfo,
    LanguageInfo,
    ProductSnapshot,
)


class CatalogSource(Protocol):
    """Catalog queries used by a feed run.

    ``catalog.repository.ProductRepository`` implements this against the
    store database.
    """

    async def count_products(self, language_id: int) -> int:
        """Count product rows the feed pages over."""
        ...

    async def find_products(
        self,
        language_id: int,
        limit: int,
        offset: int,
    ) -> Sequence[ProductSnapshot]:
        """Get one batch of product rows ordered by ascending ID."""
        ...

    async def get_categories(self, language_id: int) -> Sequence[CategoryNode]:
        """Get all category rows for a language."""
        ...

    async def get_currency(self, code: str) -> CurrencyInfo | None:
        """Get a currency by code."""
        ...

    async def list_currencies(self) -> Sequence[CurrencyInfo]:
        """Get all store currencies."""
        ...

    async def list_languages(self) -> Sequence[LanguageInfo]:
        """Get all store languages in display order."""
        ...

    async def get_language(self, code: str) -> LanguageInfo | None:
        """Get a language by code, ignoring case."""
        ...
