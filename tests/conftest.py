"""Shared fixtures: an in-memory catalog standing in for the store database."""

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from decimal import Decimal

import pytest

from catalogfeed.domain.value_objects import (
    CategoryNode,
    CurrencyInfo,
    LanguageInfo,
    ProductSnapshot,
    ProductStatus,
)
from catalogfeed.feed.config import FeedConfig
from catalogfeed.feed.links import LinkBuilder


class FakeCatalog:
    """In-memory catalog source recording the queries it receives."""

    def __init__(
        self,
        products: Sequence[ProductSnapshot] = (),
        categories: Sequence[CategoryNode] = (),
        currencies: Sequence[CurrencyInfo] = (),
        languages: Sequence[LanguageInfo] = (),
    ) -> None:
        self.products = sorted(products, key=lambda p: p.id)
        self.categories = list(categories)
        self.currencies = list(currencies)
        self.languages = list(languages)
        self.queries: list[tuple[int, int]] = []
        self.count_calls = 0

    async def count_products(self, language_id: int) -> int:
        self.count_calls += 1
        return len(self.products)

    async def find_products(
        self,
        language_id: int,
        limit: int,
        offset: int,
    ) -> list[ProductSnapshot]:
        self.queries.append((offset, limit))
        return self.products[offset:offset + limit]

    async def get_categories(self, language_id: int) -> list[CategoryNode]:
        return list(self.categories)

    async def get_currency(self, code: str) -> CurrencyInfo | None:
        for currency in self.currencies:
            if currency.code == code.upper():
                return currency
        return None

    async def list_currencies(self) -> list[CurrencyInfo]:
        return list(self.currencies)

    async def list_languages(self) -> list[LanguageInfo]:
        return list(self.languages)

    async def get_language(self, code: str) -> LanguageInfo | None:
        for language in self.languages:
            if language.code.lower() == code.strip().lower():
                return language
        return None


def make_product(product_id: int, **overrides) -> ProductSnapshot:
    """Create an active, in-stock product with sensible defaults."""
    values = {
        "id": product_id,
        "title": f"Product {product_id}",
        "description": f"<p>Description of product {product_id}</p>",
        "brand": "Acme",
        "mpn": f"MPN-{product_id}",
        "quantity": 5,
        "status": ProductStatus.ACTIVE,
        "price": Decimal("100.0000"),
        "sale_price": None,
        "tax_rate": Decimal("21.0000"),
        "image_path": f"product_{product_id}.jpg",
        "category_ids": frozenset({1, 2}),
    }
    values.update(overrides)
    return ProductSnapshot(**values)


@pytest.fixture
def languages() -> list[LanguageInfo]:
    """Store languages."""
    return [
        LanguageInfo(id=1, code="en", name="English"),
        LanguageInfo(id=2, code="de", name="Deutsch"),
    ]


@pytest.fixture
def currencies() -> list[CurrencyInfo]:
    """Store currencies."""
    return [
        CurrencyInfo(code="USD", rate=Decimal("1.0"), decimal_places=2),
        CurrencyInfo(code="EUR", rate=Decimal("0.9"), decimal_places=2),
    ]


@pytest.fixture
def categories() -> list[CategoryNode]:
    """Two-level category tree."""
    return [
        CategoryNode(id=1, parent_id=0, name="Shoes"),
        CategoryNode(id=2, parent_id=1, name="Running"),
        CategoryNode(id=3, parent_id=0, name="Bags"),
    ]


@pytest.fixture
def catalog(
    languages: list[LanguageInfo],
    currencies: list[CurrencyInfo],
    categories: list[CategoryNode],
) -> FakeCatalog:
    """Catalog with five active products."""
    return FakeCatalog(
        products=[make_product(i) for i in range(1, 6)],
        categories=categories,
        currencies=currencies,
        languages=languages,
    )


@pytest.fixture
def catalog_provider(catalog: FakeCatalog):
    """Provider opening the in-memory catalog, as the API dependency does."""

    @asynccontextmanager
    async def provider() -> AsyncIterator[FakeCatalog]:
        yield catalog

    return provider


@pytest.fixture
def links() -> LinkBuilder:
    """Link builder for a test store."""
    return LinkBuilder("http://shop.example/catalog/")


@pytest.fixture
def feed_config() -> FeedConfig:
    """Default feed configuration."""
    return FeedConfig(language="en", currency="USD")


@pytest.fixture
def product_factory():
    """Factory for products with overridable fields."""
    return make_product
