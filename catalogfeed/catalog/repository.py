"""Product repository for feed queries.

Read-only queries over the store tables, returning domain snapshots
rather than ORM instances.
"""

from collections import defaultdict
from collections.abc import Sequence
from typing import Any

from sqlalchemy import and_, exists, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalogfeed.catalog.models import (
    Category,
    CategoryDescription,
    Currency,
    Language,
    Manufacturer,
    Product,
    ProductDescription,
    Special,
    TaxRate,
    product_categories,
)
from catalogfeed.domain.value_objects import (
    CategoryNode,
    CurrencyInfo,
    LanguageInfo,
    ProductSnapshot,
    ProductStatus,
)


def to_snapshot(row: Any, category_ids: Sequence[int] = ()) -> ProductSnapshot:
    """Map a product query row to a snapshot.

    Args:
        row: Row with the labels selected by find_products.
        category_ids: Categories linked to the product.

    Returns:
        ProductSnapshot instance.
    """
    return ProductSnapshot(
        id=int(row.id),
        title=row.title,
        description=row.description,
        brand=row.brand,
        mpn=row.mpn,
        quantity=int(row.quantity or 0),
        status=ProductStatus.from_flag(row.status),
        price=row.price,
        sale_price=row.sale_price,
        tax_rate=row.tax_rate,
        image_path=row.image_path,
        category_ids=frozenset(category_ids),
    )


class ProductRepository:
    """Repository for the catalog queries a feed run needs.

    Products are paged in ascending ID order over every product that has
    a description in the feed language and at least one category.

    Example usage:
        async with session_scope() as session:
            repo = ProductRepository(session)
            total = await repo.count_products(language_id=1)
            batch = await repo.find_products(language_id=1, limit=100, offset=0)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    def _feed_conditions(self, language_id: int) -> list[Any]:
        linked = exists().where(product_categories.c.products_id == Product.id)
        return [ProductDescription.language_id == language_id, linked]

    async def count_products(self, language_id: int) -> int:
        """Count product rows for a language, active or not.

        Args:
            language_id: Language ID.

        Returns:
            Number of rows the feed pages over.
        """
        query = (
            select(func.count(func.distinct(Product.id)))
            .select_from(Product)
            .join(ProductDescription, ProductDescription.product_id == Product.id)
            .where(and_(*self._feed_conditions(language_id)))
        )
        result = await self.session.execute(query)
        return result.scalar_one()

    async def find_products(
        self,
        language_id: int,
        limit: int,
        offset: int,
    ) -> list[ProductSnapshot]:
        """Get one batch of products ordered by ascending ID.

        The sale price is the lowest active, unexpired special; tax rates
        of the product's tax class are added up.

        Args:
            language_id: Language ID.
            limit: Maximum rows.
            offset: Rows to skip.

        Returns:
            Product snapshots with category IDs attached.
        """
        taxes = (
            select(
                TaxRate.tax_class_id.label("tax_class_id"),
                func.sum(TaxRate.rate).label("rate"),
            )
            .group_by(TaxRate.tax_class_id)
            .subquery()
        )
        specials = (
            select(
                Special.product_id.label("product_id"),
                func.min(Special.new_price).label("price"),
            )
            .where(
                Special.status == 1,
                or_(
                    Special.expires_date.is_(None),
                    Special.expires_date > func.current_date(),
                ),
            )
            .group_by(Special.product_id)
            .subquery()
        )

        query = (
            select(
                Product.id.label("id"),
                ProductDescription.name.label("title"),
                ProductDescription.description.label("description"),
                Manufacturer.name.label("brand"),
                Product.model.label("mpn"),
                Product.quantity.label("quantity"),
                Product.status.label("status"),
                Product.price.label("price"),
                specials.c.price.label("sale_price"),
                taxes.c.rate.label("tax_rate"),
                Product.image.label("image_path"),
            )
            .join(ProductDescription, ProductDescription.product_id == Product.id)
            .outerjoin(Manufacturer, Manufacturer.id == Product.manufacturer_id)
            .outerjoin(specials, specials.c.product_id == Product.id)
            .outerjoin(taxes, taxes.c.tax_class_id == Product.tax_class_id)
            .where(and_(*self._feed_conditions(language_id)))
            .order_by(Product.id.asc())
            .limit(limit)
            .offset(offset)
        )

        result = await self.session.execute(query)
        rows = result.all()

        category_ids = await self.get_product_category_ids([row.id for row in rows])
        return [to_snapshot(row, category_ids.get(row.id, ())) for row in rows]

    async def get_product_category_ids(self, product_ids: list[int]) -> dict[int, list[int]]:
        """Get linked category IDs for several products.

        Args:
            product_ids: Product IDs.

        Returns:
            Product ID to list of category IDs.
        """
        if not product_ids:
            return {}

        query = select(
            product_categories.c.products_id,
            product_categories.c.categories_id,
        ).where(product_categories.c.products_id.in_(product_ids))

        result = await self.session.execute(query)
        links: dict[int, list[int]] = defaultdict(list)
        for product_id, category_id in result.all():
            links[product_id].append(category_id)
        return links

    async def get_categories(self, language_id: int) -> list[CategoryNode]:
        """Get all categories with their names in a language.

        Args:
            language_id: Language ID.

        Returns:
            Category rows.
        """
        query = (
            select(Category.id, Category.parent_id, CategoryDescription.name)
            .join(CategoryDescription, CategoryDescription.category_id == Category.id)
            .where(CategoryDescription.language_id == language_id)
        )
        result = await self.session.execute(query)
        return [
            CategoryNode(id=row[0], parent_id=row[1], name=row[2])
            for row in result.all()
        ]

    async def get_currency(self, code: str) -> CurrencyInfo | None:
        """Get currency by code.

        Args:
            code: ISO currency code.

        Returns:
            CurrencyInfo if found, None otherwise.
        """
        query = select(Currency).where(func.upper(Currency.code) == code.upper())
        result = await self.session.execute(query)
        currency = result.scalars().first()
        if currency is None:
            return None
        return CurrencyInfo(
            code=currency.code,
            rate=currency.value,
            decimal_places=currency.decimal_places,
        )

    async def list_currencies(self) -> list[CurrencyInfo]:
        """Get all store currencies.

        Returns:
            List of currencies.
        """
        result = await self.session.execute(select(Currency).order_by(Currency.id))
        return [
            CurrencyInfo(code=c.code, rate=c.value, decimal_places=c.decimal_places)
            for c in result.scalars().all()
        ]

    async def list_languages(self) -> list[LanguageInfo]:
        """Get all store languages in display order.

        Returns:
            List of languages.
        """
        query = select(Language).order_by(Language.sort_order, Language.id)
        result = await self.session.execute(query)
        return [
            LanguageInfo(id=lang.id, code=lang.code, name=lang.name)
            for lang in result.scalars().all()
        ]

    async def get_language(self, code: str) -> LanguageInfo | None:
        """Get language by code, ignoring case.

        Args:
            code: ISO language code.

        Returns:
            LanguageInfo if found, None otherwise.
        """
        query = select(Language).where(func.lower(Language.code) == code.strip().lower())
        result = await self.session.execute(query)
        language = result.scalars().first()
        if language is None:
            return None
        return LanguageInfo(id=language.id, code=language.code, name=language.name)
