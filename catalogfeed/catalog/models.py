"""SQLAlchemy models for the store catalog.

Mirrors the store tables the feed reads. Texts live in per-language
description tables; prices are stored in the store base currency.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalogfeed.infrastructure.database import Base

product_categories = Table(
    "products_to_categories",
    Base.metadata,
    Column("products_id", ForeignKey("products.products_id"), primary_key=True),
    Column("categories_id", ForeignKey("categories.categories_id"), primary_key=True),
)


class Language(Base):
    """Store language.

    Attributes:
        id: Language ID referenced by description tables.
        name: Display name (e.g., "English").
        code: ISO code (e.g., "en").
        sort_order: Position in language lists.
    """

    __tablename__ = "languages"

    id: Mapped[int] = mapped_column("languages_id", Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(32), nullable=False)
    code: Mapped[str] = mapped_column(String(2), nullable=False, index=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class Currency(Base):
    """Store currency with its exchange rate.

    Attributes:
        id: Currency ID.
        title: Display name.
        code: ISO 4217 code.
        value: Exchange rate relative to the store base currency.
        decimal_places: Digits shown after the decimal point.
    """

    __tablename__ = "currencies"

    id: Mapped[int] = mapped_column("currencies_id", Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    code: Mapped[str] = mapped_column(String(3), nullable=False, index=True)
    value: Mapped[Decimal] = mapped_column(Numeric(13, 8), nullable=False, default=Decimal("1"))
    decimal_places: Mapped[int] = mapped_column(Integer, nullable=False, default=2)


class Manufacturer(Base):
    """Product manufacturer (brand)."""

    __tablename__ = "manufacturers"

    id: Mapped[int] = mapped_column("manufacturers_id", Integer, primary_key=True)
    name: Mapped[str] = mapped_column("manufacturers_name", String(32), nullable=False)


class Category(Base):
    """Category node; parent_id 0 marks a root."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column("categories_id", Integer, primary_key=True)
    parent_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)

    descriptions: Mapped[list["CategoryDescription"]] = relationship(back_populates="category")


class CategoryDescription(Base):
    """Category name in one language."""

    __tablename__ = "categories_description"

    category_id: Mapped[int] = mapped_column(
        "categories_id",
        ForeignKey("categories.categories_id"),
        primary_key=True,
    )
    language_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column("categories_name", String(32), nullable=False)

    category: Mapped[Category] = relationship(back_populates="descriptions")


class TaxRate(Base):
    """Tax rate of a tax class; rates of one class add up."""

    __tablename__ = "tax_rates"

    id: Mapped[int] = mapped_column("tax_rates_id", Integer, primary_key=True)
    tax_class_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    priority: Mapped[int] = mapped_column("tax_priority", Integer, nullable=False, default=1)
    rate: Mapped[Decimal] = mapped_column("tax_rate", Numeric(7, 4), nullable=False)


class Product(Base):
    """Product entity in the catalog.

    Attributes:
        id: Product ID.
        model: Manufacturer part number.
        quantity: Units in stock.
        status: 1 when the product is visible in the store.
        price: Listed price in the store base currency.
        image: Image path relative to the images directory.
        tax_class_id: Tax class of the product.
        manufacturer_id: Brand of the product.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column("products_id", Integer, primary_key=True)
    model: Mapped[str | None] = mapped_column("products_model", String(64), nullable=True)
    quantity: Mapped[int] = mapped_column("products_quantity", Integer, nullable=False, default=0)
    status: Mapped[int] = mapped_column("products_status", Integer, nullable=False, default=1)
    price: Mapped[Decimal] = mapped_column("products_price", Numeric(15, 4), nullable=False)
    image: Mapped[str | None] = mapped_column("products_image", String(255), nullable=True)
    tax_class_id: Mapped[int] = mapped_column("products_tax_class_id", Integer, default=0)
    manufacturer_id: Mapped[int | None] = mapped_column(
        "manufacturers_id",
        ForeignKey("manufacturers.manufacturers_id"),
        nullable=True,
    )

    descriptions: Mapped[list["ProductDescription"]] = relationship(back_populates="product")


class ProductDescription(Base):
    """Product texts in one language."""

    __tablename__ = "products_description"

    product_id: Mapped[int] = mapped_column(
        "products_id",
        ForeignKey("products.products_id"),
        primary_key=True,
    )
    language_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column("products_name", String(64), nullable=False, default="")
    description: Mapped[str | None] = mapped_column("products_description", Text, nullable=True)

    product: Mapped[Product] = relationship(back_populates="descriptions")


class Special(Base):
    """Temporary sale price of a product."""

    __tablename__ = "specials"

    id: Mapped[int] = mapped_column("specials_id", Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(
        "products_id",
        ForeignKey("products.products_id"),
        nullable=False,
        index=True,
    )
    new_price: Mapped[Decimal] = mapped_column(
        "specials_new_products_price",
        Numeric(15, 4),
        nullable=False,
    )
    status: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    expires_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
