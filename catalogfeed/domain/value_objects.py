"""Value Objects for the domain layer.

Read-only snapshots of the store data a feed run consumes: products,
categories, currencies and languages.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Self

from catalogfeed.domain.base import ValueObject


# ============================================================================
# Enumerations
# ============================================================================


class ProductStatus(str, Enum):
    """Product visibility in the store."""

    ACTIVE = "active"
    INACTIVE = "inactive"

    @classmethod
    def from_flag(cls, flag: Any) -> Self:
        """Map the store's numeric status flag to a status.

        Args:
            flag: Raw status column value (1 means active).

        Returns:
            ACTIVE for a flag equal to 1, INACTIVE otherwise.
        """
        try:
            return cls.ACTIVE if int(flag) == 1 else cls.INACTIVE
        except (TypeError, ValueError):
            return cls.INACTIVE


class Charset(str, Enum):
    """Character sets a feed can be written in."""

    UTF8 = "UTF-8"
    LATIN1 = "ISO-8859-1"

    @property
    def codec(self) -> str:
        """Python codec name for this charset."""
        return "utf-8" if self is Charset.UTF8 else "iso-8859-1"


# ============================================================================
# Catalog Snapshots
# ============================================================================


@dataclass(frozen=True)
class ProductSnapshot(ValueObject):
    """One product row as read for a feed.

    Price and tax values are kept raw: the feed parses them leniently
    when computing prices.

    Attributes:
        id: Product identifier.
        title: Product name in the feed language.
        description: Product description (may contain HTML).
        brand: Manufacturer name.
        mpn: Manufacturer part number (model).
        quantity: Units in stock.
        status: Store visibility.
        price: Listed price in the store base currency.
        sale_price: Special price, None or zero when there is none.
        tax_rate: Tax percentage applied to the product.
        image_path: Image path relative to the store images directory.
        category_ids: Categories the product is linked to.
    """

    id: int
    title: str | None = None
    description: str | None = None
    brand: str | None = None
    mpn: str | None = None
    quantity: int = 0
    status: ProductStatus = ProductStatus.ACTIVE
    price: Any = None
    sale_price: Any = None
    tax_rate: Any = None
    image_path: str | None = None
    category_ids: frozenset[int] = field(default_factory=frozenset)

    @property
    def is_active(self) -> bool:
        """Check if the product should appear in the feed."""
        return self.status is ProductStatus.ACTIVE

    @property
    def in_stock(self) -> bool:
        """Check if there is stock left."""
        return (self.quantity or 0) > 0


@dataclass(frozen=True)
class CategoryNode(ValueObject):
    """A category row for one language.

    Attributes:
        id: Category identifier.
        parent_id: Parent category ID (0 or None for roots).
        name: Category name in the feed language.
    """

    id: int
    parent_id: int | None
    name: str | None


@dataclass(frozen=True)
class CurrencyInfo(ValueObject):
    """Conversion data for the feed currency.

    Attributes:
        code: ISO 4217 currency code.
        rate: Exchange rate relative to the store base currency.
        decimal_places: Digits shown after the decimal point.
    """

    code: str
    rate: Decimal = Decimal("1")
    decimal_places: int = 2

    def __post_init__(self) -> None:
        """Normalize code and rate."""
        object.__setattr__(self, "code", self.code.upper())
        object.__setattr__(self, "rate", Decimal(str(self.rate)))
        object.__setattr__(self, "decimal_places", max(int(self.decimal_places), 0))

    @classmethod
    def default(cls, code: str) -> Self:
        """Create the fallback used when the currency row cannot be read.

        Args:
            code: Currency code.

        Returns:
            CurrencyInfo with rate 1 and two decimals.
        """
        return cls(code=code, rate=Decimal("1"), decimal_places=2)


@dataclass(frozen=True)
class LanguageInfo(ValueObject):
    """A store language.

    Attributes:
        id: Language identifier used by description tables.
        code: ISO language code (e.g., "en").
        name: Display name.
    """

    id: int
    code: str
    name: str

    @property
    def label(self) -> str:
        """Language as listed in validation hints."""
        return f"{self.code} ({self.name})"
