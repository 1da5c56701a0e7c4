"""Feed run configuration."""

from dataclasses import dataclass
from typing import Any, Self

from catalogfeed.domain.exceptions import InvalidFeedConfigError
from catalogfeed.domain.value_objects import Charset
from catalogfeed.feed.sanitizer import SEPARATOR_REPLACEMENT

DEFAULT_CHUNK_SIZE = 100

BASE_COLUMNS = (
    "id",
    "title",
    "link",
    "description",
    "image_link",
    "categories",
    "availability",
    "brand",
    "mpn",
)
PRICE_COLUMNS = ("price", "sale_price")
EXTRA_COLUMNS = ("extra_title_1", "extra_title_2")


@dataclass(frozen=True)
class FeedConfig:
    """Immutable settings for one feed run.

    Attributes:
        language: Language code of the texts.
        currency: Currency code of the prices.
        chunk_size: Rows per repository query. When None, the window limit
            (or DEFAULT_CHUNK_SIZE without a window) is used.
        show_prices: Include price and sale_price columns.
        show_final_prices: Prices include tax.
        charset: Output character set.
        limit: Window size; 0 disables the window.
        offset: Window start position.
        field_separator: Separator between record fields.
        category_separator: Separator between category paths.
        category_tree_separator: Separator between names inside a path.
        repair_mojibake: Undo double-encoded UTF-8 in store texts.
    """

    language: str
    currency: str
    chunk_size: int | None = None
    show_prices: bool = True
    show_final_prices: bool = True
    charset: Charset = Charset.UTF8
    limit: int = 0
    offset: int = 0
    field_separator: str = "|"
    category_separator: str = "%%"
    category_tree_separator: str = ">"
    repair_mojibake: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        object.__setattr__(self, "currency", self.currency.strip().upper())
        object.__setattr__(self, "language", self.language.strip())
        try:
            object.__setattr__(self, "charset", Charset(self.charset))
        except ValueError:
            raise InvalidFeedConfigError(
                "charset", self.charset, "must be UTF-8 or ISO-8859-1"
            ) from None

        if self.chunk_size is not None and self.chunk_size <= 0:
            raise InvalidFeedConfigError("chunk_size", self.chunk_size, "must be positive")
        if self.limit < 0:
            raise InvalidFeedConfigError("limit", self.limit, "must not be negative")
        if self.offset < 0:
            raise InvalidFeedConfigError("offset", self.offset, "must not be negative")

        separators = {
            "field_separator": self.field_separator,
            "category_separator": self.category_separator,
            "category_tree_separator": self.category_tree_separator,
        }
        for name, value in separators.items():
            if not value or "\n" in value or "\r" in value:
                raise InvalidFeedConfigError(name, value, "must be a non-empty single-line string")
        if len(set(separators.values())) != len(separators):
            raise InvalidFeedConfigError("separators", separators, "must all differ")
        if self.field_separator == SEPARATOR_REPLACEMENT:
            raise InvalidFeedConfigError(
                "field_separator",
                self.field_separator,
                f"must differ from the replacement {SEPARATOR_REPLACEMENT!r}",
            )

    @classmethod
    def from_settings(cls, settings: Any, **overrides: Any) -> Self:
        """Create a config from application settings.

        Args:
            settings: Application settings (see infrastructure.config).
            **overrides: Values taken from the request instead of settings.

        Returns:
            FeedConfig instance.
        """
        values: dict[str, Any] = {
            "language": settings.feed_language,
            "currency": settings.feed_currency,
            "show_prices": settings.feed_show_prices,
            "show_final_prices": settings.feed_show_final_prices,
            "field_separator": settings.field_separator,
            "category_separator": settings.category_separator,
            "category_tree_separator": settings.category_tree_separator,
            "repair_mojibake": settings.feed_repair_mojibake,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        # A window without its own chunk size is fetched limit rows at a time
        if "chunk_size" not in values and values.get("limit", 0) <= 0:
            values["chunk_size"] = settings.feed_chunk_size
        return cls(**values)

    @property
    def windowed(self) -> bool:
        """Check if only a window of the catalog is requested."""
        return self.limit > 0

    @property
    def effective_chunk_size(self) -> int:
        """Rows fetched per repository query."""
        if self.chunk_size is not None:
            return self.chunk_size
        if self.windowed:
            return self.limit
        return DEFAULT_CHUNK_SIZE

    @property
    def emits_header(self) -> bool:
        """Header is written only when output starts at the beginning."""
        return not self.windowed or self.offset == 0

    @property
    def columns(self) -> tuple[str, ...]:
        """Column names in output order."""
        if self.show_prices:
            return BASE_COLUMNS + PRICE_COLUMNS + EXTRA_COLUMNS
        return BASE_COLUMNS + EXTRA_COLUMNS
