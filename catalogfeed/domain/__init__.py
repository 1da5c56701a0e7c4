"""Domain layer - Value objects and exceptions.

- **Value Objects**: Immutable snapshots of store data (products,
  categories, currencies, languages)
- **Exceptions**: Validation errors reported instead of a feed, plus
  configuration and category graph errors
"""

from catalogfeed.domain.base import ValueObject
from catalogfeed.domain.exceptions import (
    CyclicCategoryGraphError,
    DomainError,
    FeedValidationError,
    InvalidCurrencyError,
    InvalidFeedConfigError,
    InvalidLanguageError,
    InvalidStateTransitionError,
)
from catalogfeed.domain.value_objects import (
    CategoryNode,
    Charset,
    CurrencyInfo,
    LanguageInfo,
    ProductSnapshot,
    ProductStatus,
)

__all__ = [
    # Base
    "ValueObject",
    # Value Objects
    "CategoryNode",
    "Charset",
    "CurrencyInfo",
    "LanguageInfo",
    "ProductSnapshot",
    "ProductStatus",
    # Exceptions
    "CyclicCategoryGraphError",
    "DomainError",
    "FeedValidationError",
    "InvalidCurrencyError",
    "InvalidFeedConfigError",
    "InvalidLanguageError",
    "InvalidStateTransitionError",
]
