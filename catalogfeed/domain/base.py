"""Base classes for domain layer."""

from abc import ABC
from dataclasses import dataclass


@dataclass(frozen=True)
class ValueObject(ABC):
    """Base class for value objects.

    Value objects are immutable and compared by their attributes,
    not by identity. Everything the feed reads from the store is
    handled as a value object: a snapshot that the exporter never
    mutates.

    Example:
        @dataclass(frozen=True)
        class CurrencyInfo(ValueObject):
            code: str
            rate: Decimal
    """

    pass
