"""Price computation for the feed currency."""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from catalogfeed.domain.value_objects import CurrencyInfo

_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_amount(value: Any) -> Decimal:
    """Read a number the lenient way store columns need.

    Only the leading numeric part counts ("12.5 EUR" is 12.5); anything
    without one is zero.

    Args:
        value: Raw column value (Decimal, float, int, str or None).

    Returns:
        Parsed amount.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal("0")
    if isinstance(value, int):
        return Decimal(value)
    match = _NUMERIC_PREFIX.match(str(value))
    if not match:
        return Decimal("0")
    try:
        amount = Decimal(match.group(0).strip())
    except InvalidOperation:
        return Decimal("0")
    return amount if amount.is_finite() else Decimal("0")


class CurrencyConverter:
    """Computes listed and sale prices in the feed currency.

    Example usage:
        converter = CurrencyConverter(CurrencyInfo("EUR", Decimal("0.9"), 2))
        converter.price("100", "21")   # "108.90"
        converter.price(None, "21")    # ""
    """

    def __init__(self, currency: CurrencyInfo, include_taxes: bool = True) -> None:
        """Initialize converter.

        Args:
            currency: Currency the feed is priced in.
            include_taxes: Whether prices include tax (final prices).
        """
        self.currency = currency
        self.include_taxes = include_taxes
        self._quantum = Decimal(1).scaleb(-currency.decimal_places)

    def compute(self, raw_price: Any, raw_tax_rate: Any = None) -> Decimal:
        """Compute a price rounded to the currency precision.

        Args:
            raw_price: Price in the store base currency.
            raw_tax_rate: Tax percentage.

        Returns:
            Converted and rounded price.
        """
        price = parse_amount(raw_price)
        if self.include_taxes:
            price = price * (Decimal(1) + parse_amount(raw_tax_rate) / Decimal(100))
        price = price * self.currency.rate
        return price.quantize(self._quantum, rounding=ROUND_HALF_UP)

    def price(self, raw_price: Any, raw_tax_rate: Any = None) -> str:
        """Format a price for the feed.

        Args:
            raw_price: Price in the store base currency.
            raw_tax_rate: Tax percentage.

        Returns:
            Fixed-point price with "." as decimal point, or an empty string
            when the price is zero or negative.
        """
        amount = self.compute(raw_price, raw_tax_rate)
        if amount <= 0:
            return ""
        return f"{amount:f}"
