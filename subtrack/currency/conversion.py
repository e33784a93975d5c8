"""
Currency Conversion Engine

Converts amounts between supported currencies through a fixed rate table
anchored to the base currency (CNY), and renders them for display.

DESIGN DECISION: All money math is done in Decimal. Floats coming in are
converted through str() so 9.99 stays 9.99.

DESIGN DECISION: One rounding rule everywhere: round half away from zero
(ROUND_HALF_UP in decimal terms) at 10^-precision of the target currency.
Identity conversions still round, so repeated no-op conversions are stable.

IMPORTANT: Rates are static and illustrative. There is no live FX lookup.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Mapping, Optional, Union

from subtrack.currency.registry import (
    CURRENCIES,
    InvalidCurrencyError,
    coerce_currency,
    meta_of,
)
from subtrack.models.currency import BASE_CURRENCY, CurrencyCode


CurrencyLike = Union[CurrencyCode, str]

ZERO = Decimal("0")

# 1 unit of the key currency = RATE_TO_BASE[key] units of CNY
RATE_TO_BASE: dict[CurrencyCode, Decimal] = {
    CurrencyCode.CNY: Decimal("1"),
    CurrencyCode.USD: Decimal("7.2"),
    CurrencyCode.JPY: Decimal("0.05"),
}


def to_decimal(amount: Any) -> Decimal:
    """
    Normalize an amount to a finite Decimal.

    Non-finite (inf, NaN) and non-numeric input becomes 0. This is a
    normalization, not an error: the core never raises on bad amounts.
    """
    if isinstance(amount, Decimal):
        return amount if amount.is_finite() else ZERO
    if isinstance(amount, bool):
        return Decimal(int(amount))
    if isinstance(amount, int):
        return Decimal(amount)
    if isinstance(amount, float):
        if not math.isfinite(amount):
            return ZERO
        return Decimal(str(amount))
    if isinstance(amount, str):
        try:
            value = Decimal(amount.strip())
        except InvalidOperation:
            return ZERO
        return value if value.is_finite() else ZERO
    return ZERO


def round_with_precision(amount: Any, code: CurrencyLike) -> Decimal:
    """
    Round an amount to the currency's precision (half away from zero).

    Examples:
        round_with_precision(1.005, "USD") -> Decimal("1.01")
        round_with_precision(2.5, "JPY")   -> Decimal("3")
    """
    precision = meta_of(code).precision
    value = to_decimal(amount)
    step = Decimal(1).scaleb(-precision)
    # quantize needs every integer digit plus `precision` fraction digits
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + precision + 2)
        rounded = value.quantize(step, rounding=ROUND_HALF_UP)
    # No "-0.00" in totals or labels
    if rounded.is_zero():
        rounded = abs(rounded)
    return rounded


def format_amount(
    amount: Any,
    code: CurrencyLike,
    with_symbol: bool = True,
    use_grouping: bool = True,
) -> str:
    """
    Render an amount with exactly `precision` fraction digits.

    All supported locales (zh-CN, en-US, ja-JP) group with ',' and use '.'
    as the decimal separator, so no locale database is needed.

    Examples:
        format_amount(Decimal("1234.5"), "USD")                    -> "$1,234.50"
        format_amount(1234, "JPY", with_symbol=False)              -> "1,234"
        format_amount(1234.5, "CNY", use_grouping=False)           -> "¥1234.50"
    """
    meta = meta_of(code)
    value = round_with_precision(amount, meta.code)
    grouping = "," if use_grouping else ""
    text = f"{value:{grouping}.{meta.precision}f}"
    return f"{meta.symbol}{text}" if with_symbol else text


class CurrencyConverter:
    """
    Fixed-rate converter.

    Usage:
        converter = CurrencyConverter()
        converter.convert(10, "USD", "CNY")  # Decimal("72.00")

    A custom rate table must cover every CurrencyCode with a positive
    rate, and the base currency's rate must be exactly 1.
    """

    def __init__(self, rates: Optional[Mapping[CurrencyLike, Any]] = None):
        source = RATE_TO_BASE if rates is None else rates
        self._rates = self._validate_rates(source)

    @staticmethod
    def _validate_rates(rates: Mapping[CurrencyLike, Any]) -> dict[CurrencyCode, Decimal]:
        table: dict[CurrencyCode, Decimal] = {}
        for code, rate in rates.items():
            value = to_decimal(rate)
            if value <= 0:
                raise ValueError(f"Rate for {code} must be positive, got {rate!r}")
            table[coerce_currency(code)] = value

        missing = set(CURRENCIES) - set(table)
        if missing:
            raise ValueError(
                f"Rate table missing currencies: {sorted(c.value for c in missing)}"
            )
        if table[BASE_CURRENCY] != 1:
            raise ValueError(
                f"Base currency {BASE_CURRENCY.value} must have rate 1, "
                f"got {table[BASE_CURRENCY]}"
            )
        return table

    @property
    def rates(self) -> dict[CurrencyCode, Decimal]:
        return dict(self._rates)

    def rate_to_base(self, code: CurrencyLike) -> Decimal:
        return self._rates[coerce_currency(code)]

    def convert(self, amount: Any, from_code: CurrencyLike, to_code: CurrencyLike) -> Decimal:
        """
        Convert an amount and round it to the target currency's precision.

        Raises:
            InvalidCurrencyError: If either code is unsupported
        """
        source = coerce_currency(from_code)
        target = coerce_currency(to_code)
        value = to_decimal(amount)

        if source is target:
            return round_with_precision(value, target)

        converted = value * self._rates[source] / self._rates[target]
        return round_with_precision(converted, target)

    def round_with_precision(self, amount: Any, code: CurrencyLike) -> Decimal:
        return round_with_precision(amount, code)

    def format_amount(
        self,
        amount: Any,
        code: CurrencyLike,
        with_symbol: bool = True,
        use_grouping: bool = True,
    ) -> str:
        return format_amount(amount, code, with_symbol=with_symbol, use_grouping=use_grouping)

    def convert_and_format(
        self,
        amount: Any,
        from_code: CurrencyLike,
        to_code: CurrencyLike,
        with_symbol: bool = True,
        use_grouping: bool = True,
    ) -> str:
        """Convert, then format in the target currency (the "≈ converted" label)."""
        value = self.convert(amount, from_code, to_code)
        return format_amount(value, to_code, with_symbol=with_symbol, use_grouping=use_grouping)


default_converter = CurrencyConverter()


def convert(amount: Any, from_code: CurrencyLike, to_code: CurrencyLike) -> Decimal:
    """Convert using the built-in rate table."""
    return default_converter.convert(amount, from_code, to_code)


def convert_and_format(
    amount: Any,
    from_code: CurrencyLike,
    to_code: CurrencyLike,
    with_symbol: bool = True,
    use_grouping: bool = True,
) -> str:
    return default_converter.convert_and_format(
        amount, from_code, to_code, with_symbol=with_symbol, use_grouping=use_grouping
    )


__all__ = [
    "RATE_TO_BASE",
    "CurrencyConverter",
    "InvalidCurrencyError",
    "convert",
    "convert_and_format",
    "default_converter",
    "format_amount",
    "round_with_precision",
    "to_decimal",
]
