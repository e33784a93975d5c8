"""Currency registry and conversion."""

from subtrack.currency.registry import (
    CURRENCIES,
    InvalidCurrencyError,
    coerce_currency,
    meta_of,
    precision_of,
    symbol_of,
)
from subtrack.currency.conversion import (
    RATE_TO_BASE,
    CurrencyConverter,
    convert,
    convert_and_format,
    default_converter,
    format_amount,
    round_with_precision,
    to_decimal,
)

__all__ = [
    # Registry
    "CURRENCIES",
    "InvalidCurrencyError",
    "coerce_currency",
    "meta_of",
    "precision_of",
    "symbol_of",
    # Conversion
    "RATE_TO_BASE",
    "CurrencyConverter",
    "convert",
    "convert_and_format",
    "default_converter",
    "format_amount",
    "round_with_precision",
    "to_decimal",
]
