"""
Currency Models

Closed set of supported currencies and their display metadata.

DESIGN DECISION: Currencies are an Enum, not free text. Adding a currency
means adding an enum member AND a registry entry AND a rate; the registry
and converter refuse to start if any of the three is missing.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CurrencyCode(str, Enum):
    """Supported currencies (ISO 4217 codes)."""
    CNY = "CNY"
    USD = "USD"
    JPY = "JPY"


# Reference currency for the rate table and the default for records
# that carry no (or an unknown) currency.
BASE_CURRENCY = CurrencyCode.CNY


class CurrencyMeta(BaseModel):
    """
    Display metadata for one currency.

    Immutable for the process lifetime.
    """
    model_config = ConfigDict(frozen=True)

    code: CurrencyCode
    symbol: str = Field(
        ...,
        min_length=1,
        description="Display glyph, e.g. '$'"
    )
    precision: int = Field(
        ...,
        ge=0,
        description="Decimal digits kept after rounding (0 for JPY)"
    )
    name: str = Field(
        ...,
        description="Human-readable currency name"
    )
    locale: str = Field(
        ...,
        description="Locale used for display, e.g. 'en-US'"
    )
