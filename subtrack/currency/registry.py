"""
Currency Registry

Static metadata (symbol, precision, locale) for every supported currency.

DESIGN DECISION: The registry is exhaustive over CurrencyCode and checked
at import time. A code outside the enum can only come from a corrupted
record or a programming error, so lookups raise InvalidCurrencyError
instead of guessing.
"""

from typing import Union

from subtrack.models.currency import CurrencyCode, CurrencyMeta


class InvalidCurrencyError(ValueError):
    """A currency code outside the supported set reached the billing core."""
    pass


CURRENCIES: dict[CurrencyCode, CurrencyMeta] = {
    CurrencyCode.CNY: CurrencyMeta(
        code=CurrencyCode.CNY, symbol="¥", precision=2, name="Chinese Yuan", locale="zh-CN"
    ),
    CurrencyCode.USD: CurrencyMeta(
        code=CurrencyCode.USD, symbol="$", precision=2, name="US Dollar", locale="en-US"
    ),
    CurrencyCode.JPY: CurrencyMeta(
        code=CurrencyCode.JPY, symbol="¥", precision=0, name="Japanese Yen", locale="ja-JP"
    ),
}

_missing = set(CurrencyCode) - set(CURRENCIES)
if _missing:
    raise RuntimeError(f"Currency registry incomplete, missing: {sorted(c.value for c in _missing)}")


def coerce_currency(code: Union[CurrencyCode, str]) -> CurrencyCode:
    """
    Resolve a code to a CurrencyCode.

    Raises:
        InvalidCurrencyError: If the code is not a supported currency
    """
    if isinstance(code, CurrencyCode):
        return code
    if isinstance(code, str):
        try:
            return CurrencyCode(code.strip().upper())
        except ValueError:
            pass
    raise InvalidCurrencyError(f"Unsupported currency: {code!r}")


def meta_of(code: Union[CurrencyCode, str]) -> CurrencyMeta:
    """Metadata for a currency."""
    return CURRENCIES[coerce_currency(code)]


def symbol_of(code: Union[CurrencyCode, str]) -> str:
    return meta_of(code).symbol


def precision_of(code: Union[CurrencyCode, str]) -> int:
    return meta_of(code).precision
