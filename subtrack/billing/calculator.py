"""
Billing Calculator

Computes how much each subscription contributes to "this month" and
"this year", on a common monthly basis so that quarterly and yearly plans
can be summed together with monthly ones.

DESIGN DECISION: Partial first periods are prorated. A subscription that
started on the 20th of a 30-day month contributes 11/30 of its monthly
equivalent to that month; one that has not started yet contributes 0.

DESIGN DECISION: Each item is converted (and rounded) to the display
currency before summing. The total is therefore the sum of the per-item
amounts a user would see, not a separately rounded figure.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

from subtrack.currency.conversion import (
    CurrencyConverter,
    CurrencyLike,
    default_converter,
    round_with_precision,
)
from subtrack.currency.registry import coerce_currency
from subtrack.dates import days_in_month, month_end, parse_iso_date
from subtrack.models.subscription import BillingCycle, Subscription


ZERO = Decimal("0")
ONE = Decimal("1")
MONTHS_PER_YEAR = 12


def monthly_equivalent(subscription: Subscription) -> Decimal:
    """
    Normalized monthly cost, in the subscription's own currency.

    monthly -> price, quarterly -> price / 3, yearly -> price / 12,
    lifetime and other -> 0.
    """
    cycle = subscription.cycle
    price = subscription.price
    if cycle is BillingCycle.MONTHLY:
        return price
    if cycle is BillingCycle.QUARTERLY:
        return price / 3
    if cycle is BillingCycle.YEARLY:
        return price / 12
    if cycle in (BillingCycle.LIFETIME, BillingCycle.OTHER):
        return ZERO
    raise ValueError(f"Unhandled billing cycle: {cycle!r}")


def yearly_equivalent(subscription: Subscription) -> Decimal:
    """Full-year run rate, in the subscription's own currency."""
    return monthly_equivalent(subscription) * MONTHS_PER_YEAR


def first_month_fraction(start_date: Any, reference_month: date) -> Decimal:
    """
    Share of `reference_month` the subscription is active for, in [0, 1].

    Args:
        start_date: When the subscription started. None (or an unparseable
            value) means "always active".
        reference_month: Any date inside the month of interest.

    Returns:
        0 if it starts after the month, 1 if it started in an earlier
        month, otherwise (days_in_month - (start_day - 1)) / days_in_month.
    """
    start = parse_iso_date(start_date)
    if start is None:
        return ONE

    if start > month_end(reference_month):
        return ZERO

    if (start.year, start.month) == (reference_month.year, reference_month.month):
        total_days = days_in_month(start.year, start.month)
        remaining = total_days - (start.day - 1)
        return Decimal(remaining) / Decimal(total_days)

    return ONE


def months_active_in_year(start_date: Any, reference_year: int) -> Decimal:
    """
    Equivalent months a subscription is active for in `reference_year`.

    12 when it started before the year (or has no start date), 0 when it
    starts after the year, otherwise the months after the start month plus
    the prorated start month.
    """
    start = parse_iso_date(start_date)
    if start is None or start.year < reference_year:
        return Decimal(MONTHS_PER_YEAR)
    if start.year > reference_year:
        return ZERO

    full_months_after = MONTHS_PER_YEAR - start.month
    return Decimal(full_months_after) + first_month_fraction(start, start)


class BillingCalculator:
    """
    Aggregates prorated spend across a collection of subscriptions.

    Every method is pure: same inputs, same Decimal out. The converter is
    injectable so tests (or a future rates source) can swap the table.
    """

    def __init__(self, converter: Optional[CurrencyConverter] = None):
        self._converter = converter or default_converter

    @property
    def converter(self) -> CurrencyConverter:
        return self._converter

    def monthly_contribution(
        self,
        subscription: Subscription,
        display_currency: CurrencyLike,
        reference_month: date,
    ) -> Decimal:
        """One subscription's share of `reference_month`, in the display currency."""
        fraction = first_month_fraction(subscription.start_date, reference_month)
        amount = monthly_equivalent(subscription) * fraction
        return self._converter.convert(amount, subscription.currency, display_currency)

    def yearly_contribution(
        self,
        subscription: Subscription,
        display_currency: CurrencyLike,
        reference_year: int,
    ) -> Decimal:
        """One subscription's share of `reference_year`, in the display currency."""
        months = months_active_in_year(subscription.start_date, reference_year)
        amount = monthly_equivalent(subscription) * months
        return self._converter.convert(amount, subscription.currency, display_currency)

    def monthly_spend(
        self,
        subscriptions: Iterable[Subscription],
        display_currency: CurrencyLike,
        reference_month: date,
    ) -> Decimal:
        """
        Total spend attributed to `reference_month`.

        Raises:
            InvalidCurrencyError: If display_currency is unsupported
        """
        target = coerce_currency(display_currency)
        total = sum(
            (self.monthly_contribution(s, target, reference_month) for s in subscriptions),
            ZERO,
        )
        return round_with_precision(total, target)

    def yearly_spend(
        self,
        subscriptions: Iterable[Subscription],
        display_currency: CurrencyLike,
        reference_year: int,
    ) -> Decimal:
        """
        Total spend attributed to `reference_year`.

        Raises:
            InvalidCurrencyError: If display_currency is unsupported
        """
        target = coerce_currency(display_currency)
        total = sum(
            (self.yearly_contribution(s, target, reference_year) for s in subscriptions),
            ZERO,
        )
        return round_with_precision(total, target)
