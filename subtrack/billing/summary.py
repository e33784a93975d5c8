"""
Summary Aggregation

Folds a subscription collection into what the overview screen shows:
portfolio totals and the list of renewals coming up soon.

DESIGN DECISION: Everything here is side-effect free (no logging, no
store access) so the UI can recompute it on every state change and
memoize on the inputs.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional, Union

from subtrack.billing.calculator import BillingCalculator
from subtrack.billing.renewal import days_until
from subtrack.currency.conversion import CurrencyConverter, CurrencyLike, default_converter
from subtrack.currency.registry import coerce_currency
from subtrack.models.subscription import (
    BillingCycle,
    CategoryGroup,
    PortfolioSummary,
    Subscription,
    UpcomingRenewal,
)


DEFAULT_WINDOW_DAYS = 7

CYCLE_SUFFIXES: dict[BillingCycle, str] = {
    BillingCycle.MONTHLY: "/mo",
    BillingCycle.QUARTERLY: "/qtr",
    BillingCycle.YEARLY: "/yr",
    BillingCycle.LIFETIME: "/lifetime",
    BillingCycle.OTHER: "",
}


def _is_within(remaining: Optional[int], window_days: int) -> bool:
    return remaining is not None and 0 <= remaining <= window_days


def filter_subscriptions(
    subscriptions: Iterable[Subscription],
    group: Optional[Union[CategoryGroup, str]] = None,
    category: Optional[str] = None,
) -> list[Subscription]:
    """
    Subscriptions matching the statistics filters, in input order.

    None for either filter means "all". The category match is exact.

    Raises:
        ValueError: If group is not one of the CategoryGroup labels
    """
    wanted_group = CategoryGroup(group) if group is not None else None
    return [
        s for s in subscriptions
        if (wanted_group is None or s.group is wanted_group)
        and (category is None or s.category == category)
    ]


def category_options(
    subscriptions: Iterable[Subscription],
    group: Optional[Union[CategoryGroup, str]] = None,
) -> list[str]:
    """Distinct non-empty category labels within a group, first-seen order."""
    seen: dict[str, None] = {}
    for s in filter_subscriptions(subscriptions, group=group):
        if s.category:
            seen.setdefault(s.category, None)
    return list(seen)


def count_due_within(
    subscriptions: Iterable[Subscription],
    today: date,
    window_days: int,
) -> int:
    """Number of subscriptions due in [0, window_days] days from today."""
    return sum(
        1 for s in subscriptions
        if _is_within(days_until(s.next_due_date, today), window_days)
    )


def summarize(
    subscriptions: Iterable[Subscription],
    display_currency: CurrencyLike,
    today: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
    calculator: Optional[BillingCalculator] = None,
    group: Optional[Union[CategoryGroup, str]] = None,
    category: Optional[str] = None,
) -> PortfolioSummary:
    """
    Portfolio totals for the overview cards.

    Monthly spend uses today's month as the reference month, yearly spend
    today's year. An empty collection yields zero counts and zero spend.
    When group and/or category are given, every figure (count included)
    covers only the matching subscriptions.

    Raises:
        InvalidCurrencyError: If display_currency is unsupported
        ValueError: If group is not one of the CategoryGroup labels
    """
    items = filter_subscriptions(subscriptions, group=group, category=category)
    target = coerce_currency(display_currency)
    calculator = calculator or BillingCalculator()

    return PortfolioSummary(
        display_currency=target,
        reference_date=today,
        total_count=len(items),
        monthly_spend=calculator.monthly_spend(items, target, today),
        yearly_spend=calculator.yearly_spend(items, target, today.year),
        window_days=window_days,
        due_within_days=count_due_within(items, today, window_days),
        group=CategoryGroup(group) if group is not None else None,
        category=category,
    )


def spend_by_group(
    subscriptions: Iterable[Subscription],
    display_currency: CurrencyLike,
    reference_month: date,
    calculator: Optional[BillingCalculator] = None,
) -> dict[CategoryGroup, Decimal]:
    """
    Monthly spend per category group, in CategoryGroup order.

    Every group is present; groups with no subscriptions map to 0.
    """
    items = list(subscriptions)
    target = coerce_currency(display_currency)
    calculator = calculator or BillingCalculator()
    return {
        g: calculator.monthly_spend(filter_subscriptions(items, group=g), target, reference_month)
        for g in CategoryGroup
    }


def format_price_with_cycle(
    price: Any,
    cycle: BillingCycle,
    from_code: CurrencyLike,
    to_code: CurrencyLike,
    converter: Optional[CurrencyConverter] = None,
) -> str:
    """
    Price label with its cycle suffix, plus the converted price when the
    currencies differ.

    Examples:
        format_price_with_cycle(10, MONTHLY, "USD", "USD") -> "$10.00/mo"
        format_price_with_cycle(10, MONTHLY, "USD", "CNY") -> "$10.00/mo · ≈ ¥72.00/mo"
    """
    converter = converter or default_converter
    source = coerce_currency(from_code)
    target = coerce_currency(to_code)
    suffix = CYCLE_SUFFIXES[cycle]

    original = converter.format_amount(price, source)
    if source is target:
        return f"{original}{suffix}"

    converted = converter.convert_and_format(price, source, target)
    return f"{original}{suffix} · ≈ {converted}{suffix}"


def upcoming_renewals(
    subscriptions: Iterable[Subscription],
    today: date,
    display_currency: CurrencyLike,
    window_days: int = DEFAULT_WINDOW_DAYS,
    converter: Optional[CurrencyConverter] = None,
) -> list[UpcomingRenewal]:
    """
    Subscriptions due in [0, window_days] days, soonest first.

    Ties keep input order.
    """
    rows = []
    for s in subscriptions:
        remaining = days_until(s.next_due_date, today)
        if not _is_within(remaining, window_days):
            continue
        rows.append(UpcomingRenewal(
            id=s.id,
            name=s.name,
            cycle=s.cycle,
            next_due_date=s.next_due_date,
            days_until=remaining,
            price_label=format_price_with_cycle(
                s.price, s.cycle, s.currency, display_currency, converter
            ),
        ))

    rows.sort(key=lambda row: row.days_until)
    return rows
