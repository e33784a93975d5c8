"""
Billing Engine Package

Proration, renewal scheduling and portfolio aggregation.
"""

from subtrack.billing.calculator import (
    BillingCalculator,
    first_month_fraction,
    monthly_equivalent,
    months_active_in_year,
    yearly_equivalent,
)
from subtrack.billing.renewal import (
    advance_due_date,
    apply_renewal,
    collect_renewals,
    days_until,
    is_due_for_renewal,
)
from subtrack.billing.summary import (
    CYCLE_SUFFIXES,
    DEFAULT_WINDOW_DAYS,
    category_options,
    count_due_within,
    filter_subscriptions,
    format_price_with_cycle,
    spend_by_group,
    summarize,
    upcoming_renewals,
)

__all__ = [
    # Calculator
    "BillingCalculator",
    "first_month_fraction",
    "monthly_equivalent",
    "months_active_in_year",
    "yearly_equivalent",
    # Renewal
    "advance_due_date",
    "apply_renewal",
    "collect_renewals",
    "days_until",
    "is_due_for_renewal",
    # Summary
    "CYCLE_SUFFIXES",
    "DEFAULT_WINDOW_DAYS",
    "category_options",
    "count_due_within",
    "filter_subscriptions",
    "format_price_with_cycle",
    "spend_by_group",
    "summarize",
    "upcoming_renewals",
]
