"""
Renewal Scheduler

Advances a subscription's next-due date across billing cycles.

DESIGN DECISION: Month arithmetic clamps to the end of the target month.
Jan 31 + 1 month is Feb 28/29, never an early-March rollover.

DESIGN DECISION: Renewal is an explicit, idempotent batch operation.
`collect_renewals` returns the advanced records and the caller persists
them in one step. Running it again on the same day finds nothing to do.

IMPORTANT: Nothing here mutates a Subscription. Renewed records are new
objects with the same id.
"""

from datetime import date
from typing import Any, Iterable, Optional

from subtrack.dates import add_months, parse_iso_date
from subtrack.models.subscription import BillingCycle, Subscription


def advance_due_date(current_due_date: date, cycle: BillingCycle) -> date:
    """
    Move a due date forward by one billing period.

    monthly -> +1 month, quarterly -> +3 months, yearly -> +1 year.
    lifetime/other -> unchanged (calling this repeatedly makes no progress).
    """
    months = cycle.months
    if months <= 0:
        return current_due_date
    return add_months(current_due_date, months)


def days_until(due_date: Any, today: date) -> Optional[int]:
    """
    Whole days from `today` to `due_date`.

    Returns None when there is no (parseable) due date. Negative values
    mean the date has passed.
    """
    due = parse_iso_date(due_date)
    if due is None:
        return None
    return (due - today).days


def is_due_for_renewal(subscription: Subscription, today: date) -> bool:
    """
    True if the subscription auto-renews, has a due date, recurs, and that
    date is today or already past.
    """
    if not subscription.auto_renew:
        return False
    if not subscription.cycle.is_recurring:
        return False
    remaining = days_until(subscription.next_due_date, today)
    return remaining is not None and remaining <= 0


def apply_renewal(subscription: Subscription, today: date) -> Subscription:
    """
    Catch a due subscription up to its next FUTURE due date.

    A record overdue by several cycles is advanced as many times as needed.
    A record that is not due is returned unchanged (the same object), so
    apply_renewal(apply_renewal(s, t), t) == apply_renewal(s, t).
    """
    if not is_due_for_renewal(subscription, today):
        return subscription

    due = subscription.next_due_date
    # Every step moves forward at least one calendar month, so this ends.
    while due <= today:
        due = advance_due_date(due, subscription.cycle)

    return subscription.with_next_due_date(due)


def collect_renewals(
    subscriptions: Iterable[Subscription],
    today: date,
) -> list[Subscription]:
    """
    Renewed copies of every subscription that is due, in input order.

    Subscriptions that are not due are left out; the result is exactly
    the set of records the store needs to write back.
    """
    return [
        apply_renewal(subscription, today)
        for subscription in subscriptions
        if is_due_for_renewal(subscription, today)
    ]
