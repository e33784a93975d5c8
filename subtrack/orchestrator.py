"""
Main Orchestrator for Subscription Tracker

This module ties the pure billing core to a subscription store and the
audit log. It defines the flows the app drives:
1. Overview (store -> summary in the preferred currency)
2. Upcoming renewals list
3. Renewal run (store -> due records -> advanced records -> store)
4. Plain list edits (add / update / remove / replace)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Calculations never touch the store; they receive plain lists
- Renewal is an explicit batch, not a side effect of reading
- Every write is audited
"""

from datetime import date
from typing import Optional

from subtrack.audit import AuditLogger, create_correlation_id
from subtrack.billing import (
    BillingCalculator,
    collect_renewals,
    summarize,
    upcoming_renewals,
)
from subtrack.config import TrackerSettings, get_settings
from subtrack.currency import CurrencyConverter
from subtrack.models.currency import CurrencyCode
from subtrack.models.subscription import (
    CategoryGroup,
    PortfolioSummary,
    Subscription,
    UpcomingRenewal,
)
from subtrack.services.storage import (
    InMemorySubscriptionStore,
    SubscriptionStoreInterface,
)


class SubscriptionTracker:
    """
    Facade over a subscription store.

    Usage:
        tracker = SubscriptionTracker(store)
        renewed = tracker.run_renewals(date.today())
        summary = tracker.overview(date.today())
    """

    def __init__(
        self,
        store: Optional[SubscriptionStoreInterface] = None,
        settings: Optional[TrackerSettings] = None,
        converter: Optional[CurrencyConverter] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store if store is not None else InMemorySubscriptionStore()
        self._settings = settings or get_settings().tracker
        self._calculator = BillingCalculator(converter or CurrencyConverter())
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def store(self) -> SubscriptionStoreInterface:
        return self._store

    @property
    def display_currency(self) -> CurrencyCode:
        return self._settings.display_currency

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    def overview(
        self,
        today: date,
        display_currency: Optional[CurrencyCode] = None,
        group: Optional[CategoryGroup] = None,
        category: Optional[str] = None,
    ) -> PortfolioSummary:
        """
        Portfolio totals for `today` in the preferred (or given) currency,
        optionally narrowed to one category group and/or category.
        """
        currency = display_currency or self.display_currency
        summary = summarize(
            self._store.list_subscriptions(),
            currency,
            today,
            window_days=self._settings.upcoming_window_days,
            calculator=self._calculator,
            group=group,
            category=category,
        )
        self._audit_logger.log_summary_computed(
            reference_date=today,
            display_currency=summary.display_currency.value,
            total_count=summary.total_count,
        )
        return summary

    def upcoming(
        self,
        today: date,
        display_currency: Optional[CurrencyCode] = None,
    ) -> list[UpcomingRenewal]:
        """Subscriptions due within the configured window, soonest first."""
        return upcoming_renewals(
            self._store.list_subscriptions(),
            today,
            display_currency or self.display_currency,
            window_days=self._settings.upcoming_window_days,
            converter=self._calculator.converter,
        )

    # -------------------------------------------------------------------------
    # Renewal
    # -------------------------------------------------------------------------

    def run_renewals(self, today: date) -> list[Subscription]:
        """
        Advance every due auto-renewing subscription and persist the results.

        Safe to call on every app start: a second run on the same day finds
        nothing due and writes nothing.

        Records are written one at a time. If a write fails the error is
        audited and re-raised, and records written before it stay renewed.
        Calling again resumes the batch: already-renewed records are no
        longer due, so only the remaining ones are written.

        Returns:
            The renewed records, in store order
        """
        correlation_id = create_correlation_id()
        current = {s.id: s for s in self._store.list_subscriptions()}
        renewed = collect_renewals(current.values(), today)

        for subscription in renewed:
            try:
                self._store.update_subscription(subscription)
            except Exception as e:
                self._audit_logger.log_error(
                    error_type="renewal_write_failed",
                    error_message=str(e),
                    details={"subscription_id": subscription.id},
                    correlation_id=correlation_id,
                )
                raise

            self._audit_logger.log_renewal_applied(
                subscription_id=subscription.id,
                previous_due=current[subscription.id].next_due_date,
                next_due=subscription.next_due_date,
                correlation_id=correlation_id,
            )

        self._audit_logger.log_renewal_batch(
            reference_date=today,
            renewed_count=len(renewed),
            correlation_id=correlation_id,
        )
        return renewed

    # -------------------------------------------------------------------------
    # List edits
    # -------------------------------------------------------------------------

    def add(self, subscription: Subscription) -> None:
        self._store.add_subscription(subscription)
        self._audit_logger.log_subscription_added(subscription.id, subscription.name)

    def update(self, subscription: Subscription) -> None:
        self._store.update_subscription(subscription)
        self._audit_logger.log_subscription_updated(subscription.id, subscription.name)

    def remove(self, subscription_id: str) -> bool:
        removed = self._store.remove_subscription(subscription_id)
        self._audit_logger.log_subscription_removed(subscription_id, removed)
        return removed

    def replace_all(self, subscriptions: list[Subscription]) -> None:
        self._store.replace_all(subscriptions)
        self._audit_logger.log_subscriptions_replaced(len(subscriptions))
