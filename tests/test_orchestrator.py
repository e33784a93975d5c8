"""
Flow tests for SubscriptionTracker (in-memory store, in-memory audit log).
"""

import pytest
from datetime import date
from decimal import Decimal

from subtrack.audit import AuditLogger
from subtrack.config import TrackerSettings
from subtrack.currency import CurrencyConverter
from subtrack.models import AuditEventType, CategoryGroup, CurrencyCode
from subtrack.orchestrator import SubscriptionTracker
from subtrack.services.storage import (
    InMemoryAuditStorage,
    InMemorySubscriptionStore,
    StorageError,
)


class FailingUpdateStore(InMemorySubscriptionStore):
    """Store whose writes fail, to exercise the error path."""

    def update_subscription(self, subscription):
        raise StorageError("disk full")


class FlakyUpdateStore(InMemorySubscriptionStore):
    """Store that fails writes for one id until told otherwise."""

    def __init__(self, subscriptions, fail_on):
        super().__init__(subscriptions)
        self.fail_on = fail_on

    def update_subscription(self, subscription):
        if subscription.id == self.fail_on:
            raise StorageError("write rejected")
        super().update_subscription(subscription)


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def settings():
    return TrackerSettings(display_currency=CurrencyCode.CNY, upcoming_window_days=7)


@pytest.fixture
def tracker(make_subscription, settings, audit_storage):
    store = InMemorySubscriptionStore([
        make_subscription(
            id="overdue", name="Video", price="30", auto_renew=True,
            next_due_date=date(2025, 5, 1),
        ),
        make_subscription(
            id="soon", name="Cloud", price="10", currency="USD", auto_renew=True,
            next_due_date=date(2025, 6, 18),
        ),
        make_subscription(
            id="manual", name="Gym", price="200", auto_renew=False,
            next_due_date=date(2025, 6, 1),
        ),
    ])
    return SubscriptionTracker(
        store=store,
        settings=settings,
        audit_logger=AuditLogger(audit_storage),
    )


class TestRunRenewals:
    """Tests for the renewal flow."""

    def test_renews_and_persists(self, tracker, today):
        renewed = tracker.run_renewals(today)

        assert [s.id for s in renewed] == ["overdue"]
        assert tracker.store.get_subscription("overdue").next_due_date == date(2025, 7, 1)
        # Untouched records stay as they were
        assert tracker.store.get_subscription("manual").next_due_date == date(2025, 6, 1)
        assert tracker.store.get_subscription("soon").next_due_date == date(2025, 6, 18)

    def test_second_run_is_noop(self, tracker, today):
        tracker.run_renewals(today)
        snapshot = tracker.store.list_subscriptions()

        assert tracker.run_renewals(today) == []
        assert tracker.store.list_subscriptions() == snapshot

    def test_audits_each_renewal_and_the_batch(self, tracker, today, audit_storage):
        tracker.run_renewals(today)

        applied = [e for e in audit_storage.events if e.event_type == AuditEventType.RENEWAL_APPLIED]
        batches = [e for e in audit_storage.events if e.event_type == AuditEventType.RENEWAL_BATCH_COMPLETED]

        assert len(applied) == 1
        assert applied[0].subscription_id == "overdue"
        assert applied[0].details == {"previous_due": "2025-05-01", "next_due": "2025-07-01"}
        assert len(batches) == 1
        assert batches[0].details["renewed_count"] == 1
        assert applied[0].correlation_id == batches[0].correlation_id

    def test_write_failure_is_audited_and_raised(self, make_subscription, settings, audit_storage, today):
        store = FailingUpdateStore([
            make_subscription(id="x", auto_renew=True, next_due_date=date(2025, 6, 1)),
        ])
        tracker = SubscriptionTracker(
            store=store, settings=settings, audit_logger=AuditLogger(audit_storage),
        )

        with pytest.raises(StorageError, match="disk full"):
            tracker.run_renewals(today)

        errors = [e for e in audit_storage.events if e.event_type == AuditEventType.SYSTEM_ERROR]
        assert len(errors) == 1
        assert errors[0].details == {"subscription_id": "x"}

    def test_retry_after_partial_failure_resumes(self, make_subscription, settings, audit_storage, today):
        store = FlakyUpdateStore(
            [
                make_subscription(id="a", auto_renew=True, next_due_date=date(2025, 6, 1)),
                make_subscription(id="b", auto_renew=True, next_due_date=date(2025, 6, 2)),
            ],
            fail_on="b",
        )
        tracker = SubscriptionTracker(
            store=store, settings=settings, audit_logger=AuditLogger(audit_storage),
        )

        with pytest.raises(StorageError):
            tracker.run_renewals(today)
        assert store.get_subscription("a").next_due_date == date(2025, 7, 1)
        assert store.get_subscription("b").next_due_date == date(2025, 6, 2)

        store.fail_on = None
        renewed = tracker.run_renewals(today)

        assert [s.id for s in renewed] == ["b"]
        assert store.get_subscription("a").next_due_date == date(2025, 7, 1)
        assert store.get_subscription("b").next_due_date == date(2025, 7, 2)


class TestOverview:
    """Tests for the read side."""

    def test_overview_uses_configured_currency(self, tracker, today):
        summary = tracker.overview(today)

        assert summary.display_currency == CurrencyCode.CNY
        assert summary.total_count == 3
        # 30 + 72 + 200
        assert summary.monthly_spend == Decimal("302.00")
        # "soon" is 3 days out; "overdue" and "manual" are past due
        assert summary.due_within_days == 1

    def test_overview_in_other_currency(self, tracker, today):
        summary = tracker.overview(today, display_currency=CurrencyCode.USD)
        # 30 CNY -> 4.17, 10 USD -> 10.00, 200 CNY -> 27.78
        assert summary.monthly_spend == Decimal("41.95")

    def test_overview_after_renewal(self, tracker, today):
        tracker.run_renewals(today)
        assert tracker.overview(today).due_within_days == 1

    def test_upcoming(self, tracker, today):
        rows = tracker.upcoming(today)
        assert [r.id for r in rows] == ["soon"]
        assert rows[0].price_label == "$10.00/mo · ≈ ¥72.00/mo"

    def test_injected_rates_reach_totals_and_labels(self, tracker, settings, today):
        custom = SubscriptionTracker(
            store=tracker.store,
            settings=settings,
            converter=CurrencyConverter({"CNY": 1, "USD": 7, "JPY": 0.05}),
            audit_logger=AuditLogger(InMemoryAuditStorage()),
        )

        # 30 + 70 + 200
        assert custom.overview(today).monthly_spend == Decimal("300.00")
        assert custom.upcoming(today)[0].price_label == "$10.00/mo · ≈ ¥70.00/mo"

    def test_overview_filtered_by_group(self, make_subscription, settings, today):
        tracker = SubscriptionTracker(
            store=InMemorySubscriptionStore([
                make_subscription(id="a", price="30", group="工作", category="云存储"),
                make_subscription(id="b", price="20", group="工作", category="办公"),
                make_subscription(id="c", price="50", group="生活"),
            ]),
            settings=settings,
            audit_logger=AuditLogger(InMemoryAuditStorage()),
        )

        work = tracker.overview(today, group=CategoryGroup.WORK)
        assert work.total_count == 2
        assert work.monthly_spend == Decimal("50.00")

        storage = tracker.overview(today, group=CategoryGroup.WORK, category="云存储")
        assert storage.monthly_spend == Decimal("30.00")


class TestListEdits:
    """Tests for audited store edits."""

    def test_add_update_remove(self, tracker, make_subscription, audit_storage):
        sub = make_subscription(id="new", name="News")

        tracker.add(sub)
        tracker.update(sub.with_next_due_date(date(2025, 8, 1)))
        assert tracker.remove("new") is True
        assert tracker.remove("new") is False

        types = [e.event_type for e in audit_storage.events]
        assert types == [
            AuditEventType.SUBSCRIPTION_ADDED,
            AuditEventType.SUBSCRIPTION_UPDATED,
            AuditEventType.SUBSCRIPTION_REMOVED,
            AuditEventType.SUBSCRIPTION_REMOVED,
        ]

    def test_replace_all(self, tracker, make_subscription, audit_storage):
        tracker.replace_all([make_subscription(id="only")])

        assert [s.id for s in tracker.store.list_subscriptions()] == ["only"]
        assert audit_storage.events[-1].details == {"count": 1}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
