"""
Tests for Subscription Tracker models

Test strategy:
1. Unit tests for individual components (models, calculators)
2. Flow tests for the orchestrator (with in-memory storage)
3. No network or file I/O in tests
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from subtrack.models import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    BillingCycle,
    CategoryGroup,
    CurrencyCode,
    PortfolioSummary,
    Subscription,
)


class TestSubscriptionModel:
    """Tests for the Subscription record."""

    def test_subscription_creation(self):
        """Test Subscription creation with field names."""
        sub = Subscription(
            id="netflix",
            name="Netflix",
            price=Decimal("15.99"),
            currency=CurrencyCode.USD,
            cycle=BillingCycle.MONTHLY,
            next_due_date=date(2025, 7, 1),
            auto_renew=True,
        )
        assert sub.name == "Netflix"
        assert sub.price == Decimal("15.99")
        assert sub.auto_renew is True
        assert sub.start_date is None

    def test_subscription_from_export_payload(self):
        """Test that the app's camelCase export shape is accepted."""
        sub = Subscription.model_validate({
            "id": "1",
            "name": "Spotify",
            "category": "Premium Family",
            "categoryGroup": "影音娱乐",
            "categoryId": "music",
            "price": 9.99,
            "currency": "USD",
            "cycle": "monthly",
            "startISO": "2025-01-15",
            "nextDueISO": "2025-07-15",
            "autoRenew": True,
            "paymentMethodId": "card-1",
        })
        assert sub.price == Decimal("9.99")
        assert sub.currency == CurrencyCode.USD
        assert sub.start_date == date(2025, 1, 15)
        assert sub.next_due_date == date(2025, 7, 15)
        assert sub.auto_renew is True
        assert sub.category == "Premium Family"
        assert sub.category_id == "music"
        assert sub.group == CategoryGroup.ENTERTAINMENT
        assert sub.payment_method_id == "card-1"

    def test_name_strips_whitespace(self):
        """Test that whitespace is stripped from the name."""
        sub = Subscription(id="1", name="  iCloud  ", price=6, cycle="monthly")
        assert sub.name == "iCloud"

    def test_rejects_negative_price(self):
        """Test that negative prices are rejected."""
        with pytest.raises(ValueError):
            Subscription(id="1", name="Test", price=Decimal("-1"), cycle="monthly")

    def test_is_frozen(self):
        """Records are immutable values."""
        sub = Subscription(id="1", name="Test", price=5, cycle="monthly")
        with pytest.raises(ValidationError):
            sub.price = Decimal("6")


class TestSubscriptionNormalization:
    """Malformed optional fields degrade to safe defaults."""

    @pytest.mark.parametrize("raw", ["not-a-date", "2025-02-30", "", "   ", 12345])
    def test_unparseable_due_date_is_absent(self, raw):
        sub = Subscription(id="1", name="Test", price=5, cycle="monthly", nextDueISO=raw)
        assert sub.next_due_date is None

    def test_timestamp_due_date_is_reduced_to_date(self):
        sub = Subscription(
            id="1", name="Test", price=5, cycle="monthly",
            nextDueISO="2025-07-01T00:00:00.000Z",
        )
        assert sub.next_due_date == date(2025, 7, 1)

    def test_unknown_currency_falls_back_to_base(self):
        sub = Subscription(id="1", name="Test", price=5, cycle="monthly", currency="EUR")
        assert sub.currency == CurrencyCode.CNY

    def test_missing_currency_defaults_to_base(self):
        sub = Subscription(id="1", name="Test", price=5, cycle="monthly", currency=None)
        assert sub.currency == CurrencyCode.CNY

    def test_currency_is_case_insensitive(self):
        sub = Subscription(id="1", name="Test", price=5, cycle="monthly", currency="usd")
        assert sub.currency == CurrencyCode.USD

    def test_unknown_cycle_becomes_other(self):
        sub = Subscription(id="1", name="Test", price=5, cycle="weekly")
        assert sub.cycle == BillingCycle.OTHER

    def test_missing_auto_renew_is_false(self):
        sub = Subscription(id="1", name="Test", price=5, cycle="monthly", autoRenew=None)
        assert sub.auto_renew is False


class TestSubscriptionCopies:
    """Tests for the copy/export helpers."""

    def test_with_next_due_date_keeps_identity(self):
        original = Subscription(
            id="1", name="Test", price=5, cycle="monthly",
            next_due_date=date(2025, 6, 1), auto_renew=True,
        )
        moved = original.with_next_due_date(date(2025, 7, 1))

        assert moved.id == original.id
        assert moved.next_due_date == date(2025, 7, 1)
        assert original.next_due_date == date(2025, 6, 1)

    def test_to_export_dict(self):
        sub = Subscription(
            id="1",
            name="Spotify",
            price=Decimal("9.99"),
            currency=CurrencyCode.USD,
            cycle=BillingCycle.YEARLY,
            next_due_date=date(2025, 7, 15),
            auto_renew=True,
        )
        exported = sub.to_export_dict()

        assert exported["nextDueISO"] == "2025-07-15"
        assert exported["autoRenew"] is True
        assert exported["price"] == 9.99
        assert exported["cycle"] == "yearly"
        assert exported["currency"] == "USD"
        assert "startISO" not in exported
        assert "paymentMethodId" not in exported

    def test_export_keeps_category_keys(self):
        """category and categoryGroup come back under the same keys."""
        payload = {
            "id": "1",
            "name": "CapCut",
            "category": "剪映专业版",
            "categoryGroup": "工作",
            "price": 218,
            "cycle": "yearly",
        }
        exported = Subscription.model_validate(payload).to_export_dict()

        assert exported["category"] == "剪映专业版"
        assert exported["categoryGroup"] == "工作"
        assert "categoryId" not in exported
        assert "group" not in exported

    def test_export_payload_reads_back(self):
        sub = Subscription(
            id="1", name="Test", price=Decimal("12.5"), cycle="quarterly",
            start_date=date(2025, 1, 1),
        )
        assert Subscription.model_validate(sub.to_export_dict()) == sub


class TestCategoryGroup:
    """Tests for the closed category group set."""

    def test_group_labels(self):
        assert [g.value for g in CategoryGroup] == ["影音娱乐", "工作", "生活", "其他"]

    @pytest.mark.parametrize("raw,expected", [
        ("工作", CategoryGroup.WORK),
        (" 生活 ", CategoryGroup.LIFE),
        ("life", CategoryGroup.LIFE),
        (CategoryGroup.ENTERTAINMENT, CategoryGroup.ENTERTAINMENT),
        ("学习", CategoryGroup.OTHER),
        ("", CategoryGroup.OTHER),
        (None, CategoryGroup.OTHER),
        (3, CategoryGroup.OTHER),
    ])
    def test_normalize(self, raw, expected):
        assert CategoryGroup.normalize(raw) is expected

    def test_record_falls_back_to_other(self):
        sub = Subscription(id="1", name="Test", price=5, cycle="monthly", categoryGroup="学习")
        assert sub.group is CategoryGroup.OTHER

    def test_missing_group_is_other(self):
        sub = Subscription(id="1", name="Test", price=5, cycle="monthly")
        assert sub.group is CategoryGroup.OTHER


class TestBillingCycle:
    """Tests for the billing cycle enum."""

    def test_months_per_cycle(self):
        assert BillingCycle.MONTHLY.months == 1
        assert BillingCycle.QUARTERLY.months == 3
        assert BillingCycle.YEARLY.months == 12
        assert BillingCycle.LIFETIME.months == 0
        assert BillingCycle.OTHER.months == 0

    def test_is_recurring(self):
        assert BillingCycle.MONTHLY.is_recurring is True
        assert BillingCycle.LIFETIME.is_recurring is False
        assert BillingCycle.OTHER.is_recurring is False

    def test_cycle_values(self):
        expected = ["monthly", "quarterly", "yearly", "lifetime", "other"]
        assert [c.value for c in BillingCycle] == expected


class TestPortfolioSummary:
    """Tests for the summary model."""

    def test_rejects_negative_count(self):
        with pytest.raises(ValueError):
            PortfolioSummary(
                display_currency=CurrencyCode.CNY,
                reference_date=date(2025, 6, 15),
                total_count=-1,
                monthly_spend=Decimal("0"),
                yearly_spend=Decimal("0"),
                window_days=7,
                due_within_days=0,
            )


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.SUBSCRIPTION_ADDED,
            description="Subscription added",
        )
        assert event.event_type == AuditEventType.SUBSCRIPTION_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.SUBSCRIPTION_UPDATED,
            subscription_id="netflix",
            description="Subscription updated",
            details={"name": "Netflix"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "subscription_updated"
        assert log_dict["subscription_id"] == "netflix"
        assert log_dict["details"]["name"] == "Netflix"
        assert log_dict["correlation_id"] is None

    def test_audit_event_builder_renewal_applied(self):
        """Test AuditEventBuilder.renewal_applied."""
        correlation_id = uuid4()

        event = AuditEventBuilder.renewal_applied(
            subscription_id="netflix",
            previous_due=date(2025, 6, 14),
            next_due=date(2025, 7, 14),
            correlation_id=correlation_id,
        )

        assert event.event_type == AuditEventType.RENEWAL_APPLIED
        assert event.subscription_id == "netflix"
        assert event.correlation_id == correlation_id
        assert event.details == {"previous_due": "2025-06-14", "next_due": "2025-07-14"}

    def test_audit_event_builder_removed_unknown_is_warning(self):
        event = AuditEventBuilder.subscription_removed("missing", existed=False)
        assert event.severity == AuditSeverity.WARNING


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
