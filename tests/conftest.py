"""Shared fixtures for the billing core tests."""

from datetime import date

import pytest

from subtrack.models import BillingCycle, CurrencyCode, Subscription


@pytest.fixture
def today() -> date:
    return date(2025, 6, 15)


@pytest.fixture
def make_subscription():
    """Factory for Subscription records with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides) -> Subscription:
        counter["n"] += 1
        fields = {
            "id": f"sub-{counter['n']}",
            "name": f"Subscription {counter['n']}",
            "price": "10",
            "currency": CurrencyCode.CNY,
            "cycle": BillingCycle.MONTHLY,
        }
        fields.update(overrides)
        return Subscription(**fields)

    return _make
