"""
Data Models Package

This package contains all Pydantic models used by the subscription tracker.
All data flowing through the billing core must conform to these schemas.
"""

from subtrack.models.currency import (
    BASE_CURRENCY,
    CurrencyCode,
    CurrencyMeta,
)
from subtrack.models.subscription import (
    BillingCycle,
    CategoryGroup,
    PortfolioSummary,
    Subscription,
    UpcomingRenewal,
)
from subtrack.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Currency models
    "BASE_CURRENCY",
    "CurrencyCode",
    "CurrencyMeta",
    # Subscription models
    "BillingCycle",
    "CategoryGroup",
    "PortfolioSummary",
    "Subscription",
    "UpcomingRenewal",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
