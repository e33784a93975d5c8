"""
Audit Models for Subscription Tracker

Every change the tracker makes to the subscription store is logged:
1. Complete traceability of renewals (what moved, from when to when)
2. Debugging information when totals look wrong
3. Ability to reconstruct history

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
The pure billing core never emits events; only the orchestrator does.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Store changes
    SUBSCRIPTION_ADDED = "subscription_added"
    SUBSCRIPTION_UPDATED = "subscription_updated"
    SUBSCRIPTION_REMOVED = "subscription_removed"
    SUBSCRIPTIONS_REPLACED = "subscriptions_replaced"

    # Renewal
    RENEWAL_APPLIED = "renewal_applied"
    RENEWAL_BATCH_COMPLETED = "renewal_batch_completed"

    # Read side
    SUMMARY_COMPUTED = "summary_computed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which subscription is this about?
    subscription_id: Optional[str] = Field(
        default=None,
        description="ID of the subscription this event relates to"
    )

    # Correlation - for tracking related events (e.g. one renewal run)
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "subscription_id": self.subscription_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.renewal_applied(sub_id, old, new, correlation_id)
    """

    @staticmethod
    def subscription_added(subscription_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBSCRIPTION_ADDED,
            subscription_id=subscription_id,
            description=f"Subscription added: {name}",
            details={"name": name},
        )

    @staticmethod
    def subscription_updated(subscription_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBSCRIPTION_UPDATED,
            subscription_id=subscription_id,
            description=f"Subscription updated: {name}",
            details={"name": name},
        )

    @staticmethod
    def subscription_removed(subscription_id: str, existed: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBSCRIPTION_REMOVED,
            severity=AuditSeverity.INFO if existed else AuditSeverity.WARNING,
            subscription_id=subscription_id,
            description=(
                "Subscription removed" if existed
                else "Remove requested for unknown subscription"
            ),
            details={"existed": existed},
        )

    @staticmethod
    def subscriptions_replaced(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBSCRIPTIONS_REPLACED,
            description=f"Subscription list replaced ({count} records)",
            details={"count": count},
        )

    @staticmethod
    def renewal_applied(
        subscription_id: str,
        previous_due: date,
        next_due: date,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RENEWAL_APPLIED,
            subscription_id=subscription_id,
            correlation_id=correlation_id,
            description=f"Due date advanced from {previous_due} to {next_due}",
            details={
                "previous_due": previous_due.isoformat(),
                "next_due": next_due.isoformat(),
            },
        )

    @staticmethod
    def renewal_batch_completed(
        reference_date: date,
        renewed_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RENEWAL_BATCH_COMPLETED,
            correlation_id=correlation_id,
            description=f"Renewal run for {reference_date}: {renewed_count} renewed",
            details={
                "reference_date": reference_date.isoformat(),
                "renewed_count": renewed_count,
            },
        )

    @staticmethod
    def summary_computed(
        reference_date: date,
        display_currency: str,
        total_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUMMARY_COMPUTED,
            severity=AuditSeverity.DEBUG,
            description=f"Summary computed for {reference_date}",
            details={
                "reference_date": reference_date.isoformat(),
                "display_currency": display_currency,
                "total_count": total_count,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"System error: {error_type}",
            details=details or {},
            error_message=error_message,
        )
