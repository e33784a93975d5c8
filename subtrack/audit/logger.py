"""
Audit Logger

DESIGN DECISION: Every change the tracker makes to stored subscriptions
is logged. This provides:
1. Complete traceability of renewals
2. Debugging capability when totals look off
3. History the user can inspect

The audit logger:
- Always writes a structured local log line
- Optionally appends to an audit store
- Gracefully handles store failures (never crashes the caller)
- Supports correlation IDs to tie one renewal run together
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID, uuid4

import structlog

from subtrack.config import LoggingSettings, get_settings
from subtrack.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from subtrack.services.storage import AuditStorageInterface


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Configure structlog (and the stdlib root logger it writes through).

    JSON lines by default; console rendering when json_output is False.
    """
    settings = settings or get_settings().logging

    logging.basicConfig(format="%(message)s", level=settings.level)
    logging.getLogger().setLevel(settings.level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit store, if one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("subtrack.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_subscription_added(self, subscription_id: str, name: str) -> None:
        self.log(AuditEventBuilder.subscription_added(subscription_id, name))

    def log_subscription_updated(self, subscription_id: str, name: str) -> None:
        self.log(AuditEventBuilder.subscription_updated(subscription_id, name))

    def log_subscription_removed(self, subscription_id: str, existed: bool) -> None:
        self.log(AuditEventBuilder.subscription_removed(subscription_id, existed))

    def log_subscriptions_replaced(self, count: int) -> None:
        self.log(AuditEventBuilder.subscriptions_replaced(count))

    def log_renewal_applied(
        self,
        subscription_id: str,
        previous_due: date,
        next_due: date,
        correlation_id: UUID,
    ) -> None:
        """Log one subscription's due date moving forward."""
        event = AuditEventBuilder.renewal_applied(
            subscription_id=subscription_id,
            previous_due=previous_due,
            next_due=next_due,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_renewal_batch(
        self,
        reference_date: date,
        renewed_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log the end of a renewal run."""
        event = AuditEventBuilder.renewal_batch_completed(
            reference_date=reference_date,
            renewed_count=renewed_count,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_summary_computed(
        self,
        reference_date: date,
        display_currency: str,
        total_count: int,
    ) -> None:
        event = AuditEventBuilder.summary_computed(
            reference_date=reference_date,
            display_currency=display_currency,
            total_count=total_count,
        )
        self.log(event)

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a renewal run and pass it to every
    event the run produces.
    """
    return uuid4()
