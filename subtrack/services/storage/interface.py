"""
Abstract Storage Interface

DESIGN DECISION: The subscription list lives behind an abstract store.
This allows us to:
1. Keep the billing core free of global state (it takes plain lists)
2. Use in-memory storage for testing
3. Swap in a file or database backend later
4. Keep business logic decoupled from storage implementation

The interface is intentionally small: the operations the app's list
screen needs (get/add/update/remove/replace) and nothing more.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from subtrack.models.subscription import Subscription
from subtrack.models.audit import AuditEvent


class SubscriptionStoreInterface(ABC):
    """
    Abstract interface for subscription storage.

    Order matters for display only; calculations ignore it.
    """

    @abstractmethod
    def list_subscriptions(self) -> list[Subscription]:
        """
        All subscriptions, in insertion order.

        Returns:
            A new list; mutating it does not affect the store
        """
        pass

    @abstractmethod
    def get_subscription(self, subscription_id: str) -> Optional[Subscription]:
        """
        Retrieve a subscription by ID.

        Returns:
            The subscription if found, None otherwise
        """
        pass

    @abstractmethod
    def add_subscription(self, subscription: Subscription) -> None:
        """
        Append a new subscription.

        Raises:
            DuplicateError: If a subscription with the same id exists
        """
        pass

    @abstractmethod
    def update_subscription(self, subscription: Subscription) -> None:
        """
        Replace the stored record that has the same id, keeping its position.

        Raises:
            NotFoundError: If no subscription has this id
        """
        pass

    @abstractmethod
    def remove_subscription(self, subscription_id: str) -> bool:
        """
        Delete a subscription by ID.

        Returns:
            True if something was removed, False if the id was unknown
        """
        pass

    @abstractmethod
    def replace_all(self, subscriptions: list[Subscription]) -> None:
        """
        Replace the whole list (e.g. after an import).

        Raises:
            DuplicateError: If the new list repeats an id
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g. one renewal run).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    def get_events_by_subscription(
        self,
        subscription_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for one subscription.

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
