"""
In-Memory Storage Implementation

Backs the store interfaces with plain Python containers. Used by the
tests and by any caller that keeps the subscription list in process
(the mobile app persists it elsewhere and hands it over).

Records are frozen pydantic models, so handing them out directly is safe.
"""

from typing import Optional
from uuid import UUID

from subtrack.models.audit import AuditEvent
from subtrack.models.subscription import Subscription
from subtrack.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    SubscriptionStoreInterface,
)


class InMemorySubscriptionStore(SubscriptionStoreInterface):
    """Ordered subscription list keyed by id."""

    def __init__(self, subscriptions: Optional[list[Subscription]] = None):
        self._items: dict[str, Subscription] = {}
        if subscriptions:
            self.replace_all(subscriptions)

    def __len__(self) -> int:
        return len(self._items)

    def list_subscriptions(self) -> list[Subscription]:
        return list(self._items.values())

    def get_subscription(self, subscription_id: str) -> Optional[Subscription]:
        return self._items.get(subscription_id)

    def add_subscription(self, subscription: Subscription) -> None:
        if subscription.id in self._items:
            raise DuplicateError(f"Subscription already exists: {subscription.id}")
        self._items[subscription.id] = subscription

    def update_subscription(self, subscription: Subscription) -> None:
        if subscription.id not in self._items:
            raise NotFoundError(f"Subscription not found: {subscription.id}")
        # Assigning to an existing key keeps dict insertion order
        self._items[subscription.id] = subscription

    def remove_subscription(self, subscription_id: str) -> bool:
        return self._items.pop(subscription_id, None) is not None

    def replace_all(self, subscriptions: list[Subscription]) -> None:
        items: dict[str, Subscription] = {}
        for subscription in subscriptions:
            if subscription.id in items:
                raise DuplicateError(f"Duplicate subscription id: {subscription.id}")
            items[subscription.id] = subscription
        self._items = items


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_correlation_id(self, correlation_id: UUID) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def get_events_by_subscription(self, subscription_id: str) -> list[AuditEvent]:
        return [e for e in self._events if e.subscription_id == subscription_id]

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
