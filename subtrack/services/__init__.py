"""Services package."""

from subtrack.services.storage import (
    AuditStorageInterface,
    DuplicateError,
    InMemoryAuditStorage,
    InMemorySubscriptionStore,
    NotFoundError,
    StorageError,
    SubscriptionStoreInterface,
)

__all__ = [
    "AuditStorageInterface",
    "DuplicateError",
    "InMemoryAuditStorage",
    "InMemorySubscriptionStore",
    "NotFoundError",
    "StorageError",
    "SubscriptionStoreInterface",
]
