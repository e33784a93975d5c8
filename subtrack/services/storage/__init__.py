"""
Storage Services Package

Provides abstract interfaces and an in-memory implementation for the
subscription list and the audit log.
"""

from subtrack.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    StorageError,
    SubscriptionStoreInterface,
)
from subtrack.services.storage.memory import (
    InMemoryAuditStorage,
    InMemorySubscriptionStore,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "SubscriptionStoreInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemorySubscriptionStore",
]
