"""
Storage Services Package

Provides abstract interfaces and an in-memory implementation for the
household's records. The hosted backend plugs in behind the same
interfaces.
"""

from household_ledger.services.storage.interface import (
    AuditStorageInterface,
    CategoryInUseError,
    DuplicateError,
    HouseholdSnapshot,
    HouseholdStoreInterface,
    NotFoundError,
    StorageError,
)
from household_ledger.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryHouseholdStore,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "HouseholdSnapshot",
    "HouseholdStoreInterface",
    # Exceptions
    "CategoryInUseError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryHouseholdStore",
]
