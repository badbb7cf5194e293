"""Services package."""

from household_ledger.services.storage import (
    AuditStorageInterface,
    CategoryInUseError,
    DuplicateError,
    HouseholdSnapshot,
    HouseholdStoreInterface,
    InMemoryAuditStorage,
    InMemoryHouseholdStore,
    NotFoundError,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "CategoryInUseError",
    "DuplicateError",
    "HouseholdSnapshot",
    "HouseholdStoreInterface",
    "InMemoryAuditStorage",
    "InMemoryHouseholdStore",
    "NotFoundError",
    "StorageError",
]
