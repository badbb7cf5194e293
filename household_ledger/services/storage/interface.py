"""
Abstract Storage Interface

DESIGN DECISION: The ledger core never talks to a database. A store
hands it snapshots, and writes go back through the store. This allows us to:
1. Swap the hosted backend for anything else
2. Use in-memory storage for testing
3. Keep the engines pure

The store owns uniqueness (by id, and by key for budgets) and
referential rules such as refusing to delete a category in use.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from household_ledger.models.audit import AuditEvent
from household_ledger.models.ledger import (
    Budget,
    Category,
    Expense,
    Settlement,
)


class HouseholdSnapshot(BaseModel):
    """
    Everything the engines need, taken at one logical instant.
    """
    model_config = ConfigDict(frozen=True)

    household_id: str
    expenses: tuple[Expense, ...] = ()
    settlements: tuple[Settlement, ...] = ()
    budgets: tuple[Budget, ...] = ()
    categories: tuple[Category, ...] = ()


class HouseholdStoreInterface(ABC):
    """
    Abstract interface for one household's records.

    Any storage implementation must implement these methods.
    Writes carrying another household's id raise StorageError.
    """

    # -- Expenses -------------------------------------------------------------

    @abstractmethod
    async def add_expense(self, expense: Expense) -> Expense:
        """
        Store a new expense.

        Raises:
            DuplicateError: If an expense with the same id exists
        """
        pass

    @abstractmethod
    async def get_expense(self, expense_id: UUID) -> Optional[Expense]:
        """Return the expense, or None if unknown."""
        pass

    @abstractmethod
    async def replace_expense(self, expense: Expense) -> Expense:
        """
        Replace an existing expense by id.

        Raises:
            NotFoundError: If the expense doesn't exist
        """
        pass

    @abstractmethod
    async def delete_expense(self, expense_id: UUID) -> bool:
        """Delete an expense. Returns False if it didn't exist."""
        pass

    @abstractmethod
    async def list_expenses(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Expense]:
        """
        List expenses, newest first.

        Args:
            date_from: Only expenses on or after this date
            date_to: Only expenses on or before this date
        """
        pass

    # -- Settlements ----------------------------------------------------------

    @abstractmethod
    async def add_settlement(self, settlement: Settlement) -> Settlement:
        """Store a new settlement."""
        pass

    @abstractmethod
    async def list_settlements(self) -> list[Settlement]:
        """List settlements, newest first."""
        pass

    # -- Budgets --------------------------------------------------------------

    @abstractmethod
    async def upsert_budget(self, budget: Budget) -> Budget:
        """
        Insert or replace the budget for (category_id, household_id, month).

        Returns the stored budget. An existing budget keeps its id.
        """
        pass

    @abstractmethod
    async def delete_budget(self, budget_id: UUID) -> bool:
        """Delete a budget. Returns False if it didn't exist."""
        pass

    @abstractmethod
    async def list_budgets(self, month: Optional[date] = None) -> list[Budget]:
        """List budgets, optionally only those for `month`."""
        pass

    # -- Categories -----------------------------------------------------------

    @abstractmethod
    async def add_category(self, category: Category) -> Category:
        """Store a new category."""
        pass

    @abstractmethod
    async def delete_category(self, category_id: str) -> bool:
        """
        Delete a category.

        Raises:
            CategoryInUseError: If any expense still references it
        """
        pass

    @abstractmethod
    async def list_categories(self) -> list[Category]:
        """List categories."""
        pass

    # -- Snapshots ------------------------------------------------------------

    @abstractmethod
    async def snapshot(self) -> HouseholdSnapshot:
        """All records at one logical instant."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: UUID,
    ) -> list[AuditEvent]:
        """All events for one entity, in chronological order."""
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """The most recent events, newest first."""
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


class CategoryInUseError(StorageError):
    """Attempted to delete a category that expenses still reference."""
    pass
