"""
In-Memory Storage

Dict-backed implementations of the storage interfaces. Used by tests
and by callers that keep their own persistence (the hosted backend
loads records into one of these and the engines read snapshots).
"""

from datetime import date
from typing import Iterable, Optional
from uuid import UUID

from household_ledger.models.audit import AuditEvent
from household_ledger.models.ledger import (
    Budget,
    Category,
    Expense,
    Settlement,
)
from household_ledger.services.storage.interface import (
    AuditStorageInterface,
    CategoryInUseError,
    DuplicateError,
    HouseholdSnapshot,
    HouseholdStoreInterface,
    NotFoundError,
    StorageError,
)


def _newest_first(records, key):
    return sorted(records, key=key, reverse=True)


class InMemoryHouseholdStore(HouseholdStoreInterface):
    """
    One household's records held in dicts keyed by id.

    Records are immutable pydantic models, so handing them out in
    snapshots never exposes mutable state.
    """

    def __init__(
        self,
        household_id: str,
        categories: Optional[Iterable[Category]] = None,
    ):
        self.household_id = household_id
        self._expenses: dict[UUID, Expense] = {}
        self._settlements: dict[UUID, Settlement] = {}
        self._budgets: dict[tuple[str, str, date], Budget] = {}
        self._categories: dict[str, Category] = {}
        for category in categories or ():
            self._categories[category.id] = category

    def _check_household(self, record) -> None:
        if record.household_id != self.household_id:
            raise StorageError(
                f"{type(record).__name__} belongs to household "
                f"{record.household_id!r}, not {self.household_id!r}"
            )

    # -- Expenses -------------------------------------------------------------

    async def add_expense(self, expense: Expense) -> Expense:
        self._check_household(expense)
        if expense.id in self._expenses:
            raise DuplicateError(f"Expense already exists: {expense.id}")
        self._expenses[expense.id] = expense
        return expense

    async def get_expense(self, expense_id: UUID) -> Optional[Expense]:
        return self._expenses.get(expense_id)

    async def replace_expense(self, expense: Expense) -> Expense:
        self._check_household(expense)
        if expense.id not in self._expenses:
            raise NotFoundError(f"Expense not found: {expense.id}")
        self._expenses[expense.id] = expense
        return expense

    async def delete_expense(self, expense_id: UUID) -> bool:
        return self._expenses.pop(expense_id, None) is not None

    async def list_expenses(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Expense]:
        expenses = [
            e for e in self._expenses.values()
            if (date_from is None or e.date >= date_from)
            and (date_to is None or e.date <= date_to)
        ]
        return _newest_first(expenses, key=lambda e: (e.date, e.created_at))

    # -- Settlements ----------------------------------------------------------

    async def add_settlement(self, settlement: Settlement) -> Settlement:
        self._check_household(settlement)
        if settlement.id in self._settlements:
            raise DuplicateError(f"Settlement already exists: {settlement.id}")
        self._settlements[settlement.id] = settlement
        return settlement

    async def list_settlements(self) -> list[Settlement]:
        return _newest_first(self._settlements.values(), key=lambda s: (s.date, s.created_at))

    # -- Budgets --------------------------------------------------------------

    async def upsert_budget(self, budget: Budget) -> Budget:
        self._check_household(budget)
        existing = self._budgets.get(budget.key)
        if existing is not None:
            budget = budget.model_copy(update={"id": existing.id})
        self._budgets[budget.key] = budget
        return budget

    async def delete_budget(self, budget_id: UUID) -> bool:
        for key, budget in self._budgets.items():
            if budget.id == budget_id:
                del self._budgets[key]
                return True
        return False

    async def list_budgets(self, month: Optional[date] = None) -> list[Budget]:
        budgets = list(self._budgets.values())
        if month is not None:
            budgets = [b for b in budgets if b.month == month.replace(day=1)]
        return _newest_first(budgets, key=lambda b: b.month)

    # -- Categories -----------------------------------------------------------

    async def add_category(self, category: Category) -> Category:
        self._check_household(category)
        if category.id in self._categories:
            raise DuplicateError(f"Category already exists: {category.id}")
        self._categories[category.id] = category
        return category

    async def delete_category(self, category_id: str) -> bool:
        if any(e.category_id == category_id for e in self._expenses.values()):
            raise CategoryInUseError(f"Category has expenses: {category_id}")
        return self._categories.pop(category_id, None) is not None

    async def list_categories(self) -> list[Category]:
        return list(self._categories.values())

    # -- Snapshots ------------------------------------------------------------

    async def snapshot(self) -> HouseholdSnapshot:
        return HouseholdSnapshot(
            household_id=self.household_id,
            expenses=tuple(await self.list_expenses()),
            settlements=tuple(await self.list_settlements()),
            budgets=tuple(await self.list_budgets()),
            categories=tuple(await self.list_categories()),
        )


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: UUID,
    ) -> list[AuditEvent]:
        return [
            e for e in self._events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
