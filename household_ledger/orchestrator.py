"""
Household Ledger Service

This module ties together the store, the engines and the audit log,
and defines the end-to-end flows a member triggers:
1. Recording, editing and deleting expenses
2. Settling up
3. Setting and copying budgets
4. Reading the balance, insights and reports

DESIGN DECISION: The service holds no ledger state of its own. Every
read takes a fresh snapshot from the store and runs the pure engines on
it, so re-running after any change (local or remote) is always safe.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from household_ledger.audit import AuditLogger
from household_ledger.insights import (
    InsightAnalyzer,
    category_breakdown,
    expense_reminder,
    monthly_comparison,
)
from household_ledger.ledger import (
    create_expense,
    create_settlement,
    edit_expense,
    net_balance,
    share_of,
    suggest_settlement,
)
from household_ledger.models.insight import CategoryTotal, Insight, MonthSummary, Reminder
from household_ledger.models.ledger import (
    Budget,
    Expense,
    ExpenseDraft,
    Member,
    Settlement,
    default_categories,
)
from household_ledger.services.storage import (
    HouseholdStoreInterface,
    InMemoryAuditStorage,
    InMemoryHouseholdStore,
    NotFoundError,
    StorageError,
)


class LedgerServiceError(Exception):
    """A household action could not be completed."""
    pass


class HouseholdLedgerService:
    """
    Everything one member can do with their household's ledger.

    The member is the viewpoint for every balance and insight. Without
    a partner the household runs in solo mode.
    """

    def __init__(
        self,
        store: HouseholdStoreInterface,
        household_id: str,
        member_id: str,
        partner: Optional[Member] = None,
        audit_logger: Optional[AuditLogger] = None,
        analyzer: Optional[InsightAnalyzer] = None,
    ):
        self._store = store
        self.household_id = household_id
        self.member_id = member_id
        self.partner = partner
        self._audit_logger = audit_logger
        self._analyzer = analyzer or InsightAnalyzer()

    @property
    def partner_id(self) -> Optional[str]:
        return self.partner.id if self.partner else None

    @property
    def partner_name(self) -> Optional[str]:
        return (self.partner.name or None) if self.partner else None

    async def _storage_failed(self, operation: str, error: StorageError) -> None:
        if self._audit_logger:
            await self._audit_logger.log_storage_error(
                operation=operation,
                error_message=str(error),
                household_id=self.household_id,
            )

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    async def record_expense(self, draft: ExpenseDraft) -> Expense:
        """Create an expense entered by this member and store it."""
        expense = create_expense(draft, created_by=self.member_id, household_id=self.household_id)

        try:
            await self._store.add_expense(expense)
        except StorageError as e:
            await self._storage_failed("add_expense", e)
            raise

        if self._audit_logger:
            await self._audit_logger.log_expense_created(expense)

        return expense

    async def edit_expense(self, expense_id: UUID, **changes: Any) -> Expense:
        """
        Replace an expense with an edited copy.

        Raises:
            NotFoundError: If the expense doesn't exist
            ImmutableFieldError: If the edit touches a fixed field
        """
        existing = await self._store.get_expense(expense_id)
        if existing is None:
            raise NotFoundError(f"Expense not found: {expense_id}")

        updated = edit_expense(existing, **changes)
        await self._store.replace_expense(updated)

        if self._audit_logger:
            changed_fields = sorted(
                name for name in changes
                if getattr(existing, name) != getattr(updated, name)
            )
            await self._audit_logger.log_expense_updated(updated, self.member_id, changed_fields)

        return updated

    async def delete_expense(self, expense_id: UUID) -> bool:
        deleted = await self._store.delete_expense(expense_id)
        if deleted and self._audit_logger:
            await self._audit_logger.log_expense_deleted(
                expense_id=expense_id,
                household_id=self.household_id,
                member_id=self.member_id,
            )
        return deleted

    # -------------------------------------------------------------------------
    # Settlements
    # -------------------------------------------------------------------------

    async def record_settlement(
        self,
        amount: Decimal,
        paid_by: str,
        paid_to: str,
        on: Optional[date] = None,
    ) -> Settlement:
        settlement = create_settlement(amount, paid_by, paid_to, self.household_id, on=on)

        try:
            await self._store.add_settlement(settlement)
        except StorageError as e:
            await self._storage_failed("add_settlement", e)
            raise

        if self._audit_logger:
            await self._audit_logger.log_settlement_recorded(settlement)

        return settlement

    async def settle_up(self, on: Optional[date] = None) -> Optional[Settlement]:
        """
        Record the settlement that brings the balance to zero.

        Returns None when the household is already settled, and in solo
        mode, where a self-settlement would leave the balance unchanged.
        """
        if self.partner is None:
            return None

        proposal = suggest_settlement(await self.balance(), self.member_id, self.partner_id)
        if proposal is None:
            return None
        return await self.record_settlement(
            proposal.amount, proposal.paid_by, proposal.paid_to, on=on
        )

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------

    async def set_budget(self, category_id: str, month: date, amount: Decimal) -> Budget:
        """Set the category's budget for the month, replacing any previous one."""
        if amount < 0:
            raise LedgerServiceError("Budget amount cannot be negative")

        budget = await self._store.upsert_budget(Budget(
            category_id=category_id,
            household_id=self.household_id,
            month=month,
            amount=amount,
        ))

        if self._audit_logger:
            await self._audit_logger.log_budget_set(budget, self.member_id)

        return budget

    async def budgets_for_month(self, month: date) -> list[Budget]:
        return await self._store.list_budgets(month)

    async def total_budget(self, month: date) -> Decimal:
        return sum((b.amount for b in await self.budgets_for_month(month)), Decimal("0"))

    async def copy_budgets(self, from_month: date, to_month: date) -> list[Budget]:
        """
        Copy every budget of one month onto another.

        Budgets already set for the target month are overwritten.
        """
        copied = []
        for budget in await self.budgets_for_month(from_month):
            copied.append(await self._store.upsert_budget(Budget(
                category_id=budget.category_id,
                household_id=self.household_id,
                month=to_month,
                amount=budget.amount,
            )))

        if self._audit_logger:
            await self._audit_logger.log_budgets_copied(
                household_id=self.household_id,
                member_id=self.member_id,
                from_month=from_month,
                to_month=to_month,
                count=len(copied),
            )

        return copied

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def balance(self) -> Decimal:
        """Net balance from this member's viewpoint."""
        snapshot = await self._store.snapshot()
        return net_balance(snapshot.expenses, snapshot.settlements, self.member_id)

    async def expense_shares(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[tuple[Expense, Decimal]]:
        """Each expense with this member's signed share, newest first."""
        expenses = await self._store.list_expenses(date_from=date_from, date_to=date_to)
        return [(e, share_of(e, self.member_id)) for e in expenses]

    async def monthly_insights(
        self,
        month: date,
        today: date,
        currency: Optional[str] = None,
    ) -> list[Insight]:
        snapshot = await self._store.snapshot()
        insights = list(self._analyzer.analyze(
            snapshot.expenses,
            month=month,
            today=today,
            viewpoint_id=self.member_id,
            partner_id=self.partner_id,
            budgets=snapshot.budgets,
            categories=snapshot.categories,
            partner_name=self.partner_name,
            currency=currency,
        ))

        if self._audit_logger:
            await self._audit_logger.log_insights_generated(
                household_id=self.household_id,
                member_id=self.member_id,
                month=month,
                insight_count=len(insights),
            )

        return insights

    async def category_breakdown(self, month: date) -> list[CategoryTotal]:
        snapshot = await self._store.snapshot()
        return category_breakdown(snapshot.expenses, month, snapshot.categories)

    async def monthly_comparison(self, month: date, months: int = 6) -> list[MonthSummary]:
        snapshot = await self._store.snapshot()
        return monthly_comparison(
            snapshot.expenses, month, self.member_id, self.partner_id, months=months
        )

    async def reminder(self, now: datetime) -> Optional[Reminder]:
        return expense_reminder(await self._store.list_expenses(), now)


def create_service(
    household_id: str,
    member_id: str,
    partner_id: Optional[str] = None,
    partner_name: Optional[str] = None,
    seed_categories: bool = True,
) -> HouseholdLedgerService:
    """
    Factory function to create a service over in-memory storage.

    Args:
        household_id: Household the service works on
        member_id: Viewpoint member
        partner_id: The linked partner, if any
        partner_name: Partner display name
        seed_categories: Start the household with the default categories

    Returns:
        A ready-to-use service with local audit storage
    """
    categories = default_categories(household_id) if seed_categories else []
    store = InMemoryHouseholdStore(household_id, categories=categories)
    audit_logger = AuditLogger(InMemoryAuditStorage())
    partner = Member(id=partner_id, name=partner_name or "") if partner_id else None

    return HouseholdLedgerService(
        store=store,
        household_id=household_id,
        member_id=member_id,
        partner=partner,
        audit_logger=audit_logger,
    )
