"""
Audit Logger

DESIGN DECISION: Every write to the household ledger is logged.
This provides:
1. Traceability of how a balance came to be
2. Debugging capability
3. A history members can review

The audit logger:
- Is async so it fits the store's call style
- Gracefully handles failures (doesn't break a write if logging fails)
"""

from datetime import date
from typing import Optional
from uuid import UUID

import structlog

from household_ledger.models.audit import AuditEvent, AuditEventBuilder
from household_ledger.models.ledger import Budget, Expense, Settlement
from household_ledger.services.storage import AuditStorageInterface


# Configure structlog for local logging
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
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence and member visibility)
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
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_expense_created(self, expense: Expense) -> None:
        """Log a new expense."""
        event = AuditEventBuilder.expense_created(
            expense_id=expense.id,
            household_id=expense.household_id,
            member_id=expense.created_by,
            amount=str(expense.amount),
            split_type=str(getattr(expense.split_type, "value", expense.split_type)),
        )
        await self.log(event)

    async def log_expense_updated(
        self,
        expense: Expense,
        member_id: str,
        changed_fields: list[str],
    ) -> None:
        """Log an expense edit."""
        event = AuditEventBuilder.expense_updated(
            expense_id=expense.id,
            household_id=expense.household_id,
            member_id=member_id,
            changed_fields=changed_fields,
        )
        await self.log(event)

    async def log_expense_deleted(
        self,
        expense_id: UUID,
        household_id: str,
        member_id: str,
    ) -> None:
        """Log an expense deletion."""
        event = AuditEventBuilder.expense_deleted(
            expense_id=expense_id,
            household_id=household_id,
            member_id=member_id,
        )
        await self.log(event)

    async def log_settlement_recorded(self, settlement: Settlement) -> None:
        """Log a settlement."""
        event = AuditEventBuilder.settlement_recorded(
            settlement_id=settlement.id,
            household_id=settlement.household_id,
            paid_by=settlement.paid_by,
            paid_to=settlement.paid_to,
            amount=str(settlement.amount),
        )
        await self.log(event)

    async def log_budget_set(self, budget: Budget, member_id: str) -> None:
        """Log a budget upsert."""
        event = AuditEventBuilder.budget_set(
            budget_id=budget.id,
            household_id=budget.household_id,
            member_id=member_id,
            category_id=budget.category_id,
            month=budget.month,
            amount=str(budget.amount),
        )
        await self.log(event)

    async def log_budgets_copied(
        self,
        household_id: str,
        member_id: str,
        from_month: date,
        to_month: date,
        count: int,
    ) -> None:
        """Log a month-to-month budget copy."""
        event = AuditEventBuilder.budgets_copied(
            household_id=household_id,
            member_id=member_id,
            from_month=from_month,
            to_month=to_month,
            count=count,
        )
        await self.log(event)

    async def log_insights_generated(
        self,
        household_id: str,
        member_id: str,
        month: date,
        insight_count: int,
    ) -> None:
        """Log an insight run."""
        event = AuditEventBuilder.insights_generated(
            household_id=household_id,
            member_id=member_id,
            month=month,
            insight_count=insight_count,
        )
        await self.log(event)

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        household_id: Optional[str] = None,
    ) -> None:
        """Log a failed store operation."""
        event = AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            household_id=household_id,
        )
        await self.log(event)
