"""
Audit Models for Household Ledger

Every write to the household ledger is logged for audit purposes.
This lets a household reconstruct how a balance came to be, and who
entered what.

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Expenses
    EXPENSE_CREATED = "expense_created"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"

    # Settlements
    SETTLEMENT_RECORDED = "settlement_recorded"

    # Budgets
    BUDGET_SET = "budget_set"
    BUDGETS_COPIED = "budgets_copied"

    # Read-side computations
    INSIGHTS_GENERATED = "insights_generated"

    # System events
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    household_id: Optional[str] = None
    member_id: Optional[str] = Field(
        default=None,
        description="Member who triggered the event"
    )
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'settlement', 'budget')"
    )
    entity_id: Optional[UUID] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "household_id": self.household_id,
            "member_id": self.member_id,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_created(expense_id, household_id, ...)
        event = AuditEventBuilder.settlement_recorded(settlement_id, ...)
    """

    @staticmethod
    def expense_created(
        expense_id: UUID,
        household_id: str,
        member_id: str,
        amount: str,
        split_type: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_CREATED,
            household_id=household_id,
            member_id=member_id,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense recorded: {amount} ({split_type})",
            details={
                "amount": amount,
                "split_type": split_type,
            },
        )

    @staticmethod
    def expense_updated(
        expense_id: UUID,
        household_id: str,
        member_id: str,
        changed_fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            household_id=household_id,
            member_id=member_id,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense edited: {', '.join(changed_fields) or 'no changes'}",
            details={"changed_fields": changed_fields},
        )

    @staticmethod
    def expense_deleted(
        expense_id: UUID,
        household_id: str,
        member_id: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            severity=AuditSeverity.WARNING,
            household_id=household_id,
            member_id=member_id,
            entity_type="expense",
            entity_id=expense_id,
            description="Expense deleted",
        )

    @staticmethod
    def settlement_recorded(
        settlement_id: UUID,
        household_id: str,
        paid_by: str,
        paid_to: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SETTLEMENT_RECORDED,
            household_id=household_id,
            member_id=paid_by,
            entity_type="settlement",
            entity_id=settlement_id,
            description=f"Settlement recorded: {paid_by} paid {paid_to} {amount}",
            details={
                "paid_by": paid_by,
                "paid_to": paid_to,
                "amount": amount,
            },
        )

    @staticmethod
    def budget_set(
        budget_id: UUID,
        household_id: str,
        member_id: str,
        category_id: str,
        month: date,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SET,
            household_id=household_id,
            member_id=member_id,
            entity_type="budget",
            entity_id=budget_id,
            description=f"Budget for {category_id} in {month:%Y-%m} set to {amount}",
            details={
                "category_id": category_id,
                "month": month.isoformat(),
                "amount": amount,
            },
        )

    @staticmethod
    def budgets_copied(
        household_id: str,
        member_id: str,
        from_month: date,
        to_month: date,
        count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGETS_COPIED,
            household_id=household_id,
            member_id=member_id,
            entity_type="budget",
            description=f"Copied {count} budgets from {from_month:%Y-%m} to {to_month:%Y-%m}",
            details={
                "from_month": from_month.isoformat(),
                "to_month": to_month.isoformat(),
                "count": count,
            },
        )

    @staticmethod
    def insights_generated(
        household_id: str,
        member_id: str,
        month: date,
        insight_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHTS_GENERATED,
            severity=AuditSeverity.DEBUG,
            household_id=household_id,
            member_id=member_id,
            description=f"Generated {insight_count} insights for {month:%Y-%m}",
            details={
                "month": month.isoformat(),
                "insight_count": insight_count,
            },
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        household_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            household_id=household_id,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
        )
