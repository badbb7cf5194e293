"""
Data Models Package

This package contains all Pydantic models used by the household ledger.
"""

from household_ledger.models.ledger import (
    DEFAULT_CATEGORIES,
    Budget,
    Category,
    Expense,
    ExpenseDraft,
    Member,
    Settlement,
    SettlementProposal,
    SplitType,
    default_categories,
)
from household_ledger.models.insight import (
    CategoryTotal,
    Insight,
    InsightKind,
    InsightSeverity,
    MonthSummary,
    Reminder,
    ReminderUrgency,
)
from household_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "DEFAULT_CATEGORIES",
    "Budget",
    "Category",
    "Expense",
    "ExpenseDraft",
    "Member",
    "Settlement",
    "SettlementProposal",
    "SplitType",
    "default_categories",
    # Insight models
    "CategoryTotal",
    "Insight",
    "InsightKind",
    "InsightSeverity",
    "MonthSummary",
    "Reminder",
    "ReminderUrgency",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
