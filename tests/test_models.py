"""
Tests for Household Ledger models

Test strategy:
1. Unit tests for individual components (models, engines)
2. Flow tests for the service over in-memory storage
3. No network, no clock: reference dates are always passed in
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from household_ledger.models.ledger import (
    DEFAULT_CATEGORIES,
    Budget,
    Category,
    Expense,
    ExpenseDraft,
    Settlement,
    SplitType,
    default_categories,
)
from household_ledger.models.insight import Insight, InsightKind, InsightSeverity
from household_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


def make_expense(**overrides) -> Expense:
    fields = dict(
        amount=Decimal("100"),
        category_id="groceries",
        paid_by="ana",
        created_by="ana",
        date=date(2025, 6, 2),
        household_id="h1",
    )
    fields.update(overrides)
    return Expense(**fields)


class TestExpenseModel:
    """Tests for the Expense model."""

    def test_expense_defaults(self):
        """Test that split defaults to 50/50 at 50%."""
        expense = make_expense()
        assert expense.split_type == SplitType.EQUAL
        assert expense.split_percentage == 50
        assert expense.id is not None

    def test_expense_rejects_zero_amount(self):
        """Test that zero amounts are rejected."""
        with pytest.raises(ValueError):
            make_expense(amount=Decimal("0"))

    def test_expense_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            make_expense(amount=Decimal("-10"))

    def test_split_percentage_bounds(self):
        """Test split percentage must be between 0 and 100."""
        with pytest.raises(ValueError):
            make_expense(split_type=SplitType.CUSTOM, split_percentage=101)
        with pytest.raises(ValueError):
            make_expense(split_type=SplitType.CUSTOM, split_percentage=-1)

    def test_known_split_type_string_is_promoted(self):
        """Test that plain strings for known split types become SplitType."""
        expense = make_expense(split_type="solo_partner")
        assert expense.split_type is SplitType.SOLO_PARTNER

    def test_unknown_split_type_is_kept(self):
        """Test that unknown split types are tolerated as plain strings."""
        expense = make_expense(split_type="thirds")
        assert expense.split_type == "thirds"

    def test_expense_is_immutable(self):
        """Test that expenses cannot be mutated in place."""
        expense = make_expense()
        with pytest.raises(Exception):
            expense.amount = Decimal("5")

    def test_is_weekend(self):
        """Test weekend detection (2025-06-07 is a Saturday)."""
        assert make_expense(date=date(2025, 6, 7)).is_weekend is True
        assert make_expense(date=date(2025, 6, 8)).is_weekend is True
        assert make_expense(date=date(2025, 6, 9)).is_weekend is False

    def test_draft_has_no_default_percentage(self):
        """Test that drafts leave split_percentage unset."""
        draft = ExpenseDraft(
            amount=Decimal("20"),
            category_id="groceries",
            paid_by="ana",
            date=date(2025, 6, 2),
        )
        assert draft.split_percentage is None
        assert draft.split_type == SplitType.EQUAL


class TestSettlementAndBudgetModels:
    """Tests for settlements and budgets."""

    def test_settlement_rejects_non_positive_amount(self):
        with pytest.raises(ValueError):
            Settlement(amount=Decimal("0"), paid_by="ana", paid_to="ben", date=date(2025, 6, 1))

    def test_self_settlement_flag(self):
        settlement = Settlement(
            amount=Decimal("10"), paid_by="ana", paid_to="ana", date=date(2025, 6, 1)
        )
        assert settlement.is_self_settlement is True

    def test_budget_month_normalised(self):
        """Test that budget months always start on day one."""
        budget = Budget(category_id="groceries", month=date(2025, 6, 17), amount=Decimal("100"))
        assert budget.month == date(2025, 6, 1)

    def test_budget_key(self):
        budget = Budget(
            category_id="groceries",
            household_id="h1",
            month=date(2025, 6, 1),
            amount=Decimal("100"),
        )
        assert budget.key == ("groceries", "h1", date(2025, 6, 1))

    def test_budget_allows_zero(self):
        budget = Budget(category_id="groceries", month=date(2025, 6, 1), amount=Decimal("0"))
        assert budget.amount == 0

    def test_budget_rejects_negative(self):
        with pytest.raises(ValueError):
            Budget(category_id="groceries", month=date(2025, 6, 1), amount=Decimal("-1"))


class TestCategories:
    """Tests for categories."""

    def test_default_categories_scoped_to_household(self):
        categories = default_categories("h1")
        assert len(categories) == len(DEFAULT_CATEGORIES)
        assert all(c.household_id == "h1" for c in categories)
        assert len({c.id for c in categories}) == len(categories)

    def test_category_rejects_bad_color(self):
        with pytest.raises(ValueError):
            Category(name="Pets", color="blue")


class TestInsightModel:
    """Tests for the Insight model."""

    def test_insight_creation(self):
        insight = Insight(
            kind=InsightKind.NO_DATA,
            severity=InsightSeverity.INFO,
            title="No data this month",
        )
        assert insight.details == {}
        assert insight.severity.value == "info"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_CREATED,
            description="Expense recorded",
        )
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        event = AuditEvent(
            event_type=AuditEventType.SETTLEMENT_RECORDED,
            description="Settlement recorded",
            details={"amount": "50"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "settlement_recorded"
        assert log_dict["details"]["amount"] == "50"

    def test_audit_event_builder_expense_created(self):
        expense_id = uuid4()
        event = AuditEventBuilder.expense_created(
            expense_id=expense_id,
            household_id="h1",
            member_id="ana",
            amount="100",
            split_type="50/50",
        )
        assert event.event_type == AuditEventType.EXPENSE_CREATED
        assert event.entity_id == expense_id
        assert event.member_id == "ana"

    def test_audit_event_builder_budget_set(self):
        event = AuditEventBuilder.budget_set(
            budget_id=uuid4(),
            household_id="h1",
            member_id="ana",
            category_id="groceries",
            month=date(2025, 6, 1),
            amount="500",
        )
        assert event.details["month"] == "2025-06-01"
        assert "2025-06" in event.description

    def test_every_event_type_has_a_builder(self):
        """Test that each declared event type is one the builder can emit."""
        june, july = date(2025, 6, 1), date(2025, 7, 1)
        built = [
            AuditEventBuilder.expense_created(uuid4(), "h1", "ana", "100", "50/50"),
            AuditEventBuilder.expense_updated(uuid4(), "h1", "ana", ["amount"]),
            AuditEventBuilder.expense_deleted(uuid4(), "h1", "ana"),
            AuditEventBuilder.settlement_recorded(uuid4(), "h1", "ben", "ana", "50"),
            AuditEventBuilder.budget_set(uuid4(), "h1", "ana", "groceries", june, "500"),
            AuditEventBuilder.budgets_copied("h1", "ana", june, july, 3),
            AuditEventBuilder.insights_generated("h1", "ana", june, 4),
            AuditEventBuilder.storage_error("add_expense", "disk full", "h1"),
        ]
        assert {event.event_type for event in built} == set(AuditEventType)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
