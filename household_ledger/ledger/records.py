"""
Record Construction

The only place expenses and settlements are built. create_expense()
is also the only place created_by is ever set.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional
from uuid import uuid4

from household_ledger.models.ledger import (
    Expense,
    ExpenseDraft,
    Settlement,
)


# Identity and ownership never change after creation
IMMUTABLE_EXPENSE_FIELDS = frozenset({"id", "created_by", "household_id", "created_at"})

# Creator's share when a draft leaves split_percentage out
DEFAULT_SPLIT_PERCENTAGE = 50


class ImmutableFieldError(ValueError):
    """Attempted to edit a field that is fixed at creation."""
    pass


def create_expense(
    draft: ExpenseDraft,
    created_by: str,
    household_id: str,
) -> Expense:
    """
    Build a fully populated expense from a member's draft.

    Assigns a fresh id, records the creating member, and defaults
    split_percentage when the draft leaves it out.
    """
    split_percentage = draft.split_percentage
    if split_percentage is None:
        split_percentage = DEFAULT_SPLIT_PERCENTAGE

    return Expense(
        id=uuid4(),
        amount=draft.amount,
        category_id=draft.category_id,
        paid_by=draft.paid_by,
        created_by=created_by,
        split_type=draft.split_type,
        split_percentage=split_percentage,
        date=draft.date,
        household_id=household_id,
        description=draft.description or None,
        receipt_url=draft.receipt_url or None,
    )


def edit_expense(expense: Expense, **changes: Any) -> Expense:
    """
    Return the replacement for an edited expense.

    Edits are full-field replaces keyed by id. The result is validated
    again, so an edit cannot sneak in a non-positive amount.

    Raises:
        ImmutableFieldError: If a change touches id, created_by,
            household_id or created_at.
    """
    forbidden = sorted(IMMUTABLE_EXPENSE_FIELDS.intersection(changes))
    if forbidden:
        raise ImmutableFieldError(f"Cannot edit fixed expense fields: {', '.join(forbidden)}")

    unknown = sorted(set(changes) - set(Expense.model_fields))
    if unknown:
        raise ValueError(f"Unknown expense fields: {', '.join(unknown)}")

    data = expense.model_dump()
    data.update(changes)
    return Expense.model_validate(data)


def create_settlement(
    amount: Decimal,
    paid_by: str,
    paid_to: str,
    household_id: str,
    on: Optional[date] = None,
) -> Settlement:
    """Build a settlement dated `on` (today when omitted)."""
    return Settlement(
        id=uuid4(),
        amount=amount,
        paid_by=paid_by,
        paid_to=paid_to,
        date=on or date.today(),
        household_id=household_id,
    )
