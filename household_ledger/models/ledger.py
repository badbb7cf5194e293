"""
Core Ledger Models for Household Ledger

These models define the records the ledger engine and the insight
analyzer operate on. They are designed to:
1. Be immutable once built (edits are replace-by-id)
2. Reject malformed amounts and percentages at construction time
3. Be serializable for storage and logging

DESIGN DECISION: Amounts are Decimal, not float. Balances are sums of
many halves and percentages; Decimal keeps them exact.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Union
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class SplitType(str, Enum):
    """
    How an expense is divided between the two household members.

    IMPORTANT: Every rule is relative to the member who CREATED the
    expense, not the one who paid it. "solo_mine" means the creator
    carries the full cost, whoever fronted the money.
    """
    EQUAL = "50/50"
    SOLO_MINE = "solo_mine"
    SOLO_PARTNER = "solo_partner"
    CUSTOM = "custom"


# =============================================================================
# HOUSEHOLD RECORDS
# =============================================================================

class Member(BaseModel):
    """A household member. Only id and name matter to the core."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(default="", max_length=100)


class Category(BaseModel):
    """
    Spending category, scoped to a household.

    Expenses and budgets hold a weak reference (the id). Refusing to
    delete a category still in use is the store's job.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(..., min_length=1, max_length=50)
    icon: str = Field(default="📦", max_length=10)
    color: str = Field(default="#6b7280", pattern="^#[0-9a-fA-F]{6}$")
    household_id: str = ""


# Seed categories for a newly linked household
DEFAULT_CATEGORIES: list[dict[str, str]] = [
    {"name": "Groceries", "icon": "🛒", "color": "#10b981"},
    {"name": "Restaurants", "icon": "🍽️", "color": "#f59e0b"},
    {"name": "Home", "icon": "🏠", "color": "#3b82f6"},
    {"name": "Transport", "icon": "🚗", "color": "#8b5cf6"},
    {"name": "Health", "icon": "💊", "color": "#ef4444"},
    {"name": "Entertainment", "icon": "🎬", "color": "#ec4899"},
    {"name": "Clothing", "icon": "👕", "color": "#06b6d4"},
    {"name": "Other", "icon": "📦", "color": "#6b7280"},
]


def default_categories(household_id: str) -> list[Category]:
    """Build the seed categories for a household."""
    return [Category(household_id=household_id, **seed) for seed in DEFAULT_CATEGORIES]


class ExpenseDraft(BaseModel):
    """
    What a member fills in when adding an expense.

    The draft has no id, creator or household. Those are stamped on
    by create_expense().
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount spent"
    )
    category_id: str = Field(..., min_length=1)
    paid_by: str = Field(
        ...,
        min_length=1,
        description="Member who physically paid"
    )
    split_type: SplitType = SplitType.EQUAL
    split_percentage: Optional[int] = Field(
        default=None,
        ge=0,
        le=100,
        description="Creator's share in percent (custom splits only)"
    )
    date: date
    description: Optional[str] = Field(default=None, max_length=200)
    receipt_url: Optional[str] = None


class Expense(BaseModel):
    """
    A shared expense.

    CRITICAL: split_percentage is the CREATOR's share, not the payer's.
    created_by is set once by create_expense() and never edited.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique expense ID"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount spent (always positive)"
    )
    category_id: str
    paid_by: str = Field(
        ...,
        description="Member who physically paid"
    )
    created_by: str = Field(
        ...,
        description="Member who entered the record"
    )
    # Unrecognized split types are kept as plain strings; the ledger
    # falls back to 50/50 for them.
    split_type: Union[SplitType, str] = SplitType.EQUAL
    split_percentage: int = Field(
        default=50,
        ge=0,
        le=100,
        description="Creator's share in percent (custom splits only)"
    )
    date: date
    household_id: str = ""
    description: Optional[str] = None
    receipt_url: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @field_validator("split_type", mode="before")
    @classmethod
    def known_split_type(cls, v):
        """Promote known values to SplitType, keep anything else as-is."""
        try:
            return SplitType(v)
        except ValueError:
            return v

    @property
    def is_weekend(self) -> bool:
        """Saturday or Sunday."""
        return self.date.weekday() >= 5


class Settlement(BaseModel):
    """
    A cash transfer between the two members that pays down the balance.

    paid_by == paid_to is allowed: single-member households record a
    self-settlement placeholder, which has no effect on the balance.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    amount: Decimal = Field(..., gt=0)
    paid_by: str
    paid_to: str
    date: date
    household_id: str = ""
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_self_settlement(self) -> bool:
        return self.paid_by == self.paid_to


class Budget(BaseModel):
    """
    Spending ceiling for one category in one calendar month.

    Unique per (category_id, household_id, month). month is always
    normalised to the first day of the month.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    category_id: str
    household_id: str = ""
    month: date
    amount: Decimal = Field(..., ge=0)

    @field_validator("month")
    @classmethod
    def first_of_month(cls, v: date) -> date:
        """Budgets are keyed by month, not by day."""
        return v.replace(day=1)

    @property
    def key(self) -> tuple[str, str, date]:
        return (self.category_id, self.household_id, self.month)


class SettlementProposal(BaseModel):
    """The single transfer that would bring a balance back to zero."""
    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(..., gt=0)
    paid_by: str
    paid_to: str
