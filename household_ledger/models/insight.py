"""
Insight Models

An insight is one human-readable observation about a household's month.
The analyzer yields them in the order they should be shown.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class InsightSeverity(str, Enum):
    """How an insight should be framed to the user."""
    WARNING = "warning"
    SUCCESS = "success"
    INFO = "info"
    TIP = "tip"


class InsightKind(str, Enum):
    """Which analysis produced the insight."""
    NO_DATA = "no_data"

    # Month over month
    SPENDING_UP = "spending_up"
    SPENDING_DOWN = "spending_down"
    SPENDING_STABLE = "spending_stable"

    # Categories
    TOP_CATEGORY = "top_category"
    RISING_CATEGORY = "rising_category"

    # Who paid
    PAYMENT_IMBALANCE = "payment_imbalance"

    # Budget pacing
    BUDGET_EXCEEDED = "budget_exceeded"
    PACE_TOO_HIGH = "pace_too_high"
    ON_PACE = "on_pace"
    PROJECTION_OVER_BUDGET = "projection_over_budget"
    PROJECTION_WITHIN_BUDGET = "projection_within_budget"
    CATEGORY_OVER_BUDGET = "category_over_budget"
    SPENDING_PROJECTION = "spending_projection"

    # Habits
    WEEKEND_SPENDING = "weekend_spending"
    TRANSACTION_VOLUME = "transaction_volume"


class Insight(BaseModel):
    """
    A single observation.

    details carries the unrounded figures behind the title and
    description, so callers never have to parse the text.
    """
    model_config = ConfigDict(frozen=True)

    kind: InsightKind
    severity: InsightSeverity
    icon: str = ""
    title: str = Field(..., min_length=1)
    description: str = ""
    details: dict[str, Any] = Field(default_factory=dict)


class CategoryTotal(BaseModel):
    """Spend for one category in one month."""
    model_config = ConfigDict(frozen=True)

    category_id: str
    name: str
    icon: str = ""
    color: Optional[str] = None
    total: Decimal
    share_pct: int = Field(..., ge=0, le=100)
    expense_count: int = Field(..., ge=0)


class MonthSummary(BaseModel):
    """Household total and who paid it, for one month."""
    model_config = ConfigDict(frozen=True)

    month: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    total: Decimal
    paid_by_member: Decimal
    paid_by_partner: Decimal
    expense_count: int = 0


class ReminderUrgency(str, Enum):
    WARNING = "warning"
    GENTLE = "gentle"
    INFO = "info"


class Reminder(BaseModel):
    """Nudge to keep the ledger up to date."""
    model_config = ConfigDict(frozen=True)

    urgency: ReminderUrgency
    icon: str
    title: str
    description: str
    days_since_last: Optional[int] = None
