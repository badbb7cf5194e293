"""
Monthly Reports

Aggregations behind the reports screen: where the month's money went,
and how the last few months compare.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from household_ledger.insights.analyzer import Categories, index_categories
from household_ledger.insights.periods import (
    add_months,
    expenses_in_month,
    round_pct,
    total,
)
from household_ledger.ledger.engine import paid_totals
from household_ledger.models.insight import CategoryTotal, MonthSummary
from household_ledger.models.ledger import Expense


def category_breakdown(
    expenses: Iterable[Expense],
    month: date,
    categories: Optional[Categories] = None,
) -> list[CategoryTotal]:
    """
    Spend per category for the month, largest first.

    Categories that cannot be resolved are reported under their id.
    """
    month_expenses = expenses_in_month(expenses, month)
    month_total = total(month_expenses)
    if month_total <= 0:
        return []

    index = index_categories(categories)
    totals: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    counts: dict[str, int] = defaultdict(int)
    for e in month_expenses:
        totals[e.category_id] += Decimal(e.amount)
        counts[e.category_id] += 1

    breakdown = []
    for category_id, amount in sorted(totals.items(), key=lambda item: item[1], reverse=True):
        category = index.get(category_id)
        breakdown.append(CategoryTotal(
            category_id=category_id,
            name=category.name if category else category_id,
            icon=category.icon if category else "",
            color=category.color if category else None,
            total=amount,
            share_pct=round_pct(amount / month_total * 100),
            expense_count=counts[category_id],
        ))
    return breakdown


def monthly_comparison(
    expenses: Iterable[Expense],
    month: date,
    viewpoint_id: str,
    partner_id: Optional[str] = None,
    months: int = 6,
) -> list[MonthSummary]:
    """
    Household totals for the `months` months ending at `month`, oldest first.

    Each entry also splits the total by who paid.
    """
    if months < 1:
        raise ValueError("months must be at least 1")

    expenses = list(expenses)
    summaries = []
    for offset in range(months - 1, -1, -1):
        period = add_months(month, -offset)
        period_expenses = expenses_in_month(expenses, period)
        paid = paid_totals(period_expenses)
        summaries.append(MonthSummary(
            month=f"{period:%Y-%m}",
            total=total(period_expenses),
            paid_by_member=paid.get(viewpoint_id, Decimal("0")),
            paid_by_partner=paid.get(partner_id, Decimal("0")) if partner_id else Decimal("0"),
            expense_count=len(period_expenses),
        ))
    return summaries
