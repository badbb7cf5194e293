"""Calendar-month helpers shared by the analyzer and reports."""

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from household_ledger.models.ledger import Expense


def days_in_month(month: date) -> int:
    return calendar.monthrange(month.year, month.month)[1]


def month_bounds(month: date) -> tuple[date, date]:
    """First and last day of the month containing `month`."""
    start = month.replace(day=1)
    return start, start.replace(day=days_in_month(start))


def add_months(month: date, count: int) -> date:
    """First day of the month `count` months away (negative goes back)."""
    index = month.year * 12 + (month.month - 1) + count
    return date(index // 12, index % 12 + 1, 1)


def previous_month(month: date) -> date:
    return add_months(month, -1)


def same_month(a: date, b: date) -> bool:
    return (a.year, a.month) == (b.year, b.month)


def expenses_in_month(expenses: Iterable[Expense], month: date) -> list[Expense]:
    """Expenses dated inside the month, in their original order."""
    start, end = month_bounds(month)
    return [e for e in expenses if start <= e.date <= end]


def total(expenses: Iterable[Expense]) -> Decimal:
    return sum((Decimal(e.amount) for e in expenses), Decimal("0"))


def round_pct(value: Decimal) -> int:
    """Round to the nearest whole percent, halves away from zero."""
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
