"""Insight analyzer package."""

from household_ledger.insights.analyzer import InsightAnalyzer, generate_insights
from household_ledger.insights.formatting import format_amount
from household_ledger.insights.periods import month_bounds, previous_month
from household_ledger.insights.reminders import expense_reminder
from household_ledger.insights.reports import category_breakdown, monthly_comparison

__all__ = [
    "InsightAnalyzer",
    "category_breakdown",
    "expense_reminder",
    "format_amount",
    "generate_insights",
    "month_bounds",
    "monthly_comparison",
    "previous_month",
]
