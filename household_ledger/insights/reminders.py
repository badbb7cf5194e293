"""
Logging Reminders

A gentle nudge shown on the dashboard so the ledger stays current.
"""

from datetime import datetime, timezone
from typing import Optional, Sequence

from household_ledger.insights.periods import days_in_month
from household_ledger.models.insight import Reminder, ReminderUrgency
from household_ledger.models.ledger import Expense


STALE_AFTER_DAYS = 3


def _utc(moment: datetime) -> datetime:
    """Naive UTC, the form created_at is stored in. Naive input is taken as UTC."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def expense_reminder(expenses: Sequence[Expense], now: datetime) -> Optional[Reminder]:
    """
    Pick the reminder to show, if any.

    now may be timezone-aware; the month-end check uses its local date.

    Checked in order:
    - nothing recorded yet
    - nothing recorded for STALE_AFTER_DAYS or more
    - nothing recorded today
    - last two days of the month: review and settle up
    """
    if not expenses:
        return Reminder(
            urgency=ReminderUrgency.INFO,
            icon="👋",
            title="Start recording!",
            description="Add your first expense to start keeping track.",
        )

    last_recorded = max(_utc(e.created_at) for e in expenses)
    days_since = (_utc(now) - last_recorded).days

    if days_since >= STALE_AFTER_DAYS:
        return Reminder(
            urgency=ReminderUrgency.WARNING,
            icon="⏰",
            title=f"{days_since} days without recording expenses",
            description="Don't forget to log your expenses to keep the accounts up to date.",
            days_since_last=days_since,
        )

    if days_since >= 1:
        return Reminder(
            urgency=ReminderUrgency.GENTLE,
            icon="📝",
            title="Any expenses today?",
            description="Log today's expenses so you don't forget them.",
            days_since_last=days_since,
        )

    today = now.date()
    if today.day >= days_in_month(today) - 1:
        return Reminder(
            urgency=ReminderUrgency.INFO,
            icon="📊",
            title="End of the month",
            description="Review your monthly reports and settle up before the month closes.",
            days_since_last=days_since,
        )

    return None
