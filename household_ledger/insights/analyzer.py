"""
Monthly Insight Analyzer

Turns a household's expenses (and optionally its budgets) into a short,
ordered list of observations about one calendar month.

DESIGN DECISION: The analyzer is a generator over immutable inputs.
It holds no state between calls and never reads the clock: "today" is
an argument. Calling it twice with the same inputs yields the same
insights.

The order of the steps is the order the user sees:
1. No data (stops here)
2. Month over month
3. Top category
4. Fastest-rising category
5. Who paid
6. Budget pacing and projection (current month, early days only)
7. Weekend spending
8. Transaction volume

Displayed percentages are rounded; every threshold comparison uses the
unrounded ratio.
"""

from collections import defaultdict
from datetime import date
from decimal import ROUND_CEILING, Decimal
from typing import Iterable, Iterator, Mapping, Optional, Union

import structlog

from household_ledger.config import InsightSettings, get_settings
from household_ledger.insights.formatting import AmountFormatter, format_amount
from household_ledger.insights.periods import (
    days_in_month,
    expenses_in_month,
    previous_month,
    round_pct,
    same_month,
    total,
)
from household_ledger.ledger.engine import paid_totals
from household_ledger.models.insight import Insight, InsightKind, InsightSeverity
from household_ledger.models.ledger import Budget, Category, Expense


logger = structlog.get_logger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

Categories = Union[Mapping[str, Category], Iterable[Category]]


def _dec(value: float) -> Decimal:
    return Decimal(str(value))


def index_categories(categories: Optional[Categories]) -> dict[str, Category]:
    if categories is None:
        return {}
    if isinstance(categories, Mapping):
        return dict(categories)
    return {c.id: c for c in categories}


def _totals_by_category(expenses: Iterable[Expense]) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for e in expenses:
        totals[e.category_id] += Decimal(e.amount)
    return dict(totals)


class InsightAnalyzer:
    """
    Generates monthly insights for a household.

    Thresholds come from InsightSettings; amount text comes from the
    injected formatter.
    """

    def __init__(
        self,
        settings: Optional[InsightSettings] = None,
        formatter: Optional[AmountFormatter] = None,
    ):
        self._settings = settings or get_settings().insights
        self._formatter = formatter or format_amount

    def analyze(
        self,
        expenses: Iterable[Expense],
        month: date,
        today: date,
        viewpoint_id: str,
        partner_id: Optional[str] = None,
        budgets: Optional[Iterable[Budget]] = None,
        categories: Optional[Categories] = None,
        partner_name: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> Iterator[Insight]:
        """
        Yield the insights for `month` in display order.

        Args:
            expenses: All household expenses, across every month
            month: Any day in the month to analyze
            today: Reference date for pacing and projections
            viewpoint_id: Member the insights are written for
            partner_id: The other member, if linked
            budgets: Budgets (only those for `month` are used)
            categories: Categories for display names and icons
            partner_name: Display name for the partner
            currency: Currency code for amounts in the text
        """
        currency = currency or get_settings().ledger.currency

        def money(amount: Decimal) -> str:
            return self._formatter(amount, currency)

        expenses = list(expenses)
        current = expenses_in_month(expenses, month)
        previous = expenses_in_month(expenses, previous_month(month))

        if not current:
            yield Insight(
                kind=InsightKind.NO_DATA,
                severity=InsightSeverity.INFO,
                icon="📝",
                title="No data this month",
                description="Add expenses to see analysis and recommendations.",
            )
            return

        total_current = total(current)
        total_previous = total(previous)
        category_index = index_categories(categories)

        yield from self._month_over_month(total_current, total_previous, money)
        yield from self._category_trends(
            current, previous, total_current, category_index, money
        )
        yield from self._payment_split(
            current, viewpoint_id, partner_id, partner_name, money
        )
        yield from self._budget_pacing(
            current, month, today, total_current, budgets, category_index, money
        )
        yield from self._weekend_spending(current, total_current, money)
        yield from self._transaction_volume(current)

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def _month_over_month(self, total_current, total_previous, money) -> Iterator[Insight]:
        if total_previous <= 0:
            return

        change = (total_current - total_previous) / total_previous * HUNDRED
        pct = round_pct(change)
        details = {
            "current_total": total_current,
            "previous_total": total_previous,
            "change_pct": change,
        }

        if change > _dec(self._settings.spending_up_pct):
            yield Insight(
                kind=InsightKind.SPENDING_UP,
                severity=InsightSeverity.WARNING,
                icon="📈",
                title=f"Spending up {pct}% vs last month",
                description=(
                    f"You spent {money(total_current)} vs {money(total_previous)} "
                    "last month. Check which categories grew."
                ),
                details=details,
            )
        elif change < _dec(self._settings.spending_down_pct):
            yield Insight(
                kind=InsightKind.SPENDING_DOWN,
                severity=InsightSeverity.SUCCESS,
                icon="📉",
                title=f"Spending down {abs(pct)}% vs last month",
                description=(
                    f"Nice work! Spending dropped from {money(total_previous)} "
                    f"to {money(total_current)}."
                ),
                details=details,
            )
        else:
            yield Insight(
                kind=InsightKind.SPENDING_STABLE,
                severity=InsightSeverity.INFO,
                icon="➡️",
                title="Spending is stable",
                description=(
                    f"Similar to last month ({pct:+d}%). "
                    f"Total: {money(total_current)}."
                ),
                details=details,
            )

    def _category_trends(
        self, current, previous, total_current, category_index, money
    ) -> Iterator[Insight]:
        current_totals = _totals_by_category(current)
        previous_totals = _totals_by_category(previous)
        # Stable sort: ties keep first-seen order
        ranked = sorted(current_totals.items(), key=lambda item: item[1], reverse=True)

        def label(category_id: str) -> tuple[str, str]:
            category = category_index.get(category_id)
            if category is None:
                return category_id, "📦"
            return category.name, category.icon

        top_id, top_total = ranked[0]
        name, icon = label(top_id)
        share = top_total / total_current * HUNDRED
        pct = round_pct(share)
        is_heavy = share > _dec(self._settings.top_category_warning_pct)
        yield Insight(
            kind=InsightKind.TOP_CATEGORY,
            severity=InsightSeverity.WARNING if is_heavy else InsightSeverity.INFO,
            icon=icon,
            title=f"{name}: {pct}% of total",
            description=(
                f"{name} makes up {pct}% of your spending ({money(top_total)}). "
                "Look for ways to optimize it."
                if is_heavy
                else f"Biggest spend is {name}: {money(top_total)}."
            ),
            details={"category_id": top_id, "total": top_total, "share_pct": share},
        )

        factor = _dec(self._settings.rising_category_factor)
        for category_id, current_total in ranked:
            previous_total = previous_totals.get(category_id, ZERO)
            if previous_total > 0 and current_total > previous_total * factor:
                growth = (current_total - previous_total) / previous_total * HUNDRED
                name, _ = label(category_id)
                yield Insight(
                    kind=InsightKind.RISING_CATEGORY,
                    severity=InsightSeverity.WARNING,
                    icon="🔺",
                    title=f"{name} up {round_pct(growth)}%",
                    description=(
                        f"From {money(previous_total)} to {money(current_total)}. "
                        "Check whether it was a one-off or a trend."
                    ),
                    details={
                        "category_id": category_id,
                        "current_total": current_total,
                        "previous_total": previous_total,
                        "growth_pct": growth,
                    },
                )
                break

    def _payment_split(
        self, current, viewpoint_id, partner_id, partner_name, money
    ) -> Iterator[Insight]:
        if not partner_id:
            return

        paid = paid_totals(current)
        mine = paid.get(viewpoint_id, ZERO)
        theirs = paid.get(partner_id, ZERO)
        if mine <= 0 or theirs <= 0:
            return

        my_share = mine / (mine + theirs) * HUNDRED
        limit = _dec(self._settings.payment_imbalance_pct)
        if my_share > limit:
            over_contributor = viewpoint_id
            description = (
                f"You have paid most of it ({money(mine)}). "
                "Consider balancing payments or settling up."
            )
        elif my_share < HUNDRED - limit:
            over_contributor = partner_id
            description = f"{partner_name or 'Your partner'} has paid most of it ({money(theirs)})."
        else:
            return

        ratio = round_pct(my_share)
        yield Insight(
            kind=InsightKind.PAYMENT_IMBALANCE,
            severity=InsightSeverity.TIP,
            icon="⚖️",
            title=f"Payment imbalance: {ratio}/{100 - ratio}",
            description=description,
            details={
                "over_contributor": over_contributor,
                "viewpoint_paid": mine,
                "partner_paid": theirs,
                "viewpoint_share_pct": my_share,
            },
        )

    def _budget_pacing(
        self, current, month, today, total_current, budgets, category_index, money
    ) -> Iterator[Insight]:
        day = today.day
        if not same_month(month, today) or day >= self._settings.pacing_cutoff_day:
            return

        days = days_in_month(month)
        projected = total_current / day * days
        month_budgets = [b for b in budgets or () if same_month(b.month, month)]
        total_budget = sum((Decimal(b.amount) for b in month_budgets), ZERO)

        if total_budget <= 0:
            average = total_current / day
            yield Insight(
                kind=InsightKind.SPENDING_PROJECTION,
                severity=InsightSeverity.INFO,
                icon="🔮",
                title=f"Projection: {money(projected)}",
                description=(
                    f"At the current pace ({money(average)}/day) you will "
                    f"finish the month at {money(projected)}."
                ),
                details={"projected": projected, "daily_average": average},
            )
            return

        pct_used = total_current / total_budget * HUNDRED
        expected_pct = Decimal(day) / Decimal(days) * HUNDRED
        used, expected = round_pct(pct_used), round_pct(expected_pct)
        pace_details = {
            "pct_used": pct_used,
            "expected_pct": expected_pct,
            "total_budget": total_budget,
        }

        if pct_used > HUNDRED:
            yield Insight(
                kind=InsightKind.BUDGET_EXCEEDED,
                severity=InsightSeverity.WARNING,
                icon="🚨",
                title=f"Budget exceeded: {used}%",
                description=(
                    f"You spent {money(total_current)} of a {money(total_budget)} "
                    f"budget, {money(total_current - total_budget)} over."
                ),
                details=pace_details,
            )
        elif pct_used > expected_pct + _dec(self._settings.pace_tolerance_pct):
            yield Insight(
                kind=InsightKind.PACE_TOO_HIGH,
                severity=InsightSeverity.WARNING,
                icon="⚠️",
                title=f"Spending fast: {used}% of budget",
                description=(
                    f"By day {day} you should be near {expected}% "
                    f"but you are at {used}%. Ease off a little."
                ),
                details=pace_details,
            )
        else:
            yield Insight(
                kind=InsightKind.ON_PACE,
                severity=InsightSeverity.SUCCESS,
                icon="💪",
                title=f"On pace: {used}% of budget",
                description=f"Going well. By day {day} about {expected}% is expected; you are at {used}%.",
                details=pace_details,
            )

        if projected > total_budget:
            overshoot = projected - total_budget
            daily_cut = overshoot / (days - day)
            yield Insight(
                kind=InsightKind.PROJECTION_OVER_BUDGET,
                severity=InsightSeverity.WARNING,
                icon="🔮",
                title=f"Projection: {money(projected)}",
                description=(
                    f"You would exceed the {money(total_budget)} budget by "
                    f"{money(overshoot)}. Cut "
                    f"{money(daily_cut.to_integral_value(rounding=ROUND_CEILING))}"
                    "/day to stay on budget."
                ),
                details={
                    "projected": projected,
                    "total_budget": total_budget,
                    "overshoot": overshoot,
                    "daily_cut": daily_cut,
                },
            )
        else:
            yield Insight(
                kind=InsightKind.PROJECTION_WITHIN_BUDGET,
                severity=InsightSeverity.SUCCESS,
                icon="🔮",
                title=f"Projection: {money(projected)}",
                description=(
                    f"Within the {money(total_budget)} budget with "
                    f"{money(total_budget - projected)} to spare."
                ),
                details={
                    "projected": projected,
                    "total_budget": total_budget,
                    "margin": total_budget - projected,
                },
            )

        current_totals = _totals_by_category(current)
        for budget in month_budgets:
            budgeted = Decimal(budget.amount)
            actual = current_totals.get(budget.category_id, ZERO)
            if budgeted <= 0 or actual <= budgeted:
                continue
            overage = (actual - budgeted) / budgeted * HUNDRED
            category = category_index.get(budget.category_id)
            name = category.name if category else budget.category_id
            yield Insight(
                kind=InsightKind.CATEGORY_OVER_BUDGET,
                severity=InsightSeverity.WARNING,
                icon=category.icon if category else "📦",
                title=f"{name}: {round_pct(overage)}% over budget",
                description=f"Budget: {money(budgeted)}, spent: {money(actual)}.",
                details={
                    "category_id": budget.category_id,
                    "budgeted": budgeted,
                    "actual": actual,
                    "overage_pct": overage,
                },
            )

    def _weekend_spending(self, current, total_current, money) -> Iterator[Insight]:
        weekend_total = total(e for e in current if e.is_weekend)
        share = weekend_total / total_current * HUNDRED
        if share > _dec(self._settings.weekend_share_pct):
            yield Insight(
                kind=InsightKind.WEEKEND_SPENDING,
                severity=InsightSeverity.TIP,
                icon="🗓️",
                title=f"{round_pct(share)}% of spending is on weekends",
                description=(
                    f"You spend {money(weekend_total)} on weekends. "
                    "Plan some cheaper weekend activities."
                ),
                details={"weekend_total": weekend_total, "share_pct": share},
            )

    def _transaction_volume(self, current) -> Iterator[Insight]:
        count = len(current)
        if count > self._settings.max_monthly_transactions:
            yield Insight(
                kind=InsightKind.TRANSACTION_VOLUME,
                severity=InsightSeverity.TIP,
                icon="🔢",
                title=f"{count} transactions this month",
                description="Lots of small purchases add up. Try consolidating your shopping.",
                details={"count": count},
            )


def generate_insights(
    expenses: Iterable[Expense],
    month: date,
    today: date,
    viewpoint_id: str,
    partner_id: Optional[str] = None,
    **kwargs,
) -> list[Insight]:
    """Run the default analyzer and collect its insights."""
    insights = list(
        InsightAnalyzer().analyze(
            expenses, month, today, viewpoint_id, partner_id=partner_id, **kwargs
        )
    )
    logger.debug("insights_generated", month=month.isoformat(), count=len(insights))
    return insights
