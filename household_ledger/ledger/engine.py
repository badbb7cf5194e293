"""
Ledger Engine

Works out who owes whom in a two-member household.

DESIGN DECISION: Every function here is pure. They take snapshots of
expenses and settlements and return new values; nothing is cached and
nothing is mutated. Callers are responsible for taking the expense and
settlement lists at the same logical instant.

Sign convention, always from the viewpoint member:
    positive -> the partner owes the viewpoint
    negative -> the viewpoint owes the partner
    zero     -> settled
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional

import structlog

from household_ledger.models.ledger import (
    Expense,
    Settlement,
    SettlementProposal,
    SplitType,
)


ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _split_type(expense: Expense) -> SplitType:
    """Resolve the split type, treating anything unknown as 50/50."""
    try:
        return SplitType(expense.split_type)
    except ValueError:
        structlog.get_logger(__name__).warning(
            "unknown_split_type",
            expense_id=str(expense.id),
            split_type=str(expense.split_type),
            fallback=SplitType.EQUAL.value,
        )
        return SplitType.EQUAL


def _shares(expense: Expense) -> tuple[Decimal, Decimal]:
    """
    (creator's share, other member's share) of the expense.

    | split_type   | creator's share        |
    |--------------|------------------------|
    | 50/50        | amount / 2             |
    | solo_mine    | amount                 |
    | solo_partner | 0                      |
    | custom       | amount * pct / 100     |

    The other member carries the rest.
    """
    amount = Decimal(expense.amount)
    split = _split_type(expense)

    if split == SplitType.SOLO_MINE:
        creator = amount
    elif split == SplitType.SOLO_PARTNER:
        creator = ZERO
    elif split == SplitType.CUSTOM:
        creator = amount * Decimal(expense.split_percentage) / HUNDRED
    else:
        creator = amount / 2
    return creator, amount - creator


def creator_share(expense: Expense) -> Decimal:
    """Portion of the expense attributable to the member who created it."""
    return _shares(expense)[0]


def partner_share(expense: Expense) -> Decimal:
    """Portion attributable to the member who did NOT create the expense."""
    return _shares(expense)[1]


def share_of(expense: Expense, viewpoint_id: str) -> Decimal:
    """
    Signed contribution of one expense to the viewpoint's balance.

    The viewpoint's own share is the creator's share if they created the
    expense, otherwise the partner's share. Then:
    - viewpoint paid: the other member owes them amount - own share
    - viewpoint did not pay: they owe the payer their own share

    Works the same whether the payer created the expense or one member
    entered an expense the other paid.
    """
    creator, partner = _shares(expense)
    own_share = creator if expense.created_by == viewpoint_id else partner

    if expense.paid_by == viewpoint_id:
        return Decimal(expense.amount) - own_share
    return -own_share


def settlement_effect(settlement: Settlement, viewpoint_id: str) -> Decimal:
    """
    How a settlement moves the viewpoint's balance.

    Paying raises the payer's balance toward zero; receiving lowers the
    receiver's. A self-settlement does both and nets to zero.
    """
    effect = ZERO
    if settlement.paid_by == viewpoint_id:
        effect += Decimal(settlement.amount)
    if settlement.paid_to == viewpoint_id:
        effect -= Decimal(settlement.amount)
    return effect


def net_balance(
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement],
    viewpoint_id: str,
) -> Decimal:
    """
    Net amount the partner owes the viewpoint (negative if the viewpoint owes).

    Plain sum, so the result does not depend on the order of either list.
    """
    balance = sum((share_of(e, viewpoint_id) for e in expenses), ZERO)
    balance += sum((settlement_effect(s, viewpoint_id) for s in settlements), ZERO)
    return balance


def paid_totals(expenses: Iterable[Expense]) -> dict[str, Decimal]:
    """Total each member physically paid."""
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for e in expenses:
        totals[e.paid_by] += Decimal(e.amount)
    return dict(totals)


def suggest_settlement(
    balance: Decimal,
    viewpoint_id: str,
    partner_id: Optional[str],
) -> Optional[SettlementProposal]:
    """
    The transfer that brings the balance back to zero.

    Without a linked partner the household is in solo mode, and the
    proposal is a self-settlement placeholder.
    """
    if balance == 0:
        return None

    amount = abs(Decimal(balance))
    if not partner_id:
        return SettlementProposal(amount=amount, paid_by=viewpoint_id, paid_to=viewpoint_id)
    if balance > 0:
        return SettlementProposal(amount=amount, paid_by=partner_id, paid_to=viewpoint_id)
    return SettlementProposal(amount=amount, paid_by=viewpoint_id, paid_to=partner_id)
