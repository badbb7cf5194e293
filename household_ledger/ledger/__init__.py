"""Ledger engine package."""

from household_ledger.ledger.engine import (
    creator_share,
    net_balance,
    paid_totals,
    partner_share,
    settlement_effect,
    share_of,
    suggest_settlement,
)
from household_ledger.ledger.records import (
    DEFAULT_SPLIT_PERCENTAGE,
    ImmutableFieldError,
    create_expense,
    create_settlement,
    edit_expense,
)

__all__ = [
    "DEFAULT_SPLIT_PERCENTAGE",
    "ImmutableFieldError",
    "create_expense",
    "create_settlement",
    "creator_share",
    "edit_expense",
    "net_balance",
    "paid_totals",
    "partner_share",
    "settlement_effect",
    "share_of",
    "suggest_settlement",
]
