"""Tests for the ledger engine and record construction."""

import pytest
from datetime import date
from decimal import Decimal
from structlog.testing import capture_logs

from household_ledger.config import get_settings
from household_ledger.ledger import (
    DEFAULT_SPLIT_PERCENTAGE,
    ImmutableFieldError,
    create_expense,
    create_settlement,
    creator_share,
    edit_expense,
    net_balance,
    paid_totals,
    partner_share,
    share_of,
    suggest_settlement,
)
from household_ledger.models.ledger import Expense, ExpenseDraft, Settlement, SplitType


A = "ana"
B = "ben"


def expense(amount, split=SplitType.EQUAL, paid_by=A, created_by=A, pct=50) -> Expense:
    return Expense(
        amount=Decimal(str(amount)),
        category_id="groceries",
        paid_by=paid_by,
        created_by=created_by,
        split_type=split,
        split_percentage=pct,
        date=date(2025, 6, 2),
        household_id="h1",
    )


def settlement(amount, paid_by, paid_to) -> Settlement:
    return Settlement(
        amount=Decimal(str(amount)),
        paid_by=paid_by,
        paid_to=paid_to,
        date=date(2025, 6, 5),
        household_id="h1",
    )


ALL_SPLITS = [
    (SplitType.EQUAL, 50),
    (SplitType.SOLO_MINE, 50),
    (SplitType.SOLO_PARTNER, 50),
    (SplitType.CUSTOM, 30),
    (SplitType.CUSTOM, 0),
    (SplitType.CUSTOM, 100),
]


class TestSplitTable:
    """Tests for creator and partner shares."""

    @pytest.mark.parametrize("split,pct,creator,partner", [
        (SplitType.EQUAL, 50, "50", "50"),
        (SplitType.SOLO_MINE, 50, "100", "0"),
        (SplitType.SOLO_PARTNER, 50, "0", "100"),
        (SplitType.CUSTOM, 30, "30", "70"),
    ])
    def test_shares(self, split, pct, creator, partner):
        e = expense(100, split=split, pct=pct)
        assert creator_share(e) == Decimal(creator)
        assert partner_share(e) == Decimal(partner)

    def test_split_percentage_ignored_unless_custom(self):
        """Test that a stray percentage does not affect a 50/50 split."""
        e = expense(100, split=SplitType.EQUAL, pct=90)
        assert creator_share(e) == Decimal("50")

    def test_unknown_split_type_falls_back_to_equal(self):
        e = expense(100, split="thirds")
        assert creator_share(e) == Decimal("50")
        assert share_of(e, A) == Decimal("50")
        assert share_of(e, B) == Decimal("-50")

    def test_unknown_split_type_warns_once_per_share(self):
        """Test the fallback is logged once for each share computed."""
        e = expense(100, split="thirds")
        with capture_logs() as logs:
            share_of(e, B)
            share_of(e, A)

        warnings = [log for log in logs if log["event"] == "unknown_split_type"]
        assert len(warnings) == 2
        assert warnings[0]["log_level"] == "warning"
        assert warnings[0]["split_type"] == "thirds"
        assert warnings[0]["fallback"] == "50/50"


class TestShareOf:
    """Tests for a single expense's signed contribution."""

    @pytest.mark.parametrize("split,pct", ALL_SPLITS)
    def test_payer_creator_gets_amount_minus_creator_share(self, split, pct):
        e = expense(100, split=split, pct=pct)
        assert share_of(e, A) == e.amount - creator_share(e)

    def test_equal_split_payer_is_owed_half(self):
        assert share_of(expense(100), A) == Decimal("50")

    @pytest.mark.parametrize("split,pct", ALL_SPLITS)
    @pytest.mark.parametrize("paid_by,created_by", [(A, A), (A, B), (B, A), (B, B)])
    def test_zero_sum(self, split, pct, paid_by, created_by):
        """Test that both members' shares always cancel out."""
        e = expense(250, split=split, paid_by=paid_by, created_by=created_by, pct=pct)
        assert share_of(e, A) == -share_of(e, B)

    def test_custom_split_creator_paid(self):
        """Creator A keeps 30% of a 1000 expense they paid."""
        e = expense(1000, split=SplitType.CUSTOM, pct=30)
        assert share_of(e, A) == Decimal("700")
        assert share_of(e, B) == Decimal("-700")

    def test_custom_split_entered_for_partner(self):
        """A enters a 1000 expense B paid, A's share is 30%."""
        e = expense(1000, split=SplitType.CUSTOM, paid_by=B, created_by=A, pct=30)
        assert share_of(e, A) == Decimal("-300")
        assert share_of(e, B) == Decimal("300")

    def test_solo_mine_fronted_by_partner(self):
        """A's own expense that B paid: A owes the full amount."""
        e = expense(500, split=SplitType.SOLO_MINE, paid_by=B, created_by=A)
        assert share_of(e, A) == Decimal("-500")
        assert share_of(e, B) == Decimal("500")

    def test_solo_mine_paid_by_creator_is_neutral(self):
        e = expense(500, split=SplitType.SOLO_MINE)
        assert share_of(e, A) == 0
        assert share_of(e, B) == 0

    def test_solo_partner_paid_by_creator(self):
        """A pays for something that is all B's: B owes everything."""
        e = expense(500, split=SplitType.SOLO_PARTNER)
        assert share_of(e, A) == Decimal("500")
        assert share_of(e, B) == Decimal("-500")

    def test_solo_partner_entered_by_non_payer(self):
        """B enters an expense A paid that is all A's: nobody owes."""
        e = expense(500, split=SplitType.SOLO_PARTNER, paid_by=A, created_by=B)
        assert share_of(e, A) == 0
        assert share_of(e, B) == 0


class TestNetBalance:
    """Tests for the aggregate balance."""

    def test_empty_ledger_is_settled(self):
        assert net_balance([], [], A) == 0

    def test_sums_expense_shares(self):
        expenses = [expense(100), expense(60, paid_by=B, created_by=B)]
        assert net_balance(expenses, [], A) == Decimal("20")
        assert net_balance(expenses, [], B) == Decimal("-20")

    def test_settlement_moves_balance_toward_zero(self):
        expenses = [expense(200)]
        before = net_balance(expenses, [], B)
        assert before == Decimal("-100")

        after = net_balance(expenses, [settlement(40, B, A)], B)
        assert after == before + 40
        assert net_balance(expenses, [settlement(40, B, A)], A) == Decimal("60")

    def test_full_settlement_zeroes_balance(self):
        expenses = [expense(200), expense(90, split=SplitType.CUSTOM, pct=10)]
        owed = net_balance(expenses, [], B)
        payments = [settlement(abs(owed), B, A)]
        assert net_balance(expenses, payments, A) == 0
        assert net_balance(expenses, payments, B) == 0

    def test_self_settlement_has_no_effect(self):
        expenses = [expense(200)]
        assert net_balance(expenses, [settlement(75, A, A)], A) == Decimal("100")

    def test_order_independent(self):
        expenses = [
            expense(100),
            expense(33.33, paid_by=B, created_by=A, split=SplitType.CUSTOM, pct=70),
            expense(12.5, split=SplitType.SOLO_PARTNER),
        ]
        settlements = [settlement(10, B, A), settlement(5, A, B)]
        forward = net_balance(expenses, settlements, A)
        backward = net_balance(list(reversed(expenses)), list(reversed(settlements)), A)
        assert forward == backward

    def test_does_not_mutate_inputs(self):
        expenses = [expense(100)]
        settlements = [settlement(10, B, A)]
        net_balance(expenses, settlements, A)
        assert len(expenses) == 1 and len(settlements) == 1

    def test_idempotent(self):
        expenses = [expense(100), expense(45, split=SplitType.CUSTOM, pct=20, paid_by=B)]
        assert net_balance(expenses, [], A) == net_balance(expenses, [], A)

    def test_paid_totals(self):
        totals = paid_totals([expense(100), expense(40), expense(10, paid_by=B)])
        assert totals == {A: Decimal("140"), B: Decimal("10")}


class TestSuggestSettlement:
    """Tests for the settle-up proposal."""

    def test_settled_needs_nothing(self):
        assert suggest_settlement(Decimal("0"), A, B) is None

    def test_partner_owes_viewpoint(self):
        proposal = suggest_settlement(Decimal("80"), A, B)
        assert (proposal.paid_by, proposal.paid_to, proposal.amount) == (B, A, Decimal("80"))

    def test_viewpoint_owes_partner(self):
        proposal = suggest_settlement(Decimal("-80"), A, B)
        assert (proposal.paid_by, proposal.paid_to, proposal.amount) == (A, B, Decimal("80"))

    def test_solo_household_self_settles(self):
        proposal = suggest_settlement(Decimal("-15"), A, None)
        assert proposal.paid_by == proposal.paid_to == A


class TestRecords:
    """Tests for expense and settlement construction."""

    def make_draft(self, **overrides) -> ExpenseDraft:
        fields = dict(
            amount=Decimal("120"),
            category_id="groceries",
            paid_by=B,
            split_type=SplitType.CUSTOM,
            date=date(2025, 6, 3),
        )
        fields.update(overrides)
        return ExpenseDraft(**fields)

    def test_create_expense_records_creator(self):
        created = create_expense(self.make_draft(), created_by=A, household_id="h1")
        assert created.created_by == A
        assert created.paid_by == B
        assert created.household_id == "h1"

    def test_create_expense_defaults_percentage(self):
        created = create_expense(self.make_draft(), created_by=A, household_id="h1")
        assert created.split_percentage == 50

    def test_default_percentage_ignores_environment(self, monkeypatch):
        """Test the construction default is not an environment setting."""
        monkeypatch.setenv("LEDGER_DEFAULT_SPLIT_PERCENTAGE", "80")
        get_settings.cache_clear()
        try:
            created = create_expense(self.make_draft(), created_by=A, household_id="h1")
        finally:
            get_settings.cache_clear()
        assert created.split_percentage == DEFAULT_SPLIT_PERCENTAGE == 50

    def test_create_expense_keeps_given_percentage(self):
        created = create_expense(self.make_draft(split_percentage=25), created_by=A, household_id="h1")
        assert created.split_percentage == 25

    def test_create_expense_fresh_ids(self):
        draft = self.make_draft()
        first = create_expense(draft, created_by=A, household_id="h1")
        second = create_expense(draft, created_by=A, household_id="h1")
        assert first.id != second.id

    def test_create_expense_blank_description_is_none(self):
        created = create_expense(self.make_draft(description=""), created_by=A, household_id="h1")
        assert created.description is None

    def test_edit_expense_keeps_identity(self):
        original = create_expense(self.make_draft(), created_by=A, household_id="h1")
        edited = edit_expense(original, amount=Decimal("200"), split_type=SplitType.EQUAL)
        assert edited.id == original.id
        assert edited.created_by == A
        assert edited.amount == Decimal("200")
        assert original.amount == Decimal("120")

    def test_edit_expense_rejects_creator_change(self):
        original = create_expense(self.make_draft(), created_by=A, household_id="h1")
        with pytest.raises(ImmutableFieldError):
            edit_expense(original, created_by=B)

    def test_edit_expense_revalidates(self):
        original = create_expense(self.make_draft(), created_by=A, household_id="h1")
        with pytest.raises(ValueError):
            edit_expense(original, amount=Decimal("0"))

    def test_edit_expense_rejects_unknown_field(self):
        original = create_expense(self.make_draft(), created_by=A, household_id="h1")
        with pytest.raises(ValueError, match="Unknown expense fields"):
            edit_expense(original, colour="red")

    def test_create_settlement_uses_given_date(self):
        s = create_settlement(Decimal("30"), B, A, "h1", on=date(2025, 6, 9))
        assert s.date == date(2025, 6, 9)
        assert s.household_id == "h1"
