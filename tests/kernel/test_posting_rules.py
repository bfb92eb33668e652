"""Tests for derive_entry_lines and assert_balanced (pure, no database)."""

from decimal import Decimal

import pytest

from cashbook_kernel.domain.dtos import LineSide, LineSpec, TransactionType
from cashbook_kernel.domain.posting_rules import assert_balanced, derive_entry_lines
from cashbook_kernel.exceptions import ImbalancedEntryError, ValidationError


def _names(lines):
    debit, credit = lines
    assert debit.side == LineSide.DEBIT
    assert credit.side == LineSide.CREDIT
    assert debit.amount == credit.amount
    return debit.account_name, credit.account_name


class TestDeriveEntryLines:
    @pytest.mark.parametrize(
        "txn_type, category, expected",
        [
            ("income", "Sales Revenue", ("Cash", "Sales Revenue")),
            ("expense", "Rent", ("Rent", "Cash")),
            ("asset", "Cash", ("Cash", "Owner's Capital")),
            ("asset", "Accounts Receivable", ("Accounts Receivable", "Sales Revenue")),
            ("asset", "Inventory", ("Inventory", "Cash")),
            ("liability", "Loans Payable", ("Loans Payable", "Cash")),
            ("equity", "Owner's Draws", ("Owner's Draws", "Cash")),
            ("equity", "Owner's Capital", ("Cash", "Owner's Capital")),
        ],
    )
    def test_rule_table(self, txn_type, category, expected):
        lines = derive_entry_lines(txn_type, category, Decimal("100.00"))
        assert _names(lines) == expected

    def test_amount_and_memo_carried_to_both_lines(self):
        debit, credit = derive_entry_lines(
            TransactionType.EXPENSE, "Travel", Decimal("42.50"), memo="Taxi",
        )
        assert debit.amount == credit.amount == Decimal("42.50")
        assert debit.memo == credit.memo == "Taxi"

    def test_corresponding_account_override(self):
        lines = derive_entry_lines(
            "expense", "Office Supplies", Decimal("20"),
            corresponding_account="Credit Cards",
        )
        assert _names(lines) == ("Office Supplies", "Credit Cards")

    def test_capital_injection_ignores_corresponding_account(self):
        lines = derive_entry_lines(
            "asset", "Cash", Decimal("5000"), corresponding_account="Cash & Bank Accounts",
        )
        assert _names(lines) == ("Cash", "Owner's Capital")

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5"), None])
    def test_non_positive_amount_rejected(self, amount):
        with pytest.raises(ValidationError) as exc:
            derive_entry_lines("expense", "Rent", amount)
        assert exc.value.field == "amount"
        assert exc.value.code == "VALIDATION_ERROR"

    @pytest.mark.parametrize("category", ["", "   "])
    def test_blank_category_rejected(self, category):
        with pytest.raises(ValidationError) as exc:
            derive_entry_lines("expense", category, Decimal("10"))
        assert exc.value.field == "category"

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError) as exc:
            derive_entry_lines("transfer", "Cash", Decimal("10"))
        assert exc.value.field == "type"


class TestAssertBalanced:
    def test_balanced_pair_passes(self):
        assert_balanced(derive_entry_lines("income", "Sales Revenue", Decimal("2500")))

    def test_multi_line_balanced(self):
        lines = [
            LineSpec("Rent", LineSide.DEBIT, Decimal("700")),
            LineSpec("Utilities", LineSide.DEBIT, Decimal("300")),
            LineSpec("Cash", LineSide.CREDIT, Decimal("1000")),
        ]
        assert_balanced(lines)

    def test_sub_cent_difference_tolerated(self):
        lines = [
            LineSpec("Rent", LineSide.DEBIT, Decimal("100.004")),
            LineSpec("Cash", LineSide.CREDIT, Decimal("100.00")),
        ]
        assert_balanced(lines)

    def test_imbalance_raises_and_reports_totals(self):
        lines = [
            LineSpec("Rent", LineSide.DEBIT, Decimal("100")),
            LineSpec("Cash", LineSide.CREDIT, Decimal("99")),
        ]
        with pytest.raises(ImbalancedEntryError) as exc:
            assert_balanced(lines, "Office rent")
        assert exc.value.debits == "100"
        assert exc.value.credits == "99"
        assert exc.value.description == "Office rent"

    def test_one_sided_entry_raises(self):
        with pytest.raises(ImbalancedEntryError):
            assert_balanced([LineSpec("Rent", LineSide.DEBIT, Decimal("100"))])

    def test_empty_entry_raises(self):
        with pytest.raises(ImbalancedEntryError):
            assert_balanced([])
