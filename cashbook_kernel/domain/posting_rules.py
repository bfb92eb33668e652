"""
Posting rules -- derive balanced ledger lines from a simplified transaction.

Responsibility:
    Turns (type, category, amount) into the minimal balanced pair of
    LineSpecs, always pairing the category account with a corresponding
    account (Cash unless the rule says otherwise), and validates that any
    line set balances before it is persisted.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Account names
    are resolved later by ChartOfAccountsRegistry.

Invariants enforced:
    - Every derived pair balances by construction (same amount both sides).
    - assert_balanced raises ImbalancedEntryError and never adjusts lines.

Rules:
    type       category               debit                 credit
    ---------  ---------------------  --------------------  ---------------
    income     any                    Cash                  category
    expense    any                    category              Cash
    asset      Cash                   Cash                  Owner's Capital
    asset      Accounts Receivable    Accounts Receivable   Sales Revenue
    asset      other                  category              Cash
    liability  any                    category              Cash
    equity     Owner's Draws          Owner's Draws         Cash
    equity     other                  Cash                  category
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from cashbook_kernel.db.types import BALANCE_TOLERANCE
from cashbook_kernel.domain.dtos import LineSide, LineSpec, TransactionType
from cashbook_kernel.exceptions import ImbalancedEntryError, ValidationError

CASH_ACCOUNT = "Cash"
OWNERS_CAPITAL_ACCOUNT = "Owner's Capital"
OWNERS_DRAWS_ACCOUNT = "Owner's Draws"
ACCOUNTS_RECEIVABLE_ACCOUNT = "Accounts Receivable"
SALES_REVENUE_ACCOUNT = "Sales Revenue"


def _pair(debit: str, credit: str, amount: Decimal, memo: str | None) -> tuple[LineSpec, LineSpec]:
    return (
        LineSpec(account_name=debit, side=LineSide.DEBIT, amount=amount, memo=memo),
        LineSpec(account_name=credit, side=LineSide.CREDIT, amount=amount, memo=memo),
    )


def derive_entry_lines(
    transaction_type: TransactionType | str,
    category: str,
    amount: Decimal,
    memo: str | None = None,
    corresponding_account: str = CASH_ACCOUNT,
) -> tuple[LineSpec, LineSpec]:
    """
    Derive the debit and credit lines for a simplified transaction.

    Preconditions: amount > 0; category is non-blank.
    Postconditions: Returns (debit_line, credit_line) with equal amounts.

    Raises:
        ValidationError: amount <= 0, blank category, or unknown type.
    """
    if amount is None or amount <= Decimal("0"):
        raise ValidationError("amount", "must be greater than zero", amount)
    if not category or not category.strip():
        raise ValidationError("category", "is required")
    try:
        txn_type = TransactionType(transaction_type)
    except ValueError:
        raise ValidationError(
            "type", f"must be one of {[t.value for t in TransactionType]}",
            transaction_type,
        ) from None

    cash = corresponding_account
    match txn_type:
        case TransactionType.INCOME:
            return _pair(cash, category, amount, memo)
        case TransactionType.EXPENSE:
            return _pair(category, cash, amount, memo)
        case TransactionType.ASSET:
            if category == CASH_ACCOUNT:
                # Capital injection
                return _pair(CASH_ACCOUNT, OWNERS_CAPITAL_ACCOUNT, amount, memo)
            if category == ACCOUNTS_RECEIVABLE_ACCOUNT:
                # Credit sale
                return _pair(ACCOUNTS_RECEIVABLE_ACCOUNT, SALES_REVENUE_ACCOUNT, amount, memo)
            return _pair(category, cash, amount, memo)
        case TransactionType.LIABILITY:
            return _pair(category, cash, amount, memo)
        case TransactionType.EQUITY:
            if category == OWNERS_DRAWS_ACCOUNT:
                return _pair(OWNERS_DRAWS_ACCOUNT, cash, amount, memo)
            return _pair(cash, category, amount, memo)


def assert_balanced(lines: Sequence[LineSpec], description: str = "") -> None:
    """
    Verify that a line set is non-empty and balances within tolerance.

    Raises:
        ImbalancedEntryError: debits and credits differ by 0.01 or more,
            or either side is empty.
    """
    debits = sum((line.debit_amount for line in lines), Decimal("0"))
    credits = sum((line.credit_amount for line in lines), Decimal("0"))
    has_both_sides = (
        any(line.side == LineSide.DEBIT for line in lines)
        and any(line.side == LineSide.CREDIT for line in lines)
    )
    if not has_both_sides or abs(debits - credits) >= BALANCE_TOLERANCE:
        raise ImbalancedEntryError(
            debits=str(debits),
            credits=str(credits),
            description=description,
        )
