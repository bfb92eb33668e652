"""ORM models for the cashbook kernel."""

from cashbook_kernel.models.account import (
    Account,
    AccountType,
    NormalBalance,
    normal_balance_for,
)
from cashbook_kernel.models.journal import EntrySource, JournalEntry, TransactionEntry
from cashbook_kernel.models.payable_receivable import (
    PayableReceivable,
    PayableReceivableStatus,
    PayableReceivableType,
)

__all__ = [
    "Account",
    "AccountType",
    "NormalBalance",
    "normal_balance_for",
    "EntrySource",
    "JournalEntry",
    "TransactionEntry",
    "PayableReceivable",
    "PayableReceivableStatus",
    "PayableReceivableType",
]
