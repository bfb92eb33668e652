"""Selectors for the cashbook kernel (read side)."""

from cashbook_kernel.selectors.journal_selector import JournalSelector
from cashbook_kernel.selectors.ledger_selector import LedgerSelector

__all__ = [
    "JournalSelector",
    "LedgerSelector",
]
