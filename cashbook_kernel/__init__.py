"""
Cashbook Kernel

A cash-basis, double-entry ledger for small businesses with:
- A per-company chart of accounts
- Balanced, atomically written journal entries
- Reversal instead of edits
- Period activity and cumulative balance aggregation
"""

__version__ = "0.1.0"
