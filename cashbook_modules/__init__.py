"""
Cashbook Modules.

Thin orchestration layers over the cashbook kernel.

Modules:
- Reporting: profit and loss, balance sheet, cash flow, trial balance,
  general ledger and columnar profit and loss
"""

from cashbook_modules import reporting

__all__ = ["reporting"]
