"""
Financial Reporting Module (``cashbook_modules.reporting``).

Responsibility
--------------
Read-only module that generates financial statements from the ledger:
profit and loss, balance sheet, cash flow (indirect method), trial
balance, general ledger, and a columnar profit and loss by month or
quarter.

Architecture position
---------------------
**Modules layer** -- does NOT post journal entries.  All statement
generation is implemented as pure functions in ``statements.py``;
``ReportingService`` only loads data and delegates.

Invariants enforced
-------------------
* No journal entries are created by this module.
* Statements derive entirely from the journal; no stored balances.
* An imbalance is reported, never corrected.
"""

from cashbook_modules.reporting.config import (
    ClassificationPolicy,
    ReportingConfig,
    RetainedEarningsBasis,
)
from cashbook_modules.reporting.models import (
    BalanceSheetReport,
    CashFlowReport,
    ColumnarGrandTotals,
    ColumnarLineItem,
    ColumnarPeriod,
    ColumnarPeriodTotals,
    ColumnarProfitLossReport,
    GeneralLedgerAccount,
    GeneralLedgerReport,
    ProfitLossReport,
    ReportMetadata,
    ReportType,
    StatementLineItem,
    TrialBalanceAccount,
    TrialBalanceReport,
)
from cashbook_modules.reporting.service import ReportingService
from cashbook_modules.reporting.statements import (
    ProfitLossSection,
    build_balance_sheet,
    build_cash_flow,
    build_columnar_profit_loss,
    build_general_ledger,
    build_profit_loss,
    build_trial_balance,
    cash_change,
    classify_profit_loss,
    compute_net_income,
    render_to_dict,
)
from cashbook_modules.reporting.validation import validate_statements

__all__ = [
    "BalanceSheetReport",
    "CashFlowReport",
    "ClassificationPolicy",
    "ColumnarGrandTotals",
    "ColumnarLineItem",
    "ColumnarPeriod",
    "ColumnarPeriodTotals",
    "ColumnarProfitLossReport",
    "GeneralLedgerAccount",
    "GeneralLedgerReport",
    "ProfitLossReport",
    "ProfitLossSection",
    "ReportMetadata",
    "ReportType",
    "ReportingConfig",
    "ReportingService",
    "RetainedEarningsBasis",
    "StatementLineItem",
    "TrialBalanceAccount",
    "TrialBalanceReport",
    "build_balance_sheet",
    "build_cash_flow",
    "build_columnar_profit_loss",
    "build_general_ledger",
    "build_profit_loss",
    "build_trial_balance",
    "cash_change",
    "classify_profit_loss",
    "compute_net_income",
    "render_to_dict",
    "validate_statements",
]
