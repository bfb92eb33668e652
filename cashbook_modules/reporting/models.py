"""
Financial Reporting Domain Models (``cashbook_modules.reporting.models``).

Responsibility
--------------
Frozen dataclass value objects representing statement outputs: profit
and loss, balance sheet, cash flow, trial balance, general ledger and
the columnar (monthly/quarterly) profit and loss.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Built by the
functions in ``statements.py`` and returned by ``ReportingService``.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* Field names render to the camelCase report contract through
  ``render_to_dict``; a field whose wire name is not its plain camelCase
  form carries ``metadata={"wire_name": ...}``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from cashbook_kernel.domain.aggregation import LedgerPosting


# =========================================================================
# Enums
# =========================================================================


class ReportType(str, Enum):
    """Report types accepted by ReportingService.get_report()."""

    PROFIT_LOSS = "profit-loss"
    BALANCE_SHEET = "balance-sheet"
    CASH_FLOW = "cash-flow"
    TRIAL_BALANCE = "trial-balance"
    GENERAL_LEDGER = "general-ledger"
    COLUMNAR_PROFIT_LOSS = "columnar-profit-loss"


# =========================================================================
# Report Metadata (common to all reports)
# =========================================================================


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata attached to every report."""

    report_type: ReportType
    company_id: UUID
    entity_name: str
    generated_at: str  # ISO format timestamp from injected clock
    from_date: date | None = None
    to_date: date | None = None
    year: int | None = None
    column_mode: str | None = None


# =========================================================================
# Shared line item
# =========================================================================


@dataclass(frozen=True)
class StatementLineItem:
    """One account (or derived) row of a P&L, balance sheet or cash flow."""

    account_number: str
    account_name: str
    amount: Decimal


# =========================================================================
# Profit & Loss
# =========================================================================


@dataclass(frozen=True)
class ProfitLossReport:
    """
    Multi-step profit and loss over period activity.

    grossProfit = totalRevenue - totalCostOfGoodsSold
    operatingIncome = grossProfit - totalOperatingExpenses
    netIncome = operatingIncome + totalOtherIncome - totalOtherExpenses
    """

    metadata: ReportMetadata
    revenue: tuple[StatementLineItem, ...]
    cost_of_goods_sold: tuple[StatementLineItem, ...]
    operating_expenses: tuple[StatementLineItem, ...]
    other_income: tuple[StatementLineItem, ...]
    other_expenses: tuple[StatementLineItem, ...]
    total_revenue: Decimal
    total_cost_of_goods_sold: Decimal
    total_operating_expenses: Decimal
    total_other_income: Decimal
    total_other_expenses: Decimal
    gross_profit: Decimal
    operating_income: Decimal
    net_income: Decimal


# =========================================================================
# Balance Sheet
# =========================================================================


@dataclass(frozen=True)
class BalanceSheetReport:
    """
    Balance sheet over cumulative balances.

    An imbalance is reported through is_balanced / discrepancy, never
    absorbed into a line.
    """

    metadata: ReportMetadata
    assets: tuple[StatementLineItem, ...]
    liabilities: tuple[StatementLineItem, ...]
    equity: tuple[StatementLineItem, ...]
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    is_balanced: bool
    discrepancy: Decimal  # total_assets - (total_liabilities + total_equity)


# =========================================================================
# Cash Flow (indirect method)
# =========================================================================


@dataclass(frozen=True)
class CashFlowReport:
    """
    Statement of cash flows from period activity.

    Operating: net income, then changes in non-cash current assets and
    current liabilities.  Investing: other non-cash assets.  Financing:
    long-term liabilities and equity.
    """

    metadata: ReportMetadata
    operating_activities: tuple[StatementLineItem, ...]
    investing_activities: tuple[StatementLineItem, ...]
    financing_activities: tuple[StatementLineItem, ...]
    total_operating_activities: Decimal
    total_investing_activities: Decimal
    total_financing_activities: Decimal
    net_cash_flow: Decimal


# =========================================================================
# Trial Balance / General Ledger
# =========================================================================


@dataclass(frozen=True)
class TrialBalanceAccount:
    """Cumulative debits, credits and natural balance of one account."""

    account_number: str
    account_name: str
    account_type: str
    debits: Decimal
    credits: Decimal
    balance: Decimal


@dataclass(frozen=True)
class TrialBalanceReport:
    metadata: ReportMetadata
    accounts: tuple[TrialBalanceAccount, ...]
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool


@dataclass(frozen=True)
class GeneralLedgerAccount:
    """Trial-balance row plus the dated postings behind it."""

    account_number: str
    account_name: str
    account_type: str
    debits: Decimal
    credits: Decimal
    balance: Decimal
    lines: tuple[LedgerPosting, ...] = ()


@dataclass(frozen=True)
class GeneralLedgerReport:
    metadata: ReportMetadata
    accounts: tuple[GeneralLedgerAccount, ...]
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool


# =========================================================================
# Columnar Profit & Loss
# =========================================================================


@dataclass(frozen=True)
class ColumnarPeriod:
    key: str
    label: str
    from_date: date
    to_date: date


@dataclass(frozen=True)
class ColumnarLineItem:
    """One account row; period_amounts has an entry for every period key."""

    account_number: str
    account_name: str
    period_amounts: dict[str, Decimal]
    total: Decimal


@dataclass(frozen=True)
class ColumnarPeriodTotals:
    """Each derived row as a period key -> amount mapping."""

    total_revenue: dict[str, Decimal]
    total_cogs: dict[str, Decimal] = field(metadata={"wire_name": "totalCOGS"})
    gross_profit: dict[str, Decimal]
    total_operating_expenses: dict[str, Decimal]
    operating_income: dict[str, Decimal]
    total_other_income: dict[str, Decimal]
    total_other_expenses: dict[str, Decimal]
    net_income: dict[str, Decimal]


@dataclass(frozen=True)
class ColumnarGrandTotals:
    """Derived rows summed across all periods."""

    total_revenue: Decimal
    total_cogs: Decimal = field(metadata={"wire_name": "totalCOGS"})
    gross_profit: Decimal
    total_operating_expenses: Decimal
    operating_income: Decimal
    total_other_income: Decimal
    total_other_expenses: Decimal
    net_income: Decimal


@dataclass(frozen=True)
class ColumnarProfitLossReport:
    metadata: ReportMetadata
    periods: tuple[ColumnarPeriod, ...]
    revenue: tuple[ColumnarLineItem, ...]
    cost_of_goods_sold: tuple[ColumnarLineItem, ...]
    operating_expenses: tuple[ColumnarLineItem, ...]
    other_income: tuple[ColumnarLineItem, ...]
    other_expenses: tuple[ColumnarLineItem, ...]
    period_totals: ColumnarPeriodTotals
    grand_totals: ColumnarGrandTotals
