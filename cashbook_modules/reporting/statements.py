"""
Pure financial statement transformation functions.

These functions transform per-account ledger totals into structured
financial statements.  ZERO I/O.  ZERO side effects.

All monetary values are Decimal.  All inputs/outputs are frozen
dataclasses or plain mappings of them.

Functions in this module follow the cashbook_kernel/domain/ purity
convention:
- No database access
- No clock access
- No file I/O
- Deterministic: same inputs always produce same outputs

Inputs are the two aggregation modes of the ledger:
- period activity (``LedgerSelector.period_activity``) feeds the profit
  and loss, the cash flow and the columnar profit and loss;
- cumulative balances (``LedgerSelector.cumulative_balances``) feed the
  balance sheet, trial balance and general ledger.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from cashbook_kernel.db.types import ZERO, round_money, within_tolerance
from cashbook_kernel.domain.aggregation import LedgerPosting
from cashbook_kernel.domain.dtos import AccountRef, AccountTotals
from cashbook_kernel.domain.periods import PeriodDefinition
from cashbook_kernel.domain.posting_rules import ACCOUNTS_RECEIVABLE_ACCOUNT
from cashbook_kernel.models.account import AccountType
from cashbook_modules.reporting.config import ClassificationPolicy, ReportingConfig, RetainedEarningsBasis
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
    StatementLineItem,
    TrialBalanceAccount,
    TrialBalanceReport,
)

ACCOUNTS_PAYABLE_ACCOUNT = "Accounts Payable"
NET_INCOME_LINE = "Net Income"


class ProfitLossSection(str, Enum):
    """P&L section an account's activity is reported in."""

    REVENUE = "revenue"
    COST_OF_GOODS_SOLD = "cost_of_goods_sold"
    OPERATING_EXPENSES = "operating_expenses"
    OTHER_INCOME = "other_income"
    OTHER_EXPENSES = "other_expenses"


# =========================================================================
# Helpers
# =========================================================================


def classify_profit_loss(
    ref: AccountRef,
    policy: ClassificationPolicy,
) -> ProfitLossSection | None:
    """
    P&L section for an account, or None for balance sheet accounts.

    revenue: other-income range -> OTHER_INCOME, else REVENUE
    expense: COGS range -> COST_OF_GOODS_SOLD, other-expense range ->
             OTHER_EXPENSES, else OPERATING_EXPENSES
    """
    match ref.account_type:
        case AccountType.REVENUE:
            if policy.is_other_income(ref):
                return ProfitLossSection.OTHER_INCOME
            return ProfitLossSection.REVENUE
        case AccountType.EXPENSE:
            if policy.is_cogs(ref):
                return ProfitLossSection.COST_OF_GOODS_SOLD
            if policy.is_other_expense(ref):
                return ProfitLossSection.OTHER_EXPENSES
            return ProfitLossSection.OPERATING_EXPENSES
        case AccountType.ASSET | AccountType.LIABILITY | AccountType.EQUITY:
            return None
    raise ValueError(f"Unknown account type: {ref.account_type!r}")


def compute_net_income(totals: Mapping[AccountRef, AccountTotals]) -> Decimal:
    """
    Net income from per-account totals.

    Net income = sum(REVENUE natural balances) - sum(EXPENSE natural balances).
    Other income and other expense are revenue/expense accounts, so this
    equals the P&L's netIncome for the same totals.
    """
    revenue = ZERO
    expense = ZERO
    for ref, t in totals.items():
        if ref.account_type == AccountType.REVENUE:
            revenue += t.natural_balance
        elif ref.account_type == AccountType.EXPENSE:
            expense += t.natural_balance
    return revenue - expense


def _sum(items: Iterable[StatementLineItem]) -> Decimal:
    return sum((item.amount for item in items), ZERO)


def _line(ref: AccountRef, amount: Decimal) -> StatementLineItem:
    return StatementLineItem(
        account_number=ref.account_number,
        account_name=ref.account_name,
        amount=amount,
    )


def _sorted_lines(lines: Iterable[StatementLineItem]) -> tuple[StatementLineItem, ...]:
    return tuple(sorted(lines, key=lambda x: (x.account_number, x.account_name)))


# =========================================================================
# 1. PROFIT & LOSS
# =========================================================================


def build_profit_loss(
    activity: Mapping[AccountRef, AccountTotals],
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> ProfitLossReport:
    """
    Build the multi-step P&L from period activity.

    Accounts with zero activity are omitted unless
    ``config.include_zero_balances``; negative activity (net refunds or
    reversals of income) is reported, not dropped.
    """
    sections: dict[ProfitLossSection, list[StatementLineItem]] = {
        section: [] for section in ProfitLossSection
    }
    for ref, totals in sorted(activity.items()):
        section = classify_profit_loss(ref, config.policy)
        if section is None:
            continue
        amount = totals.natural_balance
        if amount == ZERO and not config.include_zero_balances:
            continue
        sections[section].append(_line(ref, amount))

    revenue = _sorted_lines(sections[ProfitLossSection.REVENUE])
    cogs = _sorted_lines(sections[ProfitLossSection.COST_OF_GOODS_SOLD])
    operating = _sorted_lines(sections[ProfitLossSection.OPERATING_EXPENSES])
    other_income = _sorted_lines(sections[ProfitLossSection.OTHER_INCOME])
    other_expenses = _sorted_lines(sections[ProfitLossSection.OTHER_EXPENSES])

    total_revenue = _sum(revenue)
    total_cogs = _sum(cogs)
    total_operating = _sum(operating)
    total_other_income = _sum(other_income)
    total_other_expenses = _sum(other_expenses)

    gross_profit = total_revenue - total_cogs
    operating_income = gross_profit - total_operating
    net_income = operating_income + total_other_income - total_other_expenses

    return ProfitLossReport(
        metadata=metadata,
        revenue=revenue,
        cost_of_goods_sold=cogs,
        operating_expenses=operating,
        other_income=other_income,
        other_expenses=other_expenses,
        total_revenue=total_revenue,
        total_cost_of_goods_sold=total_cogs,
        total_operating_expenses=total_operating,
        total_other_income=total_other_income,
        total_other_expenses=total_other_expenses,
        gross_profit=gross_profit,
        operating_income=operating_income,
        net_income=net_income,
    )


# =========================================================================
# 2. BALANCE SHEET
# =========================================================================


class _SectionBuilder:
    """Name-keyed accumulator that allows adjustments before rendering."""

    def __init__(self, chart_index: Mapping[str, AccountRef]):
        self._chart_index = chart_index
        self._rows: dict[str, list] = {}

    def add(self, number: str, name: str, amount: Decimal) -> None:
        row = self._rows.setdefault(name, [number, ZERO])
        row[1] += amount

    def adjust(self, name: str, amount: Decimal) -> None:
        ref = self._chart_index.get(name)
        self.add(ref.account_number if ref else "", name, amount)

    def lines(self, include_zero: bool) -> tuple[StatementLineItem, ...]:
        return _sorted_lines(
            StatementLineItem(account_number=number, account_name=name, amount=amount)
            for name, (number, amount) in self._rows.items()
            if include_zero or amount != ZERO
        )


def build_balance_sheet(
    balances: Mapping[AccountRef, AccountTotals],
    config: ReportingConfig,
    metadata: ReportMetadata,
    open_receivables: Decimal = ZERO,
    open_payables: Decimal = ZERO,
    period_net_income: Decimal | None = None,
    chart: Sequence[AccountRef] = (),
) -> BalanceSheetReport:
    """
    Build the balance sheet from cumulative balances.

    - Asset, liability and equity accounts with a non-zero balance are
      listed (including negative balances such as Owner's Draws).
    - With ``config.include_open_items``, open receivables are added to
      "Accounts Receivable" and open payables to "Accounts Payable".
    - Net income is rolled into the Retained Earnings line: with the
      CUMULATIVE basis it is computed from the revenue/expense balances in
      ``balances``; with the PERIOD basis ``period_net_income`` is used.
    - A = L + E is checked within 0.01; the difference is returned as
      ``discrepancy`` and never folded into a line.

    ``chart`` supplies account numbers for lines that exist only through
    an adjustment.

    Raises:
        ValueError: PERIOD basis without ``period_net_income``.
    """
    chart_index = {ref.account_name: ref for ref in chart}
    for ref in balances:
        chart_index.setdefault(ref.account_name, ref)

    assets = _SectionBuilder(chart_index)
    liabilities = _SectionBuilder(chart_index)
    equity = _SectionBuilder(chart_index)

    for ref, totals in sorted(balances.items()):
        amount = totals.natural_balance
        match ref.account_type:
            case AccountType.ASSET:
                assets.add(ref.account_number, ref.account_name, amount)
            case AccountType.LIABILITY:
                liabilities.add(ref.account_number, ref.account_name, amount)
            case AccountType.EQUITY:
                equity.add(ref.account_number, ref.account_name, amount)
            case AccountType.REVENUE | AccountType.EXPENSE:
                pass

    if config.include_open_items:
        if open_receivables > ZERO:
            assets.adjust(ACCOUNTS_RECEIVABLE_ACCOUNT, open_receivables)
        if open_payables > ZERO:
            liabilities.adjust(ACCOUNTS_PAYABLE_ACCOUNT, open_payables)

    if config.retained_earnings_basis == RetainedEarningsBasis.PERIOD:
        if period_net_income is None:
            raise ValueError("period_net_income is required for the period basis")
        net_income = period_net_income
    else:
        net_income = compute_net_income(balances)
    if net_income != ZERO:
        equity.adjust(config.policy.retained_earnings_account, net_income)

    asset_lines = assets.lines(config.include_zero_balances)
    liability_lines = liabilities.lines(config.include_zero_balances)
    equity_lines = equity.lines(config.include_zero_balances)

    total_assets = _sum(asset_lines)
    total_liabilities = _sum(liability_lines)
    total_equity = _sum(equity_lines)
    discrepancy = total_assets - (total_liabilities + total_equity)

    return BalanceSheetReport(
        metadata=metadata,
        assets=asset_lines,
        liabilities=liability_lines,
        equity=equity_lines,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        total_equity=total_equity,
        is_balanced=within_tolerance(total_assets, total_liabilities + total_equity),
        discrepancy=discrepancy,
    )


# =========================================================================
# 3. CASH FLOW STATEMENT
# =========================================================================


def build_cash_flow(
    activity: Mapping[AccountRef, AccountTotals],
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> CashFlowReport:
    """
    Build the indirect-method cash flow from period activity.

    Operating: "Net Income" first, then "Change in <account>" for
        non-cash current assets (-activity) and current liabilities
        (+activity).
    Investing: fixed assets and any other non-cash asset outside the
        current range (-activity).
    Financing: long-term liabilities, liabilities outside the current
        range, and all equity (+activity).

    The fixed-asset and long-term ranges are checked first, so they win
    where a policy's ranges overlap.

    Because every entry balances, netCashFlow equals the period change of
    the cash accounts.
    """
    policy = config.policy
    net_income = compute_net_income(activity)

    operating: list[StatementLineItem] = []
    investing: list[StatementLineItem] = []
    financing: list[StatementLineItem] = []

    if net_income != ZERO:
        operating.append(
            StatementLineItem(account_number="", account_name=NET_INCOME_LINE, amount=net_income)
        )

    for ref, totals in sorted(activity.items()):
        change = totals.natural_balance
        if change == ZERO:
            continue
        match ref.account_type:
            case AccountType.ASSET:
                if policy.is_cash(ref):
                    continue
                if policy.is_fixed_asset(ref):
                    investing.append(_line(ref, -change))
                elif policy.is_current_asset(ref):
                    operating.append(
                        StatementLineItem(ref.account_number, f"Change in {ref.account_name}", -change)
                    )
                else:
                    # outside both ranges: treated as non-current
                    investing.append(_line(ref, -change))
            case AccountType.LIABILITY:
                if policy.is_long_term_liability(ref):
                    financing.append(_line(ref, change))
                elif policy.is_current_liability(ref):
                    operating.append(
                        StatementLineItem(ref.account_number, f"Change in {ref.account_name}", change)
                    )
                else:
                    financing.append(_line(ref, change))
            case AccountType.EQUITY:
                financing.append(_line(ref, change))
            case AccountType.REVENUE | AccountType.EXPENSE:
                pass

    total_operating = _sum(operating)
    total_investing = _sum(investing)
    total_financing = _sum(financing)

    return CashFlowReport(
        metadata=metadata,
        operating_activities=tuple(operating),
        investing_activities=tuple(investing),
        financing_activities=tuple(financing),
        total_operating_activities=total_operating,
        total_investing_activities=total_investing,
        total_financing_activities=total_financing,
        net_cash_flow=total_operating + total_investing + total_financing,
    )


def cash_change(
    activity: Mapping[AccountRef, AccountTotals],
    policy: ClassificationPolicy,
) -> Decimal:
    """Period change of the cash accounts, for reconciling a cash flow."""
    return sum(
        (t.natural_balance for ref, t in activity.items()
         if ref.account_type == AccountType.ASSET and policy.is_cash(ref)),
        ZERO,
    )


# =========================================================================
# 4. TRIAL BALANCE / GENERAL LEDGER
# =========================================================================


def _ledger_refs(
    balances: Mapping[AccountRef, AccountTotals],
    chart: Sequence[AccountRef],
) -> list[AccountRef]:
    refs = set(balances)
    refs.update(chart)
    return sorted(refs)


def _zero_totals(ref: AccountRef) -> AccountTotals:
    return AccountTotals(account=ref, total_debits=ZERO, total_credits=ZERO)


def build_trial_balance(
    balances: Mapping[AccountRef, AccountTotals],
    config: ReportingConfig,
    metadata: ReportMetadata,
    chart: Sequence[AccountRef] = (),
) -> TrialBalanceReport:
    """
    Build the trial balance from cumulative balances.

    Every active ``chart`` account is listed, with zero columns when it
    has no activity.  An account deactivated after it was posted to is
    listed too, so the totals always cover the whole journal.
    ``config.include_zero_balances`` does not apply here.
    """
    accounts: list[TrialBalanceAccount] = []
    for ref in _ledger_refs(balances, chart):
        totals = balances.get(ref) or _zero_totals(ref)
        accounts.append(
            TrialBalanceAccount(
                account_number=ref.account_number,
                account_name=ref.account_name,
                account_type=ref.account_type.value,
                debits=totals.total_debits,
                credits=totals.total_credits,
                balance=totals.natural_balance,
            )
        )

    total_debits = sum((a.debits for a in accounts), ZERO)
    total_credits = sum((a.credits for a in accounts), ZERO)
    return TrialBalanceReport(
        metadata=metadata,
        accounts=tuple(accounts),
        total_debits=total_debits,
        total_credits=total_credits,
        is_balanced=within_tolerance(total_debits, total_credits),
    )


def build_general_ledger(
    balances: Mapping[AccountRef, AccountTotals],
    postings: Mapping[AccountRef, Sequence[LedgerPosting]],
    config: ReportingConfig,
    metadata: ReportMetadata,
    chart: Sequence[AccountRef] = (),
) -> GeneralLedgerReport:
    """
    Build the general ledger: trial-balance detail per account plus its
    dated postings with running balances.  Lists the same accounts as
    build_trial_balance.
    """
    accounts: list[GeneralLedgerAccount] = []
    for ref in _ledger_refs(balances, chart):
        totals = balances.get(ref) or _zero_totals(ref)
        accounts.append(
            GeneralLedgerAccount(
                account_number=ref.account_number,
                account_name=ref.account_name,
                account_type=ref.account_type.value,
                debits=totals.total_debits,
                credits=totals.total_credits,
                balance=totals.natural_balance,
                lines=tuple(postings.get(ref, ())),
            )
        )

    total_debits = sum((a.debits for a in accounts), ZERO)
    total_credits = sum((a.credits for a in accounts), ZERO)
    return GeneralLedgerReport(
        metadata=metadata,
        accounts=tuple(accounts),
        total_debits=total_debits,
        total_credits=total_credits,
        is_balanced=within_tolerance(total_debits, total_credits),
    )


# =========================================================================
# 5. COLUMNAR PROFIT & LOSS
# =========================================================================


def _sum_columns(
    items: Sequence[ColumnarLineItem],
    keys: Sequence[str],
) -> dict[str, Decimal]:
    return {
        key: sum((item.period_amounts[key] for item in items), ZERO)
        for key in keys
    }


def build_columnar_profit_loss(
    bucketed: Mapping[AccountRef, Mapping[str, Decimal]],
    periods: Sequence[PeriodDefinition],
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> ColumnarProfitLossReport:
    """
    Build the P&L with one column per period.

    ``bucketed`` is ``bucket_activity()`` output: signed activity per
    account per period key.  Uses the same partition as build_profit_loss;
    an account is listed when any period amount is non-zero.
    """
    keys = [p.key for p in periods]
    sections: dict[ProfitLossSection, list[ColumnarLineItem]] = {
        section: [] for section in ProfitLossSection
    }
    for ref, amounts in sorted(bucketed.items()):
        section = classify_profit_loss(ref, config.policy)
        if section is None:
            continue
        period_amounts = {key: amounts.get(key, ZERO) for key in keys}
        if all(v == ZERO for v in period_amounts.values()) and not config.include_zero_balances:
            continue
        sections[section].append(
            ColumnarLineItem(
                account_number=ref.account_number,
                account_name=ref.account_name,
                period_amounts=period_amounts,
                total=sum(period_amounts.values(), ZERO),
            )
        )

    revenue = tuple(sections[ProfitLossSection.REVENUE])
    cogs = tuple(sections[ProfitLossSection.COST_OF_GOODS_SOLD])
    operating = tuple(sections[ProfitLossSection.OPERATING_EXPENSES])
    other_income = tuple(sections[ProfitLossSection.OTHER_INCOME])
    other_expenses = tuple(sections[ProfitLossSection.OTHER_EXPENSES])

    rev_cols = _sum_columns(revenue, keys)
    cogs_cols = _sum_columns(cogs, keys)
    opex_cols = _sum_columns(operating, keys)
    oi_cols = _sum_columns(other_income, keys)
    oe_cols = _sum_columns(other_expenses, keys)
    gp_cols = {k: rev_cols[k] - cogs_cols[k] for k in keys}
    op_cols = {k: gp_cols[k] - opex_cols[k] for k in keys}
    ni_cols = {k: op_cols[k] + oi_cols[k] - oe_cols[k] for k in keys}

    total_revenue = sum((i.total for i in revenue), ZERO)
    total_cogs = sum((i.total for i in cogs), ZERO)
    total_operating = sum((i.total for i in operating), ZERO)
    total_other_income = sum((i.total for i in other_income), ZERO)
    total_other_expenses = sum((i.total for i in other_expenses), ZERO)
    gross_profit = total_revenue - total_cogs
    operating_income = gross_profit - total_operating

    return ColumnarProfitLossReport(
        metadata=metadata,
        periods=tuple(
            ColumnarPeriod(key=p.key, label=p.label, from_date=p.from_date, to_date=p.to_date)
            for p in periods
        ),
        revenue=revenue,
        cost_of_goods_sold=cogs,
        operating_expenses=operating,
        other_income=other_income,
        other_expenses=other_expenses,
        period_totals=ColumnarPeriodTotals(
            total_revenue=rev_cols,
            total_cogs=cogs_cols,
            gross_profit=gp_cols,
            total_operating_expenses=opex_cols,
            operating_income=op_cols,
            total_other_income=oi_cols,
            total_other_expenses=oe_cols,
            net_income=ni_cols,
        ),
        grand_totals=ColumnarGrandTotals(
            total_revenue=total_revenue,
            total_cogs=total_cogs,
            gross_profit=gross_profit,
            total_operating_expenses=total_operating,
            operating_income=operating_income,
            total_other_income=total_other_income,
            total_other_expenses=total_other_expenses,
            net_income=operating_income + total_other_income - total_other_expenses,
        ),
    )


# =========================================================================
# 6. RENDERING
# =========================================================================


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def render_to_dict(
    obj: object,
    precision: int = 2,
) -> dict | list | str | int | bool | None:
    """
    Convert any report dataclass to a plain dict for JSON serialization.

    Handles:
    - Decimal -> str quantized to ``precision`` places
    - UUID -> str
    - date -> ISO format string
    - Enum -> .value
    - Nested frozen dataclasses -> nested dicts with camelCase keys (or the
      field's ``wire_name`` metadata)
    - Mappings -> dicts with their keys unchanged
    - Tuples -> lists
    - None preserved
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(round_money(obj, precision))
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item, precision) for item in obj]
    if isinstance(obj, Mapping):
        return {str(k): render_to_dict(v, precision) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.metadata.get("wire_name", _camel(f.name)): render_to_dict(
                getattr(obj, f.name), precision,
            )
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, bool)):
        return obj
    return str(obj)
