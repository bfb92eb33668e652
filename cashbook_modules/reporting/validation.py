"""
Statement validation -- re-checks generated reports for internal consistency.

Responsibility:
    ``validate_statements`` takes any subset of the generated reports and
    re-derives their arithmetic: the accounting equation, P&L subtotals,
    trial balance and general ledger closure, and cash flow totals.  When
    both a P&L and a cash flow for the same period are given, the cash
    flow's "Net Income" line is compared with the P&L.

Architecture position:
    Modules layer -- pure, ZERO I/O.

Output:
    ``{"isValid": bool, "errors": [str], "warnings": [str]}``.  Errors are
    arithmetic failures; warnings are unusual but legal states (contra
    balances, negative revenue lines).
"""

from __future__ import annotations

from decimal import Decimal

from cashbook_kernel.db.types import ZERO, within_tolerance
from cashbook_kernel.models.account import AccountType
from cashbook_modules.reporting.models import (
    BalanceSheetReport,
    CashFlowReport,
    GeneralLedgerReport,
    ProfitLossReport,
    StatementLineItem,
    TrialBalanceReport,
)
from cashbook_modules.reporting.statements import NET_INCOME_LINE


def _total(lines: tuple[StatementLineItem, ...]) -> Decimal:
    return sum((line.amount for line in lines), ZERO)


def _check_total(
    errors: list[str],
    label: str,
    lines: tuple[StatementLineItem, ...],
    reported: Decimal,
) -> None:
    expected = _total(lines)
    if not within_tolerance(expected, reported):
        errors.append(f"{label} does not equal its lines. Expected: {expected}, Actual: {reported}")


def _validate_profit_loss(report: ProfitLossReport, errors: list[str], warnings: list[str]) -> None:
    _check_total(errors, "Total revenue", report.revenue, report.total_revenue)
    _check_total(errors, "Total cost of goods sold", report.cost_of_goods_sold, report.total_cost_of_goods_sold)
    _check_total(errors, "Total operating expenses", report.operating_expenses, report.total_operating_expenses)
    _check_total(errors, "Total other income", report.other_income, report.total_other_income)
    _check_total(errors, "Total other expenses", report.other_expenses, report.total_other_expenses)

    gross_profit = report.total_revenue - report.total_cost_of_goods_sold
    if not within_tolerance(gross_profit, report.gross_profit):
        errors.append(
            f"Gross profit calculation error. Expected: {gross_profit}, Actual: {report.gross_profit}"
        )
    operating_income = report.gross_profit - report.total_operating_expenses
    if not within_tolerance(operating_income, report.operating_income):
        errors.append(
            f"Operating income calculation error. Expected: {operating_income}, "
            f"Actual: {report.operating_income}"
        )
    net_income = report.operating_income + report.total_other_income - report.total_other_expenses
    if not within_tolerance(net_income, report.net_income):
        errors.append(
            f"Net income calculation error. Expected: {net_income}, Actual: {report.net_income}"
        )

    for line in report.revenue:
        if line.amount <= ZERO:
            warnings.append(f"Revenue account {line.account_name} has non-positive amount: {line.amount}")


def _validate_balance_sheet(report: BalanceSheetReport, errors: list[str], warnings: list[str]) -> None:
    _check_total(errors, "Total assets", report.assets, report.total_assets)
    _check_total(errors, "Total liabilities", report.liabilities, report.total_liabilities)
    _check_total(errors, "Total equity", report.equity, report.total_equity)

    right = report.total_liabilities + report.total_equity
    if not within_tolerance(report.total_assets, right):
        errors.append(
            "Fundamental accounting equation not balanced. "
            f"Assets: {report.total_assets}, Liabilities + Equity: {right}, "
            f"Difference: {report.total_assets - right}"
        )
    for line in report.assets:
        if line.amount < ZERO:
            warnings.append(f"Asset account {line.account_name} has negative balance: {line.amount}")


_CONTRA_LABELS = {
    AccountType.ASSET.value: "credit",
    AccountType.EXPENSE.value: "credit",
    AccountType.LIABILITY.value: "debit",
    AccountType.EQUITY.value: "debit",
    AccountType.REVENUE.value: "debit",
}


def _validate_ledger(
    label: str,
    report: TrialBalanceReport | GeneralLedgerReport,
    errors: list[str],
    warnings: list[str],
) -> None:
    debits = sum((a.debits for a in report.accounts), ZERO)
    credits = sum((a.credits for a in report.accounts), ZERO)
    if not within_tolerance(debits, report.total_debits) or not within_tolerance(
        credits, report.total_credits
    ):
        errors.append(f"{label} totals do not equal its accounts")
    if not within_tolerance(report.total_debits, report.total_credits):
        errors.append(
            f"{label} not balanced. Debits: {report.total_debits}, "
            f"Credits: {report.total_credits}, "
            f"Difference: {report.total_debits - report.total_credits}"
        )
    for account in report.accounts:
        if account.balance < ZERO:
            side = _CONTRA_LABELS.get(account.account_type, "contra")
            warnings.append(
                f"{account.account_type.capitalize()} account {account.account_name} "
                f"has {side} balance: {account.balance}"
            )


def _validate_cash_flow(
    report: CashFlowReport,
    profit_loss: ProfitLossReport | None,
    errors: list[str],
    warnings: list[str],
) -> None:
    _check_total(errors, "Total operating activities", report.operating_activities, report.total_operating_activities)
    _check_total(errors, "Total investing activities", report.investing_activities, report.total_investing_activities)
    _check_total(errors, "Total financing activities", report.financing_activities, report.total_financing_activities)

    expected = (
        report.total_operating_activities
        + report.total_investing_activities
        + report.total_financing_activities
    )
    if not within_tolerance(expected, report.net_cash_flow):
        errors.append(
            f"Net cash flow calculation error. Expected: {expected}, Actual: {report.net_cash_flow}"
        )

    if profit_loss is None:
        return
    net_income_line = next(
        (line for line in report.operating_activities if line.account_name == NET_INCOME_LINE),
        None,
    )
    if net_income_line is None:
        if profit_loss.net_income != ZERO:
            warnings.append("Cash flow statement should start with Net Income in operating activities")
    elif not within_tolerance(net_income_line.amount, profit_loss.net_income):
        errors.append(
            f"Net Income in cash flow ({net_income_line.amount}) does not match "
            f"P&L Net Income ({profit_loss.net_income})"
        )


def validate_statements(
    profit_loss: ProfitLossReport | None = None,
    balance_sheet: BalanceSheetReport | None = None,
    trial_balance: TrialBalanceReport | None = None,
    cash_flow: CashFlowReport | None = None,
    general_ledger: GeneralLedgerReport | None = None,
) -> dict:
    """Validate whichever reports are given; see module docstring."""
    errors: list[str] = []
    warnings: list[str] = []

    if profit_loss is not None:
        _validate_profit_loss(profit_loss, errors, warnings)
    if balance_sheet is not None:
        _validate_balance_sheet(balance_sheet, errors, warnings)
    if trial_balance is not None:
        _validate_ledger("Trial balance", trial_balance, errors, warnings)
    if general_ledger is not None:
        _validate_ledger("General ledger", general_ledger, errors, warnings)
    if cash_flow is not None:
        _validate_cash_flow(cash_flow, profit_loss, errors, warnings)

    return {
        "isValid": not errors,
        "errors": errors,
        "warnings": warnings,
    }
