"""
Pure function unit tests for statements.py.

NO database, NO I/O. Tests every pure transformation with synthetic data.

The shared ledger below is built from these balanced entries:

    Cash 10000 / Owner's Capital 10000      owner investment
    Cash 5000 / Loans Payable 5000          bank loan
    Cash 5500 + AR 500 / Sales 6000         sales
    Rent 1700 / Cash 1700
    Equipment 2000 / Cash 2000
    Owner's Draws 1000 / Cash 1000
    Inventory 700 / Accounts Payable 700    bought on credit
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from cashbook_kernel.domain.aggregation import LedgerPosting
from cashbook_kernel.domain.dtos import AccountRef
from cashbook_kernel.domain.periods import quarterly_periods
from cashbook_kernel.models.account import AccountType
from cashbook_modules.reporting.config import (
    ClassificationPolicy,
    ReportingConfig,
    RetainedEarningsBasis,
)
from cashbook_modules.reporting.models import ReportType
from cashbook_modules.reporting.statements import (
    NET_INCOME_LINE,
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
from tests.reporting.conftest import (
    AP,
    AR,
    CAPITAL,
    CASH,
    COGS,
    DRAWS,
    EQUIPMENT,
    INTEREST_EXPENSE,
    INTEREST_INCOME,
    INVENTORY,
    LOANS,
    RENT,
    RETAINED,
    SALES,
    make_metadata,
    totals,
)

CHART = (CASH, AR, INVENTORY, EQUIPMENT, AP, LOANS, CAPITAL, DRAWS, RETAINED, SALES, RENT)


def _ledger():
    return totals(
        (CASH, "20500", "4700"),
        (AR, "500", "0"),
        (INVENTORY, "700", "0"),
        (EQUIPMENT, "2000", "0"),
        (AP, "0", "700"),
        (LOANS, "0", "5000"),
        (CAPITAL, "0", "10000"),
        (DRAWS, "1000", "0"),
        (SALES, "0", "6000"),
        (RENT, "1700", "0"),
    )


def _amounts(lines):
    return {line.account_name: line.amount for line in lines}


@pytest.fixture
def config() -> ReportingConfig:
    return ReportingConfig()


# =========================================================================
# Classification
# =========================================================================


class TestClassifyProfitLoss:
    @pytest.mark.parametrize(
        "ref, section",
        [
            (SALES, ProfitLossSection.REVENUE),
            (INTEREST_INCOME, ProfitLossSection.OTHER_INCOME),
            (COGS, ProfitLossSection.COST_OF_GOODS_SOLD),
            (RENT, ProfitLossSection.OPERATING_EXPENSES),
            (INTEREST_EXPENSE, ProfitLossSection.OTHER_EXPENSES),
            (CASH, None),
            (AP, None),
            (CAPITAL, None),
        ],
    )
    def test_sections(self, config, ref, section):
        assert classify_profit_loss(ref, config.policy) == section

    def test_net_income(self):
        assert compute_net_income(_ledger()) == Decimal("4300")

    def test_net_income_of_nothing(self):
        assert compute_net_income({}) == Decimal("0")


# =========================================================================
# Profit & Loss
# =========================================================================


class TestBuildProfitLoss:
    def _activity(self):
        return totals(
            (CASH, "5150", "3250"),
            (SALES, "0", "5000"),
            (INTEREST_INCOME, "0", "100"),
            (COGS, "2000", "0"),
            (RENT, "1200", "0"),
            (INTEREST_EXPENSE, "50", "0"),
        )

    def test_multi_step_totals(self, config):
        report = build_profit_loss(self._activity(), config, make_metadata())
        assert report.total_revenue == Decimal("5000")
        assert report.total_cost_of_goods_sold == Decimal("2000")
        assert report.total_operating_expenses == Decimal("1200")
        assert report.total_other_income == Decimal("100")
        assert report.total_other_expenses == Decimal("50")
        assert report.gross_profit == Decimal("3000")
        assert report.operating_income == Decimal("1800")
        assert report.net_income == Decimal("1850")

    def test_sections_hold_lines(self, config):
        report = build_profit_loss(self._activity(), config, make_metadata())
        assert _amounts(report.revenue) == {"Sales Revenue": Decimal("5000")}
        assert _amounts(report.cost_of_goods_sold) == {"Cost of Goods Sold": Decimal("2000")}
        assert _amounts(report.other_income) == {"Interest Income": Decimal("100")}
        assert _amounts(report.other_expenses) == {"Interest Expense": Decimal("50")}
        assert report.revenue[0].account_number == "4000"

    def test_balance_sheet_accounts_excluded(self, config):
        report = build_profit_loss(self._activity(), config, make_metadata())
        names = {
            line.account_name
            for section in (report.revenue, report.operating_expenses, report.cost_of_goods_sold)
            for line in section
        }
        assert "Cash" not in names

    def test_negative_activity_reported(self, config):
        report = build_profit_loss(totals((SALES, "300", "100")), config, make_metadata())
        assert _amounts(report.revenue) == {"Sales Revenue": Decimal("-200")}
        assert report.net_income == Decimal("-200")

    def test_zero_activity_omitted_unless_requested(self):
        activity = totals((RENT, "100", "100"))
        assert build_profit_loss(activity, ReportingConfig(), make_metadata()).operating_expenses == ()
        listed = build_profit_loss(
            activity, ReportingConfig(include_zero_balances=True), make_metadata(),
        )
        assert _amounts(listed.operating_expenses) == {"Rent": Decimal("0")}

    def test_empty_activity(self, config):
        report = build_profit_loss({}, config, make_metadata())
        assert report.revenue == ()
        assert report.net_income == Decimal("0")


# =========================================================================
# Balance Sheet
# =========================================================================


class TestBuildBalanceSheet:
    def _build(self, config, **kwargs):
        return build_balance_sheet(
            _ledger(), config, make_metadata(ReportType.BALANCE_SHEET), chart=CHART, **kwargs,
        )

    def test_sections_and_equation(self, config):
        report = self._build(config)
        assert _amounts(report.assets) == {
            "Cash": Decimal("15800"),
            "Accounts Receivable": Decimal("500"),
            "Inventory": Decimal("700"),
            "Equipment & Furniture": Decimal("2000"),
        }
        assert _amounts(report.liabilities) == {
            "Accounts Payable": Decimal("700"),
            "Loans Payable": Decimal("5000"),
        }
        assert report.total_assets == Decimal("19000")
        assert report.total_liabilities == Decimal("5700")
        assert report.total_equity == Decimal("13300")
        assert report.is_balanced
        assert report.discrepancy == Decimal("0")

    def test_net_income_rolled_into_retained_earnings(self, config):
        equity = self._build(config).equity
        assert [(line.account_number, line.account_name, line.amount) for line in equity] == [
            ("3000", "Owner's Capital", Decimal("10000")),
            ("3100", "Owner's Draws", Decimal("-1000")),
            ("3200", "Retained Earnings", Decimal("4300")),
        ]

    def test_existing_retained_earnings_merged(self, config):
        ledger = _ledger()
        ledger.update(totals((RETAINED, "0", "2000"), (CASH, "22500", "4700")))
        report = build_balance_sheet(ledger, config, make_metadata(), chart=CHART)
        assert _amounts(report.equity)["Retained Earnings"] == Decimal("6300")
        assert len([l for l in report.equity if l.account_name == "Retained Earnings"]) == 1
        assert report.is_balanced

    def test_open_items_added_and_imbalance_surfaced(self, config):
        report = self._build(config, open_receivables=Decimal("250"), open_payables=Decimal("100"))
        assert _amounts(report.assets)["Accounts Receivable"] == Decimal("750")
        assert _amounts(report.liabilities)["Accounts Payable"] == Decimal("800")
        assert report.is_balanced is False
        assert report.discrepancy == Decimal("150")
        # Nothing is padded to force the equation
        assert report.total_equity == Decimal("13300")

    def test_open_items_ignored_when_disabled(self):
        config = ReportingConfig(include_open_items=False)
        report = self._build(config, open_receivables=Decimal("250"), open_payables=Decimal("100"))
        assert report.total_assets == Decimal("19000")
        assert report.is_balanced

    def test_open_receivable_without_ledger_line(self, config):
        report = build_balance_sheet(
            totals((CASH, "100", "0"), (CAPITAL, "0", "100")),
            config,
            make_metadata(),
            open_receivables=Decimal("40"),
            chart=CHART,
        )
        ar = [l for l in report.assets if l.account_name == "Accounts Receivable"]
        assert ar[0].account_number == "1100"
        assert ar[0].amount == Decimal("40")

    def test_period_basis_uses_given_net_income(self):
        config = ReportingConfig(retained_earnings_basis=RetainedEarningsBasis.PERIOD)
        report = self._build(config, period_net_income=Decimal("1000"))
        assert _amounts(report.equity)["Retained Earnings"] == Decimal("1000")

    def test_period_basis_requires_net_income(self):
        config = ReportingConfig(retained_earnings_basis="period")
        with pytest.raises(ValueError):
            self._build(config)

    def test_empty_ledger(self, config):
        report = build_balance_sheet({}, config, make_metadata(), chart=CHART)
        assert report.assets == report.liabilities == report.equity == ()
        assert report.total_assets == Decimal("0")
        assert report.is_balanced


# =========================================================================
# Cash Flow
# =========================================================================


class TestBuildCashFlow:
    def test_indirect_method_sections(self, config):
        report = build_cash_flow(_ledger(), config, make_metadata(ReportType.CASH_FLOW))
        assert [(l.account_name, l.amount) for l in report.operating_activities] == [
            (NET_INCOME_LINE, Decimal("4300")),
            ("Change in Accounts Receivable", Decimal("-500")),
            ("Change in Inventory", Decimal("-700")),
            ("Change in Accounts Payable", Decimal("700")),
        ]
        assert _amounts(report.investing_activities) == {"Equipment & Furniture": Decimal("-2000")}
        assert _amounts(report.financing_activities) == {
            "Loans Payable": Decimal("5000"),
            "Owner's Capital": Decimal("10000"),
            "Owner's Draws": Decimal("-1000"),
        }

    def test_totals(self, config):
        report = build_cash_flow(_ledger(), config, make_metadata())
        assert report.total_operating_activities == Decimal("3800")
        assert report.total_investing_activities == Decimal("-2000")
        assert report.total_financing_activities == Decimal("14000")
        assert report.net_cash_flow == Decimal("15800")

    def test_net_cash_flow_equals_cash_change(self, config):
        report = build_cash_flow(_ledger(), config, make_metadata())
        assert report.net_cash_flow == cash_change(_ledger(), config.policy)

    def test_net_income_line_has_no_account_number(self, config):
        first = build_cash_flow(_ledger(), config, make_metadata()).operating_activities[0]
        assert first.account_name == NET_INCOME_LINE
        assert first.account_number == ""

    def test_fixed_and_long_term_ranges_from_policy(self):
        policy = ClassificationPolicy(fixed_assets=(1200, 2000), long_term_liabilities=(2000, 3000))
        report = build_cash_flow(_ledger(), ReportingConfig(policy=policy), make_metadata())
        assert _amounts(report.operating_activities) == {
            NET_INCOME_LINE: Decimal("4300"),
            "Change in Accounts Receivable": Decimal("-500"),
        }
        assert _amounts(report.investing_activities) == {
            "Inventory": Decimal("-700"),
            "Equipment & Furniture": Decimal("-2000"),
        }
        assert _amounts(report.financing_activities)["Accounts Payable"] == Decimal("700")
        assert report.net_cash_flow == Decimal("15800")

    def test_asset_outside_every_range_is_investing(self, config):
        deposits = AccountRef("0500", "Security Deposits", AccountType.ASSET, uuid4())
        activity = totals((deposits, "300", "0"), (CASH, "0", "300"))
        report = build_cash_flow(activity, config, make_metadata())
        assert _amounts(report.investing_activities) == {"Security Deposits": Decimal("-300")}
        assert report.net_cash_flow == cash_change(activity, config.policy) == Decimal("-300")

    def test_no_activity(self, config):
        report = build_cash_flow({}, config, make_metadata())
        assert report.operating_activities == ()
        assert report.net_cash_flow == Decimal("0")


# =========================================================================
# Trial Balance / General Ledger
# =========================================================================


class TestBuildTrialBalance:
    def test_balanced(self, config):
        report = build_trial_balance(_ledger(), config, make_metadata(ReportType.TRIAL_BALANCE))
        assert report.total_debits == report.total_credits == Decimal("26400")
        assert report.is_balanced
        assert [a.account_number for a in report.accounts] == sorted(
            a.account_number for a in report.accounts
        )

    def test_row_values(self, config):
        report = build_trial_balance(_ledger(), config, make_metadata())
        draws = next(a for a in report.accounts if a.account_name == "Owner's Draws")
        assert draws.account_type == "equity"
        assert draws.debits == Decimal("1000")
        assert draws.credits == Decimal("0")
        assert draws.balance == Decimal("-1000")

    def test_active_accounts_without_activity_listed(self, config):
        chart = CHART + (COGS,)
        report = build_trial_balance(_ledger(), config, make_metadata(), chart=chart)
        assert len(report.accounts) == len(chart)
        cogs = next(a for a in report.accounts if a.account_name == "Cost of Goods Sold")
        assert cogs.debits == cogs.credits == cogs.balance == Decimal("0")
        assert report.total_debits == Decimal("26400")

    def test_include_zero_balances_does_not_change_the_account_set(self):
        chart = CHART + (COGS,)
        default = build_trial_balance(_ledger(), ReportingConfig(), make_metadata(), chart=chart)
        full = build_trial_balance(
            _ledger(), ReportingConfig(include_zero_balances=True), make_metadata(), chart=chart,
        )
        assert default.accounts == full.accounts

    def test_inactive_account_with_activity_still_listed(self, config):
        # COGS is not in the active chart but has balances
        ledger = _ledger()
        ledger.update(totals((COGS, "10", "0"), (CASH, "20500", "4710")))
        report = build_trial_balance(ledger, config, make_metadata(), chart=CHART)
        assert "Cost of Goods Sold" in {a.account_name for a in report.accounts}
        assert report.is_balanced

    def test_imbalance_flagged(self, config):
        report = build_trial_balance(totals((CASH, "100", "0")), config, make_metadata())
        assert report.is_balanced is False

    def test_empty(self, config):
        report = build_trial_balance({}, config, make_metadata())
        assert report.accounts == ()
        assert report.total_debits == Decimal("0")
        assert report.is_balanced


class TestBuildGeneralLedger:
    def test_accounts_carry_postings(self, config):
        posting = LedgerPosting(
            journal_entry_id=CASH.account_id,
            entry_date=date(2024, 1, 1),
            description="Owner investment",
            debit_amount=Decimal("10000"),
            credit_amount=Decimal("0"),
            running_balance=Decimal("10000"),
        )
        report = build_general_ledger(
            _ledger(), {CASH: (posting,)}, config, make_metadata(ReportType.GENERAL_LEDGER),
        )
        cash = next(a for a in report.accounts if a.account_name == "Cash")
        assert cash.lines == (posting,)
        assert cash.balance == Decimal("15800")
        rent = next(a for a in report.accounts if a.account_name == "Rent")
        assert rent.lines == ()
        assert report.is_balanced
        assert report.total_debits == Decimal("26400")

    def test_unposted_chart_account_listed(self, config):
        report = build_general_ledger(
            _ledger(), {}, config, make_metadata(), chart=CHART + (COGS,),
        )
        cogs = next(a for a in report.accounts if a.account_name == "Cost of Goods Sold")
        assert cogs.lines == ()
        assert cogs.balance == Decimal("0")


# =========================================================================
# Columnar Profit & Loss
# =========================================================================


def _columnar(config):
    zero = Decimal("0")
    bucketed = {
        SALES: {"q1": Decimal("100"), "q2": Decimal("200"), "q3": zero, "q4": zero},
        COGS: {"q1": zero, "q2": zero, "q3": zero, "q4": zero},
        RENT: {"q1": Decimal("50"), "q2": Decimal("50"), "q3": zero, "q4": Decimal("25")},
        INTEREST_INCOME: {"q1": zero, "q2": zero, "q3": zero, "q4": Decimal("10")},
    }
    return build_columnar_profit_loss(
        bucketed, quarterly_periods(2024), config,
        make_metadata(ReportType.COLUMNAR_PROFIT_LOSS),
    )


class TestBuildColumnarProfitLoss:
    def test_line_items(self, config):
        report = _columnar(config)
        assert [p.key for p in report.periods] == ["q1", "q2", "q3", "q4"]
        sales = report.revenue[0]
        assert sales.period_amounts == {
            "q1": Decimal("100"), "q2": Decimal("200"), "q3": Decimal("0"), "q4": Decimal("0"),
        }
        assert sales.total == Decimal("300")
        assert report.cost_of_goods_sold == ()

    def test_period_totals(self, config):
        totals_ = _columnar(config).period_totals
        assert totals_.total_revenue["q2"] == Decimal("200")
        assert totals_.total_cogs["q1"] == Decimal("0")
        assert totals_.gross_profit["q1"] == Decimal("100")
        assert totals_.operating_income["q4"] == Decimal("-25")
        assert totals_.net_income == {
            "q1": Decimal("50"), "q2": Decimal("150"), "q3": Decimal("0"), "q4": Decimal("-15"),
        }

    def test_grand_totals_equal_sum_of_periods(self, config):
        report = _columnar(config)
        assert report.grand_totals.total_revenue == Decimal("300")
        assert report.grand_totals.total_operating_expenses == Decimal("125")
        assert report.grand_totals.total_other_income == Decimal("10")
        assert report.grand_totals.net_income == sum(report.period_totals.net_income.values())


# =========================================================================
# Rendering
# =========================================================================


class TestRenderToDict:
    def test_profit_loss_contract_keys(self, config):
        report = build_profit_loss(totals((SALES, "0", "2500"), (RENT, "1200", "0")), config, make_metadata())
        rendered = render_to_dict(report)
        assert list(rendered) == [
            "metadata",
            "revenue",
            "costOfGoodsSold",
            "operatingExpenses",
            "otherIncome",
            "otherExpenses",
            "totalRevenue",
            "totalCostOfGoodsSold",
            "totalOperatingExpenses",
            "totalOtherIncome",
            "totalOtherExpenses",
            "grossProfit",
            "operatingIncome",
            "netIncome",
        ]
        assert rendered["revenue"] == [
            {"accountNumber": "4000", "accountName": "Sales Revenue", "amount": "2500.00"},
        ]
        assert rendered["netIncome"] == "1300.00"

    def test_metadata_rendering(self, config):
        rendered = render_to_dict(build_profit_loss({}, config, make_metadata()))["metadata"]
        assert rendered["reportType"] == "profit-loss"
        assert rendered["fromDate"] == "2024-01-01"
        assert rendered["year"] is None
        assert isinstance(rendered["companyId"], str)

    def test_balance_sheet_flags(self, config):
        rendered = render_to_dict(build_balance_sheet(_ledger(), config, make_metadata(), chart=CHART))
        assert rendered["isBalanced"] is True
        assert rendered["discrepancy"] == "0.00"
        assert rendered["totalAssets"] == "19000.00"

    def test_columnar_wire_names(self, config):
        report = _columnar(config)
        rendered = render_to_dict(report)
        assert "totalCOGS" in rendered["periodTotals"]
        assert "totalCOGS" in rendered["grandTotals"]
        assert rendered["revenue"][0]["periodAmounts"]["q1"] == "100.00"
        assert rendered["periods"][0] == {
            "key": "q1", "label": "Q1", "fromDate": "2024-01-01", "toDate": "2024-03-31",
        }

    def test_precision(self, config):
        report = build_profit_loss(totals((SALES, "0", "10.005")), config, make_metadata())
        assert render_to_dict(report, precision=2)["totalRevenue"] == "10.01"
        assert render_to_dict(report, precision=0)["totalRevenue"] == "10"
