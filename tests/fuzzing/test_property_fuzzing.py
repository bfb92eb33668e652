"""
Hypothesis-based property tests.

Properties checked over generated inputs:
- Every derived entry balances, whatever the type, category and amount.
- Categorization is total and deterministic for any description text.
- A journal built only from derived entries always closes: the trial
  balance balances, the balance sheet satisfies A = L + E and the cash
  flow reconciles to the change in cash.
- The same holds end to end through the database.
"""

from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from cashbook_config import get_active_config
from cashbook_kernel.domain.aggregation import aggregate_lines, cumulative_balances
from cashbook_kernel.domain.categorization import auto_categorize
from cashbook_kernel.domain.dtos import AccountRef, TransactionLineRecord, TransactionType
from cashbook_kernel.domain.posting_rules import assert_balanced, derive_entry_lines
from cashbook_kernel.exceptions import ValidationError
from cashbook_modules.reporting.config import ReportingConfig
from cashbook_modules.reporting.models import ReportMetadata, ReportType
from cashbook_modules.reporting.statements import (
    build_balance_sheet,
    build_cash_flow,
    build_trial_balance,
    cash_change,
)

CONFIG = get_active_config()
REPORTING = ReportingConfig.from_dict(CONFIG.reporting)
REFS = {
    spec.account_name: AccountRef(spec.account_number, spec.account_name, spec.account_type, uuid4())
    for spec in CONFIG.chart
}
START = date(2024, 1, 1)


def _categories_for(txn_type: TransactionType) -> list[str]:
    return sorted(
        spec.account_name for spec in CONFIG.chart
        if spec.account_type == txn_type.account_type
    )


amounts = st.decimals(
    min_value=Decimal("0.01"),
    max_value=Decimal("999999999.99"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)


@st.composite
def transactions(draw):
    txn_type = draw(st.sampled_from(list(TransactionType)))
    category = draw(st.sampled_from(_categories_for(txn_type)))
    return txn_type, category, draw(amounts), draw(st.integers(min_value=0, max_value=364))


def _metadata(report_type: ReportType) -> ReportMetadata:
    return ReportMetadata(
        report_type=report_type,
        company_id=uuid4(),
        entity_name="Fuzz Co",
        generated_at="2024-01-01T00:00:00+00:00",
        from_date=START,
        to_date=date(2024, 12, 31),
    )


def _journal(txns) -> list[TransactionLineRecord]:
    records = []
    for txn_type, category, amount, offset in txns:
        entry_id = uuid4()
        day = START + timedelta(days=offset)
        for seq, line in enumerate(derive_entry_lines(txn_type, category, amount)):
            records.append(
                TransactionLineRecord(
                    journal_entry_id=entry_id,
                    entry_date=day,
                    entry_description="fuzz",
                    account=REFS[line.account_name],
                    debit_amount=line.debit_amount,
                    credit_amount=line.credit_amount,
                    line_seq=seq,
                )
            )
    return records


class TestPostingRuleProperties:
    @given(txn=transactions())
    def test_derived_entries_balance(self, txn):
        txn_type, category, amount, _ = txn
        lines = derive_entry_lines(txn_type, category, amount)
        assert_balanced(lines)
        assert sum(l.debit_amount for l in lines) == sum(l.credit_amount for l in lines) == amount

    @given(txn=transactions())
    def test_derived_accounts_exist_in_chart(self, txn):
        txn_type, category, amount, _ = txn
        for line in derive_entry_lines(txn_type, category, amount):
            assert line.account_name in REFS

    @given(
        amount=st.decimals(max_value=Decimal("0"), allow_nan=False, allow_infinity=False),
        txn_type=st.sampled_from(list(TransactionType)),
    )
    def test_non_positive_amounts_rejected(self, amount, txn_type):
        with pytest.raises(ValidationError):
            derive_entry_lines(txn_type, "Cash", amount)


class TestCategorizationProperties:
    @given(description=st.one_of(st.none(), st.text(max_size=200)), txn_type=st.sampled_from(list(TransactionType)))
    def test_total(self, description, txn_type):
        category = auto_categorize(description, txn_type, CONFIG.rule_table)
        assert category in CONFIG.canonical_categories(txn_type)

    @given(description=st.text(max_size=200), txn_type=st.sampled_from(list(TransactionType)))
    def test_deterministic_and_case_insensitive(self, description, txn_type):
        first = auto_categorize(description, txn_type, CONFIG.rule_table)
        assert auto_categorize(description, txn_type, CONFIG.rule_table) == first
        if description.upper().lower() == description.lower():
            assert auto_categorize(description.upper(), txn_type, CONFIG.rule_table) == first


class TestStatementClosure:
    @given(txns=st.lists(transactions(), max_size=30))
    def test_trial_balance_always_balances(self, txns):
        balances = cumulative_balances(_journal(txns), date(2024, 12, 31))
        report = build_trial_balance(balances, REPORTING, _metadata(ReportType.TRIAL_BALANCE))
        assert report.is_balanced
        assert report.total_debits == report.total_credits

    @given(txns=st.lists(transactions(), max_size=30))
    def test_balance_sheet_equation(self, txns):
        balances = cumulative_balances(_journal(txns), date(2024, 12, 31))
        report = build_balance_sheet(balances, REPORTING, _metadata(ReportType.BALANCE_SHEET))
        assert report.is_balanced
        assert report.total_assets == report.total_liabilities + report.total_equity

    @given(txns=st.lists(transactions(), max_size=30))
    def test_cash_flow_reconciles(self, txns):
        activity = aggregate_lines(_journal(txns), START, date(2024, 12, 31))
        report = build_cash_flow(activity, REPORTING, _metadata(ReportType.CASH_FLOW))
        assert report.net_cash_flow == cash_change(activity, REPORTING.policy)

    @given(txns=st.lists(transactions(), min_size=1, max_size=20), cut=st.integers(0, 364))
    def test_cumulative_is_monotone_in_lines(self, txns, cut):
        lines = _journal(txns)
        as_of = START + timedelta(days=cut)
        balances = cumulative_balances(lines, as_of)
        included = [line for line in lines if line.entry_date <= as_of]
        assert sum(t.total_debits for t in balances.values()) == sum(l.debit_amount for l in included)


@pytest.mark.slow
class TestDatabaseClosure:
    @settings(
        max_examples=15,
        deadline=None,
        suppress_health_check=[HealthCheck.function_scoped_fixture],
    )
    @given(txns=st.lists(transactions(), min_size=1, max_size=10))
    def test_posted_journal_closes(self, transaction_service, reporting_service, txns):
        company_id = uuid4()
        transaction_service.onboard_company(company_id)
        for txn_type, category, amount, offset in txns:
            transaction_service.poster.post(
                company_id, txn_type, category, amount, "fuzz", START + timedelta(days=offset),
            )
        tb = reporting_service.trial_balance(company_id, date(2024, 12, 31))
        bs = reporting_service.balance_sheet(company_id, date(2024, 12, 31))
        assert tb.is_balanced
        assert bs.is_balanced
