"""
Pure domain layer.

Data transfer objects and ledger rules with NO dependencies on:
- Database sessions
- Time/clock (except the injectable Clock interface)
- I/O

All domain objects are immutable and deterministic.
"""

from cashbook_kernel.domain.aggregation import (
    LedgerPosting,
    aggregate_lines,
    bucket_activity,
    cumulative_balances,
    period_activity,
    running_balances,
    signed_amounts,
)
from cashbook_kernel.domain.categorization import (
    CategoryRule,
    CategoryRuleTable,
    TypeRules,
    auto_categorize,
)
from cashbook_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from cashbook_kernel.domain.dtos import (
    AccountRef,
    AccountSpec,
    AccountTotals,
    LineSide,
    LineSpec,
    TransactionLineRecord,
    TransactionType,
)
from cashbook_kernel.domain.periods import (
    ColumnMode,
    PeriodDefinition,
    find_period_for_date,
    monthly_periods,
    periods_for,
    quarterly_periods,
)
from cashbook_kernel.domain.posting_rules import assert_balanced, derive_entry_lines

__all__ = [
    "AccountRef",
    "AccountSpec",
    "AccountTotals",
    "CategoryRule",
    "CategoryRuleTable",
    "Clock",
    "ColumnMode",
    "DeterministicClock",
    "LedgerPosting",
    "LineSide",
    "LineSpec",
    "PeriodDefinition",
    "SystemClock",
    "TransactionLineRecord",
    "TransactionType",
    "TypeRules",
    "aggregate_lines",
    "assert_balanced",
    "auto_categorize",
    "bucket_activity",
    "cumulative_balances",
    "derive_entry_lines",
    "find_period_for_date",
    "monthly_periods",
    "period_activity",
    "periods_for",
    "quarterly_periods",
    "running_balances",
    "signed_amounts",
]
