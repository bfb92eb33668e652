"""
Ledger aggregation -- pure per-account totals over transaction line records.

Responsibility:
    Folds TransactionLineRecords into per-account AccountTotals, either for
    a window (period activity) or up to a date (cumulative balance), and
    buckets activity into columnar periods.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  LedgerSelector
    computes the same totals in SQL; this module is the in-memory path
    used for period bucketing, general ledger detail and verification.

Invariants enforced:
    - Period activity never includes lines dated before from_date.
    - Cumulative balance has no lower bound.
    - Signed amounts follow the account type convention
      (AccountTotals.natural_balance); revenue activity is credit - debit,
      expense activity is debit - credit.
    - A line whose date falls in no period is dropped from bucketing.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from cashbook_kernel.domain.dtos import AccountRef, AccountTotals, TransactionLineRecord
from cashbook_kernel.domain.periods import PeriodDefinition, find_period_for_date


def _in_window(day: date, from_date: date | None, to_date: date | None) -> bool:
    if from_date is not None and day < from_date:
        return False
    if to_date is not None and day > to_date:
        return False
    return True


def aggregate_lines(
    lines: Iterable[TransactionLineRecord],
    from_date: date | None = None,
    to_date: date | None = None,
) -> dict[AccountRef, AccountTotals]:
    """
    Raw debit/credit totals per account for lines within the window.

    Both bounds are inclusive; None means unbounded.
    """
    debits: dict[AccountRef, Decimal] = {}
    credits: dict[AccountRef, Decimal] = {}
    for line in lines:
        if not _in_window(line.entry_date, from_date, to_date):
            continue
        debits[line.account] = debits.get(line.account, Decimal("0")) + line.debit_amount
        credits[line.account] = credits.get(line.account, Decimal("0")) + line.credit_amount
    return {
        ref: AccountTotals(
            account=ref,
            total_debits=debits[ref],
            total_credits=credits[ref],
        )
        for ref in sorted(debits)
    }


def period_activity(
    lines: Iterable[TransactionLineRecord],
    from_date: date,
    to_date: date,
) -> dict[AccountRef, AccountTotals]:
    """Totals for entries dated from_date..to_date inclusive."""
    return aggregate_lines(lines, from_date=from_date, to_date=to_date)


def cumulative_balances(
    lines: Iterable[TransactionLineRecord],
    as_of: date,
) -> dict[AccountRef, AccountTotals]:
    """Totals for every entry dated on or before ``as_of``."""
    return aggregate_lines(lines, to_date=as_of)


def signed_amounts(totals: Mapping[AccountRef, AccountTotals]) -> dict[AccountRef, Decimal]:
    """Natural-sign amount per account."""
    return {ref: t.natural_balance for ref, t in totals.items()}


def bucket_activity(
    lines: Iterable[TransactionLineRecord],
    periods: Sequence[PeriodDefinition],
) -> dict[AccountRef, dict[str, Decimal]]:
    """
    Signed activity per account per period key.

    Every returned account map has an entry for every period key (zero
    when there was no activity).  Lines outside all periods are dropped.
    """
    per_period: dict[str, list[TransactionLineRecord]] = {p.key: [] for p in periods}
    for line in lines:
        key = find_period_for_date(line.entry_date, periods)
        if key is None:
            continue
        per_period[key].append(line)

    result: dict[AccountRef, dict[str, Decimal]] = {}
    for key, period_lines in per_period.items():
        for ref, totals in aggregate_lines(period_lines).items():
            amounts = result.setdefault(
                ref, {p.key: Decimal("0") for p in periods},
            )
            amounts[key] = totals.natural_balance
    return dict(sorted(result.items()))


@dataclass(frozen=True)
class LedgerPosting:
    """One general-ledger detail row with the account's running balance."""

    journal_entry_id: UUID
    entry_date: date
    description: str
    debit_amount: Decimal
    credit_amount: Decimal
    running_balance: Decimal


def running_balances(
    lines: Iterable[TransactionLineRecord],
    as_of: date,
) -> dict[AccountRef, tuple[LedgerPosting, ...]]:
    """
    Date-ordered postings per account up to ``as_of``, each carrying the
    natural-sign running balance after that posting.
    """
    by_account: dict[AccountRef, list[TransactionLineRecord]] = {}
    for line in lines:
        if line.entry_date > as_of:
            continue
        by_account.setdefault(line.account, []).append(line)

    result: dict[AccountRef, tuple[LedgerPosting, ...]] = {}
    for ref in sorted(by_account):
        # Stable sort keeps the selector's posting order within a day
        ordered = sorted(by_account[ref], key=lambda r: r.entry_date)
        balance = Decimal("0")
        postings: list[LedgerPosting] = []
        for line in ordered:
            step = AccountTotals(ref, line.debit_amount, line.credit_amount)
            balance += step.natural_balance
            postings.append(
                LedgerPosting(
                    journal_entry_id=line.journal_entry_id,
                    entry_date=line.entry_date,
                    description=line.line_description or line.entry_description,
                    debit_amount=line.debit_amount,
                    credit_amount=line.credit_amount,
                    running_balance=balance,
                )
            )
        result[ref] = tuple(postings)
    return result
