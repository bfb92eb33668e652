"""
Module: cashbook_kernel.selectors.ledger_selector
Responsibility: SQL aggregation of transaction entries into per-account
    debit/credit totals -- the database half of the Ledger Aggregator.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Period activity: from_date <= entry_date <= to_date.
    - Cumulative balance: entry_date <= as_of, no lower bound.
    - Reversed entries are excluded from both.
    - Totals are computed at query time; no balances are stored.

Audit relevance:
    Every statement derives from these queries (or the equivalent pure
    fold in domain/aggregation.py over JournalSelector.lines()).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select

from cashbook_kernel.domain.dtos import AccountRef, AccountTotals
from cashbook_kernel.logging_config import get_logger
from cashbook_kernel.models.account import Account
from cashbook_kernel.models.journal import JournalEntry, TransactionEntry
from cashbook_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.ledger")


class LedgerSelector(BaseSelector):
    """Per-account totals over a company's non-reversed journal entries."""

    def account_totals(
        self,
        company_id: UUID,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> dict[AccountRef, AccountTotals]:
        """
        Raw debit and credit totals per account.

        Returns one entry per account with at least one line in the window,
        ordered by account number.
        """
        debit_sum = func.sum(TransactionEntry.debit_amount).label("debit_total")
        credit_sum = func.sum(TransactionEntry.credit_amount).label("credit_total")

        query = (
            select(
                Account.id,
                Account.account_number,
                Account.account_name,
                Account.account_type,
                debit_sum,
                credit_sum,
            )
            .select_from(TransactionEntry)
            .join(JournalEntry, TransactionEntry.journal_entry_id == JournalEntry.id)
            .join(Account, TransactionEntry.account_id == Account.id)
            .where(JournalEntry.company_id == company_id)
            .where(JournalEntry.is_reversed.is_(False))
            .group_by(
                Account.id,
                Account.account_number,
                Account.account_name,
                Account.account_type,
            )
            .order_by(Account.account_number, Account.account_name)
        )
        if from_date is not None:
            query = query.where(JournalEntry.entry_date >= from_date)
        if to_date is not None:
            query = query.where(JournalEntry.entry_date <= to_date)

        totals: dict[AccountRef, AccountTotals] = {}
        for row in self.session.execute(query).all():
            ref = AccountRef(
                account_number=row.account_number,
                account_name=row.account_name,
                account_type=row.account_type,
                account_id=row.id,
            )
            totals[ref] = AccountTotals(
                account=ref,
                total_debits=Decimal(str(row.debit_total or 0)),
                total_credits=Decimal(str(row.credit_total or 0)),
            )
        return totals

    def period_activity(
        self,
        company_id: UUID,
        from_date: date,
        to_date: date,
    ) -> dict[AccountRef, AccountTotals]:
        """Totals for entries dated from_date..to_date inclusive."""
        totals = self.account_totals(company_id, from_date=from_date, to_date=to_date)
        logger.debug(
            "period_activity_computed",
            extra={
                "company_id": str(company_id),
                "from_date": from_date,
                "to_date": to_date,
                "account_count": len(totals),
            },
        )
        return totals

    def cumulative_balances(
        self,
        company_id: UUID,
        as_of: date,
    ) -> dict[AccountRef, AccountTotals]:
        """Totals for every entry dated on or before ``as_of``."""
        totals = self.account_totals(company_id, to_date=as_of)
        logger.debug(
            "cumulative_balances_computed",
            extra={
                "company_id": str(company_id),
                "as_of": as_of,
                "account_count": len(totals),
            },
        )
        return totals
