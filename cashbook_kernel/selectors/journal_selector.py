"""
Module: cashbook_kernel.selectors.journal_selector
Responsibility: Read journal entries and their transaction entries as
    concrete TransactionLineRecords, excluding reversed entries.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Reversed entries (is_reversed=True) never appear in line queries.
    - Results are ordered by entry date, then creation time, then line_seq.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import select

from cashbook_kernel.domain.dtos import AccountRef, TransactionLineRecord
from cashbook_kernel.logging_config import get_logger
from cashbook_kernel.models.account import Account
from cashbook_kernel.models.journal import JournalEntry, TransactionEntry
from cashbook_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.journal")


class JournalSelector(BaseSelector):
    """Read-side queries over journal entries."""

    def get_entry(self, journal_entry_id: UUID) -> JournalEntry | None:
        return self.session.get(JournalEntry, journal_entry_id)

    def list_entries(
        self,
        company_id: UUID,
        from_date: date | None = None,
        to_date: date | None = None,
        include_reversed: bool = False,
    ) -> list[JournalEntry]:
        """Journal entries for a company in date order."""
        query = (
            select(JournalEntry)
            .where(JournalEntry.company_id == company_id)
            .order_by(JournalEntry.entry_date, JournalEntry.created_at)
        )
        if from_date is not None:
            query = query.where(JournalEntry.entry_date >= from_date)
        if to_date is not None:
            query = query.where(JournalEntry.entry_date <= to_date)
        if not include_reversed:
            query = query.where(JournalEntry.is_reversed.is_(False))
        return list(self.session.scalars(query).all())

    def lines(
        self,
        company_id: UUID,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[TransactionLineRecord]:
        """
        Non-reversed transaction lines with resolved accounts.

        Both date bounds are inclusive; None means unbounded.
        """
        query = (
            select(
                JournalEntry.id.label("journal_entry_id"),
                JournalEntry.entry_date,
                JournalEntry.description.label("entry_description"),
                TransactionEntry.debit_amount,
                TransactionEntry.credit_amount,
                TransactionEntry.description.label("line_description"),
                TransactionEntry.line_seq,
                Account.id.label("account_id"),
                Account.account_number,
                Account.account_name,
                Account.account_type,
            )
            .join(TransactionEntry, TransactionEntry.journal_entry_id == JournalEntry.id)
            .join(Account, TransactionEntry.account_id == Account.id)
            .where(JournalEntry.company_id == company_id)
            .where(JournalEntry.is_reversed.is_(False))
            .order_by(
                JournalEntry.entry_date,
                JournalEntry.created_at,
                JournalEntry.id,
                TransactionEntry.line_seq,
            )
        )
        if from_date is not None:
            query = query.where(JournalEntry.entry_date >= from_date)
        if to_date is not None:
            query = query.where(JournalEntry.entry_date <= to_date)

        records = [
            TransactionLineRecord(
                journal_entry_id=row.journal_entry_id,
                entry_date=row.entry_date,
                entry_description=row.entry_description,
                account=AccountRef(
                    account_number=row.account_number,
                    account_name=row.account_name,
                    account_type=row.account_type,
                    account_id=row.account_id,
                ),
                debit_amount=row.debit_amount,
                credit_amount=row.credit_amount,
                line_description=row.line_description,
                line_seq=row.line_seq,
            )
            for row in self.session.execute(query).all()
        ]
        logger.debug(
            "journal_lines_loaded",
            extra={
                "company_id": str(company_id),
                "from_date": from_date,
                "to_date": to_date,
                "line_count": len(records),
            },
        )
        return records
