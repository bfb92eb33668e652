"""
DoubleEntryPoster -- the only writer of journal entries.

Responsibility:
    Validates a simplified transaction (type, category, amount, description,
    date), derives the balanced line pair through the posting rules, resolves
    every account through ChartOfAccountsRegistry and persists the journal
    entry with its transaction entries in one flush.  Also posts validated
    multi-line entries and reverses entries.

Architecture position:
    Kernel > Services -- imperative shell.  Pure rule derivation lives in
    domain/posting_rules.py; this module adds I/O.

Invariants enforced:
    - Every entry balances within BALANCE_TOLERANCE before anything is
      added to the session (assert_balanced).
    - Every account is resolved before any ORM object is created, so a
      failed resolution leaves nothing in the session.
    - A simplified post never produces more than two lines.
    - is_reversed flips at most once.

Failure modes:
    - ValidationError: non-positive amount, blank description or category,
      missing date, unknown type.
    - UnresolvedAccountError / AccountInactiveError: a line names an account
      that is missing or deactivated.
    - ImbalancedEntryError: a supplied line set does not balance.
    - JournalEntryNotFoundError / EntryAlreadyReversedError: reversal.

Audit relevance:
    Every post and reversal logs a structured event carrying the entry id
    and totals.  Posting is not idempotent: a repeated call is a new entry.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from decimal import Decimal, InvalidOperation
from uuid import UUID

from sqlalchemy.orm import Session

from cashbook_kernel.db.base import SYSTEM_ACTOR_ID
from cashbook_kernel.db.types import to_money
from cashbook_kernel.domain.dtos import LineSpec, TransactionType
from cashbook_kernel.domain.posting_rules import (
    CASH_ACCOUNT,
    assert_balanced,
    derive_entry_lines,
)
from cashbook_kernel.exceptions import (
    EntryAlreadyReversedError,
    JournalEntryNotFoundError,
    ValidationError,
)
from cashbook_kernel.logging_config import LogContext, get_logger
from cashbook_kernel.models.account import Account
from cashbook_kernel.models.journal import EntrySource, JournalEntry, TransactionEntry
from cashbook_kernel.services.base import BaseService
from cashbook_kernel.services.chart_of_accounts import ChartOfAccountsRegistry

logger = get_logger("services.journal_poster")


def _coerce_amount(amount: Decimal | int | str) -> Decimal:
    try:
        return to_money(amount)
    except (TypeError, InvalidOperation):
        raise ValidationError("amount", "must be a decimal amount", amount) from None


class DoubleEntryPoster(BaseService):
    """
    Writes balanced journal entries.

    Contract:
        post() and post_journal_entry() either flush a complete balanced
        entry or raise before adding anything to the session.

    Guarantees:
        - Lines are written in the order given, with line_seq 0..n-1.
        - Returned JournalEntry has its id and lines populated.

    Non-goals:
        - Does NOT commit; the caller owns the transaction.
        - Does NOT deduplicate repeated calls.
    """

    def __init__(
        self,
        session: Session,
        registry: ChartOfAccountsRegistry | None = None,
    ):
        super().__init__(session)
        self._registry = registry or ChartOfAccountsRegistry(session)

    def post(
        self,
        company_id: UUID,
        transaction_type: TransactionType | str,
        category: str,
        amount: Decimal | int | str,
        description: str,
        entry_date: date,
        source: EntrySource | str = EntrySource.MANUAL,
        corresponding_account: str = CASH_ACCOUNT,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> JournalEntry:
        """
        Post a simplified transaction as a two-line journal entry.

        Preconditions: amount > 0; description, category and date present.
        Postconditions: One JournalEntry and two TransactionEntries flushed.

        Raises:
            ValidationError: Missing field, bad amount or unknown type.
            UnresolvedAccountError: Category or corresponding account not
                in the chart.
        """
        if not description or not description.strip():
            raise ValidationError("description", "is required")
        if entry_date is None:
            raise ValidationError("date", "is required")
        money = _coerce_amount(amount)

        debit, credit = derive_entry_lines(
            transaction_type,
            category,
            money,
            memo=description,
            corresponding_account=corresponding_account,
        )
        return self._write(
            company_id=company_id,
            entry_date=entry_date,
            description=description,
            lines=(debit, credit),
            source=source,
            actor_id=actor_id,
            transaction_type=TransactionType(transaction_type).value,
        )

    def post_journal_entry(
        self,
        company_id: UUID,
        entry_date: date,
        description: str,
        lines: Sequence[LineSpec],
        source: EntrySource | str = EntrySource.MANUAL,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> JournalEntry:
        """
        Post a caller-built multi-line entry.

        Raises:
            ValidationError: Blank description or missing date.
            ImbalancedEntryError: Lines do not balance or one side is empty.
            UnresolvedAccountError: A line names an unknown account.
        """
        if not description or not description.strip():
            raise ValidationError("description", "is required")
        if entry_date is None:
            raise ValidationError("date", "is required")
        return self._write(
            company_id=company_id,
            entry_date=entry_date,
            description=description,
            lines=tuple(lines),
            source=source,
            actor_id=actor_id,
        )

    def reverse(
        self,
        journal_entry_id: UUID,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> JournalEntry:
        """
        Mark an entry reversed.  It stays in the journal and drops out of
        every aggregation.

        Raises:
            JournalEntryNotFoundError: No entry with this id.
            EntryAlreadyReversedError: The entry is already reversed.
        """
        entry = self.session.get(JournalEntry, journal_entry_id)
        if entry is None:
            raise JournalEntryNotFoundError(str(journal_entry_id))
        if entry.is_reversed:
            raise EntryAlreadyReversedError(str(journal_entry_id))

        entry.is_reversed = True
        entry.updated_by_id = actor_id
        self.session.flush()

        logger.info(
            "journal_entry_reversed",
            extra={
                "entry_id": str(entry.id),
                "company_id": str(entry.company_id),
                "entry_date": entry.entry_date.isoformat(),
                "actor_id": str(actor_id),
            },
        )
        return entry

    # =========================================================================
    # Internal
    # =========================================================================

    def _write(
        self,
        company_id: UUID,
        entry_date: date,
        description: str,
        lines: tuple[LineSpec, ...],
        source: EntrySource | str,
        actor_id: UUID,
        transaction_type: str | None = None,
    ) -> JournalEntry:
        assert_balanced(lines, description)

        accounts: list[Account] = [
            self._registry.resolve_account(company_id, line.account_name)
            for line in lines
        ]

        entry = JournalEntry(
            company_id=company_id,
            entry_date=entry_date,
            description=description.strip(),
            source=EntrySource(source).value,
            is_reversed=False,
            created_by_id=actor_id,
        )
        for seq, (line, account) in enumerate(zip(lines, accounts)):
            entry.lines.append(
                TransactionEntry(
                    account_id=account.id,
                    debit_amount=line.debit_amount,
                    credit_amount=line.credit_amount,
                    description=line.memo,
                    line_seq=seq,
                    created_by_id=actor_id,
                )
            )
        self.session.add(entry)
        self.session.flush()

        with LogContext.bind(entry_id=str(entry.id)):
            logger.info(
                "journal_entry_posted",
                extra={
                    "company_id": str(company_id),
                    "entry_date": entry_date.isoformat(),
                    "transaction_type": transaction_type,
                    "line_count": len(lines),
                    "total_debits": str(entry.total_debits),
                    "total_credits": str(entry.total_credits),
                    "accounts": [a.account_name for a in accounts],
                },
            )
        return entry
