"""
Module: cashbook_kernel.models.journal
Responsibility: ORM persistence for journal entries and their transaction
    entries (debit/credit lines) -- the single source of financial truth.
Architecture position: Kernel > Models.  May import from db/ only.
    MUST NOT import from services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - Balance: sum(debit_amount) == sum(credit_amount) per entry, checked by
      DoubleEntryPoster before the flush; is_balanced is the read-side check.
    - Line shape: each line has exactly one non-zero side, both >= 0
      (CHECK constraint plus poster validation).
    - Immutability: lines are never updated or deleted; an entry may only
      flip is_reversed False -> True (db/immutability.py).

Audit relevance:
    A reversed entry stays in the table with is_reversed=True so the
    history is preserved; every aggregation excludes it.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cashbook_kernel.db.base import TrackedBase, UUIDString
from cashbook_kernel.db.types import BALANCE_TOLERANCE

if TYPE_CHECKING:
    from cashbook_kernel.models.account import Account


class EntrySource(str, Enum):
    """Where a journal entry came from."""

    MANUAL = "manual"
    IMPORT = "import"
    SYSTEM = "system"


class JournalEntry(TrackedBase):
    """
    A dated, balanced group of ledger postings for one economic event.

    Contract:
        Created only by DoubleEntryPoster.  Never edited in place;
        corrections are new entries or reversals.

    Guarantees:
        - lines are ordered by line_seq.
        - is_reversed transitions at most once, False -> True.
    """

    __tablename__ = "journal_entries"

    __table_args__ = (
        Index("idx_journal_company_date", "company_id", "entry_date"),
        Index("idx_journal_reversed", "is_reversed"),
    )

    company_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    entry_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    description: Mapped[str] = mapped_column(
        String(1000),
        nullable=False,
    )

    source: Mapped[EntrySource] = mapped_column(
        String(20),
        nullable=False,
        default=EntrySource.MANUAL.value,
    )

    is_reversed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    lines: Mapped[list["TransactionEntry"]] = relationship(
        back_populates="entry",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="TransactionEntry.line_seq",
    )

    def __repr__(self) -> str:
        return f"<JournalEntry {self.id} {self.entry_date} reversed={self.is_reversed}>"

    @property
    def total_debits(self) -> Decimal:
        """Sum of all debit amounts."""
        return sum((line.debit_amount for line in self.lines), Decimal("0"))

    @property
    def total_credits(self) -> Decimal:
        """Sum of all credit amounts."""
        return sum((line.credit_amount for line in self.lines), Decimal("0"))

    @property
    def is_balanced(self) -> bool:
        """Read-side balance check, within BALANCE_TOLERANCE."""
        return abs(self.total_debits - self.total_credits) < BALANCE_TOLERANCE


class TransactionEntry(TrackedBase):
    """
    One debit or credit line within a journal entry.

    Contract:
        Exactly one of debit_amount / credit_amount is non-zero; the other
        is zero.  Neither is negative.
    """

    __tablename__ = "transaction_entries"

    __table_args__ = (
        Index("idx_txn_entry_journal", "journal_entry_id"),
        Index("idx_txn_entry_account", "account_id"),
        CheckConstraint(
            "debit_amount >= 0 AND credit_amount >= 0",
            name="ck_txn_entry_non_negative",
        ),
    )

    journal_entry_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("journal_entries.id"),
        nullable=False,
    )

    account_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("accounts.id"),
        nullable=False,
    )

    debit_amount: Mapped[Decimal] = mapped_column(
        nullable=False,
        default=Decimal("0"),
    )

    credit_amount: Mapped[Decimal] = mapped_column(
        nullable=False,
        default=Decimal("0"),
    )

    description: Mapped[str | None] = mapped_column(
        String(1000),
        nullable=True,
    )

    # Deterministic ordering within the entry
    line_seq: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    entry: Mapped["JournalEntry"] = relationship(
        back_populates="lines",
    )

    account: Mapped["Account"] = relationship(
        back_populates="transaction_entries",
        lazy="joined",
    )

    def __repr__(self) -> str:
        return (
            f"<TransactionEntry {self.account_id} "
            f"dr={self.debit_amount} cr={self.credit_amount}>"
        )

    @property
    def is_debit(self) -> bool:
        return self.debit_amount > 0
