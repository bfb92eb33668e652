"""
Module: cashbook_kernel.models.payable_receivable
Responsibility: ORM persistence for open payables and receivables.
Architecture position: Kernel > Models.  May import from db/ only.

These rows are NOT part of the double-entry ledger.  The balance sheet
folds open items additively into "Accounts Receivable" / "Accounts
Payable" alongside ledger-derived balances.

Invariants enforced:
    - status moves open -> paid exactly once (PayablesService).
    - amount is immutable after creation (db/immutability.py).
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from cashbook_kernel.db.base import TrackedBase, UUIDString


class PayableReceivableType(str, Enum):
    PAYABLE = "payable"
    RECEIVABLE = "receivable"


class PayableReceivableStatus(str, Enum):
    OPEN = "open"
    PAID = "paid"


class PayableReceivable(TrackedBase):
    """An amount owed by or to the company, tracked outside the ledger."""

    __tablename__ = "payables_receivables"

    __table_args__ = (
        Index("idx_pr_company_status", "company_id", "status"),
        CheckConstraint("amount > 0", name="ck_pr_amount_positive"),
    )

    company_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    item_type: Mapped[PayableReceivableType] = mapped_column(
        String(20),
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(
        nullable=False,
    )

    due_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    status: Mapped[PayableReceivableStatus] = mapped_column(
        String(10),
        nullable=False,
        default=PayableReceivableStatus.OPEN.value,
    )

    counterparty: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    description: Mapped[str | None] = mapped_column(
        String(1000),
        nullable=True,
    )

    paid_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<PayableReceivable {self.item_type} {self.amount} {self.status}>"

    @property
    def is_open(self) -> bool:
        return self.status == PayableReceivableStatus.OPEN
