"""
Module: cashbook_kernel.models.account
Responsibility: ORM persistence for the Chart of Accounts (CoA) -- the target
    of every transaction entry.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - (company_id, account_name) is unique: the account name is the
      posting key a user types or picks.
    - Accounts are never deleted, only deactivated (immutability listener).
    - account_number carries statement meaning (COGS range, fixed assets,
      current liabilities); the ranges themselves live in
      ClassificationPolicy, not here.

Failure modes:
    - DuplicateAccountError when a name is reused (ChartOfAccountsRegistry).
    - ImmutabilityViolationError when a delete is attempted.
"""

from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cashbook_kernel.db.base import TrackedBase, UUIDString

if TYPE_CHECKING:
    from cashbook_kernel.models.journal import TransactionEntry


class AccountType(str, Enum):
    """Types of accounts in the chart of accounts."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"


class NormalBalance(str, Enum):
    """Normal balance side for an account."""

    DEBIT = "debit"
    CREDIT = "credit"


def normal_balance_for(account_type: AccountType) -> NormalBalance:
    """Asset and expense accounts are debit-normal; all others credit-normal."""
    match AccountType(account_type):
        case AccountType.ASSET | AccountType.EXPENSE:
            return NormalBalance.DEBIT
        case AccountType.LIABILITY | AccountType.EQUITY | AccountType.REVENUE:
            return NormalBalance.CREDIT


class Account(TrackedBase):
    """
    Chart of Accounts entry for one company.

    Contract:
        account_name is unique within a company and stable; it is how
        categories, posting rules and reports refer to the account.

    Non-goals:
        - Flat chart: no parent accounts or currency restriction.
    """

    __tablename__ = "accounts"

    __table_args__ = (
        UniqueConstraint("company_id", "account_name", name="uq_account_company_name"),
        Index("idx_account_company_number", "company_id", "account_number"),
        Index("idx_account_active", "is_active"),
    )

    company_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    account_number: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )

    account_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    account_type: Mapped[AccountType] = mapped_column(
        String(20),
        nullable=False,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    description: Mapped[str | None] = mapped_column(
        String(1000),
        nullable=True,
    )

    transaction_entries: Mapped[list["TransactionEntry"]] = relationship(
        back_populates="account",
        lazy="dynamic",
    )

    def __repr__(self) -> str:
        return f"<Account {self.account_number}: {self.account_name}>"

    @property
    def normal_balance(self) -> NormalBalance:
        return normal_balance_for(self.account_type)
