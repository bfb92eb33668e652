"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Defines the immutable data structures that flow between the posting
    rules, the ledger aggregator and the statement builder:
    TransactionType (user-facing input type), LineSpec (posting rule
    output), AccountRef (resolved account identity), TransactionLineRecord
    (one persisted line as read back from the journal) and AccountTotals
    (raw debit/credit totals per account).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    from_model() class methods are boundary converters invoked only from
    selectors and services.

Invariants enforced:
    - LineSpec and TransactionLineRecord amounts are non-negative; the side
      carries direction.
    - Aggregates are keyed by AccountRef, never by a bare account name
      string, so an unresolved or misspelled name cannot become a bucket.

Failure modes:
    - ValueError on LineSpec with a non-positive amount.
    - ValueError on TransactionLineRecord with both or neither side set.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from cashbook_kernel.models.account import AccountType, NormalBalance, normal_balance_for

if TYPE_CHECKING:
    from cashbook_kernel.models.account import Account as AccountModel


class TransactionType(str, Enum):
    """Coarse, user-facing transaction type chosen on the entry form."""

    INCOME = "income"
    EXPENSE = "expense"
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"

    @property
    def account_type(self) -> AccountType:
        """The CoA account type a category of this transaction type must have."""
        if self is TransactionType.INCOME:
            return AccountType.REVENUE
        return AccountType(self.value)


class LineSide(str, Enum):
    """Which side of the entry a line is on."""

    DEBIT = "debit"
    CREDIT = "credit"


@dataclass(frozen=True)
class LineSpec:
    """
    Specification for one ledger line, produced by the posting rules.

    Contract:
        Names the account by account_name (resolved later through the
        chart of accounts registry), a side, and a positive amount.
    """

    account_name: str
    side: LineSide
    amount: Decimal
    memo: str | None = None

    def __post_init__(self) -> None:
        if self.amount <= Decimal("0"):
            raise ValueError("Line amount must be positive")

    @property
    def debit_amount(self) -> Decimal:
        return self.amount if self.side == LineSide.DEBIT else Decimal("0")

    @property
    def credit_amount(self) -> Decimal:
        return self.amount if self.side == LineSide.CREDIT else Decimal("0")


@dataclass(frozen=True, order=True)
class AccountRef:
    """
    Validated identity and metadata of a chart-of-accounts entry.

    Ordering is by account_number, then account_name, which is the
    presentation order of every statement.
    """

    account_number: str
    account_name: str
    account_type: AccountType
    account_id: UUID

    def __post_init__(self) -> None:
        # Rows read back from the database carry the type as a plain string
        object.__setattr__(self, "account_type", AccountType(self.account_type))

    @property
    def normal_balance(self) -> NormalBalance:
        return normal_balance_for(self.account_type)

    @classmethod
    def from_model(cls, account: AccountModel) -> AccountRef:
        return cls(
            account_number=account.account_number,
            account_name=account.account_name,
            account_type=AccountType(account.account_type),
            account_id=account.id,
        )


@dataclass(frozen=True)
class AccountSpec:
    """Definition of a chart-of-accounts entry before it is persisted."""

    account_number: str
    account_name: str
    account_type: AccountType
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.account_number or not self.account_name:
            raise ValueError("account_number and account_name are required")
        object.__setattr__(self, "account_type", AccountType(self.account_type))


@dataclass(frozen=True)
class TransactionLineRecord:
    """
    One non-reversed transaction entry joined to its journal entry header
    and resolved account.
    """

    journal_entry_id: UUID
    entry_date: date
    entry_description: str
    account: AccountRef
    debit_amount: Decimal
    credit_amount: Decimal
    line_description: str | None = None
    line_seq: int = 0

    def __post_init__(self) -> None:
        if self.debit_amount < 0 or self.credit_amount < 0:
            raise ValueError("Line amounts must be non-negative")
        if (self.debit_amount > 0) == (self.credit_amount > 0):
            raise ValueError("Exactly one of debit/credit must be non-zero")


@dataclass(frozen=True)
class AccountTotals:
    """Raw debit and credit totals for one account over some window."""

    account: AccountRef
    total_debits: Decimal
    total_credits: Decimal

    @property
    def natural_balance(self) -> Decimal:
        """
        Balance with the account type's sign convention.

        asset/expense: debit - credit
        liability/equity/revenue: credit - debit
        """
        match self.account.account_type:
            case AccountType.ASSET | AccountType.EXPENSE:
                return self.total_debits - self.total_credits
            case AccountType.LIABILITY | AccountType.EQUITY | AccountType.REVENUE:
                return self.total_credits - self.total_debits
        raise ValueError(f"Unknown account type: {self.account.account_type!r}")
