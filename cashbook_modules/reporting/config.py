"""
Reporting Configuration Schema.

Defines how accounts are classified into statement sections and how
reports are presented.  Classification uses integer account-number
ranges over the chart (1xxx assets, 2xxx liabilities, 3xxx equity,
4xxx revenue, 5xxx+ expenses); an account number that is not an integer
falls in no range.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Self

from cashbook_kernel.domain.dtos import AccountRef
from cashbook_kernel.logging_config import get_logger

logger = get_logger("modules.reporting.config")

AccountRange = tuple[int, int]


class RetainedEarningsBasis(str, Enum):
    """Which net income the balance sheet rolls into Retained Earnings."""

    CUMULATIVE = "cumulative"  # all income up to the report date
    PERIOD = "period"  # income of fromDate..toDate only


@dataclass(frozen=True)
class ClassificationPolicy:
    """
    Account-number ranges and names used to split statements.

    Each range is ``(low, high)`` with ``low`` inclusive and ``high``
    exclusive.
    """

    # Profit & loss
    cogs: AccountRange = (5000, 6000)
    other_income: AccountRange = (4900, 5000)
    other_expense: AccountRange = (8000, 9000)

    # Balance sheet / cash flow
    current_assets: AccountRange = (1000, 1400)
    fixed_assets: AccountRange = (1400, 2000)
    current_liabilities: AccountRange = (2000, 2700)
    long_term_liabilities: AccountRange = (2700, 3000)

    cash_accounts: tuple[str, ...] = ("Cash", "Cash & Bank Accounts")
    retained_earnings_account: str = "Retained Earnings"

    def __post_init__(self) -> None:
        for f in fields(self):
            if f.name in ("cash_accounts", "retained_earnings_account"):
                continue
            low, high = getattr(self, f.name)
            if low >= high:
                raise ValueError(f"{f.name}: empty range [{low}, {high})")
            object.__setattr__(self, f.name, (int(low), int(high)))
        object.__setattr__(self, "cash_accounts", tuple(self.cash_accounts))

    @staticmethod
    def in_range(account_number: str, bounds: AccountRange) -> bool:
        try:
            number = int(account_number)
        except (TypeError, ValueError):
            return False
        low, high = bounds
        return low <= number < high

    def is_cogs(self, ref: AccountRef) -> bool:
        return self.in_range(ref.account_number, self.cogs)

    def is_other_income(self, ref: AccountRef) -> bool:
        return self.in_range(ref.account_number, self.other_income)

    def is_other_expense(self, ref: AccountRef) -> bool:
        return self.in_range(ref.account_number, self.other_expense)

    def is_cash(self, ref: AccountRef) -> bool:
        return ref.account_name in self.cash_accounts

    def is_current_asset(self, ref: AccountRef) -> bool:
        return self.in_range(ref.account_number, self.current_assets)

    def is_fixed_asset(self, ref: AccountRef) -> bool:
        return self.in_range(ref.account_number, self.fixed_assets)

    def is_current_liability(self, ref: AccountRef) -> bool:
        return self.in_range(ref.account_number, self.current_liabilities)

    def is_long_term_liability(self, ref: AccountRef) -> bool:
        return self.in_range(ref.account_number, self.long_term_liabilities)


@dataclass(frozen=True)
class ReportingConfig:
    """
    Configuration schema for the reporting module.

    Controls account classification, formatting, and report generation.
    """

    # Classification rules
    policy: ClassificationPolicy = field(default_factory=ClassificationPolicy)

    # Entity name shown on reports
    entity_name: str = "Company"

    # Rounding precision for rendered amounts
    display_precision: int = 2

    # Whether P&L and balance sheet list zero lines (the trial balance and
    # general ledger always list the whole active chart)
    include_zero_balances: bool = False

    # Whether open payables/receivables are added to the balance sheet
    include_open_items: bool = True

    retained_earnings_basis: RetainedEarningsBasis = RetainedEarningsBasis.CUMULATIVE

    # Raise AggregationInconsistencyError instead of flagging an imbalance
    raise_on_imbalance: bool = False

    def __post_init__(self):
        if self.display_precision < 0:
            raise ValueError("display_precision cannot be negative")
        object.__setattr__(
            self,
            "retained_earnings_basis",
            RetainedEarningsBasis(self.retained_earnings_basis),
        )

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("reporting_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Create config from a mapping such as the ``reporting`` YAML block."""
        values = dict(data)
        policy = values.get("policy")
        if isinstance(policy, Mapping):
            values["policy"] = ClassificationPolicy(
                **{
                    key: tuple(value) if isinstance(value, list) else value
                    for key, value in policy.items()
                }
            )
        logger.info(
            "reporting_config_loading_from_dict",
            extra={"keys": sorted(values.keys())},
        )
        return cls(**values)
