"""
Reporting-specific test fixtures.

Provides:
- Synthetic AccountRef / AccountTotals factories for pure statement tests
- A ``post`` helper that records transactions for a seeded company
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from cashbook_kernel.domain.dtos import AccountRef, AccountTotals
from cashbook_kernel.models.account import AccountType
from cashbook_modules.reporting.models import ReportMetadata, ReportType

# =========================================================================
# Synthetic account data for pure function tests (no DB required)
# =========================================================================

CASH = AccountRef("1000", "Cash", AccountType.ASSET, uuid4())
AR = AccountRef("1100", "Accounts Receivable", AccountType.ASSET, uuid4())
INVENTORY = AccountRef("1200", "Inventory", AccountType.ASSET, uuid4())
EQUIPMENT = AccountRef("1400", "Equipment & Furniture", AccountType.ASSET, uuid4())
AP = AccountRef("2000", "Accounts Payable", AccountType.LIABILITY, uuid4())
LOANS = AccountRef("2700", "Loans Payable", AccountType.LIABILITY, uuid4())
CAPITAL = AccountRef("3000", "Owner's Capital", AccountType.EQUITY, uuid4())
DRAWS = AccountRef("3100", "Owner's Draws", AccountType.EQUITY, uuid4())
RETAINED = AccountRef("3200", "Retained Earnings", AccountType.EQUITY, uuid4())
SALES = AccountRef("4000", "Sales Revenue", AccountType.REVENUE, uuid4())
INTEREST_INCOME = AccountRef("4900", "Interest Income", AccountType.REVENUE, uuid4())
COGS = AccountRef("5000", "Cost of Goods Sold", AccountType.EXPENSE, uuid4())
RENT = AccountRef("6200", "Rent", AccountType.EXPENSE, uuid4())
INTEREST_EXPENSE = AccountRef("8000", "Interest Expense", AccountType.EXPENSE, uuid4())


def totals(*rows: tuple[AccountRef, str, str]) -> dict[AccountRef, AccountTotals]:
    """Build a totals mapping from (ref, debits, credits) rows."""
    return {
        ref: AccountTotals(account=ref, total_debits=Decimal(dr), total_credits=Decimal(cr))
        for ref, dr, cr in rows
    }


def make_metadata(report_type: ReportType = ReportType.PROFIT_LOSS) -> ReportMetadata:
    return ReportMetadata(
        report_type=report_type,
        company_id=uuid4(),
        entity_name="Test Co",
        generated_at="2024-01-01T12:00:00+00:00",
        from_date=date(2024, 1, 1),
        to_date=date(2024, 12, 31),
    )


# =========================================================================
# Database-backed helpers
# =========================================================================


@pytest.fixture
def post(transaction_service, seeded_company):
    """
    Record a transaction for the seeded company.

    Usage::

        entry_id = post("expense", "Rent", "1200", "Office rent", date(2024, 1, 5))
    """

    def _post(txn_type, category, amount, description, day):
        return transaction_service.record(
            seeded_company, txn_type, Decimal(amount), description, day, category=category,
        )

    return _post
