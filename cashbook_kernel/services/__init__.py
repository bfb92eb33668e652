"""Services for the cashbook kernel (write side)."""

from cashbook_kernel.services.category_service import CategoryService
from cashbook_kernel.services.chart_of_accounts import ChartOfAccountsRegistry
from cashbook_kernel.services.journal_poster import DoubleEntryPoster
from cashbook_kernel.services.payables_service import PayablesService

__all__ = [
    "CategoryService",
    "ChartOfAccountsRegistry",
    "DoubleEntryPoster",
    "PayablesService",
]
