"""
CategoryService -- validates and maps externally supplied categories.

Responsibility:
    ``validate_and_map_category`` turns a category proposed by a form,
    an import row or an AI parser into the name of an account that really
    exists in the company's chart.  ``suggest_category`` wraps the pure
    keyword classifier for the same rule table.

Architecture position:
    Kernel > Services.  Reads through ChartOfAccountsRegistry; never writes.

Invariants enforced:
    - The returned name always resolves to an active account whose type
      matches the transaction type.
    - The fallback uses the same rule table as auto_categorize, applied to
      the proposed category text.

Failure modes:
    - UnmappableCategoryError when neither the proposed name nor its
      canonical fallback exists.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from cashbook_kernel.domain.categorization import CategoryRuleTable, auto_categorize
from cashbook_kernel.domain.dtos import TransactionType
from cashbook_kernel.exceptions import UnmappableCategoryError, ValidationError
from cashbook_kernel.logging_config import get_logger
from cashbook_kernel.models.account import AccountType
from cashbook_kernel.services.chart_of_accounts import ChartOfAccountsRegistry

logger = get_logger("services.category")


class CategoryService:
    """Category suggestion and validation against a company's chart."""

    def __init__(
        self,
        session: Session,
        rule_table: CategoryRuleTable,
        registry: ChartOfAccountsRegistry | None = None,
    ):
        self._rules = rule_table
        self._registry = registry or ChartOfAccountsRegistry(session)

    def suggest_category(
        self,
        description: str | None,
        transaction_type: TransactionType | str,
    ) -> str:
        return auto_categorize(description, transaction_type, self._rules)

    def validate_and_map_category(
        self,
        company_id: UUID,
        proposed_category: str | None,
        transaction_type: TransactionType | str,
    ) -> str:
        """
        Resolve a proposed category to an existing account name.

        1. The proposed name itself, if it is an active account of the
           type the transaction posts to.
        2. Otherwise the canonical category the rule table assigns to the
           proposed text, if that is an active account of that type.

        Raises:
            ValidationError: Unknown transaction type.
            UnmappableCategoryError: Neither name exists.
        """
        try:
            txn_type = TransactionType(transaction_type)
        except ValueError:
            raise ValidationError("type", "unknown transaction type", transaction_type) from None

        proposed = (proposed_category or "").strip()
        active = {
            account.account_name: AccountType(account.account_type)
            for account in self._registry.list_active_accounts(company_id)
        }
        wanted = txn_type.account_type
        if proposed and active.get(proposed) == wanted:
            return proposed
        if proposed in active:
            logger.info(
                "category_type_mismatch",
                extra={
                    "company_id": str(company_id),
                    "proposed_category": proposed,
                    "account_type": active[proposed].value,
                    "transaction_type": txn_type.value,
                },
            )

        canonical = auto_categorize(proposed, txn_type, self._rules)
        if active.get(canonical) == wanted:
            logger.info(
                "category_mapped",
                extra={
                    "company_id": str(company_id),
                    "proposed_category": proposed,
                    "mapped_category": canonical,
                    "transaction_type": txn_type.value,
                },
            )
            return canonical

        logger.warning(
            "category_unmappable",
            extra={
                "company_id": str(company_id),
                "proposed_category": proposed,
                "canonical_category": canonical,
                "transaction_type": txn_type.value,
            },
        )
        raise UnmappableCategoryError(
            company_id=str(company_id),
            proposed_category=proposed,
            transaction_type=txn_type.value,
            canonical_category=canonical,
        )
