"""
cashbook_services.transaction_service -- the record-a-transaction flow.

Responsibility:
    Wires configuration into the kernel services and exposes the full
    user-facing flow: suggest a category when none is given, validate and
    map it against the company's chart, then post the balanced entry.
    Also onboards a company by seeding the default chart.

Architecture position:
    Services -- orchestration over kernel + config.  This is the only
    place where the kernel services for a session are constructed and
    composed.  MUST NOT import from cashbook_modules.

Invariants enforced:
    - Single-instance lifecycle: one registry shared by the category
      service and the poster within a TransactionService.
    - A recorded transaction always posts to an existing, active account.

Failure modes:
    - ValidationError, UnmappableCategoryError, UnresolvedAccountError,
      AccountInactiveError propagate unchanged from the kernel.

Usage:
    with session_scope() as session:
        txns = TransactionService(session)
        txns.onboard_company(company_id)
        entry_id = txns.record(
            company_id, "expense", Decimal("42.00"),
            "Coffee with client", date(2024, 3, 1),
        )
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from cashbook_config import CashbookConfiguration, get_active_config
from cashbook_kernel.db.base import SYSTEM_ACTOR_ID
from cashbook_kernel.domain.dtos import TransactionType
from cashbook_kernel.exceptions import ValidationError
from cashbook_kernel.logging_config import LogContext, get_logger
from cashbook_kernel.models.account import Account
from cashbook_kernel.models.journal import EntrySource, JournalEntry
from cashbook_kernel.services.category_service import CategoryService
from cashbook_kernel.services.chart_of_accounts import ChartOfAccountsRegistry
from cashbook_kernel.services.journal_poster import DoubleEntryPoster
from cashbook_kernel.services.payables_service import PayablesService

logger = get_logger("services.transactions")


class TransactionService:
    """
    Entry point for recording transactions.

    Contract:
        Receives a SQLAlchemy Session and optionally a loaded
        CashbookConfiguration.  Constructs the kernel services once and
        exposes them as public attributes.

    Guarantees:
        - record() returns the id of a flushed, balanced journal entry.

    Non-goals:
        - Does NOT manage transaction boundaries (caller's responsibility).
        - Does NOT deduplicate repeated records.
    """

    def __init__(
        self,
        session: Session,
        config: CashbookConfiguration | None = None,
    ) -> None:
        self._session = session
        self.config = config or get_active_config()

        self.registry = ChartOfAccountsRegistry(session)
        self.categories = CategoryService(session, self.config.rule_table, self.registry)
        self.poster = DoubleEntryPoster(session, self.registry)
        self.payables = PayablesService(session)

    def onboard_company(
        self,
        company_id: UUID,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> list[Account]:
        """Seed the default chart of accounts; safe to call again."""
        with LogContext.bind(company_id=str(company_id), actor_id=str(actor_id)):
            return self.registry.seed_default_chart(company_id, self.config.chart, actor_id)

    def record(
        self,
        company_id: UUID,
        transaction_type: TransactionType | str,
        amount: Decimal | int | str,
        description: str,
        entry_date: date,
        category: str | None = None,
        source: EntrySource | str = EntrySource.MANUAL,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> UUID:
        """
        Categorize, map and post one transaction.

        Returns:
            The journal entry id.

        Raises:
            ValidationError: Unknown type, bad amount or missing field.
            UnmappableCategoryError: The category cannot be mapped.
        """
        try:
            txn_type = TransactionType(transaction_type)
        except ValueError:
            raise ValidationError("type", "unknown transaction type", transaction_type) from None

        with LogContext.bind(company_id=str(company_id), actor_id=str(actor_id)):
            proposed = category
            if not proposed or not proposed.strip():
                proposed = self.categories.suggest_category(description, txn_type)
                logger.info(
                    "category_suggested",
                    extra={"transaction_type": txn_type.value, "category": proposed},
                )

            resolved = self.categories.validate_and_map_category(company_id, proposed, txn_type)
            entry = self.poster.post(
                company_id=company_id,
                transaction_type=txn_type,
                category=resolved,
                amount=amount,
                description=description,
                entry_date=entry_date,
                source=source,
                actor_id=actor_id,
            )
        return entry.id

    def reverse(
        self,
        journal_entry_id: UUID,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> JournalEntry:
        with LogContext.bind(actor_id=str(actor_id)):
            return self.poster.reverse(journal_entry_id, actor_id)
