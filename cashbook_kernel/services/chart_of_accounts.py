"""
ChartOfAccountsRegistry -- the canonical list of postable accounts per company.

Responsibility:
    Resolves account names to Account rows, lists the active chart in
    account-number order, seeds the default chart at onboarding, and lets
    an administrator add or deactivate accounts.

Architecture position:
    Kernel > Services -- imperative shell, flush-only (see BaseService).

Invariants enforced:
    - An unresolved account name is a hard error (UnresolvedAccountError),
      never a default bucket.
    - Posting to an inactive account is rejected (AccountInactiveError).
    - Account names are unique per company (DuplicateAccountError, backed
      by uq_account_company_name).
    - Accounts are never deleted, only deactivated.

Failure modes:
    - UnresolvedAccountError, AccountInactiveError, DuplicateAccountError.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import select

from cashbook_kernel.db.base import SYSTEM_ACTOR_ID
from cashbook_kernel.domain.dtos import AccountSpec
from cashbook_kernel.exceptions import (
    AccountInactiveError,
    DuplicateAccountError,
    UnresolvedAccountError,
)
from cashbook_kernel.logging_config import get_logger
from cashbook_kernel.models.account import Account
from cashbook_kernel.services.base import BaseService

logger = get_logger("services.chart_of_accounts")


class ChartOfAccountsRegistry(BaseService):
    """
    Per-company chart of accounts.

    Contract:
        Every posting and every statement resolves accounts through this
        registry.

    Guarantees:
        - list_active_accounts() is ordered by account_number.
        - seed_default_chart() is idempotent.
    """

    def find_account(self, company_id: UUID, account_name: str) -> Account | None:
        """Account with this exact name, active or not, or None."""
        return self.session.scalars(
            select(Account)
            .where(Account.company_id == company_id)
            .where(Account.account_name == account_name)
        ).one_or_none()

    def resolve_account(
        self,
        company_id: UUID,
        account_name: str,
        require_active: bool = True,
    ) -> Account:
        """
        Resolve an account name for posting.

        Raises:
            UnresolvedAccountError: No account with this name.
            AccountInactiveError: Account exists but is deactivated and
                require_active is True.
        """
        account = self.find_account(company_id, account_name)
        if account is None:
            logger.warning(
                "account_resolution_failed",
                extra={"company_id": str(company_id), "account_name": account_name},
            )
            raise UnresolvedAccountError(str(company_id), account_name)
        if require_active and not account.is_active:
            logger.warning(
                "account_inactive",
                extra={"company_id": str(company_id), "account_name": account_name},
            )
            raise AccountInactiveError(str(company_id), account_name)
        return account

    def list_accounts(
        self,
        company_id: UUID,
        include_inactive: bool = False,
    ) -> list[Account]:
        """Accounts for a company ordered by account number."""
        query = (
            select(Account)
            .where(Account.company_id == company_id)
            .order_by(Account.account_number, Account.account_name)
        )
        if not include_inactive:
            query = query.where(Account.is_active.is_(True))
        return list(self.session.scalars(query).all())

    def list_active_accounts(self, company_id: UUID) -> list[Account]:
        return self.list_accounts(company_id, include_inactive=False)

    def active_account_names(self, company_id: UUID) -> set[str]:
        return {a.account_name for a in self.list_active_accounts(company_id)}

    # =========================================================================
    # Administration
    # =========================================================================

    def add_account(
        self,
        company_id: UUID,
        spec: AccountSpec,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> Account:
        """
        Add an account to the company's chart.

        Raises:
            DuplicateAccountError: The name is already used, even by an
                inactive account.
        """
        if self.find_account(company_id, spec.account_name) is not None:
            raise DuplicateAccountError(str(company_id), spec.account_name)

        account = Account(
            company_id=company_id,
            account_number=spec.account_number,
            account_name=spec.account_name,
            account_type=spec.account_type.value,
            description=spec.description,
            is_active=True,
            created_by_id=actor_id,
        )
        self.session.add(account)
        self.session.flush()

        logger.info(
            "account_added",
            extra={
                "company_id": str(company_id),
                "account_number": spec.account_number,
                "account_name": spec.account_name,
                "account_type": spec.account_type.value,
            },
        )
        return account

    def seed_default_chart(
        self,
        company_id: UUID,
        chart: Sequence[AccountSpec],
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> list[Account]:
        """
        Insert every account of ``chart`` the company does not have yet.

        Returns the newly created accounts (empty on a repeat call).
        """
        existing = {
            a.account_name
            for a in self.list_accounts(company_id, include_inactive=True)
        }
        created: list[Account] = []
        for spec in chart:
            if spec.account_name in existing:
                continue
            account = Account(
                company_id=company_id,
                account_number=spec.account_number,
                account_name=spec.account_name,
                account_type=spec.account_type.value,
                description=spec.description,
                is_active=True,
                created_by_id=actor_id,
            )
            self.session.add(account)
            existing.add(spec.account_name)
            created.append(account)
        self.session.flush()

        logger.info(
            "default_chart_seeded",
            extra={
                "company_id": str(company_id),
                "created_count": len(created),
                "chart_size": len(chart),
            },
        )
        return created

    def deactivate_account(
        self,
        company_id: UUID,
        account_name: str,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> Account:
        """Deactivate an account; it keeps its history but accepts no postings."""
        account = self.resolve_account(company_id, account_name, require_active=False)
        if account.is_active:
            account.is_active = False
            account.updated_by_id = actor_id
            self.session.flush()
            logger.info(
                "account_deactivated",
                extra={"company_id": str(company_id), "account_name": account_name},
            )
        return account
