"""
PayablesService -- open payables and receivables tracked outside the ledger.

Responsibility:
    Records amounts owed by or to the company, marks them paid, and reports
    open totals for the balance sheet.

Architecture position:
    Kernel > Services -- imperative shell, flush-only.

Invariants enforced:
    - Amounts are positive (ck_pr_amount_positive plus ValidationError).
    - A paid item cannot be paid again or reopened.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from uuid import UUID

from sqlalchemy import func, select

from cashbook_kernel.db.base import SYSTEM_ACTOR_ID
from cashbook_kernel.db.types import to_money
from cashbook_kernel.exceptions import (
    PayableAlreadyPaidError,
    PayableNotFoundError,
    ValidationError,
)
from cashbook_kernel.logging_config import get_logger
from cashbook_kernel.models.payable_receivable import (
    PayableReceivable,
    PayableReceivableStatus,
    PayableReceivableType,
)
from cashbook_kernel.services.base import BaseService

logger = get_logger("services.payables")


class PayablesService(BaseService):
    """Create, settle and total open payables/receivables."""

    def create(
        self,
        company_id: UUID,
        item_type: PayableReceivableType | str,
        amount: Decimal | int | str,
        due_date: date,
        counterparty: str | None = None,
        description: str | None = None,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> PayableReceivable:
        try:
            kind = PayableReceivableType(item_type)
        except ValueError:
            raise ValidationError("item_type", "must be payable or receivable", item_type) from None
        try:
            money = to_money(amount)
        except (TypeError, InvalidOperation):
            raise ValidationError("amount", "must be a decimal amount", amount) from None
        if money <= 0:
            raise ValidationError("amount", "must be greater than zero", money)
        if due_date is None:
            raise ValidationError("due_date", "is required")

        item = PayableReceivable(
            company_id=company_id,
            item_type=kind.value,
            amount=money,
            due_date=due_date,
            status=PayableReceivableStatus.OPEN.value,
            counterparty=counterparty,
            description=description,
            created_by_id=actor_id,
        )
        self.session.add(item)
        self.session.flush()

        logger.info(
            "payable_receivable_created",
            extra={
                "company_id": str(company_id),
                "item_id": str(item.id),
                "item_type": kind.value,
                "amount": str(money),
            },
        )
        return item

    def mark_paid(
        self,
        item_id: UUID,
        paid_date: date,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> PayableReceivable:
        """
        Close an open item.

        Raises:
            PayableNotFoundError: Unknown id.
            PayableAlreadyPaidError: Item is already paid.
        """
        item = self.session.get(PayableReceivable, item_id)
        if item is None:
            raise PayableNotFoundError(str(item_id))
        if not item.is_open:
            raise PayableAlreadyPaidError(str(item_id))

        item.status = PayableReceivableStatus.PAID.value
        item.paid_date = paid_date
        item.updated_by_id = actor_id
        self.session.flush()

        logger.info(
            "payable_receivable_paid",
            extra={
                "company_id": str(item.company_id),
                "item_id": str(item.id),
                "item_type": item.item_type,
                "amount": str(item.amount),
            },
        )
        return item

    def list_open(
        self,
        company_id: UUID,
        item_type: PayableReceivableType | str | None = None,
    ) -> list[PayableReceivable]:
        query = (
            select(PayableReceivable)
            .where(PayableReceivable.company_id == company_id)
            .where(PayableReceivable.status == PayableReceivableStatus.OPEN.value)
            .order_by(PayableReceivable.due_date, PayableReceivable.created_at)
        )
        if item_type is not None:
            query = query.where(
                PayableReceivable.item_type == PayableReceivableType(item_type).value
            )
        return list(self.session.scalars(query).all())

    def open_totals(self, company_id: UUID) -> dict[PayableReceivableType, Decimal]:
        """Sum of open amounts per item type; both keys always present."""
        rows = self.session.execute(
            select(
                PayableReceivable.item_type,
                func.sum(PayableReceivable.amount).label("total"),
            )
            .where(PayableReceivable.company_id == company_id)
            .where(PayableReceivable.status == PayableReceivableStatus.OPEN.value)
            .group_by(PayableReceivable.item_type)
        ).all()

        totals = {kind: Decimal("0") for kind in PayableReceivableType}
        for row in rows:
            totals[PayableReceivableType(row.item_type)] = Decimal(str(row.total or 0))
        return totals
