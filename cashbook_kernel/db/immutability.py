"""
ORM-Level Immutability Enforcement.

===============================================================================
WHY THIS EXISTS
===============================================================================

Written ledger records must not change. Corrections are new entries or a
reversal, which leaves a visible trail. SQLAlchemy fires events before an
UPDATE/DELETE reaches the database; the listeners here inspect attribute
history and raise ImmutabilityViolationError, aborting the flush.

    session.flush()
         |
         v
    [before_update event] --> _check_*() --> ImmutabilityViolationError
         |
         v
    [before_delete event] --> _check_*_delete() --> ImmutabilityViolationError
         |
         v
    SQL sent to database (only if checks pass)

===============================================================================
PROTECTED ENTITIES
===============================================================================

Entity            | Rule
------------------|--------------------------------------------------------------
JournalEntry      | Never deleted.  Only is_reversed may change, False -> True.
TransactionEntry  | Never updated, never deleted.
Account           | Never deleted.  company_id, account_name, account_type fixed.
PayableReceivable | amount, item_type, company_id fixed.  status: open -> paid only.

updated_at / updated_by_id are audit metadata and may always change.

===============================================================================
USAGE
===============================================================================

    from cashbook_kernel.db.immutability import register_immutability_listeners
    register_immutability_listeners()  # once at startup

    unregister_immutability_listeners()  # TESTS ONLY
"""

from sqlalchemy import event, inspect

from cashbook_kernel.exceptions import ImmutabilityViolationError
from cashbook_kernel.logging_config import get_logger

logger = get_logger("db.immutability")

_AUDIT_FIELDS = frozenset({"updated_at", "updated_by_id"})


def _changed_columns(target) -> dict[str, tuple[list, list]]:
    """Column attributes with pending changes, as {key: (old, new)}."""
    insp = inspect(target)
    changed: dict[str, tuple[list, list]] = {}
    for attr in insp.mapper.column_attrs:
        if attr.key in _AUDIT_FIELDS:
            continue
        hist = insp.attrs[attr.key].history
        if hist.has_changes():
            changed[attr.key] = (list(hist.deleted), list(hist.added))
    return changed


def _block(entity_type: str, target, operation: str, reason: str, field: str | None = None):
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": entity_type,
            "entity_id": str(target.id),
            "operation": operation,
            "field": field,
        },
    )
    raise ImmutabilityViolationError(
        entity_type=entity_type,
        entity_id=str(target.id),
        reason=reason,
    )


def _check_journal_entry_update(mapper, connection, target):
    """
    Only the reversal flag may change on a journal entry, and only once.
    """
    for key, (old, new) in _changed_columns(target).items():
        if key == "is_reversed" and old == [False] and new == [True]:
            continue
        if key == "is_reversed":
            _block(
                "JournalEntry", target, "UPDATE",
                "A reversal cannot be undone", field=key,
            )
        _block(
            "JournalEntry", target, "UPDATE",
            f"Cannot modify field '{key}' on a journal entry", field=key,
        )


def _check_journal_entry_delete(mapper, connection, target):
    _block(
        "JournalEntry", target, "DELETE",
        "Journal entries cannot be deleted; reverse them instead",
    )


def _check_transaction_entry_update(mapper, connection, target):
    changed = _changed_columns(target)
    if changed:
        field = sorted(changed)[0]
        _block(
            "TransactionEntry", target, "UPDATE",
            f"Transaction entries are immutable (field '{field}')", field=field,
        )


def _check_transaction_entry_delete(mapper, connection, target):
    _block(
        "TransactionEntry", target, "DELETE",
        "Transaction entries cannot be deleted",
    )


_ACCOUNT_FIXED_FIELDS = frozenset({"company_id", "account_name", "account_type"})


def _check_account_update(mapper, connection, target):
    for key in _changed_columns(target):
        if key in _ACCOUNT_FIXED_FIELDS:
            _block(
                "Account", target, "UPDATE",
                f"Account field '{key}' is fixed once created", field=key,
            )


def _check_account_delete(mapper, connection, target):
    _block(
        "Account", target, "DELETE",
        "Accounts are never deleted, only deactivated",
    )


_PAYABLE_FIXED_FIELDS = frozenset({"company_id", "item_type", "amount"})


def _check_payable_receivable_update(mapper, connection, target):
    for key, (old, new) in _changed_columns(target).items():
        if key in _PAYABLE_FIXED_FIELDS:
            _block(
                "PayableReceivable", target, "UPDATE",
                f"Field '{key}' is fixed once created", field=key,
            )
        if key == "status" and old and old[0] == "paid":
            _block(
                "PayableReceivable", target, "UPDATE",
                "A paid item cannot be reopened", field=key,
            )


_LISTENERS = (
    ("JournalEntry", "before_update", _check_journal_entry_update),
    ("JournalEntry", "before_delete", _check_journal_entry_delete),
    ("TransactionEntry", "before_update", _check_transaction_entry_update),
    ("TransactionEntry", "before_delete", _check_transaction_entry_delete),
    ("Account", "before_update", _check_account_update),
    ("Account", "before_delete", _check_account_delete),
    ("PayableReceivable", "before_update", _check_payable_receivable_update),
)


def _models() -> dict[str, type]:
    # Inline import: models import db/, so db/ cannot import models at load time
    from cashbook_kernel.models import (
        Account,
        JournalEntry,
        PayableReceivable,
        TransactionEntry,
    )

    return {
        "JournalEntry": JournalEntry,
        "TransactionEntry": TransactionEntry,
        "Account": Account,
        "PayableReceivable": PayableReceivable,
    }


def register_immutability_listeners() -> None:
    """
    Register all immutability enforcement event listeners (idempotent).

    Call after models are importable and before any database writes.
    """
    models = _models()
    for model_name, event_name, listener in _LISTENERS:
        target = models[model_name]
        if not event.contains(target, event_name, listener):
            event.listen(target, event_name, listener)


def unregister_immutability_listeners() -> None:
    """
    Remove immutability enforcement event listeners.

    WARNING: Only use this in tests.
    """
    models = _models()
    for model_name, event_name, listener in _LISTENERS:
        target = models[model_name]
        if event.contains(target, event_name, listener):
            event.remove(target, event_name, listener)
