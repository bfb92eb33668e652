"""
Typed Exception Hierarchy for the Cashbook Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (UI forms, import jobs, report exporters) need to react to errors
without parsing message strings. Every error therefore:
  1. Has its own exception class (catch by type, not message)
  2. Has a CODE class attribute (machine-readable, API-safe)
  3. Carries structured DATA (company, account name, amount) as attributes

Example:
    try:
        poster.post(company_id, "expense", "Rnet", amount, "Office rent", day)
    except UnresolvedAccountError as e:
        return {"error": e.code, "account": e.account_name}

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    CashbookError (base)
    |
    +-- ValidationError
    |
    +-- AccountError
    |   +-- UnresolvedAccountError
    |   +-- AccountInactiveError
    |   +-- DuplicateAccountError
    |
    +-- CategoryError
    |   +-- UnmappableCategoryError
    |
    +-- PostingError
    |   +-- ImbalancedEntryError
    |
    +-- ReversalError
    |   +-- JournalEntryNotFoundError
    |   +-- EntryAlreadyReversedError
    |
    +-- PayableReceivableError
    |   +-- PayableNotFoundError
    |   +-- PayableAlreadyPaidError
    |
    +-- ReportingError
    |   +-- InvalidReportRequestError
    |   +-- AggregationInconsistencyError
    |
    +-- ImmutabilityError
        +-- ImmutabilityViolationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Validation      | VALIDATION_ERROR            | Non-positive amount, missing field
----------------|-----------------------------|-----------------------------------------
Account         | UNRESOLVED_ACCOUNT          | Account name not in company CoA
                | ACCOUNT_INACTIVE            | Posting to a deactivated account
                | DUPLICATE_ACCOUNT           | Account name already taken
----------------|-----------------------------|-----------------------------------------
Category        | UNMAPPABLE_CATEGORY         | Neither category nor canonical fallback
----------------|-----------------------------|-----------------------------------------
Posting         | IMBALANCED_ENTRY            | Debits != Credits (programming error)
----------------|-----------------------------|-----------------------------------------
Reversal        | JOURNAL_ENTRY_NOT_FOUND     | Entry ID doesn't exist
                | ENTRY_ALREADY_REVERSED      | Entry was already reversed
----------------|-----------------------------|-----------------------------------------
Payables        | PAYABLE_NOT_FOUND           | Payable/receivable ID doesn't exist
                | PAYABLE_ALREADY_PAID        | open -> paid happens once
----------------|-----------------------------|-----------------------------------------
Reporting       | INVALID_REPORT_REQUEST      | Unknown type, inverted range
                | AGGREGATION_INCONSISTENCY   | TB or BS fails to balance (strict mode)
----------------|-----------------------------|-----------------------------------------
Immutability    | IMMUTABILITY_VIOLATION      | Editing a written ledger record

===============================================================================
DESIGN DECISIONS
===============================================================================

1. Inherit from Exception, not ValueError: domain errors are catchable as a
   group and never confused with programming errors in library code.

2. ImbalancedEntryError is raised, never repaired. A derived entry set that
   does not balance indicates a bug in the posting rules.

3. AggregationInconsistencyError is only raised in strict reporting mode.
   By default an imbalance is reported on the statement itself
   (is_balanced / discrepancy) so the caller can still show it.

===============================================================================
"""


class CashbookError(Exception):
    """
    Base exception for all cashbook errors.

    All subclasses must have a `code` class attribute
    for machine-readable error identification.
    """

    code: str = "CASHBOOK_ERROR"


# Validation


class ValidationError(CashbookError):
    """Input rejected before any write."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str, value: object = None):
        self.field = field
        self.reason = reason
        self.value = value
        super().__init__(f"Invalid {field}: {reason}")


# Account-related exceptions


class AccountError(CashbookError):
    """Base exception for chart-of-accounts errors."""

    code: str = "ACCOUNT_ERROR"


class UnresolvedAccountError(AccountError):
    """Account name does not exist in the company's chart of accounts."""

    code: str = "UNRESOLVED_ACCOUNT"

    def __init__(self, company_id: str, account_name: str):
        self.company_id = company_id
        self.account_name = account_name
        super().__init__(
            f"Account '{account_name}' not found for company {company_id}"
        )


class AccountInactiveError(AccountError):
    """Account exists but has been deactivated."""

    code: str = "ACCOUNT_INACTIVE"

    def __init__(self, company_id: str, account_name: str):
        self.company_id = company_id
        self.account_name = account_name
        super().__init__(
            f"Account '{account_name}' is inactive for company {company_id}"
        )


class DuplicateAccountError(AccountError):
    """Account name is already used by this company."""

    code: str = "DUPLICATE_ACCOUNT"

    def __init__(self, company_id: str, account_name: str):
        self.company_id = company_id
        self.account_name = account_name
        super().__init__(
            f"Account '{account_name}' already exists for company {company_id}"
        )


# Category-related exceptions


class CategoryError(CashbookError):
    """Base exception for category classification errors."""

    code: str = "CATEGORY_ERROR"


class UnmappableCategoryError(CategoryError):
    """Neither the proposed category nor its canonical fallback exists."""

    code: str = "UNMAPPABLE_CATEGORY"

    def __init__(
        self,
        company_id: str,
        proposed_category: str,
        transaction_type: str,
        canonical_category: str,
    ):
        self.company_id = company_id
        self.proposed_category = proposed_category
        self.transaction_type = transaction_type
        self.canonical_category = canonical_category
        super().__init__(
            f"Category '{proposed_category}' ({transaction_type}) cannot be "
            f"mapped: fallback '{canonical_category}' is not in the chart of "
            f"accounts for company {company_id}"
        )


# Posting-related exceptions


class PostingError(CashbookError):
    """Base exception for posting errors."""

    code: str = "POSTING_ERROR"


class ImbalancedEntryError(PostingError):
    """Journal entry debits do not equal credits."""

    code: str = "IMBALANCED_ENTRY"

    def __init__(self, debits: str, credits: str, description: str = ""):
        self.debits = debits
        self.credits = credits
        self.description = description
        super().__init__(
            f"Imbalanced entry '{description}': debits={debits}, credits={credits}"
        )


# Reversal-related exceptions


class ReversalError(CashbookError):
    """Base exception for reversal errors."""

    code: str = "REVERSAL_ERROR"


class JournalEntryNotFoundError(ReversalError):
    """Journal entry with given ID was not found."""

    code: str = "JOURNAL_ENTRY_NOT_FOUND"

    def __init__(self, journal_entry_id: str):
        self.journal_entry_id = journal_entry_id
        super().__init__(f"Journal entry not found: {journal_entry_id}")


class EntryAlreadyReversedError(ReversalError):
    """Entry has already been reversed."""

    code: str = "ENTRY_ALREADY_REVERSED"

    def __init__(self, journal_entry_id: str):
        self.journal_entry_id = journal_entry_id
        super().__init__(f"Entry {journal_entry_id} has already been reversed")


# Payable/receivable exceptions


class PayableReceivableError(CashbookError):
    """Base exception for payable/receivable errors."""

    code: str = "PAYABLE_RECEIVABLE_ERROR"


class PayableNotFoundError(PayableReceivableError):
    """Payable or receivable with given ID was not found."""

    code: str = "PAYABLE_NOT_FOUND"

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Payable/receivable not found: {item_id}")


class PayableAlreadyPaidError(PayableReceivableError):
    """Payable or receivable has already been marked paid."""

    code: str = "PAYABLE_ALREADY_PAID"

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Payable/receivable {item_id} is already paid")


# Reporting exceptions


class ReportingError(CashbookError):
    """Base exception for report generation errors."""

    code: str = "REPORTING_ERROR"


class InvalidReportRequestError(ReportingError):
    """Report parameters are unusable."""

    code: str = "INVALID_REPORT_REQUEST"

    def __init__(self, report_type: str, reason: str):
        self.report_type = report_type
        self.reason = reason
        super().__init__(f"Invalid {report_type} request: {reason}")


class AggregationInconsistencyError(ReportingError):
    """A computed statement fails to balance."""

    code: str = "AGGREGATION_INCONSISTENCY"

    def __init__(self, report_type: str, left: str, right: str, discrepancy: str):
        self.report_type = report_type
        self.left = left
        self.right = right
        self.discrepancy = discrepancy
        super().__init__(
            f"{report_type} does not balance: {left} vs {right} "
            f"(discrepancy {discrepancy})"
        )


# Immutability exceptions


class ImmutabilityError(CashbookError):
    """Base exception for immutability violations."""

    code: str = "IMMUTABILITY_ERROR"


class ImmutabilityViolationError(ImmutabilityError):
    """Attempted modification of a written ledger record."""

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(
            f"Cannot modify {entity_type} {entity_id}: {reason}"
        )
