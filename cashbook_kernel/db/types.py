"""
Module: cashbook_kernel.db.types
Responsibility: Annotated type aliases and rounding helpers for monetary
    columns.  Every model and service uses these definitions so that amounts
    are stored and compared with identical precision.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    services/, and selectors/.  MUST NOT import from any of those layers.

Invariants enforced:
    No floats anywhere in the kernel.  All monetary amounts use Decimal.
    BALANCE_TOLERANCE is the single tolerance for "debits equal credits"
    and "assets equal liabilities plus equity" comparisons.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from sqlalchemy import Numeric, String

# 38 digits total, 9 decimal places
Money = Annotated[Decimal, Numeric(38, 9)]

# Account numbers are sortable strings ("1000", "5000")
AccountNumber = Annotated[str, String(20)]

ShortText = Annotated[str, String(255)]
LongText = Annotated[str, String(4000)]

MONEY_DECIMAL_PLACES = 9
DEFAULT_ROUNDING = ROUND_HALF_UP

ZERO = Decimal("0")
BALANCE_TOLERANCE = Decimal("0.01")


def to_money(value: Decimal | int | str) -> Decimal:
    """
    Convert an input amount to Decimal.

    Floats are rejected; they cannot represent cents exactly.

    Raises:
        TypeError: If value is a float.
        decimal.InvalidOperation: If a string is not numeric.
    """
    if isinstance(value, float):
        raise TypeError("Monetary amounts must not be float")
    if isinstance(value, Decimal):
        return value
    return Decimal(value)


def round_money(
    value: Decimal,
    decimal_places: int = 2,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to specified decimal places.

    The only sanctioned rounding function for display values.
    """
    quantize_str = "0." + "0" * decimal_places if decimal_places > 0 else "1"
    return value.quantize(Decimal(quantize_str), rounding=rounding)


def within_tolerance(left: Decimal, right: Decimal) -> bool:
    """True when |left - right| < BALANCE_TOLERANCE."""
    return abs(left - right) < BALANCE_TOLERANCE
