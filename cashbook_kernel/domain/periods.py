"""
Reporting period definitions for columnar statements.

Responsibility:
    Builds monthly (jan..dec) and quarterly (q1..q4) PeriodDefinitions for
    a calendar year and assigns dates to periods.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Generated periods are contiguous, non-overlapping and date-ordered.
    - find_period_for_date returns the FIRST containing period.
"""

from __future__ import annotations

import calendar
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from enum import Enum

MONTH_KEYS = (
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
)
MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


class ColumnMode(str, Enum):
    """Column layout of a columnar report."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


@dataclass(frozen=True)
class PeriodDefinition:
    """One column of a columnar report: an inclusive date range."""

    key: str
    label: str
    from_date: date
    to_date: date

    def __post_init__(self) -> None:
        if self.from_date > self.to_date:
            raise ValueError(
                f"Period {self.key}: from_date {self.from_date} after to_date {self.to_date}"
            )

    def contains(self, day: date) -> bool:
        return self.from_date <= day <= self.to_date


def _month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def monthly_periods(year: int) -> tuple[PeriodDefinition, ...]:
    """Twelve calendar-month periods for ``year``."""
    return tuple(
        PeriodDefinition(
            key=MONTH_KEYS[month - 1],
            label=MONTH_LABELS[month - 1],
            from_date=date(year, month, 1),
            to_date=_month_end(year, month),
        )
        for month in range(1, 13)
    )


def quarterly_periods(year: int) -> tuple[PeriodDefinition, ...]:
    """Four calendar quarters for ``year``."""
    return tuple(
        PeriodDefinition(
            key=f"q{quarter}",
            label=f"Q{quarter}",
            from_date=date(year, 3 * quarter - 2, 1),
            to_date=_month_end(year, 3 * quarter),
        )
        for quarter in range(1, 5)
    )


def periods_for(year: int, mode: ColumnMode | str) -> tuple[PeriodDefinition, ...]:
    match ColumnMode(mode):
        case ColumnMode.MONTHLY:
            return monthly_periods(year)
        case ColumnMode.QUARTERLY:
            return quarterly_periods(year)


def find_period_for_date(
    day: date,
    periods: Sequence[PeriodDefinition],
) -> str | None:
    """Key of the first period containing ``day``, or None."""
    for period in periods:
        if period.contains(day):
            return period.key
    return None
