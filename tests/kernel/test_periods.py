"""Tests for monthly/quarterly period generation and date assignment."""

from datetime import date, timedelta

import pytest

from cashbook_kernel.domain.periods import (
    ColumnMode,
    PeriodDefinition,
    find_period_for_date,
    monthly_periods,
    periods_for,
    quarterly_periods,
)


class TestMonthlyPeriods:
    def test_twelve_keyed_months(self):
        periods = monthly_periods(2023)
        assert [p.key for p in periods] == [
            "jan", "feb", "mar", "apr", "may", "jun",
            "jul", "aug", "sep", "oct", "nov", "dec",
        ]
        assert periods[0].label == "Jan"
        assert periods[0].from_date == date(2023, 1, 1)
        assert periods[-1].to_date == date(2023, 12, 31)

    def test_leap_year_february(self):
        assert monthly_periods(2024)[1].to_date == date(2024, 2, 29)
        assert monthly_periods(2023)[1].to_date == date(2023, 2, 28)

    def test_contiguous(self):
        periods = monthly_periods(2024)
        for left, right in zip(periods, periods[1:]):
            assert right.from_date == left.to_date + timedelta(days=1)


class TestQuarterlyPeriods:
    def test_four_quarters(self):
        periods = quarterly_periods(2024)
        assert [p.key for p in periods] == ["q1", "q2", "q3", "q4"]
        assert [p.label for p in periods] == ["Q1", "Q2", "Q3", "Q4"]
        assert periods[1].from_date == date(2024, 4, 1)
        assert periods[1].to_date == date(2024, 6, 30)
        assert periods[3].to_date == date(2024, 12, 31)

    def test_contiguous(self):
        periods = quarterly_periods(2024)
        for left, right in zip(periods, periods[1:]):
            assert right.from_date == left.to_date + timedelta(days=1)


class TestPeriodsFor:
    def test_dispatch_by_mode(self):
        assert len(periods_for(2024, ColumnMode.MONTHLY)) == 12
        assert len(periods_for(2024, "quarterly")) == 4

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            periods_for(2024, "weekly")


class TestFindPeriodForDate:
    def test_boundaries_are_inclusive(self):
        periods = quarterly_periods(2024)
        assert find_period_for_date(date(2024, 3, 31), periods) == "q1"
        assert find_period_for_date(date(2024, 4, 1), periods) == "q2"

    def test_outside_all_periods(self):
        assert find_period_for_date(date(2025, 1, 1), monthly_periods(2024)) is None

    def test_first_containing_period_wins(self):
        overlapping = [
            PeriodDefinition("a", "A", date(2024, 1, 1), date(2024, 1, 31)),
            PeriodDefinition("b", "B", date(2024, 1, 15), date(2024, 2, 15)),
        ]
        assert find_period_for_date(date(2024, 1, 20), overlapping) == "a"

    def test_inverted_period_rejected(self):
        with pytest.raises(ValueError):
            PeriodDefinition("x", "X", date(2024, 2, 1), date(2024, 1, 1))
