import math
from datetime import date, datetime

import pytest

from loan_amortizer.utils import (
    add_months,
    add_periods,
    compound,
    nan_to_zero,
    parse_date,
    periods_between,
    safe_divide,
    start_of_period,
)


class TestParseDate:
    def test_year_month(self):
        assert parse_date("2024-03") == datetime(2024, 3, 1)

    def test_full_date(self):
        assert parse_date("2024-03-15") == datetime(2024, 3, 15)

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_date("March 2024")


class TestAddPeriods:
    def test_month_end_is_clamped(self):
        assert add_months(datetime(2024, 1, 31), 1) == datetime(2024, 2, 29)

    def test_plain_dates(self):
        assert add_months(date(2023, 11, 15), 3) == date(2024, 2, 15)

    def test_keeps_time_of_day(self):
        assert add_months(datetime(2024, 1, 15, 10, 30), -1) == datetime(2023, 12, 15, 10, 30)

    def test_quarter_and_year(self):
        start = datetime(2024, 1, 15)
        assert add_periods(start, 2, "quarter") == datetime(2024, 7, 15)
        assert add_periods(start, 1, "year") == datetime(2025, 1, 15)

    def test_unknown_unit_keeps_date(self):
        start = datetime(2024, 1, 15)
        assert add_periods(start, 3, "week") == start


class TestStartOfPeriod:
    def test_month(self):
        assert start_of_period(datetime(2024, 5, 17, 13, 5), "month") == datetime(2024, 5, 1)

    def test_quarter(self):
        assert start_of_period(datetime(2024, 5, 17, 13, 5), "quarter") == datetime(2024, 4, 1)
        assert start_of_period(datetime(2024, 12, 31), "quarter") == datetime(2024, 10, 1)

    def test_year(self):
        assert start_of_period(datetime(2024, 5, 17), "year") == datetime(2024, 1, 1)

    def test_plain_date_is_promoted(self):
        assert start_of_period(date(2024, 5, 17), "month") == datetime(2024, 5, 1)

    def test_unknown_unit(self):
        dt = datetime(2024, 5, 17, 13, 5)
        assert start_of_period(dt, "week") == dt


class TestPeriodsBetween:
    def test_whole_months(self):
        assert periods_between(datetime(2024, 1, 1), datetime(2024, 4, 1), "month") == 3.0

    def test_whole_quarters_and_years(self):
        assert periods_between(datetime(2024, 1, 1), datetime(2024, 4, 1), "quarter") == 1.0
        assert periods_between(datetime(2024, 1, 1), datetime(2024, 4, 1), "year") == 0.25

    def test_fractional_months(self):
        result = periods_between(datetime(2024, 1, 15), datetime(2024, 3, 1), "month")
        assert result == pytest.approx(2 - 14 / 31)

    def test_backwards(self):
        assert periods_between(datetime(2024, 4, 1), datetime(2024, 1, 1), "month") == -3.0

    def test_unknown_unit(self):
        assert periods_between(datetime(2024, 1, 1), datetime(2025, 1, 1), "week") == 0.0


class TestNumericHelpers:
    def test_safe_divide(self):
        assert safe_divide(6, 3) == 2
        assert safe_divide(1, 0) == math.inf
        assert safe_divide(-1, 0) == -math.inf
        assert math.isnan(safe_divide(0, 0))

    def test_compound(self):
        assert compound(0.01, 12) == pytest.approx(1.01 ** 12)
        assert compound(0.01, -12) == pytest.approx(1.01 ** -12)

    def test_compound_invalid_base(self):
        assert math.isnan(compound(-2, 3))
        assert math.isnan(compound(math.nan, 3))

    def test_compound_overflow(self):
        assert compound(1e10, 100) == math.inf

    def test_nan_to_zero(self):
        assert nan_to_zero(math.nan) == 0
        assert nan_to_zero(None) == 0
        assert nan_to_zero(12.5) == 12.5
