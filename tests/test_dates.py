"""
Unit tests for date utilities
"""

import pytest
from datetime import date, datetime

from carescope.modules.dates import (
    add_days, clamp, days_between, format_date, is_overdue, to_date
)


class TestDateArithmetic:
    """Test calendar-day arithmetic"""

    def test_add_days_across_leap_february(self):
        """Test 90 days from Jan 1 of a leap year"""
        assert add_days(date(2024, 1, 1), 90) == date(2024, 3, 31)

    def test_add_days_non_leap_year(self):
        """Test 90 days from Jan 1 of a common year"""
        assert add_days(date(2023, 1, 1), 90) == date(2023, 4, 1)

    def test_add_days_accepts_strings(self):
        """Test ISO strings are parsed"""
        assert add_days("2024-01-01", 60) == date(2024, 3, 1)

    def test_days_between(self):
        """Test forward and backward differences"""
        assert days_between(date(2024, 1, 1), date(2024, 1, 10)) == 9
        assert days_between(date(2024, 1, 1), date(2023, 12, 20)) == -12
        assert days_between(date(2024, 1, 1), date(2024, 1, 1)) == 0

    def test_days_between_ignores_time_of_day(self):
        """Test datetimes are reduced to their date"""
        assert days_between(datetime(2024, 1, 1, 23, 59), datetime(2024, 1, 2, 0, 1)) == 1


class TestOverdue:
    """Test overdue checks"""

    def test_past_due_is_overdue(self):
        assert is_overdue(date(2023, 12, 31), date(2024, 1, 1))

    def test_due_today_is_not_overdue(self):
        assert not is_overdue(date(2024, 1, 1), date(2024, 1, 1))

    def test_missing_due_date_is_not_overdue(self):
        assert not is_overdue(None, date(2024, 1, 1))


class TestHelpers:
    """Test parsing, clamping and formatting"""

    @pytest.mark.parametrize("value,expected", [(9999, 180), (-5, 1), (90, 90), (1, 1), (180, 180)])
    def test_clamp(self, value, expected):
        assert clamp(value, 1, 180) == expected

    def test_to_date_blank_is_none(self):
        assert to_date("") is None
        assert to_date(None) is None

    def test_to_date_rejects_garbage(self):
        with pytest.raises(ValueError):
            to_date("not a date")

    def test_format_date(self):
        assert format_date(date(2024, 1, 5)) == "Jan 5, 2024"
        assert format_date(None) == "—"
