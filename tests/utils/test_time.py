"""
Tests for trading calendar and date helpers.

Verifies weekend skipping of the prior trading day and ISO date handling.
"""

import pytest
from datetime import date, datetime, timedelta, timezone

from mgap_app.utils.time import (
    format_iso_date, is_weekend, market_today, parse_iso_date, prior_trading_day
)


class TestPriorTradingDay:
    """Test prior_trading_day function."""

    def test_monday_returns_previous_friday(self):
        """Monday should resolve to the Friday before."""
        assert prior_trading_day("2024-01-15") == "2024-01-12"

    @pytest.mark.parametrize("day,expected", [
        ("2024-01-16", "2024-01-15"),  # Tuesday
        ("2024-01-17", "2024-01-16"),  # Wednesday
        ("2024-01-18", "2024-01-17"),  # Thursday
        ("2024-01-19", "2024-01-18"),  # Friday
    ])
    def test_tuesday_to_friday_returns_previous_day(self, day, expected):
        """Midweek days resolve to the calendar-previous day."""
        assert prior_trading_day(day) == expected

    def test_saturday_returns_friday(self):
        assert prior_trading_day("2024-01-20") == "2024-01-19"

    def test_sunday_returns_friday(self):
        assert prior_trading_day("2024-01-21") == "2024-01-19"

    def test_every_weekday_over_a_year(self):
        """Result is always a weekday strictly before the input."""
        start = date(2024, 1, 1)
        for offset in range(366):
            day = start + timedelta(days=offset)
            prior = date.fromisoformat(prior_trading_day(day))
            assert prior < day
            assert prior.weekday() < 5
            if day.weekday() in (0, 5, 6):
                assert prior.weekday() == 4
            else:
                assert prior == day - timedelta(days=1)

    def test_crosses_month_and_year(self):
        """Monday 2024-01-01 resolves to Friday 2023-12-29."""
        assert prior_trading_day("2024-01-01") == "2023-12-29"

    def test_holidays_are_not_skipped(self):
        """Only weekends are skipped; Republic Day 2024 (a Friday) is returned."""
        assert prior_trading_day("2024-01-29") == "2024-01-26"

    def test_accepts_date_objects(self):
        assert prior_trading_day(date(2024, 1, 15)) == "2024-01-12"
        assert prior_trading_day(datetime(2024, 1, 15, 9, 0)) == "2024-01-12"


class TestIsoDates:
    """Test ISO date parsing and formatting."""

    def test_parse_string(self):
        assert parse_iso_date("2024-01-15") == date(2024, 1, 15)

    def test_parse_strips_time_component(self):
        assert parse_iso_date("2024-01-15T09:15:00Z") == date(2024, 1, 15)

    def test_parse_invalid_raises(self):
        with pytest.raises(ValueError):
            parse_iso_date("15/01/2024")

    def test_parse_non_string_raises(self):
        with pytest.raises(ValueError):
            parse_iso_date(20240115)

    def test_format(self):
        assert format_iso_date(date(2024, 1, 5)) == "2024-01-05"

    def test_is_weekend(self):
        assert is_weekend("2024-01-13")
        assert is_weekend("2024-01-14")
        assert not is_weekend("2024-01-15")


class TestMarketToday:
    """Test market-local date resolution."""

    def test_late_utc_evening_is_next_day_in_india(self):
        """20:00 UTC is already 01:30 the next day in Asia/Kolkata."""
        now = datetime(2024, 1, 14, 20, 0, tzinfo=timezone.utc)
        assert market_today(now) == "2024-01-15"

    def test_custom_timezone(self):
        now = datetime(2024, 1, 14, 20, 0, tzinfo=timezone.utc)
        assert market_today(now, tz="UTC") == "2024-01-14"
