"""
Trading calendar and ISO date helpers.

The trading calendar here is weekend-only: exchange holidays are not
skipped, so the prior trading day after a holiday resolves to the holiday
itself and the run fails for lack of reference data.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Union
from zoneinfo import ZoneInfo

DateLike = Union[str, date, datetime]

MARKET_TIMEZONE = "Asia/Kolkata"

# date.weekday(): Monday == 0 ... Saturday == 5, Sunday == 6
_WEEKEND = (5, 6)


def parse_iso_date(value: DateLike) -> date:
    """
    Parse an ISO calendar date.

    Args:
        value: YYYY-MM-DD string, date or datetime

    Returns:
        Calendar date

    Raises:
        ValueError: If the string is not an ISO calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected ISO date string, got {type(value).__name__}")

    return date.fromisoformat(value.strip()[:10])


def format_iso_date(value: DateLike) -> str:
    """Format a date-like value as YYYY-MM-DD."""
    return parse_iso_date(value).isoformat()


def is_weekend(value: DateLike) -> bool:
    """Check whether the date falls on Saturday or Sunday."""
    return parse_iso_date(value).weekday() in _WEEKEND


def prior_trading_day(value: DateLike) -> str:
    """
    Get the most recent trading day strictly before the given date.

    Steps back one day, then keeps stepping back while the result is a
    Saturday or Sunday. Monday, Saturday and Sunday all resolve to the
    preceding Friday.

    Args:
        value: Reference date

    Returns:
        Prior trading day as YYYY-MM-DD
    """
    day = parse_iso_date(value) - timedelta(days=1)
    while day.weekday() in _WEEKEND:
        day -= timedelta(days=1)
    return day.isoformat()


def market_today(now: Optional[datetime] = None, tz: str = MARKET_TIMEZONE) -> str:
    """
    Get today's date in the market timezone.

    Args:
        now: Aware datetime to convert, defaults to the current time
        tz: IANA timezone name of the market

    Returns:
        Market-local date as YYYY-MM-DD
    """
    zone = ZoneInfo(tz)
    if now is None:
        return datetime.now(zone).date().isoformat()
    return now.astimezone(zone).date().isoformat()
