"""
Calendar helpers shared by the models and the billing engine.

All arithmetic here is on calendar dates (no times, no timezones).
Month addition clamps to the end of the target month: Jan 31 + 1 month
is Feb 28 (Feb 29 in a leap year), never an early-March rollover.
"""

import calendar
from datetime import date, datetime
from typing import Any, Optional


def parse_iso_date(value: Any) -> Optional[date]:
    """
    Parse an ISO 8601 date (or datetime) into a calendar date.

    Anything that cannot be read as a valid calendar date returns None
    instead of raising. Stored records treat such values as "no date".
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    # Full timestamps as written by JavaScript's toISOString()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month."""
    return calendar.monthrange(year, month)[1]


def month_end(day: date) -> date:
    """Last day of the month containing `day`."""
    return day.replace(day=days_in_month(day.year, day.month))


def add_months(day: date, months: int) -> date:
    """
    Add calendar months, clamping the day to the target month's length.

    Examples:
        add_months(date(2025, 1, 31), 1)  -> date(2025, 2, 28)
        add_months(date(2024, 1, 31), 1)  -> date(2024, 2, 29)
        add_months(date(2024, 2, 29), 12) -> date(2025, 2, 28)
    """
    index = day.year * 12 + (day.month - 1) + months
    year, month_index = divmod(index, 12)
    month = month_index + 1
    return date(year, month, min(day.day, days_in_month(year, month)))
