"""
CareScope Date Utilities
Calendar-day arithmetic behind every derived status
"""

import logging
from typing import Optional, Union
from datetime import date, datetime, timedelta
from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str]


def to_date(value: Optional[DateLike]) -> Optional[date]:
    """
    Coerce a date, datetime or date string to a calendar date

    Args:
        value: Date-like value; empty strings and None pass through as None

    Returns:
        Calendar date or None
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if not text:
        return None
    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        logger.warning(f"Could not parse date '{value}': {e}")
        raise ValueError(f"Invalid date: {value}") from e


def add_days(start: DateLike, days: int) -> date:
    """Calendar date `days` after `start` (negative moves backwards)"""
    return to_date(start) + timedelta(days=days)


def days_between(start: DateLike, end: DateLike) -> int:
    """Whole days from `start` to `end`; negative when `end` is earlier"""
    return (to_date(end) - to_date(start)).days


def is_overdue(due: Optional[DateLike], today: DateLike) -> bool:
    """True when a due date exists and lies strictly before today"""
    due_date = to_date(due)
    if due_date is None:
        return False
    return due_date < to_date(today)


def clamp(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, value))


def format_date(value: Optional[DateLike]) -> str:
    """Print form used on documents, e.g. 'Jan 5, 2024'; missing dates print as an em dash"""
    d = to_date(value)
    if d is None:
        return "—"
    return f"{d.strftime('%b')} {d.day}, {d.year}"
