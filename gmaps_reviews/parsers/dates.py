"""
Relative Date Parsing

Turns review timestamps such as "3 weeks ago" or "a year ago" into absolute
``YYYY-MM-DD`` dates. Absolute dates pass through unchanged, as does
anything unrecognised.
"""

import calendar
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

_ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}')
_UNITS = r'(second|minute|hour|day|week|month|year)'
_NUMERIC_RELATIVE = re.compile(r'(\d+)\s*' + _UNITS + r's?\s*ago', re.IGNORECASE)
_SINGLE_RELATIVE = re.compile(r'\ban?\s+' + _UNITS + r'\s*ago', re.IGNORECASE)


def _shift_months(moment: datetime, months: int) -> datetime:
    """Move back ``months`` calendar months, clamping to the month's last day."""
    index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def subtract_duration(moment: datetime, amount: int, unit: str) -> datetime:
    """Subtract ``amount`` units (second..year) from ``moment``."""
    unit = unit.lower()
    if unit == 'month':
        return _shift_months(moment, amount)
    if unit == 'year':
        return _shift_months(moment, amount * 12)
    if unit == 'week':
        return moment - timedelta(days=7 * amount)
    return moment - timedelta(**{unit + 's': amount})


def parse_relative_date(value: Optional[str], now: Optional[datetime] = None) -> str:
    """
    Normalise a review date to ``YYYY-MM-DD``.

    Args:
        value: Raw date text ("2 weeks ago", "an hour ago", "2024-05-01")
        now: Reference instant; defaults to the current UTC time

    Returns:
        ISO calendar date, the input unchanged if it is already absolute,
        unrecognised or out of range, or "" for empty input
    """
    if not value:
        return ''

    if _ISO_DATE.match(value):
        return value

    if now is None:
        now = datetime.now(timezone.utc)

    match = _NUMERIC_RELATIVE.search(value)
    if match:
        amount, unit = int(match.group(1)), match.group(2)
    else:
        match = _SINGLE_RELATIVE.search(value)
        if not match:
            return value
        amount, unit = 1, match.group(1)

    try:
        moment = subtract_duration(now, amount, unit)
    except (ValueError, OverflowError):
        # Offset falls outside the representable date range
        return value
    return moment.date().isoformat()
