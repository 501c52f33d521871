"""
Month-year buckets.

Every transaction and salary profile belongs to a month key such as
"October 2026". Nothing in here reads the clock: callers pass `today`.
"""

import calendar
from datetime import date, datetime
from typing import Optional

MONTH_KEY_FORMAT = "%B %Y"


def month_key(day: date, fmt: str = MONTH_KEY_FORMAT) -> str:
    """Format the month containing `day` as a bucket key."""
    return day.strftime(fmt)


def parse_month_key(key: str, fmt: str = MONTH_KEY_FORMAT) -> Optional[date]:
    """
    Parse a bucket key back to the first day of its month.

    Returns None for keys that do not match the format.
    """
    if not key:
        return None
    try:
        return datetime.strptime(f"01 {key.strip()}", f"%d {fmt}").date()
    except ValueError:
        return None


def shift_months(day: date, offset: int) -> date:
    """Move `day` by `offset` calendar months, clamping to the month end."""
    if offset == 0:
        return day
    index = day.year * 12 + (day.month - 1) + offset
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def current_month_key(
    today: date,
    offset: int = 0,
    fmt: str = MONTH_KEY_FORMAT,
) -> str:
    """Bucket key for `today`, shifted by the debug month offset."""
    return month_key(shift_months(today, offset), fmt)


def calendar_days_left(today: date) -> int:
    """Days between `today` and the last day of its month."""
    last_day = calendar.monthrange(today.year, today.month)[1]
    return last_day - today.day
