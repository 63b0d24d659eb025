"""
Local calendar helpers shared by goal evaluation and trend bucketing.

Naive timestamps are taken as already expressed in local time; aware
timestamps are converted to the configured zone before any day, hour or
weekday is read from them.
"""

from datetime import date, datetime, timedelta
from typing import List, Tuple

import pytz

WEEKDAY_NAMES = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']


def to_local(timestamp: datetime, tz: pytz.BaseTzInfo) -> datetime:
    if timestamp.tzinfo is None:
        return tz.localize(timestamp)
    return timestamp.astimezone(tz)


def local_day(timestamp: datetime, tz: pytz.BaseTzInfo) -> date:
    """Start-of-day key for a timestamp, as a calendar date."""
    return to_local(timestamp, tz).date()


def local_hour(timestamp: datetime, tz: pytz.BaseTzInfo) -> int:
    return to_local(timestamp, tz).hour


def week_start(day: date, first_weekday: int) -> date:
    offset = (day.weekday() - first_weekday) % 7
    return day - timedelta(days=offset)


def week_interval(day: date, first_weekday: int) -> Tuple[date, date]:
    """Returns the [start, end) date interval of the week containing day."""
    start = week_start(day, first_weekday)
    return start, start + timedelta(days=7)


def weekday_order(first_weekday: int) -> List[int]:
    """Weekday numbers (0=Monday) in calendar order starting at first_weekday."""
    return [(first_weekday + i) % 7 for i in range(7)]
