"""
utils/dates.py
--------------
Calendar helpers shared by the payday, cycle and occurrence services.
All values are naive local dates/datetimes; no timezone conversion happens here.
"""

import calendar
from datetime import date, datetime, time, timedelta

from dateutil.relativedelta import relativedelta

# Fixed English abbreviations so labels don't depend on the process locale.
MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

ONE_SECOND = timedelta(seconds=1)


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """Return the (year, month) pair `offset` months away, rolling the year as needed."""
    shifted = date(year, month, 1) + relativedelta(months=offset)
    return shifted.year, shifted.month


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day(year: int, month: int, day: int) -> date:
    """
    Build a date in the given month, clamping `day` into [1, last day].

    Used wherever a configured day-of-month (fixed payday, cycle start day,
    scheduled payment due day) may not exist in every month.
    """
    day = max(1, min(day, last_day_of_month(year, month)))
    return date(year, month, day)


def is_weekend(d: date) -> bool:
    return d.weekday() >= 5


def previous_weekday(d: date) -> date:
    """Walk backward from `d` until a Monday–Friday is found (returns `d` itself if it is one)."""
    while is_weekend(d):
        d -= timedelta(days=1)
    return d


def start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min)


def month_label(year: int, month: int) -> str:
    """E.g. 'Feb 2026'."""
    return f"{MONTH_ABBR[month - 1]} {year}"


def cycle_label(start: datetime, end: datetime) -> str:
    """
    Human label for a cycle window.

    'Mar 2026' when both ends sit in the same calendar month,
    otherwise 'Feb 27 - Mar 30'.
    """
    if (start.year, start.month) == (end.year, end.month):
        return month_label(start.year, start.month)
    return (
        f"{MONTH_ABBR[start.month - 1]} {start.day} - "
        f"{MONTH_ABBR[end.month - 1]} {end.day}"
    )
