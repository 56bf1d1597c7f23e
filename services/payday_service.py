"""
services/payday_service.py
--------------------------
Payday arithmetic: the last working day of a month, the rule-driven payday
for a month, and forward/backward payday sequences.

Everything here is a pure function of its arguments. "Today" is always
passed in by the caller.
"""

from datetime import date
from typing import Optional

from config import NEXT_PAYDAYS_COUNT, PAST_PAYDAYS_COUNT
from models.cycle import Payday
from models.salary import FIXED_DAY, NTH_WEEKDAY
from utils.dates import clamp_day, last_day_of_month, previous_weekday, shift_month
from utils.logger import get_logger

logger = get_logger(__name__)


def last_working_day(year: int, month: int) -> date:
    """Latest Monday–Friday in the month, walking back from its last calendar day."""
    return previous_weekday(date(year, month, last_day_of_month(year, month)))


def payday_for_month(
    year: int,
    month: int,
    rule: Optional[str],
    fixed_day: Optional[int] = None,
    weekday_preference: Optional[int] = None,
) -> date:
    """
    Compute the payday for (year, month) under `rule`.

    - 'fixed_day': `fixed_day` clamped to the month, moved back to Friday if it
      lands on a weekend. Without a fixed day, the last working day is used.
      A weekend walk-back from the 1st can land in the previous month.
    - 'nth_weekday': not implemented yet, resolves like 'last_working_day'.
      `weekday_preference` is accepted for that rule but currently ignored.
    - 'last_working_day' and any unrecognised rule: last working day.
    """
    if rule == FIXED_DAY and fixed_day:
        return previous_weekday(clamp_day(year, month, fixed_day))
    if rule == NTH_WEEKDAY:
        logger.debug("nth_weekday rule resolves to last working day (preference=%s)", weekday_preference)
    return last_working_day(year, month)


def _payday_sequence(
    year: int,
    month: int,
    step: int,
    rule: Optional[str],
    fixed_day: Optional[int],
    weekday_preference: Optional[int],
    count: int,
) -> list[Payday]:
    paydays = []
    for _ in range(max(count, 0)):
        paydays.append(Payday(
            month=month,
            year=year,
            date=payday_for_month(year, month, rule, fixed_day, weekday_preference),
        ))
        year, month = shift_month(year, month, step)
    return paydays


def next_paydays(
    today: date,
    rule: Optional[str],
    fixed_day: Optional[int] = None,
    weekday_preference: Optional[int] = None,
    count: int = NEXT_PAYDAYS_COUNT,
) -> list[Payday]:
    """`count` paydays starting with the month of `today`, oldest first."""
    return _payday_sequence(today.year, today.month, 1, rule, fixed_day, weekday_preference, count)


def past_paydays(
    today: date,
    rule: Optional[str],
    fixed_day: Optional[int] = None,
    weekday_preference: Optional[int] = None,
    count: int = PAST_PAYDAYS_COUNT,
) -> list[Payday]:
    """`count` paydays starting with the month before `today`, newest first."""
    year, month = shift_month(today.year, today.month, -1)
    return _payday_sequence(year, month, -1, rule, fixed_day, weekday_preference, count)
