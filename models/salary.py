"""
models/salary.py
----------------
Domain models for a household's salary profile and its recorded pay cycles,
plus the resolved settings the cycle calculator works from.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from config import DEFAULT_CYCLE_START_RULE

# Payday rules
LAST_WORKING_DAY = "last_working_day"
FIXED_DAY = "fixed_day"
NTH_WEEKDAY = "nth_weekday"
PAYDAY_RULES = (LAST_WORKING_DAY, FIXED_DAY, NTH_WEEKDAY)

# Month-cycle start rules
SALARY_DAY = "salary_day"
CYCLE_FIXED_DAY = "fixed_day"
CYCLE_START_RULES = (SALARY_DAY, CYCLE_FIXED_DAY)

# Resolved cycle modes
CALENDAR_MODE = "calendar"
FIXED_DAY_MODE = "fixed_day"
SALARY_DAY_MODE = "salary_day"


@dataclass
class SalaryProfile:
    """
    How and when a household gets paid.

    Attributes:
        id: Database primary key (None for new records).
        user_id: Owner of the profile.
        payday_rule: 'last_working_day' | 'fixed_day' | 'nth_weekday'.
        fixed_day: Day of month (1-31) used by the 'fixed_day' rule.
        weekday_preference: Stored for 'nth_weekday'; no rule reads it yet.
        month_cycle_start_rule: 'salary_day' | 'fixed_day'.
        month_cycle_start_day: Day of month (1-31) for the 'fixed_day' cycle start.
        salary_amount: Expected net pay, copied onto planned salary cycles.
        is_active: When False, cycles fall back to calendar months.
        created_at: Timestamp when the record was created.
    """
    user_id: int
    payday_rule: str = LAST_WORKING_DAY
    fixed_day: Optional[int] = None
    weekday_preference: Optional[int] = None
    month_cycle_start_rule: str = SALARY_DAY
    month_cycle_start_day: Optional[int] = None
    salary_amount: Optional[float] = None
    is_active: bool = True
    id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass
class SalaryCycle:
    """
    One month's pay event for a salary profile.
    At most one row exists per (salary_profile_id, month, year).
    """
    salary_profile_id: int
    month: int
    year: int
    expected_pay_date: date
    expected_amount: float = 0.0
    actual_pay_date: Optional[date] = None
    actual_amount: Optional[float] = None
    transaction_id: Optional[int] = None
    id: Optional[int] = None

    @property
    def pay_date(self) -> Optional[date]:
        """Actual pay date when recorded, otherwise the expected one."""
        return self.actual_pay_date or self.expected_pay_date

    def is_received(self) -> bool:
        return self.actual_pay_date is not None


@dataclass(frozen=True)
class CycleSettings:
    """
    A salary profile with every optional field resolved to what the
    calculators will actually use. Built once per calculation via `from_profile`.
    """
    mode: str
    payday_rule: str = LAST_WORKING_DAY
    fixed_day: Optional[int] = None
    weekday_preference: Optional[int] = None
    cycle_start_day: Optional[int] = None

    @classmethod
    def from_profile(cls, profile: Optional[SalaryProfile]) -> "CycleSettings":
        if profile is None or not profile.is_active:
            return cls(mode=CALENDAR_MODE)

        payday_rule = profile.payday_rule if profile.payday_rule in PAYDAY_RULES else LAST_WORKING_DAY
        common = dict(
            payday_rule=payday_rule,
            fixed_day=profile.fixed_day or None,
            weekday_preference=profile.weekday_preference,
        )

        start_rule = profile.month_cycle_start_rule or DEFAULT_CYCLE_START_RULE
        if start_rule == CYCLE_FIXED_DAY:
            # A fixed-day cycle without a day degrades to calendar months.
            if not profile.month_cycle_start_day:
                return cls(mode=CALENDAR_MODE, **common)
            return cls(mode=FIXED_DAY_MODE, cycle_start_day=profile.month_cycle_start_day, **common)
        if start_rule == SALARY_DAY:
            return cls(mode=SALARY_DAY_MODE, **common)
        return cls(mode=CALENDAR_MODE, **common)
