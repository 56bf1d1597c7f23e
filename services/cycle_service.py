"""
services/cycle_service.py
-------------------------
Financial-month cycle windows anchored to payday (or to a fixed day of the
month) instead of the calendar month.

The module-level functions are pure: they take a salary profile, the most
recent salary cycle and the current moment, and return a CycleWindow.
`CycleService` wires them to the salary repository.
"""

from datetime import date, datetime
from typing import Optional

from config import NEXT_PAYDAYS_COUNT, PAST_PAYDAYS_COUNT
from models.cycle import CycleWindow, Payday
from models.salary import (
    FIXED_DAY_MODE,
    SALARY_DAY_MODE,
    CycleSettings,
    SalaryCycle,
    SalaryProfile,
)
from repositories.salary_repo import SalaryRepository
from services.payday_service import next_paydays, past_paydays, payday_for_month
from utils.dates import ONE_SECOND, clamp_day, cycle_label, shift_month, start_of_day
from utils.logger import get_logger

logger = get_logger(__name__)


def _window(start: datetime, next_start: datetime, is_salary_cycle: bool) -> CycleWindow:
    end = next_start - ONE_SECOND
    return CycleWindow(
        cycle_start=start,
        cycle_end=end,
        label=cycle_label(start, end),
        is_salary_cycle=is_salary_cycle,
    )


def _calendar_window(now: datetime) -> CycleWindow:
    year, month = shift_month(now.year, now.month, 1)
    return _window(start_of_day(date(now.year, now.month, 1)), start_of_day(date(year, month, 1)), False)


def _fixed_day_window(settings: CycleSettings, now: datetime) -> CycleWindow:
    day = settings.cycle_start_day
    this_start = start_of_day(clamp_day(now.year, now.month, day))
    if now >= this_start:
        year, month = shift_month(now.year, now.month, 1)
        return _window(this_start, start_of_day(clamp_day(year, month, day)), False)
    year, month = shift_month(now.year, now.month, -1)
    return _window(start_of_day(clamp_day(year, month, day)), this_start, False)


def _rule_payday(settings: CycleSettings, year: int, month: int, offset: int = 0) -> datetime:
    year, month = shift_month(year, month, offset)
    return start_of_day(payday_for_month(
        year, month, settings.payday_rule, settings.fixed_day, settings.weekday_preference,
    ))


def _payday_window(settings: CycleSettings, now: datetime) -> CycleWindow:
    """
    Bracket `now` between two consecutive rule-derived paydays.

    Normally this is [this month's payday, next month's) when `now` is on or
    after this month's payday, else [last month's, this month's). The loops
    only run further when a weekend walk-back pushes a payday across a month
    boundary.
    """
    offset = 0
    start = _rule_payday(settings, now.year, now.month)
    while now < start:
        offset -= 1
        start = _rule_payday(settings, now.year, now.month, offset)
    next_start = _rule_payday(settings, now.year, now.month, offset + 1)
    while now >= next_start:
        offset += 1
        start, next_start = next_start, _rule_payday(settings, now.year, now.month, offset + 1)
    return _window(start, next_start, True)


def _salary_window(settings: CycleSettings, last_cycle: Optional[SalaryCycle], now: datetime) -> CycleWindow:
    last_pay = last_cycle.pay_date if last_cycle else None
    if last_pay:
        start = start_of_day(last_pay)
        next_start = _rule_payday(settings, last_pay.year, last_pay.month, 1)
        if start <= now < next_start:
            return _window(start, next_start, True)
        logger.debug("Salary cycle paid %s does not cover %s, using rule paydays", last_pay, now)
    return _payday_window(settings, now)


def _window_for(settings: CycleSettings, last_cycle: Optional[SalaryCycle], now: datetime) -> CycleWindow:
    if settings.mode == FIXED_DAY_MODE:
        return _fixed_day_window(settings, now)
    if settings.mode == SALARY_DAY_MODE:
        return _salary_window(settings, last_cycle, now)
    return _calendar_window(now)


def current_cycle_dates(
    salary_profile: Optional[SalaryProfile],
    last_salary_cycle: Optional[SalaryCycle],
    now: datetime,
) -> CycleWindow:
    """
    Return the financial-month window containing `now`.

    - No profile, or an inactive one: the calendar month.
    - 'fixed_day' cycle start: from `month_cycle_start_day` of this month
      (or the previous month if that day hasn't come yet).
    - 'salary_day' cycle start: from the last recorded pay date (actual, else
      expected) up to the following month's payday, if `now` falls in between;
      otherwise bracketed by rule-derived paydays.
    """
    return _window_for(CycleSettings.from_profile(salary_profile), last_salary_cycle, now)


def next_cycle_dates(
    salary_profile: Optional[SalaryProfile],
    last_salary_cycle: Optional[SalaryCycle],
    now: datetime,
) -> CycleWindow:
    """Return the window that starts one second after the current window ends."""
    settings = CycleSettings.from_profile(salary_profile)
    current = _window_for(settings, last_salary_cycle, now)
    anchor = current.cycle_end + ONE_SECOND
    following = _window_for(settings, None, anchor)
    # A recorded pay date may differ from the rule's payday; start at the anchor so windows stay contiguous.
    return _window(anchor, following.cycle_end + ONE_SECOND, following.is_salary_cycle)


class CycleService:
    """
    Loads salary data and answers cycle questions for a user.

    Responsibilities:
        - Current / next financial-month windows.
        - Upcoming and past payday listings.
        - Planning expected salary cycles and recording actual pay.
    """

    def __init__(self, repo: Optional[SalaryRepository] = None):
        self.repo = repo or SalaryRepository()

    def _load(self, user_id: int, now: datetime) -> tuple[Optional[SalaryProfile], Optional[SalaryCycle]]:
        profile = self.repo.get_active_profile(user_id)
        if profile is None:
            return None, None
        return profile, self.repo.get_latest_cycle(profile.id, on_or_before=now.date())

    def get_current_cycle(self, user_id: int, now: Optional[datetime] = None) -> CycleWindow:
        now = now or datetime.now()
        profile, last_cycle = self._load(user_id, now)
        return current_cycle_dates(profile, last_cycle, now)

    def get_next_cycle(self, user_id: int, now: Optional[datetime] = None) -> CycleWindow:
        now = now or datetime.now()
        profile, last_cycle = self._load(user_id, now)
        return next_cycle_dates(profile, last_cycle, now)

    def upcoming_paydays(self, user_id: int, today: Optional[date] = None,
                         count: int = NEXT_PAYDAYS_COUNT) -> list[Payday]:
        profile = self.repo.get_active_profile(user_id)
        if profile is None:
            return []
        return next_paydays(today or date.today(), profile.payday_rule, profile.fixed_day,
                            profile.weekday_preference, count)

    def recent_paydays(self, user_id: int, today: Optional[date] = None,
                     count: int = PAST_PAYDAYS_COUNT) -> list[Payday]:
        profile = self.repo.get_active_profile(user_id)
        if profile is None:
            return []
        return past_paydays(today or date.today(), profile.payday_rule, profile.fixed_day,
                            profile.weekday_preference, count)

    def plan_salary_cycles(self, profile: SalaryProfile, today: Optional[date] = None,
                           count: int = NEXT_PAYDAYS_COUNT) -> list[SalaryCycle]:
        """
        Store an expected SalaryCycle for each of the next `count` paydays.
        Existing rows keep their actual pay data; only expectations are refreshed.
        """
        planned = []
        for payday in next_paydays(today or date.today(), profile.payday_rule, profile.fixed_day,
                                   profile.weekday_preference, count):
            cycle = SalaryCycle(
                salary_profile_id=profile.id,
                month=payday.month,
                year=payday.year,
                expected_pay_date=payday.date,
                expected_amount=profile.salary_amount or 0.0,
            )
            planned.append(self.repo.upsert_expected_cycle(cycle))
        logger.info(f"Planned {len(planned)} salary cycles for profile #{profile.id}")
        return planned

    def record_actual_pay(
        self,
        profile: SalaryProfile,
        pay_date: date,
        amount: float,
        month: Optional[int] = None,
        year: Optional[int] = None,
        transaction_id: Optional[int] = None,
    ) -> SalaryCycle:
        """
        Record the salary actually received for a (month, year), defaulting to
        the month of `pay_date`.
        """
        month = month or pay_date.month
        year = year or pay_date.year
        cycle = SalaryCycle(
            salary_profile_id=profile.id,
            month=month,
            year=year,
            expected_pay_date=payday_for_month(year, month, profile.payday_rule,
                                               profile.fixed_day, profile.weekday_preference),
            expected_amount=profile.salary_amount or 0.0,
            actual_pay_date=pay_date,
            actual_amount=amount,
            transaction_id=transaction_id,
        )
        saved = self.repo.record_actual_pay(cycle)
        logger.info(f"Recorded salary {amount:.2f} on {pay_date} for profile #{profile.id} ({month}/{year})")
        return saved
