from datetime import date, datetime

from models.salary import (CALENDAR_MODE, FIXED_DAY, FIXED_DAY_MODE, LAST_WORKING_DAY, SALARY_DAY_MODE,
                           CycleSettings, SalaryCycle, SalaryProfile)
from models.scheduled_payment import PAID, PENDING, PaymentOccurrence, ScheduledPayment
from utils.dates import cycle_label, shift_month


def test_cycle_settings_resolution():
    assert CycleSettings.from_profile(None).mode == CALENDAR_MODE
    assert CycleSettings.from_profile(SalaryProfile(user_id=1, is_active=False)).mode == CALENDAR_MODE

    salary = CycleSettings.from_profile(SalaryProfile(user_id=1, payday_rule="biweekly", fixed_day=0))
    assert salary.mode == SALARY_DAY_MODE
    assert salary.payday_rule == "last_working_day"
    assert salary.fixed_day is None

    fixed = CycleSettings.from_profile(SalaryProfile(user_id=1, month_cycle_start_rule="fixed_day",
                                                     month_cycle_start_day=25))
    assert fixed.mode == FIXED_DAY_MODE
    assert fixed.cycle_start_day == 25

    missing_rule = CycleSettings.from_profile(SalaryProfile(user_id=1, month_cycle_start_rule=""))
    assert missing_rule.mode == SALARY_DAY_MODE


def test_unknown_payday_rule_falls_back_to_last_working_day():
    for rule in ("fixed-day", "", None, "LAST_WORKING_DAY"):
        settings = CycleSettings.from_profile(SalaryProfile(user_id=1, payday_rule=rule))
        assert settings.payday_rule == LAST_WORKING_DAY

    fixed = CycleSettings.from_profile(SalaryProfile(user_id=1, payday_rule=FIXED_DAY, fixed_day=25))
    assert fixed.payday_rule == FIXED_DAY
    assert fixed.fixed_day == 25


def test_salary_cycle_pay_date_prefers_actual():
    cycle = SalaryCycle(1, 1, 2026, expected_pay_date=date(2026, 1, 30))
    assert cycle.pay_date == date(2026, 1, 30)
    assert not cycle.is_received()
    cycle.actual_pay_date = date(2026, 1, 29)
    assert cycle.pay_date == date(2026, 1, 29)
    assert cycle.is_received()


def test_occurrence_transitions():
    occurrence = PaymentOccurrence(1, 3, 2026, date(2026, 3, 5), id=1)
    paid = occurrence.mark_paid(datetime(2026, 3, 5, 10, 0))
    assert paid.status == PAID
    assert occurrence.status == PENDING
    assert paid.mark_paid(datetime(2026, 3, 9)) is paid
    assert occurrence.mark_unpaid() is occurrence

    back = paid.mark_unpaid()
    assert back.status == PENDING
    assert back.paid_at is None


def test_overdue_is_derived():
    occurrence = PaymentOccurrence(1, 3, 2026, date(2026, 3, 5))
    assert not occurrence.is_overdue(date(2026, 3, 5))
    assert occurrence.is_overdue(date(2026, 3, 6))
    assert not occurrence.mark_paid(datetime(2026, 3, 7)).is_overdue(date(2026, 3, 8))


def test_scheduled_payment_str():
    payment = ScheduledPayment(user_id=1, name="Rent", amount=1200, due_date=1)
    assert str(payment) == "Rent: 1200.00 on day 1 (monthly)"
    assert payment.is_active()


def test_date_helpers():
    assert shift_month(2026, 12, 1) == (2027, 1)
    assert shift_month(2026, 1, -1) == (2025, 12)
    assert shift_month(2026, 5, -17) == (2024, 12)
    assert cycle_label(datetime(2026, 3, 1), datetime(2026, 3, 31, 23, 59, 59)) == "Mar 2026"
    assert cycle_label(datetime(2026, 2, 27), datetime(2026, 3, 30, 23, 59, 59)) == "Feb 27 - Mar 30"
