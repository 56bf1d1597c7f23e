from datetime import date, timedelta

import pytest

from services.payday_service import last_working_day, next_paydays, past_paydays, payday_for_month
from utils.dates import last_day_of_month, shift_month

MONTHS = [(year, month) for year in range(2000, 2041) for month in range(1, 13)]


def test_last_working_day_is_a_weekday_in_the_month():
    for year, month in MONTHS:
        d = last_working_day(year, month)
        assert (d.year, d.month) == (year, month)
        assert d.weekday() < 5
        # everything after it in the month is weekend
        for day in range(d.day + 1, last_day_of_month(year, month) + 1):
            assert date(year, month, day).weekday() >= 5


def test_last_working_day_known_months():
    assert last_working_day(2026, 1) == date(2026, 1, 30)   # 31st is a Saturday
    assert last_working_day(2026, 5) == date(2026, 5, 29)   # 31st is a Sunday
    assert last_working_day(2026, 3) == date(2026, 3, 31)


def test_fixed_day_is_clamped_to_short_month():
    # Feb 28 2025 is a Friday: clamped, not walked back
    assert payday_for_month(2025, 2, "fixed_day", 31) == date(2025, 2, 28)
    # Feb 28 2026 is a Saturday: clamped, then back to Friday
    assert payday_for_month(2026, 2, "fixed_day", 31) == date(2026, 2, 27)


def test_fixed_day_on_weekend_moves_back_to_friday():
    assert payday_for_month(2026, 3, "fixed_day", 15) == date(2026, 3, 13)


def test_fixed_day_one_on_sunday_crosses_into_previous_month():
    assert payday_for_month(2026, 2, "fixed_day", 1) == date(2026, 1, 30)
    assert payday_for_month(2026, 11, "fixed_day", 1) == date(2026, 10, 30)


def test_fixed_day_stays_in_month_from_day_three():
    for year, month in MONTHS[:120]:
        for fixed in range(3, 32):
            d = payday_for_month(year, month, "fixed_day", fixed)
            assert (d.year, d.month) == (year, month)
            assert d.weekday() < 5


@pytest.mark.parametrize("fixed_day", [None, 0])
def test_fixed_day_rule_without_day_uses_last_working_day(fixed_day):
    assert payday_for_month(2026, 1, "fixed_day", fixed_day) == date(2026, 1, 30)


def test_fixed_day_out_of_range_values_are_clamped():
    assert payday_for_month(2026, 4, "fixed_day", 45) == date(2026, 4, 30)
    assert payday_for_month(2026, 4, "fixed_day", -3) == date(2026, 4, 1)


@pytest.mark.parametrize("rule", ["nth_weekday", "last_working_day", "weekly", "", None])
def test_other_rules_resolve_to_last_working_day(rule):
    for year, month in MONTHS[:36]:
        assert payday_for_month(year, month, rule, 10, 3) == last_working_day(year, month)


def test_next_paydays_walks_forward_from_current_month():
    paydays = next_paydays(date(2026, 11, 18), "last_working_day", count=6)
    assert len(paydays) == 6
    assert [(p.month, p.year) for p in paydays] == [
        (11, 2026), (12, 2026), (1, 2027), (2, 2027), (3, 2027), (4, 2027),
    ]
    assert paydays[0].date == date(2026, 11, 30)
    assert paydays[2].date == date(2027, 1, 29)


def test_next_paydays_are_consecutive_months():
    for today in (date(2026, 1, 1), date(2026, 7, 31), date(2026, 12, 31)):
        paydays = next_paydays(today, "fixed_day", 20, count=6)
        assert len(paydays) == 6
        for prev, cur in zip(paydays, paydays[1:]):
            assert shift_month(prev.year, prev.month, 1) == (cur.year, cur.month)
            assert cur.date > prev.date


def test_past_paydays_start_last_month_and_go_backward():
    paydays = past_paydays(date(2026, 1, 15), "last_working_day", count=3)
    assert [(p.month, p.year) for p in paydays] == [(12, 2025), (11, 2025), (10, 2025)]
    for prev, cur in zip(paydays, paydays[1:]):
        assert shift_month(prev.year, prev.month, -1) == (cur.year, cur.month)
        assert cur.date < prev.date


def test_payday_sequences_with_zero_count_are_empty():
    assert next_paydays(date(2026, 1, 1), "last_working_day", count=0) == []
    assert past_paydays(date(2026, 1, 1), "last_working_day", count=0) == []


def test_paydays_mirror_each_other():
    today = date(2026, 6, 10)
    forward = next_paydays(today - timedelta(days=365), "fixed_day", 25, count=12)
    backward = past_paydays(today, "fixed_day", 25, count=12)
    assert list(reversed(backward)) == forward
