"""
In-memory stand-ins for the repositories, injected into the services so the
orchestration layer can be exercised without PostgreSQL.
"""

from dataclasses import replace
from itertools import count

import pytest

from models.scheduled_payment import ONE_TIME, PENDING


class FakeScheduledPaymentRepository:
    def __init__(self, payments=()):
        self.payments = list(payments)

    def get_all(self, user_id, active_only=True):
        return [p for p in self.payments
                if p.user_id == user_id and (p.is_active() or not active_only)]


class FakeOccurrenceRepository:
    def __init__(self, payment_repo):
        self.payment_repo = payment_repo
        self.rows = {}
        self._ids = count(1)

    def _owned_by(self, user_id):
        ids = {p.id for p in self.payment_repo.payments if p.user_id == user_id}
        return [o for o in self.rows.values() if o.scheduled_payment_id in ids]

    def add(self, occurrence):
        for stored in self.rows.values():
            if stored.period == occurrence.period:
                return stored
        stored = replace(occurrence, id=next(self._ids))
        self.rows[stored.id] = stored
        return stored

    def get_by_id(self, occurrence_id):
        return self.rows.get(occurrence_id)

    def get_for_period(self, user_id, month, year):
        return [o for o in self._owned_by(user_id) if (o.month, o.year) == (month, year)]

    def get_pending(self, user_id):
        return [o for o in self._owned_by(user_id) if o.status == PENDING]

    def get_one_time_ids_with_occurrences(self, user_id):
        one_time = {p.id for p in self.payment_repo.payments
                    if p.user_id == user_id and p.frequency == ONE_TIME}
        return {o.scheduled_payment_id for o in self.rows.values() if o.scheduled_payment_id in one_time}

    def set_status(self, occurrence_id, status, paid_at):
        self.rows[occurrence_id] = replace(self.rows[occurrence_id], status=status, paid_at=paid_at)
        return True

    def update_due_date(self, occurrence_id, due_date):
        self.rows[occurrence_id] = replace(self.rows[occurrence_id], due_date=due_date)
        return True


class FakeSalaryRepository:
    def __init__(self, profile=None, cycles=()):
        self.profile = profile
        self.cycles = {(c.salary_profile_id, c.month, c.year): c for c in cycles}

    def get_active_profile(self, user_id):
        if self.profile and self.profile.user_id == user_id and self.profile.is_active:
            return self.profile
        return None

    def get_latest_cycle(self, profile_id, on_or_before):
        known = [c for c in self.cycles.values()
                 if c.salary_profile_id == profile_id and c.pay_date <= on_or_before]
        return max(known, key=lambda c: c.pay_date, default=None)

    def upsert_expected_cycle(self, cycle):
        key = (cycle.salary_profile_id, cycle.month, cycle.year)
        stored = self.cycles.get(key)
        if stored is not None:
            cycle = replace(stored, expected_pay_date=cycle.expected_pay_date,
                            expected_amount=cycle.expected_amount)
        self.cycles[key] = cycle
        return cycle

    def record_actual_pay(self, cycle):
        key = (cycle.salary_profile_id, cycle.month, cycle.year)
        stored = self.cycles.get(key)
        if stored is not None:
            cycle = replace(stored, actual_pay_date=cycle.actual_pay_date,
                            actual_amount=cycle.actual_amount,
                            transaction_id=cycle.transaction_id or stored.transaction_id)
        self.cycles[key] = cycle
        return cycle


@pytest.fixture
def payment_repo():
    return FakeScheduledPaymentRepository()


@pytest.fixture
def occurrence_repo(payment_repo):
    return FakeOccurrenceRepository(payment_repo)
