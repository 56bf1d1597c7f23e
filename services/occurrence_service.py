"""
services/occurrence_service.py
------------------------------
Expands scheduled payments into dated monthly occurrences and tracks their
paid/pending state.

`should_payment_occur_this_month` and `generate_occurrences_for_month` are
pure; `OccurrenceService` loads and persists through the repositories.
"""

from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional

from models.scheduled_payment import (
    CUSTOM,
    HALF_YEARLY,
    ONE_TIME,
    QUARTERLY,
    YEARLY,
    PaymentOccurrence,
    ScheduledPayment,
)
from repositories.occurrence_repo import OccurrenceRepository
from repositories.scheduled_payment_repo import ScheduledPaymentRepository
from utils.dates import clamp_day
from utils.logger import get_logger

logger = get_logger(__name__)


def _wrap_month(month: int) -> int:
    """Map any integer onto 1-12."""
    return (month - 1) % 12 + 1


def should_payment_occur_this_month(
    frequency: Optional[str],
    start_month: Optional[int],
    current_month: int,
    custom_interval_months: Optional[int] = None,
    current_year: Optional[int] = None,
    start_year: Optional[int] = None,
) -> bool:
    """
    Decide whether a payment with this frequency falls due in `current_month`.

    quarterly:   start, start+3, start+6 (wrapping); Jan/Apr/Jul/Oct without a start.
    half_yearly: start and start+6; Jan/Jul without a start.
    yearly:      start month only; January without a start.
    custom:      every `custom_interval_months` counted from (start_year,
                 start_month), January without a start month. Months before
                 the start are never due. Without both years the count runs
                 within the calendar year only. Monthly without an interval.
    monthly, one_time and anything unrecognised: every month.
    """
    if frequency == QUARTERLY:
        if not start_month:
            return current_month % 3 == 1
        return current_month in (start_month, _wrap_month(start_month + 3), _wrap_month(start_month + 6))
    if frequency == HALF_YEARLY:
        if not start_month:
            return current_month in (1, 7)
        return current_month in (start_month, _wrap_month(start_month + 6))
    if frequency == YEARLY:
        return current_month == (start_month or 1)
    if frequency == CUSTOM and custom_interval_months and custom_interval_months > 0:
        start_month = start_month or 1
        if current_year is None or start_year is None:
            return (current_month - start_month) % custom_interval_months == 0
        elapsed = (current_year * 12 + current_month) - (start_year * 12 + start_month)
        return elapsed >= 0 and elapsed % custom_interval_months == 0
    return True


def occurrence_due_date(payment: ScheduledPayment, month: int, year: int) -> date:
    """Concrete due date for the month; a day past month end is clamped to the last day."""
    return clamp_day(year, month, payment.due_date)


def generate_occurrences_for_month(
    scheduled_payments: Iterable[ScheduledPayment],
    month: int,
    year: int,
    existing: Iterable[PaymentOccurrence] = (),
    consumed_one_time_ids: Iterable[int] = (),
) -> list[PaymentOccurrence]:
    """
    Build the full occurrence list for (month, year).

    Args:
        scheduled_payments: Payment definitions; inactive ones are skipped.
        month, year: Target period.
        existing: Occurrences already stored for the period.
        consumed_one_time_ids: One-time payments that already own an
            occurrence in some period; they never get another. A one-time
            payment with a known `created_at` is only due in that month.

    Returns:
        Existing occurrences plus new pending ones, sorted by due date.
        An existing occurrence keeps its status and paid_at; a pending one has
        its due date refreshed if the payment's day changed. New occurrences
        have no id yet.
    """
    by_payment = {o.scheduled_payment_id: o for o in existing if (o.month, o.year) == (month, year)}
    consumed = set(consumed_one_time_ids)
    result = []

    for payment in scheduled_payments:
        if not payment.is_active():
            continue
        if not should_payment_occur_this_month(payment.frequency, payment.start_month, month,
                                               payment.custom_interval_months, year, payment.anchor_year):
            continue
        if payment.frequency == ONE_TIME and not payment.created_in(month, year):
            continue

        due = occurrence_due_date(payment, month, year)
        current = by_payment.pop(payment.id, None)
        if current is not None:
            if not current.is_paid() and current.due_date != due:
                current = replace(current, due_date=due)
            result.append(current)
            continue
        if payment.frequency == ONE_TIME and payment.id in consumed:
            continue
        result.append(PaymentOccurrence(scheduled_payment_id=payment.id, month=month, year=year, due_date=due))

    # Occurrences whose payment no longer qualifies are still reported, untouched.
    result.extend(by_payment.values())
    result.sort(key=lambda o: (o.due_date, o.scheduled_payment_id))
    return result


class OccurrenceService:
    """
    Handles persistence around the occurrence expander.

    Responsibilities:
        - Materialize a month's occurrences idempotently.
        - Mark occurrences paid / pending.
        - List overdue occurrences.
    """

    def __init__(
        self,
        payment_repo: Optional[ScheduledPaymentRepository] = None,
        occurrence_repo: Optional[OccurrenceRepository] = None,
    ):
        self.payment_repo = payment_repo or ScheduledPaymentRepository()
        self.occurrence_repo = occurrence_repo or OccurrenceRepository()

    def generate_for_month(self, user_id: int, month: int, year: int) -> list[PaymentOccurrence]:
        """
        Ensure every due payment of the user has an occurrence for (month, year).
        Safe to call repeatedly; paid occurrences are never reset.
        """
        payments = self.payment_repo.get_all(user_id, active_only=True)
        existing = self.occurrence_repo.get_for_period(user_id, month, year)
        stored = {o.id: o for o in existing}
        consumed = self.occurrence_repo.get_one_time_ids_with_occurrences(user_id)

        occurrences = []
        created = 0
        for occurrence in generate_occurrences_for_month(payments, month, year, existing, consumed):
            if occurrence.id is None:
                occurrence = self.occurrence_repo.add(occurrence)
                created += 1
            elif occurrence.due_date != stored[occurrence.id].due_date:
                self.occurrence_repo.update_due_date(occurrence.id, occurrence.due_date)
            occurrences.append(occurrence)

        logger.info(f"Occurrences for user {user_id} {month}/{year}: {len(occurrences)} total, {created} new")
        return occurrences

    def _get(self, occurrence_id: int) -> PaymentOccurrence:
        occurrence = self.occurrence_repo.get_by_id(occurrence_id)
        if occurrence is None:
            raise LookupError(f"Payment occurrence #{occurrence_id} not found")
        return occurrence

    def mark_paid(self, occurrence_id: int, paid_at: Optional[datetime] = None) -> PaymentOccurrence:
        occurrence = self._get(occurrence_id)
        updated = occurrence.mark_paid(paid_at or datetime.now())
        if updated is not occurrence:
            self.occurrence_repo.set_status(updated.id, updated.status, updated.paid_at)
            logger.info(f"Marked occurrence #{occurrence_id} paid")
        return updated

    def mark_unpaid(self, occurrence_id: int) -> PaymentOccurrence:
        occurrence = self._get(occurrence_id)
        updated = occurrence.mark_unpaid()
        if updated is not occurrence:
            self.occurrence_repo.set_status(updated.id, updated.status, None)
            logger.info(f"Marked occurrence #{occurrence_id} pending")
        return updated

    def get_overdue(self, user_id: int, today: Optional[date] = None) -> list[PaymentOccurrence]:
        """Pending occurrences whose due date has passed."""
        today = today or date.today()
        return [o for o in self.occurrence_repo.get_pending(user_id) if o.is_overdue(today)]
