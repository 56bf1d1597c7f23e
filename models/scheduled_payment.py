"""
models/scheduled_payment.py
---------------------------
Domain models for recurring bills and their concrete monthly occurrences.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

# Frequencies
MONTHLY = "monthly"
QUARTERLY = "quarterly"
HALF_YEARLY = "half_yearly"
YEARLY = "yearly"
ONE_TIME = "one_time"
CUSTOM = "custom"
FREQUENCIES = (MONTHLY, QUARTERLY, HALF_YEARLY, YEARLY, ONE_TIME, CUSTOM)

# Occurrence statuses
PENDING = "pending"
PAID = "paid"


@dataclass
class ScheduledPayment:
    """
    Represents a recurring bill definition (rent, insurance premium, subscription...).

    Attributes:
        id: Database primary key (None for new records).
        user_id: Owner of the payment.
        name: Friendly name of the payment (e.g., 'Rent').
        amount: Payment amount.
        due_date: Day of month the payment falls on (1-28 when validated upstream).
        frequency: 'monthly' | 'quarterly' | 'half_yearly' | 'yearly' | 'one_time' | 'custom'.
        start_month: First month (1-12) of the schedule for non-monthly frequencies.
        custom_interval_months: Month interval for the 'custom' frequency,
            counted from start_month of the creation year.
        status: 'active' | 'inactive'.
        category_id: Optional spending category.
        created_at: Timestamp when the record was created.
    """
    user_id: int
    name: str
    amount: float
    due_date: int
    frequency: str = MONTHLY
    start_month: Optional[int] = None
    custom_interval_months: Optional[int] = None
    status: str = "active"
    category_id: Optional[int] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def anchor_year(self) -> Optional[int]:
        """Year the schedule counts from: the year the payment was created."""
        return self.created_at.year if self.created_at else None

    def created_in(self, month: int, year: int) -> bool:
        """True when created in (month, year), or when the creation date is unknown."""
        if self.created_at is None:
            return True
        return (self.created_at.year, self.created_at.month) == (year, month)

    def __str__(self) -> str:
        return f"{self.name}: {self.amount:.2f} on day {self.due_date} ({self.frequency})"


@dataclass
class PaymentOccurrence:
    """
    One dated instance of a ScheduledPayment for a specific (month, year).

    Only two transitions exist: pending -> paid and paid -> pending.
    Overdue is derived, never stored.
    """
    scheduled_payment_id: int
    month: int
    year: int
    due_date: date
    status: str = PENDING
    paid_at: Optional[datetime] = None
    affect_transaction: bool = True
    affect_account_balance: bool = True
    id: Optional[int] = None

    @property
    def period(self) -> tuple[int, int, int]:
        return self.scheduled_payment_id, self.month, self.year

    def is_paid(self) -> bool:
        return self.status == PAID

    def is_overdue(self, today: date) -> bool:
        return self.status == PENDING and self.due_date < today

    def mark_paid(self, paid_at: datetime) -> "PaymentOccurrence":
        """Return a paid copy; an already-paid occurrence is returned unchanged."""
        if self.is_paid():
            return self
        return replace(self, status=PAID, paid_at=paid_at)

    def mark_unpaid(self) -> "PaymentOccurrence":
        """Return a pending copy; a pending occurrence is returned unchanged."""
        if not self.is_paid():
            return self
        return replace(self, status=PENDING, paid_at=None)
