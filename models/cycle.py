"""
models/cycle.py
---------------
Value objects produced by the payday and cycle calculators.
"""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class Payday:
    """The computed payday for one (month, year)."""
    month: int
    year: int
    date: date


@dataclass(frozen=True)
class CycleWindow:
    """
    A financial-month window.

    Both ends are inclusive and at whole-second resolution: `cycle_end` is
    exactly one second before the following window's `cycle_start`.
    """
    cycle_start: datetime
    cycle_end: datetime
    label: str
    is_salary_cycle: bool

    def contains(self, moment: datetime) -> bool:
        return self.cycle_start <= moment <= self.cycle_end

    def to_dict(self) -> dict:
        """Serialisable form handed to route handlers."""
        return {
            "cycleStart": self.cycle_start.isoformat(),
            "cycleEnd": self.cycle_end.isoformat(),
            "label": self.label,
            "isSalaryCycle": self.is_salary_cycle,
        }
