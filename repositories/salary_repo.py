"""
repositories/salary_repo.py
---------------------------
Data access layer for salary profiles and salary cycles.
All SQL queries related to the `salary_profiles` and `salary_cycles` tables live here.
"""

from datetime import date
from typing import Optional

from db.connection import get_connection, release_connection
from models.salary import SalaryCycle, SalaryProfile
from utils.logger import get_logger

logger = get_logger(__name__)

_PROFILE_COLUMNS = """
    id, user_id, payday_rule, fixed_day, weekday_preference,
    month_cycle_start_rule, month_cycle_start_day, salary_amount, is_active, created_at
"""

_CYCLE_COLUMNS = """
    id, salary_profile_id, month, year, expected_pay_date, expected_amount,
    actual_pay_date, actual_amount, transaction_id
"""


class SalaryRepository:
    """Repository for salary_profiles and salary_cycles."""

    # ── PROFILES ──────────────────────────────────────────

    def get_active_profile(self, user_id: int) -> Optional[SalaryProfile]:
        """Most recently created active profile of the user, if any."""
        sql = f"""
            SELECT {_PROFILE_COLUMNS} FROM salary_profiles
            WHERE user_id = %s AND is_active = TRUE
            ORDER BY created_at DESC, id DESC
            LIMIT 1;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                row = cur.fetchone()
                return self._row_to_profile(row) if row else None
        finally:
            release_connection(conn)

    # ── CYCLES ────────────────────────────────────────────

    def get_latest_cycle(self, profile_id: int, on_or_before: date) -> Optional[SalaryCycle]:
        """
        The cycle with the latest pay date (actual, else expected) that is not
        after `on_or_before`. Planned future cycles are ignored.
        """
        sql = f"""
            SELECT {_CYCLE_COLUMNS} FROM salary_cycles
            WHERE salary_profile_id = %s
              AND COALESCE(actual_pay_date, expected_pay_date) <= %s
            ORDER BY COALESCE(actual_pay_date, expected_pay_date) DESC
            LIMIT 1;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (profile_id, on_or_before))
                row = cur.fetchone()
                return self._row_to_cycle(row) if row else None
        finally:
            release_connection(conn)

    def upsert_expected_cycle(self, cycle: SalaryCycle) -> SalaryCycle:
        """
        Insert a planned cycle, or refresh the expectation of an existing one.
        Actual pay data already recorded is left alone.
        """
        sql = f"""
            INSERT INTO salary_cycles
                (salary_profile_id, month, year, expected_pay_date, expected_amount)
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (salary_profile_id, month, year) DO UPDATE
                SET expected_pay_date = EXCLUDED.expected_pay_date,
                    expected_amount = EXCLUDED.expected_amount
            RETURNING {_CYCLE_COLUMNS};
        """
        return self._write_cycle(sql, (
            cycle.salary_profile_id, cycle.month, cycle.year,
            cycle.expected_pay_date, cycle.expected_amount,
        ))

    def record_actual_pay(self, cycle: SalaryCycle) -> SalaryCycle:
        """Insert or update a cycle with the actual pay date and amount."""
        sql = f"""
            INSERT INTO salary_cycles
                (salary_profile_id, month, year, expected_pay_date, expected_amount,
                 actual_pay_date, actual_amount, transaction_id)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (salary_profile_id, month, year) DO UPDATE
                SET actual_pay_date = EXCLUDED.actual_pay_date,
                    actual_amount = EXCLUDED.actual_amount,
                    transaction_id = COALESCE(EXCLUDED.transaction_id, salary_cycles.transaction_id)
            RETURNING {_CYCLE_COLUMNS};
        """
        return self._write_cycle(sql, (
            cycle.salary_profile_id, cycle.month, cycle.year,
            cycle.expected_pay_date, cycle.expected_amount,
            cycle.actual_pay_date, cycle.actual_amount, cycle.transaction_id,
        ))

    # ── HELPERS ───────────────────────────────────────────

    def _write_cycle(self, sql: str, params: tuple) -> SalaryCycle:
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                row = cur.fetchone()
            conn.commit()
            cycle = self._row_to_cycle(row)
            logger.info(f"Saved salary cycle {cycle.month}/{cycle.year} for profile #{cycle.salary_profile_id}")
            return cycle
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to save salary cycle: {e}")
            raise
        finally:
            release_connection(conn)

    @staticmethod
    def _row_to_profile(row: tuple) -> SalaryProfile:
        """Convert a database row tuple to a SalaryProfile domain object."""
        return SalaryProfile(
            id=row[0],
            user_id=row[1],
            payday_rule=row[2],
            fixed_day=row[3],
            weekday_preference=row[4],
            month_cycle_start_rule=row[5],
            month_cycle_start_day=row[6],
            salary_amount=float(row[7]) if row[7] is not None else None,
            is_active=row[8],
            created_at=row[9],
        )

    @staticmethod
    def _row_to_cycle(row: tuple) -> SalaryCycle:
        """Convert a database row tuple to a SalaryCycle domain object."""
        return SalaryCycle(
            id=row[0],
            salary_profile_id=row[1],
            month=row[2],
            year=row[3],
            expected_pay_date=row[4],
            expected_amount=float(row[5]),
            actual_pay_date=row[6],
            actual_amount=float(row[7]) if row[7] is not None else None,
            transaction_id=row[8],
        )
