"""
repositories/occurrence_repo.py
-------------------------------
Data access layer for payment occurrences.
The UNIQUE(scheduled_payment_id, month, year) constraint is what keeps
concurrent generators from inserting duplicates; `add` relies on it.
"""

from datetime import date, datetime
from typing import Optional

from db.connection import get_connection, release_connection
from models.scheduled_payment import ONE_TIME, PENDING, PaymentOccurrence
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = """
    o.id, o.scheduled_payment_id, o.month, o.year, o.due_date, o.status,
    o.paid_at, o.affect_transaction, o.affect_account_balance
"""


class OccurrenceRepository:
    """Repository for the payment_occurrences table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, occurrence: PaymentOccurrence) -> PaymentOccurrence:
        """
        Insert an occurrence unless one already exists for its payment and period.

        Returns:
            The stored row: the new one, or the existing one when another
            caller inserted it first.
        """
        insert_sql = """
            INSERT INTO payment_occurrences
                (scheduled_payment_id, month, year, due_date, status, paid_at,
                 affect_transaction, affect_account_balance)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (scheduled_payment_id, month, year) DO NOTHING
            RETURNING id;
        """
        select_sql = f"""
            SELECT {_COLUMNS} FROM payment_occurrences o
            WHERE o.scheduled_payment_id = %s AND o.month = %s AND o.year = %s;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(insert_sql, (
                    occurrence.scheduled_payment_id, occurrence.month, occurrence.year,
                    occurrence.due_date, occurrence.status, occurrence.paid_at,
                    occurrence.affect_transaction, occurrence.affect_account_balance,
                ))
                row = cur.fetchone()
                if row is None:
                    cur.execute(select_sql, occurrence.period)
                    stored = self._row_to_occurrence(cur.fetchone())
                else:
                    occurrence.id = row[0]
                    stored = occurrence
            conn.commit()
            if row is not None:
                logger.info(
                    f"Added occurrence #{stored.id} for payment #{stored.scheduled_payment_id} "
                    f"({stored.month}/{stored.year}, due {stored.due_date})"
                )
            return stored
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add occurrence for payment #{occurrence.scheduled_payment_id}: {e}")
            raise
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, occurrence_id: int) -> Optional[PaymentOccurrence]:
        sql = f"SELECT {_COLUMNS} FROM payment_occurrences o WHERE o.id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (occurrence_id,))
                row = cur.fetchone()
                return self._row_to_occurrence(row) if row else None
        finally:
            release_connection(conn)

    def get_for_period(self, user_id: int, month: int, year: int) -> list[PaymentOccurrence]:
        """All occurrences of the user's payments for (month, year)."""
        sql = f"""
            SELECT {_COLUMNS} FROM payment_occurrences o
            JOIN scheduled_payments p ON p.id = o.scheduled_payment_id
            WHERE p.user_id = %s AND o.month = %s AND o.year = %s
            ORDER BY o.due_date ASC, o.id ASC;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id, month, year))
                return [self._row_to_occurrence(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_pending(self, user_id: int) -> list[PaymentOccurrence]:
        sql = f"""
            SELECT {_COLUMNS} FROM payment_occurrences o
            JOIN scheduled_payments p ON p.id = o.scheduled_payment_id
            WHERE p.user_id = %s AND o.status = %s
            ORDER BY o.due_date ASC, o.id ASC;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id, PENDING))
                return [self._row_to_occurrence(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_one_time_ids_with_occurrences(self, user_id: int) -> set[int]:
        """Ids of the user's one-time payments that already have an occurrence."""
        sql = """
            SELECT DISTINCT o.scheduled_payment_id FROM payment_occurrences o
            JOIN scheduled_payments p ON p.id = o.scheduled_payment_id
            WHERE p.user_id = %s AND p.frequency = %s;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id, ONE_TIME))
                return {r[0] for r in cur.fetchall()}
        finally:
            release_connection(conn)

    # ── UPDATE ────────────────────────────────────────────

    def set_status(self, occurrence_id: int, status: str, paid_at: Optional[datetime]) -> bool:
        sql = "UPDATE payment_occurrences SET status = %s, paid_at = %s WHERE id = %s;"
        return self._update(sql, (status, paid_at, occurrence_id), occurrence_id)

    def update_due_date(self, occurrence_id: int, due_date: date) -> bool:
        """Move a pending occurrence's due date; paid rows are never touched."""
        sql = "UPDATE payment_occurrences SET due_date = %s WHERE id = %s AND status = %s;"
        return self._update(sql, (due_date, occurrence_id, PENDING), occurrence_id)

    # ── HELPERS ───────────────────────────────────────────

    def _update(self, sql: str, params: tuple, occurrence_id: int) -> bool:
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                updated = cur.rowcount > 0
            conn.commit()
            return updated
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to update occurrence #{occurrence_id}: {e}")
            raise
        finally:
            release_connection(conn)

    @staticmethod
    def _row_to_occurrence(row: tuple) -> PaymentOccurrence:
        """Convert a database row tuple to a PaymentOccurrence domain object."""
        return PaymentOccurrence(
            id=row[0],
            scheduled_payment_id=row[1],
            month=row[2],
            year=row[3],
            due_date=row[4],
            status=row[5],
            paid_at=row[6],
            affect_transaction=row[7],
            affect_account_balance=row[8],
        )
