"""
repositories/scheduled_payment_repo.py
--------------------------------------
Data access layer for scheduled (recurring) payments.
All SQL queries related to the `scheduled_payments` table live here.
"""

from db.connection import get_connection, release_connection
from models.scheduled_payment import ScheduledPayment


_COLUMNS = """
    id, user_id, name, amount, due_date, frequency, start_month,
    custom_interval_months, status, category_id, created_at
"""


class ScheduledPaymentRepository:
    """Read access to scheduled_payments; definitions are maintained by the settings flows."""

    # ── READ ──────────────────────────────────────────────

    def get_all(self, user_id: int, active_only: bool = True) -> list[ScheduledPayment]:
        """
        Get all scheduled payments for a user, ordered by due day.

        Args:
            user_id: Owner of the payments.
            active_only: If True, only return active payments.
        """
        sql = f"SELECT {_COLUMNS} FROM scheduled_payments WHERE user_id = %s"
        if active_only:
            sql += " AND status = 'active'"
        sql += " ORDER BY due_date ASC, id ASC;"

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                return [self._row_to_payment(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_payment(row: tuple) -> ScheduledPayment:
        """Convert a database row tuple to a ScheduledPayment domain object."""
        return ScheduledPayment(
            id=row[0],
            user_id=row[1],
            name=row[2],
            amount=float(row[3]),
            due_date=row[4],
            frequency=row[5],
            start_month=row[6],
            custom_interval_months=row[7],
            status=row[8],
            category_id=row[9],
            created_at=row[10],
        )
