"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Salary profiles: how and when a household gets paid
CREATE TABLE IF NOT EXISTS salary_profiles (
    id                      SERIAL PRIMARY KEY,
    user_id                 BIGINT NOT NULL,
    payday_rule             VARCHAR(20) NOT NULL DEFAULT 'last_working_day',
    fixed_day               INT,
    weekday_preference      INT,
    month_cycle_start_rule  VARCHAR(20) NOT NULL DEFAULT 'salary_day',
    month_cycle_start_day   INT,
    salary_amount           NUMERIC(12,2),
    is_active               BOOLEAN DEFAULT TRUE,
    created_at              TIMESTAMPTZ DEFAULT NOW()
);

-- Salary cycles: one expected/actual pay event per profile and month
CREATE TABLE IF NOT EXISTS salary_cycles (
    id                  SERIAL PRIMARY KEY,
    salary_profile_id   INT NOT NULL REFERENCES salary_profiles(id) ON DELETE CASCADE,
    month               INT NOT NULL CHECK (month BETWEEN 1 AND 12),
    year                INT NOT NULL,
    expected_pay_date   DATE NOT NULL,
    expected_amount     NUMERIC(12,2) NOT NULL DEFAULT 0,
    actual_pay_date     DATE,
    actual_amount       NUMERIC(12,2),
    transaction_id      BIGINT,
    UNIQUE(salary_profile_id, month, year)
);

-- Scheduled payments: recurring bill definitions
CREATE TABLE IF NOT EXISTS scheduled_payments (
    id                      SERIAL PRIMARY KEY,
    user_id                 BIGINT NOT NULL,
    name                    VARCHAR(100) NOT NULL,
    amount                  NUMERIC(12,2) NOT NULL,
    due_date                INT NOT NULL CHECK (due_date BETWEEN 1 AND 28),
    frequency               VARCHAR(20) NOT NULL DEFAULT 'monthly'
                            CHECK (frequency IN ('monthly', 'quarterly', 'half_yearly', 'yearly', 'one_time', 'custom')),
    start_month             INT CHECK (start_month BETWEEN 1 AND 12),
    custom_interval_months  INT,
    status                  VARCHAR(10) NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'inactive')),
    category_id             BIGINT,
    created_at              TIMESTAMPTZ DEFAULT NOW()
);

-- Payment occurrences: one dated instance per payment and month
CREATE TABLE IF NOT EXISTS payment_occurrences (
    id                      SERIAL PRIMARY KEY,
    scheduled_payment_id    INT NOT NULL REFERENCES scheduled_payments(id) ON DELETE CASCADE,
    month                   INT NOT NULL CHECK (month BETWEEN 1 AND 12),
    year                    INT NOT NULL,
    due_date                DATE NOT NULL,
    status                  VARCHAR(10) NOT NULL DEFAULT 'pending' CHECK (status IN ('pending', 'paid')),
    paid_at                 TIMESTAMP,
    affect_transaction      BOOLEAN DEFAULT TRUE,
    affect_account_balance  BOOLEAN DEFAULT TRUE,
    UNIQUE(scheduled_payment_id, month, year)
);

-- Indexes for faster queries
CREATE INDEX IF NOT EXISTS idx_salary_profiles_user ON salary_profiles(user_id) WHERE is_active = TRUE;
CREATE INDEX IF NOT EXISTS idx_scheduled_payments_user ON scheduled_payments(user_id) WHERE status = 'active';
CREATE INDEX IF NOT EXISTS idx_occurrences_period ON payment_occurrences(year, month);
CREATE INDEX IF NOT EXISTS idx_occurrences_pending ON payment_occurrences(due_date) WHERE status = 'pending';
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from db.connection import init_pool, close_pool
    init_pool()
    create_tables()
    close_pool()
    print("Database schema created successfully.")
