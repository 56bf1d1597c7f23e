"""
db/connection.py
----------------
Shared PostgreSQL pool for the salary, scheduled-payment and occurrence
repositories. Occurrence generation and mark-paid requests can arrive on
different worker threads, so the pool is psycopg2's ThreadedConnectionPool.
"""

from typing import Optional

import psycopg2
from psycopg2 import pool

from config import DATABASE_URL
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.ThreadedConnectionPool | None = None


def init_pool(min_conn: int = 1, max_conn: int = 5, dsn: Optional[str] = None) -> None:
    """
    Open the pool once per process; later calls are ignored.

    Args:
        min_conn: Connections opened up front.
        max_conn: Upper bound shared by all repositories.
        dsn: Connection string; defaults to config.DATABASE_URL (built from DB_* in .env).

    Raises:
        psycopg2.OperationalError: If the paycycle database is unreachable.
    """
    global _pool
    if _pool is not None:
        return
    try:
        _pool = pool.ThreadedConnectionPool(min_conn, max_conn, dsn or DATABASE_URL)
        logger.info(f"Paycycle pool ready ({min_conn}-{max_conn} connections).")
    except psycopg2.OperationalError as e:
        logger.error(f"Could not open paycycle pool: {e}")
        raise


def get_connection():
    """
    Borrow a connection for one repository call.

    Every borrower hands it back through release_connection() in a `finally`.

    Raises:
        RuntimeError: If init_pool() has not run, e.g. a service was built with
            the default repositories inside a unit test.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return _pool.getconn()


def release_connection(conn) -> None:
    """Hand a borrowed connection back; a no-op once the pool is closed."""
    if _pool is not None:
        _pool.putconn(conn)


def close_pool() -> None:
    """Close every pooled connection, e.g. after db.init_db has created the schema."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("Paycycle pool closed.")
