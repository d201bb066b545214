"""Database connection pool and common dependencies for the API."""
import threading
from contextlib import contextmanager
from typing import Generator, Optional

import structlog
from psycopg2 import pool
from psycopg2.extensions import connection as Connection

from .config import settings

logger = structlog.get_logger("fepro.db")

_pool: Optional[pool.ThreadedConnectionPool] = None
_pool_lock = threading.Lock()


def get_pool() -> pool.ThreadedConnectionPool:
    """Return the process-wide pool, creating it on first use.

    Raises:
        psycopg2.OperationalError: If the database is unreachable.
    """
    global _pool
    if _pool is None:
        with _pool_lock:
            if _pool is None:
                _pool = pool.ThreadedConnectionPool(
                    settings.DB_POOL_MIN,
                    settings.DB_POOL_MAX,
                    settings.DATABASE_URL,
                    connect_timeout=settings.DB_CONNECT_TIMEOUT,
                )
                logger.info(
                    "db_pool_initialized",
                    min_conn=settings.DB_POOL_MIN,
                    max_conn=settings.DB_POOL_MAX,
                )
    return _pool


@contextmanager
def get_db() -> Generator[Connection, None, None]:
    """Borrow a pooled connection for one transaction.

    Commits when the block exits cleanly, rolls back on any exception.
    """
    db_pool = get_pool()
    conn = db_pool.getconn()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        db_pool.putconn(conn)


def ping_database() -> int:
    """Run a trivial query and return the contractor row count."""
    with get_db() as conn:
        with conn.cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM contractors")
            return cursor.fetchone()[0]


def close_pool() -> None:
    """Close all pooled connections."""
    global _pool
    with _pool_lock:
        if _pool is not None:
            _pool.closeall()
            _pool = None
            logger.info("db_pool_closed")


def get_contractor_service():
    """FastAPI dependency returning the shared contractor service."""
    from .services.contractor_service import contractor_service

    return contractor_service
