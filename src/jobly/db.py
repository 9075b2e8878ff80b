import logging
import re
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence, Tuple

import psycopg2
import psycopg2.extras
from psycopg2.pool import ThreadedConnectionPool

from jobly import config

logger = logging.getLogger(__name__)

_POOL: Optional[ThreadedConnectionPool] = None

_PLACEHOLDER = re.compile(r"\$(\d+)")


# PUBLIC_INTERFACE
def init_db_pool() -> None:
    """Initialize the global PostgreSQL connection pool."""
    global _POOL
    if _POOL is not None:
        return

    minconn, maxconn = config.pool_size()
    _POOL = ThreadedConnectionPool(minconn=minconn, maxconn=maxconn, dsn=config.database_dsn())
    logger.info("Database pool ready (min=%s, max=%s)", minconn, maxconn)


# PUBLIC_INTERFACE
def close_db_pool() -> None:
    """Close every pooled connection."""
    global _POOL
    if _POOL is None:
        return
    _POOL.closeall()
    _POOL = None
    logger.info("Database pool closed")


@contextmanager
def _get_conn():
    if _POOL is None:
        init_db_pool()
    assert _POOL is not None
    conn = _POOL.getconn()
    try:
        yield conn
    except Exception:
        conn.rollback()
        raise
    finally:
        _POOL.putconn(conn)


def _dict_cursor(conn):
    return conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor)


def to_pyformat(query: str, params: Optional[Sequence[Any]] = None) -> Tuple[str, Optional[List[Any]]]:
    """
    Rewrite `$n` placeholders into psycopg2's `%s` form.

    psycopg2 binds positionally in order of appearance, so the parameters are
    reordered (and repeated) to follow the placeholders. Literal `%` in the
    statement is escaped. A statement without placeholders is returned as is,
    with None for the parameters, so psycopg2 skips formatting entirely.

    >>> to_pyformat("UPDATE t SET a=$2 WHERE id=$1", [7, "x"])
    ('UPDATE t SET a=%s WHERE id=%s', ['x', 7])
    """
    if not _PLACEHOLDER.search(query):
        return query, None

    params = list(params or [])
    ordered: List[Any] = []

    def _bind(match: "re.Match[str]") -> str:
        position = int(match.group(1))
        if not 1 <= position <= len(params):
            raise ValueError(f"No value bound for ${position} ({len(params)} given)")
        ordered.append(params[position - 1])
        return "%s"

    return _PLACEHOLDER.sub(_bind, query.replace("%", "%%")), ordered


# PUBLIC_INTERFACE
def fetch_one(query: str, params: Optional[Sequence[Any]] = None) -> Optional[Dict[str, Any]]:
    """Fetch a single row as a dict, or None."""
    sql, bound = to_pyformat(query, params)
    with _get_conn() as conn:
        with _dict_cursor(conn) as cur:
            cur.execute(sql, bound)
            row = cur.fetchone()
            return dict(row) if row else None


# PUBLIC_INTERFACE
def fetch_all(query: str, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
    """Fetch all rows as dicts."""
    sql, bound = to_pyformat(query, params)
    with _get_conn() as conn:
        with _dict_cursor(conn) as cur:
            cur.execute(sql, bound)
            rows = cur.fetchall()
            return [dict(r) for r in rows]


# PUBLIC_INTERFACE
def execute(query: str, params: Optional[Sequence[Any]] = None) -> int:
    """Execute a statement (INSERT/UPDATE/DELETE). Returns affected rowcount."""
    sql, bound = to_pyformat(query, params)
    with _get_conn() as conn:
        with conn.cursor() as cur:
            cur.execute(sql, bound)
            affected = cur.rowcount
            conn.commit()
            return affected


# PUBLIC_INTERFACE
def execute_returning(query: str, params: Optional[Sequence[Any]] = None) -> Optional[Dict[str, Any]]:
    """Execute a statement with RETURNING, commit, and return the first row (or None)."""
    sql, bound = to_pyformat(query, params)
    with _get_conn() as conn:
        with _dict_cursor(conn) as cur:
            cur.execute(sql, bound)
            row = cur.fetchone()
            conn.commit()
            return dict(row) if row else None
