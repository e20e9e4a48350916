"""Query Executor: runs caller-supplied SQL on a borrowed pooled connection.

Invariants:
    - acquire / execute / release is a strict bracket: the connection goes back
      to its pool exactly once, on success and on failure
    - SQL text is passed to the driver as-is. It is never validated, rewritten
      or authorized here; that is the host's job.
    - Failures are logged with message and traceback, then re-raised unchanged
    - probe_connection swallows nothing except timeouts, and only when asked to

Design Decisions:
    - exec_driver_sql over text(): positional driver parameters, and no
      SQLAlchemy bind-param parsing of colons inside raw SQL
    - One statement per call. asyncpg prepares the text, so a ";"-separated
      batch fails with the driver error; callers split batches themselves
"""

import errno
import logging
import time
from collections.abc import Sequence
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncConnection

from app.core.domain_types import QueryResult
from app.core.errors import BridgeError
from app.infrastructure.database import BackendPool

logger = logging.getLogger(__name__)


async def execute(
    pool: BackendPool, sql: str, params: Sequence[Any] | None = None,
) -> QueryResult:
    """Execute *sql* with positional *params* on a connection from *pool*."""
    try:
        async with pool.connection() as conn:
            logger.info(sql, extra={"backend": pool.name})
            start = time.perf_counter()
            result = await _run(conn, sql, params)
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.info(
                "Executed query",
                extra={
                    "backend": pool.name, "query": sql,
                    "duration_ms": duration_ms, "row_count": result.row_count,
                },
            )
            return result
    except Exception as e:
        logger.error(
            f"Query error: {e}", exc_info=True,
            extra={"backend": pool.name, "query": sql, **_error_extra(e)},
        )
        raise


async def _run(
    conn: AsyncConnection, sql: str, params: Sequence[Any] | None,
) -> QueryResult:
    if params:
        cursor = await conn.exec_driver_sql(sql, tuple(params))
    else:
        cursor = await conn.exec_driver_sql(sql)
    if cursor.returns_rows:
        rows = [dict(row) for row in cursor.mappings().all()]
        row_count = len(rows)
    else:
        rows = []
        row_count = max(cursor.rowcount, 0)
    await conn.commit()
    return QueryResult(rows=rows, row_count=row_count)


async def probe_connection(
    pool: BackendPool, *, ignore_timeouts: bool = False,
) -> bool:
    """Borrow and immediately release one connection.

    Returns True when the connection was established. With
    ``ignore_timeouts`` a connection timeout is logged and reported as False
    (best-effort reachability check); any other failure is re-raised.
    """
    try:
        async with pool.connection():
            pass
    except Exception as e:
        logger.error(
            f"Database connection error: {e}", exc_info=True,
            extra={"backend": pool.name, **_error_extra(e)},
        )
        if is_timeout(e):
            logger.warning(
                "Database connection timeout", extra={"backend": pool.name},
            )
            if ignore_timeouts:
                return False
        raise
    logger.info("Database connection established", extra={"backend": pool.name})
    return True


async def health_check(pool: BackendPool) -> bool:
    """Readiness check for one backend. Never raises."""
    try:
        return await probe_connection(pool, ignore_timeouts=True)
    except Exception:
        return False


def is_timeout(exc: BaseException) -> bool:
    """True if *exc*, or an error it wraps, is a connection timeout."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, (TimeoutError, PoolTimeoutError)):
            return True
        if isinstance(current, OSError) and current.errno == errno.ETIMEDOUT:
            return True
        current = getattr(current, "orig", None) or current.__cause__
    return False


async def list_tables(pool: BackendPool, schema: str | None = None) -> list[str]:
    """Table names in *schema* (the backend's default schema when None)."""
    async with pool.connection() as conn:
        names = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).get_table_names(schema=schema),
        )
    logger.info(
        f"Listed {len(names)} tables",
        extra={"backend": pool.name, "row_count": len(names)},
    )
    return names


async def select_columns(
    pool: BackendPool, table: str, columns: Sequence[str] | None = None,
) -> QueryResult:
    """SELECT *columns* (all when empty) from *table*, identifiers quoted."""
    column_list = (
        ", ".join(quote_identifier(pool, c) for c in columns) if columns else "*"
    )
    sql = f"SELECT {column_list} FROM {quote_identifier(pool, table)}"
    return await execute(pool, sql)


def quote_identifier(pool: BackendPool, name: str) -> str:
    """Quote a possibly dotted identifier (schema.table) part by part."""
    preparer = pool.engine.dialect.identifier_preparer
    return ".".join(preparer.quote(part) for part in name.split("."))


def _error_extra(exc: Exception) -> dict:
    if isinstance(exc, BridgeError):
        return exc.log_extra()
    return {"error_code": type(exc).__name__}
