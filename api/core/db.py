"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`). Repositories never create their
own connections; they go through these helpers.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Transactions:
- `async with db.transaction() as conn:` pins one pooled connection.
  Pass `conn=conn` to the helpers below to run inside it.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from .errors import UnexpectedError
from .settings import env_float, env_int

logger = logging.getLogger(__name__)

_pool: asyncpg.Pool | None = None

# Faults that mean "the store is unreachable", not "the query is wrong".
_CONNECTION_FAULTS = (
    asyncpg.PostgresConnectionError,
    asyncpg.InterfaceError,
    TimeoutError,
    OSError,
)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=env_int("DB_POOL_MIN_SIZE", 1),
        max_size=env_int("DB_POOL_MAX_SIZE", 5),
        command_timeout=env_float("DB_COMMAND_TIMEOUT_S", 30.0),
    )
    logger.info("db_pool_opened")


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None
    logger.info("db_pool_closed")


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


@asynccontextmanager
async def _guard(operation: str) -> AsyncIterator[None]:
    try:
        yield
    except _CONNECTION_FAULTS as exc:
        logger.error("db_unavailable operation=%s error=%s", operation, type(exc).__name__)
        raise UnexpectedError("Database is temporarily unavailable.") from exc


@asynccontextmanager
async def transaction() -> AsyncIterator[asyncpg.Connection]:
    """
    Run the enclosed statements on one connection, committed together.

    Any exception inside the block rolls everything back.
    """
    async with _guard("transaction"):
        async with pool().acquire() as conn:
            async with conn.transaction():
                yield conn


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any, conn: asyncpg.Connection | None = None) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    async with _guard("fetch_one"):
        row = await (conn or pool()).fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any, conn: asyncpg.Connection | None = None) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    async with _guard("fetch_all"):
        rows = await (conn or pool()).fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def fetch_value(sql: str, *args: Any, conn: asyncpg.Connection | None = None) -> Any:
    async with _guard("fetch_value"):
        return await (conn or pool()).fetchval(sql, *args)


async def execute(sql: str, *args: Any, conn: asyncpg.Connection | None = None) -> str:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL). Returns the status tag, e.g. "DELETE 1".
    """
    async with _guard("execute"):
        return await (conn or pool()).execute(sql, *args)
