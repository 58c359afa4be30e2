"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Every helper accepts an optional `conn` keyword so the same repository code
can run on the pool or inside `transaction()`.
"""

from __future__ import annotations

import json
import ssl
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from . import settings

_pool: asyncpg.Pool | None = None


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = settings.env_str("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def _ssl_context() -> ssl.SSLContext | None:
    # Hosted Postgres providers commonly present certificates we do not pin.
    if settings.env_str("DATABASE_SSL").lower() != "require":
        return None
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


async def _init_connection(conn: asyncpg.Connection) -> None:
    for type_name in ("json", "jsonb"):
        await conn.set_type_codec(
            type_name,
            encoder=json.dumps,
            decoder=json.loads,
            schema="pg_catalog",
        )


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=settings.env_int("DB_POOL_MIN", 1),
        max_size=settings.env_int("DB_POOL_MAX", 5),
        command_timeout=30,
        ssl=_ssl_context(),
        init=_init_connection,
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _executor(conn: asyncpg.Connection | None) -> asyncpg.Connection | asyncpg.Pool:
    return conn if conn is not None else pool()


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any, conn: asyncpg.Connection | None = None) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await _executor(conn).fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any, conn: asyncpg.Connection | None = None) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await _executor(conn).fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def fetch_val(sql: str, *args: Any, conn: asyncpg.Connection | None = None) -> Any:
    """
    Run a query and return the first column of the first row.
    """
    return await _executor(conn).fetchval(sql, *args)


async def execute(sql: str, *args: Any, conn: asyncpg.Connection | None = None) -> None:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL). No result returned.
    """
    await _executor(conn).execute(sql, *args)


@asynccontextmanager
async def transaction() -> AsyncIterator[asyncpg.Connection]:
    """
    Acquire a connection and run the block inside BEGIN/COMMIT.

    Any exception rolls the transaction back and propagates.
    """
    async with pool().acquire() as conn:
        async with conn.transaction():
            yield conn


async def table_columns(table: str, *, conn: asyncpg.Connection | None = None) -> set[str]:
    rows = await fetch_all(
        """
        SELECT column_name
        FROM information_schema.columns
        WHERE table_schema = current_schema()
          AND table_name = $1
        """,
        table,
        conn=conn,
    )
    return {str(r["column_name"]) for r in rows}


async def table_exists(table: str, *, conn: asyncpg.Connection | None = None) -> bool:
    row = await fetch_one(
        """
        SELECT 1 AS ok
        FROM information_schema.tables
        WHERE table_schema = current_schema()
          AND table_name = $1
        """,
        table,
        conn=conn,
    )
    return row is not None
