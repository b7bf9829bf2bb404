"""
Database connection factory utilities for the Airmen Registry.

Provides the DSN, a retrying synchronous connection (schema setup, seeding)
and the async connection pool used by the record gateway. The PoolManager
owns the pool so the CLI can close it once a command finishes.

Retries apply to acquiring a connection only; statements are never retried.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import psycopg
from psycopg import Connection, sql
from psycopg_pool import AsyncConnectionPool
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from airmen_registry.config import Settings, get_settings
from airmen_registry.utils.logging import get_logger

log = get_logger(__name__)

SCHEMA_PATH = Path(__file__).with_name("init.sql")


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


class PoolManager:
    """
    Owns the async connection pool for one process.

    The pool is created lazily on first use and must be closed explicitly
    with `close()` (an async pool cannot be closed from an atexit hook).
    """

    def __init__(self, dsn: Optional[str] = None, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._dsn = dsn or build_dsn(self._settings)
        self._pool: Optional[AsyncConnectionPool] = None

    async def get_pool(self) -> AsyncConnectionPool:
        """
        Get or open the asynchronous connection pool.

        Returns
        -------
        AsyncConnectionPool
            The managed async pool instance.
        """
        if self._pool is None:
            pool = AsyncConnectionPool(
                conninfo=self._dsn,
                min_size=self._settings.db_pool_min_size,
                max_size=self._settings.db_pool_max_size,
                open=False,
            )
            await pool.open()
            self._pool = pool
            log.debug(
                "Connection pool opened",
                extra={
                    "min_size": self._settings.db_pool_min_size,
                    "max_size": self._settings.db_pool_max_size,
                },
            )
        return self._pool

    async def close(self) -> None:
        """Close the managed pool and release its connections."""
        if self._pool is not None:
            try:
                await self._pool.close()
            finally:
                self._pool = None


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn: Optional[str] = None) -> Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn or build_dsn())


def apply_schema(
    dsn: Optional[str] = None,
    table: Optional[str] = None,
    schema_path: Path = SCHEMA_PATH,
) -> None:
    """Create the records table and its indexes if they do not exist."""
    table = table or get_settings().db_table
    statements = sql.SQL(schema_path.read_text(encoding="utf-8")).format(
        table=sql.Identifier(table),
        status_index=sql.Identifier(f"{table}_status_idx"),
        created_index=sql.Identifier(f"{table}_created_at_idx"),
    )
    with get_sync_connection(dsn) as conn:
        with conn.cursor() as cur:
            cur.execute(statements)
        conn.commit()
    log.info("Schema applied", extra={"table": table, "schema": str(schema_path)})


__all__ = [
    "PoolManager",
    "SCHEMA_PATH",
    "apply_schema",
    "build_dsn",
    "get_sync_connection",
]
