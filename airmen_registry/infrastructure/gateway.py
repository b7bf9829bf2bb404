"""
Record store gateway.

`RecordGateway` is the narrow interface the lifecycle controller depends
on: list everything, insert, overwrite by id, change status and delete.
`PostgresRecordGateway` implements it over a psycopg async pool. Every
driver error surfaces as `GatewayError`; nothing is retried here.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Protocol, runtime_checkable

import psycopg
from psycopg import sql
from psycopg.rows import dict_row

from airmen_registry.config import get_settings
from airmen_registry.domain.enums import RecordStatus
from airmen_registry.domain.models import AirmanRecord
from airmen_registry.errors import GatewayError
from airmen_registry.infrastructure.db_factory import PoolManager
from airmen_registry.utils.logging import get_logger

log = get_logger(__name__)


@runtime_checkable
class RecordGateway(Protocol):
    """
    Persistence boundary for airman records.

    Implementations assign the record id and creation timestamp on insert
    and return rows newest first from `list_all`.
    """

    async def list_all(self) -> List[AirmanRecord]:
        ...

    async def insert(self, fields: Mapping[str, Any], status: RecordStatus) -> AirmanRecord:
        ...

    async def update(
        self,
        record_id: str,
        fields: Mapping[str, Any],
        status: Optional[RecordStatus] = None,
    ) -> bool:
        """Overwrite the given columns; False when no row has `record_id` (and `status`, if given)."""
        ...

    async def set_status(
        self,
        record_id: str,
        status: RecordStatus,
        expected: Optional[RecordStatus] = None,
    ) -> bool:
        """Change status, only where the current status equals `expected` if given."""
        ...

    async def delete(self, record_id: str, status: Optional[RecordStatus] = None) -> bool:
        """Delete by id (and status, if given). Deleting a missing row is not an error."""
        ...


class PostgresRecordGateway:
    """
    RecordGateway backed by a PostgreSQL table.

    Ids are compared as text so a malformed id simply matches nothing.
    """

    def __init__(self, pools: PoolManager, table: Optional[str] = None) -> None:
        self._pools = pools
        self._table = sql.Identifier(table or get_settings().db_table)

    async def _execute(
        self,
        operation: str,
        query: sql.Composable,
        params: Optional[List[Any]] = None,
        fetch: bool = False,
    ) -> tuple[List[dict], int]:
        try:
            pool = await self._pools.get_pool()
            async with pool.connection() as conn:
                async with conn.cursor(row_factory=dict_row) as cur:
                    await cur.execute(query, params)
                    rows = await cur.fetchall() if fetch else []
                    return rows, cur.rowcount
        except psycopg.Error as exc:
            log.error(
                f"[GATEWAY FAILED] {operation}",
                extra={"operation": operation, "error": str(exc)},
            )
            raise GatewayError(operation, str(exc)) from exc

    async def list_all(self) -> List[AirmanRecord]:
        query = sql.SQL("SELECT * FROM {table} ORDER BY created_at DESC").format(table=self._table)
        rows, _ = await self._execute("list records", query, fetch=True)
        return [AirmanRecord.model_validate(row) for row in rows]

    async def insert(self, fields: Mapping[str, Any], status: RecordStatus) -> AirmanRecord:
        values = {**fields, "status": status.value}
        query = sql.SQL("INSERT INTO {table} ({columns}) VALUES ({values}) RETURNING *").format(
            table=self._table,
            columns=sql.SQL(", ").join(sql.Identifier(name) for name in values),
            values=sql.SQL(", ").join(sql.Placeholder() for _ in values),
        )
        rows, _ = await self._execute("insert record", query, list(values.values()), fetch=True)
        return AirmanRecord.model_validate(rows[0])

    async def update(
        self,
        record_id: str,
        fields: Mapping[str, Any],
        status: Optional[RecordStatus] = None,
    ) -> bool:
        query = sql.SQL("UPDATE {table} SET {assignments} WHERE id::text = %s").format(
            table=self._table,
            assignments=sql.SQL(", ").join(
                sql.SQL("{} = {}").format(sql.Identifier(name), sql.Placeholder()) for name in fields
            ),
        )
        params: List[Any] = [*fields.values(), record_id]
        if status is not None:
            query = sql.Composed([query, sql.SQL(" AND status = %s")])
            params.append(status.value)
        _, count = await self._execute("update record", query, params)
        return count > 0

    async def set_status(
        self,
        record_id: str,
        status: RecordStatus,
        expected: Optional[RecordStatus] = None,
    ) -> bool:
        query = sql.SQL("UPDATE {table} SET status = %s WHERE id::text = %s").format(table=self._table)
        params: List[Any] = [status.value, record_id]
        if expected is not None:
            query = sql.Composed([query, sql.SQL(" AND status = %s")])
            params.append(expected.value)
        _, count = await self._execute("change record status", query, params)
        return count > 0

    async def delete(self, record_id: str, status: Optional[RecordStatus] = None) -> bool:
        query = sql.SQL("DELETE FROM {table} WHERE id::text = %s").format(table=self._table)
        params: List[Any] = [record_id]
        if status is not None:
            query = sql.Composed([query, sql.SQL(" AND status = %s")])
            params.append(status.value)
        _, count = await self._execute("delete record", query, params)
        return count > 0


__all__ = ["RecordGateway", "PostgresRecordGateway"]
