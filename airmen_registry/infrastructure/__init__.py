"""
Infrastructure package for the Airmen Registry.

Centralizes database connectivity (DSN, pooling, schema) and the record
gateway. Keep this layer focused on I/O, decoupled from lifecycle rules.
"""

from airmen_registry.infrastructure.db_factory import (
    PoolManager,
    apply_schema,
    build_dsn,
    get_sync_connection,
)
from airmen_registry.infrastructure.gateway import PostgresRecordGateway, RecordGateway

__all__ = [
    "PoolManager",
    "PostgresRecordGateway",
    "RecordGateway",
    "apply_schema",
    "build_dsn",
    "get_sync_connection",
]
