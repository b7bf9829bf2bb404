"""
Pytest configuration for the Airmen Registry.

Provides fixtures for:
- An in-memory record gateway and a lifecycle controller with a fixed clock
- Form payload factories
- Database connection management for integration tests
"""

from __future__ import annotations

import itertools
import os
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, Generator, List, Mapping, Optional, Set
from uuid import uuid4

import psycopg
import pytest
from psycopg import sql

from airmen_registry.config import Settings
from airmen_registry.domain.enums import RecordStatus
from airmen_registry.domain.models import AirmanDraft, AirmanRecord
from airmen_registry.errors import GatewayError
from airmen_registry.intake import parse_draft
from airmen_registry.lifecycle import RecordLifecycleController

TODAY = date(2026, 10, 18)
_EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)


class FakeRecordGateway:
    """
    In-memory RecordGateway.

    Rows are stored exactly as the controller hands them over, so tests can
    assert on what would have been persisted. Operation names listed in
    `fail_on` raise GatewayError.
    """

    def __init__(self) -> None:
        self.rows: Dict[str, Dict[str, Any]] = {}
        self.fail_on: Set[str] = set()
        self.calls: List[str] = []
        self._ticks = itertools.count()

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise GatewayError(operation, "connection refused")

    async def list_all(self) -> List[AirmanRecord]:
        self._enter("list_all")
        rows = sorted(self.rows.values(), key=lambda row: row["created_at"], reverse=True)
        return [AirmanRecord.model_validate(row) for row in rows]

    async def insert(self, fields: Mapping[str, Any], status: RecordStatus) -> AirmanRecord:
        self._enter("insert")
        row = {
            **fields,
            "id": str(uuid4()),
            "status": status.value,
            "created_at": _EPOCH + timedelta(seconds=next(self._ticks)),
        }
        self.rows[row["id"]] = row
        return AirmanRecord.model_validate(row)

    async def update(
        self,
        record_id: str,
        fields: Mapping[str, Any],
        status: Optional[RecordStatus] = None,
    ) -> bool:
        self._enter("update")
        row = self.rows.get(record_id)
        if row is None or (status is not None and row["status"] != status.value):
            return False
        self.rows[record_id].update(fields)
        return True

    async def set_status(
        self,
        record_id: str,
        status: RecordStatus,
        expected: Optional[RecordStatus] = None,
    ) -> bool:
        self._enter("set_status")
        row = self.rows.get(record_id)
        if row is None or (expected is not None and row["status"] != expected.value):
            return False
        row["status"] = status.value
        return True

    async def delete(self, record_id: str, status: Optional[RecordStatus] = None) -> bool:
        self._enter("delete")
        row = self.rows.get(record_id)
        if row is None or (status is not None and row["status"] != status.value):
            return False
        del self.rows[record_id]
        return True


def make_payload(**overrides: Any) -> Dict[str, Any]:
    """A complete enrollment form payload, as posted by the web form."""
    payload: Dict[str, Any] = {
        "bdNo": "1234",
        "nidNo": "",
        "totalChildren": 0,
        "rank": "Sgt",
        "nameEn": "Rahim Uddin",
        "nameBn": "রহিম উদ্দিন",
        "trade": "Rad Op",
        "flight": "Radar",
        "mobile": "01711000000",
        "dob": "1990-01-15",
        "doe": "2010-06-01",
        "arrivalDate": "2022-03-01",
        "serviceCategory": "Below 15 Years",
        "heightFeet": 5,
        "heightInches": 8,
        "bloodGroup": "B+",
        "religion": "Islam",
        "isMarried": False,
        "spouseName": "",
        "accommodation": "Airmen Mess",
        "lOutDate": "",
        "accomAddress": "Block C, Dhaka Cantonment",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def payload_factory() -> Callable[..., Dict[str, Any]]:
    return make_payload


@pytest.fixture
def draft_factory() -> Callable[..., AirmanDraft]:
    """Validated drafts built from `make_payload` overrides."""
    return lambda **overrides: parse_draft(make_payload(**overrides))


@pytest.fixture
def gateway() -> FakeRecordGateway:
    return FakeRecordGateway()


@pytest.fixture
def controller(gateway: FakeRecordGateway) -> RecordLifecycleController:
    return RecordLifecycleController(gateway, today=lambda: TODAY)


# Integration fixtures ------------------------------------------------------


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "airmen_registry"),
        db_table="airmen_test",
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_schema_initialized(test_dsn: str, test_settings: Settings, db_connection_available: bool) -> bool:
    """
    Ensure the test table exists; skips when the database is unreachable.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    from airmen_registry.infrastructure.db_factory import apply_schema

    apply_schema(dsn=test_dsn, table=test_settings.db_table)
    return True


@pytest.fixture
def clean_airmen_table(
    test_dsn: str, test_settings: Settings, db_schema_initialized: bool
) -> Generator[None, None, None]:
    """
    Empty the test table before and after each test function.
    """
    truncate = sql.SQL("TRUNCATE TABLE {table}").format(table=sql.Identifier(test_settings.db_table))
    with psycopg.connect(test_dsn) as conn:
        conn.execute(truncate)
    yield
    with psycopg.connect(test_dsn) as conn:
        conn.execute(truncate)
