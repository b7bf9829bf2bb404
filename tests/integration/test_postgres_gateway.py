"""
Integration tests for the PostgreSQL record gateway.

These tests run against a real PostgreSQL instance and verify that:
1. The schema accepts every record field and assigns id/created_at
2. Status and delete guards behave like the in-memory gateway
3. The lifecycle controller works end to end over the real store

Run with: RUN_INTEGRATION_TESTS=1 pytest tests/integration/
"""

from __future__ import annotations

import os
from datetime import date

import pytest

from airmen_registry.domain.enums import RecordStatus
from airmen_registry.infrastructure.db_factory import PoolManager
from airmen_registry.infrastructure.gateway import PostgresRecordGateway, RecordGateway
from airmen_registry.lifecycle import RecordLifecycleController

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        os.getenv("RUN_INTEGRATION_TESTS", "0") != "1",
        reason="Integration tests require RUN_INTEGRATION_TESTS=1 and reachable Postgres",
    ),
]


@pytest.fixture
def pools(test_dsn, test_settings, clean_airmen_table):
    return PoolManager(dsn=test_dsn, settings=test_settings)


@pytest.mark.asyncio
async def test_insert_assigns_identity_and_round_trips_fields(pools, test_settings, draft_factory) -> None:
    gateway = PostgresRecordGateway(pools, table=test_settings.db_table)
    assert isinstance(gateway, RecordGateway)
    try:
        draft = draft_factory(nameBn="করিম আহমেদ", accommodation="L/O (SQ)", lOutDate="2024-02-01")
        record = await gateway.insert(draft.storage_fields(), RecordStatus.PENDING)

        assert record.id
        assert record.status is RecordStatus.PENDING
        assert record.created_at is not None

        [loaded] = await gateway.list_all()
        assert loaded.id == record.id
        assert loaded.name_bn == "করিম আহমেদ"
        assert loaded.l_out_date == date(2024, 2, 1)
        assert loaded.storage_fields() == draft.storage_fields()
    finally:
        await pools.close()


@pytest.mark.asyncio
async def test_list_all_is_newest_first(pools, test_settings, draft_factory) -> None:
    gateway = PostgresRecordGateway(pools, table=test_settings.db_table)
    try:
        first = await gateway.insert(draft_factory(bdNo="1").storage_fields(), RecordStatus.ACTIVE)
        second = await gateway.insert(draft_factory(bdNo="2").storage_fields(), RecordStatus.ACTIVE)

        ids = [record.id for record in await gateway.list_all()]
        assert ids == [second.id, first.id]
    finally:
        await pools.close()


@pytest.mark.asyncio
async def test_status_and_delete_guards(pools, test_settings, draft_factory) -> None:
    gateway = PostgresRecordGateway(pools, table=test_settings.db_table)
    try:
        record = await gateway.insert(draft_factory().storage_fields(), RecordStatus.ACTIVE)

        assert not await gateway.set_status(record.id, RecordStatus.ACTIVE, expected=RecordStatus.PENDING)
        assert not await gateway.delete(record.id, status=RecordStatus.PENDING)
        assert not await gateway.update(record.id, {"mobile": "0"}, status=RecordStatus.PENDING)
        assert not await gateway.update("not-a-uuid", {"mobile": "0"})
        assert await gateway.update(record.id, {"mobile": "01999999999"})
        assert await gateway.delete(record.id)
        assert not await gateway.delete(record.id)
        assert await gateway.list_all() == []
    finally:
        await pools.close()


@pytest.mark.asyncio
async def test_lifecycle_end_to_end(pools, test_settings, draft_factory, today) -> None:
    gateway = PostgresRecordGateway(pools, table=test_settings.db_table)
    controller = RecordLifecycleController(gateway, today=lambda: today)
    try:
        pending = await controller.submit_for_review(draft_factory(isMarried=False, spouseName="X"))
        assert [r.id for r in controller.list_pending()] == [pending.id]
        assert pending.spouse_name is None

        assert await controller.approve(pending.id)
        assert controller.list_pending() == ()
        assert [r.id for r in controller.list_active()] == [pending.id]

        updated = await controller.set_overlay_field(pending.id, "tdy_location", "Jashore")
        assert updated.tdy_location == "Jashore"

        assert await controller.delete(pending.id)
        assert controller.list_active() == ()
    finally:
        await pools.close()
