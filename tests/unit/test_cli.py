from __future__ import annotations

import json
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict

import pytest
from typer.testing import CliRunner

from airmen_registry import main
from airmen_registry.domain.enums import RecordStatus

runner = CliRunner()


@pytest.fixture
def cli_gateway(gateway, monkeypatch: pytest.MonkeyPatch):
    """Route every CLI command to the in-memory gateway."""

    @asynccontextmanager
    async def _open_gateway(settings):
        yield gateway

    monkeypatch.setattr(main, "open_gateway", _open_gateway)
    return gateway


@pytest.fixture
def payload_file(tmp_path: Path, payload_factory):
    def _write(name: str = "airman.json", **overrides: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload_factory(**overrides), ensure_ascii=False), encoding="utf-8")
        return path

    return _write


def _only_row(gateway) -> Dict[str, Any]:
    assert len(gateway.rows) == 1
    return next(iter(gateway.rows.values()))


def test_add_creates_active_record(cli_gateway, payload_file) -> None:
    result = runner.invoke(main.app, ["add", str(payload_file())])

    assert result.exit_code == 0, result.output
    assert "added" in result.output
    assert _only_row(cli_gateway)["status"] == RecordStatus.ACTIVE.value


def test_submit_queues_pending_record_without_session(cli_gateway, payload_file) -> None:
    result = runner.invoke(main.app, ["submit", str(payload_file())])

    assert result.exit_code == 0, result.output
    assert "submitted for review" in result.output
    assert _only_row(cli_gateway)["status"] == RecordStatus.PENDING.value
    assert "list_all" not in cli_gateway.calls


def test_invalid_payload_reports_fields_and_fails(cli_gateway, payload_file) -> None:
    result = runner.invoke(main.app, ["add", str(payload_file(rank="General"))])

    assert result.exit_code == 1
    assert "rank" in result.output
    assert cli_gateway.rows == {}


def test_approve_then_approve_again(cli_gateway, payload_file) -> None:
    runner.invoke(main.app, ["submit", str(payload_file())])
    record_id = _only_row(cli_gateway)["id"]

    first = runner.invoke(main.app, ["approve", record_id])
    second = runner.invoke(main.app, ["approve", record_id])

    assert first.exit_code == 0, first.output
    assert "approved" in first.output
    assert "nothing to do" in second.output
    assert _only_row(cli_gateway)["status"] == "active"


def test_reject_removes_pending(cli_gateway, payload_file) -> None:
    runner.invoke(main.app, ["submit", str(payload_file())])
    record_id = _only_row(cli_gateway)["id"]

    result = runner.invoke(main.app, ["reject", record_id])

    assert result.exit_code == 0, result.output
    assert cli_gateway.rows == {}


def test_delete_requires_confirmation(cli_gateway, payload_file) -> None:
    runner.invoke(main.app, ["add", str(payload_file())])
    record_id = _only_row(cli_gateway)["id"]

    declined = runner.invoke(main.app, ["delete", record_id], input="n\n")
    assert declined.exit_code != 0
    assert record_id in cli_gateway.rows

    confirmed = runner.invoke(main.app, ["delete", record_id, "--yes"])
    assert confirmed.exit_code == 0, confirmed.output
    assert cli_gateway.rows == {}


def test_set_and_clear_field(cli_gateway, payload_file) -> None:
    runner.invoke(main.app, ["add", str(payload_file())])
    record_id = _only_row(cli_gateway)["id"]

    set_result = runner.invoke(main.app, ["set-field", record_id, "tdy_location", "Jashore"])
    assert set_result.exit_code == 0, set_result.output
    assert _only_row(cli_gateway)["tdy_location"] == "Jashore"

    clear_result = runner.invoke(main.app, ["clear-field", record_id, "tdy_location"])
    assert clear_result.exit_code == 0, clear_result.output
    assert _only_row(cli_gateway)["tdy_location"] is None


def test_update_overwrites_record(cli_gateway, payload_file) -> None:
    runner.invoke(main.app, ["add", str(payload_file())])
    record_id = _only_row(cli_gateway)["id"]

    edited = payload_file("edited.json", mobile="01900000000", rank="Cpl")
    result = runner.invoke(main.app, ["update", record_id, str(edited)])

    assert result.exit_code == 0, result.output
    row = _only_row(cli_gateway)
    assert row["mobile"] == "01900000000"
    assert row["rank"] == "Cpl"


def test_update_unknown_record_fails(cli_gateway, payload_file) -> None:
    result = runner.invoke(main.app, ["update", "missing", str(payload_file())])
    assert result.exit_code == 1


def test_persistence_failure_exits_with_error(cli_gateway, payload_file) -> None:
    cli_gateway.fail_on.add("insert")

    result = runner.invoke(main.app, ["add", str(payload_file())])

    assert result.exit_code == 1
    assert "Failed to add airman" in result.output


def test_list_with_export_writes_csv(cli_gateway, payload_file, tmp_path: Path) -> None:
    runner.invoke(main.app, ["add", str(payload_file(bdNo="1001", flight="Ops"))])
    runner.invoke(main.app, ["add", str(payload_file("second.json", bdNo="1002", flight="Radar"))])
    export_dir = tmp_path / "exports"

    result = runner.invoke(
        main.app,
        ["list", "--flight", "Ops", "--export", "--export-dir", str(export_dir)],
    )

    assert result.exit_code == 0, result.output
    files = list(export_dir.iterdir())
    assert len(files) == 1
    content = files[0].read_text(encoding="utf-8-sig")
    assert "1001" in content
    assert "1002" not in content


def test_list_empty_directory(cli_gateway) -> None:
    result = runner.invoke(main.app, ["list"])

    assert result.exit_code == 0, result.output
    assert "No records to display." in result.output


def test_overview_runs_on_empty_directory(cli_gateway) -> None:
    result = runner.invoke(main.app, ["overview"])

    assert result.exit_code == 0, result.output
    assert "System Overview" in result.output


def test_pending_record_is_not_editable_from_cli(cli_gateway, payload_file) -> None:
    runner.invoke(main.app, ["submit", str(payload_file())])
    record_id = _only_row(cli_gateway)["id"]

    edited_payload = payload_file("edited.json", mobile="01999999999")
    edited = runner.invoke(main.app, ["update", record_id, str(edited_payload)])
    overlay = runner.invoke(main.app, ["set-field", record_id, "med_cat", "C"])

    assert edited.exit_code == 1
    assert overlay.exit_code == 1
    assert "No active record" in overlay.output
    row = _only_row(cli_gateway)
    assert row["status"] == "pending"
    assert row["mobile"] == "01711000000"
    assert row["med_cat"] is None
