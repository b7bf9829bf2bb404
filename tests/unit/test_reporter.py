from __future__ import annotations

from datetime import datetime, timezone

from rich.console import Console

from airmen_registry.domain.models import AirmanRecord
from airmen_registry.reporter import print_directory


def _record(payload_factory, **overrides) -> AirmanRecord:
    return AirmanRecord.model_validate(
        {
            **payload_factory(**overrides),
            "id": "3b7e2d41-0000-4000-8000-000000000000",
            "status": "active",
            "createdAt": datetime(2026, 1, 1, tzinfo=timezone.utc),
        }
    )


def _render(records, today) -> str:
    console = Console(record=True, width=300, color_system=None)
    print_directory(records, today=today, console=console)
    return console.export_text()


def test_directory_shows_standard_without_deployment_status(payload_factory, today) -> None:
    text = _render([_record(payload_factory)], today)

    assert "Standard" in text
    assert "3b7e2d41" in text


def test_directory_joins_status_badges(payload_factory, today) -> None:
    text = _render([_record(payload_factory, tdyLocation="Jashore", medCat="B")], today)

    assert "TDY: Jashore | MED: B" in text
    assert "Standard" not in text


def test_empty_directory_message(today) -> None:
    assert "No records to display." in _render([], today)
