"""
Spreadsheet export of the directory.

Produces comma-separated text with a UTF-8 byte-order mark so spreadsheet
tools render Bangla names correctly. One header row, then one row per
record with a fixed column projection.
"""

from __future__ import annotations

import csv
import io
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from airmen_registry.domain.enums import display_label
from airmen_registry.domain.models import AirmanDraft
from airmen_registry.utils.logging import get_logger

log = get_logger(__name__)

BOM = "\ufeff"
NOT_APPLICABLE = "N/A"

EXPORT_COLUMNS: Sequence[str] = (
    "BD No",
    "Rank",
    "Name (EN)",
    "Name (BN)",
    "TDY",
    "DET",
    "Med Cat",
    "Trade",
    "Flight",
    "Mobile",
    "Accom Mode",
    "Accom Address",
)


def export_row(record: AirmanDraft) -> Dict[str, str]:
    return {
        "BD No": record.bd_no,
        "Rank": display_label(record.rank),
        "Name (EN)": record.name_en,
        "Name (BN)": record.name_bn,
        "TDY": record.tdy_location or NOT_APPLICABLE,
        "DET": record.det_location or NOT_APPLICABLE,
        "Med Cat": record.med_cat or NOT_APPLICABLE,
        "Trade": display_label(record.trade),
        "Flight": record.flight.value,
        "Mobile": record.mobile,
        "Accom Mode": record.accommodation.value,
        "Accom Address": record.accom_address or "",
    }


def export_rows(records: Iterable[AirmanDraft]) -> List[Dict[str, str]]:
    return [export_row(record) for record in records]


def render_csv(records: Iterable[AirmanDraft]) -> str:
    """
    Render records as BOM-prefixed CSV text.

    Returns an empty string when there is nothing to export.
    """
    rows = export_rows(records)
    if not rows:
        return ""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(EXPORT_COLUMNS), lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return BOM + buffer.getvalue()


def export_filename(today: Optional[date] = None) -> str:
    return f"Airmen_Status_Export_{(today or date.today()).isoformat()}.csv"


def write_csv(
    records: Iterable[AirmanDraft],
    directory: Path,
    today: Optional[date] = None,
) -> Optional[Path]:
    """
    Write the export file into `directory`.

    Returns the written path, or None when there were no records.
    """
    records = list(records)
    content = render_csv(records)
    if not content:
        log.info("Nothing to export")
        return None
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(today)
    # newline="" keeps the writer's line endings on every platform.
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(content)
    log.info("Export written", extra={"path": str(path), "rows": len(records)})
    return path


__all__ = [
    "BOM",
    "EXPORT_COLUMNS",
    "NOT_APPLICABLE",
    "export_filename",
    "export_row",
    "export_rows",
    "render_csv",
    "write_csv",
]
