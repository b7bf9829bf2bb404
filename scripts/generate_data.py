"""
Synthetic roster generator and loader for the Airmen Registry.

Builds a deterministic pseudo-random set of airman records, writes them to
CSV and loads them with Postgres COPY. Rows go through the same model
validation as form submissions, so the seeded data obeys the record
invariants (spouse only when married, living-out date only when living
out, service category consistent with the enrollment date).
"""

from __future__ import annotations

import csv
import random
import sys
import tempfile
import time
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List

import psycopg
import typer
from psycopg import sql

from airmen_registry.config import get_settings
from airmen_registry.domain.enums import (
    Accommodation,
    BloodGroup,
    Flight,
    Rank,
    RecordStatus,
    Religion,
    Trade,
)
from airmen_registry.domain.models import DRAFT_FIELDS, AirmanDraft
from airmen_registry.infrastructure.db_factory import build_dsn

app = typer.Typer(help="Generate a synthetic roster and load it into Postgres (CSV + COPY).")

CSV_COLUMNS: List[str] = [*DRAFT_FIELDS, "status"]

_FIRST_NAMES = [
    ("Rahim", "রহিম"),
    ("Karim", "করিম"),
    ("Hasan", "হাসান"),
    ("Jamal", "জামাল"),
    ("Sohel", "সোহেল"),
    ("Rafiq", "রফিক"),
]
_LAST_NAMES = [
    ("Uddin", "উদ্দিন"),
    ("Ahmed", "আহমেদ"),
    ("Hossain", "হোসেন"),
    ("Islam", "ইসলাম"),
]
_PLACES = ["Dhaka", "Chattogram", "Jashore", "Cox's Bazar", "Bogura", "Sylhet"]
_MED_CATS = ["A", "B", "C"]


def _build_dsn(dsn_override: str | None) -> str:
    if dsn_override:
        return dsn_override
    return build_dsn()


def _random_date(rng: random.Random, start: date, end: date) -> date:
    return start + timedelta(days=rng.randint(0, (end - start).days))


def _generate_airman(rng: random.Random, index: int, today: date) -> AirmanDraft:
    first_en, first_bn = rng.choice(_FIRST_NAMES)
    last_en, last_bn = rng.choice(_LAST_NAMES)
    dob = _random_date(rng, today - timedelta(days=365 * 50), today - timedelta(days=365 * 19))
    doe = _random_date(rng, dob + timedelta(days=365 * 18), today - timedelta(days=30))
    accommodation = rng.choice(list(Accommodation))
    is_married = rng.random() < 0.6
    payload: Dict[str, Any] = {
        "bd_no": str(400_000 + index),
        "nid_no": str(rng.randint(10**9, 10**10 - 1)) if rng.random() < 0.8 else "",
        "total_children": rng.randint(0, 3) if is_married else 0,
        "rank": rng.choice(list(Rank)),
        "name_en": f"{first_en} {last_en}",
        "name_bn": f"{first_bn} {last_bn}",
        "trade": rng.choice(list(Trade)),
        "flight": rng.choice(list(Flight)),
        "mobile": f"01{rng.randint(300_000_000, 999_999_999)}",
        "dob": dob,
        "doe": doe,
        "arrival_date": _random_date(rng, doe, today),
        "height_feet": 5,
        "height_inches": rng.randint(0, 11),
        "blood_group": rng.choice(list(BloodGroup)),
        "religion": rng.choice(list(Religion)),
        "is_married": is_married,
        "spouse_name": f"Mrs. {last_en}" if is_married else "",
        "accommodation": accommodation,
        "l_out_date": _random_date(rng, doe, today) if accommodation.is_living_out else "",
        "accom_address": f"{rng.randint(1, 200)} Road, {rng.choice(_PLACES)}",
        "tdy_location": rng.choice(_PLACES) if rng.random() < 0.1 else "",
        "det_location": rng.choice(_PLACES) if rng.random() < 0.1 else "",
        "med_cat": rng.choice(_MED_CATS) if rng.random() < 0.05 else "",
    }
    return AirmanDraft.model_validate(payload).with_service_category(today)


def _generate_rows_csv(
    csv_path: Path,
    rows: int,
    seed: int,
    pending_ratio: float = 0.1,
    today: date | None = None,
) -> None:
    rng = random.Random(seed)
    today = today or date.today()

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        for i in range(rows):
            draft = _generate_airman(rng, i, today)
            status = RecordStatus.PENDING if rng.random() < pending_ratio else RecordStatus.ACTIVE
            row = {key: ("" if value is None else value) for key, value in draft.storage_fields().items()}
            row["is_married"] = "t" if draft.is_married else "f"
            row["status"] = status.value
            writer.writerow(row)


def _copy_into_db(dsn: str, csv_path: Path, table: str | None = None) -> int:
    """COPY the CSV into the records table; empty cells load as NULL."""
    query = sql.SQL("COPY {table} ({columns}) FROM STDIN WITH (FORMAT csv, HEADER TRUE)").format(
        table=sql.Identifier(table or get_settings().db_table),
        columns=sql.SQL(", ").join(sql.Identifier(name) for name in CSV_COLUMNS),
    )
    with psycopg.connect(dsn) as conn:
        with conn.cursor() as cur:
            with cur.copy(query) as copy:
                with csv_path.open("r", encoding="utf-8") as f:
                    for line in f:
                        copy.write(line)
            loaded = cur.rowcount
        conn.commit()
    return loaded


@app.command()
def main(
    rows: int = typer.Option(200, "--rows", "-r", help="Number of airmen to generate."),
    seed: int = typer.Option(42, "--seed", help="Deterministic RNG seed."),
    pending_ratio: float = typer.Option(
        0.1,
        "--pending-ratio",
        help="Share of generated records placed in the review queue.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Optional CSV output path (if omitted, a temp file will be used).",
    ),
    dsn: str | None = typer.Option(None, "--dsn", help="Optional DSN override for Postgres."),
    no_load: bool = typer.Option(False, "--no-load", help="Only generate CSV; skip loading into Postgres."),
) -> None:
    """
    Generate a synthetic roster and optionally load it into Postgres using COPY.
    """
    start = time.perf_counter()
    if output:
        csv_path = output
        csv_path.parent.mkdir(parents=True, exist_ok=True)
    else:
        tmpdir = Path(tempfile.mkdtemp(prefix="airmen_csv_"))
        csv_path = tmpdir / "airmen.csv"

    typer.echo(f"Generating {rows:,} airmen -> {csv_path} (seed={seed})")
    _generate_rows_csv(csv_path, rows=rows, seed=seed, pending_ratio=pending_ratio)
    typer.echo(f"CSV generation completed in {time.perf_counter() - start:.2f}s")

    if no_load:
        typer.echo("Skipping load (no-load flag set).")
        return

    typer.echo("Loading CSV into Postgres via COPY...")
    loaded = _copy_into_db(_build_dsn(dsn), csv_path)
    typer.echo(f"Loaded {loaded:,} rows in {time.perf_counter() - start:.2f}s total.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
