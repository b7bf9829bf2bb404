from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from airmen_registry.analytics import flight_rank_matrix, force_summary, rank_counts, status_badges
from airmen_registry.domain.derived import age, tenure
from airmen_registry.domain.enums import display_label
from airmen_registry.domain.models import AirmanRecord


def _badges(record: AirmanRecord) -> str:
    parts = []
    if record.tdy_location:
        parts.append(f"[magenta]TDY: {record.tdy_location}[/magenta]")
    if record.det_location:
        parts.append(f"[blue]DET: {record.det_location}[/blue]")
    if record.med_cat:
        parts.append(f"[red]MED: {record.med_cat}[/red]")
    return " | ".join(parts) or "Standard"


def print_directory(
    records: Sequence[AirmanRecord],
    title: str = "Personnel Directory",
    today: Optional[date] = None,
    console: Optional[Console] = None,
) -> None:
    """
    Render records as a rich table, one row per airman.

    Service length and age are derived at render time from the stored dates.
    """
    console = console or Console()

    if not records:
        console.print("[yellow]No records to display.[/yellow]")
        return

    table = Table(title=title, box=box.ROUNDED, caption=f"{len(records)} record(s)")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("BD No", style="cyan", no_wrap=True)
    table.add_column("Rank")
    table.add_column("Name")
    table.add_column("Trade / Flight")
    table.add_column("T_Svc", justify="right", style="green")
    table.add_column("Age", justify="right")
    table.add_column("Category")
    table.add_column("Status")
    table.add_column("Accom")

    for record in records:
        accom = record.accommodation.value
        if record.l_out_date:
            accom = f"{accom}\n[dim]since {record.l_out_date.isoformat()}[/dim]"
        table.add_row(
            record.id[:8],
            record.bd_no,
            display_label(record.rank),
            f"{record.name_en}\n{record.name_bn}",
            f"{display_label(record.trade)}\n[dim]{record.flight.value}[/dim]",
            tenure(record.doe, today),
            str(age(record.dob, today)),
            record.service_category.value,
            _badges(record),
            accom,
        )

    console.print(table)


def print_record(
    record: AirmanRecord,
    today: Optional[date] = None,
    console: Optional[Console] = None,
) -> None:
    """Print every field of a single record."""
    console = console or Console()
    table = Table(title=f"{record.name_en} ({record.bd_no})", box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    rows = [
        ("ID", record.id),
        ("Status", record.status.value),
        ("Rank", display_label(record.rank)),
        ("Trade", display_label(record.trade)),
        ("Flight", record.flight.value),
        ("Name (BN)", record.name_bn),
        ("NID No", record.nid_no or "-"),
        ("Mobile", record.mobile),
        ("Date of birth", f"{record.dob.isoformat()} (age {age(record.dob, today)})"),
        ("Date of enrollment", f"{record.doe.isoformat()} (T_Svc {tenure(record.doe, today)})"),
        ("Arrival", f"{record.arrival_date.isoformat()} ({tenure(record.arrival_date, today)})"),
        ("Service category", record.service_category.value),
        ("Height", f"{record.height_feet}' {record.height_inches}\""),
        ("Blood group", record.blood_group.value),
        ("Religion", record.religion.value),
        ("Married", "Yes" if record.is_married else "No"),
        ("Spouse", record.spouse_name or "-"),
        ("Children", str(record.total_children)),
        ("Accommodation", record.accommodation.value),
        ("Living out since", record.l_out_date.isoformat() if record.l_out_date else "-"),
        ("Address", record.accom_address or "-"),
        ("TDY", record.tdy_location or "-"),
        ("DET", record.det_location or "-"),
        ("Med Cat", record.med_cat or "-"),
        ("Created", record.created_at.isoformat()),
    ]
    for name, value in rows:
        table.add_row(name, value)
    console.print(table)


def print_overview(records: Sequence[AirmanRecord], console: Optional[Console] = None) -> None:
    """Summary cards, rank distribution and per-flight breakdown."""
    console = console or Console()
    summary = force_summary(records)

    cards = Table(title="System Overview", box=box.ROUNDED)
    for heading in ("Total Force", "Warrant Officers", "NCO Force", "Other Ranks"):
        cards.add_column(heading, justify="right", style="bold")
    cards.add_row(
        str(summary.total),
        str(summary.warrant_officers),
        str(summary.ncos),
        str(summary.other_ranks),
    )
    console.print(cards)

    ranks = Table(title="Rank-wise distribution", box=box.SIMPLE)
    ranks.add_column("Rank", style="cyan")
    ranks.add_column("Count", justify="right", style="magenta")
    for rank, count in rank_counts(records).items():
        ranks.add_row(display_label(rank), str(count))
    console.print(ranks)

    flights = Table(title="Flight & Section Analytics", box=box.SIMPLE)
    flights.add_column("Flight", style="cyan")
    flights.add_column("Strength", justify="right", style="bold")
    flights.add_column("Breakdown")
    for flight, by_rank in flight_rank_matrix(records).items():
        total = sum(by_rank.values())
        breakdown = ", ".join(f"{rank.value}: {count}" for rank, count in by_rank.items() if count)
        flights.add_row(flight.value, str(total), breakdown or "[dim]No personnel assigned[/dim]")
    console.print(flights)

    badges = status_badges(records)
    console.print(
        " | ".join(f"{display_label(kind)}: {count}" for kind, count in badges.items()),
        style="dim",
    )
