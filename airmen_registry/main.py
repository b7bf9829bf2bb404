from __future__ import annotations

import asyncio
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Awaitable, Callable, NoReturn, Optional, TypeVar

import typer

from airmen_registry.config import Settings, get_settings
from airmen_registry.domain.enums import (
    BloodGroup,
    DeploymentStatusKind,
    Flight,
    OverlayField,
    Rank,
    RecordStatus,
    ServiceCategory,
    Trade,
)
from airmen_registry.errors import IntakeError, RecordNotFoundError, RegistryError
from airmen_registry.export import write_csv
from airmen_registry.filtering import RecordFilter, filter_records
from airmen_registry.infrastructure.db_factory import PoolManager, apply_schema
from airmen_registry.infrastructure.gateway import PostgresRecordGateway, RecordGateway
from airmen_registry.intake import load_payload, parse_draft
from airmen_registry.lifecycle import RecordLifecycleController, StaticIdentity
from airmen_registry.reporter import print_directory, print_overview, print_record
from airmen_registry.utils.logging import configure_logging

app = typer.Typer(help="Airmen Registry CLI.")

T = TypeVar("T")


@asynccontextmanager
async def open_gateway(settings: Settings) -> AsyncIterator[RecordGateway]:
    """Yield a gateway over the configured database; the pool is closed afterwards."""
    pools = PoolManager(settings=settings)
    try:
        yield PostgresRecordGateway(pools, table=settings.db_table)
    finally:
        await pools.close()


def _fail(exc: RegistryError) -> NoReturn:
    typer.secho(f"Error: {exc}", err=True, fg=typer.colors.RED)
    if isinstance(exc, IntakeError):
        for error in exc.errors:
            location = ".".join(str(part) for part in error.get("loc", ()))
            typer.secho(f"  {location}: {error.get('msg')}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _run(
    command: Callable[[RecordLifecycleController], Awaitable[T]],
    authenticated: bool = True,
) -> T:
    """Open the store, load the snapshots and run `command` against them."""
    settings = get_settings()

    async def runner() -> T:
        async with open_gateway(settings) as gateway:
            controller = RecordLifecycleController(gateway, identity=StaticIdentity(authenticated))
            await controller.refresh()
            return await command(controller)

    try:
        return asyncio.run(runner())
    except RegistryError as exc:
        _fail(exc)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    settings = get_settings()
    configure_logging(
        level="DEBUG" if verbose else settings.log_level,
        json_logs=settings.log_json,
        app_env=settings.app_env,
    )


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"table={settings.db_table} pool=({settings.db_pool_min_size},{settings.db_pool_max_size}) "
        f"export_dir={settings.export_dir}"
    )


@app.command("init-db")
def init_db() -> None:
    """
    Create the records table if it does not exist.
    """
    apply_schema(table=get_settings().db_table)
    typer.echo("Schema ready.")


@app.command("list")
def list_records(
    pending: bool = typer.Option(False, "--pending", help="Show the review queue instead of the directory."),
    search: str = typer.Option("", "--search", "-q", help="Case-insensitive free-text search."),
    rank: Optional[Rank] = typer.Option(None, "--rank"),
    trade: Optional[Trade] = typer.Option(None, "--trade"),
    flight: Optional[Flight] = typer.Option(None, "--flight"),
    blood_group: Optional[BloodGroup] = typer.Option(None, "--blood-group"),
    category: Optional[ServiceCategory] = typer.Option(None, "--category"),
    deployment: DeploymentStatusKind = typer.Option(DeploymentStatusKind.ANY, "--deployment"),
    export: bool = typer.Option(False, "--export", help="Also write the visible rows to CSV."),
    export_dir: Optional[Path] = typer.Option(None, "--export-dir", help="Override EXPORT_DIR."),
) -> None:
    """
    List active (or pending) records, optionally filtered and exported.
    """
    filters = RecordFilter(
        rank=rank,
        trade=trade,
        flight=flight,
        blood_group=blood_group,
        service_category=category,
        deployment_status=deployment,
    )

    async def command(controller: RecordLifecycleController) -> None:
        source = controller.list_pending() if pending else controller.list_active()
        visible = filter_records(source, search=search, filters=filters)
        print_directory(visible, title="Entry Review Board" if pending else "Personnel Directory")
        if export:
            path = write_csv(visible, export_dir or get_settings().export_dir)
            typer.echo(f"Exported to {path}" if path else "Nothing to export.")

    _run(command)


@app.command()
def show(record_id: str = typer.Argument(..., help="Record id.")) -> None:
    """
    Show every field of one record.
    """

    async def command(controller: RecordLifecycleController) -> None:
        record = controller.find(record_id)
        if record is None:
            typer.secho(f"No record with id '{record_id}'", err=True, fg=typer.colors.RED)
            raise typer.Exit(code=1)
        print_record(record)

    _run(command)


@app.command()
def add(payload: Path = typer.Argument(..., help="JSON file with the enrollment form fields.")) -> None:
    """
    Enrol a record directly into the active directory.
    """

    async def command(controller: RecordLifecycleController) -> None:
        record = await controller.create(parse_draft(load_payload(payload)))
        typer.echo(f"Record {record.id} added.")

    _run(command)


@app.command()
def submit(payload: Path = typer.Argument(..., help="JSON file with the public form fields.")) -> None:
    """
    Submit a record for administrator review (public path).
    """

    async def command(controller: RecordLifecycleController) -> None:
        record = await controller.submit_for_review(parse_draft(load_payload(payload)))
        typer.echo(
            f"Record {record.id} submitted for review. "
            "Once approved it will be added to the personnel directory."
        )

    _run(command, authenticated=False)


@app.command()
def approve(record_id: str = typer.Argument(..., help="Pending record id.")) -> None:
    """
    Approve a pending record.
    """

    async def command(controller: RecordLifecycleController) -> None:
        if await controller.approve(record_id):
            typer.echo(f"Record {record_id} approved.")
        else:
            typer.echo(f"Record {record_id} is not awaiting review; nothing to do.")

    _run(command)


@app.command()
def reject(record_id: str = typer.Argument(..., help="Pending record id.")) -> None:
    """
    Reject (permanently delete) a pending record.
    """

    async def command(controller: RecordLifecycleController) -> None:
        await controller.reject(record_id)
        typer.echo(f"Record {record_id} rejected.")

    _run(command)


@app.command()
def update(
    record_id: str = typer.Argument(..., help="Record id."),
    payload: Path = typer.Argument(..., help="JSON file with the full edited record."),
) -> None:
    """
    Overwrite an active record with the fields from an edit form.
    """

    async def command(controller: RecordLifecycleController) -> None:
        existing = controller.find_active(record_id)
        if existing is None:
            raise RecordNotFoundError(record_id, RecordStatus.ACTIVE)
        draft = parse_draft(load_payload(payload))
        await controller.update(existing.model_copy(update=dict(draft)))
        typer.echo(f"Record {record_id} updated.")

    _run(command)


@app.command()
def delete(
    record_id: str = typer.Argument(..., help="Record id."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """
    Delete a record forever.
    """
    if not yes:
        typer.confirm("Are you sure you want to delete this record forever?", abort=True)

    async def command(controller: RecordLifecycleController) -> None:
        await controller.delete(record_id)
        typer.echo(f"Record {record_id} deleted.")

    _run(command)


@app.command("set-field")
def set_field(
    record_id: str = typer.Argument(..., help="Record id."),
    field: OverlayField = typer.Argument(..., help="Deployment, medical or accommodation field."),
    value: str = typer.Argument(..., help="New value; an empty string clears the field."),
) -> None:
    """
    Set a deployment, medical or accommodation field in place.
    """

    async def command(controller: RecordLifecycleController) -> None:
        await controller.set_overlay_field(record_id, field, value)
        typer.echo(f"{field.value} updated for {record_id}.")

    _run(command)


@app.command("clear-field")
def clear_field(
    record_id: str = typer.Argument(..., help="Record id."),
    field: OverlayField = typer.Argument(..., help="Field to remove."),
) -> None:
    """
    Remove a deployment, medical or accommodation field.
    """

    async def command(controller: RecordLifecycleController) -> None:
        await controller.clear_overlay_field(record_id, field)
        typer.echo(f"{field.value} cleared for {record_id}.")

    _run(command)


@app.command()
def overview() -> None:
    """
    Show strength statistics for the active directory.
    """

    async def command(controller: RecordLifecycleController) -> None:
        print_overview(controller.list_active())

    _run(command)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
