"""
Airmen Registry - personnel records for an air force unit.

Administrators enrol, review, edit, filter, export and print airman
records; the public submits new records through a restricted form that
lands in an approval queue. The package provides:

- Domain models with derived fields (age, service length, service category)
- A lifecycle controller for the pending -> active -> deleted flow
- Directory search/filtering and spreadsheet export
- A PostgreSQL-backed record gateway and a typer CLI
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from airmen_registry.config import Settings, get_settings
from airmen_registry.domain import AirmanDraft, AirmanRecord, RecordStatus
from airmen_registry.errors import (
    GatewayError,
    IntakeError,
    NotAuthenticatedError,
    PersistenceError,
    RecordNotFoundError,
    RegistryError,
)
from airmen_registry.export import render_csv, write_csv
from airmen_registry.filtering import RecordFilter, filter_records
from airmen_registry.infrastructure.gateway import PostgresRecordGateway, RecordGateway
from airmen_registry.intake import parse_draft
from airmen_registry.lifecycle import RecordLifecycleController, StaticIdentity
from airmen_registry.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "AirmanDraft",
    "AirmanRecord",
    "RecordStatus",
    # Lifecycle
    "RecordLifecycleController",
    "StaticIdentity",
    "parse_draft",
    # Persistence
    "RecordGateway",
    "PostgresRecordGateway",
    # Directory
    "RecordFilter",
    "filter_records",
    "render_csv",
    "write_csv",
    # Errors
    "RegistryError",
    "IntakeError",
    "GatewayError",
    "PersistenceError",
    "RecordNotFoundError",
    "NotAuthenticatedError",
    # Logging
    "configure_logging",
    "get_logger",
]
