"""
Record lifecycle controller.

Owns the two record queues (active directory and pending review) and is
the only component allowed to change them. Every transition goes through
the gateway and is followed by a full re-read of the store; snapshots are
exposed as tuples so consumers cannot mutate them.

State machine per record:

    create            -> active
    submit_for_review -> pending
    pending --approve--> active
    pending --reject---> deleted
    active  --update---> active
    active  --delete---> deleted

Gateway failures leave the snapshots untouched and surface as
`PersistenceError`. Nothing is retried.

Usage:
    controller = RecordLifecycleController(gateway)
    await controller.refresh()
    record = await controller.submit_for_review(draft)
    await controller.approve(record.id)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Awaitable, Callable, Optional, Protocol, Tuple, TypeVar, Union, runtime_checkable

from pydantic import ValidationError

from airmen_registry.domain.enums import OverlayField, RecordStatus
from airmen_registry.domain.models import AirmanDraft, AirmanRecord
from airmen_registry.errors import (
    GatewayError,
    IntakeError,
    NotAuthenticatedError,
    PersistenceError,
    RecordNotFoundError,
)
from airmen_registry.infrastructure.gateway import RecordGateway
from airmen_registry.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")


@runtime_checkable
class IdentityProvider(Protocol):
    """Session source; authentication itself happens elsewhere."""

    def is_authenticated(self) -> bool:
        ...


@dataclass(frozen=True)
class StaticIdentity:
    """Identity with a fixed answer, e.g. an operator on the CLI."""

    authenticated: bool = True

    def is_authenticated(self) -> bool:
        return self.authenticated


class RecordLifecycleController:
    """
    Applies lifecycle transitions and keeps the active/pending snapshots.

    Parameters
    ----------
    gateway : RecordGateway
        Persistence boundary.
    identity : IdentityProvider | None
        Session source. Administrator operations are refused while it reports
        no session; public submission is always allowed. None means trusted.
    today : callable
        Clock used for service-category computation.
    """

    def __init__(
        self,
        gateway: RecordGateway,
        identity: Optional[IdentityProvider] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._gateway = gateway
        self._identity = identity
        self._today = today
        self._active: Tuple[AirmanRecord, ...] = ()
        self._pending: Tuple[AirmanRecord, ...] = ()

    # Snapshots -----------------------------------------------------------

    @property
    def is_authenticated(self) -> bool:
        return self._identity is None or self._identity.is_authenticated()

    def list_active(self) -> Tuple[AirmanRecord, ...]:
        return self._active

    def list_pending(self) -> Tuple[AirmanRecord, ...]:
        return self._pending

    def find(self, record_id: str) -> Optional[AirmanRecord]:
        for record in (*self._active, *self._pending):
            if record.id == record_id:
                return record
        return None

    def find_active(self, record_id: str) -> Optional[AirmanRecord]:
        for record in self._active:
            if record.id == record_id:
                return record
        return None

    async def refresh(self) -> None:
        """Re-read every record and partition by status."""
        if not self.is_authenticated:
            self._active = ()
            self._pending = ()
            log.debug("No session; snapshots cleared")
            return
        try:
            records = await self._gateway.list_all()
        except GatewayError as exc:
            raise PersistenceError("load records", exc.message) from exc
        self._active = tuple(r for r in records if r.status is RecordStatus.ACTIVE)
        self._pending = tuple(r for r in records if r.status is RecordStatus.PENDING)
        log.debug(
            "Snapshots refreshed",
            extra={"active": len(self._active), "pending": len(self._pending)},
        )

    # Transitions ---------------------------------------------------------

    def _require_session(self, operation: str) -> None:
        if not self.is_authenticated:
            raise NotAuthenticatedError(f"Cannot {operation} without an authenticated session")

    async def _mutate(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        try:
            result = await call()
        except GatewayError as exc:
            log.error(
                f"[{operation.upper()} FAILED] {exc.message}",
                extra={"operation": operation},
            )
            raise PersistenceError(operation, exc.message) from exc
        await self.refresh()
        return result

    async def _insert(self, draft: AirmanDraft, status: RecordStatus, operation: str) -> AirmanRecord:
        fields = draft.with_service_category(self._today()).storage_fields()
        record = await self._mutate(operation, lambda: self._gateway.insert(fields, status))
        log.info(
            f"[{operation.upper()}] {record.id}",
            extra={"record_id": record.id, "status": status.value, "bd_no": record.bd_no},
        )
        return record

    async def create(self, draft: AirmanDraft) -> AirmanRecord:
        """Enrol a record directly into the active directory."""
        self._require_session("add airman")
        return await self._insert(draft, RecordStatus.ACTIVE, "add airman")

    async def submit_for_review(self, draft: AirmanDraft) -> AirmanRecord:
        """Queue a publicly submitted record for administrator review."""
        return await self._insert(draft, RecordStatus.PENDING, "submit record")

    async def approve(self, record_id: str) -> bool:
        """
        Move a pending record into the directory.

        The store decides whether `record_id` is still pending, so an out of
        date snapshot never blocks an approval. Returns False (and logs) when
        the record is missing or already active; approving twice is harmless.
        """
        self._require_session("approve record")
        changed = await self._mutate(
            "approve record",
            lambda: self._gateway.set_status(record_id, RecordStatus.ACTIVE, expected=RecordStatus.PENDING),
        )
        if changed:
            log.info(f"[APPROVED] {record_id}", extra={"record_id": record_id})
        else:
            log.warning(
                "[APPROVE SKIPPED] record is not pending",
                extra={"record_id": record_id},
            )
        return changed

    async def reject(self, record_id: str) -> bool:
        """Permanently discard a pending submission."""
        self._require_session("reject record")
        removed = await self._mutate(
            "reject record",
            lambda: self._gateway.delete(record_id, status=RecordStatus.PENDING),
        )
        log.info(f"[REJECTED] {record_id}", extra={"record_id": record_id, "removed": removed})
        return removed

    async def update(self, record: AirmanRecord) -> AirmanRecord:
        """
        Overwrite every editable field of an active record.

        Pending submissions only change through approve or reject; updating
        one raises `RecordNotFoundError` like a missing id.

        The record is re-validated first, so spouse name and living-out date
        are cleared when they no longer apply, and the service category is
        recomputed from the enrollment date.
        """
        self._require_session("update record")
        try:
            prepared = AirmanRecord.model_validate(record.model_dump())
        except ValidationError as exc:
            raise IntakeError(f"Invalid record {record.id}", exc.errors()) from exc
        prepared = prepared.with_service_category(self._today())
        found = await self._mutate(
            "update record",
            lambda: self._gateway.update(prepared.id, prepared.storage_fields(), status=RecordStatus.ACTIVE),
        )
        if not found:
            raise RecordNotFoundError(prepared.id, RecordStatus.ACTIVE)
        log.info(f"[UPDATED] {prepared.id}", extra={"record_id": prepared.id})
        return self.find_active(prepared.id) or prepared

    async def delete(self, record_id: str) -> bool:
        """Remove an active record forever. Confirmation is the caller's job."""
        self._require_session("delete record")
        removed = await self._mutate(
            "delete record",
            lambda: self._gateway.delete(record_id, status=RecordStatus.ACTIVE),
        )
        log.info(f"[DELETED] {record_id}", extra={"record_id": record_id, "removed": removed})
        return removed

    async def set_overlay_field(
        self,
        record_id: str,
        field: Union[OverlayField, str],
        value: Optional[str],
    ) -> AirmanRecord:
        """
        Set a deployment, medical or accommodation field in place.

        An empty value removes the field instead of storing a blank.
        """
        self._require_session("update record")
        field = OverlayField(field)
        record = self.find_active(record_id)
        if record is None:
            raise RecordNotFoundError(record_id, RecordStatus.ACTIVE)

        cleared = value is None or str(value).strip() == ""
        if cleared and field is OverlayField.ACCOMMODATION:
            raise IntakeError("Accommodation mode cannot be cleared")

        data = record.model_dump()
        data[field.value] = None if cleared else value
        try:
            updated = AirmanRecord.model_validate(data)
        except ValidationError as exc:
            raise IntakeError(f"Invalid value for {field.value}", exc.errors()) from exc
        return await self.update(updated)

    async def clear_overlay_field(self, record_id: str, field: Union[OverlayField, str]) -> AirmanRecord:
        return await self.set_overlay_field(record_id, field, None)


__all__ = [
    "IdentityProvider",
    "RecordLifecycleController",
    "StaticIdentity",
]
