"""
Exception hierarchy for the Airmen Registry.

Validation problems are raised at the intake boundary and never reach the
store. Store failures are raised by the gateway and translated by the
lifecycle controller into a `PersistenceError` that names the operation,
which the CLI shows as a blocking notice.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class RegistryError(Exception):
    """Base class for all registry errors."""


class IntakeError(RegistryError):
    """
    A submitted payload failed validation.

    `errors` carries the pydantic error list so callers can point at the
    offending fields.
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class GatewayError(RegistryError):
    """The persistence gateway failed to complete an operation."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message


class PersistenceError(RegistryError):
    """A mutating lifecycle operation could not be persisted."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"Failed to {operation}: {message}")
        self.operation = operation
        self.message = message


class RecordNotFoundError(RegistryError):
    """No record with the id exists, or none in the required status."""

    def __init__(self, record_id: str, status: Optional[str] = None) -> None:
        qualifier = f"{status} " if status else ""
        super().__init__(f"No {qualifier}record with id '{record_id}'")
        self.record_id = record_id
        self.status = status


class NotAuthenticatedError(RegistryError):
    """An administrator operation was attempted without a session."""


__all__ = [
    "RegistryError",
    "IntakeError",
    "GatewayError",
    "PersistenceError",
    "RecordNotFoundError",
    "NotAuthenticatedError",
]
