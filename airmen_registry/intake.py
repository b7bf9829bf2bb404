"""
Form boundary: turns submitted payloads into validated drafts.

Both the enrollment form and the public submission form post the same
shape. Identity, status and creation time are always assigned by the
system, so any client-supplied values for them are discarded here.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping

from pydantic import ValidationError

from airmen_registry.domain.models import AirmanDraft
from airmen_registry.errors import IntakeError
from airmen_registry.utils.logging import get_logger

log = get_logger(__name__)

SYSTEM_FIELDS = frozenset({"id", "status", "createdAt", "created_at"})


def parse_draft(payload: Mapping[str, Any]) -> AirmanDraft:
    """
    Validate a submitted payload.

    Raises
    ------
    IntakeError
        If a required field is missing or a value is outside its domain.
    """
    data = {key: value for key, value in payload.items() if key not in SYSTEM_FIELDS}
    dropped = sorted(SYSTEM_FIELDS.intersection(payload))
    if dropped:
        log.debug("Discarded client-supplied system fields", extra={"fields": dropped})
    try:
        return AirmanDraft.model_validate(data)
    except ValidationError as exc:
        raise IntakeError(
            f"Submission rejected: {exc.error_count()} invalid field(s)",
            exc.errors(include_url=False),
        ) from exc


def load_payload(path: Path) -> Dict[str, Any]:
    """Read a JSON object from `path`."""
    try:
        with path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise IntakeError(f"Cannot read {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise IntakeError(f"{path} must contain a JSON object")
    return payload


__all__ = ["SYSTEM_FIELDS", "load_payload", "parse_draft"]
