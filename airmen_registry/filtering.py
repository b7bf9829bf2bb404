"""
Directory filter and search.

A record is visible when it matches the free-text search (case-insensitive
substring over a fixed set of fields) and every populated structured
filter. Results keep the input order and never alias the input list.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from airmen_registry.domain.enums import (
    BloodGroup,
    DeploymentStatusKind,
    Flight,
    Rank,
    ServiceCategory,
    Trade,
    display_label,
)
from airmen_registry.domain.models import AirmanDraft


class RecordFilter(BaseModel):
    """Structured directory filter; unset fields do not constrain."""

    rank: Optional[Rank] = None
    trade: Optional[Trade] = None
    flight: Optional[Flight] = None
    blood_group: Optional[BloodGroup] = None
    service_category: Optional[ServiceCategory] = None
    deployment_status: DeploymentStatusKind = DeploymentStatusKind.ANY

    model_config = ConfigDict(frozen=True)

    def is_empty(self) -> bool:
        return self == RecordFilter()


def search_fields(record: AirmanDraft) -> List[str]:
    """Text searched for a record; absent fields contribute an empty string."""
    return [
        record.bd_no,
        record.nid_no or "",
        record.name_en,
        record.name_bn,
        record.mobile,
        display_label(record.rank),
        display_label(record.trade),
        record.flight.value,
        record.blood_group.value,
        record.religion.value,
        record.accommodation.value,
        record.accom_address or "",
        record.spouse_name or "",
        record.tdy_location or "",
        record.det_location or "",
        record.med_cat or "",
    ]


def matches_search(record: AirmanDraft, term: str) -> bool:
    if not term:
        return True
    needle = term.lower()
    return any(needle in field.lower() for field in search_fields(record))


def matches_filter(record: AirmanDraft, filters: RecordFilter) -> bool:
    if filters.rank is not None and record.rank != filters.rank:
        return False
    if filters.trade is not None and record.trade != filters.trade:
        return False
    if filters.flight is not None and record.flight != filters.flight:
        return False
    if filters.blood_group is not None and record.blood_group != filters.blood_group:
        return False
    if filters.service_category is not None and record.service_category != filters.service_category:
        return False
    return record.has_overlay(filters.deployment_status)


def filter_records(
    records: Iterable[AirmanDraft],
    search: str = "",
    filters: Optional[RecordFilter] = None,
) -> List[AirmanDraft]:
    """
    Return the records visible under `search` and `filters`, in input order.
    """
    filters = filters or RecordFilter()
    return [
        record
        for record in records
        if matches_search(record, search) and matches_filter(record, filters)
    ]


__all__ = [
    "RecordFilter",
    "filter_records",
    "matches_filter",
    "matches_search",
    "search_fields",
]
