"""
Domain package for the Airmen Registry.

Exports the record models, the closed enumerations and the derived-field
calculator. Keep this package focused on data definitions and validation
concerns; nothing here performs I/O.
"""

from airmen_registry.domain.derived import age, service_category, tenure, tenure_years
from airmen_registry.domain.enums import (
    Accommodation,
    BloodGroup,
    DeploymentStatusKind,
    Flight,
    OverlayField,
    Rank,
    RecordStatus,
    Religion,
    ServiceCategory,
    Trade,
    display_label,
)
from airmen_registry.domain.models import AirmanDraft, AirmanRecord

__all__ = [
    "AirmanDraft",
    "AirmanRecord",
    "Accommodation",
    "BloodGroup",
    "DeploymentStatusKind",
    "Flight",
    "OverlayField",
    "Rank",
    "RecordStatus",
    "Religion",
    "ServiceCategory",
    "Trade",
    "display_label",
    "age",
    "service_category",
    "tenure",
    "tenure_years",
]
