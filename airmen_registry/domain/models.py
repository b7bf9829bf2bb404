"""
Domain models for the Airmen Registry.

`AirmanDraft` is the shape accepted from the enrollment and public forms;
`AirmanRecord` is a stored row with its identity, lifecycle status and
creation timestamp. Both accept camelCase keys (as posted by the web form)
and snake_case keys (as returned by the database).

Normalisation rules applied on every validation:
- an empty string is the same as an absent field;
- an unmarried airman never carries a spouse name;
- the living-out date only exists for living-out accommodation modes.
"""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel

from airmen_registry.domain.derived import service_category
from airmen_registry.domain.enums import (
    Accommodation,
    BloodGroup,
    DeploymentStatusKind,
    Flight,
    Rank,
    RecordStatus,
    Religion,
    ServiceCategory,
    Trade,
)


class AirmanDraft(BaseModel):
    """
    An airman's administrative file as entered on a form.
    """

    bd_no: str = Field(..., pattern=r"^\d+$", description="BD (service) number.")
    nid_no: Optional[str] = Field(None, description="National ID number.")
    total_children: int = Field(0, ge=0)
    rank: Rank = Rank.AC
    name_en: str = Field(..., min_length=1, description="Full name in English.")
    name_bn: str = Field(..., min_length=1, description="Full name in Bangla.")
    trade: Trade = Trade.SEC_ASST_GD
    flight: Flight = Flight.ADMIN
    mobile: str = Field(..., min_length=1)
    dob: date = Field(..., description="Date of birth.")
    doe: date = Field(..., description="Date of enrollment.")
    arrival_date: date = Field(..., description="Date of arrival at the unit.")
    service_category: ServiceCategory = ServiceCategory.BELOW_15
    height_feet: int = Field(5, ge=0)
    height_inches: int = Field(0, ge=0, le=11)
    blood_group: BloodGroup = BloodGroup.O_POS
    religion: Religion = Religion.ISLAM
    is_married: bool = False
    spouse_name: Optional[str] = None
    accommodation: Accommodation = Accommodation.AIRMEN_MESS
    l_out_date: Optional[date] = Field(None, description="Living-out effective date.")
    accom_address: Optional[str] = None

    # Deployment / medical overlay
    tdy_location: Optional[str] = None
    det_location: Optional[str] = None
    med_cat: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
        extra="ignore",
        frozen=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: value
                for key, value in data.items()
                if not (isinstance(value, str) and value.strip() == "")
            }
        return data

    @field_validator("spouse_name")
    @classmethod
    def _spouse_requires_marriage(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if not info.data.get("is_married"):
            return None
        return value

    @field_validator("l_out_date")
    @classmethod
    def _l_out_requires_living_out(cls, value: Optional[date], info: ValidationInfo) -> Optional[date]:
        accommodation = info.data.get("accommodation")
        if accommodation is None or not accommodation.is_living_out:
            return None
        return value

    def with_service_category(self, today: Optional[date] = None) -> "AirmanDraft":
        """Return a copy whose service category matches the enrollment date."""
        category = service_category(self.doe, today)
        if category == self.service_category:
            return self
        return self.model_copy(update={"service_category": category})

    def has_overlay(self, kind: DeploymentStatusKind) -> bool:
        if kind is DeploymentStatusKind.HAS_TDY:
            return bool(self.tdy_location)
        if kind is DeploymentStatusKind.HAS_DET:
            return bool(self.det_location)
        if kind is DeploymentStatusKind.HAS_MED_CAT:
            return bool(self.med_cat)
        return True

    def storage_fields(self) -> Dict[str, Any]:
        """
        Column values for the mutable part of the record.

        Enum members are flattened to their stored value; absent fields are
        kept as None so an update clears them in the store.
        """
        fields = self.model_dump(include=set(AirmanDraft.model_fields))
        return {key: value.value if isinstance(value, Enum) else value for key, value in fields.items()}


class AirmanRecord(AirmanDraft):
    """
    A persisted airman record.

    `id` and `created_at` are assigned by the store and never change;
    `status` only changes through approval.
    """

    id: str
    status: RecordStatus
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def _uuid_to_str(cls, value: Any) -> Any:
        if isinstance(value, UUID):
            return str(value)
        return value

    def draft(self) -> AirmanDraft:
        """The editable part of the record, without identity or status."""
        return AirmanDraft.model_validate(self.storage_fields())


DRAFT_FIELDS = tuple(AirmanDraft.model_fields)


__all__ = ["AirmanDraft", "AirmanRecord", "DRAFT_FIELDS"]
