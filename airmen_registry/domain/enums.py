"""
Closed enumerations for airman records.

Stored values are short, stable codes; presentation text (including the
Bangla labels used on printed rolls) lives in a separate lookup so a label
can change without touching stored data.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Dict


class Rank(StrEnum):
    MWO = "MWO"
    SWO = "SWO"
    WO = "WO"
    SGT = "Sgt"
    CPL = "Cpl"
    LAC = "LAC"
    AC = "AC"


class Trade(StrEnum):
    SEC_ASST_GD = "Sec Asst (GD)"
    RAD_OP = "Rad Op"
    RADIO_FIT = "Radio Fit"
    LOG_ASST = "Log Asst"
    ADMIN_ASST = "Admin Asst"
    MTOF = "MTOF"
    ARMT_FITT = "Armt Fitt"
    EI_FITT = "E&I Fitt"


class Flight(StrEnum):
    ADMIN = "Admin"
    OPS = "Ops"
    RADIO = "Radio"
    MT_OPS = "MT (Ops)"
    MT_RI = "MT (R&I)"
    ARMT = "Armt"
    ELECT = "Elect"
    RADAR = "Radar"


class Accommodation(StrEnum):
    AIRMEN_MESS = "Airmen Mess"
    SGT_MESS = "Sgt Mess"
    LO_SQ = "L/O (SQ)"
    LO_OA = "L/O (OA)"
    LO_OAT = "L/O (OAT)"

    @property
    def is_living_out(self) -> bool:
        return self in LIVING_OUT_MODES


LIVING_OUT_MODES = frozenset({Accommodation.LO_SQ, Accommodation.LO_OA, Accommodation.LO_OAT})


class BloodGroup(StrEnum):
    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    O_POS = "O+"
    O_NEG = "O-"
    AB_POS = "AB+"
    AB_NEG = "AB-"


class Religion(StrEnum):
    ISLAM = "Islam"
    HINDUISM = "Hinduism"
    CHRISTIANITY = "Christianity"
    BUDDHISM = "Buddhism"
    OTHER = "Other"


class RecordStatus(StrEnum):
    PENDING = "pending"
    ACTIVE = "active"


class ServiceCategory(StrEnum):
    ABOVE_15 = "Above 15 Years"
    BELOW_15 = "Below 15 Years"


class DeploymentStatusKind(StrEnum):
    """Deployment/medical badge a directory filter can require."""

    ANY = "any"
    HAS_TDY = "hasTDY"
    HAS_DET = "hasDET"
    HAS_MED_CAT = "hasMedCat"


class OverlayField(StrEnum):
    """Fields editable in place from the directory status panel."""

    TDY_LOCATION = "tdy_location"
    DET_LOCATION = "det_location"
    MED_CAT = "med_cat"
    ACCOMMODATION = "accommodation"
    L_OUT_DATE = "l_out_date"
    ACCOM_ADDRESS = "accom_address"


_LABELS: Dict[type, Dict[StrEnum, str]] = {
    Rank: {
        Rank.MWO: "MWO (মাঃওঃঅঃ)",
        Rank.SWO: "SWO (সিঃওঃঅঃ)",
        Rank.WO: "WO (ওঃঅঃ)",
        Rank.SGT: "Sgt (সার্জেন্ট)",
        Rank.CPL: "Cpl (কর্পোর‌্যাল)",
        Rank.LAC: "LAC (এলএসি)",
        Rank.AC: "AC (এসি)",
    },
    Trade: {
        Trade.SEC_ASST_GD: "Sec Asst (GD) - সেক এসি (জিডি)",
        Trade.RAD_OP: "Rad Op - র‌্যাডার অপাঃ",
        Trade.RADIO_FIT: "Radio Fit - রেডিও ফিটার",
        Trade.LOG_ASST: "Log Asst - লগ এসিঃ",
        Trade.ADMIN_ASST: "Admin Asst - এডমিন এসিঃ",
        Trade.MTOF: "MTOF - এমটিওএফ",
        Trade.ARMT_FITT: "Armt Fitt - আর্মা ফিঃ",
        Trade.EI_FITT: "E&I Fitt - ইএন্ডআই ফিঃ",
    },
    DeploymentStatusKind: {
        DeploymentStatusKind.ANY: "All",
        DeploymentStatusKind.HAS_TDY: "On TDY",
        DeploymentStatusKind.HAS_DET: "On DET",
        DeploymentStatusKind.HAS_MED_CAT: "Med Cat",
    },
}


def display_label(value: StrEnum) -> str:
    """Presentation text for an enum member; falls back to the stored value."""
    return _LABELS.get(type(value), {}).get(value, value.value)


__all__ = [
    "Rank",
    "Trade",
    "Flight",
    "Accommodation",
    "LIVING_OUT_MODES",
    "BloodGroup",
    "Religion",
    "RecordStatus",
    "ServiceCategory",
    "DeploymentStatusKind",
    "OverlayField",
    "display_label",
]
