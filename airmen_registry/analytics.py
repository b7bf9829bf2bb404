"""
Overview statistics for the active directory.

Every count table is zero-filled over the full enumeration so a rank or
flight with nobody in it still shows up.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable

from airmen_registry.domain.enums import DeploymentStatusKind, Flight, Rank
from airmen_registry.domain.models import AirmanDraft

WARRANT_RANKS = (Rank.MWO, Rank.SWO, Rank.WO)
NCO_RANKS = (Rank.SGT, Rank.CPL)
OTHER_RANKS = (Rank.LAC, Rank.AC)


@dataclass(frozen=True)
class ForceSummary:
    total: int
    warrant_officers: int
    ncos: int
    other_ranks: int


def rank_counts(records: Iterable[AirmanDraft]) -> Dict[Rank, int]:
    counts = {rank: 0 for rank in Rank}
    for record in records:
        counts[record.rank] += 1
    return counts


def flight_rank_matrix(records: Iterable[AirmanDraft]) -> Dict[Flight, Dict[Rank, int]]:
    """Head count per flight, broken down by rank."""
    matrix = {flight: {rank: 0 for rank in Rank} for flight in Flight}
    for record in records:
        matrix[record.flight][record.rank] += 1
    return matrix


def force_summary(records: Iterable[AirmanDraft]) -> ForceSummary:
    counts = rank_counts(records)
    return ForceSummary(
        total=sum(counts.values()),
        warrant_officers=sum(counts[rank] for rank in WARRANT_RANKS),
        ncos=sum(counts[rank] for rank in NCO_RANKS),
        other_ranks=sum(counts[rank] for rank in OTHER_RANKS),
    )


def status_badges(records: Iterable[AirmanDraft]) -> Dict[DeploymentStatusKind, int]:
    """How many records carry each deployment/medical overlay."""
    kinds = (
        DeploymentStatusKind.HAS_TDY,
        DeploymentStatusKind.HAS_DET,
        DeploymentStatusKind.HAS_MED_CAT,
    )
    badges = {kind: 0 for kind in kinds}
    for record in records:
        for kind in kinds:
            if record.has_overlay(kind):
                badges[kind] += 1
    return badges


__all__ = [
    "ForceSummary",
    "flight_rank_matrix",
    "force_summary",
    "rank_counts",
    "status_badges",
]
