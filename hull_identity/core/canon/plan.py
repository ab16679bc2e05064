"""
Deduplication plan.

Turns a resolution result (and optionally a cascade result) into the list
of changes a loader has to apply to a store that still holds duplicate
variant rows. Building a plan never writes anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .models import CanonicalHull, DependentRecord, ResolutionResult
from .remap import CascadeResult


@dataclass(frozen=True)
class KeeperUpdate:
    id: str
    external_id: str
    variant_code: str
    name: str


@dataclass(frozen=True)
class MergeEntry:
    canonical: str
    keeper: str
    merged: tuple[str, ...]


@dataclass
class DedupPlan:
    keeper_updates: list[KeeperUpdate] = field(default_factory=list)
    deletions: list[str] = field(default_factory=list)
    hulls: list[CanonicalHull] = field(default_factory=list)
    dependent_updates: dict[str, list[DependentRecord]] = field(default_factory=dict)
    merge_log: list[MergeEntry] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.keeper_updates or self.deletions or self.dependent_updates)

    def summary(self) -> dict[str, int]:
        counts = {
            "hulls": len(self.hulls),
            "keeper_updates": len(self.keeper_updates),
            "deletions": len(self.deletions),
            "merged_groups": len(self.merge_log),
        }
        for collection, records in self.dependent_updates.items():
            counts[f"{collection}_updates"] = len(records)
        return counts


def build_dedup_plan(result: ResolutionResult, cascade: Optional[CascadeResult] = None) -> DedupPlan:
    plan = DedupPlan(hulls=result.hull_records())
    for variant_id, group in result.groups.items():
        keeper = group.keeper
        if keeper is None:
            continue
        if keeper.record.match_id != variant_id:
            plan.keeper_updates.append(
                KeeperUpdate(
                    id=keeper.identifier,
                    external_id=variant_id,
                    variant_code=group.variant_code,
                    name=group.display_name,
                )
            )
        if group.duplicates:
            merged = tuple(member.identifier for member in group.duplicates)
            plan.deletions.extend(merged)
            plan.merge_log.append(MergeEntry(canonical=variant_id, keeper=keeper.identifier, merged=merged))
    plan.deletions.sort()
    if cascade is not None:
        plan.dependent_updates = cascade.updated_by_collection()
    return plan
