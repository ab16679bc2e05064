"""
Foreign-key remap and cascade.

Repoints statistics, hardpoints and installed items from duplicate variants
onto the surviving canonical variant. Edition metadata that belonged to a
duplicate is carried onto the dependent row, but never overwrites a value the
row already has.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from .errors import IssueKind, ResolutionIssue
from .models import DependentRecord, EditionMetadata, ResolutionResult

logger = logging.getLogger(__name__)


@dataclass
class CascadeResult:
    """Dependent rows after remapping, split by what happened to them."""
    records: list[DependentRecord] = field(default_factory=list)
    """Every surviving row, rewritten or untouched, in input order"""

    updated: list[DependentRecord] = field(default_factory=list)
    """Rows whose variant reference changed"""

    dropped: list[DependentRecord] = field(default_factory=list)
    """Rows pointing at records that failed resolution entirely"""

    misses: list[DependentRecord] = field(default_factory=list)
    """Rows whose reference is absent from the remap table; left unmodified"""

    issues: list[ResolutionIssue] = field(default_factory=list)

    def updated_by_collection(self) -> dict[str, list[DependentRecord]]:
        grouped: dict[str, list[DependentRecord]] = {}
        for record in self.updated:
            grouped.setdefault(record.collection, []).append(record)
        return {key: grouped[key] for key in sorted(grouped)}


class ForeignKeyRemapper:
    def __init__(
        self,
        remap: Mapping[str, str],
        edition_metadata: Optional[Mapping[str, EditionMetadata]] = None,
        unresolved: Iterable[str] = (),
    ) -> None:
        self.remap = remap
        self.edition_metadata = edition_metadata or {}
        self.unresolved = frozenset(unresolved)
        # Canonical ids are valid targets in their own right.
        self._canonical_ids = frozenset(remap.values())

    @classmethod
    def from_result(cls, result: ResolutionResult) -> "ForeignKeyRemapper":
        return cls(result.remap, result.edition_metadata, result.unresolved)

    def remap_one(self, record: DependentRecord) -> tuple[Optional[DependentRecord], Optional[ResolutionIssue]]:
        """
        Rewrite one dependent row.

        Returns (record, issue): record is None when the row must be dropped,
        issue is set for misses and drops.
        """
        ref = record.variant_ref
        if not ref:
            return record, None
        if ref in self.unresolved:
            return None, ResolutionIssue(
                IssueKind.DROPPED_DEPENDENT,
                record.id,
                f"{record.collection} row references unresolved record {ref!r}",
            )
        canonical = self.remap.get(ref)
        if canonical is None:
            if ref in self._canonical_ids:
                return record, None
            return record, ResolutionIssue(
                IssueKind.REMAP_TABLE_MISS,
                record.id,
                f"{record.collection} row references unknown variant {ref!r}",
            )
        if canonical == ref:
            return record, None
        edition = self.edition_metadata.get(ref) or EditionMetadata()
        return (
            record.with_variant(
                canonical,
                profile=record.profile or edition.edition_code,
                livery=record.livery or edition.livery,
            ),
            None,
        )

    def cascade(self, records: Iterable[DependentRecord]) -> CascadeResult:
        outcome = CascadeResult()
        for record in records:
            rewritten, issue = self.remap_one(record)
            if issue is not None:
                logger.warning("%s [%s]: %s", issue.kind.value, issue.identifier, issue.message)
                outcome.issues.append(issue)
            if rewritten is None:
                outcome.dropped.append(record)
                continue
            if issue is not None:
                outcome.misses.append(record)
            elif rewritten is not record:
                outcome.updated.append(rewritten)
            outcome.records.append(rewritten)
        logger.info(
            "Cascade: %d updated, %d unmatched, %d dropped",
            len(outcome.updated),
            len(outcome.misses),
            len(outcome.dropped),
        )
        return outcome


def cascade_remap(result: ResolutionResult, records: Iterable[DependentRecord]) -> CascadeResult:
    return ForeignKeyRemapper.from_result(result).cascade(records)
