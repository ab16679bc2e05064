"""
Grouping and merge resolution.

One pass runs four phases over a batch of raw records:

1. Collect: canonicalize each record (hull key, variant code, canonical
   variant id, edition metadata) and append it to its group.
2. Select keeper: sort each group with a deterministic comparator.
3. Merge: fold names, descriptions and edition metadata of the duplicates
   into the group.
4. Emit: map every raw identifier to its group's canonical variant id.

The result depends only on the set of input records, never on their order.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable, Mapping, Optional

from .editions import EditionDetector
from .errors import IssueKind, RecordContractError, ResolutionIssue
from .family import clean_family_name
from .keys import base_name_from_family, build_hull_key, canonical_variant_name, to_canonical_variant_ext_id
from .manufacturer import collect_manufacturer_tokens, resolve_manufacturer_code, strip_manufacturer_prefix
from .matching import VariantMatcher
from .models import (
    CanonicalHull,
    CanonicalVariantGroup,
    EditionMetadata,
    Manufacturer,
    ManufacturerRef,
    MemberRecord,
    RawRecord,
    ResolutionResult,
)
from .vocabulary import BASE, Vocabulary, default_vocabulary

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("id", "external_id", "name", "class_name", "variant_code", "description", "hull_class", "size")


class IdentityResolver:
    """
    Resolves raw hull/variant records into canonical variant groups.

    Example:
        resolver = IdentityResolver()
        result = resolver.resolve([
            RawRecord(id="A", name="Aurora MR", manufacturer=ManufacturerRef(code="RSI")),
            RawRecord(id="B", external_id="RSI_AURORA_MR", manufacturer=ManufacturerRef(code="RSI")),
        ])
        result.remap → {"A": "RSI_AURORA_MR", "B": "RSI_AURORA_MR"}
        result.groups["RSI_AURORA_MR"].keeper.identifier → "B"
    """

    def __init__(
        self,
        vocabulary: Optional[Vocabulary] = None,
        manufacturers: Optional[Mapping[str, Manufacturer]] = None,
        identifier_prefix_fallback: bool = True,
        prefix_min_length: int = 0,
    ) -> None:
        self.vocabulary = vocabulary or default_vocabulary()
        self.manufacturers = dict(manufacturers or {})
        self.identifier_prefix_fallback = identifier_prefix_fallback
        self.prefix_min_length = prefix_min_length
        self.matcher = VariantMatcher(self.vocabulary)
        self.editions = EditionDetector(self.vocabulary)

    # ------------------------------------------------------------------
    # Per-record canonicalization
    # ------------------------------------------------------------------

    def manufacturer_tokens(self, record: RawRecord, manufacturer_code: str) -> frozenset[str]:
        ref = record.manufacturer
        name = ref.name if ref else None
        aliases: list[str] = list(ref.aliases) if ref else []
        known = self._known_manufacturer(record, manufacturer_code)
        if known is not None:
            name = name or known.name
            aliases.extend(known.aliases)
        return collect_manufacturer_tokens(manufacturer_code, name, aliases)

    def variant_code_for(self, record: RawRecord) -> str:
        if record.variant_code:
            return self.matcher.extract_variant_code(record.variant_code)
        return self.matcher.extract_from_designation(record.designation)

    def canonicalize(self, record: RawRecord) -> Optional[MemberRecord]:
        """
        Compute the canonical identity of one record.

        Returns None when no manufacturer can be resolved; such records
        cannot be given a hull key and are skipped by the caller.
        """
        self._check_contract(record)
        manufacturer_code = resolve_manufacturer_code(
            record.manufacturer,
            record.match_id,
            self.manufacturers,
            identifier_prefix_fallback=self.identifier_prefix_fallback,
        )
        if not manufacturer_code:
            return None
        tokens = self.manufacturer_tokens(record, manufacturer_code)
        variant_code = self.variant_code_for(record)
        family_name = clean_family_name(
            record.designation,
            variant_code,
            tokens,
            vocabulary=self.vocabulary,
            prefix_min_length=self.prefix_min_length,
        )
        return MemberRecord(
            record=record,
            manufacturer_code=manufacturer_code,
            family_name=family_name,
            variant_code=variant_code,
            edition=self.editions.detect(record.designation),
            edition_only=self.editions.is_edition_only(record.designation),
        )

    def canonical_variant_id(self, record: RawRecord) -> Optional[str]:
        member = self.canonicalize(record)
        if member is None:
            return None
        return _variant_id(member)

    # ------------------------------------------------------------------
    # Batch resolution
    # ------------------------------------------------------------------

    def resolve(self, records: Iterable[RawRecord]) -> ResolutionResult:
        result = ResolutionResult(vocabulary_version=self.vocabulary.version)
        unresolved: set[str] = set()

        groups: dict[str, CanonicalVariantGroup] = {}
        for record in self._unique_records(records, result):
            member = self.canonicalize(record)
            if member is None:
                identifier = record.identifier or ""
                unresolved.add(identifier)
                self._issue(
                    result,
                    IssueKind.MISSING_MANUFACTURER_REFERENCE,
                    identifier,
                    "no resolvable manufacturer; record skipped",
                )
                continue
            self._collect(groups, member, result)

        remap: dict[str, str] = {}
        edition_metadata: dict[str, EditionMetadata] = {}
        for variant_id in sorted(groups):
            group = groups[variant_id]
            self._select_keeper(group)
            self._merge(group, edition_metadata)
            for member in group.members:
                remap[member.identifier] = variant_id
            if group.duplicates:
                logger.debug(
                    "Merged %d duplicate(s) into %s (keeper %s)",
                    len(group.duplicates),
                    variant_id,
                    group.keeper.identifier if group.keeper else None,
                )
            result.groups[variant_id] = group

        result.hulls = self._build_hulls(result.groups)
        result.remap = {key: remap[key] for key in sorted(remap)}
        result.edition_metadata = {key: edition_metadata[key] for key in sorted(edition_metadata)}
        result.unresolved = frozenset(unresolved)
        result.issues.sort(key=lambda issue: (issue.kind.value, issue.identifier or "", issue.message))
        result.freeze()
        logger.info(
            "Resolved %d record(s) into %d variant(s) across %d hull(s); %d skipped",
            len(result.remap),
            len(result.groups),
            len(result.hulls),
            len(unresolved),
        )
        return result

    def _unique_records(self, records: Iterable[RawRecord], result: ResolutionResult) -> list[RawRecord]:
        by_identifier: dict[str, set[RawRecord]] = defaultdict(set)
        for record in records:
            self._check_contract(record)
            identifier = record.identifier
            if not identifier:
                self._issue(
                    result,
                    IssueKind.MISSING_IDENTIFIER,
                    None,
                    f"record without identifier skipped (name={record.designation!r})",
                )
                continue
            by_identifier[identifier].add(record)

        unique: list[RawRecord] = []
        for identifier in sorted(by_identifier):
            candidates = sorted(by_identifier[identifier], key=RawRecord.sort_key)
            if len(candidates) > 1:
                self._issue(
                    result,
                    IssueKind.CONFLICTING_RECORD,
                    identifier,
                    f"{len(candidates)} differing rows share this identifier; keeping the first in sort order",
                )
            unique.append(candidates[0])
        return unique

    def _collect(
        self,
        groups: dict[str, CanonicalVariantGroup],
        member: MemberRecord,
        result: ResolutionResult,
    ) -> None:
        hull_key = build_hull_key(member.manufacturer_code, member.family_name)
        variant_id = to_canonical_variant_ext_id(hull_key, member.variant_code)
        verified = self.matcher.is_verified(member.variant_code)
        if not verified:
            # Heuristic outcome, not a failure: callers may treat it as unverified.
            result.issues.append(
                ResolutionIssue(
                    IssueKind.AMBIGUOUS_VARIANT_MATCH,
                    member.identifier,
                    f"variant code {member.variant_code!r} is not in vocabulary {self.vocabulary.version}",
                )
            )
        group = groups.get(variant_id)
        if group is None:
            group = CanonicalVariantGroup(
                variant_id=variant_id,
                hull_key=hull_key,
                variant_code=member.variant_code,
                base_name=base_name_from_family(member.family_name),
                vocabulary_version=self.vocabulary.version,
                verified=verified,
            )
            groups[variant_id] = group
        group.add_member(member)
        group.external_refs.update(_external_refs(member.record))

    @staticmethod
    def _select_keeper(group: CanonicalVariantGroup) -> None:
        def rank(member: MemberRecord) -> tuple[int, str]:
            if member.record.match_id == group.variant_id:
                tier = 0
            elif member.edition_only:
                tier = 2
            else:
                tier = 1
            return tier, member.identifier

        ordered = sorted(group.members, key=rank)
        group.keeper = ordered[0]
        group.duplicates = ordered[1:]

    def _merge(self, group: CanonicalVariantGroup, edition_metadata: dict[str, EditionMetadata]) -> None:
        group.names.add(group.display_name)
        for member in group.members:
            record = member.record
            display = record.name or record.class_name
            if display:
                if member.edition_only:
                    group.edition_names.add(display)
                else:
                    group.names.add(display)
                    short = strip_manufacturer_prefix(
                        display,
                        self.manufacturer_tokens(record, member.manufacturer_code),
                        self.prefix_min_length,
                    )
                    if short:
                        group.names.add(short)
            if record.description:
                group.descriptions.add(record.description)
        for duplicate in group.duplicates:
            if not duplicate.edition.is_empty():
                edition_metadata[duplicate.identifier] = duplicate.edition

    @staticmethod
    def _build_hulls(groups: Mapping[str, CanonicalVariantGroup]) -> dict[str, CanonicalHull]:
        hulls: dict[str, CanonicalHull] = {}
        for group in groups.values():
            hull = hulls.get(group.hull_key)
            for member in sorted(group.members, key=lambda m: m.identifier):
                record = member.record
                if hull is None:
                    hull = CanonicalHull(
                        hull_key=group.hull_key,
                        manufacturer_code=member.manufacturer_code,
                        name=canonical_variant_name(group.base_name, BASE),
                    )
                    hulls[group.hull_key] = hull
                if not hull.description and record.description and group.variant_code == BASE:
                    hull.description = record.description
                if not hull.size and record.size:
                    hull.size = record.size
                if hull.hull_class == "Unknown" and record.hull_class and record.hull_class != "Unknown":
                    hull.hull_class = record.hull_class
                if member.edition.livery:
                    hull.paints.add(member.edition.livery)
        # Hulls without a BASE variant fall back to any variant description.
        for group in groups.values():
            hull = hulls[group.hull_key]
            if not hull.description and group.descriptions:
                hull.description = sorted(group.descriptions)[0]
        return {key: hulls[key] for key in sorted(hulls)}

    def _known_manufacturer(self, record: RawRecord, manufacturer_code: str) -> Optional[Manufacturer]:
        ref = record.manufacturer
        if ref is not None and ref.id is not None:
            known = self.manufacturers.get(str(ref.id))
            if known is not None:
                return known
        return self.manufacturers.get(manufacturer_code)

    @staticmethod
    def _check_contract(record: object) -> None:
        if not isinstance(record, RawRecord):
            raise RecordContractError(f"expected RawRecord, got {type(record).__name__}")
        for name in _TEXT_FIELDS:
            value = getattr(record, name)
            if value is not None and not isinstance(value, str):
                raise RecordContractError(f"RawRecord.{name} must be a string, got {type(value).__name__}")
        ref = record.manufacturer
        if ref is None:
            return
        if not isinstance(ref, ManufacturerRef):
            raise RecordContractError(f"RawRecord.manufacturer must be a ManufacturerRef, got {type(ref).__name__}")
        for name in ("code", "name", "id"):
            value = getattr(ref, name)
            if value is not None and not isinstance(value, str):
                raise RecordContractError(f"ManufacturerRef.{name} must be a string, got {type(value).__name__}")
        if not isinstance(ref.aliases, tuple) or not all(isinstance(alias, str) for alias in ref.aliases):
            raise RecordContractError("ManufacturerRef.aliases must be a tuple of strings")

    @staticmethod
    def _issue(result: ResolutionResult, kind: IssueKind, identifier: Optional[str], message: str) -> None:
        logger.warning("%s [%s]: %s", kind.value, identifier or "-", message)
        result.issues.append(ResolutionIssue(kind, identifier, message))


def _variant_id(member: MemberRecord) -> str:
    hull_key = build_hull_key(member.manufacturer_code, member.family_name)
    return to_canonical_variant_ext_id(hull_key, member.variant_code)


def _external_refs(record: RawRecord) -> set[tuple[str, str]]:
    refs = {("raw:id", record.identifier or "")}
    if record.external_id and record.external_id != record.identifier:
        refs.add(("raw:external_id", record.external_id))
    if record.class_name:
        refs.add(("raw:class_name", record.class_name))
    if record.variant_code:
        refs.add(("raw:variant_code", record.variant_code))
    return refs
