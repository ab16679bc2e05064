"""
Domain models for hull/variant identity resolution.

These are pure data models with no dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .errors import ResolutionIssue
from .keys import canonical_variant_name


@dataclass(frozen=True)
class ManufacturerRef:
    """A manufacturer reference as it appears on a raw record."""
    code: Optional[str] = None
    name: Optional[str] = None
    id: Optional[str] = None
    aliases: tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not (self.code or self.name or self.id)


@dataclass(frozen=True)
class Manufacturer:
    """A known manufacturer, used to resolve numeric/opaque references."""
    code: str
    name: Optional[str] = None
    aliases: tuple[str, ...] = ()


@dataclass(frozen=True)
class RawRecord:
    """
    One raw hull/variant row from an export dump, CMS table or snapshot.

    Example:
        RawRecord(id="A", name="Aurora MR", manufacturer=ManufacturerRef(code="RSI"))
    """
    id: Optional[str]
    """Stable raw identifier; keys the remap table"""

    external_id: Optional[str] = None
    """External id stored alongside the row (may already be canonical)"""

    name: Optional[str] = None
    class_name: Optional[str] = None
    variant_code: Optional[str] = None
    """Explicit variant-code field, when the source carries one"""

    description: Optional[str] = None
    manufacturer: Optional[ManufacturerRef] = None
    hull_class: Optional[str] = None
    size: Optional[str] = None

    @property
    def identifier(self) -> Optional[str]:
        return self.id or self.external_id

    @property
    def match_id(self) -> str:
        """The id compared against the canonical variant id when choosing a keeper."""
        return self.external_id or self.id or ""

    @property
    def designation(self) -> str:
        return self.name or self.class_name or self.external_id or self.id or ""

    def sort_key(self) -> tuple:
        """Total order over every field, so conflicting rows never tie."""
        manufacturer = self.manufacturer or ManufacturerRef()
        return (
            self.identifier or "",
            self.id or "",
            self.external_id or "",
            self.name or "",
            self.class_name or "",
            self.variant_code or "",
            self.description or "",
            manufacturer.code or "",
            manufacturer.name or "",
            manufacturer.id or "",
            manufacturer.aliases,
            self.hull_class or "",
            self.size or "",
        )


@dataclass(frozen=True)
class EditionMetadata:
    edition_code: Optional[str] = None
    livery: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.edition_code or self.livery)


@dataclass(frozen=True)
class MemberRecord:
    """A raw record after per-record canonicalization, as stored in its group."""
    record: RawRecord
    manufacturer_code: str
    family_name: str
    variant_code: str
    edition: EditionMetadata
    edition_only: bool

    @property
    def identifier(self) -> str:
        return self.record.identifier or ""


@dataclass
class CanonicalVariantGroup:
    """
    All raw records that denote one canonical variant.

    Grows additively while a pass collects records; members, names and
    descriptions are never removed.
    """
    variant_id: str
    hull_key: str
    variant_code: str
    base_name: str
    vocabulary_version: str
    verified: bool = True
    """False when the variant code came from the first-token fallback"""

    names: set[str] = field(default_factory=set)
    descriptions: set[str] = field(default_factory=set)
    edition_names: set[str] = field(default_factory=set)
    """Display names of edition-only members; kept apart from variant names"""

    external_refs: set[tuple[str, str]] = field(default_factory=set)
    members: list[MemberRecord] = field(default_factory=list)
    keeper: Optional[MemberRecord] = None
    duplicates: list[MemberRecord] = field(default_factory=list)

    def add_member(self, member: MemberRecord) -> None:
        self.members.append(member)

    @property
    def display_name(self) -> str:
        return canonical_variant_name(self.base_name, self.variant_code)


@dataclass
class CanonicalHull:
    hull_key: str
    manufacturer_code: str
    name: str
    hull_class: str = "Unknown"
    size: Optional[str] = None
    description: Optional[str] = None
    paints: set[str] = field(default_factory=set)


@dataclass(frozen=True)
class VariantProjection:
    """A canonical variant ready for upsert by the loader."""
    external_id: str
    hull_key: str
    variant_code: str
    name: str
    description: Optional[str]
    alternate_names: tuple[str, ...]
    external_refs: tuple[tuple[str, str], ...]
    vocabulary_version: str
    verified: bool


@dataclass(frozen=True)
class DependentRecord:
    """
    A row that points at a variant: statistics, hardpoints, installed items.

    profile/livery only matter for installed items, where they carry the
    edition metadata of the variant they were originally attached to.
    """
    id: str
    collection: str
    variant_ref: Optional[str]
    profile: Optional[str] = None
    livery: Optional[str] = None
    payload: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def with_variant(self, variant_ref: str, profile: Optional[str], livery: Optional[str]) -> "DependentRecord":
        return replace(self, variant_ref=variant_ref, profile=profile, livery=livery)


@dataclass
class ResolutionResult:
    """
    Output of one resolution pass.

    All collections are emitted in sorted order (canonical id, then raw
    identifier) so the result does not depend on input order.
    """
    vocabulary_version: str
    groups: dict[str, CanonicalVariantGroup] = field(default_factory=dict)
    hulls: dict[str, CanonicalHull] = field(default_factory=dict)
    remap: Mapping[str, str] = field(default_factory=dict)
    edition_metadata: Mapping[str, EditionMetadata] = field(default_factory=dict)
    """Edition/livery carried by duplicates, keyed by the duplicate's raw identifier"""

    unresolved: frozenset[str] = frozenset()
    """Identifiers skipped because no manufacturer could be resolved"""

    issues: list[ResolutionIssue] = field(default_factory=list)
    """Sorted by kind, identifier and message once the pass completes"""

    def freeze(self) -> None:
        self.remap = MappingProxyType(dict(self.remap))
        self.edition_metadata = MappingProxyType(dict(self.edition_metadata))

    def keeper_ids(self) -> dict[str, str]:
        return {
            variant_id: group.keeper.identifier
            for variant_id, group in self.groups.items()
            if group.keeper is not None
        }

    def duplicate_ids(self) -> list[str]:
        return [member.identifier for group in self.groups.values() for member in group.duplicates]

    def variant_projections(self) -> list[VariantProjection]:
        projections = []
        for variant_id, group in self.groups.items():
            display = group.display_name
            descriptions = sorted(group.descriptions)
            projections.append(
                VariantProjection(
                    external_id=variant_id,
                    hull_key=group.hull_key,
                    variant_code=group.variant_code,
                    name=display,
                    description=descriptions[0] if descriptions else None,
                    alternate_names=tuple(sorted(name for name in group.names if name != display)),
                    external_refs=tuple(sorted(group.external_refs)),
                    vocabulary_version=group.vocabulary_version,
                    verified=group.verified,
                )
            )
        return projections

    def hull_records(self) -> list[CanonicalHull]:
        return list(self.hulls.values())

    def keeper_records(self) -> list[RawRecord]:
        """Keepers with their external id rewritten to the canonical id."""
        keepers = []
        for variant_id, group in self.groups.items():
            if group.keeper is None:
                continue
            record = group.keeper.record
            keepers.append(
                replace(
                    record,
                    id=record.identifier,
                    external_id=variant_id,
                    name=record.name or record.class_name or record.designation,
                )
            )
        return keepers
