"""
Canonical identity resolution for hulls and their variants.

This module handles:
- Tokenization and sanitization of raw designations
- Variant code matching against a versioned vocabulary
- Manufacturer token stripping and hull family derivation
- Edition/livery detection
- Grouping, keeper selection and merging of duplicate records
- Remapping dependent records onto canonical identities

All logic is pure business logic with no I/O dependencies.
"""

from __future__ import annotations

from .editions import EditionDetector, detect_edition_or_livery, is_edition_only
from .errors import IssueKind, RecordContractError, ResolutionIssue
from .family import clean_family_name
from .keys import build_hull_key, canonical_variant_name, to_canonical_variant_ext_id
from .manufacturer import (
    collect_manufacturer_tokens,
    matches_manufacturer_prefix,
    normalize_manufacturer_code,
    resolve_manufacturer_code,
    strip_manufacturer_prefix,
)
from .matching import VariantMatcher, extract_variant_code
from .models import (
    CanonicalHull,
    CanonicalVariantGroup,
    DependentRecord,
    EditionMetadata,
    Manufacturer,
    ManufacturerRef,
    MemberRecord,
    RawRecord,
    ResolutionResult,
    VariantProjection,
)
from .plan import DedupPlan, KeeperUpdate, MergeEntry, build_dedup_plan
from .remap import CascadeResult, ForeignKeyRemapper, cascade_remap
from .resolver import IdentityResolver
from .tokens import sanitize_token, title_case, tokenize
from .vocabulary import BASE, Vocabulary, default_vocabulary

__all__ = [
    "BASE",
    "CanonicalHull",
    "CanonicalVariantGroup",
    "CascadeResult",
    "DedupPlan",
    "DependentRecord",
    "EditionDetector",
    "EditionMetadata",
    "ForeignKeyRemapper",
    "IdentityResolver",
    "IssueKind",
    "KeeperUpdate",
    "Manufacturer",
    "ManufacturerRef",
    "MemberRecord",
    "MergeEntry",
    "RawRecord",
    "RecordContractError",
    "ResolutionIssue",
    "ResolutionResult",
    "VariantMatcher",
    "VariantProjection",
    "Vocabulary",
    "build_dedup_plan",
    "build_hull_key",
    "canonical_variant_name",
    "cascade_remap",
    "clean_family_name",
    "collect_manufacturer_tokens",
    "default_vocabulary",
    "detect_edition_or_livery",
    "extract_variant_code",
    "is_edition_only",
    "matches_manufacturer_prefix",
    "normalize_manufacturer_code",
    "resolve_manufacturer_code",
    "sanitize_token",
    "strip_manufacturer_prefix",
    "title_case",
    "to_canonical_variant_ext_id",
    "tokenize",
]
