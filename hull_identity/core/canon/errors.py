"""
Issue taxonomy for a resolution pass.

Dirty data never aborts a pass: each problem is logged and collected as a
ResolutionIssue on the result. Only contract violations raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class IssueKind(str, Enum):
    MISSING_IDENTIFIER = "missing_identifier"
    MISSING_MANUFACTURER_REFERENCE = "missing_manufacturer_reference"
    AMBIGUOUS_VARIANT_MATCH = "ambiguous_variant_match"
    CONFLICTING_RECORD = "conflicting_record"
    REMAP_TABLE_MISS = "remap_table_miss"
    DROPPED_DEPENDENT = "dropped_dependent"


@dataclass(frozen=True)
class ResolutionIssue:
    kind: IssueKind
    identifier: Optional[str]
    message: str


class RecordContractError(TypeError):
    """Raised when a caller hands the engine something that is not a record or designation."""
