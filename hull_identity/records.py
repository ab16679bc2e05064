"""
Adapters from raw export/CMS JSON rows to engine records.

Export dumps are inconsistent about casing and nesting (`name` vs `Name`,
`manufacturer` as a code string or an object, `ship_variant` as an id or an
`{"id": ...}` object). Everything is normalized here so the engine only sees
RawRecord and DependentRecord values.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Optional

from .core.canon.models import DependentRecord, Manufacturer, ManufacturerRef, RawRecord

logger = logging.getLogger(__name__)


def optional_string(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value
    return None


def coalesce(*values: Any) -> Optional[str]:
    for value in values:
        text = optional_string(value)
        if text is not None:
            return text
    return None


def normalize_id(value: Any) -> Optional[str]:
    """Accept either a bare id or an expanded relation object."""
    if isinstance(value, Mapping):
        return optional_string(value.get("id"))
    return optional_string(value)


def manufacturer_ref_from_row(row: Mapping[str, Any]) -> Optional[ManufacturerRef]:
    nested = row.get("manufacturer")
    if nested is None:
        nested = row.get("Manufacturer")
    code = name = ref_id = None
    aliases: tuple[str, ...] = ()
    if isinstance(nested, Mapping):
        code = coalesce(nested.get("code"), nested.get("Code"), nested.get("external_id"))
        name = coalesce(nested.get("name"), nested.get("Name"))
        ref_id = coalesce(nested.get("id"), nested.get("ID"))
        aliases = tuple(str(alias) for alias in nested.get("aliases") or () if alias)
    elif nested is not None:
        code = optional_string(nested)
    ref_id = ref_id or coalesce(row.get("manufacturer_id"))
    ref = ManufacturerRef(code=code, name=name, id=ref_id, aliases=aliases)
    return None if ref.is_empty() else ref


def raw_record_from_row(row: Mapping[str, Any]) -> RawRecord:
    return RawRecord(
        id=coalesce(row.get("id"), row.get("UUID")),
        external_id=coalesce(row.get("external_id")),
        name=coalesce(row.get("name"), row.get("Name")),
        class_name=coalesce(row.get("class_name"), row.get("ClassName")),
        variant_code=coalesce(row.get("variant_code")),
        description=coalesce(row.get("description"), row.get("Description")),
        manufacturer=manufacturer_ref_from_row(row),
        hull_class=coalesce(row.get("class"), row.get("Class"), row.get("Role"), row.get("Career")),
        size=coalesce(row.get("size"), row.get("Size")),
    )


def dependent_from_row(row: Mapping[str, Any], collection: str) -> Optional[DependentRecord]:
    record_id = coalesce(row.get("id"))
    if record_id is None:
        logger.warning("Skipping %s row without id", collection)
        return None
    variant_ref = normalize_id(row.get("ship_variant"))
    if variant_ref is None:
        variant_ref = coalesce(row.get("ship_variant_external_id"), row.get("variant_id"))
    return DependentRecord(
        id=record_id,
        collection=collection,
        variant_ref=variant_ref,
        profile=coalesce(row.get("profile")),
        livery=coalesce(row.get("livery")),
        payload=dict(row),
    )


def manufacturer_from_row(row: Mapping[str, Any]) -> Optional[Manufacturer]:
    code = coalesce(row.get("code"), row.get("Code"), row.get("reference"), row.get("Reference"))
    if code is None:
        return None
    return Manufacturer(code=code, name=coalesce(row.get("name"), row.get("Name")))


def _read_rows(path: Path) -> list[Mapping[str, Any]]:
    with path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    if isinstance(data, Mapping):
        # CMS exports wrap rows in {"data": [...]}.
        data = data.get("data", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of rows")
    return [row for row in data if isinstance(row, Mapping)]


def load_raw_records(path: Path) -> list[RawRecord]:
    return [raw_record_from_row(row) for row in _read_rows(path)]


def load_dependents(path: Path, collection: Optional[str] = None) -> list[DependentRecord]:
    name = collection or path.stem
    records = []
    for row in _read_rows(path):
        record = dependent_from_row(row, name)
        if record is not None:
            records.append(record)
    return records


def load_manufacturers(path: Path) -> dict[str, Manufacturer]:
    """Index manufacturers by raw id and by code."""
    directory: dict[str, Manufacturer] = {}
    for row in _read_rows(path):
        manufacturer = manufacturer_from_row(row)
        if manufacturer is None:
            logger.warning("Skipping manufacturer row without code: %s", row.get("id"))
            continue
        raw_id = coalesce(row.get("id"), row.get("ID"))
        if raw_id is not None:
            directory[raw_id] = manufacturer
        directory.setdefault(manufacturer.code, manufacturer)
    return directory


def iter_paths(values: Iterable[str]) -> Iterator[tuple[str, Path]]:
    """Parse `collection=path` or bare `path` arguments."""
    for value in values:
        if "=" in value:
            collection, _, raw_path = value.partition("=")
            yield collection, Path(raw_path)
        else:
            path = Path(value)
            yield path.stem, path
