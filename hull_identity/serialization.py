from __future__ import annotations

from typing import Any

from .core.canon.models import CanonicalHull, DependentRecord, ResolutionResult, VariantProjection
from .core.canon.plan import DedupPlan
from .core.canon.remap import CascadeResult


def hull_to_dict(hull: CanonicalHull) -> dict[str, Any]:
    return {
        "external_id": hull.hull_key,
        "manufacturer_code": hull.manufacturer_code,
        "name": hull.name,
        "class": hull.hull_class,
        "size": hull.size,
        "description": hull.description,
        "paints": sorted(hull.paints),
    }


def variant_to_dict(projection: VariantProjection) -> dict[str, Any]:
    return {
        "external_id": projection.external_id,
        "ship_external_id": projection.hull_key,
        "variant_code": projection.variant_code,
        "name": projection.name,
        "description": projection.description,
        "alternate_names": list(projection.alternate_names),
        "external_refs": [{"source": source, "id": ref} for source, ref in projection.external_refs],
        "vocabulary_version": projection.vocabulary_version,
        "verified": projection.verified,
    }


def dependent_to_dict(record: DependentRecord) -> dict[str, Any]:
    payload = dict(record.payload)
    payload.update(
        {
            "id": record.id,
            "ship_variant": record.variant_ref,
            "profile": record.profile,
            "livery": record.livery,
        }
    )
    return payload


def result_to_dict(result: ResolutionResult) -> dict[str, Any]:
    return {
        "vocabulary_version": result.vocabulary_version,
        "ships": [hull_to_dict(hull) for hull in result.hull_records()],
        "ship_variants": [variant_to_dict(p) for p in result.variant_projections()],
        "remap": dict(result.remap),
        "edition_metadata": {
            key: {"profile": meta.edition_code, "livery": meta.livery}
            for key, meta in result.edition_metadata.items()
        },
        "unresolved": sorted(result.unresolved),
        "issues": [
            {"kind": issue.kind.value, "id": issue.identifier, "message": issue.message}
            for issue in result.issues
        ],
    }


def cascade_to_dict(cascade: CascadeResult) -> dict[str, Any]:
    grouped: dict[str, list[dict[str, Any]]] = {}
    for record in cascade.records:
        grouped.setdefault(record.collection, []).append(dependent_to_dict(record))
    return grouped


def plan_to_dict(plan: DedupPlan) -> dict[str, Any]:
    return {
        "summary": plan.summary(),
        "ships": [hull_to_dict(hull) for hull in plan.hulls],
        "keeper_updates": [
            {"id": u.id, "external_id": u.external_id, "variant_code": u.variant_code, "name": u.name}
            for u in plan.keeper_updates
        ],
        "deletions": list(plan.deletions),
        "dependent_updates": {
            collection: [
                {"id": r.id, "ship_variant": r.variant_ref, "profile": r.profile, "livery": r.livery}
                for r in records
            ]
            for collection, records in plan.dependent_updates.items()
        },
        "merge_log": [
            {"canonical": entry.canonical, "keeper": entry.keeper, "merged": list(entry.merged)}
            for entry in plan.merge_log
        ],
    }
