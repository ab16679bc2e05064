"""Canonical key construction. Pure string building, no failure modes."""

from __future__ import annotations

from typing import Optional

from .tokens import sanitize_token, title_case
from .vocabulary import BASE


def build_hull_key(manufacturer_code: Optional[str], family_name: Optional[str]) -> str:
    """
    Examples:
        build_hull_key("RSI", "ZEUS_MKII") → "RSI_ZEUS_MKII"
        build_hull_key(None, None) → "UNKNOWN_HULL"
    """
    manufacturer_token = sanitize_token(manufacturer_code) if manufacturer_code else "UNKNOWN"
    family_token = sanitize_token(family_name) if family_name else "HULL"
    return f"{manufacturer_token}_{family_token}"


def to_canonical_variant_ext_id(hull_key: str, variant_code: str) -> str:
    return f"{hull_key}_{sanitize_token(variant_code)}"


def canonical_variant_name(base_name: str, variant_code: str) -> str:
    """
    Examples:
        canonical_variant_name("ZEUS MKII", "CL") → "Zeus Mkii CL"
        canonical_variant_name("aurora", "BASE") → "Aurora"
    """
    if variant_code == BASE:
        return title_case(base_name)
    return f"{title_case(base_name)} {variant_code}"


def base_name_from_family(family_name: str) -> str:
    return family_name.replace("_", " ")
