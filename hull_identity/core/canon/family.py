"""
Hull family name derivation.

A family name is what remains of a designation once variant codes, edition
qualifiers, livery labels and manufacturer words are removed:

    "RSI Zeus Mk II CL"                → "ZEUS_MKII"
    "Zeus Mk II CL Warbond IAE 2954"   → "ZEUS_MKII"
    "Aurora MR Paint Nightfall"        → "AURORA"
    "RSI_AURORA_MR"                    → "AURORA"
"""

from __future__ import annotations

from typing import Iterable, Optional

from .manufacturer import is_manufacturer_token
from .tokens import compact_designators, is_year_token, sanitize_token, sanitized_tokens
from .vocabulary import BASE, Vocabulary, default_vocabulary


def clean_family_name(
    designation: str,
    variant_code: str,
    manufacturer_tokens: Iterable[str] = (),
    vocabulary: Optional[Vocabulary] = None,
    prefix_min_length: int = 0,
) -> str:
    """
    Strip variant, edition and manufacturer tokens from a designation.

    Token order from the source string is preserved. When every token is
    filtered away the whole designation is sanitized instead, so the result
    is never empty for a non-empty input.
    """
    vocabulary = vocabulary or default_vocabulary()
    variant_token = sanitize_token(variant_code)
    manufacturer = frozenset(manufacturer_tokens)

    kept: list[str] = []
    after_edition = False
    # The words after LIVERY/PAINT name the livery, not the hull.
    tokens = vocabulary.without_livery_labels(sanitized_tokens(designation))
    for token in compact_designators(tokens):
        if vocabulary.is_edition_keyword(token) or token in vocabulary.livery_keywords:
            after_edition = True
            continue
        if after_edition and is_year_token(token):
            after_edition = False
            continue
        after_edition = False
        if token == variant_token:
            continue
        if token != BASE and vocabulary.is_variant_token(token):
            continue
        if manufacturer and is_manufacturer_token(token, manufacturer, prefix_min_length):
            continue
        kept.append(token)

    if kept:
        return "_".join(kept)
    return sanitize_token(designation)
