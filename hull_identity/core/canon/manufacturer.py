"""
Manufacturer handling: code resolution and token stripping.

Family and variant names frequently repeat the manufacturer ("RSI Zeus",
"Anvil Arrow"), so every token that merely restates the manufacturer is
removed before building a hull key.
"""

from __future__ import annotations

import re
from typing import Iterable, Mapping, Optional

from .models import Manufacturer, ManufacturerRef
from .tokens import sanitize_token, sanitized_tokens

_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]+")


def normalize_manufacturer_code(raw: object) -> Optional[str]:
    """
    Strip non-alphanumerics and uppercase.

    Examples:
        "rsi" → "RSI"
        "Crusader Industries" → "CRUSADERINDUSTRIES"
        12 → "12"
        "  " → None
    """
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    return _NON_ALNUM_RE.sub("", text).upper() or None


def resolve_manufacturer_code(
    ref: Optional[ManufacturerRef],
    identifier: Optional[str] = None,
    directory: Optional[Mapping[str, Manufacturer]] = None,
    identifier_prefix_fallback: bool = True,
) -> Optional[str]:
    """
    Resolve a manufacturer reference to a code.

    Order: explicit code, directory lookup by manufacturer id, name, then the
    first segment of an underscore-separated identifier ("RSI_AURORA_MR").
    Returns None when nothing usable is available.
    """
    if ref is not None:
        code = normalize_manufacturer_code(ref.code)
        if code:
            return code
        if ref.id is not None and directory:
            known = directory.get(str(ref.id))
            if known is not None:
                code = normalize_manufacturer_code(known.code)
                if code:
                    return code
        code = normalize_manufacturer_code(ref.name)
        if code:
            return code
    if identifier_prefix_fallback and identifier and "_" in identifier:
        return normalize_manufacturer_code(identifier.split("_", 1)[0])
    return None


def collect_manufacturer_tokens(
    manufacturer_code: Optional[str],
    manufacturer_name: Optional[str] = None,
    aliases: Iterable[str] = (),
) -> frozenset[str]:
    """
    Build the set of tokens that restate the manufacturer.

    Example:
        collect_manufacturer_tokens("AEGS", "Aegis Dynamics")
        → {"AEGS", "AEG", "AEGIS", "DYNAMICS"}
    """
    tokens: set[str] = set()
    if manufacturer_code:
        normalized = sanitize_token(manufacturer_code)
        if normalized:
            tokens.add(normalized)
            # Pluralized abbreviations ("AEGS") also appear singular.
            if normalized.endswith("S") and len(normalized) > 1:
                tokens.add(normalized[:-1])
        tokens.update(sanitized_tokens(manufacturer_code))
    if manufacturer_name:
        tokens.update(sanitized_tokens(manufacturer_name))
    for alias in aliases:
        if alias:
            tokens.update(sanitized_tokens(alias))
    return frozenset(tokens)


def matches_manufacturer_prefix(token: str, candidate: str, min_length: int = 0) -> bool:
    """
    Prefix heuristic: either token starts with the other.

    Short tokens produce false positives ("A" swallows "ARROW"), so tokens
    shorter than min_length never match by prefix. min_length=0 keeps the
    historical behavior that existing hull keys were built with.
    """
    if not token or not candidate:
        return False
    if min(len(token), len(candidate)) < min_length:
        return False
    return token.startswith(candidate) or candidate.startswith(token)


def is_manufacturer_token(token: str, manufacturer_tokens: Iterable[str], min_length: int = 0) -> bool:
    if token in manufacturer_tokens:
        return True
    return any(matches_manufacturer_prefix(token, candidate, min_length) for candidate in manufacturer_tokens)


def strip_manufacturer_prefix(name: str, manufacturer_tokens: Iterable[str], min_length: int = 0) -> str:
    """
    Drop leading words that restate the manufacturer from a display name.

    Example:
        strip_manufacturer_prefix("RSI Zeus Mk II CL", {"RSI"}) → "Zeus Mk II CL"
    """
    if not name:
        return name
    tokens = frozenset(manufacturer_tokens)
    parts = name.split()
    while parts and is_manufacturer_token(sanitize_token(parts[0]), tokens, min_length):
        parts.pop(0)
    return " ".join(parts)
