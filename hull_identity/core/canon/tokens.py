"""
Tokenization primitives shared by every canonicalization step.

All functions are pure and total: any string (including the empty string)
produces a valid, possibly empty, result.
"""

from __future__ import annotations

import re

_SPLIT_RE = re.compile(r"[^A-Za-z0-9]+")
_ROMAN_RE = re.compile(r"^[IVX]+$")

# Tokens that introduce a mark number ("Mk II").
DESIGNATOR_PREFIXES = frozenset({"MK"})


def tokenize(text: str) -> list[str]:
    """
    Split text on any run of non-alphanumeric characters.

    Examples:
        "RSI Zeus Mk II CL" → ["RSI", "Zeus", "Mk", "II", "CL"]
        "RSI_AURORA_MR" → ["RSI", "AURORA", "MR"]
        "" → []
    """
    if not text:
        return []
    return [part for part in _SPLIT_RE.split(text) if part]


def sanitize_token(text: str) -> str:
    """
    Collapse text into a single uppercase, underscore-joined token.

    Examples:
        "Zeus Mk II" → "ZEUS_MK_II"
        "  --cl-- " → "CL"
    """
    if not text:
        return ""
    return _SPLIT_RE.sub("_", text).strip("_").upper()


def sanitized_tokens(text: str) -> list[str]:
    """Tokenize and sanitize in one step, dropping anything that sanitizes to empty."""
    result = []
    for token in tokenize(text):
        cleaned = sanitize_token(token)
        if cleaned:
            result.append(cleaned)
    return result


def title_case(text: str) -> str:
    """Lowercase every whitespace-separated word and capitalize its first letter."""
    if not text:
        return ""
    return " ".join(part[0].upper() + part[1:] for part in text.lower().split())


def is_roman_numeral(token: str) -> bool:
    return bool(_ROMAN_RE.match(token.upper()))


def compact_designators(tokens: list[str]) -> list[str]:
    """
    Fuse a mark designator with the Roman numeral that follows it.

    "Mk II" and "MkII" must reduce to the same family, so the pair
    ["MK", "II"] becomes ["MKII"]. Tokens are expected to be sanitized.
    """
    result: list[str] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        following = tokens[index + 1] if index + 1 < len(tokens) else None
        if token in DESIGNATOR_PREFIXES and following and is_roman_numeral(following):
            result.append(token + following)
            index += 2
            continue
        result.append(token)
        index += 1
    return result


def is_year_token(token: str) -> bool:
    """Numeric tokens of 3-4 digits ("2954") qualify a preceding edition keyword."""
    return token.isdigit() and 3 <= len(token) <= 4
