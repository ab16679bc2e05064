"""
Variant code matching against a curated vocabulary.

The matcher is total: every input, including the empty string, produces a
non-empty variant code. The policy is:

1. An explicit "BASE" token always wins.
2. Otherwise the best vocabulary token wins (longer first, then
   lexicographically smaller).
3. Otherwise the first token is promoted to a variant code (unverified).
4. Otherwise BASE.
"""

from __future__ import annotations

from typing import Optional

from .tokens import sanitize_token, sanitized_tokens, tokenize
from .vocabulary import BASE, Vocabulary, default_vocabulary


def _better(candidate: str, current: Optional[str]) -> bool:
    if current is None:
        return True
    if len(candidate) != len(current):
        return len(candidate) > len(current)
    return candidate < current


class VariantMatcher:
    """Resolves variant codes with a fixed vocabulary."""

    def __init__(self, vocabulary: Optional[Vocabulary] = None) -> None:
        self.vocabulary = vocabulary or default_vocabulary()

    def extract_variant_code(self, source: Optional[str]) -> str:
        """
        Pick the variant code for a designation.

        Examples:
            "Zeus Mk II CL" → "CL"
            "Aurora MR Base" → "BASE"
            "Cutlass Black Blue" → "BLACK" (longer token wins)
            "Nomad" → "NOMAD" (first-token fallback, unverified)
            "" → "BASE"
        """
        if not source:
            return BASE
        best_known: Optional[str] = None
        fallback: Optional[str] = None
        for token in tokenize(source):
            normalized = sanitize_token(token)
            if not normalized:
                continue
            if normalized == BASE:
                return BASE
            if fallback is None:
                fallback = normalized
            if self.vocabulary.is_variant_token(normalized) and _better(normalized, best_known):
                best_known = normalized
        return best_known or fallback or BASE

    def extract_from_designation(self, designation: Optional[str]) -> str:
        """
        Variant code of a full display name or identifier.

        Livery label words never count: "Aurora MR Paint Black Steel" → "MR".
        """
        tokens = self.vocabulary.without_livery_labels(sanitized_tokens(designation or ""))
        return self.extract_variant_code(" ".join(tokens))

    def is_verified(self, code: str) -> bool:
        """True when the code is BASE or a vocabulary member, False for first-token fallbacks."""
        normalized = sanitize_token(code)
        return normalized == BASE or self.vocabulary.is_variant_token(normalized)


def extract_variant_code(source: Optional[str], vocabulary: Optional[Vocabulary] = None) -> str:
    return VariantMatcher(vocabulary).extract_variant_code(source)
