"""
Edition and livery detection.

Editions (IAE 2954, Warbond, Invictus...) and liveries are cosmetic or
promotional qualifiers. They are captured as metadata and never take part
in a canonical identity.
"""

from __future__ import annotations

from typing import Optional

from .matching import VariantMatcher
from .models import EditionMetadata
from .tokens import is_year_token, sanitize_token, title_case, tokenize
from .vocabulary import BASE, Vocabulary, default_vocabulary


class EditionDetector:
    def __init__(self, vocabulary: Optional[Vocabulary] = None) -> None:
        self.vocabulary = vocabulary or default_vocabulary()
        self._matcher = VariantMatcher(self.vocabulary)

    def detect(self, name: Optional[str]) -> EditionMetadata:
        """
        Extract an edition code and a livery label from a display name.

        Examples:
            "Zeus Mk II CL Warbond IAE 2954" → edition_code="IAE2954_WARBOND"
            "Aurora MR Livery Stormbringer Red" → edition_code="LIVERY", livery="Stormbringer Red"
        """
        if not name:
            return EditionMetadata()
        return EditionMetadata(edition_code=self._edition_code(name), livery=self._livery(name))

    def is_edition_only(self, name: Optional[str]) -> bool:
        """True when the name is the base variant plus a cosmetic/promotional qualifier."""
        if not name:
            return False
        if self._matcher.extract_from_designation(name) != BASE:
            return False
        return bool(self.vocabulary.edition_regex.search(name))

    def _edition_code(self, name: str) -> Optional[str]:
        # (keyword, compound) pairs; the compound carries a fused year.
        detected: list[tuple[str, str]] = []
        just_collected = False
        for token in tokenize(name):
            upper = token.upper()
            if self.vocabulary.is_edition_keyword(upper):
                detected.append((upper, upper))
                just_collected = True
                continue
            if just_collected and is_year_token(upper):
                keyword, compound = detected[-1]
                detected[-1] = (keyword, compound + upper)
            just_collected = False
        if not detected:
            return None
        priority = self.vocabulary.edition_priority

        def rank(entry: tuple[str, str]) -> tuple[int, str]:
            keyword, compound = entry
            index = priority.index(keyword) if keyword in priority else len(priority)
            return index, compound

        detected.sort(key=rank)
        return sanitize_token("_".join(compound for _, compound in detected)) or None

    def _livery(self, name: str) -> Optional[str]:
        match = self.vocabulary.livery_regex.search(name)
        if not match:
            return None
        tail = name[match.end():].strip()
        if not tail:
            return None
        summary = " ".join(tokenize(tail)[: self.vocabulary.livery_label_tokens])
        return title_case(summary) or None


def detect_edition_or_livery(name: Optional[str], vocabulary: Optional[Vocabulary] = None) -> EditionMetadata:
    return EditionDetector(vocabulary).detect(name)


def is_edition_only(name: Optional[str], vocabulary: Optional[Vocabulary] = None) -> bool:
    return EditionDetector(vocabulary).is_edition_only(name)
