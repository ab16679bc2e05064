"""
Versioned vocabularies for variant codes and edition keywords.

A Vocabulary is immutable and passed explicitly to the matcher, the edition
detector and the resolver, so several resolvers can run side by side with
different vocabularies. Every canonical id records the version that
produced it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from .tokens import sanitize_token

BASE = "BASE"

DEFAULT_VERSION = "2025.1"

# Variant suffixes observed in export data plus a few manual staples (CL/ES/MR).
DEFAULT_VARIANT_TOKENS = frozenset({
    "1", "1T", "2", "25", "3",
    "A", "A1", "A2", "AA", "ALPHA", "ANDROMEDA", "ANTARES", "AQUILA",
    "ARCHIMEDES", "ARGOS", "ATLS",
    "BETA", "BIS2950", "BIS2951", "BLACK", "BLADE", "BLUE",
    "C", "C1", "C2", "CARBON", "CARGO", "CITIZENCON2018", "CIVILIAN", "CL",
    "COMET", "COMPETITION", "CROCODILE",
    "DELTA", "DS", "DUNESTALKER", "DUNLEVY", "DUR",
    "ECLIPSE", "EMERALD", "ES", "EX", "EXEC", "EXECUTIVE", "EXPEDITION",
    "F7C", "F7CM", "F7CR", "F7CS", "F8", "F8C", "FIREBIRD", "FORCE",
    "FORTUNE", "FREELANCER", "FURY",
    "GAMMA", "GEMINI", "GEO", "GLADIUS", "GLAIVE", "GRAD01", "GRAD02",
    "GRAD03", "GUARDIAN",
    "HAMMERHEAD", "HARBINGER", "HEARTSEEKER", "HOPLITE",
    "IKTI", "INDUST", "INDUSTRIAL", "INFERNO", "ION",
    "JAVELIN",
    "KUE",
    "LN", "LX",
    "M", "M2", "MAKO", "MAX", "MEDIC", "MEDIVAC", "MERLIN", "MILITARY",
    "MILT", "MIRU", "MK1", "MK2", "MOD", "MR", "MT", "MX",
    "NOX",
    "OMEGA",
    "P", "PEREGRINE", "PHOENIX", "PINK", "PIR", "PIRATE", "PISCES", "PLAT",
    "PROSPECTOR", "PULSE",
    "QI",
    "RAMBLER", "RAVEN", "RAZOR", "RC", "RECLAIMER", "RED", "REDEEMER",
    "RELIANT", "RENEGADE", "RETALIATOR", "RN", "ROVER", "RUNNER",
    "SABRE", "SCOUT", "SCYTHE", "SEN", "SENTINEL", "SHOWDOWN", "SHRIKE",
    "SNOWBLIND", "STALKER", "STARFARER", "STEALTH", "STEALTHINDUSTRIAL",
    "STEEL", "SYULEN",
    "TAC", "TALUS", "TANA", "TAURUS", "TITAN", "TOURING", "TR", "TRANSPORT",
    "TRIAGE",
    "UTILITY",
    "VALIANT", "VANGUARD", "VELOCITY",
    "WARLOCK", "WILDFIRE", "WOLF",
    "YELLOW",
})

# Promotional, seasonal and livery markers. Order is kept for the regex.
DEFAULT_EDITION_KEYWORDS = (
    "IAE",
    "INVICTUS",
    "WARBOND",
    "SHOWFLOOR",
    "SHOWROOM",
    "FOUNDATION",
    "FOUNDER",
    "PROMO",
    "LIVERY",
    "PAINT",
    "REFERRAL",
    "BUNDLE",
    "PACK",
    "JUBILEE",
    "LIMITED",
    "EDITION",
    "EVENT",
)

# Flagship promotions sort first in a compound edition code.
DEFAULT_EDITION_PRIORITY = ("IAE", "INVICTUS")

DEFAULT_LIVERY_KEYWORDS = ("LIVERY", "PAINT")

DEFAULT_LIVERY_LABEL_TOKENS = 3


def _keyword_regex(keywords: Iterable[str]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(keyword) for keyword in keywords)
    # Alphanumeric boundaries, so "Aurora_Warbond" still matches.
    return re.compile(rf"(?<![A-Za-z0-9])({alternatives})(?![A-Za-z0-9])", re.IGNORECASE)


def _normalize_tokens(values: Iterable[str]) -> list[str]:
    seen: list[str] = []
    for value in values:
        token = sanitize_token(value)
        if token and token not in seen:
            seen.append(token)
    return seen


@dataclass(frozen=True)
class Vocabulary:
    """
    An immutable, versioned set of identity tokens.

    Example:
        vocab = default_vocabulary().extended("2025.2", variant_tokens=["HULLC"])
        "HULLC" in vocab.variant_tokens  → True
        vocab.version                    → "2025.2"
    """
    version: str = DEFAULT_VERSION
    variant_tokens: frozenset[str] = DEFAULT_VARIANT_TOKENS
    edition_keywords: tuple[str, ...] = DEFAULT_EDITION_KEYWORDS
    edition_priority: tuple[str, ...] = DEFAULT_EDITION_PRIORITY
    livery_keywords: tuple[str, ...] = DEFAULT_LIVERY_KEYWORDS
    livery_label_tokens: int = DEFAULT_LIVERY_LABEL_TOKENS
    edition_regex: re.Pattern[str] = field(init=False, repr=False, compare=False)
    livery_regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.version:
            raise ValueError("Vocabulary version cannot be empty.")
        object.__setattr__(self, "variant_tokens", frozenset(_normalize_tokens(self.variant_tokens)))
        object.__setattr__(self, "edition_keywords", tuple(_normalize_tokens(self.edition_keywords)))
        object.__setattr__(self, "edition_priority", tuple(_normalize_tokens(self.edition_priority)))
        object.__setattr__(self, "livery_keywords", tuple(_normalize_tokens(self.livery_keywords)))
        object.__setattr__(self, "edition_regex", _keyword_regex(self.edition_keywords))
        object.__setattr__(self, "livery_regex", _keyword_regex(self.livery_keywords))

    def is_variant_token(self, token: str) -> bool:
        return token in self.variant_tokens

    def is_edition_keyword(self, token: str) -> bool:
        return token in self.edition_keywords

    def without_livery_labels(self, tokens: Iterable[str]) -> list[str]:
        """
        Drop the label words that follow a livery keyword; the keyword stays.

        Example:
            ["AURORA", "MR", "PAINT", "BLACK", "STEEL"] → ["AURORA", "MR", "PAINT"]
        """
        kept: list[str] = []
        label_left = 0
        for token in tokens:
            if label_left:
                label_left -= 1
                continue
            kept.append(token)
            if token in self.livery_keywords:
                label_left = self.livery_label_tokens
        return kept

    def extended(
        self,
        version: str,
        variant_tokens: Iterable[str] = (),
        edition_keywords: Iterable[str] = (),
    ) -> "Vocabulary":
        """Return a new vocabulary with additional tokens under a new version label."""
        if version == self.version:
            raise ValueError(f"Extended vocabulary must use a new version label, got {version!r}")
        return Vocabulary(
            version=version,
            variant_tokens=self.variant_tokens | frozenset(_normalize_tokens(variant_tokens)),
            edition_keywords=self.edition_keywords + tuple(
                token for token in _normalize_tokens(edition_keywords) if token not in self.edition_keywords
            ),
            edition_priority=self.edition_priority,
            livery_keywords=self.livery_keywords,
            livery_label_tokens=self.livery_label_tokens,
        )


def default_vocabulary() -> Vocabulary:
    return Vocabulary()
