from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .core.canon.models import Manufacturer
from .core.canon.resolver import IdentityResolver
from .core.canon.vocabulary import (
    DEFAULT_EDITION_PRIORITY,
    DEFAULT_LIVERY_KEYWORDS,
    DEFAULT_LIVERY_LABEL_TOKENS,
    DEFAULT_VERSION,
    Vocabulary,
    default_vocabulary,
)


class VocabularySettings(BaseModel):
    version: str = DEFAULT_VERSION
    extra_variant_tokens: List[str] = Field(default_factory=list)
    extra_edition_keywords: List[str] = Field(default_factory=list)
    edition_priority: List[str] = Field(default_factory=lambda: list(DEFAULT_EDITION_PRIORITY))
    livery_keywords: List[str] = Field(default_factory=lambda: list(DEFAULT_LIVERY_KEYWORDS))
    livery_label_tokens: int = Field(default=DEFAULT_LIVERY_LABEL_TOKENS, ge=1)

    @field_validator("extra_variant_tokens", "extra_edition_keywords", mode="before")
    @classmethod
    def _upper_tokens(cls, values: Optional[List[str]]) -> List[str]:
        return [str(v).strip().upper() for v in values or [] if str(v).strip()]

    def build(self) -> Vocabulary:
        base = default_vocabulary()
        extended = self.extra_variant_tokens or self.extra_edition_keywords
        if extended and self.version == base.version:
            raise ValueError(
                "vocabulary.version must be changed when extra tokens are configured "
                f"(built-in version is {base.version!r})"
            )
        return Vocabulary(
            version=self.version,
            variant_tokens=base.variant_tokens | frozenset(self.extra_variant_tokens),
            edition_keywords=base.edition_keywords + tuple(
                token for token in self.extra_edition_keywords if token not in base.edition_keywords
            ),
            edition_priority=tuple(self.edition_priority),
            livery_keywords=tuple(self.livery_keywords),
            livery_label_tokens=self.livery_label_tokens,
        )


class ManufacturerSettings(BaseModel):
    code: str
    name: Optional[str] = None
    aliases: List[str] = Field(default_factory=list)


class ResolverSettings(BaseModel):
    identifier_prefix_fallback: bool = True
    prefix_min_length: int = Field(default=0, ge=0)
    # Keyed by the raw manufacturer id used in export dumps.
    manufacturers: Dict[str, ManufacturerSettings] = Field(default_factory=dict)


class Settings(BaseModel):
    vocabulary: VocabularySettings = VocabularySettings()
    resolver: ResolverSettings = ResolverSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})

    def manufacturer_directory(self) -> Dict[str, Manufacturer]:
        directory: Dict[str, Manufacturer] = {}
        for key, entry in self.resolver.manufacturers.items():
            directory[str(key)] = Manufacturer(code=entry.code, name=entry.name, aliases=tuple(entry.aliases))
        return directory

    def build_resolver(self) -> IdentityResolver:
        return IdentityResolver(
            vocabulary=self.vocabulary.build(),
            manufacturers=self.manufacturer_directory(),
            identifier_prefix_fallback=self.resolver.identifier_prefix_fallback,
            prefix_min_length=self.resolver.prefix_min_length,
        )


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        if not explicit_path.exists():
            raise FileNotFoundError(f"Config file not found: {explicit_path}")
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "hull-identity.yaml", cwd / "hull-identity.yml"):
        if candidate.exists():
            return candidate
    return None
