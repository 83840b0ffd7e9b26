"""Value types shared by the balloon controller and its Qt adapters (pure, no Qt)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class ScreenPoint:
    x: int
    y: int


@dataclass(frozen=True)
class QueryRequest:
    text: str
    source_language: str = "auto"
    target_language: str = "zh"


@dataclass(frozen=True)
class DictEntry:
    word: str
    reverse_translations: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DictGroup:
    part_of_speech: str
    entries: Tuple[DictEntry, ...] = ()


@dataclass(frozen=True)
class TranslationResult:
    """Backend answer for one query."""

    original: str
    translation: str
    source_language: str
    target_language: str
    phonetic: Optional[str] = None
    dictionaries: Tuple[DictGroup, ...] = field(default_factory=tuple)
