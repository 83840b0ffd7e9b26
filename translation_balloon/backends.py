"""Offline glossary backend used by the launcher and tests."""
from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from translation_balloon.models import DictEntry, DictGroup, TranslationResult

_LOGGER = logging.getLogger("TranslationBalloon.Worker")


class TranslationError(Exception):
    """Backend failure; the message is shown to the user verbatim."""


def _parse_groups(raw: Any) -> Tuple[DictGroup, ...]:
    if not isinstance(raw, list):
        return ()
    groups = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        entries = []
        for entry in item.get("entries") or []:
            if not isinstance(entry, dict) or not entry.get("word"):
                continue
            reverse = entry.get("reverse_translations") or []
            entries.append(DictEntry(str(entry["word"]), tuple(str(word) for word in reverse)))
        groups.append(DictGroup(str(item.get("part_of_speech") or ""), tuple(entries)))
    return tuple(groups)


class GlossaryBackend:
    """Answers queries from a JSON glossary keyed by lower-cased source text.

    ``latency`` delays each lookup so the processing page is visible when the
    backend runs on a worker thread.
    """

    def __init__(self, entries: Mapping[str, Mapping[str, Any]], *, latency: float = 0.0) -> None:
        self._entries: Dict[str, Mapping[str, Any]] = {
            str(key).strip().lower(): value for key, value in entries.items() if isinstance(value, Mapping)
        }
        self._latency = max(0.0, float(latency))

    @classmethod
    def from_file(cls, path: Path, *, latency: float = 0.0) -> "GlossaryBackend":
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (FileNotFoundError, OSError, json.JSONDecodeError) as exc:
            _LOGGER.warning("Failed to load glossary %s: %s", path, exc)
            data = {}
        entries = data.get("entries") if isinstance(data, dict) else None
        if not isinstance(entries, dict):
            entries = {}
        _LOGGER.debug("Loaded %d glossary entries from %s", len(entries), path)
        return cls(entries, latency=latency)

    def __len__(self) -> int:
        return len(self._entries)

    def translate(self, text: str, source_language: str = "auto", target_language: str = "zh") -> TranslationResult:
        query = (text or "").strip()
        if not query:
            raise TranslationError("Nothing to translate.")
        if self._latency:
            time.sleep(self._latency)
        entry: Optional[Mapping[str, Any]] = self._entries.get(query.lower())
        if entry is None:
            raise TranslationError(f"No translation found for \"{query}\".")
        detected = source_language
        if source_language == "auto":
            detected = str(entry.get("source_language") or "auto")
        return TranslationResult(
            original=query,
            translation=str(entry.get("translation") or ""),
            source_language=detected,
            target_language=target_language,
            phonetic=entry.get("phonetic") or None,
            dictionaries=_parse_groups(entry.get("dictionaries")),
        )
