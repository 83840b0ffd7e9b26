"""Configuration helpers for the translation balloon."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

SETTINGS_ENV_VAR = "TRANSLATION_BALLOON_SETTINGS"
DEFAULT_SETTINGS_FILE = "balloon_settings.json"
PACKAGE_DIR = Path(__file__).resolve().parent


@dataclass(frozen=True)
class BalloonSettings:
    """Read-only snapshot consumed by the balloon and its result renderer."""

    max_width: int = 600
    content_insets: int = 20
    source_language: str = "auto"
    target_language: str = "zh"
    log_retention: int = 5
    glossary_path: Optional[Path] = None


def resolve_settings_path(arg_path: Optional[str] = None) -> Path:
    if arg_path:
        return Path(arg_path).expanduser().resolve()
    env_override = os.getenv(SETTINGS_ENV_VAR)
    if env_override:
        return Path(env_override).expanduser().resolve()
    return (PACKAGE_DIR.parent / DEFAULT_SETTINGS_FILE).resolve()


def _int(value: Any, fallback: int, *, minimum: int) -> int:
    if value is None or isinstance(value, bool):
        return fallback
    try:
        numeric = int(value)
    except (TypeError, ValueError):
        return fallback
    return max(minimum, numeric)


def _language(value: Any, fallback: str) -> str:
    if not isinstance(value, str):
        return fallback
    token = value.strip().lower()
    return token or fallback


def load_settings(settings_path: Path) -> BalloonSettings:
    """Read balloon settings from JSON, falling back to defaults per field."""
    defaults = BalloonSettings()
    try:
        raw = settings_path.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return defaults

    try:
        data: Dict[str, Any] = json.loads(raw)
    except json.JSONDecodeError:
        return defaults
    if not isinstance(data, dict):
        return defaults

    glossary_path: Optional[Path] = None
    glossary_value = data.get("glossary_path")
    if isinstance(glossary_value, str) and glossary_value.strip():
        candidate = Path(glossary_value.strip()).expanduser()
        if not candidate.is_absolute():
            candidate = settings_path.parent / candidate
        glossary_path = candidate.resolve()

    return BalloonSettings(
        max_width=_int(data.get("max_width"), defaults.max_width, minimum=120),
        content_insets=_int(data.get("content_insets"), defaults.content_insets, minimum=0),
        source_language=_language(data.get("source_language"), defaults.source_language),
        target_language=_language(data.get("target_language"), defaults.target_language),
        log_retention=_int(data.get("log_retention"), defaults.log_retention, minimum=1),
        glossary_path=glossary_path,
    )
