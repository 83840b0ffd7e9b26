"""Rich-text rendering for balloon and dialog content (pure, no Qt)."""
from __future__ import annotations

from html import escape
from typing import Any

from translation_balloon.models import TranslationResult

SETTINGS_LINK = "#settings"
PROCESSING_TEXT = "Querying..."


def format_result_html(result: Any) -> str:
    if not isinstance(result, TranslationResult):
        return f"<p>{escape(str(result))}</p>"
    parts = [f"<p><b>{escape(result.translation)}</b></p>"]
    if result.phonetic:
        parts.append(f"<p><i>[{escape(result.phonetic)}]</i></p>")
    parts.append(
        "<p style='color:gray'>{src} &rarr; {tgt}: {original}</p>".format(
            src=escape(result.source_language),
            tgt=escape(result.target_language),
            original=escape(result.original),
        )
    )
    for group in result.dictionaries:
        if not group.entries:
            continue
        parts.append(f"<p><b>{escape(group.part_of_speech)}</b></p><ul>")
        for entry in group.entries:
            # Each word links back so it can be looked up in the dialog.
            reverse = ", ".join(escape(word) for word in entry.reverse_translations)
            parts.append(
                f"<li><a href='word:{escape(entry.word, quote=True)}'>{escape(entry.word)}</a> {reverse}</li>"
            )
        parts.append("</ul>")
    return "".join(parts)


def format_error_html(message: str) -> str:
    text = escape(message or "Translation failed").replace("\n", "<br>")
    return f"<p>{text}</p><p><a href='{SETTINGS_LINK}'>Open settings</a></p>"


def word_from_link(href: str) -> str:
    if href.startswith("word:"):
        return href[len("word:"):]
    return ""
