from __future__ import annotations

from translation_balloon.models import DictEntry, DictGroup, TranslationResult
from translation_balloon.result_format import SETTINGS_LINK, format_error_html, format_result_html, word_from_link


def _result() -> TranslationResult:
    return TranslationResult(
        original="display",
        translation="显示",
        source_language="en",
        target_language="zh",
        phonetic="dɪˈspleɪ",
        dictionaries=(
            DictGroup("verb", (DictEntry("陈列", ("display", "exhibit")),)),
            DictGroup("noun", ()),
        ),
    )


def test_result_html_includes_translation_and_dictionary_links():
    html = format_result_html(_result())

    assert "<b>显示</b>" in html
    assert "[dɪˈspleɪ]" in html
    assert "en &rarr; zh: display" in html
    assert "<a href='word:陈列'>陈列</a> display, exhibit" in html
    assert "noun" not in html


def test_plain_results_are_escaped():
    assert format_result_html("<b>hi</b>") == "<p>&lt;b&gt;hi&lt;/b&gt;</p>"


def test_error_html_links_to_settings():
    html = format_error_html("timeout\n<retry>")

    assert "timeout<br>&lt;retry&gt;" in html
    assert f"href='{SETTINGS_LINK}'" in html
    assert "Translation failed" in format_error_html("")


def test_word_from_link():
    assert word_from_link("word:hello") == "hello"
    assert word_from_link(SETTINGS_LINK) == ""
