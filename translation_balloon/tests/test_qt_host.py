from __future__ import annotations

import pytest
from PyQt6.QtGui import QTextCursor
from PyQt6.QtWidgets import QPlainTextEdit

from translation_balloon.models import ScreenPoint
from translation_balloon.qt_host import QtEditorHost


def _editor(text: str = "hello world") -> QPlainTextEdit:
    editor = QPlainTextEdit()
    editor.setPlainText(text)
    editor.resize(300, 200)
    return editor


@pytest.mark.pyqt_required
def test_selection_anchor_falls_back_to_word_under_caret(qt_app):
    editor = _editor()
    host = QtEditorHost(editor)

    anchor, text = host.selection_anchor()

    assert text == "hello"
    assert (anchor.start_offset, anchor.end_offset) == (0, 5)
    anchor.dispose()


@pytest.mark.pyqt_required
def test_selection_anchor_uses_explicit_selection(qt_app):
    editor = _editor()
    cursor = editor.textCursor()
    cursor.setPosition(6)
    cursor.setPosition(11, QTextCursor.MoveMode.KeepAnchor)
    editor.setTextCursor(cursor)

    anchor, text = QtEditorHost(editor).selection_anchor()

    assert text == "world"
    assert (anchor.start_offset, anchor.end_offset) == (6, 11)
    anchor.dispose()


@pytest.mark.pyqt_required
def test_blank_selection_has_no_anchor(qt_app):
    editor = _editor("   ")

    assert QtEditorHost(editor).selection_anchor() is None


@pytest.mark.pyqt_required
def test_anchor_follows_document_edits_until_disposed(qt_app):
    editor = _editor()
    host = QtEditorHost(editor)
    anchor = host.create_anchor(6, 11)

    cursor = QTextCursor(editor.document())
    cursor.setPosition(0)
    cursor.insertText("oh ")
    assert (anchor.start_offset, anchor.end_offset) == (9, 14)

    anchor.dispose()
    cursor.setPosition(0)
    cursor.insertText("well ")
    assert (anchor.start_offset, anchor.end_offset) == (9, 14)


@pytest.mark.pyqt_required
def test_offsets_are_clamped_to_document(qt_app):
    host = QtEditorHost(_editor())

    assert host.offset_to_visual_position(500) == len("hello world")
    assert host.offset_to_visual_position(3) == 3


@pytest.mark.pyqt_required
def test_locations_are_screen_points(qt_app):
    editor = _editor()
    host = QtEditorHost(editor)
    host.set_preferred_popup_position(2)

    assert isinstance(host.best_popup_location(), ScreenPoint)
    assert isinstance(host.viewport_origin(), ScreenPoint)
    assert host.viewport_height() == editor.viewport().height()


@pytest.mark.pyqt_required
def test_watch_viewport_unsubscribes(qt_app):
    editor = _editor()
    host = QtEditorHost(editor)
    calls = []
    scrollbar = editor.horizontalScrollBar()
    scrollbar.setRange(0, 100)

    unwatch = host.watch_viewport(lambda: calls.append(True))
    scrollbar.setValue(10)
    assert calls == [True]

    unwatch()
    unwatch()
    scrollbar.setValue(20)
    assert calls == [True]


@pytest.mark.pyqt_required
def test_scroll_to_offset_moves_viewport_but_not_caret(qt_app):
    editor = _editor("\n".join(f"line {index}" for index in range(200)))
    editor.resize(300, 120)
    editor.show()
    qt_app.processEvents()
    host = QtEditorHost(editor)
    scrollbar = editor.verticalScrollBar()
    try:
        host.scroll_to_offset(0)
        assert scrollbar.value() == 0

        target = editor.document().findBlockByNumber(150).position()
        host.scroll_to_offset(target)

        assert scrollbar.value() > 0
        assert editor.textCursor().position() == 0
        assert not editor.textCursor().hasSelection()
    finally:
        editor.close()
