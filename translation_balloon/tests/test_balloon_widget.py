from __future__ import annotations

import pytest
from PyQt6.QtCore import QEvent
from PyQt6.QtWidgets import QLabel, QMenu, QPlainTextEdit, QWidget

from translation_balloon.balloon_controller import TranslationBalloon
from translation_balloon.balloon_widget import (
    BalloonWidget,
    qt_after,
    widget_is_descendant,
    widget_is_menu,
    widget_is_showing,
)
from translation_balloon.content_state import DisplayState
from translation_balloon.models import DictEntry, DictGroup, TranslationResult
from translation_balloon.qt_host import QtEditorHost


class _DispatchStub:
    def __init__(self) -> None:
        self.callbacks: list[tuple] = []

    def __call__(self, request, on_success, on_failure):
        self.callbacks.append((on_success, on_failure))


def _build(qt_app):
    editor = QPlainTextEdit()
    editor.setPlainText("display the balloon")
    editor.resize(400, 300)
    editor.show()
    host = QtEditorHost(editor)
    anchor, text = host.selection_anchor()
    dispatch = _DispatchStub()
    views: list[BalloonWidget] = []

    def _factory(controller):
        view = BalloonWidget(controller)
        views.append(view)
        return view

    balloon = TranslationBalloon(host, anchor, text, view_factory=_factory, dispatch_fn=dispatch, after=qt_after)
    return balloon, views[0], dispatch, editor


def _result() -> TranslationResult:
    return TranslationResult(
        original="display",
        translation="显示",
        source_language="en",
        target_language="ja",
        dictionaries=(DictGroup("verb", (DictEntry("陈列", ("display",)),)),),
    )


@pytest.mark.pyqt_required
def test_widget_helpers(qt_app):
    root = QWidget()
    child = QLabel(root)
    menu = QMenu()

    assert widget_is_menu(menu)
    assert not widget_is_menu(child)
    assert widget_is_descendant(child, root)
    assert widget_is_descendant(root, root)
    assert not widget_is_descendant(menu, root)
    assert not widget_is_showing(root)
    assert not widget_is_showing(None)


@pytest.mark.pyqt_required
def test_show_swaps_pages_as_query_completes(qt_app):
    balloon, view, dispatch, editor = _build(qt_app)
    try:
        balloon.show()
        assert view.isVisible()
        assert view.current_page is view._processing_label
        assert balloon.text == "display"

        dispatch.callbacks[0][0](_result())
        assert balloon.state is DisplayState.RESULT
        assert view.current_page is view._result_page
        assert view._language_combo.currentText() == "ja"
        assert "显示" in view._result_label.text()
        # Syncing the combo must not fire a second query.
        assert len(dispatch.callbacks) == 1
    finally:
        balloon.hide()
        editor.close()


@pytest.mark.pyqt_required
def test_error_page_and_target_language_requery(qt_app):
    balloon, view, dispatch, editor = _build(qt_app)
    try:
        balloon.show()
        dispatch.callbacks[0][1]("timeout")
        assert view.current_page is view._error_label
        assert "timeout" in view._error_label.text()

        view._language_combo.setCurrentText("fr")
        assert len(dispatch.callbacks) == 2
        assert balloon.presenter.target_language == "fr"
        assert view.current_page is view._processing_label
    finally:
        balloon.hide()
        editor.close()


@pytest.mark.pyqt_required
def test_pin_button_hidden_until_hovered(qt_app):
    balloon, view, _dispatch, editor = _build(qt_app)
    try:
        assert view.pin_button.isHidden()
        view.set_pin_visible(True)
        assert not view.pin_button.isHidden()
    finally:
        balloon.hide()
        editor.close()


@pytest.mark.pyqt_required
def test_closing_popup_disposes_balloon(qt_app):
    balloon, view, _dispatch, editor = _build(qt_app)
    try:
        balloon.show()
        filter_installed = view._motion_filter is not None

        view.hide()

        assert filter_installed
        assert balloon.disposed
        assert view._motion_filter is None
        assert not balloon._anchor.is_valid
    finally:
        editor.close()


@pytest.mark.pyqt_required
def test_motion_filter_never_consumes_events(qt_app):
    balloon, view, _dispatch, editor = _build(qt_app)
    try:
        motion_filter = view._motion_filter
        assert motion_filter is not None
        assert motion_filter.eventFilter(editor, QEvent(QEvent.Type.HoverMove)) is False
        assert motion_filter.eventFilter(editor, QEvent(QEvent.Type.KeyPress)) is False
    finally:
        balloon.hide()
        editor.close()
