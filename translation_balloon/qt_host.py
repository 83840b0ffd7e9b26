"""Editor host adapter over QPlainTextEdit / QTextEdit."""
from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple, Union

from PyQt6.QtCore import QPoint, QRect
from PyQt6.QtGui import QTextCursor
from PyQt6.QtWidgets import QPlainTextEdit, QTextEdit, QWidget

from translation_balloon.models import ScreenPoint
from translation_balloon.range_anchor import RangeAnchor

_LOGGER = logging.getLogger("TranslationBalloon.Host")

Editor = Union[QPlainTextEdit, QTextEdit]


class QtEditorHost:
    """Maps document offsets to screen space and guesses popup placement.

    The best popup location is just below the preferred anchor rectangle when
    that rectangle is inside the viewport, otherwise the viewport centre.
    """

    def __init__(self, editor: Editor) -> None:
        self._editor = editor
        self._preferred_position: Optional[int] = None

    @property
    def editor(self) -> Editor:
        return self._editor

    @property
    def owner(self) -> QWidget:
        return self._editor.window()

    # Anchors ---------------------------------------------------------------

    def create_anchor(self, start: int, end: int) -> RangeAnchor:
        anchor = RangeAnchor(start, end)
        document = self._editor.document()
        document.contentsChange.connect(anchor.apply_edit)

        def _disconnect() -> None:
            try:
                document.contentsChange.disconnect(anchor.apply_edit)
            except (TypeError, RuntimeError):
                # Already disconnected or the document was destroyed.
                pass

        anchor.add_release_callback(_disconnect)
        return anchor

    def selection_anchor(self) -> Optional[Tuple[RangeAnchor, str]]:
        """Anchor the current selection, or the word under the caret."""
        cursor = self._editor.textCursor()
        if not cursor.hasSelection():
            cursor.select(QTextCursor.SelectionType.WordUnderCursor)
        text = cursor.selectedText().replace("\u2029", "\n").strip()
        if not text:
            return None
        return self.create_anchor(cursor.selectionStart(), cursor.selectionEnd()), text

    # Geometry --------------------------------------------------------------

    def offset_to_visual_position(self, offset: int) -> int:
        document = self._editor.document()
        return max(0, min(offset, document.characterCount() - 1))

    def set_preferred_popup_position(self, position: int) -> None:
        # Document position; converted to viewport pixels on every query.
        self._preferred_position = position

    def is_best_popup_location_visible(self) -> bool:
        return self._is_visible(self._candidate_rect())

    def best_popup_location(self) -> ScreenPoint:
        viewport = self._editor.viewport()
        rect = self._candidate_rect()
        if self._is_visible(rect):
            local = QPoint(rect.center().x(), rect.bottom())
        else:
            local = viewport.rect().center()
        point = viewport.mapToGlobal(local)
        return ScreenPoint(point.x(), point.y())

    def viewport_origin(self) -> ScreenPoint:
        point = self._editor.viewport().mapToGlobal(QPoint(0, 0))
        return ScreenPoint(point.x(), point.y())

    def viewport_height(self) -> int:
        return self._editor.viewport().height()

    def scroll_to_offset(self, offset: int) -> None:
        """Bring ``offset`` into view through the scrollbars, leaving the caret alone."""
        rect = self._rect_at(offset)
        if self._is_visible(rect):
            return
        area = self._editor.viewport().rect()
        dy = rect.center().y() - area.center().y()
        if isinstance(self._editor, QPlainTextEdit):
            # Plain text edits scroll vertically in lines, not pixels.
            dy = int(dy / max(1, self._editor.fontMetrics().lineSpacing()))
        vertical = self._editor.verticalScrollBar()
        vertical.setValue(vertical.value() + dy)
        if not area.left() <= rect.left() <= area.right():
            horizontal = self._editor.horizontalScrollBar()
            horizontal.setValue(horizontal.value() + rect.left() - area.center().x())
        _LOGGER.debug("Scrolled offset %d into view", offset)

    def watch_viewport(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call ``callback`` whenever the editor scrolls; returns the unsubscribe function."""

        def _slot(*_args: object) -> None:
            callback()

        signals = (
            self._editor.verticalScrollBar().valueChanged,
            self._editor.horizontalScrollBar().valueChanged,
        )
        for signal in signals:
            signal.connect(_slot)

        def _unwatch() -> None:
            for signal in signals:
                try:
                    signal.disconnect(_slot)
                except (TypeError, RuntimeError):
                    pass

        return _unwatch

    def _candidate_rect(self) -> QRect:
        if self._preferred_position is None:
            return self._editor.cursorRect()
        return self._rect_at(self._preferred_position)

    def _rect_at(self, offset: int) -> QRect:
        cursor = QTextCursor(self._editor.document())
        cursor.setPosition(self.offset_to_visual_position(offset))
        return self._editor.cursorRect(cursor)

    def _is_visible(self, rect: QRect) -> bool:
        # Cursor rectangles may be one pixel wide; test corners, not intersection.
        area = self._editor.viewport().rect()
        return area.contains(rect.topLeft()) or area.contains(rect.bottomLeft())
