"""PyQt6 view for the translation balloon."""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TYPE_CHECKING

from PyQt6.QtCore import QEvent, QObject, QPoint, Qt, QTimer
from PyQt6.QtGui import QCursor
from PyQt6.QtWidgets import (
    QApplication,
    QComboBox,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMenu,
    QMenuBar,
    QStackedLayout,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from translation_balloon.balloon_config import BalloonSettings
from translation_balloon.models import ScreenPoint, TranslationResult
from translation_balloon.outside_monitor import HitTestHooks, MotionCallback
from translation_balloon.result_format import (
    PROCESSING_TEXT,
    format_error_html,
    format_result_html,
    word_from_link,
)

if TYPE_CHECKING:
    from translation_balloon.balloon_controller import TranslationBalloon

_LOGGER = logging.getLogger("TranslationBalloon.View")

TARGET_LANGUAGES = ("zh", "en", "ja", "ko", "fr", "de", "es", "ru")
LocationFn = Callable[[int], Optional[ScreenPoint]]


def qt_after(delay_ms: int, callback: Callable[[], None]) -> None:
    """Run ``callback`` on a later turn of the Qt event loop."""
    QTimer.singleShot(max(0, int(delay_ms)), callback)


def widget_is_showing(widget: object) -> bool:
    return isinstance(widget, QWidget) and widget.isVisible()


def widget_is_menu(widget: object) -> bool:
    return isinstance(widget, (QMenu, QMenuBar))


def widget_is_descendant(widget: object, root: object) -> bool:
    if not isinstance(widget, QWidget) or not isinstance(root, QWidget):
        return False
    return widget is root or root.isAncestorOf(widget)


def widget_contains_screen_point(widget: object, point: ScreenPoint) -> bool:
    if not isinstance(widget, QWidget):
        return False
    local = widget.mapFromGlobal(QPoint(point.x, point.y))
    return widget.rect().contains(local)


class PointerMotionFilter(QObject):
    """Application-wide observer for pointer motion; never consumes events."""

    _MOTION_EVENTS = (QEvent.Type.MouseMove, QEvent.Type.HoverMove)

    def __init__(self, callback: MotionCallback) -> None:
        super().__init__()
        self._callback = callback

    def eventFilter(self, watched, event) -> bool:  # type: ignore[override]
        if event.type() in self._MOTION_EVENTS:
            pos = QCursor.pos()
            self._callback(QApplication.widgetAt(pos), ScreenPoint(pos.x(), pos.y()))
        return False


class BalloonWidget(QFrame):
    """Popup frame with processing, result and error pages.

    Qt's popup policy closes the frame on an outside click or key press; the
    resulting hideEvent is routed to the controller, which disposes the
    balloon.
    """

    def __init__(self, controller: "TranslationBalloon", settings: Optional[BalloonSettings] = None) -> None:
        super().__init__(None, Qt.WindowType.Popup | Qt.WindowType.FramelessWindowHint)
        self._controller = controller
        self._settings = settings or controller.settings
        self._location_fn: Optional[LocationFn] = None
        self._motion_filter: Optional[PointerMotionFilter] = None
        self._result: Optional[Any] = None

        self.setFrameShape(QFrame.Shape.StyledPanel)
        self.setMaximumWidth(self._settings.max_width)
        insets = self._settings.content_insets

        self._content = QWidget(self)
        self._stack = QStackedLayout(self._content)

        self._processing_label = QLabel(PROCESSING_TEXT)
        self._processing_label.setContentsMargins(insets, insets, insets, insets)
        self._stack.addWidget(self._processing_label)

        self._result_page = QWidget()
        result_layout = QVBoxLayout(self._result_page)
        result_layout.setContentsMargins(insets - 4, 4, insets - 4, insets // 2)
        toolbar = QHBoxLayout()
        self._language_combo = QComboBox()
        self._language_combo.addItems(TARGET_LANGUAGES)
        self._language_combo.currentTextChanged.connect(self._on_target_language_changed)
        self._speak_button = QToolButton()
        self._speak_button.setText("Speak")
        self._speak_button.clicked.connect(self._on_speak_clicked)
        self._pin_button = QToolButton()
        self._pin_button.setText("Pin")
        self._pin_button.setToolTip("Open in translation dialog")
        pin_policy = self._pin_button.sizePolicy()
        pin_policy.setRetainSizeWhenHidden(True)
        self._pin_button.setSizePolicy(pin_policy)
        self._pin_button.setVisible(False)
        self._pin_button.clicked.connect(self._on_pin_clicked)
        toolbar.addWidget(self._language_combo)
        toolbar.addWidget(self._speak_button)
        toolbar.addStretch(1)
        toolbar.addWidget(self._pin_button)
        result_layout.addLayout(toolbar)
        self._result_label = QLabel()
        self._result_label.setTextFormat(Qt.TextFormat.RichText)
        self._result_label.setWordWrap(True)
        self._result_label.linkActivated.connect(self._on_result_link)
        result_layout.addWidget(self._result_label)
        self._stack.addWidget(self._result_page)

        self._error_label = QLabel()
        self._error_label.setTextFormat(Qt.TextFormat.RichText)
        self._error_label.setWordWrap(True)
        self._error_label.setContentsMargins(insets, insets, insets, insets)
        self._error_label.linkActivated.connect(self._controller.on_error_link_activated)
        self._stack.addWidget(self._error_label)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._content)

        for widget in (self, self._content, self._result_page, self._result_label, self._error_label):
            widget.setMouseTracking(True)

    # Pages -----------------------------------------------------------------

    @property
    def current_page(self) -> QWidget:
        return self._stack.currentWidget()

    @property
    def pin_button(self) -> QToolButton:
        return self._pin_button

    def show_processing(self, query: str) -> None:
        self._stack.setCurrentWidget(self._processing_label)

    def show_result(self, result: Any) -> None:
        self._result = result
        if isinstance(result, TranslationResult):
            self._language_combo.blockSignals(True)
            index = self._language_combo.findText(result.target_language)
            if index >= 0:
                self._language_combo.setCurrentIndex(index)
            self._language_combo.blockSignals(False)
        self._result_label.setText(format_result_html(result))
        self._stack.setCurrentWidget(self._result_page)

    def show_error(self, message: str) -> None:
        self._error_label.setText(format_error_html(message))
        self._stack.setCurrentWidget(self._error_label)

    # Geometry --------------------------------------------------------------

    def show_balloon(self, location_fn: LocationFn) -> None:
        self._location_fn = location_fn
        self.adjustSize()
        self.reposition()
        self.show()

    def hide_balloon(self) -> None:
        self._location_fn = None
        if self.isVisible():
            self.hide()
        self.deleteLater()

    def revalidate(self) -> None:
        self.adjustSize()
        self.reposition()

    def reposition(self) -> None:
        if self._location_fn is None:
            return
        point = self._location_fn(self.height())
        if point is None:
            return
        # The balloon hangs below its anchor, centred horizontally on it.
        self.move(point.x - self.width() // 2, point.y)

    def set_pin_visible(self, visible: bool) -> None:
        self._pin_button.setVisible(visible)

    # Pointer observer ------------------------------------------------------

    def hit_test_hooks(self) -> HitTestHooks:
        return HitTestHooks(
            pin_target=self._pin_button,
            content_root=self._content,
            is_showing_fn=widget_is_showing,
            is_menu_fn=widget_is_menu,
            is_descendant_fn=widget_is_descendant,
            contains_screen_point_fn=widget_contains_screen_point,
            install_fn=self._install_motion_filter,
            remove_fn=self._remove_motion_filter,
        )

    def _install_motion_filter(self, callback: MotionCallback) -> None:
        app = QApplication.instance()
        if app is None or self._motion_filter is not None:
            return
        self._motion_filter = PointerMotionFilter(callback)
        app.installEventFilter(self._motion_filter)

    def _remove_motion_filter(self, callback: MotionCallback) -> None:
        motion_filter, self._motion_filter = self._motion_filter, None
        app = QApplication.instance()
        if motion_filter is not None and app is not None:
            app.removeEventFilter(motion_filter)

    # Qt events -------------------------------------------------------------

    def hideEvent(self, event) -> None:  # type: ignore[override]
        super().hideEvent(event)
        self._controller.hide()

    def _on_result_link(self, href: str) -> None:
        word = word_from_link(href)
        if word:
            self._controller.on_new_translate(word)

    def _on_speak_clicked(self, _checked: bool = False) -> None:
        result = self._result
        if isinstance(result, TranslationResult):
            self._controller.speak(result.original, result.source_language)

    def _on_target_language_changed(self, language: str) -> None:
        source = self._controller.presenter.source_language
        _LOGGER.debug("Target language changed to %s", language)
        self._controller.on_language_changed(source, language)

    def _on_pin_clicked(self, _checked: bool = False) -> None:
        self._controller.open_in_dialog()
