"""Lifecycle controller for the translation balloon (pure, no Qt).

The controller owns the anchor, the content state, the pointer observer and
any text-to-speech session, and releases all of them exactly once. Toolkit
work is delegated to a view built by ``view_factory`` and to the editor host.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TYPE_CHECKING

from translation_balloon.anchor_tracker import AnchorTracker
from translation_balloon.balloon_config import BalloonSettings
from translation_balloon.content_state import (
    AfterFn,
    Content,
    ContentStateMachine,
    DisplayState,
    Error,
    IllegalTransitionError,
    Processing,
    Result,
)
from translation_balloon.models import ScreenPoint
from translation_balloon.outside_monitor import OutsideInteractionMonitor
from translation_balloon.position_resolver import PositionResolver
from translation_balloon.presenter import DispatchFn, TranslationPresenter
from translation_balloon.result_format import SETTINGS_LINK

if TYPE_CHECKING:
    from translation_balloon.balloon_widget import BalloonWidget
    from translation_balloon.dialog_manager import TranslationDialogManager
    from translation_balloon.qt_host import QtEditorHost
    from translation_balloon.range_anchor import RangeAnchor

_LOGGER = logging.getLogger("TranslationBalloon.Controller")


class BalloonDisposedError(RuntimeError):
    """Raised when a disposed balloon is asked to show itself again."""


class TranslationBalloon:
    def __init__(
        self,
        host: "QtEditorHost",
        anchor: "RangeAnchor",
        text: str,
        *,
        view_factory: Callable[["TranslationBalloon"], "BalloonWidget"],
        dispatch_fn: DispatchFn,
        after: AfterFn,
        dialog_manager: Optional["TranslationDialogManager"] = None,
        speech: Optional[Any] = None,
        open_settings_fn: Optional[Callable[[], None]] = None,
        settings: Optional[BalloonSettings] = None,
    ) -> None:
        self._host = host
        self._anchor = anchor
        self._text = text
        self._dialog_manager = dialog_manager
        self._speech = speech
        self._open_settings = open_settings_fn
        self._settings = settings or BalloonSettings()

        self._disposed = False
        self._showing = False
        self._speech_session: Optional[Any] = None
        self._unwatch_viewport: Optional[Callable[[], None]] = None

        self._view = view_factory(self)
        self._anchor_tracker = AnchorTracker(
            offset_to_visual_fn=host.offset_to_visual_position,
            set_preferred_position_fn=host.set_preferred_popup_position,
            best_location_fn=host.best_popup_location,
        )
        self._resolver = PositionResolver(
            self._anchor_tracker,
            anchor,
            is_best_location_visible_fn=host.is_best_popup_location_visible,
            viewport_origin_fn=host.viewport_origin,
            viewport_height_fn=host.viewport_height,
        )
        self._states = ContentStateMachine(
            show_processing_fn=self._view.show_processing,
            show_result_fn=self._view.show_result,
            show_error_fn=self._view.show_error,
            revalidate_fn=self._view.revalidate,
            after=after,
            is_disposed_fn=lambda: self._disposed,
        )
        self._presenter = TranslationPresenter(
            self,
            dispatch_fn=dispatch_fn,
            source_language=self._settings.source_language,
            target_language=self._settings.target_language,
        )
        self._monitor = OutsideInteractionMonitor(
            self._view.hit_test_hooks(),
            set_pin_visible_fn=self._view.set_pin_visible,
        )

        self._anchor_tracker.update_preferred_position(anchor)
        self._monitor.install()

    # Public API -----------------------------------------------------------

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def is_showing(self) -> bool:
        return self._showing

    @property
    def text(self) -> str:
        return self._text

    @property
    def state(self) -> DisplayState:
        return self._states.state

    @property
    def content(self) -> Content:
        return self._states.content

    @property
    def settings(self) -> BalloonSettings:
        return self._settings

    @property
    def presenter(self) -> TranslationPresenter:
        return self._presenter

    def show(self) -> None:
        if self._disposed:
            raise BalloonDisposedError("Balloon was disposed.")
        if self._showing:
            return
        self._showing = True

        if self._anchor.is_valid:
            self._host.scroll_to_offset(self._anchor.midpoint())
        self._states.transition(Processing(self._text), revalidate=False)
        self._view.show_balloon(self.recalculate_location)
        self._unwatch_viewport = self._host.watch_viewport(self._on_viewport_changed)
        self._presenter.translate(self._text)

    def hide(self) -> None:
        if not self._disposed:
            self.dispose()

    def dispose(self) -> None:
        if self._disposed:
            return
        # Flag first: hiding the view fires hideEvent, which calls back into hide().
        self._disposed = True
        self._showing = False

        self._release("viewport watch", self._stop_watching_viewport)
        self._release("view", self._view.hide_balloon)
        self._release("anchor", self._anchor.dispose)
        self._release("speech session", self._release_speech)
        self._release("pointer observer", self._monitor.remove)
        _LOGGER.debug("Balloon disposed (text=%r)", self._text)

    def recalculate_location(self, overlay_height: int) -> Optional[ScreenPoint]:
        if self._disposed:
            return None
        try:
            return self._resolver.resolve_location(overlay_height)
        except Exception as exc:
            _LOGGER.warning("Balloon positioning failed; keeping last location: %s", exc)
            return self._resolver.last_location

    # Presenter view -------------------------------------------------------

    def show_start_translate(self, query: str) -> None:
        if self._disposed:
            _LOGGER.debug("Ignoring start of %r; balloon disposed", query)
            return
        if self._states.state is DisplayState.PROCESSING:
            return
        self._states.transition(Processing(query))

    def show_result(self, query: str, result: Any) -> None:
        if self._disposed:
            _LOGGER.debug("Ignoring result for %r; balloon disposed", query)
            return
        self._show_completion(Result(query, result))

    def show_error(self, query: str, error: str) -> None:
        if self._disposed:
            _LOGGER.debug("Ignoring error for %r; balloon disposed: %s", query, error)
            return
        self._show_completion(Error(query, error))

    def on_query_succeeded(self, result: Any) -> None:
        self.show_result(self._text, result)

    def on_query_failed(self, error: str) -> None:
        self.show_error(self._text, error)

    # View actions ---------------------------------------------------------

    def open_in_dialog(self, text: Optional[str] = None) -> Optional[Any]:
        query = self._text if text is None else text
        self.hide()
        if self._dialog_manager is None:
            _LOGGER.info("No translation dialog available; dropping %r", query)
            return None
        dialog = self._dialog_manager.show_dialog(self._host.owner)
        if query and query.strip():
            dialog.query(query)
        return dialog

    def on_new_translate(self, text: str) -> None:
        self.open_in_dialog(text)

    def on_language_changed(self, source_language: str, target_language: str) -> None:
        if self._disposed:
            return
        self._presenter.translate(
            self._text,
            source_language=source_language,
            target_language=target_language,
        )

    def retranslate(self) -> None:
        if self._disposed:
            return
        self._presenter.translate(self._text)

    def on_error_link_activated(self, href: str) -> None:
        if href != SETTINGS_LINK:
            return
        self.hide()
        if self._open_settings is not None:
            self._open_settings()

    def speak(self, text: str, language: str) -> None:
        if self._disposed:
            return
        if self._speech is None:
            _LOGGER.info("Text-to-speech unavailable; ignoring request for %r", text)
            return
        self._release_speech()
        self._speech_session = self._speech.speak(self._host.owner, text, language)

    # Internal helpers -----------------------------------------------------

    def _show_completion(self, content: Content) -> None:
        try:
            self._states.transition(content)
        except IllegalTransitionError as exc:
            # A late or duplicate completion; the page already shows an answer.
            _LOGGER.debug("Dropping completion for %r: %s", content.query, exc)

    def _on_viewport_changed(self) -> None:
        if self._disposed:
            return
        self._view.reposition()

    def _stop_watching_viewport(self) -> None:
        unwatch, self._unwatch_viewport = self._unwatch_viewport, None
        if unwatch is not None:
            unwatch()

    def _release_speech(self) -> None:
        session, self._speech_session = self._speech_session, None
        if session is not None:
            session.close()

    @staticmethod
    def _release(label: str, release_fn: Callable[[], None]) -> None:
        try:
            release_fn()
        except Exception as exc:
            _LOGGER.warning("Failed to release balloon %s: %s", label, exc)
