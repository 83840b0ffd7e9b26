"""Long-lived translation dialog that a pinned balloon hands its query to."""
from __future__ import annotations

import logging
from typing import Any, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QDialog, QHBoxLayout, QLabel, QLineEdit, QPushButton, QVBoxLayout, QWidget

from translation_balloon.balloon_config import BalloonSettings
from translation_balloon.models import QueryRequest
from translation_balloon.presenter import DispatchFn
from translation_balloon.result_format import PROCESSING_TEXT, format_error_html, format_result_html, word_from_link

_LOGGER = logging.getLogger("TranslationBalloon.Dialog")


class TranslationDialog(QDialog):
    def __init__(self, dispatch_fn: DispatchFn, settings: BalloonSettings, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._dispatch = dispatch_fn
        self._settings = settings
        self._request_id = 0
        self.setWindowTitle("Translate")
        self.setMinimumWidth(min(480, settings.max_width))

        self._input = QLineEdit()
        self._input.returnPressed.connect(self._on_submit)
        self._button = QPushButton("Translate")
        self._button.clicked.connect(self._on_submit)
        self._output = QLabel()
        self._output.setTextFormat(Qt.TextFormat.RichText)
        self._output.setWordWrap(True)
        self._output.setAlignment(Qt.AlignmentFlag.AlignTop | Qt.AlignmentFlag.AlignLeft)
        self._output.linkActivated.connect(self._on_link)

        row = QHBoxLayout()
        row.addWidget(self._input, 1)
        row.addWidget(self._button)
        layout = QVBoxLayout(self)
        layout.addLayout(row)
        layout.addWidget(self._output, 1)

    @property
    def current_text(self) -> str:
        return self._input.text()

    @property
    def output_html(self) -> str:
        return self._output.text()

    def query(self, text: str) -> None:
        self._input.setText(text)
        self._run_query(text)

    def _on_submit(self, _checked: bool = False) -> None:
        self._run_query(self._input.text())

    def _on_link(self, href: str) -> None:
        word = word_from_link(href)
        if word:
            self.query(word)

    def _run_query(self, text: str) -> None:
        text = text.strip()
        if not text:
            return
        self._request_id += 1
        request_id = self._request_id
        self._output.setText(PROCESSING_TEXT)
        request = QueryRequest(text, self._settings.source_language, self._settings.target_language)
        self._dispatch(
            request,
            lambda result: self._on_result(request_id, result),
            lambda error: self._on_error(request_id, error),
        )

    def _on_result(self, request_id: int, result: Any) -> None:
        if request_id == self._request_id:
            self._output.setText(format_result_html(result))

    def _on_error(self, request_id: int, error: str) -> None:
        if request_id == self._request_id:
            self._output.setText(format_error_html(error))


class TranslationDialogManager:
    """Owns a single dialog instance for the lifetime of the application."""

    def __init__(self, dispatch_fn: DispatchFn, settings: Optional[BalloonSettings] = None) -> None:
        self._dispatch = dispatch_fn
        self._settings = settings or BalloonSettings()
        self._dialog: Optional[TranslationDialog] = None

    @property
    def dialog(self) -> Optional[TranslationDialog]:
        return self._dialog

    def show_dialog(self, owner: Optional[QWidget] = None) -> TranslationDialog:
        if self._dialog is None:
            self._dialog = TranslationDialog(self._dispatch, self._settings, owner)
            _LOGGER.debug("Translation dialog created")
        self._dialog.show()
        self._dialog.raise_()
        self._dialog.activateWindow()
        return self._dialog
