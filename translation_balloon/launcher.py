from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QApplication, QMainWindow, QMessageBox, QPlainTextEdit

from translation_balloon.backends import GlossaryBackend
from translation_balloon.balloon_config import BalloonSettings, PACKAGE_DIR, load_settings, resolve_settings_path
from translation_balloon.balloon_controller import TranslationBalloon
from translation_balloon.balloon_widget import BalloonWidget, qt_after
from translation_balloon.dialog_manager import TranslationDialogManager
from translation_balloon.logging_utils import configure_logging
from translation_balloon.qt_host import QtEditorHost
from translation_balloon.query_worker import QueryDispatcher

_LOGGER = logging.getLogger("TranslationBalloon.Launcher")

SAMPLE_GLOSSARY = PACKAGE_DIR / "data" / "sample_glossary.json"
SAMPLE_TEXT = (
    "Select a word such as hello, display or balloon and press Ctrl+Shift+Y.\n"
    "Hover the balloon to reveal the pin button; pinning reopens the query in a dialog.\n"
)


class EditorWindow(QMainWindow):
    """Plain-text editor that shows a translation balloon for the selection."""

    def __init__(
        self,
        settings: BalloonSettings,
        dispatcher: QueryDispatcher,
        dialogs: TranslationDialogManager,
        *,
        settings_path: Path,
    ) -> None:
        super().__init__()
        self._settings = settings
        self._dispatcher = dispatcher
        self._dialogs = dialogs
        self._settings_path = settings_path
        self._balloon: Optional[TranslationBalloon] = None

        self._editor = QPlainTextEdit()
        self._host = QtEditorHost(self._editor)
        self.setCentralWidget(self._editor)
        self.setWindowTitle("Translation Balloon")
        self.resize(720, 480)

        action = QAction("Translate Selection", self)
        action.setShortcut(QKeySequence("Ctrl+Shift+Y"))
        action.triggered.connect(self.translate_selection)
        self.addAction(action)
        self.menuBar().addMenu("&Translate").addAction(action)

    @property
    def editor(self) -> QPlainTextEdit:
        return self._editor

    def translate_selection(self, _checked: bool = False) -> None:
        selection = self._host.selection_anchor()
        if selection is None:
            self.statusBar().showMessage("Nothing to translate", 2000)
            return
        anchor, text = selection
        if self._balloon is not None:
            self._balloon.hide()
        self._balloon = TranslationBalloon(
            self._host,
            anchor,
            text,
            view_factory=BalloonWidget,
            dispatch_fn=self._dispatcher.dispatch,
            after=qt_after,
            dialog_manager=self._dialogs,
            open_settings_fn=self._show_settings_location,
            settings=self._settings,
        )
        _LOGGER.debug("Showing balloon for %r", text)
        self._balloon.show()

    def _show_settings_location(self) -> None:
        QMessageBox.information(
            self,
            "Translation settings",
            f"Settings are read from:\n{self._settings_path}",
        )


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Translation balloon demo editor")
    parser.add_argument("file", nargs="?", help="Text file to open")
    parser.add_argument("--settings", help="Path to balloon_settings.json")
    parser.add_argument("--glossary", help="Path to a glossary JSON file")
    parser.add_argument("--latency", type=float, default=0.4, help="Simulated backend latency in seconds")
    args = parser.parse_args(argv)

    settings_path = resolve_settings_path(args.settings)
    settings = load_settings(settings_path)
    configure_logging(retention=settings.log_retention)
    glossary_path = Path(args.glossary).expanduser() if args.glossary else settings.glossary_path or SAMPLE_GLOSSARY
    _LOGGER.info("Starting translation balloon demo (settings=%s glossary=%s)", settings_path, glossary_path)

    app = QApplication(sys.argv[:1])
    backend = GlossaryBackend.from_file(glossary_path, latency=args.latency)
    dispatcher = QueryDispatcher(backend)
    dialogs = TranslationDialogManager(dispatcher.dispatch, settings)
    window = EditorWindow(settings, dispatcher, dialogs, settings_path=settings_path)

    text = SAMPLE_TEXT
    if args.file:
        try:
            text = Path(args.file).expanduser().read_text(encoding="utf-8")
        except OSError as exc:
            _LOGGER.warning("Failed to open %s: %s", args.file, exc)
    window.editor.setPlainText(text)
    window.show()

    exit_code = app.exec()
    _LOGGER.info("Translation balloon demo exiting with code %s", exit_code)
    return int(exit_code)


if __name__ == "__main__":
    raise SystemExit(main())
