"""Runs backend lookups off the Qt thread and delivers results back on it."""
from __future__ import annotations

import itertools
import logging
import threading
from typing import Any, Callable, Dict, Optional, Tuple

from PyQt6.QtCore import QObject, pyqtSignal

from translation_balloon.backends import TranslationError
from translation_balloon.models import QueryRequest

_LOGGER = logging.getLogger("TranslationBalloon.Worker")

SuccessFn = Callable[[Any], None]
FailureFn = Callable[[str], None]


class QueryDispatcher(QObject):
    """Thread-per-query dispatcher; signals are queued onto the owning thread."""

    _succeeded = pyqtSignal(int, object)
    _failed = pyqtSignal(int, str)

    def __init__(self, backend: Any) -> None:
        super().__init__()
        self._backend = backend
        self._tokens = itertools.count(1)
        self._callbacks: Dict[int, Tuple[SuccessFn, FailureFn]] = {}
        self._lock = threading.Lock()
        self._succeeded.connect(self._deliver_success)
        self._failed.connect(self._deliver_failure)

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._callbacks)

    def dispatch(self, request: QueryRequest, on_success: SuccessFn, on_failure: FailureFn) -> None:
        token = next(self._tokens)
        with self._lock:
            self._callbacks[token] = (on_success, on_failure)
        thread = threading.Thread(
            target=self._run,
            args=(token, request),
            name=f"TranslationQuery-{token}",
            daemon=True,
        )
        thread.start()

    # Background thread ----------------------------------------------------

    def _run(self, token: int, request: QueryRequest) -> None:
        try:
            result = self._backend.translate(request.text, request.source_language, request.target_language)
        except TranslationError as exc:
            self._failed.emit(token, str(exc))
            return
        except Exception as exc:
            _LOGGER.warning("Translation backend raised for %r: %s", request.text, exc)
            self._failed.emit(token, f"Translation failed: {exc}")
            return
        self._succeeded.emit(token, result)

    # Qt thread ------------------------------------------------------------

    def _take(self, token: int) -> Optional[Tuple[SuccessFn, FailureFn]]:
        with self._lock:
            return self._callbacks.pop(token, None)

    def _deliver_success(self, token: int, result: object) -> None:
        callbacks = self._take(token)
        if callbacks is not None:
            callbacks[0](result)

    def _deliver_failure(self, token: int, message: str) -> None:
        callbacks = self._take(token)
        if callbacks is not None:
            callbacks[1](message)
