"""Issues translation queries for a balloon and filters stale completions."""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TYPE_CHECKING

from translation_balloon.models import QueryRequest

if TYPE_CHECKING:
    from translation_balloon.balloon_controller import TranslationBalloon

DispatchFn = Callable[[QueryRequest, Callable[[Any], None], Callable[[str], None]], None]

_LOGGER = logging.getLogger("TranslationBalloon.Presenter")


class TranslationPresenter:
    """One presenter per balloon; only the newest request may update the view.

    There is no cancellation: a superseded or post-dispose completion is simply
    dropped when it arrives.
    """

    def __init__(
        self,
        view: "TranslationBalloon",
        *,
        dispatch_fn: DispatchFn,
        source_language: str = "auto",
        target_language: str = "zh",
    ) -> None:
        self._view = view
        self._dispatch = dispatch_fn
        self._source_language = source_language
        self._target_language = target_language
        self._request_id = 0
        self._in_flight: Optional[int] = None

    @property
    def source_language(self) -> str:
        return self._source_language

    @property
    def target_language(self) -> str:
        return self._target_language

    @property
    def in_flight(self) -> bool:
        return self._in_flight is not None

    def translate(
        self,
        text: str,
        *,
        source_language: Optional[str] = None,
        target_language: Optional[str] = None,
    ) -> Optional[int]:
        if self._view.disposed:
            _LOGGER.debug("Skipping translation of %r; balloon disposed", text)
            return None
        if source_language:
            self._source_language = source_language
        if target_language:
            self._target_language = target_language

        self._request_id += 1
        request_id = self._request_id
        self._in_flight = request_id
        request = QueryRequest(text, self._source_language, self._target_language)
        self._view.show_start_translate(text)
        _LOGGER.debug(
            "Dispatching query #%d: text=%r %s->%s",
            request_id,
            text,
            request.source_language,
            request.target_language,
        )
        self._dispatch(
            request,
            lambda result: self._handle_success(request_id, text, result),
            lambda error: self._handle_failure(request_id, text, error),
        )
        return request_id

    def _is_current(self, request_id: int) -> bool:
        if request_id != self._request_id:
            _LOGGER.debug("Dropping stale completion for query #%d (current #%d)", request_id, self._request_id)
            return False
        self._in_flight = None
        return True

    def _handle_success(self, request_id: int, text: str, result: Any) -> None:
        if self._is_current(request_id):
            self._view.show_result(text, result)

    def _handle_failure(self, request_id: int, text: str, error: str) -> None:
        if self._is_current(request_id):
            self._view.show_error(text, error)
