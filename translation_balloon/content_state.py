"""Display state for the balloon content (pure, no Qt)."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Union

AfterFn = Callable[[int, Callable[[], None]], object]

_LOGGER = logging.getLogger("TranslationBalloon.Controller")


class DisplayState(Enum):
    PROCESSING = "processing"
    RESULT = "result"
    ERROR = "error"


@dataclass(frozen=True)
class Processing:
    query: str = ""


@dataclass(frozen=True)
class Result:
    query: str
    result: Any


@dataclass(frozen=True)
class Error:
    query: str
    message: str


Content = Union[Processing, Result, Error]

_STATE_BY_TAG: Dict[type, DisplayState] = {
    Processing: DisplayState.PROCESSING,
    Result: DisplayState.RESULT,
    Error: DisplayState.ERROR,
}

# Every re-query goes back through PROCESSING; same-state entries re-render.
_TRANSITIONS: Dict[DisplayState, FrozenSet[DisplayState]] = {
    DisplayState.PROCESSING: frozenset(DisplayState),
    DisplayState.RESULT: frozenset({DisplayState.PROCESSING, DisplayState.RESULT}),
    DisplayState.ERROR: frozenset({DisplayState.PROCESSING, DisplayState.ERROR}),
}


class IllegalTransitionError(ValueError):
    def __init__(self, current: DisplayState, requested: DisplayState) -> None:
        super().__init__(f"Cannot switch balloon content from {current.value} to {requested.value}")
        self.current = current
        self.requested = requested


def state_of(content: Content) -> DisplayState:
    try:
        return _STATE_BY_TAG[type(content)]
    except KeyError:
        raise TypeError(f"Unsupported balloon content: {content!r}") from None


class ContentStateMachine:
    """Swaps the visible page and re-lays out the balloon in two passes.

    A single synchronous revalidate is not enough after a page swap: rich text
    only reports its final size after the event loop has run once, so a second
    revalidate is queued through ``after(0, ...)``.
    """

    def __init__(
        self,
        *,
        show_processing_fn: Callable[[str], None],
        show_result_fn: Callable[[Any], None],
        show_error_fn: Callable[[str], None],
        revalidate_fn: Callable[[], None],
        after: AfterFn,
        is_disposed_fn: Callable[[], bool],
    ) -> None:
        self._show_processing = show_processing_fn
        self._show_result = show_result_fn
        self._show_error = show_error_fn
        self._revalidate = revalidate_fn
        self._after = after
        self._is_disposed = is_disposed_fn
        self._content: Content = Processing()
        self._state = DisplayState.PROCESSING

    @property
    def state(self) -> DisplayState:
        return self._state

    @property
    def content(self) -> Content:
        return self._content

    def transition(self, content: Content, *, revalidate: bool = True) -> bool:
        """Show ``content``; returns False when the balloon is already disposed."""
        if self._is_disposed():
            _LOGGER.debug("Ignoring %s content; balloon already disposed", state_of(content).value)
            return False
        new_state = state_of(content)
        if new_state not in _TRANSITIONS[self._state]:
            raise IllegalTransitionError(self._state, new_state)

        self._state = new_state
        self._content = content
        if isinstance(content, Result):
            self._show_result(content.result)
        elif isinstance(content, Error):
            self._show_error(content.message)
        else:
            self._show_processing(content.query)

        if revalidate:
            self._revalidate()
            self._after(0, self._deferred_revalidate)
        return True

    def _deferred_revalidate(self) -> None:
        if self._is_disposed():
            return
        self._revalidate()
