"""Edit-tracking document range used as the balloon anchor (pure, no Qt)."""
from __future__ import annotations

import logging
import math
from typing import Callable, List

_LOGGER = logging.getLogger("TranslationBalloon.Anchor")


class RangeAnchor:
    """A start/end offset pair that follows document edits.

    The range shifts when text is inserted or removed before it and is clamped
    when an edit overlaps it. Once every character it covered has been deleted
    the anchor becomes invalid and stays invalid; callers keep using the last
    known screen location in that case.
    """

    def __init__(self, start_offset: int, end_offset: int) -> None:
        if start_offset < 0 or end_offset < start_offset:
            raise ValueError(f"Invalid anchor range ({start_offset}, {end_offset})")
        self._start = int(start_offset)
        self._end = int(end_offset)
        self._valid = True
        self._disposed = False
        self._release_callbacks: List[Callable[[], None]] = []

    @property
    def start_offset(self) -> int:
        return self._start

    @property
    def end_offset(self) -> int:
        return self._end

    @property
    def is_valid(self) -> bool:
        return self._valid and not self._disposed

    @property
    def disposed(self) -> bool:
        return self._disposed

    def midpoint(self) -> int:
        # Half rounds up so (10, 11) lands on 11 rather than banker's rounding.
        return int(math.floor((self._start + self._end) / 2.0 + 0.5))

    def apply_edit(self, position: int, removed: int, added: int) -> None:
        if not self.is_valid:
            return
        removed = max(0, int(removed))
        added = max(0, int(added))
        removed_end = position + removed
        start, end = self._start, self._end
        delta = added - removed

        if start == end:
            if removed > 0 and position < start < removed_end:
                self.invalidate()
            elif position < start:
                self._start = self._end = start + delta
            return

        if position >= end:
            return
        if removed_end <= start:
            self._start = start + delta
            self._end = end + delta
            return
        if removed > 0 and position <= start and removed_end >= end:
            self.invalidate()
            return

        # Partial overlap: keep whatever part of the range survived the edit.
        if position <= start:
            self._start = position + added
            self._end = end + delta
        elif removed_end >= end:
            self._end = position
        else:
            self._end = end + delta

    def invalidate(self) -> None:
        if self._valid:
            self._valid = False
            _LOGGER.debug("Anchor (%d, %d) invalidated by document edit", self._start, self._end)

    def add_release_callback(self, callback: Callable[[], None]) -> None:
        if self._disposed:
            callback()
            return
        self._release_callbacks.append(callback)

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        callbacks, self._release_callbacks = self._release_callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception as exc:
                _LOGGER.warning("Anchor release callback failed: %s", exc)
