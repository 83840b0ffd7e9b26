"""Anchor → screen point conversion for the balloon (pure, no Qt)."""
from __future__ import annotations

import logging
from typing import Callable, Optional, TYPE_CHECKING

from translation_balloon.models import ScreenPoint

if TYPE_CHECKING:
    from translation_balloon.range_anchor import RangeAnchor

_LOGGER = logging.getLogger("TranslationBalloon.Position")


class AnchorTracker:
    """Feeds the anchor midpoint to the host's popup placement heuristic.

    The host owns the actual "best popup location" guess; this class only
    records which visual position that guess should prefer.
    """

    def __init__(
        self,
        *,
        offset_to_visual_fn: Callable[[int], object],
        set_preferred_position_fn: Callable[[object], None],
        best_location_fn: Callable[[], ScreenPoint],
    ) -> None:
        self._offset_to_visual = offset_to_visual_fn
        self._set_preferred_position = set_preferred_position_fn
        self._best_location = best_location_fn

    def update_preferred_position(self, anchor: "RangeAnchor") -> bool:
        if not anchor.is_valid:
            _LOGGER.debug(
                "Anchor (%d, %d) no longer valid; keeping previous popup position",
                anchor.start_offset,
                anchor.end_offset,
            )
            return False
        position = self._offset_to_visual(anchor.midpoint())
        self._set_preferred_position(position)
        return True

    def resolve_anchor_point(self, anchor: "RangeAnchor") -> Optional[ScreenPoint]:
        """Return the screen point for ``anchor`` or None when it was invalidated."""
        if not self.update_preferred_position(anchor):
            return None
        return self._best_location()

    def best_location(self) -> ScreenPoint:
        return self._best_location()
