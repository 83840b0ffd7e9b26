"""Stability-biased placement for the balloon (pure, no Qt).

The resolver prefers leaving the balloon where it is over chasing the anchor:
moving a popup while the user types or scrolls is worse than being slightly
stale. Only downward clipping is guarded; a balloon that would run past the
left or right edge of the viewport is placed anyway.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, TYPE_CHECKING

from translation_balloon.models import ScreenPoint

if TYPE_CHECKING:
    from translation_balloon.anchor_tracker import AnchorTracker
    from translation_balloon.range_anchor import RangeAnchor

_LOGGER = logging.getLogger("TranslationBalloon.Position")


class PositionResolver:
    def __init__(
        self,
        anchor_tracker: "AnchorTracker",
        anchor: "RangeAnchor",
        *,
        is_best_location_visible_fn: Callable[[], bool],
        viewport_origin_fn: Callable[[], ScreenPoint],
        viewport_height_fn: Callable[[], int],
    ) -> None:
        self._anchor_tracker = anchor_tracker
        self._anchor = anchor
        self._is_best_location_visible = is_best_location_visible_fn
        self._viewport_origin = viewport_origin_fn
        self._viewport_height = viewport_height_fn
        self._last_location: Optional[ScreenPoint] = None

    @property
    def last_location(self) -> Optional[ScreenPoint]:
        return self._last_location

    def resolve_location(self, overlay_height: int) -> ScreenPoint:
        previous = self._last_location
        if previous is not None and not self._is_best_location_visible():
            return previous

        point = self._anchor_tracker.resolve_anchor_point(self._anchor)
        if point is None:
            if previous is not None:
                return previous
            point = self._anchor_tracker.best_location()

        origin = self._viewport_origin()
        offset = point.y - origin.y
        if previous is not None and offset + max(0, int(overlay_height)) > self._viewport_height():
            _LOGGER.debug(
                "Keeping balloon at %s; %s would clip below the viewport (offset=%d height=%d)",
                previous,
                point,
                offset,
                overlay_height,
            )
            return previous

        if point != previous:
            _LOGGER.debug("Balloon location resolved to %s", point)
        self._last_location = point
        return point
