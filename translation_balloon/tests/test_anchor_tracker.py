from __future__ import annotations

import types

from translation_balloon.anchor_tracker import AnchorTracker
from translation_balloon.models import ScreenPoint
from translation_balloon.range_anchor import RangeAnchor


def _build_tracker(best=ScreenPoint(40, 80)):
    calls = types.SimpleNamespace(offsets=[], preferred=[], best=0)

    def _offset_to_visual(offset):
        calls.offsets.append(offset)
        return ("visual", offset)

    def _best_location():
        calls.best += 1
        return best

    tracker = AnchorTracker(
        offset_to_visual_fn=_offset_to_visual,
        set_preferred_position_fn=calls.preferred.append,
        best_location_fn=_best_location,
    )
    return tracker, calls


def test_update_records_midpoint_as_preferred_position():
    tracker, calls = _build_tracker()

    assert tracker.update_preferred_position(RangeAnchor(10, 20)) is True
    assert calls.offsets == [15]
    assert calls.preferred == [("visual", 15)]


def test_resolve_returns_host_best_location():
    tracker, calls = _build_tracker(ScreenPoint(5, 6))

    assert tracker.resolve_anchor_point(RangeAnchor(10, 10)) == ScreenPoint(5, 6)
    assert calls.preferred == [("visual", 10)]
    assert calls.best == 1


def test_invalid_anchor_leaves_preferred_position_untouched():
    tracker, calls = _build_tracker()
    anchor = RangeAnchor(10, 12)
    anchor.invalidate()

    assert tracker.update_preferred_position(anchor) is False
    assert tracker.resolve_anchor_point(anchor) is None
    assert calls.preferred == []
    assert calls.best == 0

    disposed = RangeAnchor(1, 2)
    disposed.dispose()
    assert tracker.resolve_anchor_point(disposed) is None
