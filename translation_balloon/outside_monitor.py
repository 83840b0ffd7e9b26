"""Pointer hit-testing that drives the pin button visibility (pure, no Qt)."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from translation_balloon.models import ScreenPoint

MotionCallback = Callable[[Optional[object], ScreenPoint], None]

_LOGGER = logging.getLogger("TranslationBalloon.Monitor")


@dataclass(frozen=True)
class HitTestHooks:
    """Toolkit-specific probes the monitor needs; the Qt view builds one."""

    pin_target: object
    content_root: object
    is_showing_fn: Callable[[object], bool]
    is_menu_fn: Callable[[object], bool]
    is_descendant_fn: Callable[[object, object], bool]
    contains_screen_point_fn: Callable[[object, ScreenPoint], bool]
    install_fn: Callable[[MotionCallback], None]
    remove_fn: Callable[[MotionCallback], None]


class OutsideInteractionMonitor:
    """Process-wide pointer observer owned by exactly one balloon.

    The observer is registered once and removed once; after removal it ignores
    any motion events still queued by the toolkit. Dismissal is left to the
    popup's own outside-click policy.
    """

    def __init__(self, hooks: HitTestHooks, *, set_pin_visible_fn: Callable[[bool], None]) -> None:
        self._hooks = hooks
        self._set_pin_visible = set_pin_visible_fn
        self._last_inside = False
        self._installed = False
        self._removed = False

    @property
    def installed(self) -> bool:
        return self._installed and not self._removed

    @property
    def last_inside(self) -> bool:
        return self._last_inside

    def install(self) -> None:
        if self._installed or self._removed:
            return
        self._hooks.install_fn(self.handle_pointer_motion)
        self._installed = True
        _LOGGER.debug("Pointer motion observer installed")

    def remove(self) -> None:
        if self._removed:
            return
        self._removed = True
        if self._installed:
            self._hooks.remove_fn(self.handle_pointer_motion)
            _LOGGER.debug("Pointer motion observer removed")

    def handle_pointer_motion(self, target: Optional[object], screen_point: ScreenPoint) -> None:
        if self._removed:
            return
        inside = self.is_inside(target, screen_point)
        if inside != self._last_inside:
            self._last_inside = inside
            self._set_pin_visible(inside)

    def is_inside(self, target: Optional[object], screen_point: ScreenPoint) -> bool:
        hooks = self._hooks
        content = hooks.content_root
        if target is not None:
            if target is hooks.pin_target:
                return True
            if not hooks.is_showing_fn(target):
                return True
            if hooks.is_menu_fn(target):
                return False
            if hooks.is_descendant_fn(target, content):
                return True
        if not hooks.is_showing_fn(content):
            return False
        return hooks.contains_screen_point_fn(content, screen_point)
