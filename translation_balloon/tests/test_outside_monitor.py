from __future__ import annotations

import types

from translation_balloon.models import ScreenPoint
from translation_balloon.outside_monitor import HitTestHooks, OutsideInteractionMonitor


class _Widget:
    def __init__(self, name: str, *, showing: bool = True, menu: bool = False, parent=None) -> None:
        self.name = name
        self.showing = showing
        self.menu = menu
        self.parent = parent

    def __repr__(self) -> str:
        return f"_Widget({self.name})"


def _is_descendant(widget, root) -> bool:
    node = widget
    while node is not None:
        if node is root:
            return True
        node = node.parent
    return False


def _build_monitor(*, content_bounds=(0, 0, 100, 50)):
    content = _Widget("content")
    pin = _Widget("pin", parent=content)
    calls = types.SimpleNamespace(pin=[], installed=[], removed=[])

    def _contains(widget, point):
        left, top, right, bottom = content_bounds
        return widget.showing and left <= point.x < right and top <= point.y < bottom

    hooks = HitTestHooks(
        pin_target=pin,
        content_root=content,
        is_showing_fn=lambda widget: widget.showing,
        is_menu_fn=lambda widget: widget.menu,
        is_descendant_fn=_is_descendant,
        contains_screen_point_fn=_contains,
        install_fn=calls.installed.append,
        remove_fn=calls.removed.append,
    )
    monitor = OutsideInteractionMonitor(hooks, set_pin_visible_fn=calls.pin.append)
    return monitor, calls, content, pin


def test_install_and_remove_happen_once():
    monitor, calls, _content, _pin = _build_monitor()

    monitor.install()
    monitor.install()
    assert calls.installed == [monitor.handle_pointer_motion]
    assert monitor.installed

    monitor.remove()
    monitor.remove()
    monitor.install()
    assert calls.removed == [monitor.handle_pointer_motion]
    assert len(calls.installed) == 1
    assert not monitor.installed


def test_remove_without_install_skips_toolkit_hook():
    monitor, calls, _content, _pin = _build_monitor()

    monitor.remove()
    assert calls.removed == []


def test_hit_test_rules():
    monitor, _calls, content, pin = _build_monitor()
    inside = ScreenPoint(10, 10)
    outside = ScreenPoint(500, 500)

    assert monitor.is_inside(pin, outside) is True
    assert monitor.is_inside(_Widget("hidden", showing=False), outside) is True
    assert monitor.is_inside(_Widget("menu", menu=True, parent=content), inside) is False
    assert monitor.is_inside(_Widget("label", parent=content), outside) is True
    assert monitor.is_inside(_Widget("editor"), inside) is True
    assert monitor.is_inside(_Widget("editor"), outside) is False
    assert monitor.is_inside(None, inside) is True

    content.showing = False
    assert monitor.is_inside(_Widget("editor"), inside) is False


def test_pin_visibility_only_toggles_on_change():
    monitor, calls, content, _pin = _build_monitor()
    monitor.install()
    editor = _Widget("editor")
    label = _Widget("label", parent=content)

    monitor.handle_pointer_motion(editor, ScreenPoint(500, 500))
    assert calls.pin == []
    monitor.handle_pointer_motion(label, ScreenPoint(10, 10))
    monitor.handle_pointer_motion(label, ScreenPoint(12, 10))
    assert calls.pin == [True]
    assert monitor.last_inside is True
    monitor.handle_pointer_motion(editor, ScreenPoint(500, 500))
    assert calls.pin == [True, False]


def test_motion_after_remove_is_ignored():
    monitor, calls, content, _pin = _build_monitor()
    monitor.install()
    monitor.remove()

    monitor.handle_pointer_motion(_Widget("label", parent=content), ScreenPoint(10, 10))
    assert calls.pin == []
    assert monitor.last_inside is False
