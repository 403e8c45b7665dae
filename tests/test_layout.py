from __future__ import annotations

import pytest

from codepad.layout import LayoutController, clamp_height


@pytest.mark.parametrize(
    "start_y, end_y, expected",
    [
        (500, 550, 450),
        (500, 400, 300),
        (500, -500, 200),
        (100, 2000, 800),
    ],
)
def test_drag_resizes_within_bounds(start_y, end_y, expected):
    layout = LayoutController()
    layout.pointer_down(start_y)
    state = layout.pointer_move(end_y)
    assert state.is_dragging
    assert state.panel_height_px == expected


def test_height_is_relative_to_drag_start():
    layout = LayoutController(panel_height_px=300)
    layout.pointer_down(50)
    layout.pointer_move(60)
    layout.pointer_move(150)
    assert layout.state.panel_height_px == 400
    layout.pointer_up()
    assert not layout.state.is_dragging

    layout.pointer_down(0)
    layout.pointer_move(-50)
    assert layout.state.panel_height_px == 350


def test_move_without_drag_is_ignored():
    layout = LayoutController()
    layout.pointer_move(1000)
    assert layout.state.panel_height_px == 400


def test_fullscreen_is_independent_of_dragging():
    layout = LayoutController()
    layout.pointer_down(0)
    assert layout.toggle_fullscreen() is True
    layout.pointer_move(100)
    assert layout.state.is_dragging
    assert layout.state.panel_height_px == 500
    layout.pointer_up()
    assert layout.state.is_fullscreen
    assert layout.set_fullscreen(False) is False


def test_initial_height_is_clamped():
    assert LayoutController(panel_height_px=5000).state.panel_height_px == 800
    assert clamp_height(199.6) == 200
