from __future__ import annotations

import pytest

from canvas_workspace import CanvasConfig, Point, Rect, ViewState
from canvas_workspace.canvas_geometry import (
    clamp_scale,
    clamp_size,
    screen_to_world,
    world_to_screen,
    zoom_about_point,
    zoom_step,
)


def test_world_to_screen_applies_pan_then_scale() -> None:
    view = ViewState(pan_x=-100.0, pan_y=50.0, scale=2.0)
    assert world_to_screen(Point(300.0, 100.0), view) == (400.0, 300.0)


def test_screen_to_world_is_relative_to_anchor() -> None:
    view = ViewState(scale=0.5)
    anchor = Rect(20.0, 10.0, 3000.0, 2000.0)
    assert screen_to_world(Point(120.0, 60.0), view, anchor) == (200.0, 100.0)


def test_clamps_use_authoritative_bounds() -> None:
    assert clamp_scale(0.01) == 0.2
    assert clamp_scale(10.0) == 3.0
    assert clamp_scale(1.3) == 1.3
    assert clamp_size(10.0, 10.0) == (200.0, 120.0)
    assert clamp_size(640.0, 480.0) == (640.0, 480.0)


def test_clamps_follow_custom_config() -> None:
    config = CanvasConfig(min_scale=0.5, max_scale=2.0, min_card_w=50.0, min_card_h=40.0)
    assert clamp_scale(0.1, config=config) == 0.5
    assert clamp_size(0.0, 0.0, config=config) == (50.0, 40.0)


def test_zoom_step_direction() -> None:
    assert zoom_step(1.0, -120.0) == pytest.approx(1.08)
    assert zoom_step(1.0, 120.0) == pytest.approx(0.92)
    # Zero delta counts as zoom in.
    assert zoom_step(1.0, 0.0) == pytest.approx(1.08)


def test_zoom_in_at_cursor_keeps_world_point_fixed() -> None:
    view = ViewState(scale=1.0)
    result = zoom_about_point(view, Point(500.0, 500.0), Rect(0.0, 0.0, 1000.0, 1000.0), -1.0)

    assert result is not None
    assert result.scale == pytest.approx(1.08)
    zoomed = ViewState(pan_x=result.pan_x, pan_y=result.pan_y, scale=result.scale)
    screen = world_to_screen(Point(500.0, 500.0), zoomed)
    assert screen.x == pytest.approx(500.0)
    assert screen.y == pytest.approx(500.0)


def test_zoom_at_bound_aborts() -> None:
    anchor = Rect(0.0, 0.0, 1000.0, 1000.0)
    assert zoom_about_point(ViewState(scale=3.0), Point(10.0, 10.0), anchor, -1.0) is None
    assert zoom_about_point(ViewState(scale=0.2), Point(10.0, 10.0), anchor, 1.0) is None


def test_zoom_near_bound_clamps_scale() -> None:
    result = zoom_about_point(ViewState(scale=2.9), Point(0.0, 0.0), Rect(0.0, 0.0, 1.0, 1.0), -1.0)
    assert result is not None
    assert result.scale == 3.0


def test_rect_edges() -> None:
    rect = Rect(10.0, 20.0, 30.0, 40.0)
    assert rect.right == 40.0
    assert rect.bottom == 60.0
