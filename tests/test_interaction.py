from __future__ import annotations

import pytest

from canvas_workspace import (
    HitTarget,
    InteractionStateMachine,
    LayoutStore,
    PointerEvent,
    Rect,
    ScrollMetrics,
    Size,
    StaticScreenAnchor,
    ViewportAnchor,
    WheelEvent,
)


def _header(card_id: str) -> HitTarget:
    return HitTarget("card_header", card_id)


def _handle(card_id: str) -> HitTarget:
    return HitTarget("resize_handle", card_id)


@pytest.fixture
def machine(store: LayoutStore, anchor: StaticScreenAnchor) -> InteractionStateMachine:
    return InteractionStateMachine(store, anchor)


def test_wheel_zoom_in_scenario(store: LayoutStore, machine: InteractionStateMachine) -> None:
    assert machine.wheel(WheelEvent(500.0, 500.0, -100.0)) is True

    view = store.get_view()
    assert view.scale == pytest.approx(1.08)
    # World (500, 500) maps back to screen (500, 500).
    assert (500.0 + view.pan_x) * view.scale == pytest.approx(500.0)
    assert (500.0 + view.pan_y) * view.scale == pytest.approx(500.0)


def test_pan_divides_screen_delta_by_scale(store: LayoutStore, machine, anchor) -> None:
    store.set_view(pan_x=10.0, pan_y=20.0, scale=2.0)
    assert machine.pointer_down(PointerEvent(100.0, 100.0, 7)) is True
    assert machine.mode == "panning"
    assert 7 in anchor.captured

    machine.pointer_move(PointerEvent(300.0, 0.0, 7))
    view = store.get_view()
    assert (view.pan_x, view.pan_y) == (110.0, -30.0)

    machine.pointer_up(PointerEvent(300.0, 0.0, 7))
    assert machine.mode == "idle"
    assert anchor.captured == set()


def test_pan_end_does_not_persist(machine, recorder) -> None:
    machine.pointer_down(PointerEvent(0.0, 0.0))
    machine.pointer_move(PointerEvent(50.0, 50.0))
    machine.pointer_up()
    assert recorder.saved == []


def test_drag_scenario_at_scale_two(store: LayoutStore, recorder) -> None:
    store.set_view(scale=2.0)
    machine = InteractionStateMachine(store, ViewportAnchor(store.get_view, Size(4000.0, 3000.0)))

    start = PointerEvent(1800.0 * 2 + 10.0, 800.0 * 2 + 5.0, 1, _header("chat"))
    assert machine.pointer_down(start) is True
    assert machine.mode == "dragging"
    assert store.get_view().focused_card_id == "chat"

    machine.pointer_move(PointerEvent(start.client_x + 100.0, start.client_y + 50.0, 1, _header("chat")))
    card = store.get_card("chat")
    assert (card.x, card.y) == pytest.approx((1850.0, 825.0))

    machine.pointer_up()
    assert machine.mode == "idle"
    assert len(recorder.saved) == 1
    assert recorder.saved[0].cards["chat"].x == pytest.approx(1850.0)


def test_drag_allows_negative_world_positions(store: LayoutStore, machine) -> None:
    machine.pointer_down(PointerEvent(1810.0, 810.0, 1, _header("chat")))
    machine.pointer_move(PointerEvent(-5000.0, -5000.0, 1, _header("chat")))
    card = store.get_card("chat")
    assert card.x == -5010.0
    assert card.y == -5010.0


def test_drag_on_header_does_not_start_pan(store: LayoutStore, machine) -> None:
    pan_before = (store.get_view().pan_x, store.get_view().pan_y)
    machine.pointer_down(PointerEvent(1810.0, 810.0, 1, _header("chat")))
    machine.pointer_move(PointerEvent(1900.0, 900.0, 1, _header("chat")))
    assert (store.get_view().pan_x, store.get_view().pan_y) == pan_before


def test_resize_changes_size_not_position(store: LayoutStore, machine, recorder) -> None:
    store.set_view(scale=0.5)
    machine.pointer_down(PointerEvent(100.0, 100.0, 2, _handle("system")))
    assert machine.mode == "resizing"
    machine.pointer_move(PointerEvent(150.0, 80.0, 2, _handle("system")))

    card = store.get_card("system")
    assert (card.x, card.y) == (1400.0, 800.0)
    assert (card.w, card.h) == (380.0, 360.0)

    machine.pointer_up()
    assert len(recorder.saved) == 1


def test_resize_with_large_negative_delta_hits_floor(store: LayoutStore, machine) -> None:
    machine.pointer_down(PointerEvent(0.0, 0.0, 1, _handle("chat")))
    machine.pointer_move(PointerEvent(-10_000.0, -10_000.0, 1, _handle("chat")))
    card = store.get_card("chat")
    assert (card.w, card.h) == (200.0, 120.0)


@pytest.mark.parametrize(
    "target",
    [HitTarget(), _header("chat"), _handle("chat")],
    ids=["pan", "drag", "resize"],
)
def test_cancel_returns_to_idle_and_releases_capture(machine, anchor, target) -> None:
    machine.pointer_down(PointerEvent(1810.0, 810.0, 3, target))
    assert machine.mode != "idle"
    assert 3 in anchor.captured

    machine.pointer_cancel()
    assert machine.mode == "idle"
    assert anchor.captured == set()
    assert machine.context.card_id is None
    assert machine.context.pointer_id is None


def test_stale_gesture_cannot_resume(store: LayoutStore, machine) -> None:
    machine.pointer_down(PointerEvent(1810.0, 810.0, 1, _header("chat")))
    machine.pointer_cancel()
    machine.pointer_move(PointerEvent(0.0, 0.0, 1, _header("chat")))
    assert store.get_card("chat").x == 1800.0


def test_second_gesture_ignored_while_active(store: LayoutStore, machine) -> None:
    assert machine.pointer_down(PointerEvent(0.0, 0.0, 1)) is True
    assert machine.pointer_down(PointerEvent(1810.0, 810.0, 2, _header("chat"))) is False
    assert machine.mode == "panning"
    assert store.get_view().focused_card_id is None


def test_card_body_pointer_down_starts_nothing(machine) -> None:
    assert machine.pointer_down(PointerEvent(0.0, 0.0, 1, HitTarget("card_body", "chat"))) is False
    assert machine.mode == "idle"


def test_closed_card_cannot_be_dragged(machine) -> None:
    assert machine.pointer_down(PointerEvent(0.0, 0.0, 1, _header("debug"))) is False
    assert machine.mode == "idle"


def test_card_closed_mid_drag_makes_moves_noops(store: LayoutStore, machine, recorder) -> None:
    machine.pointer_down(PointerEvent(1810.0, 810.0, 1, _header("chat")))
    store.toggle("chat")
    machine.pointer_move(PointerEvent(0.0, 0.0, 1, _header("chat")))
    assert store.get_card("chat").x == 1800.0

    machine.pointer_up()
    assert machine.mode == "idle"


def test_missing_anchor_skips_zoom_and_drag_moves(store: LayoutStore) -> None:
    anchor = StaticScreenAnchor(None)
    machine = InteractionStateMachine(store, anchor)
    before = store.get_view()

    assert machine.wheel(WheelEvent(10.0, 10.0, -1.0)) is True
    assert store.get_view() == before

    machine.pointer_down(PointerEvent(1810.0, 810.0, 1, _header("chat")))
    machine.pointer_move(PointerEvent(0.0, 0.0, 1, _header("chat")))
    assert store.get_card("chat").x == 1800.0
    machine.pointer_up()
    assert machine.mode == "idle"


def test_wheel_in_scrollable_body_passes_through(store: LayoutStore, machine) -> None:
    body = HitTarget("card_body", "log", (ScrollMetrics(scroll_top=50.0, client_height=100.0, scroll_height=400.0),))
    assert machine.wheel(WheelEvent(10.0, 10.0, 40.0, body)) is False
    assert store.get_view().scale == 1.0


def test_wheel_at_scroll_boundary_zooms(store: LayoutStore, machine) -> None:
    at_top = HitTarget("card_body", "log", (ScrollMetrics(0.0, 100.0, 400.0),))
    assert machine.wheel(WheelEvent(10.0, 10.0, -40.0, at_top)) is True
    assert store.get_view().scale == pytest.approx(1.08)

    at_bottom = HitTarget("card_body", "log", (ScrollMetrics(300.0, 100.0, 400.0),))
    assert machine.wheel(WheelEvent(10.0, 10.0, 40.0, at_bottom)) is True
    assert store.get_view().scale == pytest.approx(1.08 * 0.92)


def test_wheel_over_unscrollable_body_zooms(store: LayoutStore, machine) -> None:
    short = HitTarget("card_body", "log", (ScrollMetrics(0.0, 100.0, 100.0),))
    assert machine.wheel(WheelEvent(10.0, 10.0, 40.0, short)) is True
    assert store.get_view().scale == pytest.approx(0.92)


def test_wheel_ignored_during_gesture(store: LayoutStore, machine) -> None:
    machine.pointer_down(PointerEvent(0.0, 0.0, 1))
    assert machine.wheel(WheelEvent(10.0, 10.0, -1.0)) is False
    assert store.get_view().scale == 1.0


def test_zoom_at_upper_bound_keeps_pan(store: LayoutStore, machine) -> None:
    store.set_view(pan_x=-42.0, pan_y=17.0, scale=3.0)
    machine.wheel(WheelEvent(250.0, 250.0, -1.0))
    view = store.get_view()
    assert (view.pan_x, view.pan_y, view.scale) == (-42.0, 17.0, 3.0)


def test_viewport_anchor_tracks_view(store: LayoutStore) -> None:
    anchor = ViewportAnchor(store.get_view, Size(800.0, 600.0))
    store.set_view(pan_x=-100.0, pan_y=50.0, scale=2.0)
    assert anchor.get_anchor_rect() == Rect(-200.0, 100.0, 12000.0, 8000.0)
    assert anchor.get_viewport_size() == (800.0, 600.0)
