from __future__ import annotations

import numpy as np
import pytest

from canvas_workspace import (
    ALL_CARD_IDS,
    CanvasConfig,
    LayoutStore,
    MinimapProjector,
    Size,
)


def test_factors_from_world_and_minimap_size() -> None:
    sx, sy = MinimapProjector().factors
    assert sx == pytest.approx(160 / 6000)
    assert sy == pytest.approx(100 / 4000)


def test_viewport_rect_subtracts_chrome_and_divides_by_scale(store: LayoutStore) -> None:
    store.set_view(pan_x=-1600.0, pan_y=-600.0, scale=2.0)
    rect = MinimapProjector().viewport_rect(store.state, Size(1280.0, 858.0))

    sx, sy = 160 / 6000, 100 / 4000
    np.testing.assert_allclose(
        rect,
        [1600.0 * sx, 600.0 * sy, (1280.0 / 2.0) * sx, (800.0 / 2.0) * sy],
    )


def test_only_open_cards_are_projected_in_catalog_order(store: LayoutStore) -> None:
    store.open("debug")
    cards = MinimapProjector().card_rects(store.state)

    expected_ids = [i for i in ALL_CARD_IDS if store.get_card(i).open]
    assert list(cards) == expected_ids
    assert "log" not in cards

    chat = store.get_card("chat")
    sx, sy = 160 / 6000, 100 / 4000
    np.testing.assert_allclose(cards["chat"], [chat.x * sx, chat.y * sy, chat.w * sx, chat.h * sy])


def test_no_open_cards_gives_empty_projection(store: LayoutStore) -> None:
    for card_id in ALL_CARD_IDS:
        if store.get_card(card_id).open:
            store.toggle(card_id)
    projection = MinimapProjector().project(store.state, Size(1000.0, 700.0))
    assert projection.cards == {}
    assert projection.viewport.width == pytest.approx(1000.0 * 160 / 6000)


def test_custom_minimap_size() -> None:
    config = CanvasConfig(minimap_w=600.0, minimap_h=400.0, chrome_height=0.0)
    store = LayoutStore(config=config)
    rect = MinimapProjector(config=config).viewport_rect(store.state, Size(600.0, 400.0))
    np.testing.assert_allclose(rect, [0.0, 0.0, 60.0, 40.0])
