"""Minimap projection of the canvas.

The projection is derived on every call from the layout and the viewport
size; nothing is cached. World coordinates are scaled by
``minimap_size / world_size`` per axis, so the world rectangle always fits
the minimap even though cards may lie outside it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import numpy as np

from .canvas_config import DEFAULT_CONFIG, CanvasConfig
from .canvas_geometry import Rect, Size
from .card_registry import ALL_CARD_IDS, CardId
from .layout_state import LayoutState


@dataclass(frozen=True)
class MinimapProjection:
    """Minimap-space rectangles for the viewport and each open card."""

    viewport: Rect
    cards: Dict[CardId, Rect]


class MinimapProjector:
    """Project layout state into minimap pixels.

    Parameters
    ----------
    config : CanvasConfig
        Supplies world size, minimap size and chrome height.
    """

    def __init__(self, *, config: CanvasConfig = DEFAULT_CONFIG) -> None:
        self._config = config
        self._factors = np.array(
            [
                config.minimap_w / config.world_w,
                config.minimap_h / config.world_h,
            ],
            dtype=float,
        )

    @property
    def factors(self) -> tuple[float, float]:
        """Return ``(sx, sy)``."""
        return float(self._factors[0]), float(self._factors[1])

    def viewport_rect(self, state: LayoutState, viewport_size: Size) -> Rect:
        """Visible world region in minimap space."""
        view = state.view
        sx, sy = self.factors
        visible_w = viewport_size[0] / view.scale
        visible_h = (viewport_size[1] - self._config.chrome_height) / view.scale
        return Rect(-view.pan_x * sx, -view.pan_y * sy, visible_w * sx, visible_h * sy)

    def card_rects(self, state: LayoutState) -> Dict[CardId, Rect]:
        """Rectangles of open cards in catalog order; closed cards are omitted."""
        ids = [card_id for card_id in ALL_CARD_IDS if card_id in state.cards and state.cards[card_id].open]
        if not ids:
            return {}
        geometry = np.array(
            [[state.cards[i].x, state.cards[i].y, state.cards[i].w, state.cards[i].h] for i in ids],
            dtype=float,
        )
        projected = geometry * np.tile(self._factors, 2)
        return {card_id: Rect(*map(float, row)) for card_id, row in zip(ids, projected)}

    def project(self, state: LayoutState, viewport_size: Size) -> MinimapProjection:
        return MinimapProjection(
            viewport=self.viewport_rect(state, viewport_size),
            cards=self.card_rects(state),
        )
