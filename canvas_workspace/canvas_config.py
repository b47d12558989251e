"""Canvas constants and the ``CanvasConfig`` options record.

Every tunable number used by the engine lives here. Components accept a
``config=`` keyword and fall back to :data:`DEFAULT_CONFIG`, so a host
application can, for example, start with the cards centred by passing a
non-zero initial pan without touching module globals.
"""

from __future__ import annotations

from dataclasses import dataclass

WORLD_W = 6000.0
WORLD_H = 4000.0
MIN_SCALE = 0.2
MAX_SCALE = 3.0
ZOOM_IN_FACTOR = 1.08
ZOOM_OUT_FACTOR = 0.92
MIN_CARD_W = 200.0
MIN_CARD_H = 120.0

MINIMAP_W = 160.0
MINIMAP_H = 100.0
# 34 px top bar + 24 px dock bar.
CHROME_HEIGHT = 58.0

WORKSPACE_LABEL_MAX = 6
WORKSPACE_LABEL_PLACEHOLDER = "WS"
MAX_WORKSPACES = 6

INITIAL_NEXT_Z = 100


@dataclass(frozen=True)
class CanvasConfig:
    """Immutable bundle of canvas tuning constants.

    Parameters
    ----------
    world_w, world_h : float
        Logical world size. Only used for the minimap ratio; card
        coordinates are not bounded by it.
    min_scale, max_scale : float
        Inclusive zoom bounds.
    zoom_in_factor, zoom_out_factor : float
        Multiplicative scale change per wheel tick.
    min_card_w, min_card_h : float
        Size floor applied on every card mutation.
    minimap_w, minimap_h : float
        Minimap pixel size.
    chrome_height : float
        Fixed chrome subtracted from the viewport height for the minimap
        viewport rectangle.
    workspace_label_max : int
        Maximum workspace label length after normalization.
    workspace_label_placeholder : str
        Label used when the normalized label is empty.
    max_workspaces : int
        Usability cap enforced when saving through the engine.
    initial_pan_x, initial_pan_y, initial_scale : float
        View used when nothing valid was restored.
    initial_next_z : int
        Lowest value of the focus counter.
    """

    world_w: float = WORLD_W
    world_h: float = WORLD_H
    min_scale: float = MIN_SCALE
    max_scale: float = MAX_SCALE
    zoom_in_factor: float = ZOOM_IN_FACTOR
    zoom_out_factor: float = ZOOM_OUT_FACTOR
    min_card_w: float = MIN_CARD_W
    min_card_h: float = MIN_CARD_H
    minimap_w: float = MINIMAP_W
    minimap_h: float = MINIMAP_H
    chrome_height: float = CHROME_HEIGHT
    workspace_label_max: int = WORKSPACE_LABEL_MAX
    workspace_label_placeholder: str = WORKSPACE_LABEL_PLACEHOLDER
    max_workspaces: int = MAX_WORKSPACES
    initial_pan_x: float = 0.0
    initial_pan_y: float = 0.0
    initial_scale: float = 1.0
    initial_next_z: int = INITIAL_NEXT_Z

    def __post_init__(self) -> None:
        if not 0 < self.min_scale <= self.max_scale:
            raise ValueError("min_scale must be > 0 and <= max_scale")
        if not self.min_scale <= self.initial_scale <= self.max_scale:
            raise ValueError("initial_scale must lie within [min_scale, max_scale]")
        if self.world_w <= 0 or self.world_h <= 0:
            raise ValueError("world size must be positive")
        if self.workspace_label_max <= 0:
            raise ValueError("workspace_label_max must be > 0")


DEFAULT_CONFIG = CanvasConfig()
