"""Top-level public API for the ``canvas_workspace`` package.

The package models a pannable, zoomable canvas of cards: their geometry,
visibility and stacking order, the gestures that move them, a minimap
projection, and saved workspaces. Rendering and storage are left to the host,
which plugs in through :class:`PersistenceBridge`, :class:`ScreenAnchor` and
the ``on_card_open`` hook.

>>> from canvas_workspace import CanvasEngine  # doctest: +SKIP
>>> engine = CanvasEngine()  # doctest: +SKIP
"""

from .canvas_config import DEFAULT_CONFIG, CanvasConfig
from .canvas_geometry import (
    Point,
    Rect,
    Size,
    clamp_scale,
    clamp_size,
    screen_to_world,
    world_to_screen,
    zoom_about_point,
)
from .card_registry import (
    ALL_CARD_IDS,
    CARD_DEFINITIONS,
    DOCK_GROUPS,
    CardDefinition,
    CardId,
    get_definition,
)
from .engine import CanvasEngine
from .interaction import (
    GestureContext,
    HitTarget,
    InteractionStateMachine,
    PointerEvent,
    ScrollMetrics,
    WheelEvent,
)
from .keyboard import KeyboardShortcuts
from .layout_state import (
    CardState,
    LayoutState,
    ViewState,
    default_layout_state,
    layout_to_dict,
    parse_layout_state,
)
from .layout_store import LayoutStore
from .minimap import MinimapProjection, MinimapProjector
from .persistence import InMemoryBridge, JsonSettingsBridge, PersistenceBridge
from .screen_anchor import ScreenAnchor, StaticScreenAnchor, ViewportAnchor
from .workspace_manager import WorkspaceManager
from .WorkspaceSnapshot import Workspace, normalize_label

__all__ = [
    "ALL_CARD_IDS",
    "CARD_DEFINITIONS",
    "DEFAULT_CONFIG",
    "DOCK_GROUPS",
    "CanvasConfig",
    "CanvasEngine",
    "CardDefinition",
    "CardId",
    "CardState",
    "GestureContext",
    "HitTarget",
    "InMemoryBridge",
    "InteractionStateMachine",
    "JsonSettingsBridge",
    "KeyboardShortcuts",
    "LayoutState",
    "LayoutStore",
    "MinimapProjection",
    "MinimapProjector",
    "PersistenceBridge",
    "Point",
    "PointerEvent",
    "Rect",
    "ScreenAnchor",
    "ScrollMetrics",
    "Size",
    "StaticScreenAnchor",
    "ViewState",
    "ViewportAnchor",
    "WheelEvent",
    "Workspace",
    "WorkspaceManager",
    "clamp_scale",
    "clamp_size",
    "default_layout_state",
    "get_definition",
    "layout_to_dict",
    "normalize_label",
    "parse_layout_state",
    "screen_to_world",
    "world_to_screen",
    "zoom_about_point",
]
