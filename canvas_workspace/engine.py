"""Top-level canvas engine wiring store, interactions, minimap and workspaces.

``CanvasEngine`` is the object a host application holds. It restores state
from a :class:`PersistenceBridge`, routes input events to the interaction
state machine, and exposes read-only accessors for rendering.

Examples
--------
>>> from canvas_workspace import CanvasEngine, InMemoryBridge
>>> opened = []
>>> engine = CanvasEngine(InMemoryBridge(), on_card_open=opened.append)
>>> engine.toggle("log")
True
>>> opened
['log']
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .canvas_config import DEFAULT_CONFIG, CanvasConfig
from .canvas_geometry import Size
from .card_registry import CardId
from .interaction import InteractionStateMachine, PointerEvent, WheelEvent
from .keyboard import KeyboardShortcuts
from .layout_state import CardState, LayoutState, ViewState, parse_layout_state
from .layout_store import LayoutStore
from .minimap import MinimapProjection, MinimapProjector
from .persistence import InMemoryBridge, PersistenceBridge, load_workspace_list
from .screen_anchor import ScreenAnchor, ViewportAnchor
from .workspace_manager import WorkspaceManager
from .WorkspaceSnapshot import Workspace

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class CanvasEngine:
    """Spatial workspace engine facade.

    Parameters
    ----------
    bridge : PersistenceBridge, optional
        Storage collaborator. Defaults to an :class:`InMemoryBridge`.
    anchor : ScreenAnchor, optional
        Screen geometry provider. Defaults to a :class:`ViewportAnchor`
        tracking the live view.
    config : CanvasConfig, optional
        Numeric bounds and defaults.
    on_card_open : callable, optional
        Content-load hook, called once per closed-to-open transition.
    """

    def __init__(
        self,
        bridge: Optional[PersistenceBridge] = None,
        anchor: Optional[ScreenAnchor] = None,
        *,
        config: Optional[CanvasConfig] = None,
        on_card_open: Optional[Callable[[CardId], None]] = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.bridge: PersistenceBridge = bridge if bridge is not None else InMemoryBridge()

        self.store = LayoutStore(
            self._load_layout(),
            config=self.config,
            on_persist=self.bridge.save_layout_state,
            on_card_open=on_card_open,
        )
        self.anchor = anchor if anchor is not None else ViewportAnchor(self.store.get_view, config=self.config)
        self.interaction = InteractionStateMachine(self.store, self.anchor)
        self.workspaces = WorkspaceManager(
            self._load_workspaces(),
            config=self.config,
            on_change=self.bridge.save_workspaces,
        )
        self.keyboard = KeyboardShortcuts(self.store)
        self._minimap = MinimapProjector(config=self.config)

    def _load_layout(self) -> LayoutState:
        try:
            raw = self.bridge.load_layout_state()
        except Exception:
            logger.exception("Loading layout failed; using defaults")
            raw = None
        return parse_layout_state(raw, config=self.config)

    def _load_workspaces(self) -> list[Workspace]:
        try:
            raw = self.bridge.load_workspaces()
        except Exception:
            logger.exception("Loading workspaces failed; starting empty")
            return []
        return load_workspace_list(list(raw) if raw is not None else None, config=self.config)

    # -----------------------------
    # Read-only render surface
    # -----------------------------

    @property
    def state(self) -> LayoutState:
        return self.store.state

    @property
    def view(self) -> ViewState:
        return self.store.get_view()

    def card(self, card_id: CardId) -> CardState:
        return self.store.get_card(card_id)

    def ordered_open_cards(self) -> list[tuple[CardId, CardState]]:
        return self.store.ordered_open_cards()

    def minimap(self, viewport_size: Optional[Size] = None) -> MinimapProjection:
        """Project the layout; defaults to the anchor's viewport size."""
        size = viewport_size if viewport_size is not None else self.anchor.get_viewport_size()
        return self._minimap.project(self.store.state, size)

    # -----------------------------
    # Mutation entry points
    # -----------------------------

    def toggle(self, card_id: CardId) -> bool:
        return self.store.toggle(card_id)

    def open(self, card_id: CardId) -> bool:
        return self.store.open(card_id)

    def focus(self, card_id: CardId) -> bool:
        return self.store.focus(card_id)

    def set_view(self, **changes: Any) -> ViewState:
        return self.store.set_view(**changes)

    # -----------------------------
    # Input
    # -----------------------------

    def pointer_down(self, event: PointerEvent) -> bool:
        return self.interaction.pointer_down(event)

    def pointer_move(self, event: PointerEvent) -> None:
        self.interaction.pointer_move(event)

    def pointer_up(self, event: Optional[PointerEvent] = None) -> None:
        self.interaction.pointer_up(event)

    def pointer_cancel(self, event: Optional[PointerEvent] = None) -> None:
        self.interaction.pointer_cancel(event)

    def wheel(self, event: WheelEvent) -> bool:
        return self.interaction.wheel(event)

    def key(self, key: str, **modifiers: bool) -> bool:
        return self.keyboard.handle(key, **modifiers)

    # -----------------------------
    # Workspaces
    # -----------------------------

    def can_save_workspace(self) -> bool:
        return len(self.workspaces) < self.config.max_workspaces

    def save_workspace(self, label: Any) -> Optional[Workspace]:
        """Save the live layout as a workspace unless the list is full."""
        if not self.can_save_workspace():
            logger.info("Workspace limit of %d reached", self.config.max_workspaces)
            return None
        return self.workspaces.save(self.store.state, label)

    def begin_workspace_naming(self) -> bool:
        """Open the label draft for a new workspace unless the list is full."""
        if not self.can_save_workspace():
            return False
        self.workspaces.begin_naming()
        return True

    def commit_workspace_naming(self) -> Optional[Workspace]:
        return self.workspaces.commit_naming(self.store.state)

    def apply_workspace(self, workspace_id: str) -> list[str]:
        """Apply a saved workspace by id; raises ``KeyError`` if unknown."""
        workspace = self.workspaces.get(workspace_id)
        if workspace is None:
            raise KeyError(f"Unknown workspace: {workspace_id}")
        return self.workspaces.apply(workspace, self.store)

    def delete_workspace(self, workspace_id: str) -> bool:
        return self.workspaces.delete(workspace_id)
