"""Pointer/wheel interaction state machine for the canvas.

Purpose
-------
Turns raw input sequences into :class:`LayoutStore` mutations. The machine
has four modes and only ever leaves ``idle`` for one gesture at a time::

    idle -> panning  -> idle
    idle -> dragging -> idle
    idle -> resizing -> idle

Concepts
--------
- ``HitTarget`` describes what the pointer landed on (the host performs hit
  testing; the engine only needs the kind and the card id).
- ``GestureContext`` holds every gesture-local value (start coordinates,
  target card, drag offset). It is owned by one machine instance and reset
  on every gesture end or cancel, so a stale gesture can never resume.
- ``ScreenAnchor`` supplies the world element rectangle; when it is missing
  the affected operation is skipped without raising.

Durability
----------
Only drag and resize completion call :meth:`LayoutStore.persist`. Pan and
zoom change the view without requesting a save.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Literal, Optional

from .canvas_geometry import Point, screen_to_world, world_to_screen, zoom_about_point
from .card_registry import CardId
from .layout_state import InteractionMode
from .layout_store import LayoutStore
from .screen_anchor import ScreenAnchor

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

TargetKind = Literal["background", "card_header", "card_body", "resize_handle"]


@dataclass(frozen=True)
class ScrollMetrics:
    """Scroll position of one element between the wheel target and the viewport."""

    scroll_top: float
    client_height: float
    scroll_height: float

    @property
    def is_scrollable(self) -> bool:
        return self.scroll_height > self.client_height + 1

    def at_boundary(self, delta_y: float) -> bool:
        """Whether scrolling by ``delta_y`` would push past the content edge."""
        at_top = self.scroll_top <= 0 and delta_y < 0
        at_bottom = self.scroll_top + self.client_height >= self.scroll_height - 1 and delta_y > 0
        return at_top or at_bottom


@dataclass(frozen=True)
class HitTarget:
    """What an input event landed on.

    Parameters
    ----------
    kind : TargetKind
        ``background`` for empty canvas, otherwise a card part.
    card_id : CardId or None
        Card owning the part; ``None`` for the background.
    scroll_chain : tuple[ScrollMetrics, ...]
        For ``card_body`` targets, the scroll state of each element from the
        target outward to (excluding) the viewport.
    """

    kind: TargetKind = "background"
    card_id: Optional[CardId] = None
    scroll_chain: tuple[ScrollMetrics, ...] = ()


BACKGROUND = HitTarget()


@dataclass(frozen=True)
class PointerEvent:
    client_x: float
    client_y: float
    pointer_id: int = 1
    target: HitTarget = BACKGROUND


@dataclass(frozen=True)
class WheelEvent:
    client_x: float
    client_y: float
    delta_y: float
    target: HitTarget = BACKGROUND


@dataclass
class GestureContext:
    """Gesture-local variables for the active gesture."""

    pointer_id: Optional[int] = None
    card_id: Optional[CardId] = None
    start_screen_x: float = 0.0
    start_screen_y: float = 0.0
    start_pan_x: float = 0.0
    start_pan_y: float = 0.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    start_w: float = 0.0
    start_h: float = 0.0

    def reset(self) -> None:
        """Restore every field to its default."""
        fresh = GestureContext()
        for f in fields(self):
            setattr(self, f.name, getattr(fresh, f.name))


class InteractionStateMachine:
    """Drive pan, zoom, drag and resize gestures against a ``LayoutStore``.

    Parameters
    ----------
    store : LayoutStore
        Layout receiving the mutations.
    anchor : ScreenAnchor
        Screen geometry and pointer capture provider.
    """

    def __init__(self, store: LayoutStore, anchor: ScreenAnchor) -> None:
        self._store = store
        self.anchor = anchor
        self.context = GestureContext()

    @property
    def mode(self) -> InteractionMode:
        return self._store.get_view().interaction_mode

    # -----------------------------
    # Event entry points
    # -----------------------------

    def pointer_down(self, event: PointerEvent) -> bool:
        """Start a gesture. Returns ``True`` when one was started."""
        if self.mode != "idle":
            logger.debug("Ignoring pointer down during %s", self.mode)
            return False
        target = event.target
        if target.kind == "background":
            return self._start_pan(event)
        if target.kind == "card_header":
            return self._start_drag(event)
        if target.kind == "resize_handle":
            return self._start_resize(event)
        return False

    def pointer_move(self, event: PointerEvent) -> None:
        mode = self.mode
        if mode == "panning":
            self._move_pan(event)
        elif mode == "dragging":
            self._move_drag(event)
        elif mode == "resizing":
            self._move_resize(event)

    def pointer_up(self, event: Optional[PointerEvent] = None) -> None:
        """Finish the active gesture; drag and resize request persistence."""
        mode = self.mode
        if mode == "idle":
            self.context.reset()
            return
        self._store.set_interaction_mode("idle")
        if self.context.pointer_id is not None:
            self.anchor.release_pointer(self.context.pointer_id)
        self.context.reset()
        logger.debug("Gesture %s ended", mode)
        if mode in ("dragging", "resizing"):
            self._store.persist()

    def pointer_cancel(self, event: Optional[PointerEvent] = None) -> None:
        """Cancel is handled exactly like a normal gesture end."""
        self.pointer_up(event)

    def wheel(self, event: WheelEvent) -> bool:
        """Apply one zoom tick around the cursor.

        Returns
        -------
        bool
            ``False`` when the event belongs to native scrolling of a card
            body (or a gesture is active) and the host should let it through;
            ``True`` when the canvas claimed it, even if nothing changed
            because the scale is at a bound or the anchor is missing.
        """
        if event.target.kind == "card_body" and self._body_scrolls(event):
            return False
        if self.mode != "idle":
            return False

        anchor_rect = self.anchor.get_anchor_rect()
        if anchor_rect is None:
            logger.debug("Zoom skipped: world anchor not mounted")
            return True

        result = zoom_about_point(
            self._store.get_view(),
            Point(event.client_x, event.client_y),
            anchor_rect,
            event.delta_y,
            config=self._store.config,
        )
        if result is None:
            return True
        self._store.set_view(scale=result.scale, pan_x=result.pan_x, pan_y=result.pan_y)
        return True

    @staticmethod
    def _body_scrolls(event: WheelEvent) -> bool:
        for metrics in event.target.scroll_chain:
            if metrics.is_scrollable and not metrics.at_boundary(event.delta_y):
                return True
        return False

    # -----------------------------
    # Pan
    # -----------------------------

    def _start_pan(self, event: PointerEvent) -> bool:
        view = self._store.get_view()
        ctx = self.context
        ctx.pointer_id = event.pointer_id
        ctx.start_screen_x = event.client_x
        ctx.start_screen_y = event.client_y
        ctx.start_pan_x = view.pan_x
        ctx.start_pan_y = view.pan_y
        self._store.set_interaction_mode("panning")
        self.anchor.capture_pointer(event.pointer_id)
        logger.debug("Pan started at (%s, %s)", event.client_x, event.client_y)
        return True

    def _move_pan(self, event: PointerEvent) -> None:
        ctx = self.context
        scale = self._store.get_view().scale
        self._store.set_view(
            pan_x=ctx.start_pan_x + (event.client_x - ctx.start_screen_x) / scale,
            pan_y=ctx.start_pan_y + (event.client_y - ctx.start_screen_y) / scale,
        )

    # -----------------------------
    # Drag
    # -----------------------------

    def _start_drag(self, event: PointerEvent) -> bool:
        card_id = event.target.card_id
        if card_id is None or not self._store.has_card(card_id):
            return False
        card = self._store.get_card(card_id)
        if not card.open:
            return False

        self._store.focus(card_id)
        view = self._store.get_view()
        anchor_rect = self.anchor.get_anchor_rect()
        if anchor_rect is not None:
            card_left = anchor_rect.left + card.x * view.scale
            card_top = anchor_rect.top + card.y * view.scale
        else:
            card_left, card_top = world_to_screen(Point(card.x, card.y), view)

        ctx = self.context
        ctx.pointer_id = event.pointer_id
        ctx.card_id = card_id
        ctx.offset_x = event.client_x - card_left
        ctx.offset_y = event.client_y - card_top
        self._store.set_interaction_mode("dragging")
        self.anchor.capture_pointer(event.pointer_id)
        logger.debug("Drag started for %s", card_id)
        return True

    def _move_drag(self, event: PointerEvent) -> None:
        ctx = self.context
        card_id = ctx.card_id
        if card_id is None or not self._store.has_card(card_id):
            return
        if not self._store.get_card(card_id).open:
            return
        anchor_rect = self.anchor.get_anchor_rect()
        if anchor_rect is None:
            return
        view = self._store.get_view()
        cursor = screen_to_world(Point(event.client_x, event.client_y), view, anchor_rect)
        self._store.set_card(
            card_id,
            x=cursor.x - ctx.offset_x / view.scale,
            y=cursor.y - ctx.offset_y / view.scale,
        )

    # -----------------------------
    # Resize
    # -----------------------------

    def _start_resize(self, event: PointerEvent) -> bool:
        card_id = event.target.card_id
        if card_id is None or not self._store.has_card(card_id):
            return False
        card = self._store.get_card(card_id)
        if not card.open:
            return False

        ctx = self.context
        ctx.pointer_id = event.pointer_id
        ctx.card_id = card_id
        ctx.start_w = card.w
        ctx.start_h = card.h
        ctx.start_screen_x = event.client_x
        ctx.start_screen_y = event.client_y
        self._store.set_interaction_mode("resizing")
        self.anchor.capture_pointer(event.pointer_id)
        logger.debug("Resize started for %s", card_id)
        return True

    def _move_resize(self, event: PointerEvent) -> None:
        ctx = self.context
        card_id = ctx.card_id
        if card_id is None or not self._store.has_card(card_id):
            return
        if not self._store.get_card(card_id).open:
            return
        scale = self._store.get_view().scale
        config = self._store.config
        self._store.set_card(
            card_id,
            w=max(config.min_card_w, ctx.start_w + (event.client_x - ctx.start_screen_x) / scale),
            h=max(config.min_card_h, ctx.start_h + (event.client_y - ctx.start_screen_y) / scale),
        )
