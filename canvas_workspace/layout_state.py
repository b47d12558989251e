"""State records for the canvas layout and their JSON-compatible forms.

Purpose
-------
This module defines the value types shared by every other component:

- ``CardState``: geometry, visibility and stacking order of one card,
- ``ViewState``: pan, zoom, interaction mode, focus and the z counter,
- ``LayoutState``: the pair of both, which is the unit of persistence.

Records are frozen; mutations go through :class:`LayoutStore`, which replaces
whole records and re-applies the invariants.

Serialization
-------------
``*_to_dict`` produce camelCase dictionaries made of numbers, strings and
booleans only. ``parse_*`` accept anything a storage collaborator may hand
back and degrade invalid parts to catalog defaults instead of raising.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Literal, Optional

from .canvas_config import DEFAULT_CONFIG, CanvasConfig
from .card_registry import (
    ALL_CARD_IDS,
    CARD_DEFINITIONS,
    DEFAULT_BASE_Z,
    INITIAL_OPEN_CARDS,
    CardId,
    is_card_id,
)

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

InteractionMode = Literal["idle", "panning", "dragging", "resizing"]
INTERACTION_MODES: tuple[str, ...] = ("idle", "panning", "dragging", "resizing")


@dataclass(frozen=True)
class CardState:
    """Mutable-by-replacement state of one card.

    Parameters
    ----------
    x, y : float
        World-space top-left. Unbounded.
    w, h : float
        World-space size, never below the configured floor.
    open : bool
        Whether the card is shown.
    z : int
        Stacking order; higher paints on top.
    """

    x: float
    y: float
    w: float
    h: float
    open: bool
    z: int


@dataclass(frozen=True)
class ViewState:
    """Global pan/zoom and interaction bookkeeping."""

    pan_x: float = 0.0
    pan_y: float = 0.0
    scale: float = 1.0
    interaction_mode: InteractionMode = "idle"
    focused_card_id: Optional[CardId] = None
    next_z: int = DEFAULT_CONFIG.initial_next_z


@dataclass
class LayoutState:
    """Cards plus view; what gets persisted and snapshotted."""

    cards: Dict[CardId, CardState] = field(default_factory=dict)
    view: ViewState = field(default_factory=ViewState)

    def copy(self) -> "LayoutState":
        """Return an independent copy (card records are immutable)."""
        return LayoutState(cards=dict(self.cards), view=self.view)


def default_card_states() -> Dict[CardId, CardState]:
    """Catalog defaults: only the initial-open subset is shown."""
    states: Dict[CardId, CardState] = {}
    for z, definition in enumerate(CARD_DEFINITIONS, start=DEFAULT_BASE_Z):
        x, y = definition.default_position
        w, h = definition.default_size
        states[definition.id] = CardState(
            x=x, y=y, w=w, h=h, open=definition.id in INITIAL_OPEN_CARDS, z=z
        )
    return states


def default_view_state(*, config: CanvasConfig = DEFAULT_CONFIG) -> ViewState:
    return ViewState(
        pan_x=config.initial_pan_x,
        pan_y=config.initial_pan_y,
        scale=config.initial_scale,
        next_z=config.initial_next_z,
    )


def default_layout_state(*, config: CanvasConfig = DEFAULT_CONFIG) -> LayoutState:
    return LayoutState(cards=default_card_states(), view=default_view_state(config=config))


# -----------------------------
# Serialization
# -----------------------------


def card_to_dict(card: CardState) -> Dict[str, Any]:
    return {"x": card.x, "y": card.y, "w": card.w, "h": card.h, "open": card.open, "z": card.z}


def cards_to_dict(cards: Mapping[str, CardState]) -> Dict[str, Dict[str, Any]]:
    return {card_id: card_to_dict(card) for card_id, card in cards.items()}


def layout_to_dict(state: LayoutState) -> Dict[str, Any]:
    """Serialize ``state``; the interaction mode is transient and omitted."""
    view = state.view
    return {
        "cards": cards_to_dict(state.cards),
        "view": {
            "panX": view.pan_x,
            "panY": view.pan_y,
            "scale": view.scale,
            "focusedCardId": view.focused_card_id,
            "nextZ": view.next_z,
        },
    }


def finite_number(value: Any) -> Optional[float]:
    """Return ``value`` as float when it is a real finite number, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    if not math.isfinite(number):
        return None
    return number


def _integral(value: Any) -> Optional[int]:
    number = finite_number(value)
    if number is None or number != int(number):
        return None
    return int(number)


def parse_card_state(raw: Any, *, config: CanvasConfig = DEFAULT_CONFIG) -> Optional[CardState]:
    """Validate one stored card record.

    Returns
    -------
    CardState or None
        ``None`` when any field is missing, of the wrong type, non-finite or
        below the size floor. Callers substitute the catalog default.
    """
    if isinstance(raw, CardState):
        raw = card_to_dict(raw)
    if not isinstance(raw, Mapping):
        return None

    x = finite_number(raw.get("x"))
    y = finite_number(raw.get("y"))
    w = finite_number(raw.get("w"))
    h = finite_number(raw.get("h"))
    z = _integral(raw.get("z"))
    is_open = raw.get("open")
    if x is None or y is None or w is None or h is None or z is None:
        return None
    if not isinstance(is_open, bool):
        return None
    if w < config.min_card_w or h < config.min_card_h:
        return None
    return CardState(x=x, y=y, w=w, h=h, open=is_open, z=z)


def parse_cards(
    raw: Any, *, config: CanvasConfig = DEFAULT_CONFIG, source: str = "layout"
) -> Dict[CardId, CardState]:
    """Parse a full card map, filling every catalog id.

    Unknown ids are dropped; absent or invalid ids take the catalog default.
    """
    defaults = default_card_states()
    if not isinstance(raw, Mapping):
        if raw is not None:
            logger.warning("Ignoring %s cards of type %s", source, type(raw).__name__)
        return defaults

    extra = [key for key in raw if not is_card_id(key)]
    if extra:
        logger.warning("Ignoring unknown card ids in %s: %s", source, ", ".join(map(str, extra)))

    cards: Dict[CardId, CardState] = {}
    for card_id in ALL_CARD_IDS:
        stored = raw.get(card_id)
        parsed = parse_card_state(stored, config=config) if stored is not None else None
        if parsed is None:
            if stored is not None:
                logger.warning("Invalid stored state for card %r in %s; using defaults", card_id, source)
            parsed = defaults[card_id]
        cards[card_id] = parsed
    return cards


def parse_layout_state(raw: Any, *, config: CanvasConfig = DEFAULT_CONFIG) -> LayoutState:
    """Build a consistent ``LayoutState`` from whatever storage returned.

    ``raw`` may be ``None``, a ``LayoutState``, a mapping in the
    :func:`layout_to_dict` shape, or a bare card map (the older settings
    format, which only stored cards). Nothing here raises.
    """
    if raw is None:
        return default_layout_state(config=config)
    if isinstance(raw, LayoutState):
        raw = layout_to_dict(raw)
    if not isinstance(raw, Mapping):
        logger.warning("Ignoring stored layout of type %s", type(raw).__name__)
        return default_layout_state(config=config)

    if "cards" in raw or "view" in raw:
        cards_raw = raw.get("cards")
        view_raw = raw.get("view")
    else:
        cards_raw, view_raw = raw, None

    cards = parse_cards(cards_raw, config=config)
    view = _parse_view(view_raw, cards, config=config)
    return LayoutState(cards=cards, view=view)


def _parse_view(raw: Any, cards: Mapping[str, CardState], *, config: CanvasConfig) -> ViewState:
    view = default_view_state(config=config)
    if raw is not None and not isinstance(raw, Mapping):
        logger.warning("Ignoring stored view of type %s", type(raw).__name__)
        raw = None
    raw = raw or {}

    pan_x = finite_number(raw.get("panX"))
    pan_y = finite_number(raw.get("panY"))
    scale = finite_number(raw.get("scale"))
    if scale is not None and not config.min_scale <= scale <= config.max_scale:
        logger.warning("Stored scale %r out of range; using default", scale)
        scale = None

    focused = raw.get("focusedCardId")
    if focused is not None and (not is_card_id(focused) or not cards[focused].open):
        focused = None

    stored_next_z = _integral(raw.get("nextZ"))
    highest_z = max((card.z for card in cards.values()), default=config.initial_next_z - 1)
    next_z = max(config.initial_next_z, highest_z + 1, stored_next_z or 0)

    return replace(
        view,
        pan_x=view.pan_x if pan_x is None else pan_x,
        pan_y=view.pan_y if pan_y is None else pan_y,
        scale=view.scale if scale is None else scale,
        focused_card_id=focused,
        next_z=next_z,
    )
