"""Live layout model and the only place its invariants are enforced.

The store owns a single :class:`LayoutState`. Every mutation entry point
re-applies the rules the rest of the engine relies on:

- card sizes never drop below the configured floor,
- the scale stays within ``[min_scale, max_scale]``,
- each focus hands out a strictly larger ``z`` than any before it.

Side effects toward the host application go through two callbacks:
``on_persist(LayoutState)`` and ``on_card_open(card_id)``. Both run behind a
logged callback boundary so a failing collaborator cannot leave the layout
half-updated.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any, Callable, Optional

from .canvas_config import DEFAULT_CONFIG, CanvasConfig
from .canvas_geometry import clamp_scale, clamp_size
from .card_registry import ALL_CARD_IDS, CardId, catalog_index, get_definition
from .layout_state import (
    INTERACTION_MODES,
    CardState,
    InteractionMode,
    LayoutState,
    ViewState,
    default_layout_state,
    parse_layout_state,
)

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

PersistCallback = Callable[[LayoutState], None]
CardOpenCallback = Callable[[CardId], None]

_GEOMETRY_FIELDS = frozenset({"x", "y", "w", "h"})
_VIEW_FIELDS = frozenset({"pan_x", "pan_y", "scale"})


class LayoutStore:
    """Own the live card/view state and its mutation rules.

    Parameters
    ----------
    state : LayoutState or Mapping or None
        Initial layout. Anything not already a ``LayoutState`` is parsed with
        :func:`parse_layout_state`; ``None`` means catalog defaults.
    config : CanvasConfig
        Numeric bounds.
    on_persist : callable, optional
        Receives an independent copy of the layout whenever durability is
        requested.
    on_card_open : callable, optional
        Receives the card id on every closed-to-open transition.
    """

    def __init__(
        self,
        state: LayoutState | Mapping[str, Any] | None = None,
        *,
        config: CanvasConfig = DEFAULT_CONFIG,
        on_persist: Optional[PersistCallback] = None,
        on_card_open: Optional[CardOpenCallback] = None,
    ) -> None:
        self._config = config
        if state is None:
            self._state = default_layout_state(config=config)
        else:
            self._state = parse_layout_state(state, config=config)
        self.on_persist = on_persist
        self.on_card_open = on_card_open

    @property
    def config(self) -> CanvasConfig:
        return self._config

    @property
    def state(self) -> LayoutState:
        """Return an independent copy of the live layout."""
        return self._state.copy()

    # -----------------------------
    # Cards
    # -----------------------------

    def has_card(self, card_id: Any) -> bool:
        return card_id in self._state.cards

    def get_card(self, card_id: CardId) -> CardState:
        """Return the state of ``card_id`` or raise ``KeyError``."""
        if card_id not in self._state.cards:
            get_definition(card_id)
            raise KeyError(f"Card not initialized: {card_id}")
        return self._state.cards[card_id]

    def set_card(self, card_id: CardId, **changes: Any) -> CardState:
        """Merge geometry ``changes`` into a card, then clamp its size.

        Only ``x``, ``y``, ``w`` and ``h`` are accepted. Visibility and
        stacking go through :meth:`toggle`, :meth:`open` and :meth:`focus`.

        Raises
        ------
        KeyError
            For ids outside the catalog.
        ValueError
            For any field other than ``x``, ``y``, ``w`` or ``h``.
        """
        current = self.get_card(card_id)
        unknown = set(changes) - _GEOMETRY_FIELDS
        if unknown:
            raise ValueError(f"Card fields not settable here: {', '.join(sorted(unknown))}")
        merged = replace(current, **changes)
        w, h = clamp_size(merged.w, merged.h, config=self._config)
        if (w, h) != (merged.w, merged.h):
            merged = replace(merged, w=w, h=h)
        self._state.cards[card_id] = merged
        return merged

    def replace_cards(self, cards: Mapping[CardId, CardState]) -> list[CardId]:
        """Replace whole card records; return ids that went closed to open.

        Ids are processed in catalog order, unknown ids are skipped, sizes are
        clamped, ``next_z`` is raised above every incoming ``z`` and focus is
        dropped if the focused card ends up closed. No callbacks fire here;
        the caller decides when to announce openings.
        """
        opened: list[CardId] = []
        for card_id in ALL_CARD_IDS:
            incoming = cards.get(card_id)
            if incoming is None:
                continue
            was_open = self._state.cards[card_id].open if card_id in self._state.cards else False
            w, h = clamp_size(incoming.w, incoming.h, config=self._config)
            self._state.cards[card_id] = replace(incoming, w=w, h=h)
            if incoming.open and not was_open:
                opened.append(card_id)

        highest = max(card.z for card in self._state.cards.values())
        if highest >= self._state.view.next_z:
            self._state.view = replace(self._state.view, next_z=highest + 1)
        focused = self._state.view.focused_card_id
        if focused is not None and not self._state.cards[focused].open:
            self._state.view = replace(self._state.view, focused_card_id=None)
        return opened

    def ordered_open_cards(self) -> list[tuple[CardId, CardState]]:
        """Open cards in paint order: ascending ``z``, catalog order on ties."""
        visible = [(card_id, card) for card_id, card in self._state.cards.items() if card.open]
        visible.sort(key=lambda item: (item[1].z, catalog_index(item[0])))
        return visible

    # -----------------------------
    # View
    # -----------------------------

    def get_view(self) -> ViewState:
        return self._state.view

    def set_view(self, **changes: Any) -> ViewState:
        """Merge ``pan_x``/``pan_y``/``scale`` into the view, clamping scale."""
        unknown = set(changes) - _VIEW_FIELDS
        if unknown:
            raise ValueError(f"Unknown view fields: {', '.join(sorted(unknown))}")
        view = replace(self._state.view, **changes)
        scale = clamp_scale(view.scale, config=self._config)
        if scale != view.scale:
            view = replace(view, scale=scale)
        self._state.view = view
        return view

    def set_interaction_mode(self, mode: InteractionMode) -> None:
        """Record the current gesture mode. Reserved for the state machine."""
        if mode not in INTERACTION_MODES:
            raise ValueError(f"Unknown interaction mode: {mode!r}")
        if mode != self._state.view.interaction_mode:
            self._state.view = replace(self._state.view, interaction_mode=mode)

    # -----------------------------
    # Focus / visibility
    # -----------------------------

    def focus(self, card_id: CardId) -> bool:
        """Bring ``card_id`` to the front.

        Returns ``False`` (and changes nothing) when it is already focused.
        """
        card = self.get_card(card_id)
        view = self._state.view
        if view.focused_card_id == card_id:
            return False
        self._state.cards[card_id] = replace(card, z=view.next_z)
        self._state.view = replace(view, focused_card_id=card_id, next_z=view.next_z + 1)
        return True

    def toggle(self, card_id: CardId) -> bool:
        """Flip visibility of ``card_id`` and persist. Returns the new flag."""
        card = self.get_card(card_id)
        if card.open:
            self._state.cards[card_id] = replace(card, open=False)
            if self._state.view.focused_card_id == card_id:
                self._state.view = replace(self._state.view, focused_card_id=None)
        else:
            self._open(card_id, card)
        self.persist()
        return not card.open

    def open(self, card_id: CardId) -> bool:
        """Show ``card_id`` if hidden. Returns ``False`` for a no-op."""
        card = self.get_card(card_id)
        if card.open:
            return False
        self._open(card_id, card)
        self.persist()
        return True

    def _open(self, card_id: CardId, card: CardState) -> None:
        self._state.cards[card_id] = replace(card, open=True)
        self.focus(card_id)
        self.notify_card_open(card_id)

    # -----------------------------
    # Collaborator callbacks
    # -----------------------------

    def notify_card_open(self, card_id: CardId) -> None:
        if self.on_card_open is None:
            return
        try:
            self.on_card_open(card_id)
        except Exception:
            logger.exception("on_card_open callback failed for %r", card_id)

    def notify_cards_opened(self, card_ids: Iterable[CardId]) -> None:
        for card_id in card_ids:
            self.notify_card_open(card_id)

    def persist(self) -> None:
        """Hand a copy of the layout to the persistence collaborator."""
        if self.on_persist is None:
            return
        try:
            self.on_persist(self._state.copy())
        except Exception:
            logger.exception("on_persist callback failed")
