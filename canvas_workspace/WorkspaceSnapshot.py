"""Immutable saved workspace records.

A ``Workspace`` captures every card state plus pan and scale under a short
label. It holds its own copy of the card map, so later edits to the live
layout never reach a stored workspace. Workspaces are never edited in place;
replacing one means deleting it and saving a new one.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Optional

from .canvas_config import DEFAULT_CONFIG, CanvasConfig
from .card_registry import ALL_CARD_IDS, CardId
from .layout_state import (
    CardState,
    LayoutState,
    cards_to_dict,
    finite_number,
    parse_card_state,
)

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def normalize_label(label: Any, *, config: CanvasConfig = DEFAULT_CONFIG) -> str:
    """Trim, upper-case and cap ``label``; empty results become the placeholder.

    Examples
    --------
    >>> normalize_label("  deep work ")
    'DEEP W'
    >>> normalize_label("   ")
    'WS'
    """
    text = label if isinstance(label, str) else ""
    text = text.strip().upper()[: config.workspace_label_max]
    return text or config.workspace_label_placeholder


@dataclass(frozen=True)
class Workspace:
    """Named snapshot of card layout plus pan/zoom.

    Parameters
    ----------
    id : str
        Opaque unique token.
    label : str
        Normalized display label.
    cards : Mapping[CardId, CardState]
        Read-only card map owned by this workspace.
    pan_x, pan_y, scale : float
        View at snapshot time.
    """

    id: str
    label: str
    cards: Mapping[CardId, CardState] = field(default_factory=dict, hash=False)
    pan_x: float = 0.0
    pan_y: float = 0.0
    scale: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "cards", MappingProxyType(dict(self.cards)))

    @classmethod
    def from_layout(
        cls,
        state: LayoutState,
        label: Any,
        *,
        config: CanvasConfig = DEFAULT_CONFIG,
        workspace_id: Optional[str] = None,
    ) -> "Workspace":
        """Snapshot ``state`` under a normalized ``label`` with a fresh id."""
        return cls(
            id=workspace_id or uuid.uuid4().hex,
            label=normalize_label(label, config=config),
            cards=dict(state.cards),
            pan_x=state.view.pan_x,
            pan_y=state.view.pan_y,
            scale=state.view.scale,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "cards": cards_to_dict(self.cards),
            "panX": self.pan_x,
            "panY": self.pan_y,
            "scale": self.scale,
        }

    @classmethod
    def from_dict(cls, raw: Any, *, config: CanvasConfig = DEFAULT_CONFIG) -> Optional["Workspace"]:
        """Rebuild a stored workspace, or ``None`` when it is unusable.

        Invalid individual cards are dropped from the snapshot (applying it
        then leaves those cards untouched); a missing id, an unusable view or
        no valid card at all rejects the whole record.
        """
        if isinstance(raw, Workspace):
            return raw
        if not isinstance(raw, Mapping):
            return None
        workspace_id = raw.get("id")
        if not isinstance(workspace_id, str) or not workspace_id:
            return None

        pan_x = finite_number(raw.get("panX"))
        pan_y = finite_number(raw.get("panY"))
        scale = finite_number(raw.get("scale"))
        if pan_x is None or pan_y is None or scale is None:
            return None
        if not config.min_scale <= scale <= config.max_scale:
            return None

        cards_raw = raw.get("cards")
        if not isinstance(cards_raw, Mapping):
            return None
        cards: Dict[CardId, CardState] = {}
        for card_id in ALL_CARD_IDS:
            parsed = parse_card_state(cards_raw.get(card_id), config=config)
            if parsed is not None:
                cards[card_id] = parsed
            elif card_id in cards_raw:
                logger.warning("Dropping invalid card %r from workspace %s", card_id, workspace_id)
        if not cards:
            return None

        return cls(
            id=workspace_id,
            label=normalize_label(raw.get("label"), config=config),
            cards=cards,
            pan_x=pan_x,
            pan_y=pan_y,
            scale=scale,
        )

    def __repr__(self) -> str:
        return f"Workspace(id={self.id!r}, label={self.label!r}, cards={len(self.cards)})"
