"""Static catalog of canvas cards.

The catalog is closed: every card the canvas can show is listed here and
cards are never created at runtime. Dock groups only drive UI organization
(and the numeric keyboard shortcuts); the engine invariants ignore them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

CardId = Literal[
    "chat",
    "system",
    "channels",
    "sessions",
    "activity",
    "log",
    "skills",
    "cron",
    "config",
    "nodes",
    "debug",
]

DockGroupName = Literal["command", "control", "agent", "settings"]


@dataclass(frozen=True)
class CardDefinition:
    """Immutable catalog entry for one card.

    Parameters
    ----------
    id : CardId
        Stable card identifier.
    title : str
        Header text.
    icon_key : str
        Icon name understood by the host renderer.
    default_position : tuple[float, float]
        World-space top-left used when no stored state exists.
    default_size : tuple[float, float]
        World-space ``(w, h)`` used when no stored state exists.
    group : DockGroupName
        Dock grouping.
    """

    id: CardId
    title: str
    icon_key: str
    default_position: tuple[float, float]
    default_size: tuple[float, float]
    group: DockGroupName


@dataclass(frozen=True)
class DockGroup:
    label: str
    cards: tuple[CardId, ...]


CARD_DEFINITIONS: tuple[CardDefinition, ...] = (
    CardDefinition("chat", "CHAT", "message-square", (1800.0, 800.0), (520.0, 580.0), "command"),
    CardDefinition("system", "SYSTEM", "monitor", (1400.0, 800.0), (280.0, 400.0), "command"),
    CardDefinition("channels", "CHANNELS", "link", (2440.0, 800.0), (260.0, 200.0), "control"),
    CardDefinition("sessions", "SESSIONS", "users", (2440.0, 1060.0), (260.0, 180.0), "control"),
    CardDefinition("activity", "ACTIVITY", "activity", (1400.0, 1260.0), (280.0, 260.0), "control"),
    CardDefinition("log", "LOG", "file-text", (2440.0, 1300.0), (340.0, 240.0), "control"),
    CardDefinition("skills", "SKILLS", "zap", (2810.0, 800.0), (220.0, 200.0), "agent"),
    CardDefinition("cron", "CRON", "clock", (2810.0, 1060.0), (220.0, 150.0), "agent"),
    CardDefinition("config", "CONFIG", "settings", (1800.0, 1440.0), (500.0, 450.0), "settings"),
    CardDefinition("nodes", "NODES", "server", (2810.0, 1280.0), (260.0, 200.0), "agent"),
    CardDefinition("debug", "DEBUG", "terminal", (2360.0, 1580.0), (340.0, 260.0), "settings"),
)

ALL_CARD_IDS: tuple[CardId, ...] = tuple(d.id for d in CARD_DEFINITIONS)

INITIAL_OPEN_CARDS: frozenset[CardId] = frozenset({"chat", "system", "channels", "sessions"})

# Lowest z handed out by the catalog defaults; stays below INITIAL_NEXT_Z.
DEFAULT_BASE_Z = 10

DOCK_GROUPS: tuple[DockGroup, ...] = (
    DockGroup("Command", ("chat", "system")),
    DockGroup("Control", ("channels", "sessions", "activity", "log")),
    DockGroup("Agent", ("skills", "cron", "nodes")),
    DockGroup("Settings", ("config", "debug")),
)

_BY_ID: dict[str, CardDefinition] = {d.id: d for d in CARD_DEFINITIONS}


def is_card_id(value: Any) -> bool:
    """Return ``True`` when ``value`` names a catalog card."""
    return isinstance(value, str) and value in _BY_ID


def get_definition(card_id: str) -> CardDefinition:
    """Return the catalog entry for ``card_id`` or raise ``KeyError``."""
    if card_id not in _BY_ID:
        raise KeyError(f"Unknown card: {card_id}")
    return _BY_ID[card_id]


def dock_order() -> tuple[CardId, ...]:
    """Cards in dock order (groups flattened), as used by digit shortcuts."""
    return tuple(card_id for group in DOCK_GROUPS for card_id in group.cards)


def catalog_index(card_id: str) -> int:
    """Position of ``card_id`` in catalog order."""
    return ALL_CARD_IDS.index(card_id)  # type: ignore[arg-type]
