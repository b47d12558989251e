"""Global keyboard shortcuts for the canvas dock."""

from __future__ import annotations

from .card_registry import dock_order
from .layout_store import LayoutStore


class KeyboardShortcuts:
    """Map key presses onto layout operations.

    ``1``-``9`` toggle the n-th card in dock order, ``/`` opens the chat card
    (or focuses it when already open) and ``Escape`` closes the focused card.
    Keys typed into editable elements or combined with a modifier are left
    alone.
    """

    def __init__(self, store: LayoutStore) -> None:
        self._store = store
        self._digit_cards = dock_order()[:9]

    def handle(
        self,
        key: str,
        *,
        ctrl: bool = False,
        meta: bool = False,
        alt: bool = False,
        editable_target: bool = False,
    ) -> bool:
        """Apply the shortcut bound to ``key``; return ``True`` if consumed."""
        if editable_target or ctrl or meta or alt:
            return False

        if len(key) == 1 and "1" <= key <= "9":
            index = int(key) - 1
            if index >= len(self._digit_cards):
                return False
            self._store.toggle(self._digit_cards[index])
            return True

        if key == "/":
            if self._store.get_card("chat").open:
                self._store.focus("chat")
            else:
                self._store.open("chat")
            return True

        if key == "Escape":
            focused = self._store.get_view().focused_card_id
            if focused is None or not self._store.get_card(focused).open:
                return False
            self._store.toggle(focused)
            return True

        return False
