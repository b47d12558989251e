from __future__ import annotations

import pytest

from canvas_workspace import KeyboardShortcuts, LayoutStore
from canvas_workspace.card_registry import dock_order


@pytest.fixture
def keys(store: LayoutStore) -> KeyboardShortcuts:
    return KeyboardShortcuts(store)


def test_dock_order_flattens_groups() -> None:
    assert dock_order() == (
        "chat", "system", "channels", "sessions", "activity", "log",
        "skills", "cron", "nodes", "config", "debug",
    )


def test_digit_toggles_card_in_dock_order(store: LayoutStore, keys: KeyboardShortcuts, recorder) -> None:
    assert keys.handle("6") is True
    assert store.get_card("log").open is True
    assert recorder.opened == ["log"]

    assert keys.handle("9") is True
    assert store.get_card("nodes").open is True


def test_modifiers_and_editable_targets_are_ignored(store: LayoutStore, keys: KeyboardShortcuts) -> None:
    assert keys.handle("6", ctrl=True) is False
    assert keys.handle("6", editable_target=True) is False
    assert store.get_card("log").open is False


def test_slash_opens_then_focuses_chat(store: LayoutStore, keys: KeyboardShortcuts, recorder) -> None:
    store.toggle("chat")
    assert keys.handle("/") is True
    assert store.get_card("chat").open is True
    assert recorder.opened == ["chat"]

    store.focus("system")
    assert keys.handle("/") is True
    assert store.get_view().focused_card_id == "chat"
    assert recorder.opened == ["chat"]


def test_escape_closes_focused_card_once(store: LayoutStore, keys: KeyboardShortcuts) -> None:
    assert keys.handle("Escape") is False
    store.focus("system")
    assert keys.handle("Escape") is True
    assert store.get_card("system").open is False
    # Focus was cleared, so a second Escape does not reopen it.
    assert keys.handle("Escape") is False
    assert store.get_card("system").open is False


def test_unbound_keys_are_not_consumed(keys: KeyboardShortcuts) -> None:
    assert keys.handle("0") is False
    assert keys.handle("a") is False
    assert keys.handle("Enter") is False
