from __future__ import annotations

import sys
from pathlib import Path

import pytest

_START = Path(__file__).resolve().parent
_repo_root = _START
while _repo_root != _repo_root.parent and not (_repo_root / "canvas_workspace" / "__init__.py").exists():
    _repo_root = _repo_root.parent

sys.path.insert(0, str(_repo_root))

from canvas_workspace import (  # noqa: E402
    CanvasEngine,
    InMemoryBridge,
    LayoutStore,
    Rect,
    Size,
    StaticScreenAnchor,
)


class Recorder:
    """Collects collaborator callback invocations."""

    def __init__(self) -> None:
        self.opened: list[str] = []
        self.saved: list = []

    def on_card_open(self, card_id: str) -> None:
        self.opened.append(card_id)

    def on_persist(self, state) -> None:
        self.saved.append(state)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def store(recorder: Recorder) -> LayoutStore:
    return LayoutStore(on_persist=recorder.on_persist, on_card_open=recorder.on_card_open)


@pytest.fixture
def anchor() -> StaticScreenAnchor:
    return StaticScreenAnchor(Rect(0.0, 0.0, 1000.0, 1000.0), Size(1000.0, 1000.0))


@pytest.fixture
def bridge() -> InMemoryBridge:
    return InMemoryBridge()


@pytest.fixture
def engine(bridge: InMemoryBridge, recorder: Recorder) -> CanvasEngine:
    return CanvasEngine(bridge, on_card_open=recorder.on_card_open)
