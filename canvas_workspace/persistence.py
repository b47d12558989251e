"""Persistence collaborators for layout and workspaces.

The engine only depends on the :class:`PersistenceBridge` protocol. Two
implementations ship with the package:

- :class:`InMemoryBridge` keeps serialized copies in memory (headless hosts,
  tests),
- :class:`JsonSettingsBridge` stores everything in one JSON settings document
  on disk, next to whatever other settings the host keeps in it.

Loading never raises for bad data: unreadable files and malformed entries
come back as "nothing stored" and the engine falls back to defaults.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union, runtime_checkable

from .canvas_config import DEFAULT_CONFIG, CanvasConfig
from .layout_state import LayoutState, layout_to_dict
from .WorkspaceSnapshot import Workspace

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

SETTINGS_KEY = "canvas.settings.v1"

StoredLayout = Union[LayoutState, Mapping[str, Any], None]


@runtime_checkable
class PersistenceBridge(Protocol):
    """Storage interface consumed by :class:`CanvasEngine`."""

    def load_layout_state(self) -> StoredLayout: ...

    def save_layout_state(self, state: LayoutState) -> None: ...

    def load_workspaces(self) -> Sequence[Union[Workspace, Mapping[str, Any]]]: ...

    def save_workspaces(self, workspaces: Sequence[Workspace]) -> None: ...


def load_workspace_list(raw: Any, *, config: CanvasConfig = DEFAULT_CONFIG) -> List[Workspace]:
    """Parse stored workspaces, dropping unusable and duplicate entries."""
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)):
        logger.warning("Ignoring stored workspaces of type %s", type(raw).__name__)
        return []
    loaded: List[Workspace] = []
    seen: set[str] = set()
    for entry in raw:
        workspace = Workspace.from_dict(entry, config=config)
        if workspace is None or workspace.id in seen:
            logger.warning("Dropping unusable stored workspace entry")
            continue
        seen.add(workspace.id)
        loaded.append(workspace)
    return loaded


class InMemoryBridge:
    """Bridge that keeps JSON-compatible copies in memory.

    Attributes
    ----------
    layout : dict or None
        Last saved layout in :func:`layout_to_dict` form.
    workspaces : list[dict]
        Last saved workspace list in ``Workspace.to_dict`` form.
    layout_saves, workspace_saves : int
        Number of save calls received.
    """

    def __init__(
        self,
        layout: StoredLayout = None,
        workspaces: Sequence[Union[Workspace, Mapping[str, Any]]] = (),
    ) -> None:
        if isinstance(layout, LayoutState):
            layout = layout_to_dict(layout)
        self.layout: Optional[Mapping[str, Any]] = layout
        self.workspaces: List[Any] = [
            w.to_dict() if isinstance(w, Workspace) else w for w in workspaces
        ]
        self.layout_saves = 0
        self.workspace_saves = 0

    def load_layout_state(self) -> StoredLayout:
        return self.layout

    def save_layout_state(self, state: LayoutState) -> None:
        self.layout = layout_to_dict(state)
        self.layout_saves += 1

    def load_workspaces(self) -> Sequence[Any]:
        return list(self.workspaces)

    def save_workspaces(self, workspaces: Sequence[Workspace]) -> None:
        self.workspaces = [w.to_dict() for w in workspaces]
        self.workspace_saves += 1


class JsonSettingsBridge:
    """Persist canvas state inside a JSON settings file.

    The file holds a top-level object; canvas data lives under ``key`` as
    ``{"canvasLayout": ..., "workspaces": [...]}``. Other top-level keys are
    preserved on every write. Writes go to a temporary sibling first and are
    moved into place.

    Parameters
    ----------
    path : str or Path
        Settings file location. Missing parent directories are created on
        first save.
    key : str
        Top-level key for canvas data.
    """

    def __init__(self, path: Union[str, Path], *, key: str = SETTINGS_KEY) -> None:
        self.path = Path(path)
        self.key = key

    def _read_document(self) -> Dict[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            logger.warning("Could not read settings %s: %s", self.path, exc)
            return {}
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Corrupt settings file %s: %s", self.path, exc)
            return {}
        if not isinstance(document, dict):
            logger.warning("Settings file %s does not hold an object", self.path)
            return {}
        return document

    def _section(self) -> Dict[str, Any]:
        section = self._read_document().get(self.key)
        return section if isinstance(section, dict) else {}

    def _write_section(self, **updates: Any) -> None:
        document = self._read_document()
        section = document.get(self.key)
        if not isinstance(section, dict):
            section = {}
        section.update(updates)
        document[self.key] = section
        self._write_document(document)

    def _write_document(self, document: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise

    def load_layout_state(self) -> StoredLayout:
        layout = self._section().get("canvasLayout")
        return layout if isinstance(layout, Mapping) else None

    def save_layout_state(self, state: LayoutState) -> None:
        self._write_section(canvasLayout=layout_to_dict(state))

    def load_workspaces(self) -> Sequence[Any]:
        workspaces = self._section().get("workspaces")
        return workspaces if isinstance(workspaces, list) else []

    def save_workspaces(self, workspaces: Sequence[Workspace]) -> None:
        self._write_section(workspaces=[w.to_dict() for w in workspaces])

    def reset(self) -> None:
        """Drop stored canvas data, keeping unrelated settings."""
        document = self._read_document()
        if self.key not in document:
            return
        del document[self.key]
        self._write_document(document)
