"""Saved-workspace list, application onto the live layout, and naming flow.

The manager owns the ordered list of :class:`Workspace` records and the
"active" marker; the live layout stays with :class:`LayoutStore`. It does not
cap the number of workspaces. The usability limit is applied by whoever
triggers a save (see :meth:`CanvasEngine.save_workspace`).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any, Callable, Optional, Sequence

from .canvas_config import DEFAULT_CONFIG, CanvasConfig
from .layout_state import LayoutState
from .layout_store import LayoutStore
from .WorkspaceSnapshot import Workspace

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

WorkspacesChangedCallback = Callable[[Sequence[Workspace]], None]


class WorkspaceManager:
    """Own saved workspaces and apply them to a ``LayoutStore``.

    Parameters
    ----------
    workspaces : Iterable[Workspace]
        Initially known workspaces, in display order.
    config : CanvasConfig
        Label normalization rules.
    on_change : callable, optional
        Receives the full list whenever it is added to or deleted from.
    """

    def __init__(
        self,
        workspaces: Iterable[Workspace] = (),
        *,
        config: CanvasConfig = DEFAULT_CONFIG,
        on_change: Optional[WorkspacesChangedCallback] = None,
    ) -> None:
        self._config = config
        self._workspaces: list[Workspace] = list(workspaces)
        self._active_id: Optional[str] = None
        self._naming = False
        self._draft = ""
        self.on_change = on_change

    @property
    def workspaces(self) -> tuple[Workspace, ...]:
        return tuple(self._workspaces)

    @property
    def active_id(self) -> Optional[str]:
        return self._active_id

    def __len__(self) -> int:
        return len(self._workspaces)

    def __iter__(self) -> Iterator[Workspace]:
        return iter(tuple(self._workspaces))

    def get(self, workspace_id: str) -> Optional[Workspace]:
        for workspace in self._workspaces:
            if workspace.id == workspace_id:
                return workspace
        return None

    # -----------------------------
    # Create / delete
    # -----------------------------

    def snapshot(self, state: LayoutState, label: Any) -> Workspace:
        """Build a detached workspace from ``state`` without registering it."""
        return Workspace.from_layout(state, label, config=self._config)

    def add(self, workspace: Workspace, *, activate: bool = True) -> Workspace:
        self._workspaces.append(workspace)
        if activate:
            self._active_id = workspace.id
        logger.info("Saved workspace %s (%s)", workspace.label, workspace.id)
        self._notify()
        return workspace

    def save(self, state: LayoutState, label: Any) -> Workspace:
        """Snapshot ``state``, append it and mark it active."""
        return self.add(self.snapshot(state, label))

    def delete(self, workspace_id: str) -> bool:
        """Forget a workspace. The live layout is not touched."""
        before = len(self._workspaces)
        self._workspaces = [w for w in self._workspaces if w.id != workspace_id]
        if len(self._workspaces) == before:
            return False
        if self._active_id == workspace_id:
            self._active_id = None
        logger.info("Deleted workspace %s", workspace_id)
        self._notify()
        return True

    # -----------------------------
    # Apply
    # -----------------------------

    def apply(self, workspace: Workspace, store: LayoutStore) -> list[str]:
        """Load ``workspace`` into ``store``.

        Every card present in the workspace replaces its live state; pan and
        scale are replaced wholesale. Cards that were closed and are open in
        the workspace are announced through ``on_card_open`` in catalog order
        once the replacement is complete, then the layout is persisted.

        Returns
        -------
        list[str]
            Ids of the cards that transitioned from closed to open.
        """
        opened = store.replace_cards(workspace.cards)
        store.set_view(pan_x=workspace.pan_x, pan_y=workspace.pan_y, scale=workspace.scale)
        store.notify_cards_opened(opened)
        store.persist()
        if self.get(workspace.id) is not None:
            self._active_id = workspace.id
        logger.info("Applied workspace %s; opened %s", workspace.label, opened or "nothing")
        return list(opened)

    # -----------------------------
    # Naming flow
    # -----------------------------

    @property
    def naming(self) -> bool:
        return self._naming

    @property
    def draft(self) -> str:
        return self._draft

    def begin_naming(self) -> None:
        self._naming = True
        self._draft = ""

    def set_draft(self, text: str) -> None:
        if self._naming:
            self._draft = text

    def cancel_naming(self) -> None:
        self._naming = False
        self._draft = ""

    def commit_naming(self, state: LayoutState) -> Optional[Workspace]:
        """Save the drafted workspace once.

        Returns ``None`` when no naming session is open, which makes a second
        commit from the same session (e.g. Enter followed by blur) harmless.
        """
        if not self._naming:
            return None
        label = self._draft
        self.cancel_naming()
        return self.save(state, label)

    def _notify(self) -> None:
        if self.on_change is None:
            return
        try:
            self.on_change(self.workspaces)
        except Exception:
            logger.exception("on_change callback failed")
