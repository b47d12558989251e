"""Screen measurement capability used by the interaction state machine.

The state machine never touches a UI toolkit directly. It asks a
``ScreenAnchor`` for the on-screen rectangle of the world element and the
viewport size, and uses it to capture/release pointers. Implementations:

- ``ScreenAnchor``: base class with no-op pointer capture,
- ``StaticScreenAnchor``: fixed rectangles, for tests and headless hosts,
- ``ViewportAnchor``: derives the world rectangle from the live view, so
  pointer coordinates are interpreted relative to the viewport origin.
"""

from __future__ import annotations

from typing import Callable, Optional

from .canvas_config import DEFAULT_CONFIG, CanvasConfig
from .canvas_geometry import Rect, Size
from .layout_state import ViewState


class ScreenAnchor:
    """Capability interface for world-anchor geometry and pointer capture.

    Subclasses override :meth:`get_anchor_rect` and
    :meth:`get_viewport_size`. ``get_anchor_rect`` returns ``None`` while the
    world element is not mounted; callers then skip the operation.
    """

    def get_anchor_rect(self) -> Optional[Rect]:
        raise NotImplementedError

    def get_viewport_size(self) -> Size:
        raise NotImplementedError

    def capture_pointer(self, pointer_id: int) -> None:
        """Route further events of ``pointer_id`` to the canvas."""

    def release_pointer(self, pointer_id: int) -> None:
        """Undo :meth:`capture_pointer`."""


class StaticScreenAnchor(ScreenAnchor):
    """Anchor with fixed geometry and a record of captured pointers.

    Parameters
    ----------
    anchor_rect : Rect or None
        World element rectangle; ``None`` simulates an unmounted element.
    viewport_size : Size
        Viewport pixel size.
    """

    def __init__(self, anchor_rect: Optional[Rect], viewport_size: Size = Size(1000.0, 1000.0)) -> None:
        self.anchor_rect = anchor_rect
        self.viewport_size = viewport_size
        self.captured: set[int] = set()

    def get_anchor_rect(self) -> Optional[Rect]:
        return self.anchor_rect

    def get_viewport_size(self) -> Size:
        return self.viewport_size

    def capture_pointer(self, pointer_id: int) -> None:
        self.captured.add(pointer_id)

    def release_pointer(self, pointer_id: int) -> None:
        self.captured.discard(pointer_id)


class ViewportAnchor(StaticScreenAnchor):
    """Anchor computed from the current view.

    The world element sits at ``pan * scale`` inside the viewport and spans
    ``world_size * scale``. Keeps the coordinate math consistent without a
    rendered tree.
    """

    def __init__(
        self,
        view_getter: Callable[[], ViewState],
        viewport_size: Size = Size(1280.0, 800.0),
        *,
        config: CanvasConfig = DEFAULT_CONFIG,
    ) -> None:
        super().__init__(None, viewport_size)
        self._view_getter = view_getter
        self._config = config

    def get_anchor_rect(self) -> Optional[Rect]:
        view = self._view_getter()
        return Rect(
            view.pan_x * view.scale,
            view.pan_y * view.scale,
            self._config.world_w * view.scale,
            self._config.world_h * view.scale,
        )
