"""World/screen coordinate math for the canvas.

All functions here are pure. ``view`` arguments only need ``pan_x``,
``pan_y`` and ``scale`` attributes, so both :class:`ViewState` and
:class:`Workspace` records can be passed.

The world is drawn with ``translate(pan)`` followed by a uniform zoom, which
puts the world origin at screen ``pan * scale``. The anchor rectangle is the
on-screen box of the world element; its top-left is that origin.
"""

from __future__ import annotations

from typing import NamedTuple, Optional, Protocol

from .canvas_config import DEFAULT_CONFIG, CanvasConfig


class Point(NamedTuple):
    x: float
    y: float


class Size(NamedTuple):
    width: float
    height: float


class Rect(NamedTuple):
    """Axis-aligned rectangle in screen or minimap pixels."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


class ZoomResult(NamedTuple):
    scale: float
    pan_x: float
    pan_y: float


class _ViewLike(Protocol):
    pan_x: float
    pan_y: float
    scale: float


def world_to_screen(world: Point, view: _ViewLike) -> Point:
    """Map a world point to screen pixels for the given pan/scale."""
    return Point((world[0] + view.pan_x) * view.scale, (world[1] + view.pan_y) * view.scale)


def screen_to_world(screen: Point, view: _ViewLike, anchor_rect: Rect) -> Point:
    """Map a screen point to world units relative to the world anchor.

    Parameters
    ----------
    screen : Point
        Cursor position in screen pixels.
    view : ViewState-like
        Supplies the current ``scale``.
    anchor_rect : Rect
        Screen rectangle of the world anchor element.
    """
    return Point(
        (screen[0] - anchor_rect.left) / view.scale,
        (screen[1] - anchor_rect.top) / view.scale,
    )


def clamp_scale(scale: float, *, config: CanvasConfig = DEFAULT_CONFIG) -> float:
    """Return ``scale`` limited to ``[min_scale, max_scale]``."""
    return max(config.min_scale, min(config.max_scale, scale))


def clamp_size(w: float, h: float, *, config: CanvasConfig = DEFAULT_CONFIG) -> tuple[float, float]:
    """Return ``(w, h)`` raised to the card size floor."""
    return max(config.min_card_w, w), max(config.min_card_h, h)


def zoom_step(old_scale: float, delta_y: float, *, config: CanvasConfig = DEFAULT_CONFIG) -> float:
    """Scale after one wheel tick. Positive ``delta_y`` zooms out."""
    factor = config.zoom_out_factor if delta_y > 0 else config.zoom_in_factor
    return clamp_scale(old_scale * factor, config=config)


def zoom_about_point(
    view: _ViewLike,
    cursor: Point,
    anchor_rect: Rect,
    delta_y: float,
    *,
    config: CanvasConfig = DEFAULT_CONFIG,
) -> Optional[ZoomResult]:
    """Solve one anchor-preserving zoom step.

    The world point under ``cursor`` is measured with the pre-zoom scale,
    then the pan is chosen so the same world point lands back under the
    cursor at the new scale.

    Returns
    -------
    ZoomResult or None
        ``None`` when the scale is already at the bound in the requested
        direction; callers must then leave the view untouched.
    """
    old_scale = view.scale
    world_x = (cursor[0] - anchor_rect.left) / old_scale
    world_y = (cursor[1] - anchor_rect.top) / old_scale

    new_scale = zoom_step(old_scale, delta_y, config=config)
    if new_scale == old_scale:
        return None

    pan_x = (cursor[0] - world_x * new_scale) / new_scale
    pan_y = (cursor[1] - world_y * new_scale) / new_scale
    return ZoomResult(new_scale, pan_x, pan_y)
