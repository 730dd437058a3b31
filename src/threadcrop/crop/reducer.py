"""
Gesture-to-state reducer for the crop session.

The reducer turns two independent gesture streams (pinch magnification and
drag translation) into an :class:`InteractionState`.  Live updates are
expressed relative to the last committed baseline and are never clamped, so
the user can briefly pull the image past its limits.  Once every active
stream has ended the state is settled against the layout.

All functions return new frozen states; nothing here touches Qt.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace

from ..config import GEOMETRY_EPSILON
from .frame import CropLayout
from .geometry import Point, clamp_state, max_offset, min_coverage_scale

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class InteractionState:
    """Zoom and pan of the image relative to its aspect-fit placement."""

    scale: float = 1.0
    offset: Point = Point()
    committed_scale: float = 1.0
    committed_offset: Point = Point()
    magnifying: bool = False
    dragging: bool = False

    @property
    def is_gesture_active(self) -> bool:
        return self.magnifying or self.dragging

    @classmethod
    def at(cls, scale: float, offset: Point = Point()) -> "InteractionState":
        """Return an idle state whose baseline equals ``(scale, offset)``."""
        return cls(scale=scale, offset=offset, committed_scale=scale, committed_offset=offset)


def is_settled(state: InteractionState, layout: CropLayout) -> bool:
    """Return True when *state* satisfies the coverage and bounds invariants."""
    if state.is_gesture_active:
        return False
    frame_size = layout.frame.size
    if state.scale < min_coverage_scale(layout.rendered_size, frame_size) - GEOMETRY_EPSILON:
        return False
    limit = max_offset(layout.rendered_size, state.scale, frame_size)
    return (
        abs(state.offset.x) <= limit.x + GEOMETRY_EPSILON
        and abs(state.offset.y) <= limit.y + GEOMETRY_EPSILON
    )


def settle(
    state: InteractionState, layout: CropLayout, max_zoom: float | None = None
) -> InteractionState:
    """Clamp *state* into the valid region and make the result the new baseline."""
    scale, offset = clamp_state(
        layout.rendered_size, layout.frame.size, state.scale, state.offset, max_zoom
    )
    if scale != state.scale or offset != state.offset:
        _LOGGER.debug(
            "Settling crop state: scale %.4f -> %.4f, offset (%.2f, %.2f) -> (%.2f, %.2f)",
            state.scale,
            scale,
            state.offset.x,
            state.offset.y,
            offset.x,
            offset.y,
        )
    return InteractionState.at(scale, offset)


def magnify(state: InteractionState, factor: float, base_factor: float = 1.0) -> InteractionState:
    """Scale the baseline by *factor* relative to *base_factor*, the factor at gesture start."""
    factor = float(factor)
    base_factor = float(base_factor)
    if not (math.isfinite(factor) and math.isfinite(base_factor)) or factor <= 0.0 or base_factor <= 0.0:
        _LOGGER.debug("Ignoring invalid magnification factor %r (base %r)", factor, base_factor)
        return state
    return replace(state, scale=state.committed_scale * (factor / base_factor), magnifying=True)


def magnify_end(
    state: InteractionState, layout: CropLayout, max_zoom: float | None = None
) -> InteractionState:
    """Commit the live scale and settle once no other stream is active."""
    if not state.magnifying:
        return state
    committed = replace(state, committed_scale=state.scale, magnifying=False)
    if committed.dragging:
        return committed
    return settle(committed, layout, max_zoom)


def drag(state: InteractionState, translation: Point) -> InteractionState:
    """Offset the image by *translation* measured from the drag start."""
    if not translation.is_finite():
        _LOGGER.debug("Ignoring non-finite drag translation %r", translation)
        return state
    return replace(state, offset=state.committed_offset + translation, dragging=True)


def drag_end(
    state: InteractionState, layout: CropLayout, max_zoom: float | None = None
) -> InteractionState:
    """Commit the live offset and settle once no other stream is active."""
    if not state.dragging:
        return state
    committed = replace(state, committed_offset=state.offset, dragging=False)
    if committed.magnifying:
        return committed
    return settle(committed, layout, max_zoom)


def relayout(
    state: InteractionState,
    previous: CropLayout,
    current: CropLayout,
    max_zoom: float | None = None,
) -> InteractionState:
    """Carry *state* across a viewport change and settle it immediately.

    The offset is rescaled with the rendered size so the same image content
    stays under the frame; any gesture in flight is dropped.
    """
    ratio = float(current.rendered_size.width) / float(previous.rendered_size.width)
    moved = InteractionState(
        scale=state.scale,
        offset=Point(state.offset.x * ratio, state.offset.y * ratio),
    )
    return settle(moved, current, max_zoom)


__all__ = [
    "InteractionState",
    "drag",
    "drag_end",
    "is_settled",
    "magnify",
    "magnify_end",
    "relayout",
    "settle",
]
