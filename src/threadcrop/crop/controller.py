"""
Crop gesture controller.

Thin adapter between Qt input events and :class:`CropSession`.  It converts
mouse drags, wheel steps and trackpad pinches into the session's delta
streams and animates the snap-back whenever a gesture settles.  All geometry
decisions stay in the session.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

from PySide6.QtCore import QObject, QPointF, QSizeF, Qt
from PySide6.QtGui import QMouseEvent, QNativeGestureEvent, QWheelEvent

from .animator import SettleAnimator
from .geometry import Point, Size
from .reducer import InteractionState
from .session import CropSession

_LOGGER = logging.getLogger(__name__)

# Wheel notches are converted to a one-shot pinch of ``base ** angle``.
_WHEEL_ZOOM_BASE = 1.0015
_WHEEL_ANGLE_LIMIT = 480


class CropGestureController:
    """Routes Qt input to a crop session and drives the settle animation."""

    def __init__(
        self,
        session: CropSession,
        *,
        on_display_changed: Callable[[float, Point], None],
        on_request_update: Callable[[], None] | None = None,
        timer_parent: QObject | None = None,
    ) -> None:
        """Initialize the gesture controller.

        Parameters
        ----------
        session:
            The crop session receiving gesture deltas.
        on_display_changed:
            Callback with the ``(scale, offset)`` the view should draw, live
            during gestures and interpolated during the snap-back.
        on_request_update:
            Callback to request a repaint of the overlay.
        timer_parent:
            Parent QObject for animation timers (optional).
        """
        self._session = session
        self._on_display_changed = on_display_changed
        self._on_request_update = on_request_update or (lambda: None)
        self._animator = SettleAnimator(
            on_animation_frame=self._on_animation_frame,
            on_animation_complete=self._on_animation_complete,
            timer_parent=timer_parent,
        )
        self._drag_origin: QPointF | None = None
        self._pinch_factor: float | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def session(self) -> CropSession:
        return self._session

    def is_dragging(self) -> bool:
        return self._drag_origin is not None

    def is_pinching(self) -> bool:
        return self._pinch_factor is not None

    def is_animating(self) -> bool:
        return self._animator.is_animating()

    def begin_drag(self, pos: QPointF) -> None:
        """Anchor a drag at viewport position *pos*."""
        self._animator.finish_animation()
        self._drag_origin = QPointF(pos)

    def update_drag(self, pos: QPointF) -> None:
        """Translate the image by the distance from the drag anchor."""
        if self._drag_origin is None:
            return
        delta = pos - self._drag_origin
        self._publish(self._session.on_drag(Point(float(delta.x()), float(delta.y()))))

    def end_drag(self) -> None:
        if self._drag_origin is None:
            return
        self._drag_origin = None
        self._finish(self._session.on_drag_end)

    def update_pinch(self, factor: float) -> None:
        """Apply a cumulative pinch *factor* (1.0 when the pinch began)."""
        if self._pinch_factor is None:
            self._animator.finish_animation()
        self._pinch_factor = float(factor)
        self._publish(self._session.on_magnify(factor))

    def end_pinch(self) -> None:
        if self._pinch_factor is None:
            return
        self._pinch_factor = None
        self._finish(self._session.on_magnify_end)

    def resize(self, size: QSizeF) -> None:
        """Forward a viewport resize; the session re-clamps immediately."""
        self._animator.stop_animation()
        self._publish(self._session.on_viewport_resize(Size(float(size.width()), float(size.height()))))

    def reset(self) -> None:
        """Animate back to the coverage scale with the image centred."""
        before = self._session.state
        self._animator.stop_animation()
        after = self._session.reset()
        self._animate(before, after)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def handle_mouse_press(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            return
        self.begin_drag(event.position())
        event.accept()

    def handle_mouse_move(self, event: QMouseEvent) -> None:
        if self._drag_origin is None:
            return
        self.update_drag(event.position())
        event.accept()

    def handle_mouse_release(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            return
        self.end_drag()
        event.accept()

    def handle_wheel(self, event: QWheelEvent) -> None:
        """Treat one wheel step as a complete pinch gesture."""
        angle = event.angleDelta().y()
        if angle == 0:
            return
        # Guard against devices that emit unusually large wheel deltas
        angle = max(-_WHEEL_ANGLE_LIMIT, min(_WHEEL_ANGLE_LIMIT, angle))
        self.update_pinch(math.pow(_WHEEL_ZOOM_BASE, angle))
        self.end_pinch()
        event.accept()

    def handle_native_gesture(self, event: QNativeGestureEvent) -> None:
        """Accumulate trackpad zoom increments into one cumulative factor."""
        gesture = event.gestureType()
        if gesture == Qt.NativeGestureType.ZoomNativeGesture:
            current = self._pinch_factor if self._pinch_factor is not None else 1.0
            self.update_pinch(current * (1.0 + float(event.value())))
            event.accept()
        elif gesture == Qt.NativeGestureType.EndNativeGesture:
            self.end_pinch()
            event.accept()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _publish(self, state: InteractionState) -> None:
        self._on_display_changed(state.scale, state.offset)
        self._on_request_update()

    def _finish(self, end_stream: Callable[[], InteractionState]) -> None:
        before = self._session.state
        after = end_stream()
        self._animate(before, after)

    def _animate(self, before: InteractionState, after: InteractionState) -> None:
        if after.is_gesture_active:
            self._publish(after)
            return
        _LOGGER.debug(
            "Animating settle from scale %.4f to %.4f", before.scale, after.scale
        )
        self._animator.start_animation(before.scale, after.scale, before.offset, after.offset)

    def _on_animation_frame(self, scale: float, offset: Point) -> None:
        self._on_display_changed(scale, offset)
        self._on_request_update()

    def _on_animation_complete(self) -> None:
        self._on_request_update()


__all__ = ["CropGestureController"]
