"""
Animation controller for the snap-back after a gesture settles.

The reducer settles instantly; this module only interpolates what the
presenter draws between the last live state and the settled one.  It has no
knowledge of layout or clamping.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from PySide6.QtCore import QObject, QTimer

from ..config import SETTLE_ANIMATION_DURATION_SEC, SETTLE_ANIMATION_INTERVAL_MS
from .geometry import Point


def ease_out_cubic(t: float) -> float:
    """Cubic easing function for smooth animations (ease-out)."""
    return 1.0 - (1.0 - t) ** 3


class SettleAnimator:
    """Interpolates scale and offset from a live state to its settled target."""

    def __init__(
        self,
        *,
        on_animation_frame: Callable[[float, Point], None],
        on_animation_complete: Callable[[], None],
        timer_parent: QObject | None = None,
    ) -> None:
        """Initialize the settle animator.

        Parameters
        ----------
        on_animation_frame:
            Callback for each animation frame with (scale, offset).
        on_animation_complete:
            Callback when animation completes.
        timer_parent:
            Parent QObject for the timer (optional).
        """
        self._on_animation_frame = on_animation_frame
        self._on_animation_complete = on_animation_complete

        self._anim_timer = QTimer(timer_parent)
        self._anim_timer.setInterval(SETTLE_ANIMATION_INTERVAL_MS)
        self._anim_timer.timeout.connect(self._handle_anim_tick)

        self._anim_active: bool = False
        self._anim_start_time: float = 0.0
        self._anim_duration: float = SETTLE_ANIMATION_DURATION_SEC
        self._anim_start_scale: float = 1.0
        self._anim_target_scale: float = 1.0
        self._anim_start_offset = Point()
        self._anim_target_offset = Point()

    def is_animating(self) -> bool:
        """Return True if animation is currently running."""
        return self._anim_active

    def stop_animation(self) -> None:
        """Stop the current animation without jumping to the target."""
        if self._anim_active:
            self._anim_active = False
            self._anim_timer.stop()

    def finish_animation(self) -> None:
        """Jump straight to the target frame and complete."""
        if self._anim_active:
            self._emit_final_frame()

    def start_animation(
        self,
        start_scale: float,
        target_scale: float,
        start_offset: Point,
        target_offset: Point,
        duration: float = SETTLE_ANIMATION_DURATION_SEC,
    ) -> None:
        """Start a new snap-back animation.

        A zero *duration* or an unchanged target completes synchronously.
        """
        self._anim_start_scale = float(start_scale)
        self._anim_target_scale = float(target_scale)
        self._anim_start_offset = start_offset
        self._anim_target_offset = target_offset
        self._anim_duration = max(0.0, float(duration))
        self._anim_active = True
        if self._anim_duration <= 0.0 or (
            start_scale == target_scale and start_offset == target_offset
        ):
            self._emit_final_frame()
            return
        self._anim_start_time = time.monotonic()
        self._anim_timer.start()

    def frame_at(self, progress: float) -> tuple[float, Point]:
        """Return the interpolated ``(scale, offset)`` at *progress* in [0, 1]."""
        eased = ease_out_cubic(max(0.0, min(1.0, progress)))
        scale = self._anim_start_scale + (
            (self._anim_target_scale - self._anim_start_scale) * eased
        )
        offset = Point(
            self._anim_start_offset.x
            + (self._anim_target_offset.x - self._anim_start_offset.x) * eased,
            self._anim_start_offset.y
            + (self._anim_target_offset.y - self._anim_start_offset.y) * eased,
        )
        return scale, offset

    def _emit_final_frame(self) -> None:
        self._anim_active = False
        self._anim_timer.stop()
        self._on_animation_frame(self._anim_target_scale, self._anim_target_offset)
        self._on_animation_complete()

    def _handle_anim_tick(self) -> None:
        if not self._anim_active:
            self._anim_timer.stop()
            return

        elapsed = time.monotonic() - self._anim_start_time
        if elapsed >= self._anim_duration:
            self._emit_final_frame()
            return

        scale, offset = self.frame_at(elapsed / self._anim_duration)
        self._on_animation_frame(scale, offset)


__all__ = ["SettleAnimator", "ease_out_cubic"]
