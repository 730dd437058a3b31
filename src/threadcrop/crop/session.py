"""
Crop session state machine.

A :class:`CropSession` owns one source image and one
:class:`InteractionState` from the moment a caller hands over a photo until
the user either commits (producing a :class:`CropResult`) or cancels.

Phases::

    IDLE -> FRAMING -> INTERACTING -> SETTLED -> COMMITTED
                                              \\-> CANCELLED

``commit_async`` holds the session in ``RENDERING`` while the worker runs; a
failed render drops it back to ``SETTLED``.

``IDLE`` means no usable layout yet (zero-sized viewport or source).  Gesture
callbacks never raise; input that cannot be applied is logged and ignored.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

from PySide6.QtCore import QThreadPool

from ..config import (
    DEFAULT_EAGER_INITIAL_CLAMP,
    DEFAULT_MAX_ZOOM,
    DEFAULT_OUTPUT_SIZE,
)
from ..errors import DegenerateGeometryError, SessionStateError
from ..render.renderer import (
    CropFailure,
    CropOutcome,
    CropResult,
    FailureReason,
    render_outcome,
)
from ..render.source import SourceImage
from ..render.worker import CropRenderWorker
from . import reducer
from .frame import CropFramePolicy, CropLayout
from .geometry import Point, Size
from .pixel_mapper import CropMapping, PixelRect, map_crop_frame, transform_for_source_rect
from .reducer import InteractionState

_LOGGER = logging.getLogger(__name__)


class SessionPhase(enum.Enum):
    """Lifecycle phases of a crop session."""

    IDLE = "idle"
    FRAMING = "framing"
    INTERACTING = "interacting"
    SETTLED = "settled"
    RENDERING = "rendering"
    COMMITTED = "committed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionPhase.COMMITTED, SessionPhase.CANCELLED)

    @property
    def accepts_input(self) -> bool:
        return not self.is_terminal and self is not SessionPhase.RENDERING


@dataclass(frozen=True)
class CropOptions:
    """Per-session configuration supplied by the calling flow."""

    policy: CropFramePolicy = CropFramePolicy()
    output_size: tuple[int, int] = DEFAULT_OUTPUT_SIZE
    eager_initial_clamp: bool = DEFAULT_EAGER_INITIAL_CLAMP
    max_zoom: float | None = DEFAULT_MAX_ZOOM
    fallback_to_full_image: bool = False


class CropSession:
    """Pan/zoom crop interaction for a single source image."""

    def __init__(
        self,
        source: SourceImage,
        viewport_size: Size,
        options: CropOptions | None = None,
    ) -> None:
        self._source = source
        self._options = options or CropOptions()
        self._layout: CropLayout | None = None
        self._state = InteractionState()
        self._phase = SessionPhase.IDLE
        self._frame_viewport(viewport_size)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def source(self) -> SourceImage:
        return self._source

    @property
    def options(self) -> CropOptions:
        return self._options

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def layout(self) -> CropLayout | None:
        """Return the current layout, or ``None`` while the session is idle."""
        return self._layout

    def current_mapping(self) -> CropMapping | None:
        """Return what the crop frame currently covers in source pixels."""
        if self._layout is None:
            return None
        return map_crop_frame(self._layout, self._state)

    # ------------------------------------------------------------------
    # Live gesture callbacks
    # ------------------------------------------------------------------
    def on_magnify(self, factor: float, base_factor: float = 1.0) -> InteractionState:
        """Apply a pinch *factor* relative to *base_factor*, the factor at gesture start."""
        if self._accepts_input("magnify"):
            self._set_live(reducer.magnify(self._state, factor, base_factor))
        return self._state

    def on_magnify_end(self) -> InteractionState:
        """Finish the pinch stream and settle if no drag is in flight."""
        if self._accepts_input("magnify end"):
            self._set_live(reducer.magnify_end(self._state, self._layout, self._options.max_zoom))
        return self._state

    def on_drag(self, translation: Point) -> InteractionState:
        """Apply a drag translation measured from the drag start."""
        if self._accepts_input("drag"):
            self._set_live(reducer.drag(self._state, translation))
        return self._state

    def on_drag_end(self) -> InteractionState:
        """Finish the drag stream and settle if no pinch is in flight."""
        if self._accepts_input("drag end"):
            self._set_live(reducer.drag_end(self._state, self._layout, self._options.max_zoom))
        return self._state

    def on_viewport_resize(self, viewport_size: Size) -> InteractionState:
        """Recompute the layout for *viewport_size* and re-clamp immediately."""
        if not self._phase.accepts_input:
            _LOGGER.warning("Ignoring viewport resize on a %s session", self._phase.value)
            return self._state
        previous = self._layout
        if previous is None:
            self._frame_viewport(viewport_size)
            return self._state
        try:
            current = CropLayout.build(self._source.upright_size, viewport_size, self._options.policy)
        except DegenerateGeometryError as exc:
            _LOGGER.debug("Keeping previous layout, resize is degenerate: %s", exc)
            return self._state
        self._layout = current
        self._state = reducer.relayout(self._state, previous, current, self._options.max_zoom)
        self._phase = SessionPhase.SETTLED
        return self._state

    def reset(self) -> InteractionState:
        """Return to the coverage scale with the image centred."""
        if self._accepts_input("reset"):
            self._state = reducer.settle(
                InteractionState.at(self._layout.coverage_scale),
                self._layout,
                self._options.max_zoom,
            )
            self._phase = SessionPhase.SETTLED
        return self._state

    def restore(self, source_rect: PixelRect) -> InteractionState:
        """Frame a previously extracted *source_rect* again, e.g. when re-editing."""
        if self._accepts_input("restore"):
            try:
                restored = transform_for_source_rect(self._layout, source_rect)
            except DegenerateGeometryError as exc:
                _LOGGER.debug("Ignoring restore request: %s", exc)
                return self._state
            self._state = reducer.settle(restored, self._layout, self._options.max_zoom)
            self._phase = SessionPhase.SETTLED
        return self._state

    # ------------------------------------------------------------------
    # Terminal operations
    # ------------------------------------------------------------------
    def commit(self) -> CropOutcome:
        """Render the settled crop and finish the session on success."""
        failure = self._prepare_commit()
        if failure is not None:
            return failure
        mapping = map_crop_frame(self._layout, self._state)
        outcome = render_outcome(
            self._source,
            mapping.source_rect,
            self._options.output_size,
            fallback_to_full_image=self._options.fallback_to_full_image,
        )
        if isinstance(outcome, CropResult):
            self._phase = SessionPhase.COMMITTED
            _LOGGER.info(
                "Committed crop %s -> %dx%d", mapping.source_rect, *outcome.size
            )
        return outcome

    def commit_async(
        self,
        pool: QThreadPool | None = None,
        *,
        on_rendered: Callable[[CropResult], None] | None = None,
        on_failed: Callable[[CropFailure], None] | None = None,
    ) -> CropRenderWorker | CropFailure:
        """Snapshot the settled crop and render it on *pool*.

        The callbacks are connected before the job is queued so a fast render
        cannot be missed.  The session stays in ``RENDERING`` until the worker
        reports back: ``COMMITTED`` on success, ``SETTLED`` again on failure.
        Returns the started worker, or a :class:`CropFailure` when nothing
        could be scheduled.
        """
        failure = self._prepare_commit()
        if failure is not None:
            return failure
        mapping = map_crop_frame(self._layout, self._state)
        worker = CropRenderWorker(
            self._source,
            mapping.source_rect,
            self._options.output_size,
            fallback_to_full_image=self._options.fallback_to_full_image,
        )
        # Session slots first so callers observe the final phase.
        worker.signals.rendered.connect(self._on_async_rendered)
        worker.signals.failed.connect(self._on_async_failed)
        if on_rendered is not None:
            worker.signals.rendered.connect(on_rendered)
        if on_failed is not None:
            worker.signals.failed.connect(on_failed)
        self._phase = SessionPhase.RENDERING
        _LOGGER.info("Queued crop render for %s", mapping.source_rect)
        (pool or QThreadPool.globalInstance()).start(worker)
        return worker

    def _on_async_rendered(self, result: CropResult) -> None:
        if self._phase is not SessionPhase.RENDERING:
            return
        self._phase = SessionPhase.COMMITTED
        _LOGGER.info("Committed crop %s -> %dx%d", result.source_rect, *result.size)

    def _on_async_failed(self, failure: CropFailure) -> None:
        if self._phase is not SessionPhase.RENDERING:
            return
        self._phase = SessionPhase.SETTLED
        _LOGGER.warning("Crop render failed (%s): %s", failure.reason.value, failure.message)

    def cancel(self) -> None:
        """Abandon the session, discarding the interaction state."""
        if self._phase is SessionPhase.COMMITTED:
            raise SessionStateError("cannot cancel a committed crop session")
        self._state = InteractionState()
        self._phase = SessionPhase.CANCELLED

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _frame_viewport(self, viewport_size: Size) -> None:
        try:
            layout = CropLayout.build(self._source.upright_size, viewport_size, self._options.policy)
        except DegenerateGeometryError as exc:
            _LOGGER.debug("Crop session stays idle until layout settles: %s", exc)
            return
        self._layout = layout
        if self._options.eager_initial_clamp:
            self._state = reducer.settle(
                InteractionState.at(layout.coverage_scale), layout, self._options.max_zoom
            )
        else:
            self._state = InteractionState()
        self._phase = (
            SessionPhase.SETTLED if reducer.is_settled(self._state, layout) else SessionPhase.FRAMING
        )

    def _accepts_input(self, action: str) -> bool:
        if not self._phase.accepts_input:
            _LOGGER.warning("Ignoring %s on a %s session", action, self._phase.value)
            return False
        if self._layout is None:
            _LOGGER.debug("Ignoring %s before the first layout pass", action)
            return False
        return True

    def _set_live(self, state: InteractionState) -> None:
        self._state = state
        if state.is_gesture_active:
            self._phase = SessionPhase.INTERACTING
        elif reducer.is_settled(state, self._layout):
            self._phase = SessionPhase.SETTLED

    def _prepare_commit(self) -> CropFailure | None:
        if not self._phase.accepts_input:
            raise SessionStateError(f"cannot commit a {self._phase.value} crop session")
        if not self._source.is_decodable:
            return CropFailure(FailureReason.NO_DECODABLE_IMAGE, "source bitmap has no pixels")
        if self._layout is None:
            return CropFailure(
                FailureReason.DEGENERATE_GEOMETRY, "viewport or source has a zero dimension"
            )
        if self._phase is not SessionPhase.SETTLED:
            # Gestures finish synchronously for callers; fold any open stream in.
            self._state = reducer.settle(self._state, self._layout, self._options.max_zoom)
            self._phase = SessionPhase.SETTLED
        return None


def begin_session(
    source: SourceImage,
    viewport_size: Size,
    policy: CropFramePolicy | None = None,
    output_size: tuple[int, int] = DEFAULT_OUTPUT_SIZE,
    *,
    eager_initial_clamp: bool = DEFAULT_EAGER_INITIAL_CLAMP,
    max_zoom: float | None = DEFAULT_MAX_ZOOM,
    fallback_to_full_image: bool = False,
) -> CropSession:
    """Start a crop session for *source* displayed in *viewport_size*."""
    options = CropOptions(
        policy=policy or CropFramePolicy(),
        output_size=output_size,
        eager_initial_clamp=eager_initial_clamp,
        max_zoom=max_zoom,
        fallback_to_full_image=fallback_to_full_image,
    )
    return CropSession(source, viewport_size, options)


__all__ = ["CropOptions", "CropSession", "SessionPhase", "begin_session"]
