"""Worker that renders the committed crop off the UI thread."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QRunnable, Signal

from ..crop.pixel_mapper import PixelRect
from .renderer import CropFailure, CropResult, FailureReason, render_outcome
from .source import SourceImage

_LOGGER = logging.getLogger(__name__)


class CropRenderWorkerSignals(QObject):
    """Signals exposed by :class:`CropRenderWorker`.

    The signal container is kept separate from the runnable so slots execute on
    the thread that owns the session, regardless of which pool thread ran the
    job.
    """

    rendered = Signal(object)
    """Emitted with the :class:`CropResult` once the bitmap is ready."""

    failed = Signal(object)
    """Emitted with a :class:`CropFailure` if rendering could not complete."""


class CropRenderWorker(QRunnable):
    """Resample a crop snapshot without blocking gesture handling."""

    def __init__(
        self,
        source: SourceImage,
        source_rect: PixelRect,
        output_size: tuple[int, int],
        *,
        fallback_to_full_image: bool = False,
    ) -> None:
        super().__init__()
        self._source = source
        self._source_rect = source_rect
        self._output_size = output_size
        self._fallback = fallback_to_full_image
        self.signals = CropRenderWorkerSignals()

    @property
    def source_rect(self) -> PixelRect:
        """Return the rectangle this worker will extract."""

        return self._source_rect

    def run(self) -> None:  # type: ignore[override]
        """Execute the resample on a background thread."""

        try:
            outcome = render_outcome(
                self._source,
                self._source_rect,
                self._output_size,
                fallback_to_full_image=self._fallback,
            )
        except Exception as exc:
            # Always answer so the caller is never left waiting on a render.
            _LOGGER.exception("Crop render for %s failed", self._source_rect)
            self.signals.failed.emit(CropFailure(FailureReason.NO_DECODABLE_IMAGE, str(exc)))
            return
        if isinstance(outcome, CropResult):
            self.signals.rendered.emit(outcome)
        else:
            self.signals.failed.emit(outcome)


__all__ = ["CropRenderWorker", "CropRenderWorkerSignals"]
