"""Crop frame policies and the resolver that places the frame in the viewport."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from ..config import DEFAULT_FRAME_FRACTION, DEFAULT_FRAME_MARGIN
from ..errors import DegenerateGeometryError
from .geometry import Point, Rect, Size, fit, min_coverage_scale


class FrameSizing(str, enum.Enum):
    """How the side of the square crop frame is derived from the viewport."""

    FRACTION = "fraction"
    MARGIN = "margin"


@dataclass(frozen=True)
class CropFramePolicy:
    """Static sizing rule for the square crop frame of one session."""

    sizing: FrameSizing = FrameSizing.FRACTION
    value: float = DEFAULT_FRAME_FRACTION

    @classmethod
    def fraction(cls, factor: float = DEFAULT_FRAME_FRACTION) -> "CropFramePolicy":
        return cls(FrameSizing.FRACTION, float(factor))

    @classmethod
    def margin(cls, margin: float = DEFAULT_FRAME_MARGIN) -> "CropFramePolicy":
        return cls(FrameSizing.MARGIN, float(margin))

    @classmethod
    def parse(cls, text: str) -> "CropFramePolicy":
        """Parse ``"fraction:0.7"`` or ``"margin:40"`` style policy strings."""
        kind, _, raw_value = text.partition(":")
        sizing = FrameSizing(kind.strip().lower())
        if not raw_value:
            default = DEFAULT_FRAME_FRACTION if sizing is FrameSizing.FRACTION else DEFAULT_FRAME_MARGIN
            return cls(sizing, default)
        return cls(sizing, float(raw_value))

    def side_for(self, viewport_size: Size) -> float:
        """Return the frame side length for *viewport_size*."""
        shorter = viewport_size.shorter_side
        if self.sizing is FrameSizing.FRACTION:
            return shorter * float(self.value)
        return shorter - float(self.value)


def resolve_crop_frame(viewport_size: Size, policy: CropFramePolicy) -> Rect:
    """Return the crop frame centered in *viewport_size* according to *policy*.

    Raises
    ------
    DegenerateGeometryError
        If the viewport is empty or the policy leaves no positive side length.
    """
    if viewport_size.is_empty():
        raise DegenerateGeometryError(f"viewport has a zero-area dimension: {viewport_size}")
    side = policy.side_for(viewport_size)
    if not side > 0.0:
        raise DegenerateGeometryError(
            f"crop frame policy {policy} leaves no room in viewport {viewport_size}"
        )
    center = Point(float(viewport_size.width) * 0.5, float(viewport_size.height) * 0.5)
    return Rect.centered(center, Size(side, side))


@dataclass(frozen=True)
class CropLayout:
    """Static geometry of a session for one viewport size.

    Bundles everything the reducer and the pixel mapper need that does not
    change while the user interacts: the viewport, the aspect-fit rendered
    size of the upright source, and the centered crop frame.
    """

    source_size: Size
    viewport_size: Size
    rendered_size: Size
    frame: Rect

    @classmethod
    def build(
        cls, source_size: Size, viewport_size: Size, policy: CropFramePolicy
    ) -> "CropLayout":
        frame = resolve_crop_frame(viewport_size, policy)
        return cls(
            source_size=source_size,
            viewport_size=viewport_size,
            rendered_size=fit(source_size, viewport_size),
            frame=frame,
        )

    @property
    def coverage_scale(self) -> float:
        return min_coverage_scale(self.rendered_size, self.frame.size)


__all__ = ["CropFramePolicy", "CropLayout", "FrameSizing", "resolve_crop_frame"]
