"""
Pure geometry helpers for the interactive crop engine.

Every function here is stateless.  Sizes and offsets are expressed in
viewport units (device-independent points).  The *rendered size* is the
image's on-screen size at scale 1.0 under aspect-fit ("contain") semantics;
the user's zoom multiplies it and the offset shifts the image centre away
from the viewport centre.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..errors import DegenerateGeometryError


@dataclass(frozen=True)
class Size:
    """Width/height pair in viewport units or pixels."""

    width: float
    height: float

    @property
    def aspect(self) -> float:
        return float(self.width) / float(self.height)

    @property
    def shorter_side(self) -> float:
        return min(float(self.width), float(self.height))

    def is_empty(self) -> bool:
        """Return True when either dimension is zero, negative or not finite."""
        return not (
            math.isfinite(self.width)
            and math.isfinite(self.height)
            and self.width > 0.0
            and self.height > 0.0
        )

    def scaled(self, factor: float) -> "Size":
        return Size(float(self.width) * factor, float(self.height) * factor)


@dataclass(frozen=True)
class Point:
    """A point or translation vector in viewport units."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle described by its top-left origin and size."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def centered(cls, center: Point, size: Size) -> "Rect":
        return cls(
            center.x - size.width * 0.5,
            center.y - size.height * 0.5,
            float(size.width),
            float(size.height),
        )

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width * 0.5, self.y + self.height * 0.5)

    def contains_rect(self, other: "Rect", tolerance: float = 1e-6) -> bool:
        """Return True when *other* lies entirely inside this rectangle."""
        return (
            other.x >= self.x - tolerance
            and other.y >= self.y - tolerance
            and other.right <= self.right + tolerance
            and other.bottom <= self.bottom + tolerance
        )


def _require_non_empty(size: Size, label: str) -> None:
    if size.is_empty():
        raise DegenerateGeometryError(f"{label} has a zero-area dimension: {size}")


def fit(source_size: Size, viewport_size: Size) -> Size:
    """Return the aspect-fit size of *source_size* inside *viewport_size*.

    Wide sources are width-constrained, tall sources height-constrained, so the
    whole image is visible at scale 1.0.
    """
    _require_non_empty(source_size, "source")
    _require_non_empty(viewport_size, "viewport")
    source_aspect = source_size.aspect
    if source_aspect > viewport_size.aspect:
        width = float(viewport_size.width)
        return Size(width, width / source_aspect)
    height = float(viewport_size.height)
    return Size(height * source_aspect, height)


def min_coverage_scale(rendered_size: Size, frame_size: Size) -> float:
    """Return the smallest scale at which the rendered image covers the frame."""
    _require_non_empty(rendered_size, "rendered image")
    _require_non_empty(frame_size, "crop frame")
    return max(
        float(frame_size.width) / float(rendered_size.width),
        float(frame_size.height) / float(rendered_size.height),
    )


def max_offset(rendered_size: Size, scale: float, frame_size: Size) -> Point:
    """Return the per-axis offset magnitude that keeps the frame inside the image."""
    return Point(
        max(0.0, (float(rendered_size.width) * scale - float(frame_size.width)) * 0.5),
        max(0.0, (float(rendered_size.height) * scale - float(frame_size.height)) * 0.5),
    )


def clamp_offset(
    rendered_size: Size, scale: float, frame_size: Size, raw_offset: Point
) -> Point:
    """Bound *raw_offset* so the crop frame never samples outside the image."""
    limit = max_offset(rendered_size, scale, frame_size)
    return Point(
        max(-limit.x, min(limit.x, float(raw_offset.x))),
        max(-limit.y, min(limit.y, float(raw_offset.y))),
    )


def clamp_scale(
    rendered_size: Size,
    frame_size: Size,
    scale: float,
    max_zoom: float | None = None,
) -> float:
    """Raise *scale* to the coverage floor and cap it at ``floor * max_zoom``."""
    floor = min_coverage_scale(rendered_size, frame_size)
    if not math.isfinite(scale):
        return floor
    clamped = max(floor, float(scale))
    if max_zoom is not None and max_zoom >= 1.0:
        clamped = min(clamped, floor * float(max_zoom))
    return clamped


def clamp_state(
    rendered_size: Size,
    frame_size: Size,
    scale: float,
    offset: Point,
    max_zoom: float | None = None,
) -> tuple[float, Point]:
    """Return the settled ``(scale, offset)`` closest to the given pair."""
    settled_scale = clamp_scale(rendered_size, frame_size, scale, max_zoom)
    return settled_scale, clamp_offset(rendered_size, settled_scale, frame_size, offset)


def image_rect(viewport_size: Size, rendered_size: Size, scale: float, offset: Point) -> Rect:
    """Return the on-screen rectangle occupied by the scaled, offset image."""
    center = Point(
        float(viewport_size.width) * 0.5 + offset.x,
        float(viewport_size.height) * 0.5 + offset.y,
    )
    return Rect.centered(center, rendered_size.scaled(scale))


__all__ = [
    "Point",
    "Rect",
    "Size",
    "clamp_offset",
    "clamp_scale",
    "clamp_state",
    "fit",
    "image_rect",
    "max_offset",
    "min_coverage_scale",
]
