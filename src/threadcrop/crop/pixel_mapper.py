"""
Mapping from the on-screen crop frame to source pixel coordinates.

The image is drawn as a rectangle of size ``rendered_size * scale`` centred on
``viewport_centre + offset``.  Viewport points map to upright source pixels
through a single affine transform, so the frame the user framed and the
pixels that get extracted can never drift apart.

All source coordinates here refer to the *upright* image, i.e. after the
EXIF orientation has been applied.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..errors import DegenerateGeometryError
from .frame import CropLayout
from .geometry import Point, Rect, Size, image_rect
from .reducer import InteractionState


@dataclass(frozen=True)
class NormalisedRect:
    """Axis-aligned rectangle described in normalised [0, 1] image coordinates."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return max(0.0, float(self.right) - float(self.left))

    @property
    def height(self) -> float:
        return max(0.0, float(self.bottom) - float(self.top))

    def is_inside_unit(self, tolerance: float = 1e-9) -> bool:
        return (
            self.left >= -tolerance
            and self.top >= -tolerance
            and self.right <= 1.0 + tolerance
            and self.bottom <= 1.0 + tolerance
        )


@dataclass(frozen=True)
class PixelRect:
    """Sub-pixel accurate rectangle in upright source pixels."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return float(self.width) * float(self.height)

    def as_box(self) -> tuple[float, float, float, float]:
        """Return ``(left, top, right, bottom)`` as used by Pillow."""
        return (self.x, self.y, self.right, self.bottom)

    def clamped(self, bounds: Size) -> "PixelRect":
        """Return the intersection of this rect with ``(0, 0, bounds)``."""
        left = max(0.0, min(float(bounds.width), self.x))
        top = max(0.0, min(float(bounds.height), self.y))
        right = max(left, min(float(bounds.width), self.right))
        bottom = max(top, min(float(bounds.height), self.bottom))
        return PixelRect(left, top, right - left, bottom - top)


@dataclass(frozen=True)
class CropMapping:
    """Result of mapping the crop frame through the committed transform."""

    normalised: NormalisedRect
    source_rect: PixelRect


def viewport_to_source_matrix(
    layout: CropLayout, scale: float, offset: Point
) -> np.ndarray:
    """Return the 3x3 affine matrix taking viewport points to source pixels."""
    if not scale > 0.0:
        raise DegenerateGeometryError(f"scale must be positive, got {scale!r}")
    placed = image_rect(layout.viewport_size, layout.rendered_size, scale, offset)
    sx = float(layout.source_size.width) / placed.width
    sy = float(layout.source_size.height) / placed.height
    return np.array(
        [
            [sx, 0.0, -placed.x * sx],
            [0.0, sy, -placed.y * sy],
            [0.0, 0.0, 1.0],
        ],
        dtype=np.float64,
    )


def _apply(matrix: np.ndarray, x: float, y: float) -> tuple[float, float]:
    mapped = matrix @ np.array([x, y, 1.0], dtype=np.float64)
    return float(mapped[0]), float(mapped[1])


def map_crop_frame(layout: CropLayout, state: InteractionState) -> CropMapping:
    """Return the normalised and source-pixel rectangles under the crop frame."""
    matrix = viewport_to_source_matrix(layout, state.scale, state.offset)
    frame = layout.frame
    left, top = _apply(matrix, frame.x, frame.y)
    right, bottom = _apply(matrix, frame.right, frame.bottom)
    source_w = float(layout.source_size.width)
    source_h = float(layout.source_size.height)
    normalised = NormalisedRect(
        left / source_w,
        top / source_h,
        right / source_w,
        bottom / source_h,
    )
    return CropMapping(normalised, PixelRect(left, top, right - left, bottom - top))


def transform_for_source_rect(layout: CropLayout, source_rect: PixelRect) -> InteractionState:
    """Return the state whose crop frame maps exactly onto *source_rect*.

    The rect must share the frame's aspect ratio; the horizontal extent decides
    the scale.  Used to restore a previous crop when a photo is edited again.
    """
    if not (source_rect.width > 0.0 and source_rect.height > 0.0):
        raise DegenerateGeometryError(f"source rect has no area: {source_rect}")
    frame = layout.frame
    source_w = float(layout.source_size.width)
    scale = (frame.width * source_w) / (source_rect.width * float(layout.rendered_size.width))
    inverse = np.linalg.inv(viewport_to_source_matrix(layout, scale, Point()))
    origin_x, origin_y = _apply(inverse, source_rect.x, source_rect.y)
    offset = Point(frame.x - origin_x, frame.y - origin_y)
    return InteractionState.at(scale, offset)


def frame_inside_image(layout: CropLayout, state: InteractionState) -> bool:
    """Return True when the crop frame samples only inside the scaled image."""
    placed: Rect = image_rect(layout.viewport_size, layout.rendered_size, state.scale, state.offset)
    return placed.contains_rect(layout.frame)


__all__ = [
    "CropMapping",
    "NormalisedRect",
    "PixelRect",
    "frame_inside_image",
    "map_crop_frame",
    "transform_for_source_rect",
    "viewport_to_source_matrix",
]
