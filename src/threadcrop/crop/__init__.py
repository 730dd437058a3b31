"""
Interactive crop engine.

Pure geometry, the gesture reducer and the pixel mapper live here; the
session and its Qt controller are imported from their own modules.
"""

from .frame import CropFramePolicy, CropLayout, FrameSizing, resolve_crop_frame
from .geometry import (
    Point,
    Rect,
    Size,
    clamp_offset,
    clamp_scale,
    fit,
    image_rect,
    max_offset,
    min_coverage_scale,
)
from .pixel_mapper import CropMapping, NormalisedRect, PixelRect, map_crop_frame
from .reducer import InteractionState

__all__ = [
    "CropFramePolicy",
    "CropLayout",
    "CropMapping",
    "FrameSizing",
    "InteractionState",
    "NormalisedRect",
    "PixelRect",
    "Point",
    "Rect",
    "Size",
    "clamp_offset",
    "clamp_scale",
    "fit",
    "image_rect",
    "map_crop_frame",
    "max_offset",
    "min_coverage_scale",
    "resolve_crop_frame",
]
