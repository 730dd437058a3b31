"""
Rasterise the committed crop into an output bitmap.

The renderer is a pure function of an immutable snapshot (source bitmap,
source-pixel rectangle and output size), which is what allows it to run on a
worker thread.  It never trusts the caller: the rectangle is clamped to the
upright source bounds before sampling.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Union

from PIL import Image, ImageOps

from ..crop.geometry import Size
from ..crop.pixel_mapper import PixelRect
from ..errors import DegenerateGeometryError, NoDecodableImageError
from .source import SourceImage

_LOGGER = logging.getLogger(__name__)

_CLIP_TOLERANCE = 1e-6


class FailureReason(str, enum.Enum):
    """Why a commit did not produce a bitmap."""

    DEGENERATE_GEOMETRY = "degenerate_geometry"
    NO_DECODABLE_IMAGE = "no_decodable_image"


@dataclass(frozen=True)
class CropResult:
    """The output bitmap and the exact source rectangle it was extracted from."""

    image: Image.Image
    source_rect: PixelRect
    sampled_rect: PixelRect
    clipped: bool = False
    degraded: bool = False

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size


@dataclass(frozen=True)
class CropFailure:
    """Explicit failure value returned instead of a :class:`CropResult`."""

    reason: FailureReason
    message: str = ""


CropOutcome = Union[CropResult, CropFailure]


def _output_mode(image: Image.Image) -> str:
    if image.mode in ("RGBA", "LA", "PA"):
        return "RGBA"
    if image.mode == "P" and "transparency" in image.info:
        return "RGBA"
    return "RGB"


def _rescale(rect: PixelRect, reported: Size, actual: tuple[int, int]) -> PixelRect:
    if reported.is_empty() or (reported.width, reported.height) == actual:
        return rect
    sx = actual[0] / float(reported.width)
    sy = actual[1] / float(reported.height)
    return PixelRect(rect.x * sx, rect.y * sy, rect.width * sx, rect.height * sy)


def _contain(image: Image.Image, output_size: tuple[int, int]) -> Image.Image:
    """Draw the whole *image* undistorted and centred on an output canvas."""
    mode = image.mode
    fill = (0, 0, 0, 0) if mode == "RGBA" else (0, 0, 0)
    canvas = Image.new(mode, output_size, fill)
    fitted = ImageOps.contain(image, output_size, Image.Resampling.LANCZOS)
    canvas.paste(
        fitted,
        ((output_size[0] - fitted.width) // 2, (output_size[1] - fitted.height) // 2),
    )
    return canvas


def render_crop(
    source: SourceImage,
    source_rect: PixelRect,
    output_size: tuple[int, int],
    *,
    fallback_to_full_image: bool = False,
) -> CropResult:
    """Return *source_rect* of the upright *source* resampled to *output_size*.

    Parameters
    ----------
    source:
        The session's source bitmap; orientation is normalised first.
    source_rect:
        Rectangle in upright source pixels, typically from the pixel mapper.
    output_size:
        Requested ``(width, height)`` of the output canvas.
    fallback_to_full_image:
        When the rectangle has no area, draw the whole source undistorted
        instead of failing.  The result is then flagged ``degraded``.

    Raises
    ------
    NoDecodableImageError
        If the source carries no usable pixel buffer.
    DegenerateGeometryError
        If the output size or the clamped rectangle has no area.
    """
    out_w, out_h = int(output_size[0]), int(output_size[1])
    if out_w <= 0 or out_h <= 0:
        raise DegenerateGeometryError(f"output size has no area: {output_size}")
    if not source.is_decodable:
        raise NoDecodableImageError("source bitmap has no decodable pixel buffer")

    try:
        upright = source.upright()
        upright = upright.convert(_output_mode(upright))
    except (OSError, ValueError) as exc:
        raise NoDecodableImageError(f"source bitmap could not be rasterised: {exc}") from exc

    # The reported size may differ from the decoded buffer (downsampled previews).
    requested = _rescale(source_rect, source.upright_size, upright.size)
    bounds = Size(upright.width, upright.height)
    sampled = requested.clamped(bounds)
    clipped = any(
        abs(a - b) > _CLIP_TOLERANCE for a, b in zip(sampled.as_box(), requested.as_box())
    )
    if clipped:
        _LOGGER.warning(
            "Crop rect %s exceeded source bounds %dx%d; clamped to %s",
            source_rect,
            upright.width,
            upright.height,
            sampled,
        )

    if sampled.width <= 0.0 or sampled.height <= 0.0:
        if not fallback_to_full_image:
            raise DegenerateGeometryError(f"crop rect has no area: {source_rect}")
        _LOGGER.warning("Crop rect %s has no area; drawing the full source instead", source_rect)
        return CropResult(
            image=_contain(upright, (out_w, out_h)),
            source_rect=source_rect,
            sampled_rect=PixelRect(0.0, 0.0, float(upright.width), float(upright.height)),
            clipped=clipped,
            degraded=True,
        )

    output = upright.resize((out_w, out_h), Image.Resampling.LANCZOS, box=sampled.as_box())
    return CropResult(
        image=output,
        source_rect=source_rect,
        sampled_rect=sampled,
        clipped=clipped,
    )


def render_outcome(
    source: SourceImage,
    source_rect: PixelRect,
    output_size: tuple[int, int],
    *,
    fallback_to_full_image: bool = False,
) -> CropOutcome:
    """Like :func:`render_crop` but report failures as :class:`CropFailure` values."""
    try:
        return render_crop(
            source,
            source_rect,
            output_size,
            fallback_to_full_image=fallback_to_full_image,
        )
    except NoDecodableImageError as exc:
        _LOGGER.error("Crop render failed: %s", exc)
        return CropFailure(FailureReason.NO_DECODABLE_IMAGE, str(exc))
    except DegenerateGeometryError as exc:
        _LOGGER.error("Crop render failed: %s", exc)
        return CropFailure(FailureReason.DEGENERATE_GEOMETRY, str(exc))


__all__ = [
    "CropFailure",
    "CropOutcome",
    "CropResult",
    "FailureReason",
    "render_crop",
    "render_outcome",
]
