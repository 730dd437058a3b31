"""Decoded source bitmaps and orientation normalisation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from ..crop.geometry import Size

_LOGGER = logging.getLogger(__name__)

# EXIF tag 0x0112.  Values follow the TIFF convention (1 = upright).
ORIENTATION_TAG = 0x0112

# Same transpose table ``ImageOps.exif_transpose`` uses, keyed by the tag value.
_ORIENTATION_TRANSPOSE: dict[int, Image.Transpose] = {
    2: Image.Transpose.FLIP_LEFT_RIGHT,
    3: Image.Transpose.ROTATE_180,
    4: Image.Transpose.FLIP_TOP_BOTTOM,
    5: Image.Transpose.TRANSPOSE,
    6: Image.Transpose.ROTATE_270,
    7: Image.Transpose.TRANSVERSE,
    8: Image.Transpose.ROTATE_90,
}


def normalise_orientation_tag(value: object) -> int:
    """Return *value* as a valid orientation tag, defaulting to upright."""
    try:
        tag = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 1
    return tag if 1 <= tag <= 8 else 1


def swaps_axes(orientation: int) -> bool:
    """Return True when *orientation* stores the image rotated by 90 degrees."""
    return orientation in (5, 6, 7, 8)


def apply_orientation(image: Image.Image, orientation: int) -> Image.Image:
    """Return *image* with its pixels rearranged into upright order."""
    method = _ORIENTATION_TRANSPOSE.get(normalise_orientation_tag(orientation))
    if method is None:
        return image
    return image.transpose(method)


@dataclass(frozen=True)
class SourceImage:
    """A bitmap handed to a crop session together with its orientation tag.

    ``image`` holds the pixels exactly as stored; it may be ``None`` when the
    capture collaborator could not decode anything, in which case ``width``
    and ``height`` still describe the reported dimensions.
    """

    image: Optional[Image.Image]
    width: int
    height: int
    orientation: int = 1

    @classmethod
    def from_image(cls, image: Image.Image, orientation: int | None = None) -> "SourceImage":
        """Wrap a Pillow image, reading the EXIF orientation when not given."""
        if orientation is None:
            orientation = image.getexif().get(ORIENTATION_TAG, 1)
        return cls(image, image.width, image.height, normalise_orientation_tag(orientation))

    @classmethod
    def open(cls, path: Path) -> "SourceImage":
        """Decode *path* with Pillow, keeping the raw pixel order."""
        try:
            with Image.open(path) as img:
                img.load()
                return cls.from_image(img.copy(), img.getexif().get(ORIENTATION_TAG, 1))
        except (OSError, UnidentifiedImageError):
            _LOGGER.exception("Pillow failed to decode source image %s", path)
            return cls(None, 0, 0)

    @property
    def stored_size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def upright_size(self) -> Size:
        """Return the size of the image as displayed to the user."""
        if swaps_axes(self.orientation):
            return Size(self.height, self.width)
        return Size(self.width, self.height)

    @property
    def is_decodable(self) -> bool:
        return self.image is not None and self.image.width > 0 and self.image.height > 0

    def upright(self) -> Image.Image:
        """Return the pixel buffer in upright order."""
        if self.image is None:
            raise ValueError("source image has no pixel buffer")
        return apply_orientation(self.image, self.orientation)


__all__ = [
    "ORIENTATION_TAG",
    "SourceImage",
    "apply_orientation",
    "normalise_orientation_tag",
    "swaps_axes",
]
