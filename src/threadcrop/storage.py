"""File-backed implementations of the capture and storage collaborators."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Optional

from PIL import Image

from .config import JPEG_QUALITY
from .interfaces import IImageSource, IImageStore
from .render.source import SourceImage

_LOGGER = logging.getLogger(__name__)


class FileImageSource(IImageSource):
    """Reads the photo from a path chosen up front (CLI, tests, drag-and-drop)."""

    def __init__(self, path: Path | None) -> None:
        self._path = path

    def capture(self) -> Optional[SourceImage]:
        if self._path is None:
            return None
        return SourceImage.open(self._path)


class DirectoryImageStore(IImageStore):
    """Stores each image as ``<uuid>.jpg`` under a root directory."""

    def __init__(self, root: Path, quality: int = JPEG_QUALITY) -> None:
        self._root = root
        self._quality = quality

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, identifier: str) -> Path:
        return self._root / f"{identifier}.jpg"

    def save(self, image: Image.Image) -> Optional[str]:
        identifier = str(uuid.uuid4()).upper()
        self._root.mkdir(parents=True, exist_ok=True)
        destination = self.path_for(identifier)
        try:
            image.convert("RGB").save(destination, "JPEG", quality=self._quality)
        except OSError as exc:
            _LOGGER.warning("Failed to write cropped image %s: %s", destination, exc)
            return None
        _LOGGER.debug("Stored cropped image %s", destination)
        return identifier

    def load(self, identifier: str) -> Optional[Image.Image]:
        path = self.path_for(identifier)
        if not path.is_file():
            return None
        with Image.open(path) as img:
            img.load()
            return img.copy()


__all__ = ["DirectoryImageStore", "FileImageSource"]
