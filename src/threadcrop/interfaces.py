from abc import ABC, abstractmethod
from typing import Optional

from PIL import Image

from .render.source import SourceImage


class IImageSource(ABC):
    """Capability that hands a decoded photo to a crop session."""

    @abstractmethod
    def capture(self) -> Optional[SourceImage]:
        """
        Acquire one photo (camera, library picker, file...).
        Returns None when the user cancelled the capture.
        """
        pass


class IImageStore(ABC):
    """Collaborator that persists cropped bitmaps."""

    @abstractmethod
    def save(self, image: Image.Image) -> Optional[str]:
        """
        Persist *image* and return an opaque identifier for the metadata form.
        Returns None if the image could not be encoded.
        """
        pass

    @abstractmethod
    def load(self, identifier: str) -> Optional[Image.Image]:
        """
        Return the image stored under *identifier*, e.g. to re-edit a crop.
        Returns None when nothing is stored under that identifier.
        """
        pass
