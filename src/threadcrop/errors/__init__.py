"""Custom exception hierarchy for threadcrop."""

from __future__ import annotations


class ThreadCropError(Exception):
    """Base class for all custom errors raised by threadcrop."""


# --- Geometry errors ---

class GeometryError(ThreadCropError):
    """Base class for crop geometry failures."""


class DegenerateGeometryError(GeometryError):
    """Raised when a source, viewport or crop frame has a zero-area dimension."""


# --- Rendering errors ---

class RenderError(ThreadCropError):
    """Base class for failures while producing the output bitmap."""


class NoDecodableImageError(RenderError):
    """Raised when the source bitmap cannot be rasterized."""


# --- Session errors ---

class SessionStateError(ThreadCropError):
    """Raised when a crop session is driven after it has terminated."""


# --- Settings errors ---

class SettingsError(ThreadCropError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""
