"""threadcrop: pan-and-zoom crop engine for wardrobe photos."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
