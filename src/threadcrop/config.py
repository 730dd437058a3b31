"""Default configuration values for threadcrop."""

from __future__ import annotations

from typing import Final

# Output canvas used by the add-item flow.  Pixel density of the output is
# independent of the on-screen crop frame, so the renderer always resamples.
DEFAULT_OUTPUT_SIZE: Final[tuple[int, int]] = (1080, 1080)

# Crop frame sizing rules observed across the photo flows: a square occupying a
# fraction of the shorter viewport side, or the shorter side minus a margin.
DEFAULT_FRAME_FRACTION: Final[float] = 0.7
DEFAULT_FRAME_MARGIN: Final[float] = 40.0

# Zoom ceiling expressed as a multiple of the coverage scale.  ``None`` in the
# settings file disables the ceiling entirely.
DEFAULT_MAX_ZOOM: Final[float] = 5.0

# When true the session clamps to the coverage scale as soon as the frame is
# known; otherwise it starts at scale 1.0 and settles on the first gesture end.
DEFAULT_EAGER_INITIAL_CLAMP: Final[bool] = True

# Floating point slack used when comparing settled states.
GEOMETRY_EPSILON: Final[float] = 1e-9

# ---------------------------------------------------------------------------
# Settle animation
# ---------------------------------------------------------------------------

SETTLE_ANIMATION_DURATION_SEC: Final[float] = 0.3
SETTLE_ANIMATION_INTERVAL_MS: Final[int] = 16

# ---------------------------------------------------------------------------
# Overlay appearance
# ---------------------------------------------------------------------------

OVERLAY_DIM_OPACITY: Final[float] = 0.6
OVERLAY_BORDER_WIDTH: Final[float] = 1.0
OVERLAY_GRID_OPACITY: Final[float] = 0.5
OVERLAY_GRID_WIDTH: Final[float] = 0.5
OVERLAY_GRID_DIVISIONS: Final[int] = 3

# ---------------------------------------------------------------------------
# Output encoding
# ---------------------------------------------------------------------------

JPEG_QUALITY: Final[int] = 80
