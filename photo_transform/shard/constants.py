"""Project constants for guidance parsing, pixel engines and pacing.

Numeric ranges here are the documented bounds of every guidance field; the
guidance models clamp into them. Keep runtime-tunable values (quotas, model
names, JPEG quality) in ``settings.py`` instead.
"""

from __future__ import annotations

from typing import Final

# ----------------------------- Guidance ranges ------------------------------ #

ADJUSTMENT_RANGE: Final[tuple[float, float]] = (-100.0, 100.0)
SHARPNESS_RANGE: Final[tuple[float, float]] = (0.0, 200.0)
PERCENT_RANGE: Final[tuple[float, float]] = (0.0, 100.0)
UNIT_RANGE: Final[tuple[float, float]] = (0.0, 1.0)

# Colorization defaults, used when the model omits or garbles a value.
DEFAULT_COLOR_PALETTE: Final[tuple[str, ...]] = ("#8B4513", "#228B22", "#4169E1", "#DC143C", "#FFD700")
DEFAULT_SKY_COLOR: Final[str] = "#87CEEB"
DEFAULT_SKIN_TONE: Final[str] = "#F1C27D"
DEFAULT_VEGETATION_COLOR: Final[str] = "#228B22"

# Object removal defaults.
DEFAULT_BOX_SIZE: Final[float] = 0.1
DEFAULT_DOMINANT_COLOR: Final[str] = "#FFFFFF"
AUTO_DETECT_TARGET: Final[str] = "auto-detect"

DEFAULT_STYLE_INTENSITY: Final[float] = 0.8

# ------------------------------- Pixel ops ---------------------------------- #

MAX_BLUR_RADIUS: Final[int] = 10
EDGE_THRESHOLD: Final[int] = 30
EDGE_BOOST: Final[float] = 0.3

GRAYSCALE_SAMPLE_COUNT: Final[int] = 100
# A sample is "colored" when its max channel deviation exceeds this value.
GRAYSCALE_CHANNEL_TOLERANCE: Final[int] = 10
GRAYSCALE_COLORED_FRACTION: Final[float] = 0.05

NATURAL_BLEND_WEIGHT: Final[float] = 0.7

# Tone multipliers applied per RGB channel during colorization.
TONE_MULTIPLIERS: Final[dict[str, tuple[float, float, float]]] = {
    "warm": (1.1, 1.0, 0.9),
    "cool": (0.9, 1.0, 1.1),
    "neutral": (1.0, 1.0, 1.0),
}

GRADIENT_RING: Final[int] = 20
CONTENT_AWARE_RADIUS: Final[int] = 30
CONTENT_AWARE_STEP: Final[int] = 3
MID_GRAY: Final[tuple[int, int, int]] = (128, 128, 128)

# ----------------------------- Output naming -------------------------------- #

PREFIX_COLORIZED: Final[str] = "colorized"
PREFIX_ENHANCED: Final[str] = "enhanced"
PREFIX_OBJECT_REMOVED: Final[str] = "object_removed"
PREFIX_STYLE: Final[str] = "style"

DEFAULT_MIME: Final[str] = "image/png"
DOWNLOAD_TIMEOUT_SECONDS: Final[float] = 30.0
JPEG_MIME: Final[str] = "image/jpeg"

# -------------------------------- Errors ------------------------------------ #

ERROR_CODE_INVALID_IMAGE: Final[str] = "invalid_image"
ERROR_CODE_IMAGE_TOO_LARGE: Final[str] = "image_too_large"
ERROR_CODE_ALREADY_COLORED: Final[str] = "already_colored"
ERROR_CODE_TARGET_NOT_FOUND: Final[str] = "target_not_found"
ERROR_CODE_CONFIGURATION: Final[str] = "configuration_error"

# Polling terminal codes
ERROR_CODE_GENERATION_FAILED: Final[str] = "generation_failed"
ERROR_CODE_UNKNOWN_STATUS: Final[str] = "unknown_status"
ERROR_CODE_POLL_ERROR: Final[str] = "poll_error"
ERROR_CODE_DOWNLOAD_FAILED: Final[str] = "download_failed"
ERROR_CODE_TIMEOUT: Final[str] = "timeout"
ERROR_CODE_CANCELLED: Final[str] = "cancelled"

GENERATION_TIMEOUT_MESSAGE: Final[str] = "Generation timeout - please check status manually"
