"""Deterministic image primitives over RGBA numpy arrays.

Every function takes an ``(H, W, 4)`` uint8 array and returns a new array of
the same shape; inputs are never modified. Colour math runs in float and is
rounded and clipped back to uint8 once per call. Alpha passes through
untouched unless a function says otherwise.
"""

from __future__ import annotations

import colorsys
import zlib

import numpy as np

from ..shard import constants as C

# Luminance weights for the saturation matrix (linear-light approximation).
_SAT_WEIGHTS = np.array([0.213, 0.715, 0.072])
# Rec. 601 weights for perceived luminance.
_LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])

_SEPIA = np.array(
    [
        [0.393, 0.769, 0.189],
        [0.349, 0.686, 0.168],
        [0.272, 0.534, 0.131],
    ]
)


# ------------------------------- helpers ------------------------------------ #


def ensure_rgba(image: np.ndarray) -> np.ndarray:
    """Validate an image array and return it as an RGBA uint8 copy.

    Accepts ``(H, W)`` grayscale, ``(H, W, 3)`` RGB or ``(H, W, 4)`` RGBA.
    """
    arr = np.asarray(image)
    if arr.dtype != np.uint8:
        raise ValueError(f"Expected uint8 pixels, got {arr.dtype}")
    if arr.ndim == 2:
        arr = np.repeat(arr[:, :, None], 3, axis=2)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(f"Expected an (H, W, 3|4) image, got shape {arr.shape}")
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise ValueError("Image has no pixels")
    if arr.shape[2] == 3:
        alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
        return np.concatenate([arr, alpha], axis=2)
    return arr.copy()


def to_uint8(values: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def with_alpha(rgb: np.ndarray, alpha: np.ndarray) -> np.ndarray:
    """Join an ``(H, W, 3)`` colour plane (any numeric dtype) with an alpha plane."""
    return np.dstack([to_uint8(rgb), alpha])


def clamp_intensity(intensity: float) -> float:
    return float(min(max(intensity, 0.0), 1.0))


def blend(original: np.ndarray, processed: np.ndarray, intensity: float) -> np.ndarray:
    """Linear interpolation from ``original`` (0) to ``processed`` (1)."""
    i = clamp_intensity(intensity)
    if i == 0.0:
        return original.copy()
    if i == 1.0:
        return processed.copy()
    mixed = original.astype(np.float32) * (1.0 - i) + processed.astype(np.float32) * i
    return to_uint8(mixed)


def luminance(image: np.ndarray) -> np.ndarray:
    """Per-pixel Rec. 601 luminance as an ``(H, W)`` int array in 0..255."""
    return np.rint(image[..., :3].astype(np.float64) @ _LUMA_WEIGHTS).astype(np.int32)


# ---------------------------- colour matrices ------------------------------- #


def saturation_matrix(saturation: float) -> np.ndarray:
    inv = 1.0 - saturation
    m = np.tile(_SAT_WEIGHTS * inv, (3, 1))
    m[np.diag_indices(3)] += saturation
    return m


def apply_color_matrix(image: np.ndarray, matrix: np.ndarray, offset: float = 0.0) -> np.ndarray:
    rgb = image[..., :3].astype(np.float64) @ np.asarray(matrix, dtype=np.float64).T + offset
    return with_alpha(rgb, image[..., 3])


def color_matrix_adjust(
    image: np.ndarray,
    saturation: float = 1.0,
    contrast: float = 1.0,
    brightness: float = 1.0,
    intensity: float = 1.0,
) -> np.ndarray:
    """Saturation, contrast and brightness adjustment blended by ``intensity``.

    ``saturation`` and ``contrast`` are multipliers (1.0 = unchanged). Contrast
    pivots on mid-grey. ``brightness`` 1.0 is unchanged; each 0.1 above or
    below shifts channels by 25.5.
    """
    rgb = image[..., :3].astype(np.float64) @ saturation_matrix(saturation).T
    rgb = (rgb - 127.5) * contrast + 127.5 + (brightness - 1.0) * 255.0
    return blend(image, with_alpha(rgb, image[..., 3]), intensity)


def desaturate(image: np.ndarray, intensity: float = 1.0) -> np.ndarray:
    return color_matrix_adjust(image, saturation=0.0, intensity=intensity)


def sepia_matrix(intensity: float = 1.0) -> np.ndarray:
    """Classic sepia matrix blended with identity by ``intensity``."""
    i = clamp_intensity(intensity)
    return np.eye(3) * (1.0 - i) + _SEPIA * i


def apply_sepia(image: np.ndarray, intensity: float = 1.0) -> np.ndarray:
    return apply_color_matrix(image, sepia_matrix(intensity))


# ------------------------------ spatial ops --------------------------------- #


def box_blur(image: np.ndarray, radius: float) -> np.ndarray:
    """Mean over a ``(2r+1)^2`` window with edge replication.

    ``radius`` is rounded and clamped to ``[0, MAX_BLUR_RADIUS]``; a summed-area
    table keeps the cost independent of radius.
    """
    r = min(max(int(round(radius)), 0), C.MAX_BLUR_RADIUS)
    if r == 0:
        return image.copy()
    h, w = image.shape[:2]
    k = 2 * r + 1
    padded = np.pad(image[..., :3].astype(np.float64), ((r, r), (r, r), (0, 0)), mode="edge")
    sat = np.pad(padded.cumsum(axis=0).cumsum(axis=1), ((1, 0), (1, 0), (0, 0)))
    total = sat[k : k + h, k : k + w] - sat[0:h, k : k + w] - sat[k : k + h, 0:w] + sat[0:h, 0:w]
    return with_alpha(total / (k * k), image[..., 3])


def quantize_colors(image: np.ndarray, levels: int, intensity: float = 1.0) -> np.ndarray:
    """Bucket each channel into ``levels`` evenly spaced steps.

    ``levels`` is clamped to ``[2, 256]``; 256 levels is the identity.
    """
    levels = min(max(int(levels), 2), 256)
    if levels == 256:
        return image.copy()
    step = 256 // levels
    rgb = (image[..., :3] // step) * step
    return blend(image, with_alpha(rgb, image[..., 3]), intensity)


def detect_edges(image: np.ndarray) -> np.ndarray:
    """Edge strength map: luminance difference to the right and lower neighbours."""
    lum = luminance(image)
    strength = np.zeros_like(lum)
    strength[:, :-1] += np.abs(lum[:, :-1] - lum[:, 1:])
    strength[:-1, :] += np.abs(lum[:-1, :] - lum[1:, :])
    return strength


def enhance_edges(
    image: np.ndarray,
    intensity: float = 1.0,
    threshold: int = C.EDGE_THRESHOLD,
    boost: float = C.EDGE_BOOST,
) -> np.ndarray:
    """Brighten pixels whose edge strength exceeds ``threshold``."""
    factor = 1.0 + boost * clamp_intensity(intensity)
    mask = detect_edges(image) > threshold
    rgb = image[..., :3].astype(np.float64)
    rgb[mask] *= factor
    return with_alpha(rgb, image[..., 3])


# ------------------------------- analysis ----------------------------------- #


def grayscale_detect(
    image: np.ndarray,
    sample_count: int = C.GRAYSCALE_SAMPLE_COUNT,
    rng: np.random.Generator | int | None = None,
) -> bool:
    """Statistical grayscale test over randomly sampled pixels.

    A sample counts as coloured when its largest channel difference exceeds
    ``GRAYSCALE_CHANNEL_TOLERANCE``. The image is grayscale when fewer than 5%
    of samples are coloured. Results near that margin can differ between calls
    unless ``rng`` is seeded.
    """
    if sample_count <= 0:
        raise ValueError("sample_count must be positive")
    h, w = image.shape[:2]
    gen = np.random.default_rng(rng)
    ys = gen.integers(0, h, size=sample_count)
    xs = gen.integers(0, w, size=sample_count)
    samples = image[ys, xs, :3].astype(np.int16)
    deviation = samples.max(axis=1) - samples.min(axis=1)
    colored = int(np.count_nonzero(deviation > C.GRAYSCALE_CHANNEL_TOLERANCE))
    return colored / sample_count < C.GRAYSCALE_COLORED_FRACTION


# ------------------------------ compositing --------------------------------- #


def alpha_composite(base: np.ndarray, overlay: np.ndarray) -> np.ndarray:
    """Porter-Duff "over": ``overlay`` on top of ``base`` (straight alpha)."""
    if base.shape != overlay.shape:
        raise ValueError(f"Shape mismatch: {base.shape} vs {overlay.shape}")
    src_a = overlay[..., 3:4].astype(np.float64) / 255.0
    dst_a = base[..., 3:4].astype(np.float64) / 255.0
    out_a = src_a + dst_a * (1.0 - src_a)
    numerator = overlay[..., :3] * src_a + base[..., :3] * dst_a * (1.0 - src_a)
    rgb = np.divide(numerator, out_a, out=np.zeros_like(numerator), where=out_a > 0)
    result = np.dstack([to_uint8(rgb), to_uint8(out_a[..., 0] * 255.0)])
    # Fully transparent overlay pixels leave the base untouched
    return np.where(src_a > 0, result, base)


def hue_from_seed(seed: object, saturation: float = 0.6, value: float = 0.9) -> tuple[int, int, int]:
    """Stable RGB colour derived from any seed value (CRC32 of its string form)."""
    hue = (zlib.crc32(str(seed).encode("utf-8")) % 360) / 360.0
    r, g, b = colorsys.hsv_to_rgb(hue, saturation, value)
    return int(round(r * 255)), int(round(g * 255)), int(round(b * 255))


__all__ = [
    "ensure_rgba",
    "to_uint8",
    "with_alpha",
    "clamp_intensity",
    "blend",
    "luminance",
    "saturation_matrix",
    "apply_color_matrix",
    "color_matrix_adjust",
    "desaturate",
    "sepia_matrix",
    "apply_sepia",
    "box_blur",
    "quantize_colors",
    "detect_edges",
    "enhance_edges",
    "grayscale_detect",
    "alpha_composite",
    "hue_from_seed",
]
