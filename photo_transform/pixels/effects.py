"""Stylistic effects composed from the primitives in ``ops``.

Each effect takes an ``intensity`` in ``[0, 1]`` with the same contract as the
primitives: 0 returns the input unchanged and larger values only increase the
effect's magnitude. Effects that scatter marks take a ``numpy`` random
``Generator`` so callers can make them reproducible.
"""

from __future__ import annotations

import math

import numpy as np

from . import ops

_DIRECTION_ANGLES: dict[str, float | None] = {
    "horizontal": 0.0,
    "vertical": math.pi / 2,
    "diagonal": math.pi / 4,
    "circular": None,
    "random": None,
}


def _disc(radius: int) -> np.ndarray:
    yy, xx = np.mgrid[-radius : radius + 1, -radius : radius + 1]
    return xx * xx + yy * yy <= radius * radius


def _stamp(alpha: np.ndarray, rgb: np.ndarray, cy: int, cx: int, radius: int, color: np.ndarray, value: int) -> None:
    """Paint a filled disc into an overlay (in place, clipped to the canvas)."""
    h, w = alpha.shape
    y0, y1 = max(cy - radius, 0), min(cy + radius + 1, h)
    x0, x1 = max(cx - radius, 0), min(cx + radius + 1, w)
    if y0 >= y1 or x0 >= x1:
        return
    mask = _disc(radius)[y0 - (cy - radius) : y1 - (cy - radius), x0 - (cx - radius) : x1 - (cx - radius)]
    alpha[y0:y1, x0:x1][mask] = value
    rgb[y0:y1, x0:x1][mask] = color


def _mark_count(image: np.ndarray, intensity: float, per_pixels: int, minimum: int) -> int:
    h, w = image.shape[:2]
    return int(round(ops.clamp_intensity(intensity) * max(minimum, (h * w) // per_pixels)))


def stipple(
    image: np.ndarray,
    intensity: float,
    rng: np.random.Generator,
    color: tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Scatter translucent dots over the image (impressionist brush texture)."""
    count = _mark_count(image, intensity, per_pixels=400, minimum=100)
    if count == 0:
        return image.copy()
    h, w = image.shape[:2]
    overlay = np.zeros_like(image)
    alpha = overlay[..., 3]
    rgb = overlay[..., :3]
    value = int(round(ops.clamp_intensity(intensity) * 50))
    paint = np.array(color, dtype=np.uint8)
    for cy, cx, radius in zip(rng.integers(0, h, count), rng.integers(0, w, count), rng.integers(2, 8, count)):
        _stamp(alpha, rgb, int(cy), int(cx), int(radius), paint, value)
    return ops.alpha_composite(image, overlay)


def brush_strokes(
    image: np.ndarray,
    intensity: float,
    rng: np.random.Generator,
    width: int = 4,
    direction: str = "random",
    palette: list[tuple[int, int, int]] | None = None,
) -> np.ndarray:
    """Paint short straight strokes coloured from the image (or ``palette``)."""
    count = _mark_count(image, intensity, per_pixels=2000, minimum=50)
    if count == 0:
        return image.copy()
    h, w = image.shape[:2]
    overlay = np.zeros_like(image)
    alpha = overlay[..., 3]
    rgb = overlay[..., :3]
    value = int(round(ops.clamp_intensity(intensity) * 100))
    radius = max(1, width // 2)
    length = width * 5
    fixed_angle = _DIRECTION_ANGLES.get(direction)
    for _ in range(count):
        cy, cx = int(rng.integers(0, h)), int(rng.integers(0, w))
        if palette:
            paint = np.array(palette[int(rng.integers(0, len(palette)))], dtype=np.uint8)
        else:
            paint = image[cy, cx, :3]
        if direction == "circular":
            # Tangent to a circle around the image centre
            angle = math.atan2(cy - h / 2, cx - w / 2) + math.pi / 2
        elif fixed_angle is None:
            angle = float(rng.uniform(0, math.pi))
        else:
            angle = fixed_angle
        dy, dx = math.sin(angle), math.cos(angle)
        for t in range(-length // 2, length // 2 + 1, radius):
            _stamp(alpha, rgb, int(round(cy + t * dy)), int(round(cx + t * dx)), radius, paint, value)
    return ops.alpha_composite(image, overlay)


def geometric_fragments(image: np.ndarray, intensity: float, rng: np.random.Generator) -> np.ndarray:
    """Rebuild the image from flat cells sampled at jittered positions."""
    if ops.clamp_intensity(intensity) == 0.0:
        return image.copy()
    h, w = image.shape[:2]
    cell = max(4, min(h, w) // 8)
    out = image.copy()
    for y in range(0, h, cell):
        for x in range(0, w, cell):
            sy = int(np.clip(y + rng.integers(-cell // 2, cell // 2 + 1), 0, h - 1))
            sx = int(np.clip(x + rng.integers(-cell // 2, cell // 2 + 1), 0, w - 1))
            patch = image[sy : sy + cell, sx : sx + cell, :3]
            out[y : y + cell, x : x + cell, :3] = ops.to_uint8(patch.reshape(-1, 3).mean(axis=0))
    return ops.blend(image, out, intensity)


def glow(image: np.ndarray, intensity: float, radius: int = 4) -> np.ndarray:
    """Screen-blend a blurred copy over the image."""
    base = image[..., :3].astype(np.float64)
    soft = ops.box_blur(image, radius)[..., :3].astype(np.float64)
    screen = 255.0 - (255.0 - base) * (255.0 - soft) / 255.0
    return ops.blend(image, ops.with_alpha(screen, image[..., 3]), intensity)


def halftone(image: np.ndarray, intensity: float, cell: int = 6) -> np.ndarray:
    """Darken dots on a regular grid; dot size follows local darkness."""
    h, w = image.shape[:2]
    lum = ops.luminance(image).astype(np.float64)
    ph, pw = -h % cell, -w % cell
    blocks = np.pad(lum, ((0, ph), (0, pw)), mode="edge").reshape((h + ph) // cell, cell, (w + pw) // cell, cell)
    darkness = 1.0 - blocks.mean(axis=(1, 3)) / 255.0
    radius = np.kron(darkness, np.ones((cell, cell)))[:h, :w] * (cell / 2.0)
    yy, xx = np.mgrid[0:h, 0:w]
    centre = (cell - 1) / 2.0
    dist = np.hypot(yy % cell - centre, xx % cell - centre)
    rgb = image[..., :3].astype(np.float64)
    rgb[dist <= radius] *= 0.4
    return ops.blend(image, ops.with_alpha(rgb, image[..., 3]), intensity)


def color_field(image: np.ndarray, intensity: float) -> np.ndarray:
    """Broad saturated colour areas with detail blurred away."""
    field = ops.color_matrix_adjust(ops.box_blur(image, 8), saturation=1.4)
    return ops.blend(image, field, intensity)


def simplify(image: np.ndarray, intensity: float, levels: int = 4) -> np.ndarray:
    """Flatten detail: light blur followed by coarse quantization."""
    return ops.blend(image, ops.quantize_colors(ops.box_blur(image, 2), levels), intensity)


def bleed(image: np.ndarray, intensity: float) -> np.ndarray:
    """Let colour run across edges the way wet pigment does."""
    blurred = ops.box_blur(image, 3)
    edges = ops.detect_edges(image) > 10
    out = np.where(edges[..., None], blurred, image)
    return ops.blend(image, out, intensity)


def wash(image: np.ndarray, intensity: float, paper: float = 0.25) -> np.ndarray:
    """Thin the paint towards white paper."""
    rgb = image[..., :3].astype(np.float64)
    washed = rgb + (255.0 - rgb) * paper
    return ops.blend(image, ops.with_alpha(washed, image[..., 3]), intensity)


def oil_texture(image: np.ndarray, intensity: float, rng: np.random.Generator) -> np.ndarray:
    """Thick paint: quantized colour with fine relief noise."""
    painted = ops.box_blur(ops.quantize_colors(image, 24), 1)[..., :3].astype(np.float64)
    relief = rng.normal(0.0, 6.0, size=image.shape[:2])[..., None]
    return ops.blend(image, ops.with_alpha(painted + relief, image[..., 3]), intensity)


def sketch_lines(image: np.ndarray, intensity: float) -> np.ndarray:
    """Dark pencil lines along edges on a light ground."""
    strength = ops.detect_edges(image).astype(np.float64)
    pencil = 255.0 - np.clip(strength * 2.0, 0.0, 255.0)
    rgb = np.repeat(pencil[..., None], 3, axis=2)
    return ops.blend(image, ops.with_alpha(rgb, image[..., 3]), intensity)


def film_grain(image: np.ndarray, intensity: float, rng: np.random.Generator, sigma: float = 18.0) -> np.ndarray:
    noise = rng.normal(0.0, sigma, size=image.shape[:2])[..., None]
    grainy = image[..., :3].astype(np.float64) + noise
    return ops.blend(image, ops.with_alpha(grainy, image[..., 3]), intensity)


def shadow_highlight(image: np.ndarray, intensity: float) -> np.ndarray:
    """Smoothstep tone curve: deeper shadows, brighter highlights."""
    t = image[..., :3].astype(np.float64) / 255.0
    curved = t * t * (3.0 - 2.0 * t) * 255.0
    return ops.blend(image, ops.with_alpha(curved, image[..., 3]), intensity)


__all__ = [
    "stipple",
    "brush_strokes",
    "geometric_fragments",
    "glow",
    "halftone",
    "color_field",
    "simplify",
    "bleed",
    "wash",
    "oil_texture",
    "sketch_lines",
    "film_grain",
    "shadow_highlight",
]
