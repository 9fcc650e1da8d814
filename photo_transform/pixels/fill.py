"""Region fill strategies for object removal.

``fill_region`` replaces every pixel inside a bounding box and leaves every
pixel outside it untouched. The strategy only decides where the replacement
pixels come from.
"""

from __future__ import annotations

from typing import Literal

import numpy as np
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from ..schema import BoundingBox
from ..shard import constants as C


class _Strategy(BaseModel):
    model_config = ConfigDict(frozen=True)


class SolidFill(_Strategy):
    """Flat colour, typically the background's dominant colour."""

    kind: Literal["solid"] = "solid"
    color: tuple[int, int, int] = (255, 255, 255)


class GradientFill(_Strategy):
    """Vertical gradient between the mean colours above and below the box."""

    kind: Literal["gradient"] = "gradient"
    ring: int = Field(default=C.GRADIENT_RING, ge=1)


class TexturedFill(_Strategy):
    """Clone a same-sized neighbouring rectangle."""

    kind: Literal["textured"] = "textured"


class ContentAwareFill(_Strategy):
    """Per pixel, copy a random pixel from a grid of nearby positions outside the box."""

    kind: Literal["content_aware"] = "content_aware"
    search_radius: int = Field(default=C.CONTENT_AWARE_RADIUS, ge=1)
    step: int = Field(default=C.CONTENT_AWARE_STEP, ge=1)


FillStrategy = SolidFill | GradientFill | TexturedFill | ContentAwareFill

_GRAY = np.array(C.MID_GRAY + (255,), dtype=np.uint8)


def _opaque(rgb: np.ndarray) -> np.ndarray:
    alpha = np.full(rgb.shape[:2], 255, dtype=np.uint8)
    return np.dstack([np.clip(np.rint(rgb), 0, 255).astype(np.uint8), alpha])


def _band_mean(band: np.ndarray) -> np.ndarray | None:
    if band.size == 0:
        return None
    return band[..., :3].reshape(-1, 3).astype(np.float64).mean(axis=0)


def _gradient(image: np.ndarray, x0: int, y0: int, x1: int, y1: int, ring: int) -> np.ndarray:
    h, w = image.shape[:2]
    ey0, ey1 = max(y0 - ring, 0), min(y1 + ring, h)
    ex0, ex1 = max(x0 - ring, 0), min(x1 + ring, w)

    around = image[ey0:ey1, ex0:ex1, :3].astype(np.float64)
    outside = np.ones(around.shape[:2], dtype=bool)
    outside[y0 - ey0 : y1 - ey0, x0 - ex0 : x1 - ex0] = False
    ring_mean = around[outside].mean(axis=0) if outside.any() else np.array(C.MID_GRAY, dtype=np.float64)

    top = _band_mean(image[ey0:y0, x0:x1])
    bottom = _band_mean(image[y1:ey1, x0:x1])
    top = ring_mean if top is None else top
    bottom = ring_mean if bottom is None else bottom

    bh, bw = y1 - y0, x1 - x0
    t = ((np.arange(bh) + 0.5) / bh)[:, None, None]
    rgb = top * (1.0 - t) + bottom * t
    return _opaque(np.broadcast_to(rgb, (bh, bw, 3)))


def _textured(image: np.ndarray, x0: int, y0: int, x1: int, y1: int) -> np.ndarray:
    h, w = image.shape[:2]
    bw, bh = x1 - x0, y1 - y0
    sx = x0 - bw if x0 >= bw else x0 + int(1.5 * bw)
    sx = min(max(sx, 0), w - bw)
    sy = min(max(y0, 0), h - bh)
    return image[sy : sy + bh, sx : sx + bw].copy()


def _content_aware(
    image: np.ndarray,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    radius: int,
    step: int,
    rng: np.random.Generator,
) -> np.ndarray:
    h, w = image.shape[:2]
    offsets = np.arange(-radius, radius + 1, step)
    dy, dx = (a.ravel() for a in np.meshgrid(offsets, offsets, indexing="ij"))
    cols = np.arange(x0, x1)

    xs = np.clip(cols[:, None] + dx[None, :], 0, w - 1)
    inside_x = (xs >= x0) & (xs < x1)
    out = np.empty((y1 - y0, x1 - x0, 4), dtype=np.uint8)
    for row, y in enumerate(range(y0, y1)):
        ys = np.clip(y + dy, 0, h - 1)
        valid = ~(inside_x & ((ys >= y0) & (ys < y1))[None, :])
        scores = rng.random(valid.shape)
        scores[~valid] = -1.0
        pick = scores.argmax(axis=1)
        sampled = image[ys[pick], xs[np.arange(len(cols)), pick]]
        out[row] = np.where(valid.any(axis=1)[:, None], sampled, _GRAY)
    return out


def fill_region(
    image: np.ndarray,
    box: BoundingBox,
    strategy: FillStrategy,
    rng: np.random.Generator | int | None = None,
) -> np.ndarray:
    """Return a copy of ``image`` with ``box`` filled according to ``strategy``."""
    out = image.copy()
    h, w = image.shape[:2]
    x0, y0, x1, y1 = box.to_pixels(w, h)
    if x1 <= x0 or y1 <= y0:
        logger.debug("Fill region is empty after clamping; nothing to do")
        return out

    if isinstance(strategy, SolidFill):
        patch = _opaque(np.broadcast_to(np.array(strategy.color, dtype=np.float64), (y1 - y0, x1 - x0, 3)))
    elif isinstance(strategy, GradientFill):
        patch = _gradient(image, x0, y0, x1, y1, strategy.ring)
    elif isinstance(strategy, TexturedFill):
        patch = _textured(image, x0, y0, x1, y1)
    elif isinstance(strategy, ContentAwareFill):
        patch = _content_aware(image, x0, y0, x1, y1, strategy.search_radius, strategy.step, np.random.default_rng(rng))
    else:
        raise TypeError(f"Unknown fill strategy: {type(strategy).__name__}")

    out[y0:y1, x0:x1] = patch
    return out


__all__ = [
    "SolidFill",
    "GradientFill",
    "TexturedFill",
    "ContentAwareFill",
    "FillStrategy",
    "fill_region",
]
