from __future__ import annotations

from typing import Any, ClassVar

import numpy as np
from loguru import logger

from ..guidance.models import EnhancementGuidance, GuidanceModel
from ..pixels import ops
from ..shard import constants as C
from ..shard.enums import TaskKind
from .base_engine import EngineOutput, TransformEngine

# Largest channel shift for a +/-100 colour balance, highlight or shadow value
_MAX_OFFSET = 64.0
_CLARITY_RADIUS = 3
_NOISE_BLEND = 0.7


def _float_rgb(image: np.ndarray) -> np.ndarray:
    return image[..., :3].astype(np.float64)


def reduce_noise(image: np.ndarray, amount: float, intensity: float) -> np.ndarray:
    """Blend towards a radius-1 blur; ``amount`` is 0..100."""
    weight = amount / 100.0 * _NOISE_BLEND * ops.clamp_intensity(intensity)
    if weight <= 0.0:
        return image.copy()
    return ops.blend(image, ops.box_blur(image, 1), weight)


def balance_colors(image: np.ndarray, red: float, green: float, blue: float, intensity: float) -> np.ndarray:
    offsets = np.array([red, green, blue], dtype=np.float64) / 100.0 * _MAX_OFFSET * ops.clamp_intensity(intensity)
    if not offsets.any():
        return image.copy()
    return ops.with_alpha(_float_rgb(image) + offsets, image[..., 3])


def tone_regions(image: np.ndarray, highlights: float, shadows: float, intensity: float) -> np.ndarray:
    """Shift bright pixels by ``highlights`` and dark pixels by ``shadows``.

    Each shift is weighted by a luminance mask so mid-tones move least.
    """
    i = ops.clamp_intensity(intensity)
    if (highlights == 0.0 and shadows == 0.0) or i == 0.0:
        return image.copy()
    lum = ops.luminance(image).astype(np.float64) / 255.0
    shift = (lum**2 * highlights + (1.0 - lum) ** 2 * shadows) / 100.0 * _MAX_OFFSET * i
    return ops.with_alpha(_float_rgb(image) + shift[..., None], image[..., 3])


def unsharp(image: np.ndarray, radius: int, amount: float) -> np.ndarray:
    """``x + (x - blur(x)) * amount``; ``amount`` 0 returns a copy."""
    if amount <= 0.0:
        return image.copy()
    rgb = _float_rgb(image)
    detail = rgb - _float_rgb(ops.box_blur(image, radius))
    return ops.with_alpha(rgb + detail * amount, image[..., 3])


class EnhancementEngine(TransformEngine):
    """Global photo adjustments driven by ``EnhancementGuidance``.

    Steps run in a fixed order: noise reduction, saturation/contrast/brightness,
    colour balance, highlights and shadows, clarity, sharpening. Default
    guidance is an identity edit.
    """

    kind: ClassVar[TaskKind] = TaskKind.ENHANCE
    guidance_type: ClassVar[type[GuidanceModel]] = EnhancementGuidance

    name: str = C.PREFIX_ENHANCED

    def enhance(self, image: np.ndarray, g: EnhancementGuidance, intensity: float = 1.0) -> np.ndarray:
        i = ops.clamp_intensity(intensity)
        out = reduce_noise(image, g.noise_reduction, i)
        if g.saturation or g.contrast or g.brightness:
            out = ops.color_matrix_adjust(
                out,
                saturation=(g.saturation + 100.0) / 100.0,
                contrast=(g.contrast + 100.0) / 100.0,
                brightness=1.0 + g.brightness / 100.0,
                intensity=i,
            )
        balance = g.color_balance
        out = balance_colors(out, balance.red, balance.green, balance.blue, i)
        out = tone_regions(out, g.highlights, g.shadows, i)
        out = unsharp(out, _CLARITY_RADIUS, g.clarity / 100.0 * 0.5 * i)
        out = unsharp(out, 1, g.sharpness / 100.0 * i)
        return out

    def apply(  # type: ignore[override]
        self,
        image: np.ndarray,
        guidance: GuidanceModel,
        *,
        intensity: float = 1.0,
        **_: Any,
    ) -> EngineOutput:
        if not isinstance(guidance, EnhancementGuidance):
            raise TypeError(f"Expected EnhancementGuidance, got {type(guidance).__name__}")
        logger.debug(f"Enhancing with {guidance.model_dump(exclude_defaults=True)} at intensity {intensity}")
        return EngineOutput(image=self.enhance(image, guidance, intensity))


__all__ = ["EnhancementEngine", "reduce_noise", "balance_colors", "tone_regions", "unsharp"]
