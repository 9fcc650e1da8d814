from __future__ import annotations

from typing import Any, ClassVar

import numpy as np
from loguru import logger

from ..exceptions import AlreadyColoredError
from ..guidance.fields import hex_to_rgb
from ..guidance.models import ColorizationGuidance, GuidanceModel
from ..pixels import ops
from ..shard import constants as C
from ..shard.enums import TaskKind
from .base_engine import EngineOutput, TransformEngine


def palette_map(image: np.ndarray, palette: list[str], tone: tuple[float, float, float]) -> np.ndarray:
    """Map luminance onto palette buckets, scaled by brightness and tone.

    Bucket ``floor(lum / 255 * (n - 1))`` of an ``n``-colour palette is used,
    and its channels are scaled by ``lum / 255`` and the tone multipliers.
    """
    colors = np.array([hex_to_rgb(c) for c in palette], dtype=np.float64)
    n = len(colors)
    lum = ops.luminance(image)
    index = np.minimum((lum * (n - 1)) // 255, n - 1)
    rgb = colors[index] * lum[..., None] / 255.0 * np.asarray(tone, dtype=np.float64)
    return ops.with_alpha(rgb, image[..., 3])


def natural_blend(mapped: np.ndarray, anchor: np.ndarray) -> np.ndarray:
    """Blend each pixel 70/30 with its 3x3 neighbourhood mean.

    Pixels where ``anchor`` is true keep their mapped value.
    """
    w = C.NATURAL_BLEND_WEIGHT
    neighbourhood = ops.box_blur(mapped, 1)[..., :3].astype(np.float64)
    mixed = mapped[..., :3].astype(np.float64) * w + neighbourhood * (1.0 - w)
    rgb = np.where(anchor[..., None], mapped[..., :3], ops.to_uint8(mixed))
    return np.dstack([rgb, mapped[..., 3]])


class ColorizationEngine(TransformEngine):
    """Palette colorization for black and white photos.

    Deterministic for a given image and guidance; only the grayscale pre-check
    samples randomly.
    """

    kind: ClassVar[TaskKind] = TaskKind.COLORIZE
    guidance_type: ClassVar[type[GuidanceModel]] = ColorizationGuidance

    name: str = C.PREFIX_COLORIZED

    def is_grayscale(self, image: np.ndarray, rng: np.random.Generator | int | None = None) -> bool:
        return ops.grayscale_detect(image, C.GRAYSCALE_SAMPLE_COUNT, rng)

    def colorize(self, image: np.ndarray, guidance: ColorizationGuidance) -> np.ndarray:
        tone = C.TONE_MULTIPLIERS[guidance.overall_tone.value]
        mapped = palette_map(image, guidance.color_palette, tone)
        # Pure black stays black through the blend
        return natural_blend(mapped, ops.luminance(image) == 0)

    def apply(  # type: ignore[override]
        self,
        image: np.ndarray,
        guidance: GuidanceModel,
        *,
        check_grayscale: bool = True,
        rng: np.random.Generator | int | None = None,
        **_: Any,
    ) -> EngineOutput:
        if not isinstance(guidance, ColorizationGuidance):
            raise TypeError(f"Expected ColorizationGuidance, got {type(guidance).__name__}")
        if check_grayscale and not self.is_grayscale(image, rng):
            raise AlreadyColoredError()
        logger.debug(f"Colorizing with {len(guidance.color_palette)} palette colors, tone={guidance.overall_tone.value}")
        return EngineOutput(image=self.colorize(image, guidance))


__all__ = ["ColorizationEngine", "palette_map", "natural_blend"]
