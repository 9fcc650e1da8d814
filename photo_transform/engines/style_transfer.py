"""Artistic style transfer as fixed pipelines of pixel stages.

Each style is an ordered tuple of stages. A stage receives the running image,
the caller's intensity and a context carrying the decoded guidance and a
random generator. Intensity only scales what a stage does: the same stages run
in the same order for every intensity, and intensity 0 returns the input.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ClassVar, NamedTuple

import numpy as np
from loguru import logger

from ..guidance.fields import hex_to_rgb
from ..guidance.models import GuidanceModel, StyleGuidance
from ..pixels import effects, ops
from ..shard import constants as C
from ..shard.enums import ArtisticStyle, StrokeSize, TaskKind
from .base_engine import EngineOutput, TransformEngine


class StageContext(NamedTuple):
    style: ArtisticStyle
    guidance: StyleGuidance
    rng: np.random.Generator


class Stage(NamedTuple):
    name: str
    run: Callable[[np.ndarray, float, StageContext], np.ndarray]


_STROKE_WIDTHS: dict[StrokeSize, int] = {
    StrokeSize.FINE: 2,
    StrokeSize.MEDIUM: 4,
    StrokeSize.BOLD: 8,
}


def _palette(ctx: StageContext) -> list[tuple[int, int, int]]:
    return [hex_to_rgb(c) for c in ctx.guidance.palette_colors]


# ------------------------------ stage builders ------------------------------ #


def blur(scale: float) -> Stage:
    """Soft blur whose radius grows with intensity (``scale * intensity``)."""
    return Stage(f"blur({scale})", lambda img, i, ctx: ops.box_blur(img, scale * i))


def adjust(saturation: float, contrast: float, brightness: float) -> Stage:
    return Stage(
        f"adjust({saturation}, {contrast}, {brightness})",
        lambda img, i, ctx: ops.color_matrix_adjust(img, saturation, contrast, brightness, i),
    )


def quantize(levels: int) -> Stage:
    return Stage(f"quantize({levels})", lambda img, i, ctx: ops.quantize_colors(img, levels, i))


def edges(boost: float = C.EDGE_BOOST) -> Stage:
    return Stage("edge_enhance", lambda img, i, ctx: ops.enhance_edges(img, i, boost=boost))


def grayscale() -> Stage:
    return Stage("grayscale", lambda img, i, ctx: ops.desaturate(img, i))


def sepia() -> Stage:
    return Stage("sepia", lambda img, i, ctx: ops.apply_sepia(img, i))


def _stipple(img: np.ndarray, i: float, ctx: StageContext) -> np.ndarray:
    colors = _palette(ctx)
    color = colors[0] if colors else ops.hue_from_seed(ctx.style.value, value=0.35)
    return effects.stipple(img, i, ctx.rng, color=color)


def _strokes(img: np.ndarray, i: float, ctx: StageContext) -> np.ndarray:
    brush = ctx.guidance.brush
    return effects.brush_strokes(
        img,
        i,
        ctx.rng,
        width=_STROKE_WIDTHS[brush.stroke_size] * 2,
        direction=brush.stroke_direction.value,
        palette=_palette(ctx) or None,
    )


STYLE_PIPELINES: dict[ArtisticStyle, tuple[Stage, ...]] = {
    ArtisticStyle.IMPRESSIONIST: (
        blur(3.0),
        adjust(1.2, 1.1, 0.9),
        Stage("stipple", _stipple),
    ),
    ArtisticStyle.EXPRESSIONIST: (
        adjust(1.5, 1.3, 1.2),
        Stage("bold_strokes", _strokes),
        edges(),
    ),
    ArtisticStyle.CUBIST: (
        Stage("geometric_fragments", lambda img, i, ctx: effects.geometric_fragments(img, i, ctx.rng)),
        quantize(8),
    ),
    ArtisticStyle.SURREALIST: (
        blur(2.0),
        Stage("glow", lambda img, i, ctx: effects.glow(img, i)),
        adjust(1.3, 1.4, 1.1),
    ),
    ArtisticStyle.POP_ART: (
        adjust(2.0, 1.8, 1.5),
        quantize(6),
        Stage("halftone", lambda img, i, ctx: effects.halftone(img, i)),
    ),
    ArtisticStyle.ABSTRACT: (
        Stage("color_field", lambda img, i, ctx: effects.color_field(img, i)),
        Stage("simplify", lambda img, i, ctx: effects.simplify(img, i)),
    ),
    ArtisticStyle.WATERCOLOR: (
        Stage("bleed", lambda img, i, ctx: effects.bleed(img, i)),
        blur(1.5),
        Stage("wash", lambda img, i, ctx: effects.wash(img, i)),
    ),
    ArtisticStyle.OIL_PAINTING: (
        Stage("oil_texture", lambda img, i, ctx: effects.oil_texture(img, i, ctx.rng)),
        adjust(1.1, 1.2, 0.9),
    ),
    ArtisticStyle.SKETCH: (
        grayscale(),
        Stage("sketch_lines", lambda img, i, ctx: effects.sketch_lines(img, i)),
        edges(boost=C.EDGE_BOOST * 1.5),
    ),
    ArtisticStyle.ANIME: (
        quantize(5),
        adjust(1.3, 1.4, 1.2),
        Stage("simplify_detail", lambda img, i, ctx: effects.simplify(img, i, levels=12)),
    ),
    ArtisticStyle.VINTAGE: (
        sepia(),
        Stage("film_grain", lambda img, i, ctx: effects.film_grain(img, i, ctx.rng)),
        adjust(0.7, 0.8, 0.9),
    ),
    ArtisticStyle.NOIR: (
        grayscale(),
        adjust(1.0, 2.0, 1.0),
        Stage("shadow_highlight", lambda img, i, ctx: effects.shadow_highlight(img, i)),
    ),
}


def style_from_name(name: str | ArtisticStyle | None) -> ArtisticStyle:
    """Resolve a style name; unknown names fall back to impressionist."""
    if isinstance(name, ArtisticStyle):
        return name
    style = ArtisticStyle.from_str((name or "").strip().replace(" ", "_").replace("-", "_"))
    if style is None:
        logger.debug(f"Unknown style {name!r}; using impressionist")
        return ArtisticStyle.IMPRESSIONIST
    return style


class StyleTransferEngine(TransformEngine):
    kind: ClassVar[TaskKind] = TaskKind.STYLE_TRANSFER
    guidance_type: ClassVar[type[GuidanceModel]] = StyleGuidance

    name: str = C.PREFIX_STYLE

    def output_prefix(self, *, style: str | ArtisticStyle | None = None, **options: Any) -> str:
        return f"{self.name}_{style_from_name(style).value}"

    def render_prompt(self, *, style: str | ArtisticStyle | None = None, intensity: float | None = None, **context: Any) -> str:
        requested = C.DEFAULT_STYLE_INTENSITY if intensity is None else intensity
        return super().render_prompt(style=style_from_name(style), intensity=ops.clamp_intensity(requested), **context)

    def stages(self, style: str | ArtisticStyle | None) -> tuple[Stage, ...]:
        return STYLE_PIPELINES[style_from_name(style)]

    def apply(  # type: ignore[override]
        self,
        image: np.ndarray,
        guidance: GuidanceModel,
        *,
        style: str | ArtisticStyle | None = None,
        intensity: float | None = None,
        seed: int | None = None,
        **_: Any,
    ) -> EngineOutput:
        if not isinstance(guidance, StyleGuidance):
            raise TypeError(f"Expected StyleGuidance, got {type(guidance).__name__}")
        resolved = style_from_name(style)
        # Without a caller value the model's own suggestion applies
        i = ops.clamp_intensity(guidance.style_intensity if intensity is None else intensity)
        ctx = StageContext(style=resolved, guidance=guidance, rng=np.random.default_rng(seed))

        out = image.copy()
        for stage in STYLE_PIPELINES[resolved]:
            out = stage.run(out, i, ctx)
        logger.debug(f"Applied {resolved.value} style ({len(STYLE_PIPELINES[resolved])} stages) at intensity {i:.2f}")
        return EngineOutput(image=out)


__all__ = [
    "Stage",
    "StageContext",
    "STYLE_PIPELINES",
    "StyleTransferEngine",
    "style_from_name",
]
