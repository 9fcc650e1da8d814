"""Typed guidance objects decoded from vision model responses.

One model per task. Field names are the JSON keys the analysis prompts ask
for. Every field is lenient (see ``fields.py``): a missing, mistyped or
out-of-range value resolves to that field's documented default and never
invalidates its siblings.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ..schema import BoundingBox
from ..shard import constants as C
from ..shard.enums import (
    Adjustment,
    BackgroundType,
    ColorTemperature,
    EdgeTreatment,
    OverallTone,
    RemovalDifficulty,
    RemovalPriority,
    StrokeDirection,
    StrokeSize,
    StrokeType,
    TaskKind,
    TextureOverlay,
)
from .fields import (
    hex_color,
    hex_list,
    lenient_bool,
    lenient_enum,
    lenient_str,
    model_list,
    nested,
    optional_nested,
    ranged,
    str_list,
)

AdjustmentValue = ranged(*C.ADJUSTMENT_RANGE, 0.0)
SharpnessValue = ranged(*C.SHARPNESS_RANGE, 0.0)
PercentValue = ranged(*C.PERCENT_RANGE, 0.0)
UnitValue = ranged(*C.UNIT_RANGE, C.DEFAULT_STYLE_INTENSITY)

Text = lenient_str("")
UnknownText = lenient_str("unknown")
LightingText = lenient_str("natural")
Flag = lenient_bool(False)
Words = str_list()
Colors = hex_list()
Palette = hex_list(C.DEFAULT_COLOR_PALETTE, require_items=True)
ObjectColor = hex_color(C.DEFAULT_DOMINANT_COLOR)
SkyColor = hex_color(C.DEFAULT_SKY_COLOR)
SkinTone = hex_color(C.DEFAULT_SKIN_TONE)
VegetationColor = hex_color(C.DEFAULT_VEGETATION_COLOR)

ToneValue = lenient_enum(OverallTone, OverallTone.NEUTRAL)
BackgroundValue = lenient_enum(BackgroundType, BackgroundType.COMPLEX)
PriorityValue = lenient_enum(RemovalPriority, RemovalPriority.LOW)
DifficultyValue = lenient_enum(RemovalDifficulty, RemovalDifficulty.MEDIUM)
TemperatureValue = lenient_enum(ColorTemperature, ColorTemperature.NEUTRAL)
AdjustmentWord = lenient_enum(Adjustment, Adjustment.MAINTAIN)
StrokeTypeValue = lenient_enum(StrokeType, StrokeType.SMOOTH)
StrokeDirectionValue = lenient_enum(StrokeDirection, StrokeDirection.RANDOM)
StrokeSizeValue = lenient_enum(StrokeSize, StrokeSize.MEDIUM)
EdgeValue = lenient_enum(EdgeTreatment, EdgeTreatment.SOFT)
TextureValue = lenient_enum(TextureOverlay, TextureOverlay.MEDIUM)
Box = optional_nested(BoundingBox)


class GuidanceModel(BaseModel):
    """Base for guidance objects: unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    kind: ClassVar[TaskKind]


# ------------------------------- Enhancement -------------------------------- #


class ColorBalance(GuidanceModel):
    red: AdjustmentValue = 0.0
    green: AdjustmentValue = 0.0
    blue: AdjustmentValue = 0.0


ColorBalanceValue = nested(ColorBalance)


class EnhancementGuidance(GuidanceModel):
    """Global photo adjustments. All defaults together are an identity edit."""

    kind: ClassVar[TaskKind] = TaskKind.ENHANCE

    brightness: AdjustmentValue = 0.0
    contrast: AdjustmentValue = 0.0
    saturation: AdjustmentValue = 0.0
    sharpness: SharpnessValue = 0.0
    noise_reduction: PercentValue = 0.0
    color_balance: ColorBalanceValue = Field(default_factory=ColorBalance)
    highlights: AdjustmentValue = 0.0
    shadows: AdjustmentValue = 0.0
    clarity: PercentValue = 0.0


# ------------------------------- Colorization ------------------------------- #


class DominantObject(GuidanceModel):
    object: Text = ""
    suggested_color: ObjectColor = C.DEFAULT_DOMINANT_COLOR
    confidence: PercentValue = 0.0


DominantObjects = model_list(DominantObject)


class ColorizationGuidance(GuidanceModel):
    """Scene analysis driving palette colorization.

    ``color_palette`` order matters: it defines the luminance buckets, darkest
    first.
    """

    kind: ClassVar[TaskKind] = TaskKind.COLORIZE

    scene_type: UnknownText = "unknown"
    time_period: UnknownText = "unknown"
    dominant_objects: DominantObjects = Field(default_factory=list)
    sky_color: SkyColor = C.DEFAULT_SKY_COLOR
    skin_tone: SkinTone = C.DEFAULT_SKIN_TONE
    vegetation_color: VegetationColor = C.DEFAULT_VEGETATION_COLOR
    overall_tone: ToneValue = OverallTone.NEUTRAL
    lighting_condition: LightingText = "natural"
    color_palette: Palette = Field(default_factory=lambda: list(C.DEFAULT_COLOR_PALETTE))


# ------------------------------ Object removal ------------------------------ #


class TargetObject(GuidanceModel):
    found: Flag = False
    object: Text = ""
    confidence: PercentValue = 0.0
    bounding_box: Box = None
    removal_difficulty: DifficultyValue = RemovalDifficulty.MEDIUM


TargetValue = nested(TargetObject)


class DetectedObject(GuidanceModel):
    object: Text = ""
    confidence: PercentValue = 0.0
    bounding_box: Box = None
    removal_priority: PriorityValue = RemovalPriority.LOW
    removal_difficulty: DifficultyValue = RemovalDifficulty.MEDIUM


DetectedObjects = model_list(DetectedObject)


class BackgroundAnalysis(GuidanceModel):
    type: BackgroundValue = BackgroundType.COMPLEX
    dominant_color: ObjectColor = C.DEFAULT_DOMINANT_COLOR
    pattern: Text = ""


BackgroundAnalysisValue = nested(BackgroundAnalysis)


class ObjectRemovalGuidance(GuidanceModel):
    """Either a named-target answer (``target_object``) or an auto-detect list."""

    kind: ClassVar[TaskKind] = TaskKind.OBJECT_REMOVAL

    target_object: TargetValue = Field(default_factory=TargetObject)
    detected_objects: DetectedObjects = Field(default_factory=list)
    recommended_removal: Text = ""
    removal_strategy: Text = ""
    background_analysis: BackgroundAnalysisValue = Field(default_factory=BackgroundAnalysis)
    surrounding_context: Text = ""


# ------------------------------ Style transfer ------------------------------ #


class ImageAnalysis(GuidanceModel):
    dominant_colors: Colors = Field(default_factory=list)
    composition: Text = ""
    lighting: Text = ""
    texture: Text = ""
    mood: Text = ""


ImageAnalysisValue = nested(ImageAnalysis)


class StylePalette(GuidanceModel):
    primary_colors: Colors = Field(default_factory=list)
    accent_colors: Colors = Field(default_factory=list)
    color_temperature: TemperatureValue = ColorTemperature.NEUTRAL
    saturation_adjustment: AdjustmentWord = Adjustment.MAINTAIN
    brightness_adjustment: AdjustmentWord = Adjustment.MAINTAIN


StylePaletteValue = nested(StylePalette)


class BrushEffects(GuidanceModel):
    stroke_type: StrokeTypeValue = StrokeType.SMOOTH
    stroke_direction: StrokeDirectionValue = StrokeDirection.RANDOM
    stroke_size: StrokeSizeValue = StrokeSize.MEDIUM
    edge_treatment: EdgeValue = EdgeTreatment.SOFT


BrushEffectsValue = nested(BrushEffects)


class ArtisticElements(GuidanceModel):
    emphasis_areas: Words = Field(default_factory=list)
    style_intensity: UnitValue = C.DEFAULT_STYLE_INTENSITY
    texture_overlay: TextureValue = TextureOverlay.MEDIUM
    contrast_adjustment: AdjustmentWord = Adjustment.MAINTAIN


ArtisticElementsValue = nested(ArtisticElements)


class StyleDirectives(GuidanceModel):
    color_palette: StylePaletteValue = Field(default_factory=StylePalette)
    brush_effects: BrushEffectsValue = Field(default_factory=BrushEffects)
    artistic_elements: ArtisticElementsValue = Field(default_factory=ArtisticElements)


StyleDirectivesValue = nested(StyleDirectives)


class StyleGuidance(GuidanceModel):
    kind: ClassVar[TaskKind] = TaskKind.STYLE_TRANSFER

    image_analysis: ImageAnalysisValue = Field(default_factory=ImageAnalysis)
    style_guidance: StyleDirectivesValue = Field(default_factory=StyleDirectives)
    transformation_steps: Words = Field(default_factory=list)

    @property
    def palette_colors(self) -> list[str]:
        """Accent colors first, then primaries, then the image's own dominant colors."""
        palette = self.style_guidance.color_palette
        return [*palette.accent_colors, *palette.primary_colors, *self.image_analysis.dominant_colors]

    @property
    def brush(self) -> BrushEffects:
        return self.style_guidance.brush_effects

    @property
    def style_intensity(self) -> float:
        return self.style_guidance.artistic_elements.style_intensity


GuidanceObject = EnhancementGuidance | ColorizationGuidance | ObjectRemovalGuidance | StyleGuidance

GUIDANCE_MODELS: dict[TaskKind, type[GuidanceModel]] = {
    TaskKind.ENHANCE: EnhancementGuidance,
    TaskKind.COLORIZE: ColorizationGuidance,
    TaskKind.OBJECT_REMOVAL: ObjectRemovalGuidance,
    TaskKind.STYLE_TRANSFER: StyleGuidance,
}


__all__ = [
    "GuidanceModel",
    "ColorBalance",
    "EnhancementGuidance",
    "DominantObject",
    "ColorizationGuidance",
    "TargetObject",
    "DetectedObject",
    "BackgroundAnalysis",
    "ObjectRemovalGuidance",
    "ImageAnalysis",
    "StylePalette",
    "BrushEffects",
    "ArtisticElements",
    "StyleDirectives",
    "StyleGuidance",
    "GuidanceObject",
    "GUIDANCE_MODELS",
]
