from __future__ import annotations

from enum import StrEnum
from typing import Self


class _Lookup(StrEnum):
    """StrEnum with forgiving string lookup shared by the vocabulary below."""

    @classmethod
    def from_str(cls, value: str | None) -> Self | None:
        if not value:
            return None
        v = value.strip().lower()
        try:
            return cls(v)  # type: ignore[arg-type]
        except ValueError:
            return None


class TaskKind(_Lookup):
    """Transformation tasks that have a guidance schema and a pixel engine."""

    ENHANCE = "enhance"
    COLORIZE = "colorize"
    OBJECT_REMOVAL = "object_removal"
    STYLE_TRANSFER = "style_transfer"


class Category(_Lookup):
    """Catalog categories. Values are stable ids; ``display_name`` is for UIs."""

    FEATURED = "featured"
    BACKGROUND = "background"
    FACE = "face"
    STYLE = "style"
    ENHANCE = "enhance"
    CREATIVE = "creative"
    PROFESSIONAL = "professional"
    VINTAGE = "vintage"

    @property
    def display_name(self) -> str:
        return _CATEGORY_DISPLAY_NAMES[self]


_CATEGORY_DISPLAY_NAMES: dict[Category, str] = {
    Category.FEATURED: "Featured",
    Category.BACKGROUND: "Backgrounds",
    Category.FACE: "Face Effects",
    Category.STYLE: "Art Styles",
    Category.ENHANCE: "Enhance",
    Category.CREATIVE: "Creative",
    Category.PROFESSIONAL: "Professional",
    Category.VINTAGE: "Vintage",
}


class ImageType(_Lookup):
    """Coarse image classes keyed into the static suggestion tables."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"
    OBJECT = "object"
    BLACK_AND_WHITE = "black_and_white"
    LOW_QUALITY = "low_quality"
    UNKNOWN = "unknown"


class ArtisticStyle(_Lookup):
    """Named styles understood by the style transfer engine."""

    IMPRESSIONIST = "impressionist"
    EXPRESSIONIST = "expressionist"
    CUBIST = "cubist"
    SURREALIST = "surrealist"
    POP_ART = "pop_art"
    ABSTRACT = "abstract"
    WATERCOLOR = "watercolor"
    OIL_PAINTING = "oil_painting"
    SKETCH = "sketch"
    ANIME = "anime"
    VINTAGE = "vintage"
    NOIR = "noir"

    @property
    def description(self) -> str:
        return _STYLE_DESCRIPTIONS[self]


_STYLE_DESCRIPTIONS: dict[ArtisticStyle, str] = {
    ArtisticStyle.IMPRESSIONIST: "Soft brushstrokes, light and color emphasis",
    ArtisticStyle.EXPRESSIONIST: "Bold colors, emotional intensity",
    ArtisticStyle.CUBIST: "Geometric shapes, multiple perspectives",
    ArtisticStyle.SURREALIST: "Dreamlike, fantastical elements",
    ArtisticStyle.POP_ART: "Bright colors, high contrast, comic style",
    ArtisticStyle.ABSTRACT: "Non-representational, color and form focus",
    ArtisticStyle.WATERCOLOR: "Translucent, flowing colors",
    ArtisticStyle.OIL_PAINTING: "Rich textures, classical painting style",
    ArtisticStyle.SKETCH: "Pencil drawing, line art style",
    ArtisticStyle.ANIME: "Japanese animation style",
    ArtisticStyle.VINTAGE: "Retro, aged photograph look",
    ArtisticStyle.NOIR: "Black and white, dramatic shadows",
}


class OverallTone(_Lookup):
    WARM = "warm"
    COOL = "cool"
    NEUTRAL = "neutral"


class BackgroundType(_Lookup):
    """Background classes reported by the removal analysis; select the fill strategy."""

    SOLID = "solid"
    GRADIENT = "gradient"
    TEXTURED = "textured"
    COMPLEX = "complex"


class RemovalPriority(_Lookup):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RemovalDifficulty(_Lookup):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# Style guidance descriptors. The model is asked to choose among these words.


class ColorTemperature(_Lookup):
    WARM = "warm"
    COOL = "cool"
    NEUTRAL = "neutral"


class Adjustment(_Lookup):
    INCREASE = "increase"
    DECREASE = "decrease"
    MAINTAIN = "maintain"


class StrokeType(_Lookup):
    SMOOTH = "smooth"
    ROUGH = "rough"
    TEXTURED = "textured"
    GEOMETRIC = "geometric"


class StrokeDirection(_Lookup):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    DIAGONAL = "diagonal"
    CIRCULAR = "circular"
    RANDOM = "random"


class StrokeSize(_Lookup):
    FINE = "fine"
    MEDIUM = "medium"
    BOLD = "bold"


class EdgeTreatment(_Lookup):
    SOFT = "soft"
    SHARP = "sharp"
    BLENDED = "blended"


class TextureOverlay(_Lookup):
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


class TaskStatus(_Lookup):
    """Lifecycle of a long-running generation task tracked by polling.

    ``pending`` and ``processing`` are live states. ``completed``, ``failed``,
    ``cancelled`` and ``timed_out`` are terminal.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self not in (TaskStatus.PENDING, TaskStatus.PROCESSING)


class ServiceErrorReason(_Lookup):
    """Classified reason attached to model/generation service failures."""

    NETWORK = "network"
    QUOTA = "quota"
    AUTH = "auth"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


class TransformStatus(_Lookup):
    """Outcome of an engine run that did not raise."""

    APPLIED = "applied"
    NO_TARGET = "no_target"


__all__ = [
    "TaskKind",
    "Category",
    "ImageType",
    "ArtisticStyle",
    "OverallTone",
    "BackgroundType",
    "RemovalPriority",
    "RemovalDifficulty",
    "ColorTemperature",
    "Adjustment",
    "StrokeType",
    "StrokeDirection",
    "StrokeSize",
    "EdgeTreatment",
    "TextureOverlay",
    "TaskStatus",
    "ServiceErrorReason",
    "TransformStatus",
]
