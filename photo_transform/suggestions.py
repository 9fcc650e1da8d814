"""Ranked transformation suggestions.

Two independent sources produce suggestions:

- static tables keyed by a coarse ``ImageType`` (optionally detected from the
  pixels with ``classify_image``), and
- a model path that decodes a ``{"suggestions": [...]}`` block from free-form
  model text.

Either way the caller gets a non-empty list sorted by priority, 1 first.
"""

from __future__ import annotations

import asyncio
from typing import Annotated, Any

import numpy as np
from loguru import logger
from pydantic import BaseModel, ConfigDict

from .guidance.fields import lenient, lenient_str, ranged
from .guidance.parser import extract_json_object
from .pixels import ops
from .schema import Suggestion
from .services.analyzer import VisionAnalyzer
from .services.rate_limiter import RateLimiter
from .settings import Settings, get_settings
from .shard.catalog import get_transformation
from .shard.enums import ImageType
from .utils.image_utils import encode_jpeg
from .utils.prompt import render_suggestion_prompt

# (catalog id, confidence, reason); priority is the row position.
_Row = tuple[str, float, str]

DEFAULT_ROWS: tuple[_Row, ...] = (
    ("ai_enhance", 0.8, "AI enhancement can improve image quality and details"),
    ("background_remover", 0.7, "Background removal can help focus on the main subject"),
    ("style_transfer", 0.6, "Artistic style transfer can create interesting visual effects"),
)

IMAGE_TYPE_ROWS: dict[ImageType, tuple[_Row, ...]] = {
    ImageType.PORTRAIT: (
        ("ai_enhance", 0.9, "Enhance facial features and skin details"),
        ("background_remover", 0.8, "Remove background to focus on the person"),
        ("face_swap", 0.7, "Swap faces for creative effects"),
    ),
    ImageType.LANDSCAPE: (
        ("style_transfer", 0.9, "Apply artistic styles to create stunning landscape art"),
        ("ai_enhance", 0.8, "Enhance colors and details in the landscape"),
        ("enhance_object_removal", 0.6, "Remove unwanted objects from the scene"),
    ),
    ImageType.OBJECT: (
        ("background_remover", 0.9, "Remove background to isolate the object"),
        ("ai_enhance", 0.8, "Enhance object details and clarity"),
        ("style_transfer", 0.7, "Apply artistic effects to the object"),
    ),
    ImageType.BLACK_AND_WHITE: (
        ("enhance_colorize", 0.95, "Add realistic colors to black and white image"),
        ("ai_enhance", 0.8, "Enhance contrast and details"),
        ("style_transfer", 0.6, "Apply artistic styles while maintaining B&W aesthetic"),
    ),
    ImageType.LOW_QUALITY: (
        ("ai_enhance", 0.95, "Significantly improve image quality and resolution"),
        ("enhance_upscale", 0.8, "Apply AI upscaling for better resolution"),
        ("style_transfer", 0.5, "Artistic style might help mask quality issues"),
    ),
    ImageType.UNKNOWN: DEFAULT_ROWS,
}

# Ids the model may answer with, mapped onto catalog ids.
MODEL_ID_MAP: dict[str, str] = {
    "background_removal": "background_remover",
    "face_swap": "face_swap",
    "ai_enhance": "ai_enhance",
    "ai_colorize": "enhance_colorize",
    "object_removal": "enhance_object_removal",
    "style_transfer": "style_transfer",
    "impressionist": "style_transfer",
    "general_ai": "ai_enhance",
}

# Pixel heuristic thresholds
LOW_QUALITY_MIN_SIDE = 256
LOW_QUALITY_MIN_STD = 20.0
PORTRAIT_RATIO = 1.2
LANDSCAPE_RATIO = 1.3

_Id = lenient_str("")
_Reason = lenient_str("")
_Confidence = ranged(0.0, 1.0, 0.5)
_Priority = Annotated[int | None, lenient(None)]


class _ModelEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    transformation_id: _Id = ""
    confidence: _Confidence = 0.5
    reason: _Reason = ""
    priority: _Priority = None


def _rows_to_suggestions(rows: tuple[_Row, ...]) -> list[Suggestion]:
    suggestions: list[Suggestion] = []
    for position, (transformation_id, confidence, reason) in enumerate(rows, start=1):
        descriptor = get_transformation(transformation_id)
        if descriptor is None:
            logger.warning(f"Suggestion table references unknown transformation {transformation_id!r}")
            continue
        suggestions.append(Suggestion(transformation=descriptor, confidence=confidence, reason=reason, priority=position))
    return suggestions


def default_suggestions() -> list[Suggestion]:
    return _rows_to_suggestions(DEFAULT_ROWS)


class SuggestionEngine:
    """Picks which transformations to offer for an image."""

    @classmethod
    def for_image_type(cls, image_type: ImageType) -> list[Suggestion]:
        return _rows_to_suggestions(IMAGE_TYPE_ROWS.get(image_type, DEFAULT_ROWS)) or default_suggestions()

    @classmethod
    def from_model_text(cls, raw_text: Any) -> list[Suggestion]:
        """Decode model suggestions; unknown ids are dropped.

        Falls back to the default three suggestions when nothing usable is
        left.
        """
        data = extract_json_object(raw_text)
        entries = data.get("suggestions") if data else None
        if not isinstance(entries, list):
            logger.warning("Model suggestions missing; using defaults")
            return default_suggestions()

        suggestions: list[Suggestion] = []
        for position, item in enumerate(entries, start=1):
            if not isinstance(item, dict):
                continue
            entry = _ModelEntry.model_validate(item)
            catalog_id = MODEL_ID_MAP.get(entry.transformation_id.strip().lower())
            descriptor = get_transformation(catalog_id) if catalog_id else None
            if descriptor is None:
                logger.warning(f"Dropping suggestion with unknown transformation_id {entry.transformation_id!r}")
                continue
            priority = position if entry.priority is None else max(entry.priority, 1)
            suggestions.append(Suggestion(transformation=descriptor, confidence=entry.confidence, reason=entry.reason, priority=priority))

        if not suggestions:
            return default_suggestions()
        return sorted(suggestions, key=lambda s: s.priority)

    @classmethod
    def suggest(cls, source: ImageType | str | None) -> list[Suggestion]:
        """Suggestions from an image type (or its name) or from raw model text."""
        if isinstance(source, ImageType):
            return cls.for_image_type(source)
        image_type = ImageType.from_str(source) if isinstance(source, str) else None
        if image_type is not None:
            return cls.for_image_type(image_type)
        return cls.from_model_text(source)

    @classmethod
    def classify_image(cls, image: np.ndarray, rng: np.random.Generator | int | None = None) -> ImageType:
        """Coarse pixel heuristic; best-effort, no content understanding."""
        h, w = image.shape[:2]
        if h == 0 or w == 0:
            return ImageType.UNKNOWN
        if ops.grayscale_detect(image, rng=rng):
            return ImageType.BLACK_AND_WHITE
        if min(h, w) < LOW_QUALITY_MIN_SIDE or float(ops.luminance(image).std()) < LOW_QUALITY_MIN_STD:
            return ImageType.LOW_QUALITY
        if h / w >= PORTRAIT_RATIO:
            return ImageType.PORTRAIT
        if w / h >= LANDSCAPE_RATIO:
            return ImageType.LANDSCAPE
        return ImageType.OBJECT

    @classmethod
    async def suggest_with_model(
        cls,
        image: np.ndarray,
        analyzer: VisionAnalyzer,
        limiter: RateLimiter,
        settings: Settings | None = None,
        max_suggestions: int = 3,
    ) -> list[Suggestion]:
        """One paced model call; the answer goes through ``from_model_text``."""
        s = settings or get_settings()
        payload = await asyncio.to_thread(encode_jpeg, image, s.jpeg_quality, s.max_analysis_side)
        await limiter.wait()
        raw = await analyzer.analyze(payload, render_suggestion_prompt(max_suggestions), s.safety_settings)
        return cls.from_model_text(raw)


__all__ = [
    "SuggestionEngine",
    "DEFAULT_ROWS",
    "IMAGE_TYPE_ROWS",
    "MODEL_ID_MAP",
    "default_suggestions",
]
