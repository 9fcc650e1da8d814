from __future__ import annotations

from typing import Any, ClassVar, Literal

import numpy as np
from loguru import logger
from pydantic import BaseModel

from ..exceptions import TargetNotFoundError
from ..guidance.fields import hex_to_rgb
from ..guidance.models import BackgroundAnalysis, GuidanceModel, ObjectRemovalGuidance
from ..pixels.fill import ContentAwareFill, FillStrategy, GradientFill, SolidFill, TexturedFill, fill_region
from ..schema import BoundingBox
from ..shard import constants as C
from ..shard.enums import BackgroundType, RemovalPriority, TaskKind, TransformStatus
from .base_engine import EngineOutput, TransformEngine


class RemovalTarget(BaseModel):
    name: str
    box: BoundingBox
    source: Literal["named", "recommended", "priority"]


def is_named_request(target: str | None) -> bool:
    return bool(target and target.strip() and target.strip().lower() != C.AUTO_DETECT_TARGET)


def select_target(guidance: ObjectRemovalGuidance, requested: str | None = None) -> RemovalTarget | None:
    """Pick the region to remove, or None to leave the image alone.

    Order: the named target when the model found it, then the recommended
    removal matched by substring against detected object names, then the first
    high-priority detected object. Candidates without a bounding box are
    skipped; the region is never guessed.
    """
    found = guidance.target_object
    if is_named_request(requested) and found.found and found.bounding_box is not None:
        return RemovalTarget(name=found.object or str(requested), box=found.bounding_box, source="named")

    located = [obj for obj in guidance.detected_objects if obj.bounding_box is not None]

    recommended = guidance.recommended_removal.strip().lower()
    if recommended:
        for obj in located:
            if recommended in obj.object.lower():
                return RemovalTarget(name=obj.object, box=obj.bounding_box, source="recommended")

    for obj in located:
        if obj.removal_priority == RemovalPriority.HIGH:
            return RemovalTarget(name=obj.object, box=obj.bounding_box, source="priority")

    return None


def choose_fill(background: BackgroundAnalysis) -> FillStrategy:
    """Fill strategy for a background class; anything unrecognised is content-aware."""
    if background.type == BackgroundType.SOLID:
        return SolidFill(color=hex_to_rgb(background.dominant_color))
    if background.type == BackgroundType.GRADIENT:
        return GradientFill()
    if background.type == BackgroundType.TEXTURED:
        return TexturedFill()
    return ContentAwareFill()


class ObjectRemovalEngine(TransformEngine):
    kind: ClassVar[TaskKind] = TaskKind.OBJECT_REMOVAL
    guidance_type: ClassVar[type[GuidanceModel]] = ObjectRemovalGuidance

    name: str = C.PREFIX_OBJECT_REMOVED

    def apply(  # type: ignore[override]
        self,
        image: np.ndarray,
        guidance: GuidanceModel,
        *,
        target: str | None = None,
        rng: np.random.Generator | int | None = None,
        **_: Any,
    ) -> EngineOutput:
        if not isinstance(guidance, ObjectRemovalGuidance):
            raise TypeError(f"Expected ObjectRemovalGuidance, got {type(guidance).__name__}")

        selected = select_target(guidance, target)
        region = selected.box.to_pixels(image.shape[1], image.shape[0]) if selected is not None else None
        if region is None or region[0] == region[2] or region[1] == region[3]:
            if is_named_request(target):
                raise TargetNotFoundError(str(target).strip())
            if selected is not None:
                logger.warning(f"Box for {selected.name!r} covers no pixels; nothing removed")
            return EngineOutput(
                image=image.copy(),
                status=TransformStatus.NO_TARGET,
                message="No removable object was identified; the image is unchanged.",
            )

        strategy = choose_fill(guidance.background_analysis)
        logger.debug(f"Removing {selected.name!r} ({selected.source}) with {strategy.kind} fill at {selected.box}")
        return EngineOutput(
            image=fill_region(image, selected.box, strategy, rng=rng),
            message=f"Removed {selected.name or 'object'}.",
        )


__all__ = ["RemovalTarget", "ObjectRemovalEngine", "select_target", "choose_fill", "is_named_request"]
