from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

import numpy as np
from pydantic import BaseModel, ConfigDict

from ..guidance.models import GuidanceModel
from ..shard.enums import TaskKind, TransformStatus
from ..utils.prompt import render_analysis_prompt


class EngineOutput(BaseModel):
    """What an engine hands back: the new pixels plus an outcome status."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    image: np.ndarray
    status: TransformStatus = TransformStatus.APPLIED
    message: str | None = None


class TransformEngine(ABC, BaseModel):
    """Abstract base for pixel engines.

    Engines are synchronous and CPU-bound. ``apply`` never mutates its input
    array; callers run it off the event loop.
    """

    kind: ClassVar[TaskKind]
    guidance_type: ClassVar[type[GuidanceModel]]

    name: str

    def output_prefix(self, **options: Any) -> str:
        """Filename prefix for results of this engine."""
        return self.name

    def render_prompt(self, **context: Any) -> str:
        return render_analysis_prompt(self.kind, **context)

    def default_guidance(self) -> GuidanceModel:
        return self.guidance_type()

    @abstractmethod
    def apply(self, image: np.ndarray, guidance: GuidanceModel, **options: Any) -> EngineOutput:
        raise NotImplementedError


__all__ = ["EngineOutput", "TransformEngine"]
