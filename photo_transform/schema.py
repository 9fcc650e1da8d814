from __future__ import annotations

from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .guidance.fields import ranged
from .shard import constants as C
from .shard.enums import Category, TaskKind, TaskStatus, TransformStatus

# ------------------------------ Error handling ------------------------------ #


class Error(BaseModel):
    """Normalized error provided on failures.

    Use short, actionable messages and stable error codes suitable for client
    handling and retries.
    """

    code: str = Field(description="Stable machine-readable error code, e.g. 'invalid_image' or 'quota'.")
    message: str = Field(description="Human-readable error message with remediation tips when possible.")
    details: dict[str, Any] | None = Field(
        default=None,
        description="Optional service/debug details; treat as best-effort and unstable for parsing.",
    )


# ------------------------------- Geometry ----------------------------------- #

_Unit = ranged(0.0, 1.0, 0.0)
_Extent = ranged(0.0, 1.0, C.DEFAULT_BOX_SIZE)


class BoundingBox(BaseModel):
    """Rectangle relative to image width/height, every value in ``[0, 1]``.

    Width and height are shrunk so the box never extends past the image; boxes
    are clamped, never rejected.
    """

    x: _Unit = 0.0
    y: _Unit = 0.0
    width: _Extent = C.DEFAULT_BOX_SIZE
    height: _Extent = C.DEFAULT_BOX_SIZE

    @model_validator(mode="after")
    def _fit_inside_image(self) -> BoundingBox:
        self.width = min(self.width, 1.0 - self.x)
        self.height = min(self.height, 1.0 - self.y)
        return self

    def to_pixels(self, width: int, height: int) -> tuple[int, int, int, int]:
        """Return ``(x0, y0, x1, y1)`` pixel bounds, end-exclusive and clamped."""
        x0 = min(max(int(round(self.x * width)), 0), width)
        y0 = min(max(int(round(self.y * height)), 0), height)
        x1 = min(max(int(round((self.x + self.width) * width)), x0), width)
        y1 = min(max(int(round((self.y + self.height) * height)), y0), height)
        return x0, y0, x1, y1


# ------------------------------- Catalog ------------------------------------ #


class TransformationDescriptor(BaseModel):
    """Immutable catalog entry for a photo transformation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique transformation id, e.g. 'style_anime'.")
    name: str = Field(description="Display name.")
    description: str = Field(description="Short human description.")
    category: Category = Field(description="Catalog category.")
    prompt: str = Field(description="Prompt template sent to the vision model for this transformation.")
    is_popular: bool = Field(default=False)
    is_premium: bool = Field(default=False)


class Suggestion(BaseModel):
    """A ranked recommendation to apply a transformation."""

    transformation: TransformationDescriptor
    confidence: float = Field(ge=0.0, le=1.0)
    reason: str = ""
    priority: int = Field(default=1, ge=1, description="1 is the highest priority.")


# ------------------------------ Pipeline output ----------------------------- #


class TransformResult(BaseModel):
    """In-memory result of a pipeline run.

    ``image`` is an ``(H, W, 4)`` uint8 RGBA array. ``filename`` is a suggested
    name only; persisting the image is up to the caller.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    task: TaskKind
    image: np.ndarray
    status: TransformStatus = TransformStatus.APPLIED
    message: str | None = None
    filename: str
    guidance: dict[str, Any] = Field(default_factory=dict)


class TransformToolStructured(BaseModel):
    """Public structured output for the transform tool (no pixel data)."""

    ok: bool = Field(default=True, description="True on success; false when an error occurred.")
    task: TaskKind = Field(description="Transformation task that was run.")
    status: TransformStatus | None = Field(default=None, description="'applied' or 'no_target' when the image was left unchanged.")
    message: str | None = Field(default=None, description="Explanation for a no-op outcome.")
    file_path: str | None = Field(default=None, description="Absolute filesystem path where the result was saved.")
    filename: str | None = Field(default=None, description="Suggested filename for the result.")
    width: int | None = None
    height: int | None = None
    guidance: dict[str, Any] = Field(default_factory=dict, description="Decoded guidance the engine applied.")
    error: Error | None = Field(default=None, description="Error information when ok == false.")


class SuggestionsResponse(BaseModel):
    """Response for the suggest_transformations tool."""

    ok: bool = True
    image_type: str | None = Field(default=None, description="Heuristic image class when one was used.")
    suggestions: list[Suggestion] = Field(default_factory=list)


class CatalogResponse(BaseModel):
    """Response for the list_transformations tool."""

    ok: bool = True
    count: int = 0
    transformations: list[TransformationDescriptor] = Field(default_factory=list)


# ---------------------------- Generation polling ---------------------------- #


class StatusReport(BaseModel):
    """Status payload returned by a long-running generation service."""

    task_id: str
    status: str
    progress: int = 0
    message: str | None = None
    result_url: str | None = None
    error: str | None = None


class DownloadInfo(BaseModel):
    download_url: str
    file_name: str


class PollingTask(BaseModel):
    """Client-side view of a tracked generation task."""

    id: str
    status: TaskStatus = TaskStatus.PENDING
    progress: int = Field(default=0, ge=0, le=100)
    result: DownloadInfo | None = None
    attempt_count: int = 0
    message: str | None = None
    error: Error | None = None


__all__ = [
    "Error",
    "BoundingBox",
    "TransformationDescriptor",
    "Suggestion",
    "TransformResult",
    "TransformToolStructured",
    "SuggestionsResponse",
    "CatalogResponse",
    "StatusReport",
    "DownloadInfo",
    "PollingTask",
]
