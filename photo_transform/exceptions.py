"""Exception hierarchy for the transformation pipeline.

Each exception carries a stable ``code`` for programmatic handling and a
``user_message`` safe to show to end users. Guidance parsing never raises;
everything here is an input, service, processing, resource or configuration
failure.
"""

from __future__ import annotations

from typing import Any

from .schema import Error
from .shard import constants as C
from .shard.enums import ServiceErrorReason


class PhotoTransformError(Exception):
    """Base exception for all pipeline failures."""

    code: str = "photo_transform_error"

    def __init__(self, message: str, *, user_message: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.user_message = user_message or message
        self.details = details or {}

    def to_error(self) -> Error:
        return Error(code=self.code, message=self.user_message, details=self.details or None)


class InputImageError(PhotoTransformError):
    """The image source could not be read or decoded."""

    code = C.ERROR_CODE_INVALID_IMAGE


class ImageTooLargeError(PhotoTransformError):
    """The image exceeds the configured pixel budget."""

    code = C.ERROR_CODE_IMAGE_TOO_LARGE

    def __init__(self, width: int, height: int, limit: int) -> None:
        super().__init__(
            f"Image of {width}x{height} pixels exceeds the limit of {limit} pixels",
            user_message=f"Image is too large ({width}x{height}). Resize it below {limit:,} pixels and try again.",
            details={"width": width, "height": height, "max_pixels": limit},
        )


class ServiceError(PhotoTransformError):
    """A model or generation service call failed.

    ``reason`` classifies the failure so callers can decide whether to retry.
    """

    def __init__(self, message: str, reason: ServiceErrorReason = ServiceErrorReason.UNKNOWN, *, user_message: str | None = None) -> None:
        super().__init__(message, user_message=user_message, details={"reason": reason.value})
        self.reason = reason

    @property
    def code(self) -> str:  # type: ignore[override]
        return self.reason.value

    @property
    def retryable(self) -> bool:
        return self.reason in (ServiceErrorReason.NETWORK, ServiceErrorReason.QUOTA, ServiceErrorReason.TIMEOUT)


class AlreadyColoredError(PhotoTransformError):
    code = C.ERROR_CODE_ALREADY_COLORED

    def __init__(self) -> None:
        super().__init__(
            "Input image is not grayscale",
            user_message="This image already has colors. Colorization works on black and white photos.",
        )


class TargetNotFoundError(PhotoTransformError):
    code = C.ERROR_CODE_TARGET_NOT_FOUND

    def __init__(self, target: str) -> None:
        super().__init__(
            f"Removal target {target!r} was not located in the image",
            user_message=f"Could not find '{target}' in the image. Try a different description.",
            details={"target": target},
        )


class ConfigurationError(PhotoTransformError):
    code = C.ERROR_CODE_CONFIGURATION


__all__ = [
    "PhotoTransformError",
    "InputImageError",
    "ImageTooLargeError",
    "ServiceError",
    "AlreadyColoredError",
    "TargetNotFoundError",
    "ConfigurationError",
]
