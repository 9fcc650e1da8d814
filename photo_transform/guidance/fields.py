"""Lenient pydantic field types for decoding model guidance.

Every type here wraps the normal pydantic validation in a ``WrapValidator``
that swaps any validation failure for a field default, so one bad value never
invalidates the rest of the object. Numbers are clamped into their range
rather than rejected.
"""

from __future__ import annotations

import copy
import math
import re
from collections.abc import Callable
from enum import Enum
from typing import Annotated, Any

from loguru import logger
from pydantic import AfterValidator, BeforeValidator, ValidationError, ValidatorFunctionWrapHandler, WrapValidator

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


def lenient(default: Any = None, *, default_factory: Callable[[], Any] | None = None) -> WrapValidator:
    """Return a wrap validator that falls back to a default on any failure."""

    def _fallback() -> Any:
        if default_factory is not None:
            return default_factory()
        return copy.copy(default)

    def _validate(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError as e:
            logger.debug(f"Guidance field fell back to default: {e.errors()[0].get('msg', e)}")
            return _fallback()

    return WrapValidator(_validate)


def _clamp(lo: float, hi: float) -> Callable[[float], float]:
    def _apply(value: float) -> float:
        if math.isnan(value):
            raise ValueError("number must not be NaN")
        return min(max(value, lo), hi)

    return _apply


def ranged(lo: float, hi: float, default: float) -> Any:
    """Float clamped into ``[lo, hi]``; unparsable values become ``default``."""
    return Annotated[float, AfterValidator(_clamp(lo, hi)), lenient(default)]


def normalize_hex(value: Any) -> str:
    """Normalise ``#RGB``, ``#RRGGBB`` or ``#AARRGGBB`` to upper-case ``#RRGGBB``."""
    if not isinstance(value, str):
        raise ValueError("color must be a string")
    match = _HEX_RE.match(value.strip())
    if not match:
        raise ValueError(f"not a hex color: {value!r}")
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    elif len(digits) == 8:
        # Alpha comes first in the ARGB form
        digits = digits[2:]
    return "#" + digits.upper()


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    digits = normalize_hex(value)[1:]
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def hex_color(default: str) -> Any:
    return Annotated[str, BeforeValidator(normalize_hex), lenient(default)]


def _hex_list(value: Any) -> list[str]:
    if not isinstance(value, list | tuple):
        raise ValueError("expected a list of colors")
    colors: list[str] = []
    for item in value:
        try:
            colors.append(normalize_hex(item))
        except ValueError:
            continue
    return colors


def _non_empty(value: list[str]) -> list[str]:
    if not value:
        raise ValueError("no usable colors")
    return value


def hex_list(default: tuple[str, ...] = (), *, require_items: bool = False) -> Any:
    """List of hex colors. Invalid entries are dropped.

    With ``require_items`` an empty result falls back to ``default``.
    """
    fallback = lenient(default_factory=lambda: list(default))
    if require_items:
        return Annotated[list[str], BeforeValidator(_hex_list), AfterValidator(_non_empty), fallback]
    return Annotated[list[str], BeforeValidator(_hex_list), fallback]


def _token(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower().replace(" ", "_").replace("-", "_")
    return value


def lenient_enum(enum_cls: type[Enum], default: Enum) -> Any:
    """Case-insensitive enum; unknown words become ``default``."""
    return Annotated[enum_cls, BeforeValidator(_token), lenient(default)]


def lenient_str(default: str = "") -> Any:
    return Annotated[str, BeforeValidator(_stringify), lenient(default)]


def _stringify(value: Any) -> Any:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return value


def lenient_bool(default: bool = False) -> Any:
    return Annotated[bool, lenient(default)]


def _str_items(value: Any) -> list[str]:
    if not isinstance(value, list | tuple):
        raise ValueError("expected a list")
    return [str(item).strip() for item in value if isinstance(item, str | int | float) and str(item).strip()]


def str_list() -> Any:
    return Annotated[list[str], BeforeValidator(_str_items), lenient(default_factory=list)]


def _mappings_only(value: Any) -> list[Any]:
    if not isinstance(value, list | tuple):
        raise ValueError("expected a list of objects")
    return [item for item in value if isinstance(item, dict)]


def model_list(item_type: Any) -> Any:
    """List of nested guidance objects; non-object entries are skipped."""
    return Annotated[list[item_type], BeforeValidator(_mappings_only), lenient(default_factory=list)]


def nested(model_type: Any) -> Any:
    """Nested guidance object; a non-object value becomes the model default."""
    return Annotated[model_type, lenient(default_factory=model_type)]


def optional_nested(model_type: Any) -> Any:
    """Nested guidance object that stays None when absent or not an object."""
    return Annotated[model_type | None, lenient(None)]


__all__ = [
    "lenient",
    "ranged",
    "normalize_hex",
    "hex_to_rgb",
    "hex_color",
    "hex_list",
    "lenient_enum",
    "lenient_str",
    "lenient_bool",
    "str_list",
    "model_list",
    "nested",
    "optional_nested",
]
