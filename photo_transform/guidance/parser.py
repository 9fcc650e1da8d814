"""Decode guidance objects from free-form model text.

Models wrap their JSON in prose or code fences, truncate it, or skip it
entirely. ``parse`` takes the substring between the first ``{`` and the last
``}``, decodes it, and validates it against the task's lenient schema. It
never raises for malformed input: the worst case is the all-defaults object.
"""

from __future__ import annotations

import json
from typing import Any

from loguru import logger

from ..shard.enums import TaskKind
from .models import GUIDANCE_MODELS, GuidanceModel


def extract_json_object(raw_text: Any) -> dict[str, Any] | None:
    """Return the JSON object embedded in ``raw_text`` or None."""
    if not isinstance(raw_text, str):
        return None
    start = raw_text.find("{")
    end = raw_text.rfind("}")
    if start == -1 or end <= start:
        return None
    try:
        decoded = json.loads(raw_text[start : end + 1])
    except (ValueError, RecursionError) as e:
        logger.warning(f"Model response contained malformed JSON: {e}")
        return None
    if not isinstance(decoded, dict):
        return None
    return decoded


def parse(raw_text: Any, kind: TaskKind) -> GuidanceModel:
    """Decode the guidance object for ``kind`` from raw model text."""
    model_cls = GUIDANCE_MODELS[kind]
    data = extract_json_object(raw_text)
    if data is None:
        logger.warning(f"No usable JSON in {kind.value} analysis; using default guidance")
        return model_cls()
    return model_cls.model_validate(data)


__all__ = ["extract_json_object", "parse"]
