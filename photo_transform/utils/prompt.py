from __future__ import annotations

from functools import lru_cache
from typing import Any

import jinja2

from ..shard import instructions as I
from ..shard.enums import TaskKind

_ENV = jinja2.Environment(
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=jinja2.StrictUndefined,
)

# Prompt used for each task. Object removal switches to the targeted prompt
# when a named target is supplied.
_TASK_TEMPLATES: dict[TaskKind, str] = {
    TaskKind.ENHANCE: I.ENHANCE_PROMPT,
    TaskKind.COLORIZE: I.COLORIZE_PROMPT,
    TaskKind.OBJECT_REMOVAL: I.OBJECT_REMOVAL_AUTO_PROMPT,
    TaskKind.STYLE_TRANSFER: I.STYLE_PROMPT,
}

# Ids the suggestion prompt offers to the model. They are mapped onto catalog
# ids by the suggestion engine.
SUGGESTION_IDS: tuple[str, ...] = (
    "background_removal",
    "face_swap",
    "ai_enhance",
    "ai_colorize",
    "object_removal",
    "style_transfer",
    "general_ai",
)


@lru_cache(maxsize=None)
def _template(source: str) -> jinja2.Template:
    return _ENV.from_string(source)


def render_analysis_prompt(kind: TaskKind, *, target: str | None = None, **context: Any) -> str:
    """Render the analysis prompt for ``kind``.

    ``target`` selects the named-target object removal prompt. Other keyword
    arguments are template variables (``style`` and ``intensity`` for style
    transfer).
    """
    source = _TASK_TEMPLATES[kind]
    if kind == TaskKind.OBJECT_REMOVAL and target:
        source = I.OBJECT_REMOVAL_TARGET_PROMPT
        context["target"] = target
    return _template(source).render(**context).strip()


def render_suggestion_prompt(max_suggestions: int = 3) -> str:
    return _template(I.SUGGESTION_PROMPT).render(transformation_ids=SUGGESTION_IDS, max_suggestions=max_suggestions).strip()


__all__ = [
    "SUGGESTION_IDS",
    "render_analysis_prompt",
    "render_suggestion_prompt",
]
