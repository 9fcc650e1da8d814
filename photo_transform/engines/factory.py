from __future__ import annotations

import importlib

from loguru import logger

from ..shard.enums import TaskKind
from .base_engine import TransformEngine

# Task-to-engine mapping. Import paths keep module import cheap and avoid cycles.
ENGINE_MAP: dict[TaskKind, type[TransformEngine] | str] = {
    TaskKind.ENHANCE: "photo_transform.engines.enhancement.EnhancementEngine",
    TaskKind.COLORIZE: "photo_transform.engines.colorization.ColorizationEngine",
    TaskKind.OBJECT_REMOVAL: "photo_transform.engines.object_removal.ObjectRemovalEngine",
    TaskKind.STYLE_TRANSFER: "photo_transform.engines.style_transfer.StyleTransferEngine",
}


class EngineResolutionError(ValueError):
    """Raised when no engine is registered for a task."""


def _load_engine_class(path_or_cls: type[TransformEngine] | str) -> type[TransformEngine]:
    """Resolve an engine class from either a direct class or an import path string."""
    if isinstance(path_or_cls, str):
        module_path, class_name = path_or_cls.rsplit(".", 1)
        module = importlib.import_module(module_path)
        return getattr(module, class_name)
    return path_or_cls


class EngineFactory:
    """Creates pixel engines by task kind."""

    @classmethod
    def create(cls, kind: TaskKind | str) -> TransformEngine:
        """
        Create an engine instance for the given task.

        Raises:
            EngineResolutionError: If the task is unknown.
        """
        task = TaskKind.from_str(kind) if isinstance(kind, str) else kind
        if task is None or task not in ENGINE_MAP:
            available = ", ".join(t.value for t in ENGINE_MAP)
            raise EngineResolutionError(f"No engine available for task {kind!r}. Supported tasks: {available}")
        engine_class = _load_engine_class(ENGINE_MAP[task])
        logger.debug(f"Resolved {task.value} to {engine_class.__name__}")
        return engine_class()

    @classmethod
    def available_tasks(cls) -> list[TaskKind]:
        return list(ENGINE_MAP.keys())


__all__ = ["EngineFactory", "EngineResolutionError", "ENGINE_MAP"]
