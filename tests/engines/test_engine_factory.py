from __future__ import annotations

from unittest.mock import patch

import pytest

from photo_transform.engines import EngineFactory
from photo_transform.engines.colorization import ColorizationEngine
from photo_transform.engines.enhancement import EnhancementEngine
from photo_transform.engines.factory import ENGINE_MAP, EngineResolutionError
from photo_transform.engines.object_removal import ObjectRemovalEngine
from photo_transform.engines.style_transfer import StyleTransferEngine
from photo_transform.shard.enums import TaskKind


@pytest.mark.parametrize(
    "kind,engine_cls",
    [
        (TaskKind.ENHANCE, EnhancementEngine),
        (TaskKind.COLORIZE, ColorizationEngine),
        (TaskKind.OBJECT_REMOVAL, ObjectRemovalEngine),
        (TaskKind.STYLE_TRANSFER, StyleTransferEngine),
    ],
)
def test_create_by_task(kind, engine_cls) -> None:
    engine = EngineFactory.create(kind)
    assert isinstance(engine, engine_cls)
    assert engine.kind == kind


def test_create_accepts_task_name() -> None:
    assert isinstance(EngineFactory.create(" Style_Transfer "), StyleTransferEngine)


def test_unknown_task_raises() -> None:
    with pytest.raises(EngineResolutionError, match="Supported tasks"):
        EngineFactory.create("face_swap")


def test_engine_resolution_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        EngineFactory.create("")


def test_map_accepts_classes_as_well_as_paths() -> None:
    with patch.dict(ENGINE_MAP, {TaskKind.ENHANCE: EnhancementEngine}):
        assert isinstance(EngineFactory.create(TaskKind.ENHANCE), EnhancementEngine)


def test_available_tasks() -> None:
    assert set(EngineFactory.available_tasks()) == set(TaskKind)
