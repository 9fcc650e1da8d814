from __future__ import annotations

import io
import os
import sys
from unittest.mock import MagicMock

import numpy as np
import pytest
from fastmcp.exceptions import ToolError
from PIL import Image

from photo_transform import main as main_module
from photo_transform.main import (
    _task_options,
    app,
    main,
    mcp_list_transformations,
    mcp_suggest_transformations,
    mcp_transform_image,
)
from photo_transform.pipeline import TransformPipeline
from photo_transform.services.rate_limiter import RateLimiter
from photo_transform.settings import Settings
from photo_transform.shard.enums import ArtisticStyle, Category, ImageType, TaskKind


def _write_png(path, image: np.ndarray) -> str:
    buf = io.BytesIO()
    Image.fromarray(image).save(buf, format="PNG")
    with open(path, "wb") as f:
        f.write(buf.getvalue())
    return str(path)


@pytest.fixture
def fake_pipeline(monkeypatch, analyzer_factory, fake_clock):
    def _install(response: str = "{}", error: Exception | None = None) -> TransformPipeline:
        pipeline = TransformPipeline(
            analyzer_factory(response, error),
            RateLimiter(10, clock=fake_clock, sleep=fake_clock.sleep),
            Settings(gemini_api_key="k"),
        )
        monkeypatch.setattr(main_module, "get_pipeline", lambda: pipeline)
        return pipeline

    return _install


def test_fastmcp_app_exists():
    """Test that the FastMCP app is properly created."""
    assert app is not None
    assert app.name == "photo-transform"


def test_mcp_tools_are_registered():
    """Test that all MCP tools are properly registered."""
    assert mcp_list_transformations.name == "list_transformations"
    assert mcp_suggest_transformations.name == "suggest_transformations"
    assert mcp_transform_image.name == "transform_image"


@pytest.mark.asyncio
async def test_list_transformations_filters():
    everything = await mcp_list_transformations.fn()
    assert everything.count == len(everything.transformations) > 50

    styles = await mcp_list_transformations.fn(category=Category.STYLE)
    assert {t.category for t in styles.transformations} == {Category.STYLE}

    popular_styles = await mcp_list_transformations.fn(category=Category.STYLE, popular_only=True)
    assert [t.id for t in popular_styles.transformations] == ["style_anime"]

    premium = await mcp_list_transformations.fn(premium_only=True)
    assert {t.id for t in premium.transformations} == {"enhance_upscale", "enhance_restore"}

    searched = await mcp_list_transformations.fn(query="watercolor")
    assert [t.id for t in searched.transformations] == ["style_watercolor"]


@pytest.mark.asyncio
async def test_suggest_with_known_image_type():
    resp = await mcp_suggest_transformations.fn(image_type=ImageType.BLACK_AND_WHITE)
    assert resp.image_type == "black_and_white"
    assert resp.suggestions[0].transformation.id == "enhance_colorize"


@pytest.mark.asyncio
async def test_suggest_without_anything_uses_defaults():
    resp = await mcp_suggest_transformations.fn()
    assert resp.image_type == "unknown"
    assert [s.priority for s in resp.suggestions] == [1, 2, 3]


@pytest.mark.asyncio
async def test_suggest_classifies_image(tmp_path, fake_pipeline, gray_image):
    fake_pipeline()
    path = _write_png(tmp_path / "bw.png", gray_image)
    resp = await mcp_suggest_transformations.fn(image=path)
    assert resp.image_type == "black_and_white"


@pytest.mark.asyncio
async def test_suggest_with_model(tmp_path, fake_pipeline, noisy_image):
    pipeline = fake_pipeline('{"suggestions": [{"transformation_id": "face_swap", "priority": 1}]}')
    path = _write_png(tmp_path / "in.png", noisy_image)
    resp = await mcp_suggest_transformations.fn(image=path, use_model=True)
    assert [s.transformation.id for s in resp.suggestions] == ["face_swap"]
    assert len(pipeline.analyzer.calls) == 1


@pytest.mark.asyncio
async def test_transform_image_saves_result(tmp_path, fake_pipeline, noisy_image):
    fake_pipeline('{"contrast": 20}')
    path = _write_png(tmp_path / "in.png", noisy_image)
    out_dir = tmp_path / "out"

    result = await mcp_transform_image.fn(image=path, task=TaskKind.ENHANCE, directory=str(out_dir))

    structured = result.structured_content
    assert structured["ok"] is True
    assert structured["task"] == "enhance"
    assert structured["status"] == "applied"
    assert structured["width"] == 64
    assert structured["height"] == 64
    assert structured["guidance"]["contrast"] == 20.0
    assert os.path.dirname(structured["file_path"]) == str(out_dir)
    assert os.path.exists(structured["file_path"])
    assert result.content[0].type == "image"
    assert result.content[0].mimeType == "image/jpeg"


@pytest.mark.asyncio
async def test_transform_image_maps_pipeline_errors(tmp_path, fake_pipeline, rainbow_image):
    fake_pipeline()
    path = _write_png(tmp_path / "colour.png", rainbow_image)
    with pytest.raises(ToolError, match="^already_colored:"):
        await mcp_transform_image.fn(image=path, task=TaskKind.COLORIZE, directory=str(tmp_path))


@pytest.mark.asyncio
async def test_transform_image_hides_unexpected_errors(tmp_path, fake_pipeline, noisy_image):
    fake_pipeline(error=RuntimeError("secret internals"))
    path = _write_png(tmp_path / "in.png", noisy_image)
    with pytest.raises(ToolError) as exc:
        await mcp_transform_image.fn(image=path, task=TaskKind.ENHANCE, directory=str(tmp_path))
    assert "secret internals" not in str(exc.value)


def test_task_options():
    assert _task_options(TaskKind.STYLE_TRANSFER, ArtisticStyle.NOIR, None, None) == {"style": ArtisticStyle.NOIR}
    assert _task_options(TaskKind.STYLE_TRANSFER, None, 0.3, None) == {"style": None, "intensity": 0.3}
    assert _task_options(TaskKind.ENHANCE, ArtisticStyle.NOIR, None, "x") == {}
    assert _task_options(TaskKind.ENHANCE, None, 0.5, None) == {"intensity": 0.5}
    assert _task_options(TaskKind.OBJECT_REMOVAL, None, 0.5, "car") == {"target": "car"}
    assert _task_options(TaskKind.COLORIZE, ArtisticStyle.NOIR, 0.5, "car") == {}


@pytest.mark.parametrize(
    "argv,expected_args,expected_kwargs",
    [
        ([], (), {}),
        (["--transport", "stdio"], (), {}),
        (["--transport", "http", "--host", "0.0.0.0", "--port", "8080"], (), {"transport": "http", "host": "0.0.0.0", "port": 8080}),
    ],
)
def test_main_runs_selected_transport(monkeypatch, argv, expected_args, expected_kwargs):
    run = MagicMock()
    monkeypatch.setattr(app, "run", run)
    monkeypatch.setattr(sys, "argv", ["photo-transform", *argv])
    main()
    run.assert_called_once_with(*expected_args, **expected_kwargs)


def test_main_rejects_unknown_transport(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["photo-transform", "--transport", "carrier-pigeon"])
    with pytest.raises(SystemExit):
        main()
