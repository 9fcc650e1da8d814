from __future__ import annotations

import numpy as np
import pytest

from photo_transform.engines.style_transfer import STYLE_PIPELINES, StyleTransferEngine, style_from_name
from photo_transform.guidance.models import ColorizationGuidance, StyleGuidance
from photo_transform.guidance.parser import parse
from photo_transform.shard.enums import ArtisticStyle, TaskKind


def test_every_style_has_a_pipeline():
    assert set(STYLE_PIPELINES) == set(ArtisticStyle)
    assert all(len(stages) >= 2 for stages in STYLE_PIPELINES.values())


@pytest.mark.parametrize("style", list(ArtisticStyle))
def test_zero_intensity_returns_input(noisy_image, style):
    out = StyleTransferEngine().apply(noisy_image, StyleGuidance(), style=style, intensity=0.0, seed=1)
    assert np.array_equal(out.image, noisy_image)


@pytest.mark.parametrize("style", list(ArtisticStyle))
def test_full_intensity_keeps_shape_and_input(noisy_image, style):
    before = noisy_image.copy()
    out = StyleTransferEngine().apply(noisy_image, StyleGuidance(), style=style, intensity=1.0, seed=1)
    assert out.image.shape == noisy_image.shape
    assert out.image.dtype == np.uint8
    assert np.array_equal(noisy_image, before)


def test_stage_sequence_does_not_depend_on_intensity(monkeypatch, noisy_image):
    engine = StyleTransferEngine()
    seen: list[tuple[str, float]] = []
    stages = engine.stages(ArtisticStyle.POP_ART)

    def record(stage):
        def run(img, i, ctx):
            seen.append((stage.name, i))
            return stage.run(img, i, ctx)

        return stage._replace(run=run)

    monkeypatch.setitem(STYLE_PIPELINES, ArtisticStyle.POP_ART, tuple(record(s) for s in stages))

    engine.apply(noisy_image, StyleGuidance(), style="pop_art", intensity=0.2)
    low = [name for name, _ in seen]
    seen.clear()
    engine.apply(noisy_image, StyleGuidance(), style="pop_art", intensity=0.9)
    high = [name for name, _ in seen]

    assert low == high == [s.name for s in stages]
    assert {i for _, i in seen} == {0.9}


def test_seeded_runs_are_reproducible(noisy_image):
    engine = StyleTransferEngine()
    a = engine.apply(noisy_image, StyleGuidance(), style=ArtisticStyle.IMPRESSIONIST, intensity=0.8, seed=42)
    b = engine.apply(noisy_image, StyleGuidance(), style=ArtisticStyle.IMPRESSIONIST, intensity=0.8, seed=42)
    assert np.array_equal(a.image, b.image)


def test_intensity_is_clamped(noisy_image):
    engine = StyleTransferEngine()
    over = engine.apply(noisy_image, StyleGuidance(), style="noir", intensity=5.0)
    full = engine.apply(noisy_image, StyleGuidance(), style="noir", intensity=1.0)
    assert np.array_equal(over.image, full.image)


def test_sketch_and_noir_are_gray(rainbow_image):
    engine = StyleTransferEngine()
    for style in ("sketch", "noir"):
        out = engine.apply(rainbow_image, StyleGuidance(), style=style, intensity=1.0).image
        assert np.all(np.ptp(out[..., :3].astype(int), axis=2) <= 1)


def test_guidance_palette_feeds_strokes(noisy_image):
    guidance = parse(
        '{"style_guidance":{"color_palette":{"primary_colors":["#FF0000"]},'
        '"brush_effects":{"stroke_size":"bold","stroke_direction":"vertical"}}}',
        TaskKind.STYLE_TRANSFER,
    )
    engine = StyleTransferEngine()
    plain = engine.apply(noisy_image, StyleGuidance(), style="expressionist", seed=3).image
    guided = engine.apply(noisy_image, guidance, style="expressionist", seed=3).image
    assert not np.array_equal(plain, guided)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("watercolor", ArtisticStyle.WATERCOLOR),
        ("Oil Painting", ArtisticStyle.OIL_PAINTING),
        ("pop-art", ArtisticStyle.POP_ART),
        (ArtisticStyle.ANIME, ArtisticStyle.ANIME),
        ("baroque", ArtisticStyle.IMPRESSIONIST),
        (None, ArtisticStyle.IMPRESSIONIST),
        ("", ArtisticStyle.IMPRESSIONIST),
    ],
)
def test_style_from_name(name, expected):
    assert style_from_name(name) is expected


def test_output_prefix_and_prompt():
    engine = StyleTransferEngine()
    assert engine.output_prefix(style="cubist") == "style_cubist"
    assert engine.output_prefix() == "style_impressionist"
    prompt = engine.render_prompt(style="watercolor", intensity=0.5)
    assert '"watercolor"' in prompt
    assert "0.5" in prompt
    assert "brush_effects" in prompt


def test_wrong_guidance_type(noisy_image):
    with pytest.raises(TypeError):
        StyleTransferEngine().apply(noisy_image, ColorizationGuidance(), style="noir")


def test_model_intensity_applies_when_caller_gives_none(noisy_image):
    engine = StyleTransferEngine()
    muted = parse('{"style_guidance": {"artistic_elements": {"style_intensity": 0.0}}}', TaskKind.STYLE_TRANSFER)
    assert muted.style_intensity == 0.0

    out = engine.apply(noisy_image, muted, style="noir", seed=1)
    assert np.array_equal(out.image, noisy_image)

    forced = engine.apply(noisy_image, muted, style="noir", intensity=1.0, seed=1)
    assert not np.array_equal(forced.image, noisy_image)


def test_prompt_uses_default_intensity_when_unset():
    prompt = StyleTransferEngine().render_prompt(style="noir")
    assert "0.8" in prompt
