from __future__ import annotations

import json

import numpy as np
import pytest

from photo_transform.services.rate_limiter import RateLimiter
from photo_transform.settings import Settings
from photo_transform.shard.catalog import get_transformation
from photo_transform.shard.enums import ImageType
from photo_transform.suggestions import IMAGE_TYPE_ROWS, SuggestionEngine, default_suggestions


def _ids(suggestions) -> list[str]:
    return [s.transformation.id for s in suggestions]


def test_default_suggestions():
    suggestions = default_suggestions()
    assert _ids(suggestions) == ["ai_enhance", "background_remover", "style_transfer"]
    assert [s.priority for s in suggestions] == [1, 2, 3]
    assert [s.confidence for s in suggestions] == [0.8, 0.7, 0.6]


@pytest.mark.parametrize(
    "image_type,expected",
    [
        (ImageType.PORTRAIT, ["ai_enhance", "background_remover", "face_swap"]),
        (ImageType.LANDSCAPE, ["style_transfer", "ai_enhance", "enhance_object_removal"]),
        (ImageType.OBJECT, ["background_remover", "ai_enhance", "style_transfer"]),
        (ImageType.BLACK_AND_WHITE, ["enhance_colorize", "ai_enhance", "style_transfer"]),
        (ImageType.LOW_QUALITY, ["ai_enhance", "enhance_upscale", "style_transfer"]),
        (ImageType.UNKNOWN, ["ai_enhance", "background_remover", "style_transfer"]),
    ],
)
def test_image_type_tables(image_type, expected):
    suggestions = SuggestionEngine.for_image_type(image_type)
    assert _ids(suggestions) == expected
    assert [s.priority for s in suggestions] == [1, 2, 3]


def test_every_table_row_is_in_catalog():
    for rows in IMAGE_TYPE_ROWS.values():
        for transformation_id, confidence, _ in rows:
            assert get_transformation(transformation_id) is not None
            assert 0.0 <= confidence <= 1.0


def test_black_and_white_confidence():
    top = SuggestionEngine.for_image_type(ImageType.BLACK_AND_WHITE)[0]
    assert top.confidence == 0.95
    assert top.reason == "Add realistic colors to black and white image"


def test_model_text_is_mapped_and_sorted():
    raw = "Here are my picks: " + json.dumps(
        {
            "suggestions": [
                {"transformation_id": "style_transfer", "confidence": 0.6, "reason": "painterly", "priority": 2},
                {"transformation_id": "ai_colorize", "confidence": 0.9, "reason": "old photo", "priority": 1},
            ]
        }
    )
    suggestions = SuggestionEngine.from_model_text(raw)
    assert _ids(suggestions) == ["enhance_colorize", "style_transfer"]
    assert suggestions[0].reason == "old photo"
    assert [s.priority for s in suggestions] == [1, 2]


def test_model_text_drops_unknown_ids():
    raw = json.dumps(
        {
            "suggestions": [
                {"transformation_id": "teleport", "confidence": 0.99},
                {"transformation_id": "Background_Removal", "confidence": 0.7},
            ]
        }
    )
    suggestions = SuggestionEngine.from_model_text(raw)
    assert _ids(suggestions) == ["background_remover"]
    # Priority defaults to the entry's position in the answer
    assert suggestions[0].priority == 2


def test_model_text_clamps_and_defaults_values():
    raw = json.dumps(
        {
            "suggestions": [
                {"transformation_id": "ai_enhance", "confidence": 7, "priority": 0},
                {"transformation_id": "face_swap", "confidence": "high", "priority": "soon"},
            ]
        }
    )
    first, second = SuggestionEngine.from_model_text(raw)
    assert first.confidence == 1.0
    assert first.priority == 1
    assert second.confidence == 0.5
    assert second.priority == 2


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "not json",
        '{"suggestions": "none"}',
        '{"suggestions": []}',
        '{"suggestions": [{"transformation_id": "unknown"}]}',
        '{"other": 1}',
    ],
)
def test_model_text_falls_back_to_defaults(raw):
    assert _ids(SuggestionEngine.from_model_text(raw)) == _ids(default_suggestions())


def test_deeply_nested_model_text_falls_back_to_defaults():
    raw = '{"suggestions": ' + "[" * 100_000 + "]" * 100_000 + "}"
    assert _ids(SuggestionEngine.from_model_text(raw)) == _ids(default_suggestions())


def test_suggest_dispatches_on_source():
    assert _ids(SuggestionEngine.suggest(ImageType.PORTRAIT))[2] == "face_swap"
    assert _ids(SuggestionEngine.suggest("landscape"))[0] == "style_transfer"
    assert _ids(SuggestionEngine.suggest('{"suggestions": [{"transformation_id": "face_swap"}]}')) == ["face_swap"]
    assert _ids(SuggestionEngine.suggest(None)) == _ids(default_suggestions())


def test_classify_black_and_white(gray_image):
    assert SuggestionEngine.classify_image(gray_image, rng=0) == ImageType.BLACK_AND_WHITE


def test_classify_small_image_is_low_quality(rainbow_image):
    assert SuggestionEngine.classify_image(rainbow_image, rng=0) == ImageType.LOW_QUALITY


def _colour_noise(h: int, w: int) -> np.ndarray:
    rng = np.random.default_rng(0)
    img = rng.integers(0, 256, size=(h, w, 4), dtype=np.uint8)
    img[..., 3] = 255
    return img


@pytest.mark.parametrize(
    "shape,expected",
    [
        ((600, 400), ImageType.PORTRAIT),
        ((400, 600), ImageType.LANDSCAPE),
        ((400, 420), ImageType.OBJECT),
    ],
)
def test_classify_by_aspect_ratio(shape, expected):
    assert SuggestionEngine.classify_image(_colour_noise(*shape), rng=0) == expected


def test_classify_flat_colour_is_low_quality(image_factory):
    assert SuggestionEngine.classify_image(image_factory(400, 400, (200, 40, 40)), rng=0) == ImageType.LOW_QUALITY


@pytest.mark.asyncio
async def test_suggest_with_model(noisy_image, analyzer_factory, fake_clock):
    analyzer = analyzer_factory('{"suggestions": [{"transformation_id": "object_removal", "confidence": 0.4}]}')
    limiter = RateLimiter(5, clock=fake_clock, sleep=fake_clock.sleep)
    settings = Settings(gemini_api_key="k")

    suggestions = await SuggestionEngine.suggest_with_model(noisy_image, analyzer, limiter, settings, max_suggestions=2)

    assert _ids(suggestions) == ["enhance_object_removal"]
    assert len(analyzer.calls) == 1
    payload, prompt, safety = analyzer.calls[0]
    assert payload[:3] == b"\xff\xd8\xff"
    assert "between 1 and 2" in prompt
    assert "ai_colorize" in prompt
    assert safety == settings.safety_settings
    assert limiter.remaining() == 4
