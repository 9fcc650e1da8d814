from __future__ import annotations

import numpy as np
import pytest

from photo_transform.engines.colorization import ColorizationEngine, natural_blend, palette_map
from photo_transform.exceptions import AlreadyColoredError
from photo_transform.guidance.models import ColorizationGuidance, EnhancementGuidance
from photo_transform.guidance.parser import parse
from photo_transform.shard.enums import TaskKind


def _gray_4x4() -> np.ndarray:
    values = np.array(
        [
            [0, 40, 80, 120],
            [160, 200, 255, 0],
            [30, 60, 90, 0],
            [255, 255, 128, 64],
        ],
        dtype=np.uint8,
    )
    img = np.empty((4, 4, 4), dtype=np.uint8)
    img[..., :3] = values[..., None]
    img[..., 3] = 255
    return img


def test_end_to_end_single_red_palette():
    img = _gray_4x4()
    guidance = parse('{"color_palette":["#FF0000"],"overall_tone":"neutral"}', TaskKind.COLORIZE)
    out = ColorizationEngine().apply(img, guidance, rng=0).image

    lum = img[..., 0]
    nonzero = lum > 0
    # Every lit pixel is a shade of red
    assert np.all(out[nonzero, 0] > 0)
    assert np.all(out[nonzero, 1] == 0)
    assert np.all(out[nonzero, 2] == 0)
    # Pure black stays black
    assert np.all(out[~nonzero, :3] == 0)
    assert np.all(out[..., 3] == 255)


def test_palette_map_scales_by_luminance(image_factory):
    img = image_factory(1, 2, (255, 255, 255))
    img[0, 1, :3] = 51
    mapped = palette_map(img, ["#FF0000"], (1.0, 1.0, 1.0))
    assert mapped[0, 0, :3].tolist() == [255, 0, 0]
    assert mapped[0, 1, :3].tolist() == [51, 0, 0]


def test_palette_map_buckets_by_luminance(image_factory):
    img = image_factory(1, 2, (0, 0, 0))
    img[0, 1, :3] = 255
    mapped = palette_map(img, ["#0000FF", "#00FF00"], (1.0, 1.0, 1.0))
    # Brightest pixel lands in the last bucket
    assert mapped[0, 1, :3].tolist() == [0, 255, 0]


def test_warm_tone_boosts_red(image_factory):
    img = image_factory(1, 1, (200, 200, 200))
    neutral = palette_map(img, ["#808080"], (1.0, 1.0, 1.0))
    warm = palette_map(img, ["#808080"], (1.1, 1.0, 0.9))
    assert warm[0, 0, 0] > neutral[0, 0, 0]
    assert warm[0, 0, 2] < neutral[0, 0, 2]


def test_natural_blend_keeps_anchors(image_factory):
    mapped = image_factory(3, 3, (100, 0, 0))
    mapped[1, 1, :3] = 0
    anchor = np.zeros((3, 3), dtype=bool)
    anchor[1, 1] = True
    out = natural_blend(mapped, anchor)
    assert out[1, 1, :3].tolist() == [0, 0, 0]
    # Neighbours are pulled towards the dark centre
    assert out[0, 1, 0] < 100


def test_colorize_is_deterministic(gray_image):
    engine = ColorizationEngine()
    guidance = ColorizationGuidance()
    a = engine.apply(gray_image, guidance, rng=1).image
    b = engine.apply(gray_image, guidance, rng=2).image
    assert np.array_equal(a, b)


def test_rejects_colored_input(rainbow_image):
    with pytest.raises(AlreadyColoredError) as exc:
        ColorizationEngine().apply(rainbow_image, ColorizationGuidance(), rng=0)
    assert exc.value.code == "already_colored"


def test_grayscale_check_can_be_skipped(rainbow_image):
    out = ColorizationEngine().apply(rainbow_image, ColorizationGuidance(), check_grayscale=False)
    assert out.image.shape == rainbow_image.shape


def test_wrong_guidance_type(gray_image):
    with pytest.raises(TypeError):
        ColorizationEngine().apply(gray_image, EnhancementGuidance())


def test_output_prefix_and_prompt():
    engine = ColorizationEngine()
    assert engine.output_prefix() == "colorized"
    assert "color_palette" in engine.render_prompt()
