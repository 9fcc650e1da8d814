from __future__ import annotations

import numpy as np
import pytest

from photo_transform.pixels import effects


def _rng():
    return np.random.default_rng(5)


RANDOM_EFFECTS = [
    lambda img, i: effects.stipple(img, i, _rng(), color=(20, 40, 60)),
    lambda img, i: effects.brush_strokes(img, i, _rng(), width=4, direction="diagonal"),
    lambda img, i: effects.brush_strokes(img, i, _rng(), width=8, direction="circular", palette=[(255, 0, 0)]),
    lambda img, i: effects.geometric_fragments(img, i, _rng()),
    lambda img, i: effects.oil_texture(img, i, _rng()),
    lambda img, i: effects.film_grain(img, i, _rng()),
]

PLAIN_EFFECTS = [
    effects.glow,
    effects.halftone,
    effects.color_field,
    effects.simplify,
    effects.bleed,
    effects.wash,
    effects.sketch_lines,
    effects.shadow_highlight,
]


@pytest.mark.parametrize("effect", RANDOM_EFFECTS + PLAIN_EFFECTS)
def test_effect_zero_intensity_is_identity(noisy_image, effect):
    out = effect(noisy_image, 0.0)
    assert np.array_equal(out, noisy_image)
    assert out is not noisy_image


@pytest.mark.parametrize("effect", RANDOM_EFFECTS + PLAIN_EFFECTS)
def test_effect_keeps_shape_and_input(noisy_image, effect):
    before = noisy_image.copy()
    out = effect(noisy_image, 1.0)
    assert out.shape == noisy_image.shape
    assert out.dtype == np.uint8
    assert np.array_equal(noisy_image, before)


def test_seeded_effects_are_reproducible(noisy_image):
    a = effects.stipple(noisy_image, 0.8, np.random.default_rng(3))
    b = effects.stipple(noisy_image, 0.8, np.random.default_rng(3))
    assert np.array_equal(a, b)


def test_stipple_changes_image(image_factory):
    img = image_factory(40, 40, (250, 250, 250))
    out = effects.stipple(img, 1.0, _rng(), color=(0, 0, 0))
    assert (out[..., :3] < 250).any()


def test_wash_lightens(image_factory):
    img = image_factory(4, 4, (100, 100, 100))
    out = effects.wash(img, 1.0)
    assert np.all(out[..., :3] > 100)


def test_shadow_highlight_pushes_extremes(image_factory):
    img = image_factory(1, 2, (64, 64, 64))
    img[0, 1, :3] = 192
    out = effects.shadow_highlight(img, 1.0)
    assert out[0, 0, 0] < 64
    assert out[0, 1, 0] > 192


def test_sketch_lines_on_flat_image_is_white(image_factory):
    img = image_factory(6, 6, (30, 90, 150))
    out = effects.sketch_lines(img, 1.0)
    assert np.all(out[..., :3] == 255)
