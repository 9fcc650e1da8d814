from __future__ import annotations

import colorsys
import os
import sys

import numpy as np
import pytest

# Add repository root to sys.path for `import photo_transform.*` in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


def make_image(h: int, w: int, rgb: tuple[int, int, int] = (128, 128, 128), alpha: int = 255) -> np.ndarray:
    img = np.empty((h, w, 4), dtype=np.uint8)
    img[..., :3] = rgb
    img[..., 3] = alpha
    return img


class FakeAnalyzer:
    """Records calls and answers with canned text (or raises)."""

    def __init__(self, response: str = "{}", error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[bytes, str, dict[str, str] | None]] = []

    async def analyze(self, image_bytes: bytes, prompt: str, safety: dict[str, str] | None = None) -> str:
        self.calls.append((image_bytes, prompt, safety))
        if self.error is not None:
            raise self.error
        return self.response


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def gray_image() -> np.ndarray:
    """100x100 horizontal gray ramp, fully opaque."""
    ramp = np.linspace(0, 255, 100).round().astype(np.uint8)
    img = make_image(100, 100)
    img[..., 0] = ramp[None, :]
    img[..., 1] = ramp[None, :]
    img[..., 2] = ramp[None, :]
    return img


@pytest.fixture
def rainbow_image() -> np.ndarray:
    """100x100 fully saturated hue sweep."""
    img = make_image(100, 100)
    for x in range(100):
        r, g, b = colorsys.hsv_to_rgb(x / 100.0, 1.0, 1.0)
        img[:, x, :3] = (round(r * 255), round(g * 255), round(b * 255))
    return img


@pytest.fixture
def noisy_image() -> np.ndarray:
    """64x64 seeded random colour image."""
    rng = np.random.default_rng(1234)
    img = rng.integers(0, 256, size=(64, 64, 4), dtype=np.uint8)
    img[..., 3] = 255
    return img


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def image_factory():
    return make_image


@pytest.fixture
def analyzer_factory():
    return FakeAnalyzer
