"""Two-stage transformation pipeline.

Each request loads the image, asks the vision model for guidance (paced by the
shared rate limiter), decodes that guidance leniently and hands it to the
pixel engine in a worker thread. Requests share nothing but the limiter.
"""

from __future__ import annotations

import asyncio
from typing import Any

import numpy as np
from loguru import logger

from .engines.base_engine import TransformEngine
from .engines.colorization import ColorizationEngine
from .engines.factory import EngineFactory, EngineResolutionError
from .engines.style_transfer import style_from_name
from .exceptions import AlreadyColoredError
from .guidance.models import GuidanceModel
from .guidance.parser import parse
from .schema import Suggestion, TransformResult
from .services.analyzer import GeminiAnalyzer, VisionAnalyzer
from .services.rate_limiter import RateLimiter
from .settings import Settings, get_settings
from .shard import constants as C
from .shard.enums import ArtisticStyle, TaskKind
from .suggestions import SuggestionEngine
from .utils.image_utils import encode_jpeg, load_image, suggest_filename

ImageSource = str | bytes | np.ndarray


class TransformPipeline:
    def __init__(
        self,
        analyzer: VisionAnalyzer,
        rate_limiter: RateLimiter,
        settings: Settings | None = None,
    ) -> None:
        self.analyzer = analyzer
        self.rate_limiter = rate_limiter
        self.settings = settings or get_settings()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> TransformPipeline:
        s = settings or get_settings()
        return cls(GeminiAnalyzer(s), RateLimiter.from_settings(s), s)

    # ---- shared steps ---- #

    def load(self, source: ImageSource) -> np.ndarray:
        return load_image(source, self.settings.max_image_pixels)

    async def load_async(self, source: ImageSource) -> np.ndarray:
        """Load in a worker thread; URL sources block on the network."""
        return await asyncio.to_thread(self.load, source)

    async def analyze(self, engine: TransformEngine, image: np.ndarray, **prompt_context: Any) -> GuidanceModel:
        """Ask the model for guidance and decode it; never fails on bad JSON."""
        prompt = engine.render_prompt(**prompt_context)
        payload = await asyncio.to_thread(encode_jpeg, image, self.settings.jpeg_quality, self.settings.max_analysis_side)
        await self.rate_limiter.wait()
        raw = await self.analyzer.analyze(payload, prompt, self.settings.safety_settings)
        return parse(raw, engine.kind)

    async def _run(
        self,
        engine: TransformEngine,
        image: np.ndarray,
        guidance: GuidanceModel,
        prefix: str,
        **options: Any,
    ) -> TransformResult:
        output = await asyncio.to_thread(engine.apply, image, guidance, **options)
        result = TransformResult(
            task=engine.kind,
            image=output.image,
            status=output.status,
            message=output.message,
            filename=suggest_filename(prefix),
            guidance=guidance.model_dump(mode="json"),
        )
        logger.info(f"{engine.kind.value} finished with status {result.status.value} -> {result.filename}")
        return result

    # ---- tasks ---- #

    async def colorize(self, source: ImageSource, *, rng: np.random.Generator | int | None = None) -> TransformResult:
        engine = EngineFactory.create(TaskKind.COLORIZE)
        assert isinstance(engine, ColorizationEngine)
        image = await self.load_async(source)
        # Checked before spending a model call
        if not await asyncio.to_thread(engine.is_grayscale, image, rng):
            raise AlreadyColoredError()
        guidance = await self.analyze(engine, image)
        return await self._run(engine, image, guidance, engine.output_prefix(), check_grayscale=False)

    async def enhance(self, source: ImageSource, *, intensity: float = 1.0) -> TransformResult:
        engine = EngineFactory.create(TaskKind.ENHANCE)
        image = await self.load_async(source)
        guidance = await self.analyze(engine, image)
        return await self._run(engine, image, guidance, engine.output_prefix(), intensity=intensity)

    async def transfer_style(
        self,
        source: ImageSource,
        style: str | ArtisticStyle | None = None,
        *,
        intensity: float | None = None,
        seed: int | None = None,
    ) -> TransformResult:
        engine = EngineFactory.create(TaskKind.STYLE_TRANSFER)
        resolved = style_from_name(style)
        image = await self.load_async(source)
        guidance = await self.analyze(engine, image, style=resolved, intensity=intensity)
        return await self._run(
            engine,
            image,
            guidance,
            engine.output_prefix(style=resolved),
            style=resolved,
            intensity=intensity,
            seed=seed,
        )

    async def remove_object(
        self,
        source: ImageSource,
        target: str | None = None,
        *,
        rng: np.random.Generator | int | None = None,
    ) -> TransformResult:
        engine = EngineFactory.create(TaskKind.OBJECT_REMOVAL)
        image = await self.load_async(source)
        named = target.strip() if target and target.strip().lower() != C.AUTO_DETECT_TARGET else None
        guidance = await self.analyze(engine, image, target=named)
        return await self._run(engine, image, guidance, engine.output_prefix(), target=named, rng=rng)

    async def suggest(self, source: ImageSource, *, max_suggestions: int = 3) -> list[Suggestion]:
        image = await self.load_async(source)
        return await SuggestionEngine.suggest_with_model(image, self.analyzer, self.rate_limiter, self.settings, max_suggestions)

    async def run(self, task: TaskKind | str, source: ImageSource, **options: Any) -> TransformResult:
        """Dispatch by task kind; ``options`` are the task method's keywords."""
        kind = TaskKind.from_str(task) if isinstance(task, str) else task
        if kind == TaskKind.COLORIZE:
            return await self.colorize(source, **options)
        if kind == TaskKind.ENHANCE:
            return await self.enhance(source, **options)
        if kind == TaskKind.STYLE_TRANSFER:
            return await self.transfer_style(source, **options)
        if kind == TaskKind.OBJECT_REMOVAL:
            return await self.remove_object(source, **options)
        raise EngineResolutionError(f"No engine available for task {task!r}")


__all__ = ["TransformPipeline", "ImageSource"]
