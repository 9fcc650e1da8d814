from __future__ import annotations

import argparse
import asyncio
import sys
from functools import lru_cache
from typing import Annotated, Any, NoReturn

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import ToolResult
from fastmcp.utilities.types import Image as FastMCPImage
from loguru import logger
from pydantic import Field

from .exceptions import PhotoTransformError
from .pipeline import TransformPipeline
from .schema import CatalogResponse, SuggestionsResponse, TransformToolStructured
from .settings import get_settings
from .shard.catalog import (
    TRANSFORMATIONS,
    popular_transformations,
    premium_transformations,
    search_transformations,
    transformations_by_category,
)
from .shard.enums import ArtisticStyle, Category, ImageType, TaskKind
from .shard.instructions import SERVER_INSTRUCTIONS, TOOL_DESCRIPTIONS
from .suggestions import SuggestionEngine
from .utils.image_utils import encode_jpeg, save_image_bytes

app = FastMCP("photo-transform", instructions=SERVER_INSTRUCTIONS)


@lru_cache
def get_pipeline() -> TransformPipeline:
    return TransformPipeline.from_settings(get_settings())


def _handle_error(e: Exception) -> NoReturn:
    """Convert an exception to a ToolError so the client sees isError=True."""
    if isinstance(e, ToolError):
        raise e
    if isinstance(e, PhotoTransformError):
        raise ToolError(f"{e.code}: {e.user_message}")

    logger.error(f"Unexpected error: {type(e).__name__}: {e}")
    raise ToolError("An unexpected error occurred. Please try again.")


@app.tool(
    name="list_transformations",
    description=TOOL_DESCRIPTIONS["list_transformations"],
    annotations={
        "title": "List Transformations",
        "readOnlyHint": True,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def mcp_list_transformations(
    category: Annotated[Category | None, Field(description="Optional category filter, e.g. 'style' or 'enhance'.")] = None,
    query: Annotated[str | None, Field(description="Optional case-insensitive search over names and descriptions.")] = None,
    popular_only: Annotated[bool, Field(description="Only return featured/popular transformations.")] = False,
    premium_only: Annotated[bool, Field(description="Only return premium transformations.")] = False,
) -> CatalogResponse:
    """Browse the static transformation catalog."""
    try:
        entries = list(TRANSFORMATIONS)
        if query:
            entries = search_transformations(query)
        if category is not None:
            allowed = {t.id for t in transformations_by_category(category)}
            entries = [t for t in entries if t.id in allowed]
        if popular_only:
            popular = {t.id for t in popular_transformations()}
            entries = [t for t in entries if t.id in popular]
        if premium_only:
            premium = {t.id for t in premium_transformations()}
            entries = [t for t in entries if t.id in premium]
        return CatalogResponse(count=len(entries), transformations=entries)
    except Exception as e:
        _handle_error(e)


@app.tool(
    name="suggest_transformations",
    description=TOOL_DESCRIPTIONS["suggest_transformations"],
    annotations={
        "title": "Suggest Transformations",
        "readOnlyHint": True,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def mcp_suggest_transformations(
    image: Annotated[
        str | None,
        Field(description="Optional image source: http(s) URL, local path or file:// URL, data URL, or bare base64."),
    ] = None,
    image_type: Annotated[
        ImageType | None,
        Field(description="Optional known image class; skips pixel classification."),
    ] = None,
    use_model: Annotated[bool, Field(description="Ask the vision model instead of the built-in tables (needs credentials and an image).")] = False,
) -> SuggestionsResponse:
    """Ranked transformation suggestions for an image."""
    try:
        if use_model and image:
            suggestions = await get_pipeline().suggest(image)
            return SuggestionsResponse(suggestions=suggestions)

        resolved = image_type
        if resolved is None and image:
            pipeline = get_pipeline()
            pixels = await pipeline.load_async(image)
            resolved = await asyncio.to_thread(SuggestionEngine.classify_image, pixels)
        resolved = resolved or ImageType.UNKNOWN
        return SuggestionsResponse(image_type=resolved.value, suggestions=SuggestionEngine.for_image_type(resolved))
    except Exception as e:
        _handle_error(e)


def _task_options(task: TaskKind, style: ArtisticStyle | None, intensity: float | None, target: str | None) -> dict[str, Any]:
    if task == TaskKind.STYLE_TRANSFER:
        options: dict[str, Any] = {"style": style}
        if intensity is not None:
            options["intensity"] = intensity
        return options
    if task == TaskKind.ENHANCE:
        return {} if intensity is None else {"intensity": intensity}
    if task == TaskKind.OBJECT_REMOVAL:
        return {"target": target}
    return {}


@app.tool(
    name="transform_image",
    description=TOOL_DESCRIPTIONS["transform_image"],
    annotations={
        "title": "Transform Image",
        "readOnlyHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def mcp_transform_image(
    image: Annotated[
        str,
        Field(
            description=(
                "Image source. Accepted forms: (1) http(s) URL, (2) local file path or file:// URL, "
                "(3) data URL 'data:image/<type>;base64,<payload>', or (4) bare base64 string. "
                "Supported types: PNG, JPEG, WEBP, GIF, BMP."
            )
        ),
    ],
    task: Annotated[TaskKind, Field(description="Transformation: 'enhance' | 'colorize' | 'object_removal' | 'style_transfer'.")],
    style: Annotated[ArtisticStyle | None, Field(description="Artistic style for style_transfer; defaults to impressionist.")] = None,
    intensity: Annotated[float | None, Field(ge=0.0, le=1.0, description="Effect strength 0-1 for style_transfer and enhance.")] = None,
    target: Annotated[str | None, Field(description="Object to remove for object_removal; omit or 'auto-detect' to let the model choose.")] = None,
    directory: Annotated[
        str | None,
        Field(description="Optional directory to save the result. If not provided, a temporary directory is used."),
    ] = None,
) -> ToolResult:
    """Analyze an image with the vision model and apply the matching pixel engine."""
    try:
        settings = get_settings()
        result = await get_pipeline().run(task, image, **_task_options(task, style, intensity, target))

        data = await asyncio.to_thread(encode_jpeg, result.image, settings.jpeg_quality)
        file_path = await asyncio.to_thread(save_image_bytes, data, directory or settings.output_dir, result.filename)

        height, width = result.image.shape[:2]
        structured = TransformToolStructured(
            task=result.task,
            status=result.status,
            message=result.message,
            file_path=file_path,
            filename=result.filename,
            width=width,
            height=height,
            guidance=result.guidance,
        )
        content = [FastMCPImage(data=data, format="jpeg").to_image_content()]
        return ToolResult(content=content, structured_content=structured.model_dump(mode="json"))
    except Exception as e:
        _handle_error(e)


def main() -> None:
    parser = argparse.ArgumentParser(description="Photo Transform MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse", "http"],
        help="Transport to use (stdio, sse, http). Default: stdio",
    )
    parser.add_argument("--host", help="Host to bind to")
    parser.add_argument("--port", type=int, help="Port to listen on")
    args = parser.parse_args()

    settings = get_settings()
    # stdout belongs to the stdio transport
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper())

    transport = args.transport
    logger.info(f"Starting photo transform server with {transport or 'stdio'} transport")
    if not settings.analysis_available:
        logger.warning("No model credentials configured; transform_image will fail until GEMINI_API_KEY or Vertex settings are provided")

    if transport in {"http", "sse"}:
        app.run(transport=transport, host=args.host, port=args.port)
    else:
        app.run()


if __name__ == "__main__":
    main()
