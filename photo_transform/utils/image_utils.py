from __future__ import annotations

import base64
import io
import mimetypes
import os
import tempfile
import time
import urllib.request
from urllib.parse import unquote, urlparse

import numpy as np
from loguru import logger
from PIL import Image, ImageOps, UnidentifiedImageError

from ..exceptions import ImageTooLargeError, InputImageError
from ..pixels.ops import ensure_rgba
from ..shard import constants as C


# --------------------------- source classifiers --------------------------- #
def is_url(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


def is_data_url(value: str) -> bool:
    return value.startswith("data:")


def is_file_url(value: str) -> bool:
    return value.startswith("file://")


def file_url_to_path(url: str) -> str:
    parsed = urlparse(url)
    return unquote(parsed.path)


def guess_mime_from_path(path: str) -> str:
    mime, _ = mimetypes.guess_type(path)
    return mime or C.DEFAULT_MIME


# --------------------------- validation ---------------------------------- #
def validate_image_bytes(data: bytes) -> None:
    """Basic validation to ensure the bytes look like an image.

    Checks common magic numbers for PNG/JPEG/WEBP/GIF/BMP and a sane minimum
    length. Raises InputImageError if validation fails.
    """
    if not data or len(data) < 16:
        raise InputImageError("Image data is empty or too small")

    if data.startswith(b"\x89PNG\r\n\x1a\x0a"):
        return
    if data.startswith(b"\xff\xd8\xff"):
        return
    if data.startswith(b"GIF87a") or data.startswith(b"GIF89a"):
        return
    if data.startswith(b"RIFF") and b"WEBP" in data[:32]:
        return
    if data.startswith(b"BM"):
        return
    raise InputImageError(
        "Unsupported or corrupt image data",
        user_message="Unsupported or corrupt image data; expected PNG/JPEG/GIF/WEBP/BMP.",
    )


# --------------------------- IO + conversion ------------------------------ #
def _read_file(path: str) -> bytes:
    if not os.path.exists(path):
        raise InputImageError(f"File not found: {path}")
    with open(path, "rb") as f:
        return f.read()


def read_image_bytes_and_mime(
    source: str,
    *,
    validate: bool = True,
    timeout: float = C.DOWNLOAD_TIMEOUT_SECONDS,
) -> tuple[bytes, str]:
    """Read image content from various source forms.

    Accepts http(s) URLs, data URLs, local file paths, file:// URLs, or bare base64.
    Returns (bytes, mime_type).
    """
    if is_url(source):
        try:
            with urllib.request.urlopen(source, timeout=timeout) as resp:  # nosec - controlled by caller
                mime = resp.headers.get_content_type() or C.DEFAULT_MIME
                data = resp.read()
        except OSError as e:
            raise InputImageError(f"Cannot download image from {source}: {e}") from e
    elif is_data_url(source):
        try:
            header, payload = source.split(",", 1)
        except ValueError:
            raise InputImageError("Invalid data URL for image")
        mime = header.split(";")[0].partition(":")[2] or C.DEFAULT_MIME
        try:
            data = base64.b64decode(payload)
        except ValueError as e:
            raise InputImageError(f"Invalid base64 payload in data URL: {e}") from e
    elif is_file_url(source):
        path = file_url_to_path(source)
        data = _read_file(path)
        mime = guess_mime_from_path(path)
    elif os.path.exists(source):
        data = _read_file(source)
        mime = guess_mime_from_path(source)
    else:
        try:
            data = base64.b64decode(source, validate=True)
        except ValueError:
            raise InputImageError(
                "Unsupported image source",
                user_message="Unsupported image source: must be URL, data URL, local file path, or base64 string.",
            )
        mime = C.DEFAULT_MIME

    if validate:
        validate_image_bytes(data)
    return data, mime


def decode_image(data: bytes, max_pixels: int) -> np.ndarray:
    """Decode encoded image bytes into an RGBA array.

    The pixel budget is checked from the header before the full decode.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
            if width * height > max_pixels:
                raise ImageTooLargeError(width, height, max_pixels)
            img = ImageOps.exif_transpose(img)
            return np.asarray(img.convert("RGBA"), dtype=np.uint8).copy()
    except Image.DecompressionBombError as e:
        raise ImageTooLargeError(0, 0, max_pixels) from e
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise InputImageError(f"Cannot decode image: {e}", user_message="The image could not be decoded.") from e


def load_image(source: str | bytes | np.ndarray, max_pixels: int) -> np.ndarray:
    """Normalise any supported image source into an RGBA array."""
    if isinstance(source, np.ndarray):
        try:
            image = ensure_rgba(source)
        except ValueError as e:
            raise InputImageError(str(e)) from e
        h, w = image.shape[:2]
        if h * w > max_pixels:
            raise ImageTooLargeError(w, h, max_pixels)
        return image
    if isinstance(source, bytes | bytearray):
        data = bytes(source)
        validate_image_bytes(data)
    else:
        data, _ = read_image_bytes_and_mime(source)
    return decode_image(data, max_pixels)


def encode_jpeg(image: np.ndarray, quality: int, max_side: int | None = None) -> bytes:
    """Encode as JPEG, optionally downscaled so the longest side fits ``max_side``."""
    img = Image.fromarray(image).convert("RGB")
    if max_side and max(img.size) > max_side:
        img.thumbnail((max_side, max_side), Image.Resampling.LANCZOS)
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def suggest_filename(prefix: str, extension: str = ".jpg", now: float | None = None) -> str:
    """``<prefix>_<epoch millis><extension>``, the pattern used for saved results."""
    millis = int((time.time() if now is None else now) * 1000)
    return f"{prefix}_{millis}{extension}"


def ensure_directory(directory: str | None) -> str:
    """Ensure directory exists, creating if necessary. Returns absolute path.

    If directory is None, creates a temporary directory.
    """
    if directory is None:
        return tempfile.mkdtemp(prefix="photo_transform_", dir=tempfile.gettempdir())

    abs_directory = os.path.abspath(directory)
    try:
        os.makedirs(abs_directory, exist_ok=True)
    except (OSError, PermissionError) as e:
        temp_dir = tempfile.mkdtemp(prefix="photo_transform_fallback_", dir=tempfile.gettempdir())
        logger.warning(f"Cannot create directory {abs_directory}: {e}. Using temp directory: {temp_dir}")
        return temp_dir

    return abs_directory


def save_image_bytes(image_bytes: bytes, directory: str | None, filename: str) -> str:
    """Save image bytes to disk and return the absolute path.

    Raises:
        OSError: If the file cannot be written.
    """
    target_dir = ensure_directory(directory)
    file_path = os.path.join(target_dir, filename)
    with open(file_path, "wb") as f:
        f.write(image_bytes)
    logger.debug(f"Saved {len(image_bytes)} bytes to {file_path}")
    return os.path.abspath(file_path)


__all__ = [
    "is_url",
    "is_data_url",
    "is_file_url",
    "file_url_to_path",
    "guess_mime_from_path",
    "validate_image_bytes",
    "read_image_bytes_and_mime",
    "decode_image",
    "load_image",
    "encode_jpeg",
    "suggest_filename",
    "ensure_directory",
    "save_image_bytes",
]
