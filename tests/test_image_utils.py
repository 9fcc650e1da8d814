from __future__ import annotations

import base64
import io
import os
import tempfile
from unittest.mock import patch

import numpy as np
import pytest
from PIL import Image

from photo_transform.exceptions import ImageTooLargeError, InputImageError
from photo_transform.utils.image_utils import (
    decode_image,
    encode_jpeg,
    ensure_directory,
    load_image,
    read_image_bytes_and_mime,
    save_image_bytes,
    suggest_filename,
    validate_image_bytes,
)

# Sample 1x1 PNG image as base64
SAMPLE_PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChAI" "9Ecf1UQAAAABJRU5ErkJggg=="

SAMPLE_PNG_BYTES = base64.b64decode(SAMPLE_PNG_B64)


def _png(width: int, height: int, rgba: tuple[int, int, int, int] = (10, 20, 30, 255)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", (width, height), rgba).save(buf, format="PNG")
    return buf.getvalue()


class TestImageSources:
    """Test reading images from the supported source forms."""

    def test_data_url(self):
        data, mime = read_image_bytes_and_mime(f"data:image/png;base64,{SAMPLE_PNG_B64}")
        assert data == SAMPLE_PNG_BYTES
        assert mime == "image/png"

    def test_bare_base64(self):
        data, mime = read_image_bytes_and_mime(SAMPLE_PNG_B64)
        assert data == SAMPLE_PNG_BYTES
        assert mime == "image/png"

    def test_local_path_and_file_url(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = os.path.join(temp_dir, "sample.png")
            with open(path, "wb") as f:
                f.write(SAMPLE_PNG_BYTES)

            data, mime = read_image_bytes_and_mime(path)
            assert data == SAMPLE_PNG_BYTES
            assert mime == "image/png"

            data, _ = read_image_bytes_and_mime(f"file://{path}")
            assert data == SAMPLE_PNG_BYTES

    def test_missing_file_url(self):
        with pytest.raises(InputImageError):
            read_image_bytes_and_mime("file:///definitely/not/here.png")

    def test_garbage_source(self):
        with pytest.raises(InputImageError) as exc:
            read_image_bytes_and_mime("not an image at all!")
        assert exc.value.code == "invalid_image"

    def test_http_url_uses_urlopen(self):
        class _Resp:
            headers = type("H", (), {"get_content_type": staticmethod(lambda: "image/png")})()

            def read(self):
                return SAMPLE_PNG_BYTES

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

        with patch("photo_transform.utils.image_utils.urllib.request.urlopen", return_value=_Resp()) as urlopen:
            data, mime = read_image_bytes_and_mime("https://example.com/a.png")
        urlopen.assert_called_once_with("https://example.com/a.png", timeout=30.0)
        assert data == SAMPLE_PNG_BYTES
        assert mime == "image/png"

    def test_http_failure_is_input_error(self):
        with patch("photo_transform.utils.image_utils.urllib.request.urlopen", side_effect=OSError("refused")):
            with pytest.raises(InputImageError):
                read_image_bytes_and_mime("https://example.com/a.png")


class TestValidationAndDecoding:
    """Test byte validation, decoding and the pixel budget."""

    def test_validate_rejects_short_and_unknown(self):
        with pytest.raises(InputImageError):
            validate_image_bytes(b"\x89PNG")
        with pytest.raises(InputImageError):
            validate_image_bytes(b"%PDF-1.7 not really an image")

    def test_decode_to_rgba(self):
        image = decode_image(_png(3, 2), max_pixels=100)
        assert image.shape == (2, 3, 4)
        assert image.dtype == np.uint8
        assert image[0, 0].tolist() == [10, 20, 30, 255]

    def test_decode_rejects_large_images(self):
        with pytest.raises(ImageTooLargeError) as exc:
            decode_image(_png(20, 20), max_pixels=100)
        assert exc.value.details["width"] == 20

    def test_decode_rejects_corrupt_png(self):
        corrupt = _png(4, 4)[:30]
        with pytest.raises(InputImageError):
            decode_image(corrupt, max_pixels=100)

    def test_load_image_from_array(self):
        rgb = np.full((4, 5, 3), 7, dtype=np.uint8)
        image = load_image(rgb, max_pixels=100)
        assert image.shape == (4, 5, 4)
        assert np.all(image[..., 3] == 255)

    def test_load_image_array_budget_and_dtype(self):
        with pytest.raises(ImageTooLargeError):
            load_image(np.zeros((20, 20, 4), dtype=np.uint8), max_pixels=100)
        with pytest.raises(InputImageError):
            load_image(np.zeros((4, 4, 4), dtype=np.float64), max_pixels=100)

    def test_load_image_from_bytes(self):
        image = load_image(_png(2, 2), max_pixels=100)
        assert image.shape == (2, 2, 4)


class TestEncodingAndSaving:
    """Test encoding, filenames and saving results to disk."""

    def test_encode_jpeg_downscales(self):
        image = np.zeros((40, 80, 4), dtype=np.uint8)
        image[..., 3] = 255
        data = encode_jpeg(image, quality=80, max_side=20)
        assert data[:3] == b"\xff\xd8\xff"
        with Image.open(io.BytesIO(data)) as img:
            assert img.size == (20, 10)

    def test_encode_jpeg_keeps_small_images(self):
        image = np.zeros((8, 6, 4), dtype=np.uint8)
        with Image.open(io.BytesIO(encode_jpeg(image, quality=80, max_side=1024))) as img:
            assert img.size == (6, 8)

    def test_suggest_filename(self):
        assert suggest_filename("colorized", now=1700000000.5) == "colorized_1700000000500.jpg"
        assert suggest_filename("style_noir", ".png", now=1.0) == "style_noir_1000.png"

    def test_ensure_directory_creates_temp_when_none(self):
        """Test that ensure_directory creates temp dir when None is passed."""
        temp_dir = ensure_directory(None)
        assert os.path.isdir(temp_dir)
        assert "photo_transform_" in os.path.basename(temp_dir)
        os.rmdir(temp_dir)

    def test_ensure_directory_creates_specified_directory(self):
        """Test that ensure_directory creates the specified directory."""
        with tempfile.TemporaryDirectory() as temp_base:
            test_dir = os.path.join(temp_base, "nested", "out")
            result_dir = ensure_directory(test_dir)
            assert os.path.isdir(result_dir)
            assert os.path.abspath(test_dir) == result_dir

    def test_ensure_directory_falls_back_to_temp(self):
        """Unwritable targets fall back to a temp directory."""
        with patch("photo_transform.utils.image_utils.os.makedirs", side_effect=PermissionError("denied")):
            result_dir = ensure_directory("/root/forbidden/place")
        assert "photo_transform_fallback_" in os.path.basename(result_dir)
        os.rmdir(result_dir)

    def test_save_image_bytes(self):
        """Test saving image bytes to disk."""
        with tempfile.TemporaryDirectory() as temp_dir:
            file_path = save_image_bytes(SAMPLE_PNG_BYTES, temp_dir, "enhanced_1.png")
            assert os.path.isabs(file_path)
            assert os.path.basename(file_path) == "enhanced_1.png"
            with open(file_path, "rb") as f:
                assert f.read() == SAMPLE_PNG_BYTES
