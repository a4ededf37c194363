"""
Unit tests for image decoding and preparation.
"""
import numpy as np
import pytest
from PIL import Image

from colorgen.services.colors.errors import ImageDecodeError
from colorgen.services.imaging import (
    decode_image, image_to_pixels, resize_for_quantization, validate_magic_bytes
)
from conftest import encode_image


class TestValidateMagicBytes:
    """Test format sniffing"""

    @pytest.mark.parametrize("fmt,mime", [
        ("PNG", "image/png"),
        ("JPEG", "image/jpeg"),
        ("GIF", "image/gif"),
        ("BMP", "image/bmp"),
        ("WEBP", "image/webp"),
    ])
    def test_supported_formats(self, fmt, mime):
        data = encode_image(np.full((8, 8, 3), 100, dtype=np.uint8), fmt=fmt)
        assert validate_magic_bytes(data) == mime

    def test_too_small(self):
        with pytest.raises(ImageDecodeError):
            validate_magic_bytes(b"\x89PNG")

    def test_unknown(self):
        with pytest.raises(ImageDecodeError):
            validate_magic_bytes(b"definitely not an image")


class TestDecodeImage:
    """Test decoding"""

    def test_png_round_trip(self):
        array = np.zeros((6, 4, 3), dtype=np.uint8)
        array[:, :] = (10, 20, 30)
        image = decode_image(encode_image(array))
        assert image.size == (4, 6)

    def test_truncated_png(self):
        data = encode_image(np.full((64, 64, 3), 7, dtype=np.uint8))
        with pytest.raises(ImageDecodeError):
            decode_image(data[:40])

    def test_garbage(self):
        with pytest.raises(ImageDecodeError):
            decode_image(b"\x89PNG\r\n\x1a\n" + b"\x00" * 32)

    def test_is_color_gen_error(self):
        with pytest.raises(ValueError):
            decode_image(b"")


class TestResize:
    """Test downscaling for quantization"""

    def test_fixed_width_keeps_aspect(self):
        image = Image.new("RGB", (256, 128))
        resized = resize_for_quantization(image, width=64)
        assert resized.size == (64, 32)

    def test_narrow_image_kept(self):
        image = Image.new("RGB", (40, 300))
        assert resize_for_quantization(image, width=64).size == (40, 300)

    def test_height_at_least_one(self):
        image = Image.new("RGB", (1000, 2))
        assert resize_for_quantization(image, width=64).size == (64, 1)

    def test_invalid_width(self):
        with pytest.raises(ValueError):
            resize_for_quantization(Image.new("RGB", (10, 10)), width=0)


class TestImageToPixels:
    """Test flattening to RGBA"""

    def test_rgb_gets_opaque_alpha(self):
        pixels = image_to_pixels(Image.new("RGB", (3, 2), (1, 2, 3)))
        assert pixels.shape == (6, 4)
        assert pixels.dtype == np.uint8
        assert (pixels == [1, 2, 3, 255]).all()

    def test_rgba_alpha_kept(self):
        pixels = image_to_pixels(Image.new("RGBA", (2, 2), (1, 2, 3, 0)))
        assert (pixels[:, 3] == 0).all()
